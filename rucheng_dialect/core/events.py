"""Lifecycle notifications emitted while the dictionary loads."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from rucheng_dialect.utils.observability import get_logger


@dataclass(frozen=True)
class DataLoaded:
    total_chars: int
    data_count: int


@dataclass(frozen=True)
class DataLoadError:
    error: str


ReadyHandler = Callable[[DataLoaded], None]
ErrorHandler = Callable[[DataLoadError], None]


class LifecycleEvents:
    """Publish/subscribe hub for ``DataLoaded`` and ``DataLoadError``.

    A handler that raises is logged and skipped; the remaining handlers still
    receive the notification.
    """

    def __init__(
        self,
        *,
        ready_handlers: Optional[Iterable[ReadyHandler]] = None,
        error_handlers: Optional[Iterable[ErrorHandler]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._ready_handlers: list[ReadyHandler] = list(ready_handlers or [])
        self._error_handlers: list[ErrorHandler] = list(error_handlers or [])
        self._logger = get_logger(__name__).bind(component="lifecycle_events")

    def on_ready(self, handler: ReadyHandler) -> ReadyHandler:
        """Register ``handler`` for ``DataLoaded``; usable as a decorator."""

        with self._lock:
            self._ready_handlers.append(handler)
        return handler

    def on_error(self, handler: ErrorHandler) -> ErrorHandler:
        """Register ``handler`` for ``DataLoadError``; usable as a decorator."""

        with self._lock:
            self._error_handlers.append(handler)
        return handler

    def remove_handler(self, handler: Callable[..., None]) -> None:
        with self._lock:
            self._ready_handlers = [h for h in self._ready_handlers if h != handler]
            self._error_handlers = [h for h in self._error_handlers if h != handler]

    def emit_ready(self, event: DataLoaded) -> None:
        with self._lock:
            handlers: Tuple[Callable[..., None], ...] = tuple(self._ready_handlers)
        self._dispatch("data_loaded", handlers, event)

    def emit_error(self, event: DataLoadError) -> None:
        with self._lock:
            handlers = tuple(self._error_handlers)
        self._dispatch("data_load_error", handlers, event)

    def _dispatch(
        self,
        event_type: str,
        handlers: Tuple[Callable[..., None], ...],
        event: Any,
    ) -> None:
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                self._logger.exception(
                    "Lifecycle handler failed",
                    context={
                        "event": event_type,
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                    },
                )


class LifecycleLogger:
    """Handler pair that writes lifecycle notifications to the project logger."""

    def __init__(self, *, logger: Optional[logging.LoggerAdapter] = None) -> None:
        self._logger = logger or get_logger(__name__).bind(component="lifecycle")

    def attach(self, events: LifecycleEvents) -> "LifecycleLogger":
        events.on_ready(self.data_loaded)
        events.on_error(self.data_load_error)
        return self

    def data_loaded(self, event: DataLoaded) -> None:
        payload: Dict[str, Any] = asdict(event)
        self._logger.info("Lifecycle data_loaded", context=payload)

    def data_load_error(self, event: DataLoadError) -> None:
        self._logger.error("Lifecycle data_load_error", context=asdict(event))


__all__ = [
    "DataLoaded",
    "DataLoadError",
    "ReadyHandler",
    "ErrorHandler",
    "LifecycleEvents",
    "LifecycleLogger",
]
