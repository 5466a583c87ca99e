"""Asynchronous dictionary load lifecycle."""

from __future__ import annotations

import asyncio
import json
from enum import Enum
from typing import Any, Callable, Optional

from rucheng_dialect.core.dictionary_store import DictionaryStore
from rucheng_dialect.core.errors import DictionaryError, MalformedDictionaryError
from rucheng_dialect.core.events import DataLoaded, DataLoadError, LifecycleEvents
from rucheng_dialect.utils.observability import (
    add_span_attributes,
    create_counter,
    get_logger,
    record_exception,
    start_span,
)

from .sources import DictionarySource

FallbackPresenter = Callable[[str], None]


class ReadinessState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def parse_payload(payload: bytes | str) -> Any:
    """Decode a JSON payload, mapping decode failures to ``MalformedDictionaryError``."""

    try:
        return json.loads(payload)
    except ValueError as exc:
        raise MalformedDictionaryError(f"Dictionary payload is not valid JSON: {exc}") from exc


class LoadLifecycle:
    """Populate a :class:`DictionaryStore` once per session and report the outcome.

    ``initialize`` never raises for load failures: the lifecycle moves to
    ``FAILED``, emits ``DataLoadError`` and calls ``fallback`` with the reason.
    A second ``initialize`` while loading waits for the in-flight load; after
    ``READY`` or ``FAILED`` it is a no-op.
    """

    def __init__(
        self,
        *,
        store: DictionaryStore,
        source: DictionarySource,
        events: Optional[LifecycleEvents] = None,
        fallback: Optional[FallbackPresenter] = None,
    ) -> None:
        self.store = store
        self.source = source
        self.events = events or LifecycleEvents()
        self.fallback = fallback
        self._state = ReadinessState.UNINITIALIZED
        self._failure_reason: Optional[str] = None
        self._inflight: Optional[asyncio.Future] = None
        self._task: Optional[asyncio.Task] = None
        self._logger = get_logger(__name__).bind(
            component="load_lifecycle",
            source=getattr(source, "location", type(source).__name__),
        )
        self._metric_loads = create_counter(
            "rucheng_dictionary_loads_total",
            "Dictionary load attempts by outcome.",
            label_names=("outcome",),
        )

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ReadinessState.READY

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    @property
    def total_chars(self) -> int:
        # Always read from the store so a replaced mapping is reflected.
        return self.store.size()

    def start(self) -> asyncio.Task:
        """Schedule :meth:`initialize` on the running loop without awaiting it."""

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.initialize())
        return self._task

    async def initialize(self) -> None:
        if self._state is ReadinessState.LOADING and self._inflight is not None:
            self._logger.warning("Dictionary load already in progress; waiting for it")
            await asyncio.shield(self._inflight)
            return
        if self._state is not ReadinessState.UNINITIALIZED:
            self._logger.warning(
                "Dictionary load already finished; ignoring initialize()",
                context={"state": self._state.value},
            )
            return

        self._inflight = asyncio.get_running_loop().create_future()
        self._state = ReadinessState.LOADING
        try:
            await self._load()
        except asyncio.CancelledError:
            if self._state is ReadinessState.LOADING:
                self._fail(asyncio.CancelledError("cancelled"), None)
            raise
        finally:
            if not self._inflight.done():
                self._inflight.set_result(None)

    async def _load(self) -> None:
        self._logger.info("Dictionary load started")
        with start_span("dictionary.load", {"source": self.source.location}) as span:
            try:
                payload = await self.source.fetch()
                self.store.load(parse_payload(payload))
            except DictionaryError as exc:
                self._fail(exc, span)
                return
            except Exception as exc:
                self._logger.exception("Unexpected error while loading dictionary")
                self._fail(exc, span)
                return

            self._state = ReadinessState.READY
            total_chars = self.total_chars
            self._metric_loads.labels(outcome="ready").inc()
            add_span_attributes(span, {"dictionary.size": total_chars})
            self._logger.info(
                "Dictionary load completed", context={"total_chars": total_chars}
            )

        self.events.emit_ready(
            DataLoaded(total_chars=total_chars, data_count=self.store.size())
        )

    def _fail(self, exc: BaseException, span: Any) -> None:
        reason = str(exc) or type(exc).__name__
        self._state = ReadinessState.FAILED
        self._failure_reason = reason
        self._metric_loads.labels(outcome="failed").inc()
        record_exception(span, exc)
        self._logger.error(
            "Dictionary load failed",
            context={"error": reason, "error_type": type(exc).__name__},
        )

        self.events.emit_error(DataLoadError(error=reason))

        if self.fallback is not None:
            try:
                self.fallback(reason)
            except Exception:
                self._logger.exception("Load failure presenter raised")


__all__ = ["FallbackPresenter", "LoadLifecycle", "ReadinessState", "parse_payload"]
