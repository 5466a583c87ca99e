"""Application wiring for the Rucheng dialect dictionary."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

if __package__ in {None, ""}:
    import sys
    from pathlib import Path

    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from rucheng_dialect.core.dictionary_store import DictionaryStore
from rucheng_dialect.core.events import LifecycleEvents, LifecycleLogger
from rucheng_dialect.utils.logging_config import configure_logging
from rucheng_dialect.utils.observability import get_logger

from rucheng_dialect.app.data.audio import (
    DEFAULT_AUDIO_DIR,
    AudioAvailabilityProbe,
    AudioProbeResult,
    build_audio_probe,
)
from rucheng_dialect.app.data.loader import LoadLifecycle, ReadinessState
from rucheng_dialect.app.data.sources import (
    DEFAULT_DATA_PATH,
    DictionarySource,
    build_dictionary_source,
)
from rucheng_dialect.app.services.result_formatter import ResultFormatter
from rucheng_dialect.app.services.search_service import SearchResult, SearchService

LOAD_ERROR_BANNER = "**数据加载失败!** 无法加载方言数据，请刷新页面重试。"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    try:
        value = float(environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class AppSettings:
    """Deployment settings; only :func:`AppSettings.from_env` reads the environment."""

    asset_base: str = "."
    data_path: str = DEFAULT_DATA_PATH
    audio_dir: str = DEFAULT_AUDIO_DIR
    http_timeout: float = 10.0
    server_name: str = "0.0.0.0"
    server_port: int = 7860
    share: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppSettings":
        env = os.environ if environ is None else environ
        return cls(
            asset_base=env.get("RUCHENG_ASSET_BASE", cls.asset_base),
            data_path=env.get("RUCHENG_DATA_PATH", cls.data_path),
            audio_dir=env.get("RUCHENG_AUDIO_DIR", cls.audio_dir),
            http_timeout=_env_float(env, "RUCHENG_HTTP_TIMEOUT", cls.http_timeout),
            server_name=env.get("RUCHENG_SERVER_NAME", cls.server_name),
            server_port=_env_int(env, "RUCHENG_SERVER_PORT", cls.server_port),
            share=str(env.get("RUCHENG_SHARE", "")).strip().lower() in _TRUTHY,
        )


class RuchengDialectApp:
    """Session context bundling the store, loader, search service and probe.

    One instance is created per session and passed explicitly to whatever
    needs dictionary access.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        *,
        store: Optional[DictionaryStore] = None,
        events: Optional[LifecycleEvents] = None,
        source: Optional[DictionarySource] = None,
        audio_probe: Optional[AudioAvailabilityProbe] = None,
        formatter: Optional[ResultFormatter] = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self._logger = get_logger(__name__).bind(component="app_facade")
        self.banner_message: Optional[str] = None

        self.store = store or DictionaryStore()
        self.events = events or LifecycleEvents()
        LifecycleLogger().attach(self.events)

        self.source = source or build_dictionary_source(
            self.settings.asset_base,
            self.settings.data_path,
            timeout=self.settings.http_timeout,
        )
        self.lifecycle = LoadLifecycle(
            store=self.store,
            source=self.source,
            events=self.events,
            fallback=self.show_data_load_error,
        )
        self.formatter = formatter or ResultFormatter()
        self.search_service = SearchService(
            store=self.store,
            readiness=self.lifecycle,
            formatter=self.formatter,
        )
        self.audio_probe = audio_probe or build_audio_probe(
            self.settings.asset_base,
            self.settings.audio_dir,
            timeout=self.settings.http_timeout,
        )

        self._logger.info(
            "Application dependencies wired",
            context={
                "asset_base": self.settings.asset_base,
                "source": getattr(self.source, "location", None),
                "audio_probe": type(self.audio_probe).__name__,
            },
        )

    # Lifecycle -------------------------------------------------------------
    async def initialize(self) -> None:
        await self.lifecycle.initialize()

    @property
    def state(self) -> ReadinessState:
        return self.lifecycle.state

    @property
    def total_chars(self) -> int:
        return self.lifecycle.total_chars

    def show_data_load_error(self, reason: str) -> None:
        self.banner_message = LOAD_ERROR_BANNER
        self._logger.warning("Showing data load error banner", context={"error": reason})

    # Public API ------------------------------------------------------------
    def search(self, text: Optional[str]) -> SearchResult:
        return self.search_service.search(text)

    def api_search(self, character: str) -> Dict[str, Any]:
        return self.search_service.api_search(character)

    def perform_search(self, character: Optional[str], on_results=None) -> SearchResult:
        return self.search_service.perform_search(character, on_results)

    def format_results(
        self,
        character: str,
        results: SearchResult,
        audio: Optional[Dict[str, str]] = None,
    ) -> str:
        return self.search_service.format_results(character, results, audio)

    async def check_audio_exists(self, phonetic: Optional[str]) -> AudioProbeResult:
        return await self.audio_probe.probe(phonetic)

    async def probe_results_audio(self, results: SearchResult) -> Dict[str, str]:
        """Map each phonetic key in ``results`` to its audio file, when one exists."""

        keys = self.formatter.phonetic_keys(results)
        if not keys:
            return {}
        probes = await asyncio.gather(*(self.audio_probe.probe(key) for key in keys))
        return {
            key: probe.filename
            for key, probe in zip(keys, probes)
            if probe.exists and probe.filename
        }

    def create_gradio_interface(self):
        from rucheng_dialect.app.ui.gradio import create_interface

        return create_interface(self)


def main() -> None:
    configure_logging()
    settings = AppSettings.from_env()
    app = RuchengDialectApp(settings)
    asyncio.run(app.initialize())

    interface = app.create_gradio_interface()
    interface.launch(
        server_name=settings.server_name,
        server_port=settings.server_port,
        share=settings.share,
    )


if __name__ == "__main__":
    main()


__all__ = ["AppSettings", "LOAD_ERROR_BANNER", "RuchengDialectApp", "main"]
