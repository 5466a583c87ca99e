"""Existence checks for per-pronunciation audio clips."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Union

import httpx

from rucheng_dialect.utils.observability import create_counter, get_logger

from .sources import is_http_location

AUDIO_EXTENSIONS: Tuple[str, ...] = (".m4a",)
DEFAULT_AUDIO_DIR = "static/audio"


@dataclass(frozen=True)
class AudioProbeResult:
    exists: bool
    filename: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        if self.exists:
            return {"exists": True, "filename": self.filename}
        return {"exists": False}


_MISSING = AudioProbeResult(exists=False)


class AudioAvailabilityProbe:
    """Base probe: tries ``{phonetic}{ext}`` for each known extension.

    Subclasses implement :meth:`_check`.  Any error raised while checking is
    treated exactly like a missing file.
    """

    def __init__(self, *, extensions: Tuple[str, ...] = AUDIO_EXTENSIONS) -> None:
        self.extensions = tuple(extensions)
        self._logger = get_logger(__name__).bind(
            component="audio_probe", probe=type(self).__name__
        )
        self._metric_probes = create_counter(
            "rucheng_audio_probes_total",
            "Audio existence probes by outcome.",
            label_names=("outcome",),
        )

    def candidates(self, phonetic_key: str) -> Iterator[str]:
        for ext in self.extensions:
            yield f"{phonetic_key}{ext}"

    async def probe(self, phonetic_key: Optional[str]) -> AudioProbeResult:
        if not phonetic_key:
            return _MISSING

        for filename in self.candidates(phonetic_key):
            try:
                found = await self._check(filename)
            except (httpx.HTTPError, OSError) as exc:
                self._metric_probes.labels(outcome="error").inc()
                self._logger.debug(
                    "Audio probe failed", context={"filename": filename, "error": str(exc)}
                )
                continue
            if found:
                self._metric_probes.labels(outcome="found").inc()
                return AudioProbeResult(exists=True, filename=filename)

        self._metric_probes.labels(outcome="missing").inc()
        return _MISSING

    async def _check(self, filename: str) -> bool:
        raise NotImplementedError


class HttpAudioProbe(AudioAvailabilityProbe):
    """Probe audio clips with ``HEAD`` requests against the asset host."""

    def __init__(
        self,
        base_url: str,
        *,
        audio_dir: str = DEFAULT_AUDIO_DIR,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        extensions: Tuple[str, ...] = AUDIO_EXTENSIONS,
    ) -> None:
        super().__init__(extensions=extensions)
        self.audio_url = f"{base_url.rstrip('/')}/{audio_dir.strip('/')}"
        self._timeout = timeout
        self._client = client

    async def _check(self, filename: str) -> bool:
        url = f"{self.audio_url}/{filename}"
        if self._client is not None:
            response = await self._client.head(url)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                response = await client.head(url)
        return response.is_success


class FileAudioProbe(AudioAvailabilityProbe):
    """Probe audio clips with a ``stat`` under a local directory."""

    def __init__(
        self,
        audio_root: Union[str, Path],
        *,
        extensions: Tuple[str, ...] = AUDIO_EXTENSIONS,
    ) -> None:
        super().__init__(extensions=extensions)
        self.audio_root = Path(audio_root)

    async def _check(self, filename: str) -> bool:
        return await asyncio.to_thread((self.audio_root / filename).is_file)


def build_audio_probe(
    asset_base: str,
    audio_dir: str = DEFAULT_AUDIO_DIR,
    *,
    timeout: float = 10.0,
) -> AudioAvailabilityProbe:
    """Pick the HTTP or filesystem probe for ``asset_base``."""

    if is_http_location(asset_base):
        return HttpAudioProbe(asset_base, audio_dir=audio_dir, timeout=timeout)
    return FileAudioProbe(Path(asset_base) / audio_dir)


__all__ = [
    "AUDIO_EXTENSIONS",
    "DEFAULT_AUDIO_DIR",
    "AudioProbeResult",
    "AudioAvailabilityProbe",
    "HttpAudioProbe",
    "FileAudioProbe",
    "build_audio_probe",
]
