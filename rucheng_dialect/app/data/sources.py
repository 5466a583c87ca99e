"""Sources that acquire the raw dictionary asset."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Protocol, Union

import httpx

from rucheng_dialect.core.errors import TransportError

DEFAULT_DATA_PATH = "data/rucheng_data.json"


class DictionarySource(Protocol):
    """Anything that can fetch the dictionary payload as bytes."""

    location: str

    async def fetch(self) -> bytes:
        ...


class FileDictionarySource:
    """Read the dictionary asset from the local filesystem."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.location = str(self.path)

    async def fetch(self) -> bytes:
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as exc:
            raise TransportError(f"Cannot read {self.location}: {exc}") from exc


class HttpDictionarySource:
    """Fetch the dictionary asset over HTTP(S) with ``httpx``."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.location = url
        self._timeout = timeout
        self._client = client

    async def fetch(self) -> bytes:
        if self._client is not None:
            return await self._get(self._client)
        async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
            return await self._get(client)

    async def _get(self, client: httpx.AsyncClient) -> bytes:
        try:
            response = await client.get(self.url)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {self.url} failed: {exc}") from exc
        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        return response.content


class StaticDictionarySource:
    """Serve a payload already held in memory."""

    location = "<memory>"

    def __init__(self, payload: Union[str, bytes]) -> None:
        self._payload = payload.encode("utf-8") if isinstance(payload, str) else payload

    async def fetch(self) -> bytes:
        return self._payload


def is_http_location(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def build_dictionary_source(
    asset_base: str,
    data_path: str = DEFAULT_DATA_PATH,
    *,
    timeout: float = 10.0,
) -> DictionarySource:
    """Pick the HTTP or filesystem source for ``asset_base``."""

    if is_http_location(asset_base):
        url = f"{asset_base.rstrip('/')}/{data_path.lstrip('/')}"
        return HttpDictionarySource(url, timeout=timeout)
    return FileDictionarySource(Path(asset_base) / data_path)


__all__ = [
    "DEFAULT_DATA_PATH",
    "DictionarySource",
    "FileDictionarySource",
    "HttpDictionarySource",
    "StaticDictionarySource",
    "build_dictionary_source",
    "is_http_location",
]
