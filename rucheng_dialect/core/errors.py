"""Exception types raised while acquiring and loading the dictionary."""

from __future__ import annotations

from typing import Optional


class DictionaryError(Exception):
    """Base class for dictionary load failures."""


class TransportError(DictionaryError):
    """The dictionary asset could not be fetched or returned a non-success status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedDictionaryError(DictionaryError):
    """The payload failed to parse or is not a ``key -> records`` object."""


__all__ = ["DictionaryError", "TransportError", "MalformedDictionaryError"]
