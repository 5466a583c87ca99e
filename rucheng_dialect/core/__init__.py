"""Core dictionary primitives shared by the loader and the search service."""

from .dictionary_store import DictionaryStore, PronunciationRecords
from .errors import DictionaryError, MalformedDictionaryError, TransportError
from .events import (
    DataLoaded,
    DataLoadError,
    ErrorHandler,
    LifecycleEvents,
    LifecycleLogger,
    ReadyHandler,
)

__all__ = [
    "DictionaryStore",
    "PronunciationRecords",
    "DictionaryError",
    "MalformedDictionaryError",
    "TransportError",
    "DataLoaded",
    "DataLoadError",
    "ErrorHandler",
    "LifecycleEvents",
    "LifecycleLogger",
    "ReadyHandler",
]
