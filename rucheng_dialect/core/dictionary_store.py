"""In-memory store mapping dictionary keys to pronunciation records."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from rucheng_dialect.utils.observability import get_logger

from .errors import MalformedDictionaryError

PronunciationRecords = List[Any]


class _EntriesView:
    """Restartable view over ``(key, records)`` pairs of one loaded mapping."""

    def __init__(self, data: Mapping[str, PronunciationRecords]) -> None:
        self._data = data

    def __iter__(self) -> Iterator[Tuple[str, PronunciationRecords]]:
        return iter(self._data.items())

    def __len__(self) -> int:
        return len(self._data)


class DictionaryStore:
    """Holds the dictionary loaded by the current session.

    The mapping is replaced wholesale by :meth:`load` and is never mutated in
    place afterwards, so readers see either the previous mapping or the new one.
    """

    def __init__(self) -> None:
        self._data: Dict[str, PronunciationRecords] = {}
        self._logger = get_logger(__name__).bind(component="dictionary_store")

    def load(self, raw: Any) -> None:
        """Replace the stored mapping with ``raw`` (a parsed JSON object)."""

        if not isinstance(raw, Mapping):
            raise MalformedDictionaryError(
                f"Dictionary payload must be an object, got {type(raw).__name__}"
            )

        replacement: Dict[str, PronunciationRecords] = {}
        skipped = 0
        for key, records in raw.items():
            if not isinstance(key, str) or not key:
                # Empty keys never match a query.
                skipped += 1
                continue
            if not isinstance(records, list):
                raise MalformedDictionaryError(
                    f"Records for {key!r} must be a list, got {type(records).__name__}"
                )
            replacement[key] = records

        if skipped:
            self._logger.warning(
                "Skipped invalid dictionary keys", context={"skipped": skipped}
            )
        self._data = replacement
        self._logger.info("Dictionary replaced", context={"size": len(replacement)})

    def get(self, key: str) -> Optional[PronunciationRecords]:
        return self._data.get(key)

    def entries(self) -> Iterable[Tuple[str, PronunciationRecords]]:
        return _EntriesView(self._data)

    def size(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


__all__ = ["DictionaryStore", "PronunciationRecords"]
