"""Search service answering character and word lookups against the dictionary."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Protocol

from rucheng_dialect.core.dictionary_store import DictionaryStore, PronunciationRecords
from rucheng_dialect.utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    start_span,
)

from .result_formatter import ResultFormatter

SearchResult = Dict[str, PronunciationRecords]
ResultsCallback = Callable[[str, SearchResult], None]


class ReadinessGate(Protocol):
    @property
    def is_ready(self) -> bool:
        ...


class SearchService:
    """Decompose-then-union lookup over a loaded :class:`DictionaryStore`.

    Each character of the query contributes its exact entry and every longer
    key containing it.  The first character to reach a key wins; results keep
    first-insertion order.  Queries issued before the readiness gate opens get
    an empty result and a diagnostic log line instead of an exception.
    """

    def __init__(
        self,
        *,
        store: DictionaryStore,
        readiness: ReadinessGate,
        formatter: Optional[ResultFormatter] = None,
    ) -> None:
        self.store = store
        self.readiness = readiness
        self.formatter = formatter or ResultFormatter()
        self._logger = get_logger(__name__).bind(component="search_service")

        self._metric_requests = create_counter(
            "rucheng_search_requests_total",
            "Dictionary search requests by outcome.",
            label_names=("outcome",),
        )
        self._metric_duration = create_histogram(
            "rucheng_search_request_seconds",
            "Latency of dictionary searches.",
        )

    def search(self, text: Optional[str]) -> SearchResult:
        if not self.readiness.is_ready:
            self._metric_requests.labels(outcome="not_ready").inc()
            self._logger.error(
                "Search rejected: dictionary not ready", context={"query": text}
            )
            return {}

        if self.store.size() == 0:
            self._metric_requests.labels(outcome="empty_store").inc()
            self._logger.warning("Search ran against an empty dictionary", context={"query": text})
            return {}

        if not text:
            self._metric_requests.labels(outcome="empty_query").inc()
            return {}

        with start_span("search.request", {"query": text}) as span:
            with self._metric_duration.time():
                results = self._collect(text)

            self._metric_requests.labels(outcome="ok").inc()
            add_span_attributes(span, {"result.total": len(results)})

        self._logger.debug(
            "Search completed",
            context={"query": text, "characters": list(text), "total_matches": len(results)},
        )
        return results

    def _collect(self, text: str) -> SearchResult:
        results: SearchResult = {}
        for char in text:
            records = self.store.get(char)
            if records is not None and char not in results:
                results[char] = records

            for word, pronunciations in self.store.entries():
                if word != char and char in word and word not in results:
                    results[word] = pronunciations
        return results

    def api_search(self, character: str) -> Dict[str, Any]:
        """Return results in the legacy ``/api/search`` response shape."""

        results = self.search(character)
        return {
            "character": character,
            "results": results,
            "total_matches": len(results),
        }

    def perform_search(
        self,
        character: Optional[str],
        on_results: Optional[ResultsCallback] = None,
    ) -> SearchResult:
        """Run a search for UI input and hand the result to ``on_results``."""

        query = (character or "").strip()
        results = self.search(query)
        if on_results is not None and self.readiness.is_ready:
            on_results(query, results)
        return results

    def format_results(
        self,
        character: str,
        results: SearchResult,
        audio: Optional[Dict[str, str]] = None,
    ) -> str:
        return self.formatter.format_results(character, results, audio=audio)


__all__ = ["ReadinessGate", "ResultsCallback", "SearchResult", "SearchService"]
