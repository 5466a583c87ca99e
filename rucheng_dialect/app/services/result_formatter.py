"""Markdown rendering of dictionary search results."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

PHONETIC_FIELDS: Tuple[str, ...] = ("phonetic", "pronunciation", "ipa")


class ResultFormatter:
    """Render a search result grouped into exact matches and word matches."""

    def __init__(self, phonetic_fields: Sequence[str] = PHONETIC_FIELDS) -> None:
        self.phonetic_fields = tuple(phonetic_fields)

    def phonetic_key(self, record: Any) -> Optional[str]:
        """Return the first phonetic value of ``record`` usable as an audio key."""

        if not isinstance(record, Mapping):
            return None
        for field in self.phonetic_fields:
            value = record.get(field)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    def phonetic_keys(self, results: Mapping[str, Iterable[Any]]) -> List[str]:
        keys: List[str] = []
        for records in results.values():
            for record in records:
                key = self.phonetic_key(record)
                if key and key not in keys:
                    keys.append(key)
        return keys

    def format_results(
        self,
        character: str,
        results: Mapping[str, Sequence[Any]],
        *,
        audio: Optional[Dict[str, str]] = None,
    ) -> str:
        if not results:
            return f"❌ 未找到「{character}」的汝城话发音。"

        audio = audio or {}
        query_chars = set(character)
        exact = [key for key in results if key in query_chars]
        words = [key for key in results if key not in query_chars]

        lines: List[str] = [f"### 「{character}」共 {len(results)} 条结果"]
        for title, keys in (("📖 单字", exact), ("📚 词语", words)):
            if not keys:
                continue
            lines.append("")
            lines.append(f"#### {title}")
            for key in keys:
                lines.append(f"- **{key}**")
                for record in results[key]:
                    lines.append(f"  - {self._format_record(record, audio)}")
        return "\n".join(lines)

    def _format_record(self, record: Any, audio: Dict[str, str]) -> str:
        if isinstance(record, Mapping):
            parts = [f"{field}: `{value}`" for field, value in record.items() if value not in (None, "")]
            text = "; ".join(parts) or "（无）"
        else:
            text = f"`{record}`"

        key = self.phonetic_key(record)
        if key and key in audio:
            text += f" 🔊 `{audio[key]}`"
        return text


__all__ = ["PHONETIC_FIELDS", "ResultFormatter"]
