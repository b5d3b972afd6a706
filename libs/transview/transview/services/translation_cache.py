"""In-memory translation cache.

Keys are `language_code + ":" + raw_text` (exact match, no normalization);
values are translated source text, rendered fresh by the caller. Entries live
as long as the owning session. There is no eviction: inputs are bounded by the
size of the open document.
"""

from __future__ import annotations

from dataclasses import dataclass

from transview.models.translation import SourceSnapshot


@dataclass(frozen=True)
class CacheStats:
    entries: int
    hits: int
    misses: int


class TranslationCache:
    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(text: str, language_code: str) -> str:
        return SourceSnapshot(text=text, language_code=language_code).cache_key

    def get(self, text: str, language_code: str) -> str | None:
        value = self._entries.get(self.make_key(text, language_code))
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def put(self, text: str, language_code: str, translated: str) -> None:
        self._entries[self.make_key(text, language_code)] = translated

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        return CacheStats(entries=len(self._entries), hits=self._hits, misses=self._misses)
