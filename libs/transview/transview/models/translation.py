"""Translation request models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceSnapshot:
    """Document text captured at the moment a translation is requested."""

    text: str
    language_code: str

    @property
    def cache_key(self) -> str:
        return f"{self.language_code}:{self.text}"


@dataclass(frozen=True)
class TranslationRequest:
    snapshot: SourceSnapshot
    request_id: int


@dataclass
class StreamState:
    """In-progress streamed response for one request."""

    request_id: int
    buffered_text: str = ""
    is_complete: bool = False
