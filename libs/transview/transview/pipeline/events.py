"""Lifecycle events emitted by the translation scheduler."""

from __future__ import annotations

from dataclasses import dataclass

from transview.error_codes import ErrorCode


@dataclass(frozen=True)
class TranslationStarted:
    request_id: int
    language_code: str


@dataclass(frozen=True)
class TranslationChunk:
    """A newly streamed fragment (not the accumulated text)."""

    request_id: int
    text: str


@dataclass(frozen=True)
class TranslationFinished:
    """Authoritative final text; replaces any partial buffer."""

    request_id: int
    text: str
    language_code: str
    cached: bool = False


@dataclass(frozen=True)
class TranslationFailed:
    request_id: int
    message: str
    error_code: ErrorCode | str = ErrorCode.UNKNOWN


PipelineEvent = TranslationStarted | TranslationChunk | TranslationFinished | TranslationFailed
