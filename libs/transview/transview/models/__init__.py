"""Data models."""

from transview.models.rendered import RenderedLine
from transview.models.translation import SourceSnapshot, StreamState, TranslationRequest

__all__ = ["RenderedLine", "SourceSnapshot", "StreamState", "TranslationRequest"]
