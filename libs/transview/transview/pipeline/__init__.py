"""Translation pipeline: scheduling, streaming and per-document sessions.

Keep imports lazy to avoid circular-import issues between `transview.backend`
and the pipeline modules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from transview.pipeline.accumulator import StreamAccumulator
    from transview.pipeline.scheduler import TranslationScheduler
    from transview.pipeline.session import PreviewSession

__all__ = ["PreviewSession", "StreamAccumulator", "TranslationScheduler"]


def __getattr__(name: str) -> Any:
    if name == "PreviewSession":
        from transview.pipeline.session import PreviewSession

        return PreviewSession
    if name == "StreamAccumulator":
        from transview.pipeline.accumulator import StreamAccumulator

        return StreamAccumulator
    if name == "TranslationScheduler":
        from transview.pipeline.scheduler import TranslationScheduler

        return TranslationScheduler
    raise AttributeError(name)
