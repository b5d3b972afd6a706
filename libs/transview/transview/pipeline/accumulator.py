"""Accumulates a streamed translation so its partial state can be rendered."""

from __future__ import annotations

import logging

from transview.models.rendered import RenderedLine
from transview.models.translation import StreamState
from transview.render.markdown import MarkdownRenderer

logger = logging.getLogger(__name__)


class StreamAccumulator:
    """Buffer for the currently tracked request.

    Chunks tagged with any other request id are dropped, so a superseded
    request's late chunks never touch the active buffer.
    """

    def __init__(self, renderer: MarkdownRenderer | None = None) -> None:
        self._renderer = renderer or MarkdownRenderer()
        self._state: StreamState | None = None

    @property
    def request_id(self) -> int | None:
        return self._state.request_id if self._state is not None else None

    @property
    def is_complete(self) -> bool:
        return bool(self._state is not None and self._state.is_complete)

    def reset(self, request_id: int) -> None:
        self._state = StreamState(request_id=int(request_id))

    def append_chunk(self, request_id: int, text: str) -> bool:
        state = self._state
        if state is None or state.request_id != request_id or state.is_complete:
            logger.debug(
                "dropping stale chunk (request_id=%s, active=%s)",
                request_id,
                self.request_id,
            )
            return False
        state.buffered_text += text
        return True

    def complete(self, request_id: int) -> bool:
        state = self._state
        if state is None or state.request_id != request_id:
            return False
        state.is_complete = True
        return True

    def current_text(self) -> str:
        return self._state.buffered_text if self._state is not None else ""

    def render(self) -> list[RenderedLine]:
        return self._renderer.render(self.current_text())

    def discard(self) -> None:
        self._state = None
