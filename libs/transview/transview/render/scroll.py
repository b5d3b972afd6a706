"""Scroll synchronization between source lines and rendered blocks."""

from __future__ import annotations

from collections.abc import Sequence

from transview.models.rendered import RenderedLine


class ScrollMapper:
    """Lookup from source line to rendered block, rebuilt per render pass.

    Source lines that produce no block (blank lines, lines inside a code fence)
    have no scroll target.
    """

    def __init__(self, lines: Sequence[RenderedLine] = ()) -> None:
        self._by_source: dict[int, RenderedLine] = {}
        self._by_index: dict[int, RenderedLine] = {}
        self.rebuild(lines)

    def rebuild(self, lines: Sequence[RenderedLine]) -> None:
        self._by_source = {line.source_line_hint: line for line in lines}
        self._by_index = {line.line_index: line for line in lines}

    def __len__(self) -> int:
        return len(self._by_index)

    def map_source_line_to_rendered(self, line_index: int) -> RenderedLine | None:
        return self._by_source.get(int(line_index))

    def map_rendered_to_source(self, line_index: int) -> int | None:
        line = self._by_index.get(int(line_index))
        if line is None:
            return None
        return line.source_line_hint
