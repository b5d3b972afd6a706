"""Rendered output models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderedLine:
    """One block element of rendered output.

    `line_index` is the dense 0-based position in the rendered output;
    `source_line_hint` is the input line the block came from.
    """

    line_index: int
    html: str
    source_line_hint: int
