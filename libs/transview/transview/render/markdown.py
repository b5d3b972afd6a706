"""Line-tagged markdown to HTML rendering.

Supports the line-structure subset used by the preview: headings, unordered and
ordered lists, blockquotes, horizontal rules, fenced code and paragraphs, plus
five inline transforms. Every block carries `data-line` with the input line it
came from so the display can scroll to it.

The scan is a fold over input lines with an explicit `_ScanState`; the output
is rebuilt in full on every call.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, replace
from typing import Literal

from transview.models.rendered import RenderedLine

ListType = Literal["ul", "ol"]

_FENCE = "```"

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*)$")
_UNORDERED_RE = re.compile(r"^\s*[-*][ \t]+(.*)$")
_ORDERED_RE = re.compile(r"^\s*\d+\.[ \t]+(.*)$")
_BLOCKQUOTE_RE = re.compile(r"^\s*>[ \t]?(.*)$")
# Spaced marks only reach this check for `_ _ _`; `- - -` and `* * *` are
# claimed by the list-item patterns first.
_RULE_RE = re.compile(r"^\s*([-*_])(?:\s*\1){2,}\s*$")

_BOLD_STAR_RE = re.compile(r"\*\*(.+?)\*\*")
_BOLD_UNDER_RE = re.compile(r"(?<!\w)__(.+?)__(?!\w)")
_ITALIC_STAR_RE = re.compile(r"\*(.+?)\*")
_ITALIC_UNDER_RE = re.compile(r"(?<!\w)_(.+?)_(?!\w)")
_CODE_RE = re.compile(r"`([^`]+)`")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_STRIKE_RE = re.compile(r"~~(.+?)~~")

_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")


def escape_html(text: str) -> str:
    """Escape `& < > " '`."""
    return html.escape(text, quote=True)


def _link(match: re.Match[str]) -> str:
    label, url = match.group(1), match.group(2)
    if url.strip().lower().startswith(_UNSAFE_SCHEMES):
        return label
    return f'<a href="{url}">{label}</a>'


def render_inline(text: str) -> str:
    """Apply the inline transforms in fixed order (single pass each, non-recursive)."""
    out = escape_html(text)
    out = _BOLD_STAR_RE.sub(r"<strong>\1</strong>", out)
    out = _BOLD_UNDER_RE.sub(r"<strong>\1</strong>", out)
    out = _ITALIC_STAR_RE.sub(r"<em>\1</em>", out)
    out = _ITALIC_UNDER_RE.sub(r"<em>\1</em>", out)
    out = _CODE_RE.sub(r"<code>\1</code>", out)
    out = _LINK_RE.sub(_link, out)
    out = _STRIKE_RE.sub(r"<del>\1</del>", out)
    return out


@dataclass(frozen=True)
class _ScanState:
    in_fence: bool = False
    fence_start: int = -1
    fence_lang: str = ""
    fence_lines: tuple[str, ...] = ()
    list_type: ListType | None = None


class _Blocks:
    """Output buffer of (html, source line) pairs."""

    def __init__(self) -> None:
        self.items: list[tuple[str, int]] = []

    def emit(self, markup: str, source_line: int) -> None:
        self.items.append((markup, source_line))

    def append_to_last(self, markup: str) -> None:
        last_html, last_line = self.items[-1]
        self.items[-1] = (last_html + markup, last_line)

    def to_lines(self) -> list[RenderedLine]:
        return [
            RenderedLine(line_index=i, html=markup, source_line_hint=line)
            for i, (markup, line) in enumerate(self.items)
        ]


def _close_list(state: _ScanState, blocks: _Blocks) -> _ScanState:
    if state.list_type is None:
        return state
    blocks.append_to_last(f"</{state.list_type}>")
    return replace(state, list_type=None)


def _flush_fence(state: _ScanState, blocks: _Blocks) -> _ScanState:
    body = "\n".join(escape_html(line) for line in state.fence_lines)
    lang = state.fence_lang.split()[0] if state.fence_lang.strip() else ""
    cls = f' class="language-{escape_html(lang)}"' if lang else ""
    blocks.emit(f'<pre data-line="{state.fence_start}"><code{cls}>{body}</code></pre>', state.fence_start)
    return _ScanState(list_type=state.list_type)


def _list_item(
    state: _ScanState, blocks: _Blocks, list_type: ListType, content: str, index: int
) -> _ScanState:
    prefix = ""
    if state.list_type != list_type:
        state = _close_list(state, blocks)
        prefix = f"<{list_type}>"
    blocks.emit(f'{prefix}<li data-line="{index}">{render_inline(content)}</li>', index)
    return replace(state, list_type=list_type)


def _step(state: _ScanState, index: int, line: str, blocks: _Blocks) -> _ScanState:
    stripped = line.strip()

    if stripped.startswith(_FENCE):
        if state.in_fence:
            return _flush_fence(state, blocks)
        state = _close_list(state, blocks)
        return replace(
            state,
            in_fence=True,
            fence_start=index,
            fence_lang=stripped[len(_FENCE):].strip(),
            fence_lines=(),
        )

    if state.in_fence:
        return replace(state, fence_lines=state.fence_lines + (line,))

    if not stripped:
        return _close_list(state, blocks)

    m = _HEADING_RE.match(line)
    if m:
        state = _close_list(state, blocks)
        level = len(m.group(1))
        blocks.emit(f'<h{level} data-line="{index}">{render_inline(m.group(2).strip())}</h{level}>', index)
        return state

    m = _UNORDERED_RE.match(line)
    if m:
        return _list_item(state, blocks, "ul", m.group(1), index)

    m = _ORDERED_RE.match(line)
    if m:
        return _list_item(state, blocks, "ol", m.group(1), index)

    state = _close_list(state, blocks)

    m = _BLOCKQUOTE_RE.match(line)
    if m:
        blocks.emit(f'<blockquote data-line="{index}">{render_inline(m.group(1))}</blockquote>', index)
        return state

    if _RULE_RE.match(line):
        blocks.emit(f'<hr data-line="{index}">', index)
        return state

    blocks.emit(f'<p data-line="{index}">{render_inline(stripped)}</p>', index)
    return state


def split_lines(text: str) -> list[str]:
    return str(text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def render_markdown(text: str) -> list[RenderedLine]:
    """Render `text` into line-tagged HTML blocks.

    Deterministic and free of shared state. An unterminated code fence is
    flushed at end of input.
    """
    blocks = _Blocks()
    state = _ScanState()
    for index, line in enumerate(split_lines(text)):
        state = _step(state, index, line, blocks)
    if state.in_fence:
        state = _flush_fence(state, blocks)
    _close_list(state, blocks)
    return blocks.to_lines()


def to_html(lines: list[RenderedLine]) -> str:
    return "\n".join(line.html for line in lines)


class MarkdownRenderer:
    """Stateless renderer object for injection into the pipeline."""

    def render(self, text: str) -> list[RenderedLine]:
        return render_markdown(text)
