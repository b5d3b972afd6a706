"""Markdown rendering and scroll mapping."""

from transview.render.markdown import MarkdownRenderer, render_inline, render_markdown, to_html
from transview.render.scroll import ScrollMapper

__all__ = ["MarkdownRenderer", "ScrollMapper", "render_inline", "render_markdown", "to_html"]
