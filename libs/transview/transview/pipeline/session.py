"""Per-document preview session.

A session owns everything one open document needs: the scheduler with its
translation cache and backend handle, the latest rendered lines and the scroll
map built from them. It is created when a document is opened in the preview and
torn down with `close()` when the document goes away.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from transview.backend import BackendFactory, BackendSelector, make_backend_factory
from transview.config import Settings
from transview.exceptions import UnsupportedLanguageError
from transview.languages import normalize_language_code
from transview.models.messages import (
    ChangeLanguageMessage,
    ChunkMessage,
    EditorScrollMessage,
    ErrorMessage,
    LoadingMessage,
    OutboundMessage,
    ReadyMessage,
    ScrollToMessage,
    SourceChangedMessage,
    UpdateMessage,
    parse_inbound_message,
)
from transview.models.rendered import RenderedLine
from transview.models.translation import SourceSnapshot
from transview.pipeline.accumulator import StreamAccumulator
from transview.pipeline.events import (
    PipelineEvent,
    TranslationChunk,
    TranslationFailed,
    TranslationFinished,
    TranslationStarted,
)
from transview.pipeline.scheduler import TranslationScheduler
from transview.render.markdown import MarkdownRenderer
from transview.render.scroll import ScrollMapper
from transview.services.translation_cache import TranslationCache

logger = logging.getLogger(__name__)

DisplaySink = Callable[[OutboundMessage], Awaitable[None]]
LanguageListener = Callable[[str], None]


class PreviewSession:
    def __init__(
        self,
        *,
        display: DisplaySink,
        backend_factory: BackendFactory,
        language_code: str = "ja",
        debounce_s: float = 0.5,
        chunk_queue_size: int = 64,
        renderer: MarkdownRenderer | None = None,
        on_language_changed: LanguageListener | None = None,
    ) -> None:
        self._display = display
        self._renderer = renderer or MarkdownRenderer()
        self._language_code = normalize_language_code(language_code)
        self._on_language_changed = on_language_changed

        self._selector = BackendSelector(backend_factory)
        self._cache = TranslationCache()
        self._scheduler = TranslationScheduler(
            self._selector,
            sink=self._on_event,
            cache=self._cache,
            accumulator=StreamAccumulator(self._renderer),
            debounce_s=debounce_s,
            chunk_queue_size=chunk_queue_size,
        )
        self._scroll = ScrollMapper()
        self._lines: list[RenderedLine] = []
        self._source_text: str | None = None
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        display: DisplaySink,
        backend_factory: BackendFactory | None = None,
        language_code: str | None = None,
        on_language_changed: LanguageListener | None = None,
    ) -> "PreviewSession":
        return cls(
            display=display,
            backend_factory=backend_factory or make_backend_factory(settings),
            language_code=language_code or settings.preview.target_language,
            debounce_s=settings.preview.debounce_s,
            chunk_queue_size=int(settings.preview.chunk_queue_size),
            on_language_changed=on_language_changed,
        )

    @property
    def language_code(self) -> str:
        return self._language_code

    @property
    def source_text(self) -> str | None:
        return self._source_text

    @property
    def rendered_lines(self) -> list[RenderedLine]:
        return list(self._lines)

    @property
    def scroll_mapper(self) -> ScrollMapper:
        return self._scroll

    @property
    def scheduler(self) -> TranslationScheduler:
        return self._scheduler

    @property
    def closed(self) -> bool:
        return self._closed

    def update_source(self, text: str) -> None:
        """Source document changed (or was opened)."""
        if self._closed:
            return
        self._source_text = str(text)
        self._submit()

    def _submit(self) -> None:
        if self._source_text is None:
            return
        self._scheduler.submit(SourceSnapshot(text=self._source_text, language_code=self._language_code))

    async def handle_message(self, data: Mapping[str, Any]) -> None:
        """Dispatch one inbound message from the display or editor."""
        if self._closed:
            return
        try:
            message = parse_inbound_message(data)
        except ValidationError as exc:
            logger.warning("ignoring invalid message: %s", exc.errors(include_url=False))
            return

        match message:
            case ReadyMessage():
                self._submit()
            case ChangeLanguageMessage():
                self.change_language(message.language_code)
            case SourceChangedMessage():
                self.update_source(message.text)
            case EditorScrollMessage():
                await self.sync_scroll(message.line_index)

    def change_language(self, language_code: str) -> bool:
        """Switch the target language and re-run the pipeline.

        Unsupported codes are rejected and ignored.
        """
        try:
            canonical = normalize_language_code(language_code)
        except UnsupportedLanguageError as exc:
            logger.warning("ignoring language change: %s", exc)
            return False
        self._language_code = canonical
        if self._on_language_changed is not None:
            self._on_language_changed(canonical)
        self._submit()
        return True

    async def sync_scroll(self, source_line: int) -> RenderedLine | None:
        target = self._scroll.map_source_line_to_rendered(source_line)
        if target is None:
            return None
        await self._display(ScrollToMessage(line_index=target.line_index, source_line=target.source_line_hint))
        return target

    def _set_lines(self, lines: list[RenderedLine]) -> None:
        self._lines = lines
        self._scroll.rebuild(lines)

    async def _on_event(self, event: PipelineEvent) -> None:
        match event:
            case TranslationStarted():
                await self._display(LoadingMessage(request_id=event.request_id))
            case TranslationChunk():
                self._set_lines(self._scheduler.accumulator.render())
                await self._display(ChunkMessage.build(event.request_id, event.text, self._lines))
            case TranslationFinished():
                self._set_lines(self._renderer.render(event.text))
                await self._display(
                    UpdateMessage.build(
                        event.request_id,
                        event.text,
                        event.language_code,
                        self._lines,
                        cached=event.cached,
                    )
                )
            case TranslationFailed():
                await self._display(
                    ErrorMessage(
                        request_id=event.request_id,
                        message=event.message,
                        error_code=str(getattr(event.error_code, "value", event.error_code)),
                    )
                )

    async def wait_idle(self) -> None:
        await self._scheduler.wait_idle()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._scheduler.close()
        stats = self._cache.stats()
        self._cache.clear()
        logger.info(
            "preview session closed (cache_entries=%s, hits=%s, misses=%s)",
            stats.entries,
            stats.hits,
            stats.misses,
        )
