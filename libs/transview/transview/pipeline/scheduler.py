"""Debounced, single-flight translation scheduler.

Per document, the scheduler moves between three states:

- idle: nothing outstanding.
- debouncing: a timer is running; every `submit` restarts it and replaces the
  pending snapshot, so only the latest snapshot is translated.
- active: one backend call is in flight; `submit` only overwrites the single
  pending slot. When the call completes the pending snapshot (if any) goes
  through the debounce/active sequence again. A failed call drops it.

Fragments travel from the backend to the accumulator through a bounded
`asyncio.Queue`, so a slow event sink applies backpressure to the backend
stream instead of growing an unbounded buffer.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import aclosing
from dataclasses import dataclass
from enum import Enum

from transview.backend import BackendSelector, TranslationBackend, is_unavailable_error
from transview.error_codes import ErrorCode
from transview.exceptions import ProviderError, TransViewError
from transview.models.translation import SourceSnapshot, TranslationRequest
from transview.pipeline.accumulator import StreamAccumulator
from transview.pipeline.events import (
    PipelineEvent,
    TranslationChunk,
    TranslationFailed,
    TranslationFinished,
    TranslationStarted,
)
from transview.services.translation_cache import TranslationCache

logger = logging.getLogger(__name__)

EventSink = Callable[[PipelineEvent], Awaitable[None]]


class SchedulerState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True)
class _StreamItem:
    request_id: int
    text: str


@dataclass(frozen=True)
class _StreamError:
    error: Exception


_STREAM_END = object()


class TranslationScheduler:
    def __init__(
        self,
        selector: BackendSelector,
        *,
        sink: EventSink,
        cache: TranslationCache | None = None,
        accumulator: StreamAccumulator | None = None,
        debounce_s: float = 0.5,
        chunk_queue_size: int = 64,
    ) -> None:
        self._selector = selector
        self._sink = sink
        self._cache = cache if cache is not None else TranslationCache()
        self._accumulator = accumulator if accumulator is not None else StreamAccumulator()
        self._debounce_s = max(0.0, float(debounce_s))
        self._chunk_queue_size = max(1, int(chunk_queue_size))

        self._state = SchedulerState.IDLE
        self._pending: SourceSnapshot | None = None
        self._active: TranslationRequest | None = None
        self._last_request_id = 0
        self._timer: asyncio.Task[None] | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def pending(self) -> SourceSnapshot | None:
        return self._pending

    @property
    def active_request(self) -> TranslationRequest | None:
        return self._active

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @property
    def accumulator(self) -> StreamAccumulator:
        return self._accumulator

    def submit(self, snapshot: SourceSnapshot) -> None:
        """Queue `snapshot` for translation (last write wins)."""
        if self._state is SchedulerState.CLOSED:
            raise RuntimeError("TranslationScheduler is closed")
        self._pending = snapshot
        if self._state is SchedulerState.ACTIVE:
            logger.debug("request in flight; snapshot queued as pending")
            return
        self._start_timer()

    def _start_timer(self) -> None:
        if self._state is SchedulerState.DEBOUNCING and self._timer is not None:
            self._timer.cancel()
        self._state = SchedulerState.DEBOUNCING
        self._timer = asyncio.create_task(self._debounce_then_run())

    async def _debounce_then_run(self) -> None:
        await asyncio.sleep(self._debounce_s)
        snapshot, self._pending = self._pending, None
        if snapshot is None:
            self._state = SchedulerState.IDLE
            return

        self._state = SchedulerState.ACTIVE
        succeeded = False
        try:
            succeeded = await self._run(snapshot)
        finally:
            self._active = None
            if self._state is SchedulerState.ACTIVE:
                self._state = SchedulerState.IDLE

        if self._state is SchedulerState.CLOSED:
            return
        if not succeeded:
            if self._pending is not None:
                logger.info("dropping pending snapshot after failed request")
            self._pending = None
            return
        if self._pending is not None:
            self._start_timer()

    async def _run(self, snapshot: SourceSnapshot) -> bool:
        self._last_request_id += 1
        request = TranslationRequest(snapshot=snapshot, request_id=self._last_request_id)
        self._active = request
        await self._emit(
            TranslationStarted(request_id=request.request_id, language_code=snapshot.language_code)
        )

        cached = self._cache.get(snapshot.text, snapshot.language_code)
        if cached is not None:
            logger.debug("translation cache hit (request_id=%s)", request.request_id)
            await self._emit(
                TranslationFinished(
                    request_id=request.request_id,
                    text=cached,
                    language_code=snapshot.language_code,
                    cached=True,
                )
            )
            return True

        self._accumulator.reset(request.request_id)
        try:
            backend = self._selector.acquire()
            text = await self._stream(request, backend)
        except asyncio.CancelledError:
            self._accumulator.discard()
            raise
        except Exception as exc:
            self._accumulator.discard()
            await self._fail(request, exc)
            return False

        if request.request_id != self._last_request_id:
            logger.debug("request superseded (request_id=%s)", request.request_id)
            return False

        self._accumulator.complete(request.request_id)
        if text.strip():
            self._cache.put(snapshot.text, snapshot.language_code, text)
        else:
            logger.info("backend returned empty result; showing source (request_id=%s)", request.request_id)
            text = snapshot.text
        try:
            await self._emit(
                TranslationFinished(
                    request_id=request.request_id,
                    text=text,
                    language_code=snapshot.language_code,
                )
            )
        finally:
            self._accumulator.discard()
        return True

    async def _stream(self, request: TranslationRequest, backend: TranslationBackend) -> str:
        queue: asyncio.Queue[object] = asyncio.Queue(maxsize=self._chunk_queue_size)
        pump = asyncio.create_task(self._pump(request, backend, queue))
        try:
            while True:
                item = await queue.get()
                if item is _STREAM_END:
                    break
                if isinstance(item, _StreamError):
                    raise item.error
                if not isinstance(item, _StreamItem):
                    continue
                if self._accumulator.append_chunk(item.request_id, item.text):
                    await self._emit(TranslationChunk(request_id=item.request_id, text=item.text))
        finally:
            if not pump.done():
                pump.cancel()
            await asyncio.gather(pump, return_exceptions=True)
        return self._accumulator.current_text()

    async def _pump(
        self,
        request: TranslationRequest,
        backend: TranslationBackend,
        queue: asyncio.Queue[object],
    ) -> None:
        snapshot = request.snapshot
        try:
            # The backend stream is closed on success, failure and cancellation.
            async with aclosing(backend.translate(snapshot.text, snapshot.language_code)) as fragments:
                async for fragment in fragments:
                    if fragment:
                        await queue.put(_StreamItem(request_id=request.request_id, text=fragment))
        except Exception as exc:
            await queue.put(_StreamError(exc))
            return
        await queue.put(_STREAM_END)

    async def _fail(self, request: TranslationRequest, exc: Exception) -> None:
        if is_unavailable_error(exc):
            await self._selector.invalidate()

        if isinstance(exc, TransViewError):
            logger.warning("translation failed (request_id=%s): %s", request.request_id, exc)
        else:
            logger.exception("translation failed (request_id=%s)", request.request_id)

        message = exc.message if isinstance(exc, ProviderError) else str(exc)
        error_code = getattr(exc, "error_code", None) or ErrorCode.BACKEND_FAILED
        await self._emit(
            TranslationFailed(
                request_id=request.request_id,
                message=message or "Translation error occurred",
                error_code=error_code,
            )
        )

    async def _emit(self, event: PipelineEvent) -> None:
        try:
            await self._sink(event)
        except Exception:
            logger.exception("event sink failed (event=%s)", type(event).__name__)

    async def wait_idle(self) -> None:
        """Wait until no timer or request is outstanding."""
        while self._timer is not None and not self._timer.done():
            await asyncio.wait({self._timer})

    async def close(self) -> None:
        """Cancel outstanding work and release the backend handle."""
        if self._state is SchedulerState.CLOSED:
            return
        self._state = SchedulerState.CLOSED
        self._pending = None
        # Anything still arriving for the abandoned request is stale.
        self._last_request_id += 1
        self._accumulator.discard()

        timer = self._timer
        if timer is not None and not timer.done() and timer is not asyncio.current_task():
            timer.cancel()
            await asyncio.gather(timer, return_exceptions=True)
        await self._selector.invalidate()
