"""Test doubles shared by the library tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable

from transview.backend import TranslationBackend
from transview.pipeline.events import PipelineEvent


class ScriptedBackend(TranslationBackend):
    """Backend that streams pre-split fragments and records every call.

    `split` maps the input text to the fragments to yield. When `gated`, every
    stream blocks after `started` is set until the gate opens; once open it
    stays open.
    """

    name = "fake:scripted"

    def __init__(
        self,
        split: Callable[[str, str], list[str]] | None = None,
        *,
        gated: bool = False,
        error: Exception | None = None,
    ) -> None:
        self.split = split or (lambda text, lang: [f"[{lang}]", text])
        self.calls: list[tuple[str, str]] = []
        self.started = asyncio.Event()
        self.gate: asyncio.Event | None = asyncio.Event() if gated else None
        self.error = error
        self.closed = 0
        self.streams_closed = 0

    async def translate(self, text: str, language_code: str) -> AsyncIterator[str]:
        self.calls.append((text, language_code))
        try:
            self.started.set()
            if self.gate is not None:
                await self.gate.wait()
            if self.error is not None:
                raise self.error
            for fragment in self.split(text, language_code):
                yield fragment
        finally:
            self.streams_closed += 1

    async def close(self) -> None:
        self.closed += 1


class Recorder:
    """Event sink that records everything it receives."""

    def __init__(self, *, fail_on: type | None = None) -> None:
        self.events: list[PipelineEvent] = []
        self.fail_on = fail_on

    async def __call__(self, event: PipelineEvent) -> None:
        self.events.append(event)
        if self.fail_on is not None and isinstance(event, self.fail_on):
            raise RuntimeError("display went away")

    def of(self, cls: type) -> list:
        return [e for e in self.events if isinstance(e, cls)]
