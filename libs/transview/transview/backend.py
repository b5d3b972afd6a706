"""Translation backend capability and handle selection.

The scheduler only depends on `TranslationBackend.translate()`, an async
iterator of translated fragments. `BackendSelector` keeps one backend handle
alive between calls and drops it when the backend turns out to be unavailable,
so the next cycle selects again.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable

from transview.config import Settings
from transview.exceptions import BackendUnavailableError, ConfigurationError
from transview.languages import language_name
from transview.providers import get_llm_provider
from transview.providers.llm.base import LLMProvider, Message

logger = logging.getLogger(__name__)

TRANSLATE_PROMPT = (
    "Translate the following Markdown content to {language}. "
    "Keep the Markdown formatting intact. "
    "Only translate the text content, not the Markdown syntax or code blocks. "
    "Output only the translated content without any explanation.\n\n"
    "{content}"
)

_UNAVAILABLE_MARKERS = (
    "not available",
    "unavailable",
    "no language model",
    "no model",
    "model not found",
    "not installed",
)


def is_unavailable_error(exc: BaseException) -> bool:
    """True when `exc` means the backend handle itself is dead or stale."""
    if isinstance(exc, BackendUnavailableError):
        return True
    text = str(exc or "").strip().lower()
    return any(marker in text for marker in _UNAVAILABLE_MARKERS)


class TranslationBackend(ABC):
    """Translate text to a target language, streaming fragments as they arrive."""

    name: str = "backend"

    @abstractmethod
    def translate(self, text: str, language_code: str) -> AsyncIterator[str]:
        ...

    async def close(self) -> None:
        return None


class LLMTranslationBackend(TranslationBackend):
    """Translation backend driven by a streaming chat LLM."""

    def __init__(
        self,
        llm: LLMProvider,
        *,
        temperature: float = 0.3,
        max_tokens: int | None = None,
    ) -> None:
        self.llm = llm
        self.name = f"{llm.provider}:{llm.model}"
        self.temperature = float(temperature)
        self.max_tokens = max_tokens

    def build_messages(self, text: str, language_code: str) -> list[Message]:
        prompt = TRANSLATE_PROMPT.format(language=language_name(language_code), content=text)
        return [Message(role="user", content=prompt)]

    async def translate(self, text: str, language_code: str) -> AsyncIterator[str]:
        messages = self.build_messages(text, language_code)
        async for fragment in self.llm.stream(
            messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        ):
            yield fragment

    async def close(self) -> None:
        await self.llm.close()


BackendFactory = Callable[[], "TranslationBackend | None"]


def make_backend_factory(settings: Settings) -> BackendFactory:
    """Build a factory that selects an LLM backend from settings.

    The factory returns None when no backend is configured.
    """

    def _select() -> TranslationBackend | None:
        try:
            cfg = settings.llm_config()
            llm = get_llm_provider(cfg)
        except (ConfigurationError, ValueError) as exc:
            logger.warning("no translation backend available: %s", exc)
            return None
        return LLMTranslationBackend(
            llm,
            temperature=float(settings.llm.temperature),
            max_tokens=settings.llm.max_tokens,
        )

    return _select


class BackendSelector:
    """Caches one backend handle for reuse across translation calls."""

    def __init__(self, factory: BackendFactory) -> None:
        self._factory = factory
        self._handle: TranslationBackend | None = None

    @property
    def handle(self) -> TranslationBackend | None:
        return self._handle

    def acquire(self) -> TranslationBackend:
        """Return the cached handle, selecting a new one if needed.

        Raises:
            BackendUnavailableError: when the factory cannot provide a backend.
        """
        if self._handle is not None:
            return self._handle
        handle = self._factory()
        if handle is None:
            raise BackendUnavailableError(
                "backend",
                "No translation backend available. Configure LLM_PROVIDER and LLM_API_KEY.",
            )
        logger.info("translation backend selected (backend=%s)", handle.name)
        self._handle = handle
        return handle

    async def invalidate(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        logger.info("translation backend invalidated (backend=%s)", handle.name)
        try:
            await handle.close()
        except Exception as exc:
            logger.warning("failed to close backend %s: %s", handle.name, exc)
