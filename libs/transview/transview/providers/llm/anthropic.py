"""Anthropic LLM Provider implementation using official SDK."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator

import anthropic

from transview.error_codes import ErrorCode
from transview.exceptions import BackendCallFailedError, BackendUnavailableError
from transview.providers.llm._utils import is_unavailable_status, log_backend_call
from transview.providers.llm.base import LLMProvider, Message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 8192


def _split_system_messages(messages: list[Message]) -> tuple[str | None, list[Message]]:
    system_chunks: list[str] = []
    non_system: list[Message] = []
    for m in messages:
        role = str(m.role or "").strip().lower()
        if role == "system":
            if m.content:
                system_chunks.append(str(m.content))
            continue
        non_system.append(m)
    system = "\n\n".join(system_chunks).strip() if system_chunks else ""
    return (system or None), non_system


def _to_anthropic_messages(messages: list[Message]) -> list[dict[str, str]]:
    out: list[dict[str, str]] = []
    for m in messages:
        role = str(m.role or "").strip().lower()
        if role not in {"user", "assistant"}:
            role = "user"
        out.append({"role": role, "content": str(m.content or "")})
    return out


class AnthropicProvider(LLMProvider):
    """Anthropic provider using official SDK with streaming support."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        timeout: float = 120.0,
    ) -> None:
        self.provider = "anthropic"
        self.api_key = str(api_key or "").strip()
        if not self.api_key:
            raise ValueError("AnthropicProvider requires api_key")
        self.model = str(model or "").strip() or DEFAULT_MODEL

        # SDK expects base_url without /v1 suffix
        resolved = str(base_url or "").strip().rstrip("/")
        if resolved.endswith("/v1"):
            resolved = resolved[:-3]
        self.base_url = resolved or None

        self._client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=float(timeout),
        )

    async def stream(
        self,
        messages: list[Message],
        temperature: float = 0.3,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        system, non_system = _split_system_messages(messages)

        started = time.perf_counter()
        chars = 0
        fragments = 0
        try:
            async with self._client.messages.stream(
                model=self.model,
                messages=_to_anthropic_messages(non_system),
                system=system or anthropic.NOT_GIVEN,
                temperature=float(temperature),
                max_tokens=int(max_tokens) if max_tokens is not None else DEFAULT_MAX_TOKENS,
            ) as stream:
                async for text in stream.text_stream:
                    if not text:
                        continue
                    chars += len(text)
                    fragments += 1
                    yield text
        except anthropic.APIStatusError as exc:
            logger.warning("llm request failed: %s", exc)
            if is_unavailable_status(exc.status_code):
                raise BackendUnavailableError(self.provider, str(exc)) from exc
            raise BackendCallFailedError(self.provider, str(exc)) from exc
        except anthropic.APITimeoutError as exc:
            logger.warning("llm timeout: %s", exc)
            raise BackendCallFailedError(
                self.provider,
                str(exc),
                error_code=ErrorCode.BACKEND_TIMEOUT,
            ) from exc
        except anthropic.APIConnectionError as exc:
            logger.warning("llm connection error: %s", exc)
            raise BackendUnavailableError(self.provider, f"backend not available: {exc}") from exc

        log_backend_call(
            logger,
            provider=self.provider,
            model=self.model,
            latency_ms=int((time.perf_counter() - started) * 1000),
            chars=chars,
            fragments=fragments,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
