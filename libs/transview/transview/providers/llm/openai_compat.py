"""OpenAI-compatible LLM Provider implementation."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import AsyncIterator

import httpx

from transview.error_codes import ErrorCode
from transview.exceptions import BackendCallFailedError, BackendUnavailableError
from transview.providers.llm._utils import is_unavailable_status, log_backend_call
from transview.providers.llm.base import LLMProvider, Message

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


async def _iter_sse_data(response: httpx.Response) -> AsyncIterator[str]:
    data_lines: list[str] = []
    async for line in response.aiter_lines():
        if not line:
            if data_lines:
                yield "\n".join(data_lines)
                data_lines = []
            continue
        if line.startswith(":"):
            continue
        if line.startswith("data:"):
            data_lines.append(line[5:].lstrip())
    if data_lines:
        yield "\n".join(data_lines)


def _format_http_error(response: httpx.Response, body: bytes | None) -> str:
    status = response.status_code
    reason = response.reason_phrase
    detail = ""
    if body:
        detail = body.decode("utf-8", errors="replace").strip()
    if detail:
        if len(detail) > 2000:
            detail = detail[:2000] + "…"
        return f"HTTP {status} {reason}: {detail}"
    return f"HTTP {status} {reason}"


def _delta_content(event: object) -> str | None:
    if not isinstance(event, dict):
        return None
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice0 = choices[0]
    if not isinstance(choice0, dict):
        return None
    delta = choice0.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


class OpenAICompatProvider(LLMProvider):
    """OpenAI-compatible API provider (works with OpenAI, vLLM, Ollama, etc.)."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        provider: str = "openai",
        timeout: float = 120.0,
    ) -> None:
        self.provider = provider
        resolved = str(base_url or "").strip()
        self.base_url = (resolved or DEFAULT_OPENAI_BASE_URL).rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = float(timeout)
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def stream(
        self,
        messages: list[Message],
        temperature: float = 0.3,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        payload: dict[str, object] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "stream": True,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        client = await self._get_client()
        started = time.perf_counter()
        chars = 0
        fragments = 0
        try:
            async with client.stream(
                "POST",
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            ) as response:
                if response.status_code >= 400:
                    body = await response.aread()
                    message = _format_http_error(response, body)
                    if is_unavailable_status(response.status_code):
                        raise BackendUnavailableError(self.provider, message)
                    raise BackendCallFailedError(self.provider, message)

                async for data in _iter_sse_data(response):
                    if data.strip() == "[DONE]":
                        break
                    try:
                        event = json.loads(data)
                    except json.JSONDecodeError:
                        logger.debug("llm stream non-json data: %r", data[:200])
                        continue

                    if isinstance(event, dict) and isinstance(event.get("error"), dict):
                        error_obj = event["error"]
                        error_msg = str(error_obj.get("message") or error_obj or "unknown error")
                        raise BackendCallFailedError(self.provider, error_msg)

                    content = _delta_content(event)
                    if content is None:
                        continue
                    chars += len(content)
                    fragments += 1
                    yield content
        except httpx.ConnectError as exc:
            logger.warning("llm connection failed: %s", exc)
            raise BackendUnavailableError(self.provider, f"backend not available: {exc}") from exc
        except httpx.TimeoutException as exc:
            logger.warning("llm request timeout: %s", exc)
            raise BackendCallFailedError(
                self.provider,
                str(exc) or "request timed out",
                error_code=ErrorCode.BACKEND_TIMEOUT,
            ) from exc
        except httpx.TransportError as exc:
            logger.warning("llm request failed: %s", exc)
            raise BackendCallFailedError(self.provider, str(exc)) from exc

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
            await self._client.aclose()
            self._client = None
