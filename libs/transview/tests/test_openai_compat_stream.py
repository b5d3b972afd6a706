from __future__ import annotations

import json

import httpx
import pytest

from transview.error_codes import ErrorCode
from transview.exceptions import BackendCallFailedError, BackendUnavailableError
from transview.providers.llm import Message
from transview.providers.llm.openai_compat import OpenAICompatProvider


def _sse(*events: str) -> bytes:
    lines: list[str] = []
    for event in events:
        lines.append(f"data: {event}")
        lines.append("")
    return "\n".join(lines).encode("utf-8")


def _delta(text: str) -> str:
    return json.dumps({"choices": [{"delta": {"content": text}}]})


def _provider(handler) -> OpenAICompatProvider:  # noqa: ANN001
    provider = OpenAICompatProvider(api_key="x", model="gpt-4o-mini", base_url="https://example.com/v1")
    provider._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return provider


async def _drain(provider: OpenAICompatProvider) -> list[str]:
    try:
        return [p async for p in provider.stream([Message(role="user", content="hi")])]
    finally:
        await provider.close()


@pytest.mark.asyncio
async def test_stream_yields_delta_content_in_order() -> None:
    body = _sse(
        json.dumps({"choices": [{"delta": {"role": "assistant"}}]}),
        _delta("Hallo"),
        "not json",
        _delta(" Welt"),
        "[DONE]",
        _delta("ignored"),
    )

    def _handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/chat/completions")
        payload = json.loads(request.content)
        assert payload["stream"] is True
        assert payload["model"] == "gpt-4o-mini"
        assert request.headers["Authorization"] == "Bearer x"
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    assert await _drain(_provider(_handler)) == ["Hallo", " Welt"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 404])
async def test_auth_and_missing_model_mean_unavailable(status: int) -> None:
    def _handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(status, json={"error": {"message": "model not found"}})

    with pytest.raises(BackendUnavailableError) as info:
        await _drain(_provider(_handler))
    assert f"HTTP {status}" in info.value.message


@pytest.mark.asyncio
async def test_server_error_is_call_failure() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(503, text="overloaded")

    with pytest.raises(BackendCallFailedError) as info:
        await _drain(_provider(_handler))
    assert info.value.error_code == ErrorCode.BACKEND_FAILED
    assert "overloaded" in info.value.message


@pytest.mark.asyncio
async def test_in_stream_error_event_is_call_failure() -> None:
    body = _sse(_delta("partial"), json.dumps({"error": {"message": "context length exceeded"}}))

    def _handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, content=body)

    with pytest.raises(BackendCallFailedError) as info:
        await _drain(_provider(_handler))
    assert info.value.message == "context length exceeded"


@pytest.mark.asyncio
async def test_connect_error_means_unavailable() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendUnavailableError):
        await _drain(_provider(_handler))


@pytest.mark.asyncio
async def test_timeout_is_call_failure_with_timeout_code() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(BackendCallFailedError) as info:
        await _drain(_provider(_handler))
    assert info.value.error_code == ErrorCode.BACKEND_TIMEOUT
