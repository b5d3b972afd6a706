"""LLM Provider implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from transview.providers.llm.base import LLMProvider, Message

if TYPE_CHECKING:
    from transview.providers.llm.anthropic import AnthropicProvider
    from transview.providers.llm.openai_compat import OpenAICompatProvider

__all__ = ["AnthropicProvider", "LLMProvider", "Message", "OpenAICompatProvider"]


def __getattr__(name: str) -> Any:
    if name == "AnthropicProvider":
        from transview.providers.llm.anthropic import AnthropicProvider

        return AnthropicProvider
    if name == "OpenAICompatProvider":
        from transview.providers.llm.openai_compat import OpenAICompatProvider

        return OpenAICompatProvider
    raise AttributeError(name)
