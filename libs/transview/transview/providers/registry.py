"""Provider factory and registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from transview.exceptions import ConfigurationError
from transview.providers.llm.base import LLMProvider


def get_llm_provider(config: Mapping[str, Any]) -> LLMProvider:
    """Get LLM provider based on configuration."""
    provider_type = str(config.get("provider") or "openai").strip().lower()
    timeout = float(config.get("timeout") or 120.0)

    match provider_type:
        case "openai" | "openai_compat":
            from transview.providers.llm.openai_compat import (
                DEFAULT_OPENAI_BASE_URL,
                OpenAICompatProvider,
            )

            api_key = str(config.get("api_key") or "").strip()
            base_url = str(config.get("base_url") or "").strip().rstrip("/")
            # Self-hosted endpoints (vLLM, Ollama) usually run without a key.
            if not api_key and base_url in {"", DEFAULT_OPENAI_BASE_URL}:
                raise ConfigurationError("OpenAI provider requires api_key")
            return OpenAICompatProvider(
                api_key=api_key,
                model=str(config.get("model") or "gpt-4o-mini"),
                base_url=base_url or None,
                provider=provider_type,
                timeout=timeout,
            )
        case "anthropic" | "claude":
            from transview.providers.llm.anthropic import DEFAULT_MODEL, AnthropicProvider

            api_key = str(config.get("api_key") or "").strip()
            if not api_key:
                raise ConfigurationError("Anthropic provider requires api_key")
            model = str(config.get("model") or DEFAULT_MODEL).strip()
            return AnthropicProvider(
                api_key=api_key,
                model=model,
                base_url=config.get("base_url"),
                timeout=timeout,
            )
        case _:
            raise ConfigurationError(f"Unknown LLM provider: {provider_type}")
