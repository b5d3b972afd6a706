"""Provider abstractions for external services."""

from transview.providers.registry import get_llm_provider

__all__ = ["get_llm_provider"]
