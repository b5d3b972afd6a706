"""LLM Provider base class."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass


@dataclass
class Message:
    """A chat message."""

    role: str  # "system" | "user" | "assistant"
    content: str


class LLMProvider(ABC):
    """Abstract base class for streaming LLM providers."""

    provider: str = "llm"
    model: str = ""

    @abstractmethod
    def stream(
        self,
        messages: list[Message],
        temperature: float = 0.3,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Stream a completion as text fragments, in generation order.

        Args:
            messages: List of chat messages.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.

        Returns:
            Async iterator of non-empty text fragments.
        """
        ...

    async def close(self) -> None:
        """Close any underlying resources (optional)."""
        return None
