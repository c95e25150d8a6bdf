"""Base LLM model interface for Plugin Agent."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    usage: dict[str, int] | None = None
    raw_response: Any = None


@dataclass
class BaseLLM(ABC):
    """
    Abstract base class for completion providers.

    Plugin state objects hold a provider and hand it their whole message
    memory; the provider returns the newest assistant message.
    """

    model: str
    temperature: float = 0.7
    max_tokens: int | None = None
    extra_params: dict[str, Any] = field(default_factory=dict)

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'openai')."""
        pass

    @property
    def model_name(self) -> str:
        """Return the full model name with provider."""
        return f"{self.provider_name}/{self.model}"

    @abstractmethod
    async def generate(self, messages: list[dict[str, str]]) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            messages: List of message dictionaries with 'role' and 'content'.

        Returns:
            LLMResponse containing the generated content.

        Raises:
            ProviderError: If the provider call fails.
        """
        pass
