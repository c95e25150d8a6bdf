"""OpenAI chat completion provider for Plugin Agent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from openai import AsyncOpenAI

from plugin_agent.config import get_config
from plugin_agent.exceptions import ProviderError
from plugin_agent.models.base import BaseLLM, LLMResponse

logger = logging.getLogger(__name__)


@dataclass
class OpenAI(BaseLLM):
    """
    OpenAI chat completion provider.

    Example:
        ```python
        from plugin_agent.models import OpenAI

        model = OpenAI(model="gpt-3.5-turbo", api_key="sk-...")
        response = await model.generate([
            {"role": "user", "content": "Hello!"}
        ])
        ```
    """

    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    max_tokens: int | None = None
    api_key: str | None = None
    base_url: str | None = None
    extra_params: dict[str, Any] = field(default_factory=dict)

    _client: AsyncOpenAI | None = field(default=None, repr=False, init=False)

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "openai"

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            config = get_config()
            api_key = self.api_key or config.openai_api_key
            base_url = self.base_url or config.openai_base_url

            if not api_key:
                raise ProviderError(
                    "openai",
                    "API key not provided. Set PLUGIN_AGENT_OPENAI_API_KEY or "
                    "configure the plugin's 'api key'.",
                )

            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)

        return self._client

    async def generate(self, messages: list[dict[str, str]]) -> LLMResponse:
        """Send the conversation to OpenAI and return the reply."""
        client = self._get_client()

        api_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            **self.extra_params,
        }
        if self.max_tokens:
            api_params["max_tokens"] = self.max_tokens

        logger.debug(f"Requesting completion from {self.model_name} ({len(messages)} messages)")
        try:
            response = await client.chat.completions.create(**api_params)
        except Exception as e:
            raise ProviderError("openai", f"Failed to generate response: {e}") from e

        if not response.choices:
            raise ProviderError("openai", "Response contained no choices")

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=usage,
            raw_response=response,
        )
