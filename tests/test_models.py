"""Tests for completion providers."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from plugin_agent.exceptions import ProviderError
from plugin_agent.models.base import BaseLLM, LLMResponse
from plugin_agent.models.openai import OpenAI


class TestBaseLLM:
    """Tests for BaseLLM interface."""

    def test_base_llm_is_abstract(self):
        with pytest.raises(TypeError):
            BaseLLM()


class TestLLMResponse:
    """Tests for LLMResponse."""

    def test_response_optional_fields(self):
        response = LLMResponse(content="Hello")
        assert response.usage is None
        assert response.raw_response is None


class TestOpenAI:
    """Tests for OpenAI provider."""

    def test_openai_defaults(self):
        model = OpenAI()
        assert model.model == "gpt-3.5-turbo"
        assert model.provider_name == "openai"
        assert model.model_name == "openai/gpt-3.5-turbo"

    def test_openai_requires_api_key(self):
        model = OpenAI()
        with pytest.raises(ProviderError) as exc_info:
            model._get_client()
        assert "API key not provided" in str(exc_info.value)

    def test_openai_key_from_config(self, agent_config):
        agent_config.openai_api_key = "env-key"

        client = OpenAI()._get_client()

        assert client.api_key == "env-key"

    @pytest.mark.asyncio
    async def test_openai_generate_with_mock(self):
        model = OpenAI(api_key="test-key", max_tokens=50)

        mock_response = MagicMock()
        mock_response.choices = [MagicMock()]
        mock_response.choices[0].message.content = "Test response"
        mock_response.usage.prompt_tokens = 10
        mock_response.usage.completion_tokens = 20
        mock_response.usage.total_tokens = 30

        with patch.object(model, "_client") as mock_client:
            mock_client.chat.completions.create = AsyncMock(return_value=mock_response)
            model._client = mock_client

            response = await model.generate([{"role": "user", "content": "Hello"}])

        assert response.content == "Test response"
        assert response.usage["total_tokens"] == 30
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["max_tokens"] == 50
        assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]

    @pytest.mark.asyncio
    async def test_openai_generate_wraps_failures(self):
        model = OpenAI(api_key="test-key")
        model._client = MagicMock()
        model._client.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(ProviderError, match="boom") as exc_info:
            await model.generate([{"role": "user", "content": "Hello"}])

        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_openai_generate_without_choices(self):
        model = OpenAI(api_key="test-key")
        model._client = MagicMock()
        model._client.chat.completions.create = AsyncMock(
            return_value=MagicMock(choices=[])
        )

        with pytest.raises(ProviderError, match="no choices"):
            await model.generate([{"role": "user", "content": "Hello"}])
