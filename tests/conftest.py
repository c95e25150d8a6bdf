"""Shared fixtures for Plugin Agent tests."""

from typing import Any

import pytest

from plugin_agent.config import AgentConfig, set_config
from plugin_agent.exceptions import ProviderError
from plugin_agent.models.base import BaseLLM, LLMResponse


class MockLLM(BaseLLM):
    """Completion provider that records requests and replies with fixed text."""

    def __init__(self, reply: str = "Mock response", fail: bool = False, **kwargs: Any):
        super().__init__(model="mock-model", **kwargs)
        self.reply = reply
        self.fail = fail
        self.requests: list[list[dict[str, str]]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    async def generate(self, messages: list[dict[str, str]]) -> LLMResponse:
        self.requests.append([dict(m) for m in messages])
        if self.fail:
            raise ProviderError("mock", "service unavailable")
        return LLMResponse(content=self.reply)


@pytest.fixture(autouse=True)
def agent_config():
    """Isolate tests from the environment and any .env file."""
    config = AgentConfig(
        openai_api_key=None, max_history=3, plugins_file=None, _env_file=None
    )
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def mock_llm():
    return MockLLM()
