"""Completion providers for Plugin Agent."""

from plugin_agent.models.base import BaseLLM, LLMResponse
from plugin_agent.models.openai import OpenAI

__all__ = [
    "BaseLLM",
    "LLMResponse",
    "OpenAI",
]
