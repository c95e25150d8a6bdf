"""Plugins bundled with Plugin Agent."""

from plugin_agent.plugins.base import Plugin
from plugin_agent.plugins.builtin.browse import create_browse
from plugin_agent.plugins.builtin.chatgpt import ask_chatgpt, create_chatgpt
from plugin_agent.plugins.builtin.google import create_google


def default_plugins() -> list[Plugin]:
    """Descriptors for every bundled plugin, dependencies first."""
    return [create_browse(), create_google(), create_chatgpt()]


__all__ = [
    "ask_chatgpt",
    "create_browse",
    "create_chatgpt",
    "create_google",
    "default_plugins",
]
