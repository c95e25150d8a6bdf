"""Plugin system for Plugin Agent."""

from plugin_agent.plugins.base import (
    Command,
    EmptyCycle,
    Plugin,
    PluginCycle,
    PluginData,
    PluginRegistry,
)
from plugin_agent.plugins.invoke import invoke
from plugin_agent.plugins.loader import discover_plugins, load_plugin

__all__ = [
    "Command",
    "EmptyCycle",
    "Plugin",
    "PluginCycle",
    "PluginData",
    "PluginRegistry",
    "discover_plugins",
    "invoke",
    "load_plugin",
]
