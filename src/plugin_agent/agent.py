"""Agent host that drives plugins through a conversation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from plugin_agent.config import AgentConfig, get_config
from plugin_agent.context import CommandContext, HistoryEntry
from plugin_agent.exceptions import (
    ConfigurationError,
    PluginAgentError,
    PluginNotFoundError,
)
from plugin_agent.plugins.base import Command, Plugin, PluginRegistry

logger = logging.getLogger(__name__)


@dataclass
class AgentResponse:
    """A model turn: what it thought and which command it chose."""

    command: str
    args: dict[str, str] = field(default_factory=dict)
    thoughts: str = ""


@dataclass
class Agent:
    """
    Host for registered plugins.

    The agent does not decide what to run next. It builds per-conversation
    contexts, consults plugin hooks around each model call, runs commands and
    maintains the active response window.

    Example:
        ```python
        from plugin_agent import Agent
        from plugin_agent.plugins import PluginRegistry
        from plugin_agent.plugins.builtin import default_plugins

        registry = PluginRegistry()
        for plugin in default_plugins():
            registry.register(plugin)

        agent = Agent(registry=registry)
        context = await agent.create_context({"ChatGPT": {"api key": "sk-..."}})
        output = await agent.run_command(context, "ask-chatgpt", {"query": "Hi"})
        await agent.close_context(context)
        ```
    """

    registry: PluginRegistry
    config: AgentConfig = field(default_factory=get_config)

    async def create_context(
        self, plugin_configs: dict[str, Any], fatal: Iterable[str] = ()
    ) -> CommandContext:
        """
        Build a conversation context with one state object per plugin.

        Plugins are constructed after their dependencies. A plugin whose
        construction fails, or whose dependency is absent, is left out.

        Args:
            plugin_configs: Configuration payload per plugin name.
            fatal: Plugin names whose absence is a configuration error.

        Returns:
            The new conversation context.

        Raises:
            ConfigurationError: If a plugin listed in ``fatal`` is absent.
        """
        fatal = set(fatal)
        context = CommandContext(max_history=self.config.max_history)

        for plugin in self.registry.resolve_order():
            missing = [
                dep for dep in plugin.dependencies if not context.plugin_data.contains(dep)
            ]
            if missing:
                reason = f"missing dependencies {missing}"
                data = None
            else:
                reason = "invalid configuration"
                data = await plugin.cycle.create_data(
                    plugin_configs.get(plugin.name), self.config
                )

            if data is None:
                if plugin.name in fatal:
                    raise ConfigurationError(
                        f"Plugin '{plugin.name}' is unavailable: {reason}"
                    )
                logger.warning(f"Plugin '{plugin.name}' is unavailable: {reason}")
                continue

            context.plugin_data.insert(plugin.name, data)
            logger.debug(f"Created state for plugin '{plugin.name}'")

        return context

    def _active_plugins(self, context: CommandContext) -> list[Plugin]:
        return [
            plugin
            for plugin in self.registry.resolve_order()
            if context.plugin_data.contains(plugin.name)
        ]

    async def build_prompt_context(
        self, context: CommandContext, previous_prompt: str | None = None
    ) -> str | None:
        """
        Collect the text plugins want prepended to the next model prompt.

        Returns:
            The contributions joined by blank lines, or None if there are none.
        """
        parts: list[str] = []
        for plugin in self._active_plugins(context):
            text = await plugin.cycle.create_context(context, previous_prompt)
            if text:
                parts.append(text)
        return "\n\n".join(parts) if parts else None

    def describe_commands(self, context: CommandContext) -> str:
        """Numbered list of the commands usable in a context."""
        commands: list[Command] = []
        for plugin in self._active_plugins(context):
            commands.extend(plugin.commands)
        return "\n".join(
            f"{i}. {command.describe()}" for i, command in enumerate(commands, 1)
        )

    async def run_command(
        self, context: CommandContext, name: str, args: dict[str, str]
    ) -> str:
        """
        Run a command and return its textual result.

        Failures never escape: they are returned as a descriptive message the
        model can read.
        """
        try:
            plugin, command = self.registry.get_command(name)
            for required in (plugin.name, *plugin.dependencies):
                if not context.plugin_data.contains(required):
                    raise PluginNotFoundError(
                        required, f"needed by command '{name}' but not available"
                    )
            return await command.run(context, args)
        except PluginAgentError as e:
            logger.warning(f"Command '{name}' failed: {e}")
            return f"Error running '{name}': {e}"
        except Exception as e:
            logger.exception(f"Command '{name}' raised an unexpected error")
            return f"Error running '{name}': {e}"

    async def record_response(
        self, context: CommandContext, response: AgentResponse, output: str
    ) -> None:
        """
        Add a response to the active window, evicting the oldest ones.

        Each plugin's ``apply_removed_response`` hook sees every evicted
        response. Hook failures are logged and otherwise ignored.
        """
        context.history.append(HistoryEntry(response=response, output=output))

        while len(context.history) > context.max_history:
            evicted = context.history.pop(0)
            previous_response = bool(context.history)
            for plugin in self._active_plugins(context):
                try:
                    await plugin.cycle.apply_removed_response(
                        context, evicted.response, evicted.output, previous_response
                    )
                except Exception as e:
                    logger.warning(
                        f"Plugin '{plugin.name}' failed to handle evicted response: {e}"
                    )

    async def close_context(self, context: CommandContext) -> None:
        """
        Release every state object in a context.

        State objects are closed in reverse construction order, so a plugin
        is closed before the plugins it depends on. Each one is removed from
        the store even if closing it fails; failures are logged.
        """
        for name in reversed(context.plugin_data.names()):
            data = context.plugin_data.remove(name)
            try:
                await data.close()
            except Exception as e:
                logger.warning(f"Plugin '{name}' failed to close: {e}")
            else:
                logger.debug(f"Closed state for plugin '{name}'")

    def get_info(self, context: CommandContext | None = None) -> dict[str, Any]:
        """Get agent information as a dictionary."""
        info: dict[str, Any] = {
            "plugins": [p.name for p in self.registry.list_all()],
            "commands": [c.name for c in self.registry.list_commands()],
        }
        if context is not None:
            info["available"] = context.plugin_data.names()
            info["history_length"] = len(context.history)
        return info
