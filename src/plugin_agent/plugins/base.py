"""Plugin descriptors, state objects and registry for Plugin Agent."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from plugin_agent.exceptions import (
    CommandArgumentError,
    CommandNotFoundError,
    ConfigurationError,
    NoSuchOperationError,
    PayloadDecodeError,
    PluginNotFoundError,
)

if TYPE_CHECKING:
    from plugin_agent.agent import AgentResponse
    from plugin_agent.config import AgentConfig
    from plugin_agent.context import CommandContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

CommandImpl = Callable[["CommandContext", dict[str, str]], Awaitable[str]]


@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def decode_value(plugin_name: str, operation: str, value: Any, type_: type[T]) -> T:
    """
    Convert an untyped payload into ``type_``.

    Values are checked as the JSON they stand for, in strict mode: objects fill
    models, arrays fill lists and tuples, and nothing is coerced between
    scalar types.

    Raises:
        PayloadDecodeError: If the value is not JSON-compatible or does not
            fit ``type_``.
    """
    try:
        return _adapter(type_).validate_json(to_json(value), strict=True)
    except (ValidationError, PydanticSerializationError) as e:
        raise PayloadDecodeError(plugin_name, operation, str(e)) from e


class PluginData(ABC):
    """
    Mutable per-conversation state owned by a plugin.

    Every state object exposes exactly one dynamically dispatched entry point,
    ``apply``, which maps an operation name and an untyped payload to an
    untyped result. Callers with static types go through
    :func:`plugin_agent.plugins.invoke.invoke` instead of calling ``apply``
    directly.

    Example:
        ```python
        class CounterData(PluginData):
            plugin_name = "Counter"

            def __init__(self):
                self.count = 0

            async def apply(self, name: str, value: Any) -> Any:
                if name == "increment":
                    self.count += 1
                    return self.count
                raise self.no_such_operation(name)
        ```
    """

    plugin_name: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if getattr(cls.apply, "__isabstractmethod__", False):
            return
        if not cls.plugin_name:
            raise TypeError(f"{cls.__name__} must set a non-empty plugin_name")

    @abstractmethod
    async def apply(self, name: str, value: Any) -> Any:
        """
        Perform a named operation.

        Args:
            name: The operation name, local to this plugin.
            value: The untyped request payload.

        Returns:
            The untyped result value.

        Raises:
            NoSuchOperationError: If the operation name is not recognized.
        """
        pass

    def no_such_operation(self, name: str) -> NoSuchOperationError:
        """Build the error for an unrecognized operation name."""
        return NoSuchOperationError(self.plugin_name, name)

    def decode(self, name: str, value: Any, type_: type[T]) -> T:
        """
        Validate an operation's input payload.

        Raises:
            PayloadDecodeError: If the payload does not fit ``type_``.
        """
        return decode_value(self.plugin_name, name, value, type_)

    async def close(self) -> None:
        """
        Release resources held by the state object.

        Called once when the conversation context is closed. The default does
        nothing.
        """
        return None


class PluginCycle(ABC):
    """
    Hooks the agent consults around each conversation turn.

    None of these are called by the plugin itself; the agent host invokes
    them before a model call, when old responses leave the active window,
    and once per conversation to build the plugin's state object.
    """

    @abstractmethod
    async def create_context(
        self, context: CommandContext, previous_prompt: str | None
    ) -> str | None:
        """
        Contribute text to prepend to the next model prompt.

        Args:
            context: The conversation context.
            previous_prompt: The previously built prompt context, if any.

        Returns:
            Extra prompt text, or None to contribute nothing.
        """
        pass

    @abstractmethod
    async def apply_removed_response(
        self,
        context: CommandContext,
        response: AgentResponse,
        cmd_output: str,
        previous_response: bool,
    ) -> None:
        """
        React to a response being evicted from the active window.

        Args:
            context: The conversation context.
            response: The response being evicted.
            cmd_output: The textual output of the command that response ran.
            previous_response: True if a later response still exists.
        """
        pass

    @abstractmethod
    async def create_data(self, value: Any, config: AgentConfig) -> PluginData | None:
        """
        Build the plugin's state object from its configuration payload.

        Args:
            value: The plugin's configuration payload, or None if it has none.
            config: The settings of the agent building the context.

        Returns:
            The new state object, or None if the payload is invalid.
        """
        pass


class EmptyCycle(PluginCycle):
    """Cycle with no-op context and eviction hooks."""

    async def create_context(
        self, context: CommandContext, previous_prompt: str | None
    ) -> str | None:
        return None

    async def apply_removed_response(
        self,
        context: CommandContext,
        response: AgentResponse,
        cmd_output: str,
        previous_response: bool,
    ) -> None:
        return None


@dataclass(frozen=True)
class Command:
    """A named, documented operation the agent can run."""

    name: str
    purpose: str
    run: CommandImpl
    args: tuple[tuple[str, str], ...] = ()

    def require(self, args: dict[str, str], arg: str) -> str:
        """
        Get a required argument.

        Raises:
            CommandArgumentError: If the argument is missing.
        """
        try:
            return args[arg]
        except KeyError:
            raise CommandArgumentError(self.name, arg) from None

    def describe(self) -> str:
        """Render the command for the model's list of available commands."""
        args = ", ".join(f'"{name}": "<{desc}>"' for name, desc in self.args)
        return f"{self.name}: {self.purpose}, args: {args}"


@dataclass(frozen=True)
class Plugin:
    """
    Static description of a plugin.

    Example:
        ```python
        plugin = Plugin(
            name="Counter",
            cycle=CounterCycle(),
            commands=(Command(name="count", purpose="Count.", run=count),),
        )
        ```
    """

    name: str
    cycle: PluginCycle
    dependencies: tuple[str, ...] = ()
    commands: tuple[Command, ...] = field(default_factory=tuple)

    def get_info(self) -> dict[str, Any]:
        """Get plugin information as a dictionary."""
        return {
            "name": self.name,
            "dependencies": list(self.dependencies),
            "commands": [command.name for command in self.commands],
        }


class PluginRegistry:
    """
    Registry of plugin descriptors and the commands they contribute.

    Plugin names and command names are both unique across the registry.

    Example:
        ```python
        registry = PluginRegistry()
        registry.register(create_browse())
        registry.register(create_google())

        for plugin in registry.resolve_order():
            print(plugin.name)
        ```
    """

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._commands: dict[str, tuple[Plugin, Command]] = {}

    def register(self, plugin: Plugin) -> None:
        """
        Register a plugin and its commands.

        Args:
            plugin: The plugin descriptor to register.

        Raises:
            ConfigurationError: If the plugin name or one of its command names
                is already registered.
        """
        if plugin.name in self._plugins:
            raise ConfigurationError(f"Plugin '{plugin.name}' is already registered")

        seen: set[str] = set()
        for command in plugin.commands:
            if command.name in self._commands:
                owner = self._commands[command.name][0]
                raise ConfigurationError(
                    f"Command '{command.name}' of plugin '{plugin.name}' is "
                    f"already provided by plugin '{owner.name}'"
                )
            if command.name in seen:
                raise ConfigurationError(
                    f"Command '{command.name}' is declared twice by plugin '{plugin.name}'"
                )
            seen.add(command.name)

        self._plugins[plugin.name] = plugin
        for command in plugin.commands:
            self._commands[command.name] = (plugin, command)
        logger.debug(f"Registered plugin: {plugin.name}")

    def unregister(self, name: str) -> Plugin | None:
        """
        Unregister a plugin and its commands by name.

        Returns:
            The unregistered plugin, or None if not found.
        """
        plugin = self._plugins.pop(name, None)
        if plugin is not None:
            for command in plugin.commands:
                self._commands.pop(command.name, None)
        return plugin

    def get(self, name: str) -> Plugin | None:
        """Get a plugin by name."""
        return self._plugins.get(name)

    def list_all(self) -> list[Plugin]:
        """List all registered plugins in registration order."""
        return list(self._plugins.values())

    def get_command(self, name: str) -> tuple[Plugin, Command]:
        """
        Find a command and the plugin contributing it.

        Raises:
            CommandNotFoundError: If no plugin contributes the command.
        """
        try:
            return self._commands[name]
        except KeyError:
            raise CommandNotFoundError(name) from None

    def list_commands(self) -> list[Command]:
        """List all registered commands."""
        return [command for _, command in self._commands.values()]

    def resolve_order(self) -> list[Plugin]:
        """
        Order plugins so each one follows its dependencies.

        Registration order breaks ties.

        Raises:
            PluginNotFoundError: If a dependency is not registered.
            ConfigurationError: If the dependencies form a cycle.
        """
        ordered: list[Plugin] = []
        state: dict[str, str] = {}

        def visit(plugin: Plugin, chain: list[str]) -> None:
            mark = state.get(plugin.name)
            if mark == "done":
                return
            if mark == "visiting":
                cycle = " -> ".join(chain + [plugin.name])
                raise ConfigurationError(f"Plugin dependency cycle: {cycle}")

            state[plugin.name] = "visiting"
            for dependency in plugin.dependencies:
                required = self._plugins.get(dependency)
                if required is None:
                    raise PluginNotFoundError(
                        dependency, f"required by '{plugin.name}' but not registered"
                    )
                visit(required, chain + [plugin.name])
            state[plugin.name] = "done"
            ordered.append(plugin)

        for plugin in self._plugins.values():
            visit(plugin, [])
        return ordered

    def clear(self) -> None:
        """Clear all registered plugins."""
        self._plugins.clear()
        self._commands.clear()
