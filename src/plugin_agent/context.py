"""Per-conversation state for Plugin Agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from plugin_agent.exceptions import ConfigurationError, PluginNotFoundError

if TYPE_CHECKING:
    from plugin_agent.agent import AgentResponse
    from plugin_agent.plugins.base import PluginData


class PluginDataStore:
    """Holds exactly one state object per plugin name."""

    def __init__(self) -> None:
        self._data: dict[str, PluginData] = {}

    def insert(self, name: str, data: PluginData) -> None:
        """
        Store a plugin's state object.

        Raises:
            ConfigurationError: If the plugin already has a state object.
        """
        if name in self._data:
            raise ConfigurationError(f"Plugin '{name}' already has a state object")
        self._data[name] = data

    def get_data(self, name: str) -> PluginData:
        """
        Get a plugin's state object.

        Raises:
            PluginNotFoundError: If the plugin was never registered or its
                construction failed.
        """
        try:
            return self._data[name]
        except KeyError:
            raise PluginNotFoundError(name) from None

    def contains(self, name: str) -> bool:
        return name in self._data

    def names(self) -> list[str]:
        return list(self._data)

    def remove(self, name: str) -> PluginData | None:
        return self._data.pop(name, None)


@dataclass
class HistoryEntry:
    """A response in the active window and the output of its command."""

    response: AgentResponse
    output: str


@dataclass
class CommandContext:
    """
    Everything one conversation owns.

    Contexts are never shared: two conversations need two contexts, and
    therefore two sets of state objects.
    """

    plugin_data: PluginDataStore = field(default_factory=PluginDataStore)
    history: list[HistoryEntry] = field(default_factory=list)
    max_history: int = 10
