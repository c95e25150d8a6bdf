"""Plugin Agent - typed command plugins for a tool-using conversational agent."""

from plugin_agent.agent import Agent, AgentResponse
from plugin_agent.config import AgentConfig
from plugin_agent.context import CommandContext

__version__ = "0.1.0"
__all__ = ["Agent", "AgentConfig", "AgentResponse", "CommandContext", "__version__"]
