"""Custom exceptions for Plugin Agent."""


class PluginAgentError(Exception):
    """Base exception for all Plugin Agent errors."""

    pass


class ConfigurationError(PluginAgentError):
    """Raised when there is a configuration issue."""

    pass


class ModelError(PluginAgentError):
    """Raised when there is an error with the LLM model."""

    pass


class ProviderError(ModelError):
    """Raised when there is an error with a specific LLM provider."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class PluginError(PluginAgentError):
    """Raised when there is an error with a plugin."""

    def __init__(self, plugin_name: str, message: str):
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")


class NoSuchOperationError(PluginError):
    """Raised when a plugin's state object does not recognize an operation."""

    def __init__(self, plugin_name: str, operation: str):
        self.operation = operation
        super().__init__(plugin_name, f"no such operation '{operation}'")


class PayloadDecodeError(PluginError):
    """Raised when an operation payload or result has the wrong shape."""

    def __init__(self, plugin_name: str, operation: str, message: str):
        self.operation = operation
        super().__init__(plugin_name, f"operation '{operation}': {message}")


class PluginNotFoundError(PluginError):
    """Raised when a plugin is not registered or has no state object."""

    def __init__(self, plugin_name: str, message: str = "not available"):
        super().__init__(plugin_name, message)


class CommandError(PluginAgentError):
    """Raised when there is an error with a command."""

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(f"Command '{command}': {message}")


class CommandArgumentError(CommandError):
    """Raised when a command is invoked without a required argument."""

    def __init__(self, command: str, argument: str):
        self.argument = argument
        super().__init__(command, f"missing argument '{argument}'")


class CommandNotFoundError(CommandError):
    """Raised when no registered plugin contributes a command."""

    def __init__(self, command: str):
        super().__init__(command, "no such command")
