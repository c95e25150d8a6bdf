"""Configuration management for Plugin Agent."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings

from plugin_agent.exceptions import ConfigurationError


class AgentConfig(BaseSettings):
    """Configuration settings loaded from environment variables."""

    # OpenAI
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    chat_model: str = "gpt-3.5-turbo"

    # Conversation
    max_history: int = 10

    # Plugin configuration payloads, keyed by plugin name
    plugins_file: Path | None = None

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "PLUGIN_AGENT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def load_plugin_configs(config: AgentConfig) -> dict[str, Any]:
    """
    Read the per-plugin configuration payloads.

    The file is a JSON object mapping plugin name to the payload handed to
    that plugin's ``create_data`` hook.

    Args:
        config: The settings naming the plugins file.

    Returns:
        A mapping of plugin name to payload. Empty if no file is configured.

    Raises:
        ConfigurationError: If the file cannot be read or is not a JSON object.
    """
    if config.plugins_file is None:
        return {}

    try:
        data = json.loads(config.plugins_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Cannot read plugins file '{config.plugins_file}': {e}"
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Plugins file '{config.plugins_file}' must contain a JSON object"
        )
    return data


# Global config instance
_config: AgentConfig | None = None


def get_config() -> AgentConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AgentConfig()
    return _config


def set_config(config: AgentConfig | None) -> None:
    """Set the global configuration instance; None reloads it on next use."""
    global _config
    _config = config
