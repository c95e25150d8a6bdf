"""Plugin discovery and loading for Plugin Agent."""

from __future__ import annotations

import importlib
import logging
from importlib.metadata import entry_points

from plugin_agent.exceptions import ConfigurationError, PluginError
from plugin_agent.plugins.base import Plugin, PluginRegistry

logger = logging.getLogger(__name__)

# Entry point group for plugin factories
PLUGIN_ENTRY_POINT_GROUP = "plugin_agent.plugins"


def discover_plugins(registry: PluginRegistry | None = None) -> list[Plugin]:
    """
    Discover all installed plugins via entry points.

    Each entry point in the 'plugin_agent.plugins' group names a zero-argument
    factory returning a Plugin descriptor. Entry points that fail to load are
    logged and skipped.

    Args:
        registry: If given, discovered plugins are registered in it.

    Returns:
        A list of discovered Plugin descriptors.

    Example:
        In a plugin package's pyproject.toml:
        ```toml
        [project.entry-points."plugin_agent.plugins"]
        weather = "my_package.weather:create_weather"
        ```
    """
    discovered: list[Plugin] = []

    for ep in entry_points(group=PLUGIN_ENTRY_POINT_GROUP):
        try:
            plugin = load_plugin(ep.name, ep.value)
        except PluginError as e:
            logger.warning(f"Failed to load plugin '{ep.name}': {e}")
            continue

        if registry is not None:
            try:
                registry.register(plugin)
            except ConfigurationError as e:
                logger.warning(f"Skipping plugin '{plugin.name}': {e}")
                continue
            logger.info(f"Registered plugin: {plugin.name}")

        discovered.append(plugin)

    return discovered


def load_plugin(name: str, factory_path: str) -> Plugin:
    """
    Load a plugin descriptor from a factory path.

    Args:
        name: The entry point name of the plugin.
        factory_path: 'module:factory' or 'module.factory'.

    Returns:
        The Plugin returned by the factory.

    Raises:
        PluginError: If the factory cannot be found, fails, or returns
            something other than a Plugin.
    """
    if ":" in factory_path:
        module_path, factory_name = factory_path.rsplit(":", 1)
    else:
        parts = factory_path.rsplit(".", 1)
        if len(parts) != 2:
            raise PluginError(name, f"Invalid factory path: {factory_path}")
        module_path, factory_name = parts

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise PluginError(name, f"Cannot import '{module_path}': {e}") from e

    factory = getattr(module, factory_name, None)
    if not callable(factory):
        raise PluginError(
            name, f"Factory '{factory_name}' not found in module '{module_path}'"
        )

    try:
        plugin = factory()
    except Exception as e:
        raise PluginError(name, f"Factory failed: {e}") from e

    if not isinstance(plugin, Plugin):
        raise PluginError(name, f"Factory '{factory_name}' did not return a Plugin")

    return plugin
