"""Source plugin registry and built-in plugin table."""

from discofeed.plugins.builtin import BUILTIN_PLUGINS, DEFAULT_PLUGIN
from discofeed.plugins.registry import PluginRegistry

__all__ = ["BUILTIN_PLUGINS", "DEFAULT_PLUGIN", "PluginRegistry"]
