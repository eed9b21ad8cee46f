"""Tagged registry mapping plugin ids to their option vocabularies.

Plugins are plain data (``PluginInfo``), not subclasses: the registry is a
``plugin_id -> PluginInfo`` mapping that can be seeded from the built-in
table or a JSON file and extended at runtime.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from discofeed.exceptions import ConfigError
from discofeed.models import OptionSet, PluginInfo
from discofeed.plugins.builtin import BUILTIN_PLUGINS

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Ordered, dynamically extensible set of source plugins."""

    def __init__(self, plugins: list[PluginInfo] | tuple[PluginInfo, ...] = ()) -> None:
        self._plugins: dict[str, PluginInfo] = {}
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: PluginInfo) -> None:
        """Add *plugin*, replacing any existing plugin with the same id.

        A replaced plugin keeps its position in ``list_plugins()``.
        """
        if plugin.value in self._plugins:
            logger.info("Replacing plugin %s", plugin.value)
        self._plugins[plugin.value] = plugin

    def get(self, plugin_id: str) -> PluginInfo | None:
        return self._plugins.get(plugin_id)

    def lookup(self, plugin_id: str) -> OptionSet | None:
        """Return the plugin's OptionSet, or None if *plugin_id* is unknown."""
        plugin = self._plugins.get(plugin_id)
        return plugin.options if plugin is not None else None

    def list_plugins(self) -> list[PluginInfo]:
        """All plugins in registration order, disabled ones included."""
        return list(self._plugins.values())

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    @classmethod
    def builtin(cls) -> PluginRegistry:
        """Registry seeded with the built-in plugin table."""
        return cls(BUILTIN_PLUGINS)

    @classmethod
    def from_json(cls, path: Path) -> PluginRegistry:
        """Load plugins from a JSON list.

        Each entry looks like::

            {"value": "MHG", "label": "ManHuaGui", "disabled": false,
             "sortOptions": [{"value": "latest", "label": "Latest"}]}

        Raises:
            ConfigError: If the file is missing, unparsable or malformed.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read plugin registry {path}: {exc}") from exc

        if not isinstance(data, list):
            raise ConfigError(f"Plugin registry {path} must contain a JSON list")

        plugins: list[PluginInfo] = []
        for entry in data:
            try:
                plugins.append(
                    PluginInfo(
                        value=str(entry["value"]),
                        label=str(entry.get("label", entry["value"])),
                        disabled=bool(entry.get("disabled", False)),
                        options=OptionSet.from_dict(entry),
                    )
                )
            except (KeyError, TypeError, AttributeError) as exc:
                raise ConfigError(f"Malformed plugin entry in {path}: {entry!r}") from exc

        logger.info("Loaded %d plugins from %s", len(plugins), path)
        return cls(plugins)
