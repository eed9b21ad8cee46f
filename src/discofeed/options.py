"""Option resolution: facet vocabularies and display labels.

Labels are always recomputed from the currently active plugin's
vocabularies; nothing is cached across plugin switches. Every function
here is total: unknown plugins resolve to empty vocabularies and unknown
values label themselves.
"""

from __future__ import annotations

from collections.abc import Sequence

from discofeed.models import (
    DIMENSIONS,
    EMPTY_OPTIONS,
    Dimension,
    FilterSelection,
    Option,
    OptionSet,
)
from discofeed.plugins.registry import PluginRegistry


def label_for(options: Sequence[Option], value: str) -> str:
    """Return the label of the option whose value equals *value*.

    Falls back to *value* itself when no option matches (or the match has
    an empty label), so a raw or stale value is still displayable.
    """
    for option in options:
        if option.value == value:
            return option.label or value
    return value


def has_control(options: Sequence[Option]) -> bool:
    """True if a facet control should be shown for *options*.

    A control is only useful when there is a choice to make.
    """
    return len(options) > 1


class OptionResolver:
    """Pure lookups against a plugin registry."""

    def __init__(self, registry: PluginRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    def resolve(self, plugin_id: str) -> OptionSet:
        """Return the OptionSet for *plugin_id* (empty if unknown)."""
        options = self._registry.lookup(plugin_id)
        return options if options is not None else EMPTY_OPTIONS

    def label_for(self, plugin_id: str, dimension: Dimension, value: str) -> str:
        return label_for(self.resolve(plugin_id).for_dimension(dimension), value)

    def labels(self, selection: FilterSelection) -> dict[Dimension, str]:
        """Display label of every facet of *selection* under its plugin."""
        option_set = self.resolve(selection.plugin_id)
        return {d: label_for(option_set.for_dimension(d), selection.facet(d)) for d in DIMENSIONS}

    def visible_dimensions(self, plugin_id: str) -> list[Dimension]:
        option_set = self.resolve(plugin_id)
        return [d for d in DIMENSIONS if has_control(option_set.for_dimension(d))]

    def plugin_choices(self) -> list[Option]:
        """Enabled plugins as (value, label) options for a source picker."""
        return [
            Option(p.value, p.label) for p in self._registry.list_plugins() if not p.disabled
        ]

    def plugin_label(self, plugin_id: str) -> str:
        all_plugins = [Option(p.value, p.label) for p in self._registry.list_plugins()]
        return label_for(all_plugins, plugin_id)
