"""Tests for the plugin registry and built-in plugin table."""

from __future__ import annotations

import json

import pytest

from discofeed.exceptions import ConfigError
from discofeed.models import Option, PluginInfo
from discofeed.plugins import BUILTIN_PLUGINS, DEFAULT_PLUGIN, PluginRegistry


class TestBuiltin:
    def test_default_plugin_is_registered_and_enabled(self):
        registry = PluginRegistry.builtin()
        assert DEFAULT_PLUGIN in registry
        assert registry.get(DEFAULT_PLUGIN).disabled is False

    def test_order_follows_table(self):
        registry = PluginRegistry.builtin()
        assert [p.value for p in registry.list_plugins()] == [p.value for p in BUILTIN_PLUGINS]

    def test_search_only_plugin_has_no_options(self):
        assert PluginRegistry.builtin().lookup("JMC").is_empty()


class TestRegister:
    def test_lookup_unknown_returns_none(self):
        assert PluginRegistry().lookup("missing") is None

    def test_replace_keeps_position(self):
        registry = PluginRegistry([PluginInfo("A", "a"), PluginInfo("B", "b")])
        registry.register(PluginInfo("A", "renamed"))
        assert [p.label for p in registry.list_plugins()] == ["renamed", "b"]
        assert len(registry) == 2

    def test_runtime_registration(self):
        registry = PluginRegistry()
        registry.register(PluginInfo("N", "New"))
        assert "N" in registry
        assert registry.get("N").label == "New"


class TestFromJson:
    def test_loads_camel_case_vocabularies(self, tmp_path):
        path = tmp_path / "plugins.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "value": "X",
                        "label": "Plugin X",
                        "sortOptions": [
                            {"value": "latest", "label": "Latest"},
                            {"value": "pop", "label": "Popular"},
                        ],
                    },
                    {"value": "Y", "disabled": True, "status_options": [{"value": "done"}]},
                ]
            ),
            encoding="utf-8",
        )
        registry = PluginRegistry.from_json(path)

        assert registry.lookup("X").sort_options == (
            Option("latest", "Latest"),
            Option("pop", "Popular"),
        )
        y = registry.get("Y")
        assert y.label == "Y"
        assert y.disabled is True
        assert y.options.status_options == (Option("done", ""),)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read plugin registry"):
            PluginRegistry.from_json(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "plugins.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            PluginRegistry.from_json(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "plugins.json"
        path.write_text('{"value": "X"}', encoding="utf-8")
        with pytest.raises(ConfigError, match="JSON list"):
            PluginRegistry.from_json(path)

    def test_entry_without_value(self, tmp_path):
        path = tmp_path / "plugins.json"
        path.write_text('[{"label": "nameless"}]', encoding="utf-8")
        with pytest.raises(ConfigError, match="Malformed plugin entry"):
            PluginRegistry.from_json(path)
