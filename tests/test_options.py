"""Tests for option resolution and label lookup."""

from __future__ import annotations

from discofeed.models import Dimension, FilterSelection, Option, OptionSet, PluginInfo
from discofeed.options import OptionResolver, has_control, label_for
from discofeed.plugins import PluginRegistry


SORT = [Option("latest", "Latest"), Option("pop", "Popular")]


# ---------------------------------------------------------------------------
# label_for / has_control
# ---------------------------------------------------------------------------


class TestLabelFor:
    def test_matching_value_returns_label(self):
        assert label_for(SORT, "pop") == "Popular"
        assert label_for(SORT, "latest") == "Latest"

    def test_unknown_value_falls_back_to_raw(self):
        assert label_for(SORT, "rating") == "rating"

    def test_empty_vocabulary_falls_back_to_raw(self):
        assert label_for([], "anything") == "anything"
        assert label_for([], "") == ""

    def test_empty_value_matches_all_option(self):
        options = [Option("", "All"), Option("jp", "Japan")]
        assert label_for(options, "") == "All"

    def test_empty_label_falls_back_to_raw(self):
        assert label_for([Option("x", "")], "x") == "x"

    def test_first_match_wins(self):
        options = [Option("a", "First"), Option("a", "Second")]
        assert label_for(options, "a") == "First"


class TestHasControl:
    def test_no_options(self):
        assert has_control([]) is False

    def test_single_option_offers_no_choice(self):
        assert has_control([Option("", "All")]) is False

    def test_two_options(self):
        assert has_control(SORT) is True


# ---------------------------------------------------------------------------
# OptionResolver
# ---------------------------------------------------------------------------


class TestResolve:
    def test_known_plugin(self, resolver: OptionResolver):
        option_set = resolver.resolve("A")
        assert [o.value for o in option_set.sort_options] == ["latest", "pop"]

    def test_unknown_plugin_is_empty(self, resolver: OptionResolver):
        option_set = resolver.resolve("nope")
        assert option_set == OptionSet()
        assert option_set.is_empty()

    def test_plugin_without_options(self, resolver: OptionResolver):
        assert resolver.resolve("B").is_empty()

    def test_label_for_dimension(self, resolver: OptionResolver):
        assert resolver.label_for("A", Dimension.SORT, "pop") == "Popular"
        assert resolver.label_for("A", Dimension.SORT, "weird") == "weird"
        assert resolver.label_for("B", Dimension.SORT, "pop") == "pop"


class TestLabelsAndVisibility:
    def test_labels_for_selection(self, resolver: OptionResolver):
        selection = FilterSelection(plugin_id="A", region="jp", status="X", sort="pop")
        labels = resolver.labels(selection)
        assert labels == {
            Dimension.TYPE: "All",
            Dimension.REGION: "Japan",
            Dimension.STATUS: "Ongoing",
            Dimension.SORT: "Popular",
        }

    def test_visible_dimensions_in_canonical_order(self, resolver: OptionResolver):
        assert resolver.visible_dimensions("A") == [
            Dimension.TYPE,
            Dimension.REGION,
            Dimension.STATUS,
            Dimension.SORT,
        ]

    def test_no_controls_for_plugin_without_options(self, resolver: OptionResolver):
        assert resolver.visible_dimensions("B") == []
        assert resolver.visible_dimensions("unknown") == []

    def test_switching_plugin_hides_sort_and_keeps_raw_value(self, resolver: OptionResolver):
        selection = FilterSelection(plugin_id="A", sort="pop")
        assert resolver.labels(selection)[Dimension.SORT] == "Popular"

        switched = selection.with_plugin("B")
        assert switched.sort == "pop"
        assert Dimension.SORT not in resolver.visible_dimensions("B")
        assert resolver.labels(switched)[Dimension.SORT] == "pop"

    def test_single_option_dimension_is_hidden(self):
        registry = PluginRegistry()

        registry.register(
            PluginInfo("S", "Single", options=OptionSet(sort_options=(Option("latest", "Latest"),)))
        )
        assert OptionResolver(registry).visible_dimensions("S") == []


class TestPlugins:
    def test_choices_exclude_disabled(self, resolver: OptionResolver):
        choices = resolver.plugin_choices()
        assert [c.value for c in choices] == ["A", "B"]
        assert choices[0].label == "Plugin A"

    def test_plugin_label(self, resolver: OptionResolver):
        assert resolver.plugin_label("A") == "Plugin A"
        assert resolver.plugin_label("OFF") == "Disabled plugin"
        assert resolver.plugin_label("ghost") == "ghost"

    def test_builtin_registry(self):
        resolver = OptionResolver(PluginRegistry.builtin())
        assert resolver.plugin_label("MHG") == "ManHuaGui"
        assert "DMZJ" not in [c.value for c in resolver.plugin_choices()]
        assert resolver.visible_dimensions("JMC") == []
