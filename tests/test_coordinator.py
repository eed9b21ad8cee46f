"""Tests for DiscoveryCoordinator intents and derived view state."""

from __future__ import annotations

import logging

from discofeed.coordinator import DiscoveryCoordinator
from discofeed.models import Dimension, FeedKind, LoadOutcome, LoadStatus
from discofeed.services.ports import DETAIL, PLUGIN_SETTINGS, SEARCH

from conftest import make_items, settle


DISCOVERY = FeedKind.DISCOVERY


async def _focus_loaded(coordinator, fetcher, *ids):
    task = coordinator.on_focus()
    await settle()
    fetcher.resolve(len(fetcher.calls) - 1, make_items(*ids))
    await task


# ---------------------------------------------------------------------------
# Focus
# ---------------------------------------------------------------------------


class TestOnFocus:
    async def test_first_focus_loads(self, coordinator, fetcher, store):
        task = coordinator.on_focus()
        assert task is not None
        assert coordinator.is_loading()
        await settle()
        fetcher.resolve(0, make_items("a"))
        await task
        assert [i.id for i in coordinator.items()] == ["a"]

    async def test_repeated_focus_is_idempotent(self, coordinator, fetcher):
        task = coordinator.on_focus()
        assert coordinator.on_focus() is None
        await settle()
        fetcher.resolve(0, make_items("a"))
        await task
        assert coordinator.on_focus() is None
        assert len(fetcher.calls) == 1

    async def test_focus_after_failure_does_not_reload(self, coordinator, fetcher, store):
        task = coordinator.on_focus()
        await settle()
        fetcher.fail(0, RuntimeError("down"))
        await task
        assert store.feed(DISCOVERY).load_status is LoadStatus.REJECTED
        assert coordinator.on_focus() is None


# ---------------------------------------------------------------------------
# Facets and sources
# ---------------------------------------------------------------------------


class TestChangeFacet:
    async def test_updates_selection_and_resets(self, coordinator, fetcher, store):
        await _focus_loaded(coordinator, fetcher, "a", "b")

        task = coordinator.change_facet(Dimension.SORT, "pop")
        assert store.get_selection().sort == "pop"
        assert store.feed(DISCOVERY).ordered_ids == []
        assert coordinator.is_loading()

        await settle()
        assert fetcher.calls[-1]["filters"]["sort"] == "pop"
        assert fetcher.calls[-1]["page"] == 1
        fetcher.resolve(1, make_items("p1"))
        assert await task is LoadOutcome.APPLIED
        assert store.feed(DISCOVERY).ordered_ids == ["p1"]

    async def test_rapid_changes_show_latest_only(self, coordinator, fetcher, store):
        first = coordinator.change_facet(Dimension.STATUS, "X")
        second = coordinator.change_facet(Dimension.STATUS, "Y")
        assert first is not None and second is not None
        await settle()

        fetcher.resolve(1, make_items("y1"))
        fetcher.resolve(0, make_items("x1"))
        assert await second is LoadOutcome.APPLIED
        assert await first is LoadOutcome.STALE

        assert store.get_selection().status == "Y"
        assert store.feed(DISCOVERY).ordered_ids == ["y1"]
        assert coordinator.labels()[Dimension.STATUS] == "Completed"

    async def test_facet_without_vocabulary_warns_but_applies(
        self, coordinator, fetcher, store, caplog
    ):
        coordinator.change_source("B")
        with caplog.at_level(logging.WARNING, logger="discofeed.coordinator"):
            task = coordinator.change_facet(Dimension.SORT, "pop")
        assert "offers no sort options" in caplog.text
        assert store.get_selection().sort == "pop"
        await settle()
        fetcher.resolve(0, [])
        await task

    async def test_does_not_touch_search_feed(self, coordinator, fetcher, store):
        task = coordinator.change_facet(Dimension.TYPE, "action")
        assert store.feed(FeedKind.SEARCH).load_status is LoadStatus.DEFAULT
        await settle()
        fetcher.resolve(0, [])
        await task


class TestChangeSource:
    async def test_search_context_records_plugin_only(self, coordinator, fetcher, store):
        assert coordinator.change_source("B") is None
        assert store.get_selection().plugin_id == "B"
        await settle()
        assert fetcher.calls == []
        assert coordinator.plugin_label() == "Plugin B"

    async def test_discovery_context_resets_feed(self, coordinator, fetcher, store):
        await _focus_loaded(coordinator, fetcher, "a")
        task = coordinator.change_source("B", context=DISCOVERY)
        assert task is not None
        await settle()
        assert fetcher.calls[-1]["plugin_id"] == "B"
        fetcher.resolve(1, make_items("b1", plugin_id="B"))
        await task
        assert store.feed(DISCOVERY).ordered_ids == ["b1"]

    async def test_search_source_change_keeps_discovery_pages_on_one_plugin(
        self, coordinator, fetcher, store
    ):
        await _focus_loaded(coordinator, fetcher, "a1", "a2")
        coordinator.change_source("B")

        task = coordinator.load_more(DISCOVERY)
        await settle()
        assert fetcher.calls[-1]["plugin_id"] == "A"
        assert fetcher.calls[-1]["page"] == 2
        fetcher.resolve(1, make_items("a3"))
        await task
        assert {i.plugin_id for i in coordinator.items()} == {"A"}

        # the next discovery reset picks up the new plugin
        reset = coordinator.refresh()
        await settle()
        assert fetcher.calls[-1]["plugin_id"] == "B"
        assert fetcher.calls[-1]["page"] == 1
        fetcher.resolve(2, [])
        await reset

    async def test_source_switch_keeps_raw_facets(self, coordinator, store):
        store.set_selection(store.get_selection().with_facet(Dimension.SORT, "pop"))
        coordinator.change_source("B")
        assert store.get_selection().sort == "pop"
        assert Dimension.SORT not in coordinator.visible_dimensions()
        assert coordinator.labels()[Dimension.SORT] == "pop"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSubmitSearch:
    async def test_loads_search_feed_and_navigates(
        self, coordinator, fetcher, store, navigator
    ):
        task = coordinator.submit_search("one piece")
        assert navigator.visits == [(SEARCH, {"keyword": "one piece"})]
        assert store.get_search_query().keyword == "one piece"
        await settle()
        assert fetcher.calls[0] == {
            "feed": "search", "plugin_id": "A", "keyword": "one piece", "page": 1,
        }
        fetcher.resolve(0, make_items("s1", "s2"))
        await task
        assert [i.id for i in coordinator.items(FeedKind.SEARCH)] == ["s1", "s2"]
        assert store.feed(DISCOVERY).load_status is LoadStatus.DEFAULT

    async def test_explicit_plugin_updates_selection(self, coordinator, fetcher, store):
        task = coordinator.submit_search("k", plugin_id="B")
        assert store.get_selection().plugin_id == "B"
        assert store.get_search_query().plugin_id == "B"
        await settle()
        fetcher.resolve(0, [])
        await task

    async def test_new_search_supersedes_old(self, coordinator, fetcher, store):
        first = coordinator.submit_search("old")
        second = coordinator.submit_search("new")
        await settle()
        fetcher.resolve(0, make_items("o1"))
        fetcher.resolve(1, make_items("n1"))
        assert await first is LoadOutcome.STALE
        assert await second is LoadOutcome.APPLIED
        assert store.feed(FeedKind.SEARCH).ordered_ids == ["n1"]


# ---------------------------------------------------------------------------
# Load more / refresh
# ---------------------------------------------------------------------------


class TestLoadMore:
    async def test_ignored_before_first_load(self, coordinator, fetcher, store, caplog):
        with caplog.at_level(logging.WARNING, logger="discofeed.coordinator"):
            assert coordinator.load_more() is None
        assert "nothing loaded yet" in caplog.text
        assert store.feed(DISCOVERY).load_status is LoadStatus.DEFAULT
        await settle()
        assert fetcher.calls == []

    async def test_appends_next_page(self, coordinator, fetcher, store):
        await _focus_loaded(coordinator, fetcher, "a")
        task = coordinator.load_more("discovery")
        await settle()
        assert fetcher.calls[-1]["page"] == 2
        fetcher.resolve(1, make_items("b"))
        await task
        assert [i.id for i in coordinator.items()] == ["a", "b"]

    async def test_dropped_while_pending(self, coordinator, fetcher):
        coordinator.on_focus()
        assert coordinator.load_more() is None
        await settle()
        fetcher.resolve(0, [])
        await settle()


class TestRefresh:
    async def test_retry_after_failure(self, coordinator, fetcher, store):
        task = coordinator.on_focus()
        await settle()
        fetcher.fail(0, RuntimeError("down"))
        await task

        retry = coordinator.refresh()
        assert retry is not None
        await settle()
        fetcher.resolve(1, make_items("a"))
        await retry
        assert store.feed(DISCOVERY).load_status is LoadStatus.FULFILLED

    async def test_dropped_while_pending(self, coordinator, fetcher):
        coordinator.on_focus()
        assert coordinator.refresh() is None
        await settle()
        fetcher.resolve(0, [])
        await settle()


# ---------------------------------------------------------------------------
# Navigation and derived state
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_open_detail(self, coordinator, navigator):
        coordinator.open_detail("A&1")
        assert navigator.visits == [(DETAIL, {"item_id": "A&1"})]

    def test_open_plugin_settings(self, coordinator, navigator):
        coordinator.open_plugin_settings()
        assert navigator.visits == [(PLUGIN_SETTINGS, {})]

    def test_without_navigator(self, store, loader, resolver):
        DiscoveryCoordinator(store, store, loader, resolver).open_detail("x")


class TestDerivedState:
    def test_option_set_and_choices(self, coordinator):
        assert [o.value for o in coordinator.option_set().sort_options] == ["latest", "pop"]
        assert [c.value for c in coordinator.plugin_choices()] == ["A", "B"]

    def test_items_skip_missing_records(self, coordinator, store):
        store.feed(DISCOVERY).ordered_ids.extend(["a", "ghost"])
        store.upsert_items(make_items("a"))
        assert [i.id for i in coordinator.items()] == ["a"]
