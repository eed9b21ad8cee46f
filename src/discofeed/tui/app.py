"""Discovery TUI application.

Textual host for the discovery coordinator. Widgets post messages, the
App turns them into coordinator intents, and feeds are re-rendered when
their load tasks finish. The App is also the notifier (error toasts) and
the navigator (search view, detail pane, plugin settings).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Static

from discofeed.config import DiscoveryConfig
from discofeed.exceptions import FetchFailure
from discofeed.models import FeedKind, FilterSelection, LoadOutcome
from discofeed.plugins.registry import PluginRegistry
from discofeed.services.ports import DETAIL, PLUGIN_SETTINGS, SEARCH, Fetcher
from discofeed.session import create_session
from discofeed.telemetry import Telemetry
from discofeed.tui.messages import (
    FacetChanged,
    ItemSelected,
    LoadMoreRequested,
    SearchSubmitted,
    SourceChanged,
)
from discofeed.tui.providers import DiscoveryCommands
from discofeed.tui.widgets import DetailPane, FilterPanel, ResultsList, SearchBar

logger = logging.getLogger(__name__)


class DiscoveryApp(App):
    """Search bar and filters on top, feed on the left, details on the right."""

    TITLE = "Discovery"
    SUB_TITLE = "Browse & search sources"
    COMMANDS = App.COMMANDS | {DiscoveryCommands}

    CSS = """
    #main {
        layout: horizontal;
        height: 1fr;
    }

    #feeds {
        width: 2fr;
    }

    #search-list {
        display: none;
    }

    .show-search #search-list {
        display: block;
    }

    .show-search #discovery-list {
        display: none;
    }

    .show-search #filter-panel {
        display: none;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $primary-background;
        color: $text;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("ctrl+p", "command_palette", "Commands"),
        ("ctrl+f", "focus_search", "Search"),
        ("ctrl+l", "load_more", "Load More"),
        ("ctrl+r", "refresh", "Refresh"),
        ("ctrl+o", "plugin_settings", "Plugins"),
        ("escape", "show_discovery", "Discovery"),
    ]

    active_feed: reactive[FeedKind] = reactive(FeedKind.DISCOVERY)

    def __init__(
        self,
        config: DiscoveryConfig | None = None,
        *,
        registry: PluginRegistry | None = None,
        fetcher: Fetcher | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        """Build the Discovery session with this App as notifier and navigator.

        Args:
            config: Settings; defaults to ``DiscoveryConfig()``.
            registry: Plugin registry override (tests).
            fetcher: Data source override (tests); defaults to the catalog.
            telemetry: Tracer for feed load spans. Defaults to no-op.
        """
        super().__init__()
        self.config = config or DiscoveryConfig()
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        self.session = create_session(
            self.config,
            registry=registry,
            fetcher=fetcher,
            notifier=self,
            navigator=self,
            telemetry=self.telemetry,
        )
        self.coordinator = self.session.coordinator
        self.navigation_log: list[tuple[str, dict]] = []
        self._selection_subscription = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield SearchBar()
        yield FilterPanel()
        with Horizontal(id="main"):
            with Vertical(id="feeds"):
                yield ResultsList(FeedKind.DISCOVERY)
                yield ResultsList(FeedKind.SEARCH)
            yield DetailPane()
        yield Static("", id="status-bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Fill pickers, follow selection changes, and load the discovery feed."""
        selection = self.coordinator.selection
        self.query_one(SearchBar).set_plugins(
            self.coordinator.plugin_choices(), selection.plugin_id
        )
        self.query_one(DetailPane).show_placeholder()

        # BehaviorSubject replays the current selection on subscribe
        self._selection_subscription = self.session.store.selection_changes.subscribe(
            on_next=self._on_selection
        )
        logger.info("App mounted with plugin %s", selection.plugin_id)
        self._track(FeedKind.DISCOVERY, self.coordinator.on_focus(FeedKind.DISCOVERY))

    def on_unmount(self) -> None:
        if self._selection_subscription is not None:
            self._selection_subscription.dispose()
            self._selection_subscription = None

    def on_app_focus(self, event: events.AppFocus) -> None:
        """Terminal regained focus: only a never-loaded discovery feed reloads."""
        if self.active_feed is FeedKind.DISCOVERY:
            self._track(FeedKind.DISCOVERY, self.coordinator.on_focus(FeedKind.DISCOVERY))

    # ------------------------------------------------------------------
    # Feed rendering
    # ------------------------------------------------------------------

    def _on_selection(self, selection: FilterSelection) -> None:
        """Recompute facet options and labels for the active plugin."""
        option_set = self.coordinator.resolver.resolve(selection.plugin_id)
        self.query_one(FilterPanel).show_selection(selection, option_set)
        self.query_one(SearchBar).show_plugin(selection.plugin_id)
        self._update_status_bar()

    def _track(self, kind: FeedKind, task: asyncio.Task | None) -> None:
        """Render *kind* now and again once *task* (if any) completes."""
        self._render_feed(kind)
        if task is not None:
            self.run_worker(self._await_load(kind, task), group=f"load-{kind.value}")

    async def _await_load(self, kind: FeedKind, task: asyncio.Task) -> None:
        outcome = await task
        logger.info("%s load finished: %s", kind.value, outcome.value)
        if outcome is not LoadOutcome.STALE:
            self._render_feed(kind)

    def _render_feed(self, kind: FeedKind) -> None:
        feed = self.session.store.feed(kind)
        results = self.query_one(f"#{kind.value}-list", ResultsList)
        results.update_items(self.coordinator.items(kind), feed.load_status, feed.exhausted)
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        if not self.query("#status-bar"):
            return
        kind = self.active_feed
        feed = self.session.store.feed(kind)
        parts = [
            self.coordinator.plugin_label(),
            f"{kind.value}: {len(feed.ordered_ids)} items",
            feed.load_status.value,
        ]
        if kind is FeedKind.SEARCH:
            parts.insert(1, repr(self.session.store.get_search_query().keyword))
        self.query_one("#status-bar", Static).update(" | ".join(parts) + " | Ctrl+P: Commands")

    def watch_active_feed(self, kind: FeedKind) -> None:
        self.set_class(kind is FeedKind.SEARCH, "show-search")
        self._update_status_bar()

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_facet_changed(self, event: FacetChanged) -> None:
        logger.info("Facet %s changed to %r", event.dimension.value, event.value)
        self._track(FeedKind.DISCOVERY, self.coordinator.change_facet(event.dimension, event.value))

    def on_source_changed(self, event: SourceChanged) -> None:
        logger.info("Search source changed to %s", event.plugin_id)
        self.coordinator.change_source(event.plugin_id)

    def on_search_submitted(self, event: SearchSubmitted) -> None:
        self._track(FeedKind.SEARCH, self.coordinator.submit_search(event.keyword))

    def on_load_more_requested(self, event: LoadMoreRequested) -> None:
        self._track(event.kind, self.coordinator.load_more(event.kind))

    def on_item_selected(self, event: ItemSelected) -> None:
        self.coordinator.open_detail(event.item_id)

    # ------------------------------------------------------------------
    # Notifier / Navigator
    # ------------------------------------------------------------------

    def notify_error(self, failure: FetchFailure) -> None:
        logger.error("Showing load failure for %s feed: %r", failure.feed.value, failure.cause)
        self.notify(
            str(failure.cause) or type(failure.cause).__name__,
            title="Load failed",
            severity="error",
        )

    def navigate(self, destination: str, params: Mapping[str, object] | None = None) -> None:
        params = dict(params or {})
        self.navigation_log.append((destination, params))
        logger.info("Navigate to %s %s", destination, params)
        detail = self.query_one(DetailPane)

        if destination == SEARCH:
            self.active_feed = FeedKind.SEARCH
        elif destination == DETAIL:
            item_id = str(params.get("item_id", ""))
            item = self.session.store.items.get(item_id)
            plugin_id = item.plugin_id if item is not None else self.coordinator.selection.plugin_id
            detail.show_item(item, self.coordinator.resolver.resolve(plugin_id), item_id)
        elif destination == PLUGIN_SETTINGS:
            detail.show_plugins(
                self.session.registry.list_plugins(), self.coordinator.selection.plugin_id
            )
        else:
            logger.warning("Unknown navigation destination %r", destination)

    # ------------------------------------------------------------------
    # Key binding actions
    # ------------------------------------------------------------------

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_load_more(self) -> None:
        self._track(self.active_feed, self.coordinator.load_more(self.active_feed))

    def action_refresh(self) -> None:
        kind = self.active_feed
        if kind is FeedKind.SEARCH and not self.session.store.get_search_query().keyword:
            return
        self._track(kind, self.coordinator.refresh(kind))

    def action_show_discovery(self) -> None:
        self.active_feed = FeedKind.DISCOVERY

    def action_plugin_settings(self) -> None:
        self.coordinator.open_plugin_settings()
