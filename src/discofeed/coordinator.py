"""Filter/search coordinator: turns user intents into state changes and loads.

Discovery facet and source changes force an immediate reset of the
discovery feed, superseding anything in flight. Picking a source for
search only records it; the search feed loads when a keyword is
submitted. The discovery and search feeds are independent: neither kind
of change touches the other feed.
"""

from __future__ import annotations

import asyncio
import logging

from discofeed.feed.loader import FeedLoader
from discofeed.feed.store import FeedAccess, SelectionAccess, should_load_on_focus
from discofeed.models import (
    Dimension,
    FeedKind,
    FilterSelection,
    Item,
    LoadMode,
    LoadStatus,
    Option,
    OptionSet,
    SearchQuery,
)
from discofeed.options import OptionResolver
from discofeed.services.ports import DETAIL, PLUGIN_SETTINGS, SEARCH, Navigator

logger = logging.getLogger(__name__)


class DiscoveryCoordinator:
    """Single entry point for the Discovery view's user events.

    Depends only on the store capability protocols, the loader, the
    option resolver and an optional navigator.
    """

    def __init__(
        self,
        selection: SelectionAccess,
        feeds: FeedAccess,
        loader: FeedLoader,
        resolver: OptionResolver,
        navigator: Navigator | None = None,
    ) -> None:
        self._selection = selection
        self._feeds = feeds
        self._loader = loader
        self._resolver = resolver
        self._navigator = navigator

    @property
    def selection(self) -> FilterSelection:
        return self._selection.get_selection()

    @property
    def resolver(self) -> OptionResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def on_focus(self, kind: FeedKind = FeedKind.DISCOVERY) -> asyncio.Task | None:
        """View gained focus: load only if the feed has never been loaded."""
        if not should_load_on_focus(self._feeds.feed(kind)):
            return None
        return self._loader.request_load(kind, LoadMode.RESET)

    def change_source(
        self, plugin_id: str, context: FeedKind = FeedKind.SEARCH
    ) -> asyncio.Task | None:
        """Make *plugin_id* the active plugin.

        From the search source picker (default) nothing is fetched until a
        search is submitted, and the discovery feed keeps paging the plugin
        it was last reset with. From the discovery context the discovery
        feed is reset immediately.
        """
        current = self._selection.get_selection()
        self._selection.set_selection(current.with_plugin(plugin_id))
        logger.info("Source changed to %s (%s context)", plugin_id, FeedKind(context).value)
        if FeedKind(context) is FeedKind.DISCOVERY:
            return self._loader.request_load(FeedKind.DISCOVERY, LoadMode.RESET, supersede=True)
        return None

    def change_facet(self, dimension: Dimension, value: str) -> asyncio.Task | None:
        """Set one discovery facet and reset the discovery feed."""
        dimension = Dimension(dimension)
        current = self._selection.get_selection()
        if not self._resolver.resolve(current.plugin_id).for_dimension(dimension):
            logger.warning(
                "Facet %s set to %r but plugin %s offers no %s options",
                dimension.value, value, current.plugin_id, dimension.value,
            )
        self._selection.set_selection(current.with_facet(dimension, value))
        return self._loader.request_load(FeedKind.DISCOVERY, LoadMode.RESET, supersede=True)

    def submit_search(self, keyword: str, plugin_id: str | None = None) -> asyncio.Task | None:
        """Reset the search feed for *keyword* and present the search view."""
        current = self._selection.get_selection()
        plugin_id = plugin_id or current.plugin_id
        if plugin_id != current.plugin_id:
            self._selection.set_selection(current.with_plugin(plugin_id))
        self._selection.set_search_query(SearchQuery(keyword=keyword, plugin_id=plugin_id))
        task = self._loader.request_load(FeedKind.SEARCH, LoadMode.RESET, supersede=True)
        self._navigate(SEARCH, {"keyword": keyword})
        return task

    def load_more(self, kind: FeedKind = FeedKind.DISCOVERY) -> asyncio.Task | None:
        """Fetch the next page of *kind*.

        Ignored (with a warning) for a feed that was never loaded.
        """
        kind = FeedKind(kind)
        if self._feeds.feed(kind).load_status is LoadStatus.DEFAULT:
            logger.warning("Ignored load-more on %s feed: nothing loaded yet", kind.value)
            return None
        return self._loader.request_load(kind, LoadMode.APPEND)

    def refresh(self, kind: FeedKind = FeedKind.DISCOVERY) -> asyncio.Task | None:
        """Explicit reload/retry of *kind*; dropped while a load is pending."""
        return self._loader.request_load(kind, LoadMode.RESET)

    def open_detail(self, item_id: str) -> None:
        self._navigate(DETAIL, {"item_id": item_id})

    def open_plugin_settings(self) -> None:
        self._navigate(PLUGIN_SETTINGS, {})

    # ------------------------------------------------------------------
    # Derived view state
    # ------------------------------------------------------------------

    def option_set(self) -> OptionSet:
        return self._resolver.resolve(self.selection.plugin_id)

    def labels(self) -> dict[Dimension, str]:
        return self._resolver.labels(self.selection)

    def visible_dimensions(self) -> list[Dimension]:
        return self._resolver.visible_dimensions(self.selection.plugin_id)

    def plugin_choices(self) -> list[Option]:
        return self._resolver.plugin_choices()

    def plugin_label(self) -> str:
        return self._resolver.plugin_label(self.selection.plugin_id)

    def items(self, kind: FeedKind = FeedKind.DISCOVERY) -> list[Item]:
        """Records of *kind* in display order."""
        catalog = self._feeds.items
        return [catalog[i] for i in self._feeds.feed(kind).ordered_ids if i in catalog]

    def is_loading(self, kind: FeedKind = FeedKind.DISCOVERY) -> bool:
        return self._feeds.feed(kind).load_status is LoadStatus.PENDING

    def _navigate(self, destination: str, params: dict[str, object]) -> None:
        if self._navigator is None:
            logger.debug("No navigator; dropped navigation to %s", destination)
            return
        self._navigator.navigate(destination, params)
