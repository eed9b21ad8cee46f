"""Session store: selection, search query, per-feed state and shared items.

The Coordinator and FeedLoader depend on the ``SelectionAccess`` and
``FeedAccess`` protocols only; ``SessionStore`` is the in-process
implementation that satisfies both. Selection changes are published on a
reactivex ``BehaviorSubject`` so views can recompute labels.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from reactivex.subject import BehaviorSubject

from discofeed.feed.fsm import FeedLoadSM, create_fsm
from discofeed.models import FeedKind, FilterSelection, Item, LoadStatus, SearchQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuerySnapshot:
    """Plugin, facet filters and keyword a feed was last reset with."""

    plugin_id: str = ""
    filters: dict[str, str] = field(default_factory=dict)
    keyword: str = ""


class FeedState:
    """Ordered ids plus load status of one feed.

    ``load_status`` is read-only; it mirrors the FSM which only FeedLoader
    drives. ``ordered_ids`` never holds duplicates. ``query`` is
    recorded at each reset so appended pages continue the same query.
    """

    def __init__(self, kind: FeedKind) -> None:
        self.kind = kind
        self.ordered_ids: list[str] = []
        self.page: int = 0
        self.latest_token: int = 0
        self.exhausted: bool = False
        self.last_error: BaseException | None = None
        self.query = QuerySnapshot()
        self._fsm: FeedLoadSM = create_fsm()

    @property
    def load_status(self) -> LoadStatus:
        return LoadStatus(self._fsm.current_state.value)

    @property
    def fsm(self) -> FeedLoadSM:
        return self._fsm

    def issue_token(self) -> int:
        """Bump and return the feed's latest request token."""
        self.latest_token += 1
        return self.latest_token

    def __repr__(self) -> str:
        return (
            f"FeedState(kind={self.kind.value}, status={self.load_status.value}, "
            f"ids={len(self.ordered_ids)}, page={self.page}, token={self.latest_token})"
        )


def should_load_on_focus(feed: FeedState) -> bool:
    """Focus/visibility events only trigger a load for a never-loaded feed."""
    return feed.load_status is LoadStatus.DEFAULT


class SelectionAccess(Protocol):
    """Read/write capability over the filter selection and search query."""

    def get_selection(self) -> FilterSelection: ...

    def set_selection(self, selection: FilterSelection) -> None: ...

    def get_search_query(self) -> SearchQuery: ...

    def set_search_query(self, query: SearchQuery) -> None: ...


class FeedAccess(Protocol):
    """Read/write capability over feed states and the item dictionary."""

    def feed(self, kind: FeedKind) -> FeedState: ...

    @property
    def items(self) -> Mapping[str, Item]: ...

    def upsert_items(self, items: Iterable[Item]) -> None: ...


class SessionStore:
    """State owned by one Discovery view for its lifetime."""

    def __init__(self, default_plugin: str) -> None:
        self._default_plugin = default_plugin
        self._selection = FilterSelection(plugin_id=default_plugin)
        self._search_query = SearchQuery(plugin_id=default_plugin)
        self._feeds: dict[FeedKind, FeedState] = {kind: FeedState(kind) for kind in FeedKind}
        self._items: dict[str, Item] = {}
        self.selection_changes: BehaviorSubject[FilterSelection] = BehaviorSubject(
            self._selection
        )

    # -- selection --------------------------------------------------------

    def get_selection(self) -> FilterSelection:
        return self._selection

    def set_selection(self, selection: FilterSelection) -> None:
        if selection == self._selection:
            return
        self._selection = selection
        self.selection_changes.on_next(selection)

    def get_search_query(self) -> SearchQuery:
        return self._search_query

    def set_search_query(self, query: SearchQuery) -> None:
        self._search_query = query

    # -- feeds and items --------------------------------------------------

    def feed(self, kind: FeedKind) -> FeedState:
        return self._feeds[FeedKind(kind)]

    @property
    def items(self) -> Mapping[str, Item]:
        return self._items

    def upsert_items(self, items: Iterable[Item]) -> None:
        """Insert or overwrite items by id. The dictionary never shrinks."""
        for item in items:
            self._items[item.id] = item

    def records(self, kind: FeedKind) -> list[Item]:
        """Items of a feed in display order."""
        return [self._items[i] for i in self.feed(kind).ordered_ids if i in self._items]

    def reset(self) -> None:
        """Return selection and feeds to their mount-time defaults.

        The item dictionary is kept; it is only ever appended to.
        """
        self._feeds = {kind: FeedState(kind) for kind in FeedKind}
        self._search_query = SearchQuery(plugin_id=self._default_plugin)
        self.set_selection(FilterSelection(plugin_id=self._default_plugin))
        logger.info("Session store reset to plugin %s", self._default_plugin)
