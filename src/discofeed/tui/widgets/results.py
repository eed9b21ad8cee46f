"""Item cards and the scrollable list that holds one feed.

ItemCard renders a single record. ResultsList renders a feed's records
in display order with a footer that reflects its load status.
"""

from __future__ import annotations

import logging

from textual import events
from textual.containers import VerticalScroll
from textual.widgets import Static

from rich.text import Text

from discofeed.models import FeedKind, Item, LoadStatus
from discofeed.tui.messages import ItemSelected, LoadMoreRequested

logger = logging.getLogger(__name__)


class ItemCard(Static):
    """One item: title, author and facet metadata. Posts ItemSelected."""

    DEFAULT_CSS = """
    ItemCard {
        padding: 0 1;
        margin: 0 0 1 0;
        background: $surface;
        border: solid $primary-background;
        height: auto;
    }
    ItemCard:hover {
        background: $primary-background;
    }
    ItemCard:focus {
        border: solid $accent;
    }
    """

    can_focus = True

    def __init__(self, item: Item, position: int) -> None:
        self.item = item
        self.position = position

        display = Text()
        display.append(f"{position + 1}. ", style="dim")
        display.append(item.title, style="bold")
        if item.author:
            display.append(f"  {item.author}", style="italic")
        meta = " | ".join(v for v in (item.status, item.region, item.updated) if v)
        if meta:
            display.append("\n")
            display.append(meta, style="cyan")

        super().__init__(display, classes="item-card")

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(ItemSelected(self.item.id))

    def on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            event.stop()
            self.post_message(ItemSelected(self.item.id))


class ResultsList(VerticalScroll):
    """Scrollable cards for one feed plus a status footer."""

    DEFAULT_CSS = """
    ResultsList {
        width: 100%;
        height: 1fr;
    }
    ResultsList .feed-footer {
        text-align: center;
        color: $text-muted;
        text-style: italic;
    }
    """

    def __init__(self, kind: FeedKind) -> None:
        super().__init__(id=f"{kind.value}-list")
        self.kind = kind
        self._rendered_ids: list[str] = []

    @property
    def rendered_ids(self) -> list[str]:
        return list(self._rendered_ids)

    def update_items(self, items: list[Item], status: LoadStatus, exhausted: bool = False) -> None:
        """Re-render cards for *items* and a footer for *status*."""
        self.remove_children()
        self._rendered_ids = [i.id for i in items]
        for position, item in enumerate(items):
            self.mount(ItemCard(item, position))
        self.mount(Static(self._footer(len(items), status, exhausted), classes="feed-footer"))

    def update_status(self, text: str) -> None:
        self.remove_children()
        self._rendered_ids = []
        self.mount(Static(text, classes="feed-footer"))

    @staticmethod
    def _footer(count: int, status: LoadStatus, exhausted: bool) -> str:
        if status is LoadStatus.PENDING:
            return "Loading..."
        if status is LoadStatus.REJECTED:
            return "Load failed. Ctrl+R to retry"
        if count == 0:
            return "Nothing here"
        if exhausted:
            return f"{count} items, end of list"
        return f"{count} items. Ctrl+L to load more"

    def on_key(self, event: events.Key) -> None:
        if event.key == "end":
            logger.debug("End of %s list reached", self.kind.value)
            self.post_message(LoadMoreRequested(self.kind))
