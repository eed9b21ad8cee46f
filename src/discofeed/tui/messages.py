"""Custom Textual Message types posted by Discovery widgets.

Widgets never call the coordinator themselves. They post these messages
and DiscoveryApp translates each one into a coordinator intent.
"""

from __future__ import annotations

from textual.message import Message

from discofeed.models import Dimension, FeedKind


class FacetChanged(Message):
    """Fired by the filter panel when the user picks a facet option."""

    def __init__(self, dimension: Dimension, value: str) -> None:
        self.dimension = dimension
        self.value = value
        super().__init__()


class SourceChanged(Message):
    """Fired by the search bar's plugin picker."""

    def __init__(self, plugin_id: str) -> None:
        self.plugin_id = plugin_id
        super().__init__()


class SearchSubmitted(Message):
    """Fired when the user presses Enter in the search input."""

    def __init__(self, keyword: str) -> None:
        self.keyword = keyword
        super().__init__()


class LoadMoreRequested(Message):
    def __init__(self, kind: FeedKind) -> None:
        self.kind = kind
        super().__init__()


class ItemSelected(Message):
    """Fired when an item card is clicked or activated with Enter."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__()
