"""Feed state, load-status FSM and the loader that drives fetches."""

from discofeed.feed.fsm import FeedLoadSM, create_fsm
from discofeed.feed.loader import FeedLoader, LoadRequest
from discofeed.feed.store import (
    FeedAccess,
    FeedState,
    QuerySnapshot,
    SelectionAccess,
    SessionStore,
    should_load_on_focus,
)

__all__ = [
    "FeedAccess",
    "FeedLoadSM",
    "FeedLoader",
    "FeedState",
    "LoadRequest",
    "QuerySnapshot",
    "SelectionAccess",
    "SessionStore",
    "create_fsm",
    "should_load_on_focus",
]
