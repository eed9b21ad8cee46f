"""Exception types raised by the Discovery feed controller."""

from __future__ import annotations

from discofeed.models import FeedKind


class FeedError(Exception):
    """Base class for discofeed errors."""


class FetchFailure(FeedError):
    """A fetch collaborator raised while loading a feed.

    Routed to the feed's Rejected state and to the notifier; never
    propagated out of the loader.
    """

    def __init__(self, feed: FeedKind, token: int, cause: BaseException) -> None:
        self.feed = feed
        self.token = token
        self.cause = cause
        super().__init__(f"{feed.value} feed load #{token} failed: {cause}")


class AppendBeforeResetError(FeedError):
    """An Append load was requested before the feed was ever loaded."""

    def __init__(self, feed: FeedKind) -> None:
        self.feed = feed
        super().__init__(
            f"cannot append to the {feed.value} feed before a reset load has been requested"
        )


class ConfigError(FeedError):
    """A configuration or plugin registry file could not be loaded."""
