"""Collaborator interfaces consumed by the feed loader and coordinator.

Fetching, error display and navigation belong to the host application.
The core only sees these protocols.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from discofeed.models import Item

if TYPE_CHECKING:
    from discofeed.exceptions import FetchFailure

# Navigation destinations
DETAIL = "Detail"
SEARCH = "Search"
PLUGIN_SETTINGS = "PluginSettings"


class Fetcher(Protocol):
    """Per-plugin data source. Raising any Exception signals a failed fetch."""

    async def fetch_discovery(
        self, plugin_id: str, filters: Mapping[str, str], page: int
    ) -> list[Item]: ...

    async def fetch_search(self, plugin_id: str, keyword: str, page: int) -> list[Item]: ...


class Notifier(Protocol):
    """Receives fetch failures for display. Never told about successes."""

    def notify_error(self, failure: FetchFailure) -> None: ...


class Navigator(Protocol):
    """Presents a named destination with parameters."""

    def navigate(self, destination: str, params: Mapping[str, object] | None = None) -> None: ...
