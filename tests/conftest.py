"""Shared pytest fixtures for discofeed tests.

Provides a small plugin registry, a fetcher whose responses the test
resolves by hand (to control completion order), recording notifier and
navigator collaborators, and a wired session store/loader/coordinator.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

import pytest

from discofeed.coordinator import DiscoveryCoordinator
from discofeed.feed.loader import FeedLoader
from discofeed.feed.store import SessionStore
from discofeed.models import Item, Option, OptionSet, PluginInfo
from discofeed.options import OptionResolver
from discofeed.plugins.registry import PluginRegistry
from discofeed.telemetry import Telemetry


def make_items(*ids: str, plugin_id: str = "A", title: str = "") -> list[Item]:
    """Items with the given ids; title defaults to ``Title <id>``."""
    return [Item(id=i, plugin_id=plugin_id, title=title or f"Title {i}") for i in ids]


async def settle(rounds: int = 5) -> None:
    """Let freshly scheduled tasks run up to their first await."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ControlledFetcher:
    """Fetcher whose calls block until the test resolves or fails them."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self._futures: list[asyncio.Future] = []

    async def fetch_discovery(
        self, plugin_id: str, filters: Mapping[str, str], page: int
    ) -> list[Item]:
        return await self._wait(
            {"feed": "discovery", "plugin_id": plugin_id, "filters": dict(filters), "page": page}
        )

    async def fetch_search(self, plugin_id: str, keyword: str, page: int) -> list[Item]:
        return await self._wait(
            {"feed": "search", "plugin_id": plugin_id, "keyword": keyword, "page": page}
        )

    async def _wait(self, call: dict) -> list[Item]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(call)
        self._futures.append(future)
        return await future

    def resolve(self, index: int, items: list[Item]) -> None:
        self._futures[index].set_result(items)

    def fail(self, index: int, exc: Exception) -> None:
        self._futures[index].set_exception(exc)


class RecordingNotifier:
    def __init__(self) -> None:
        self.failures: list = []

    def notify_error(self, failure) -> None:
        self.failures.append(failure)


class RecordingNavigator:
    def __init__(self) -> None:
        self.visits: list[tuple[str, dict]] = []

    def navigate(self, destination: str, params=None) -> None:
        self.visits.append((destination, dict(params or {})))


PLUGIN_A = PluginInfo(
    value="A",
    label="Plugin A",
    options=OptionSet(
        type_options=(Option("", "All"), Option("action", "Action")),
        region_options=(Option("", "All"), Option("jp", "Japan")),
        status_options=(Option("", "Any"), Option("X", "Ongoing"), Option("Y", "Completed")),
        sort_options=(Option("latest", "Latest"), Option("pop", "Popular")),
    ),
)

PLUGIN_B = PluginInfo(value="B", label="Plugin B")

PLUGIN_OFF = PluginInfo(
    value="OFF",
    label="Disabled plugin",
    disabled=True,
    options=OptionSet(sort_options=(Option("latest", "Latest"),)),
)


@pytest.fixture
def registry() -> PluginRegistry:
    """Registry with A (all facets), B (no facets) and a disabled plugin."""
    return PluginRegistry([PLUGIN_A, PLUGIN_B, PLUGIN_OFF])


@pytest.fixture
def resolver(registry: PluginRegistry) -> OptionResolver:
    return OptionResolver(registry)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(default_plugin="A")


@pytest.fixture
def fetcher() -> ControlledFetcher:
    return ControlledFetcher()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def telemetry_pair():
    """``(Telemetry, InMemorySpanExporter)`` for span assertions."""
    return Telemetry.for_testing()


@pytest.fixture
def loader(store, fetcher, notifier, telemetry_pair) -> FeedLoader:
    telemetry, _ = telemetry_pair
    return FeedLoader(store, store, fetcher, notifier=notifier, telemetry=telemetry)


@pytest.fixture
def coordinator(store, loader, resolver, navigator) -> DiscoveryCoordinator:
    return DiscoveryCoordinator(store, store, loader, resolver, navigator=navigator)
