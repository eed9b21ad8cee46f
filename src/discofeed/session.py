"""Wiring of one Discovery session: store, loader, resolver and coordinator."""

from __future__ import annotations

from dataclasses import dataclass

from discofeed.config import DiscoveryConfig
from discofeed.coordinator import DiscoveryCoordinator
from discofeed.feed.loader import FeedLoader
from discofeed.feed.store import SessionStore
from discofeed.options import OptionResolver
from discofeed.plugins.registry import PluginRegistry
from discofeed.services.ports import Fetcher, Navigator, Notifier
from discofeed.telemetry import Telemetry


@dataclass
class DiscoverySession:
    """Everything a host needs to drive the Discovery view."""

    registry: PluginRegistry
    store: SessionStore
    loader: FeedLoader
    coordinator: DiscoveryCoordinator


def create_session(
    config: DiscoveryConfig | None = None,
    *,
    registry: PluginRegistry | None = None,
    fetcher: Fetcher | None = None,
    notifier: Notifier | None = None,
    navigator: Navigator | None = None,
    telemetry: Telemetry | None = None,
) -> DiscoverySession:
    """Build a session, defaulting collaborators from *config*.

    Args:
        config: Settings; defaults to ``DiscoveryConfig()``.
        registry: Plugin registry; defaults to ``config.build_registry()``.
        fetcher: Data source; defaults to ``config.build_catalog()``.
        notifier: Receives fetch failures.
        navigator: Receives Detail/Search/PluginSettings transitions.
        telemetry: Span facade for the loader.
    """
    config = config or DiscoveryConfig()
    registry = registry if registry is not None else config.build_registry()
    fetcher = fetcher if fetcher is not None else config.build_catalog()

    store = SessionStore(default_plugin=config.default_plugin)
    loader = FeedLoader(store, store, fetcher, notifier=notifier, telemetry=telemetry)
    coordinator = DiscoveryCoordinator(
        store, store, loader, OptionResolver(registry), navigator=navigator
    )
    return DiscoverySession(registry=registry, store=store, loader=loader, coordinator=coordinator)
