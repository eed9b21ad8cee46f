"""Collaborator interfaces and the bundled catalog fetcher.

Hosts (CLI, TUI, tests) import collaborators from this package.
"""

from discofeed.services.catalog import CatalogService, sample_catalog
from discofeed.services.ports import (
    DETAIL,
    PLUGIN_SETTINGS,
    SEARCH,
    Fetcher,
    Navigator,
    Notifier,
)

__all__ = [
    "CatalogService",
    "DETAIL",
    "Fetcher",
    "Navigator",
    "Notifier",
    "PLUGIN_SETTINGS",
    "SEARCH",
    "sample_catalog",
]
