"""In-memory catalog implementing the Fetcher protocol.

Backs the CLI and the TUI when no remote source is wired in. Queries run
in a worker thread via ``asyncio.to_thread()`` so a large catalog does
not block the event loop, and an optional artificial latency makes
out-of-order responses reproducible.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from collections.abc import Mapping
from pathlib import Path

from discofeed.exceptions import ConfigError
from discofeed.models import Dimension, Item
from discofeed.plugins.builtin import BUILTIN_PLUGINS

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20

# Sort option value -> (item attribute, descending)
_SORT_KEYS: dict[str, tuple[str, bool]] = {
    "latest": ("updated", True),
    "popular": ("popularity", True),
    "pop": ("popularity", True),
    "rate": ("popularity", True),
}


class CatalogService:
    """Async facade over a list of items grouped by plugin.

    Usage::

        svc = CatalogService.from_json(Path("data/catalog.json"))
        page = await svc.fetch_discovery("MHG", {"status": "wanjie"}, 1)
    """

    def __init__(
        self,
        items: list[Item],
        page_size: int = DEFAULT_PAGE_SIZE,
        latency: float = 0.0,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._items = list(items)
        self.page_size = page_size
        self.latency = latency

    def __len__(self) -> int:
        return len(self._items)

    async def fetch_discovery(
        self, plugin_id: str, filters: Mapping[str, str], page: int
    ) -> list[Item]:
        """Return one page of *plugin_id*'s items matching *filters*.

        Empty facet values impose no constraint. The ``sort`` facet orders
        results; unknown sort values keep catalog order.
        """
        await self._delay()
        return await asyncio.to_thread(self._discover, plugin_id, dict(filters), page)

    async def fetch_search(self, plugin_id: str, keyword: str, page: int) -> list[Item]:
        """Return one page of *plugin_id*'s items whose title or author contains *keyword*."""
        await self._delay()
        return await asyncio.to_thread(self._search, plugin_id, keyword, page)

    async def _delay(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    def _paginate(self, items: list[Item], page: int) -> list[Item]:
        if page < 1:
            return []
        start = (page - 1) * self.page_size
        return items[start : start + self.page_size]

    def _discover(self, plugin_id: str, filters: dict[str, str], page: int) -> list[Item]:
        matches = [i for i in self._items if i.plugin_id == plugin_id]
        for dimension in (Dimension.TYPE, Dimension.REGION, Dimension.STATUS):
            wanted = filters.get(dimension.value, "")
            if wanted:
                matches = [i for i in matches if getattr(i, dimension.value) == wanted]

        sort_key = _SORT_KEYS.get(filters.get(Dimension.SORT.value, ""))
        if sort_key is not None:
            attr, descending = sort_key
            matches.sort(key=lambda i: getattr(i, attr), reverse=descending)

        logger.debug(
            "Discovery query plugin=%s filters=%s page=%d matched=%d",
            plugin_id, filters, page, len(matches),
        )
        return self._paginate(matches, page)

    def _search(self, plugin_id: str, keyword: str, page: int) -> list[Item]:
        needle = keyword.strip().lower()
        matches = [
            i
            for i in self._items
            if i.plugin_id == plugin_id
            and (needle in i.title.lower() or needle in i.author.lower())
        ]
        logger.debug(
            "Search query plugin=%s keyword=%r page=%d matched=%d",
            plugin_id, keyword, page, len(matches),
        )
        return self._paginate(matches, page)

    @classmethod
    def from_json(
        cls, path: Path, page_size: int = DEFAULT_PAGE_SIZE, latency: float = 0.0
    ) -> CatalogService:
        """Load a catalog from a JSON list of item objects.

        Raises:
            ConfigError: If the file cannot be read or an entry is malformed.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read catalog {path}: {exc}") from exc

        if not isinstance(data, list):
            raise ConfigError(f"Catalog {path} must contain a JSON list")
        try:
            items = [Item.from_dict(entry) for entry in data]
        except (TypeError, AttributeError) as exc:
            raise ConfigError(f"Malformed catalog entry in {path}: {exc}") from exc

        logger.info("Loaded %d catalog items from %s", len(items), path)
        return cls(items, page_size=page_size, latency=latency)


_TITLE_WORDS = (
    "Blade", "Moon", "Academy", "Dragon", "Garden", "Detective", "Spirit",
    "Chef", "Pilot", "Shadow", "Summer", "Kingdom", "Witch", "Ramen", "Star",
)


def sample_catalog(per_plugin: int = 60, seed: int = 7) -> list[Item]:
    """Deterministic demo items for every built-in plugin.

    Facet values are drawn from each plugin's own vocabularies so every
    filter combination returns something.
    """
    rng = random.Random(seed)
    items: list[Item] = []
    for plugin in BUILTIN_PLUGINS:
        opts = plugin.options

        def pick(dimension: Dimension) -> str:
            values = [o.value for o in opts.for_dimension(dimension) if o.value]
            return rng.choice(values) if values else ""

        for n in range(1, per_plugin + 1):
            title = f"{rng.choice(_TITLE_WORDS)} {rng.choice(_TITLE_WORDS)} {n}"
            items.append(
                Item(
                    id=f"{plugin.value}&{n}",
                    plugin_id=plugin.value,
                    title=title,
                    author=f"Author {rng.randint(1, 25)}",
                    type=pick(Dimension.TYPE),
                    region=pick(Dimension.REGION),
                    status=pick(Dimension.STATUS),
                    updated=f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
                    popularity=rng.randint(0, 10_000),
                )
            )
    return items
