"""Discovery feed controller: per-plugin filters, paged feeds and search."""

__version__ = "0.1.0"

from discofeed.models import (
    Dimension,
    FeedKind,
    FilterSelection,
    Item,
    LoadMode,
    LoadOutcome,
    LoadStatus,
    Option,
    OptionSet,
    PluginInfo,
)

__all__ = [
    "Dimension",
    "FeedKind",
    "FilterSelection",
    "Item",
    "LoadMode",
    "LoadOutcome",
    "LoadStatus",
    "Option",
    "OptionSet",
    "PluginInfo",
    "__version__",
]
