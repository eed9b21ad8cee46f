"""Widgets of the Discovery terminal UI."""

from .detail import DetailPane
from .filter_panel import FilterPanel
from .results import ItemCard, ResultsList
from .search_bar import SearchBar

__all__ = [
    "DetailPane",
    "FilterPanel",
    "ItemCard",
    "ResultsList",
    "SearchBar",
]
