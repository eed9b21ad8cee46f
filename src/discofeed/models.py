"""Data models and enums for the Discovery feed controller."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum


class Dimension(str, Enum):
    """A filterable facet of the discovery feed."""

    TYPE = "type"
    REGION = "region"
    STATUS = "status"
    SORT = "sort"


# Canonical display order of facet controls
DIMENSIONS: tuple[Dimension, ...] = (
    Dimension.TYPE,
    Dimension.REGION,
    Dimension.STATUS,
    Dimension.SORT,
)


class FeedKind(str, Enum):
    """One independently paginated list context."""

    DISCOVERY = "discovery"
    SEARCH = "search"


class LoadMode(str, Enum):
    """Whether a fetch replaces or extends a feed's result sequence."""

    RESET = "reset"
    APPEND = "append"


class LoadStatus(str, Enum):
    """Async load status of a feed, mirrored from its FSM state value."""

    DEFAULT = "default"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class LoadOutcome(str, Enum):
    """What happened to a completed fetch."""

    APPLIED = "applied"
    STALE = "stale"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Option:
    """One selectable (value, label) pair of a facet vocabulary."""

    value: str
    label: str


@dataclass(frozen=True)
class OptionSet:
    """The four facet vocabularies a plugin advertises.

    Any vocabulary may be empty. An unknown plugin resolves to
    ``OptionSet()`` which offers no filters at all.
    """

    type_options: tuple[Option, ...] = ()
    region_options: tuple[Option, ...] = ()
    status_options: tuple[Option, ...] = ()
    sort_options: tuple[Option, ...] = ()

    def for_dimension(self, dimension: Dimension) -> tuple[Option, ...]:
        """Return the vocabulary for *dimension*."""
        return getattr(self, f"{Dimension(dimension).value}_options")

    def is_empty(self) -> bool:
        """Return True if no dimension has any option."""
        return not any(self.for_dimension(d) for d in DIMENSIONS)

    @classmethod
    def from_dict(cls, data: dict) -> OptionSet:
        """Build from ``{"typeOptions": [{"value":..,"label":..}], ...}``.

        Both camelCase and snake_case keys are accepted.
        """

        def _opts(dimension: Dimension) -> tuple[Option, ...]:
            raw = data.get(f"{dimension.value}Options")
            if raw is None:
                raw = data.get(f"{dimension.value}_options", [])
            return tuple(Option(str(o["value"]), str(o.get("label", ""))) for o in raw)

        return cls(
            type_options=_opts(Dimension.TYPE),
            region_options=_opts(Dimension.REGION),
            status_options=_opts(Dimension.STATUS),
            sort_options=_opts(Dimension.SORT),
        )


EMPTY_OPTIONS = OptionSet()


@dataclass(frozen=True)
class PluginInfo:
    """A registered content source and its static option vocabularies."""

    value: str
    label: str
    disabled: bool = False
    options: OptionSet = field(default_factory=OptionSet)


@dataclass(frozen=True)
class FilterSelection:
    """Currently chosen facet values plus the active plugin.

    Immutable: changes go through ``with_facet`` / ``with_plugin`` and are
    written back to the session store.
    """

    plugin_id: str
    type: str = ""
    region: str = ""
    status: str = ""
    sort: str = ""

    def facet(self, dimension: Dimension) -> str:
        """Return the raw selected value for *dimension*."""
        return getattr(self, Dimension(dimension).value)

    def with_facet(self, dimension: Dimension, value: str) -> FilterSelection:
        return replace(self, **{Dimension(dimension).value: value})

    def with_plugin(self, plugin_id: str) -> FilterSelection:
        return replace(self, plugin_id=plugin_id)

    def to_filters(self) -> dict[str, str]:
        """Facet values keyed by dimension name, as passed to the fetcher."""
        return {d.value: self.facet(d) for d in DIMENSIONS}


@dataclass(frozen=True)
class SearchQuery:
    """Keyword and plugin captured when a search is submitted."""

    keyword: str = ""
    plugin_id: str = ""


@dataclass(slots=True)
class Item:
    """A content record as returned by a source plugin."""

    id: str
    plugin_id: str
    title: str
    author: str = ""
    cover: str = ""
    type: str = ""
    region: str = ""
    status: str = ""
    updated: str = ""
    popularity: int = 0
    extra: dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Convert to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Item:
        known = {f for f in cls.__dataclass_fields__}
        kwargs = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if extra:
            kwargs["extra"] = {**kwargs.get("extra", {}), **extra}
        return cls(**kwargs)
