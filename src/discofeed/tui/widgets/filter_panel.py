"""Filter panel with one dropdown per discovery facet.

Dropdown options come from the active plugin's vocabularies and are
rebuilt whenever the selection changes. A facet whose vocabulary offers
no choice has its dropdown hidden. Picking an option posts FacetChanged
for the App to handle.
"""

from __future__ import annotations

import logging

from textual.containers import Horizontal, Vertical
from textual.widgets import Select, Static

from discofeed.models import DIMENSIONS, Dimension, FilterSelection, OptionSet
from discofeed.options import has_control, label_for
from discofeed.tui.messages import FacetChanged

logger = logging.getLogger(__name__)


class FilterPanel(Vertical):
    """Type / region / status / sort dropdowns plus a resolved-label summary."""

    DEFAULT_CSS = """
    FilterPanel {
        height: auto;
        padding: 0 1;
        border-bottom: solid $primary;
        background: $surface;
    }
    FilterPanel Horizontal {
        height: auto;
    }
    FilterPanel Select {
        width: 1fr;
    }
    FilterPanel #facet-labels {
        color: $text-muted;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="filter-panel")
        self._selection: FilterSelection | None = None
        self._plugin_id: str | None = None

    def compose(self):
        """Yield a dropdown per facet and the label summary line."""
        with Horizontal():
            for dimension in DIMENSIONS:
                yield Select(
                    [],
                    allow_blank=True,
                    prompt=dimension.value.capitalize(),
                    id=f"facet-{dimension.value}",
                )
        yield Static("", id="facet-labels")

    def show_selection(self, selection: FilterSelection, option_set: OptionSet) -> None:
        """Render *selection* against the active plugin's *option_set*.

        Options are only rebuilt when the plugin changes. Labels are
        recomputed every time.
        """
        previous_plugin, self._plugin_id = self._plugin_id, selection.plugin_id
        self._selection = selection
        summary: list[str] = []

        for dimension in DIMENSIONS:
            vocabulary = option_set.for_dimension(dimension)
            select = self.query_one(f"#facet-{dimension.value}", Select)
            select.display = has_control(vocabulary)
            if not select.display:
                continue

            if previous_plugin != selection.plugin_id:
                select.set_options([(o.label or o.value, o.value) for o in vocabulary])

            raw = selection.facet(dimension)
            if any(o.value == raw for o in vocabulary):
                if select.value != raw:
                    select.value = raw
            elif select.value is not Select.NULL:
                select.value = Select.NULL

            summary.append(f"{dimension.value.capitalize()}: {label_for(vocabulary, raw)}")

        self.query_one("#facet-labels", Static).update(" | ".join(summary) or "No filters")

    def visible_dimensions(self) -> list[Dimension]:
        return [
            d for d in DIMENSIONS if self.query_one(f"#facet-{d.value}", Select).display
        ]

    def on_select_changed(self, event: Select.Changed) -> None:
        """Post FacetChanged for user picks; ignore echoes of programmatic sets."""
        event.stop()
        select_id = event.select.id or ""
        if not select_id.startswith("facet-") or event.value is Select.NULL:
            return
        dimension = Dimension(select_id.removeprefix("facet-"))
        if self._selection is not None and self._selection.facet(dimension) == event.value:
            return
        logger.debug("Facet dropdown %s picked %r", dimension.value, event.value)
        self.post_message(FacetChanged(dimension, str(event.value)))
