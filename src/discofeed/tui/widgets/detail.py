"""Detail pane: item details or the plugin settings listing."""

from __future__ import annotations

from textual.containers import VerticalScroll
from textual.widgets import Static

from rich.table import Table
from rich.text import Text

from discofeed.models import Dimension, Item, OptionSet, PluginInfo
from discofeed.options import label_for


class DetailPane(VerticalScroll):
    """Right-hand pane. Shows whichever destination was last navigated to."""

    DEFAULT_CSS = """
    DetailPane {
        width: 1fr;
        padding: 0 1;
        border-left: solid $accent;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="detail-pane")
        self.current_item_id: str | None = None
        self._body = Static("", id="detail-body")

    def compose(self):
        yield self._body

    def show_placeholder(self) -> None:
        self.current_item_id = None
        self._body.update(Text("Select an item to see its details.", style="dim italic"))

    def show_item(self, item: Item | None, option_set: OptionSet, item_id: str) -> None:
        """Show *item*, labelling its facet values with the plugin's vocabularies."""
        self.current_item_id = item_id
        if item is None:
            self._body.update(Text(f"Item {item_id} is not loaded.", style="yellow"))
            return

        table = Table(show_header=False, box=None, title=item.title, title_style="bold")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Author", item.author or "-")
        for dimension in (Dimension.TYPE, Dimension.REGION, Dimension.STATUS):
            raw = getattr(item, dimension.value)
            if raw:
                table.add_row(
                    dimension.value.capitalize(),
                    label_for(option_set.for_dimension(dimension), raw),
                )
        if item.updated:
            table.add_row("Updated", item.updated)
        table.add_row("Source", item.plugin_id)
        table.add_row("Id", item.id)
        self._body.update(table)

    def show_plugins(self, plugins: list[PluginInfo], active: str) -> None:
        """Plugin settings view: every plugin with its enabled flag."""
        self.current_item_id = None
        table = Table(title="Plugins", show_header=True)
        table.add_column("Plugin", style="cyan")
        table.add_column("Label")
        table.add_column("Enabled", justify="center")
        for plugin in plugins:
            marker = " *" if plugin.value == active else ""
            table.add_row(
                plugin.value + marker,
                plugin.label,
                "no" if plugin.disabled else "yes",
            )
        self._body.update(table)
