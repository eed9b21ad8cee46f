"""Search bar: keyword input plus the search source picker.

Enter posts SearchSubmitted. Picking a source posts SourceChanged; the
search itself waits until the user submits a keyword.
"""

from __future__ import annotations

import logging

from textual.containers import Horizontal
from textual.widgets import Input, Select

from discofeed.models import Option
from discofeed.tui.messages import SearchSubmitted, SourceChanged

logger = logging.getLogger(__name__)


class SearchBar(Horizontal):
    """Keyword input and plugin dropdown, docked at the top."""

    DEFAULT_CSS = """
    SearchBar {
        dock: top;
        height: auto;
        padding: 0 1;
        border-bottom: solid $primary;
    }
    SearchBar Input {
        width: 3fr;
    }
    SearchBar Select {
        width: 1fr;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="search-bar")
        self._plugin_id: str | None = None
        self._choices: list[Option] = []
        self._history: list[str] = []

    def compose(self):
        yield Input(placeholder="Search by title... (Ctrl+F to focus)", id="search-input")
        yield Select([], allow_blank=True, prompt="Source", id="plugin-select")

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def set_plugins(self, choices: list[Option], current: str) -> None:
        """Fill the source picker with enabled plugins and select *current*."""
        self._choices = list(choices)
        self.query_one("#plugin-select", Select).set_options([(o.label, o.value) for o in choices])
        self.show_plugin(current)

    def show_plugin(self, plugin_id: str) -> None:
        """Select *plugin_id*, or blank the picker if it is not an enabled plugin."""
        self._plugin_id = plugin_id
        select = self.query_one("#plugin-select", Select)
        if any(o.value == plugin_id for o in self._choices):
            if select.value != plugin_id:
                select.value = plugin_id
        elif select.value is not Select.NULL:
            select.value = Select.NULL

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        keyword = event.value.strip()
        if not keyword:
            return
        if not self._history or self._history[-1] != keyword:
            self._history.append(keyword)
        logger.debug("Search submitted %r (history %d)", keyword, len(self._history))
        self.post_message(SearchSubmitted(keyword))

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        if event.value is Select.NULL or event.value == self._plugin_id:
            return
        self._plugin_id = str(event.value)
        logger.debug("Search source picked %r", event.value)
        self.post_message(SourceChanged(str(event.value)))
