"""Command palette provider for the Discovery TUI."""

from __future__ import annotations

from functools import partial

from textual.command import Hit, Hits, Provider


class DiscoveryCommands(Provider):
    """Fuzzy-searchable names for the App's actions (Ctrl+P)."""

    COMMANDS: dict[str, str] = {
        "Search": "focus_search",
        "Load More": "load_more",
        "Refresh Feed": "refresh",
        "Back to Discovery": "show_discovery",
        "Plugin Settings": "plugin_settings",
    }

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        for name, action in self.COMMANDS.items():
            score = matcher.match(name)
            if score > 0:
                yield Hit(
                    score,
                    matcher.highlight(name),
                    partial(self.app.run_action, action),
                )
