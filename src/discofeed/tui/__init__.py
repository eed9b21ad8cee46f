"""Discovery interactive terminal UI.

A Textual host for the discovery coordinator: search bar with a source
picker, per-plugin facet dropdowns, paged discovery and search feeds, and
a detail pane.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discofeed.config import DiscoveryConfig


def run_tui(config: DiscoveryConfig | None = None) -> None:
    """Configure logging and run the Discovery app.

    Imports are deferred so ``discofeed --help`` stays fast.

    Args:
        config: Settings; loaded from the default location when omitted.
    """
    from discofeed.config import load_config
    from discofeed.telemetry import configure_file_logging
    from discofeed.tui.app import DiscoveryApp

    config = config or load_config()
    configure_file_logging(str(config.log_dir))
    DiscoveryApp(config).run()
