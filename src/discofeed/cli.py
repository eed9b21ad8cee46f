"""CLI entry point for the Discovery feed controller.

Provides commands:
  - plugins: List registered source plugins and the facets they offer
  - options: Show a plugin's type/region/status/sort vocabularies
  - browse: Page through the discovery feed with facet filters
  - search: Page through keyword search results
  - tui: Launch the interactive terminal UI
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from discofeed.config import DiscoveryConfig, load_config
from discofeed.exceptions import ConfigError, FetchFailure
from discofeed.models import DIMENSIONS, Dimension, FeedKind, LoadStatus
from discofeed.options import has_control, label_for
from discofeed.session import DiscoverySession, create_session

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Discovery - browse and search content sources with per-plugin filters",
    rich_markup_mode="rich",
)
console = Console()


class _ConsoleNotifier:
    """Prints fetch failures in red."""

    def __init__(self) -> None:
        self.failures: list[FetchFailure] = []

    def notify_error(self, failure: FetchFailure) -> None:
        self.failures.append(failure)
        console.print(f"[red]Load failed:[/red] {failure.cause}")


@app.callback()
def app_callback(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to discofeed JSON config"),
    ] = None,
) -> None:
    """Load configuration shared by all commands."""
    try:
        ctx.obj = load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)


def get_config(ctx: typer.Context) -> DiscoveryConfig:
    return ctx.obj if isinstance(ctx.obj, DiscoveryConfig) else DiscoveryConfig()


def _open_session(ctx: typer.Context, notifier: _ConsoleNotifier | None = None) -> DiscoverySession:
    try:
        return create_session(get_config(ctx), notifier=notifier)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)


def _require_plugin(session: DiscoverySession, plugin_id: str) -> None:
    if plugin_id not in session.registry:
        known = ", ".join(p.value for p in session.registry.list_plugins())
        console.print(f"[red]Unknown plugin:[/red] {plugin_id} (known: {known})")
        raise typer.Exit(code=1)


def _results_table(title: str, session: DiscoverySession, kind: FeedKind) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan", no_wrap=True)
    table.add_column("Author")
    table.add_column("Status", style="green")
    table.add_column("Updated", style="dim")

    status_options = session.coordinator.option_set().status_options
    for n, item in enumerate(session.coordinator.items(kind), start=1):
        table.add_row(
            str(n),
            item.title,
            item.author,
            label_for(status_options, item.status),
            item.updated,
        )
    return table


async def _page_through(session: DiscoverySession, kind: FeedKind, first, pages: int) -> None:
    """Await the first load, then up to ``pages - 1`` load-more pages."""
    task = first()
    if task is not None:
        await task
    for _ in range(pages - 1):
        feed = session.store.feed(kind)
        if feed.load_status is not LoadStatus.FULFILLED or feed.exhausted:
            break
        task = session.coordinator.load_more(kind)
        if task is None:
            break
        await task


@app.command()
def plugins(ctx: typer.Context) -> None:
    """List source plugins and the facets each one offers."""
    session = _open_session(ctx)
    resolver = session.coordinator.resolver

    table = Table(title="Source plugins", show_header=True)
    table.add_column("Plugin", style="cyan", no_wrap=True)
    table.add_column("Label")
    table.add_column("Enabled", justify="center")
    table.add_column("Facets", style="dim")

    for plugin in session.registry.list_plugins():
        facets = ", ".join(d.value for d in resolver.visible_dimensions(plugin.value))
        table.add_row(
            plugin.value,
            plugin.label,
            "[red]no[/red]" if plugin.disabled else "[green]yes[/green]",
            facets or "-",
        )
    console.print(table)


@app.command()
def options(
    ctx: typer.Context,
    plugin_id: Annotated[str, typer.Argument(help="Plugin id, e.g. MHG")],
) -> None:
    """Show the type/region/status/sort vocabularies of a plugin."""
    session = _open_session(ctx)
    _require_plugin(session, plugin_id)
    option_set = session.coordinator.resolver.resolve(plugin_id)

    for dimension in DIMENSIONS:
        vocabulary = option_set.for_dimension(dimension)
        if not vocabulary:
            console.print(f"[dim]{dimension.value}: no options[/dim]")
            continue
        suffix = "" if has_control(vocabulary) else " (single option, no control)"
        table = Table(title=f"{plugin_id} {dimension.value} options{suffix}", show_header=True)
        table.add_column("Value", style="cyan")
        table.add_column("Label")
        for option in vocabulary:
            table.add_row(option.value or '""', option.label)
        console.print(table)


@app.command()
def browse(
    ctx: typer.Context,
    plugin_id: Annotated[
        str | None,
        typer.Option("--plugin", "-p", help="Plugin id (defaults to configured plugin)"),
    ] = None,
    type_: Annotated[str, typer.Option("--type", "-t", help="Type facet value")] = "",
    region: Annotated[str, typer.Option("--region", "-r", help="Region facet value")] = "",
    status: Annotated[str, typer.Option("--status", "-s", help="Status facet value")] = "",
    sort: Annotated[str, typer.Option("--sort", help="Sort facet value")] = "",
    pages: Annotated[int, typer.Option("--pages", "-n", help="Pages to load", min=1)] = 1,
) -> None:
    """Page through the discovery feed of a plugin.

    Examples:
      discofeed browse --plugin MHG --status wanjie --sort popular
      discofeed browse -p COPY -n 3
    """
    notifier = _ConsoleNotifier()
    session = _open_session(ctx, notifier)
    coordinator = session.coordinator
    if plugin_id is not None:
        _require_plugin(session, plugin_id)

    facets = {
        Dimension.TYPE: type_,
        Dimension.REGION: region,
        Dimension.STATUS: status,
        Dimension.SORT: sort,
    }

    async def _run() -> None:
        if plugin_id is not None:
            coordinator.change_source(plugin_id)
        selection = coordinator.selection
        for dimension, value in facets.items():
            selection = selection.with_facet(dimension, value)
        session.store.set_selection(selection)
        await _page_through(session, FeedKind.DISCOVERY, coordinator.on_focus, pages)

    asyncio.run(_run())
    if notifier.failures:
        raise typer.Exit(code=1)

    labels = coordinator.labels()
    shown = ", ".join(f"{d.value}={labels[d]}" for d in coordinator.visible_dimensions())
    title = f"{coordinator.plugin_label()} discovery" + (f" ({shown})" if shown else "")
    console.print(_results_table(title, session, FeedKind.DISCOVERY))
    console.print(f"\n[dim]{len(coordinator.items())} item(s)[/dim]")


@app.command()
def search(
    ctx: typer.Context,
    keyword: Annotated[str, typer.Argument(help="Keyword to search for")],
    plugin_id: Annotated[
        str | None,
        typer.Option("--plugin", "-p", help="Plugin id (defaults to configured plugin)"),
    ] = None,
    pages: Annotated[int, typer.Option("--pages", "-n", help="Pages to load", min=1)] = 1,
) -> None:
    """Search a plugin by keyword."""
    notifier = _ConsoleNotifier()
    session = _open_session(ctx, notifier)
    coordinator = session.coordinator
    if plugin_id is not None:
        _require_plugin(session, plugin_id)

    async def _run() -> None:
        await _page_through(
            session,
            FeedKind.SEARCH,
            lambda: coordinator.submit_search(keyword, plugin_id),
            pages,
        )

    asyncio.run(_run())
    if notifier.failures:
        raise typer.Exit(code=1)

    results = coordinator.items(FeedKind.SEARCH)
    if not results:
        console.print(f"[yellow]No results for '{keyword}'[/yellow]")
        return
    title = f"{coordinator.plugin_label()} search: {keyword}"
    console.print(_results_table(title, session, FeedKind.SEARCH))
    console.print(f"\n[dim]{len(results)} item(s)[/dim]")


@app.command()
def tui(ctx: typer.Context) -> None:
    """Launch the interactive Discovery terminal UI."""
    from discofeed.tui import run_tui

    run_tui(get_config(ctx))


if __name__ == "__main__":
    app()
