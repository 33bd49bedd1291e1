"""
CLI for the MegaLLM model catalog.

Usage:
    megallm catalog                 # one fetch, every tab
    megallm catalog --tab OpenAI    # a single tab
    megallm catalog --watch         # live view, refreshed every 30s
    megallm serve                   # run the HTTP API
"""
import asyncio
import sys
from typing import Optional

import click
from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from megallm.core.config import get_settings
from megallm.core.errors import ModelHubUnavailable
from megallm.core.logging import configure_logging
from megallm.core.modelhub import ensure_modelhub_client
from megallm.services.catalog import COLUMN_LABELS, TAB_NAMES, CatalogTab
from megallm.services.formatting import LEGEND, NOT_AVAILABLE, DiscountedPrice
from megallm.services.presenter import MODEL_ID_NOTICE, CatalogPresenter, CatalogStatus, CatalogView

console = Console()

_CENTERED = {"context", "context_window", "max_output", "features"}


def _price_cell(price: Optional[DiscountedPrice]) -> Text:
    if price is None:
        return Text(NOT_AVAILABLE)
    cell = Text()
    cell.append(f"${price.original}", style="strike dim")
    cell.append(" ")
    cell.append(f" {price.badge} ", style="bold black on yellow")
    cell.append("\n")
    cell.append(f"${price.discounted}", style="bold green")
    return cell


def render_tab(tab: CatalogTab) -> Table:
    table = Table(title=tab.title, box=box.ROUNDED, show_lines=True)
    for column in tab.columns:
        table.add_column(
            COLUMN_LABELS[column],
            justify="center" if column in _CENTERED else "left",
            style="cyan" if column == "id" else None,
        )
    for row in tab.rows:
        cells = []
        for column in tab.columns:
            value = row[column]
            if column.endswith("price") or column.endswith("price_tokens"):
                cells.append(_price_cell(value))
            else:
                cells.append(Text(str(value)))
        table.add_row(*cells)
    return table


def render_view(view: CatalogView, tab: Optional[str] = None):
    if view.status is CatalogStatus.LOADING:
        return Text("Loading models from MegaLLM API...", style="dim")
    if view.status is CatalogStatus.ERROR:
        return Panel(
            f"[bold]Failed to load models:[/bold] {escape(view.error or '')}",
            title="error",
            border_style="red",
        )
    updated = view.last_updated.astimezone().strftime("%H:%M:%S") if view.last_updated else "-"
    header = Text.assemble(
        ("🔴 Live Data", "bold red"),
        f" - {view.total} models available   ",
        (f"Last updated: {updated}", "dim"),
        ("   Auto-refresh on" if view.auto_refresh else "", "dim"),
    )
    parts = [header, Panel(MODEL_ID_NOTICE, title="Important", border_style="blue")]
    for t in view.tabs:
        if tab is None or t.name == tab:
            parts.append(render_tab(t))
    parts.append(Text(f"Legend: {LEGEND}", style="dim"))
    return Group(*parts)


async def _run_once(presenter: CatalogPresenter, tab: Optional[str]) -> CatalogView:
    try:
        await presenter.start()
    finally:
        await presenter.close()
    view = presenter.view()
    console.print(render_view(view, tab))
    return view


async def _run_watch(presenter: CatalogPresenter, tab: Optional[str]) -> None:
    with Live(render_view(presenter.view(), tab), console=console, refresh_per_second=4) as live:
        unsubscribe = presenter.subscribe(lambda p: live.update(render_view(p.view(), tab)))
        try:
            await presenter.start()
            while True:
                await asyncio.sleep(3600)
        finally:
            unsubscribe()
            await presenter.close()


@click.group()
@click.option('--log-level', default=None, help='Override LOG_LEVEL for this invocation')
def cli(log_level: Optional[str]):
    """MegaLLM model catalog tools."""
    # logs go to stderr so they never interleave with the rendered tables
    configure_logging(log_level or get_settings().log_level, stream=sys.stderr)


@cli.command()
@click.option('--tab', '-t', type=click.Choice(TAB_NAMES), default=None, help='Render a single tab')
@click.option('--watch/--no-watch', default=False, help='Keep refreshing until interrupted')
@click.option('--interval', type=float, default=None, help='Seconds between refreshes in watch mode')
def catalog(tab: Optional[str], watch: bool, interval: Optional[float]):
    """Fetch the live model list and render the catalog tables."""
    settings = get_settings()
    try:
        client = ensure_modelhub_client()
    except ModelHubUnavailable as e:
        raise click.ClickException(str(e))
    presenter = CatalogPresenter(
        client,
        refresh_interval=interval or settings.catalog_refresh_interval,
        auto_refresh=watch,
    )
    if watch:
        try:
            asyncio.run(_run_watch(presenter, tab))
        except KeyboardInterrupt:
            console.print("[dim]stopped[/dim]")
        return
    view = asyncio.run(_run_once(presenter, tab))
    if view.status is CatalogStatus.ERROR:
        raise SystemExit(1)


@cli.command()
def serve():
    """Run the HTTP API under uvicorn."""
    from megallm.api.run import main
    main()


if __name__ == "__main__":
    cli()
