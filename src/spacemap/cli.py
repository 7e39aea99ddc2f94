"""CLI interface for spacemap."""

import json
import logging
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from spacemap import __version__
from spacemap.analyzer import build_nested_layout, default_capacity
from spacemap.config import Settings
from spacemap.display import (
    console,
    show_children,
    show_scan_summary,
    show_scanning_progress,
    show_status,
    show_treemap,
)
from spacemap.errors import SpacemapError
from spacemap.models import ColorScheme, Palette, Rect, ScanResult
from spacemap.paths import expand_path
from spacemap.scanner import DirectoryAggregator, get_disk_usage

app = typer.Typer(
    name="spacemap",
    help="Disk usage treemaps for the terminal",
    add_completion=False,
    no_args_is_help=True,
)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"spacemap version {__version__}")
        raise typer.Exit()


def _settings(ctx: typer.Context) -> Settings:
    settings = ctx.obj if isinstance(ctx.obj, Settings) else None
    return settings or Settings()


def _user_path(path: str) -> str:
    """Expand ~ and environment variables in a path typed by the user."""
    return str(expand_path(path))


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _scan(aggregator: DirectoryAggregator, path: str) -> ScanResult:
    """Scan path with a progress bar, exiting on failure."""
    try:
        with show_scanning_progress() as progress:
            task = progress.add_task(f"Scanning {path}...", total=100)

            def update_progress(percent: int):
                progress.update(task, completed=percent)

            return aggregator.scan(path, progress=update_progress)
    except SpacemapError as e:
        _fail(str(e))


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        count=True,
        help="Increase log output (--verbose info, twice for debug).",
    ),
) -> None:
    """spacemap - see where your disk space went."""
    _setup_logging(verbose)
    try:
        ctx.obj = Settings.from_env()
    except ValidationError as e:
        _fail(f"invalid SPACEMAP_* setting\n{e}")


@app.command()
def scan(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to scan"),
    top: Optional[int] = typer.Option(None, "--top", "-n", min=1, help="Show only the N largest folders"),
    as_json: bool = typer.Option(False, "--json", help="Print every directory size as JSON"),
) -> None:
    """Scan a directory and list its largest folders."""
    path = _user_path(path)
    aggregator = DirectoryAggregator.from_settings(_settings(ctx))

    if as_json:
        try:
            result = aggregator.scan(path)
        except SpacemapError as e:
            _fail(str(e))
        typer.echo(json.dumps({"root": result.root, "sizes": result.sizes}, indent=2))
        return

    result = _scan(aggregator, path)
    console.print()
    show_scan_summary(result)
    show_children(result, top=top)


@app.command(name="map")
def map_command(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to map"),
    width: Optional[int] = typer.Option(None, "--width", "-w", min=1, help="Columns (default: terminal width)"),
    height: Optional[int] = typer.Option(None, "--height", "-H", min=1, help="Rows (default: 24)"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Nesting levels below the top level"),
    padding: Optional[int] = typer.Option(None, "--padding", min=0, help="Inset around nested tiles"),
    scheme: Optional[ColorScheme] = typer.Option(None, "--scheme", "-s", help="Coloring scheme"),
    palette: Optional[Palette] = typer.Option(None, "--palette", "-p", help="Hue range for by_path"),
    free: Optional[bool] = typer.Option(None, "--free/--no-free", help="Show remaining capacity as a white tile"),
) -> None:
    """Draw a treemap of a directory in the terminal."""
    path = _user_path(path)
    try:
        settings = _settings(ctx).merged(
            max_depth=depth,
            padding=padding,
            scheme=scheme,
            palette=palette,
            show_free_space=free,
        )
    except ValidationError as e:
        _fail(str(e))

    aggregator = DirectoryAggregator.from_settings(settings)
    result = _scan(aggregator, path)

    cols = width or console.width
    rows = height or 24
    declared_total, free_label = default_capacity(result)
    tiles = build_nested_layout(
        Rect(x=0, y=0, width=cols, height=rows),
        result,
        max_depth=settings.max_depth,
        padding=settings.padding,
        declared_total=declared_total if settings.show_free_space else None,
        free_label=free_label,
    )

    if not tiles:
        console.print("[yellow]No subfolders[/yellow]")
        return

    console.print(f"[bold]{escape(result.root)}[/bold] {result.size_human}")
    show_treemap(
        tiles,
        cols,
        rows,
        max(declared_total, result.total_bytes),
        settings.scheme,
        settings.palette,
    )


@app.command()
def layout(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to lay out"),
    width: int = typer.Option(1000, "--width", "-w", min=1, help="Layout width in units"),
    height: int = typer.Option(700, "--height", "-H", min=1, help="Layout height in units"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Nesting levels below the top level"),
    free: Optional[bool] = typer.Option(None, "--free/--no-free", help="Include a remaining-capacity tile"),
) -> None:
    """Print treemap tiles as JSON."""
    path = _user_path(path)
    settings = _settings(ctx).merged(max_depth=depth, show_free_space=free)
    aggregator = DirectoryAggregator.from_settings(settings)
    try:
        result = aggregator.scan(path)
    except SpacemapError as e:
        _fail(str(e))

    declared_total, free_label = default_capacity(result)
    tiles = build_nested_layout(
        Rect(x=0, y=0, width=width, height=height),
        result,
        max_depth=settings.max_depth,
        padding=settings.padding,
        declared_total=declared_total if settings.show_free_space else None,
        free_label=free_label,
    )
    typer.echo(json.dumps([tile.as_record() for tile in tiles], indent=2))


@app.command()
def status(
    path: str = typer.Argument(".", help="Any path on the volume"),
) -> None:
    """Show capacity of the volume holding a path."""
    path = _user_path(path)
    try:
        disk_usage = get_disk_usage(path)
    except OSError as e:
        _fail(f"cannot read disk usage for {path}: {e}")
    show_status(disk_usage)


@app.command()
def tui(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to browse"),
) -> None:
    """Launch the interactive treemap browser."""
    try:
        from spacemap.tui import run_tui
    except ImportError:
        console.print("[red]TUI not available.[/red]")
        console.print("Install with: [bold]pip install spacemap[tui][/bold]")
        raise typer.Exit(1)

    run_tui(path, settings=_settings(ctx))


if __name__ == "__main__":
    app()
