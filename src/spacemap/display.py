"""Rich terminal display for spacemap."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from spacemap.analyzer import child_items, share_of
from spacemap.models import ColorScheme, DiskUsage, LayoutTile, Palette, ScanResult, format_size
from spacemap.palette import FREE_SPACE_COLOR, color_for, text_color_for

console = Console()

EMPTY_STYLE = "on white"


def usage_color(percent: float) -> str:
    """Color name for a usage percentage."""
    if percent >= 90:
        return "red"
    elif percent >= 75:
        return "yellow"
    return "green"


def show_scanning_progress() -> Progress:
    """Create progress bar for a directory scan."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    )


def show_scan_summary(scan: ScanResult) -> None:
    """Display totals for a scan."""
    console.print(
        Panel(
            f"[bold]{escape(scan.root)}[/bold]\n"
            f"  Total: {format_size(scan.total_bytes)}\n"
            f"  Directories: {scan.directory_count}",
            title="Scan",
            border_style="blue",
        )
    )


def show_children(scan: ScanResult, view_root: str | None = None, top: int | None = None) -> None:
    """Display the direct children of view_root, largest first."""
    items = child_items(scan, view_root)
    parent_total = scan.size_of(view_root) if view_root else scan.total_bytes
    parent_total = parent_total or 0

    if not items:
        console.print("[yellow]No subfolders[/yellow]")
        return

    shown = items[:top] if top else items

    table = Table(show_header=True, header_style="bold")
    table.add_column("Folder", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Path", style="dim")

    for item in shown:
        percent = share_of(item.size, parent_total) * 100
        table.add_row(
            escape(item.label),
            format_size(item.size),
            f"[{usage_color(percent)}]{percent:.1f}%[/{usage_color(percent)}]",
            escape(item.identifier),
        )

    console.print(table)
    if len(shown) < len(items):
        console.print(f"[dim]...and {len(items) - len(shown)} more[/dim]")


def tile_style(
    tile: LayoutTile,
    total: int,
    scheme: ColorScheme = ColorScheme.BY_PATH,
    palette: Palette = Palette.RAINBOW,
) -> str:
    """Rich style string for a tile's background and text."""
    if tile.item.is_free_space:
        background = FREE_SPACE_COLOR
    else:
        background = color_for(
            tile.identifier,
            tile.depth,
            scheme,
            palette,
            share_of(tile.size, total),
        )
    return f"{text_color_for(background).hex} on {background.hex}"


def tile_caption(tile: LayoutTile, room: int) -> str:
    """Text that fits on a tile's first row, or an empty string."""
    if tile.item.is_free_space:
        return ""
    full = f"{tile.label} {format_size(tile.size)}"
    if len(full) <= room:
        return full
    if len(tile.label) <= room:
        return tile.label
    return ""


def render_treemap(
    tiles: list[LayoutTile],
    width: int,
    height: int,
    total: int,
    scheme: ColorScheme = ColorScheme.BY_PATH,
    palette: Palette = Palette.RAINBOW,
) -> Text:
    """
    Paint tiles onto a character grid, one layout unit per cell.

    Later tiles paint over earlier ones, so nested tiles show inside their
    parents. Each tile's caption goes on its first row when it fits.

    Args:
        tiles: Tiles in paint order
        width: Grid width in cells
        height: Grid height in cells
        total: Size that share-based color schemes divide by
        scheme: Coloring scheme
        palette: Hue range for the by-path scheme

    Returns:
        Styled text, one line per grid row
    """
    chars = [[" "] * width for _ in range(height)]
    styles = [[EMPTY_STYLE] * width for _ in range(height)]

    for tile in tiles:
        rect = tile.rect
        left, top = max(0, rect.x), max(0, rect.y)
        right, bottom = min(width, rect.right), min(height, rect.bottom)
        if left >= right or top >= bottom:
            continue
        style = tile_style(tile, total, scheme, palette)
        for row in range(top, bottom):
            for col in range(left, right):
                chars[row][col] = " "
                styles[row][col] = style
        caption = tile_caption(tile, right - left)
        for offset, char in enumerate(caption):
            chars[top][left + offset] = char

    text = Text()
    for row in range(height):
        if row:
            text.append("\n")
        run_start = 0
        for col in range(1, width + 1):
            if col == width or styles[row][col] != styles[row][run_start]:
                text.append("".join(chars[row][run_start:col]), style=styles[row][run_start])
                run_start = col
    return text


def show_treemap(
    tiles: list[LayoutTile],
    width: int,
    height: int,
    total: int,
    scheme: ColorScheme = ColorScheme.BY_PATH,
    palette: Palette = Palette.RAINBOW,
) -> None:
    """Print a rendered treemap."""
    console.print(render_treemap(tiles, width, height, total, scheme, palette))


def show_status(disk_usage: DiskUsage) -> None:
    """Display capacity of a volume."""
    used_percent = disk_usage.used_percent
    color = usage_color(used_percent)

    console.print(f"Volume: [bold]{escape(disk_usage.mount_point)}[/bold]")
    console.print(f"  Total: {format_size(disk_usage.total_bytes)}")
    console.print(
        f"  Used:  {format_size(disk_usage.used_bytes)} "
        f"([{color}]{used_percent:.0f}%[/{color}])"
    )
    console.print(f"  Free:  {format_size(disk_usage.free_bytes)}")
