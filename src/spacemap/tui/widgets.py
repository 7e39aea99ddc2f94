"""Custom widgets for the spacemap TUI."""

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from spacemap.analyzer import build_nested_layout, default_capacity
from spacemap.config import Settings
from spacemap.display import render_treemap
from spacemap.layout import tile_at
from spacemap.models import LayoutTile, Rect, ScanResult, format_size


class TreemapView(Static):
    """Treemap of the current view root, laid out to the widget's size."""

    class TileSelected(Message):
        """A directory tile was clicked."""

        def __init__(self, tile: LayoutTile) -> None:
            self.tile = tile
            super().__init__()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scan_result: ScanResult | None = None
        self.view_root: str | None = None
        self.map_settings = Settings()
        self.tiles: list[LayoutTile] = []
        self.capacity: tuple[int, str] = (0, "Files")

    def show(self, scan_result: ScanResult, view_root: str, settings: Settings) -> None:
        """Display a view root from a scan result."""
        self.scan_result = scan_result
        self.view_root = view_root
        self.map_settings = settings
        self.capacity = default_capacity(scan_result, view_root)
        self.refresh()

    def render(self):
        """Lay out and paint the treemap."""
        if self.scan_result is None:
            return "[dim]Scanning...[/dim]"

        width, height = self.size.width, self.size.height
        if width <= 0 or height <= 0:
            return ""

        settings = self.map_settings
        declared_total, free_label = self.capacity
        self.tiles = build_nested_layout(
            Rect(x=0, y=0, width=width, height=height),
            self.scan_result,
            self.view_root,
            max_depth=settings.max_depth,
            padding=settings.padding,
            declared_total=declared_total if settings.show_free_space else None,
            free_label=free_label,
        )
        if not self.tiles:
            return "[yellow]No subfolders[/yellow]"

        view_total = self.scan_result.size_of(self.view_root) or 0
        return render_treemap(
            self.tiles,
            width,
            height,
            max(declared_total, view_total),
            settings.scheme,
            settings.palette,
        )

    def on_mouse_move(self, event: events.MouseMove) -> None:
        """Describe the tile under the pointer."""
        tile = tile_at(self.tiles, event.x, event.y)
        if tile is None:
            self.tooltip = None
            return
        self.tooltip = Text(f"{tile.label}\n{format_size(tile.size)}\n{tile.identifier}")

    def on_click(self, event: events.Click) -> None:
        """Zoom into the clicked directory."""
        tile = tile_at(self.tiles, event.x, event.y)
        if tile is not None and not tile.item.is_free_space:
            self.post_message(self.TileSelected(tile))
