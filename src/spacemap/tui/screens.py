"""TUI screens for spacemap."""

import threading
from functools import partial

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, ProgressBar, Static

from spacemap.analyzer import child_items, parent_view, share_of
from spacemap.errors import ScanCancelledError, SpacemapError
from spacemap.models import ColorScheme, Palette, ScanResult, format_size
from spacemap.paths import is_inside
from spacemap.tui.widgets import TreemapView


def _next_member(members: list, current):
    index = members.index(current)
    return members[(index + 1) % len(members)]


class BrowserScreen(Screen):
    """Treemap of one directory with a list of its folders."""

    BINDINGS = [
        Binding("u", "zoom_out", "Zoom Out"),
        Binding("backspace", "zoom_out", "Zoom Out", show=False),
        Binding("r", "rescan", "Rescan"),
        Binding("s", "cycle_scheme", "Scheme"),
        Binding("p", "cycle_palette", "Palette"),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._scan_cancel: threading.Event | None = None

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="main-container"):
            yield ProgressBar(total=100, show_eta=False, id="scan-progress")

            with Horizontal(id="content"):
                yield TreemapView(id="treemap")

                with Vertical(id="side-panel"):
                    yield Static("[bold]Folders[/bold]", id="folder-header")
                    yield DataTable(id="folder-table")
                    yield Static("", id="view-info")

        yield Footer()

    def on_mount(self) -> None:
        """Initialize the screen."""
        table = self.query_one("#folder-table", DataTable)
        table.cursor_type = "row"
        table.add_columns("Folder", "Size", "Share")

        self.start_scan(self.app.root_path)

    def start_scan(self, path: str) -> None:
        """Scan path in a worker thread, cancelling any scan in flight."""
        if self._scan_cancel is not None:
            self._scan_cancel.set()
        cancel = threading.Event()
        self._scan_cancel = cancel

        self.query_one("#scan-progress", ProgressBar).update(progress=0)
        self.notify(f"Scanning {path}...", timeout=2)
        self.run_worker(
            partial(self._scan_worker, path, cancel),
            thread=True,
            group="scan",
            exclusive=True,
        )

    def _scan_worker(self, path: str, cancel: threading.Event) -> None:
        """Run a scan off the UI thread and hand the result back."""
        app = self.app
        last_percent = -1

        def report(percent: int) -> None:
            nonlocal last_percent
            if percent != last_percent:
                last_percent = percent
                app.call_from_thread(self._set_progress, percent)

        try:
            result = app.aggregator.scan(path, progress=report, cancel=cancel)
        except ScanCancelledError:
            return
        except SpacemapError as e:
            app.call_from_thread(self._scan_failed, str(e))
            return

        app.call_from_thread(self._scan_finished, result, cancel)

    def _set_progress(self, percent: int) -> None:
        self.query_one("#scan-progress", ProgressBar).update(progress=percent)

    def _scan_failed(self, message: str) -> None:
        self.notify(message, title="Scan failed", severity="error", timeout=5)

    def _scan_finished(self, result: ScanResult, cancel: threading.Event) -> None:
        if cancel.is_set():
            return
        app = self.app
        app.scan_result = result
        app.view_root = result.root
        self._set_progress(100)
        self._update_view()
        self.notify("Scan complete!", timeout=2)

    def _update_view(self) -> None:
        """Redraw the treemap and folder table for the current view root."""
        app = self.app
        scan_result = app.scan_result
        if scan_result is None:
            return

        view_root = app.view_root or scan_result.root
        self.query_one("#treemap", TreemapView).show(scan_result, view_root, app.map_settings)

        table = self.query_one("#folder-table", DataTable)
        table.clear()
        view_total = scan_result.size_of(view_root) or 0
        for item in child_items(scan_result, view_root):
            table.add_row(
                Text(item.label),
                format_size(item.size),
                f"{share_of(item.size, view_total) * 100:.1f}%",
                key=item.identifier,
            )

        settings = app.map_settings
        info = self.query_one("#view-info", Static)
        info.update(
            Text(
                f"{view_root}\n"
                f"Total: {format_size(view_total)}\n"
                f"Colors: {settings.scheme.value} / {settings.palette.value}"
            )
        )
        app.sub_title = view_root

    def zoom_to(self, path: str) -> None:
        """Show path, rescanning only when it lies outside the current scan."""
        app = self.app
        scan_result = app.scan_result
        if scan_result is not None and is_inside(path, scan_result.root, scan_result.case_sensitive):
            stored = scan_result.resolve(path)
            if stored is not None:
                app.view_root = stored
                self._update_view()
                return
        app.root_path = path
        self.start_scan(path)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Zoom into the selected folder."""
        if event.row_key is None or event.row_key.value is None:
            return
        self.zoom_to(str(event.row_key.value))

    def on_treemap_view_tile_selected(self, message: TreemapView.TileSelected) -> None:
        """Zoom into the clicked tile."""
        self.zoom_to(message.tile.identifier)

    def action_zoom_out(self) -> None:
        """Show the parent of the current view root."""
        app = self.app
        current = app.view_root or app.root_path
        parent = parent_view(current)
        if parent is None:
            self.notify("No parent folder to zoom out to", severity="warning")
            return
        self.zoom_to(parent)

    def action_rescan(self) -> None:
        """Forget the cached scan and walk the filesystem again."""
        app = self.app
        root = app.scan_result.root if app.scan_result else app.root_path
        app.aggregator.clear_cache(root)
        app.root_path = root
        self.start_scan(root)

    def action_cycle_scheme(self) -> None:
        """Switch to the next coloring scheme."""
        app = self.app
        scheme = _next_member(list(ColorScheme), app.map_settings.scheme)
        app.map_settings = app.map_settings.merged(scheme=scheme)
        self._update_view()

    def action_cycle_palette(self) -> None:
        """Switch to the next by-path palette."""
        app = self.app
        palette = _next_member(list(Palette), app.map_settings.palette)
        app.map_settings = app.map_settings.merged(palette=palette)
        self._update_view()
