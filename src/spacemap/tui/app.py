"""Main TUI application for spacemap."""

from textual.app import App
from textual.binding import Binding

from spacemap.config import Settings
from spacemap.models import ScanResult
from spacemap.paths import expand_path, normalize_path
from spacemap.scanner import DirectoryAggregator
from spacemap.tui.screens import BrowserScreen


class SpacemapApp(App):
    """Interactive disk usage treemap."""

    TITLE = "spacemap"
    SUB_TITLE = "Disk usage treemap"

    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("?", "help", "Help"),
    ]

    SCREENS = {
        "browser": BrowserScreen,
    }

    def __init__(self, root_path: str = ".", settings: Settings | None = None):
        super().__init__()
        self.map_settings = settings or Settings()
        self.aggregator = DirectoryAggregator.from_settings(self.map_settings)
        self.root_path = normalize_path(root_path)
        self.scan_result: ScanResult | None = None
        self.view_root: str | None = None

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self.push_screen("browser")

    def action_help(self) -> None:
        """Show help information."""
        self.notify(
            "Enter or click to zoom in, U to zoom out, R to rescan, S/P to change colors",
            title="Help",
            timeout=5,
        )


def run_tui(root_path: str = ".", settings: Settings | None = None) -> None:
    """Run the interactive treemap browser.

    Args:
        root_path: Directory to open (may contain ~ or environment variables)
        settings: Scan, layout and color settings
    """
    app = SpacemapApp(root_path=str(expand_path(root_path)), settings=settings)
    app.run()
