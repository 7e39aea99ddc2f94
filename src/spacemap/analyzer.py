"""Turn scan results into treemap items and nested layouts."""

import logging
import os
from collections import deque

from spacemap.layout import build_layout, inset_rect
from spacemap.models import LayoutTile, Rect, ScanResult, TreemapItem
from spacemap.paths import display_name, normalize_path, parent_path
from spacemap.scanner import get_disk_usage

logger = logging.getLogger(__name__)


def child_index(scan: ScanResult) -> dict[str, list[str]]:
    """Map every scanned directory to its direct child directories."""
    index: dict[str, list[str]] = {}
    for path in scan.sizes:
        parent = parent_path(path)
        if parent is not None and parent in scan.sizes:
            index.setdefault(parent, []).append(path)
    return index


def _items_for(paths: list[str], scan: ScanResult) -> list[TreemapItem]:
    items = [
        TreemapItem(identifier=path, size=scan.sizes[path], label=display_name(path))
        for path in paths
    ]
    items.sort(key=lambda item: item.size, reverse=True)
    return items


def _resolve_view_root(scan: ScanResult, view_root: str | None) -> str:
    if view_root is None:
        return scan.root
    return scan.resolve(normalize_path(view_root)) or normalize_path(view_root)


def child_items(scan: ScanResult, view_root: str | None = None) -> list[TreemapItem]:
    """
    Direct children of view_root as treemap items, largest first.

    Args:
        scan: Scan result to read sizes from
        view_root: Directory whose children to list (default: scan root)

    Returns:
        List of TreemapItems sorted by size descending
    """
    root = _resolve_view_root(scan, view_root)
    return _items_for(scan.children_of(root), scan)


def default_capacity(scan: ScanResult, view_root: str | None = None) -> tuple[int, str]:
    """
    Declared total for a view root and the label of its remainder.

    For a mount point with free space the remainder is that free space.
    Anywhere else, or when the volume is full, it is the files stored
    directly in view_root.

    Args:
        scan: Scan result to read sizes from
        view_root: Directory being viewed (default: scan root)

    Returns:
        Tuple of (declared_total, remainder_label)
    """
    root = _resolve_view_root(scan, view_root)
    aggregate = scan.size_of(root) or 0
    if os.path.ismount(root):
        children_total = sum(item.size for item in child_items(scan, root))
        try:
            free = get_disk_usage(root).free_bytes
        except OSError as e:
            logger.warning("Cannot read free space for %s: %s", root, e)
        else:
            if free > 0:
                return children_total + free, "Free space"
    return aggregate, "Files"


def view_items(
    scan: ScanResult,
    view_root: str | None = None,
    declared_total: int | None = None,
    free_label: str = "Free space",
) -> list[TreemapItem]:
    """
    Items to lay out for one view: children plus an optional remainder.

    Args:
        scan: Scan result to read sizes from
        view_root: Directory being viewed (default: scan root)
        declared_total: Capacity the view represents; when it exceeds the
            children's sum, a synthetic free-space item covers the difference
        free_label: Label of the synthetic item

    Returns:
        List of TreemapItems sorted by size descending
    """
    root = _resolve_view_root(scan, view_root)
    items = child_items(scan, root)
    if declared_total is not None:
        remainder = declared_total - sum(item.size for item in items)
        if remainder > 0:
            items.append(TreemapItem.free_space(root, remainder, free_label))
            items.sort(key=lambda item: item.size, reverse=True)
    return items


def build_nested_layout(
    rect: Rect,
    scan: ScanResult,
    view_root: str | None = None,
    max_depth: int = 0,
    padding: int = 1,
    declared_total: int | None = None,
    free_label: str = "Free space",
) -> list[LayoutTile]:
    """
    Lay out a view root's children and, inside each tile, its own children.

    Nesting is driven by a work-list rather than recursion, so the depth of
    the directory tree does not matter. Parents always come before their
    children in the returned list.

    Args:
        rect: Area to fill
        scan: Scan result to read sizes from
        view_root: Directory being viewed (default: scan root)
        max_depth: Deepest nesting level to lay out (0 = children only)
        padding: Inset applied to a tile before laying out its children
        declared_total: See view_items
        free_label: See view_items

    Returns:
        Tiles in paint order
    """
    root = _resolve_view_root(scan, view_root)
    top = build_layout(rect, view_items(scan, root, declared_total, free_label), 0)

    index = child_index(scan)
    tiles = list(top)
    pending = deque(top)
    while pending:
        tile = pending.popleft()
        if tile.depth >= max_depth or tile.item.is_free_space:
            continue
        children = index.get(tile.identifier)
        if not children:
            continue
        inner = inset_rect(tile.rect, padding)
        if inner is None:
            continue
        nested = build_layout(inner, _items_for(children, scan), tile.depth + 1)
        tiles.extend(nested)
        pending.extend(nested)

    return tiles


def parent_view(path: str) -> str | None:
    """Directory to show when zooming out of path, or None at a filesystem root."""
    return parent_path(normalize_path(path))


def share_of(size: int, total: int) -> float:
    """Fraction of total taken by size, 0 when total is 0."""
    return size / total if total > 0 else 0.0
