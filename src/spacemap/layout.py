"""Treemap layout by balanced binary partitioning.

Items are sorted by size and split into two groups of roughly equal total
size. The rectangle is cut across its longer side in proportion to the two
totals and each half is laid out the same way until every group holds a
single item. The second half always receives exactly what the first half
leaves, so child extents add up to the parent's and rounding never drifts.
"""

from typing import Iterable

from spacemap.errors import InvalidLayoutItemError
from spacemap.models import LayoutTile, Rect, TreemapItem


def split_index(sizes: list[int]) -> int:
    """
    Index of the last item in the first group.

    The first group ends at the smallest index where the running sum reaches
    half of the total (integer division). The second group is never empty.

    Args:
        sizes: Item sizes sorted in descending order (at least two)

    Returns:
        Split index in range [0, len(sizes) - 2]
    """
    total = sum(sizes)
    half = total // 2
    running = 0
    index = 0
    for i, size in enumerate(sizes):
        running += size
        if running >= half:
            index = i
            break
    return min(index, len(sizes) - 2)


def first_extent(extent: int, first_total: int, total: int) -> int:
    """Extent given to the first group when cutting extent in two."""
    share = first_total / total if total > 0 else 0.5
    return min(extent, max(1, round(extent * share)))


def split_rect(rect: Rect, first_total: int, total: int) -> tuple[Rect, Rect]:
    """Cut rect across its longer side in proportion first_total / total."""
    if rect.width >= rect.height:
        w1 = first_extent(rect.width, first_total, total)
        return (
            Rect(x=rect.x, y=rect.y, width=w1, height=rect.height),
            Rect(x=rect.x + w1, y=rect.y, width=rect.width - w1, height=rect.height),
        )
    h1 = first_extent(rect.height, first_total, total)
    return (
        Rect(x=rect.x, y=rect.y, width=rect.width, height=h1),
        Rect(x=rect.x, y=rect.y + h1, width=rect.width, height=rect.height - h1),
    )


def build_layout(
    rect: Rect,
    items: Iterable[TreemapItem],
    start_depth: int = 0,
) -> list[LayoutTile]:
    """
    Lay out items as non-overlapping tiles covering rect.

    Args:
        rect: Bounding rectangle
        items: Items in any order; sizes must not be negative
        start_depth: Depth assigned to every emitted tile

    Returns:
        One tile per item, in partition order

    Raises:
        InvalidLayoutItemError: If an item has a negative size
    """
    ranked = sorted(items, key=lambda item: item.size, reverse=True)
    for item in ranked:
        if item.size < 0:
            raise InvalidLayoutItemError(item.identifier, item.size)
    if not ranked:
        return []

    tiles: list[LayoutTile] = []
    # Pending (area, group) pairs, depth-first
    stack: list[tuple[Rect, list[TreemapItem]]] = [(rect, ranked)]
    while stack:
        area, group = stack.pop()
        if len(group) == 1:
            tiles.append(LayoutTile(rect=area, item=group[0], depth=start_depth))
            continue

        sizes = [item.size for item in group]
        cut = split_index(sizes) + 1
        first, second = group[:cut], group[cut:]
        r1, r2 = split_rect(area, sum(sizes[:cut]), sum(sizes))
        # LIFO: the first group is emitted before the second
        stack.append((r2, second))
        stack.append((r1, first))

    return tiles


def inset_rect(rect: Rect, padding: int) -> Rect | None:
    """Shrink rect by padding on every side, or None if nothing remains."""
    inner = Rect(
        x=rect.x + padding,
        y=rect.y + padding,
        width=rect.width - 2 * padding,
        height=rect.height - 2 * padding,
    )
    if inner.width <= 0 or inner.height <= 0:
        return None
    return inner


def tiles_at(tiles: list[LayoutTile], x: float, y: float) -> list[LayoutTile]:
    """All tiles containing the point, outermost first."""
    return [tile for tile in tiles if tile.rect.contains(x, y)]


def tile_at(tiles: list[LayoutTile], x: float, y: float) -> LayoutTile | None:
    """Innermost tile containing the point, or None."""
    for tile in reversed(tiles):
        if tile.rect.contains(x, y):
            return tile
    return None
