"""Data models for spacemap."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from spacemap.paths import parent_path, path_key

FREE_SPACE_SUFFIX = "|FREE|"

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(size_bytes: int) -> str:
    """
    Format bytes to a human-readable string (binary units, up to two decimals).

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable size string, e.g. "0 B", "1.5 KB", "12.25 MB"
    """
    if size_bytes <= 0:
        return "0 B"
    value = float(size_bytes)
    place = 0
    while value >= 1024 and place < len(_UNITS) - 1:
        value /= 1024
        place += 1
    number = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{number} {_UNITS[place]}"


class ColorScheme(str, Enum):
    """How tiles are colored."""

    BY_PATH = "by_path"  # Hash of the identifier, hue range picked by Palette
    BY_SIZE = "by_size"  # Hue from the tile's share of the total
    MONOCHROME = "monochrome"  # Gray level from the tile's share of the total
    PASTEL = "pastel"  # Hash of the identifier, soft colors


class Palette(str, Enum):
    """Hue range used by the by-path scheme."""

    RAINBOW = "rainbow"
    GRAYSCALE = "grayscale"
    WARM = "warm"
    COOL = "cool"
    PASTEL = "pastel"


class Rect(BaseModel):
    """Axis-aligned rectangle in layout units."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(0, description="Left edge")
    y: int = Field(0, description="Top edge")
    width: int = Field(..., description="Extent along x")
    height: int = Field(..., description="Extent along y")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        """Area, zero for degenerate rectangles."""
        return max(0, self.width) * max(0, self.height)

    def contains(self, px: float, py: float) -> bool:
        """Whether a point lies inside (left/top inclusive, right/bottom exclusive)."""
        return self.x <= px < self.right and self.y <= py < self.bottom

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


class TreemapItem(BaseModel):
    """One entry to be laid out in a treemap."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., description="Real path or synthetic marker")
    size: int = Field(..., description="Size in bytes")
    label: str = Field("", description="Display name")

    @classmethod
    def free_space(cls, view_root: str, size: int, label: str = "Free space") -> "TreemapItem":
        """Synthetic item for capacity not accounted for by real entries."""
        return cls(identifier=view_root + FREE_SPACE_SUFFIX, size=size, label=label)

    @property
    def is_free_space(self) -> bool:
        return self.identifier.endswith(FREE_SPACE_SUFFIX)


class LayoutTile(BaseModel):
    """A laid-out rectangle tagged with its item and nesting depth."""

    model_config = ConfigDict(frozen=True)

    rect: Rect
    item: TreemapItem
    depth: int = Field(0, description="Nesting level, 0 for the view root's children")

    @property
    def identifier(self) -> str:
        return self.item.identifier

    @property
    def size(self) -> int:
        return self.item.size

    @property
    def label(self) -> str:
        return self.item.label

    def as_record(self) -> dict:
        """Flat representation: rect, id, size, label, depth."""
        return {
            "rect": list(self.rect.as_tuple()),
            "id": self.identifier,
            "size": self.size,
            "label": self.label,
            "depth": self.depth,
        }


class Color(BaseModel):
    """RGBA color."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)
    a: int = Field(255, ge=0, le=255)

    @property
    def hex(self) -> str:
        """Hex color without alpha, e.g. '#ff8800'."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


class ScanResult(BaseModel):
    """Aggregate directory sizes produced by one scan."""

    root: str = Field(..., description="Normalized root path that was scanned")
    sizes: dict[str, int] = Field(
        default_factory=dict,
        description="Aggregate size in bytes per normalized directory path",
    )
    case_sensitive: bool = Field(True, description="Path comparison policy for lookups")

    @property
    def total_bytes(self) -> int:
        """Aggregate size of the root."""
        return self.sizes.get(self.root, 0)

    @property
    def directory_count(self) -> int:
        return len(self.sizes)

    @property
    def size_human(self) -> str:
        return format_size(self.total_bytes)

    def _key(self, path: str) -> str:
        return path_key(path, self.case_sensitive)

    def resolve(self, path: str) -> str | None:
        """Stored path matching the given path under the comparison policy."""
        if path in self.sizes:
            return path
        wanted = self._key(path)
        for stored in self.sizes:
            if self._key(stored) == wanted:
                return stored
        return None

    def size_of(self, path: str) -> int | None:
        """Aggregate size of a directory, or None if it was not scanned."""
        stored = self.resolve(path)
        return None if stored is None else self.sizes[stored]

    def children_of(self, path: str) -> list[str]:
        """Direct child directories of path that are part of this result."""
        wanted = self._key(path)
        children = []
        for stored in self.sizes:
            parent = parent_path(stored)
            if parent is not None and self._key(parent) == wanted:
                children.append(stored)
        return children


class DiskUsage(BaseModel):
    """Capacity of the volume holding a path."""

    total_bytes: int = Field(..., description="Total volume size in bytes")
    used_bytes: int = Field(..., description="Used space in bytes")
    free_bytes: int = Field(..., description="Space available to the current user in bytes")
    mount_point: str = Field("/", description="Path the usage was queried for")

    @property
    def used_percent(self) -> float:
        """Percentage of the volume in use."""
        return (self.used_bytes / self.total_bytes) * 100 if self.total_bytes > 0 else 0
