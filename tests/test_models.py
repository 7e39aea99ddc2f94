"""Tests for data models."""

import pytest
from pydantic import ValidationError

from spacemap.models import (
    Color,
    ColorScheme,
    DiskUsage,
    LayoutTile,
    Palette,
    Rect,
    ScanResult,
    TreemapItem,
    format_size,
)


class TestFormatSize:
    def test_zero(self):
        assert format_size(0) == "0 B"

    def test_bytes(self):
        assert format_size(500) == "500 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_whole_megabytes(self):
        assert format_size(1024**2) == "1 MB"

    def test_two_decimals(self):
        assert format_size(int(12.25 * 1024**3)) == "12.25 GB"

    def test_caps_at_terabytes(self):
        assert format_size(2048 * 1024**4) == "2048 TB"


class TestEnums:
    def test_color_schemes(self):
        assert ColorScheme.BY_PATH == "by_path"
        assert ColorScheme.BY_SIZE == "by_size"
        assert ColorScheme.MONOCHROME == "monochrome"
        assert ColorScheme.PASTEL == "pastel"

    def test_palettes(self):
        assert [p.value for p in Palette] == ["rainbow", "grayscale", "warm", "cool", "pastel"]


class TestRect:
    def test_edges_and_area(self):
        rect = Rect(x=10, y=20, width=30, height=40)
        assert rect.right == 40
        assert rect.bottom == 60
        assert rect.area == 1200

    def test_degenerate_area(self):
        assert Rect(x=0, y=0, width=0, height=10).area == 0
        assert Rect(x=0, y=0, width=-5, height=10).area == 0

    def test_contains_is_half_open(self):
        rect = Rect(x=0, y=0, width=10, height=10)
        assert rect.contains(0, 0)
        assert rect.contains(9.5, 9.5)
        assert not rect.contains(10, 5)
        assert not rect.contains(5, 10)

    def test_frozen(self):
        rect = Rect(x=0, y=0, width=1, height=1)
        with pytest.raises(ValidationError):
            rect.width = 5


class TestTreemapItem:
    def test_free_space_marker(self):
        item = TreemapItem.free_space("/data", 200)
        assert item.identifier == "/data|FREE|"
        assert item.label == "Free space"
        assert item.is_free_space

    def test_regular_item(self):
        item = TreemapItem(identifier="/data/a", size=10, label="a")
        assert not item.is_free_space


class TestLayoutTile:
    def test_as_record(self):
        tile = LayoutTile(
            rect=Rect(x=1, y=2, width=3, height=4),
            item=TreemapItem(identifier="/data/a", size=10, label="a"),
            depth=2,
        )
        assert tile.as_record() == {
            "rect": [1, 2, 3, 4],
            "id": "/data/a",
            "size": 10,
            "label": "a",
            "depth": 2,
        }


class TestColor:
    def test_hex(self):
        assert Color(r=255, g=136, b=0).hex == "#ff8800"

    def test_default_alpha(self):
        assert Color(r=1, g=2, b=3).rgba == (1, 2, 3, 255)

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            Color(r=256, g=0, b=0)


class TestScanResult:
    def make_result(self, case_sensitive: bool = True) -> ScanResult:
        return ScanResult(
            root="/data",
            sizes={
                "/data": 1000,
                "/data/Photos": 600,
                "/data/Photos/2024": 100,
                "/data/music": 300,
            },
            case_sensitive=case_sensitive,
        )

    def test_total_bytes(self):
        assert self.make_result().total_bytes == 1000

    def test_size_human(self):
        assert self.make_result().size_human == "1000 B"

    def test_directory_count(self):
        assert self.make_result().directory_count == 4

    def test_size_of_exact(self):
        assert self.make_result().size_of("/data/Photos") == 600

    def test_size_of_trailing_separator(self):
        assert self.make_result().size_of("/data/Photos/") == 600

    def test_size_of_case_insensitive(self):
        result = self.make_result(case_sensitive=False)
        assert result.size_of("/DATA/photos") == 600
        assert result.resolve("/DATA/photos") == "/data/Photos"

    def test_size_of_case_sensitive_miss(self):
        assert self.make_result(case_sensitive=True).size_of("/data/photos") is None

    def test_children_of(self):
        children = self.make_result().children_of("/data")
        assert sorted(children) == ["/data/Photos", "/data/music"]

    def test_children_of_leaf(self):
        assert self.make_result().children_of("/data/music") == []

    def test_deep_copy_is_independent(self):
        result = self.make_result()
        copy = result.model_copy(deep=True)
        copy.sizes["/data"] = 0
        assert result.sizes["/data"] == 1000


class TestDiskUsage:
    def test_used_percent(self):
        usage = DiskUsage(total_bytes=200, used_bytes=150, free_bytes=50)
        assert usage.used_percent == 75.0

    def test_zero_total(self):
        usage = DiskUsage(total_bytes=0, used_bytes=0, free_bytes=0)
        assert usage.used_percent == 0
