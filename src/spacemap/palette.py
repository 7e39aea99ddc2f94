"""Deterministic tile colors."""

import zlib

from spacemap.models import Color, ColorScheme, Palette

TILE_ALPHA = 230
FREE_SPACE_COLOR = Color(r=255, g=255, b=255, a=255)
WHITE = Color(r=255, g=255, b=255)
BLACK = Color(r=0, g=0, b=0)


def stable_hash(identifier: str | None) -> int:
    """Non-negative hash of an identifier, identical across runs."""
    return zlib.crc32((identifier or "").encode("utf-8"))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def from_hsl(hue: float, saturation: float, lightness: float, alpha: int = 255) -> Color:
    """
    Convert HSL to an RGBA color.

    Args:
        hue: Hue in degrees, [0, 360)
        saturation: Saturation, [0, 1]
        lightness: Lightness, [0, 1]
        alpha: Alpha channel, [0, 255]

    Returns:
        Color with channels rounded and clamped to [0, 255]
    """
    chroma = (1 - abs(2 * lightness - 1)) * saturation
    sector = (hue % 360) / 60
    x = chroma * (1 - abs(sector % 2 - 1))
    if sector < 1:
        rr, gg, bb = chroma, x, 0.0
    elif sector < 2:
        rr, gg, bb = x, chroma, 0.0
    elif sector < 3:
        rr, gg, bb = 0.0, chroma, x
    elif sector < 4:
        rr, gg, bb = 0.0, x, chroma
    elif sector < 5:
        rr, gg, bb = x, 0.0, chroma
    else:
        rr, gg, bb = chroma, 0.0, x
    m = lightness - chroma / 2
    return Color(
        r=int(_clamp(round((rr + m) * 255), 0, 255)),
        g=int(_clamp(round((gg + m) * 255), 0, 255)),
        b=int(_clamp(round((bb + m) * 255), 0, 255)),
        a=alpha,
    )


def _gray(level: float) -> Color:
    value = int(level)
    return Color(r=value, g=value, b=value, a=255)


def _by_path(hashed: int, depth: int, palette: Palette) -> Color:
    if palette == Palette.GRAYSCALE:
        return _gray(_clamp(120 + hashed % 100, 30, 230))
    if palette == Palette.WARM:
        return from_hsl(hashed % 60, 0.7, max(0.5, 0.7 - depth * 0.02), TILE_ALPHA)
    if palette == Palette.COOL:
        return from_hsl(180 + hashed % 100, 0.6, max(0.5, 0.7 - depth * 0.02), TILE_ALPHA)
    if palette == Palette.PASTEL:
        return from_hsl(hashed % 360, 0.35, max(0.65, 0.78 - depth * 0.02), TILE_ALPHA)
    return from_hsl(hashed % 360, 0.6, max(0.5, 0.7 - depth * 0.02), TILE_ALPHA)


def color_for(
    identifier: str | None,
    depth: int,
    scheme: ColorScheme = ColorScheme.BY_PATH,
    palette: Palette = Palette.RAINBOW,
    size_ratio: float = 0.0,
) -> Color:
    """
    Pick a tile color.

    Never fails: a missing identifier is treated as an empty string and
    size_ratio is clamped to [0, 1].

    Args:
        identifier: Tile identifier (usually a path)
        depth: Nesting depth of the tile; deeper tiles get darker
        scheme: Coloring scheme
        palette: Hue range for the by-path scheme
        size_ratio: Tile size divided by the total, for size-driven schemes

    Returns:
        RGBA color
    """
    depth = max(0, depth)
    ratio = _clamp(size_ratio, 0.0, 1.0)

    if scheme == ColorScheme.BY_SIZE:
        return from_hsl(ratio * 240.0, 0.6, 0.55, TILE_ALPHA)
    if scheme == ColorScheme.MONOCHROME:
        return _gray(_clamp(200 - int(ratio * 140), 40, 240))

    hashed = stable_hash(identifier)
    if scheme == ColorScheme.PASTEL:
        return from_hsl(hashed % 360, 0.35, max(0.6, 0.7 - depth * 0.02), TILE_ALPHA)
    return _by_path(hashed, depth, palette)


def text_color_for(background: Color) -> Color:
    """Black or white, whichever reads better on background."""
    luminance = (0.2126 * background.r + 0.7152 * background.g + 0.0722 * background.b) / 255.0
    return WHITE if luminance < 0.6 else BLACK
