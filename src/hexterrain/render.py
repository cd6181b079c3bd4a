"""Preview rendering of hex maps to PIL images.

Every hex is drawn as a filled polygon with ``ImageDraw``. This is meant for
inspecting generator output, not as a production renderer.
"""

import math

import numpy as np
from PIL import Image, ImageDraw

from .hex import RATIO, Hex
from .hexmap import HexMap
from .terrain_types import Debug2dTerrain, DebugTerrain, Terrain, TerrainType

RGB = tuple[int, int, int]

DEFAULT_COLORS: dict[TerrainType, RGB] = {
    TerrainType.WATER: (74, 128, 214),
    TerrainType.FIELD: (116, 191, 84),
    TerrainType.ICE: (202, 208, 209),
    TerrainType.MOUNTAIN: (77, 81, 81),
    TerrainType.FOREST: (86, 161, 54),
    TerrainType.OCEAN: (54, 108, 194),
    TerrainType.TUNDRA: (62, 81, 77),
    TerrainType.DESERT: (214, 200, 109),
    TerrainType.JUNGLE: (64, 163, 16),
    TerrainType.IMPASSABLE: (140, 111, 83),
    TerrainType.SWAMP: (43, 66, 35),
    TerrainType.GRASSLAND: (186, 207, 97),
}

COLOR_JITTER = 4


class ColorMap:
    """Terrain type to RGB colour lookup."""

    def __init__(self, colors: dict[TerrainType, RGB] | None = None):
        self._colors = dict(DEFAULT_COLORS)
        if colors:
            self._colors.update(colors)

    def set_color(self, terrain: TerrainType, color: RGB) -> None:
        """Override the colour of a terrain type."""
        self._colors[terrain] = color

    def color_for(self, terrain: Terrain) -> RGB:
        """Colour for a terrain; debug variants encode their payload."""
        match terrain:
            case DebugTerrain(value=value):
                gray = _channel(value)
                return (gray, gray, gray)
            case Debug2dTerrain(value=(first, second)):
                return (_channel(first), _channel(second), 0)
            case _:
                return self._colors[terrain]


def _channel(value: float) -> int:
    return int(min(max(value, 0.0), 1.0) * 255)


def hex_corners(hex: Hex, multiplier: float, offset_x: float = 0.0) -> list[tuple[float, float]]:
    """Pixel corners of a hex, starting at the top and going counter-clockwise.

    Order: top, upper left, lower left, bottom, lower right, upper right.
    """
    cx = (hex.center_x + offset_x) * multiplier
    cy = hex.center_y * multiplier
    half_w = 0.5 * multiplier
    half_h = RATIO / 2.0 * multiplier
    quarter_h = RATIO / 4.0 * multiplier
    return [
        (cx, cy - half_h),
        (cx - half_w, cy - quarter_h),
        (cx - half_w, cy + quarter_h),
        (cx, cy + half_h),
        (cx + half_w, cy + quarter_h),
        (cx + half_w, cy - quarter_h),
    ]


def image_size(hex_map: HexMap, multiplier: float) -> tuple[int, int]:
    """Pixel size of a rendered map."""
    return (
        math.ceil(hex_map.absolute_size_x * multiplier),
        math.ceil(hex_map.absolute_size_y * multiplier),
    )


def render_preview(
    hex_map: HexMap,
    multiplier: float = 12.0,
    wrap_map: bool = False,
    randomize_colors: bool = False,
    seed: int = 0,
    colors: ColorMap | None = None,
) -> Image.Image:
    """Render the map as an RGB image.

    Args:
        hex_map: Map to render.
        multiplier: Width of one hex in pixels.
        wrap_map: Repeat tiles across the left and right edges so the
            wrapped map has no jagged border.
        randomize_colors: Jitter each tile colour slightly.
        seed: Seed for the colour jitter.
        colors: Colour map (default: :data:`DEFAULT_COLORS`).

    Returns:
        PIL Image of the map.
    """
    if multiplier <= 0:
        raise ValueError(f"multiplier must be positive, got {multiplier}")

    colors = colors or ColorMap()
    width, height = image_size(hex_map, multiplier)
    img = Image.new("RGB", (width, height))
    draw = ImageDraw.Draw(img)
    rng = np.random.default_rng(seed)

    offsets = (0.0, -float(hex_map.size_x), float(hex_map.size_x)) if wrap_map else (0.0,)

    for hex in hex_map.field:
        color = colors.color_for(hex.terrain_type)
        if randomize_colors:
            jitter = rng.integers(-COLOR_JITTER, COLOR_JITTER + 1, size=3)
            color = tuple(int(c) for c in np.clip(np.array(color) + jitter, 0, 255))

        for offset in offsets:
            left = hex.center_x + offset - 0.5
            if left >= hex_map.absolute_size_x or left + 1.0 <= 0.0:
                continue
            draw.polygon(hex_corners(hex, multiplier, offset), fill=color)

    return img
