"""Shared test fixtures for hex terrain tests."""

import pytest

from hexterrain.hexmap import HexMap
from hexterrain.terrain_types import TerrainType


@pytest.fixture
def square_map() -> HexMap:
    """4x4 map with default (water) terrain."""
    return HexMap(4, 4)


@pytest.fixture
def small_map() -> HexMap:
    """10x8 map with default (water) terrain."""
    return HexMap(10, 8)


@pytest.fixture
def ocean_map() -> HexMap:
    """20x20 map filled with ocean."""
    hex_map = HexMap(20, 20)
    hex_map.fill(TerrainType.OCEAN)
    return hex_map


@pytest.fixture
def half_land_map() -> HexMap:
    """10x10 map with field on the left half and ocean on the right.

    The split is by pixel-space centre, so the border zig-zags between rows.
    """
    hex_map = HexMap(10, 10)
    for hex in hex_map.field:
        if hex.center_x < 5.0:
            hex.terrain_type = TerrainType.FIELD
        else:
            hex.terrain_type = TerrainType.OCEAN
    return hex_map
