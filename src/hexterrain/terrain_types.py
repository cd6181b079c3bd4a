"""Terrain types assigned to hex tiles."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class TerrainType(str, Enum):
    """Terrain classification of a single hex."""

    FIELD = "field"
    FOREST = "forest"
    DESERT = "desert"
    TUNDRA = "tundra"
    WATER = "water"
    OCEAN = "ocean"
    MOUNTAIN = "mountain"
    IMPASSABLE = "impassable"
    ICE = "ice"
    JUNGLE = "jungle"
    SWAMP = "swamp"
    GRASSLAND = "grassland"

    @property
    def is_water(self) -> bool:
        """Whether this terrain counts as open water."""
        return self in _WATER_TYPES

    @property
    def is_land(self) -> bool:
        """Whether this terrain counts as land for coastline purposes."""
        return self not in _NON_LAND_TYPES


class DebugTerrain(BaseModel, frozen=True):
    """Diagnostic terrain carrying a single grayscale value."""

    kind: Literal["debug"] = "debug"
    value: float


class Debug2dTerrain(BaseModel, frozen=True):
    """Diagnostic terrain carrying a two-channel value."""

    kind: Literal["debug_2d"] = "debug_2d"
    value: tuple[float, float]


Terrain = TerrainType | DebugTerrain | Debug2dTerrain


_WATER_TYPES = frozenset({
    TerrainType.WATER,
    TerrainType.OCEAN,
})

_NON_LAND_TYPES = frozenset({
    TerrainType.WATER,
    TerrainType.OCEAN,
    TerrainType.ICE,
})


# Compact storage codes; both debug variants share one code
DEBUG_CODE = 255

_TERRAIN_CODES: dict[TerrainType, int] = {
    terrain: code for code, terrain in enumerate(TerrainType)
}
_CODE_TERRAINS: dict[int, TerrainType] = {
    code: terrain for terrain, code in _TERRAIN_CODES.items()
}


def terrain_code(terrain: Terrain) -> int:
    """Convert terrain to its uint8 storage code."""
    if isinstance(terrain, TerrainType):
        return _TERRAIN_CODES[terrain]
    return DEBUG_CODE


def terrain_from_code(code: int) -> TerrainType:
    """Convert a uint8 storage code back to a plain TerrainType.

    Raises:
        ValueError: If the code is the debug code or unknown.
    """
    try:
        return _CODE_TERRAINS[int(code)]
    except KeyError:
        raise ValueError(f"No plain terrain for code {code}") from None


def is_debug(terrain: Terrain) -> bool:
    """Whether terrain is one of the diagnostic variants."""
    return not isinstance(terrain, TerrainType)
