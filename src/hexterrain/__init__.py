"""Procedural terrain generation on hexagonal maps.

This package provides an offset-coordinate hex map with wraparound in X,
and generators that classify every tile: a noise-driven islands generator
and a region-growth inland generator.
"""

from .config import (
    GenerationConfig,
    InlandConfig,
    InlandParam,
    IslandsConfig,
    RenderConfig,
    load_config,
)
from .exceptions import (
    GenerationError,
    HexTerrainError,
    IndexOutOfRangeError,
    InvalidParameterError,
)
from .generators import (
    InlandGenerator,
    IslandsGenerator,
    MapGenerator,
    build_generator,
    smooth_pass,
)
from .hex import RATIO, Hex, hex_distance, wrap_x
from .hexmap import HexMap
from .persistence import load_map, save_map
from .terrain_types import Debug2dTerrain, DebugTerrain, Terrain, TerrainType

__all__ = [
    # Map
    "RATIO",
    "Hex",
    "HexMap",
    "hex_distance",
    "wrap_x",
    # Terrain
    "Terrain",
    "TerrainType",
    "DebugTerrain",
    "Debug2dTerrain",
    # Generators
    "MapGenerator",
    "IslandsGenerator",
    "InlandGenerator",
    "build_generator",
    "smooth_pass",
    # Config
    "GenerationConfig",
    "IslandsConfig",
    "InlandConfig",
    "InlandParam",
    "RenderConfig",
    "load_config",
    # Persistence
    "load_map",
    "save_map",
    # Exceptions
    "HexTerrainError",
    "IndexOutOfRangeError",
    "InvalidParameterError",
    "GenerationError",
]
