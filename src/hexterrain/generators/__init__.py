"""Terrain generators that classify every tile of a HexMap."""

from ..config import GenerationConfig
from .base import MapGenerator, log_terrain_stats, make_rng, terrain_stats
from .inland import InlandGenerator, Region, classify_region
from .islands import IslandsGenerator
from .smoothing import smooth_pass


def build_generator(config: GenerationConfig) -> MapGenerator:
    """Create the generator selected by ``config``, seed pinned if given."""
    generator: MapGenerator
    if config.generator == "inland":
        generator = InlandGenerator(config.inland)
    else:
        generator = IslandsGenerator(config.islands)

    if config.seed is not None:
        generator.set_seed(config.seed)
    return generator


__all__ = [
    "InlandGenerator",
    "IslandsGenerator",
    "MapGenerator",
    "Region",
    "build_generator",
    "classify_region",
    "log_terrain_stats",
    "make_rng",
    "smooth_pass",
    "terrain_stats",
]
