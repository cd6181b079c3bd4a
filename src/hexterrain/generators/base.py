"""Common generator interface, seeding and statistics."""

from abc import ABC, abstractmethod

import numpy as np
import structlog

from ..exceptions import InvalidParameterError
from ..hexmap import HexMap
from ..terrain_types import TerrainType, is_debug

logger = structlog.get_logger()

SEED_LIMIT = 2**32


def make_rng(seed: int) -> np.random.Generator:
    """Create the deterministic RNG for a 32-bit seed.

    The seed is expanded to PCG64 state by numpy's ``SeedSequence``.
    """
    return np.random.default_rng(np.random.SeedSequence(seed))


def random_seed() -> int:
    """Draw a fresh 32-bit seed from OS entropy."""
    return int(np.random.default_rng().integers(0, SEED_LIMIT))


class MapGenerator(ABC):
    """Base class for generators that classify every tile of a HexMap.

    A generator either uses a pinned seed or draws a new one on each call
    to :meth:`generate`. The seed actually used is kept in ``last_seed``.
    """

    def __init__(self, seed: int | None = None):
        self.seed: int | None = None
        self.last_seed: int | None = None
        if seed is not None:
            self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        """Pin future generation to ``seed``."""
        if not 0 <= seed < SEED_LIMIT:
            raise InvalidParameterError(f"Seed must fit in 32 bits, got {seed}")
        self.seed = seed

    def reset_seed(self) -> None:
        """Draw a fresh random seed on every future call."""
        self.seed = None

    def next_seed(self) -> int:
        """Seed for the next run, recorded as ``last_seed``."""
        seed = self.seed if self.seed is not None else random_seed()
        self.last_seed = seed
        return seed

    @abstractmethod
    def generate(self, hex_map: HexMap) -> None:
        """Classify every tile of ``hex_map`` in place."""


def terrain_stats(hex_map: HexMap) -> dict[str, int]:
    """Count tiles per terrain name; debug variants are counted together."""
    counts = {terrain.value: 0 for terrain in TerrainType}
    counts["debug"] = 0
    for hex in hex_map.field:
        if is_debug(hex.terrain_type):
            counts["debug"] += 1
        else:
            counts[hex.terrain_type.value] += 1
    return counts


def log_terrain_stats(hex_map: HexMap) -> None:
    """Log terrain generation statistics."""
    total = hex_map.area
    counts = terrain_stats(hex_map)

    logger.info("terrain_stats", tiles=total, size_x=hex_map.size_x, size_y=hex_map.size_y)
    for name, count in counts.items():
        if count == 0:
            continue
        logger.info("terrain_count", terrain=name, count=count, percent=round(count / total * 100, 1))
