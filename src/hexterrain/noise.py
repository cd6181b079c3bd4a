"""Point-sampled 2D noise fields used by the generators.

Every field is deterministic for a fixed seed and input point.
"""

import math
from typing import Protocol

from opensimplex import OpenSimplex

_MASK_64 = (1 << 64) - 1


class NoiseField(Protocol):
    """A 2D scalar noise function."""

    def sample(self, x: float, y: float) -> float:
        """Noise value at ``(x, y)``, roughly in ``[-1, 1]``."""
        ...


class SimplexNoise:
    """Single-octave OpenSimplex noise."""

    def __init__(self, seed: int):
        self.seed = seed
        self._gen = OpenSimplex(seed=seed)

    def sample(self, x: float, y: float) -> float:
        return self._gen.noise2(x, y)


class FbmNoise:
    """Fractal Brownian motion built from OpenSimplex octaves.

    Each octave uses its own seed offset, doubles in frequency (by default)
    and halves in amplitude. The sum is normalized by the total amplitude.
    """

    def __init__(
        self,
        seed: int,
        octaves: int = 6,
        lacunarity: float = 2.0,
        gain: float = 0.5,
        frequency: float = 1.0,
    ):
        self.seed = seed
        self.octaves = octaves
        self.lacunarity = lacunarity
        self.gain = gain
        self.frequency = frequency
        self._octaves = [OpenSimplex(seed=seed + i) for i in range(octaves)]

    def sample(self, x: float, y: float) -> float:
        value = 0.0
        total = 0.0
        amplitude = 1.0
        freq = self.frequency
        for gen in self._octaves:
            value += amplitude * gen.noise2(x * freq, y * freq)
            total += amplitude
            freq *= self.lacunarity
            amplitude *= self.gain
        if total > 0:
            value /= total
        return value


def _hash_cell(seed: int, cx: int, cy: int) -> int:
    """Mix a seed and cell coordinates into 64 pseudo-random bits."""
    h = (seed * 0x9E3779B97F4A7C15 + cx * 0xBF58476D1CE4E5B9 + cy * 0x94D049BB133111EB) & _MASK_64
    h ^= h >> 30
    h = (h * 0xBF58476D1CE4E5B9) & _MASK_64
    h ^= h >> 27
    h = (h * 0x94D049BB133111EB) & _MASK_64
    h ^= h >> 31
    return h


class WorleyNoise:
    """Cellular (Worley) noise with one feature point per unit cell.

    Returns the distance to the nearest feature point, remapped from
    ``[0, 1]`` onto ``[-1, 1]``.
    """

    def __init__(self, seed: int):
        self.seed = seed

    def _feature_point(self, cx: int, cy: int) -> tuple[float, float]:
        h = _hash_cell(self.seed, cx, cy)
        fx = (h & 0xFFFFFFFF) / 0x100000000
        fy = (h >> 32) / 0x100000000
        return cx + fx, cy + fy

    def sample(self, x: float, y: float) -> float:
        ix = math.floor(x)
        iy = math.floor(y)
        nearest = math.inf
        for cy in range(iy - 1, iy + 2):
            for cx in range(ix - 1, ix + 2):
                px, py = self._feature_point(cx, cy)
                dist = math.hypot(px - x, py - y)
                if dist < nearest:
                    nearest = dist
        return min(nearest, 1.0) * 2.0 - 1.0
