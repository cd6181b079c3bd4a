"""Islands generator: polar ice, scattered islands, continents and coasts.

Generation runs four passes in a fixed order over a map filled with ocean:

1. ice: polar caps from latitude and Worley noise
2. land: small islands from Fbm noise plus a few noisy elliptical continents
3. decorator: mountains, climate zones and wind-fed jungles
4. ocean: a band of shallow water along every coast
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.typing import NDArray

from ..config import IslandsConfig
from ..hex import Hex, hex_distance
from ..hexmap import HexMap
from ..noise import FbmNoise, NoiseField, SimplexNoise, WorleyNoise
from ..terrain_types import Terrain, TerrainType
from .base import MapGenerator, log_terrain_stats, make_rng
from .smoothing import smooth_pass

logger = structlog.get_logger()

# Offset between the two wind components' sample points
WIND_PHASE = 512.0
WIND_SCALE = 0.15


@dataclass(frozen=True)
class IslandNoise:
    """The three noise fields used by one islands run."""

    ice: NoiseField
    land: NoiseField
    detail: NoiseField

    @classmethod
    def for_seed(cls, seed: int) -> "IslandNoise":
        return cls(
            ice=WorleyNoise(seed),
            land=FbmNoise(seed),
            detail=SimplexNoise(seed),
        )


def distance_to_edge(hex: Hex, hex_map: HexMap) -> float:
    """1.0 on the equator row, falling to 0.0 at the top and bottom edges."""
    return 1.0 - abs(hex.center_y / hex_map.absolute_size_y - 0.5) * 2.0


def _sample(noise: NoiseField, hex: Hex, scale: float) -> float:
    return noise.sample(hex.center_x * scale, hex.center_y * scale)


def _is_land(terrain: Terrain) -> bool:
    return isinstance(terrain, TerrainType) and terrain.is_land


class IslandsGenerator(MapGenerator):
    """Generates a world of scattered islands and a few larger continents."""

    def __init__(self, config: IslandsConfig | None = None, seed: int | None = None):
        super().__init__(seed)
        self.config = config or IslandsConfig()

    @property
    def ocean_distance(self) -> int:
        """Maximum width of the coastal water band."""
        return self.config.ocean_distance

    @ocean_distance.setter
    def ocean_distance(self, value: int) -> None:
        # model_copy skips validation
        self.config = IslandsConfig.model_validate(
            self.config.model_dump() | {"ocean_distance": value}
        )

    def generate(self, hex_map: HexMap) -> None:
        seed = self.next_seed()
        logger.info(
            "islands_generation_started",
            seed=seed,
            size_x=hex_map.size_x,
            size_y=hex_map.size_y,
        )

        hex_map.fill(TerrainType.OCEAN)
        noise = IslandNoise.for_seed(seed)

        noise_scale = 60.0 / hex_map.absolute_size_x
        land_noise_scale = 8.0 / hex_map.absolute_size_x

        self.ice_pass(hex_map, noise.ice, noise_scale)
        logger.debug("pass_completed", name="ice", ice=hex_map.count(TerrainType.ICE))
        self.land_pass(hex_map, noise.land, land_noise_scale, seed)
        logger.debug("pass_completed", name="land", field=hex_map.count(TerrainType.FIELD))
        self.decorator_pass(hex_map, noise.detail, noise_scale, seed)
        logger.debug("pass_completed", name="decorator")
        self.ocean_pass(hex_map, noise.land, land_noise_scale)
        logger.debug("pass_completed", name="ocean", water=hex_map.count(TerrainType.WATER))

        log_terrain_stats(hex_map)

    def _smooth_both_ways(
        self, hex_map: HexMap, first: TerrainType, second: TerrainType, rounds: int
    ) -> None:
        threshold = self.config.smoothing_threshold
        for _ in range(rounds):
            smooth_pass(hex_map, first, second, threshold)
            smooth_pass(hex_map, second, first, threshold)

    def ice_pass(self, hex_map: HexMap, noise: NoiseField, noise_scale: float) -> None:
        """Cover the top and bottom of the map with ice.

        The first and last rows always become ice. Other tiles become ice when
        their noisy distance to the map edge falls below the ice threshold.
        """
        last_row = hex_map.size_y - 1
        for hex in hex_map.field:
            if hex.y == 0 or hex.y == last_row:
                hex.terrain_type = TerrainType.ICE
                continue
            noisy = distance_to_edge(hex, hex_map) + _sample(noise, hex, noise_scale) * self.config.ice_noise_weight
            if noisy < self.config.ice_threshold:
                hex.terrain_type = TerrainType.ICE

        self._smooth_both_ways(hex_map, TerrainType.OCEAN, TerrainType.ICE, rounds=2)

    def land_pass(
        self, hex_map: HexMap, noise: NoiseField, noise_scale: float, seed: int
    ) -> None:
        """Raise small noise islands, then overlay elliptical continents."""
        values = [_sample(noise, hex, noise_scale) for hex in hex_map.field]

        for hex, value in zip(hex_map.field, values):
            if hex.terrain_type == TerrainType.OCEAN and value > self.config.land_threshold:
                hex.terrain_type = TerrainType.FIELD

        self._smooth_both_ways(hex_map, TerrainType.FIELD, TerrainType.OCEAN, rounds=3)

        rng = make_rng(seed)
        for _ in range(self.config.continent_count):
            foci = self._continent_foci(hex_map, rng)
            for hex, value in zip(hex_map.field, values):
                if hex.terrain_type != TerrainType.OCEAN:
                    continue
                if value * 3.0 + self._ellipse_distance(hex, hex_map, foci) < self.config.continent_threshold:
                    hex.terrain_type = TerrainType.FIELD

    @staticmethod
    def _continent_foci(
        hex_map: HexMap, rng: np.random.Generator
    ) -> tuple[tuple[float, float], ...]:
        """Two foci of a continent and the point halfway between them."""
        abs_x = hex_map.absolute_size_x
        abs_y = hex_map.absolute_size_y

        first = (rng.uniform(0.0, abs_x), rng.uniform(0.1, 0.9) * abs_y)
        center = (
            abs_x / 2.0 + rng.uniform(-10.0, 10.0),
            abs_y / 2.0 + rng.uniform(-10.0, 10.0),
        )

        vx, vy = center[0] - first[0], center[1] - first[1]
        length = math.hypot(vx, vy)
        if length > 0:
            vx, vy = vx / length, vy / length

        island_len = rng.uniform(abs_y / 4.0, abs_y / 2.5)
        second = (first[0] + vx * island_len, first[1] + vy * island_len)
        middle = ((first[0] + second[0]) / 2.0, (first[1] + second[1]) / 2.0)
        return first, second, middle

    @staticmethod
    def _ellipse_distance(
        hex: Hex, hex_map: HexMap, foci: tuple[tuple[float, float], ...]
    ) -> float:
        first, second, middle = foci
        cx, cy = hex.center
        first_dst = math.hypot(cx - first[0], cy - first[1])
        second_dst = math.hypot(cx - second[0], cy - second[1])
        middle_dst = math.hypot(cx - middle[0], cy - middle[1]) * 0.6
        return min(first_dst, second_dst, middle_dst) / hex_map.absolute_size_x * 100.0

    def decorator_pass(
        self, hex_map: HexMap, noise: NoiseField, noise_scale: float, seed: int
    ) -> None:
        """Turn plain fields into mountains and climate zones, then add jungles."""
        rng = make_rng(seed)
        for hex in hex_map.field:
            if hex.terrain_type != TerrainType.FIELD:
                continue
            if rng.random() < self.config.mountain_chance:
                hex.terrain_type = TerrainType.MOUNTAIN
                continue

            value = _sample(noise, hex, noise_scale)
            temperature = 70.0 * distance_to_edge(hex, hex_map) - 20.0 + value * 5.0
            hex.terrain_type = _climate_terrain(temperature, value)

        # Deserts with wind blowing towards water get moisture and become jungle
        wind = self.wind_field(hex_map, noise, noise_scale)
        reach = hex_map.avg_size * 0.2
        for index, hex in enumerate(hex_map.field):
            if hex.terrain_type != TerrainType.DESERT:
                continue
            wx, wy = wind[index]
            target = hex_map.closest_tile(hex.center_x + wx * reach, hex.center_y + wy * reach)
            if hex_map.field[target].terrain_type in (TerrainType.WATER, TerrainType.OCEAN):
                hex.terrain_type = TerrainType.JUNGLE

    @staticmethod
    def wind_field(
        hex_map: HexMap, noise: NoiseField, noise_scale: float
    ) -> NDArray[np.float64]:
        """Unit wind vector per tile from two phase-shifted noise samples.

        Returns:
            Array of shape (area, 2); a zero sample pair gives a zero vector.
        """
        scale = noise_scale * WIND_SCALE
        wind = np.zeros((hex_map.area, 2), dtype=np.float64)
        for index, hex in enumerate(hex_map.field):
            x = hex.center_x * scale
            y = hex.center_y * scale
            wind[index, 0] = noise.sample(x + WIND_PHASE, y)
            wind[index, 1] = noise.sample(x - WIND_PHASE, y)

        length = np.hypot(wind[:, 0], wind[:, 1])
        nonzero = length > 0
        wind[nonzero] /= length[nonzero, np.newaxis]
        return wind

    def ocean_pass(self, hex_map: HexMap, noise: NoiseField, noise_scale: float) -> None:
        """Turn ocean near land into shallow water.

        Does nothing when the map has no land.
        """
        land_rows: list[list[int]] = [[] for _ in range(hex_map.size_y)]
        land_tiles = 0
        for hex in hex_map.field:
            if _is_land(hex.terrain_type):
                land_rows[hex.y].append(hex.x)
                land_tiles += 1

        if land_tiles == 0:
            logger.info("ocean_pass_skipped", reason="no_land")
            return

        distance = self.config.ocean_distance
        for hex in hex_map.field:
            if hex.terrain_type != TerrainType.OCEAN:
                continue
            value = _sample(noise, hex, noise_scale)
            min_y = max(hex.y - distance, 0)
            max_y = min(hex.y + distance, hex_map.size_y - 1)
            if self._is_coastal(hex, land_rows, min_y, max_y, value):
                hex.terrain_type = TerrainType.WATER

        smooth_pass(hex_map, TerrainType.OCEAN, TerrainType.WATER, self.config.smoothing_threshold)

    def _is_coastal(
        self,
        hex: Hex,
        land_rows: list[list[int]],
        min_y: int,
        max_y: int,
        noise_value: float,
    ) -> bool:
        distance = self.config.ocean_distance
        noise_passes = noise_value >= self.config.coast_noise_threshold

        dst_to_land = math.inf
        for y in range(min_y, max_y + 1):
            distance_in_line = math.inf
            for x in land_rows[y]:
                dst = hex_distance(hex.coords, (x, y))
                # distance along a row only grows past the closest tile
                if dst > distance_in_line:
                    break
                distance_in_line = dst
                if dst < dst_to_land:
                    dst_to_land = dst
                    if (dst_to_land <= distance and noise_passes) or dst_to_land == 1:
                        return True
        return False


def _climate_terrain(temperature: float, noise_value: float) -> TerrainType:
    if temperature < -5.0:
        return TerrainType.TUNDRA
    if -5.0 < temperature < 25.0 and noise_value > -0.6:
        return TerrainType.FOREST
    if temperature > 35.0 and noise_value > -0.6:
        return TerrainType.DESERT
    return TerrainType.FIELD
