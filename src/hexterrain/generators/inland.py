"""Inland generator: climate regions grown from weighted random centres.

Generation runs in stages:

1. choose region centres by weighted sampling, thinning weights around each
   pick so centres keep apart and avoid the polar rows
2. grow all regions at once from their centres, one random frontier tile per
   region per round, until every tile belongs to a region
3. give every region a temperature, humidity and flatness
4. classify each region by the nearest climate prototype and paint its tiles
"""

import math
from dataclasses import dataclass, field

import numpy as np
import structlog
from numpy.typing import NDArray

from ..config import InlandConfig, param_value
from ..exceptions import GenerationError, InvalidParameterError
from ..hexmap import HexMap
from ..terrain_types import DebugTerrain, TerrainType
from .base import MapGenerator, log_terrain_stats, make_rng

logger = structlog.get_logger()

# (terrain, temperature, flatness, humidity)
PROTOTYPES: tuple[tuple[TerrainType, float, float, float], ...] = (
    (TerrainType.FIELD, 0.6, 0.4, 0.5),
    (TerrainType.FOREST, 0.4, 0.6, 0.5),
    (TerrainType.DESERT, 0.8, 0.4, 0.1),
    (TerrainType.TUNDRA, 0.2, 0.5, 0.5),
    (TerrainType.WATER, 0.5, 0.5, 1.0),
    (TerrainType.MOUNTAIN, 0.5, 1.0, 0.5),
    (TerrainType.ICE, 0.0, 0.5, 0.5),
    (TerrainType.JUNGLE, 0.8, 0.5, 0.8),
    (TerrainType.SWAMP, 0.5, 0.5, 0.95),
    (TerrainType.GRASSLAND, 0.45, 0.6, 0.5),
)

CENTER_MARKER = 0.1

MIN_REGION_AREA = 35
REGION_AREA_SPAN = 60
CENTER_SPACING = 0.2
FADE_BAND = 0.1
DECAY_STRENGTH = 1.1
TEMPERATURE_JITTER = 0.1
ATTRIBUTE_JITTER = 0.15


@dataclass
class Region:
    """Tiles grown from one centre and their shared climate."""

    center: int
    temperature: float = 0.5
    humidity: float = 0.5
    flatness: float = 0.5
    water_region: bool = False
    terrain_type: TerrainType | None = None
    tiles: list[int] = field(default_factory=list)


def decay_multiplier(distance: float) -> float:
    """Weight multiplier for tiles ``distance`` rings away from a new centre.

    Zero up to three rings out, rising logarithmically to one further away.
    """
    if distance - 2.0 <= 0:
        return 0.0
    return min(max(math.log10((distance - 2.0) / DECAY_STRENGTH), 0.0), 1.0)


def classify_region(temperature: float, flatness: float, humidity: float) -> TerrainType:
    """Terrain of the nearest climate prototype; earlier entries win ties."""
    best = PROTOTYPES[0][0]
    smallest = math.inf
    for terrain, t, f, h in PROTOTYPES:
        dist = math.sqrt((t - temperature) ** 2 + (f - flatness) ** 2 + (h - humidity) ** 2)
        if dist < smallest:
            smallest = dist
            best = terrain
    return best


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class InlandGenerator(MapGenerator):
    """Generates a continent-wide map of contiguous climate regions."""

    def __init__(self, config: InlandConfig | None = None, seed: int | None = None):
        super().__init__(seed)
        self.config = config or InlandConfig()

    def region_count(self, hex_map: HexMap) -> int:
        """Number of regions for the map, never less than one."""
        area_per_region = int(param_value(self.config.region_size) * REGION_AREA_SPAN + MIN_REGION_AREA)
        return max(1, hex_map.area // area_per_region)

    def generate(self, hex_map: HexMap) -> None:
        seed = self.next_seed()
        logger.info(
            "inland_generation_started",
            seed=seed,
            size_x=hex_map.size_x,
            size_y=hex_map.size_y,
        )

        regions = self.build_regions(hex_map, seed)
        self.decorate(hex_map, regions)

        log_terrain_stats(hex_map)

    def build_regions(self, hex_map: HexMap, seed: int) -> list[Region]:
        """Seed, grow and parameterize regions without touching terrain."""
        rng = make_rng(seed)

        centers = self.generate_centers(hex_map, rng)
        logger.debug("regions_seeded", count=len(centers))

        regions = self.grow_regions(hex_map, centers, rng)
        logger.debug("regions_grown", count=len(regions))

        self.assign_attributes(hex_map, regions, rng)
        return regions

    def generate_centers(
        self,
        hex_map: HexMap,
        rng: np.random.Generator,
        count: int | None = None,
    ) -> list[int]:
        """Pick region centres by weighted sampling with spatial decay.

        Args:
            hex_map: Map to place centres on.
            rng: Random number generator.
            count: Number of centres (default: :meth:`region_count`).

        Returns:
            Distinct tile indices, in the order they were drawn.
        """
        if count is None:
            count = self.region_count(hex_map)
        if count < 1 or count > hex_map.area:
            raise InvalidParameterError(
                f"region count must be in [1, {hex_map.area}], got {count}"
            )

        weights = self._initial_weights(hex_map)
        taken = np.zeros(hex_map.area, dtype=np.bool_)
        spacing = int(hex_map.avg_size * CENTER_SPACING)

        centers: list[int] = []
        for _ in range(count):
            index = self._draw_center(weights, taken, rng)
            centers.append(index)
            taken[index] = True
            weights[index] = 0.0

            for r in range(1, spacing):
                mult = decay_multiplier(r)
                for x, y in hex_map.ring(hex_map.field[index], r):
                    weights[hex_map.coords_to_index(x, y)] *= mult

        return centers

    @staticmethod
    def _initial_weights(hex_map: HexMap) -> NDArray[np.float64]:
        """Uniform weights, faded towards the top and bottom rows."""
        weights = np.ones(hex_map.area, dtype=np.float64)
        size_x = hex_map.size_x
        fadeout = int(hex_map.size_y * FADE_BAND)
        for i in range(fadeout):
            strength = math.sqrt(i / fadeout)
            bottom = hex_map.size_y - 1 - i
            weights[i * size_x:(i + 1) * size_x] *= strength
            weights[bottom * size_x:(bottom + 1) * size_x] *= strength
        return weights

    @staticmethod
    def _draw_center(
        weights: NDArray[np.float64],
        taken: NDArray[np.bool_],
        rng: np.random.Generator,
    ) -> int:
        total = float(weights.sum())
        if total <= 0.0:
            # every weight decayed away; fall back to any free tile
            free = np.flatnonzero(~taken)
            return int(free[rng.integers(0, len(free))])

        cumulative = np.cumsum(weights)
        draw = rng.random() * total
        index = int(np.searchsorted(cumulative, draw, side="right"))
        if index >= len(weights) or weights[index] <= 0.0:
            index = int(np.flatnonzero(weights > 0.0)[-1])
        return index

    def grow_regions(
        self,
        hex_map: HexMap,
        centers: list[int],
        rng: np.random.Generator,
    ) -> list[Region]:
        """Grow regions from their centres until every tile is claimed.

        Each round, every region with a non-empty frontier removes one random
        frontier tile. An unclaimed tile joins the region and its unclaimed
        neighbours join the frontier; a tile already claimed is dropped.

        Raises:
            GenerationError: If frontiers run dry with tiles still unclaimed.
        """
        neighbor_lists = [
            [n for n in row if n >= 0] for row in hex_map.neighbor_table().tolist()
        ]
        owner = [-1] * hex_map.area

        regions = [Region(center=c, tiles=[c]) for c in centers]
        for i, c in enumerate(centers):
            owner[c] = i

        frontiers: list[list[int]] = []
        in_frontier: list[set[int]] = []
        for c in centers:
            frontier: list[int] = []
            members: set[int] = set()
            for n in neighbor_lists[c]:
                if owner[n] < 0 and n not in members:
                    frontier.append(n)
                    members.add(n)
            frontiers.append(frontier)
            in_frontier.append(members)

        remaining = hex_map.area - len(centers)
        while remaining > 0:
            progressed = False
            for i, region in enumerate(regions):
                if remaining == 0:
                    break
                frontier = frontiers[i]
                if not frontier:
                    continue
                progressed = True

                pick = int(rng.integers(0, len(frontier)))
                tile = frontier[pick]
                frontier[pick] = frontier[-1]
                frontier.pop()
                in_frontier[i].discard(tile)

                if owner[tile] >= 0:
                    continue

                owner[tile] = i
                region.tiles.append(tile)
                remaining -= 1

                for n in neighbor_lists[tile]:
                    if owner[n] < 0 and n not in in_frontier[i]:
                        frontier.append(n)
                        in_frontier[i].add(n)

            if not progressed:
                raise GenerationError(f"{remaining} tiles unreachable from region centres")

        return regions

    def assign_attributes(
        self,
        hex_map: HexMap,
        regions: list[Region],
        rng: np.random.Generator,
    ) -> None:
        """Derive each region's climate from the global parameters.

        Temperature drops towards the poles; every attribute gets a small
        random jitter and is clamped into ``[0, 1]``.
        """
        temperature = param_value(self.config.temperature)
        humidity = param_value(self.config.humidity)
        flatness = param_value(self.config.flatness)

        for region in regions:
            center = hex_map.field[region.center]
            norm_y = center.center_y / hex_map.absolute_size_y
            latitude = abs((norm_y - 0.5) * 2.0)

            jitter = rng.uniform(-1.0, 1.0)
            region.temperature = _clamp01(
                temperature + TEMPERATURE_JITTER * jitter - 0.2 * (latitude + 0.5)
            )
            region.humidity = _clamp01(humidity + rng.uniform(-1.0, 1.0) * ATTRIBUTE_JITTER)
            region.flatness = _clamp01(flatness + rng.uniform(-1.0, 1.0) * ATTRIBUTE_JITTER)
            region.water_region = region.humidity >= self.config.water_humidity

    def decorate(self, hex_map: HexMap, regions: list[Region]) -> None:
        """Paint every region's tiles with its resolved terrain."""
        for region in regions:
            if region.water_region:
                region.terrain_type = TerrainType.WATER
            else:
                region.terrain_type = classify_region(
                    region.temperature, region.flatness, region.humidity
                )
            for index in region.tiles:
                hex_map.field[index].terrain_type = region.terrain_type

        if self.config.mark_centers:
            for region in regions:
                hex_map.field[region.center].terrain_type = DebugTerrain(value=CENTER_MARKER)
