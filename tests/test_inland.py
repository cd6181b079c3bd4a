"""Tests for the inland generator."""

import math

import numpy as np
import pytest

from hexterrain.config import InlandConfig, InlandParam
from hexterrain.exceptions import GenerationError, InvalidParameterError
from hexterrain.generators.base import make_rng
from hexterrain.generators.inland import (
    CENTER_MARKER,
    PROTOTYPES,
    InlandGenerator,
    Region,
    classify_region,
    decay_multiplier,
)
from hexterrain.hexmap import HexMap
from hexterrain.terrain_types import DebugTerrain, TerrainType


@pytest.fixture
def regions_map() -> tuple[HexMap, list[Region]]:
    """30x20 map with regions built from a fixed seed."""
    hex_map = HexMap(30, 20)
    regions = InlandGenerator().build_regions(hex_map, seed=7)
    return hex_map, regions


def _connected(hex_map: HexMap, tiles: list[int]) -> bool:
    members = set(tiles)
    seen = {tiles[0]}
    stack = [tiles[0]]
    while stack:
        index = stack.pop()
        for n in hex_map.neighbor_indices(index):
            if n in members and n not in seen:
                seen.add(n)
                stack.append(n)
    return seen == members


class TestDecayMultiplier:
    """Tests for the centre spacing decay curve."""

    @pytest.mark.parametrize("distance", [0, 1, 2, 3])
    def test_zero_close_to_center(self, distance: int) -> None:
        assert decay_multiplier(distance) == 0.0

    def test_rises_with_distance(self) -> None:
        assert decay_multiplier(4) == pytest.approx(math.log10(2.0 / 1.1))
        assert decay_multiplier(5) > decay_multiplier(4)

    def test_capped_at_one(self) -> None:
        assert decay_multiplier(100) == 1.0


class TestClassifyRegion:
    """Tests for nearest-prototype classification."""

    @pytest.mark.parametrize(("terrain", "t", "f", "h"), PROTOTYPES)
    def test_prototype_maps_to_itself(
        self, terrain: TerrainType, t: float, f: float, h: float
    ) -> None:
        assert classify_region(t, f, h) == terrain

    def test_nearest_wins(self) -> None:
        assert classify_region(0.85, 0.4, 0.05) == TerrainType.DESERT
        assert classify_region(0.05, 0.5, 0.5) == TerrainType.ICE
        assert classify_region(0.5, 0.95, 0.5) == TerrainType.MOUNTAIN


class TestRegionCount:
    """Tests for the number of regions."""

    def test_small_map_has_one(self) -> None:
        generator = InlandGenerator(InlandConfig(region_size=0.0))
        assert generator.region_count(HexMap(5, 7)) == 1
        assert generator.region_count(HexMap(3, 3)) == 1

    def test_medium_default(self) -> None:
        assert InlandGenerator().region_count(HexMap(100, 50)) == 5000 // 65

    def test_larger_regions_fewer(self) -> None:
        small = InlandGenerator(InlandConfig(region_size=InlandParam.LOW))
        large = InlandGenerator(InlandConfig(region_size=InlandParam.HIGH))
        hex_map = HexMap(100, 50)
        assert large.region_count(hex_map) < small.region_count(hex_map)


class TestCenters:
    """Tests for weighted centre selection."""

    def test_distinct(self) -> None:
        hex_map = HexMap(40, 30)
        centers = InlandGenerator().generate_centers(hex_map, make_rng(3))
        assert len(centers) == InlandGenerator().region_count(hex_map)
        assert len(set(centers)) == len(centers)

    def test_every_tile_a_center(self) -> None:
        """Asking for one centre per tile falls back to free tiles."""
        hex_map = HexMap(6, 5)
        centers = InlandGenerator().generate_centers(hex_map, make_rng(3), count=30)
        assert sorted(centers) == list(range(30))

    @pytest.mark.parametrize("count", [0, 31])
    def test_invalid_count(self, count: int) -> None:
        with pytest.raises(InvalidParameterError):
            InlandGenerator().generate_centers(HexMap(6, 5), make_rng(3), count=count)

    def test_polar_rows_faded(self) -> None:
        hex_map = HexMap(10, 20)
        weights = InlandGenerator._initial_weights(hex_map)
        assert np.all(weights[:10] == 0.0)
        assert np.all(weights[-10:] == 0.0)
        np.testing.assert_allclose(weights[10:20], math.sqrt(0.5))
        assert np.all(weights[20:-20] == 1.0)

    def test_centers_avoid_polar_rows(self) -> None:
        hex_map = HexMap(40, 30)
        centers = InlandGenerator().generate_centers(hex_map, make_rng(11))
        rows = {hex_map.field[c].y for c in centers}
        assert 0 not in rows
        assert hex_map.size_y - 1 not in rows


class TestGrowRegions:
    """Tests for simultaneous region growth."""

    def test_every_tile_claimed_once(self, regions_map) -> None:
        hex_map, regions = regions_map
        tiles = sorted(t for region in regions for t in region.tiles)
        assert tiles == list(range(hex_map.area))

    def test_center_in_region(self, regions_map) -> None:
        _, regions = regions_map
        for region in regions:
            assert region.tiles[0] == region.center

    def test_regions_contiguous(self, regions_map) -> None:
        hex_map, regions = regions_map
        for region in regions:
            assert _connected(hex_map, region.tiles)

    def test_single_region_fills_map(self) -> None:
        hex_map = HexMap(8, 6)
        regions = InlandGenerator().grow_regions(hex_map, [20], make_rng(1))
        assert len(regions) == 1
        assert sorted(regions[0].tiles) == list(range(hex_map.area))

    def test_unreachable_tiles_raise(self, monkeypatch) -> None:
        """Growth fails loudly when frontiers cannot reach every tile."""
        hex_map = HexMap(8, 6)
        isolated = np.full((hex_map.area, 6), -1, dtype=np.int64)
        monkeypatch.setattr(hex_map, "neighbor_table", lambda: isolated)
        with pytest.raises(GenerationError):
            InlandGenerator().grow_regions(hex_map, [0], make_rng(1))


class TestAttributes:
    """Tests for region climate attributes."""

    def test_attributes_in_unit_range(self, regions_map) -> None:
        _, regions = regions_map
        for region in regions:
            assert 0.0 <= region.temperature <= 1.0
            assert 0.0 <= region.humidity <= 1.0
            assert 0.0 <= region.flatness <= 1.0

    def test_water_regions_from_humidity(self) -> None:
        hex_map = HexMap(30, 20)
        config = InlandConfig(humidity=1.0, water_humidity=0.8)
        regions = InlandGenerator(config).build_regions(hex_map, seed=2)
        for region in regions:
            assert region.water_region == (region.humidity >= 0.8)
        assert any(region.water_region for region in regions)

    def test_colder_towards_poles(self) -> None:
        """Mean temperature of polar regions is below that of central ones."""
        hex_map = HexMap(60, 60)
        regions = InlandGenerator().build_regions(hex_map, seed=5)
        latitude = {
            id(r): abs(hex_map.field[r.center].center_y / hex_map.absolute_size_y - 0.5)
            for r in regions
        }
        polar = [r.temperature for r in regions if latitude[id(r)] > 0.3]
        central = [r.temperature for r in regions if latitude[id(r)] < 0.15]
        assert polar and central
        assert np.mean(polar) < np.mean(central)


class TestInlandGenerator:
    """End-to-end tests for InlandGenerator."""

    def test_every_tile_painted(self) -> None:
        hex_map = HexMap(30, 20)
        generator = InlandGenerator(seed=3)
        generator.generate(hex_map)

        markers = [h for h in hex_map if isinstance(h.terrain_type, DebugTerrain)]
        assert len(markers) == generator.region_count(hex_map)
        assert all(h.terrain_type == DebugTerrain(value=CENTER_MARKER) for h in markers)
        for hex in hex_map:
            assert isinstance(hex.terrain_type, (TerrainType, DebugTerrain))

    def test_unmarked_centers(self) -> None:
        hex_map = HexMap(30, 20)
        InlandGenerator(InlandConfig(mark_centers=False), seed=3).generate(hex_map)
        assert all(isinstance(h.terrain_type, TerrainType) for h in hex_map)

    def test_region_tiles_share_terrain(self) -> None:
        hex_map = HexMap(30, 20)
        generator = InlandGenerator(InlandConfig(mark_centers=False))
        regions = generator.build_regions(hex_map, seed=4)
        generator.decorate(hex_map, regions)
        for region in regions:
            assert region.terrain_type is not None
            assert {hex_map.field[t].terrain_type for t in region.tiles} == {region.terrain_type}

    def test_all_water_when_always_humid(self) -> None:
        hex_map = HexMap(20, 12)
        config = InlandConfig(water_humidity=0.0, mark_centers=False)
        InlandGenerator(config, seed=8).generate(hex_map)
        assert hex_map.count(TerrainType.WATER) == hex_map.area

    def test_deterministic_with_same_seed(self) -> None:
        first = HexMap(30, 20)
        second = HexMap(30, 20)
        InlandGenerator(seed=99).generate(first)
        InlandGenerator(seed=99).generate(second)
        np.testing.assert_array_equal(first.terrain_codes(), second.terrain_codes())

    def test_tiny_map_single_region(self) -> None:
        hex_map = HexMap(3, 3)
        generator = InlandGenerator(InlandConfig(region_size=0.0, mark_centers=False), seed=1)
        generator.generate(hex_map)
        assert len({h.terrain_type for h in hex_map}) == 1
