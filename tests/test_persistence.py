"""Tests for map save and load."""

from pathlib import Path

import numpy as np
import pytest

from hexterrain.generators import IslandsGenerator
from hexterrain.hexmap import HexMap
from hexterrain.persistence import load_map, save_map
from hexterrain.terrain_types import Debug2dTerrain, DebugTerrain, TerrainType


class TestSaveLoad:
    """Tests for .npz persistence."""

    def test_round_trip_generated(self, tmp_path: Path) -> None:
        hex_map = HexMap(20, 12)
        IslandsGenerator(seed=3).generate(hex_map)
        path = tmp_path / "map.npz"

        save_map(path, hex_map, seed=3, generator="islands")
        loaded, metadata = load_map(path)

        assert (loaded.size_x, loaded.size_y) == (20, 12)
        np.testing.assert_array_equal(loaded.terrain_codes(), hex_map.terrain_codes())
        assert metadata["seed"] == 3
        assert metadata["generator"] == "islands"
        assert metadata["size_x"] == 20

    def test_debug_terrain_preserved(self, tmp_path: Path, square_map: HexMap) -> None:
        square_map.fill(TerrainType.FIELD)
        square_map.field[3].terrain_type = DebugTerrain(value=0.1)
        square_map.field[7].terrain_type = Debug2dTerrain(value=(0.2, 0.8))
        path = tmp_path / "debug.npz"

        save_map(path, square_map)
        loaded, metadata = load_map(path)

        assert loaded.field[3].terrain_type == DebugTerrain(value=0.1)
        assert loaded.field[7].terrain_type == Debug2dTerrain(value=(0.2, 0.8))
        assert loaded.count(TerrainType.FIELD) == 14
        assert metadata["seed"] is None

    def test_terrain_grid_shape(self, tmp_path: Path, small_map: HexMap) -> None:
        path = tmp_path / "shape.npz"
        save_map(path, small_map)
        with np.load(path) as data:
            assert data["terrain"].shape == (8, 10)
            assert data["terrain"].dtype == np.uint8

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_map(tmp_path / "nope.npz")

    def test_missing_terrain_array(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.npz"
        np.savez(path, other=np.zeros(3))
        with pytest.raises(ValueError, match="terrain"):
            load_map(path)

    def test_wrong_dimensions(self, tmp_path: Path) -> None:
        path = tmp_path / "flat.npz"
        np.savez(path, terrain=np.zeros(12, dtype=np.uint8))
        with pytest.raises(ValueError, match="shape"):
            load_map(path)
