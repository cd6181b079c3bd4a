"""Tests for single-hex coordinate math."""

import pytest

from hexterrain.hex import (
    NEIGHBOR_OFFSETS,
    RATIO,
    Hex,
    hex_center,
    hex_distance,
    walk_ring,
    wrap_x,
)
from hexterrain.terrain_types import TerrainType


class TestWrapX:
    """Tests for column wraparound."""

    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [
            (-1, 1, 9),
            (10, 1, 0),
            (0, 1, 0),
            (-1, 2, -1),
            (9, 2, -1),
            (-2, 2, 8),
            (-3, 6, -3),
            (-4, 6, 6),
        ],
    )
    def test_wraps_into_row_range(self, x: int, y: int, expected: int) -> None:
        """X lands in the valid range of its row."""
        assert wrap_x(x, y, 10) == expected

    def test_in_range_unchanged(self) -> None:
        """Coordinates already on the map are untouched."""
        for y in range(6):
            for x in range(-(y // 2), 10 - y // 2):
                assert wrap_x(x, y, 10) == x


class TestHexCenter:
    """Tests for pixel-space centres."""

    def test_first_tile(self) -> None:
        """Tile (0, 0) sits half a hex in from the corner."""
        cx, cy = hex_center(0, 0)
        assert cx == pytest.approx(0.5)
        assert cy == pytest.approx(RATIO / 2.0)

    def test_odd_rows_shifted_right(self) -> None:
        """Odd rows are offset by half a hex."""
        cx, cy = hex_center(0, 1)
        assert cx == pytest.approx(1.0)
        assert cy == pytest.approx(RATIO * 0.75 + RATIO / 2.0)

    def test_offset_cancels_row_shift(self) -> None:
        """The leftmost tile of every even row has the same centre X."""
        for y in range(0, 10, 2):
            cx, _ = hex_center(-(y // 2), y)
            assert cx == pytest.approx(0.5)


class TestHexDistance:
    """Tests for grid distance."""

    def test_zero_for_same_tile(self) -> None:
        assert hex_distance((3, 4), (3, 4)) == 0

    def test_neighbors_at_distance_one(self) -> None:
        """Every neighbour offset is a single step."""
        for dx, dy in NEIGHBOR_OFFSETS:
            assert hex_distance((5, 5), (5 + dx, 5 + dy)) == 1

    def test_symmetric(self) -> None:
        assert hex_distance((0, 0), (3, -5)) == hex_distance((3, -5), (0, 0))

    def test_longer_paths(self) -> None:
        assert hex_distance((0, 0), (2, -1)) == 2
        assert hex_distance((0, 0), (3, 0)) == 3
        assert hex_distance((0, 0), (-2, 4)) == 4


class TestWalkRing:
    """Tests for raw ring walks."""

    def test_radius_zero_empty(self) -> None:
        assert walk_ring(0, 0, 0) == []

    def test_first_ring_order(self) -> None:
        """The walk starts top right and follows the neighbour order."""
        assert walk_ring(0, 0, 1) == [(1, -1), (1, 0), (0, 1), (-1, 1), (-1, 0), (0, -1)]

    @pytest.mark.parametrize("radius", [1, 2, 3, 5])
    def test_ring_size_and_distance(self, radius: int) -> None:
        """A ring has 6r distinct tiles, all r steps away."""
        ring = walk_ring(4, 7, radius)
        assert len(ring) == 6 * radius
        assert len(set(ring)) == 6 * radius
        assert all(hex_distance((4, 7), pos) == radius for pos in ring)


class TestHex:
    """Tests for the Hex tile record."""

    def test_defaults_to_water(self) -> None:
        assert Hex(0, 0).terrain_type == TerrainType.WATER

    def test_center_computed(self) -> None:
        hex = Hex(2, 3)
        assert hex.center == hex_center(2, 3)

    def test_distance_to_hex_or_coords(self) -> None:
        hex = Hex(0, 0)
        assert hex.distance_to(Hex(2, -1)) == 2
        assert hex.distance_to((3, 0)) == 3

    @pytest.mark.parametrize("name", ["x", "y", "center_x", "center_y"])
    def test_identity_fixed(self, name: str) -> None:
        """Coordinates and centre cannot be reassigned."""
        hex = Hex(2, 3)
        with pytest.raises(AttributeError):
            setattr(hex, name, 0)
        assert hex.coords == (2, 3)
        assert hex.center == hex_center(2, 3)

    def test_terrain_mutable(self) -> None:
        hex = Hex(2, 3)
        hex.terrain_type = TerrainType.FOREST
        assert hex.terrain_type == TerrainType.FOREST
