"""Hex map storage and topology queries."""

from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .exceptions import IndexOutOfRangeError, InvalidParameterError
from .hex import NEIGHBOR_OFFSETS, RATIO, Hex, walk_ring, wrap_x
from .terrain_types import Terrain, terrain_code

HexLike = Hex | tuple[int, int]


def _coords(hex_or_coords: HexLike) -> tuple[int, int]:
    if isinstance(hex_or_coords, Hex):
        return hex_or_coords.coords
    return hex_or_coords


def _unique(positions: list[tuple[int, int]], exclude: tuple[int, int]) -> list[tuple[int, int]]:
    """Drop repeats and ``exclude``, keeping first-seen order."""
    seen = {exclude}
    result = []
    for pos in positions:
        if pos not in seen:
            seen.add(pos)
            result.append(pos)
    return result


class HexMap:
    """Rectangular map of hex tiles, wrapping in X.

    Tiles are stored row-major: left to right, then top to bottom. The
    absolute sizes give the map extent in pixel-space units (a hex is one
    unit wide) and are used for noise sampling and relative positions.
    """

    def __init__(self, size_x: int, size_y: int):
        if size_x <= 0 or size_y <= 0:
            raise InvalidParameterError(
                f"Map size must be positive, got {size_x}x{size_y}"
            )

        self.size_x = size_x
        self.size_y = size_y
        self.absolute_size_x = size_x + 0.5
        self.absolute_size_y = RATIO + (size_y - 1) * RATIO * 3.0 / 4.0

        self.field: list[Hex] = []
        for i in range(size_x * size_y):
            x, y = self.index_to_coords(i)
            self.field.append(Hex(x, y))

        self._centers_x = np.array([h.center_x for h in self.field], dtype=np.float64)
        self._centers_y = np.array([h.center_y for h in self.field], dtype=np.float64)
        self._neighbor_table: NDArray[np.int64] | None = None

    @property
    def area(self) -> int:
        """Total number of tiles."""
        return self.size_x * self.size_y

    @property
    def avg_size(self) -> int:
        """Average of the two dimensions, rounded down."""
        return (self.size_x + self.size_y) // 2

    def __len__(self) -> int:
        return len(self.field)

    def __iter__(self) -> Iterator[Hex]:
        return iter(self.field)

    # Coordinate transforms

    def contains(self, x: int, y: int) -> bool:
        """Whether ``(x, y)`` addresses a tile of this map."""
        if y < 0 or y >= self.size_y:
            return False
        shift = y // 2
        return -shift <= x < self.size_x - shift

    def coords_to_index(self, x: int, y: int) -> int:
        """Convert offset coordinates into a storage index.

        Raises:
            IndexOutOfRangeError: If ``(x, y)`` is outside the map.
        """
        if not self.contains(x, y):
            raise IndexOutOfRangeError(f"coordinates ({x}, {y}) out of range")
        return y * self.size_x + x + y // 2

    def index_to_coords(self, index: int) -> tuple[int, int]:
        """Convert a storage index into offset coordinates.

        Raises:
            IndexOutOfRangeError: If the index is outside ``[0, area)``.
        """
        if index < 0 or index >= self.area:
            raise IndexOutOfRangeError(f"index {index} out of range")
        line = index // self.size_x
        pos = index - line * self.size_x - line // 2
        return (pos, line)

    # Tile access

    def get_hex(self, x: int, y: int) -> Hex:
        """Return the hex at ``(x, y)``."""
        return self.field[self.coords_to_index(x, y)]

    def hex_at(self, index: int) -> Hex:
        """Return the hex at a storage index."""
        if index < 0 or index >= self.area:
            raise IndexOutOfRangeError(f"index {index} out of range")
        return self.field[index]

    def set_terrain(self, x: int, y: int, terrain: Terrain) -> None:
        """Set the terrain of the hex at ``(x, y)``."""
        self.get_hex(x, y).terrain_type = terrain

    def fill(self, terrain: Terrain) -> None:
        """Set every tile to the same terrain."""
        for hex in self.field:
            hex.terrain_type = terrain

    def terrain_codes(self) -> NDArray[np.uint8]:
        """Row-major uint8 codes of every tile's terrain."""
        return np.fromiter(
            (terrain_code(h.terrain_type) for h in self.field),
            dtype=np.uint8,
            count=self.area,
        )

    def count(self, terrain: Terrain) -> int:
        """Number of tiles with the given terrain."""
        return sum(1 for h in self.field if h.terrain_type == terrain)

    def copy(self) -> "HexMap":
        """Return an independent map with the same terrain."""
        other = HexMap(self.size_x, self.size_y)
        for src, dst in zip(self.field, other.field):
            dst.terrain_type = src.terrain_type
        return other

    # Topology

    def _checked_coords(self, hex: HexLike) -> tuple[int, int]:
        x, y = _coords(hex)
        if not self.contains(x, y):
            raise IndexOutOfRangeError(f"coordinates ({x}, {y}) out of range")
        return x, y

    def neighbors(self, hex: HexLike) -> list[tuple[int, int]]:
        """Coordinates of adjacent tiles, wrapped in X.

        The top row has no upper neighbours and the bottom row no lower ones.

        Raises:
            IndexOutOfRangeError: If ``hex`` is outside the map.
        """
        x, y = self._checked_coords(hex)
        result = []
        for dx, dy in NEIGHBOR_OFFSETS:
            ny = y + dy
            if ny < 0 or ny >= self.size_y:
                continue
            result.append((wrap_x(x + dx, ny, self.size_x), ny))
        return result

    def neighbors_unchecked(self, hex: HexLike) -> list[tuple[int, int]]:
        """Coordinates of all six adjacent positions, wrapped in X.

        Rows are not trimmed, so results may lie above or below the map.
        The input tile itself must be on the map.
        """
        x, y = self._checked_coords(hex)
        return [
            (wrap_x(x + dx, y + dy, self.size_x), y + dy)
            for dx, dy in NEIGHBOR_OFFSETS
        ]

    def neighbor_indices(self, index: int) -> list[int]:
        """Storage indices of the tiles adjacent to ``index``."""
        return [
            self.coords_to_index(x, y)
            for x, y in self.neighbors(self.index_to_coords(index))
        ]

    def neighbor_table(self) -> NDArray[np.int64]:
        """Cached ``(area, 6)`` table of neighbour indices, ``-1`` where trimmed.

        Columns follow the order of ``NEIGHBOR_OFFSETS``.
        """
        if self._neighbor_table is None:
            table = np.full((self.area, len(NEIGHBOR_OFFSETS)), -1, dtype=np.int64)
            for index, hex in enumerate(self.field):
                for column, (dx, dy) in enumerate(NEIGHBOR_OFFSETS):
                    ny = hex.y + dy
                    if 0 <= ny < self.size_y:
                        nx = wrap_x(hex.x + dx, ny, self.size_x)
                        table[index, column] = self.coords_to_index(nx, ny)
            self._neighbor_table = table
        return self._neighbor_table

    def ring(self, hex: HexLike, radius: int) -> list[tuple[int, int]]:
        """Coordinates exactly ``radius`` steps away.

        Positions outside the Y range are dropped; X positions are wrapped.
        On maps narrower than the ring, wrapped positions that repeat or land
        on the centre tile are dropped too.

        Raises:
            IndexOutOfRangeError: If ``hex`` is outside the map.
        """
        x, y = self._checked_coords(hex)
        positions = [
            (wrap_x(rx, ry, self.size_x), ry)
            for rx, ry in walk_ring(x, y, radius)
            if 0 <= ry < self.size_y
        ]
        return _unique(positions, exclude=(x, y))

    def spiral(self, hex: HexLike, radius: int) -> list[tuple[int, int]]:
        """Coordinates of every ring from 1 to ``radius``, each tile once.

        Raises:
            IndexOutOfRangeError: If ``hex`` is outside the map.
        """
        center = self._checked_coords(hex)
        result: list[tuple[int, int]] = []
        for r in range(1, radius + 1):
            result.extend(self.ring(center, r))
        return _unique(result, exclude=center)

    def closest_tile(self, x: float, y: float) -> int:
        """Index of the tile whose centre is nearest to a pixel-space point.

        The row is estimated from ``y`` and clamped into the map, then the
        estimated row and its two neighbouring rows are searched. Points
        outside the map are allowed. Ties resolve to the lowest index.
        """
        row_height = RATIO * 3.0 / 4.0
        row = int(round((y - RATIO / 2.0) / row_height))
        row = min(max(row, 0), self.size_y - 1)

        start = max(row - 1, 0) * self.size_x
        stop = (min(row + 1, self.size_y - 1) + 1) * self.size_x

        dist = np.hypot(self._centers_x[start:stop] - x, self._centers_y[start:stop] - y)
        return start + int(np.argmin(dist))

    def get_closest_hex_index(self, x: float, y: float) -> int:
        """Alias of :meth:`closest_tile`."""
        return self.closest_tile(x, y)

    def __repr__(self) -> str:
        return f"HexMap(size_x={self.size_x}, size_y={self.size_y})"
