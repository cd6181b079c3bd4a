"""Single hex tile and offset-coordinate math.

Tiles are addressed by ``(x, y)`` where ``y`` is the row and ``x`` the column
shifted by ``y // 2`` ("brick offset" layout). In this system the six neighbour
offsets are the same for every row; only the valid X range and the storage
index depend on row parity.
"""

from dataclasses import dataclass, field

from .terrain_types import Terrain, TerrainType

# Height of a hexagon with unit width
RATIO = 1.1547

# Neighbour deltas in walking order, used by both neighbour lookup and ring walks
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (0, 1),  # bottom right
    (-1, 1),  # bottom left
    (-1, 0),  # left
    (0, -1),  # top left
    (1, -1),  # top right
    (1, 0),  # right
)


def hex_center(x: int, y: int) -> tuple[float, float]:
    """Pixel-space centre of the hex at offset coordinates ``(x, y)``."""
    center_x = x + y // 2 + (0.5 if y % 2 == 0 else 1.0)
    center_y = y * RATIO * 3.0 / 4.0 + RATIO / 2.0
    return center_x, center_y


def hex_distance(a: tuple[int, int], b: tuple[int, int]) -> int:
    """Number of single steps between two hexes, ignoring X wraparound."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return (abs(dx) + abs(dx + dy) + abs(dy)) // 2


def wrap_x(x: int, y: int, size_x: int) -> int:
    """Normalize X into the valid column range of row ``y``.

    The map is a cylinder: columns wrap around, rows do not.
    """
    shift = y // 2
    return (x + shift) % size_x - shift


def walk_ring(x: int, y: int, radius: int) -> list[tuple[int, int]]:
    """Raw coordinates at exactly ``radius`` steps from ``(x, y)``.

    No bounds are applied; callers filter rows and wrap columns.
    """
    if radius <= 0:
        return []

    results: list[tuple[int, int]] = []
    cx, cy = x + radius, y - radius
    for dx, dy in NEIGHBOR_OFFSETS:
        for _ in range(radius):
            results.append((cx, cy))
            cx += dx
            cy += dy
    return results


_FIXED_FIELDS = frozenset({"x", "y", "center_x", "center_y"})


@dataclass
class Hex:
    """A single map tile.

    ``x``, ``y`` and the centre are fixed at construction and raise
    ``AttributeError`` if reassigned; only ``terrain_type`` changes during
    generation.
    """

    x: int
    y: int
    terrain_type: Terrain = TerrainType.WATER
    center_x: float = field(init=False)
    center_y: float = field(init=False)

    def __post_init__(self) -> None:
        self.center_x, self.center_y = hex_center(self.x, self.y)

    def __setattr__(self, name: str, value: object) -> None:
        if name in _FIXED_FIELDS and name in self.__dict__:
            raise AttributeError(f"Hex.{name} cannot be changed")
        super().__setattr__(name, value)

    @property
    def coords(self) -> tuple[int, int]:
        """Offset coordinates of this hex."""
        return (self.x, self.y)

    @property
    def center(self) -> tuple[float, float]:
        """Pixel-space centre of this hex."""
        return (self.center_x, self.center_y)

    def distance_to(self, other: "Hex | tuple[int, int]") -> int:
        """Grid distance to another hex or coordinate pair."""
        if isinstance(other, Hex):
            other = other.coords
        return hex_distance(self.coords, other)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
