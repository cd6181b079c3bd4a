"""Cellular-automaton cleanup of noisy terrain."""

import numpy as np

from ..exceptions import InvalidParameterError
from ..hexmap import HexMap
from ..terrain_types import TerrainType, terrain_code


def smooth_pass(
    hex_map: HexMap,
    source: TerrainType,
    target: TerrainType,
    threshold: int = 3,
    radius: int = 1,
) -> int:
    """Turn isolated ``source`` tiles into ``target``.

    A ``source`` tile flips when fewer than ``threshold`` of its neighbours
    share its type and ``target`` neighbours outnumber them. Votes are read
    from the map as it was before the pass. Tiles on straight borders and on
    the top and bottom rows keep as many same-type as target neighbours, so
    large regions survive while specks and spikes are removed.

    Args:
        hex_map: Map to modify in place.
        source: Terrain type to clean up.
        target: Terrain type that replaces removed tiles.
        threshold: Minimum number of same-type neighbours that keeps a tile.
        radius: Neighbourhood radius in hex steps.

    Returns:
        Number of tiles changed.
    """
    if threshold < 0:
        raise InvalidParameterError(f"threshold must be >= 0, got {threshold}")
    if radius < 1:
        raise InvalidParameterError(f"radius must be >= 1, got {radius}")

    codes = hex_map.terrain_codes()
    source_code = terrain_code(source)
    target_code = terrain_code(target)

    if radius == 1:
        same, other = _count_adjacent(hex_map, codes, source_code, target_code)
    else:
        same, other = _count_spiral(hex_map, codes, source_code, target_code, radius)

    flip = (codes == source_code) & (same < threshold) & (other > same)
    for index in np.flatnonzero(flip):
        hex_map.field[index].terrain_type = target
    return int(np.count_nonzero(flip))


def _count_adjacent(
    hex_map: HexMap,
    codes: np.ndarray,
    source_code: int,
    target_code: int,
) -> tuple[np.ndarray, np.ndarray]:
    table = hex_map.neighbor_table()
    valid = table >= 0
    neighbor_codes = codes[np.where(valid, table, 0)]

    same = np.sum(valid & (neighbor_codes == source_code), axis=1)
    other = np.sum(valid & (neighbor_codes == target_code), axis=1)
    return same, other


def _count_spiral(
    hex_map: HexMap,
    codes: np.ndarray,
    source_code: int,
    target_code: int,
    radius: int,
) -> tuple[np.ndarray, np.ndarray]:
    same = np.zeros(hex_map.area, dtype=np.int64)
    other = np.zeros(hex_map.area, dtype=np.int64)
    for index in np.flatnonzero(codes == source_code):
        for x, y in hex_map.spiral(hex_map.field[index], radius):
            code = codes[hex_map.coords_to_index(x, y)]
            if code == source_code:
                same[index] += 1
            elif code == target_code:
                other[index] += 1
    return same, other
