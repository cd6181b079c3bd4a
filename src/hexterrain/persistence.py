"""Map persistence: save and load generated hex maps."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
import structlog

from .hexmap import HexMap
from .terrain_types import (
    DEBUG_CODE,
    Debug2dTerrain,
    DebugTerrain,
    terrain_from_code,
)

logger = structlog.get_logger()

FORMAT_VERSION = 1


def save_map(
    path: Path,
    hex_map: HexMap,
    seed: int | None = None,
    generator: str | None = None,
) -> None:
    """Save a generated map to disk.

    Uses numpy's compressed .npz format. Terrain is stored as uint8 codes of
    shape (size_y, size_x); debug payloads are stored separately as JSON.

    Args:
        path: Output path (should end with .npz).
        hex_map: Map to save.
        seed: Seed the map was generated with, if known.
        generator: Name of the generator that produced the map.
    """
    terrain = hex_map.terrain_codes().reshape(hex_map.size_y, hex_map.size_x)

    debug_data = [
        {"index": index, "kind": hex.terrain_type.kind, "value": hex.terrain_type.value}
        for index, hex in enumerate(hex_map.field)
        if isinstance(hex.terrain_type, (DebugTerrain, Debug2dTerrain))
    ]

    metadata = {
        "version": FORMAT_VERSION,
        "size_x": hex_map.size_x,
        "size_y": hex_map.size_y,
        "seed": seed,
        "generator": generator,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        terrain=terrain,
        debug=np.frombuffer(json.dumps(debug_data).encode("utf-8"), dtype=np.uint8),
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    logger.info("map_saved", path=str(path), size_x=hex_map.size_x, size_y=hex_map.size_y)


def load_map(path: Path) -> tuple[HexMap, dict[str, Any]]:
    """Load a map from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (HexMap, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Map file not found: {path}")

    with np.load(path) as data:
        if "terrain" not in data:
            raise ValueError("Invalid map file: missing 'terrain' array")
        terrain = data["terrain"]
        if terrain.ndim != 2:
            raise ValueError(f"Invalid map file: terrain has shape {terrain.shape}")

        debug_data = []
        if "debug" in data:
            debug_data = json.loads(data["debug"].tobytes().decode("utf-8"))

        metadata: dict[str, Any] = {}
        if "metadata" in data:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))

    size_y, size_x = terrain.shape
    hex_map = HexMap(size_x, size_y)
    for hex, code in zip(hex_map.field, terrain.reshape(-1).tolist()):
        if code != DEBUG_CODE:
            hex.terrain_type = terrain_from_code(code)

    for entry in debug_data:
        hex = hex_map.hex_at(entry["index"])
        if entry["kind"] == "debug_2d":
            hex.terrain_type = Debug2dTerrain(value=tuple(entry["value"]))
        else:
            hex.terrain_type = DebugTerrain(value=entry["value"])

    logger.info("map_loaded", path=str(path), size_x=size_x, size_y=size_y)
    return hex_map, metadata
