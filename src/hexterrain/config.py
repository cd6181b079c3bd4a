"""Generation configuration models and TOML loading."""

import tomllib
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class InlandParam(str, Enum):
    """Named presets for inland generation parameters."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def value_f(self) -> float:
        """Numeric value of the preset in ``[0, 1]``."""
        return _PARAM_VALUES[self]


_PARAM_VALUES = {
    InlandParam.LOW: 0.15,
    InlandParam.MEDIUM: 0.5,
    InlandParam.HIGH: 0.85,
}


def param_value(param: InlandParam | float) -> float:
    """Resolve a preset or raw float to a value clamped into ``[0, 1]``."""
    if isinstance(param, InlandParam):
        return param.value_f
    return min(max(float(param), 0.0), 1.0)


class IslandsConfig(BaseModel):
    """Islands generator parameters."""

    ocean_distance: int = Field(
        default=5, ge=0, description="Max width of the coastal water band"
    )
    ice_threshold: float = Field(
        default=0.12, description="Distance-to-pole metric below this becomes ice"
    )
    ice_noise_weight: float = Field(
        default=0.03, description="Worley noise weight on the ice boundary"
    )
    land_threshold: float = Field(
        default=0.36, description="Fbm noise above this seeds small islands"
    )
    continent_count: int = Field(default=3, ge=0, description="Number of continents")
    continent_threshold: float = Field(
        default=4.0, description="Noisy ellipse distance below this becomes land"
    )
    mountain_chance: float = Field(
        default=0.04, ge=0.0, le=1.0, description="Chance a field becomes mountain"
    )
    coast_noise_threshold: float = Field(
        default=0.14, description="Fbm noise gate for coastal water"
    )
    smoothing_threshold: int = Field(
        default=3, ge=0, description="Cluster threshold for smoothing passes"
    )


class InlandConfig(BaseModel):
    """Inland generator parameters."""

    temperature: InlandParam | float = Field(
        default=InlandParam.MEDIUM, description="Global temperature"
    )
    humidity: InlandParam | float = Field(
        default=InlandParam.MEDIUM, description="Global humidity"
    )
    flatness: InlandParam | float = Field(
        default=InlandParam.MEDIUM, description="Global flatness"
    )
    region_size: InlandParam | float = Field(
        default=InlandParam.MEDIUM, description="Relative region size"
    )
    water_humidity: float = Field(
        default=0.95, description="Regions at or above this humidity become water"
    )
    mark_centers: bool = Field(
        default=True, description="Mark region centres with a debug terrain"
    )


class RenderConfig(BaseModel):
    """Preview rendering parameters."""

    hex_width: float = Field(default=12.0, gt=0, description="Hex width in pixels")
    wrap_map: bool = Field(default=False, description="Repeat wrapped column edges")
    randomize_colors: bool = Field(default=False, description="Jitter tile colours")


class GenerationConfig(BaseModel):
    """Complete configuration for one generation run."""

    generator: Literal["islands", "inland"] = "islands"
    width: int = Field(default=100, gt=0, description="Map width in hexes")
    height: int = Field(default=50, gt=0, description="Map height in hexes")
    seed: int | None = Field(
        default=None, ge=0, lt=2**32, description="Seed (None = random per run)"
    )

    islands: IslandsConfig = Field(default_factory=IslandsConfig)
    inland: InlandConfig = Field(default_factory=InlandConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


def load_config(config_path: Path) -> GenerationConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed GenerationConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are invalid.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return GenerationConfig.model_validate(data)
