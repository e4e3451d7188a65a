"""
Ferncast — climate/config.py
Configuration surface for the drain engine, the night model and the clock.
==========================================================================
Version:     0.2
Stack:       Python 3.12 | Pydantic v2 | tomllib
Status:      Core data validation and loading layer.
"""

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_LATITUDE: float = 64.0

# ================================================================================
# SCHEMAS
# ================================================================================

class DrainConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    exposure_threshold: float = Field(default=0.65, ge=0.0, le=1.0)
    onset_probability_threshold: float = 0.7
    drain_magnitude: int = Field(default=2, ge=0)
    allow_multiple_onsets: bool = False
    verbose: bool = False

class NightConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    latitude: float = 38.25
    sunset_times_are_minus_thirty: bool = True
    sunset_offset_minutes: int = -30

    @field_validator("latitude")
    @classmethod
    def _clamp_latitude(cls, value: float) -> float:
        # Out-of-range latitudes are clamped, never rejected.
        return max(-MAX_LATITUDE, min(MAX_LATITUDE, value))

class ClockConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    day_start: int = 600 # HHMM
    day_end: int = 2600 # HHMM, past midnight like the host clock
    tick_minutes: int = Field(default=10, gt=0)

class ClimateConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    drain: DrainConfig = Field(default_factory=DrainConfig)
    night: NightConfig = Field(default_factory=NightConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)

# ================================================================================
# LOADER & CACHE (JIT)
# ================================================================================

_CONFIG_CACHE: Optional[ClimateConfig] = None

DATA_DIR = Path(__file__).parent.parent / "data"

def load_config(path: Optional[Path] = None) -> ClimateConfig:
    """
    Loads the climate configuration from TOML.
    With no path, reads data/climate.toml once and caches it; a missing
    default file yields the schema defaults.
    """
    global _CONFIG_CACHE
    if path is None:
        if _CONFIG_CACHE is not None:
            return _CONFIG_CACHE
        default_path = DATA_DIR / "climate.toml"
        if not default_path.exists():
            _CONFIG_CACHE = ClimateConfig()
            return _CONFIG_CACHE
        _CONFIG_CACHE = _read_config(default_path)
        return _CONFIG_CACHE

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Climate config not found: {path}")
    return _read_config(path)

def _read_config(path: Path) -> ClimateConfig:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return ClimateConfig(**data)

def clear_config_cache() -> None:
    global _CONFIG_CACHE
    _CONFIG_CACHE = None
