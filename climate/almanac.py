"""
Ferncast — climate/almanac.py
Year table: vectorized crossing times for every day of the 112-day year.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from climate.solar import (
    InvalidGeometryError,
    MINUTES_PER_DAY,
    SUNRISE_ANGLE,
    YEAR_LENGTH,
    AXIAL_TILT,
    clamp_latitude,
)


@dataclass(frozen=True)
class Almanac:
    """
    morning / evening: int arrays of ten-minute clamped minutes after
    midnight, indexed by day of year (0..111).
    """
    latitude: float
    angle: float
    morning: np.ndarray
    evening: np.ndarray


def build_almanac(latitude: float, angle: float = SUNRISE_ANGLE) -> Almanac:
    """Same model as time_at_solar_angle, evaluated for the whole year at once."""
    lat = np.radians(clamp_latitude(latitude))
    days = np.arange(YEAR_LENGTH)

    declination = AXIAL_TILT * np.sin((2 * np.pi / YEAR_LENGTH) * (days - 1))
    noon = (
        720
        - 10 * np.sin(4 * (np.pi / YEAR_LENGTH) * (days - 1))
        + 8 * np.sin(2 * (np.pi / YEAR_LENGTH) * days)
    )
    cos_hour_angle = (
        (np.sin(angle) - np.sin(lat) * np.sin(declination))
        / (np.cos(lat) * np.cos(declination))
    )

    invalid = np.flatnonzero((cos_hour_angle < -1.0) | (cos_hour_angle > 1.0))
    if invalid.size:
        raise InvalidGeometryError(
            f"No solar crossing at {angle:.5f} rad on day {int(invalid[0])} "
            f"at latitude {clamp_latitude(latitude):.2f}"
        )

    minutes_from_noon = np.arccos(cos_hour_angle) / (2 * np.pi) * MINUTES_PER_DAY
    morning = np.floor(noon - minutes_from_noon).astype(int)
    evening = np.floor(noon + minutes_from_noon).astype(int)

    return Almanac(
        latitude=clamp_latitude(latitude),
        angle=angle,
        morning=morning - morning % 10,
        evening=evening - evening % 10,
    )


def daylight_minutes(latitude: float) -> np.ndarray:
    """Minutes between sunrise and the uncorrected sunset, per day."""
    table = build_almanac(latitude)
    return table.evening - table.morning
