"""
Ferncast — climate/solar.py
Solar Time Estimator: sunrise, sunset and twilight from latitude and day.
=========================================================================
Version:     0.3
Stack:       Python 3.12 | stdlib math
Status:      Production-ready.

Architecture notes
------------------
- Every function here is pure. SolarTimeEstimator only holds its
  (immutable) latitude and sunset offset.
- The year is a stylized 112 days. Do not swap in a 365-day model.
- Latitude is clamped to [-64, 64] before any trigonometry.
- A target angle the sun never reaches raises InvalidGeometryError.
  The caller decides what a day without a crossing means.
- Results are floored to the minute, then to the ten-minute bucket.

Design Variables
----------------
  YEAR_LENGTH             112
  MAX_LATITUDE            64.0
  AXIAL_TILT              0.40927971 rad
  SUNRISE_ANGLE           0.01163611 rad   (refraction-corrected horizon)
  CIVIL_TWILIGHT_ANGLE    -0.104719755 rad (6 degrees below)
  NAVAL_TWILIGHT_ANGLE    -0.20944 rad     (12 degrees below)
  ASTRONOMICAL_ANGLE      -0.314159265 rad (18 degrees below)
  SUNSET_OFFSET_MINUTES   -30
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from climate.config import MAX_LATITUDE, NightConfig

YEAR_LENGTH: int = 112
MINUTES_PER_DAY: int = 1440
AXIAL_TILT: float = 0.40927971

SUNRISE_ANGLE: float = 0.01163611
CIVIL_TWILIGHT_ANGLE: float = -0.104719755
NAVAL_TWILIGHT_ANGLE: float = -0.20944
ASTRONOMICAL_TWILIGHT_ANGLE: float = -0.314159265
SUNSET_OFFSET_MINUTES: int = -30


class InvalidGeometryError(ValueError):
    """The sun never crosses the requested elevation on this day."""


# ============================================================
# CLOCK TIME
# ============================================================

@dataclass(frozen=True, order=True)
class ClockTime:
    """
    Wall-clock time of day. hour may run past 23 (the host clock
    continues to 26:00 before the day ends).
    """
    hour: int
    minute: int

    @classmethod
    def from_minutes(cls, total_minutes: int) -> "ClockTime":
        hour, minute = divmod(total_minutes, 60)
        return cls(hour, minute)

    @classmethod
    def from_int_time(cls, value: int) -> "ClockTime":
        """Parse the HHMM integer form, e.g. 1930."""
        hour, minute = divmod(value, 100)
        return cls.from_minutes(hour * 60 + minute)

    @property
    def total_minutes(self) -> int:
        return self.hour * 60 + self.minute

    def to_int_time(self) -> int:
        return self.hour * 100 + self.minute

    def clamp_to_ten_minutes(self) -> "ClockTime":
        return ClockTime(self.hour, self.minute - self.minute % 10)

    def add_minutes(self, minutes: int) -> "ClockTime":
        return ClockTime.from_minutes(self.total_minutes + minutes)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


# ============================================================
# PURE MODEL
# ============================================================

def clamp_latitude(latitude_deg: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, latitude_deg))


def solar_declination(day_of_year: int) -> float:
    """Sun's offset from the celestial equator, radians."""
    return AXIAL_TILT * math.sin((2 * math.pi / YEAR_LENGTH) * (day_of_year - 1))


def solar_noon_minutes(day_of_year: int) -> float:
    """Minutes after midnight of solar noon (equation-of-time approximation)."""
    return (
        720
        - 10 * math.sin(4 * (math.pi / YEAR_LENGTH) * (day_of_year - 1))
        + 8 * math.sin(2 * (math.pi / YEAR_LENGTH) * day_of_year)
    )


def noon_elevation(latitude_deg: float, day_of_year: int) -> float:
    """Solar elevation at solar noon, radians."""
    lat = math.radians(clamp_latitude(latitude_deg))
    return math.pi / 2 - abs(lat - solar_declination(day_of_year % YEAR_LENGTH))


def time_at_solar_angle(
    latitude_deg: float,
    day_of_year: int,
    angle_rad: float,
    is_morning: bool = True,
) -> ClockTime:
    """
    Clock time at which the sun crosses angle_rad on the given day.
    Morning crossings come before solar noon, evening ones after it.
    """
    day = day_of_year % YEAR_LENGTH
    lat = math.radians(clamp_latitude(latitude_deg))

    declination = solar_declination(day)
    noon = solar_noon_minutes(day)

    cos_hour_angle = (
        (math.sin(angle_rad) - math.sin(lat) * math.sin(declination))
        / (math.cos(lat) * math.cos(declination))
    )
    if not -1.0 <= cos_hour_angle <= 1.0:
        raise InvalidGeometryError(
            f"No solar crossing at {angle_rad:.5f} rad on day {day} "
            f"at latitude {math.degrees(lat):.2f}"
        )

    hour_angle = math.acos(cos_hour_angle)
    minutes_from_noon = hour_angle / (2 * math.pi) * MINUTES_PER_DAY

    if is_morning:
        total = math.floor(noon - minutes_from_noon)
    else:
        total = math.floor(noon + minutes_from_noon)

    return ClockTime.from_minutes(total).clamp_to_ten_minutes()


# ============================================================
# ESTIMATOR
# ============================================================

@dataclass(frozen=True)
class SolarCycle:
    day: int
    sunrise: ClockTime
    sunset: ClockTime
    morning_twilight: ClockTime
    evening_twilight: ClockTime


class SolarTimeEstimator:
    """
    Named crossings for a fixed latitude. Safe to share between threads:
    nothing is mutated after construction.
    """

    def __init__(
        self,
        latitude: float = 38.25,
        sunset_offset_minutes: int = SUNSET_OFFSET_MINUTES,
        apply_sunset_offset: bool = True,
    ) -> None:
        self._latitude = clamp_latitude(latitude)
        self._sunset_offset = sunset_offset_minutes if apply_sunset_offset else 0

    @classmethod
    def from_config(cls, config: NightConfig) -> "SolarTimeEstimator":
        return cls(
            latitude=config.latitude,
            sunset_offset_minutes=config.sunset_offset_minutes,
            apply_sunset_offset=config.sunset_times_are_minus_thirty,
        )

    @property
    def latitude(self) -> float:
        return self._latitude

    def at_angle(self, day: int, angle_rad: float, is_morning: bool = True) -> ClockTime:
        return time_at_solar_angle(self._latitude, day, angle_rad, is_morning)

    def sunrise(self, day: int) -> ClockTime:
        return self.at_angle(day, SUNRISE_ANGLE)

    def sunset(self, day: int) -> ClockTime:
        return self.at_angle(day, SUNRISE_ANGLE, False).add_minutes(self._sunset_offset)

    def sunrise_time(self, day: int) -> int:
        return self.sunrise(day).to_int_time()

    def morning_civil_twilight(self, day: int) -> ClockTime:
        return self.at_angle(day, CIVIL_TWILIGHT_ANGLE)

    def civil_twilight(self, day: int) -> ClockTime:
        return self.at_angle(day, CIVIL_TWILIGHT_ANGLE, False)

    def morning_naval_twilight(self, day: int) -> ClockTime:
        return self.at_angle(day, NAVAL_TWILIGHT_ANGLE)

    def naval_twilight(self, day: int) -> ClockTime:
        return self.at_angle(day, NAVAL_TWILIGHT_ANGLE, False)

    def morning_astronomical_twilight(self, day: int) -> ClockTime:
        return self.at_angle(day, ASTRONOMICAL_TWILIGHT_ANGLE)

    def astronomical_twilight(self, day: int) -> ClockTime:
        return self.at_angle(day, ASTRONOMICAL_TWILIGHT_ANGLE, False)

    def cycle_info(self, day: int) -> SolarCycle:
        return SolarCycle(
            day=day % YEAR_LENGTH,
            sunrise=self.sunrise(day),
            sunset=self.sunset(day),
            morning_twilight=self.morning_astronomical_twilight(day),
            evening_twilight=self.astronomical_twilight(day),
        )

    def is_night(self, day: int, time: ClockTime) -> bool:
        """Day/night query: night before sunrise and from sunset on."""
        return time < self.sunrise(day) or time >= self.sunset(day)
