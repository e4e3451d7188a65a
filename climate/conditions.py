"""
Ferncast — climate/conditions.py
Weather flag set and the stamina-drain multiplier table.
========================================================
Version:     0.2
Stack:       Python 3.12 | stdlib enum
Status:      Production-ready.

Architecture notes
------------------
- Weather is a Flag: several conditions are active at once
  (LIGHTNING | SNOW is thundersnow).
- The multiplier table is data. Rows are summed, never exclusive.
- Daylight requirement per row: "any", "night" or "day".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Iterable, List, Tuple


class Weather(Flag):
    NONE = 0
    SUNNY = auto()
    RAIN = auto()
    SNOW = auto()
    WIND = auto()
    LIGHTNING = auto()
    BLIZZARD = auto()
    HEATWAVE = auto()
    FROST = auto()
    FOG = auto()


def has_any(flags: Weather, mask: Weather) -> bool:
    """True if flags and mask share at least one condition."""
    return bool(flags & mask)


def has_all(flags: Weather, mask: Weather) -> bool:
    """True if every condition in mask is active in flags."""
    return (flags & mask) == mask


def parse_weather(names: Iterable[str]) -> Weather:
    """Build a flag set from condition names, e.g. ["blizzard", "Frost"]."""
    flags = Weather.NONE
    for name in names:
        key = name.strip().upper()
        if not key:
            continue
        try:
            flags |= Weather[key]
        except KeyError:
            raise ValueError(f"Unknown weather condition: {name!r}") from None
    return flags


def weather_names(flags: Weather) -> List[str]:
    """Member names active in flags, in declaration order."""
    return [w.name.lower() for w in Weather if w is not Weather.NONE and w in flags]


# ============================================================
# DRAIN MULTIPLIER TABLE
# ============================================================

@dataclass(frozen=True)
class DrainRule:
    label: str
    requires: Weather
    daylight: str          # "any" | "night" | "day"
    multiplier: float

    def matches(self, flags: Weather, is_night: bool) -> bool:
        if not has_all(flags, self.requires):
            return False
        if self.daylight == "night":
            return is_night
        if self.daylight == "day":
            return not is_night
        return True


DRAIN_RULES: Tuple[DrainRule, ...] = (
    DrainRule("Lightning or Thundersnow", Weather.LIGHTNING,                "any",   1.0),
    DrainRule("Fog",                      Weather.FOG,                      "any",   0.5),
    DrainRule("Night Fog",                Weather.FOG,                      "night", 0.25),
    DrainRule("Blizzard",                 Weather.BLIZZARD,                 "any",   1.25),
    DrainRule("Night Frost",              Weather.FROST,                    "night", 1.25),
    DrainRule("Night Thundersnow",        Weather.LIGHTNING | Weather.SNOW, "night", 0.5),
    DrainRule("Night Blizzard",           Weather.BLIZZARD,                 "night", 0.5),
    DrainRule("Day Heatwave",             Weather.HEATWAVE,                 "day",   1.25),
)


def drain_multiplier(flags: Weather, is_night: bool) -> Tuple[float, List[str]]:
    """
    Sum every matching row of DRAIN_RULES.
    Returns (total multiplier, matched labels in table order).
    """
    total = 0.0
    labels: List[str] = []
    for rule in DRAIN_RULES:
        if rule.matches(flags, is_night):
            total += rule.multiplier
            labels.append(rule.label)
    return total, labels
