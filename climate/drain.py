"""
Ferncast — climate/drain.py
Condition Drain Engine: weather affliction onset and stamina drain per tick.
============================================================================
Version:     0.3
Stack:       Python 3.12 | bespoke EventBus
Status:      Production-ready.

Architecture notes
------------------
- One engine per tracked actor. State lives for one in-world day.
- The engine returns the drain delta (int <= 0). It never applies it;
  the owner of the stamina pool does.
- Night/day is an injected boolean. The engine never asks the clock.
- Onset and remediation are announced on the EventBus when one is given.
- Diagnostic narration goes to the injected sink, and only when verbose.

State machine (per day)
-----------------------
  Healthy  --onset-->          Afflicted
  Afflicted --clear()/new day--> Healthy
  There is no other transition. Affliction is binary, it does not stack.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Union

from climate.conditions import Weather, drain_multiplier, has_any
from climate.config import DrainConfig
from climate.diagnostics import DiagnosticSink, NullSink
from climate.events import (
    EventBus,
    EVT_CONDITION_ONSET,
    EVT_CONDITION_CLEARED,
)

Duration = Union[int, float, timedelta]


@dataclass
class AfflictionState:
    """
    is_afflicted        — set on onset, cleared by clear() or a new day.
    was_afflicted_today — only ever goes False -> True within a day.
    """
    is_afflicted: bool = False
    was_afflicted_today: bool = False


def _as_seconds(value: Duration) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class ConditionDrainEngine:
    """
    Decides, tick by tick, whether the actor is afflicted by the weather
    and how much stamina the affliction costs this tick.

    The caller must invoke on_new_day() at each day boundary before any
    evaluate_tick() of that day, and must serialize all calls.
    """

    def __init__(
        self,
        config: DrainConfig,
        bus: Optional[EventBus] = None,
        sink: Optional[DiagnosticSink] = None,
        actor: str = "player",
    ) -> None:
        self.config = config
        self.bus = bus
        self.sink = sink if sink is not None else NullSink()
        self.actor = actor
        self.state = AfflictionState()
        self.last_conditions: List[str] = []

    # ----------------------------------------------------------
    # State queries
    # ----------------------------------------------------------

    @property
    def is_afflicted(self) -> bool:
        return self.state.is_afflicted

    @property
    def was_afflicted_today(self) -> bool:
        return self.state.was_afflicted_today

    def can_onset(self) -> bool:
        if self.state.is_afflicted:
            self._log(f"{self.actor} is already afflicted, returning false")
            return False

        if self.state.was_afflicted_today and not self.config.allow_multiple_onsets:
            return False

        return True

    # ----------------------------------------------------------
    # Transitions
    # ----------------------------------------------------------

    def on_new_day(self) -> None:
        self.state.is_afflicted = False
        self.state.was_afflicted_today = False

    def reset(self) -> None:
        """Same as on_new_day(); for callers that reset outside a day boundary."""
        self.on_new_day()

    def clear(self) -> None:
        """Remediation (e.g. a cure item). Keeps was_afflicted_today."""
        self.state.is_afflicted = False
        self._publish(EVT_CONDITION_CLEARED)

    def _onset(self) -> None:
        self.state.is_afflicted = True
        self.state.was_afflicted_today = True
        self._publish(EVT_CONDITION_ONSET)

    # ----------------------------------------------------------
    # Tick evaluation
    # ----------------------------------------------------------

    def qualifies(self, flags: Weather, is_night: bool) -> bool:
        """
        (Blizzard or Lightning) or (Frost at night)
        or ((Heatwave by day) and can_onset()).
        """
        return (
            has_any(flags, Weather.BLIZZARD | Weather.LIGHTNING)
            or (Weather.FROST in flags and is_night)
            or ((Weather.HEATWAVE in flags and not is_night) and self.can_onset())
        )

    def evaluate_tick(
        self,
        flags: Weather,
        seconds_outside: Duration,
        seconds_total: Duration,
        is_night: bool,
        random_unit: float,
    ) -> int:
        """
        Run one tick. Returns the stamina delta for the caller to apply.

        The random roll only gates a new onset; an afflicted actor skips it.
        Drain is computed while afflicted and exposed past the threshold.
        """
        outside = _as_seconds(seconds_outside)
        total = _as_seconds(seconds_total)
        exposure = outside / total if total else 0.0
        roll = min(1.0, max(0.0, random_unit))
        total_multi = 0.0
        self.last_conditions = []

        self._log(
            f"Exposure: {outside:g}/{total:g}s with fraction {exposure:.3f} "
            f"against target {self.config.exposure_threshold}"
        )

        if exposure >= self.config.exposure_threshold and (
            roll >= self.config.onset_probability_threshold or self.state.is_afflicted
        ):
            if self.qualifies(flags, is_night) and self.can_onset():
                self._onset()
                self._log(f"Onset: {self.actor} is now afflicted")

            self._log(
                f"Status update. Afflicted: {self.state.is_afflicted} and valid "
                f"conditions: {self._weather_is_hazardous(flags, is_night)}"
            )

            if self.state.is_afflicted:
                total_multi, self.last_conditions = drain_multiplier(flags, is_night)

        drain = -math.floor(self.config.drain_magnitude * total_multi)

        if self.state.is_afflicted:
            self._log(
                f"Conditions for the drain are [ {', '.join(self.last_conditions)} ] "
                f"for a total multiplier of {total_multi} for a total drain of {drain}"
            )

        return drain

    # ----------------------------------------------------------
    # Internals
    # ----------------------------------------------------------

    @staticmethod
    def _weather_is_hazardous(flags: Weather, is_night: bool) -> bool:
        return (
            has_any(flags, Weather.BLIZZARD | Weather.LIGHTNING)
            or (Weather.FROST in flags and is_night)
            or (Weather.HEATWAVE in flags and not is_night)
        )

    def _log(self, message: str) -> None:
        if self.config.verbose:
            self.sink.log(message)

    def _publish(self, event_key: str, **data) -> None:
        if self.bus is not None:
            self.bus.publish(event_key, self.actor, **data)
