"""
Ferncast — climate/loop.py
Climate Loop: wires the clock, solar estimator, drain engines and EventBus.
===========================================================================
Version:     0.3
Stack:       Python 3.12 | python-tcod-ecs
Status:      Integration entry point.

Architecture notes
------------------
- The loop is the single scheduler. It calls every engine serially.
- One tick advances the clock by ClockConfig.tick_minutes.
- Reaching ClockConfig.day_end starts the next day; new_day_system runs
  before any tick of that day.
- Night comes from the solar estimator. When the estimator reports no
  crossing, the loop decides from the noon elevation.
- Every evaluated tick is announced as clock.tick after the systems ran;
  the tick that rolls the day over announces clock.day_started instead.
"""

from __future__ import annotations

import random
from typing import Dict, Optional

import tcod.ecs

from climate.conditions import Weather, weather_names
from climate.config import ClimateConfig, load_config
from climate.diagnostics import DiagnosticSink, StderrSink
from climate.drain import ConditionDrainEngine
from climate.ecs.components import (
    ActorIdentity,
    Stamina,
    Shelter,
    Exposure,
    ConditionTracker,
)
from climate.ecs.systems import (
    exposure_tracking_system,
    condition_drain_system,
    new_day_system,
    remediation_system,
)
from climate.events import EventBus, EVT_CLOCK_TICK, EVT_DAY_STARTED
from climate.solar import (
    ClockTime,
    InvalidGeometryError,
    SolarTimeEstimator,
    SUNRISE_ANGLE,
    noon_elevation,
)


class ClimateLoop:
    """
    Core executor for the weather simulation.
    Owns the registry of tracked actors and the world clock.
    """
    def __init__(
        self,
        config: Optional[ClimateConfig] = None,
        seed: Optional[int] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        self.config = config if config is not None else load_config()
        self.registry = tcod.ecs.Registry()
        self.bus = EventBus()
        self.sink = sink if sink is not None else StderrSink("ConditionDrain")
        self.estimator = SolarTimeEstimator.from_config(self.config.night)
        self.rng = random.Random(seed)

        self.day = 1
        self.time = ClockTime.from_int_time(self.config.clock.day_start)
        self.weather = Weather.NONE
        self._next_entity_id = 1

    # ----------------------------------------------------------
    # Actors
    # ----------------------------------------------------------

    def spawn_actor(self, name: str, stamina: int = 270, outdoors: bool = True,
                    is_player: bool = True) -> tcod.ecs.Entity:
        actor = self.registry.new_entity()
        actor.components[ActorIdentity] = ActorIdentity(
            entity_id=self._next_entity_id, name=name, is_player=is_player
        )
        actor.components[Stamina] = Stamina(current=stamina, maximum=stamina)
        actor.components[Shelter] = Shelter(is_outdoors=outdoors)
        actor.components[Exposure] = Exposure()
        actor.components[ConditionTracker] = ConditionTracker(
            engine=ConditionDrainEngine(self.config.drain, bus=self.bus, sink=self.sink, actor=name)
        )
        self._next_entity_id += 1
        return actor

    def move_indoors(self, actor: tcod.ecs.Entity) -> None:
        actor.components[Shelter].is_outdoors = False

    def move_outdoors(self, actor: tcod.ecs.Entity) -> None:
        actor.components[Shelter].is_outdoors = True

    def cure(self, actor: tcod.ecs.Entity) -> bool:
        return remediation_system(actor)

    def set_weather(self, weather: Weather) -> None:
        self.weather = weather

    # ----------------------------------------------------------
    # Clock
    # ----------------------------------------------------------

    def is_night(self) -> bool:
        try:
            return self.estimator.is_night(self.day, self.time)
        except InvalidGeometryError:
            # Sun never crosses the horizon today: all day or all night.
            return noon_elevation(self.estimator.latitude, self.day) < SUNRISE_ANGLE

    def tick(self) -> Dict[str, int]:
        """Advance one tick. Returns the stamina delta per actor."""
        self.time = self.time.add_minutes(self.config.clock.tick_minutes)
        if self.time.to_int_time() >= self.config.clock.day_end:
            self.start_new_day()
            return {}

        is_night = self.is_night()
        exposure_tracking_system(self.registry)
        deltas = condition_drain_system(
            self.registry,
            self.bus,
            self.weather,
            is_night,
            self.rng,
            tick_seconds=self.config.clock.tick_minutes * 60,
        )
        self.bus.publish(
            EVT_CLOCK_TICK,
            "clock",
            day=self.day,
            time=self.time.to_int_time(),
            is_night=is_night,
            weather=weather_names(self.weather),
        )
        return deltas

    def start_new_day(self) -> None:
        self.day += 1
        self.time = ClockTime.from_int_time(self.config.clock.day_start)
        new_day_system(self.registry)

        data = {"day": self.day}
        try:
            data["sunrise"] = self.estimator.sunrise(self.day).to_int_time()
            data["sunset"] = self.estimator.sunset(self.day).to_int_time()
        except InvalidGeometryError:
            pass # no crossing today; the event carries the day only
        self.bus.publish(EVT_DAY_STARTED, "clock", **data)

    def run_day(self) -> None:
        """Tick until the next day begins."""
        start_day = self.day
        while self.day == start_day:
            self.tick()
