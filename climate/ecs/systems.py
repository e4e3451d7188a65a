"""
Ferncast — climate/ecs/systems.py
ECS Systems: exposure tracking, condition drain, day rollover and cures.
========================================================================
Version:     0.2
Stack:       Python 3.12 | python-tcod-ecs
Status:      Production-ready.

Architecture notes
------------------
- Systems are pure functions operating on a tcod.ecs.Registry.
- Dispatch order per tick: exposure_tracking_system, then
  condition_drain_system. new_day_system runs before the first tick
  of a new day.
- Stamina is only changed here, from the delta the engine returns.
"""

from __future__ import annotations
import random
from typing import Dict

import tcod.ecs
from climate.conditions import Weather
from climate.ecs.components import (
    ActorIdentity,
    Stamina,
    Shelter,
    Exposure,
    ConditionTracker,
)
from climate.events import (
    EventBus,
    EVT_STAMINA_DRAINED,
)

def exposure_tracking_system(registry: tcod.ecs.Registry) -> None:
    """Counts one tick for every tracked actor, and one outside if unsheltered."""
    for entity in registry.Q.all_of(components=[Exposure, Shelter]):
        exposure = entity.components[Exposure]
        exposure.ticks_total += 1
        if entity.components[Shelter].is_outdoors:
            exposure.ticks_outside += 1

def condition_drain_system(
    registry: tcod.ecs.Registry,
    bus: EventBus,
    weather: Weather,
    is_night: bool,
    rng: random.Random,
    tick_seconds: float,
) -> Dict[str, int]:
    """
    Evaluates every tracked actor and applies the stamina delta.
    Returns {actor name: delta} for this tick.
    """
    deltas: Dict[str, int] = {}
    for entity in registry.Q.all_of(components=[ConditionTracker, Exposure, Stamina]):
        engine = entity.components[ConditionTracker].engine
        exposure = entity.components[Exposure]

        delta = engine.evaluate_tick(
            weather,
            exposure.ticks_outside * tick_seconds,
            exposure.ticks_total * tick_seconds,
            is_night,
            rng.random(),
        )

        name = entity.components[ActorIdentity].name if ActorIdentity in entity.components else engine.actor
        deltas[name] = delta
        if delta == 0:
            continue

        stamina = entity.components[Stamina]
        stamina.current = max(0, stamina.current + delta)
        bus.publish(
            EVT_STAMINA_DRAINED,
            name,
            amount=-delta,
            stamina_remaining=stamina.current,
            conditions=list(engine.last_conditions),
        )
    return deltas

def new_day_system(registry: tcod.ecs.Registry) -> None:
    """Day boundary: reset exposure windows and affliction state."""
    for entity in registry.Q.all_of(components=[ConditionTracker]):
        entity.components[ConditionTracker].engine.on_new_day()
        if Exposure in entity.components:
            exposure = entity.components[Exposure]
            exposure.ticks_outside = 0
            exposure.ticks_total = 0

def remediation_system(actor: tcod.ecs.Entity) -> bool:
    """Applies a cure. Returns True if the actor was afflicted."""
    if ConditionTracker not in actor.components:
        return False
    engine = actor.components[ConditionTracker].engine
    was_afflicted = engine.is_afflicted
    engine.clear()
    return was_afflicted
