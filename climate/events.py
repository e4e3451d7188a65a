"""
Ferncast — climate/events.py
Climate notifications: affliction, stamina and clock events on a typed bus.
===========================================================================
Version:     0.3
Stack:       Python 3.12 | Pydantic v2 | bespoke pub-sub
Status:      Production-ready.

Who publishes, who listens
--------------------------
  condition.onset            ConditionDrainEngine._onset   -> presentation layer
  condition.cleared          ConditionDrainEngine.clear    -> presentation layer
  condition.stamina_drained  condition_drain_system        -> stamina HUD, run.py
  clock.day_started          ClimateLoop.start_new_day     -> presentation layer
  clock.tick                 ClimateLoop.tick              -> schedulers, lighting

The engines never read from the bus. It only carries outbound
notifications; the returned drain delta stays the authoritative result.
"""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field


class ClimateEventKey(StrEnum):
    CONDITION_ONSET = "condition.onset"
    CONDITION_CLEARED = "condition.cleared"
    STAMINA_DRAINED = "condition.stamina_drained"
    DAY_STARTED = "clock.day_started"
    CLOCK_TICK = "clock.tick"


EVT_CONDITION_ONSET   = ClimateEventKey.CONDITION_ONSET
EVT_CONDITION_CLEARED = ClimateEventKey.CONDITION_CLEARED
EVT_STAMINA_DRAINED   = ClimateEventKey.STAMINA_DRAINED
EVT_DAY_STARTED       = ClimateEventKey.DAY_STARTED
EVT_CLOCK_TICK        = ClimateEventKey.CLOCK_TICK

WILDCARD = "*"


class ClimateEvent(BaseModel):
    """
    source is the actor name, or "clock" for calendar events.
    data stays flat and JSON-safe: ints, strings, lists of labels.
    """
    event_key: str
    source: str
    target: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


Listener = Callable[[ClimateEvent], None]


class EventBus:
    """
    Fan-out of climate notifications to the host's presentation layer.

    Listeners registered for a key hear it before WILDCARD listeners.
    A failing listener is reported on stderr and the rest still hear
    the event, so one broken HUD widget cannot stall the simulation.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event_key: str, listener: Listener) -> None:
        self._listeners.setdefault(event_key, []).append(listener)

    def unsubscribe(self, event_key: str, listener: Listener) -> None:
        # Equality, not identity: bound methods are rebuilt on each access.
        remaining = [l for l in self._listeners.get(event_key, []) if l != listener]
        if remaining:
            self._listeners[event_key] = remaining
        else:
            self._listeners.pop(event_key, None)

    def listener_count(self, event_key: str) -> int:
        return len(self._listeners.get(event_key, []))

    def publish(self, event_key: str, source: str, **data: Any) -> ClimateEvent:
        """Build and emit an event in one call. Returns the emitted event."""
        event = ClimateEvent(event_key=event_key, source=source, data=data)
        self.emit(event)
        return event

    def emit(self, event: ClimateEvent) -> None:
        listeners = self._listeners.get(event.event_key, []) + self._listeners.get(WILDCARD, [])
        for listener in listeners:
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                print(
                    f"[ClimateBus] Listener failed on '{event.event_key}' from {event.source}: {exc}",
                    file=sys.stderr,
                )
