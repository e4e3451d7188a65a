"""
Ferncast — climate/ecs/components.py
ECS Component Definitions for python-tcod-ecs.
==============================================
Version:     0.2
Stack:       Python 3.12 | python-tcod-ecs
Status:      Production-ready.
"""

from __future__ import annotations
from dataclasses import dataclass

from climate.drain import ConditionDrainEngine

@dataclass
class ActorIdentity:
    entity_id: int
    name: str
    is_player: bool = False

@dataclass
class Stamina:
    current: int
    maximum: int

@dataclass
class Shelter:
    is_outdoors: bool = True

@dataclass
class Exposure:
    ticks_outside: int = 0
    ticks_total: int = 0

@dataclass
class ConditionTracker:
    engine: ConditionDrainEngine
