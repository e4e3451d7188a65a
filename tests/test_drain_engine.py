"""
Ferncast — tests/test_drain_engine.py
ConditionDrainEngine: onset gating, drain stacking and day lifecycle.
"""

from datetime import timedelta

import pytest

from climate.conditions import Weather
from climate.config import DrainConfig
from climate.diagnostics import MemorySink
from climate.drain import ConditionDrainEngine
from climate.events import EventBus, EVT_CONDITION_ONSET, EVT_CONDITION_CLEARED


def make_engine(**overrides):
    params = dict(exposure_threshold=0.5, onset_probability_threshold=0.9, drain_magnitude=4)
    params.update(overrides)
    bus = EventBus()
    events = []
    bus.subscribe("*", events.append)
    engine = ConditionDrainEngine(DrainConfig(**params), bus=bus, actor="Farmer")
    return engine, events


def afflict(engine):
    engine.evaluate_tick(Weather.LIGHTNING, 600, 600, False, 0.95)
    assert engine.is_afflicted


def test_new_day_resets_everything():
    engine, _ = make_engine()
    afflict(engine)
    engine.on_new_day()
    assert not engine.is_afflicted
    assert not engine.was_afflicted_today
    assert engine.can_onset()

def test_new_day_is_idempotent():
    engine, _ = make_engine()
    engine.on_new_day()
    engine.on_new_day()
    assert engine.state.is_afflicted is False
    assert engine.state.was_afflicted_today is False

def test_reset_matches_new_day():
    engine, _ = make_engine()
    afflict(engine)
    engine.reset()
    assert not engine.is_afflicted
    assert not engine.was_afflicted_today

def test_cannot_onset_twice_in_a_day_by_default():
    engine, _ = make_engine()
    engine.state.was_afflicted_today = True
    assert not engine.can_onset()

    for flags in (Weather.BLIZZARD, Weather.LIGHTNING, Weather.FROST, Weather.HEATWAVE):
        engine.evaluate_tick(flags, 600, 600, True, 0.99)
        engine.evaluate_tick(flags, 600, 600, False, 0.99)
    assert not engine.is_afflicted

def test_can_onset_false_while_afflicted():
    engine, _ = make_engine(allow_multiple_onsets=True)
    afflict(engine)
    assert not engine.can_onset()

def test_multiple_onsets_allowed_after_clear():
    engine, events = make_engine(allow_multiple_onsets=True)
    afflict(engine)
    engine.clear()
    assert engine.can_onset()
    afflict(engine)
    assert [e.event_key for e in events].count(EVT_CONDITION_ONSET) == 2

def test_clear_keeps_was_afflicted_today():
    engine, events = make_engine()
    afflict(engine)
    engine.clear()
    assert not engine.is_afflicted
    assert engine.was_afflicted_today
    assert not engine.can_onset()
    assert events[-1].event_key == EVT_CONDITION_CLEARED
    assert events[-1].source == "Farmer"

def test_clear_twice_same_state_as_once():
    engine, _ = make_engine()
    afflict(engine)
    engine.clear()
    once = (engine.is_afflicted, engine.was_afflicted_today)
    engine.clear()
    assert (engine.is_afflicted, engine.was_afflicted_today) == once

def test_blizzard_and_frost_at_night_stack():
    # 1.25 + 0.5 + 1.25 = 3.0; 4 * 3.0 = 12
    engine, _ = make_engine()
    drain = engine.evaluate_tick(Weather.BLIZZARD | Weather.FROST, 600, 600, True, 0.95)
    assert engine.is_afflicted
    assert drain == -12

def test_night_frost_onset_and_same_tick_drain():
    engine, events = make_engine()
    drain = engine.evaluate_tick(Weather.FROST, 600, 600, True, 0.95)
    assert engine.is_afflicted
    assert engine.last_conditions == ["Night Frost"]
    # floor(4 * 1.25) = 5
    assert drain == -5
    assert [e.event_key for e in events] == [EVT_CONDITION_ONSET]

def test_roll_below_threshold_blocks_new_onset():
    engine, events = make_engine()
    drain = engine.evaluate_tick(Weather.BLIZZARD, 600, 600, True, 0.5)
    assert drain == 0
    assert not engine.is_afflicted
    assert events == []

def test_afflicted_actor_bypasses_roll():
    engine, _ = make_engine()
    afflict(engine)
    drain = engine.evaluate_tick(Weather.BLIZZARD, 600, 600, False, 0.0)
    assert drain == -5

def test_low_exposure_blocks_onset_and_drain():
    engine, _ = make_engine()
    assert engine.evaluate_tick(Weather.BLIZZARD, 100, 600, True, 0.99) == 0
    assert not engine.is_afflicted

    afflict(engine)
    assert engine.evaluate_tick(Weather.BLIZZARD, 100, 600, True, 0.99) == 0
    assert engine.is_afflicted

def test_zero_total_duration_is_zero_exposure():
    engine, _ = make_engine()
    assert engine.evaluate_tick(Weather.BLIZZARD, 0, 0, True, 0.99) == 0
    assert not engine.is_afflicted

def test_timedelta_durations():
    engine, _ = make_engine()
    drain = engine.evaluate_tick(
        Weather.BLIZZARD, timedelta(minutes=10), timedelta(minutes=10), False, 0.95
    )
    assert drain == -5

def test_out_of_range_roll_is_clamped():
    engine, _ = make_engine()
    engine.evaluate_tick(Weather.BLIZZARD, 600, 600, False, -0.3)
    assert not engine.is_afflicted
    engine.evaluate_tick(Weather.BLIZZARD, 600, 600, False, 1.7)
    assert engine.is_afflicted

@pytest.mark.parametrize("flags, is_night, expected", [
    (Weather.HEATWAVE, False, True),
    (Weather.HEATWAVE, True, False),
    (Weather.FROST, True, True),
    (Weather.FROST, False, False),
    (Weather.LIGHTNING, False, True),
    (Weather.BLIZZARD, True, True),
    (Weather.FOG | Weather.SNOW, True, False),
])
def test_qualifying_conditions(flags, is_night, expected):
    engine, _ = make_engine()
    engine.evaluate_tick(flags, 600, 600, is_night, 0.95)
    assert engine.is_afflicted is expected

def test_heatwave_branch_consults_can_onset():
    engine, _ = make_engine()
    engine.state.was_afflicted_today = True
    assert not engine.qualifies(Weather.HEATWAVE, is_night=False)
    # The other branches do not depend on can_onset()
    assert engine.qualifies(Weather.BLIZZARD, is_night=False)

def test_fog_drains_only_once_afflicted():
    engine, _ = make_engine()
    assert engine.evaluate_tick(Weather.FOG, 600, 600, True, 0.95) == 0
    assert not engine.is_afflicted

    afflict(engine)
    # Lightning 1.0 + Fog 0.5 + Night Fog 0.25 = 1.75; 4 * 1.75 = 7
    assert engine.evaluate_tick(Weather.LIGHTNING | Weather.FOG, 600, 600, True, 0.0) == -7

def test_fractional_drain_is_floored():
    engine, _ = make_engine(drain_magnitude=3)
    # 3 * 1.25 = 3.75 -> 3
    assert engine.evaluate_tick(Weather.HEATWAVE, 600, 600, False, 0.95) == -3

def test_afflicted_in_clear_weather_drains_nothing():
    engine, _ = make_engine()
    afflict(engine)
    assert engine.evaluate_tick(Weather.SUNNY, 600, 600, False, 0.95) == 0
    assert engine.is_afflicted

def test_verbose_narration_goes_to_sink():
    sink = MemorySink()
    engine = ConditionDrainEngine(
        DrainConfig(exposure_threshold=0.5, onset_probability_threshold=0.9,
                    drain_magnitude=4, verbose=True),
        sink=sink,
    )
    engine.evaluate_tick(Weather.FROST, 600, 600, True, 0.95)
    assert any("fraction 1.000" in line for line in sink.lines)
    assert any("Night Frost" in line and "-5" in line for line in sink.lines)

def test_quiet_engine_writes_nothing():
    sink = MemorySink()
    engine = ConditionDrainEngine(DrainConfig(exposure_threshold=0.5), sink=sink)
    engine.evaluate_tick(Weather.BLIZZARD, 600, 600, True, 0.95)
    assert sink.lines == []
