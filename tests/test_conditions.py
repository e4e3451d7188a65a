import pytest
from climate.conditions import (
    Weather,
    DRAIN_RULES,
    has_any,
    has_all,
    parse_weather,
    weather_names,
    drain_multiplier,
)

def test_flag_queries():
    flags = Weather.LIGHTNING | Weather.SNOW
    assert has_any(flags, Weather.BLIZZARD | Weather.LIGHTNING)
    assert not has_any(flags, Weather.FOG | Weather.FROST)
    assert has_all(flags, Weather.LIGHTNING | Weather.SNOW)
    assert not has_all(Weather.LIGHTNING, Weather.LIGHTNING | Weather.SNOW)

def test_parse_weather_is_case_insensitive():
    assert parse_weather(["Blizzard", "frost", " FOG "]) == Weather.BLIZZARD | Weather.FROST | Weather.FOG
    assert parse_weather([]) == Weather.NONE

def test_parse_weather_unknown_name():
    with pytest.raises(ValueError, match="volcano"):
        parse_weather(["volcano"])

def test_weather_names_round_trip():
    flags = Weather.FOG | Weather.SNOW
    assert weather_names(flags) == ["snow", "fog"]
    assert parse_weather(weather_names(flags)) == flags

def test_no_weather_no_multiplier():
    assert drain_multiplier(Weather.NONE, is_night=True) == (0.0, [])
    assert drain_multiplier(Weather.SUNNY | Weather.RAIN, is_night=False) == (0.0, [])

def test_night_blizzard_and_frost_stack():
    # 1.25 (Blizzard) + 1.25 (Night Frost) + 0.5 (Night Blizzard)
    total, labels = drain_multiplier(Weather.BLIZZARD | Weather.FROST, is_night=True)
    assert total == 3.0
    assert labels == ["Blizzard", "Night Frost", "Night Blizzard"]

def test_night_fog_adds_to_fog():
    assert drain_multiplier(Weather.FOG, is_night=False) == (0.5, ["Fog"])
    assert drain_multiplier(Weather.FOG, is_night=True) == (0.75, ["Fog", "Night Fog"])

def test_thundersnow_only_at_night():
    flags = Weather.LIGHTNING | Weather.SNOW
    assert drain_multiplier(flags, is_night=False) == (1.0, ["Lightning or Thundersnow"])
    assert drain_multiplier(flags, is_night=True) == (1.5, ["Lightning or Thundersnow", "Night Thundersnow"])

def test_frost_and_heatwave_respect_daylight():
    assert drain_multiplier(Weather.FROST, is_night=False) == (0.0, [])
    assert drain_multiplier(Weather.HEATWAVE, is_night=True) == (0.0, [])
    assert drain_multiplier(Weather.HEATWAVE, is_night=False) == (1.25, ["Day Heatwave"])

def test_rule_table_order():
    assert [r.label for r in DRAIN_RULES] == [
        "Lightning or Thundersnow",
        "Fog",
        "Night Fog",
        "Blizzard",
        "Night Frost",
        "Night Thundersnow",
        "Night Blizzard",
        "Day Heatwave",
    ]
