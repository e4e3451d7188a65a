"""
Ferncast — run.py
Command-line entry point: solar cycle info, a year table and a one-day weather run.
"""

import argparse
import sys
from pathlib import Path

# Ensure we can import ferncast packages
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

from climate.almanac import build_almanac, daylight_minutes
from climate.conditions import parse_weather
from climate.config import ClimateConfig, NightConfig, load_config
from climate.diagnostics import MemorySink
from climate.ecs.components import Stamina
from climate.events import (
    EVT_CONDITION_ONSET,
    EVT_CONDITION_CLEARED,
    EVT_STAMINA_DRAINED,
    EVT_DAY_STARTED,
)
from climate.loop import ClimateLoop
from climate.narrative import NarrativeGenerator
from climate.solar import YEAR_LENGTH, ClockTime, InvalidGeometryError, SolarTimeEstimator

# clock.tick is left out: one line per ten minutes drowns the rest
NARRATED_EVENTS = (EVT_DAY_STARTED, EVT_CONDITION_ONSET, EVT_STAMINA_DRAINED, EVT_CONDITION_CLEARED)

def build_config(latitude=None, verbose: bool = False) -> ClimateConfig:
    """The TOML config with command-line overrides applied."""
    config = load_config()
    update = {}
    if latitude is not None:
        # Rebuilt rather than model_copy'd so the latitude clamp still runs
        update["night"] = NightConfig(**{**config.night.model_dump(), "latitude": latitude})
    if verbose:
        update["drain"] = config.drain.model_copy(update={"verbose": True})
    return config.model_copy(update=update) if update else config

def print_cycle_info(estimator: SolarTimeEstimator, day: int) -> None:
    try:
        cycle = estimator.cycle_info(day)
    except InvalidGeometryError as exc:
        print(f"Day {day}: {exc}")
        return
    print(f"Sunrise : {cycle.sunrise}, Sunset: {cycle.sunset}")
    print(f"Morning Twilight: {cycle.morning_twilight}, Evening Twilight: {cycle.evening_twilight}")

def year_table_lines(night: NightConfig) -> list:
    """One line per day of the year: sunrise, sunset and hours of daylight."""
    table = build_almanac(night.latitude)
    daylight = daylight_minutes(night.latitude)
    offset = night.sunset_offset_minutes if night.sunset_times_are_minus_thirty else 0

    lines = [f"Latitude {table.latitude:.2f}", "Day  Sunrise  Sunset  Daylight"]
    for day in range(1, YEAR_LENGTH + 1):
        index = day % YEAR_LENGTH
        sunrise = ClockTime.from_minutes(int(table.morning[index]))
        sunset = ClockTime.from_minutes(int(table.evening[index]) + offset)
        hours, minutes = divmod(int(daylight[index]), 60)
        lines.append(f"{day:>3}  {sunrise}    {sunset}   {hours:>2}h{minutes:02d}m")
    return lines

def simulate_day(config: ClimateConfig, weather_names, seed) -> ClimateLoop:
    sink = MemorySink()
    loop = ClimateLoop(config=config, seed=seed, sink=sink)
    for key in NARRATED_EVENTS:
        loop.bus.subscribe(key, lambda event: print(NarrativeGenerator.event_to_text(event)))

    actor = loop.spawn_actor("Farmer")
    loop.set_weather(parse_weather(weather_names))
    loop.run_day()

    for line in sink.lines:
        print(f"  [diag] {line}")
    print(f"Final stamina: {actor.components[Stamina].current}/{actor.components[Stamina].maximum}")
    return loop

def main():
    parser = argparse.ArgumentParser(description="Ferncast solar and weather tools")
    parser.add_argument("--latitude", type=float, default=None)
    parser.add_argument("--day", type=int, default=1)
    parser.add_argument("--year", action="store_true", help="print sunrise and sunset for every day")
    parser.add_argument("--simulate", nargs="*", metavar="WEATHER", default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    config = build_config(args.latitude, args.verbose)
    print_cycle_info(SolarTimeEstimator.from_config(config.night), args.day)

    if args.year:
        try:
            for line in year_table_lines(config.night):
                print(line)
        except InvalidGeometryError as exc:
            print(f"No year table: {exc}")

    if args.simulate is not None:
        simulate_day(config, args.simulate, args.seed)

if __name__ == "__main__":
    main()
