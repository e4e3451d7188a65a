"""
Ferncast — climate/narrative.py
NarrativeGenerator: Translates climate events into player-facing lines.
"""

from climate.events import (
    ClimateEvent,
    EVT_CONDITION_ONSET,
    EVT_CONDITION_CLEARED,
    EVT_STAMINA_DRAINED,
    EVT_DAY_STARTED,
)
from climate.solar import ClockTime

class NarrativeGenerator:
    @staticmethod
    def event_to_text(event: ClimateEvent) -> str:
        """Translates a single ClimateEvent into a string."""
        actor = event.source
        data = event.data

        if event.event_key == EVT_CONDITION_ONSET:
            return f"{actor} has caught a chill from the weather and feels ill."

        if event.event_key == EVT_CONDITION_CLEARED:
            return f"{actor} feels the cold lift."

        if event.event_key == EVT_STAMINA_DRAINED:
            amount = data.get("amount", 0)
            conditions = data.get("conditions", [])
            if conditions:
                return f"{actor} lost {amount} stamina to {', '.join(conditions)}."
            return f"{actor} lost {amount} stamina."

        if event.event_key == EVT_DAY_STARTED:
            day = data.get("day", "?")
            if "sunrise" in data and "sunset" in data:
                sunrise = ClockTime.from_int_time(data["sunrise"])
                sunset = ClockTime.from_int_time(data["sunset"])
                return f"Day {day} begins. Sunrise {sunrise}, sunset {sunset}."
            return f"Day {day} begins."

        # Fallback
        return f"{actor}: {event.event_key}"
