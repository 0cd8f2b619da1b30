"""Display strings referenced by the summary.

Labels and placeholders are stored as resource keys and resolved by the
renderer. Range values are formatted here; a renderer that localizes them
can pass its own ``DisplayStrings`` subclass to the synthesizer.
"""

from __future__ import annotations

STATS_EMPTY_VALUE = "stats_empty_value"
SET_LABEL = "set"
REPS_LABEL = "workout_set_reps"
WEIGHT_LABEL = "menuitem_weight"
DURATION_LABEL = "activity_detail_duration_label"


class DisplayStrings:
    def range_degrees(self, start: int, end: int) -> str:
        return f"{start}°–{end}°"

    def range_percentage(self, left: int, right: int) -> str:
        return f"{left}%–{right}%"


DEFAULT_STRINGS = DisplayStrings()
