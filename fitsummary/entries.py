"""Workout summary keys, unit tags and the ordered summary container."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from fitsummary.activity import CycleUnit

# ---------- Summary keys ----------

ACTIVE_SECONDS = "active_seconds"
DISTANCE_METERS = "distance_meters"
POOL_LENGTH = "pool_length"
SWOLF_AVG = "swolf_avg"
STEPS = "steps"
STROKES = "strokes"
JUMPS = "jumps"
REPETITIONS = "repetitions"
REVOLUTIONS = "revolutions"
CYCLES = "cycles"
STEP_LENGTH_AVG = "step_length_avg"
CALORIES_BURNT = "calories_burnt"
ESTIMATED_SWEAT_LOSS = "estimated_sweat_loss"
HR_AVG = "hr_avg"
HR_MAX = "hr_max"
HRV_SDRR = "hrv_sdrr"
HRV_RMSSD = "hrv_rmssd"
SPO2_AVG = "spo2_avg"
RESPIRATION_AVG = "respiration_avg"
RESPIRATION_MAX = "respiration_max"
RESPIRATION_MIN = "respiration_min"
STRESS_AVG = "stress_avg"
CADENCE_AVG = "cadence_avg"
CADENCE_MAX = "cadence_max"
STROKE_RATE_AVG = "stroke_rate_avg"
STROKE_RATE_MAX = "stroke_rate_max"
JUMP_RATE_AVG = "jump_rate_avg"
JUMP_RATE_MAX = "jump_rate_max"
REP_RATE_AVG = "rep_rate_avg"
REP_RATE_MAX = "rep_rate_max"
ASCENT_DISTANCE = "ascent_distance"
DESCENT_DISTANCE = "descent_distance"
SWIM_AVG_CADENCE = "swim_avg_cadence"
PACE_AVG_SECONDS_KM = "pace_avg_seconds_km"
PACE_MAX = "pace_max"
SPEED_AVG = "speed_avg"
SPEED_MAX = "speed_max"
TRAINING_LOAD = "training_load"
AVG_POWER = "avg_power"
MAX_POWER = "max_power"
NORMALIZED_POWER = "normalized_power"
STANDING_TIME = "standing_time"
STANDING_COUNT = "standing_count"
AVG_LEFT_PCO = "avg_left_pco"
AVG_RIGHT_PCO = "avg_right_pco"
AVG_VERTICAL_OSCILLATION = "avg_vertical_oscillation"
AVG_GROUND_CONTACT_TIME = "avg_ground_contact_time"
AVG_VERTICAL_RATIO = "avg_vertical_ratio"
AVG_GROUND_CONTACT_TIME_BALANCE = "avg_ground_contact_time_balance"
AVG_LEFT_POWER_PHASE = "avg_left_power_phase"
AVG_RIGHT_POWER_PHASE = "avg_right_power_phase"
AVG_LEFT_POWER_PHASE_PEAK = "avg_left_power_phase_peak"
AVG_RIGHT_POWER_PHASE_PEAK = "avg_right_power_phase_peak"
AVG_POWER_SEATING = "avg_power_seating"
AVG_POWER_STANDING = "avg_power_standing"
MAX_POWER_SEATING = "max_power_seating"
MAX_POWER_STANDING = "max_power_standing"
AVG_CADENCE_SEATING = "avg_cadence_seating"
AVG_CADENCE_STANDING = "avg_cadence_standing"
MAX_CADENCE_SEATING = "max_cadence_seating"
MAX_CADENCE_STANDING = "max_cadence_standing"
FRONT_GEAR_SHIFTS = "front_gear_shifts"
REAR_GEAR_SHIFTS = "rear_gear_shifts"
LEFT_RIGHT_BALANCE = "left_right_balance"
AVG_PEDAL_SMOOTHNESS = "avg_pedal_smoothness"
AVG_TORQUE_EFFECTIVENESS = "avg_torque_effectiveness"
HR_ZONE_NA = "hr_zone_na"
HR_ZONE_WARM_UP = "hr_zone_warm_up"
HR_ZONE_EASY = "hr_zone_easy"
HR_ZONE_AEROBIC = "hr_zone_aerobic"
HR_ZONE_THRESHOLD = "hr_zone_threshold"
HR_ZONE_MAXIMUM = "hr_zone_maximum"
TRAINING_EFFECT_AEROBIC = "training_effect_aerobic"
TRAINING_EFFECT_ANAEROBIC = "training_effect_anaerobic"
MAXIMUM_OXYGEN_UPTAKE = "maximum_oxygen_uptake"
RECOVERY_TIME = "recovery_time"
LACTATE_THRESHOLD_HR = "lactate_threshold_hr"
INTENSITY_FACTOR = "intensity_factor"
TRAINING_STRESS_SCORE = "training_stress_score"
SETS = "sets"
SETS_HEADER = "sets_header"
INTERNAL_HAS_GPS = "internal_has_gps"

# ---------- Unit tags ----------

UNIT_NONE = ""
UNIT_STRING = "string"
UNIT_SECONDS = "seconds"
UNIT_MILLISECONDS = "milliseconds"
UNIT_METERS = "meters"
UNIT_MM = "mm"
UNIT_KCAL = "kcal"
UNIT_ML = "ml"
UNIT_BPM = "bpm"
UNIT_PERCENTAGE = "%"
UNIT_BREATHS_PER_MIN = "breaths_per_min"
UNIT_STROKES_PER_LENGTH = "strokes_per_length"
UNIT_KMPH = "km_h"
UNIT_WATT = "watt"
UNIT_RPM = "rpm"
UNIT_SPM = "spm"
UNIT_KG = "kg"
UNIT_LB = "lb"
UNIT_ML_KG_MIN = "ml_kg_min"
UNIT_STEPS = "steps"
UNIT_STROKES = "strokes"
UNIT_JUMPS = "jumps"
UNIT_REPS = "reps"
UNIT_REVOLUTIONS = "revolutions"
UNIT_CYCLES = "cycles"
UNIT_STROKES_PER_MINUTE = "strokes_per_minute"
UNIT_JUMPS_PER_MINUTE = "jumps_per_minute"
UNIT_REPS_PER_MINUTE = "reps_per_minute"
UNIT_CYCLES_PER_MINUTE = "cycles_per_minute"

# cycle unit -> (total key, total unit, avg cadence key, max cadence key, cadence unit)
_CYCLE_KEYS = {
    CycleUnit.STEPS: (STEPS, UNIT_STEPS, CADENCE_AVG, CADENCE_MAX, UNIT_SPM),
    CycleUnit.STROKES: (STROKES, UNIT_STROKES, STROKE_RATE_AVG, STROKE_RATE_MAX, UNIT_STROKES_PER_MINUTE),
    CycleUnit.JUMPS: (JUMPS, UNIT_JUMPS, JUMP_RATE_AVG, JUMP_RATE_MAX, UNIT_JUMPS_PER_MINUTE),
    CycleUnit.REPS: (REPETITIONS, UNIT_REPS, REP_RATE_AVG, REP_RATE_MAX, UNIT_REPS_PER_MINUTE),
    CycleUnit.REVOLUTIONS: (REVOLUTIONS, UNIT_REVOLUTIONS, CADENCE_AVG, CADENCE_MAX, UNIT_RPM),
    CycleUnit.NONE: (CYCLES, UNIT_CYCLES, CADENCE_AVG, CADENCE_MAX, UNIT_CYCLES_PER_MINUTE),
}


# ---------- Entry types ----------

@dataclass(frozen=True)
class SummaryValue:
    """A single value with its unit tag (also used as a table cell)."""

    value: Any
    unit: str = UNIT_NONE
    higher_is_better: bool = False

    def to_dict(self) -> dict:
        d = {"value": self.value, "unit": self.unit}
        if self.higher_is_better:
            d["higher_is_better"] = True
        return d


@dataclass(frozen=True)
class ProgressEntry:
    value: Any
    unit: str
    percentage: int
    color: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": "progress",
            "value": self.value,
            "unit": self.unit,
            "percentage": self.percentage,
            "color": self.color,
        }


@dataclass(frozen=True)
class TableRowEntry:
    group: str
    columns: list[SummaryValue] = field(default_factory=list)
    is_header: bool = False
    visible: bool = True

    def to_dict(self) -> dict:
        return {
            "type": "table_row",
            "group": self.group,
            "columns": [c.to_dict() for c in self.columns],
            "is_header": self.is_header,
            "visible": self.visible,
        }


# ---------- Container ----------

class SummaryData:
    """
    Insertion-ordered mapping of summary key -> entry.

    ``add`` silently skips ``None`` values. Adding a key twice replaces the
    value but keeps the position of the first insertion.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def add(
        self,
        key: str,
        value: Any,
        unit: Optional[str] = None,
        higher_is_better: bool = False,
    ) -> None:
        if value is None:
            return
        if isinstance(value, (ProgressEntry, TableRowEntry, SummaryValue)):
            self._entries[key] = value
            return
        if unit is None:
            unit = UNIT_STRING if isinstance(value, str) else UNIT_NONE
        self._entries[key] = SummaryValue(value, unit, higher_is_better)

    def add_total(self, value: Any, cycle_unit: CycleUnit) -> None:
        key, unit, _, _, _ = _CYCLE_KEYS[cycle_unit]
        self.add(key, value, unit)

    def add_cadence_avg(self, value: Any, cycle_unit: CycleUnit) -> None:
        _, _, key, _, unit = _CYCLE_KEYS[cycle_unit]
        self.add(key, value, unit)

    def add_cadence_max(self, value: Any, cycle_unit: CycleUnit) -> None:
        _, _, _, key, unit = _CYCLE_KEYS[cycle_unit]
        self.add(key, value, unit)

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SummaryData):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    def __repr__(self) -> str:
        return f"SummaryData({self._entries!r})"

    def to_dict(self) -> dict:
        return {key: entry.to_dict() for key, entry in self._entries.items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
