"""Typed records decoded from a FIT activity file.

Every field is optional: ``None`` means the device did not report it, and
is never replaced by a default. Numeric values are kept in the units the
decoder documents for each field (see ``fitsummary.decoder``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Tuple

Number = float
NumberArray = Tuple[Optional[float], ...]


@dataclass(frozen=True)
class DecodedRecord:
    """Base class for every record kind handed to the accumulator."""


@dataclass(frozen=True)
class Session(DecodedRecord):
    start_time: Optional[datetime] = None
    total_elapsed_time: Optional[int] = None  # ms
    total_timer_time: Optional[int] = None  # ms
    total_distance: Optional[int] = None  # cm
    sport: Optional[int] = None
    sub_sport: Optional[int] = None
    pool_length: Optional[Number] = None  # m
    avg_swolf: Optional[int] = None
    total_cycles: Optional[int] = None
    avg_step_length: Optional[Number] = None  # mm
    total_calories: Optional[int] = None
    estimated_sweat_loss: Optional[int] = None  # ml
    avg_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    hrv_sdrr: Optional[int] = None  # ms
    hrv_rmssd: Optional[int] = None  # ms
    avg_spo2: Optional[int] = None
    enhanced_avg_respiration_rate: Optional[Number] = None
    enhanced_max_respiration_rate: Optional[Number] = None
    enhanced_min_respiration_rate: Optional[Number] = None
    avg_stress: Optional[Number] = None
    avg_cadence: Optional[int] = None
    max_cadence: Optional[int] = None
    total_ascent: Optional[int] = None
    total_descent: Optional[int] = None
    avg_swim_cadence: Optional[int] = None
    enhanced_avg_speed: Optional[Number] = None  # m/s
    enhanced_max_speed: Optional[Number] = None  # m/s
    training_load_peak: Optional[Number] = None
    avg_power: Optional[int] = None
    max_power: Optional[int] = None
    normalized_power: Optional[int] = None
    stand_time: Optional[int] = None  # ms
    stand_count: Optional[int] = None
    avg_left_pco: Optional[int] = None
    avg_right_pco: Optional[int] = None
    avg_vertical_oscillation: Optional[Number] = None  # mm
    avg_stance_time: Optional[Number] = None  # ms
    avg_vertical_ratio: Optional[Number] = None
    avg_stance_time_balance: Optional[Number] = None
    avg_left_power_phase: Optional[NumberArray] = None
    avg_left_power_phase_peak: Optional[NumberArray] = None
    avg_right_power_phase: Optional[NumberArray] = None
    avg_right_power_phase_peak: Optional[NumberArray] = None
    avg_power_position: Optional[NumberArray] = None
    max_power_position: Optional[NumberArray] = None
    avg_cadence_position: Optional[NumberArray] = None
    max_cadence_position: Optional[NumberArray] = None
    front_shifts: Optional[int] = None
    rear_shifts: Optional[int] = None
    left_right_balance: Optional[int] = None  # packed, see LEFT_RIGHT_BALANCE_MASK
    avg_left_pedal_smoothness: Optional[Number] = None
    avg_right_pedal_smoothness: Optional[Number] = None
    avg_left_torque_effectiveness: Optional[Number] = None
    avg_right_torque_effectiveness: Optional[Number] = None
    intensity_factor: Optional[Number] = None
    training_stress_score: Optional[Number] = None


@dataclass(frozen=True)
class Sport(DecodedRecord):
    sport: Optional[int] = None
    sub_sport: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class UserProfile(DecodedRecord):
    gender: Optional[int] = None
    age: Optional[int] = None
    height: Optional[Number] = None  # m
    weight: Optional[Number] = None  # kg
    weight_setting: Optional[int] = None  # MEASUREMENT_SYSTEM_*
    resting_heart_rate: Optional[int] = None


@dataclass(frozen=True)
class PhysiologicalMetrics(DecodedRecord):
    aerobic_effect: Optional[Number] = None
    anaerobic_effect: Optional[Number] = None
    met_max: Optional[Number] = None
    recovery_time: Optional[int] = None  # minutes
    lactate_threshold_heart_rate: Optional[int] = None


@dataclass(frozen=True)
class TimeInZone(DecodedRecord):
    reference_message: Optional[int] = None
    reference_index: Optional[int] = None
    time_in_hr_zone: Optional[NumberArray] = None  # seconds per zone


@dataclass(frozen=True)
class WorkoutSet(DecodedRecord):
    """A strength-training set; ``set_type`` 0 is rest, 1 is active."""

    set_type: Optional[int] = None
    duration: Optional[Number] = None  # s
    repetitions: Optional[int] = None
    weight: Optional[Number] = None
    start_time: Optional[datetime] = None
    message_index: Optional[int] = None


@dataclass(frozen=True)
class Lap(DecodedRecord):
    start_time: Optional[datetime] = None
    total_elapsed_time: Optional[int] = None  # ms
    total_timer_time: Optional[int] = None  # ms
    total_distance: Optional[int] = None  # cm
    avg_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    avg_swolf: Optional[int] = None
    message_index: Optional[int] = None


@dataclass(frozen=True)
class TrackPoint(DecodedRecord):
    timestamp: Optional[datetime] = None
    latitude: Optional[Number] = None  # degrees
    longitude: Optional[Number] = None  # degrees
    altitude: Optional[Number] = None  # m
    heart_rate: Optional[int] = None
    speed: Optional[Number] = None  # m/s
    cadence: Optional[int] = None
    power: Optional[int] = None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class Unrecognized(DecodedRecord):
    """A message the summary does not use, kept for diagnostics."""

    message_name: str = ""
    fields: dict[str, Any] = field(default_factory=dict, compare=False)
