"""
Decode a FIT file into the typed records the summary is built from.

fitparse does the binary work. Fields are read from ``raw_value`` and
scaled here, so records carry the same units whether or not the installed
fitparse profile knows a message: Garmin-only messages and fields show up as
``unknown_<num>`` and are matched by their number. Fields fitparse adds by
expanding components are ignored, their ``raw_value`` is already scaled.

Units kept on purpose (the synthesizer converts them):

- session/lap total_distance in cm, total_timer_time, total_elapsed_time
  and time_standing in ms
- power phase angles in raw uint8 units
- left_right_balance packed as sent by the device
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from fitparse import FitFile, FitParseError

from fitsummary.errors import FitDecodeError
from fitsummary.records import (
    DecodedRecord,
    Lap,
    PhysiologicalMetrics,
    Session,
    Sport,
    TimeInZone,
    TrackPoint,
    Unrecognized,
    UserProfile,
    WorkoutSet,
)

log = logging.getLogger(__name__)

NUMBER = "number"
ARRAY = "array"
DATETIME = "datetime"
STRING = "string"
SEMICIRCLES = "semicircles"

FIT_EPOCH = datetime(1989, 12, 31, tzinfo=timezone.utc)
SEMICIRCLES_TO_DEGREES = 180.0 / 2**31


@dataclass(frozen=True)
class FieldSpec:
    attr: str
    name: str
    num: int
    scale: float = 1
    offset: float = 0
    kind: str = NUMBER
    # alternate (name, num) read when the primary field is missing
    fallback: Optional[tuple[str, int]] = None


def _f(attr, num, scale=1, offset=0, kind=NUMBER, name=None, fallback=None) -> FieldSpec:
    return FieldSpec(attr, name or attr, num, scale, offset, kind, fallback)


SESSION_FIELDS = (
    _f("start_time", 2, kind=DATETIME),
    _f("sport", 5),
    _f("sub_sport", 6),
    _f("total_elapsed_time", 7),
    _f("total_timer_time", 8),
    _f("total_distance", 9),
    _f("total_cycles", 10),
    _f("total_calories", 11),
    _f("avg_heart_rate", 16),
    _f("max_heart_rate", 17),
    _f("avg_cadence", 18),
    _f("max_cadence", 19),
    _f("avg_power", 20),
    _f("max_power", 21),
    _f("total_ascent", 22),
    _f("total_descent", 23),
    _f("normalized_power", 34),
    _f("training_stress_score", 35, scale=10),
    _f("intensity_factor", 36, scale=1000),
    _f("left_right_balance", 37),
    _f("pool_length", 44, scale=100),
    _f("avg_swim_cadence", 79),
    _f("avg_swolf", 80),
    _f("avg_vertical_oscillation", 89, scale=10),
    _f("avg_stance_time", 91, scale=10),
    _f("avg_left_torque_effectiveness", 101, scale=2),
    _f("avg_right_torque_effectiveness", 102, scale=2),
    _f("avg_left_pedal_smoothness", 103, scale=2),
    _f("avg_right_pedal_smoothness", 104, scale=2),
    _f("stand_time", 112, name="time_standing"),
    _f("stand_count", 113),
    _f("avg_left_pco", 114),
    _f("avg_right_pco", 115),
    _f("avg_left_power_phase", 116, kind=ARRAY),
    _f("avg_left_power_phase_peak", 117, kind=ARRAY),
    _f("avg_right_power_phase", 118, kind=ARRAY),
    _f("avg_right_power_phase_peak", 119, kind=ARRAY),
    _f("avg_power_position", 120, kind=ARRAY),
    _f("max_power_position", 121, kind=ARRAY),
    _f("avg_cadence_position", 122, kind=ARRAY),
    _f("max_cadence_position", 123, kind=ARRAY),
    _f("enhanced_avg_speed", 124, scale=1000, fallback=("avg_speed", 14)),
    _f("enhanced_max_speed", 125, scale=1000, fallback=("max_speed", 15)),
    _f("avg_vertical_ratio", 132, scale=100),
    _f("avg_stance_time_balance", 133, scale=100),
    _f("avg_step_length", 134, scale=10),
    _f("training_load_peak", 168, scale=65536),
    _f("enhanced_avg_respiration_rate", 169, scale=100),
    _f("enhanced_max_respiration_rate", 170, scale=100),
    _f("estimated_sweat_loss", 178, name="est_sweat_loss"),
    _f("enhanced_min_respiration_rate", 180, scale=100),
    _f("front_shifts", 182),
    _f("rear_shifts", 183),
    _f("avg_spo2", 194),
    _f("avg_stress", 195),
    _f("hrv_sdrr", 197, name="sdrr_hrv"),
    _f("hrv_rmssd", 198, name="rmssd_hrv"),
)

SPORT_FIELDS = (
    _f("sport", 0),
    _f("sub_sport", 1),
    _f("name", 3, kind=STRING),
)

USER_PROFILE_FIELDS = (
    _f("gender", 1),
    _f("age", 2),
    _f("height", 3, scale=100),
    _f("weight", 4, scale=10),
    _f("weight_setting", 7),
    _f("resting_heart_rate", 8),
)

# Garmin's physiological metrics message is not in the public profile
PHYSIOLOGICAL_METRICS_FIELDS = (
    _f("aerobic_effect", 4, scale=10),
    _f("met_max", 7, scale=65536),
    _f("recovery_time", 9),
    _f("lactate_threshold_heart_rate", 14),
    _f("anaerobic_effect", 20, scale=10),
)

TIME_IN_ZONE_FIELDS = (
    _f("reference_message", 0, name="reference_mesg"),
    _f("reference_index", 1),
    _f("time_in_hr_zone", 2, scale=1000, kind=ARRAY),
)

SET_FIELDS = (
    _f("duration", 0, scale=1000),
    _f("repetitions", 3),
    _f("weight", 4, scale=16),
    _f("set_type", 5),
    _f("start_time", 6, kind=DATETIME),
    _f("message_index", 254),
)

LAP_FIELDS = (
    _f("start_time", 2, kind=DATETIME),
    _f("total_elapsed_time", 7),
    _f("total_timer_time", 8),
    _f("total_distance", 9),
    _f("avg_heart_rate", 15),
    _f("max_heart_rate", 16),
    _f("avg_swolf", 73),
    _f("message_index", 254),
)

TRACK_POINT_FIELDS = (
    _f("timestamp", 253, kind=DATETIME),
    _f("latitude", 0, kind=SEMICIRCLES, name="position_lat"),
    _f("longitude", 1, kind=SEMICIRCLES, name="position_long"),
    _f("altitude", 78, scale=5, offset=500, name="enhanced_altitude", fallback=("altitude", 2)),
    _f("heart_rate", 3),
    _f("cadence", 4),
    _f("speed", 73, scale=1000, name="enhanced_speed", fallback=("speed", 6)),
    _f("power", 7),
)

# message name -> (global message number, record class, fields)
MESSAGES = {
    "session": (18, Session, SESSION_FIELDS),
    "sport": (12, Sport, SPORT_FIELDS),
    "user_profile": (3, UserProfile, USER_PROFILE_FIELDS),
    "physiological_metrics": (140, PhysiologicalMetrics, PHYSIOLOGICAL_METRICS_FIELDS),
    "time_in_zone": (216, TimeInZone, TIME_IN_ZONE_FIELDS),
    "set": (225, WorkoutSet, SET_FIELDS),
    "lap": (19, Lap, LAP_FIELDS),
    "record": (20, TrackPoint, TRACK_POINT_FIELDS),
}

_MESSAGES_BY_NUM = {num: (cls, fields) for num, cls, fields in MESSAGES.values()}


def decode_fit_file(path: Path | str) -> list[DecodedRecord]:
    """
    Read every message of a FIT file as a typed record, in file order.

    Raises FitDecodeError when the file cannot be read or is malformed.
    The CRC is not checked.
    """
    try:
        ff = FitFile(str(path), check_crc=False)
        ff.parse()
        messages = list(ff.get_messages())
    except (FitParseError, OSError) as e:
        raise FitDecodeError(f"Failed to parse {path}: {e}") from e
    return records_from_messages(messages)


def records_from_messages(messages: Iterable[Any]) -> list[DecodedRecord]:
    """Convert fitparse data messages into typed records."""
    return [record_from_message(m) for m in messages]


def record_from_message(message: Any) -> DecodedRecord:
    name = getattr(message, "name", None)
    if name in MESSAGES:
        _, cls, fields = MESSAGES[name]
        kind = (cls, fields)
    else:
        kind = _MESSAGES_BY_NUM.get(getattr(message, "mesg_num", None))

    if kind is None:
        return Unrecognized(
            message_name=str(name),
            fields={fd.name: fd.value for fd in message},
        )

    cls, specs = kind
    by_name: dict[str, Any] = {}
    for fd in message:
        # component expansions (avg_speed -> enhanced_avg_speed, altitude ->
        # enhanced_altitude) carry an already scaled raw_value; the source
        # field is read through FieldSpec.fallback instead
        if getattr(fd, "field_def", None) is None:
            continue
        if fd.name not in by_name or by_name[fd.name].raw_value is None:
            by_name[fd.name] = fd

    values = {}
    for spec in specs:
        value = _read(by_name, spec, spec.name, spec.num)
        if value is None and spec.fallback is not None:
            value = _read(by_name, spec, *spec.fallback)
        values[spec.attr] = value
    return cls(**values)


def _read(by_name: dict[str, Any], spec: FieldSpec, name: str, num: int) -> Any:
    fd = by_name.get(name)
    if fd is None:
        fd = by_name.get(f"unknown_{num}")
    if fd is None:
        return None

    if spec.kind == DATETIME:
        return _to_datetime(fd)
    if spec.kind == STRING:
        value = fd.value
        if isinstance(value, bytes):
            value = value.decode("utf-8", "ignore")
        return value.rstrip("\x00") if isinstance(value, str) else None

    raw = fd.raw_value
    if raw is None:
        return None
    if spec.kind == ARRAY:
        if not isinstance(raw, (list, tuple)):
            raw = (raw,)
        return tuple(_scale(v, spec) for v in raw)
    if spec.kind == SEMICIRCLES:
        return raw * SEMICIRCLES_TO_DEGREES
    return _scale(raw, spec)


def _scale(raw: Any, spec: FieldSpec) -> Any:
    if raw is None:
        return None
    if spec.scale == 1 and spec.offset == 0:
        return raw
    return raw / spec.scale - spec.offset


def _to_datetime(fd: Any) -> Optional[datetime]:
    value = fd.value
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    raw = fd.raw_value
    if isinstance(raw, int):
        return FIT_EPOCH + timedelta(seconds=raw)
    return None
