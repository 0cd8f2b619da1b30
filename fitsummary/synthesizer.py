"""
Turn an accumulated FIT decode pass into a workout summary.

Entries are emitted in a fixed order (renderers rely on it):

- session totals, heart rate, respiration, cadence, elevation
- speed or pace, training load, power and running dynamics
- cycling power phase / position / balance metrics
- heart rate time-in-zone progress entries
- physiological metrics (training effect, VO2max, recovery)
- training load, intensity factor, training stress score
- strength sets table
- GPS presence flag

Fields the device did not report are skipped, never defaulted to zero.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Optional, Sequence

from fitsummary.accumulator import AccumulationState
from fitsummary.activity import (
    ActivityKind,
    CycleUnit,
    get_cycle_unit,
    is_pace_activity,
    resolve_activity_kind,
)
from fitsummary.entries import (
    ACTIVE_SECONDS,
    ASCENT_DISTANCE,
    AVG_CADENCE_SEATING,
    AVG_CADENCE_STANDING,
    AVG_GROUND_CONTACT_TIME,
    AVG_GROUND_CONTACT_TIME_BALANCE,
    AVG_LEFT_PCO,
    AVG_LEFT_POWER_PHASE,
    AVG_LEFT_POWER_PHASE_PEAK,
    AVG_PEDAL_SMOOTHNESS,
    AVG_POWER,
    AVG_POWER_SEATING,
    AVG_POWER_STANDING,
    AVG_RIGHT_PCO,
    AVG_RIGHT_POWER_PHASE,
    AVG_RIGHT_POWER_PHASE_PEAK,
    AVG_TORQUE_EFFECTIVENESS,
    AVG_VERTICAL_OSCILLATION,
    AVG_VERTICAL_RATIO,
    CALORIES_BURNT,
    DESCENT_DISTANCE,
    DISTANCE_METERS,
    ESTIMATED_SWEAT_LOSS,
    FRONT_GEAR_SHIFTS,
    HRV_RMSSD,
    HRV_SDRR,
    HR_AVG,
    HR_MAX,
    HR_ZONE_AEROBIC,
    HR_ZONE_EASY,
    HR_ZONE_MAXIMUM,
    HR_ZONE_NA,
    HR_ZONE_THRESHOLD,
    HR_ZONE_WARM_UP,
    INTENSITY_FACTOR,
    INTERNAL_HAS_GPS,
    LACTATE_THRESHOLD_HR,
    LEFT_RIGHT_BALANCE,
    MAXIMUM_OXYGEN_UPTAKE,
    MAX_CADENCE_SEATING,
    MAX_CADENCE_STANDING,
    MAX_POWER,
    MAX_POWER_SEATING,
    MAX_POWER_STANDING,
    NORMALIZED_POWER,
    PACE_AVG_SECONDS_KM,
    PACE_MAX,
    POOL_LENGTH,
    REAR_GEAR_SHIFTS,
    RECOVERY_TIME,
    RESPIRATION_AVG,
    RESPIRATION_MAX,
    RESPIRATION_MIN,
    SETS,
    SETS_HEADER,
    SPEED_AVG,
    SPEED_MAX,
    SPO2_AVG,
    STANDING_COUNT,
    STANDING_TIME,
    STEP_LENGTH_AVG,
    STRESS_AVG,
    SWIM_AVG_CADENCE,
    SWOLF_AVG,
    TRAINING_EFFECT_AEROBIC,
    TRAINING_EFFECT_ANAEROBIC,
    TRAINING_LOAD,
    TRAINING_STRESS_SCORE,
    UNIT_BPM,
    UNIT_BREATHS_PER_MIN,
    UNIT_KCAL,
    UNIT_KG,
    UNIT_KMPH,
    UNIT_LB,
    UNIT_METERS,
    UNIT_MILLISECONDS,
    UNIT_ML,
    UNIT_ML_KG_MIN,
    UNIT_MM,
    UNIT_NONE,
    UNIT_PERCENTAGE,
    UNIT_RPM,
    UNIT_SECONDS,
    UNIT_STRING,
    UNIT_STROKES_PER_LENGTH,
    UNIT_WATT,
    ProgressEntry,
    SummaryData,
    SummaryValue,
    TableRowEntry,
)
from fitsummary.errors import MissingSessionError
from fitsummary.records import Session, TimeInZone, UserProfile, WorkoutSet
from fitsummary.strings import (
    DEFAULT_STRINGS,
    DURATION_LABEL,
    REPS_LABEL,
    SET_LABEL,
    STATS_EMPTY_VALUE,
    WEIGHT_LABEL,
    DisplayStrings,
)
from fitsummary.summary import WorkoutSummary

log = logging.getLogger(__name__)

# Global FIT message number of `session`; time_in_zone records point at the
# message they break down through reference_mesg.
SESSION_MESSAGE_NUM = 18

# Power phase angles are stored as uint8 with 256 steps per revolution,
# i.e. 0.7111111 raw units per degree.
POWER_PHASE_ANGLE_SCALE = 0.7111111

# left_right_balance_100: low 14 bits are the percentage * 100, bit 15
# flags that the value refers to the right pedal.
LEFT_RIGHT_BALANCE_MASK = 0x3FFF

# FIT measurement system enum (user_profile.weight_setting)
MEASUREMENT_SYSTEM_METRIC = 0

# FIT set_type enum
SET_TYPE_ACTIVE = 1

# Heart rate zones in display order with their color tags. Zone 0 is the
# "not applicable" bucket and is drawn without a color.
HR_ZONES = (
    (HR_ZONE_NA, None),
    (HR_ZONE_WARM_UP, "hr_zone_warm_up_color"),
    (HR_ZONE_EASY, "hr_zone_easy_color"),
    (HR_ZONE_AEROBIC, "hr_zone_aerobic_color"),
    (HR_ZONE_THRESHOLD, "hr_zone_threshold_color"),
    (HR_ZONE_MAXIMUM, "hr_zone_maximum_color"),
)


def round_half_up(value: Optional[float]) -> Optional[int]:
    """Round to the nearest integer, halves rounded up."""
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def synthesize(
    state: AccumulationState,
    summary: WorkoutSummary,
    strings: DisplayStrings = DEFAULT_STRINGS,
) -> WorkoutSummary:
    """
    Fill ``summary`` from ``state``.

    Raises MissingSessionError (leaving ``summary`` untouched) when the
    decode pass produced no session record.
    """
    session = state.session
    if session is None:
        log.error("Got workout, but no session")
        raise MissingSessionError("workout has no session record")

    if state.sport is not None:
        activity_kind = resolve_activity_kind(state.sport.sport, state.sport.sub_sport)
    else:
        activity_kind = resolve_activity_kind(session.sport, session.sub_sport)
    cycle_unit = get_cycle_unit(activity_kind)
    weight_unit = _weight_unit(state.user_profile)

    data = SummaryData()
    _add_session_fields(data, session, activity_kind, cycle_unit, strings)
    _add_hr_zones(data, state.times_in_zone)
    _add_physiological_metrics(data, state)

    data.add(TRAINING_LOAD, round_half_up(session.training_load_peak), UNIT_NONE)
    data.add(INTENSITY_FACTOR, session.intensity_factor, UNIT_NONE)
    data.add(TRAINING_STRESS_SCORE, session.training_stress_score, UNIT_NONE)

    _add_sets_table(data, state.sets, weight_unit)

    if any(lap.avg_swolf is not None for lap in state.laps):
        # TODO: per-lap swim table (length, strokes, SWOLF) under its own group
        log.debug("%d laps carry SWOLF, no lap table is built yet", len(state.laps))

    data.add(INTERNAL_HAS_GPS, any(p.has_location for p in state.track_points))

    if state.sport is not None and state.sport.name is not None:
        summary.name = state.sport.name
    summary.activity_kind = activity_kind.code
    if summary.start_time is None:
        summary.start_time = session.start_time
    if session.total_elapsed_time is not None and summary.start_time is not None:
        summary.end_time = summary.start_time + timedelta(milliseconds=int(session.total_elapsed_time))
    summary.summary_data = data
    return summary


def _weight_unit(profile: Optional[UserProfile]) -> str:
    if profile is not None and profile.weight_setting is not None:
        return UNIT_KG if profile.weight_setting == MEASUREMENT_SYSTEM_METRIC else UNIT_LB
    return UNIT_KG


def _add_session_fields(
    data: SummaryData,
    session: Session,
    activity_kind: ActivityKind,
    cycle_unit: CycleUnit,
    strings: DisplayStrings,
) -> None:
    steps = cycle_unit == CycleUnit.STEPS

    if session.total_timer_time is not None:
        data.add(ACTIVE_SECONDS, session.total_timer_time / 1000, UNIT_SECONDS)
    if session.total_distance is not None:
        data.add(DISTANCE_METERS, session.total_distance / 100, UNIT_METERS)
    data.add(POOL_LENGTH, session.pool_length, UNIT_METERS)
    data.add(SWOLF_AVG, session.avg_swolf, UNIT_NONE)
    if session.total_cycles is not None:
        # running cycles are strides, two steps each
        data.add_total(session.total_cycles * 2 if steps else session.total_cycles, cycle_unit)
    data.add(STEP_LENGTH_AVG, session.avg_step_length, UNIT_MM)
    data.add(CALORIES_BURNT, session.total_calories, UNIT_KCAL)
    data.add(ESTIMATED_SWEAT_LOSS, session.estimated_sweat_loss, UNIT_ML)
    data.add(HR_AVG, session.avg_heart_rate, UNIT_BPM)
    data.add(HR_MAX, session.max_heart_rate, UNIT_BPM)
    data.add(HRV_SDRR, session.hrv_sdrr, UNIT_MILLISECONDS)
    data.add(HRV_RMSSD, session.hrv_rmssd, UNIT_MILLISECONDS)
    data.add(SPO2_AVG, session.avg_spo2, UNIT_PERCENTAGE)
    data.add(RESPIRATION_AVG, session.enhanced_avg_respiration_rate, UNIT_BREATHS_PER_MIN)
    data.add(RESPIRATION_MAX, session.enhanced_max_respiration_rate, UNIT_BREATHS_PER_MIN)
    data.add(RESPIRATION_MIN, session.enhanced_min_respiration_rate, UNIT_BREATHS_PER_MIN)
    data.add(STRESS_AVG, session.avg_stress, UNIT_NONE)
    if session.avg_cadence is not None:
        data.add_cadence_avg(session.avg_cadence * 2 if steps else session.avg_cadence, cycle_unit)
    if session.max_cadence is not None:
        data.add_cadence_max(session.max_cadence * 2 if steps else session.max_cadence, cycle_unit)
    data.add(ASCENT_DISTANCE, session.total_ascent, UNIT_METERS)
    data.add(DESCENT_DISTANCE, session.total_descent, UNIT_METERS)
    data.add(SWIM_AVG_CADENCE, session.avg_swim_cadence, UNIT_STROKES_PER_LENGTH)

    pace = is_pace_activity(activity_kind)
    _add_speed(data, session.enhanced_avg_speed, pace, PACE_AVG_SECONDS_KM, SPEED_AVG)
    _add_speed(data, session.enhanced_max_speed, pace, PACE_MAX, SPEED_MAX)

    data.add(TRAINING_LOAD, round_half_up(session.training_load_peak), UNIT_NONE)
    data.add(AVG_POWER, session.avg_power, UNIT_WATT)
    data.add(MAX_POWER, session.max_power, UNIT_WATT)
    data.add(NORMALIZED_POWER, session.normalized_power, UNIT_WATT)

    if session.stand_time is not None:
        data.add(STANDING_TIME, session.stand_time // 1000, UNIT_SECONDS)
    data.add(STANDING_COUNT, session.stand_count, UNIT_NONE)
    data.add(AVG_LEFT_PCO, session.avg_left_pco, UNIT_MM)
    data.add(AVG_RIGHT_PCO, session.avg_right_pco, UNIT_MM)

    data.add(AVG_VERTICAL_OSCILLATION, session.avg_vertical_oscillation, UNIT_MM)
    data.add(AVG_GROUND_CONTACT_TIME, session.avg_stance_time, UNIT_MILLISECONDS)
    data.add(AVG_VERTICAL_RATIO, session.avg_vertical_ratio, UNIT_PERCENTAGE)
    data.add(AVG_GROUND_CONTACT_TIME_BALANCE, session.avg_stance_time_balance, UNIT_PERCENTAGE)

    data.add(AVG_LEFT_POWER_PHASE, _power_phase_range(session.avg_left_power_phase, strings))
    data.add(AVG_RIGHT_POWER_PHASE, _power_phase_range(session.avg_right_power_phase, strings))
    data.add(AVG_LEFT_POWER_PHASE_PEAK, _power_phase_range(session.avg_left_power_phase_peak, strings))
    data.add(AVG_RIGHT_POWER_PHASE_PEAK, _power_phase_range(session.avg_right_power_phase_peak, strings))

    _add_position_pair(data, session.avg_power_position, AVG_POWER_SEATING, AVG_POWER_STANDING, UNIT_WATT)
    _add_position_pair(data, session.max_power_position, MAX_POWER_SEATING, MAX_POWER_STANDING, UNIT_WATT)
    _add_position_pair(data, session.avg_cadence_position, AVG_CADENCE_SEATING, AVG_CADENCE_STANDING, UNIT_RPM)
    _add_position_pair(data, session.max_cadence_position, MAX_CADENCE_SEATING, MAX_CADENCE_STANDING, UNIT_RPM)

    data.add(FRONT_GEAR_SHIFTS, session.front_shifts, UNIT_NONE)
    data.add(REAR_GEAR_SHIFTS, session.rear_shifts, UNIT_NONE)

    if session.left_right_balance is not None:
        data.add(
            LEFT_RIGHT_BALANCE,
            (int(session.left_right_balance) & LEFT_RIGHT_BALANCE_MASK) / 100,
            UNIT_PERCENTAGE,
        )

    data.add(
        AVG_PEDAL_SMOOTHNESS,
        _percentage_pair(session.avg_left_pedal_smoothness, session.avg_right_pedal_smoothness, strings),
    )
    data.add(
        AVG_TORQUE_EFFECTIVENESS,
        _percentage_pair(session.avg_left_torque_effectiveness, session.avg_right_torque_effectiveness, strings),
    )


def _add_speed(data: SummaryData, speed: Optional[float], pace: bool, pace_key: str, speed_key: str) -> None:
    if speed is None:
        return
    if pace:
        if speed <= 0:
            # standing still has no pace
            return
        data.add(pace_key, round_half_up(60 / (speed * 3.6) * 60), UNIT_SECONDS)
    else:
        data.add(speed_key, round_half_up(speed * 3.6 * 100) / 100, UNIT_KMPH)


def _power_phase_range(angles: Optional[Sequence[Optional[float]]], strings: DisplayStrings) -> Optional[str]:
    # [start, end, arc start, arc end]; only the first two are shown
    if angles is None or len(angles) != 4:
        return None
    start, end = angles[0], angles[1]
    if start is None or end is None:
        return None
    return strings.range_degrees(
        round_half_up(start / POWER_PHASE_ANGLE_SCALE),
        round_half_up(end / POWER_PHASE_ANGLE_SCALE),
    )


def _add_position_pair(
    data: SummaryData,
    values: Optional[Sequence[Optional[float]]],
    seated_key: str,
    standing_key: str,
    unit: str,
) -> None:
    if values is None or len(values) != 2:
        return
    data.add(seated_key, values[0], unit)
    data.add(standing_key, values[1], unit)


def _percentage_pair(left: Optional[float], right: Optional[float], strings: DisplayStrings) -> Optional[str]:
    if left is None or right is None:
        return None
    return strings.range_percentage(round_half_up(left), round_half_up(right))


def _add_hr_zones(data: SummaryData, times_in_zone: Sequence[TimeInZone]) -> None:
    for time_in_zone in times_in_zone:
        # assumes a single session: the first breakdown for it wins
        if time_in_zone.reference_message != SESSION_MESSAGE_NUM:
            continue
        zones = time_in_zone.time_in_hr_zone
        if zones is None:
            continue
        total_time = sum(z for z in zones if z is not None)
        if total_time == 0:
            continue
        if zones[0] is not None and zones[0] == total_time:
            # everything is in the N/A bucket, there is no breakdown to show
            continue

        for i, (key, color) in enumerate(HR_ZONES):
            raw = zones[i] if i < len(zones) else None
            seconds = round(raw) if raw is not None else 0
            data.add(
                key,
                ProgressEntry(
                    seconds,
                    UNIT_SECONDS,
                    int(100 * seconds / total_time),
                    color,
                ),
            )
        break


def _add_physiological_metrics(data: SummaryData, state: AccumulationState) -> None:
    metrics = state.physiological_metrics
    if metrics is None:
        return
    data.add(TRAINING_EFFECT_AEROBIC, metrics.aerobic_effect, UNIT_NONE, higher_is_better=True)
    data.add(TRAINING_EFFECT_ANAEROBIC, metrics.anaerobic_effect, UNIT_NONE, higher_is_better=True)
    if metrics.met_max is not None:
        data.add(MAXIMUM_OXYGEN_UPTAKE, metrics.met_max * 3.5, UNIT_ML_KG_MIN)
    if metrics.recovery_time is not None:
        data.add(RECOVERY_TIME, metrics.recovery_time * 60, UNIT_SECONDS)
    data.add(LACTATE_THRESHOLD_HR, metrics.lactate_threshold_heart_rate, UNIT_BPM)


def _add_sets_table(data: SummaryData, sets: Sequence[WorkoutSet], weight_unit: str) -> None:
    if not sets:
        return

    header = [
        SummaryValue(SET_LABEL, UNIT_STRING),
        SummaryValue(REPS_LABEL, UNIT_STRING),
        SummaryValue(WEIGHT_LABEL, UNIT_STRING),
        SummaryValue(DURATION_LABEL, UNIT_STRING),
    ]
    data.add(SETS_HEADER, TableRowEntry(SETS, header, is_header=True, visible=True))

    row = 1
    for workout_set in sets:
        if workout_set.set_type != SET_TYPE_ACTIVE or workout_set.duration is None:
            continue
        columns = [SummaryValue(row, UNIT_NONE)]
        if workout_set.repetitions is not None:
            columns.append(SummaryValue(str(workout_set.repetitions), UNIT_STRING))
        else:
            columns.append(SummaryValue(STATS_EMPTY_VALUE, UNIT_STRING))
        if workout_set.weight is not None:
            columns.append(SummaryValue(workout_set.weight, weight_unit))
        else:
            columns.append(SummaryValue(STATS_EMPTY_VALUE, UNIT_STRING))
        columns.append(SummaryValue(int(workout_set.duration), UNIT_SECONDS))

        data.add(f"set_{row}", TableRowEntry(SETS, columns, is_header=False, visible=True))
        row += 1
