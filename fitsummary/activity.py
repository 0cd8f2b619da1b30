"""Activity classification from FIT sport / sub-sport codes."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

log = logging.getLogger(__name__)


class CycleUnit(Enum):
    """What one repetitive-motion cycle counts as for an activity."""

    NONE = "none"
    STEPS = "steps"
    STROKES = "strokes"
    JUMPS = "jumps"
    REPS = "reps"
    REVOLUTIONS = "revolutions"


class ActivityKind(Enum):
    UNKNOWN = 0
    ACTIVITY = 1
    RUNNING = 10
    TREADMILL = 11
    TRAIL_RUN = 12
    TRACK_RUN = 13
    INDOOR_RUNNING = 14
    VIRTUAL_RUN = 15
    ULTRA_RUN = 16
    OBSTACLE_RUN = 17
    WALKING = 20
    INDOOR_WALKING = 21
    SPEED_WALKING = 22
    HIKING = 23
    MOUNTAINEERING = 24
    SNOWSHOEING = 25
    WHEELCHAIR_PUSH_WALK = 26
    WHEELCHAIR_PUSH_RUN = 27
    CYCLING = 30
    INDOOR_CYCLING = 31
    ROAD_CYCLING = 32
    MOUNTAIN_BIKING = 33
    CYCLOCROSS = 34
    GRAVEL_CYCLING = 35
    VIRTUAL_RIDE = 36
    E_BIKING = 37
    HAND_CYCLING = 38
    SWIMMING = 40
    POOL_SWIM = 41
    OPEN_WATER_SWIM = 42
    ROWING = 50
    INDOOR_ROWING = 51
    PADDLING = 52
    KAYAKING = 53
    STAND_UP_PADDLEBOARDING = 54
    ELLIPTICAL = 60
    STAIR_CLIMBER = 61
    FITNESS_EQUIPMENT = 62
    TRAINING = 70
    STRENGTH_TRAINING = 71
    CARDIO = 72
    YOGA = 73
    PILATES = 74
    HIIT = 75
    FLEXIBILITY = 76
    JUMP_ROPE = 77
    BREATHWORK = 78
    MEDITATION = 79
    CROSS_COUNTRY_SKIING = 80
    ALPINE_SKIING = 81
    SNOWBOARDING = 82
    ICE_SKATING = 83
    INLINE_SKATING = 84
    BASKETBALL = 90
    SOCCER = 91
    TENNIS = 92
    AMERICAN_FOOTBALL = 93
    GOLF = 94
    CLIMBING = 95
    BOXING = 96
    DANCE = 97
    MULTISPORT = 98
    TRANSITION = 99

    @property
    def code(self) -> int:
        return self.value


_STEP_KINDS = frozenset({
    ActivityKind.RUNNING,
    ActivityKind.TREADMILL,
    ActivityKind.TRAIL_RUN,
    ActivityKind.TRACK_RUN,
    ActivityKind.INDOOR_RUNNING,
    ActivityKind.VIRTUAL_RUN,
    ActivityKind.ULTRA_RUN,
    ActivityKind.OBSTACLE_RUN,
    ActivityKind.WALKING,
    ActivityKind.INDOOR_WALKING,
    ActivityKind.SPEED_WALKING,
    ActivityKind.HIKING,
    ActivityKind.MOUNTAINEERING,
    ActivityKind.SNOWSHOEING,
    ActivityKind.ELLIPTICAL,
    ActivityKind.STAIR_CLIMBER,
})

_STROKE_KINDS = frozenset({
    ActivityKind.SWIMMING,
    ActivityKind.POOL_SWIM,
    ActivityKind.OPEN_WATER_SWIM,
    ActivityKind.ROWING,
    ActivityKind.INDOOR_ROWING,
    ActivityKind.PADDLING,
    ActivityKind.KAYAKING,
    ActivityKind.STAND_UP_PADDLEBOARDING,
    ActivityKind.WHEELCHAIR_PUSH_WALK,
    ActivityKind.WHEELCHAIR_PUSH_RUN,
})

_REVOLUTION_KINDS = frozenset({
    ActivityKind.CYCLING,
    ActivityKind.INDOOR_CYCLING,
    ActivityKind.ROAD_CYCLING,
    ActivityKind.MOUNTAIN_BIKING,
    ActivityKind.CYCLOCROSS,
    ActivityKind.GRAVEL_CYCLING,
    ActivityKind.VIRTUAL_RIDE,
    ActivityKind.E_BIKING,
    ActivityKind.HAND_CYCLING,
})

_REP_KINDS = frozenset({
    ActivityKind.STRENGTH_TRAINING,
})

_JUMP_KINDS = frozenset({
    ActivityKind.JUMP_ROPE,
})

# Activities whose speed is shown as pace (seconds per kilometre)
_PACE_KINDS = frozenset({
    ActivityKind.RUNNING,
    ActivityKind.TREADMILL,
    ActivityKind.TRAIL_RUN,
    ActivityKind.TRACK_RUN,
    ActivityKind.INDOOR_RUNNING,
    ActivityKind.VIRTUAL_RUN,
    ActivityKind.ULTRA_RUN,
    ActivityKind.OBSTACLE_RUN,
    ActivityKind.WALKING,
    ActivityKind.INDOOR_WALKING,
    ActivityKind.SPEED_WALKING,
    ActivityKind.HIKING,
    ActivityKind.MOUNTAINEERING,
    ActivityKind.SNOWSHOEING,
    ActivityKind.SWIMMING,
    ActivityKind.POOL_SWIM,
    ActivityKind.OPEN_WATER_SWIM,
})


def get_cycle_unit(kind: ActivityKind) -> CycleUnit:
    if kind in _STEP_KINDS:
        return CycleUnit.STEPS
    if kind in _STROKE_KINDS:
        return CycleUnit.STROKES
    if kind in _REVOLUTION_KINDS:
        return CycleUnit.REVOLUTIONS
    if kind in _REP_KINDS:
        return CycleUnit.REPS
    if kind in _JUMP_KINDS:
        return CycleUnit.JUMPS
    return CycleUnit.NONE


def is_pace_activity(kind: ActivityKind) -> bool:
    return kind in _PACE_KINDS


# FIT (sport, sub_sport) -> activity kind. Sub-sport 0 is the generic entry
# for each sport family and doubles as the lookup fallback.
SPORTS: dict[tuple[int, int], ActivityKind] = {
    (0, 0): ActivityKind.ACTIVITY,
    (1, 0): ActivityKind.RUNNING,
    (1, 1): ActivityKind.TREADMILL,
    (1, 2): ActivityKind.RUNNING,  # street
    (1, 3): ActivityKind.TRAIL_RUN,
    (1, 4): ActivityKind.TRACK_RUN,
    (1, 45): ActivityKind.INDOOR_RUNNING,
    (1, 58): ActivityKind.VIRTUAL_RUN,
    (1, 59): ActivityKind.OBSTACLE_RUN,
    (1, 67): ActivityKind.ULTRA_RUN,
    (2, 0): ActivityKind.CYCLING,
    (2, 5): ActivityKind.INDOOR_CYCLING,  # spin
    (2, 6): ActivityKind.INDOOR_CYCLING,
    (2, 7): ActivityKind.ROAD_CYCLING,
    (2, 8): ActivityKind.MOUNTAIN_BIKING,
    (2, 9): ActivityKind.MOUNTAIN_BIKING,  # downhill
    (2, 11): ActivityKind.CYCLOCROSS,
    (2, 12): ActivityKind.HAND_CYCLING,
    (2, 28): ActivityKind.E_BIKING,
    (2, 46): ActivityKind.GRAVEL_CYCLING,
    (2, 47): ActivityKind.E_BIKING,
    (2, 58): ActivityKind.VIRTUAL_RIDE,
    (3, 0): ActivityKind.TRANSITION,
    (4, 0): ActivityKind.FITNESS_EQUIPMENT,
    (4, 14): ActivityKind.INDOOR_ROWING,
    (4, 15): ActivityKind.ELLIPTICAL,
    (4, 16): ActivityKind.STAIR_CLIMBER,
    (4, 20): ActivityKind.STRENGTH_TRAINING,
    (4, 26): ActivityKind.CARDIO,
    (5, 0): ActivityKind.SWIMMING,
    (5, 17): ActivityKind.POOL_SWIM,
    (5, 18): ActivityKind.OPEN_WATER_SWIM,
    (6, 0): ActivityKind.BASKETBALL,
    (7, 0): ActivityKind.SOCCER,
    (8, 0): ActivityKind.TENNIS,
    (9, 0): ActivityKind.AMERICAN_FOOTBALL,
    (10, 0): ActivityKind.TRAINING,
    (10, 19): ActivityKind.FLEXIBILITY,
    (10, 20): ActivityKind.STRENGTH_TRAINING,
    (10, 26): ActivityKind.CARDIO,
    (10, 43): ActivityKind.YOGA,
    (10, 44): ActivityKind.PILATES,
    (10, 62): ActivityKind.BREATHWORK,
    (11, 0): ActivityKind.WALKING,
    (11, 27): ActivityKind.INDOOR_WALKING,
    (11, 30): ActivityKind.WALKING,  # casual
    (11, 31): ActivityKind.SPEED_WALKING,
    (12, 0): ActivityKind.CROSS_COUNTRY_SKIING,
    (13, 0): ActivityKind.ALPINE_SKIING,
    (14, 0): ActivityKind.SNOWBOARDING,
    (15, 0): ActivityKind.ROWING,
    (15, 14): ActivityKind.INDOOR_ROWING,
    (16, 0): ActivityKind.MOUNTAINEERING,
    (17, 0): ActivityKind.HIKING,
    (18, 0): ActivityKind.MULTISPORT,
    (19, 0): ActivityKind.PADDLING,
    (21, 0): ActivityKind.E_BIKING,
    (25, 0): ActivityKind.GOLF,
    (30, 0): ActivityKind.INLINE_SKATING,
    (31, 0): ActivityKind.CLIMBING,
    (33, 0): ActivityKind.ICE_SKATING,
    (35, 0): ActivityKind.SNOWSHOEING,
    (37, 0): ActivityKind.STAND_UP_PADDLEBOARDING,
    (41, 0): ActivityKind.KAYAKING,
    (47, 0): ActivityKind.BOXING,
    (48, 0): ActivityKind.STAIR_CLIMBER,  # floor climbing
    (62, 0): ActivityKind.HIIT,
    (65, 0): ActivityKind.WHEELCHAIR_PUSH_WALK,
    (66, 0): ActivityKind.WHEELCHAIR_PUSH_RUN,
    (67, 0): ActivityKind.MEDITATION,
    (83, 0): ActivityKind.DANCE,
    (84, 0): ActivityKind.JUMP_ROPE,
}


def lookup_sport(sport: Optional[int], sub_sport: Optional[int]) -> Optional[ActivityKind]:
    return SPORTS.get((sport, sub_sport))


def resolve_activity_kind(sport: Optional[int], sub_sport: Optional[int]) -> ActivityKind:
    """
    Map a (sport, sub_sport) pair to an activity kind.

    Unknown sub-sports fall back to the generic entry of the same sport
    family; a sport missing from the table entirely is UNKNOWN.
    """
    kind = lookup_sport(sport, sub_sport)
    if kind is not None:
        return kind

    log.warning("Unknown FIT sport %s/%s", sport, sub_sport)
    fallback = lookup_sport(sport, 0)
    if fallback is not None:
        return fallback
    return ActivityKind.UNKNOWN
