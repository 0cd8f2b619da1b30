"""Collect decoded FIT records into the state the synthesizer works from."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from fitsummary.records import (
    DecodedRecord,
    Lap,
    PhysiologicalMetrics,
    Session,
    Sport,
    TimeInZone,
    TrackPoint,
    UserProfile,
    WorkoutSet,
)

log = logging.getLogger(__name__)


@dataclass
class AccumulationState:
    """
    Working memory of one decode pass. Create a fresh one per file.

    ``session``, ``sport`` and ``user_profile`` keep the first record seen.
    ``physiological_metrics`` keeps the last one unless
    ``physiological_metrics_first_wins`` is set.
    """

    physiological_metrics_first_wins: bool = False

    session: Optional[Session] = None
    sport: Optional[Sport] = None
    user_profile: Optional[UserProfile] = None
    physiological_metrics: Optional[PhysiologicalMetrics] = None
    times_in_zone: list[TimeInZone] = field(default_factory=list)
    sets: list[WorkoutSet] = field(default_factory=list)
    laps: list[Lap] = field(default_factory=list)
    track_points: list[TrackPoint] = field(default_factory=list)


def accumulate(state: AccumulationState, record: DecodedRecord) -> bool:
    """Add one record to ``state``. Returns False for kinds the summary does not use."""
    if isinstance(record, TrackPoint):
        state.track_points.append(record)
    elif isinstance(record, Session):
        log.debug("Session: %s", record)
        if state.session is not None:
            log.warning("Got multiple sessions - NOT SUPPORTED: %s", record)
        else:
            state.session = record
    elif isinstance(record, PhysiologicalMetrics):
        log.debug("Physiological metrics: %s", record)
        if state.physiological_metrics is not None and state.physiological_metrics_first_wins:
            log.warning("Got multiple physiological metrics, keeping the first: %s", record)
        else:
            state.physiological_metrics = record
    elif isinstance(record, Sport):
        log.debug("Sport: %s", record)
        if state.sport is not None:
            log.warning("Got multiple sports - NOT SUPPORTED: %s", record)
        else:
            state.sport = record
    elif isinstance(record, TimeInZone):
        state.times_in_zone.append(record)
    elif isinstance(record, WorkoutSet):
        state.sets.append(record)
    elif isinstance(record, Lap):
        state.laps.append(record)
    elif isinstance(record, UserProfile):
        log.debug("User profile: %s", record)
        if state.user_profile is not None:
            log.warning("Got multiple user profiles - NOT SUPPORTED: %s", record)
        else:
            state.user_profile = record
    else:
        return False

    return True


def accumulate_all(
    records: Iterable[DecodedRecord],
    physiological_metrics_first_wins: bool = False,
) -> AccumulationState:
    """Build a fresh state from a whole record sequence."""
    state = AccumulationState(physiological_metrics_first_wins=physiological_metrics_first_wins)
    unhandled = 0
    for record in records:
        if not accumulate(state, record):
            unhandled += 1
    if unhandled:
        log.debug("Ignored %d records the summary does not use", unhandled)
    return state
