from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fitsummary.activity import ActivityKind
from fitsummary.entries import SummaryData

log = logging.getLogger(__name__)


@dataclass
class WorkoutSummary:
    """The caller-owned summary of one workout file."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    name: Optional[str] = None
    activity_kind: int = ActivityKind.UNKNOWN.code
    raw_details_path: Optional[Path] = None
    summary_data: SummaryData = field(default_factory=SummaryData)

    def to_dict(self, tz_name: str = "UTC") -> dict:
        """YAML/JSON-ready view, timestamps rendered in ``tz_name``."""
        tz = _zone(tz_name)
        try:
            kind = ActivityKind(self.activity_kind).name.lower()
        except ValueError:
            kind = ActivityKind.UNKNOWN.name.lower()
        return {
            "name": self.name,
            "activity_kind": kind,
            "activity_kind_code": self.activity_kind,
            "start_time": _iso(self.start_time, tz),
            "end_time": _iso(self.end_time, tz),
            "source": str(self.raw_details_path) if self.raw_details_path else None,
            "summary": self.summary_data.to_dict(),
        }


def _zone(tz_name: str):
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        log.warning("Unknown timezone %s, using UTC", tz_name)
        return timezone.utc


def _iso(dt: Optional[datetime], tz) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz).isoformat()
