from __future__ import annotations


class FitSummaryError(Exception):
    """Base class for errors raised while building a workout summary."""


class FitDecodeError(FitSummaryError):
    """The FIT file could not be decoded into records."""


class MissingSessionError(FitSummaryError):
    """The decoded file has no session record, so there is nothing to summarize."""
