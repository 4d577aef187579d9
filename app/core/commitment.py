"""Commitment window arithmetic and check-in stagnation detection.

Pure functions, no DB access.
"""

import math
from collections.abc import Sequence
from datetime import datetime, timezone

from app.core.schemas_moment import CheckinRecord, CompletionStatus

_SECONDS_PER_DAY = 86_400

# Statuses that count as an incomplete day for stagnation purposes
_INCOMPLETE_STATUSES = {CompletionStatus.partial, CompletionStatus.no}

STAGNATION_RUN = 3


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def day_in_commitment(start_at: datetime | None, now: datetime) -> int:
    """1-based day number within the commitment window.

    Partial days round up, so the first 24h after the start are day 1. A
    missing or future start date reads as day 1.
    """
    if start_at is None:
        return 1
    elapsed = (_as_utc(now) - _as_utc(start_at)).total_seconds()
    return max(1, math.ceil(elapsed / _SECONDS_PER_DAY))


def effective_window_days(window_days: int | None, default_window_days: int = 30) -> int:
    """Commitment window length, falling back to the default when unset or zero."""
    return window_days or default_window_days


def days_remaining(day: int, window_days: int) -> int:
    return max(0, window_days - day)


def is_approaching_end(day: int, window_days: int, ratio: float = 0.75) -> bool:
    """True once the founder is strictly past ``ratio`` of the window."""
    return day > window_days * ratio


def detect_stagnation(checkins: Sequence[CheckinRecord]) -> bool:
    """Three or more check-ins with the most recent three all partial or no.

    Args:
        checkins: Check-ins ordered most recent first.
    """
    if len(checkins) < STAGNATION_RUN:
        return False
    return all(c.completion_status in _INCOMPLETE_STATUSES for c in checkins[:STAGNATION_RUN])
