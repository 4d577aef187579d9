"""Read-only queries for founder execution signals.

Check-ins, reflections and daily task sets are optional history: a failed
query logs a warning and reads as an empty list, since no history is a valid
state for the classifier. A malformed row is skipped on its own.
"""

from collections.abc import Callable
from datetime import date
from typing import Any, Optional, TypeVar

from dateutil import parser as dateutil_parser
from pydantic import ValidationError

from app.core.logging import get_logger
from app.core.schemas_moment import (
    CheckinRecord,
    CompletionStatus,
    ReflectionRecord,
    TaskItem,
    TaskSet,
)
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

_COMPLETION_STATUSES = {s.value for s in CompletionStatus}

T = TypeVar("T")


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return dateutil_parser.isoparse(value).date()
    except (ValueError, TypeError):
        return None


def _parse_rows(
    rows: list[Any] | None, parse: Callable[[dict[str, Any]], T], kind: str
) -> list[T]:
    """Parse rows one at a time, dropping any that fail validation."""
    records = []
    for row in rows or []:
        if not isinstance(row, dict):
            logger.warning(f"Skipping malformed {kind} row: {row!r}")
            continue
        try:
            records.append(parse(row))
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"Skipping malformed {kind} row: {e}")
    return records


def _parse_checkin(row: dict[str, Any]) -> CheckinRecord:
    status = row.get("completion_status")
    return CheckinRecord(
        checkin_date=_parse_date(row.get("checkin_date")),
        completion_status=CompletionStatus(status) if status in _COMPLETION_STATUSES else None,
        explanation=row.get("explanation"),
    )


def _parse_reflection(row: dict[str, Any]) -> ReflectionRecord:
    mood_tags = row.get("mood_tags")
    return ReflectionRecord(
        reflection_date=_parse_date(row.get("reflection_date")),
        energy_level=row.get("energy_level"),
        stress_level=row.get("stress_level"),
        mood_tags=[str(tag) for tag in mood_tags] if isinstance(mood_tags, list) else [],
        blockers=row.get("blockers"),
    )


def _parse_task_set(row: dict[str, Any]) -> TaskSet:
    raw_tasks = row.get("tasks")
    tasks = []
    if isinstance(raw_tasks, list):
        for t in raw_tasks:
            if not isinstance(t, dict):
                continue
            title = t.get("title")
            tasks.append(
                TaskItem(
                    title=str(title) if title is not None else "",
                    completed=bool(t.get("completed")),
                )
            )
    return TaskSet(task_date=_parse_date(row.get("task_date")), tasks=tasks)


def list_recent_checkins(venture_id: str, user_id: str, limit: int = 5) -> list[CheckinRecord]:
    """
    List the most recent daily check-ins for a venture, newest first.

    Args:
        venture_id: Venture id
        user_id: Owning user's id
        limit: Maximum check-ins to return

    Returns:
        Check-in records (empty on query failure)
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("venture_daily_checkins")
            .select("checkin_date, completion_status, explanation")
            .eq("venture_id", venture_id)
            .eq("user_id", user_id)
            .order("checkin_date", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.warning(f"Failed to list check-ins for venture {venture_id}: {e}")
        return []

    return _parse_rows(response.data, _parse_checkin, "check-in")


def list_recent_reflections(user_id: str, limit: int = 3) -> list[ReflectionRecord]:
    """
    List the most recent daily reflections for a user, newest first.

    Reflections belong to the founder rather than a single venture.
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("daily_reflections")
            .select("reflection_date, energy_level, stress_level, mood_tags, blockers")
            .eq("user_id", user_id)
            .order("reflection_date", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.warning(f"Failed to list reflections for user {user_id}: {e}")
        return []

    return _parse_rows(response.data, _parse_reflection, "reflection")


def list_recent_task_sets(
    venture_id: str, user_id: str, since: date, limit: int = 7
) -> list[TaskSet]:
    """
    List daily task sets on or after ``since``, newest first.

    Args:
        venture_id: Venture id
        user_id: Owning user's id
        since: Earliest task date to include
        limit: Maximum task sets to return

    Returns:
        Task sets (empty on query failure)
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("venture_daily_tasks")
            .select("tasks, task_date")
            .eq("venture_id", venture_id)
            .eq("user_id", user_id)
            .gte("task_date", since.isoformat())
            .order("task_date", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.warning(f"Failed to list task sets for venture {venture_id}: {e}")
        return []

    return _parse_rows(response.data, _parse_task_set, "task set")
