"""Database operations for ventures (read-only commitment context)."""

from datetime import datetime
from typing import Any, Optional

from dateutil import parser as dateutil_parser

from app.core.logging import get_logger
from app.core.schemas_moment import VentureMeta, VentureState
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

_VENTURE_STATES = {s.value for s in VentureState}


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse datetime string handling various ISO formats including timezone-aware strings."""
    if not value:
        return None
    try:
        return dateutil_parser.isoparse(value)
    except (ValueError, TypeError):
        return None


def _parse_venture(venture_id: str, row: dict[str, Any]) -> VentureMeta:
    raw_state = row.get("venture_state")
    return VentureMeta(
        venture_id=venture_id,
        venture_state=VentureState(raw_state) if raw_state in _VENTURE_STATES else None,
        commitment_start_at=_parse_datetime(row.get("commitment_start_at")),
        commitment_window_days=row.get("commitment_window_days"),
    )


def get_venture_meta(venture_id: str, user_id: str) -> Optional[VentureMeta]:
    """
    Get commitment context for a venture owned by a user.

    Args:
        venture_id: Venture id
        user_id: Acting user's id; ventures owned by anyone else do not resolve

    Returns:
        VentureMeta, or None if no such venture belongs to the user

    Raises:
        Exception: If the database query fails
    """
    supabase = get_supabase()

    result = (
        supabase.table("ventures")
        .select("venture_state, commitment_window_days, commitment_start_at")
        .eq("id", venture_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )

    if not result.data:
        return None

    return _parse_venture(venture_id, result.data[0])
