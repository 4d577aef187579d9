"""Commitment progress endpoint — day counter, days left, stagnation pattern."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth_middleware import AuthContext
from app.core.commitment import (
    day_in_commitment,
    days_remaining,
    detect_stagnation,
    effective_window_days,
    is_approaching_end,
)
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.rate_limiter import check_moment_rate_limit
from app.core.schemas_moment import VentureRequest
from app.db.founder_signals import list_recent_checkins
from app.db.ventures import get_venture_meta

logger = get_logger(__name__)

router = APIRouter()


@router.post("/commitment-status")
async def get_commitment_status(
    body: VentureRequest,
    auth: AuthContext = Depends(check_moment_rate_limit),
) -> dict:
    """
    Where the founder is in their commitment window and whether they are stalling.

    Returns:
        Dict with dayInCommitment, commitmentWindowDays, daysRemaining,
        isApproachingEnd, isStagnating and recentPattern (newest first)

    Raises:
        HTTPException 400: If ventureId is missing
        HTTPException 404: If the venture does not belong to the user
        HTTPException 500: If database error
    """
    venture_id = (body.venture_id or "").strip()
    if not venture_id:
        raise HTTPException(status_code=400, detail="ventureId required")

    settings = get_settings()

    try:
        venture, checkins = await asyncio.gather(
            asyncio.to_thread(get_venture_meta, venture_id, auth.user_id),
            asyncio.to_thread(
                list_recent_checkins,
                venture_id,
                auth.user_id,
                limit=settings.STAGNATION_CHECKIN_WINDOW,
            ),
        )

        if not venture:
            raise HTTPException(status_code=404, detail="Venture not found")

        now = datetime.now(timezone.utc)
        day = day_in_commitment(venture.commitment_start_at, now)
        window = effective_window_days(
            venture.commitment_window_days, settings.DEFAULT_COMMITMENT_WINDOW_DAYS
        )

        return {
            "ventureId": venture_id,
            "dayInCommitment": day,
            "commitmentWindowDays": window,
            "daysRemaining": days_remaining(day, window),
            "isApproachingEnd": is_approaching_end(
                day, window, settings.MOMENT_APPROACHING_END_RATIO
            ),
            "isStagnating": detect_stagnation(checkins),
            "recentPattern": [
                c.completion_status.value if c.completion_status else None for c in checkins
            ],
        }

    except HTTPException:
        raise
    except Exception:
        logger.exception(f"Failed to compute commitment status for venture {venture_id}")
        raise HTTPException(status_code=500, detail="Failed to compute commitment status")
