"""Founder moment engine — aggregate, reduce, classify, map.

Usage:
    from app.core.moment_engine import compute_founder_moment_state
    result = await compute_founder_moment_state(venture_id, user_id)

One call per request. The four Supabase reads run concurrently in worker
threads and are all joined before reduction; there is no partial-result path.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from app.core.config import get_settings
from app.core.logging import get_logger, log_with_context
from app.core.mavrik_roles import DEFAULT_ROLE, MAVRIK_INTENTS, ROLE_BLOCKS, map_state_to_guidance
from app.core.moment_classifier import classify_state, get_classifier_thresholds
from app.core.moment_signals import reduce_signals
from app.core.schemas_moment import (
    CheckinRecord,
    ClassificationResult,
    MomentState,
    ReflectionRecord,
    TaskSet,
    VentureMeta,
)
from app.db.founder_signals import (
    list_recent_checkins,
    list_recent_reflections,
    list_recent_task_sets,
)
from app.db.ventures import get_venture_meta

logger = get_logger(__name__)


class VentureNotFoundError(Exception):
    """The venture does not exist or does not belong to the acting user."""


# Returned whenever the pipeline fails; callers are never blocked on the classifier
SAFE_DEFAULT_RESULT = ClassificationResult(
    state=MomentState.BUILDING_MOMENTUM,
    rationale="Classifier error — defaulting to momentum state.",
    advisory_role=DEFAULT_ROLE,
    intent_text=MAVRIK_INTENTS[MomentState.BUILDING_MOMENTUM],
    role_block=ROLE_BLOCKS[DEFAULT_ROLE],
)


def build_safe_default_response(error: BaseException) -> dict:
    """Fail-open payload: the safe default plus the error message."""
    payload = SAFE_DEFAULT_RESULT.to_response()
    payload["error"] = str(error) or type(error).__name__
    return payload


@dataclass
class FounderSignalWindow:
    """Raw trailing history for one venture, uninterpreted."""

    venture: VentureMeta
    checkins: list[CheckinRecord] = field(default_factory=list)
    reflections: list[ReflectionRecord] = field(default_factory=list)
    task_sets: list[TaskSet] = field(default_factory=list)


async def aggregate_founder_signals(
    venture_id: str,
    user_id: str,
    now: datetime,
) -> FounderSignalWindow:
    """Fetch venture meta and trailing history in parallel.

    Raises:
        VentureNotFoundError: If the venture does not resolve for the user
        TimeoutError: If the reads exceed AGGREGATION_TIMEOUT_SECONDS
    """
    settings = get_settings()
    since = (now - timedelta(days=settings.TASK_WINDOW_DAYS)).date()

    venture, checkins, reflections, task_sets = await asyncio.wait_for(
        asyncio.gather(
            asyncio.to_thread(get_venture_meta, venture_id, user_id),
            asyncio.to_thread(
                list_recent_checkins, venture_id, user_id, limit=settings.CHECKIN_WINDOW
            ),
            asyncio.to_thread(list_recent_reflections, user_id, limit=settings.REFLECTION_WINDOW),
            asyncio.to_thread(
                list_recent_task_sets,
                venture_id,
                user_id,
                since,
                limit=settings.TASK_WINDOW_DAYS,
            ),
        ),
        timeout=settings.AGGREGATION_TIMEOUT_SECONDS,
    )

    if venture is None:
        raise VentureNotFoundError(f"Venture {venture_id} not found")

    return FounderSignalWindow(
        venture=venture,
        checkins=checkins,
        reflections=reflections,
        task_sets=task_sets,
    )


async def compute_founder_moment_state(
    venture_id: str,
    user_id: str,
    now: datetime | None = None,
) -> ClassificationResult:
    """Classify a venture's current founder moment state.

    Args:
        venture_id: Venture to classify
        user_id: Acting user (must own the venture)
        now: Reference time, defaults to the current UTC time

    Returns:
        ClassificationResult with signals, rationale and Mavrik guidance

    Raises:
        VentureNotFoundError: If the venture does not resolve for the user
    """
    now = now or datetime.now(timezone.utc)
    settings = get_settings()
    thresholds = get_classifier_thresholds()

    window = await aggregate_founder_signals(venture_id, user_id, now)

    signals = reduce_signals(
        window.checkins,
        window.reflections,
        window.task_sets,
        window.venture,
        now,
        thresholds=thresholds,
        duplicate_window=settings.DUPLICATE_TASK_SET_WINDOW,
        default_window_days=settings.DEFAULT_COMMITMENT_WINDOW_DAYS,
    )
    verdict = classify_state(signals, thresholds)
    guidance = map_state_to_guidance(verdict.state, window.venture.venture_state)

    log_with_context(
        logger,
        logging.INFO,
        f"Founder moment state: {verdict.state.value}",
        venture_id=venture_id,
        user_id=user_id,
        rule=verdict.rule,
        completion=f"{signals.recent_completion_rate * 100:.0f}%",
        consecutive_no=signals.consecutive_no_streak,
        role=guidance.role.value,
    )

    return ClassificationResult(
        state=verdict.state,
        rationale=verdict.rationale,
        advisory_role=guidance.role,
        intent_text=guidance.intent,
        role_block=guidance.role_block,
        signals=signals,
    )
