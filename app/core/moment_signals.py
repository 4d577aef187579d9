"""Signal reduction for the founder moment classifier.

Turns raw check-ins, reflections and task sets into a SignalBundle. Every
function here is pure; "now" is always passed in.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from app.core.commitment import day_in_commitment, effective_window_days, is_approaching_end
from app.core.moment_classifier import ClassifierThresholds
from app.core.schemas_moment import (
    CheckinRecord,
    CompletionStatus,
    ReflectionRecord,
    SignalBundle,
    TaskSet,
    VentureMeta,
)


def completion_rate(task_sets: Iterable[TaskSet]) -> float:
    """Completed / total tasks across all sets. No tasks reads as 0, not undefined."""
    total = 0
    completed = 0
    for task_set in task_sets:
        total += len(task_set.tasks)
        completed += sum(1 for t in task_set.tasks if t.completed)
    if total == 0:
        return 0.0
    return completed / total


def count_consecutive_no(checkins: Iterable[CheckinRecord]) -> int:
    """Leading run of "no" check-ins, most recent first."""
    count = 0
    for checkin in checkins:
        if checkin.completion_status != CompletionStatus.no:
            break
        count += 1
    return count


def average(values: Iterable[float | None]) -> float | None:
    """Mean of the non-null values, or None when there are none."""
    valid = [v for v in values if v is not None]
    if not valid:
        return None
    return sum(valid) / len(valid)


def has_blockers(reflections: Iterable[ReflectionRecord]) -> bool:
    return any(r.blockers and r.blockers.strip() for r in reflections)


def has_duplicate_task_titles(task_sets: Iterable[TaskSet]) -> bool:
    """True if a normalised title shows up in at least two distinct sets.

    Titles are compared lower-cased and stripped. A title repeated inside a
    single set only counts once for that set.
    """
    title_counts: dict[str, int] = {}
    for task_set in task_sets:
        set_titles = {t.title.lower().strip() for t in task_set.tasks}
        set_titles.discard("")
        for title in set_titles:
            title_counts[title] = title_counts.get(title, 0) + 1
    return any(count >= 2 for count in title_counts.values())


def reduce_signals(
    checkins: Sequence[CheckinRecord],
    reflections: Sequence[ReflectionRecord],
    task_sets: Sequence[TaskSet],
    venture: VentureMeta,
    now: datetime,
    thresholds: ClassifierThresholds | None = None,
    duplicate_window: int = 3,
    default_window_days: int = 30,
) -> SignalBundle:
    """Build the SignalBundle for one classification call.

    Args:
        checkins: Recent check-ins, most recent first.
        reflections: Recent reflections, most recent first.
        task_sets: Task sets from the trailing window, most recent first.
        venture: Commitment context for the venture.
        now: Reference time for commitment arithmetic.
        thresholds: Classifier thresholds (only the approaching-end ratio is used here).
        duplicate_window: How many of the most recent task sets to scan for repeats.
        default_window_days: Window used when the venture has no commitment length.
    """
    thresholds = thresholds or ClassifierThresholds()

    day = day_in_commitment(venture.commitment_start_at, now)
    window = effective_window_days(venture.commitment_window_days, default_window_days)

    return SignalBundle(
        recent_completion_rate=completion_rate(task_sets),
        consecutive_no_streak=count_consecutive_no(checkins),
        avg_energy=average(r.energy_level for r in reflections),
        avg_stress=average(r.stress_level for r in reflections),
        has_blockers=has_blockers(reflections),
        days_in_commitment=day,
        is_approaching_end=is_approaching_end(day, window, thresholds.approaching_end_ratio),
        has_duplicate_tasks=has_duplicate_task_titles(task_sets[:duplicate_window]),
    )
