"""Founder moment state classifier — deterministic, no LLM.

States are evaluated in strict priority order and the first matching rule
wins:

    EXECUTION_PARALYSIS → STUCK → APPROACHING_LAUNCH → SCOPE_CREEPING → BUILDING_MOMENTUM

Several conditions can hold at once (a "no" streak alongside repeated task
titles, say); the order encodes which failure mode is surfaced first. Rules
are declarative data so a new state can be inserted by position. When nothing
matches the classifier falls through to BUILDING_MOMENTUM, so it is total over
every SignalBundle including an empty history.
"""

from collections.abc import Callable
from dataclasses import dataclass

from app.core.schemas_moment import MomentState, MomentVerdict, SignalBundle

# =============================================================================
# Thresholds
# =============================================================================


@dataclass(frozen=True)
class ClassifierThresholds:
    """Product-tuning constants for the cascade. Loaded from settings in production."""

    paralysis_no_streak: int = 3
    paralysis_energy_ceiling: float = 2.0
    paralysis_completion_ceiling: float = 0.2
    stuck_no_streak: int = 2
    stuck_completion_ceiling: float = 0.4
    launch_completion_floor: float = 0.5
    scope_creep_completion_floor: float = 0.6
    momentum_completion_floor: float = 0.6
    momentum_energy_floor: float = 3.5
    approaching_end_ratio: float = 0.75


def get_classifier_thresholds() -> ClassifierThresholds:
    """Build thresholds from the MOMENT_* settings."""
    from app.core.config import get_settings

    settings = get_settings()
    return ClassifierThresholds(
        paralysis_no_streak=settings.MOMENT_PARALYSIS_NO_STREAK,
        paralysis_energy_ceiling=settings.MOMENT_PARALYSIS_ENERGY_CEILING,
        paralysis_completion_ceiling=settings.MOMENT_PARALYSIS_COMPLETION_CEILING,
        stuck_no_streak=settings.MOMENT_STUCK_NO_STREAK,
        stuck_completion_ceiling=settings.MOMENT_STUCK_COMPLETION_CEILING,
        launch_completion_floor=settings.MOMENT_LAUNCH_COMPLETION_FLOOR,
        scope_creep_completion_floor=settings.MOMENT_SCOPE_CREEP_COMPLETION_FLOOR,
        momentum_completion_floor=settings.MOMENT_MOMENTUM_COMPLETION_FLOOR,
        momentum_energy_floor=settings.MOMENT_MOMENTUM_ENERGY_FLOOR,
        approaching_end_ratio=settings.MOMENT_APPROACHING_END_RATIO,
    )


# =============================================================================
# Rule predicates and rationales
# =============================================================================

Predicate = Callable[[SignalBundle, ClassifierThresholds], bool]
Rationale = Callable[[SignalBundle, ClassifierThresholds], str]


def _pct(rate: float) -> str:
    return f"{rate * 100:.0f}%"


def _paralysis_by_streak(s: SignalBundle, t: ClassifierThresholds) -> bool:
    return s.consecutive_no_streak >= t.paralysis_no_streak


def _paralysis(s: SignalBundle, t: ClassifierThresholds) -> bool:
    if _paralysis_by_streak(s, t):
        return True
    return (
        s.avg_energy is not None
        and s.avg_energy < t.paralysis_energy_ceiling
        and s.recent_completion_rate < t.paralysis_completion_ceiling
    )


def _paralysis_rationale(s: SignalBundle, t: ClassifierThresholds) -> str:
    if _paralysis_by_streak(s, t):
        return f'Founder has logged "no" completion for {s.consecutive_no_streak} consecutive days.'
    return (
        f"Energy critically low ({s.avg_energy:.1f}) combined with near-zero "
        f"completion rate ({_pct(s.recent_completion_rate)})."
    )


def _stuck_by_streak(s: SignalBundle, t: ClassifierThresholds) -> bool:
    return s.consecutive_no_streak >= t.stuck_no_streak


def _stuck(s: SignalBundle, t: ClassifierThresholds) -> bool:
    return _stuck_by_streak(s, t) or (
        s.has_blockers and s.recent_completion_rate < t.stuck_completion_ceiling
    )


def _stuck_rationale(s: SignalBundle, t: ClassifierThresholds) -> str:
    if _stuck_by_streak(s, t):
        return f'Founder logged "no" completion for {s.consecutive_no_streak} consecutive days.'
    return f"Active blockers reported with low completion rate ({_pct(s.recent_completion_rate)})."


def _approaching_launch(s: SignalBundle, t: ClassifierThresholds) -> bool:
    return s.is_approaching_end and s.recent_completion_rate >= t.launch_completion_floor


def _approaching_launch_rationale(s: SignalBundle, t: ClassifierThresholds) -> str:
    return (
        f"Day {s.days_in_commitment} — past {_pct(t.approaching_end_ratio)} of commitment window "
        "with healthy completion rate. Launch mode activated."
    )


def _scope_creeping(s: SignalBundle, t: ClassifierThresholds) -> bool:
    return s.has_duplicate_tasks and s.recent_completion_rate >= t.scope_creep_completion_floor


def _scope_creeping_rationale(s: SignalBundle, t: ClassifierThresholds) -> str:
    return (
        "Repeated task titles detected across recent days despite good completion rate "
        "— busy but not progressing."
    )


def _building_momentum(s: SignalBundle, t: ClassifierThresholds) -> bool:
    return s.recent_completion_rate >= t.momentum_completion_floor and (
        s.avg_energy is None or s.avg_energy >= t.momentum_energy_floor
    )


def _building_momentum_rationale(s: SignalBundle, t: ClassifierThresholds) -> str:
    return (
        f"Solid completion rate ({_pct(s.recent_completion_rate)}) with good energy. "
        "Momentum is real."
    )


# =============================================================================
# Rule cascade (declarative, priority order)
# =============================================================================


@dataclass(frozen=True)
class MomentRule:
    name: str
    state: MomentState
    predicate: Predicate
    rationale: Rationale


MOMENT_RULES: list[MomentRule] = [
    MomentRule(
        name="execution_paralysis",
        state=MomentState.EXECUTION_PARALYSIS,
        predicate=_paralysis,
        rationale=_paralysis_rationale,
    ),
    MomentRule(
        name="stuck",
        state=MomentState.STUCK,
        predicate=_stuck,
        rationale=_stuck_rationale,
    ),
    MomentRule(
        name="approaching_launch",
        state=MomentState.APPROACHING_LAUNCH,
        predicate=_approaching_launch,
        rationale=_approaching_launch_rationale,
    ),
    MomentRule(
        name="scope_creeping",
        state=MomentState.SCOPE_CREEPING,
        predicate=_scope_creeping,
        rationale=_scope_creeping_rationale,
    ),
    MomentRule(
        name="building_momentum",
        state=MomentState.BUILDING_MOMENTUM,
        predicate=_building_momentum,
        rationale=_building_momentum_rationale,
    ),
]

DEFAULT_VERDICT = MomentVerdict(
    state=MomentState.BUILDING_MOMENTUM,
    rationale="No negative signals detected — defaulting to momentum state.",
    rule="default",
)


def classify_state(
    signals: SignalBundle,
    thresholds: ClassifierThresholds | None = None,
    rules: list[MomentRule] | None = None,
) -> MomentVerdict:
    """Run the cascade and return the first matching state with its rationale."""
    thresholds = thresholds or ClassifierThresholds()
    for rule in rules if rules is not None else MOMENT_RULES:
        if rule.predicate(signals, thresholds):
            return MomentVerdict(
                state=rule.state,
                rationale=rule.rationale(signals, thresholds),
                rule=rule.name,
            )
    return DEFAULT_VERDICT
