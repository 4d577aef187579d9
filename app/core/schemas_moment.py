"""Pydantic models for the founder moment state classifier.

Inputs are flat records read from Supabase (check-ins, reflections, daily task
sets, venture commitment meta). Outputs are transient: a SignalBundle derived
per call and a ClassificationResult. Nothing here is persisted by the engine.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CompletionStatus(str, Enum):
    yes = "yes"
    partial = "partial"
    no = "no"


class VentureState(str, Enum):
    inactive = "inactive"
    committed = "committed"
    executing = "executing"
    reviewed = "reviewed"
    killed = "killed"


class MomentState(str, Enum):
    """The five founder moment states."""

    STUCK = "STUCK"
    BUILDING_MOMENTUM = "BUILDING_MOMENTUM"
    SCOPE_CREEPING = "SCOPE_CREEPING"
    EXECUTION_PARALYSIS = "EXECUTION_PARALYSIS"
    APPROACHING_LAUNCH = "APPROACHING_LAUNCH"


class AdvisoryRole(str, Enum):
    """Mavrik personas spliced into downstream prompts."""

    EXECUTION_COACH = "execution_coach"
    FOCUS_ENFORCER = "focus_enforcer"
    LAUNCH_OPERATOR = "launch_operator"
    STRATEGIC_REVIEWER = "strategic_reviewer"
    CO_FOUNDER = "co_founder"


# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------


class CheckinRecord(BaseModel):
    """Daily founder check-in."""

    checkin_date: date | None = None
    completion_status: CompletionStatus | None = None
    explanation: str | None = None


class ReflectionRecord(BaseModel):
    """Daily mood/energy/stress reflection. Levels are on a 1-5 scale."""

    reflection_date: date | None = None
    energy_level: int | None = None
    stress_level: int | None = None
    mood_tags: list[str] = Field(default_factory=list)
    blockers: str | None = None


class TaskItem(BaseModel):
    title: str = ""
    completed: bool = False


class TaskSet(BaseModel):
    """One day's generated execution tasks, in display order."""

    task_date: date | None = None
    tasks: list[TaskItem] = Field(default_factory=list)


class VentureMeta(BaseModel):
    """Commitment context for a venture."""

    venture_id: str
    venture_state: VentureState | None = None
    commitment_start_at: datetime | None = None
    commitment_window_days: int | None = None


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


class SignalBundle(BaseModel):
    """Scalars reduced from the trailing signal window.

    Serialised with camelCase keys (``model_dump(by_alias=True)``) to match the
    shape callers already consume.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    recent_completion_rate: float = Field(default=0.0, ge=0.0, le=1.0, alias="recentCompletionRate")
    consecutive_no_streak: int = Field(default=0, ge=0, alias="consecutiveNoStreak")
    avg_energy: float | None = Field(default=None, alias="avgEnergy")
    avg_stress: float | None = Field(default=None, alias="avgStress")
    has_blockers: bool = Field(default=False, alias="hasBlockers")
    days_in_commitment: int = Field(default=1, ge=1, alias="daysInCommitment")
    is_approaching_end: bool = Field(default=False, alias="isApproachingEnd")
    has_duplicate_tasks: bool = Field(default=False, alias="hasDuplicateTasks")


class MomentVerdict(BaseModel):
    """Output of the rule cascade: the state plus why it fired."""

    model_config = ConfigDict(frozen=True)

    state: MomentState
    rationale: str
    rule: str


class ClassificationResult(BaseModel):
    """Full classification: state, rationale and the Mavrik guidance for it."""

    model_config = ConfigDict(frozen=True)

    state: MomentState
    rationale: str
    advisory_role: AdvisoryRole
    intent_text: str
    role_block: str
    signals: SignalBundle | None = None

    def to_response(self) -> dict[str, Any]:
        """Wire shape returned by the moment state endpoint."""
        return {
            "state": self.state.value,
            "signals": self.signals.model_dump(by_alias=True) if self.signals else {},
            "stateRationale": self.rationale,
            "mavrikIntent": self.intent_text,
            "mavrikRole": self.advisory_role.value,
            "mavrikRoleBlock": self.role_block,
        }


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class VentureRequest(BaseModel):
    """Body for venture-scoped POST endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    venture_id: str | None = Field(default=None, alias="ventureId")

    @field_validator("venture_id", mode="before")
    @classmethod
    def coerce_venture_id(cls, v: Any) -> str | None:
        """Accept numeric ids as sent by some clients."""
        if isinstance(v, bool):
            raise ValueError("ventureId must be a string")
        if isinstance(v, int):
            return str(v)
        return v
