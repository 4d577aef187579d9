"""Mavrik role and intent tables keyed by founder moment state.

Static lookups only. The text blocks are spliced verbatim into downstream
prompt construction.
"""

from dataclasses import dataclass

from app.core.schemas_moment import AdvisoryRole, MomentState, VentureState

MAVRIK_INTENTS: dict[MomentState, str] = {
    MomentState.STUCK: (
        "Mavrik's intent for this session: UNBLOCK this founder. One blocker, one fix, one task. "
        "Do not introduce new strategic considerations or growth ideas."
    ),
    MomentState.BUILDING_MOMENTUM: (
        "Mavrik's intent: ACCELERATE what's working. Identify the highest-leverage continuation "
        "of recent momentum. Push harder, not broader."
    ),
    MomentState.SCOPE_CREEPING: (
        "Mavrik's intent: REFOCUS this founder. They are busy but not progressing. Recommend from "
        "existing plan scope only. Do not validate new ideas or features."
    ),
    MomentState.EXECUTION_PARALYSIS: (
        "Mavrik's intent: ACTIVATE this founder. Generate the smallest possible next action — "
        "under 60 minutes. Success is motion, not outcomes."
    ),
    MomentState.APPROACHING_LAUNCH: (
        "Mavrik's intent: FINALIZE this founder's launch. Only launch-critical actions. No new "
        "features, no new research, no new strategy."
    ),
}

# Reviewed ventures always get the reviewer, whatever the execution state
REVIEWED_ROLE = AdvisoryRole.STRATEGIC_REVIEWER
DEFAULT_ROLE = AdvisoryRole.CO_FOUNDER

ROLE_BY_STATE: dict[MomentState, AdvisoryRole] = {
    MomentState.EXECUTION_PARALYSIS: AdvisoryRole.EXECUTION_COACH,
    MomentState.STUCK: AdvisoryRole.EXECUTION_COACH,
    MomentState.SCOPE_CREEPING: AdvisoryRole.FOCUS_ENFORCER,
    MomentState.APPROACHING_LAUNCH: AdvisoryRole.LAUNCH_OPERATOR,
}

ROLE_BLOCKS: dict[AdvisoryRole, str] = {
    AdvisoryRole.EXECUTION_COACH: (
        "## MAVRIK ROLE: EXECUTION COACH\n"
        "You are the steady operator who has pulled founders out of ruts before. Shrink the "
        "work until the next step is obvious. Name the blocker plainly and give one concrete "
        "move that restarts motion today."
    ),
    AdvisoryRole.FOCUS_ENFORCER: (
        "## MAVRIK ROLE: FOCUS ENFORCER\n"
        "You guard the plan's scope. Point out repeated or sideways work, cut anything that is "
        "not on the committed plan, and hold the founder to finishing over starting."
    ),
    AdvisoryRole.LAUNCH_OPERATOR: (
        "## MAVRIK ROLE: LAUNCH OPERATOR\n"
        "You run the final stretch of the commitment window. Every recommendation must move "
        "the launch forward. Defer research, polish and new ideas until after launch."
    ),
    AdvisoryRole.STRATEGIC_REVIEWER: (
        "## MAVRIK ROLE: STRATEGIC REVIEWER\n"
        "The commitment window is over and the venture is under review. Weigh the evidence "
        "gathered, be candid about what worked and what did not, and frame the continue, "
        "pivot or kill decision."
    ),
    AdvisoryRole.CO_FOUNDER: (
        "## MAVRIK ROLE: CO-FOUNDER\n"
        "You are a direct, financially grounded co-founder. Build on what is working, keep "
        "the founder pointed at the highest-leverage next step, and skip hollow encouragement."
    ),
}


@dataclass(frozen=True)
class MavrikGuidance:
    role: AdvisoryRole
    intent: str
    role_block: str


def resolve_advisory_role(
    state: MomentState, venture_state: VentureState | None = None
) -> AdvisoryRole:
    if venture_state == VentureState.reviewed:
        return REVIEWED_ROLE
    return ROLE_BY_STATE.get(state, DEFAULT_ROLE)


def map_state_to_guidance(
    state: MomentState, venture_state: VentureState | None = None
) -> MavrikGuidance:
    """Look up the persona, intent and role block for a classified state."""
    role = resolve_advisory_role(state, venture_state)
    return MavrikGuidance(
        role=role,
        intent=MAVRIK_INTENTS[state],
        role_block=ROLE_BLOCKS[role],
    )
