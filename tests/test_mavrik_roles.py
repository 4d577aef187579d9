"""Tests for app.core.mavrik_roles — static state → role/intent tables."""

import pytest

from app.core.mavrik_roles import (
    DEFAULT_ROLE,
    MAVRIK_INTENTS,
    ROLE_BLOCKS,
    map_state_to_guidance,
    resolve_advisory_role,
)
from app.core.schemas_moment import AdvisoryRole, MomentState, VentureState


class TestTables:
    def test_every_state_has_an_intent(self):
        for state in MomentState:
            assert MAVRIK_INTENTS[state].startswith("Mavrik's intent")

    def test_every_role_has_a_block(self):
        for role in AdvisoryRole:
            assert ROLE_BLOCKS[role].startswith("## MAVRIK ROLE:")


class TestResolveAdvisoryRole:
    @pytest.mark.parametrize(
        "state, expected",
        [
            (MomentState.EXECUTION_PARALYSIS, AdvisoryRole.EXECUTION_COACH),
            (MomentState.STUCK, AdvisoryRole.EXECUTION_COACH),
            (MomentState.SCOPE_CREEPING, AdvisoryRole.FOCUS_ENFORCER),
            (MomentState.APPROACHING_LAUNCH, AdvisoryRole.LAUNCH_OPERATOR),
            (MomentState.BUILDING_MOMENTUM, AdvisoryRole.CO_FOUNDER),
        ],
    )
    def test_executing_venture(self, state, expected):
        assert resolve_advisory_role(state, VentureState.executing) == expected

    @pytest.mark.parametrize("state", list(MomentState))
    def test_reviewed_venture_always_gets_reviewer(self, state):
        assert resolve_advisory_role(state, VentureState.reviewed) == AdvisoryRole.STRATEGIC_REVIEWER

    def test_unknown_phase_uses_state_table(self):
        assert resolve_advisory_role(MomentState.STUCK, None) == AdvisoryRole.EXECUTION_COACH
        assert resolve_advisory_role(MomentState.BUILDING_MOMENTUM, None) == DEFAULT_ROLE


def test_guidance_bundles_role_intent_and_block():
    guidance = map_state_to_guidance(MomentState.SCOPE_CREEPING, VentureState.executing)

    assert guidance.role == AdvisoryRole.FOCUS_ENFORCER
    assert "REFOCUS" in guidance.intent
    assert guidance.role_block == ROLE_BLOCKS[AdvisoryRole.FOCUS_ENFORCER]


def test_reviewed_guidance_keeps_state_intent():
    guidance = map_state_to_guidance(MomentState.APPROACHING_LAUNCH, VentureState.reviewed)

    assert guidance.role == AdvisoryRole.STRATEGIC_REVIEWER
    assert guidance.intent == MAVRIK_INTENTS[MomentState.APPROACHING_LAUNCH]
