"""Tests for app.core.moment_classifier — priority-ordered rule cascade."""

import itertools

import pytest

from app.core.moment_classifier import (
    DEFAULT_VERDICT,
    MOMENT_RULES,
    ClassifierThresholds,
    MomentRule,
    classify_state,
    get_classifier_thresholds,
)
from app.core.moment_signals import reduce_signals
from app.core.schemas_moment import MomentState
from tests.fixtures_moment import NOW, checkins, signals, task_set, venture

# =============================================================================
# Rule table integrity
# =============================================================================


class TestRuleTable:
    def test_priority_order(self):
        assert [r.state for r in MOMENT_RULES] == [
            MomentState.EXECUTION_PARALYSIS,
            MomentState.STUCK,
            MomentState.APPROACHING_LAUNCH,
            MomentState.SCOPE_CREEPING,
            MomentState.BUILDING_MOMENTUM,
        ]

    def test_rule_names_unique(self):
        names = [r.name for r in MOMENT_RULES]
        assert len(names) == len(set(names))

    def test_default_is_building_momentum(self):
        assert DEFAULT_VERDICT.state == MomentState.BUILDING_MOMENTUM
        assert DEFAULT_VERDICT.rule == "default"


# =============================================================================
# Individual rules
# =============================================================================


class TestExecutionParalysis:
    def test_three_consecutive_no(self):
        verdict = classify_state(signals(consecutive_no_streak=3))
        assert verdict.state == MomentState.EXECUTION_PARALYSIS
        assert "3 consecutive" in verdict.rationale

    def test_streak_dominates_everything(self):
        verdict = classify_state(
            signals(
                consecutive_no_streak=4,
                recent_completion_rate=0.9,
                avg_energy=5.0,
                has_blockers=True,
                is_approaching_end=True,
                has_duplicate_tasks=True,
            )
        )
        assert verdict.state == MomentState.EXECUTION_PARALYSIS
        assert verdict.rule == "execution_paralysis"

    def test_low_energy_and_low_completion(self):
        verdict = classify_state(signals(avg_energy=1.5, recent_completion_rate=0.1))
        assert verdict.state == MomentState.EXECUTION_PARALYSIS
        assert "Energy critically low (1.5)" in verdict.rationale
        assert "(10%)" in verdict.rationale

    def test_low_energy_needs_low_completion(self):
        verdict = classify_state(signals(avg_energy=1.5, recent_completion_rate=0.2))
        assert verdict.state != MomentState.EXECUTION_PARALYSIS

    def test_unknown_energy_never_triggers_energy_clause(self):
        verdict = classify_state(signals(avg_energy=None, recent_completion_rate=0.0))
        assert verdict.state == MomentState.BUILDING_MOMENTUM
        assert verdict.rule == "default"


class TestStuck:
    def test_two_consecutive_no(self):
        verdict = classify_state(signals(consecutive_no_streak=2, recent_completion_rate=0.9))
        assert verdict.state == MomentState.STUCK
        assert "2 consecutive" in verdict.rationale

    def test_blockers_with_low_completion(self):
        verdict = classify_state(signals(has_blockers=True, recent_completion_rate=0.25))
        assert verdict.state == MomentState.STUCK
        assert "Active blockers" in verdict.rationale
        assert "(25%)" in verdict.rationale

    def test_blockers_with_healthy_completion(self):
        verdict = classify_state(signals(has_blockers=True, recent_completion_rate=0.4))
        assert verdict.state != MomentState.STUCK

    def test_stuck_outranks_launch(self):
        verdict = classify_state(
            signals(consecutive_no_streak=2, is_approaching_end=True, recent_completion_rate=0.8)
        )
        assert verdict.state == MomentState.STUCK


class TestApproachingLaunch:
    def test_late_window_healthy_completion(self):
        verdict = classify_state(
            signals(is_approaching_end=True, recent_completion_rate=0.55, days_in_commitment=25)
        )
        assert verdict.state == MomentState.APPROACHING_LAUNCH
        assert verdict.rationale.startswith("Day 25")
        assert "75%" in verdict.rationale

    def test_late_window_low_completion(self):
        verdict = classify_state(signals(is_approaching_end=True, recent_completion_rate=0.49))
        assert verdict.state == MomentState.BUILDING_MOMENTUM

    def test_launch_outranks_scope_creep(self):
        verdict = classify_state(
            signals(is_approaching_end=True, has_duplicate_tasks=True, recent_completion_rate=0.8)
        )
        assert verdict.state == MomentState.APPROACHING_LAUNCH


class TestScopeCreeping:
    def test_duplicates_with_good_completion(self):
        verdict = classify_state(signals(has_duplicate_tasks=True, recent_completion_rate=0.6))
        assert verdict.state == MomentState.SCOPE_CREEPING
        assert "busy but not progressing" in verdict.rationale

    def test_duplicates_with_low_completion(self):
        verdict = classify_state(signals(has_duplicate_tasks=True, recent_completion_rate=0.59))
        assert verdict.state == MomentState.BUILDING_MOMENTUM
        assert verdict.rule == "default"


class TestBuildingMomentum:
    @pytest.mark.parametrize("energy", [None, 3.5, 5.0])
    @pytest.mark.parametrize("streak", [0, 1])
    def test_healthy_signals(self, energy, streak):
        verdict = classify_state(
            signals(recent_completion_rate=0.6, avg_energy=energy, consecutive_no_streak=streak)
        )
        assert verdict.state == MomentState.BUILDING_MOMENTUM
        assert verdict.rule == "building_momentum"
        assert "(60%)" in verdict.rationale

    def test_middling_energy_falls_through_to_default(self):
        verdict = classify_state(signals(recent_completion_rate=0.9, avg_energy=3.0))
        assert verdict == DEFAULT_VERDICT


# =============================================================================
# Totality
# =============================================================================


def test_every_combination_yields_a_defined_state():
    states = set(MomentState)
    for streak, rate, energy, blockers, ending, dupes in itertools.product(
        [0, 1, 2, 3, 7],
        [0.0, 0.15, 0.39, 0.5, 0.6, 1.0],
        [None, 1.0, 2.0, 3.0, 3.5, 5.0],
        [False, True],
        [False, True],
        [False, True],
    ):
        verdict = classify_state(
            signals(
                consecutive_no_streak=streak,
                recent_completion_rate=rate,
                avg_energy=energy,
                has_blockers=blockers,
                is_approaching_end=ending,
                has_duplicate_tasks=dupes,
            )
        )
        assert verdict.state in states
        assert verdict.rationale


# =============================================================================
# Scenarios (reduce + classify)
# =============================================================================


class TestScenarios:
    def test_three_no_checkins(self):
        bundle = reduce_signals(checkins("no", "no", "no"), [], [], venture(), NOW)
        verdict = classify_state(bundle)

        assert verdict.state == MomentState.EXECUTION_PARALYSIS
        assert "3 consecutive" in verdict.rationale

    def test_seventy_percent_completion_early_in_window(self):
        sets = [
            task_set("Interview 3 users", "Draft pricing", "Post in community", "Fix signup", completed=3),
            task_set("Email waitlist", "Record demo", "Update deck", completed=2),
            task_set("Call mentor", "Ship onboarding", "Write FAQ", completed=2),
        ]
        bundle = reduce_signals([], [], sets, venture(start_days_ago=5, window_days=30), NOW)
        verdict = classify_state(bundle)

        assert bundle.recent_completion_rate == pytest.approx(0.7)
        assert bundle.is_approaching_end is False
        assert bundle.has_duplicate_tasks is False
        assert verdict.state == MomentState.BUILDING_MOMENTUM

    def test_late_in_window_with_fifty_five_percent(self):
        sets = [
            task_set(*[f"task {i}" for i in range(10)], completed=6),
            task_set(*[f"other {i}" for i in range(10)], completed=5),
        ]
        bundle = reduce_signals([], [], sets, venture(start_days_ago=25, window_days=30), NOW)
        verdict = classify_state(bundle)

        assert bundle.recent_completion_rate == pytest.approx(0.55)
        assert bundle.days_in_commitment == 25
        assert verdict.state == MomentState.APPROACHING_LAUNCH


# =============================================================================
# Configuration
# =============================================================================


class TestThresholds:
    def test_custom_thresholds_shift_boundaries(self):
        strict = ClassifierThresholds(paralysis_no_streak=5, stuck_no_streak=4)
        verdict = classify_state(signals(consecutive_no_streak=3, recent_completion_rate=0.7), strict)
        assert verdict.state == MomentState.BUILDING_MOMENTUM

    def test_thresholds_from_settings(self, settings_override):
        settings_override(MOMENT_STUCK_NO_STREAK=1, MOMENT_MOMENTUM_ENERGY_FLOOR=4.0)
        thresholds = get_classifier_thresholds()

        assert thresholds.stuck_no_streak == 1
        assert thresholds.momentum_energy_floor == 4.0
        assert thresholds.paralysis_no_streak == 3

    def test_rules_insertable_by_position(self):
        always_stuck = MomentRule(
            name="always_stuck",
            state=MomentState.STUCK,
            predicate=lambda s, t: True,
            rationale=lambda s, t: "forced",
        )
        verdict = classify_state(signals(), rules=[always_stuck, *MOMENT_RULES])
        assert verdict.state == MomentState.STUCK
        assert verdict.rule == "always_stuck"

    def test_empty_rule_list_uses_default(self):
        assert classify_state(signals(consecutive_no_streak=9), rules=[]) == DEFAULT_VERDICT
