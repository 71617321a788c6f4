"""Tests for the fixed strategy catalog and tagged boss actions."""

from __future__ import annotations

import pytest

from boss_ai.behavior_tracker import PlayerBehaviorProfile
from boss_ai.strategy_catalog import (
    ActionKind, AoeAttackParams, BASIC_ATTACK, BossAction, Condition,
    DashParams, KnockbackParams, Operator, STRATEGIES, get_strategy,
    list_strategies, strategy_ids,
)


class TestCatalog:

    def test_catalog_order_and_priorities(self):
        assert [(s.id, s.priority) for s in list_strategies()] == [
            ("close-gap", 8),
            ("defensive-counter", 9),
            ("aoe-spam", 7),
            ("prediction-attack", 10),
            ("burst-damage", 8),
        ]

    def test_lookup(self):
        assert get_strategy("aoe-spam").name == "AOE Spam"
        assert get_strategy("nope") is None
        assert strategy_ids() == [s.id for s in STRATEGIES]

    def test_basic_attack_not_in_catalog(self):
        assert BASIC_ATTACK.id not in strategy_ids()
        assert [a.kind for a in BASIC_ATTACK.actions] == [ActionKind.BASIC_ATTACK]

    def test_action_params_match_catalog(self):
        close_gap = get_strategy("close-gap")
        dash, ranged = close_gap.actions
        assert dash.params == DashParams(speed=2.0, frequency="high")
        assert ranged.params.projectiles == 3
        aoe = get_strategy("aoe-spam").actions[0]
        assert aoe.params == AoeAttackParams(radius=200, count=3)


class TestConditions:

    @pytest.mark.parametrize("op, value, expected", [
        (Operator.GT, 4, True),
        (Operator.GT, 5, False),
        (Operator.LT, 6, True),
        (Operator.EQ, 5, True),
        (Operator.GE, 5, True),
        (Operator.GE, 6, False),
    ])
    def test_operators(self, op, value, expected):
        profile = PlayerBehaviorProfile(dodge_frequency=5)
        assert Condition("dodge_frequency", op, value).is_met(profile) is expected

    def test_non_numeric_metric_reads_zero(self):
        profile = PlayerBehaviorProfile()
        assert Condition("movement_pattern", Operator.EQ, 0).is_met(profile)
        assert Condition("missing_metric", Operator.EQ, 0).is_met(profile)

    def test_all_conditions_required(self):
        defensive = get_strategy("defensive-counter")
        assert not defensive.is_eligible(PlayerBehaviorProfile(avg_distance_from_boss=50))
        assert defensive.is_eligible(
            PlayerBehaviorProfile(avg_distance_from_boss=50, attack_frequency=3)
        )

    def test_default_profile_matches_nothing(self):
        profile = PlayerBehaviorProfile(predictability=0)
        assert not any(s.is_eligible(profile) for s in STRATEGIES)


class TestBossAction:

    def test_of_infers_kind(self):
        assert BossAction.of(KnockbackParams(150)).kind is ActionKind.KNOCKBACK

    def test_mismatched_params_rejected(self):
        with pytest.raises(ValueError):
            BossAction(ActionKind.DASH, KnockbackParams())

    def test_every_catalog_action_describes_itself(self):
        for strategy in (*STRATEGIES, BASIC_ATTACK):
            for action in strategy.actions:
                assert action.describe()

    def test_to_dict(self):
        action = BossAction.of(DashParams())
        assert action.to_dict() == {"type": "dash",
                                    "params": {"speed": 2.0, "frequency": "high"}}
        assert action.type == "dash"
