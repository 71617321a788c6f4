"""Tests for the per-encounter behavior tracker."""

from __future__ import annotations

import numpy as np
import pytest

from boss_ai.behavior_tracker import (
    ActionType, BehaviorTracker, MovementPattern, PlayerAction, TrackerConfig,
)
from conftest import move


# ===========================================================================
# Counters
# ===========================================================================

class TestCounters:

    def test_attack_dodge_heal_counted(self):
        t = BehaviorTracker()
        for kind in ("attack", "attack", "dodge", "heal", "heal", "heal"):
            t.record_action(PlayerAction(kind))
        p = t.get_profile()
        assert p.attack_frequency == 2
        assert p.dodge_frequency == 1
        assert p.heal_usage == 3

    def test_ability_usage_per_id(self):
        t = BehaviorTracker()
        t.record_action(PlayerAction(ActionType.ABILITY, ability_id="fireball"))
        t.record_action(PlayerAction(ActionType.ABILITY, ability_id="fireball"))
        t.record_action(PlayerAction(ActionType.ABILITY, ability_id="blink"))
        t.record_action(PlayerAction(ActionType.ABILITY))
        assert t.get_profile().ability_usage == {"fireball": 2, "blink": 1}

    def test_unknown_action_type_rejected(self):
        with pytest.raises(ValueError):
            PlayerAction("jump")

    def test_reset_counters_keeps_distance(self):
        t = BehaviorTracker()
        t.record_action(move(400))
        t.record_action(PlayerAction("attack"))
        t.record_action(PlayerAction("heal"))
        t.reset_counters()
        p = t.get_profile()
        assert (p.attack_frequency, p.dodge_frequency, p.heal_usage) == (0, 0, 0)
        assert p.avg_distance_from_boss == pytest.approx(200)

    def test_reset_clears_everything(self):
        t = BehaviorTracker()
        for _ in range(5):
            t.record_action(move(300))
        t.reset()
        assert t.sample_count == 0
        assert t.get_profile().avg_distance_from_boss == 0


# ===========================================================================
# Distance and movement pattern
# ===========================================================================

class TestMovement:

    def test_distance_is_recency_biased(self):
        t = BehaviorTracker()
        t.record_action(move(500))
        assert t.get_profile().avg_distance_from_boss == pytest.approx(250)
        t.record_action(move(100))
        assert t.get_profile().avg_distance_from_boss == pytest.approx(175)

    def test_move_without_positions_ignored(self):
        t = BehaviorTracker()
        t.record_action(PlayerAction("move", position=(10.0, 10.0)))
        assert t.get_profile().avg_distance_from_boss == 0

    def test_balanced_until_window_full(self):
        t = BehaviorTracker()
        for _ in range(10):
            t.record_action(move(400))
        assert t.get_profile().movement_pattern is MovementPattern.BALANCED

    def test_backpedal(self):
        t = BehaviorTracker()
        for _ in range(11):
            t.record_action(move(400))
        assert t.get_profile().movement_pattern is MovementPattern.BACKPEDAL

    def test_aggressive(self):
        t = BehaviorTracker()
        for _ in range(11):
            t.record_action(move(20))
        assert t.get_profile().movement_pattern is MovementPattern.AGGRESSIVE

    def test_circle_when_distance_steady(self):
        t = BehaviorTracker()
        for _ in range(30):
            t.record_action(move(180))
        assert t.get_profile().movement_pattern is MovementPattern.CIRCLE

    def test_erratic_when_distance_swings(self):
        t = BehaviorTracker()
        for i in range(30):
            t.record_action(move(20 if i % 2 else 400))
        assert t.get_profile().movement_pattern is MovementPattern.ERRATIC


# ===========================================================================
# Predictability
# ===========================================================================

class TestPredictability:

    def test_default_until_window_full(self):
        t = BehaviorTracker()
        for _ in range(20):
            t.record_action(PlayerAction("attack"))
        assert t.get_profile().predictability == 0.5

    def test_static_counters_fully_predictable(self):
        t = BehaviorTracker()
        for _ in range(25):
            t.record_action(move(150))
        assert t.get_profile().predictability == pytest.approx(1.0)

    def test_always_within_bounds(self):
        rng = np.random.default_rng(7)
        kinds = ["attack", "dodge", "heal", "move", "ability"]
        t = BehaviorTracker()
        for i in range(300):
            kind = kinds[int(rng.integers(len(kinds)))]
            if kind == "move":
                t.record_action(move(float(rng.uniform(0, 600)), i))
            else:
                t.record_action(PlayerAction(kind, ability_id="x", timestamp=i))
            assert 0.0 <= t.get_profile().predictability <= 1.0


# ===========================================================================
# Reaction time
# ===========================================================================

class TestReactionTime:

    def test_dodge_after_boss_action_sampled(self):
        t = BehaviorTracker()
        t.note_boss_action(1000)
        t.record_action(PlayerAction("dodge", timestamp=1300))
        assert t.get_profile().reaction_time == pytest.approx(400)

    def test_dodge_without_boss_action_ignored(self):
        t = BehaviorTracker()
        t.record_action(PlayerAction("dodge", timestamp=1300))
        assert t.get_profile().reaction_time == 500

    def test_reaction_time_clamped(self):
        t = BehaviorTracker()
        t.note_boss_action(0)
        t.record_action(PlayerAction("dodge", timestamp=100_000))
        assert t.get_profile().reaction_time == 2000


# ===========================================================================
# History
# ===========================================================================

class TestHistory:

    def test_history_bounded(self):
        t = BehaviorTracker(TrackerConfig(history_capacity=100))
        for _ in range(150):
            t.record_action(PlayerAction("attack"))
        assert t.sample_count == 100
        assert t.history[-1].attack_frequency == 150

    def test_profile_is_a_snapshot(self):
        t = BehaviorTracker()
        t.record_action(PlayerAction("ability", ability_id="blink"))
        snap = t.get_profile()
        snap.ability_usage["blink"] = 99
        snap.attack_frequency = 42
        p = t.get_profile()
        assert p.ability_usage == {"blink": 1}
        assert p.attack_frequency == 0
