"""Tests for the boss catalog, phase thresholds and special abilities."""

from __future__ import annotations

import numpy as np
import pytest

from boss_ai.phase_system import (
    BOSSES, PhaseTracker, SpecialAbility, effect_for,
    get_boss_for_level, is_boss_level,
)


class TestBossCatalog:

    @pytest.mark.parametrize("level, expected", [
        (0, False), (3, False), (5, True), (10, True), (12, False),
    ])
    def test_boss_levels(self, level, expected):
        assert is_boss_level(level) is expected

    def test_bosses_cycle_by_level(self):
        keys = [get_boss_for_level(level).key for level in (5, 10, 15, 20, 25)]
        assert keys == ["skeleton-king", "shadow-lord", "elemental-titan",
                        "necro-overlord", "skeleton-king"]

    def test_thresholds_descending(self):
        for boss in BOSSES:
            assert list(boss.phase_thresholds) == sorted(boss.phase_thresholds, reverse=True)


class TestPhaseTracker:

    def test_one_threshold_per_check(self):
        tracker = PhaseTracker((75, 50, 25))
        assert tracker.phase == 1
        assert tracker.check(100, 100) is None
        assert tracker.check(10, 100) == 2
        assert tracker.check(10, 100) == 3
        assert tracker.check(10, 100) == 4
        assert tracker.check(0, 100) is None

    def test_unsorted_thresholds_are_sorted(self):
        tracker = PhaseTracker((25, 75, 50))
        assert tracker.thresholds == (75, 50, 25)

    def test_reset(self):
        tracker = PhaseTracker((50,))
        tracker.check(10, 100)
        tracker.reset()
        assert tracker.phase == 1

    def test_no_thresholds_never_advances(self):
        tracker = PhaseTracker()
        assert tracker.check(0, 100) is None
        assert tracker.check(0, 0) is None


class TestEffects:

    def test_rage(self):
        effect = effect_for(SpecialAbility.RAGE, 2)
        assert effect.enrage
        assert effect.damage_mult == pytest.approx(1.5)
        assert effect.cooldown_mult == pytest.approx(0.7)

    def test_shield(self):
        assert effect_for(SpecialAbility.SHIELD, 2).shield

    def test_summon_count(self):
        assert effect_for(SpecialAbility.SUMMON, 2).summon_count == 2
        rng = np.random.default_rng(0)
        counts = {effect_for(SpecialAbility.SUMMON, 2, rng).summon_count for _ in range(50)}
        assert counts <= {2, 3}

    def test_teleport_chance_grows_and_caps(self):
        assert effect_for(SpecialAbility.TELEPORT, 1).teleport_chance == pytest.approx(0.3)
        assert effect_for(SpecialAbility.TELEPORT, 3).teleport_chance == pytest.approx(0.5)
        assert effect_for(SpecialAbility.TELEPORT, 20).teleport_chance == 1.0

    def test_unknown_ability_rejected(self):
        with pytest.raises(ValueError):
            effect_for("fly", 2)
