"""
phase_system.py – Boss catalog and health-threshold phase state machine.

Every boss type carries a list of health-percent thresholds. Crossing a
threshold moves the encounter into the next phase:

  Phase 1           : full health, boss learns the player
  Phase 2..N+1      : one per threshold crossed, more aggressive and
                      faster-learning (see boss_controller.transition_phase)

Each boss also owns one special ability whose effect is applied on every
phase change:

  SUMMON    – call in 2-3 minions
  RAGE      – enrage: faster movement, harder hits, shorter cooldown
  TELEPORT  – teleport more often
  SHIELD    – raise a shield that absorbs the next hit

A boss fight happens every fifth dungeon level; bosses cycle in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from settings import (
    ENRAGED_SPEED_MULT, ENRAGED_DAMAGE_MULT, ENRAGED_COOLDOWN_MULT,
    SUMMON_MIN_MINIONS, SUMMON_MAX_MINIONS,
    TELEPORT_BASE_CHANCE, TELEPORT_CHANCE_PER_PHASE,
    BOSS_LEVEL_INTERVAL,
)


# ══════════════════════════════════════════════════════════
#  Boss types
# ══════════════════════════════════════════════════════════

class SpecialAbility(str, Enum):
    SUMMON = "summon"
    RAGE = "rage"
    TELEPORT = "teleport"
    SHIELD = "shield"


@dataclass(frozen=True)
class BossType:
    """Static description of one boss."""

    key: str
    max_health: int
    dps: float
    movement_speed: float
    attack_cooldown: float          # ms
    points_on_kill: int
    max_distance: float
    min_distance: float
    special_ability: SpecialAbility
    phase_thresholds: tuple[float, ...]   # health %, descending


BOSSES: tuple[BossType, ...] = (
    BossType(
        key="skeleton-king", max_health=500, dps=15, movement_speed=80,
        attack_cooldown=3000, points_on_kill=1000,
        max_distance=300, min_distance=60,
        special_ability=SpecialAbility.SUMMON,
        phase_thresholds=(75, 50, 25),     # summons at each
    ),
    BossType(
        key="shadow-lord", max_health=800, dps=20, movement_speed=120,
        attack_cooldown=2500, points_on_kill=1500,
        max_distance=350, min_distance=50,
        special_ability=SpecialAbility.TELEPORT,
        phase_thresholds=(66, 33),
    ),
    BossType(
        key="elemental-titan", max_health=1000, dps=25, movement_speed=60,
        attack_cooldown=4000, points_on_kill=2000,
        max_distance=400, min_distance=200,
        special_ability=SpecialAbility.SHIELD,
        phase_thresholds=(80, 60, 40, 20),
    ),
    BossType(
        key="necro-overlord", max_health=1200, dps=18, movement_speed=50,
        attack_cooldown=3500, points_on_kill=2500,
        max_distance=350, min_distance=150,
        special_ability=SpecialAbility.RAGE,
        phase_thresholds=(50,),            # enrages once
    ),
)


def is_boss_level(level: int) -> bool:
    return level > 0 and level % BOSS_LEVEL_INTERVAL == 0


def get_boss_for_level(level: int) -> BossType:
    """Cycle through the catalog: level 5 -> first boss, 10 -> second, ..."""
    index = ((level - BOSS_LEVEL_INTERVAL) // BOSS_LEVEL_INTERVAL) % len(BOSSES)
    return BOSSES[index]


# ══════════════════════════════════════════════════════════
#  Phase effects
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PhaseEffect:
    """What a phase change does to the boss, beyond the controller's
    aggression / learning-rate bump."""

    enrage: bool = False
    shield: bool = False
    summon_count: int = 0
    teleport_chance: float = 0.0
    speed_mult: float = 1.0
    damage_mult: float = 1.0
    cooldown_mult: float = 1.0


def effect_for(ability: SpecialAbility, phase: int, rng=None) -> PhaseEffect:
    """Effect of entering *phase* for a boss with *ability*.

    *rng* is a numpy Generator, used only by SUMMON.
    """
    ability = SpecialAbility(ability)
    if ability is SpecialAbility.RAGE:
        return PhaseEffect(
            enrage=True,
            speed_mult=ENRAGED_SPEED_MULT,
            damage_mult=ENRAGED_DAMAGE_MULT,
            cooldown_mult=ENRAGED_COOLDOWN_MULT,
        )
    if ability is SpecialAbility.SHIELD:
        return PhaseEffect(shield=True)
    if ability is SpecialAbility.SUMMON:
        if rng is None:
            count = SUMMON_MIN_MINIONS
        else:
            count = int(rng.integers(SUMMON_MIN_MINIONS, SUMMON_MAX_MINIONS + 1))
        return PhaseEffect(summon_count=count)
    if ability is SpecialAbility.TELEPORT:
        chance = min(1.0, TELEPORT_BASE_CHANCE + TELEPORT_CHANCE_PER_PHASE * (phase - 1))
        return PhaseEffect(teleport_chance=chance)
    raise ValueError(f"unhandled special ability: {ability!r}")


# ══════════════════════════════════════════════════════════
#  Phase Tracker
# ══════════════════════════════════════════════════════════

class PhaseTracker:
    """Watches boss health and reports threshold crossings.

    Usage:
        tracker = PhaseTracker(boss_type.phase_thresholds)
        new_phase = tracker.check(health, max_health)
        if new_phase is not None:
            controller.transition_phase(boss_id, new_phase)
    """

    def __init__(self, thresholds: tuple[float, ...] = ()):
        self._thresholds = tuple(sorted(thresholds, reverse=True))
        self._crossed = 0

    @property
    def phase(self) -> int:
        """1-based phase: 1 before any threshold is crossed."""
        return self._crossed + 1

    @property
    def thresholds(self) -> tuple[float, ...]:
        return self._thresholds

    def check(self, health: float, max_health: float) -> int | None:
        """Return the new phase if the next threshold was just crossed.

        Only one threshold is consumed per call, so a single huge hit
        advances one phase now and the next on the following check.
        """
        if self._crossed >= len(self._thresholds) or max_health <= 0:
            return None
        health_pct = health / max_health * 100
        if health_pct <= self._thresholds[self._crossed]:
            self._crossed += 1
            return self.phase
        return None

    def reset(self):
        self._crossed = 0
