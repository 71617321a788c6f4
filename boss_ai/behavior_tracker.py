"""
behavior_tracker.py – Real-time per-encounter player behavior profiling.

Ingests timestamped player actions during a boss fight and maintains a
PlayerBehaviorProfile the boss controller reads when picking strategies.

Tracked metrics:
  - Attack / dodge / heal counters (reset on phase transition)
  - Ability usage per ability id
  - Recency-biased distance to the boss: new = (old + sample) / 2
  - Movement pattern (backpedal / aggressive / circle / erratic)
  - Predictability from the spread of the attack and dodge counters
  - Reaction time between a boss action and the player's dodge

One tracker belongs to exactly one boss encounter. It is not
thread-safe; the owning encounter is the only writer.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum

import numpy as np

from settings import (
    HISTORY_CAPACITY, PREDICTABILITY_WINDOW, MOVEMENT_WINDOW,
    DEFAULT_PREDICTABILITY, DEFAULT_REACTION_TIME,
    REACTION_TIME_MIN, REACTION_TIME_MAX,
    BACKPEDAL_DISTANCE, AGGRESSIVE_DISTANCE, CIRCLE_DEVIATION,
    PREDICTABILITY_SPREAD,
)
from utils import clamp, distance, population_stddev

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Enums
# ══════════════════════════════════════════════════════════

class ActionType(str, Enum):
    """Kinds of player action reported by the combat loop."""

    ATTACK = "attack"
    DODGE = "dodge"
    HEAL = "heal"
    ABILITY = "ability"
    MOVE = "move"


class MovementPattern(str, Enum):
    """Coarse classification of how the player moves around the boss."""

    BALANCED = "balanced"      # not enough history yet
    CIRCLE = "circle"
    BACKPEDAL = "backpedal"
    AGGRESSIVE = "aggressive"
    ERRATIC = "erratic"


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class TrackerConfig:
    """Tunables for the behavior tracker."""

    history_capacity: int = HISTORY_CAPACITY
    predictability_window: int = PREDICTABILITY_WINDOW
    movement_window: int = MOVEMENT_WINDOW

    backpedal_distance: float = BACKPEDAL_DISTANCE
    aggressive_distance: float = AGGRESSIVE_DISTANCE
    circle_deviation: float = CIRCLE_DEVIATION
    predictability_spread: float = PREDICTABILITY_SPREAD


# ══════════════════════════════════════════════════════════
#  Input / Output types
# ══════════════════════════════════════════════════════════

@dataclass
class PlayerAction:
    """One timestamped player action from the combat loop."""

    type: ActionType
    position: tuple[float, float] | None = None
    boss_position: tuple[float, float] | None = None
    ability_id: str | None = None
    timestamp: float = 0.0      # ms

    def __post_init__(self):
        self.type = ActionType(self.type)


@dataclass
class PlayerBehaviorProfile:
    """Learned model of the player's behavior in one encounter."""

    avg_distance_from_boss: float = 0.0
    attack_frequency: int = 0
    dodge_frequency: int = 0
    heal_usage: int = 0
    ability_usage: dict[str, int] = field(default_factory=dict)
    movement_pattern: MovementPattern = MovementPattern.BALANCED
    reaction_time: float = DEFAULT_REACTION_TIME
    predictability: float = DEFAULT_PREDICTABILITY

    def copy(self) -> PlayerBehaviorProfile:
        """Independent snapshot (the ability map is not shared)."""
        return replace(self, ability_usage=dict(self.ability_usage))

    def metric(self, name: str) -> float:
        """Numeric value of *name*; non-numeric metrics read as 0."""
        value = getattr(self, name, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0.0
        return float(value)


# ══════════════════════════════════════════════════════════
#  Behavior Tracker
# ══════════════════════════════════════════════════════════

class BehaviorTracker:
    """Records player actions and keeps the derived profile current.

    Usage:
        tracker = BehaviorTracker()
        tracker.record_action(PlayerAction(ActionType.ATTACK, timestamp=now))
        profile = tracker.get_profile()
    """

    def __init__(self, config: TrackerConfig | None = None):
        self.cfg = config or TrackerConfig()
        self._profile = PlayerBehaviorProfile()

        # One ring buffer of snapshots; the movement and predictability
        # windows are views over its tail.
        self._history: deque[PlayerBehaviorProfile] = deque(
            maxlen=self.cfg.history_capacity
        )
        self._last_boss_action: float | None = None

    # ── Properties ────────────────────────────────────────

    @property
    def history(self) -> tuple[PlayerBehaviorProfile, ...]:
        return tuple(self._history)

    @property
    def sample_count(self) -> int:
        return len(self._history)

    def get_profile(self) -> PlayerBehaviorProfile:
        """Read-only snapshot of the current profile."""
        return self._profile.copy()

    # ══════════════════════════════════════════════════════
    #  Recording
    # ══════════════════════════════════════════════════════

    def record_action(self, action: PlayerAction):
        """Fold one player action into the profile."""
        p = self._profile

        if action.type is ActionType.ATTACK:
            p.attack_frequency += 1

        elif action.type is ActionType.DODGE:
            p.dodge_frequency += 1
            self._sample_reaction(action.timestamp)

        elif action.type is ActionType.HEAL:
            p.heal_usage += 1

        elif action.type is ActionType.ABILITY:
            if action.ability_id:
                p.ability_usage[action.ability_id] = (
                    p.ability_usage.get(action.ability_id, 0) + 1
                )

        elif action.type is ActionType.MOVE:
            if action.position is not None and action.boss_position is not None:
                sample = distance(action.position, action.boss_position)
                # Recency-biased: each sample carries half the weight.
                p.avg_distance_from_boss = (p.avg_distance_from_boss + sample) / 2

        else:
            raise ValueError(f"unhandled action type: {action.type!r}")

        # Derived metrics read the history *before* this snapshot is pushed
        p.movement_pattern = self._detect_movement_pattern()
        p.predictability = self._calculate_predictability()

        self._history.append(p.copy())

    def note_boss_action(self, timestamp: float):
        """Mark when the boss started an action (for reaction timing)."""
        self._last_boss_action = timestamp

    def reset_counters(self):
        """Zero the attack / dodge / heal counters (phase transition)."""
        p = self._profile
        p.attack_frequency = 0
        p.dodge_frequency = 0
        p.heal_usage = 0

    def reset(self):
        """Clear everything (new encounter)."""
        self._profile = PlayerBehaviorProfile()
        self._history.clear()
        self._last_boss_action = None

    # ══════════════════════════════════════════════════════
    #  Derived metrics
    # ══════════════════════════════════════════════════════

    def _detect_movement_pattern(self) -> MovementPattern:
        cfg = self.cfg
        if len(self._history) < cfg.movement_window:
            return MovementPattern.BALANCED

        recent = list(self._history)[-cfg.movement_window:]
        distances = np.array([s.avg_distance_from_boss for s in recent])
        avg = float(distances.mean())

        if avg > cfg.backpedal_distance:
            return MovementPattern.BACKPEDAL
        if avg < cfg.aggressive_distance:
            return MovementPattern.AGGRESSIVE

        # Distance magnitude only; strafing reads as circling.
        if population_stddev(distances) < cfg.circle_deviation:
            return MovementPattern.CIRCLE
        return MovementPattern.ERRATIC

    def _calculate_predictability(self) -> float:
        cfg = self.cfg
        if len(self._history) < cfg.predictability_window:
            return DEFAULT_PREDICTABILITY

        recent = list(self._history)[-cfg.predictability_window:]
        attack_spread = population_stddev([s.attack_frequency for s in recent])
        dodge_spread = population_stddev([s.dodge_frequency for s in recent])

        predictability = 1.0 - min(
            1.0, (attack_spread + dodge_spread) / cfg.predictability_spread
        )
        return clamp(predictability, 0.0, 1.0)

    def _sample_reaction(self, timestamp: float):
        if self._last_boss_action is None:
            return
        sample = timestamp - self._last_boss_action
        self._last_boss_action = None
        if sample <= 0:
            return
        p = self._profile
        p.reaction_time = clamp((p.reaction_time + sample) / 2,
                                REACTION_TIME_MIN, REACTION_TIME_MAX)
        logger.debug("Reaction sample %.0fms -> %.0fms", sample, p.reaction_time)
