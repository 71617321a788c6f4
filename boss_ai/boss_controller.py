"""
boss_controller.py – Adaptive boss controller: one learning brain per encounter.

Architecture:
    boss_controller.AdaptiveBossController
      ├── BossAIState (per boss id)
      │     ├── behavior_tracker.BehaviorTracker   (player profile)
      │     ├── WeightTable                        (learned strategy weights)
      │     └── phase_system.PhaseTracker          (health thresholds)
      └── strategy_catalog.STRATEGIES              (shared, read-only)

Loop per boss action:
    update_behavior() × N  →  select_strategy()  →  execute_action()
    → combat resolves externally →  learn_from_outcome()

Weights persist across phases of one encounter and are never shared
between encounters. Every call on an unknown boss id is a logged no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from settings import (
    WEIGHT_INITIAL, WEIGHT_MIN, WEIGHT_MAX,
    BOSS_START_PHASE, BOSS_BASE_AGGRESSION, BOSS_MAX_AGGRESSION,
    BOSS_AGGRESSION_PER_PHASE, BOSS_BASE_LEARNING_RATE,
    BOSS_MAX_LEARNING_RATE, BOSS_LEARNING_RATE_PER_PHASE,
    EFFECT_HIT_BONUS, EFFECT_NOT_DODGED_BONUS, EFFECT_DAMAGE_SCALE,
    ADAPTATION_SMOOTHING, ADAPTATION_DIFFICULTY_STEP,
    ADAPTATION_DIFFICULTY_CAP, PHASE_DIFFICULTY_STEP,
)
from boss_ai.behavior_tracker import (
    BehaviorTracker, PlayerAction, PlayerBehaviorProfile, TrackerConfig,
)
from boss_ai.strategy_catalog import (
    BossStrategy, BossAction, STRATEGIES, BASIC_ATTACK,
)
from boss_ai.phase_system import BossType, PhaseTracker, effect_for
from utils import clamp

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class ControllerConfig:
    """Tunables for the adaptive boss controller."""

    weight_initial: float = WEIGHT_INITIAL
    weight_min: float = WEIGHT_MIN
    weight_max: float = WEIGHT_MAX

    start_phase: int = BOSS_START_PHASE
    base_aggression: int = BOSS_BASE_AGGRESSION
    max_aggression: int = BOSS_MAX_AGGRESSION
    aggression_per_phase: int = BOSS_AGGRESSION_PER_PHASE
    base_learning_rate: float = BOSS_BASE_LEARNING_RATE
    max_learning_rate: float = BOSS_MAX_LEARNING_RATE
    learning_rate_per_phase: float = BOSS_LEARNING_RATE_PER_PHASE

    adaptation_smoothing: float = ADAPTATION_SMOOTHING

    tracker: TrackerConfig = field(default_factory=TrackerConfig)


# ══════════════════════════════════════════════════════════
#  Outcome / log types
# ══════════════════════════════════════════════════════════

@dataclass
class CombatOutcome:
    """Result of one boss action, reported by the combat loop."""

    damage_dealt: float = 0.0
    player_hit: bool = False
    player_dodged: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> CombatOutcome:
        """Accepts snake_case or camelCase (damageDealt, playerHit, playerDodged)."""
        return cls(
            damage_dealt=float(data.get("damage_dealt", data.get("damageDealt", 0.0))),
            player_hit=bool(data.get("player_hit", data.get("playerHit", False))),
            player_dodged=bool(data.get("player_dodged", data.get("playerDodged", False))),
        )

    def effectiveness(self) -> float:
        """Roughly 0.0–1.3; not clamped so big hits move weights faster."""
        score = 0.0
        if self.player_hit:
            score += EFFECT_HIT_BONUS
        if self.damage_dealt > 0:
            score += self.damage_dealt / EFFECT_DAMAGE_SCALE
        if not self.player_dodged:
            score += EFFECT_NOT_DODGED_BONUS
        return score


@dataclass
class Adaptation:
    """Append-only log entry: one per strategy the boss has used."""

    strategy_id: str
    trigger: str                 # strategy name
    effect: str                  # comma-joined action types
    type: str = "attack_pattern"
    effectiveness: float = 0.0   # exponential running average
    times_used: int = 1
    samples: int = 0


@dataclass
class AIInsights:
    """Debug / display summary of one boss brain."""

    current_strategy: str
    player_profile: str
    adaptations: list[str]
    difficulty: float

    def __str__(self) -> str:
        lines = [
            f"Strategy : {self.current_strategy}",
            f"Player   : {self.player_profile}",
            f"Difficulty x{self.difficulty:.2f}",
        ]
        lines.extend(f"  - {a}" for a in self.adaptations)
        return "\n".join(lines)


# ══════════════════════════════════════════════════════════
#  Weight Table
# ══════════════════════════════════════════════════════════

class WeightTable:
    """Learned strategy weights. ``update`` is the only write path and
    always clamps to [lo, hi]."""

    def __init__(self, strategy_ids: Iterable[str], initial: float = WEIGHT_INITIAL,
                 lo: float = WEIGHT_MIN, hi: float = WEIGHT_MAX):
        self._lo = lo
        self._hi = hi
        self._initial = initial
        self._weights: dict[str, float] = {}
        for sid in strategy_ids:
            self.update(sid, initial)

    def __contains__(self, strategy_id: str) -> bool:
        return strategy_id in self._weights

    def __len__(self) -> int:
        return len(self._weights)

    def get(self, strategy_id: str) -> float:
        return self._weights.get(strategy_id, self._initial)

    def update(self, strategy_id: str, value: float) -> float:
        """Store *value* clamped; returns the stored weight."""
        stored = clamp(float(value), self._lo, self._hi)
        self._weights[strategy_id] = stored
        return stored

    def nudge(self, strategy_id: str, target: float, rate: float) -> float:
        """Move the weight a fraction *rate* of the way toward *target*."""
        current = self.get(strategy_id)
        return self.update(strategy_id, current + rate * (target - current))

    def export(self) -> dict[str, float]:
        return dict(self._weights)

    def load(self, weights: dict[str, float]) -> None:
        """Overwrite known strategies from *weights*; unknown ids are skipped."""
        for sid, value in weights.items():
            if sid in self._weights:
                self.update(sid, value)
            else:
                logger.debug("Skipping weight for unknown strategy '%s'", sid)


# ══════════════════════════════════════════════════════════
#  Boss state
# ══════════════════════════════════════════════════════════

@dataclass
class BossAIState:
    """Everything one boss encounter has learned so far."""

    boss_id: str
    max_health: float
    health: float
    weights: WeightTable
    tracker: BehaviorTracker
    current_phase: int = BOSS_START_PHASE
    aggression_level: int = BOSS_BASE_AGGRESSION
    learning_rate: float = BOSS_BASE_LEARNING_RATE
    adaptations: list[Adaptation] = field(default_factory=list)
    boss_type: BossType | None = None
    phase_tracker: PhaseTracker = field(default_factory=PhaseTracker)

    # Special-ability state
    enraged: bool = False
    shield_active: bool = False
    teleport_chance: float = 0.0
    pending_summons: int = 0

    @property
    def player_behavior(self) -> PlayerBehaviorProfile:
        return self.tracker.get_profile()

    @property
    def strategy_weights(self) -> dict[str, float]:
        return self.weights.export()

    @property
    def health_fraction(self) -> float:
        return self.health / max(1.0, self.max_health)


# ══════════════════════════════════════════════════════════
#  Adaptive Boss Controller
# ══════════════════════════════════════════════════════════

class AdaptiveBossController:
    """Holds one isolated BossAIState per boss id.

    Usage:
        ctrl = create_controller()
        ctrl.initialize("boss-1", 800)
        ctrl.update_behavior("boss-1", PlayerAction("attack", timestamp=t))
        strategy = ctrl.select_strategy("boss-1")
        actions = ctrl.execute_action("boss-1", strategy)
        ctrl.learn_from_outcome("boss-1", strategy.id, CombatOutcome(...))
    """

    def __init__(self, config: ControllerConfig | None = None,
                 strategies: Iterable[BossStrategy] | None = None,
                 rng: np.random.Generator | None = None):
        self.cfg = config or ControllerConfig()
        self._strategies: tuple[BossStrategy, ...] = tuple(
            strategies if strategies is not None else STRATEGIES
        )
        self._states: dict[str, BossAIState] = {}
        self._rng = rng if rng is not None else np.random.default_rng()

    # ── Lookup ────────────────────────────────────────────

    @property
    def strategies(self) -> tuple[BossStrategy, ...]:
        return self._strategies

    @property
    def boss_ids(self) -> list[str]:
        return list(self._states)

    def get_state(self, boss_id: str) -> BossAIState | None:
        return self._states.get(boss_id)

    def _lookup(self, boss_id: str, op: str) -> BossAIState | None:
        state = self._states.get(boss_id)
        if state is None:
            logger.warning("%s: unknown boss '%s' (initialize first)", op, boss_id)
        return state

    # ══════════════════════════════════════════════════════
    #  Lifecycle
    # ══════════════════════════════════════════════════════

    def initialize(self, boss_id: str, max_health: float,
                   boss_type: BossType | None = None) -> BossAIState:
        """Create (or replace) the state for *boss_id*."""
        cfg = self.cfg
        thresholds = boss_type.phase_thresholds if boss_type is not None else ()
        state = BossAIState(
            boss_id=boss_id,
            max_health=max_health,
            health=max_health,
            weights=WeightTable(
                (s.id for s in self._strategies),
                initial=cfg.weight_initial, lo=cfg.weight_min, hi=cfg.weight_max,
            ),
            tracker=BehaviorTracker(cfg.tracker),
            current_phase=cfg.start_phase,
            aggression_level=cfg.base_aggression,
            learning_rate=cfg.base_learning_rate,
            boss_type=boss_type,
            phase_tracker=PhaseTracker(thresholds),
        )
        self._states[boss_id] = state
        logger.info("Boss '%s' initialized (hp=%s, type=%s)", boss_id, max_health,
                    boss_type.key if boss_type is not None else "generic")
        return state

    def remove(self, boss_id: str) -> bool:
        """Drop an encounter (boss death or abandonment)."""
        return self._states.pop(boss_id, None) is not None

    # ══════════════════════════════════════════════════════
    #  Observation
    # ══════════════════════════════════════════════════════

    def update_behavior(self, boss_id: str, action: PlayerAction) -> None:
        state = self._lookup(boss_id, "update_behavior")
        if state is None:
            return
        state.tracker.record_action(action)

    def note_boss_action(self, boss_id: str, timestamp: float) -> None:
        """Tell the tracker when the boss attacked (reaction timing)."""
        state = self._lookup(boss_id, "note_boss_action")
        if state is None:
            return
        state.tracker.note_boss_action(timestamp)

    # ══════════════════════════════════════════════════════
    #  Strategy selection
    # ══════════════════════════════════════════════════════

    def select_strategy(self, boss_id: str) -> BossStrategy | None:
        """Highest ``priority × weight`` among eligible strategies.

        Ties go to the earliest strategy in catalog order. Returns None
        when no strategy is eligible.
        """
        state = self._lookup(boss_id, "select_strategy")
        if state is None:
            return None
        return self._pick(state)

    def _pick(self, state: BossAIState) -> BossStrategy | None:
        profile = state.tracker.get_profile()
        best: BossStrategy | None = None
        best_score = 0.0
        for strategy in self._strategies:
            if not strategy.is_eligible(profile):
                continue
            score = strategy.priority * state.weights.get(strategy.id)
            logger.debug("boss=%s strategy=%s score=%.2f",
                         state.boss_id, strategy.id, score)
            if score > best_score:
                best, best_score = strategy, score
        return best

    def execute_action(self, boss_id: str,
                       strategy: BossStrategy) -> list[BossAction]:
        """Log the strategy in the adaptation list and return its actions."""
        state = self._lookup(boss_id, "execute_action")
        if state is None:
            return []

        existing = self._find_adaptation(state, strategy.id)
        if existing is not None:
            existing.times_used += 1
        else:
            state.adaptations.append(Adaptation(
                strategy_id=strategy.id,
                trigger=strategy.name,
                effect=", ".join(a.type for a in strategy.actions),
            ))
        return list(strategy.actions)

    def next_actions(self, boss_id: str) -> tuple[BossStrategy, list[BossAction]] | None:
        """Select and execute in one step, falling back to a basic attack."""
        state = self._lookup(boss_id, "next_actions")
        if state is None:
            return None
        strategy = self._pick(state)
        if strategy is None:
            return BASIC_ATTACK, list(BASIC_ATTACK.actions)
        return strategy, self.execute_action(boss_id, strategy)

    # ══════════════════════════════════════════════════════
    #  Learning
    # ══════════════════════════════════════════════════════

    def learn_from_outcome(self, boss_id: str, strategy_id: str,
                           outcome: CombatOutcome | dict) -> float | None:
        """Nudge the strategy's weight toward how well it worked.

        Returns the new (clamped) weight, or None if nothing was learned.
        """
        state = self._lookup(boss_id, "learn_from_outcome")
        if state is None:
            return None
        if strategy_id not in state.weights:
            logger.debug("learn_from_outcome: '%s' is not a catalog strategy", strategy_id)
            return None
        if isinstance(outcome, dict):
            outcome = CombatOutcome.from_dict(outcome)

        effectiveness = outcome.effectiveness()
        new_weight = state.weights.nudge(strategy_id, effectiveness, state.learning_rate)

        adaptation = self._find_adaptation(state, strategy_id)
        if adaptation is not None:
            if adaptation.samples == 0:
                adaptation.effectiveness = effectiveness
            else:
                adaptation.effectiveness += (
                    self.cfg.adaptation_smoothing
                    * (effectiveness - adaptation.effectiveness)
                )
            adaptation.samples += 1

        logger.debug("boss=%s learned %s: eff=%.2f weight=%.3f",
                     boss_id, strategy_id, effectiveness, new_weight)
        return new_weight

    @staticmethod
    def _find_adaptation(state: BossAIState, strategy_id: str) -> Adaptation | None:
        for a in state.adaptations:
            if a.strategy_id == strategy_id or a.trigger == strategy_id:
                return a
        return None

    # ══════════════════════════════════════════════════════
    #  Phases
    # ══════════════════════════════════════════════════════

    def transition_phase(self, boss_id: str, new_phase: int) -> None:
        """Escalate aggression and learning rate; reset behavior counters.

        Learned weights are kept.
        """
        state = self._lookup(boss_id, "transition_phase")
        if state is None:
            return
        cfg = self.cfg
        state.current_phase = new_phase
        state.aggression_level = min(
            cfg.max_aggression, cfg.base_aggression + new_phase * cfg.aggression_per_phase
        )
        state.learning_rate = min(
            cfg.max_learning_rate,
            cfg.base_learning_rate + new_phase * cfg.learning_rate_per_phase,
        )
        state.tracker.reset_counters()

        if state.boss_type is not None:
            effect = effect_for(state.boss_type.special_ability, new_phase, self._rng)
            state.enraged = state.enraged or effect.enrage
            state.shield_active = state.shield_active or effect.shield
            state.pending_summons += effect.summon_count
            state.teleport_chance = max(state.teleport_chance, effect.teleport_chance)

        logger.info("Boss '%s' -> phase %d (aggression=%d, lr=%.2f)",
                    boss_id, new_phase, state.aggression_level, state.learning_rate)

    def apply_damage(self, boss_id: str, damage: float) -> int | None:
        """Damage the boss and advance the phase if a threshold is crossed.

        An active shield absorbs the hit. Returns the new phase, if any.
        """
        state = self._lookup(boss_id, "apply_damage")
        if state is None:
            return None
        if state.shield_active:
            state.shield_active = False
            logger.debug("boss=%s shield absorbed %.0f damage", boss_id, damage)
            return None

        state.health = max(0.0, state.health - damage)
        new_phase = state.phase_tracker.check(state.health, state.max_health)
        if new_phase is not None:
            self.transition_phase(boss_id, new_phase)
        return new_phase

    def take_summons(self, boss_id: str) -> int:
        """Pop the number of minions queued by SUMMON phase effects."""
        state = self._lookup(boss_id, "take_summons")
        if state is None:
            return 0
        count, state.pending_summons = state.pending_summons, 0
        return count

    # ══════════════════════════════════════════════════════
    #  Read-outs
    # ══════════════════════════════════════════════════════

    def get_difficulty_multiplier(self, boss_id: str) -> float:
        state = self._lookup(boss_id, "get_difficulty_multiplier")
        if state is None:
            return 1.0
        adaptation_bonus = min(ADAPTATION_DIFFICULTY_CAP,
                               len(state.adaptations) * ADAPTATION_DIFFICULTY_STEP)
        phase_bonus = (state.current_phase - 1) * PHASE_DIFFICULTY_STEP
        return 1.0 + adaptation_bonus + phase_bonus

    def get_ai_insights(self, boss_id: str) -> AIInsights | None:
        state = self._lookup(boss_id, "get_ai_insights")
        if state is None:
            return None
        strategy = self._pick(state)
        profile = state.tracker.get_profile()
        return AIInsights(
            current_strategy=strategy.name if strategy is not None else "None",
            player_profile=(f"{profile.movement_pattern.value} "
                            f"({round(profile.predictability * 100)}% predictable)"),
            adaptations=[f"{a.trigger}: {round(a.effectiveness * 100)}% effective"
                         for a in state.adaptations],
            difficulty=self.get_difficulty_multiplier(boss_id),
        )

    # ── Weight export / import ────────────────────────────

    def export_weights(self, boss_id: str) -> dict[str, float] | None:
        state = self._lookup(boss_id, "export_weights")
        if state is None:
            return None
        return state.weights.export()

    def import_weights(self, boss_id: str, weights: dict[str, float]) -> bool:
        state = self._lookup(boss_id, "import_weights")
        if state is None:
            return False
        state.weights.load(weights)
        return True


def create_controller(config: ControllerConfig | None = None,
                      rng: np.random.Generator | None = None) -> AdaptiveBossController:
    """Factory: one controller per game session, passed by reference."""
    return AdaptiveBossController(config=config, rng=rng)
