"""
strategy_catalog.py – Fixed catalog of condition-gated boss strategies.

Each strategy counters one player habit:

  Close the Gap      (8)  – kiting, player stays far away
  Defensive Counter  (9)  – melee rushers hugging the boss
  AOE Spam           (7)  – dodge spammers
  Prediction Attack  (10) – consistent, predictable players
  Burst Damage       (8)  – sustain / heal-heavy play

Strategies are immutable and shared read-only by every encounter; the
learned weights that bias selection live per-boss in boss_controller.

Boss actions are a closed set of kinds, each paired with its own frozen
params type, so every consumer can dispatch over ActionKind exhaustively.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable

from boss_ai.behavior_tracker import PlayerBehaviorProfile


# ══════════════════════════════════════════════════════════
#  Conditions
# ══════════════════════════════════════════════════════════

class Operator(str, Enum):
    """Comparison used by a strategy trigger."""

    GT = ">"
    LT = "<"
    EQ = "=="
    GE = ">="


_COMPARE: dict[Operator, Callable[[float, float], bool]] = {
    Operator.GT: operator.gt,
    Operator.LT: operator.lt,
    Operator.EQ: operator.eq,
    Operator.GE: operator.ge,
}


@dataclass(frozen=True)
class Condition:
    """``profile.<metric> <operator> value``."""

    metric: str
    operator: Operator
    value: float

    def is_met(self, profile: PlayerBehaviorProfile) -> bool:
        return _COMPARE[Operator(self.operator)](profile.metric(self.metric), self.value)


# ══════════════════════════════════════════════════════════
#  Boss actions (tagged variants)
# ══════════════════════════════════════════════════════════

class ActionKind(str, Enum):
    DASH = "dash"
    RANGED_ATTACK = "ranged-attack"
    COUNTER_ATTACK = "counter-attack"
    KNOCKBACK = "knockback"
    AOE_ATTACK = "aoe-attack"
    GROUND_HAZARD = "ground-hazard"
    PREDICTED_STRIKE = "predicted-strike"
    TRAP_PLACEMENT = "trap-placement"
    COMBO_ATTACK = "combo-attack"
    HEAL_BLOCK = "heal-block"
    BASIC_ATTACK = "basic-attack"


@dataclass(frozen=True)
class DashParams:
    speed: float = 2.0
    frequency: str = "high"


@dataclass(frozen=True)
class RangedAttackParams:
    projectiles: int = 3


@dataclass(frozen=True)
class CounterAttackParams:
    damage: float = 1.5          # damage multiplier


@dataclass(frozen=True)
class KnockbackParams:
    distance: float = 150.0


@dataclass(frozen=True)
class AoeAttackParams:
    radius: float = 200.0
    count: int = 3


@dataclass(frozen=True)
class GroundHazardParams:
    duration: float = 5000.0     # ms


@dataclass(frozen=True)
class PredictedStrikeParams:
    lead_time: float = 500.0     # ms


@dataclass(frozen=True)
class TrapPlacementParams:
    ahead: bool = True


@dataclass(frozen=True)
class ComboAttackParams:
    hits: int = 5
    speed: float = 1.5


@dataclass(frozen=True)
class HealBlockParams:
    duration: float = 3000.0     # ms


@dataclass(frozen=True)
class BasicAttackParams:
    damage: float = 1.0


ActionParams = (
    DashParams | RangedAttackParams | CounterAttackParams | KnockbackParams
    | AoeAttackParams | GroundHazardParams | PredictedStrikeParams
    | TrapPlacementParams | ComboAttackParams | HealBlockParams
    | BasicAttackParams
)

_PARAMS_FOR_KIND: dict[ActionKind, type] = {
    ActionKind.DASH: DashParams,
    ActionKind.RANGED_ATTACK: RangedAttackParams,
    ActionKind.COUNTER_ATTACK: CounterAttackParams,
    ActionKind.KNOCKBACK: KnockbackParams,
    ActionKind.AOE_ATTACK: AoeAttackParams,
    ActionKind.GROUND_HAZARD: GroundHazardParams,
    ActionKind.PREDICTED_STRIKE: PredictedStrikeParams,
    ActionKind.TRAP_PLACEMENT: TrapPlacementParams,
    ActionKind.COMBO_ATTACK: ComboAttackParams,
    ActionKind.HEAL_BLOCK: HealBlockParams,
    ActionKind.BASIC_ATTACK: BasicAttackParams,
}


@dataclass(frozen=True)
class BossAction:
    """One step of a strategy: a kind plus the params of that kind."""

    kind: ActionKind
    params: ActionParams

    def __post_init__(self):
        expected = _PARAMS_FOR_KIND[self.kind]
        if not isinstance(self.params, expected):
            raise ValueError(
                f"{self.kind.value} expects {expected.__name__}, "
                f"got {type(self.params).__name__}"
            )

    @classmethod
    def of(cls, params: ActionParams) -> BossAction:
        """Build an action from its params alone."""
        for kind, params_type in _PARAMS_FOR_KIND.items():
            if isinstance(params, params_type):
                return cls(kind, params)
        raise ValueError(f"unknown action params: {params!r}")

    @property
    def type(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "params": asdict(self.params)}

    def describe(self) -> str:
        """Short human-readable line for logs and the insight panel."""
        k, p = self.kind, self.params
        if k is ActionKind.DASH:
            return f"dash x{p.speed:g} ({p.frequency} frequency)"
        if k is ActionKind.RANGED_ATTACK:
            return f"ranged attack, {p.projectiles} projectiles"
        if k is ActionKind.COUNTER_ATTACK:
            return f"counter-attack x{p.damage:g} damage"
        if k is ActionKind.KNOCKBACK:
            return f"knockback {p.distance:g}"
        if k is ActionKind.AOE_ATTACK:
            return f"AOE radius {p.radius:g} x{p.count}"
        if k is ActionKind.GROUND_HAZARD:
            return f"ground hazard {p.duration / 1000:g}s"
        if k is ActionKind.PREDICTED_STRIKE:
            return f"predicted strike, {p.lead_time:g}ms lead"
        if k is ActionKind.TRAP_PLACEMENT:
            return "trap ahead of player" if p.ahead else "trap at player"
        if k is ActionKind.COMBO_ATTACK:
            return f"{p.hits}-hit combo x{p.speed:g} speed"
        if k is ActionKind.HEAL_BLOCK:
            return f"heal block {p.duration / 1000:g}s"
        if k is ActionKind.BASIC_ATTACK:
            return "basic attack"
        raise ValueError(f"unhandled action kind: {k!r}")


# ══════════════════════════════════════════════════════════
#  Strategy
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BossStrategy:
    """A named, condition-gated bundle of boss actions."""

    id: str
    name: str
    conditions: tuple[Condition, ...]
    actions: tuple[BossAction, ...]
    priority: int

    def is_eligible(self, profile: PlayerBehaviorProfile) -> bool:
        """True when ALL trigger conditions hold."""
        return all(c.is_met(profile) for c in self.conditions)


STRATEGIES: tuple[BossStrategy, ...] = (
    # Counter ranged players
    BossStrategy(
        id="close-gap",
        name="Close the Gap",
        conditions=(Condition("avg_distance_from_boss", Operator.GT, 200),),
        actions=(
            BossAction.of(DashParams(speed=2.0, frequency="high")),
            BossAction.of(RangedAttackParams(projectiles=3)),
        ),
        priority=8,
    ),
    # Counter aggressive melee
    BossStrategy(
        id="defensive-counter",
        name="Defensive Counter",
        conditions=(
            Condition("avg_distance_from_boss", Operator.LT, 100),
            Condition("attack_frequency", Operator.GT, 2),
        ),
        actions=(
            BossAction.of(CounterAttackParams(damage=1.5)),
            BossAction.of(KnockbackParams(distance=150)),
        ),
        priority=9,
    ),
    # Counter dodge-heavy players
    BossStrategy(
        id="aoe-spam",
        name="AOE Spam",
        conditions=(Condition("dodge_frequency", Operator.GT, 3),),
        actions=(
            BossAction.of(AoeAttackParams(radius=200, count=3)),
            BossAction.of(GroundHazardParams(duration=5000)),
        ),
        priority=7,
    ),
    # Counter predictable movement
    BossStrategy(
        id="prediction-attack",
        name="Prediction Attack",
        conditions=(Condition("predictability", Operator.GT, 0.7),),
        actions=(
            BossAction.of(PredictedStrikeParams(lead_time=500)),
            BossAction.of(TrapPlacementParams(ahead=True)),
        ),
        priority=10,
    ),
    # Counter heal spamming
    BossStrategy(
        id="burst-damage",
        name="Burst Damage",
        conditions=(Condition("heal_usage", Operator.GT, 3),),
        actions=(
            BossAction.of(ComboAttackParams(hits=5, speed=1.5)),
            BossAction.of(HealBlockParams(duration=3000)),
        ),
        priority=8,
    ),
)

# Fallback when nothing in the catalog is eligible; never scored.
BASIC_ATTACK = BossStrategy(
    id="basic-attack",
    name="Basic Attack",
    conditions=(),
    actions=(BossAction.of(BasicAttackParams()),),
    priority=0,
)

_BY_ID: dict[str, BossStrategy] = {s.id: s for s in STRATEGIES}


def list_strategies() -> tuple[BossStrategy, ...]:
    """Every catalog strategy, in catalog order."""
    return STRATEGIES


def get_strategy(strategy_id: str) -> BossStrategy | None:
    return _BY_ID.get(strategy_id)


def strategy_ids() -> list[str]:
    return [s.id for s in STRATEGIES]
