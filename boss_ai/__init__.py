"""
boss_ai package – Adaptive boss combat AI.

Modules:
    behavior_tracker  – Per-encounter player behavior profiling
    strategy_catalog  – Fixed, condition-gated boss strategies and action kinds
    boss_controller   – AdaptiveBossController: selection, learning, phases
    phase_system      – Boss catalog, health-threshold phases, special abilities
    persistence       – Learned-weight JSON save / load
    stats             – Encounter statistics and weight-trend graph
    simulation        – Headless encounters against scripted player personas
"""

from .behavior_tracker import (
    ActionType, MovementPattern, PlayerAction, PlayerBehaviorProfile,
    BehaviorTracker, TrackerConfig,
)
from .strategy_catalog import (
    BossStrategy, BossAction, ActionKind, Condition, Operator,
    STRATEGIES, BASIC_ATTACK, list_strategies, get_strategy,
)
from .boss_controller import (
    AdaptiveBossController, BossAIState, CombatOutcome, Adaptation,
    AIInsights, ControllerConfig, WeightTable, create_controller,
)
from .phase_system import (
    BossType, SpecialAbility, PhaseTracker, BOSSES,
    get_boss_for_level, is_boss_level,
)
