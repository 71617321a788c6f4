"""
simulation.py – Headless boss encounters against scripted player personas.

Runs N encounters where a persona (kiter, rusher, dodger, healer,
metronome) plays against a fresh boss. Each turn the persona emits its
actions, the controller picks a strategy, the outcome is rolled from
whether that strategy counters the persona, and the controller learns.

Usage (from CLI):
    python main.py --simulate 20 --plot

All randomness goes through one numpy Generator, so a seed reproduces
the whole batch.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

import numpy as np

from boss_ai.behavior_tracker import ActionType, PlayerAction
from boss_ai.boss_controller import AdaptiveBossController, CombatOutcome
from boss_ai.phase_system import BOSSES
from boss_ai.stats import EncounterStats
from boss_ai.strategy_catalog import BASIC_ATTACK

logger = logging.getLogger(__name__)

TURN_MS = 1000.0
MAX_TURNS = 80


# ══════════════════════════════════════════════════════════
#  Personas
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Persona:
    """A scripted player. Counts are actions per turn."""

    name: str
    distance: float              # typical distance from the boss
    jitter: float                # stddev of that distance
    attacks: int
    dodges: int
    heals: int
    countered_by: str            # strategy id that punishes this style
    damage: float                # player damage to the boss per turn
    dodge_chance: float = 0.3


PERSONAS: tuple[Persona, ...] = (
    Persona("kiter", distance=320, jitter=25, attacks=1, dodges=0, heals=0,
            countered_by="close-gap", damage=18),
    Persona("rusher", distance=60, jitter=15, attacks=3, dodges=0, heals=0,
            countered_by="defensive-counter", damage=30, dodge_chance=0.1),
    Persona("dodger", distance=160, jitter=60, attacks=1, dodges=2, heals=0,
            countered_by="aoe-spam", damage=15, dodge_chance=0.6),
    Persona("healer", distance=180, jitter=30, attacks=1, dodges=0, heals=1,
            countered_by="burst-damage", damage=14),
    Persona("metronome", distance=150, jitter=0, attacks=0, dodges=0, heals=0,
            countered_by="prediction-attack", damage=20),
)


def get_persona(name: str) -> Persona | None:
    for p in PERSONAS:
        if p.name == name:
            return p
    return None


def persona_actions(persona: Persona, turn: int,
                    rng: np.random.Generator) -> list[PlayerAction]:
    """Actions the persona performs during *turn*."""
    t0 = turn * TURN_MS
    boss_pos = (0.0, 0.0)
    dist = max(0.0, float(rng.normal(persona.distance, persona.jitter)))
    angle = float(rng.uniform(0, 2 * np.pi))
    pos = (dist * np.cos(angle), dist * np.sin(angle))

    actions = [PlayerAction(ActionType.MOVE, position=pos, boss_position=boss_pos,
                            timestamp=t0)]
    # Metronome attacks on a fixed beat and nothing else
    attacks = 1 if persona.name == "metronome" and turn % 4 == 0 else persona.attacks
    for i in range(attacks):
        actions.append(PlayerAction(ActionType.ATTACK, timestamp=t0 + 100 * (i + 1)))
    for i in range(persona.dodges):
        actions.append(PlayerAction(ActionType.DODGE, timestamp=t0 + 450 + 50 * i))
    for _ in range(persona.heals):
        actions.append(PlayerAction(ActionType.HEAL, timestamp=t0 + 800))
    return actions


def roll_outcome(persona: Persona, strategy_id: str,
                 rng: np.random.Generator) -> CombatOutcome:
    """Countering strategies land more often and harder."""
    countered = strategy_id == persona.countered_by
    hit_chance = 0.8 if countered else 0.35
    dodged = bool(rng.random() < (persona.dodge_chance * (0.5 if countered else 1.0)))
    hit = not dodged and bool(rng.random() < hit_chance)
    damage = float(rng.uniform(20, 45) if countered else rng.uniform(5, 20)) if hit else 0.0
    return CombatOutcome(damage_dealt=damage, player_hit=hit, player_dodged=dodged)


# ══════════════════════════════════════════════════════════
#  Per-encounter result
# ══════════════════════════════════════════════════════════

@dataclass
class EncounterResult:
    """Lightweight record for one simulated encounter."""
    encounter_number: int = 0
    persona: str = ""
    boss: str = ""
    winner: str = ""                 # "player", "boss" or "timeout"
    turns: int = 0
    top_strategy: str = ""
    countered_share: float = 0.0     # fraction of turns the counter was chosen
    difficulty: float = 1.0
    phases: list[int] = field(default_factory=list)
    final_weights: dict[str, float] = field(default_factory=dict)


# ══════════════════════════════════════════════════════════
#  Simulation Runner
# ══════════════════════════════════════════════════════════

class SimulationRunner:
    """Run *n_encounters* headless boss fights.

    Parameters
    ----------
    controller : AdaptiveBossController
        Shared controller; each encounter gets its own boss id.
    n_encounters : int
        How many encounters to run.
    rng : numpy Generator
        Drives personas, outcomes and boss phase effects.
    player_health : float
        Damage the persona can absorb before the boss wins.
    initial_weights : dict, optional
        Strategy weights every boss starts from (e.g. a saved run).
    """

    def __init__(self, controller: AdaptiveBossController, n_encounters: int = 10,
                 rng: np.random.Generator | None = None,
                 player_health: float = 600.0,
                 initial_weights: dict[str, float] | None = None) -> None:
        self._ctrl = controller
        self._n = max(1, n_encounters)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._player_health = player_health
        self._initial_weights = initial_weights
        self.results: list[EncounterResult] = []
        self.stats: list[EncounterStats] = []

    def run(self) -> list[EncounterResult]:
        for i in range(1, self._n + 1):
            persona = PERSONAS[(i - 1) % len(PERSONAS)]
            boss_type = BOSSES[(i - 1) % len(BOSSES)]
            result = self._run_one(i, persona, boss_type)
            self.results.append(result)
            logger.info("Encounter %d: %s vs %s -> %s in %d turns (top=%s, x%.2f)",
                        i, persona.name, boss_type.key, result.winner, result.turns,
                        result.top_strategy, result.difficulty)
        return self.results

    # ── Single encounter ──────────────────────────────────

    def _run_one(self, number: int, persona: Persona, boss_type) -> EncounterResult:
        ctrl = self._ctrl
        rng = self._rng
        boss_id = f"sim-{number}-{boss_type.key}"
        ctrl.initialize(boss_id, boss_type.max_health, boss_type)
        if self._initial_weights:
            ctrl.import_weights(boss_id, self._initial_weights)
        stats = EncounterStats(boss_id)
        player_hp = self._player_health
        winner = "timeout"
        turn = 0

        for turn in range(1, MAX_TURNS + 1):
            ctrl.note_boss_action(boss_id, turn * TURN_MS + 300)
            for action in persona_actions(persona, turn, rng):
                ctrl.update_behavior(boss_id, action)

            strategy = ctrl.select_strategy(boss_id)
            stats.record_selection(strategy.id if strategy else None)
            used = strategy or BASIC_ATTACK
            if strategy is not None:
                ctrl.execute_action(boss_id, strategy)

            outcome = roll_outcome(persona, used.id, rng)
            player_hp -= outcome.damage_dealt
            if strategy is not None:
                ctrl.learn_from_outcome(boss_id, strategy.id, outcome)
            stats.record_outcome(outcome, ctrl.export_weights(boss_id))

            new_phase = ctrl.apply_damage(boss_id, persona.damage)
            if new_phase is not None:
                stats.record_phase(new_phase)
            ctrl.take_summons(boss_id)

            state = ctrl.get_state(boss_id)
            if state.health <= 0:
                winner = "player"
                break
            if player_hp <= 0:
                winner = "boss"
                break

        top = stats.selections.most_common(1)
        top_id = top[0][0] if top else BASIC_ATTACK.id
        chosen = stats.selections.get(persona.countered_by, 0)
        result = EncounterResult(
            encounter_number=number,
            persona=persona.name,
            boss=boss_type.key,
            winner=winner,
            turns=turn,
            top_strategy=top_id,
            countered_share=chosen / max(1, stats.turns),
            difficulty=ctrl.get_difficulty_multiplier(boss_id),
            phases=list(stats.phase_changes),
            final_weights=ctrl.export_weights(boss_id),
        )
        stats.log_summary()
        self.stats.append(stats)
        ctrl.remove(boss_id)
        return result

    # ── Summary printout ──────────────────────────────────

    def print_summary(self) -> None:
        n = len(self.results)
        if n == 0:
            print("\nNo encounters completed.")
            return

        print(f"\n{'=' * 72}")
        print(f"  Simulation Results  ({n} encounters)")
        print(f"{'=' * 72}")

        outcomes = Counter(r.winner for r in self.results)
        for name in ("player", "boss", "timeout"):
            cnt = outcomes.get(name, 0)
            print(f"  {name.capitalize():<8s} wins : {cnt:>4d}  ({100 * cnt / n:.1f}%)")

        print(f"\n    {'#':>3s}  {'Persona':<10s}  {'Boss':<16s}  {'Winner':<8s}  "
              f"{'Turns':>5s}  {'Top strategy':<18s}  {'Counter%':>8s}  {'Diff':>5s}")
        print(f"    {'-' * 86}")
        for r in self.results:
            print(f"    {r.encounter_number:>3d}  {r.persona:<10s}  {r.boss:<16s}  "
                  f"{r.winner:<8s}  {r.turns:>5d}  {r.top_strategy:<18s}  "
                  f"{100 * r.countered_share:>7.1f}%  {r.difficulty:>5.2f}")

        # Mean final weight per strategy, per persona
        print("\n  Mean final weights by persona:")
        by_persona: dict[str, list[dict[str, float]]] = {}
        for r in self.results:
            by_persona.setdefault(r.persona, []).append(r.final_weights)
        for name, snaps in by_persona.items():
            ids = sorted({k for s in snaps for k in s})
            cells = "  ".join(
                f"{sid}={np.mean([s[sid] for s in snaps if sid in s]):.2f}" for sid in ids
            )
            print(f"    {name:<10s}  {cells}")

        print(f"\n{'=' * 72}\n")
