"""
main.py - Entry point for Dungeon AI.

Integrates:
- Adaptive boss AI (boss_ai/)
- Scripted-persona encounter simulation (boss_ai/simulation.py)
- Procedural dungeon generation (dungeon_gen/)
- Weight persistence (boss_ai/persistence.py)
- pygame dungeon preview (viewer.py)

Run:
    python main.py --simulate 20 --plot
    python main.py --simulate 10 --load-weights w.json --save-weights w.json
    python main.py --dungeon --level 7 --difficulty 6 --show-layout
    python main.py --preview --seed 42
"""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np

from settings import VERSION, DEFAULT_ROOM_COUNT, WEIGHT_PLOT_FILE

logger = logging.getLogger(__name__)

# ── Project imports ───────────────────────────────────────
from boss_ai import create_controller, get_boss_for_level, is_boss_level
from boss_ai.persistence import (
    load_weights, save_weights, load_generation_weights, save_generation_weights,
)
from boss_ai.simulation import SimulationRunner
from dungeon_gen import (
    DungeonGenerator, DungeonGenerationParams, GeneratedDungeon,
    PlayStyle, PreviousPerformance,
)


# ══════════════════════════════════════════════════════════
#  ARGUMENTS
# ══════════════════════════════════════════════════════════

def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"Dungeon AI {VERSION}")

    mode = parser.add_argument_group("modes")
    mode.add_argument("--simulate", type=int, metavar="N",
                      help="Run N boss encounters against scripted personas")
    mode.add_argument("--dungeon", action="store_true",
                      help="Generate a dungeon and print its summary")
    mode.add_argument("--preview", action="store_true",
                      help="Open the pygame dungeon preview")

    gen = parser.add_argument_group("generation")
    gen.add_argument("--seed", type=int, default=None, help="RNG seed")
    gen.add_argument("--rooms", type=int, default=DEFAULT_ROOM_COUNT)
    gen.add_argument("--level", type=int, default=3, help="Player level")
    gen.add_argument("--difficulty", type=float, default=5.0, help="Desired difficulty 1-10")
    gen.add_argument("--style", choices=[s.value for s in PlayStyle],
                     default=PlayStyle.BALANCED.value)
    gen.add_argument("--deaths", type=int, default=0, help="Deaths in earlier runs")
    gen.add_argument("--show-layout", action="store_true",
                     help="Print each room's ASCII layout")
    gen.add_argument("--generation-weights", metavar="PATH",
                     help="Load / save generation weights at PATH")

    out = parser.add_argument_group("output")
    out.add_argument("--plot", nargs="?", const=WEIGHT_PLOT_FILE, metavar="FILE",
                     help="Save the weight-trend graph of the last encounter")
    out.add_argument("--load-weights", metavar="PATH",
                     help="Start every simulated boss from the strategy weights at PATH")
    out.add_argument("--save-weights", metavar="PATH",
                     help="Save the last encounter's learned strategy weights")
    out.add_argument("--verbose", "-v", action="store_true", help="DEBUG logging")

    args = parser.parse_args(argv)
    if args.simulate is None and not args.dungeon and not args.preview:
        args.dungeon = True
    return args


# ══════════════════════════════════════════════════════════
#  SIMULATION
# ══════════════════════════════════════════════════════════

def run_simulation(args: argparse.Namespace, rng: np.random.Generator) -> int:
    initial = None
    if args.load_weights:
        initial = load_weights(args.load_weights)
        logger.info("Loaded %d strategy weights from %s", len(initial), args.load_weights)

    controller = create_controller(rng=rng)
    runner = SimulationRunner(controller, args.simulate, rng=rng, initial_weights=initial)
    results = runner.run()
    runner.print_summary()

    if args.plot and runner.stats:
        runner.stats[-1].plot_weights(args.plot)
    if args.save_weights and results:
        save_weights(results[-1].final_weights, args.save_weights)
    return 0


# ══════════════════════════════════════════════════════════
#  DUNGEON
# ══════════════════════════════════════════════════════════

def build_params(args: argparse.Namespace) -> DungeonGenerationParams:
    return DungeonGenerationParams(
        player_level=args.level,
        play_style=PlayStyle(args.style),
        previous_performance=PreviousPerformance(death_count=args.deaths),
        desired_difficulty=args.difficulty,
    )


def build_generator(args: argparse.Namespace, rng: np.random.Generator) -> DungeonGenerator:
    generator = DungeonGenerator(rng=rng)
    if args.generation_weights:
        stored = load_generation_weights(args.generation_weights)
        if stored:
            generator.import_weights(stored)
    return generator


def print_dungeon(dungeon: GeneratedDungeon, show_layout: bool = False) -> None:
    print(f"\n{'=' * 58}")
    print(f"  {dungeon.theme.name}  ({len(dungeon.rooms)} rooms)")
    print(f"  Estimated difficulty : {dungeon.estimated_difficulty:.1f}")
    print(f"  AI confidence        : {dungeon.ai_confidence:.2f}")
    print(f"{'=' * 58}")
    print(f"    {'Room':<14s}  {'Type':<9s}  {'Size':>4s}  {'Enem':>4s}  "
          f"{'Item':>4s}  {'Haz':>3s}  {'Diff':>6s}  {'Score':>5s}")
    print(f"    {'-' * 62}")
    for room in dungeon.rooms:
        print(f"    {room.id:<14s}  {room.type.value:<9s}  {room.size:>4d}  "
              f"{len(room.enemies):>4d}  {len(room.items):>4d}  {len(room.hazards):>3d}  "
              f"{room.difficulty:>6.1f}  {room.ai_score:>5.1f}")
        if show_layout:
            print()
            print(room.ascii())
            print()
    print()


def run_dungeon(args: argparse.Namespace, rng: np.random.Generator) -> int:
    generator = build_generator(args, rng)
    dungeon = generator.generate_dungeon(build_params(args), args.rooms)
    print_dungeon(dungeon, args.show_layout)

    if is_boss_level(args.level):
        boss = get_boss_for_level(args.level)
        print(f"  Boss level: {boss.key} (hp={boss.max_health}, "
              f"ability={boss.special_ability.value})\n")

    if args.generation_weights:
        save_generation_weights(generator.export_weights(), args.generation_weights)
    return 0


def run_preview(args: argparse.Namespace, rng: np.random.Generator) -> int:
    # pygame is only needed here
    from viewer import DungeonViewer

    generator = build_generator(args, rng)
    params = build_params(args)

    insights = None
    if is_boss_level(args.level):
        boss = get_boss_for_level(args.level)
        controller = create_controller(rng=rng)
        controller.initialize(boss.key, boss.max_health, boss)
        insights = str(controller.get_ai_insights(boss.key))

    DungeonViewer(
        generator.generate_dungeon(params, args.rooms),
        regenerate=lambda: generator.generate_dungeon(params, args.rooms),
        insights=insights,
    ).run()
    return 0


# ── Run ───────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    rng = np.random.default_rng(args.seed)
    logger.info("Dungeon AI %s (seed=%s)", VERSION, args.seed)

    status = 0
    if args.simulate is not None:
        status = run_simulation(args, rng) or status
    if args.dungeon:
        status = run_dungeon(args, rng) or status
    if args.preview:
        status = run_preview(args, rng) or status
    return status


if __name__ == "__main__":
    sys.exit(main())
