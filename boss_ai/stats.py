"""
stats.py  –  Per-encounter statistics tracking.

EncounterStats records which strategy the boss picked each turn, how it
went, and a snapshot of the learned weights after every outcome. At the
end of an encounter it logs a summary and can save a weight-trend line
graph via matplotlib.
"""

import logging
from collections import Counter

import matplotlib
matplotlib.use("Agg")  # headless; never opens a window
import matplotlib.pyplot as plt

from settings import WEIGHT_PLOT_FILE

logger = logging.getLogger(__name__)


class EncounterStats:
    """Tracks one boss encounter.

    Attributes tracked:
        boss_id          – str
        selections       – Counter[str]  (strategy id -> times chosen)
        fallbacks        – int  (turns with no eligible strategy)
        hits / dodges    – int
        damage_dealt     – float (boss -> player)
        weight_history   – list[dict[str, float]]
        phase_changes    – list[int]
    """

    def __init__(self, boss_id: str):
        self.boss_id = boss_id
        self.selections: Counter = Counter()
        self.fallbacks = 0
        self.hits = 0
        self.dodges = 0
        self.damage_dealt = 0.0
        self.weight_history: list[dict[str, float]] = []
        self.phase_changes: list[int] = []

    # ===========================================================
    #  Recorders
    # ===========================================================

    def record_selection(self, strategy_id: str | None):
        if strategy_id is None:
            self.fallbacks += 1
        else:
            self.selections[strategy_id] += 1

    def record_outcome(self, outcome, weights: dict[str, float]):
        """Call after learn_from_outcome with the boss's current weights."""
        if outcome.player_hit:
            self.hits += 1
        if outcome.player_dodged:
            self.dodges += 1
        self.damage_dealt += max(0.0, outcome.damage_dealt)
        self.weight_history.append(dict(weights))

    def record_phase(self, phase: int):
        self.phase_changes.append(phase)

    # ===========================================================
    #  Reports
    # ===========================================================

    @property
    def turns(self) -> int:
        return sum(self.selections.values()) + self.fallbacks

    def summary(self) -> dict:
        """Plain dict snapshot (useful for JSON serialisation)."""
        final = self.weight_history[-1] if self.weight_history else {}
        return {
            "boss_id":       self.boss_id,
            "turns":         self.turns,
            "selections":    dict(self.selections),
            "fallbacks":     self.fallbacks,
            "hits":          self.hits,
            "dodges":        self.dodges,
            "damage_dealt":  round(self.damage_dealt, 2),
            "phase_changes": list(self.phase_changes),
            "final_weights": {k: round(v, 3) for k, v in final.items()},
        }

    def log_summary(self):
        s = self.summary()
        logger.info(
            "Encounter %s: turns=%d hits=%d dodges=%d dmg=%.1f phases=%s",
            s["boss_id"], s["turns"], s["hits"], s["dodges"],
            s["damage_dealt"], s["phase_changes"],
        )
        for sid, count in self.selections.most_common():
            logger.info("  %-20s chosen %d times", sid, count)

    def plot_weights(self, filename: str = WEIGHT_PLOT_FILE) -> str | None:
        """Save a line graph of each strategy's weight over time.

        Returns the filename, or None when there is nothing to plot.
        """
        if not self.weight_history:
            return None

        strategy_ids = sorted({k for snap in self.weight_history for k in snap})
        x = list(range(1, len(self.weight_history) + 1))

        fig, ax = plt.subplots()
        for sid in strategy_ids:
            ax.plot(x, [snap.get(sid, float("nan")) for snap in self.weight_history],
                    label=sid)
        ax.set_xlabel("Outcome #")
        ax.set_ylabel("Strategy weight")
        ax.set_title(f"Strategy weights - {self.boss_id}")
        ax.grid(True)
        ax.legend(fontsize="small")

        fig.savefig(filename, dpi=100, bbox_inches="tight")
        plt.close(fig)
        logger.info("Weight graph saved to %s", filename)
        return filename
