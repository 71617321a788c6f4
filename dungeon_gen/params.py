"""
params.py – Inputs to dungeon generation and the learned generation weights.

DungeonGenerationParams is supplied by the level / session manager and is
read-only to the generator. GenerationWeights is the generator's own
slow-moving global bias, nudged by player feedback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from settings import (
    ROOM_TYPE_WEIGHTS, ENEMY_DENSITY_WEIGHTS,
    FEEDBACK_LEARNING_RATE, ENEMY_DENSITY_FLOOR, DEFAULT_DESIRED_DIFFICULTY,
)
from dungeon_gen.themes import DungeonTheme


class PlayStyle(str, Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    STEALTH = "stealth"


@dataclass(frozen=True)
class PreviousPerformance:
    """Summary of the player's earlier runs."""

    avg_clear_time: float = 0.0
    death_count: int = 0
    preferred_enemies: tuple[str, ...] = ()
    avoided_enemies: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "preferred_enemies", tuple(self.preferred_enemies))
        object.__setattr__(self, "avoided_enemies", tuple(self.avoided_enemies))


@dataclass(frozen=True)
class DungeonGenerationParams:
    """Level-start request for one dungeon."""

    player_level: int = 1
    player_skills: tuple[str, ...] = ()
    play_style: PlayStyle = PlayStyle.BALANCED
    previous_performance: PreviousPerformance = field(default_factory=PreviousPerformance)
    desired_difficulty: float = DEFAULT_DESIRED_DIFFICULTY
    theme: DungeonTheme | None = None     # None -> picked by player level

    def __post_init__(self):
        object.__setattr__(self, "play_style", PlayStyle(self.play_style))
        object.__setattr__(self, "player_skills", tuple(self.player_skills))


@dataclass(frozen=True)
class RoomFeedback:
    """Post-room feedback from the player."""

    enjoyment: float        # 1-10
    difficulty: float       # 1-10
    completed: bool
    time_spent: float = 0.0


# ══════════════════════════════════════════════════════════
#  Learned generation weights
# ══════════════════════════════════════════════════════════

@dataclass
class GenerationWeights:
    """Weight vectors shared by every room a generator produces.

    room_type      – one weight per RoomType, in RoomType order
    enemy_density  – [0] scales the enemy count of combat-style rooms
    """

    room_type: list[float] = field(default_factory=lambda: list(ROOM_TYPE_WEIGHTS))
    enemy_density: list[float] = field(default_factory=lambda: list(ENEMY_DENSITY_WEIGHTS))

    @property
    def density_scale(self) -> float:
        """Enemy-count multiplier relative to the starting density."""
        return self.enemy_density[0] / ENEMY_DENSITY_WEIGHTS[0]

    def reinforce_room_type(self, index: int, rate: float = FEEDBACK_LEARNING_RATE):
        self.room_type[index] += rate

    def ease_enemy_density(self, rate: float = FEEDBACK_LEARNING_RATE):
        self.enemy_density[0] = max(ENEMY_DENSITY_FLOOR, self.enemy_density[0] - rate)

    def export(self) -> dict[str, list[float]]:
        return {
            "room_type": list(self.room_type),
            "enemy_density": list(self.enemy_density),
        }

    @classmethod
    def from_dict(cls, data: dict[str, list[float]]) -> GenerationWeights:
        """Rebuild from ``export()`` output; wrong-length vectors keep defaults."""
        weights = cls()
        room_type = data.get("room_type")
        if room_type is not None and len(room_type) == len(weights.room_type):
            weights.room_type = [float(v) for v in room_type]
        density = data.get("enemy_density")
        if density is not None and len(density) == len(weights.enemy_density):
            weights.enemy_density = [max(ENEMY_DENSITY_FLOOR, float(density[0]))]
            weights.enemy_density.extend(float(v) for v in density[1:])
        return weights
