"""
dungeon_generator.py – Orchestrates a whole dungeon.

Flow:
  generate_dungeon(params, room_count)
    -> theme from params (or by player level)
    -> room_count rooms, generated sequentially by one RoomGenerator
    -> desired difficulty made finite and clamped to [0, 10]
    -> estimated difficulty (mean room difficulty, 1 decimal, halves up)
    -> AI confidence (room quality blended with closeness to the request)

learn_from_feedback() nudges the shared GenerationWeights, so feedback
on one dungeon biases every dungeon this generator builds afterwards.
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass, field, replace

import numpy as np

from settings import (
    DEFAULT_ROOM_COUNT, AI_SCORE_MAX, GENERATION_HISTORY_LIMIT,
    DEFAULT_DESIRED_DIFFICULTY, MIN_DESIRED_DIFFICULTY, MAX_DESIRED_DIFFICULTY,
    FEEDBACK_LEARNING_RATE, FEEDBACK_ENJOYMENT_THRESHOLD,
    FEEDBACK_DIFFICULTY_THRESHOLD,
)
from dungeon_gen.params import DungeonGenerationParams, GenerationWeights, RoomFeedback
from dungeon_gen.room_generator import (
    AIGeneratedRoom, GenerationConfig, RoomGenerator, ROOM_TYPE_ORDER,
)
from dungeon_gen.themes import DungeonTheme, select_theme
from utils import clamp, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedDungeon:
    rooms: tuple[AIGeneratedRoom, ...]
    theme: DungeonTheme
    estimated_difficulty: float
    ai_confidence: float

    def to_dict(self) -> dict:
        return {
            "rooms": [room.to_dict() for room in self.rooms],
            "theme": self.theme.id,
            "estimatedDifficulty": self.estimated_difficulty,
            "aiConfidence": self.ai_confidence,
        }


@dataclass
class _GenerationRecord:
    """What the generator remembers about a room it produced."""

    room: AIGeneratedRoom
    params: DungeonGenerationParams
    feedback: list[RoomFeedback] = field(default_factory=list)


class DungeonGenerator:
    """Builds dungeons and learns slowly from per-room feedback."""

    def __init__(self, weights: GenerationWeights | None = None,
                 rng: np.random.Generator | None = None,
                 config: GenerationConfig | None = None):
        self._weights = weights or GenerationWeights()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.rooms = RoomGenerator(self._weights, self.rng, config)
        # Most recent rooms only; feedback for an evicted room is ignored
        self.history: OrderedDict[str, _GenerationRecord] = OrderedDict()
        self.history_limit = GENERATION_HISTORY_LIMIT

    @property
    def weights(self) -> GenerationWeights:
        return self._weights

    # ══════════════════════════════════════════════════════
    #  Generation
    # ══════════════════════════════════════════════════════

    def generate_dungeon(self, params: DungeonGenerationParams,
                         room_count: int = DEFAULT_ROOM_COUNT) -> GeneratedDungeon:
        theme = params.theme or select_theme(params.player_level)

        if room_count <= 0:
            logger.warning("generate_dungeon called with room_count=%d; "
                           "returning an empty dungeon", room_count)
            return GeneratedDungeon((), theme, 0.0, 0.0)

        params = self.sanitize(params)
        rooms = []
        for index in range(room_count):
            room = self.rooms.generate_room(params, theme, index, room_count)
            self._remember(_GenerationRecord(room, params))
            rooms.append(room)

        estimated = round_half_up(float(np.mean([r.difficulty for r in rooms])), 1)
        confidence = self.confidence(rooms, estimated, params.desired_difficulty)

        logger.info("Generated %d-room %s dungeon: difficulty=%.1f confidence=%.2f",
                    room_count, theme.id, estimated, confidence)
        return GeneratedDungeon(tuple(rooms), theme, estimated, confidence)

    @staticmethod
    def sanitize(params: DungeonGenerationParams) -> DungeonGenerationParams:
        """Keep desired_difficulty finite and inside [0, 10].

        Non-numeric or non-finite values fall back to the default; anything
        else is clamped so room size stays bounded.
        """
        raw = params.desired_difficulty
        try:
            difficulty = float(raw)
        except (TypeError, ValueError):
            difficulty = math.nan
        if not math.isfinite(difficulty):
            logger.warning("desired_difficulty=%r is not a finite number; using %.1f",
                           raw, DEFAULT_DESIRED_DIFFICULTY)
            difficulty = DEFAULT_DESIRED_DIFFICULTY

        clamped = clamp(difficulty, MIN_DESIRED_DIFFICULTY, MAX_DESIRED_DIFFICULTY)
        if clamped != difficulty:
            logger.warning("desired_difficulty=%s clamped to %.1f", raw, clamped)
        if clamped == raw:
            return params
        return replace(params, desired_difficulty=clamped)

    def _remember(self, record: _GenerationRecord) -> None:
        self.history[record.room.id] = record
        while len(self.history) > self.history_limit:
            self.history.popitem(last=False)

    @staticmethod
    def confidence(rooms: list[AIGeneratedRoom], estimated_difficulty: float,
                   desired_difficulty: float) -> float:
        quality = float(np.mean([r.ai_score for r in rooms])) / AI_SCORE_MAX
        closeness = 1 - abs(estimated_difficulty - desired_difficulty) / 10
        return clamp(0.7 * quality + 0.3 * closeness, 0.0, 1.0)

    # ══════════════════════════════════════════════════════
    #  Feedback
    # ══════════════════════════════════════════════════════

    def learn_from_feedback(self, room_id: str, feedback: RoomFeedback | dict,
                            rate: float = FEEDBACK_LEARNING_RATE) -> bool:
        """Apply post-room feedback. Returns False for an unknown room id."""
        record = self.history.get(room_id)
        if record is None:
            logger.warning("Feedback for unknown room %s ignored", room_id)
            return False

        if isinstance(feedback, dict):
            feedback = RoomFeedback(
                enjoyment=feedback.get("enjoyment", 0),
                difficulty=feedback.get("difficulty", 0),
                completed=bool(feedback.get("completed", False)),
                time_spent=feedback.get("time_spent", feedback.get("timeSpent", 0.0)),
            )
        record.feedback.append(feedback)

        if feedback.enjoyment > FEEDBACK_ENJOYMENT_THRESHOLD and feedback.completed:
            index = ROOM_TYPE_ORDER.index(record.room.type)
            self._weights.reinforce_room_type(index, rate)
            logger.debug("Reinforced room type %s -> %.3f", record.room.type.value,
                         self._weights.room_type[index])

        if feedback.difficulty > FEEDBACK_DIFFICULTY_THRESHOLD and not feedback.completed:
            self._weights.ease_enemy_density(rate)
            logger.debug("Eased enemy density -> %.3f", self._weights.enemy_density[0])

        return True

    # ══════════════════════════════════════════════════════
    #  Weight persistence
    # ══════════════════════════════════════════════════════

    def export_weights(self) -> dict[str, list[float]]:
        return self._weights.export()

    def import_weights(self, data: dict[str, list[float]]):
        """Replace the learned vectors in place so the room generator sees them."""
        loaded = GenerationWeights.from_dict(data)
        self._weights.room_type = loaded.room_type
        self._weights.enemy_density = loaded.enemy_density


def generate_dungeon(params: DungeonGenerationParams,
                     room_count: int = DEFAULT_ROOM_COUNT,
                     rng: np.random.Generator | None = None) -> GeneratedDungeon:
    """One-shot generation with a throwaway generator."""
    return DungeonGenerator(rng=rng).generate_dungeon(params, room_count)
