"""
room_generator.py – Procedural synthesis of one dungeon room.

Pipeline per room:
  1. Room type prediction   – tiny fixed-weight scorer over a feature
                              vector (difficulty, progress, deaths, style)
  2. Layout synthesis       – random fill + 3 cellular-automaton passes,
                              doors at the top and bottom midpoints
  3. Enemy placement        – count from difficulty, type from player
                              history, behavior from play style
  4. Item placement         – count from room type, rarity from loot tier
  5. Hazard placement       – count from difficulty, type from theme
  6. Difficulty score       – enemies, hazards, corridors and junctions
  7. AI score (0–100)       – balance, variety, layout, player preference

Layouts are numpy int8 grids indexed [y, x]. Every random draw goes
through the injected numpy Generator so a seeded generator reproduces a
room exactly.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum

import numpy as np

from settings import (
    ROOM_BASE_SIZE, ROOM_SIZE_PER_DIFFICULTY, FLOOR_CHANCE, BOSS_FLOOR_CHANCE,
    CA_ITERATIONS, CA_FLOOR_SURVIVE, CA_WALL_TO_FLOOR,
    SAFE_ROOM_DEATH_THRESHOLD, SAFE_ROOM_CHANCE, PREFERRED_ENEMY_CHANCE,
    TREASURE_ITEM_COUNT, BOSS_ITEM_COUNT, DEFAULT_ITEM_COUNT,
    ENEMY_DIFFICULTY, HAZARD_DIFFICULTY,
    CORRIDOR_COMPLEXITY, JUNCTION_COMPLEXITY,
    BALANCE_SCORE_BONUS, VARIETY_SCORE, PREFERENCE_SCORE, AI_SCORE_MAX,
)
from dungeon_gen.params import DungeonGenerationParams, GenerationWeights, PlayStyle
from dungeon_gen.themes import DungeonTheme
from utils import clamp

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Enums
# ══════════════════════════════════════════════════════════

class RoomType(str, Enum):
    """Room kinds, in the order of the room-type weight vector."""

    COMBAT = "combat"
    PUZZLE = "puzzle"
    TREASURE = "treasure"
    BOSS = "boss"
    SAFE = "safe"
    TRAP = "trap"


ROOM_TYPE_ORDER: tuple[RoomType, ...] = tuple(RoomType)


class Tile(IntEnum):
    WALL = 0
    FLOOR = 1
    DOOR = 2
    SPECIAL = 3


class EnemyBehavior(str, Enum):
    DEFENSIVE = "defensive"
    RANGED = "ranged"
    SUPPORT = "support"
    AGGRESSIVE = "aggressive"
    FLANKING = "flanking"
    BURST = "burst"
    BALANCED = "balanced"
    ADAPTIVE = "adaptive"
    MIXED = "mixed"
    PATROL = "patrol"
    ALERT = "alert"
    GROUP = "group"


# Enemies lean against the player's style
BEHAVIOR_POOLS: dict[PlayStyle, tuple[EnemyBehavior, ...]] = {
    PlayStyle.AGGRESSIVE: (EnemyBehavior.DEFENSIVE, EnemyBehavior.RANGED, EnemyBehavior.SUPPORT),
    PlayStyle.DEFENSIVE: (EnemyBehavior.AGGRESSIVE, EnemyBehavior.FLANKING, EnemyBehavior.BURST),
    PlayStyle.BALANCED: (EnemyBehavior.BALANCED, EnemyBehavior.ADAPTIVE, EnemyBehavior.MIXED),
    PlayStyle.STEALTH: (EnemyBehavior.PATROL, EnemyBehavior.ALERT, EnemyBehavior.GROUP),
}


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


class ItemKind(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    POTION = "potion"
    SCROLL = "scroll"
    RELIC = "relic"


# ══════════════════════════════════════════════════════════
#  Room data
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass(frozen=True)
class PlacedEnemy:
    type: str
    position: Position
    behavior: EnemyBehavior


@dataclass(frozen=True)
class PlacedItem:
    type: ItemKind
    position: Position
    rarity: Rarity


@dataclass(frozen=True)
class PlacedHazard:
    type: str
    position: Position


@dataclass(frozen=True, eq=False)
class AIGeneratedRoom:
    """One generated room, immutable once built (layout is read-only)."""

    id: str
    type: RoomType
    layout: np.ndarray
    enemies: tuple[PlacedEnemy, ...] = ()
    items: tuple[PlacedItem, ...] = ()
    hazards: tuple[PlacedHazard, ...] = ()
    difficulty: float = 0.0
    ai_score: float = 0.0

    @property
    def size(self) -> int:
        return int(self.layout.shape[0])

    def tile_at(self, position: Position) -> Tile:
        return Tile(int(self.layout[position.y, position.x]))

    def to_dict(self) -> dict:
        """Plain-data view for the external spawner."""
        return {
            "id": self.id,
            "type": self.type.value,
            "layout": self.layout.tolist(),
            "enemies": [{"type": e.type, "position": {"x": e.position.x, "y": e.position.y},
                         "behavior": e.behavior.value} for e in self.enemies],
            "items": [{"type": i.type.value, "position": {"x": i.position.x, "y": i.position.y},
                       "rarity": i.rarity.value} for i in self.items],
            "hazards": [{"type": h.type, "position": {"x": h.position.x, "y": h.position.y}}
                        for h in self.hazards],
            "difficulty": self.difficulty,
            "aiScore": self.ai_score,
        }

    def ascii(self) -> str:
        """Text rendering: # wall  . floor  + door  * special  E I H entities."""
        glyphs = {Tile.WALL: "#", Tile.FLOOR: ".", Tile.DOOR: "+", Tile.SPECIAL: "*"}
        rows = [[glyphs[Tile(int(v))] for v in row] for row in self.layout]
        for marker, entities in (("H", self.hazards), ("I", self.items), ("E", self.enemies)):
            for ent in entities:
                rows[ent.position.y][ent.position.x] = marker
        return "\n".join("".join(r) for r in rows)


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class GenerationConfig:
    """Tunables for room synthesis."""

    base_size: int = ROOM_BASE_SIZE
    size_per_difficulty: float = ROOM_SIZE_PER_DIFFICULTY
    min_size: int = 3
    floor_chance: float = FLOOR_CHANCE
    boss_floor_chance: float = BOSS_FLOOR_CHANCE
    ca_iterations: int = CA_ITERATIONS
    ca_floor_survive: int = CA_FLOOR_SURVIVE
    ca_wall_to_floor: int = CA_WALL_TO_FLOOR
    safe_room_death_threshold: int = SAFE_ROOM_DEATH_THRESHOLD
    safe_room_chance: float = SAFE_ROOM_CHANCE
    preferred_enemy_chance: float = PREFERRED_ENEMY_CHANCE
    item_counts: dict[RoomType, int] = field(default_factory=lambda: {
        RoomType.TREASURE: TREASURE_ITEM_COUNT,
        RoomType.BOSS: BOSS_ITEM_COUNT,
    })


# ══════════════════════════════════════════════════════════
#  Grid helpers
# ══════════════════════════════════════════════════════════

def count_floor_neighbors(layout: np.ndarray) -> np.ndarray:
    """Per-cell count of FLOOR tiles among the 8 Moore neighbours."""
    floor = (layout == Tile.FLOOR).astype(np.int16)
    padded = np.pad(floor, 1)
    h, w = floor.shape
    counts = np.zeros_like(floor)
    for dy, dx in itertools.product((-1, 0, 1), repeat=2):
        if dy == 0 and dx == 0:
            continue
        counts += padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
    return counts


def smooth(layout: np.ndarray, floor_survive: int = CA_FLOOR_SURVIVE,
           wall_to_floor: int = CA_WALL_TO_FLOOR) -> np.ndarray:
    """One synchronous cellular-automaton pass over the interior."""
    counts = count_floor_neighbors(layout)
    inner = layout[1:-1, 1:-1]
    inner_counts = counts[1:-1, 1:-1]
    stays_floor = np.where(inner == Tile.FLOOR,
                           inner_counts >= floor_survive,
                           inner_counts >= wall_to_floor)
    out = layout.copy()
    out[1:-1, 1:-1] = np.where(stays_floor, Tile.FLOOR, Tile.WALL)
    return out


def floor_tiles(layout: np.ndarray) -> list[Position]:
    """Every FLOOR cell in row-major order."""
    ys, xs = np.nonzero(layout == Tile.FLOOR)
    return [Position(int(x), int(y)) for y, x in zip(ys, xs)]


def layout_complexity(layout: np.ndarray) -> float:
    """+0.5 per interior corridor / dead-end floor tile, +0.3 per junction."""
    counts = count_floor_neighbors(layout)[1:-1, 1:-1]
    floor = layout[1:-1, 1:-1] == Tile.FLOOR
    corridors = int(np.count_nonzero(floor & (counts <= 2)))
    junctions = int(np.count_nonzero(floor & (counts >= 3)))
    return corridors * CORRIDOR_COMPLEXITY + junctions * JUNCTION_COMPLEXITY


# ══════════════════════════════════════════════════════════
#  Room Generator
# ══════════════════════════════════════════════════════════

class RoomGenerator:
    """Builds rooms one at a time.

    Usage:
        gen = RoomGenerator(rng=np.random.default_rng(7))
        room = gen.generate_room(params, theme, room_index=0, total_rooms=10)
    """

    def __init__(self, weights: GenerationWeights | None = None,
                 rng: np.random.Generator | None = None,
                 config: GenerationConfig | None = None):
        self.cfg = config or GenerationConfig()
        self.weights = weights or GenerationWeights()
        self.rng = rng if rng is not None else np.random.default_rng()
        self._ids = itertools.count(1)

    def generate_room(self, params: DungeonGenerationParams, theme: DungeonTheme,
                      room_index: int, total_rooms: int) -> AIGeneratedRoom:
        room_type = self.predict_room_type(params, room_index, total_rooms)
        layout = self.generate_layout(room_type, params.desired_difficulty)

        enemies = self.place_enemies(layout, theme, params, room_type)
        items = self.place_items(layout, theme, room_type)
        hazards = self.place_hazards(layout, theme, params.desired_difficulty)

        complexity = layout_complexity(layout)
        difficulty = (len(enemies) * ENEMY_DIFFICULTY
                      + len(hazards) * HAZARD_DIFFICULTY
                      + complexity)
        ai_score = self.score_room(enemies, items, complexity, params)

        layout.flags.writeable = False
        room = AIGeneratedRoom(
            id=f"room-{next(self._ids)}-{room_index}",
            type=room_type,
            layout=layout,
            enemies=tuple(enemies),
            items=tuple(items),
            hazards=tuple(hazards),
            difficulty=difficulty,
            ai_score=ai_score,
        )
        logger.debug("%s: type=%s size=%d enemies=%d items=%d hazards=%d "
                     "difficulty=%.1f score=%.1f", room.id, room_type.value,
                     room.size, len(enemies), len(items), len(hazards),
                     difficulty, ai_score)
        return room

    # ── 1. Room type ──────────────────────────────────────

    def predict_room_type(self, params: DungeonGenerationParams,
                          room_index: int, total_rooms: int) -> RoomType:
        w = self.weights.room_type
        progress = room_index / total_rooms if total_rooms > 0 else 0.0
        deaths = params.previous_performance.death_count

        difficulty_f = params.desired_difficulty / 10
        deaths_f = deaths / 10
        aggressive = 1.0 if params.play_style is PlayStyle.AGGRESSIVE else 0.0
        defensive = 1.0 if params.play_style is PlayStyle.DEFENSIVE else 0.0
        stealth = 1.0 if params.play_style is PlayStyle.STEALTH else 0.0

        scores = {
            RoomType.COMBAT: difficulty_f * w[0] + aggressive * 0.5,
            RoomType.PUZZLE: progress * w[1] + defensive * 0.3,
            RoomType.TREASURE: deaths_f * w[2] + progress * 0.4,
            RoomType.BOSS: w[3] * 2 if progress > 0.8 else 0.0,
            RoomType.SAFE: w[4] if deaths_f > 0.5 else 0.0,
            RoomType.TRAP: difficulty_f * w[5] + stealth * 0.6,
        }

        if room_index == total_rooms - 1:
            return RoomType.BOSS

        if (deaths > self.cfg.safe_room_death_threshold
                and self.rng.random() < self.cfg.safe_room_chance):
            return RoomType.SAFE

        # First maximum wins ties
        best = ROOM_TYPE_ORDER[0]
        for room_type in ROOM_TYPE_ORDER[1:]:
            if scores[room_type] > scores[best]:
                best = room_type
        return best

    # ── 2. Layout ─────────────────────────────────────────

    def generate_layout(self, room_type: RoomType, difficulty: float) -> np.ndarray:
        cfg = self.cfg
        size = max(cfg.min_size,
                   math.floor(cfg.base_size + difficulty * cfg.size_per_difficulty))
        layout = np.full((size, size), Tile.WALL, dtype=np.int8)

        floor_chance = cfg.boss_floor_chance if room_type is RoomType.BOSS else cfg.floor_chance
        seed = self.rng.random((size - 2, size - 2)) < floor_chance
        layout[1:-1, 1:-1] = np.where(seed, Tile.FLOOR, Tile.WALL)

        for _ in range(cfg.ca_iterations):
            layout = smooth(layout, cfg.ca_floor_survive, cfg.ca_wall_to_floor)

        layout[0, size // 2] = Tile.DOOR
        layout[size - 1, size // 2] = Tile.DOOR
        return layout

    # ── 3. Enemies ────────────────────────────────────────

    def place_enemies(self, layout: np.ndarray, theme: DungeonTheme,
                      params: DungeonGenerationParams,
                      room_type: RoomType) -> list[PlacedEnemy]:
        if room_type in (RoomType.SAFE, RoomType.TREASURE) or not theme.enemy_types:
            return []

        if room_type is RoomType.BOSS:
            count = 1
        else:
            count = math.floor((2 + params.desired_difficulty) * self.weights.density_scale)

        tiles = floor_tiles(layout)
        enemies: list[PlacedEnemy] = []
        for _ in range(count):
            if not tiles:
                break
            tile = tiles.pop(int(self.rng.integers(len(tiles))))
            enemies.append(PlacedEnemy(
                type=self.select_enemy_type(theme, params),
                position=tile,
                behavior=self.select_enemy_behavior(params.play_style),
            ))
        return enemies

    def select_enemy_type(self, theme: DungeonTheme,
                          params: DungeonGenerationParams) -> str:
        history = params.previous_performance
        available = [e for e in theme.enemy_types if e not in history.avoided_enemies]
        if not available:
            return theme.enemy_types[0]

        # Enemies the player handles well keep the run flowing
        preferred = [e for e in available if e in history.preferred_enemies]
        if preferred and self.rng.random() < self.cfg.preferred_enemy_chance:
            return preferred[int(self.rng.integers(len(preferred)))]
        return available[int(self.rng.integers(len(available)))]

    def select_enemy_behavior(self, play_style: PlayStyle) -> EnemyBehavior:
        pool = BEHAVIOR_POOLS.get(PlayStyle(play_style), BEHAVIOR_POOLS[PlayStyle.BALANCED])
        return pool[int(self.rng.integers(len(pool)))]

    # ── 4. Items ──────────────────────────────────────────

    def place_items(self, layout: np.ndarray, theme: DungeonTheme,
                    room_type: RoomType) -> list[PlacedItem]:
        count = self.cfg.item_counts.get(room_type, DEFAULT_ITEM_COUNT)
        tiles = floor_tiles(layout)
        items: list[PlacedItem] = []
        for _ in range(count):
            if not tiles:
                break
            tile = tiles.pop(int(self.rng.integers(len(tiles))))
            rarity = self.select_item_rarity(theme.loot_tier)
            kinds = tuple(ItemKind)
            items.append(PlacedItem(
                type=kinds[int(self.rng.integers(len(kinds)))],
                position=tile,
                rarity=rarity,
            ))
        return items

    def select_item_rarity(self, loot_tier: int) -> Rarity:
        roll = self.rng.random()
        tier_bonus = loot_tier * 0.1
        if roll < 0.05 + tier_bonus:
            return Rarity.MYTHIC
        if roll < 0.15 + tier_bonus:
            return Rarity.LEGENDARY
        if roll < 0.35 + tier_bonus:
            return Rarity.EPIC
        if roll < 0.65:
            return Rarity.RARE
        return Rarity.COMMON

    # ── 5. Hazards ────────────────────────────────────────

    def place_hazards(self, layout: np.ndarray, theme: DungeonTheme,
                      difficulty: float) -> list[PlacedHazard]:
        if not theme.hazards:
            return []
        count = math.floor(difficulty / 2)
        tiles = floor_tiles(layout)
        hazards: list[PlacedHazard] = []
        for _ in range(count):
            if not tiles:
                break
            tile = tiles.pop(int(self.rng.integers(len(tiles))))
            hazards.append(PlacedHazard(
                type=theme.hazards[int(self.rng.integers(len(theme.hazards)))],
                position=tile,
            ))
        return hazards

    # ── 7. Scoring ────────────────────────────────────────

    @staticmethod
    def score_room(enemies: list[PlacedEnemy], items: list[PlacedItem],
                   complexity: float, params: DungeonGenerationParams) -> float:
        score = 0.0

        ratio = len(enemies) / (len(items) + 1)
        if 0.5 < ratio < 3:
            score += BALANCE_SCORE_BONUS

        score += len({e.type for e in enemies}) * VARIETY_SCORE
        score += complexity

        preferred = params.previous_performance.preferred_enemies
        score += sum(1 for e in enemies if e.type in preferred) * PREFERENCE_SCORE

        return clamp(score, 0.0, AI_SCORE_MAX)
