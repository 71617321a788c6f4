"""
dungeon_gen package – Player-adaptive procedural dungeon generation.

Modules:
    themes             – Predefined biome themes and level-based selection
    params             – Generation inputs, feedback, learned weights
    room_generator     – One room: type, CA layout, enemies, items, hazards, scores
    dungeon_generator  – Whole dungeon: theme, rooms, difficulty, confidence
"""

from .themes import Biome, DungeonTheme, THEMES, select_theme, get_theme
from .params import (
    PlayStyle, PreviousPerformance, DungeonGenerationParams,
    RoomFeedback, GenerationWeights,
)
from .room_generator import (
    RoomType, Tile, EnemyBehavior, ItemKind, Rarity, Position,
    PlacedEnemy, PlacedItem, PlacedHazard, AIGeneratedRoom,
    GenerationConfig, RoomGenerator,
)
from .dungeon_generator import DungeonGenerator, GeneratedDungeon, generate_dungeon
