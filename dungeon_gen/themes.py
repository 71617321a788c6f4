"""
themes.py – Predefined dungeon themes (biome bundles).

A theme flavors a whole dungeon: which enemies spawn, which hazards
appear, and the loot tier that skews item rarity upward.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from settings import THEME_LEVEL_TOLERANCE


class Biome(str, Enum):
    CRYPT = "crypt"
    FOREST = "forest"
    VOLCANO = "volcano"
    ICE = "ice"
    VOID = "void"
    CELESTIAL = "celestial"


@dataclass(frozen=True)
class DungeonTheme:
    id: str
    name: str
    biome: Biome
    difficulty: int
    enemy_types: tuple[str, ...]
    hazards: tuple[str, ...]
    loot_tier: int


THEMES: tuple[DungeonTheme, ...] = (
    DungeonTheme(
        id="crypt",
        name="Ancient Crypt",
        biome=Biome.CRYPT,
        difficulty=3,
        enemy_types=("skeleton", "ghost", "zombie", "necromancer"),
        hazards=("spike-trap", "poison-gas", "curse-zone"),
        loot_tier=2,
    ),
    DungeonTheme(
        id="volcano",
        name="Volcanic Depths",
        biome=Biome.VOLCANO,
        difficulty=7,
        enemy_types=("fire-elemental", "lava-beast", "flame-imp"),
        hazards=("lava-pool", "fire-geyser", "heat-wave"),
        loot_tier=4,
    ),
    DungeonTheme(
        id="void",
        name="Void Realm",
        biome=Biome.VOID,
        difficulty=9,
        enemy_types=("void-spawn", "shadow-beast", "eldritch-horror"),
        hazards=("void-rift", "madness-zone", "gravity-well"),
        loot_tier=5,
    ),
)


def select_theme(player_level: float) -> DungeonTheme:
    """First theme whose difficulty is within tolerance of the player's
    level; the first theme otherwise."""
    for theme in THEMES:
        if abs(theme.difficulty - player_level) < THEME_LEVEL_TOLERANCE:
            return theme
    return THEMES[0]


def get_theme(theme_id: str) -> DungeonTheme | None:
    for theme in THEMES:
        if theme.id == theme_id:
            return theme
    return None
