"""
viewer.py – pygame preview of a generated dungeon.

Development tool only: draws one room at a time with its entities, a
side panel with the room's numbers, and (optionally) a boss's AI
insights. It never touches generation or AI state.

Keys:
    LEFT / RIGHT   previous / next room
    R              regenerate the dungeon
    ESC            quit
"""

from __future__ import annotations

import logging

import pygame

from settings import (
    PREVIEW_WIDTH, PREVIEW_HEIGHT, PREVIEW_FPS, PREVIEW_TITLE, TILE_PIXELS,
    WHITE, BG_COLOR, WALL_COLOR, FLOOR_COLOR, DOOR_COLOR, SPECIAL_COLOR,
    ENEMY_COLOR, ITEM_COLOR, HAZARD_COLOR,
)
from dungeon_gen import AIGeneratedRoom, GeneratedDungeon, Tile
from utils.drawing import draw_text, draw_lines, draw_panel

logger = logging.getLogger(__name__)

_TILE_COLORS = {
    Tile.WALL: WALL_COLOR,
    Tile.FLOOR: FLOOR_COLOR,
    Tile.DOOR: DOOR_COLOR,
    Tile.SPECIAL: SPECIAL_COLOR,
}

_MAP_X = 20
_MAP_Y = 40
_PANEL_X = PREVIEW_WIDTH - 320
_PANEL_W = 300
_LABEL_COLOR = (180, 180, 180)
_TITLE_COLOR = (100, 220, 255)


def draw_room(surface: pygame.Surface, room: AIGeneratedRoom,
              x: int = _MAP_X, y: int = _MAP_Y, tile: int = TILE_PIXELS):
    """Tiles first, then hazards, items and enemies on top."""
    for (row, col), value in _iter_cells(room):
        color = _TILE_COLORS[Tile(int(value))]
        pygame.draw.rect(surface, color, (x + col * tile, y + row * tile, tile - 1, tile - 1))

    half = tile // 2
    for hazard in room.hazards:
        cx, cy = x + hazard.position.x * tile, y + hazard.position.y * tile
        pygame.draw.rect(surface, HAZARD_COLOR, (cx + 2, cy + 2, tile - 5, tile - 5), 2)
    for item in room.items:
        cx, cy = x + item.position.x * tile + half, y + item.position.y * tile + half
        pygame.draw.polygon(surface, ITEM_COLOR,
                            [(cx, cy - half + 2), (cx + half - 2, cy),
                             (cx, cy + half - 2), (cx - half + 2, cy)])
    for enemy in room.enemies:
        cx, cy = x + enemy.position.x * tile + half, y + enemy.position.y * tile + half
        pygame.draw.circle(surface, ENEMY_COLOR, (cx, cy), max(2, half - 2))


def _iter_cells(room: AIGeneratedRoom):
    for row in range(room.size):
        for col in range(room.size):
            yield (row, col), room.layout[row, col]


class DungeonViewer:
    """Steps through the rooms of a GeneratedDungeon.

    Usage
    -----
    viewer = DungeonViewer(dungeon, regenerate=lambda: gen.generate_dungeon(params))
    viewer.run()
    """

    def __init__(self, dungeon: GeneratedDungeon, regenerate=None,
                 insights: str | None = None) -> None:
        self._dungeon = dungeon
        self._regenerate = regenerate
        self._insights = insights
        self._index = 0
        self.running = False

    def run(self) -> None:
        pygame.init()
        screen = pygame.display.set_mode((PREVIEW_WIDTH, PREVIEW_HEIGHT))
        pygame.display.set_caption(PREVIEW_TITLE)
        clock = pygame.time.Clock()
        self.running = True
        try:
            while self.running:
                clock.tick(PREVIEW_FPS)
                for event in pygame.event.get():
                    self._handle(event)
                self._draw(screen)
                pygame.display.flip()
        finally:
            pygame.quit()

    # ── Events ────────────────────────────────────────────

    def _handle(self, event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            n = len(self._dungeon.rooms)
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_RIGHT and n:
                self._index = (self._index + 1) % n
            elif event.key == pygame.K_LEFT and n:
                self._index = (self._index - 1) % n
            elif event.key == pygame.K_r and self._regenerate is not None:
                self._dungeon = self._regenerate()
                self._index = 0
                logger.info("Regenerated dungeon (%d rooms)", len(self._dungeon.rooms))

    # ── Drawing ───────────────────────────────────────────

    def _draw(self, screen: pygame.Surface) -> None:
        screen.fill(BG_COLOR)
        d = self._dungeon
        draw_text(screen,
                  f"{d.theme.name}  |  difficulty {d.estimated_difficulty:.1f}"
                  f"  |  confidence {d.ai_confidence:.2f}",
                  _MAP_X, 10, _TITLE_COLOR, 22)

        if not d.rooms:
            draw_text(screen, "No rooms generated", _MAP_X, _MAP_Y, WHITE)
            return

        room = d.rooms[self._index]
        tile = min(TILE_PIXELS, (PREVIEW_HEIGHT - _MAP_Y - 20) // max(1, room.size))
        draw_room(screen, room, tile=tile)

        draw_panel(screen, (_PANEL_X, _MAP_Y, _PANEL_W, PREVIEW_HEIGHT - _MAP_Y - 20))
        y = draw_lines(screen, [
            f"Room {self._index + 1}/{len(d.rooms)}  ({room.id})",
            f"Type: {room.type.value}",
            f"Size: {room.size}x{room.size}",
            f"Enemies: {len(room.enemies)}",
            f"Items: {len(room.items)}",
            f"Hazards: {len(room.hazards)}",
            f"Difficulty: {room.difficulty:.1f}",
            f"AI score: {room.ai_score:.1f}",
        ], _PANEL_X + 10, _MAP_Y + 10)

        kinds = sorted({e.type for e in room.enemies})
        if kinds:
            y = draw_lines(screen, ["Enemy types:"] + [f"  {k}" for k in kinds],
                           _PANEL_X + 10, y + 10, _LABEL_COLOR, 18)

        if self._insights:
            y = draw_lines(screen, ["Boss AI:"] + self._insights.splitlines(),
                           _PANEL_X + 10, y + 10, _LABEL_COLOR, 18)

        draw_text(screen, "LEFT/RIGHT = room   R = regenerate   ESC = quit",
                  _MAP_X, PREVIEW_HEIGHT - 24, _LABEL_COLOR, 18)
