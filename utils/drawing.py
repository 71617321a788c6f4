"""drawing.py - pygame drawing helpers for the preview window.

Kept out of the utils package namespace so the core never imports pygame.
"""

import pygame

from settings import WHITE, FONT_SIZE

_font_cache: dict[int, pygame.font.Font] = {}


def _font(size: int) -> pygame.font.Font:
    font = _font_cache.get(size)
    if font is None:
        font = pygame.font.SysFont(None, size)
        _font_cache[size] = font
    return font


def draw_text(surface, text, x, y, color=WHITE, size=FONT_SIZE):
    """Render a single line of text at (x, y)."""
    rendered = _font(size).render(text, True, color)
    surface.blit(rendered, (x, y))


def draw_lines(surface, lines, x, y, color=WHITE, size=FONT_SIZE, spacing=4):
    """Render several lines top-down; returns the y below the last one."""
    for line in lines:
        draw_text(surface, line, x, y, color, size)
        y += size + spacing
    return y


def draw_panel(surface, rect, color=(15, 15, 20), alpha=180):
    """Semi-transparent background panel."""
    panel = pygame.Surface((rect[2], rect[3]), pygame.SRCALPHA)
    panel.fill((*color, alpha))
    surface.blit(panel, (rect[0], rect[1]))
