"""Draws engine sprites and texts onto a pygame surface."""

import math
from typing import Dict, Tuple

import pygame

from blockrace.config import BACKGROUND_COLOR, TEXT_COLOR
from blockrace.engine.entities import Sprite, Text
from blockrace.engine.space import world_to_screen


class Renderer:
    """Renders sprites as rotated coloured rectangles and texts as labels.

    Everything is drawn in layer order. World coordinates are converted
    using the surface size, so resizing the window keeps the origin centred.
    """

    def __init__(self, background: Tuple[int, int, int] = BACKGROUND_COLOR):
        self._background = background
        self._fonts: Dict[int, pygame.font.Font] = {}
        self._surfaces: Dict[Tuple, pygame.Surface] = {}

    def _get_font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def _sprite_surface(self, sprite: Sprite) -> pygame.Surface:
        w, h = sprite.size
        key = (sprite.preset, round(w), round(h))
        if key not in self._surfaces:
            surf = pygame.Surface((max(1, round(w)), max(1, round(h))), pygame.SRCALPHA)
            surf.fill(sprite.preset.color)
            pygame.draw.rect(surf, (255, 255, 255), surf.get_rect(), 2)
            self._surfaces[key] = surf
        return self._surfaces[key]

    def render(self, engine, screen: pygame.Surface) -> None:
        screen.fill(self._background)
        window = pygame.math.Vector2(screen.get_size())

        drawables = [(s.layer, 0, s) for s in engine.sprites.values()]
        drawables += [(t.layer, 1, t) for t in engine.texts.values()]
        drawables.sort(key=lambda d: (d[0], d[1]))

        for _, kind, item in drawables:
            if kind == 0:
                self._render_sprite(item, screen, window)
            else:
                self._render_text(item, screen, window)

    def _render_sprite(self, sprite: Sprite, screen: pygame.Surface,
                       window: pygame.math.Vector2) -> None:
        surf = pygame.transform.rotate(self._sprite_surface(sprite),
                                       math.degrees(sprite.rotation))
        rect = surf.get_rect(center=world_to_screen(sprite.translation, window))
        screen.blit(surf, rect)

    def _render_text(self, text: Text, screen: pygame.Surface,
                     window: pygame.math.Vector2) -> None:
        font = self._get_font(int(text.font_size))
        surf = font.render(text.value, True, TEXT_COLOR)
        rect = surf.get_rect(center=world_to_screen(text.translation, window))
        screen.blit(surf, rect)
