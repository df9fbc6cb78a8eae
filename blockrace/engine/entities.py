"""
Sprite and text entities owned by the engine.

Entities are addressed by label. The engine holds them in plain dicts;
game logic mutates their fields in place each tick.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

import pygame
from pygame.math import Vector2


class SpritePreset(Enum):
    """Built-in sprite looks: (width, height, RGB color) at scale 1.0."""
    RACING_CAR_BLACK = (70, 36, (30, 30, 30))
    RACING_CAR_BLUE = (70, 36, (40, 90, 220))
    RACING_CAR_GREEN = (70, 36, (40, 180, 70))
    RACING_CAR_RED = (70, 36, (210, 40, 40))
    RACING_CAR_YELLOW = (70, 36, (230, 200, 40))
    ROLLING_BLOCK_SMALL = (40, 40, (200, 120, 60))
    ROLLING_BLOCK_SQUARE = (64, 64, (170, 100, 50))
    ROLLING_BALL_RED = (48, 48, (220, 60, 60))

    @property
    def size(self) -> Tuple[int, int]:
        return (self.value[0], self.value[1])

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.value[2]


@dataclass
class Sprite:
    """A labelled, positioned sprite.

    Attributes:
        label: Unique key in the engine's sprite table
        preset: Visual preset (also defines collider size)
        translation: Centre position in world space
        rotation: Radians, counter-clockwise
        scale: Uniform scale applied to the preset size
        layer: Draw order (higher draws on top)
        collision: Whether the sprite takes part in collision detection
    """
    label: str
    preset: SpritePreset
    translation: Vector2 = field(default_factory=Vector2)
    rotation: float = 0.0
    scale: float = 1.0
    layer: float = 0.0
    collision: bool = False

    @property
    def size(self) -> Tuple[float, float]:
        w, h = self.preset.size
        return (w * self.scale, h * self.scale)

    def get_rect(self) -> pygame.Rect:
        """Axis-aligned collider centred on translation."""
        w, h = self.size
        rect = pygame.Rect(0, 0, round(w), round(h))
        rect.center = (round(self.translation.x), round(self.translation.y))
        return rect


@dataclass
class Text:
    """A labelled line of on-screen text."""
    label: str
    value: str
    translation: Vector2 = field(default_factory=Vector2)
    font_size: float = 30.0
    layer: float = 900.0
