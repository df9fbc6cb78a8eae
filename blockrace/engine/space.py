"""
World/screen coordinate helpers.

World space has its origin at the window centre with y pointing up.
Screen space is pygame's: origin top-left, y pointing down.
"""
import math
from typing import Tuple

from pygame.math import Vector2

Vec2 = Vector2

# Rotation constants (radians, counter-clockwise from +x)
EAST = 0.0
NORTH_EAST = math.pi / 4
NORTH = math.pi / 2
NORTH_WEST = 3 * math.pi / 4
WEST = math.pi
SOUTH_WEST = 5 * math.pi / 4
SOUTH = 3 * math.pi / 2
SOUTH_EAST = 7 * math.pi / 4


def world_to_screen(point: Vector2, window: Vector2) -> Tuple[float, float]:
    """Convert a world-space point to screen pixels."""
    return (window.x / 2 + point.x, window.y / 2 - point.y)


def screen_to_world(pos: Tuple[float, float], window: Vector2) -> Vector2:
    """Convert a screen pixel position to world space."""
    return Vector2(pos[0] - window.x / 2, window.y / 2 - pos[1])
