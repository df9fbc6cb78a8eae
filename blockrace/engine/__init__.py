"""
Engine facade for Block Race.

Provides:
- engine: Engine (per-tick state) and Game (setup + frame loop)
- entities: Sprite, Text and SpritePreset
- collision: Collision pair detection with begin/end events
- input: Keyboard and mouse state
- audio: Procedural sound effects and music
- timer: Countdown timer advanced by tick time
"""

from blockrace.engine.audio import AudioManager, MusicPreset, SfxPreset
from blockrace.engine.collision import (
    CollisionDetector,
    CollisionEvent,
    CollisionPair,
    CollisionState,
)
from blockrace.engine.engine import Engine, Game, MissingEntityError, WindowSettings
from blockrace.engine.entities import Sprite, SpritePreset, Text
from blockrace.engine.input import KeyboardState, MouseButton, MouseState
from blockrace.engine.space import NORTH_EAST, Vec2
from blockrace.engine.timer import Timer, TimerMode

__all__ = [
    'AudioManager',
    'MusicPreset',
    'SfxPreset',
    'CollisionDetector',
    'CollisionEvent',
    'CollisionPair',
    'CollisionState',
    'Engine',
    'Game',
    'MissingEntityError',
    'WindowSettings',
    'Sprite',
    'SpritePreset',
    'Text',
    'KeyboardState',
    'MouseButton',
    'MouseState',
    'NORTH_EAST',
    'Vec2',
    'Timer',
    'TimerMode',
]
