"""
Keyboard and mouse state, rebuilt from pygame events each frame.

Both states distinguish held buttons from edges: `pressed` is true for as
long as a key is down, `just_pressed` only on the frame it went down.
Call `begin_frame()` before feeding the frame's events.
"""
from enum import IntEnum
from typing import Iterable, Optional, Set, Tuple

import pygame
from pygame.math import Vector2

from blockrace.engine.space import screen_to_world


class MouseButton(IntEnum):
    """pygame mouse button numbers."""
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


class KeyboardState:
    """Held and edge-triggered key state, keyed by pygame key codes."""

    def __init__(self):
        self._pressed: Set[int] = set()
        self._just_pressed: Set[int] = set()
        self._just_released: Set[int] = set()

    def begin_frame(self) -> None:
        """Forget last frame's edges."""
        self._just_pressed.clear()
        self._just_released.clear()

    def press(self, key: int) -> None:
        if key not in self._pressed:
            self._just_pressed.add(key)
        self._pressed.add(key)

    def release(self, key: int) -> None:
        if key in self._pressed:
            self._just_released.add(key)
        self._pressed.discard(key)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            self.press(event.key)
        elif event.type == pygame.KEYUP:
            self.release(event.key)
        elif event.type == pygame.WINDOWFOCUSLOST:
            # Key-up events are lost while unfocused
            for key in list(self._pressed):
                self.release(key)

    def pressed(self, key: int) -> bool:
        return key in self._pressed

    def pressed_any(self, keys: Iterable[int]) -> bool:
        return any(key in self._pressed for key in keys)

    def just_pressed(self, key: int) -> bool:
        return key in self._just_pressed

    def just_pressed_any(self, keys: Iterable[int]) -> bool:
        return any(key in self._just_pressed for key in keys)

    def just_released(self, key: int) -> bool:
        return key in self._just_released


class MouseState:
    """Pointer location (world space) and button state."""

    def __init__(self):
        self._location: Optional[Vector2] = None
        self._pressed: Set[int] = set()
        self._just_pressed: Set[int] = set()
        self._just_released: Set[int] = set()

    def begin_frame(self) -> None:
        self._just_pressed.clear()
        self._just_released.clear()

    def move_to(self, location: Optional[Vector2]) -> None:
        """Set the pointer location, or None when it leaves the window."""
        self._location = Vector2(location) if location is not None else None

    def press(self, button: int) -> None:
        if button not in self._pressed:
            self._just_pressed.add(button)
        self._pressed.add(button)

    def release(self, button: int) -> None:
        if button in self._pressed:
            self._just_released.add(button)
        self._pressed.discard(button)

    def handle_event(self, event: pygame.event.Event, window: Vector2) -> None:
        """Apply a pygame event. `window` is used to convert positions."""
        if event.type == pygame.MOUSEMOTION:
            self.move_to(screen_to_world(event.pos, window))
        elif event.type == pygame.MOUSEBUTTONDOWN:
            self.move_to(screen_to_world(event.pos, window))
            self.press(event.button)
        elif event.type == pygame.MOUSEBUTTONUP:
            self.move_to(screen_to_world(event.pos, window))
            self.release(event.button)
        elif event.type == pygame.WINDOWLEAVE:
            self.move_to(None)
        elif event.type == pygame.WINDOWFOCUSLOST:
            # Button-up events are lost while unfocused
            for button in list(self._pressed):
                self.release(button)

    def location(self) -> Optional[Vector2]:
        """Pointer position in world space, or None if outside the window."""
        return Vector2(self._location) if self._location is not None else None

    def pressed(self, button: int) -> bool:
        return button in self._pressed

    def just_pressed(self, button: int) -> bool:
        return button in self._just_pressed

    def just_released(self, button: int) -> bool:
        return button in self._just_released
