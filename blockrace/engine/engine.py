"""
Engine facade over pygame.

`Engine` is the per-tick view handed to game logic: entity tables keyed by
label, input state, the collision event queue, audio and timing. It has no
display dependency, so logic can be driven headless in tests.

`Game` owns setup and the frame loop:

    game = Game()
    game.window_settings(WindowSettings(title="Block Race"))
    game.add_sprite("player", SpritePreset.RACING_CAR_GREEN)
    game.add_logic(controller)
    game.run(RoundState())
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import pygame
from pygame.math import Vector2

from blockrace import config
from blockrace.engine.audio import AudioManager
from blockrace.engine.collision import CollisionDetector, CollisionEvent
from blockrace.engine.entities import Sprite, SpritePreset, Text
from blockrace.engine.input import KeyboardState, MouseState
from blockrace.engine.renderer import Renderer
from blockrace.logging import get_logger

log = get_logger('engine')

Logic = Callable[['Engine', Any], None]


class MissingEntityError(KeyError):
    """A sprite or text that game logic relies on does not exist."""

    def __init__(self, kind: str, label: str):
        super().__init__(label)
        self.kind = kind
        self.label = label

    def __str__(self) -> str:
        return f"no {self.kind} labelled {self.label!r}"


@dataclass
class WindowSettings:
    title: str = config.WINDOW_TITLE
    width: int = config.SCREEN_WIDTH
    height: int = config.SCREEN_HEIGHT
    fullscreen: bool = False
    resizable: bool = True


class Engine:
    """
    Per-tick engine state.

    Attributes:
        sprites: label -> Sprite
        texts: label -> Text
        keyboard_state: Keys held / pressed this frame
        mouse_state: Pointer location and buttons
        collision_events: Events detected for this frame; logic drains it
        audio_manager: Sound effects and music
        window_dimensions: Current window size in pixels
        delta: Seconds since the previous frame
        time_since_startup: Seconds since the loop started
        should_exit: Set by logic to stop the loop after this frame
    """

    def __init__(
        self,
        window_dimensions: Tuple[float, float] = (config.SCREEN_WIDTH, config.SCREEN_HEIGHT),
        audio_manager: Optional[AudioManager] = None,
    ):
        self.sprites: Dict[str, Sprite] = {}
        self.texts: Dict[str, Text] = {}
        self.keyboard_state = KeyboardState()
        self.mouse_state = MouseState()
        self.collision_events: List[CollisionEvent] = []
        self.audio_manager = audio_manager or AudioManager(enabled=False)
        self.window_dimensions = Vector2(window_dimensions)
        self.delta = 0.0
        self.time_since_startup = 0.0
        self.frame = 0
        self.should_exit = False

    # -- entities -----------------------------------------------------------

    def add_sprite(self, label: str, preset: SpritePreset) -> Sprite:
        """Create a sprite, replacing any existing one with the same label."""
        sprite = Sprite(label=label, preset=preset)
        self.sprites[label] = sprite
        return sprite

    def remove_sprite(self, label: str) -> Optional[Sprite]:
        """Remove a sprite. Removing a missing label is a no-op."""
        return self.sprites.pop(label, None)

    def add_text(self, label: str, value: str) -> Text:
        text = Text(label=label, value=value)
        self.texts[label] = text
        return text

    def sprite(self, label: str) -> Sprite:
        """Look up a sprite that must exist."""
        try:
            return self.sprites[label]
        except KeyError:
            raise MissingEntityError('sprite', label) from None

    def text(self, label: str) -> Text:
        """Look up a text that must exist."""
        try:
            return self.texts[label]
        except KeyError:
            raise MissingEntityError('text', label) from None

    # -- frame bookkeeping --------------------------------------------------

    def begin_frame(self, delta: float, time_since_startup: float) -> None:
        """Reset per-frame input edges and advance timing."""
        self.keyboard_state.begin_frame()
        self.mouse_state.begin_frame()
        self.delta = delta
        self.time_since_startup = time_since_startup
        self.frame += 1

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.should_exit = True
            return
        self.keyboard_state.handle_event(event)
        self.mouse_state.handle_event(event, self.window_dimensions)


class Game:
    """
    Setup surface and frame loop.

    Entities added before `run()` go straight into the engine's tables.
    Each frame: poll events, detect collisions, run logic, render.
    """

    def __init__(self, audio_enabled: bool = config.AUDIO_ENABLED, fps: int = config.FPS):
        self._window = WindowSettings()
        self._logic: List[Logic] = []
        self._fps = fps
        self._collisions = CollisionDetector()
        self.engine = Engine(
            window_dimensions=(self._window.width, self._window.height),
            audio_manager=AudioManager(enabled=audio_enabled),
        )

    @property
    def audio_manager(self) -> AudioManager:
        return self.engine.audio_manager

    def window_settings(self, settings: WindowSettings) -> None:
        self._window = settings
        self.engine.window_dimensions = Vector2(settings.width, settings.height)

    def add_sprite(self, label: str, preset: SpritePreset) -> Sprite:
        return self.engine.add_sprite(label, preset)

    def add_text(self, label: str, value: str) -> Text:
        return self.engine.add_text(label, value)

    def add_logic(self, logic: Logic) -> None:
        """Register a callable run once per frame as logic(engine, state)."""
        self._logic.append(logic)

    def _open_window(self) -> pygame.Surface:
        flags = 0
        if self._window.fullscreen:
            flags |= pygame.FULLSCREEN
            size = (0, 0)
        else:
            size = (self._window.width, self._window.height)
            if self._window.resizable:
                flags |= pygame.RESIZABLE
        screen = pygame.display.set_mode(size, flags)
        pygame.display.set_caption(self._window.title)
        return screen

    def step(self, state: Any, delta: float, time_since_startup: float,
             events: Optional[List[pygame.event.Event]] = None) -> None:
        """Run one frame of input, collision detection and logic (no drawing)."""
        engine = self.engine
        engine.begin_frame(delta, time_since_startup)
        for event in events or []:
            engine.handle_event(event)
        engine.collision_events.extend(self._collisions.detect(engine.sprites))
        for logic in self._logic:
            logic(engine, state)

    def run(self, state: Any, max_frames: Optional[int] = None) -> int:
        """
        Run the frame loop until logic sets should_exit, the window closes,
        or max_frames frames have run.

        Returns:
            Number of frames run
        """
        pygame.init()
        screen = self._open_window()
        self.engine.window_dimensions = Vector2(screen.get_size())
        renderer = Renderer()
        clock = pygame.time.Clock()
        start = time.monotonic()
        frames = 0

        log.info("Starting '%s' at %dx%d", self._window.title, *screen.get_size())
        try:
            while not self.engine.should_exit:
                delta = clock.tick(self._fps) / 1000.0
                screen = pygame.display.get_surface()
                self.engine.window_dimensions = Vector2(screen.get_size())

                self.step(state, delta, time.monotonic() - start, pygame.event.get())

                renderer.render(self.engine, screen)
                pygame.display.flip()

                frames += 1
                if max_frames is not None and frames >= max_frames:
                    break
        except Exception:
            log.exception("Frame %d failed", self.engine.frame)
            raise
        finally:
            self.engine.audio_manager.stop_music()
            pygame.quit()

        log.info("Stopped after %d frames", frames)
        return frames
