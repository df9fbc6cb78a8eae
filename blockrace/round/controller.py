"""
Round controller and one-time round setup.

The controller runs once per engine tick:

1. exit check
2. collision pickups (score / high score)
3. player movement
4. timed obstacle spawns
5. click obstacle spawns
6. score reset
7. HUD placement

Setup functions create the entities the controller depends on; the
controller treats any of them going missing as fatal.
"""

import math
import random
from typing import Optional

import pygame

from blockrace import config
from blockrace.engine import (
    NORTH_EAST,
    Engine,
    Game,
    MouseButton,
    MusicPreset,
    SfxPreset,
    SpritePreset,
    Vec2,
)
from blockrace.logging import emit_record, get_logger
from blockrace.round.state import RoundState
from blockrace.variant import ResetTrigger, VariantConfig

log = get_logger('round')

PLAYER = "player"
SCORE_TEXT = "score"
HIGH_SCORE_TEXT = "high_score"

OBSTACLE_PRESET = SpritePreset.ROLLING_BLOCK_SMALL
PICKUP_SFX = SfxPreset.MINIMIZE_1
MUSIC = MusicPreset.CLASSY_8_BIT

QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)
UP_KEYS = (pygame.K_UP, pygame.K_w)
DOWN_KEYS = (pygame.K_DOWN, pygame.K_s)
LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
RESET_KEY = pygame.K_r

# HUD placement relative to the window's top corners
SCORE_OFFSET = Vec2(-80.0, -30.0)
HIGH_SCORE_OFFSET = Vec2(110.0, -30.0)
BOB_FREQUENCY = 3.0
BOB_AMPLITUDE = 5.0


def score_label(score: int) -> str:
    return f"Score: {score}"


def high_score_label(high_score: int) -> str:
    return f"High Score: {high_score}"


# =============================================================================
# Setup
# =============================================================================

def add_player_sprite(game: Game) -> None:
    player = game.add_sprite(PLAYER, SpritePreset.RACING_CAR_GREEN)
    player.translation = Vec2(0.0, 0.0)
    player.rotation = NORTH_EAST
    player.scale = 1.0
    player.layer = 1.0
    player.collision = True


def add_ui(game: Game) -> None:
    score_text = game.add_text(SCORE_TEXT, score_label(0))
    score_text.translation = Vec2(520.0, 320.0)
    high_score_text = game.add_text(HIGH_SCORE_TEXT, high_score_label(0))
    high_score_text.translation = Vec2(-520.0, 320.0)


def start_music(game: Game, variant: VariantConfig) -> None:
    if variant.music:
        game.audio_manager.play_music(MUSIC, config.MUSIC_VOLUME)


# =============================================================================
# Per-tick controller
# =============================================================================

class RoundController:
    """
    Per-tick game logic, registered with `Game.add_logic`.

    Args:
        variant: Tuning for this round
        rng: Random source for spawn positions (seed it for repeatable runs)
    """

    def __init__(self, variant: VariantConfig, rng: Optional[random.Random] = None):
        self._variant = variant
        self._rng = rng or random.Random()

    @property
    def variant(self) -> VariantConfig:
        return self._variant

    def __call__(self, engine: Engine, state: RoundState) -> None:
        self.quit_from_game(engine)
        self.handle_collision_events(engine, state)
        self.handle_player_movement(engine)
        self.put_blocks_on_timer(engine, state)
        self.handle_block_mouse_input(engine, state)
        self.reset_score(engine, state)
        self.keep_scores_at_screen_edge(engine)

    def quit_from_game(self, engine: Engine) -> None:
        if engine.keyboard_state.pressed_any(QUIT_KEYS):
            log.info("Quit requested")
            engine.should_exit = True

    def handle_collision_events(self, engine: Engine, state: RoundState) -> None:
        events = list(engine.collision_events)
        engine.collision_events.clear()

        for event in events:
            if not event.state.is_begin() or not event.pair.either_equals_to(PLAYER):
                continue

            other = event.pair.other(PLAYER)
            if engine.remove_sprite(other) is not None:
                log.debug("Picked up %s", other)
            if self._variant.collision_sfx:
                engine.audio_manager.play_sfx(PICKUP_SFX, config.SFX_VOLUME)
            self.update_score(engine, state)

    def update_score(self, engine: Engine, state: RoundState) -> None:
        new_high = state.record_pickup()
        engine.text(SCORE_TEXT).value = score_label(state.score)
        if new_high:
            engine.text(HIGH_SCORE_TEXT).value = high_score_label(state.high_score)
        emit_record('score', {
            'type': 'pickup',
            'frame': engine.frame,
            'score': state.score,
            'high_score': state.high_score,
        })

    def handle_player_movement(self, engine: Engine) -> None:
        player = engine.sprite(PLAYER)
        step = self._variant.player_speed * engine.delta
        keys = engine.keyboard_state

        if keys.pressed_any(UP_KEYS):
            player.translation.y += step
        if keys.pressed_any(DOWN_KEYS):
            player.translation.y -= step
        if keys.pressed_any(LEFT_KEYS):
            player.translation.x -= step
        if keys.pressed_any(RIGHT_KEYS):
            player.translation.x += step

    def put_blocks_on_timer(self, engine: Engine, state: RoundState) -> None:
        area = self._variant.spawn_area
        for _ in range(state.spawn_timer.tick(engine.delta).times_finished_this_tick):
            position = Vec2(
                self._rng.uniform(-area.half_width, area.half_width),
                self._rng.uniform(-area.half_height, area.half_height),
            )
            self.spawn_block(engine, state, position)

    def handle_block_mouse_input(self, engine: Engine, state: RoundState) -> None:
        if not engine.mouse_state.just_pressed(MouseButton.LEFT):
            return
        location = engine.mouse_state.location()
        if location is not None:
            self.spawn_block(engine, state, location)

    def spawn_block(self, engine: Engine, state: RoundState, position: Vec2) -> str:
        label = state.next_spawn_label()
        block = engine.add_sprite(label, OBSTACLE_PRESET)
        block.translation = Vec2(position)
        block.collision = True
        log.debug("Spawned %s at (%.1f, %.1f)", label, position.x, position.y)
        return label

    def reset_score(self, engine: Engine, state: RoundState) -> None:
        keys = engine.keyboard_state
        if self._variant.reset_trigger == ResetTrigger.HOLD:
            triggered = keys.pressed(RESET_KEY)
        else:
            triggered = keys.just_pressed(RESET_KEY)
        if not triggered:
            return

        state.reset_score()
        engine.text(SCORE_TEXT).value = score_label(state.score)
        emit_record('score', {
            'type': 'reset',
            'frame': engine.frame,
            'high_score': state.high_score,
        })

    def keep_scores_at_screen_edge(self, engine: Engine) -> None:
        half = engine.window_dimensions / 2
        bob = math.cos(engine.time_since_startup * BOB_FREQUENCY) * BOB_AMPLITUDE

        score = engine.text(SCORE_TEXT)
        score.translation.x = half.x + SCORE_OFFSET.x
        score.translation.y = half.y + SCORE_OFFSET.y + bob

        high_score = engine.text(HIGH_SCORE_TEXT)
        high_score.translation.x = -half.x + HIGH_SCORE_OFFSET.x
        high_score.translation.y = half.y + HIGH_SCORE_OFFSET.y
        if self._variant.bob_high_score:
            high_score.translation.y += bob
