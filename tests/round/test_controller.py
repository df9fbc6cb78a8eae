"""Tests for RoundController and round setup."""

import math
import random
from unittest.mock import MagicMock

import pygame
import pytest
from pygame.math import Vector2

from blockrace import config
from blockrace.engine import (
    NORTH_EAST,
    CollisionEvent,
    CollisionPair,
    CollisionState,
    Engine,
    MissingEntityError,
    MouseButton,
    SfxPreset,
    SpritePreset,
)
from blockrace.logging import NullSink, register_sink, close_all_sinks
from blockrace.round import RoundController, RoundState
from blockrace.round.controller import (
    HIGH_SCORE_TEXT,
    PLAYER,
    SCORE_TEXT,
    start_music,
)
from blockrace.variant import ResetTrigger


def _begin(a, b):
    return CollisionEvent(CollisionState.BEGIN, CollisionPair.of(a, b))


def _end(a, b):
    return CollisionEvent(CollisionState.END, CollisionPair.of(a, b))


def _add_block(engine, label, x=200.0, y=0.0):
    block = engine.add_sprite(label, SpritePreset.ROLLING_BLOCK_SMALL)
    block.translation = Vector2(x, y)
    block.collision = True
    return block


@pytest.fixture
def controller(variant):
    return RoundController(variant, rng=random.Random(1234))


class RecordingSink(NullSink):
    def __init__(self):
        self.records = []

    def emit(self, record):
        self.records.append(record)


# ============================================================================
# Setup
# ============================================================================


class TestSetup:

    def test_player_sprite(self, engine):
        player = engine.sprites[PLAYER]
        assert player.preset == SpritePreset.RACING_CAR_GREEN
        assert player.translation == Vector2(0, 0)
        assert player.rotation == NORTH_EAST
        assert player.scale == 1.0
        assert player.layer == 1.0
        assert player.collision is True

    def test_hud_texts(self, engine):
        assert engine.texts[SCORE_TEXT].value == "Score: 0"
        assert engine.texts[SCORE_TEXT].translation == Vector2(520, 320)
        assert engine.texts[HIGH_SCORE_TEXT].value == "High Score: 0"
        assert engine.texts[HIGH_SCORE_TEXT].translation == Vector2(-520, 320)

    def test_music_respects_variant(self, game, variant):
        game.engine.audio_manager = MagicMock()
        start_music(game, variant)
        game.engine.audio_manager.play_music.assert_not_called()

        start_music(game, variant.model_copy(update={'music': True}))
        game.engine.audio_manager.play_music.assert_called_once()


# ============================================================================
# Exit
# ============================================================================


class TestExit:

    @pytest.mark.parametrize("key", [pygame.K_ESCAPE, pygame.K_q])
    def test_quit_keys(self, controller, engine, state, key):
        engine.keyboard_state.press(key)
        controller(engine, state)
        assert engine.should_exit

    def test_no_exit_otherwise(self, controller, engine, state):
        engine.keyboard_state.press(pygame.K_UP)
        controller(engine, state)
        assert not engine.should_exit


# ============================================================================
# Collisions and scoring
# ============================================================================


class TestCollisions:

    def test_pickup_removes_block_and_scores(self, controller, engine, state):
        _add_block(engine, "block_0")
        engine.collision_events.append(_begin(PLAYER, "block_0"))

        controller.handle_collision_events(engine, state)

        assert "block_0" not in engine.sprites
        assert PLAYER in engine.sprites
        assert state.score == 1
        assert state.high_score == 1
        assert engine.texts[SCORE_TEXT].value == "Score: 1"
        assert engine.texts[HIGH_SCORE_TEXT].value == "High Score: 1"

    def test_queue_is_drained(self, controller, engine, state):
        engine.collision_events.extend([_begin(PLAYER, "block_0"), _end(PLAYER, "block_1")])
        controller.handle_collision_events(engine, state)
        assert engine.collision_events == []

    def test_end_events_ignored(self, controller, engine, state):
        _add_block(engine, "block_0")
        engine.collision_events.append(_end(PLAYER, "block_0"))
        controller.handle_collision_events(engine, state)
        assert "block_0" in engine.sprites
        assert state.score == 0

    def test_pairs_without_player_ignored(self, controller, engine, state):
        _add_block(engine, "block_0")
        _add_block(engine, "block_1")
        engine.collision_events.append(_begin("block_0", "block_1"))
        controller.handle_collision_events(engine, state)
        assert {"block_0", "block_1"} <= set(engine.sprites)
        assert state.score == 0

    def test_already_removed_block_still_scores_without_error(self, controller, engine, state):
        engine.collision_events.append(_begin(PLAYER, "block_7"))
        controller.handle_collision_events(engine, state)
        assert state.score == 1

    def test_one_point_per_event(self, controller, engine, state):
        for i in range(3):
            _add_block(engine, f"block_{i}")
            engine.collision_events.append(_begin(PLAYER, f"block_{i}"))
        controller.handle_collision_events(engine, state)
        assert state.score == 3

    def test_worked_example(self, controller, engine, state):
        state.score = 3
        state.high_score = 5
        engine.texts[HIGH_SCORE_TEXT].value = "High Score: 5"

        engine.collision_events.append(_begin(PLAYER, "block_0"))
        controller.handle_collision_events(engine, state)
        assert (state.score, state.high_score) == (4, 5)
        assert engine.texts[SCORE_TEXT].value == "Score: 4"
        assert engine.texts[HIGH_SCORE_TEXT].value == "High Score: 5"

        engine.collision_events.append(_begin(PLAYER, "block_1"))
        controller.handle_collision_events(engine, state)
        assert (state.score, state.high_score) == (5, 5)
        assert engine.texts[HIGH_SCORE_TEXT].value == "High Score: 5"

        engine.collision_events.append(_begin(PLAYER, "block_2"))
        controller.handle_collision_events(engine, state)
        assert (state.score, state.high_score) == (6, 6)
        assert engine.texts[HIGH_SCORE_TEXT].value == "High Score: 6"

    def test_high_score_is_running_maximum(self, controller, engine, state):
        rng = random.Random(5)
        best = 0
        for i in range(60):
            if rng.random() < 0.2:
                engine.keyboard_state.begin_frame()
                engine.keyboard_state.press(pygame.K_r)
                controller.reset_score(engine, state)
                engine.keyboard_state.release(pygame.K_r)
            else:
                engine.collision_events.append(_begin(PLAYER, f"block_{i}"))
                controller.handle_collision_events(engine, state)
            best = max(best, state.score)
            assert state.high_score == best

    def test_sound_played_per_pickup(self, engine, state, variant):
        controller = RoundController(variant.model_copy(update={'collision_sfx': True}))
        engine.audio_manager = MagicMock()
        engine.collision_events.append(_begin(PLAYER, "block_0"))
        controller.handle_collision_events(engine, state)
        engine.audio_manager.play_sfx.assert_called_once_with(SfxPreset.MINIMIZE_1, config.SFX_VOLUME)

    def test_silent_variant_plays_nothing(self, controller, engine, state):
        engine.audio_manager = MagicMock()
        engine.collision_events.append(_begin(PLAYER, "block_0"))
        controller.handle_collision_events(engine, state)
        engine.audio_manager.play_sfx.assert_not_called()

    def test_missing_score_text_is_fatal(self, controller, engine, state):
        del engine.texts[SCORE_TEXT]
        engine.collision_events.append(_begin(PLAYER, "block_0"))
        with pytest.raises(MissingEntityError):
            controller.handle_collision_events(engine, state)

    def test_score_records_emitted(self, controller, engine, state):
        sink = RecordingSink()
        register_sink('score', sink)
        try:
            engine.collision_events.append(_begin(PLAYER, "block_0"))
            controller.handle_collision_events(engine, state)
        finally:
            close_all_sinks()
        assert sink.records == [{
            'type': 'pickup', 'frame': engine.frame, 'score': 1, 'high_score': 1,
        }]


# ============================================================================
# Movement
# ============================================================================


class TestMovement:

    def test_no_keys_no_movement(self, controller, engine):
        engine.delta = 0.5
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation == Vector2(0, 0)

    @pytest.mark.parametrize("key,expected", [
        (pygame.K_UP, (0, 50)),
        (pygame.K_w, (0, 50)),
        (pygame.K_DOWN, (0, -50)),
        (pygame.K_s, (0, -50)),
        (pygame.K_LEFT, (-50, 0)),
        (pygame.K_a, (-50, 0)),
        (pygame.K_RIGHT, (50, 0)),
        (pygame.K_d, (50, 0)),
    ])
    def test_single_direction(self, controller, engine, key, expected):
        engine.delta = 0.5
        engine.keyboard_state.press(key)
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation == Vector2(expected)

    def test_diagonal_is_sum_of_axes(self, controller, engine):
        engine.delta = 0.5
        engine.keyboard_state.press(pygame.K_UP)
        engine.keyboard_state.press(pygame.K_RIGHT)
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation == Vector2(50, 50)

    def test_opposite_keys_cancel(self, controller, engine):
        engine.delta = 0.5
        engine.keyboard_state.press(pygame.K_LEFT)
        engine.keyboard_state.press(pygame.K_d)
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation == Vector2(0, 0)

    def test_arrow_and_letter_do_not_stack(self, controller, engine):
        engine.delta = 0.5
        engine.keyboard_state.press(pygame.K_UP)
        engine.keyboard_state.press(pygame.K_w)
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation == Vector2(0, 50)

    def test_no_clamping_to_window(self, controller, engine):
        engine.delta = 100.0
        engine.keyboard_state.press(pygame.K_RIGHT)
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation.x == 10000

    def test_speed_comes_from_variant(self, engine, variant):
        controller = RoundController(variant.model_copy(update={'player_speed': 160.0}))
        engine.delta = 0.5
        engine.keyboard_state.press(pygame.K_UP)
        controller.handle_player_movement(engine)
        assert engine.sprites[PLAYER].translation == Vector2(0, 80)

    def test_missing_player_is_fatal(self, controller, engine):
        engine.remove_sprite(PLAYER)
        with pytest.raises(MissingEntityError):
            controller.handle_player_movement(engine)


# ============================================================================
# Spawning
# ============================================================================


class TestSpawning:

    def test_nothing_before_first_period(self, controller, engine, state):
        engine.delta = 0.5
        controller.put_blocks_on_timer(engine, state)
        assert state.spawn_index == 0
        assert set(engine.sprites) == {PLAYER}

    def test_one_block_per_period(self, controller, engine, state):
        engine.delta = 1.0
        controller.put_blocks_on_timer(engine, state)
        block = engine.sprites["block_0"]
        assert block.collision is True
        assert block.preset == SpritePreset.ROLLING_BLOCK_SMALL
        assert state.spawn_index == 1

    def test_long_tick_spawns_each_completed_period(self, controller, engine, state):
        engine.delta = 2.5
        controller.put_blocks_on_timer(engine, state)
        assert {"block_0", "block_1"} <= set(engine.sprites)
        assert state.spawn_index == 2

    def test_positions_within_spawn_area(self, controller, engine, state):
        engine.delta = 1.0
        for _ in range(50):
            controller.put_blocks_on_timer(engine, state)
        for label, sprite in engine.sprites.items():
            if label == PLAYER:
                continue
            assert -550 <= sprite.translation.x <= 550
            assert -325 <= sprite.translation.y <= 325

    def test_seeded_rng_is_repeatable(self, variant, engine, state):
        other_engine = Engine()
        other_state = RoundState.with_spawn_interval(1.0)
        for eng, st in ((engine, state), (other_engine, other_state)):
            eng.delta = 1.0
            RoundController(variant, rng=random.Random(42)).put_blocks_on_timer(eng, st)
        assert engine.sprites["block_0"].translation == other_engine.sprites["block_0"].translation

    def test_click_spawns_at_pointer(self, controller, engine, state):
        engine.mouse_state.move_to(Vector2(12, -34))
        engine.mouse_state.press(MouseButton.LEFT)
        controller.handle_block_mouse_input(engine, state)
        block = engine.sprites["block_0"]
        assert block.translation == Vector2(12, -34)
        assert block.collision is True

    def test_click_without_location_spawns_nothing(self, controller, engine, state):
        engine.mouse_state.press(MouseButton.LEFT)
        controller.handle_block_mouse_input(engine, state)
        assert state.spawn_index == 0

    def test_held_button_spawns_once(self, controller, engine, state):
        engine.mouse_state.move_to(Vector2(0, 0))
        engine.mouse_state.press(MouseButton.LEFT)
        controller.handle_block_mouse_input(engine, state)
        engine.mouse_state.begin_frame()
        controller.handle_block_mouse_input(engine, state)
        assert state.spawn_index == 1

    def test_right_click_ignored(self, controller, engine, state):
        engine.mouse_state.move_to(Vector2(0, 0))
        engine.mouse_state.press(MouseButton.RIGHT)
        controller.handle_block_mouse_input(engine, state)
        assert state.spawn_index == 0

    def test_timer_and_click_share_counter(self, controller, engine, state):
        engine.mouse_state.move_to(Vector2(300, 100))

        engine.delta = 1.0
        controller.put_blocks_on_timer(engine, state)
        engine.mouse_state.press(MouseButton.LEFT)
        controller.handle_block_mouse_input(engine, state)
        controller.put_blocks_on_timer(engine, state)

        assert [l for l in engine.sprites if l != PLAYER] == ["block_0", "block_1", "block_2"]
        assert engine.sprites["block_1"].translation == Vector2(300, 100)


# ============================================================================
# Reset
# ============================================================================


class TestReset:

    def test_press_resets_score_only(self, controller, engine, state):
        state.score, state.high_score = 4, 9
        engine.texts[SCORE_TEXT].value = "Score: 4"
        engine.keyboard_state.press(pygame.K_r)
        controller.reset_score(engine, state)
        assert state.score == 0
        assert state.high_score == 9
        assert engine.texts[SCORE_TEXT].value == "Score: 0"

    def test_press_mode_ignores_held_key(self, controller, engine, state):
        engine.keyboard_state.press(pygame.K_r)
        controller.reset_score(engine, state)

        engine.keyboard_state.begin_frame()
        state.score = 3
        controller.reset_score(engine, state)
        assert state.score == 3

    def test_hold_mode_fires_every_frame(self, engine, state, variant):
        controller = RoundController(variant.model_copy(update={'reset_trigger': ResetTrigger.HOLD}))
        engine.keyboard_state.press(pygame.K_r)
        controller.reset_score(engine, state)

        engine.keyboard_state.begin_frame()
        state.score = 3
        controller.reset_score(engine, state)
        assert state.score == 0

    def test_no_key_no_reset(self, controller, engine, state):
        state.score = 2
        controller.reset_score(engine, state)
        assert state.score == 2


# ============================================================================
# HUD
# ============================================================================


class TestHud:

    def test_anchored_to_corners_with_bob(self, controller, engine):
        engine.time_since_startup = 0.0
        controller.keep_scores_at_screen_edge(engine)
        assert engine.texts[SCORE_TEXT].translation == Vector2(1400 / 2 - 80, 500 / 2 - 30 + 5)
        assert engine.texts[HIGH_SCORE_TEXT].translation == Vector2(-1400 / 2 + 110, 500 / 2 - 30)

    def test_follows_resize(self, controller, engine):
        engine.window_dimensions = Vector2(800, 600)
        engine.time_since_startup = math.pi / 6
        controller.keep_scores_at_screen_edge(engine)
        score = engine.texts[SCORE_TEXT].translation
        assert score.x == pytest.approx(320)
        assert score.y == pytest.approx(270)
        assert engine.texts[HIGH_SCORE_TEXT].translation.x == pytest.approx(-290)

    def test_bob_amplitude(self, controller, engine):
        ys = []
        for i in range(40):
            engine.time_since_startup = i * 0.1
            controller.keep_scores_at_screen_edge(engine)
            ys.append(engine.texts[SCORE_TEXT].translation.y)
        assert max(ys) <= 225 + 1e-6
        assert min(ys) >= 215 - 1e-6

    def test_high_score_bob_optional(self, engine, variant):
        controller = RoundController(variant.model_copy(update={'bob_high_score': True}))
        engine.time_since_startup = 0.0
        controller.keep_scores_at_screen_edge(engine)
        assert engine.texts[HIGH_SCORE_TEXT].translation.y == pytest.approx(500 / 2 - 30 + 5)


# ============================================================================
# Whole tick
# ============================================================================


class TestFullTick:

    def test_tick_through_game_step(self, game, variant):
        state = RoundState.with_spawn_interval(variant.spawn_interval)
        game.add_logic(RoundController(variant, rng=random.Random(0)))

        # Drop a block on the car, then drive for half a second
        game.engine.mouse_state.move_to(Vector2(0, 0))
        game.step(state, 0.0, 0.0, [
            pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(700, 250), button=1),
        ])
        assert "block_0" in game.engine.sprites

        game.step(state, 0.5, 0.5, [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_UP)])
        assert "block_0" not in game.engine.sprites
        assert state.score == 1
        assert game.engine.sprites[PLAYER].translation == Vector2(0, 50)
