"""Shared fixtures for Block Race tests."""
import os

# Headless pygame: must be set before the display/mixer are touched
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from blockrace.engine import Game
from blockrace.round import RoundState, add_player_sprite, add_ui
from blockrace.variant import VariantConfig


@pytest.fixture
def variant():
    """Classic tuning with a one-second spawn period and no audio."""
    return VariantConfig(
        name="test",
        spawn_interval=1.0,
        collision_sfx=False,
        music=False,
    )


@pytest.fixture
def game():
    """Headless game with the player and HUD set up."""
    game = Game(audio_enabled=False)
    add_player_sprite(game)
    add_ui(game)
    return game


@pytest.fixture
def engine(game):
    return game.engine


@pytest.fixture
def state():
    return RoundState.with_spawn_interval(1.0)
