"""
Round logic for Block Race.

Provides:
- state: RoundState (score, high score, spawn counter, spawn timer)
- controller: RoundController per-tick logic and round setup functions
"""

from blockrace.round.controller import (
    RoundController,
    add_player_sprite,
    add_ui,
    start_music,
)
from blockrace.round.state import RoundState

__all__ = [
    'RoundController',
    'RoundState',
    'add_player_sprite',
    'add_ui',
    'start_music',
]
