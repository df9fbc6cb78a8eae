#!/usr/bin/env python3
"""
Block Race - Standalone entry point.

Usage:
    blockrace
    blockrace --variant rush
    blockrace --list-variants
    blockrace --width 1920 --height 1080 --no-audio
"""

import argparse
import random
import sys
from typing import List, Optional

from blockrace import config
from blockrace.engine import Game, WindowSettings
from blockrace.logging import (
    close_all_sinks,
    configure_logging,
    create_sink,
    get_logger,
    register_sink,
)
from blockrace.round import (
    RoundController,
    RoundState,
    add_player_sprite,
    add_ui,
    start_music,
)
from blockrace.variant import VariantLoader

log = get_logger('main')


def build_parser(variants: List[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='blockrace',
        description='Block Race - drive into the blocks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Controls:\n"
            "  Arrows / WASD   drive\n"
            "  Left click      drop a block\n"
            "  R               reset score\n"
            "  Esc / Q         quit\n"
        ),
    )
    parser.add_argument('--variant', '-v', type=str, default=config.DEFAULT_VARIANT,
                        choices=variants or None, help='Variant preset to play')
    parser.add_argument('--list-variants', action='store_true',
                        help='List available variants and exit')
    parser.add_argument('--width', type=int, default=config.SCREEN_WIDTH, help='Window width')
    parser.add_argument('--height', type=int, default=config.SCREEN_HEIGHT, help='Window height')
    parser.add_argument('--fullscreen', '-f', action='store_true', help='Run fullscreen')
    parser.add_argument('--no-audio', action='store_true', help='Disable sound and music')
    parser.add_argument('--seed', type=int, default=None, help='Seed for block placement')
    parser.add_argument('--max-frames', type=int, default=None,
                        help='Stop after this many frames (smoke runs)')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'OFF'],
                        help='Default log level')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run Block Race."""
    loader = VariantLoader()
    variants = loader.list_variants()
    args = build_parser(variants).parse_args(argv)

    if args.log_level:
        configure_logging(level=args.log_level)

    if args.list_variants:
        for name in variants:
            variant = loader.load_variant(name)
            print(f"  {name:<10} {variant.description}")
        return 0

    variant = loader.load_variant(args.variant)
    log.info("Variant '%s' (spawn every %.1fs, reset on %s)",
             variant.name, variant.spawn_interval, variant.reset_trigger.value)

    register_sink('score', create_sink('score'))

    game = Game(audio_enabled=config.AUDIO_ENABLED and not args.no_audio)
    game.window_settings(WindowSettings(
        title=f"{config.WINDOW_TITLE} - {variant.name}",
        width=args.width,
        height=args.height,
        fullscreen=args.fullscreen,
    ))

    start_music(game, variant)
    add_player_sprite(game)
    add_ui(game)

    game.add_logic(RoundController(variant, rng=random.Random(args.seed)))
    state = RoundState.with_spawn_interval(variant.spawn_interval)
    try:
        game.run(state, max_frames=args.max_frames)
    finally:
        close_all_sinks()

    print(f"Final score: {state.score}  High score: {state.high_score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
