"""
Block Race.

A small arcade round: drive a car into blocks that appear on a timer or
where you click. Each pickup scores a point; the high score is kept for
the life of the process.

Provides:
- engine: pygame facade (entities, input, collisions, audio, frame loop)
- round: per-tick RoundController and RoundState
- variant: YAML variant presets
- config: .env settings
- logging: per-module loggers and structured record sinks
"""

__version__ = "0.1.0"
