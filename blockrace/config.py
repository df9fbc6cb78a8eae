"""
Block Race - Configuration loader.

Loads settings from .env files with sensible defaults. Precedence, highest
first: real environment variables, a .env in the working directory, then
the .env shipped inside the blockrace package.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# load_dotenv never overrides a variable that is already set, so the first
# file loaded wins
LOCAL_ENV = Path.cwd() / '.env'
PACKAGE_ENV = Path(__file__).parent / '.env'
load_dotenv(LOCAL_ENV)
load_dotenv(PACKAGE_ENV)


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes', 'on')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


# Display
SCREEN_WIDTH = _get_int('SCREEN_WIDTH', 1400)
SCREEN_HEIGHT = _get_int('SCREEN_HEIGHT', 500)
FPS = _get_int('FPS', 60)
WINDOW_TITLE = os.getenv('WINDOW_TITLE', 'Block Race')

# Audio
AUDIO_ENABLED = _get_bool('AUDIO_ENABLED', True)
MUSIC_VOLUME = _get_float('MUSIC_VOLUME', 0.2)
SFX_VOLUME = _get_float('SFX_VOLUME', 0.4)

# Variant used when none is given on the command line
DEFAULT_VARIANT = os.getenv('DEFAULT_VARIANT', 'classic')

# Colors
BACKGROUND_COLOR = (32, 34, 40)
TEXT_COLOR = (255, 255, 255)
