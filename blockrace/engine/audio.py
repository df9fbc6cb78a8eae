"""
Audio playback for sound effects and background music.

Sounds are synthesized procedurally with numpy (no asset files) and played
through pygame.mixer. When audio is disabled or the mixer can't be opened,
every call is a silent no-op.
"""

from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np
import pygame

from blockrace.logging import get_logger

log = get_logger('audio')

SAMPLE_RATE = 22050


class SfxPreset(Enum):
    CLICK = "click"
    CONFIRMATION_1 = "confirmation_1"
    IMPACT_1 = "impact_1"
    MINIMIZE_1 = "minimize_1"


class MusicPreset(Enum):
    CLASSY_8_BIT = "classy_8_bit"
    WHIMSICAL_POPSICLE = "whimsical_popsicle"


def _envelope(num_samples: int, fade: float = 0.1) -> np.ndarray:
    """Linear fade in/out envelope."""
    envelope = np.ones(num_samples)
    fade_samples = max(1, int(num_samples * fade))
    envelope[:fade_samples] = np.linspace(0, 1, fade_samples)
    envelope[-fade_samples:] = np.linspace(1, 0, fade_samples)
    return envelope


def _sweep(freq_start: float, freq_end: float, duration: float) -> np.ndarray:
    """Sine sweep between two frequencies, as floats in [-1, 1]."""
    num_samples = int(SAMPLE_RATE * duration)
    frequencies = np.linspace(freq_start, freq_end, num_samples)
    phase = np.cumsum(2.0 * np.pi * frequencies / SAMPLE_RATE)
    return np.sin(phase) * _envelope(num_samples)


def _square_notes(notes, note_duration: float) -> np.ndarray:
    """Concatenate square-wave notes (Hz, 0 = rest)."""
    samples_per_note = int(SAMPLE_RATE * note_duration)
    t = np.arange(samples_per_note) / SAMPLE_RATE
    parts = []
    for freq in notes:
        if freq <= 0:
            parts.append(np.zeros(samples_per_note))
            continue
        wave = np.sign(np.sin(2.0 * np.pi * freq * t)) * 0.5
        parts.append(wave * _envelope(samples_per_note, fade=0.05))
    return np.concatenate(parts)


def _noise_burst(duration: float) -> np.ndarray:
    num_samples = int(SAMPLE_RATE * duration)
    rng = np.random.default_rng(7)
    decay = np.exp(-np.linspace(0, 6, num_samples))
    return rng.uniform(-1, 1, num_samples) * decay


# Preset -> waveform generator
_SFX_WAVES: Dict[SfxPreset, Callable[[], np.ndarray]] = {
    SfxPreset.CLICK: lambda: _sweep(1200, 900, 0.04),
    SfxPreset.CONFIRMATION_1: lambda: np.concatenate(
        [_sweep(523.25, 523.25, 0.08), _sweep(783.99, 783.99, 0.12)]
    ),
    SfxPreset.IMPACT_1: lambda: _noise_burst(0.18),
    SfxPreset.MINIMIZE_1: lambda: _sweep(880, 220, 0.2),
}

_MUSIC_WAVES: Dict[MusicPreset, Callable[[], np.ndarray]] = {
    # C major arpeggio with a turnaround, looped
    MusicPreset.CLASSY_8_BIT: lambda: _square_notes(
        [261.63, 329.63, 392.00, 523.25, 392.00, 329.63,
         293.66, 349.23, 440.00, 587.33, 440.00, 349.23,
         246.94, 293.66, 392.00, 493.88, 392.00, 0],
        0.18,
    ),
    MusicPreset.WHIMSICAL_POPSICLE: lambda: _square_notes(
        [392.00, 0, 392.00, 440.00, 493.88, 0, 440.00, 392.00,
         329.63, 0, 329.63, 349.23, 392.00, 0, 349.23, 329.63],
        0.15,
    ),
}


class AudioManager:
    """
    Plays sound effects and looping background music.

    Attributes:
        enabled: False if audio was disabled or the mixer failed to open
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._cache: Dict[Enum, Optional[pygame.mixer.Sound]] = {}
        self._music_channel: Optional[pygame.mixer.Channel] = None
        self._music_preset: Optional[MusicPreset] = None

        if self.enabled:
            self._init_mixer()

    def _init_mixer(self) -> None:
        """Open the mixer, disabling audio if that isn't possible."""
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            log.warning("Audio initialization failed, continuing without sound: %s", e)
            self.enabled = False

    @property
    def music_playing(self) -> Optional[MusicPreset]:
        """Preset of the music currently looping, if any."""
        return self._music_preset

    def _make_sound(self, preset: Enum,
                    generate: Callable[[], np.ndarray]) -> Optional[pygame.mixer.Sound]:
        """Synthesize a preset on first use; later calls reuse the cached Sound."""
        if preset in self._cache:
            return self._cache[preset]

        mixer_info = pygame.mixer.get_init()
        if mixer_info is None:
            return None
        channels = mixer_info[2]

        samples = (np.clip(generate(), -1.0, 1.0) * 32767 * 0.3).astype(np.int16)
        if channels > 1:
            samples = np.ascontiguousarray(np.column_stack([samples] * channels))

        try:
            sound = pygame.sndarray.make_sound(samples)
        except (pygame.error, ValueError) as e:
            log.warning("Could not synthesize %s: %s", preset.value, e)
            self._cache[preset] = None
            return None
        self._cache[preset] = sound
        return sound

    def play_sfx(self, preset: SfxPreset, volume: float = 1.0) -> None:
        """Play a one-shot sound effect at the given volume (0-1)."""
        if not self.enabled:
            return
        sound = self._make_sound(preset, _SFX_WAVES[preset])
        if sound is None:
            return
        channel = sound.play()
        if channel is not None:
            channel.set_volume(max(0.0, min(1.0, volume)))
        log.debug("sfx %s @ %.2f", preset.value, volume)

    def play_music(self, preset: MusicPreset, volume: float = 1.0) -> None:
        """Loop background music, replacing whatever was playing."""
        if not self.enabled:
            return
        self.stop_music()
        sound = self._make_sound(preset, _MUSIC_WAVES[preset])
        if sound is None:
            return
        self._music_channel = sound.play(loops=-1)
        if self._music_channel is not None:
            self._music_channel.set_volume(max(0.0, min(1.0, volume)))
        self._music_preset = preset
        log.info("Music %s started @ %.2f", preset.value, volume)

    def stop_music(self) -> None:
        if self._music_channel is not None:
            self._music_channel.stop()
        self._music_channel = None
        self._music_preset = None
