"""Countdown timer advanced by tick time."""

from enum import Enum


class TimerMode(Enum):
    ONCE = "once"
    REPEATING = "repeating"


class Timer:
    """
    A duration advanced by elapsed tick time.

    A ONCE timer finishes a single time and stays finished until reset.
    A REPEATING timer wraps around, and reports how many periods
    completed during the most recent tick.

    Usage:
        timer = Timer.from_seconds(2.0, TimerMode.REPEATING)
        if timer.tick(dt).just_finished():
            spawn()
    """

    def __init__(self, duration: float, mode: TimerMode = TimerMode.ONCE):
        if duration < 0:
            raise ValueError(f"Timer duration must be non-negative, got {duration}")
        self._duration = duration
        self._mode = mode
        self._elapsed = 0.0
        self._finished = False
        self._times_finished_this_tick = 0

    @classmethod
    def from_seconds(cls, duration: float, mode: TimerMode = TimerMode.ONCE) -> 'Timer':
        return cls(duration, mode)

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def remaining(self) -> float:
        return self._duration - self._elapsed

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def times_finished_this_tick(self) -> int:
        return self._times_finished_this_tick

    def just_finished(self) -> bool:
        """True if at least one period completed during the last tick."""
        return self._times_finished_this_tick > 0

    def tick(self, delta: float) -> 'Timer':
        """Advance the timer by delta seconds. Returns self for chaining."""
        if delta < 0:
            raise ValueError(f"Tick delta must be non-negative, got {delta}")

        self._times_finished_this_tick = 0

        if self._mode == TimerMode.ONCE:
            if self._finished:
                return self
            self._elapsed = min(self._duration, self._elapsed + delta)
            if self._elapsed >= self._duration:
                self._finished = True
                self._times_finished_this_tick = 1
            return self

        # Repeating: zero-length timers finish once per tick
        if self._duration == 0:
            self._finished = True
            self._times_finished_this_tick = 1
            return self

        self._elapsed += delta
        if self._elapsed >= self._duration:
            completed = int(self._elapsed // self._duration)
            self._elapsed -= completed * self._duration
            self._times_finished_this_tick = completed
            self._finished = True
        else:
            self._finished = False
        return self

    def reset(self) -> None:
        """Rewind to the start of a period."""
        self._elapsed = 0.0
        self._finished = False
        self._times_finished_this_tick = 0

    def __repr__(self) -> str:
        return (f"Timer(duration={self._duration}, mode={self._mode.value}, "
                f"elapsed={self._elapsed:.3f})")
