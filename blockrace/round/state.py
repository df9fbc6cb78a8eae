"""Round state: score bookkeeping and the obstacle spawn counter."""

from dataclasses import dataclass, field

from blockrace.engine.timer import Timer, TimerMode

DEFAULT_SPAWN_INTERVAL = 2.0


@dataclass
class RoundState:
    """
    Mutable state for one process-lifetime round.

    The controller owns this exclusively while a tick runs.

    Attributes:
        score: Pickups since start or last reset
        high_score: Best score seen; never reset
        spawn_index: Next obstacle label suffix, shared by every spawn source
        spawn_timer: Repeating timer driving timed obstacle spawns
    """
    score: int = 0
    high_score: int = 0
    spawn_index: int = 0
    spawn_timer: Timer = field(
        default_factory=lambda: Timer.from_seconds(DEFAULT_SPAWN_INTERVAL, TimerMode.REPEATING)
    )

    @classmethod
    def with_spawn_interval(cls, seconds: float) -> 'RoundState':
        return cls(spawn_timer=Timer.from_seconds(seconds, TimerMode.REPEATING))

    def record_pickup(self) -> bool:
        """Add one point. Returns True if the high score went up."""
        self.score += 1
        if self.score > self.high_score:
            self.high_score = self.score
            return True
        return False

    def reset_score(self) -> None:
        self.score = 0

    def next_spawn_label(self) -> str:
        """Claim the next obstacle label."""
        label = f"block_{self.spawn_index}"
        self.spawn_index += 1
        return label
