"""
Collision pair detection between labelled sprites.

Overlap testing is pygame's `Rect.colliderect`; this module only turns the
per-frame overlap set into BEGIN/END edge events.
"""

from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from typing import Dict, List, Optional, Set

from blockrace.engine.entities import Sprite
from blockrace.logging import get_logger

log = get_logger('collision')


class CollisionState(Enum):
    BEGIN = "begin"
    END = "end"

    def is_begin(self) -> bool:
        return self is CollisionState.BEGIN

    def is_end(self) -> bool:
        return self is CollisionState.END


@dataclass(frozen=True)
class CollisionPair:
    """Two sprite labels, stored in sorted order."""
    a: str
    b: str

    @classmethod
    def of(cls, first: str, second: str) -> 'CollisionPair':
        a, b = sorted((first, second))
        return cls(a, b)

    def __iter__(self):
        return iter((self.a, self.b))

    def either_equals_to(self, label: str) -> bool:
        return label in (self.a, self.b)

    def one_starts_with(self, prefix: str) -> bool:
        return self.a.startswith(prefix) or self.b.startswith(prefix)

    def other(self, label: str) -> Optional[str]:
        """The participant that is not `label`, or None if `label` is absent."""
        if self.a == label:
            return self.b
        if self.b == label:
            return self.a
        return None


@dataclass(frozen=True)
class CollisionEvent:
    state: CollisionState
    pair: CollisionPair


class CollisionDetector:
    """
    Tracks which collidable sprites overlap from one frame to the next.

    `detect()` returns BEGIN for pairs that started overlapping and END for
    pairs that stopped (including pairs that lost a sprite). Events are
    ordered ENDs first, then BEGINs, each sorted by pair.
    """

    def __init__(self):
        self._active: Set[CollisionPair] = set()

    @property
    def active_pairs(self) -> Set[CollisionPair]:
        return set(self._active)

    def detect(self, sprites: Dict[str, Sprite]) -> List[CollisionEvent]:
        collidable = sorted(
            (label, sprite.get_rect())
            for label, sprite in sprites.items()
            if sprite.collision
        )

        current: Set[CollisionPair] = set()
        for (label_a, rect_a), (label_b, rect_b) in combinations(collidable, 2):
            if rect_a.colliderect(rect_b):
                current.add(CollisionPair.of(label_a, label_b))

        ended = sorted(self._active - current, key=lambda p: (p.a, p.b))
        began = sorted(current - self._active, key=lambda p: (p.a, p.b))
        self._active = current

        events = [CollisionEvent(CollisionState.END, pair) for pair in ended]
        events.extend(CollisionEvent(CollisionState.BEGIN, pair) for pair in began)

        if events:
            log.trace("%d collision events (%d active)", len(events), len(current))
        return events

    def clear(self) -> None:
        self._active.clear()
