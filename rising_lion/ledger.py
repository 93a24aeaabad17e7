"""
Score and Health Ledger
========================
Running score, hit counters and the airplane's health pool.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class HitKind(Enum):
    """Scoring events and their point values."""
    TARGET_DAMAGED = 1
    TARGET_DESTROYED = 2
    EMPLACEMENT_DESTROYED = 3

    @property
    def points(self) -> int:
        return self.value


@dataclass
class Ledger:
    """Score and health for one run."""
    max_health: int = 5
    score: int = 0
    hit_count: int = 0
    destroyed_count: int = 0
    emplacement_kills: int = 0
    health: int = field(init=False, default=5)

    def __post_init__(self):
        self.health = self.max_health

    def apply_hit(self, kind: HitKind) -> int:
        """Credit a scoring event. Returns the new score."""
        self.score += kind.points
        if kind is HitKind.TARGET_DAMAGED:
            self.hit_count += 1
        elif kind is HitKind.TARGET_DESTROYED:
            self.destroyed_count += 1
        else:
            self.emplacement_kills += 1
        return self.score

    def take_damage(self) -> int:
        """Lose one health point, never going below zero."""
        self.health = max(0, self.health - 1)
        return self.health

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    def qualifies_for_high_score(self, recorded: Iterable[int], top_n: int = 3) -> bool:
        """
        Whether the current score earns a place in the top N.

        Only the best N recorded scores are considered. A board with free
        slots always qualifies; a full one needs a strictly higher score
        than its lowest entry.
        """
        best = sorted(recorded, reverse=True)[:top_n]
        if len(best) < top_n:
            return True
        return self.score > min(best)

    def reset(self) -> None:
        self.score = 0
        self.hit_count = 0
        self.destroyed_count = 0
        self.emplacement_kills = 0
        self.health = self.max_health
