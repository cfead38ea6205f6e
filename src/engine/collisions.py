"""
Knife Hit - Collision Ledger

Append-only record of the knives stuck in the log during one round.
"""

from src.engine.angles import angular_distance
from src.engine.base import COLLISION_GAP


class CollisionLedger:
    """Stuck-knife angles of the current round."""

    def __init__(self) -> None:
        self._angles: list[float] = []

    def would_collide(self, candidate: float, gap: float = COLLISION_GAP) -> bool:
        """Returns True if any stuck knife is strictly closer than ``gap``."""
        return any(angular_distance(a, candidate) < gap for a in self._angles)

    def accept(self, candidate: float) -> None:
        """Record a knife.

        Callers must check :meth:`would_collide` first; separation is not
        re-validated here.
        """
        self._angles.append(candidate)

    def clear(self) -> None:
        """Remove every knife. Called when a round (re)starts."""
        self._angles.clear()

    @property
    def angles(self) -> tuple[float, ...]:
        return tuple(self._angles)

    def __len__(self) -> int:
        return len(self._angles)
