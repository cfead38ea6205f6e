"""
Knife Hit - Target Field

The apples placed on the log for one round. Hit apples are hidden rather
than removed so the view can play their exit animation.
"""

import random
from dataclasses import replace
from typing import Iterator

from src.engine.angles import angular_distance, distributed_angles
from src.engine.base import TARGET_GAP, Target, TargetHit


class TargetField:
    """Ordered collection of the targets of the current round."""

    def __init__(self, targets: tuple[Target, ...] = ()) -> None:
        self._targets: list[Target] = list(targets)

    @classmethod
    def generate(cls, count: int, rng: random.Random | None = None) -> "TargetField":
        """Build ``count`` visible targets evenly spread around the log.

        Args:
            count: Number of targets (0 yields an empty field)
            rng: Optional random source for the angle offset

        Returns:
            A new TargetField with ids 0..count-1
        """
        if count <= 0:
            return cls()
        angles = distributed_angles(count, rng=rng)
        return cls(tuple(Target(id=i, angle=a) for i, a in enumerate(angles)))

    def resolve_hit(self, hit_angle: float, gap: float = TARGET_GAP) -> TargetHit:
        """Hide every visible target strictly closer than ``gap`` to the knife.

        More than one target can be hit when they sit close together around
        the impact point; all of them count.

        Args:
            hit_angle: Board-relative angle where the knife landed
            gap: Hit threshold in degrees

        Returns:
            TargetHit with the number and angles of the targets hit
        """
        hit_angles: list[float] = []
        for index, target in enumerate(self._targets):
            if not target.visible:
                continue
            if angular_distance(target.angle, hit_angle) < gap:
                self._targets[index] = replace(target, visible=False)
                hit_angles.append(target.angle)

        return TargetHit(count=len(hit_angles), angles=tuple(hit_angles))

    @property
    def targets(self) -> tuple[Target, ...]:
        """All targets, hit ones included."""
        return tuple(self._targets)

    @property
    def visible_targets(self) -> tuple[Target, ...]:
        """Targets that can still be hit."""
        return tuple(t for t in self._targets if t.visible)

    @property
    def hidden_count(self) -> int:
        """Number of targets already hit."""
        return sum(1 for t in self._targets if not t.visible)

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(tuple(self._targets))
