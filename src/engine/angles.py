"""
Knife Hit - Angle Math

Pure geometric helpers on the rotating log. Angles are degrees in [0, 360),
measured clockwise from straight up.
"""

import random

from src.engine.validators import validate_count

FULL_TURN = 360.0
HALF_TURN = 180.0


def wrap(angle: float) -> float:
    """Normalize any angle, negative ones included, into [0, 360)."""
    wrapped = angle % FULL_TURN
    # tiny negative inputs round up to 360.0
    return 0.0 if wrapped >= FULL_TURN else wrapped


def angular_distance(a: float, b: float) -> float:
    """
    Shortest distance between two angles.

    Returns:
        Distance in degrees, in [0, 180]
    """
    d = abs(a - b) % FULL_TURN
    return FULL_TURN - d if d > HALF_TURN else d


def distributed_angles(
    count: int,
    rng: random.Random | None = None,
) -> tuple[float, ...]:
    """
    Spread ``count`` angles evenly around the log.

    A single random offset in [0, 360/count) shifts the whole pattern so
    consecutive rounds do not look alike.

    Args:
        count: Number of angles to generate
        rng: Optional random source (for testing)

    Returns:
        Tuple of ``count`` wrapped angles spaced 360/count apart
    """
    validate_count(count, name="Angle count")
    step = FULL_TURN / count
    offset = (rng or random).uniform(0, step)
    if offset >= step:
        offset = 0.0
    return tuple(wrap(offset + i * step) for i in range(count))
