"""
Knife Hit - Game Engine Base Classes

This module defines the foundational data structures, enums and constants used
throughout the game engine. Records handed out to callers are immutable
(frozen dataclasses) so views can hold on to them without seeing later
mutations.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


# Minimum separation between two stuck knives, in degrees
COLLISION_GAP = 18.0

# Maximum distance between a knife and an apple for the apple to be hit
TARGET_GAP = 15.0

# Board-relative angle of the throw point (bottom centre) at rotation 0
THROW_REFERENCE_ANGLE = 180.0

POINTS_PER_THROW = 10
POINTS_PER_TARGET = 5
COINS_PER_TARGET = 5
CONTINUE_KNIVES = 3


class Phase(Enum):
    """Lifecycle phase of the current round."""
    READY = "ready"
    BOSS_INTRO = "boss_intro"
    PLAYING = "playing"
    FAILED = "failed"
    WIN = "win"


class ThrowResult(Enum):
    """How a resolved throw ended."""
    STUCK = "stuck"
    COLLIDED = "collided"


class AdPlacement(Enum):
    """Points in the game where a rewarded ad may be requested."""
    CONTINUE = "continue"
    DOUBLE_REWARD = "double_reward"


@dataclass(frozen=True)
class Target:
    """
    A bonus target (apple) on the log.

    Attributes:
        id: Sequential id within the round, starting at 0
        angle: Position on the log in degrees
        visible: False once the target has been hit
    """
    id: int
    angle: float
    visible: bool = True


@dataclass(frozen=True)
class Boss:
    """
    A boss stage entry of the progression table.

    Attributes:
        stage_number: Stage at which the boss appears
        name: Display name
        color: Log fill colour
        bg_color: Log border colour
        knife_budget: Knives the player must stick to win
        target_count: Apples placed on the log
        rotation_speed: Base rotation speed in degrees per tick
        reward_coins: Completion reward (score and coins)
    """
    stage_number: int
    name: str
    color: str
    bg_color: str
    knife_budget: int
    target_count: int
    rotation_speed: float
    reward_coins: int


@dataclass(frozen=True)
class StageProfile:
    """
    Effective parameters of a single stage, boss or normal.

    Attributes:
        stage_number: The stage these parameters apply to
        knife_budget: Knives needed to clear the stage
        target_count: Apples generated at round start
        rotation_speed: Effective speed including the per-stage speed-up
        reward_coins: Completion reward
        color: Log fill colour
        bg_color: Log border colour
        boss: The boss record, or None on a normal stage
    """
    stage_number: int
    knife_budget: int
    target_count: int
    rotation_speed: float
    reward_coins: int
    color: str
    bg_color: str
    boss: Boss | None = None

    @property
    def is_boss(self) -> bool:
        """Returns True if this stage is a boss stage."""
        return self.boss is not None


@dataclass(frozen=True)
class TargetHit:
    """
    Targets struck by a single throw.

    Attributes:
        count: Number of targets hit
        angles: Angles of the targets that were hit
    """
    count: int = 0
    angles: tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ThrowOutcome:
    """
    Result of resolving one throw.

    Attributes:
        result: Whether the knife stuck or collided
        hit_angle: Board-relative angle where the knife landed
        targets: Targets struck by the knife (empty on collision)
        points: Score gained by this throw, excluding the completion reward
        coins: Coins gained from targets
        win_pending: True if the throw completed the knife budget
    """
    result: ThrowResult
    hit_angle: float
    targets: TargetHit = field(default_factory=TargetHit)
    points: int = 0
    coins: int = 0
    win_pending: bool = False

    @property
    def collided(self) -> bool:
        """Returns True if the knife hit another knife."""
        return self.result is ThrowResult.COLLIDED


@dataclass(frozen=True)
class RoundState:
    """
    Snapshot of the live round.

    Attributes:
        phase: Current lifecycle phase
        stage_number: Stage being played (1-based)
        rotation_angle: Current rotation of the log in degrees
        knives_remaining: Knives the player can still throw
        targets_hit_count: Apples hit this round
        score: Session score, kept across stages
        has_used_continue: Whether the continue was spent this round
        is_boss_round: Whether the stage is a boss stage
        active_boss: The boss record for boss rounds
        stuck_knives: Angles of knives stuck this round
        targets: All targets of the round, hit ones included
    """
    phase: Phase
    stage_number: int
    rotation_angle: float
    knives_remaining: int
    targets_hit_count: int
    score: int
    has_used_continue: bool
    is_boss_round: bool
    active_boss: Boss | None = None
    stuck_knives: tuple[float, ...] = field(default_factory=tuple)
    targets: tuple[Target, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EconomyState:
    """
    Durable player economy.

    Attributes:
        coin_balance: Coins owned
        high_score: Best session score ever recorded
        last_reward_claim_date: Day the daily reward was last claimed
        current_streak_day: Position in the daily reward cycle (1-7)
    """
    coin_balance: int = 0
    high_score: int = 0
    last_reward_claim_date: date | None = None
    current_streak_day: int = 1
