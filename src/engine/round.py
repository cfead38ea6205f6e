"""
Knife Hit - Round State Machine

The central controller of a game session. Owns the live round (rotation,
knife budget, stuck knives, apples, score) and drives the phase transitions:

    ready -> boss_intro? -> playing -> failed | win

Scoring:
    - +10 per knife that sticks
    - +5 score and +5 coins per apple hit
    - Stage completion: boss reward (or 50) to both score and coins

A throw has two halves, :meth:`begin_throw` and :meth:`resolve_throw`, so a
scheduler can put the flight time between them. While a throw is in flight,
or a win is waiting to be credited, further throws are ignored. Calls made in
the wrong phase are no-ops.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from src.engine.angles import wrap
from src.engine.base import (
    COINS_PER_TARGET,
    COLLISION_GAP,
    CONTINUE_KNIVES,
    POINTS_PER_TARGET,
    POINTS_PER_THROW,
    TARGET_GAP,
    THROW_REFERENCE_ANGLE,
    AdPlacement,
    Boss,
    Phase,
    RoundState,
    StageProfile,
    Target,
    ThrowOutcome,
    ThrowResult,
)
from src.engine.collisions import CollisionLedger
from src.engine.economy import EconomyLedger
from src.engine.progression import ProgressionTable
from src.engine.targets import TargetField
from src.engine.validators import validate_stage_number
from src.feedback.events import EventBus, FeedbackEvent

logger = logging.getLogger(__name__)


AdGate = Callable[[AdPlacement], bool]


def always_grant(placement: AdPlacement) -> bool:
    """Ad gate used when no ad provider is wired in."""
    return True


class RoundStateMachine:
    """Rules engine for one player's session."""

    DEFAULT_TICK_RATE = 60

    def __init__(
        self,
        economy: EconomyLedger,
        progression: ProgressionTable | None = None,
        events: EventBus | None = None,
        ad_gate: AdGate = always_grant,
        rng: random.Random | None = None,
    ) -> None:
        self._economy = economy
        self._progression = progression or ProgressionTable()
        self._events = events or EventBus()
        self._ad_gate = ad_gate
        self._rng = rng

        self._phase = Phase.READY
        self._stage = 1
        self._profile: StageProfile = self._progression.stage_profile(1)
        self._boss: Boss | None = None
        self._rotation = 0.0
        self._knives_remaining = 0
        self._targets_hit = 0
        self._score = 0
        self._has_used_continue = False
        self._ledger = CollisionLedger()
        self._targets = TargetField()
        self._throwing = False
        self._throw_angle: float | None = None
        self._win_pending = False

    # -- Read-only views -------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def stage_number(self) -> int:
        return self._stage

    @property
    def score(self) -> int:
        return self._score

    @property
    def rotation_angle(self) -> float:
        return self._rotation

    @property
    def knives_remaining(self) -> int:
        return self._knives_remaining

    @property
    def knife_budget(self) -> int:
        return self._profile.knife_budget

    @property
    def rotation_speed(self) -> float:
        """Effective degrees per tick of the current stage."""
        return self._profile.rotation_speed

    @property
    def stage_reward(self) -> int:
        return self._profile.reward_coins

    @property
    def profile(self) -> StageProfile:
        return self._profile

    @property
    def active_boss(self) -> Boss | None:
        return self._boss

    @property
    def stuck_knives(self) -> tuple[float, ...]:
        return self._ledger.angles

    @property
    def targets(self) -> tuple[Target, ...]:
        return self._targets.targets

    @property
    def is_throwing(self) -> bool:
        return self._throwing

    @property
    def win_pending(self) -> bool:
        return self._win_pending

    @property
    def can_continue(self) -> bool:
        """True if a failed round may still be continued."""
        return self._phase is Phase.FAILED and not self._has_used_continue

    @property
    def is_out_of_knives(self) -> bool:
        """True when a continued round ran dry without reaching the budget."""
        return (
            self._phase is Phase.PLAYING
            and self._knives_remaining <= 0
            and not self._throwing
            and not self._win_pending
        )

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def economy(self) -> EconomyLedger:
        return self._economy

    def snapshot(self) -> RoundState:
        """Return an immutable copy of the live round."""
        return RoundState(
            phase=self._phase,
            stage_number=self._stage,
            rotation_angle=self._rotation,
            knives_remaining=self._knives_remaining,
            targets_hit_count=self._targets_hit,
            score=self._score,
            has_used_continue=self._has_used_continue,
            is_boss_round=self._boss is not None,
            active_boss=self._boss,
            stuck_knives=self._ledger.angles,
            targets=self._targets.targets,
        )

    # -- Round lifecycle -------------------------------------------------

    def start_round(self, stage_number: int) -> Phase:
        """Start ``stage_number``.

        Boss stages stop in ``boss_intro`` until :meth:`confirm_boss_start`;
        normal stages are initialized and go straight to ``playing``.
        Invalid stage numbers fall back to stage 1.

        Returns:
            The phase after the call
        """
        try:
            stage_number = validate_stage_number(stage_number)
        except ValueError:
            logger.warning("Invalid stage %r; starting stage 1 instead", stage_number)
            stage_number = 1

        self._stage = stage_number
        self._profile = self._progression.stage_profile(stage_number)
        self._boss = self._profile.boss
        self._throwing = False
        self._throw_angle = None
        self._win_pending = False

        if self._boss is not None:
            self._set_phase(Phase.BOSS_INTRO)
            return self._phase

        self._init_round()
        return self._phase

    def confirm_boss_start(self) -> bool:
        """Leave the boss intro and start playing the boss round."""
        if self._phase is not Phase.BOSS_INTRO:
            logger.debug("confirm_boss_start ignored in %s", self._phase.value)
            return False
        self._init_round()
        return True

    def advance_stage(self) -> Phase | None:
        """Move on to the next stage after a win."""
        if self._phase is not Phase.WIN:
            logger.debug("advance_stage ignored in %s", self._phase.value)
            return None
        return self.start_round(self._stage + 1)

    def restart(self) -> Phase:
        """Begin a new session from stage 1 with a zero score."""
        self._score = 0
        self._boss = None
        return self.start_round(1)

    def _init_round(self) -> None:
        self._ledger.clear()
        self._targets = TargetField.generate(self._profile.target_count, rng=self._rng)
        self._knives_remaining = self._profile.knife_budget
        self._targets_hit = 0
        self._has_used_continue = False
        self._rotation = 0.0
        self._throwing = False
        self._throw_angle = None
        self._win_pending = False
        self._set_phase(Phase.PLAYING)

    # -- Rotation --------------------------------------------------------

    def tick(self, ticks: float = 1) -> float:
        """Advance the log by ``ticks`` scheduling ticks while playing.

        Returns:
            The rotation angle after the call
        """
        if self._phase is Phase.PLAYING and ticks > 0:
            self._rotation = wrap(self._rotation + self._profile.rotation_speed * ticks)
        return self._rotation

    def advance_elapsed(self, seconds: float, tick_rate: float = DEFAULT_TICK_RATE) -> float:
        """Advance the log by wall-clock time instead of discrete ticks."""
        return self.tick(seconds * tick_rate)

    # -- Throwing --------------------------------------------------------

    def throw(self, defer_win: bool = False) -> ThrowOutcome | None:
        """Throw and resolve a knife in one step.

        Returns:
            The outcome, or None if the throw was not accepted
        """
        if not self.begin_throw():
            return None
        return self.resolve_throw(defer_win=defer_win)

    def begin_throw(self) -> bool:
        """Release a knife. The landing angle is fixed at release.

        Returns:
            True if the throw was accepted
        """
        if (
            self._phase is not Phase.PLAYING
            or self._knives_remaining <= 0
            or self._throwing
            or self._win_pending
        ):
            logger.debug("Throw ignored in %s", self._phase.value)
            return False

        self._throwing = True
        self._throw_angle = wrap(THROW_REFERENCE_ANGLE - self._rotation)
        self._emit(FeedbackEvent.THROW)
        return True

    def resolve_throw(self, defer_win: bool = False) -> ThrowOutcome | None:
        """Land the knife in flight.

        Args:
            defer_win: Leave a completed stage pending until
                :meth:`complete_win` is called

        Returns:
            The outcome, or None if no throw was in flight
        """
        if not self._throwing or self._throw_angle is None:
            return None

        hit_angle = self._throw_angle
        self._throwing = False
        self._throw_angle = None

        if self._phase is not Phase.PLAYING:
            return None

        if self._ledger.would_collide(hit_angle, COLLISION_GAP):
            self._emit(FeedbackEvent.FAIL, hit_angle=hit_angle)
            self._set_phase(Phase.FAILED)
            return ThrowOutcome(result=ThrowResult.COLLIDED, hit_angle=hit_angle)

        self._emit(FeedbackEvent.HIT, hit_angle=hit_angle)

        points = 0
        coins = 0
        hits = self._targets.resolve_hit(hit_angle, TARGET_GAP)
        if hits.count > 0:
            self._targets_hit += hits.count
            points += POINTS_PER_TARGET * hits.count
            coins = COINS_PER_TARGET * hits.count
            self._economy.credit_coins(coins)
            self._emit(FeedbackEvent.APPLE, count=hits.count, angles=hits.angles)
            self._emit(FeedbackEvent.COIN, amount=coins)

        self._ledger.accept(hit_angle)
        self._knives_remaining -= 1
        points += POINTS_PER_THROW
        self._add_score(points)

        if len(self._ledger) >= self._profile.knife_budget:
            self._win_pending = True

        outcome = ThrowOutcome(
            result=ThrowResult.STUCK,
            hit_angle=hit_angle,
            targets=hits,
            points=points,
            coins=coins,
            win_pending=self._win_pending,
        )
        if self._win_pending and not defer_win:
            self.complete_win()
        return outcome

    def complete_win(self) -> bool:
        """Credit the stage reward and enter ``win``."""
        if not self._win_pending or self._phase is not Phase.PLAYING:
            return False

        self._win_pending = False
        reward = self._profile.reward_coins
        self._add_score(reward)
        self._economy.credit_coins(reward)
        self._emit(FeedbackEvent.WIN, reward=reward)
        self._emit(FeedbackEvent.COIN, amount=reward)
        self._set_phase(Phase.WIN)
        return True

    # -- Ad-gated bonuses ------------------------------------------------

    def continue_with_ad(self) -> bool:
        """Resume a failed round with three fresh knives, once per round.

        Stuck knives, apples and score are kept.

        Returns:
            True if the round was resumed
        """
        if not self.can_continue:
            logger.debug(
                "Continue rejected (phase=%s, used=%s)",
                self._phase.value,
                self._has_used_continue,
            )
            return False
        if not self._request_ad(AdPlacement.CONTINUE):
            return False

        self._has_used_continue = True
        self._knives_remaining = min(CONTINUE_KNIVES, self._profile.knife_budget)
        self._set_phase(Phase.PLAYING)
        return True

    def double_reward_with_ad(self) -> bool:
        """Credit the stage reward a second time (coins only) and advance."""
        if self._phase is not Phase.WIN:
            logger.debug("double_reward_with_ad ignored in %s", self._phase.value)
            return False
        if not self._request_ad(AdPlacement.DOUBLE_REWARD):
            return False

        reward = self._profile.reward_coins
        self._economy.credit_coins(reward)
        self._emit(FeedbackEvent.COIN, amount=reward)
        self.advance_stage()
        return True

    def _request_ad(self, placement: AdPlacement) -> bool:
        try:
            granted = bool(self._ad_gate(placement))
        except Exception:
            logger.exception("Ad request failed for %s", placement.value)
            return False
        if not granted:
            logger.info("Ad reward not granted for %s", placement.value)
        return granted

    # -- Helpers ---------------------------------------------------------

    def _add_score(self, points: int) -> None:
        self._score += points
        self._economy.record_score(self._score)

    def _set_phase(self, phase: Phase) -> None:
        if phase is not self._phase:
            logger.info("Stage %d: %s -> %s", self._stage, self._phase.value, phase.value)
        self._phase = phase

    def _emit(self, event: FeedbackEvent, **data) -> None:
        self._events.emit(event, stage_number=self._stage, **data)
