"""
Knife Hit - Round State Machine Tests

Comprehensive tests for phase transitions, throwing, scoring and the
ad-gated bonuses.
"""

import pytest

from src.engine.base import AdPlacement, Phase, ThrowResult
from src.engine.economy import EconomyLedger
from src.engine.round import RoundStateMachine
from src.feedback.events import FeedbackEvent


# === Starting Rounds ===


class TestStartRound:
    """Tests for start_round() and confirm_boss_start()."""

    def test_initial_phase_is_ready(self, machine):
        assert machine.phase is Phase.READY

    def test_normal_stage_starts_playing(self, machine):
        assert machine.start_round(1) is Phase.PLAYING
        state = machine.snapshot()
        assert state.knives_remaining == 10
        assert len(state.targets) == 10
        assert state.targets_hit_count == 0
        assert state.rotation_angle == 0
        assert state.stuck_knives == ()
        assert state.is_boss_round is False
        assert state.active_boss is None

    def test_boss_stage_stops_at_intro(self, machine):
        assert machine.start_round(5) is Phase.BOSS_INTRO
        state = machine.snapshot()
        assert state.is_boss_round is True
        assert state.active_boss.stage_number == 5

    def test_throw_ignored_during_boss_intro(self, machine):
        machine.start_round(5)
        assert machine.throw() is None

    def test_confirm_boss_start(self, machine):
        machine.start_round(5)
        assert machine.confirm_boss_start() is True
        assert machine.phase is Phase.PLAYING
        assert machine.knives_remaining == 12
        assert len(machine.targets) == 8

    def test_confirm_outside_intro_is_noop(self, machine):
        machine.start_round(1)
        assert machine.confirm_boss_start() is False

    @pytest.mark.parametrize("stage", [0, -3])
    def test_invalid_stage_falls_back_to_one(self, stage, machine):
        machine.start_round(stage)
        assert machine.stage_number == 1
        assert machine.phase is Phase.PLAYING

    def test_score_kept_across_stages(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        throw_at(machine, safe_angles(machine)[0])
        machine.start_round(2)
        assert machine.score == 10
        assert machine.stuck_knives == ()


# === Rotation ===


class TestRotation:
    """Tests for tick() and advance_elapsed()."""

    def test_tick_uses_stage_speed(self, machine):
        machine.start_round(1)
        assert machine.tick() == pytest.approx(1.5)
        assert machine.tick(2) == pytest.approx(4.5)

    def test_tick_wraps(self, machine):
        machine.start_round(1)
        machine.tick(250)
        assert machine.rotation_angle == pytest.approx(15)

    def test_speed_grows_with_stage(self, machine):
        machine.start_round(3)
        assert machine.tick() == pytest.approx(1.7)

    def test_no_rotation_outside_playing(self, machine):
        assert machine.tick(10) == 0
        machine.start_round(5)
        assert machine.tick(10) == 0

    def test_rotation_stops_after_failure(self, machine, throw_at):
        machine.start_round(1)
        throw_at(machine, 0)
        throw_at(machine, 5)
        before = machine.rotation_angle
        machine.tick(10)
        assert machine.rotation_angle == before

    def test_advance_elapsed(self, machine):
        machine.start_round(1)
        machine.advance_elapsed(0.5, tick_rate=60)
        assert machine.rotation_angle == pytest.approx(45)

    def test_hit_angle_follows_rotation(self, machine):
        machine.start_round(1)
        machine.tick(20)  # 30 degrees
        outcome = machine.throw()
        assert outcome.hit_angle == pytest.approx(150)


# === Throwing ===


class TestThrow:
    """Tests for throw(), begin_throw() and resolve_throw()."""

    def test_first_throw_sticks(self, machine, recorder):
        machine.start_round(1)
        outcome = machine.throw()

        assert outcome.result is ThrowResult.STUCK
        assert outcome.hit_angle == pytest.approx(180)
        assert machine.stuck_knives == (outcome.hit_angle,)
        assert machine.knives_remaining == 9
        assert FeedbackEvent.THROW in recorder.events
        assert FeedbackEvent.HIT in recorder.events

    def test_throw_scores_ten(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        outcome = throw_at(machine, safe_angles(machine)[0])
        assert outcome.points == 10
        assert outcome.targets.count == 0
        assert machine.score == 10

    def test_collision_fails_round(self, machine, recorder, throw_at):
        machine.start_round(1)
        throw_at(machine, 0)
        score = machine.score
        outcome = throw_at(machine, 10)

        assert outcome.collided
        assert machine.phase is Phase.FAILED
        assert machine.score == score
        assert len(machine.stuck_knives) == 1
        assert machine.knives_remaining == 9
        assert recorder.events[-1] is FeedbackEvent.FAIL

    def test_apple_hit(self, machine, recorder, throw_at):
        machine.start_round(1)
        target = machine.targets[0]
        recorder.drain()

        outcome = throw_at(machine, target.angle)

        assert outcome.targets.count == 1
        assert outcome.points == 15
        assert outcome.coins == 5
        assert machine.score == 15
        assert machine.snapshot().targets_hit_count == 1
        assert machine.economy.state.coin_balance == 5
        assert machine.targets[0].visible is False
        assert recorder.events == [
            FeedbackEvent.THROW,
            FeedbackEvent.HIT,
            FeedbackEvent.APPLE,
            FeedbackEvent.COIN,
        ]
        assert recorder.payloads[-1].data["amount"] == 5

    def test_second_throw_rejected_while_in_flight(self, machine):
        machine.start_round(1)
        assert machine.begin_throw() is True
        assert machine.is_throwing
        assert machine.begin_throw() is False
        assert machine.throw() is None

        machine.resolve_throw()
        assert len(machine.stuck_knives) == 1
        assert machine.knives_remaining == 9

    def test_landing_angle_fixed_at_release(self, machine):
        machine.start_round(1)
        machine.begin_throw()
        machine.tick(10)
        outcome = machine.resolve_throw()
        assert outcome.hit_angle == pytest.approx(180)

    def test_resolve_without_throw(self, machine):
        machine.start_round(1)
        assert machine.resolve_throw() is None

    def test_restart_during_flight_discards_throw(self, machine):
        machine.start_round(1)
        machine.begin_throw()
        machine.restart()
        assert machine.resolve_throw() is None
        assert machine.stuck_knives == ()

    def test_high_score_follows_score(self, machine, throw_at):
        machine.start_round(1)
        throw_at(machine, 0)
        throw_at(machine, 90)
        assert machine.economy.state.high_score == machine.score


# === Winning ===


class TestWin:
    """Tests for completing a stage."""

    def test_ten_clean_throws_win(self, machine, recorder, safe_angles, throw_at):
        machine.start_round(1)
        score = machine.score
        coins = machine.economy.state.coin_balance

        for angle in safe_angles(machine):
            throw_at(machine, angle)

        assert machine.phase is Phase.WIN
        assert machine.score - score == 10 * 10 + 50
        assert machine.economy.state.coin_balance - coins == 50
        assert machine.knives_remaining == 0
        assert len(machine.stuck_knives) == machine.knife_budget
        assert machine.snapshot().targets_hit_count == 0
        assert recorder.events[-2:] == [FeedbackEvent.WIN, FeedbackEvent.COIN]

    def test_deferred_win(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        angles = safe_angles(machine)
        for angle in angles[:-1]:
            throw_at(machine, angle)

        outcome = throw_at(machine, angles[-1], defer_win=True)

        assert outcome.win_pending is True
        assert machine.win_pending is True
        assert machine.phase is Phase.PLAYING
        assert machine.begin_throw() is False

        assert machine.complete_win() is True
        assert machine.phase is Phase.WIN
        assert machine.complete_win() is False

    def test_final_throw_hitting_apple_credits_both(self, boss_machine, throw_at):
        boss_machine.start_round(1)
        boss_machine.confirm_boss_start()

        outcome = throw_at(boss_machine, boss_machine.targets[0].angle)

        assert outcome.targets.count == 1
        assert boss_machine.phase is Phase.WIN
        assert boss_machine.score == 5 + 10 + 200
        assert boss_machine.economy.state.coin_balance == 5 + 200

    def test_boss_reward(self, boss_machine, throw_at):
        boss_machine.start_round(1)
        boss_machine.confirm_boss_start()
        throw_at(boss_machine, boss_machine.targets[0].angle + 180)
        assert boss_machine.score == 10 + 200


# === Stage Transitions ===


class TestTransitions:
    """Tests for advance_stage() and restart()."""

    def _win(self, machine, safe_angles, throw_at):
        for angle in safe_angles(machine):
            throw_at(machine, angle)
        assert machine.phase is Phase.WIN

    def test_advance_stage(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        self._win(machine, safe_angles, throw_at)

        assert machine.advance_stage() is Phase.PLAYING
        assert machine.stage_number == 2
        assert machine.knives_remaining == 10
        assert machine.stuck_knives == ()

    def test_advance_into_boss(self, machine, safe_angles, throw_at):
        machine.start_round(4)
        self._win(machine, safe_angles, throw_at)
        assert machine.advance_stage() is Phase.BOSS_INTRO

    def test_advance_requires_win(self, machine):
        machine.start_round(1)
        assert machine.advance_stage() is None
        assert machine.stage_number == 1

    def test_restart(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        self._win(machine, safe_angles, throw_at)
        machine.advance_stage()

        assert machine.restart() is Phase.PLAYING
        assert machine.stage_number == 1
        assert machine.score == 0
        assert machine.active_boss is None

    def test_restart_keeps_high_score(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        throw_at(machine, safe_angles(machine)[0])
        machine.restart()
        assert machine.economy.state.high_score == 10


# === Ad-gated Bonuses ===


class TestContinueWithAd:
    """Tests for continue_with_ad()."""

    def _fail(self, machine, throw_at):
        throw_at(machine, 0)
        throw_at(machine, 5)
        assert machine.phase is Phase.FAILED

    def test_continue_restores_three_knives(self, machine, throw_at):
        machine.start_round(1)
        self._fail(machine, throw_at)
        score = machine.score
        targets = machine.targets

        assert machine.continue_with_ad() is True
        assert machine.phase is Phase.PLAYING
        assert machine.knives_remaining == 3
        assert len(machine.stuck_knives) == 1
        assert machine.targets == targets
        assert machine.score == score
        assert machine.snapshot().has_used_continue is True

    def test_second_continue_rejected(self, machine, throw_at):
        machine.start_round(1)
        self._fail(machine, throw_at)
        machine.continue_with_ad()

        throw_at(machine, 3)
        assert machine.phase is Phase.FAILED
        assert machine.can_continue is False
        assert machine.continue_with_ad() is False
        assert machine.phase is Phase.FAILED

    def test_continue_requires_failure(self, machine):
        machine.start_round(1)
        assert machine.continue_with_ad() is False

    def test_continue_reset_on_new_round(self, machine, throw_at):
        machine.start_round(1)
        self._fail(machine, throw_at)
        machine.continue_with_ad()
        machine.restart()
        assert machine.snapshot().has_used_continue is False

    def test_ad_refused(self, ledger):
        machine = RoundStateMachine(ledger, ad_gate=lambda placement: False)
        machine.start_round(1)
        machine.throw()
        machine.tick(2)
        machine.throw()

        assert machine.continue_with_ad() is False
        assert machine.phase is Phase.FAILED
        assert machine.can_continue is True

    def test_ad_error_is_not_granted(self, ledger):
        def broken(placement):
            raise RuntimeError("no fill")

        machine = RoundStateMachine(ledger, ad_gate=broken)
        machine.start_round(1)
        machine.throw()
        machine.throw()
        assert machine.phase is Phase.FAILED
        assert machine.continue_with_ad() is False

    def test_ad_gate_receives_placement(self, ledger):
        seen = []
        machine = RoundStateMachine(ledger, ad_gate=lambda p: seen.append(p) or True)
        machine.start_round(1)
        machine.throw()
        machine.throw()
        machine.continue_with_ad()
        assert seen == [AdPlacement.CONTINUE]

    def test_out_of_knives_after_continue(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        angles = safe_angles(machine)
        throw_at(machine, angles[0])
        throw_at(machine, angles[0])
        machine.continue_with_ad()

        for angle in angles[1:4]:
            throw_at(machine, angle)

        assert machine.knives_remaining == 0
        assert machine.phase is Phase.PLAYING
        assert machine.is_out_of_knives is True
        assert machine.throw() is None


class TestDoubleRewardWithAd:
    """Tests for double_reward_with_ad()."""

    def test_double_reward(self, machine, safe_angles, throw_at):
        machine.start_round(1)
        for angle in safe_angles(machine):
            throw_at(machine, angle)
        coins = machine.economy.state.coin_balance
        score = machine.score

        assert machine.double_reward_with_ad() is True
        assert machine.economy.state.coin_balance == coins + 50
        assert machine.score == score
        assert machine.stage_number == 2
        assert machine.phase is Phase.PLAYING

    def test_double_reward_requires_win(self, machine):
        machine.start_round(1)
        assert machine.double_reward_with_ad() is False

    def test_double_reward_refused(self, ledger, safe_angles, throw_at):
        machine = RoundStateMachine(ledger, ad_gate=lambda p: False)
        machine.start_round(1)
        for angle in safe_angles(machine):
            throw_at(machine, angle)
        coins = ledger.state.coin_balance

        assert machine.double_reward_with_ad() is False
        assert machine.phase is Phase.WIN
        assert ledger.state.coin_balance == coins


# === Snapshot ===


class TestSnapshot:
    """Tests for snapshot()."""

    def test_snapshot_is_frozen(self, machine):
        machine.start_round(1)
        state = machine.snapshot()
        with pytest.raises(AttributeError):
            state.score = 99

    def test_snapshot_not_affected_by_later_throws(self, machine):
        machine.start_round(1)
        state = machine.snapshot()
        machine.throw()
        assert state.knives_remaining == 10
        assert state.stuck_knives == ()

    def test_shared_economy(self, store):
        ledger = EconomyLedger(store)
        ledger.load()
        machine = RoundStateMachine(ledger)
        assert machine.economy is ledger
