"""
Knife Hit - Game Driver

Runs a RoundStateMachine on an asyncio event loop. Two things are
scheduled here and nowhere else:

    - the rotation ticker, a repeating task that advances the log while the
      round is ``playing`` and is cancelled as soon as it is not
    - throw pacing: the knife flies for ``throw_duration`` before it lands,
      and a completed stage is credited ``win_delay`` later

Everything runs on one loop, so each throw fully resolves before the next
one is accepted.
"""

from __future__ import annotations

import asyncio
import logging

from src.config.settings import Settings
from src.engine.base import Phase, ThrowOutcome
from src.engine.round import RoundStateMachine

logger = logging.getLogger(__name__)


class GameDriver:
    """Schedules rotation and throw timing for a state machine."""

    def __init__(
        self,
        machine: RoundStateMachine,
        *,
        tick_rate: int = 60,
        throw_duration: float = 0.1,
        win_delay: float = 0.1,
    ) -> None:
        if tick_rate <= 0:
            raise ValueError(f"Tick rate must be positive, got {tick_rate}.")
        self.machine = machine
        self.tick_interval = 1.0 / tick_rate
        self.throw_duration = throw_duration
        self.win_delay = win_delay
        self._ticker: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, machine: RoundStateMachine, settings: Settings) -> "GameDriver":
        return cls(
            machine,
            tick_rate=settings.tick_rate,
            throw_duration=settings.throw_duration,
            win_delay=settings.win_delay,
        )

    @property
    def is_ticking(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    # -- Machine operations ----------------------------------------------

    def start_round(self, stage_number: int) -> Phase:
        phase = self.machine.start_round(stage_number)
        self._sync_ticker()
        return phase

    def confirm_boss_start(self) -> bool:
        started = self.machine.confirm_boss_start()
        self._sync_ticker()
        return started

    def continue_with_ad(self) -> bool:
        resumed = self.machine.continue_with_ad()
        self._sync_ticker()
        return resumed

    def double_reward_with_ad(self) -> bool:
        granted = self.machine.double_reward_with_ad()
        self._sync_ticker()
        return granted

    def advance_stage(self) -> Phase | None:
        phase = self.machine.advance_stage()
        self._sync_ticker()
        return phase

    def restart(self) -> Phase:
        phase = self.machine.restart()
        self._sync_ticker()
        return phase

    async def throw(self) -> ThrowOutcome | None:
        """Throw a knife and wait for it to land.

        Returns:
            The outcome, or None if the throw was not accepted
        """
        if not self.machine.begin_throw():
            return None

        await asyncio.sleep(self.throw_duration)
        outcome = self.machine.resolve_throw(defer_win=True)
        self._sync_ticker()

        if outcome is not None and outcome.win_pending:
            await asyncio.sleep(self.win_delay)
            self.machine.complete_win()
            self._sync_ticker()
        return outcome

    async def shutdown(self) -> None:
        """Cancel the rotation ticker."""
        task, self._ticker = self._ticker, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    # -- Rotation ticker -------------------------------------------------

    def _sync_ticker(self) -> None:
        """Run the ticker exactly while the machine is playing."""
        playing = self.machine.phase is Phase.PLAYING
        if playing and not self.is_ticking:
            self._ticker = asyncio.get_running_loop().create_task(self._tick_loop())
            logger.debug("Rotation ticker started")
        elif not playing and self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
            logger.debug("Rotation ticker stopped")

    async def _tick_loop(self) -> None:
        while self.machine.phase is Phase.PLAYING:
            await asyncio.sleep(self.tick_interval)
            self.machine.tick()
