"""
Knife Hit - Economy Ledger

Durable coin balance, high score and daily-reward streak. The ledger owns
one EconomyState, loads it once at startup and writes each field back to the
key-value store whenever it changes. Storage trouble never reaches gameplay:
unreadable values fall back to defaults and failed writes are logged. When
the store itself cannot be read, the daily reward is withheld because the
last claim date is unknown.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Annotated, Callable, Protocol, Sequence

from pydantic import Field, TypeAdapter, ValidationError

from src.engine.base import EconomyState
from src.engine.validators import validate_amount, validate_reward_table

logger = logging.getLogger(__name__)


DAILY_REWARDS: tuple[int, ...] = (50, 100, 150, 200, 300, 500, 1000)


class StorageKey:
    """Keys used in the durable key-value store."""
    COINS = "knife_hit_coins"
    HIGH_SCORE = "knife_hit_high_score"
    LAST_REWARD_DATE = "knife_hit_last_reward"
    REWARD_DAY = "knife_hit_reward_day"
    SELECTED_KNIFE = "knife_hit_selected_knife"


class StoreReadError(Exception):
    """The store could not be read, as opposed to the key being absent."""


class KeyValueStore(Protocol):
    """Durable storage used by the ledger.

    ``get`` returns ``default`` for a missing key and raises StoreReadError
    (or any other exception) when the backend is unreachable.
    """

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


_AMOUNT = TypeAdapter(Annotated[int, Field(ge=0)])
_STREAK_DAY = TypeAdapter(Annotated[int, Field(ge=1)])
_DATE = TypeAdapter(date)


class EconomyLedger:
    """Owner of the player's persistent economy."""

    def __init__(
        self,
        store: KeyValueStore,
        daily_rewards: Sequence[int] = DAILY_REWARDS,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._rewards = validate_reward_table(daily_rewards)
        self._clock = clock
        self._state = EconomyState()
        self._read_failed = False

    @property
    def state(self) -> EconomyState:
        return self._state

    @property
    def daily_rewards(self) -> tuple[int, ...]:
        return self._rewards

    @property
    def read_failed(self) -> bool:
        """True if the last load could not reach the store."""
        return self._read_failed

    # -- Lifecycle -------------------------------------------------------

    def load(self) -> EconomyState:
        """Read the economy from the store, replacing bad values with defaults."""
        self._read_failed = False
        streak_day = self._read(StorageKey.REWARD_DAY, _STREAK_DAY, 1)
        if streak_day > len(self._rewards):
            logger.warning("Streak day %s out of range; resetting to 1", streak_day)
            streak_day = 1

        self._state = EconomyState(
            coin_balance=self._read(StorageKey.COINS, _AMOUNT, 0),
            high_score=self._read(StorageKey.HIGH_SCORE, _AMOUNT, 0),
            last_reward_claim_date=self._read(StorageKey.LAST_REWARD_DATE, _DATE, None),
            current_streak_day=streak_day,
        )
        logger.info(
            "Economy loaded: %d coins, high score %d",
            self._state.coin_balance,
            self._state.high_score,
        )
        return self._state

    # -- Mutations -------------------------------------------------------

    def credit_coins(self, amount: int) -> int:
        """Add coins to the balance and persist it.

        Args:
            amount: Coins to add; zero is ignored

        Returns:
            The new balance

        Raises:
            ValueError: If amount is negative or not an integer
        """
        validate_amount(amount)
        if amount == 0:
            return self._state.coin_balance

        balance = self._state.coin_balance + amount
        self._state = replace(self._state, coin_balance=balance)
        self._save(StorageKey.COINS, balance)
        return balance

    def record_score(self, score: int) -> bool:
        """Raise the high score if ``score`` beats it.

        Returns:
            True if a new high score was stored
        """
        if score <= self._state.high_score:
            return False

        self._state = replace(self._state, high_score=score)
        self._save(StorageKey.HIGH_SCORE, score)
        return True

    def pending_daily_reward(self, today: date | None = None) -> int | None:
        """Amount of today's reward.

        Returns:
            None if it was already claimed, or if the store could not be
            read at load time
        """
        if self._read_failed:
            return None
        today = today or self._clock()
        if self._state.last_reward_claim_date == today:
            return None
        return self._reward_for(self._state.current_streak_day)

    def claim_daily_reward(self, today: date | None = None) -> int:
        """Claim today's reward and advance the streak.

        The streak cycles through the reward table and wraps back to day 1
        after the last entry.

        Returns:
            Coins credited, or 0 if no reward is pending
        """
        today = today or self._clock()
        amount = self.pending_daily_reward(today)
        if amount is None:
            logger.debug("Daily reward not available for %s", today)
            return 0

        self.credit_coins(amount)
        next_day = self._state.current_streak_day % len(self._rewards) + 1
        self._state = replace(
            self._state,
            current_streak_day=next_day,
            last_reward_claim_date=today,
        )
        self._save(StorageKey.LAST_REWARD_DATE, today.isoformat())
        self._save(StorageKey.REWARD_DAY, next_day)
        logger.info("Daily reward claimed: %d coins, next streak day %d", amount, next_day)
        return amount

    # -- Helpers ---------------------------------------------------------

    def _reward_for(self, streak_day: int) -> int:
        return self._rewards[(streak_day - 1) % len(self._rewards)]

    def _read(self, key: str, adapter: TypeAdapter, default: Any) -> Any:
        """Read and validate one stored value; malformed values count as absent."""
        try:
            raw = self._store.get(key, None)
        except Exception:
            logger.exception("Failed to read %s; using default", key)
            self._read_failed = True
            return default

        if raw is None:
            return default
        try:
            return adapter.validate_python(raw)
        except ValidationError:
            logger.warning("Ignoring malformed value for %s: %r", key, raw)
            return default

    def _save(self, key: str, value: Any) -> None:
        try:
            self._store.set(key, value)
        except Exception:
            logger.exception("Failed to persist %s", key)
