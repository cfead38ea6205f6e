"""
Knife Hit - Test Configuration and Fixtures

Common fixtures and helpers for all test modules.
"""

import random
from datetime import date

import pytest

from src.database.store import MemoryStore
from src.engine.angles import wrap
from src.engine.base import Boss
from src.engine.economy import EconomyLedger
from src.engine.progression import ProgressionTable
from src.engine.round import RoundStateMachine
from src.feedback.events import EventBus, EventRecorder


TODAY = date(2026, 10, 16)


def _aim(machine: RoundStateMachine, angle: float) -> None:
    """Spin the log until a knife thrown now lands at ``angle``."""
    needed = wrap(180.0 - angle - machine.rotation_angle)
    if needed:
        machine.tick(needed / machine.rotation_speed)


def _throw_at(machine: RoundStateMachine, angle: float, **kwargs):
    """Aim at ``angle`` and throw."""
    _aim(machine, angle)
    return machine.throw(**kwargs)


def _gaps_between_targets(machine: RoundStateMachine) -> list[float]:
    """Angles halfway between neighbouring apples, clear of every apple."""
    angles = sorted(t.angle for t in machine.targets)
    step = 360.0 / len(angles)
    return [wrap(a + step / 2) for a in angles]


# =============================================================================
# ECONOMY FIXTURES
# =============================================================================

@pytest.fixture
def store() -> MemoryStore:
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def ledger(store) -> EconomyLedger:
    """Economy ledger over the empty store with a fixed clock."""
    ledger = EconomyLedger(store, clock=lambda: TODAY)
    ledger.load()
    return ledger


# =============================================================================
# ROUND FIXTURES
# =============================================================================

@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def bus(recorder) -> EventBus:
    """Event bus with a recorder attached."""
    bus = EventBus()
    bus.subscribe(recorder)
    return bus


@pytest.fixture
def machine(ledger, bus) -> RoundStateMachine:
    """State machine with the default tables and a seeded random source."""
    return RoundStateMachine(ledger, events=bus, rng=random.Random(7))


@pytest.fixture
def one_knife_boss() -> Boss:
    """A stage-1 boss that is beaten with a single knife next to one apple."""
    return Boss(
        stage_number=1,
        name="Test Boss",
        color="#000000",
        bg_color="#111111",
        knife_budget=1,
        target_count=1,
        rotation_speed=2.0,
        reward_coins=200,
    )


@pytest.fixture
def boss_machine(ledger, bus, one_knife_boss) -> RoundStateMachine:
    """State machine whose stage 1 is the one-knife boss."""
    return RoundStateMachine(
        ledger,
        progression=ProgressionTable([one_knife_boss]),
        events=bus,
        rng=random.Random(7),
    )


# =============================================================================
# HELPERS
# =============================================================================

@pytest.fixture
def aim():
    """Function that spins a machine so the next knife lands at an angle."""
    return _aim


@pytest.fixture
def throw_at():
    """Function that aims a machine at an angle and throws."""
    return _throw_at


@pytest.fixture
def safe_angles():
    """Function listing the angles between a machine's apples."""
    return _gaps_between_targets
