"""
Knife Hit Game Engine.

Pure Python game rules with zero UI/database dependencies.
Handles log rotation, knife collisions, apple hits, stage progression
and the coin economy.
"""

from src.engine.base import (
    AdPlacement,
    Boss,
    EconomyState,
    Phase,
    RoundState,
    StageProfile,
    Target,
    TargetHit,
    ThrowOutcome,
    ThrowResult,
)
from src.engine.collisions import CollisionLedger
from src.engine.economy import (
    DAILY_REWARDS,
    EconomyLedger,
    KeyValueStore,
    StorageKey,
    StoreReadError,
)
from src.engine.progression import DEFAULT_BOSSES, ProgressionTable
from src.engine.round import RoundStateMachine
from src.engine.targets import TargetField

__all__ = [
    # Data Classes
    "Boss",
    "EconomyState",
    "RoundState",
    "StageProfile",
    "Target",
    "TargetHit",
    "ThrowOutcome",
    # Enums
    "AdPlacement",
    "Phase",
    "ThrowResult",
    # Tables
    "DAILY_REWARDS",
    "DEFAULT_BOSSES",
    # Components
    "CollisionLedger",
    "EconomyLedger",
    "KeyValueStore",
    "ProgressionTable",
    "RoundStateMachine",
    "StorageKey",
    "StoreReadError",
    "TargetField",
]
