"""
Knife Hit - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence

from src.engine.base import Boss


def validate_count(count: int, name: str = "Count", minimum: int = 1) -> int:
    """
    Validate a positive item count (knives, targets, ticks).

    Args:
        count: Count to validate
        name: Label used in error messages
        minimum: Smallest accepted value

    Returns:
        Validated count

    Raises:
        ValueError: If count is not an integer or below minimum
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"{name} must be an integer, got {type(count).__name__}.")

    if count < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {count}.")

    return count


def validate_stage_number(stage_number: int) -> int:
    """
    Validate a 1-based stage number.

    Raises:
        ValueError: If stage_number is not a positive integer
    """
    return validate_count(stage_number, name="Stage number", minimum=1)


def validate_amount(amount: int, name: str = "Amount") -> int:
    """
    Validate a coin or score amount.

    Args:
        amount: Amount to validate
        name: Label used in error messages

    Returns:
        Validated amount

    Raises:
        ValueError: If amount is not a non-negative integer
    """
    return validate_count(amount, name=name, minimum=0)


def validate_reward_table(rewards: Sequence[int]) -> tuple[int, ...]:
    """
    Validate a daily reward table.

    Args:
        rewards: Reward amounts, one per streak day

    Returns:
        Validated rewards as a tuple

    Raises:
        ValueError: If the table is empty or holds invalid amounts
    """
    if not rewards:
        raise ValueError("Reward table must have at least one entry.")

    return tuple(validate_amount(r, name="Reward") for r in rewards)


def validate_bosses(bosses: Sequence[Boss]) -> dict[int, Boss]:
    """
    Validate boss entries and index them by stage number.

    Args:
        bosses: Boss records to validate

    Returns:
        Mapping of stage number to boss

    Raises:
        ValueError: If a boss has invalid parameters or a stage appears twice
    """
    by_stage: dict[int, Boss] = {}
    for boss in bosses:
        validate_stage_number(boss.stage_number)
        validate_count(boss.knife_budget, name="Knife budget")
        validate_count(boss.target_count, name="Target count", minimum=0)
        validate_amount(boss.reward_coins, name="Reward")
        if boss.rotation_speed < 0:
            raise ValueError(
                f"Rotation speed cannot be negative, got {boss.rotation_speed}."
            )
        if boss.stage_number in by_stage:
            raise ValueError(f"Duplicate boss for stage {boss.stage_number}.")
        by_stage[boss.stage_number] = boss

    return by_stage
