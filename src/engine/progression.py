"""
Knife Hit - Progression Table

Static stage lookup: which stages are boss stages, and the parameters every
stage is played with. The boss list is injectable so tests and alternate
modes can supply their own table.

Normal stages:
    - 10 knives, 10 apples, base speed 1.5, completion reward 50

Rotation speed:
    - (boss speed or 1.5) + 0.1 per stage after the first
"""

from typing import Sequence

from src.engine.base import Boss, StageProfile
from src.engine.validators import validate_bosses


DEFAULT_BOSSES: tuple[Boss, ...] = (
    Boss(5, "Cheese Boss", "#FFD700", "#FFA000", knife_budget=12, target_count=8,
         rotation_speed=2.0, reward_coins=200),
    Boss(10, "Watermelon", "#4CAF50", "#2E7D32", knife_budget=14, target_count=6,
         rotation_speed=2.2, reward_coins=300),
    Boss(15, "Cake Boss", "#E91E63", "#C2185B", knife_budget=15, target_count=5,
         rotation_speed=2.5, reward_coins=400),
    Boss(20, "Orange Boss", "#FF9800", "#F57C00", knife_budget=16, target_count=4,
         rotation_speed=2.8, reward_coins=500),
    Boss(25, "Diamond", "#00BCD4", "#0097A7", knife_budget=18, target_count=3,
         rotation_speed=3.0, reward_coins=1000),
)


class ProgressionTable:
    """
    Read-only stage lookup.

    Stages without a boss entry (including malformed stage numbers) are
    normal stages.
    """

    NORMAL_KNIFE_BUDGET = 10
    NORMAL_TARGET_COUNT = 10
    NORMAL_ROTATION_SPEED = 1.5
    NORMAL_REWARD = 50
    SPEED_STEP = 0.1

    NORMAL_COLOR = "#DEB887"
    NORMAL_BG_COLOR = "#8B5A2B"

    def __init__(self, bosses: Sequence[Boss] = DEFAULT_BOSSES) -> None:
        self._bosses = validate_bosses(bosses)

    @property
    def bosses(self) -> tuple[Boss, ...]:
        """Boss entries ordered by stage."""
        return tuple(self._bosses[s] for s in sorted(self._bosses))

    def boss_for(self, stage_number: int) -> Boss | None:
        """Return the boss of ``stage_number``, or None for a normal stage."""
        return self._bosses.get(stage_number)

    def is_boss_stage(self, stage_number: int) -> bool:
        return stage_number in self._bosses

    def knife_budget(self, stage_number: int) -> int:
        boss = self.boss_for(stage_number)
        return boss.knife_budget if boss else self.NORMAL_KNIFE_BUDGET

    def target_count(self, stage_number: int) -> int:
        boss = self.boss_for(stage_number)
        return boss.target_count if boss else self.NORMAL_TARGET_COUNT

    def reward(self, stage_number: int) -> int:
        """Completion reward, credited to both score and coins."""
        boss = self.boss_for(stage_number)
        return boss.reward_coins if boss else self.NORMAL_REWARD

    def rotation_speed(self, stage_number: int) -> float:
        """Effective degrees per tick for a stage.

        The per-stage speed-up is layered on whichever base applies, so
        later bosses spin faster than their table value.
        """
        boss = self.boss_for(stage_number)
        base = boss.rotation_speed if boss else self.NORMAL_ROTATION_SPEED
        steps = max(stage_number - 1, 0) if isinstance(stage_number, int) else 0
        return base + steps * self.SPEED_STEP

    def stage_profile(self, stage_number: int) -> StageProfile:
        """Bundle every parameter of a stage into one record."""
        boss = self.boss_for(stage_number)
        return StageProfile(
            stage_number=stage_number,
            knife_budget=self.knife_budget(stage_number),
            target_count=self.target_count(stage_number),
            rotation_speed=self.rotation_speed(stage_number),
            reward_coins=self.reward(stage_number),
            color=boss.color if boss else self.NORMAL_COLOR,
            bg_color=boss.bg_color if boss else self.NORMAL_BG_COLOR,
            boss=boss,
        )
