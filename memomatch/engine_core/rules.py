"""
Game Rules - Scoring, timing and power-up tunables.

One GameRules instance is shared by the state machine and the
power-up controller. DEFAULT_RULES matches the classic game.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .state import PowerUps


@dataclass(frozen=True)
class GameRules:
    """Numbers that drive scoring and the clock."""
    match_points: int = 10
    match_time_bonus: int = 5  # seconds
    mismatch_time_penalty: int = 2  # seconds
    mismatch_time_floor: int = 1  # a mismatch never drains the clock to zero
    mismatch_delay_ms: int = 1000
    hint_duration_ms: int = 3000
    slow_time_bonus: int = 10  # seconds
    tick_interval_ms: int = 1000
    starting_power_ups: PowerUps = field(default_factory=PowerUps)


DEFAULT_RULES = GameRules()
