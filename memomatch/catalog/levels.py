"""
Difficulty Levels - The built-in difficulties offered on the menu.

Pairs scale from 6 to 18; the time limit is ten seconds per pair.
"""

from ..engine_core.state import Difficulty
from ..errors import UnknownDifficultyError

NORMAL = Difficulty(name="Normal", pairs=6, time_limit_seconds=60)
HARD = Difficulty(name="Hard", pairs=9, time_limit_seconds=90)
EXPERT = Difficulty(name="Expert", pairs=12, time_limit_seconds=120)
INSANE = Difficulty(name="Insane", pairs=18, time_limit_seconds=180)

DIFFICULTY_LEVELS: list[Difficulty] = [NORMAL, HARD, EXPERT, INSANE]

DEFAULT_DIFFICULTY = NORMAL


def get_difficulty(name: str) -> Difficulty:
    """
    Look up a built-in difficulty, case-insensitively.

    Raises:
        UnknownDifficultyError: if no level has that name
    """
    for level in DIFFICULTY_LEVELS:
        if level.name.lower() == name.lower():
            return level
    raise UnknownDifficultyError(name)
