"""
Catalog - Built-in content for the memory game.

This module contains:
- The character pool boards are drawn from
- The difficulty levels offered on the menu
"""

from .characters import CHARACTERS, CharacterTemplate, get_character
from .levels import (
    DIFFICULTY_LEVELS,
    DEFAULT_DIFFICULTY,
    NORMAL,
    HARD,
    EXPERT,
    INSANE,
    get_difficulty,
)

__all__ = [
    "CHARACTERS",
    "CharacterTemplate",
    "get_character",
    "DIFFICULTY_LEVELS",
    "DEFAULT_DIFFICULTY",
    "NORMAL",
    "HARD",
    "EXPERT",
    "INSANE",
    "get_difficulty",
]
