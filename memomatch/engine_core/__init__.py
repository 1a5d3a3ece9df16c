"""
Engine Core - Deterministic game state management for the memory game.

The engine is the runtime that:
1. Generates a shuffled board for a difficulty
2. Owns the session state
3. Validates and resolves flip intents
4. Applies power-ups
5. Drives the countdown and delayed transitions from a Clock
"""

from .state import (
    Card,
    CardColor,
    CardState,
    CharacterType,
    Difficulty,
    GamePhase,
    GameSnapshot,
    GameState,
    PowerUpKind,
    PowerUps,
    Suit,
)
from .rules import GameRules, DEFAULT_RULES
from .action import Action, ActionType, ActionPayload, ActionResult
from .board import BoardGenerator, fisher_yates
from .clock import Clock, TimerHandle, VirtualClock, AsyncioClock
from .power_ups import PowerUpController, PowerUpEffect
from .machine import GameStateMachine

__all__ = [
    "Card",
    "CardColor",
    "CardState",
    "CharacterType",
    "Difficulty",
    "GamePhase",
    "GameSnapshot",
    "GameState",
    "PowerUpKind",
    "PowerUps",
    "Suit",
    "GameRules",
    "DEFAULT_RULES",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "BoardGenerator",
    "fisher_yates",
    "Clock",
    "TimerHandle",
    "VirtualClock",
    "AsyncioClock",
    "PowerUpController",
    "PowerUpEffect",
    "GameStateMachine",
]
