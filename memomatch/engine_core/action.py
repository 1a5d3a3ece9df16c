"""
Action System - Intents, payloads, and results.

Actions are the intents emitted by the presentation layer:
1. Starting a game at a difficulty
2. Flipping a card
3. Using a power-up
4. Restarting or returning to the menu

Clock ticks and delayed callbacks are not actions; the state machine
handles them internally.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .state import Difficulty, GameSnapshot, PowerUpKind


class ActionType(Enum):
    """Types of intents."""
    START_GAME = "start_game"
    FLIP_CARD = "flip_card"
    USE_POWER_UP = "use_power_up"
    RESTART = "restart"
    RETURN_TO_MENU = "return_to_menu"


@dataclass
class ActionPayload:
    """
    Parameters of an intent.

    Different action types use different fields; the state machine
    reads only the ones it needs.
    """
    difficulty: Difficulty | None = None
    card_id: int | None = None
    power_up: PowerUpKind | None = None


@dataclass
class Action:
    """A complete intent to be dispatched to the state machine."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def start_game(cls, difficulty: Difficulty) -> Action:
        return cls(
            action_type=ActionType.START_GAME,
            payload=ActionPayload(difficulty=difficulty),
        )

    @classmethod
    def flip_card(cls, card_id: int) -> Action:
        return cls(
            action_type=ActionType.FLIP_CARD,
            payload=ActionPayload(card_id=card_id),
        )

    @classmethod
    def use_power_up(cls, kind: PowerUpKind) -> Action:
        return cls(
            action_type=ActionType.USE_POWER_UP,
            payload=ActionPayload(power_up=kind),
        )

    @classmethod
    def restart(cls) -> Action:
        return cls(action_type=ActionType.RESTART)

    @classmethod
    def return_to_menu(cls) -> Action:
        return cls(action_type=ActionType.RETURN_TO_MENU)


@dataclass
class ActionResult:
    """
    Result of dispatching an intent or running a timed transition.

    An ignored intent is not a failure: `applied` is False and
    `reason` says why, but nothing is raised.
    """
    applied: bool
    snapshot: GameSnapshot
    reason: str | None = None

    # Human-readable changes, for logs and UIs
    changes: list[str] = field(default_factory=list)

    @classmethod
    def ignored(cls, snapshot: GameSnapshot, reason: str) -> ActionResult:
        return cls(applied=False, snapshot=snapshot, reason=reason)

    @classmethod
    def applied_with(cls, snapshot: GameSnapshot, changes: list[str] | None = None) -> ActionResult:
        return cls(applied=True, snapshot=snapshot, changes=changes or [])
