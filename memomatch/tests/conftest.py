"""
Pytest fixtures for Memomatch tests.
"""

import random

import pytest

from ..catalog import NORMAL
from ..engine_core.clock import VirtualClock
from ..engine_core.machine import GameStateMachine
from ..engine_core.state import Card, CardState, GameState


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so boards are reproducible."""
    return random.Random(1234)


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def machine(clock: VirtualClock, rng: random.Random) -> GameStateMachine:
    """A state machine sitting at the menu."""
    return GameStateMachine(clock=clock, rng=rng)


@pytest.fixture
def playing_machine(machine: GameStateMachine) -> GameStateMachine:
    """A state machine with a Normal game (6 pairs, 60s) in progress."""
    machine.start(NORMAL)
    return machine


def pair_ids(state: GameState, name: str | None = None) -> tuple[int, int]:
    """Ids of two face-down cards with the same name."""
    by_name: dict[str, list[int]] = {}
    for card in state.deck:
        if card.state == CardState.FACE_DOWN:
            by_name.setdefault(card.name, []).append(card.id)
    for card_name, ids in by_name.items():
        if len(ids) == 2 and (name is None or card_name == name):
            return ids[0], ids[1]
    raise AssertionError("No intact face-down pair left")


def mismatch_ids(state: GameState) -> tuple[int, int]:
    """Ids of two face-down cards with different names."""
    face_down = [card for card in state.deck if card.state == CardState.FACE_DOWN]
    first = face_down[0]
    for card in face_down[1:]:
        if card.name != first.name:
            return first.id, card.id
    raise AssertionError("No mismatching face-down cards left")


def card_states(state: GameState, *card_ids: int) -> list[CardState]:
    return [state.get_card(card_id).state for card_id in card_ids]


def names_of(deck: tuple[Card, ...]) -> list[str]:
    return [card.name for card in deck]
