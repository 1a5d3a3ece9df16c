"""
Power-Up Controller - Plans the effect of a power-up against a state.

The controller never mutates the session. It reads the current state
and returns a PowerUpEffect describing what should change; the state
machine applies the effect and spends the counter in one transition,
so a spent counter is never observed without its effect.

Power-ups:
- SHUFFLE: Fisher-Yates over the positions of face-down cards only
- HINT: highlight one card of an intact face-down pair
- SLOW_TIME: add seconds to the countdown
"""

from __future__ import annotations
import random
from collections import defaultdict
from dataclasses import dataclass

from .board import fisher_yates
from .rules import DEFAULT_RULES, GameRules
from .state import Card, GamePhase, GameState, PowerUpKind


@dataclass(frozen=True)
class PowerUpEffect:
    """
    What a power-up does to the state.

    Fields left as None/0 mean "no change".
    """
    kind: PowerUpKind
    deck: tuple[Card, ...] | None = None  # SHUFFLE: the rearranged deck
    hinted: int | None = None  # HINT: card id to highlight
    time_bonus: int = 0  # SLOW_TIME

    def describe(self) -> str:
        if self.kind == PowerUpKind.SHUFFLE:
            return "Shuffled the face-down cards"
        if self.kind == PowerUpKind.HINT:
            if self.hinted is None:
                return "Hint used but no intact pair was left to reveal"
            return f"Hinted card {self.hinted}"
        return f"Added {self.time_bonus}s to the clock"


class PowerUpController:
    """Computes power-up effects. Stateless apart from its random source."""

    def __init__(self, rng: random.Random | None = None, rules: GameRules = DEFAULT_RULES):
        self.rng = rng or random.Random()
        self.rules = rules

    def is_available(self, state: GameState | None, kind: PowerUpKind) -> bool:
        """A power-up is usable while playing and while it has uses left."""
        if state is None or state.phase != GamePhase.PLAYING:
            return False
        return state.power_ups.count(kind) > 0

    def plan(self, state: GameState | None, kind: PowerUpKind) -> PowerUpEffect | None:
        """
        Plan the effect of using `kind` now.

        Returns None if the power-up is unavailable. A hint with nothing
        to reveal still returns an effect, so the use is consumed.
        """
        if not self.is_available(state, kind):
            return None

        if kind == PowerUpKind.SHUFFLE:
            return PowerUpEffect(kind=kind, deck=self._shuffle_face_down(state))
        if kind == PowerUpKind.HINT:
            return PowerUpEffect(kind=kind, hinted=self._pick_hint(state))
        return PowerUpEffect(kind=kind, time_bonus=self.rules.slow_time_bonus)

    def _shuffle_face_down(self, state: GameState) -> tuple[Card, ...]:
        """Permute face-down cards among their own positions."""
        positions = state.face_down_positions()
        cards = [state.deck[p] for p in positions]
        fisher_yates(cards, self.rng)

        deck = list(state.deck)
        for position, card in zip(positions, cards):
            deck[position] = card
        return tuple(deck)

    def _pick_hint(self, state: GameState) -> int | None:
        """Pick one card of a random pair whose both cards are still face down."""
        by_name: dict[str, list[int]] = defaultdict(list)
        for card in state.deck:
            if card.is_face_down:
                by_name[card.name].append(card.id)

        # Iterate in deck order so the same seed gives the same hint
        intact_pairs = [ids for ids in by_name.values() if len(ids) == 2]
        if not intact_pairs:
            return None

        pair = intact_pairs[self.rng.randrange(len(intact_pairs))]
        return pair[self.rng.randrange(2)]
