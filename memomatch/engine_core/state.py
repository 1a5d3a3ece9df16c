"""
Game State - Cards, difficulty, power-up counters and the session aggregate.

Design principles:
- Immutable-friendly: transitions build a new GameState instead of editing one
- Atomic: the state machine swaps the whole state in one assignment
- Observable: every state can be frozen into a GameSnapshot for the UI
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum


class GamePhase(Enum):
    """High-level game phases."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GamePhase.WON, GamePhase.LOST)


class CardState(Enum):
    """Where a card is in the flip protocol."""
    FACE_DOWN = "face_down"
    FACE_UP = "face_up"
    MATCHED = "matched"


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def color(self) -> CardColor:
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return CardColor.RED
        return CardColor.BLACK


class CardColor(Enum):
    RED = "red"
    BLACK = "black"


class CharacterType(Enum):
    """Flavor of a character card."""
    ANIMAL = "animal"
    SUPERHERO = "superhero"
    ROBOT = "robot"
    MYTHICAL = "mythical"


class PowerUpKind(Enum):
    """Limited-use power-ups."""
    SHUFFLE = "shuffle"
    HINT = "hint"
    SLOW_TIME = "slowTime"


@dataclass(frozen=True)
class Card:
    """
    A card instance on the board.

    Cards sharing a name form a pair. Suit and color are fixed
    at generation; only `state` changes during play.
    """
    id: int
    name: str  # Pair key
    flavor: CharacterType
    suit: Suit
    image: str = ""
    state: CardState = CardState.FACE_DOWN

    @property
    def color(self) -> CardColor:
        return self.suit.color

    @property
    def is_face_down(self) -> bool:
        return self.state == CardState.FACE_DOWN

    def with_state(self, state: CardState) -> Card:
        """Return the same card in a different state."""
        return replace(self, state=state)


@dataclass(frozen=True)
class Difficulty:
    """A difficulty level, fixed for the whole session."""
    name: str
    pairs: int
    time_limit_seconds: int


@dataclass(frozen=True)
class PowerUps:
    """Remaining uses of each power-up."""
    shuffle: int = 1
    hint: int = 2
    slow_time: int = 1

    def count(self, kind: PowerUpKind) -> int:
        return getattr(self, _POWER_UP_FIELDS[kind])

    def spend(self, kind: PowerUpKind) -> PowerUps:
        """Return counters with one use of `kind` consumed."""
        attr = _POWER_UP_FIELDS[kind]
        return replace(self, **{attr: getattr(self, attr) - 1})

    def as_dict(self) -> dict[str, int]:
        return {kind.value: self.count(kind) for kind in PowerUpKind}


_POWER_UP_FIELDS = {
    PowerUpKind.SHUFFLE: "shuffle",
    PowerUpKind.HINT: "hint",
    PowerUpKind.SLOW_TIME: "slow_time",
}


@dataclass(frozen=True)
class GameSnapshot:
    """
    Read-only view of the game handed to the presentation layer.

    Produced after every transition. Holding on to a snapshot never
    exposes later changes.
    """
    phase: GamePhase
    deck: tuple[Card, ...] = ()
    face_up: tuple[int, ...] = ()
    hinted: int | None = None
    score: int = 0
    time_left: int = 0
    matched_pair_count: int = 0
    power_ups: PowerUps = field(default_factory=PowerUps)
    difficulty: Difficulty | None = None
    epoch: int = 0

    @classmethod
    def empty(cls, epoch: int = 0) -> GameSnapshot:
        """Snapshot for the menu, when no session exists."""
        return cls(phase=GamePhase.NOT_STARTED, power_ups=PowerUps(0, 0, 0), epoch=epoch)


@dataclass(frozen=True)
class GameState:
    """
    Complete state of one session.

    This is the canonical state the engine operates on.
    All changes go through GameStateMachine.
    """
    session_id: str
    epoch: int
    difficulty: Difficulty
    deck: tuple[Card, ...]
    time_left: int
    phase: GamePhase = GamePhase.PLAYING
    face_up: tuple[int, ...] = ()
    matched_pair_count: int = 0
    score: int = 0
    power_ups: PowerUps = field(default_factory=PowerUps)
    hinted: int | None = None

    def index_of(self, card_id: int) -> int | None:
        """Deck position of a card id, or None if it is not on the board."""
        for index, card in enumerate(self.deck):
            if card.id == card_id:
                return index
        return None

    def get_card(self, card_id: int) -> Card | None:
        index = self.index_of(card_id)
        if index is None:
            return None
        return self.deck[index]

    def with_card_states(self, card_ids: tuple[int, ...], state: CardState) -> tuple[Card, ...]:
        """Return a deck where the given cards are moved to `state`."""
        return tuple(
            card.with_state(state) if card.id in card_ids else card
            for card in self.deck
        )

    def face_down_positions(self) -> list[int]:
        return [i for i, card in enumerate(self.deck) if card.is_face_down]

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            phase=self.phase,
            deck=self.deck,
            face_up=self.face_up,
            hinted=self.hinted,
            score=self.score,
            time_left=self.time_left,
            matched_pair_count=self.matched_pair_count,
            power_ups=self.power_ups,
            difficulty=self.difficulty,
            epoch=self.epoch,
        )
