"""
Board Generator - Builds a shuffled deck of card pairs.

Generation:
1. Draw `pairs` distinct character templates, uniformly without replacement
2. Give each template one random suit and emit two identical face-down cards
3. Permute the whole deck with Fisher-Yates

Shuffling always goes through fisher_yates(); sorting by a random
comparator is biased and is not used anywhere.
"""

from __future__ import annotations
import logging
import random
from typing import TYPE_CHECKING, Any, MutableSequence, Sequence

from ..errors import ConfigurationError
from .state import Card, CardState, Difficulty, Suit

if TYPE_CHECKING:
    from ..catalog.characters import CharacterTemplate

logger = logging.getLogger(__name__)

SUITS: tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)


def fisher_yates(items: MutableSequence[Any], rng: random.Random) -> None:
    """Shuffle `items` in place; every permutation is equally likely."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


class BoardGenerator:
    """
    Creates decks for a difficulty.

    The random source is injected so tests can pass a seeded
    random.Random and get the same board every time.
    """

    def __init__(
        self,
        templates: Sequence[CharacterTemplate] | None = None,
        rng: random.Random | None = None,
    ):
        if templates is None:
            from ..catalog.characters import CHARACTERS
            templates = CHARACTERS
        self.templates = list(templates)
        self.rng = rng or random.Random()

    @property
    def max_pairs(self) -> int:
        return len(self.templates)

    def generate(self, difficulty: Difficulty) -> tuple[Card, ...]:
        """
        Build a shuffled deck of `difficulty.pairs` pairs.

        Raises:
            ConfigurationError: if the template pool is too small
        """
        pairs = difficulty.pairs
        if pairs < 1:
            raise ConfigurationError(f"Difficulty '{difficulty.name}' needs at least one pair")
        if pairs > len(self.templates):
            raise ConfigurationError(
                f"Difficulty '{difficulty.name}' needs {pairs} pairs "
                f"but only {len(self.templates)} characters are available"
            )

        chosen = self.rng.sample(self.templates, pairs)

        cards: list[Card] = []
        for index, template in enumerate(chosen):
            suit = self.rng.choice(SUITS)
            for copy in range(2):
                cards.append(Card(
                    id=index * 2 + copy,
                    name=template.name,
                    flavor=template.flavor,
                    suit=suit,
                    image=template.image,
                    state=CardState.FACE_DOWN,
                ))

        fisher_yates(cards, self.rng)

        logger.debug("Generated %d-card deck for %s", len(cards), difficulty.name)
        return tuple(cards)
