"""
Character Cards - The pool of templates a board is drawn from.

Each template becomes one pair on the board. The name is the pair key;
the image is whatever glyph the presentation layer shows on the face.
"""

from dataclasses import dataclass

from ..engine_core.state import CharacterType


@dataclass(frozen=True)
class CharacterTemplate:
    """A character that can appear as a pair."""
    name: str
    flavor: CharacterType
    image: str


# ============================================================================
# Character Pool
# ============================================================================

CHARACTERS: list[CharacterTemplate] = [
    # Animals
    CharacterTemplate("Lion", CharacterType.ANIMAL, "\U0001F981"),
    CharacterTemplate("Elephant", CharacterType.ANIMAL, "\U0001F418"),
    CharacterTemplate("Giraffe", CharacterType.ANIMAL, "\U0001F992"),
    # Superheroes
    CharacterTemplate("Batman", CharacterType.SUPERHERO, "\U0001F987"),
    CharacterTemplate("Spider", CharacterType.SUPERHERO, "\U0001F577️"),
    # Robots
    CharacterTemplate("Robot", CharacterType.ROBOT, "\U0001F916"),
    CharacterTemplate("Alien", CharacterType.ROBOT, "\U0001F47D"),
    # Mythical
    CharacterTemplate("Dragon", CharacterType.MYTHICAL, "\U0001F409"),
    CharacterTemplate("Unicorn", CharacterType.MYTHICAL, "\U0001F984"),
    CharacterTemplate("Phoenix", CharacterType.MYTHICAL, "\U0001F525"),
    CharacterTemplate("Mermaid", CharacterType.MYTHICAL, "\U0001F9DC‍♀️"),
    CharacterTemplate("Wizard", CharacterType.MYTHICAL, "\U0001F9D9‍♂️"),
    CharacterTemplate("Ghost", CharacterType.MYTHICAL, "\U0001F47B"),
    CharacterTemplate("Vampire", CharacterType.MYTHICAL, "\U0001F9DB"),
    CharacterTemplate("Zombie", CharacterType.MYTHICAL, "\U0001F9DF"),
    CharacterTemplate("Werewolf", CharacterType.MYTHICAL, "\U0001F43A"),
    CharacterTemplate("Fairy", CharacterType.MYTHICAL, "\U0001F9DA"),
    CharacterTemplate("Ogre", CharacterType.MYTHICAL, "\U0001F479"),
]


def get_character(name: str) -> CharacterTemplate | None:
    """Look up a character by name."""
    for character in CHARACTERS:
        if character.name == name:
            return character
    return None
