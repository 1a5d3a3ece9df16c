"""
Errors raised by the engine.

Invalid player intents are never errors (they are ignored). The only
failure during play is a board that cannot be built.
"""


class MemomatchError(ValueError):
    """Base class for engine errors."""


class ConfigurationError(MemomatchError):
    """A difficulty cannot be satisfied by the available card pool."""


class UnknownDifficultyError(ConfigurationError):
    """No built-in difficulty level has the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown difficulty: {name}")
        self.name = name
