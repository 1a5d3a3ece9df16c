"""
Memomatch - Timed Memory-Matching Card Game Engine

An in-memory, event-driven engine for a single-player memory game.
The engine provides:
- Board generation with uniform shuffling
- The flip/match protocol
- A countdown timer and score model
- Limited-use power-ups (shuffle, hint, slow time)

Rendering is left to an external presentation layer that observes
state snapshots and dispatches intents.
"""

__version__ = "0.1.0"
