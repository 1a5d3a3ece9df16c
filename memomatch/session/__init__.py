"""
Session Module - Manages ephemeral game sessions.

A session represents one player's game:
- Created when a client connects
- Holds its own state machine
- Destroyed when the client leaves or goes idle

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session, DEFAULT_MAX_IDLE_SECONDS

__all__ = [
    "SessionManager",
    "Session",
    "DEFAULT_MAX_IDLE_SECONDS",
]
