"""
Session Manager - Creates and tracks independent games in one process.

LIFECYCLE:
1. Client creates a session -> a fresh GameStateMachine at the menu
2. Client starts, flips, uses power-ups through the machine
3. Session ends (explicitly or by going idle) -> timers cancelled,
   session dropped from memory

PERSISTENCE RULES:
- No database; everything is in-memory and session-scoped
- A session never outlives the process
- Only live sessions are kept; an ended session is removed at once
- Idle sessions are swept every time a new one is created
"""

from __future__ import annotations
import logging
import random
import time
import uuid
from dataclasses import dataclass

from ..engine_core.clock import AsyncioClock, Clock
from ..engine_core.machine import GameStateMachine
from ..engine_core.rules import DEFAULT_RULES, GameRules

logger = logging.getLogger(__name__)

DEFAULT_MAX_IDLE_SECONDS = 3600


@dataclass
class Session:
    """
    One player's game, owned by the registry.

    The machine holds the game itself; the session only adds
    bookkeeping for the registry.
    """
    session_id: str
    machine: GameStateMachine
    created_at: float
    last_activity: float = 0.0

    def touch(self):
        """Record player activity, for stale-session cleanup."""
        self.last_activity = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions, each with its own state machine
    - Track live sessions
    - End idle sessions so the registry stays bounded

    All sessions share one Clock. Pass a VirtualClock in tests.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        rules: GameRules = DEFAULT_RULES,
        seed: int | None = None,
        max_idle_seconds: float | None = DEFAULT_MAX_IDLE_SECONDS,
    ):
        self.clock = clock or AsyncioClock()
        self.rules = rules
        self.seed = seed
        self.max_idle_seconds = max_idle_seconds
        self._sessions: dict[str, Session] = {}

    def create_session(self) -> Session:
        """
        Create a new session, sitting at the menu.

        Sessions idle for longer than `max_idle_seconds` are ended first.
        """
        if self.max_idle_seconds is not None:
            self.cleanup_stale_sessions(self.max_idle_seconds)

        session_id = str(uuid.uuid4())
        rng = random.Random(self.seed) if self.seed is not None else random.Random()
        machine = GameStateMachine(clock=self.clock, rng=rng, rules=self.rules)

        now = time.time()
        session = Session(
            session_id=session_id,
            machine=machine,
            created_at=now,
            last_activity=now,
        )
        self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from the registry.

        Returns False if no such session exists.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        # Cancels the countdown and any pending reveal/hint timers
        session.machine.return_to_menu()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of live sessions."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: float = DEFAULT_MAX_IDLE_SECONDS) -> list[str]:
        """
        End sessions with no activity for longer than max_age.

        Returns the removed IDs.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
