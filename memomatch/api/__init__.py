"""
API Module - Web client interface.

Exposes the engine via REST API. A client:
1. Creates a session
2. Starts a game at a difficulty
3. Sends flips and power-ups
4. Polls the game state while the countdown runs

All state is session-scoped. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    StartGameRequest,
    FlipRequest,
    PowerUpRequest,
    # Responses
    GameStateResponse,
    IntentResponse,
    SessionResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    DifficultyInfo,
    PowerUpInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "StartGameRequest",
    "FlipRequest",
    "PowerUpRequest",
    # Responses
    "GameStateResponse",
    "IntentResponse",
    "SessionResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "DifficultyInfo",
    "PowerUpInfo",
    # Service
    "APIService",
    "create_app",
]
