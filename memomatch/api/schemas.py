"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a web client and the engine.
The client only ever sees snapshots; face-down cards are masked so
their identity cannot be read off the wire.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_DIFFICULTY: Unknown difficulty, or one the card pool cannot fill
- INVALID_POWER_UP: Unknown power-up kind
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class PhaseStatus(str, Enum):
    """Game phase values."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class CardStatus(str, Enum):
    """Card state values."""
    FACE_DOWN = "face_down"
    FACE_UP = "face_up"
    MATCHED = "matched"


class PowerUpName(str, Enum):
    """Power-up kinds accepted by the API."""
    SHUFFLE = "shuffle"
    HINT = "hint"
    SLOW_TIME = "slowTime"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_DIFFICULTY = "INVALID_DIFFICULTY"
    INVALID_POWER_UP = "INVALID_POWER_UP"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """
    A card as the client sees it.

    Identity fields are None while the card is face down.
    """
    card_id: int
    position: int
    state: CardStatus
    name: Optional[str] = None
    flavor: Optional[str] = None
    image: Optional[str] = None
    suit: Optional[str] = None
    color: Optional[str] = None
    hinted: bool = False

    model_config = {"from_attributes": True}


class PowerUpInfo(BaseModel):
    """Remaining uses of each power-up."""
    shuffle: int = 0
    hint: int = 0
    slow_time: int = Field(0, alias="slowTime")

    model_config = {"populate_by_name": True}


class DifficultyInfo(BaseModel):
    """A difficulty level."""
    name: str
    pairs: int = Field(..., ge=1)
    time_limit_seconds: int = Field(..., ge=1)

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class StartGameRequest(BaseModel):
    """Start a game, by built-in level name or with a custom difficulty."""
    difficulty: Optional[str] = Field("Normal", description="Built-in level name")
    custom: Optional[DifficultyInfo] = Field(None, description="Custom difficulty; overrides `difficulty`")


class FlipRequest(BaseModel):
    """Flip a card by id."""
    card_id: int = Field(..., description="Card id from the state's deck")


class PowerUpRequest(BaseModel):
    """Use a power-up."""
    kind: PowerUpName


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Snapshot of a session's game."""
    session_id: str
    phase: PhaseStatus
    difficulty: Optional[DifficultyInfo] = None
    cards: list[CardInfo] = Field(default_factory=list)
    face_up: list[int] = Field(default_factory=list)
    hinted: Optional[int] = None
    score: int = 0
    time_left: int = 0
    matched_pair_count: int = 0
    power_ups: PowerUpInfo = Field(default_factory=PowerUpInfo)
    epoch: int = 0
    api_version: str = "v1"


class IntentResponse(BaseModel):
    """Response to an intent. `applied` is false when the intent was ignored."""
    session_id: str
    applied: bool
    reason: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    phase: PhaseStatus
    created_at: float = 0.0
    last_activity: float = 0.0
    api_version: str = "v1"


class DifficultyListResponse(BaseModel):
    """Built-in difficulty levels."""
    difficulties: list[DifficultyInfo]


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
