"""
FastAPI Application - REST API for a web client.

Endpoints:
    GET    /api/v1/health                          Health check
    GET    /api/v1/difficulties                    Built-in difficulty levels
    POST   /api/v1/sessions                        Create session (at the menu)
    GET    /api/v1/sessions                        List active sessions
    GET    /api/v1/sessions/{id}                   Get session status
    DELETE /api/v1/sessions/{id}                   End session
    GET    /api/v1/sessions/{id}/state             Get game state
    POST   /api/v1/sessions/{id}/start             Start a game
    POST   /api/v1/sessions/{id}/flip              Flip a card
    POST   /api/v1/sessions/{id}/power-ups         Use a power-up
    POST   /api/v1/sessions/{id}/restart           Deal again at the same difficulty
    POST   /api/v1/sessions/{id}/menu              Return to the menu

Ignored intents (flipping a matched card, a power-up with no uses left,
...) are not errors: they return 200 with `applied=false`.
The countdown runs on the server's event loop; clients poll /state.
Sessions idle for MEMOMATCH_SESSION_TTL seconds are ended when the next
session is created.
"""

from typing import Optional, Union
import logging
import os

from .. import __version__

# Environment configuration
MEMOMATCH_ENV = os.getenv("MEMOMATCH_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
MEMOMATCH_SEED = os.getenv("MEMOMATCH_SEED")
MEMOMATCH_SESSION_TTL = int(os.getenv("MEMOMATCH_SESSION_TTL", "3600"))

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.exceptions import RequestValidationError
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        StartGameRequest,
        FlipRequest,
        PowerUpRequest,
        # Response models
        GameStateResponse,
        IntentResponse,
        SessionResponse,
        DifficultyListResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorResponse,
        # Enums
        ErrorCode,
    )
    from ..session import SessionManager

    app = FastAPI(
        title="Memomatch API",
        description="Timed memory-matching card game engine.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is None:
        seed = int(MEMOMATCH_SEED) if MEMOMATCH_SEED else None
        service = APIService(session_manager=SessionManager(
            seed=seed,
            max_idle_seconds=MEMOMATCH_SESSION_TTL,
        ))
    api_service = service
    logger.info("Memomatch API created (env=%s)", MEMOMATCH_ENV)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Turn a service ErrorResponse into an HTTP response."""
        status_code = 404 if error.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        # An unknown power-up name gets its own code
        if any(error.get("loc", ())[-1:] == ("kind",) for error in errors):
            error_code = ErrorCode.INVALID_POWER_UP
        else:
            error_code = ErrorCode.VALIDATION_ERROR
        error = ErrorResponse(
            error="Request validation failed",
            error_code=error_code,
            details={"errors": [
                {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg", "")}
                for e in errors
            ]},
        )
        return JSONResponse(status_code=422, content=error.model_dump(mode="json"))

    # =========================================================================
    # Meta Endpoints
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="memomatch", version=__version__)

    @app.get(
        "/api/v1/difficulties",
        response_model=DifficultyListResponse,
        tags=["Meta"],
        summary="List built-in difficulty levels",
    )
    async def list_difficulties() -> DifficultyListResponse:
        return api_service.list_difficulties()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session() -> SessionResponse:
        return api_service.create_session()

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Optional[str] = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the current game state",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=IntentResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid difficulty"},
            404: {"model": ErrorResponse},
        },
        tags=["Game"],
        summary="Start a game",
    )
    async def start_game(
        session_id: str,
        request: StartGameRequest,
    ) -> Union[IntentResponse, JSONResponse]:
        return respond(api_service.start_game(session_id, request))

    @app.post(
        "/api/v1/sessions/{session_id}/flip",
        response_model=IntentResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Flip a card",
    )
    async def flip(session_id: str, request: FlipRequest) -> Union[IntentResponse, JSONResponse]:
        return respond(api_service.flip(session_id, request))

    @app.post(
        "/api/v1/sessions/{session_id}/power-ups",
        response_model=IntentResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Use a power-up",
    )
    async def use_power_up(
        session_id: str,
        request: PowerUpRequest,
    ) -> Union[IntentResponse, JSONResponse]:
        return respond(api_service.use_power_up(session_id, request))

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=IntentResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Restart at the same difficulty",
    )
    async def restart(session_id: str) -> Union[IntentResponse, JSONResponse]:
        return respond(api_service.restart(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/menu",
        response_model=IntentResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Return to the menu",
    )
    async def return_to_menu(session_id: str) -> Union[IntentResponse, JSONResponse]:
        return respond(api_service.return_to_menu(session_id))

    return app
