"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests into intents for a session's state machine
2. Manages sessions
3. Converts engine snapshots into response schemas

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    StartGameRequest,
    FlipRequest,
    PowerUpRequest,
    # Responses
    GameStateResponse,
    IntentResponse,
    SessionResponse,
    DifficultyListResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    DifficultyInfo,
    PowerUpInfo,
    # Enums
    CardStatus,
    ErrorCode,
    PhaseStatus,
)
from ..catalog import DIFFICULTY_LEVELS, get_difficulty
from ..engine_core.action import Action, ActionResult
from ..engine_core.state import CardState, Difficulty, GameSnapshot, PowerUpKind
from ..errors import ConfigurationError
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session()
        service.start_game(session.session_id, StartGameRequest(difficulty="Hard"))
        service.flip(session.session_id, FlipRequest(card_id=4))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def list_difficulties(self) -> DifficultyListResponse:
        return DifficultyListResponse(
            difficulties=[DifficultyInfo.model_validate(level) for level in DIFFICULTY_LEVELS],
        )

    def create_session(self) -> SessionResponse:
        session = self.session_manager.create_session()
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        # Polling counts as activity so a watched game is never swept
        session.touch()
        return self._build_game_state(session_id, session.machine.snapshot())

    # =========================================================================
    # Intents
    # =========================================================================

    def start_game(
        self,
        session_id: str,
        request: StartGameRequest,
    ) -> IntentResponse | ErrorResponse:
        """
        Start a game at a built-in or custom difficulty.

        Unknown levels, and difficulties the card pool cannot fill, are
        reported as INVALID_DIFFICULTY.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        try:
            if request.custom is not None:
                difficulty = Difficulty(
                    name=request.custom.name,
                    pairs=request.custom.pairs,
                    time_limit_seconds=request.custom.time_limit_seconds,
                )
            else:
                difficulty = get_difficulty(request.difficulty or "Normal")
            result = session.machine.dispatch(Action.start_game(difficulty))
        except ConfigurationError as e:
            logger.warning("Rejected start for session %s: %s", session_id, e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.INVALID_DIFFICULTY,
                details={"difficulty": request.custom.name if request.custom else request.difficulty},
            )

        return self._intent_response(session, result)

    def flip(self, session_id: str, request: FlipRequest) -> IntentResponse | ErrorResponse:
        return self._dispatch(session_id, Action.flip_card(request.card_id))

    def use_power_up(self, session_id: str, request: PowerUpRequest) -> IntentResponse | ErrorResponse:
        kind = PowerUpKind(request.kind.value)
        return self._dispatch(session_id, Action.use_power_up(kind))

    def restart(self, session_id: str) -> IntentResponse | ErrorResponse:
        return self._dispatch(session_id, Action.restart())

    def return_to_menu(self, session_id: str) -> IntentResponse | ErrorResponse:
        return self._dispatch(session_id, Action.return_to_menu())

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _dispatch(self, session_id: str, action: Action) -> IntentResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._intent_response(session, session.machine.dispatch(action))

    def _intent_response(self, session: Session, result: ActionResult) -> IntentResponse:
        session.touch()
        return IntentResponse(
            session_id=session.session_id,
            applied=result.applied,
            reason=result.reason,
            changes=result.changes,
            game_state=self._build_game_state(session.session_id, result.snapshot),
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            phase=PhaseStatus(session.machine.phase.value),
            created_at=session.created_at,
            last_activity=session.last_activity,
        )

    def _build_game_state(self, session_id: str, snapshot: GameSnapshot) -> GameStateResponse:
        """Convert an engine snapshot into the wire format."""
        cards = []
        for position, card in enumerate(snapshot.deck):
            info = CardInfo(
                card_id=card.id,
                position=position,
                state=CardStatus(card.state.value),
                hinted=card.id == snapshot.hinted,
            )
            # Face-down cards stay anonymous
            if card.state != CardState.FACE_DOWN:
                info.name = card.name
                info.flavor = card.flavor.value
                info.image = card.image
                info.suit = card.suit.value
                info.color = card.color.value
            cards.append(info)

        return GameStateResponse(
            session_id=session_id,
            phase=PhaseStatus(snapshot.phase.value),
            difficulty=(
                DifficultyInfo.model_validate(snapshot.difficulty)
                if snapshot.difficulty else None
            ),
            cards=cards,
            face_up=list(snapshot.face_up),
            hinted=snapshot.hinted,
            score=snapshot.score,
            time_left=snapshot.time_left,
            matched_pair_count=snapshot.matched_pair_count,
            power_ups=PowerUpInfo(
                shuffle=snapshot.power_ups.shuffle,
                hint=snapshot.power_ups.hint,
                slow_time=snapshot.power_ups.slow_time,
            ),
            epoch=snapshot.epoch,
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )
