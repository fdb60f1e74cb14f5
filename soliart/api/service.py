"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Translates requests into engine actions
2. Manages sessions
3. Builds snapshots for the renderer

This layer is framework-agnostic; the FastAPI app is a thin shell over it.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    DragBeginRequest,
    DragUpdateRequest,
    FrameRequest,
    MoveRequest,
    # Responses
    ActionResponse,
    CardPositionResponse,
    ErrorResponse,
    GameStateResponse,
    HintsResponse,
    SessionResponse,
    # Shared
    CardInfo,
    DeckInfo,
    DraggingInfo,
    FoundationInfo,
    FrameInfo,
    HintInfo,
    OffsetModel,
    PileInfo,
    PointModel,
    RectModel,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core.action import Action
from ..engine_core.action_generator import available_hints
from ..engine_core.cards import Card, parse_card
from ..engine_core.drag import drag_offset, dragged_cards, locate, z_index
from ..engine_core.frames import Frame, Point, Rect, ZoneId
from ..engine_core.positions import card_position, destination_position
from ..engine_core.state import GameState
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)


def card_info(card: Card) -> CardInfo:
    return CardInfo(
        card_id=card.card_id,
        rank=int(card.rank),
        suit=card.suit.value,
        color=card.color.value,
        face_up=card.face_up,
        label=str(card),
    )


def build_game_state(session_id: str, state: GameState) -> GameStateResponse:
    """Snapshot of everything a renderer needs."""
    dragging = None
    if state.dragging is not None:
        offset = drag_offset(state)
        dragging = DraggingInfo(
            card=card_info(state.dragging.card),
            position=PointModel(x=state.dragging.position.x, y=state.dragging.position.y),
            card_ids=[card.card_id for card in dragged_cards(state)],
            offset=OffsetModel(width=offset.width, height=offset.height) if offset else None,
        )

    return GameStateResponse(
        session_id=session_id,
        is_game_over=state.is_game_over,
        is_won=state.is_won,
        score=state.score,
        moves=state.moves,
        piles=[
            PileInfo(
                pile_id=pile.pile_id,
                zone=pile.zone.label,
                cards=[card_info(card) for card in pile.cards],
                z_index=z_index(state, pile.zone),
            )
            for pile in state.piles
        ],
        foundations=[
            FoundationInfo(
                suit=foundation.suit.value,
                zone=foundation.zone.label,
                cards=[card_info(card) for card in foundation.cards],
                z_index=z_index(state, foundation.zone),
            )
            for foundation in state.foundations
        ],
        deck=DeckInfo(
            stock_count=len(state.deck.downwards),
            waste=[card_info(card) for card in state.deck.upwards],
            z_index=z_index(state, state.deck.zone),
        ),
        frames=[
            FrameInfo(
                zone=frame.zone.label,
                rect=RectModel(
                    x=frame.rect.x, y=frame.rect.y,
                    width=frame.rect.width, height=frame.rect.height,
                ),
            )
            for frame in state.frames
        ],
        dragging=dragging,
        z_index_priority=state.z_index_priority.label,
    )


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session {session_id} not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        session = service.create_session(seed=7)
        service.draw(session.session_id)
        state = service.get_game_state(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, seed: int | None = None) -> SessionResponse:
        session = self.session_manager.create_session(seed=seed)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return build_game_state(session_id, session.store.state)

    # =========================================================================
    # Actions
    # =========================================================================

    def dispatch(self, session_id: str, action: Action) -> ActionResponse | ErrorResponse:
        """Apply an action to a session and report the outcome with a fresh snapshot."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        result = session.store.dispatch(action)
        return ActionResponse(
            accepted=result.success,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
            changes=result.state_changes,
            state=build_game_state(session_id, session.store.state),
        )

    def shuffle(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.shuffle())

    def draw(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.draw_card())

    def flip(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.flip_deck())

    def reset(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.reset_game())

    def update_frame(self, session_id: str, request: FrameRequest) -> ActionResponse | ErrorResponse:
        try:
            zone = ZoneId.parse(request.zone)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ZONE)
        rect = Rect(request.rect.x, request.rect.y, request.rect.width, request.rect.height)
        return self.dispatch(session_id, Action.update_frame(Frame(zone, rect)))

    def begin_drag(self, session_id: str, request: DragBeginRequest) -> ActionResponse | ErrorResponse:
        card = self._card(session_id, request.card_id)
        if isinstance(card, ErrorResponse):
            return card
        return self.dispatch(session_id, Action.begin_drag(card, Point(request.x, request.y)))

    def update_drag(self, session_id: str, request: DragUpdateRequest) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.update_drag(Point(request.x, request.y)))

    def end_drag(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.drop_cards())

    def cancel_drag(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self.dispatch(session_id, Action.cancel_drag())

    def double_tap(self, session_id: str, card_id: str) -> ActionResponse | ErrorResponse:
        card = self._card(session_id, card_id)
        if isinstance(card, ErrorResponse):
            return card
        return self.dispatch(session_id, Action.double_tap(card))

    def move(self, session_id: str, request: MoveRequest) -> ActionResponse | ErrorResponse:
        card = self._card(session_id, request.card_id)
        if isinstance(card, ErrorResponse):
            return card
        try:
            target = ZoneId.parse(request.target)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ZONE)

        if target.is_pile:
            action = Action.move_run(card, target.key)
        elif target.is_foundation:
            action = Action.score_card(card, target.key)
        else:
            return ErrorResponse(
                error="Cards cannot be moved onto the deck",
                error_code=ErrorCode.INVALID_ZONE,
            )
        return self.dispatch(session_id, action)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_hints(self, session_id: str) -> HintsResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        state = session.store.state
        hints = []
        for hint in available_hints(state):
            anchor = destination_position(state, hint.destination)
            hints.append(HintInfo(
                card=card_info(hint.card),
                origin=hint.origin.label,
                destination=hint.destination.label,
                anchor=PointModel(x=anchor.x, y=anchor.y),
            ))
        return HintsResponse(session_id=session_id, hints=hints)

    def card_position(self, session_id: str, card_id: str) -> CardPositionResponse | ErrorResponse:
        card = self._card(session_id, card_id)
        if isinstance(card, ErrorResponse):
            return card
        state = self.session_manager.get_session(session_id).store.state
        zone = locate(state, card)
        point = card_position(state, card)
        return CardPositionResponse(
            card_id=card.card_id,
            zone=zone.label if zone else None,
            position=PointModel(x=point.x, y=point.y),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _card(self, session_id: str, card_id: str) -> Card | ErrorResponse:
        """Parse a card id, preferring the live copy from the session's table."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        try:
            card = parse_card(card_id)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_CARD)
        return session.store.state.find_card(card.card_id) or card

    def _session_to_response(self, session: Session) -> SessionResponse:
        state = session.store.state
        if state.is_won:
            status = SessionStatus.WON
        elif state.is_game_over:
            status = SessionStatus.GAME_OVER
        else:
            status = SessionStatus.ACTIVE
        return SessionResponse(
            session_id=session.session_id,
            status=status,
            seed=session.seed,
            created_at=session.created_at,
            state=build_game_state(session.session_id, state),
        )
