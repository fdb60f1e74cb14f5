"""
FastAPI Application - REST API for a rendering client.

Endpoints:
    GET    /api/v1/health                              Liveness
    POST   /api/v1/sessions                            Create (and deal) a game
    GET    /api/v1/sessions                            List active sessions
    GET    /api/v1/sessions/{id}                       Session status + snapshot
    DELETE /api/v1/sessions/{id}                       End session
    GET    /api/v1/sessions/{id}/state                 Snapshot
    POST   /api/v1/sessions/{id}/shuffle|draw|flip|reset
    PUT    /api/v1/sessions/{id}/frames                Register a zone rectangle
    POST   /api/v1/sessions/{id}/drag/begin|update|end|cancel
    POST   /api/v1/sessions/{id}/double-tap            Send a card to its foundation
    POST   /api/v1/sessions/{id}/moves                 Commit a move directly
    GET    /api/v1/sessions/{id}/hints                 Legal moves with animation anchors
    GET    /api/v1/sessions/{id}/cards/{card_id}/position

Rejected moves are not errors: they answer 200 with accepted=false and
the unchanged snapshot. Only unknown sessions and malformed ids fail.

Run with: uvicorn soliart.api.app:create_app --factory
"""

from typing import Annotated, Optional, Union

from .. import __version__
from ..config import Settings, load_settings


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Form, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.encoders import jsonable_encoder
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn python-multipart"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CardRequest,
        DragBeginRequest,
        DragUpdateRequest,
        FrameRequest,
        MoveRequest,
        # Response models
        ActionResponse,
        CardPositionResponse,
        EndSessionResponse,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        HintsResponse,
        SessionListResponse,
        SessionResponse,
        # Enums
        ErrorCode,
    )
    from ..session import SessionManager

    settings = settings or load_settings()

    app = FastAPI(
        title="SoliArt Engine API",
        description="Klondike solitaire rule engine. Every response carries a full snapshot.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(session_manager=SessionManager(settings=settings))

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Map a service error onto an HTTP status."""
        status_code = 404 if error.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ErrorResponse(
            error="Malformed request",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"errors": jsonable_encoder(exc.errors())},
        )
        return JSONResponse(status_code=422, content=error.model_dump(mode="json"))

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            active_sessions=len(api_service.list_sessions()),
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new game session and deal",
    )
    async def create_session(
        seed: Annotated[Optional[int], Form(description="Deal seed for a reproducible game")] = None,
    ) -> SessionResponse:
        return api_service.create_session(seed=seed)

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
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Full state snapshot",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game_state(session_id))

    # =========================================================================
    # Game Actions
    # =========================================================================

    action_responses = {404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}}

    @app.post("/api/v1/sessions/{session_id}/shuffle", response_model=ActionResponse,
              responses=action_responses, tags=["Game"], summary="Deal a new game")
    async def shuffle(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.shuffle(session_id))

    @app.post("/api/v1/sessions/{session_id}/draw", response_model=ActionResponse,
              responses=action_responses, tags=["Game"], summary="Draw one card to the waste")
    async def draw(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.draw(session_id))

    @app.post("/api/v1/sessions/{session_id}/flip", response_model=ActionResponse,
              responses=action_responses, tags=["Game"], summary="Turn the waste over onto the stock")
    async def flip(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.flip(session_id))

    @app.post("/api/v1/sessions/{session_id}/reset", response_model=ActionResponse,
              responses=action_responses, tags=["Game"], summary="Clear the table")
    async def reset(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.reset(session_id))

    @app.post("/api/v1/sessions/{session_id}/moves", response_model=ActionResponse,
              responses=action_responses, tags=["Game"], summary="Commit a move directly")
    async def move(session_id: str, body: MoveRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.move(session_id, body))

    # =========================================================================
    # Interaction
    # =========================================================================

    @app.put("/api/v1/sessions/{session_id}/frames", response_model=ActionResponse,
             responses=action_responses, tags=["Interaction"], summary="Register a zone rectangle")
    async def update_frame(session_id: str, body: FrameRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.update_frame(session_id, body))

    @app.post("/api/v1/sessions/{session_id}/drag/begin", response_model=ActionResponse,
              responses=action_responses, tags=["Interaction"])
    async def drag_begin(session_id: str, body: DragBeginRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.begin_drag(session_id, body))

    @app.post("/api/v1/sessions/{session_id}/drag/update", response_model=ActionResponse,
              responses=action_responses, tags=["Interaction"])
    async def drag_update(session_id: str, body: DragUpdateRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.update_drag(session_id, body))

    @app.post("/api/v1/sessions/{session_id}/drag/end", response_model=ActionResponse,
              responses=action_responses, tags=["Interaction"])
    async def drag_end(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.end_drag(session_id))

    @app.post("/api/v1/sessions/{session_id}/drag/cancel", response_model=ActionResponse,
              responses=action_responses, tags=["Interaction"])
    async def drag_cancel(session_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.cancel_drag(session_id))

    @app.post("/api/v1/sessions/{session_id}/double-tap", response_model=ActionResponse,
              responses=action_responses, tags=["Interaction"], summary="Send a card to its foundation")
    async def double_tap(session_id: str, body: CardRequest) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.double_tap(session_id, body.card_id))

    # =========================================================================
    # Queries
    # =========================================================================

    @app.get("/api/v1/sessions/{session_id}/hints", response_model=HintsResponse,
             responses={404: {"model": ErrorResponse}}, tags=["Queries"])
    async def hints(session_id: str) -> Union[HintsResponse, JSONResponse]:
        return respond(api_service.get_hints(session_id))

    @app.get("/api/v1/sessions/{session_id}/cards/{card_id}/position",
             response_model=CardPositionResponse, responses=action_responses, tags=["Queries"])
    async def card_position(session_id: str, card_id: str) -> Union[CardPositionResponse, JSONResponse]:
        return respond(api_service.card_position(session_id, card_id))

    return app
