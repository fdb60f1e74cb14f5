"""
API Module - HTTP interface for a rendering client.

Exposes the engine's inbound interface (frames, drags, taps, deck
actions) and its outbound snapshot over REST. All state is
session-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CardRequest,
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
    PileInfo,
    FoundationInfo,
    DeckInfo,
)
from .service import APIService, build_game_state
from .app import create_app

__all__ = [
    # Requests
    "CardRequest",
    "DragBeginRequest",
    "DragUpdateRequest",
    "FrameRequest",
    "MoveRequest",
    # Responses
    "ActionResponse",
    "CardPositionResponse",
    "ErrorResponse",
    "GameStateResponse",
    "HintsResponse",
    "SessionResponse",
    # Shared
    "CardInfo",
    "PileInfo",
    "FoundationInfo",
    "DeckInfo",
    # Service
    "APIService",
    "build_game_state",
    "create_app",
]
