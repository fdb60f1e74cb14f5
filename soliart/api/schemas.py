"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a rendering client and the
engine. Every state read returns the full snapshot, so a client can
redraw without keeping any game logic of its own.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_CARD: Card id could not be parsed
- INVALID_ZONE: Zone label could not be parsed
- VALIDATION_ERROR: Malformed request
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    WON = "won"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_CARD = "INVALID_CARD"
    INVALID_ZONE = "INVALID_ZONE"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Geometry
# =============================================================================

class PointModel(BaseModel):
    x: float
    y: float


class OffsetModel(BaseModel):
    width: float
    height: float


class RectModel(BaseModel):
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str = Field(description="Rank symbol + suit letter, e.g. 10H")
    rank: int = Field(ge=1, le=13)
    suit: str
    color: str
    face_up: bool
    label: str = Field(description="Display text, e.g. 10♥")

    model_config = {"from_attributes": True}


class PileInfo(BaseModel):
    """A tableau column, bottom card first."""
    pile_id: int
    zone: str
    cards: list[CardInfo] = Field(default_factory=list)
    z_index: float = 0.0


class FoundationInfo(BaseModel):
    """A suit foundation, Ace first."""
    suit: str
    zone: str
    cards: list[CardInfo] = Field(default_factory=list)
    z_index: float = 0.0


class DeckInfo(BaseModel):
    """Stock and waste."""
    zone: str = "deck"
    stock_count: int = 0
    waste: list[CardInfo] = Field(default_factory=list)
    z_index: float = 0.0


class FrameInfo(BaseModel):
    """A registered drop zone rectangle."""
    zone: str
    rect: RectModel


class DraggingInfo(BaseModel):
    """The drag in progress."""
    card: CardInfo
    position: PointModel
    card_ids: list[str] = Field(default_factory=list, description="The dragged run, bottom first")
    offset: Optional[OffsetModel] = None


class GameStateResponse(BaseModel):
    """Complete snapshot for a renderer."""
    session_id: str
    is_game_over: bool
    is_won: bool
    score: int
    moves: int
    piles: list[PileInfo] = Field(default_factory=list)
    foundations: list[FoundationInfo] = Field(default_factory=list)
    deck: DeckInfo = Field(default_factory=DeckInfo)
    frames: list[FrameInfo] = Field(default_factory=list)
    dragging: Optional[DraggingInfo] = None
    z_index_priority: str


class HintInfo(BaseModel):
    """A legal move and where to animate it."""
    card: CardInfo
    origin: str
    destination: str
    anchor: PointModel


# =============================================================================
# Requests
# =============================================================================

class FrameRequest(BaseModel):
    """Register (or replace) a zone's rectangle."""
    zone: str = Field(description="pile:1..7, foundation:<suit>, or deck")
    rect: RectModel


class DragBeginRequest(BaseModel):
    card_id: str
    x: float
    y: float


class DragUpdateRequest(BaseModel):
    x: float
    y: float


class CardRequest(BaseModel):
    card_id: str


class MoveRequest(BaseModel):
    """Commit a move without dragging."""
    card_id: str
    target: str = Field(description="pile:<n> or foundation:<suit>")


# =============================================================================
# Responses
# =============================================================================

class ActionResponse(BaseModel):
    """
    Outcome of a dispatched action.

    A rejected action is a normal outcome (HTTP 200, accepted=false).
    """
    accepted: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    state: GameStateResponse


class SessionResponse(BaseModel):
    session_id: str
    status: SessionStatus
    seed: Optional[int] = None
    created_at: float
    state: GameStateResponse


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HintsResponse(BaseModel):
    session_id: str
    hints: list[HintInfo] = Field(default_factory=list)


class CardPositionResponse(BaseModel):
    card_id: str
    zone: Optional[str] = None
    position: PointModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    active_sessions: int = 0


class ErrorResponse(BaseModel):
    """Standard error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
