"""
Action System - Actions, payloads, effects and results.

Actions represent:
1. Game actions (shuffle, draw, flip, score, move)
2. Interaction actions from the renderer (frames, drag, drop, double tap)
3. Timer actions delivered by the scheduler (priority reset)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .cards import Card, Suit
from .frames import Frame, Point

# Grace window during which a dropped stack keeps rendering on top.
PRIORITY_RESET_DELAY = 0.5


class ActionType(Enum):
    """Types of actions in the system."""
    # Game actions
    SHUFFLE = "shuffle"
    DRAW_CARD = "draw_card"
    FLIP_DECK = "flip_deck"
    SCORE_CARD = "score_card"
    MOVE_RUN = "move_run"
    RESET_GAME = "reset_game"

    # Interaction actions
    UPDATE_FRAME = "update_frame"
    BEGIN_DRAG = "begin_drag"
    UPDATE_DRAG = "update_drag"
    DROP_CARDS = "drop_cards"
    CANCEL_DRAG = "cancel_drag"
    DOUBLE_TAP = "double_tap"

    # Timer actions
    RESET_PRIORITY = "reset_priority"


class ErrorCode(str, Enum):
    """Why an action was rejected."""
    GAME_IN_PROGRESS = "GAME_IN_PROGRESS"
    GAME_OVER = "GAME_OVER"
    EMPTY_STOCK = "EMPTY_STOCK"
    NOT_DRAGGING = "NOT_DRAGGING"
    ALREADY_DRAGGING = "ALREADY_DRAGGING"
    FACE_DOWN = "FACE_DOWN"
    CARD_NOT_FOUND = "CARD_NOT_FOUND"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    NO_TARGET = "NO_TARGET"
    STALE_TOKEN = "STALE_TOKEN"
    NO_HANDLER = "NO_HANDLER"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    card: Card | None = None
    position: Point | None = None
    frame: Frame | None = None
    suit: Suit | None = None
    pile_id: int | None = None
    token: int | None = None
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are validated and applied atomically by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def shuffle(cls) -> Action:
        return cls(ActionType.SHUFFLE)

    @classmethod
    def draw_card(cls) -> Action:
        return cls(ActionType.DRAW_CARD)

    @classmethod
    def flip_deck(cls) -> Action:
        return cls(ActionType.FLIP_DECK)

    @classmethod
    def reset_game(cls) -> Action:
        return cls(ActionType.RESET_GAME)

    @classmethod
    def score_card(cls, card: Card, suit: Suit | None = None) -> Action:
        """Score ``card`` on the foundation of ``suit`` (default: its own suit)."""
        return cls(
            ActionType.SCORE_CARD,
            ActionPayload(card=card, suit=suit or card.suit),
        )

    @classmethod
    def move_run(cls, card: Card, pile_id: int) -> Action:
        """Move ``card`` and everything above it onto pile ``pile_id``."""
        return cls(ActionType.MOVE_RUN, ActionPayload(card=card, pile_id=pile_id))

    @classmethod
    def update_frame(cls, frame: Frame) -> Action:
        return cls(ActionType.UPDATE_FRAME, ActionPayload(frame=frame))

    @classmethod
    def begin_drag(cls, card: Card, position: Point) -> Action:
        return cls(ActionType.BEGIN_DRAG, ActionPayload(card=card, position=position))

    @classmethod
    def update_drag(cls, position: Point) -> Action:
        return cls(ActionType.UPDATE_DRAG, ActionPayload(position=position))

    @classmethod
    def drop_cards(cls) -> Action:
        return cls(ActionType.DROP_CARDS)

    @classmethod
    def cancel_drag(cls) -> Action:
        return cls(ActionType.CANCEL_DRAG)

    @classmethod
    def double_tap(cls, card: Card) -> Action:
        return cls(ActionType.DOUBLE_TAP, ActionPayload(card=card))

    @classmethod
    def reset_priority(cls, token: int) -> Action:
        return cls(ActionType.RESET_PRIORITY, ActionPayload(token=token))


class EffectKind(Enum):
    """Kinds of deferred work the reducer can ask for."""
    RESET_PRIORITY = "reset_priority"


@dataclass(frozen=True)
class ScheduledEffect:
    """
    Deferred work returned as data.

    The runtime dispatches ``action`` once, ``delay`` seconds from now.
    """
    kind: EffectKind
    delay: float
    action: Action

    @classmethod
    def reset_priority(cls, token: int) -> ScheduledEffect:
        return cls(
            kind=EffectKind.RESET_PRIORITY,
            delay=PRIORITY_RESET_DELAY,
            action=Action.reset_priority(token),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    ``new_state`` is always set: the updated state on success, the very
    state that was passed in on rejection. A rejected drop is the one
    exception: the drag still ends, so it carries a copy without it.
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    # Deferred work for the runtime
    effects: list[ScheduledEffect] = field(default_factory=list)

    # Human-readable changes, for logs and the CLI
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def rejected(
        cls,
        state: Any,
        error: str,
        error_code: ErrorCode,
        effects: list[ScheduledEffect] | None = None,
    ) -> ActionResult:
        """A rejected transition; no card has moved."""
        return cls(
            success=False,
            new_state=state,
            error=error,
            error_code=error_code,
            effects=effects or [],
        )

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        effects: list[ScheduledEffect] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            effects=effects or [],
        )
