"""
Engine Core - Deterministic Klondike state management.

The engine is the runtime that:
1. Models cards, piles, foundations and the deck
2. Decides move legality and scoring
3. Applies actions via the reducer
4. Resolves drags against registered frames
5. Answers geometry and hint queries
"""

from .cards import Card, Color, Rank, Suit, parse_card, standard_deck
from .identified import IdentifiedList
from .frames import Frame, FrameRegistry, Offset, Point, Rect, ZoneId, ZoneKind
from .state import BASELINE_PRIORITY, Deck, DraggingState, Foundation, GameState, Pile
from .rules import is_valid_foundation_move, is_valid_pile_move
from .action import Action, ActionPayload, ActionResult, ActionType, EffectKind, ErrorCode, ScheduledEffect
from .reducer import Reducer, apply_action, make_shuffler
from .drag import drag_offset, dragged_cards, locate, run_from, z_index
from .positions import card_position, destination_position
from .action_generator import ActionGenerator, Hint, available_hints, legal_actions
from .invariants import InvariantViolation, check_invariants

__all__ = [
    "Card",
    "Color",
    "Rank",
    "Suit",
    "parse_card",
    "standard_deck",
    "IdentifiedList",
    "Frame",
    "FrameRegistry",
    "Offset",
    "Point",
    "Rect",
    "ZoneId",
    "ZoneKind",
    "BASELINE_PRIORITY",
    "Deck",
    "DraggingState",
    "Foundation",
    "GameState",
    "Pile",
    "is_valid_foundation_move",
    "is_valid_pile_move",
    "Action",
    "ActionPayload",
    "ActionResult",
    "ActionType",
    "EffectKind",
    "ErrorCode",
    "ScheduledEffect",
    "Reducer",
    "apply_action",
    "make_shuffler",
    "drag_offset",
    "dragged_cards",
    "locate",
    "run_from",
    "z_index",
    "card_position",
    "destination_position",
    "ActionGenerator",
    "Hint",
    "available_hints",
    "legal_actions",
    "InvariantViolation",
    "check_invariants",
]
