"""
Move Rules - Pure legality predicates and score deltas.

Nothing here mutates state. The reducer asks these questions before
every committed move.
"""

from __future__ import annotations
from typing import Sequence

from .cards import Card, Rank
from .frames import ZoneId
from .state import Foundation

# Klondike scoring
WASTE_TO_PILE = 5
WASTE_TO_FOUNDATION = 10
PILE_TO_FOUNDATION = 10
PILE_CARD_REVEALED = 5
FOUNDATION_TO_PILE = -15


def is_valid_pile_move(run: Sequence[Card], onto: Card | None) -> bool:
    """
    Can ``run`` be placed on a pile whose top card is ``onto``?

    An empty pile (``onto`` is None) only takes a King. Otherwise the
    top must be face-up, of the opposite color, and exactly one rank
    above the head of the run. The run's own ordering is not re-checked.
    """
    if not run:
        return False
    head = run[0]
    if onto is None:
        return head.rank == Rank.KING
    if not onto.face_up:
        return False
    return head.color != onto.color and head.rank == onto.rank.predecessor


def is_valid_foundation_move(card: Card | None, foundation: Foundation) -> bool:
    """Can ``card`` be scored on ``foundation``?"""
    if card is None or card.suit != foundation.suit:
        return False
    if card.rank == Rank.ACE:
        return True
    top = foundation.top_card
    return top is not None and card.rank == top.rank.successor


def move_score(origin: ZoneId, destination: ZoneId) -> int:
    """Points for moving a card from ``origin`` to ``destination``."""
    if destination.is_foundation:
        if origin.is_deck:
            return WASTE_TO_FOUNDATION
        if origin.is_pile:
            return PILE_TO_FOUNDATION
        return 0
    if destination.is_pile:
        if origin.is_deck:
            return WASTE_TO_PILE
        if origin.is_foundation:
            return FOUNDATION_TO_PILE
    return 0


def apply_score(score: int, delta: int) -> int:
    """Add ``delta`` without dropping below zero."""
    return max(0, score + delta)
