"""
Invariants - Bookkeeping checks that must hold for every reachable state.

A failure here is a bug in the engine, never a bad user gesture, so it
raises instead of being turned into a rejected action.
"""

from __future__ import annotations
from collections import Counter

from .cards import Rank, standard_deck
from .drag import locate
from .state import GameState

DECK_SIZE = 52


class InvariantViolation(RuntimeError):
    """The game state broke one of its structural invariants."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


def find_violations(state: GameState) -> list[str]:
    """Describe every broken invariant; an empty list means the state is sound."""
    problems: list[str] = []

    ids = [card.card_id for card in state.all_cards()]
    duplicates = sorted(card_id for card_id, n in Counter(ids).items() if n > 1)
    if duplicates:
        problems.append(f"cards in more than one place: {', '.join(duplicates)}")
    if ids and set(ids) != {card.card_id for card in standard_deck()}:
        problems.append(f"expected the {DECK_SIZE}-card deck, found {len(set(ids))} distinct cards")

    for pile in state.piles:
        faces = [card.face_up for card in pile.cards]
        if faces and not faces[-1]:
            problems.append(f"pile {pile.pile_id} top card is face-down")
        if faces != sorted(faces):
            problems.append(f"pile {pile.pile_id} has a face-down card above a face-up one")

    for foundation in state.foundations:
        for position, card in enumerate(foundation.cards):
            if card.suit != foundation.suit:
                problems.append(f"{card} on the {foundation.suit.value} foundation")
            if card.rank != Rank(position + 1):
                problems.append(f"{card} out of order on the {foundation.suit.value} foundation")
            if not card.face_up:
                problems.append(f"{card} face-down on a foundation")

    if any(card.face_up for card in state.deck.downwards):
        problems.append("face-up card in the stock")
    if not all(card.face_up for card in state.deck.upwards):
        problems.append("face-down card in the waste")

    if state.dragging is not None:
        origin = locate(state, state.dragging.card)
        if origin is None:
            problems.append(f"dragged card {state.dragging.card} is not in a draggable container")
        elif len(state.frames) and state.frames.rect_for(origin) is None:
            problems.append(f"no frame registered for drag origin {origin}")

    return problems


def check_invariants(state: GameState) -> None:
    """Raise InvariantViolation if the state is unsound."""
    problems = find_violations(state)
    if problems:
        raise InvariantViolation(problems)
