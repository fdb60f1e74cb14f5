"""
Card Positions - Where cards sit on screen, and where they animate to.

Read-only geometry over the game state and its frames. Points are in
the renderer's global coordinate space; the zero point means "no anchor,
render in place".
"""

from __future__ import annotations
from dataclasses import dataclass

from .cards import Card
from .drag import locate
from .frames import ZERO_POINT, Point, ZoneId
from .state import GameState

# Waste cards fanned out next to the deck.
VISIBLE_WASTE_CARDS = 3


@dataclass(frozen=True)
class PlacedCard:
    """A card with its offset from the start of its fan."""
    card: Card
    offset: float
    is_draggable: bool = True


def pile_spacing(card_width: float) -> float:
    """Vertical gap above a face-up card; face-down cards use a fifth of it."""
    return card_width * 2 / 5 + 4


def pile_offsets(state: GameState, pile_id: int) -> list[PlacedCard]:
    """Each pile card with its vertical offset from the pile's first card."""
    pile = state.pile(pile_id)
    if pile is None:
        return []
    spacing = pile_spacing(state.frames.card_width)
    placed: list[PlacedCard] = []
    for card in pile.cards:
        if not placed:
            placed.append(PlacedCard(card, 0.0, card.face_up))
            continue
        previous = placed[-1]
        gap = spacing if previous.card.face_up else spacing / 5
        placed.append(PlacedCard(card, previous.offset + gap, card.face_up))
    return placed


def waste_offsets(state: GameState) -> list[PlacedCard]:
    """
    The last three waste cards with their horizontal offsets.

    Only the top one may be dragged.
    """
    spacing = state.frames.card_width / 20
    cards = list(state.deck.upwards)[-VISIBLE_WASTE_CARDS:]
    return [
        PlacedCard(card, i * spacing, is_draggable=(i == len(cards) - 1))
        for i, card in enumerate(cards)
    ]


def card_position(state: GameState, card: Card | str) -> Point:
    """
    Centre point of a card as currently laid out.

    Pile cards hang below their pile frame; visible waste cards fan right
    of the deck frame. Foundation cards, hidden waste cards and cards not
    in play give the zero point.
    """
    card_id = card if isinstance(card, str) else card.card_id
    zone = locate(state, card_id)
    if zone is None or zone.is_foundation:
        return ZERO_POINT

    rect = state.frames.rect_for(zone)
    if rect is None:
        return ZERO_POINT

    if zone.is_pile:
        placed = next((p for p in pile_offsets(state, zone.key) if p.card.card_id == card_id), None)
        if placed is None:
            return ZERO_POINT
        card_width = state.frames.card_width
        return Point(rect.mid_x, rect.min_y + card_width / 2 * 7 / 5 + placed.offset)

    placed = next((p for p in waste_offsets(state) if p.card.card_id == card_id), None)
    if placed is None:
        return ZERO_POINT
    return Point(rect.mid_x + placed.offset, rect.mid_y)


def destination_position(state: GameState, destination: ZoneId) -> Point:
    """
    Where a card animates to when sent to ``destination``.

    Only foundations have an anchor (the centre of their frame); piles
    and the deck give the zero point.
    """
    if not destination.is_foundation:
        return ZERO_POINT
    rect = state.frames.rect_for(destination)
    if rect is None:
        return ZERO_POINT
    return rect.center
