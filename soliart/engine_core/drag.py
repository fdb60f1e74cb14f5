"""
Drag helpers - Where a card lives, which run it drags, where it renders.

The dragged run is never stored. It is derived from the anchor card's
live container each time it is needed, so it cannot drift from the piles.
"""

from __future__ import annotations
import logging

from .cards import Card
from .frames import Offset, ZoneId
from .state import GameState

logger = logging.getLogger(__name__)


def locate(state: GameState, card: Card | str) -> ZoneId | None:
    """
    The draggable container holding a card: a pile, a foundation or the
    waste. Cards in the stock and cards not in play give None.
    """
    card_id = card if isinstance(card, str) else card.card_id
    for pile in state.piles:
        if card_id in pile.cards:
            return pile.zone
    for foundation in state.foundations:
        if card_id in foundation.cards:
            return foundation.zone
    if card_id in state.deck.upwards:
        return state.deck.zone
    return None


def run_from(state: GameState, card: Card | str) -> list[Card]:
    """
    The cards that move together with ``card``.

    On a pile that is the card plus every card above it; anywhere else
    it is the card alone. A card not in play gives an empty run.
    """
    card_id = card if isinstance(card, str) else card.card_id
    zone = locate(state, card_id)
    if zone is None:
        return []
    if zone.is_pile:
        pile = state.pile(zone.key)
        return pile.cards.suffix_from(pile.cards.first_index_of(card_id))
    live = state.find_card(card_id)
    return [live] if live else []


def dragged_cards(state: GameState) -> list[Card]:
    """The run currently being dragged, or [] when idle."""
    if state.dragging is None:
        return []
    return run_from(state, state.dragging.card)


def drag_offset(state: GameState) -> Offset | None:
    """
    Visual offset shared by every dragged card.

    Measured from the frame of the zone the drag started in, less the
    card's own anchor inside that frame. None when idle or when that
    zone has no registered frame.
    """
    dragging = state.dragging
    if dragging is None:
        return None
    origin_zone = locate(state, dragging.card)
    origin_rect = state.frames.rect_for(origin_zone) if origin_zone else None
    if origin_rect is None:
        logger.warning("No frame for drag origin %s", origin_zone)
        return None
    card_width = state.frames.card_width
    return Offset(
        width=dragging.position.x - origin_rect.x - card_width / 2,
        height=dragging.position.y - origin_rect.y - card_width * 7 / 5,
    )


def drag_offsets(state: GameState) -> dict[str, Offset]:
    """Offset per dragged card id."""
    offset = drag_offset(state)
    if offset is None:
        return {}
    return {card.card_id: offset for card in dragged_cards(state)}


def z_index(state: GameState, zone: ZoneId) -> float:
    """Stacking level for a zone: the priority zone renders above the rest."""
    return 1.0 if zone == state.z_index_priority else 0.0
