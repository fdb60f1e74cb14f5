"""
Game State - Piles, foundations, deck and the aggregate root.

Design principles:
- Every one of the 52 cards lives in exactly one container
- Containers keep insertion order; the last card is the top
- The reducer mutates a clone, never the state it was given
- Snapshot-friendly: a renderer can redraw from the state alone
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Iterator

from .cards import Card, Suit
from .frames import FrameRegistry, Point, ZoneId
from .identified import IdentifiedList

PILE_COUNT = 7

# Zone whose cards render on top when nothing has been dragged recently.
BASELINE_PRIORITY = ZoneId.pile(1)


def _cards(cards: list[Card] | None = None) -> IdentifiedList[Card]:
    return IdentifiedList(cards or [])


@dataclass
class Pile:
    """A tableau column, numbered 1..7."""
    pile_id: int
    cards: IdentifiedList[Card] = field(default_factory=_cards)

    @property
    def zone(self) -> ZoneId:
        return ZoneId.pile(self.pile_id)

    @property
    def top_card(self) -> Card | None:
        return self.cards.last

    @property
    def is_empty(self) -> bool:
        return self.cards.is_empty

    def expose_top(self) -> bool:
        """
        Turn the top card face-up.

        Returns True if a face-down card was turned.
        """
        top = self.cards.last
        if top is None or top.face_up:
            return False
        self.cards.upsert(top.flipped(True))
        return True


@dataclass
class Foundation:
    """An ace-up stack for one suit."""
    suit: Suit
    cards: IdentifiedList[Card] = field(default_factory=_cards)

    @property
    def zone(self) -> ZoneId:
        return ZoneId.foundation(self.suit)

    @property
    def top_card(self) -> Card | None:
        return self.cards.last

    @property
    def is_complete(self) -> bool:
        return len(self.cards) == 13


@dataclass
class Deck:
    """
    The stock (``downwards``, face-down) and the waste (``upwards``, face-up).
    """
    downwards: IdentifiedList[Card] = field(default_factory=_cards)
    upwards: IdentifiedList[Card] = field(default_factory=_cards)

    @property
    def zone(self) -> ZoneId:
        return ZoneId.deck()


@dataclass
class DraggingState:
    """The card the pointer is anchored to, and where the pointer is."""
    card: Card
    position: Point


def _piles() -> IdentifiedList[Pile]:
    return IdentifiedList(
        (Pile(pile_id=i) for i in range(1, PILE_COUNT + 1)),
        id_of=lambda pile: pile.pile_id,
    )


def _foundations() -> IdentifiedList[Foundation]:
    return IdentifiedList(
        (Foundation(suit=suit) for suit in Suit),
        id_of=lambda foundation: foundation.suit,
    )


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    ``z_index_priority`` names the zone that renders above its siblings;
    ``priority_generation`` increases on every drag so that a stale
    delayed reset can be told apart from the current one.
    """
    piles: IdentifiedList[Pile] = field(default_factory=_piles)
    foundations: IdentifiedList[Foundation] = field(default_factory=_foundations)
    deck: Deck = field(default_factory=Deck)
    score: int = 0
    moves: int = 0
    is_game_over: bool = True

    frames: FrameRegistry = field(default_factory=FrameRegistry)
    dragging: DraggingState | None = None
    z_index_priority: ZoneId = BASELINE_PRIORITY
    priority_generation: int = 0

    def pile(self, pile_id: int) -> Pile | None:
        return self.piles.get(pile_id)

    def foundation(self, suit: Suit) -> Foundation | None:
        return self.foundations.get(suit)

    @property
    def is_dragging(self) -> bool:
        return self.dragging is not None

    @property
    def is_won(self) -> bool:
        return all(foundation.is_complete for foundation in self.foundations)

    def all_cards(self) -> Iterator[Card]:
        """Every card in every container, piles first."""
        for pile in self.piles:
            yield from pile.cards
        for foundation in self.foundations:
            yield from foundation.cards
        yield from self.deck.downwards
        yield from self.deck.upwards

    def find_card(self, card_id: str) -> Card | None:
        """Live copy of a card in a pile, on a foundation or in the waste."""
        for pile in self.piles:
            if card_id in pile.cards:
                return pile.cards.get(card_id)
        for foundation in self.foundations:
            if card_id in foundation.cards:
                return foundation.cards.get(card_id)
        return self.deck.upwards.get(card_id)

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
