"""
Card Model - Ranks, suits and immutable card values.

A card's identity is its rank and suit; a standard deck has no
duplicates, so ``card_id`` (e.g. ``"QH"``) is unique across a game.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum, IntEnum


class Color(Enum):
    """Card colors."""
    RED = "red"
    BLACK = "black"


class Suit(Enum):
    """Suits, in foundation order."""
    HEARTS = "hearts"
    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    SPADES = "spades"

    @property
    def color(self) -> Color:
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return Color.RED
        return Color.BLACK

    @property
    def letter(self) -> str:
        return self.value[0].upper()

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    @classmethod
    def from_letter(cls, letter: str) -> Suit:
        for suit in cls:
            if suit.letter == letter.upper():
                return suit
        raise ValueError(f"Unknown suit letter: {letter!r}")


_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.SPADES: "♠",
}


class Rank(IntEnum):
    """Ranks, totally ordered from Ace to King."""
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def predecessor(self) -> Rank | None:
        """The rank directly below, or None for an Ace."""
        if self == Rank.ACE:
            return None
        return Rank(self - 1)

    @property
    def successor(self) -> Rank | None:
        """The rank directly above, or None for a King."""
        if self == Rank.KING:
            return None
        return Rank(self + 1)

    @property
    def symbol(self) -> str:
        return _RANK_SYMBOLS.get(self, str(int(self)))

    @classmethod
    def from_symbol(cls, symbol: str) -> Rank:
        for rank, text in _RANK_SYMBOLS.items():
            if text == symbol.upper():
                return rank
        if symbol.isdigit() and 2 <= int(symbol) <= 10:
            return cls(int(symbol))
        raise ValueError(f"Unknown rank symbol: {symbol!r}")


_RANK_SYMBOLS = {
    Rank.ACE: "A",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
}


@dataclass(frozen=True)
class Card:
    """
    A playing card.

    Rank and suit never change. Face orientation changes by replacing
    the card with a flipped copy that keeps the same ``card_id``.
    """
    rank: Rank
    suit: Suit
    face_up: bool = False

    @property
    def card_id(self) -> str:
        return f"{self.rank.symbol}{self.suit.letter}"

    @property
    def color(self) -> Color:
        return self.suit.color

    def flipped(self, face_up: bool = True) -> Card:
        """Return this card with the given orientation."""
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"


def standard_deck() -> list[Card]:
    """The 52 cards face-down, suit by suit, Ace to King."""
    return [Card(rank=rank, suit=suit) for suit in Suit for rank in Rank]


def parse_card(card_id: str, face_up: bool = False) -> Card:
    """Parse an id such as ``"10H"`` or ``"as"`` into a Card."""
    text = card_id.strip()
    if len(text) < 2:
        raise ValueError(f"Invalid card id: {card_id!r}")
    return Card(
        rank=Rank.from_symbol(text[:-1]),
        suit=Suit.from_letter(text[-1]),
        face_up=face_up,
    )
