"""
Pytest fixtures for SoliArt tests.

The ordered reducer deals an unshuffled deck, so the table is known:

    pile 1: AH
    pile 2: 2H 3H
    pile 3: 4H 5H 6H
    pile 4: 7H 8H 9H 10H
    pile 5: JH QH KH AC 2C
    pile 6: 3C 4C 5C 6C 7C 8C
    pile 7: 9C 10C JC QC KC AD 2D
    stock:  3D .. KD, AS .. KS  (24 cards, 3D drawn first)

Only the last card of each pile is face-up.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.cards import Suit, parse_card, standard_deck
from ..engine_core.frames import Frame, Point, Rect, ZoneId
from ..engine_core.identified import IdentifiedList
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState

CARD_WIDTH = 50
PILE_TOP = 200
FOUNDATION_TOP = 100


def pile_rect(pile_id: int) -> Rect:
    return Rect(10 + (pile_id - 1) * 60, PILE_TOP, CARD_WIDTH, 300)


def foundation_rect(suit: Suit) -> Rect:
    return Rect(10 + list(Suit).index(suit) * 60, FOUNDATION_TOP, CARD_WIDTH, 70)


DECK_RECT = Rect(370, FOUNDATION_TOP, 110, 70)


def pile_point(pile_id: int) -> Point:
    return pile_rect(pile_id).center


def foundation_point(suit: Suit) -> Point:
    return foundation_rect(suit).center


def layout_frames() -> list[Frame]:
    """Piles first, then foundations, then the deck."""
    frames = [Frame(ZoneId.pile(i), pile_rect(i)) for i in range(1, 8)]
    frames += [Frame(ZoneId.foundation(suit), foundation_rect(suit)) for suit in Suit]
    frames.append(Frame(ZoneId.deck(), DECK_RECT))
    return frames


def cards(*ids: str):
    """Cards from ids; a leading ``~`` marks a face-down card."""
    return [
        parse_card(card_id.lstrip("~"), face_up=not card_id.startswith("~"))
        for card_id in ids
    ]


def table(
    piles: dict[int, list[str]] | None = None,
    foundations: dict[Suit, list[str]] | None = None,
    stock: list[str] | None = None,
    waste: list[str] | None = None,
) -> GameState:
    """A game in progress holding exactly the given cards."""
    state = GameState(is_game_over=False)
    for pile_id, ids in (piles or {}).items():
        state.pile(pile_id).cards = IdentifiedList(cards(*ids))
    for suit, ids in (foundations or {}).items():
        state.foundation(suit).cards = IdentifiedList(cards(*ids))
    state.deck.downwards = IdentifiedList(cards(*(stock or [])))
    state.deck.upwards = IdentifiedList(cards(*(waste or [])))
    return state


def with_frames(state: GameState) -> GameState:
    for frame in layout_frames():
        state.frames.register(frame)
    return state


@pytest.fixture
def ordered_reducer() -> Reducer:
    """Deals an unshuffled deck and checks invariants after every commit."""
    return Reducer(shuffle_cards=standard_deck, strict=True)


@pytest.fixture
def reducer() -> Reducer:
    """For hand-built tables that hold fewer than 52 cards."""
    return Reducer(shuffle_cards=standard_deck, strict=False)


@pytest.fixture
def dealt_state(ordered_reducer: Reducer) -> GameState:
    result = ordered_reducer.apply(GameState(), Action.shuffle())
    assert result.success
    return result.new_state


@pytest.fixture
def framed_state(dealt_state: GameState) -> GameState:
    """The ordered deal with every zone's frame registered."""
    return with_frames(dealt_state)
