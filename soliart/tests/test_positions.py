"""Tests for card layout and animation anchors."""

import pytest

from ..engine_core.action import Action
from ..engine_core.cards import Suit
from ..engine_core.frames import ZERO_POINT, Point, ZoneId
from ..engine_core.positions import (
    card_position,
    destination_position,
    pile_offsets,
    pile_spacing,
    waste_offsets,
)
from .conftest import foundation_point, table, with_frames


class TestPileLayout:
    """Tests for cascading pile cards."""

    def test_spacing(self):
        assert pile_spacing(50) == pytest.approx(24)

    def test_face_down_cards_pack_tighter(self, framed_state):
        placed = pile_offsets(framed_state, 7)
        offsets = [p.offset for p in placed]
        assert offsets == pytest.approx([0, 4.8, 9.6, 14.4, 19.2, 24.0, 28.8])
        assert [p.is_draggable for p in placed] == [False] * 6 + [True]

    def test_face_up_cards_use_full_spacing(self):
        state = with_frames(table(piles={1: ["~4D", "9H", "8S"]}))
        offsets = [p.offset for p in pile_offsets(state, 1)]
        assert offsets == pytest.approx([0, 4.8, 28.8])

    def test_unknown_pile(self, framed_state):
        assert pile_offsets(framed_state, 9) == []

    def test_pile_card_position(self, framed_state):
        position = card_position(framed_state, "2D")
        assert position.x == pytest.approx(395)
        assert position.y == pytest.approx(200 + 35 + 28.8)


class TestWasteLayout:
    """Tests for the fanned waste."""

    @pytest.fixture
    def drawn(self, ordered_reducer, framed_state):
        state = framed_state
        for _ in range(4):
            state = ordered_reducer.apply(state, Action.draw_card()).new_state
        return state

    def test_last_three_visible(self, drawn):
        placed = waste_offsets(drawn)
        assert [p.card.card_id for p in placed] == ["4D", "5D", "6D"]
        assert [p.offset for p in placed] == pytest.approx([0, 2.5, 5.0])
        assert [p.is_draggable for p in placed] == [False, False, True]

    def test_short_waste(self, ordered_reducer, framed_state):
        state = ordered_reducer.apply(framed_state, Action.draw_card()).new_state
        [placed] = waste_offsets(state)
        assert placed.offset == 0
        assert placed.is_draggable

    def test_waste_card_position(self, drawn):
        assert card_position(drawn, "6D") == Point(430, 135)

    def test_hidden_waste_card(self, drawn):
        assert card_position(drawn, "3D") == ZERO_POINT


class TestAnchors:
    """Tests for positions that have no anchor."""

    def test_without_frames(self, dealt_state):
        assert card_position(dealt_state, "AH") == ZERO_POINT

    def test_stock_card(self, framed_state):
        assert card_position(framed_state, "3D") == ZERO_POINT

    def test_foundation_card(self, ordered_reducer, framed_state):
        state = ordered_reducer.apply(framed_state, Action.double_tap(framed_state.pile(1).top_card)).new_state
        assert card_position(state, "AH") == ZERO_POINT

    def test_destination_foundation(self, framed_state):
        destination = ZoneId.foundation(Suit.HEARTS)
        assert destination_position(framed_state, destination) == foundation_point(Suit.HEARTS)

    @pytest.mark.parametrize("destination", [ZoneId.pile(2), ZoneId.deck()])
    def test_destination_without_anchor(self, framed_state, destination):
        assert destination_position(framed_state, destination) == ZERO_POINT

    def test_destination_without_frame(self, dealt_state):
        assert destination_position(dealt_state, ZoneId.foundation(Suit.CLUBS)) == ZERO_POINT
