"""Tests for structural invariant checks."""

import pytest

from ..engine_core.action import Action
from ..engine_core.cards import Suit, parse_card
from ..engine_core.frames import Frame, Point, ZoneId
from ..engine_core.identified import IdentifiedList
from ..engine_core.invariants import InvariantViolation, check_invariants, find_violations
from ..engine_core.reducer import Reducer
from ..engine_core.state import DraggingState, GameState
from .conftest import foundation_rect, pile_rect, table


class TestFindViolations:
    """Each broken invariant is reported."""

    def test_empty_table_is_sound(self):
        assert find_violations(GameState()) == []

    def test_dealt_table_is_sound(self, dealt_state):
        check_invariants(dealt_state)

    def test_duplicate_card(self, dealt_state):
        dealt_state.deck.upwards.append(parse_card("AH", True))
        problems = find_violations(dealt_state)
        assert any("AH" in problem for problem in problems)

    def test_missing_cards(self):
        problems = find_violations(table(piles={1: ["KS"]}))
        assert any("52" in problem for problem in problems)

    def test_face_down_pile_top(self):
        assert "pile 1 top card is face-down" in find_violations(table(piles={1: ["~KS"]}))

    def test_face_down_above_face_up(self):
        problems = find_violations(table(piles={2: ["KS", "~QH", "JC"]}))
        assert "pile 2 has a face-down card above a face-up one" in problems

    def test_foundation_order(self):
        problems = find_violations(table(foundations={}))
        assert problems == []

        state = table()
        state.foundation(Suit.HEARTS).cards = IdentifiedList([parse_card("2H", True)])
        assert any("out of order" in problem for problem in find_violations(state))

    def test_deck_faces(self):
        problems = find_violations(table(stock=["AS"], waste=["~2S"]))
        assert "face-up card in the stock" in problems
        assert "face-down card in the waste" in problems

    def test_dragging_card_not_in_play(self):
        state = table(piles={1: ["KS"]})
        state.dragging = DraggingState(card=parse_card("QH", True), position=Point())
        assert any("dragged card" in problem for problem in find_violations(state))

    def test_drag_origin_without_frame(self, dealt_state):
        """Once frames are registered, the drag origin must have one."""
        dealt_state.dragging = DraggingState(card=dealt_state.pile(5).top_card, position=Point())
        assert find_violations(dealt_state) == []

        dealt_state.frames.register(Frame(ZoneId.foundation(Suit.HEARTS), foundation_rect(Suit.HEARTS)))
        assert "no frame registered for drag origin pile:5" in find_violations(dealt_state)

        dealt_state.frames.register(Frame(ZoneId.pile(5), pile_rect(5)))
        assert find_violations(dealt_state) == []


class TestStrictReducer:
    """A strict reducer refuses to hand out a broken state."""

    def test_raises_on_broken_state(self):
        broken = GameState(is_game_over=False)
        broken.deck.upwards.append(parse_card("AH", True))
        reducer = Reducer(strict=True)

        with pytest.raises(InvariantViolation) as excinfo:
            reducer.apply(broken, Action.flip_deck())
        assert excinfo.value.problems

    def test_lenient_reducer_does_not_check(self):
        broken = GameState(is_game_over=False)
        broken.deck.upwards.append(parse_card("AH", True))
        assert Reducer(strict=False).apply(broken, Action.flip_deck()).success
