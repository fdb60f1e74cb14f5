"""
Tests for the reducer (game state transitions).

Tests:
- Dealing
- Drawing and turning the deck
- Scoring and moving runs
- Rejections leave the state untouched
- Card uniqueness over long random games
"""

import random

import pytest

from ..engine_core.action import Action, ActionType, ErrorCode
from ..engine_core.action_generator import legal_actions
from ..engine_core.cards import Rank, Suit, parse_card, standard_deck
from ..engine_core.frames import Point
from ..engine_core.invariants import check_invariants, find_violations
from ..engine_core.reducer import Reducer, apply_action, make_shuffler
from ..engine_core.state import BASELINE_PRIORITY, GameState
from .conftest import table


class TestShuffle:
    """Tests for dealing."""

    def test_deal_layout(self, dealt_state):
        state = dealt_state
        assert not state.is_game_over
        for pile in state.piles:
            assert len(pile.cards) == pile.pile_id
            assert pile.top_card.face_up
            assert not any(card.face_up for card in list(pile.cards)[:-1])
        assert len(state.deck.downwards) == 24
        assert state.deck.upwards.is_empty
        assert not any(card.face_up for card in state.deck.downwards)
        assert all(foundation.cards.is_empty for foundation in state.foundations)
        assert find_violations(state) == []

    def test_known_order(self, dealt_state):
        assert dealt_state.pile(1).cards.ids() == ["AH"]
        assert dealt_state.pile(7).top_card.card_id == "2D"
        assert dealt_state.deck.downwards[0].card_id == "3D"

    def test_shuffle_rejected_while_in_progress(self, ordered_reducer, dealt_state):
        result = ordered_reducer.apply(dealt_state, Action.shuffle())
        assert not result.success
        assert result.error_code == ErrorCode.GAME_IN_PROGRESS
        assert result.new_state is dealt_state

    def test_reset_then_shuffle(self, ordered_reducer, dealt_state):
        reset = ordered_reducer.apply(dealt_state, Action.reset_game())
        assert reset.success
        assert reset.new_state.is_game_over
        assert list(reset.new_state.all_cards()) == []

        dealt = ordered_reducer.apply(reset.new_state, Action.shuffle())
        assert dealt.success
        assert dealt.new_state == dealt_state

    def test_seeded_shuffles_repeat(self):
        first = Reducer(shuffle_cards=make_shuffler(42)).apply(GameState(), Action.shuffle())
        second = Reducer(shuffle_cards=make_shuffler(42)).apply(GameState(), Action.shuffle())
        assert first.new_state == second.new_state

    def test_input_state_not_mutated(self, ordered_reducer):
        state = GameState()
        ordered_reducer.apply(state, Action.shuffle())
        assert state.is_game_over
        assert list(state.all_cards()) == []


class TestDeck:
    """Tests for drawing and turning the deck."""

    def test_draw_moves_one_card_face_up(self, ordered_reducer, dealt_state):
        result = ordered_reducer.apply(dealt_state, Action.draw_card())
        assert result.success
        state = result.new_state
        assert state.deck.upwards.ids() == ["3D"]
        assert state.deck.upwards.last.face_up
        assert len(state.deck.downwards) == 23
        assert state.moves == 0

    def test_draw_from_empty_stock(self, reducer):
        state = table(waste=["AS"])
        result = reducer.apply(state, Action.draw_card())
        assert not result.success
        assert result.error_code == ErrorCode.EMPTY_STOCK
        assert result.new_state is state

    def test_draw_flip_round_trip(self, reducer):
        state = table(stock=["~AS", "~2S", "~3S"])
        for _ in range(3):
            state = reducer.apply(state, Action.draw_card()).new_state
        assert state.deck.upwards.ids() == ["AS", "2S", "3S"]
        assert state.deck.downwards.is_empty

        state = reducer.apply(state, Action.flip_deck()).new_state
        assert state.deck.downwards.ids() == ["3S", "2S", "AS"]
        assert not any(card.face_up for card in state.deck.downwards)
        assert state.deck.upwards.is_empty

    def test_flip_keeps_remaining_stock(self, reducer):
        state = table(stock=["~5S"], waste=["AS", "2S"])
        state = reducer.apply(state, Action.flip_deck()).new_state
        assert state.deck.downwards.ids() == ["5S", "2S", "AS"]


class TestScoreCard:
    """Tests for scoring to a foundation."""

    def test_score_ace_from_pile(self, ordered_reducer, dealt_state):
        ace = dealt_state.pile(1).top_card
        result = ordered_reducer.apply(dealt_state, Action.score_card(ace))

        assert result.success
        state = result.new_state
        assert state.foundation(Suit.HEARTS).cards.ids() == ["AH"]
        assert state.pile(1).is_empty
        assert state.moves == dealt_state.moves + 1
        assert state.score == 10

    def test_score_reveals_pile_card(self, reducer):
        state = table(piles={1: ["~9S", "AD"]})
        result = reducer.apply(state, Action.score_card(parse_card("AD", True)))
        assert result.success
        pile = result.new_state.pile(1)
        assert pile.top_card.card_id == "9S"
        assert pile.top_card.face_up
        assert result.new_state.score == 10 + 5

    def test_score_from_waste(self, reducer):
        state = table(waste=["2C", "AC"])
        result = reducer.apply(state, Action.score_card(parse_card("AC", True)))
        assert result.success
        assert result.new_state.deck.upwards.ids() == ["2C"]
        assert result.new_state.foundation(Suit.CLUBS).cards.ids() == ["AC"]

    def test_buried_waste_card_rejected(self, reducer):
        state = table(waste=["AC", "9D"])
        result = reducer.apply(state, Action.score_card(parse_card("AC", True)))
        assert not result.success
        assert result.new_state is state

    def test_card_under_others_rejected(self, reducer):
        state = table(piles={1: ["AD", "KS"]})
        result = reducer.apply(state, Action.score_card(parse_card("AD", True)))
        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_MOVE

    def test_illegal_score_leaves_state_equal(self, ordered_reducer, dealt_state):
        before = dealt_state.clone()
        three = dealt_state.pile(2).top_card
        result = ordered_reducer.apply(dealt_state, Action.score_card(three))
        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_MOVE
        assert result.new_state == before
        assert result.effects == []

    def test_wrong_foundation(self, reducer):
        state = table(piles={1: ["AD"]})
        result = reducer.apply(state, Action.score_card(parse_card("AD", True), Suit.SPADES))
        assert not result.success

    def test_win_ends_game(self, reducer):
        foundations = {
            suit: [f"{rank.symbol}{suit.letter}" for rank in Rank]
            for suit in Suit
        }
        foundations[Suit.SPADES] = foundations[Suit.SPADES][:-1]
        state = table(foundations=foundations, piles={3: ["KS"]})

        result = reducer.apply(state, Action.score_card(parse_card("KS", True)))
        assert result.success
        assert result.new_state.is_won
        assert result.new_state.is_game_over
        assert "won" in result.state_changes[0]


class TestMoveRun:
    """Tests for moving runs between piles."""

    def test_move_single_card(self, ordered_reducer, dealt_state):
        two = dealt_state.pile(5).top_card
        result = ordered_reducer.apply(dealt_state, Action.move_run(two, 2))

        assert result.success
        state = result.new_state
        assert state.pile(2).cards.ids() == ["2H", "3H", "2C"]
        assert state.pile(5).top_card.card_id == "AC"
        assert state.pile(5).top_card.face_up
        assert state.moves == 1
        assert state.score == 5

    def test_move_run_keeps_order(self, reducer):
        state = table(piles={1: ["~4D", "9H", "8S", "7D"], 2: ["10C"]})
        result = reducer.apply(state, Action.move_run(parse_card("9H", True), 2))

        assert result.success
        assert result.new_state.pile(2).cards.ids() == ["10C", "9H", "8S", "7D"]
        assert result.new_state.pile(1).cards.ids() == ["4D"]
        assert result.new_state.pile(1).top_card.face_up

    def test_king_to_empty_pile(self, reducer):
        state = table(piles={1: ["~2C", "KD", "QS"]})
        result = reducer.apply(state, Action.move_run(parse_card("KD", True), 4))
        assert result.success
        assert result.new_state.pile(4).cards.ids() == ["KD", "QS"]

    def test_same_color_rejected(self, reducer):
        state = table(piles={1: ["7C"], 2: ["6C"]})
        result = reducer.apply(state, Action.move_run(parse_card("6C", True), 1))
        assert not result.success
        assert result.new_state is state

    def test_face_down_card_cannot_move(self, reducer):
        state = table(piles={1: ["~6H", "2S"], 2: ["7C"]})
        result = reducer.apply(state, Action.move_run(parse_card("6H"), 2))
        assert not result.success
        assert result.error_code == ErrorCode.FACE_DOWN

    def test_foundation_card_back_to_pile(self, reducer):
        state = table(foundations={Suit.HEARTS: ["AH", "2H"]}, piles={1: ["3S"]}, stock=[])
        state.score = 30
        result = reducer.apply(state, Action.move_run(parse_card("2H", True), 1))
        assert result.success
        assert result.new_state.foundation(Suit.HEARTS).cards.ids() == ["AH"]
        assert result.new_state.score == 15

    def test_waste_to_pile(self, reducer):
        state = table(waste=["QD"], piles={6: ["KC"]})
        result = reducer.apply(state, Action.move_run(parse_card("QD", True), 6))
        assert result.success
        assert result.new_state.deck.upwards.is_empty
        assert result.new_state.score == 5

    def test_card_not_in_play(self, reducer):
        state = table(piles={1: ["KC"]})
        result = reducer.apply(state, Action.move_run(parse_card("QD", True), 1))
        assert result.error_code == ErrorCode.CARD_NOT_FOUND


class TestGameOver:
    """No moves are accepted without a game on the table."""

    @pytest.mark.parametrize("action", [
        Action.draw_card(),
        Action.flip_deck(),
        Action.score_card(parse_card("AH", True)),
        Action.move_run(parse_card("KS", True), 1),
        Action.begin_drag(parse_card("AH", True), Point(0, 0)),
        Action.double_tap(parse_card("AH", True)),
    ])
    def test_rejected_before_deal(self, reducer, action):
        state = GameState()
        result = reducer.apply(state, action)
        assert result.error_code == ErrorCode.GAME_OVER
        assert result.new_state is state

    def test_won_table_is_frozen(self, reducer):
        """After a win a King cannot come back down, so the next shuffle deals from a full set."""
        foundations = {
            suit: [f"{rank.symbol}{suit.letter}" for rank in Rank]
            for suit in Suit
        }
        foundations[Suit.SPADES] = foundations[Suit.SPADES][:-1]
        state = table(foundations=foundations, piles={3: ["KS"]})
        won = reducer.apply(state, Action.score_card(parse_card("KS", True))).new_state
        assert won.is_game_over

        result = reducer.apply(won, Action.move_run(won.foundation(Suit.SPADES).top_card, 1))
        assert result.error_code == ErrorCode.GAME_OVER
        assert result.new_state is won
        assert all(pile.is_empty for pile in won.piles)

        dealt = reducer.apply(won, Action.shuffle())
        assert dealt.success
        assert find_violations(dealt.new_state) == []

    def test_reset_stops_play(self, ordered_reducer, dealt_state):
        state = ordered_reducer.apply(dealt_state, Action.reset_game()).new_state
        assert ordered_reducer.apply(state, Action.draw_card()).error_code == ErrorCode.GAME_OVER


class TestDispatch:
    """Tests for the reducer's dispatch plumbing."""

    def test_apply_action_default_reducer(self):
        result = apply_action(GameState(), Action.shuffle())
        assert result.success
        assert len(list(result.new_state.all_cards())) == 52

    def test_unknown_action(self, reducer):
        state = GameState()
        result = reducer.apply(state, Action(action_type=None))
        assert not result.success
        assert result.error_code == ErrorCode.NO_HANDLER
        assert result.new_state is state

    def test_every_action_type_has_a_handler(self, reducer):
        for action_type in ActionType:
            assert reducer._get_handler(action_type) is not None


class TestRandomPlay:
    """Long random games never lose or duplicate a card."""

    @pytest.mark.parametrize("seed", range(5))
    def test_uniqueness_holds(self, seed):
        reducer = Reducer(shuffle_cards=make_shuffler(seed), strict=True)
        rng = random.Random(seed)
        state = reducer.apply(GameState(), Action.shuffle()).new_state

        for _ in range(300):
            actions = legal_actions(state)
            if not actions:
                break
            result = reducer.apply(state, rng.choice(actions))
            assert result.success, result.error
            state = result.new_state
            check_invariants(state)

        ids = sorted(card.card_id for card in state.all_cards())
        assert ids == sorted(card.card_id for card in standard_deck())
        assert state.z_index_priority == BASELINE_PRIORITY
