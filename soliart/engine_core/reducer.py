"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> ActionResult(new_state, effects)
- Works on a clone; a rejected action never leaks partial mutation
- Illegal gestures are rejected transitions, not exceptions
- Deferred work (the z-index reset) is returned as data
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Callable

from .action import Action, ActionResult, ActionType, ErrorCode, ScheduledEffect
from .cards import Card, Suit, standard_deck
from .drag import locate, run_from
from .frames import ZoneId
from .identified import IdentifiedList
from .invariants import InvariantViolation, check_invariants
from .rules import (
    PILE_CARD_REVEALED,
    apply_score,
    is_valid_foundation_move,
    is_valid_pile_move,
    move_score,
)
from .state import BASELINE_PRIORITY, DraggingState, GameState

logger = logging.getLogger(__name__)

# Actions that need a game on the table.
IN_PLAY_ACTIONS = frozenset({
    ActionType.DRAW_CARD,
    ActionType.FLIP_DECK,
    ActionType.SCORE_CARD,
    ActionType.MOVE_RUN,
    ActionType.BEGIN_DRAG,
    ActionType.DOUBLE_TAP,
})


def make_shuffler(seed: int | None = None) -> Callable[[], list[Card]]:
    """A shuffle source drawing from its own seeded generator."""
    rng = random.Random(seed)

    def shuffle_cards() -> list[Card]:
        cards = standard_deck()
        rng.shuffle(cards)
        return cards

    return shuffle_cards


class _Rejection(Exception):
    """Internal signal: the move is illegal and nothing was mutated."""

    def __init__(self, error: str, error_code: ErrorCode):
        super().__init__(error)
        self.error = error
        self.error_code = error_code


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState. ``shuffle_cards`` supplies
    the deal order; ``strict`` re-checks invariants after every commit.
    """
    shuffle_cards: Callable[[], list[Card]] = field(default_factory=make_shuffler)
    strict: bool = False

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state, or the same state and
        the reason when the action is rejected.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.rejected(
                state,
                f"No handler for action type: {action.action_type}",
                ErrorCode.NO_HANDLER,
            )
        if state.is_game_over and action.action_type in IN_PLAY_ACTIONS:
            return ActionResult.rejected(state, "No game in progress", ErrorCode.GAME_OVER)

        working = state.clone()
        result = handler(working, action)
        if result.new_state is None:
            result.new_state = state

        if result.success:
            logger.debug("%s applied: %s", action.action_type.value, result.state_changes)
            if self.strict:
                self._check(result.new_state, action)
        else:
            logger.debug(
                "%s rejected (%s): %s",
                action.action_type.value,
                result.error_code.value if result.error_code else None,
                result.error,
            )
        return result

    def _check(self, state: GameState, action: Action):
        try:
            check_invariants(state)
        except InvariantViolation as e:
            logger.error("Invariant violated after %s: %s", action.action_type.value, e)
            raise

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.SHUFFLE: self._handle_shuffle,
            ActionType.DRAW_CARD: self._handle_draw_card,
            ActionType.FLIP_DECK: self._handle_flip_deck,
            ActionType.SCORE_CARD: self._handle_score_card,
            ActionType.MOVE_RUN: self._handle_move_run,
            ActionType.RESET_GAME: self._handle_reset_game,
            ActionType.UPDATE_FRAME: self._handle_update_frame,
            ActionType.BEGIN_DRAG: self._handle_begin_drag,
            ActionType.UPDATE_DRAG: self._handle_update_drag,
            ActionType.DROP_CARDS: self._handle_drop_cards,
            ActionType.CANCEL_DRAG: self._handle_cancel_drag,
            ActionType.DOUBLE_TAP: self._handle_double_tap,
            ActionType.RESET_PRIORITY: self._handle_reset_priority,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Game actions
    # =========================================================================

    def _handle_shuffle(self, state: GameState, action: Action) -> ActionResult:
        """Deal a fresh game: pile k gets k cards, the rest go to the stock."""
        if not state.is_game_over:
            return ActionResult.rejected(None, "A game is already in progress", ErrorCode.GAME_IN_PROGRESS)

        cards = [card.flipped(False) for card in self.shuffle_cards()]
        for pile in state.piles:
            pile.cards = IdentifiedList(cards[:pile.pile_id])
            cards = cards[pile.pile_id:]
            pile.expose_top()
        for foundation in state.foundations:
            foundation.cards.clear()
        state.deck.downwards = IdentifiedList(cards)
        state.deck.upwards.clear()

        state.score = 0
        state.moves = 0
        state.dragging = None
        state.z_index_priority = BASELINE_PRIORITY
        state.is_game_over = False

        return ActionResult.success_with_state(
            state, changes=[f"Dealt a new game, {len(cards)} cards in the stock"]
        )

    def _handle_draw_card(self, state: GameState, action: Action) -> ActionResult:
        """Turn the first stock card face-up onto the waste."""
        if state.deck.downwards.is_empty:
            return ActionResult.rejected(None, "The stock is empty", ErrorCode.EMPTY_STOCK)

        card = state.deck.downwards[0]
        state.deck.downwards.remove(card.card_id)
        state.deck.upwards.append(card.flipped(True))

        return ActionResult.success_with_state(state, changes=[f"Drew {card}"])

    def _handle_flip_deck(self, state: GameState, action: Action) -> ActionResult:
        """Turn the waste back over onto the stock, face-down."""
        waste = [card.flipped(False) for card in reversed(list(state.deck.upwards))]
        state.deck.upwards.clear()
        state.deck.downwards.extend(waste)

        return ActionResult.success_with_state(
            state, changes=[f"Turned {len(waste)} cards back onto the stock"]
        )

    def _handle_score_card(self, state: GameState, action: Action) -> ActionResult:
        payload = action.payload
        if payload.card is None:
            return ActionResult.rejected(None, "No card given", ErrorCode.CARD_NOT_FOUND)
        try:
            change = self._score(state, payload.card, payload.suit or payload.card.suit)
        except _Rejection as e:
            return ActionResult.rejected(None, e.error, e.error_code)
        return ActionResult.success_with_state(state, changes=[change])

    def _handle_move_run(self, state: GameState, action: Action) -> ActionResult:
        payload = action.payload
        if payload.card is None or payload.pile_id is None:
            return ActionResult.rejected(None, "Card and target pile are required", ErrorCode.ILLEGAL_MOVE)
        try:
            change = self._move_run(state, payload.card, payload.pile_id)
        except _Rejection as e:
            return ActionResult.rejected(None, e.error, e.error_code)
        return ActionResult.success_with_state(state, changes=[change])

    def _handle_reset_game(self, state: GameState, action: Action) -> ActionResult:
        """
        Clear the table so a new shuffle is allowed.

        Frames survive, and so does the priority generation: a reset still
        pending from the old game must not match a drag in the new one.
        """
        fresh = GameState(frames=state.frames, priority_generation=state.priority_generation)
        return ActionResult.success_with_state(fresh, changes=["Game reset"])

    # =========================================================================
    # Interaction actions
    # =========================================================================

    def _handle_update_frame(self, state: GameState, action: Action) -> ActionResult:
        frame = action.payload.frame
        if frame is None:
            return ActionResult.rejected(None, "No frame given", ErrorCode.NO_TARGET)
        state.frames.register(frame)
        return ActionResult.success_with_state(state)

    def _handle_begin_drag(self, state: GameState, action: Action) -> ActionResult:
        """Anchor a drag to a face-up card and raise its zone's priority."""
        payload = action.payload
        if payload.card is None or payload.position is None:
            return ActionResult.rejected(None, "Card and position are required", ErrorCode.CARD_NOT_FOUND)
        if state.dragging is not None:
            return ActionResult.rejected(
                None, f"Already dragging {state.dragging.card}", ErrorCode.ALREADY_DRAGGING
            )

        card_id = payload.card.card_id
        if card_id in state.deck.downwards:
            return ActionResult.rejected(None, f"{payload.card} is face-down", ErrorCode.FACE_DOWN)
        card = state.find_card(card_id)
        if card is None:
            return ActionResult.rejected(None, f"{payload.card} is not in play", ErrorCode.CARD_NOT_FOUND)
        if not card.face_up:
            return ActionResult.rejected(None, f"{card} is face-down", ErrorCode.FACE_DOWN)

        state.dragging = DraggingState(card=card, position=payload.position)
        state.z_index_priority = locate(state, card)
        state.priority_generation += 1

        return ActionResult.success_with_state(state, changes=[f"Dragging {card}"])

    def _handle_update_drag(self, state: GameState, action: Action) -> ActionResult:
        if state.dragging is None:
            return ActionResult.rejected(None, "No drag in progress", ErrorCode.NOT_DRAGGING)
        if action.payload.position is None:
            return ActionResult.rejected(None, "No position given", ErrorCode.NO_TARGET)
        state.dragging.position = action.payload.position
        return ActionResult.success_with_state(state)

    def _handle_drop_cards(self, state: GameState, action: Action) -> ActionResult:
        """
        Resolve the drag against the frame under the pointer.

        The drag always ends and a priority reset is always scheduled;
        only a legal move touches the cards.
        """
        dragging = state.dragging
        if dragging is None:
            return ActionResult.rejected(None, "No drag in progress", ErrorCode.NOT_DRAGGING)

        state.dragging = None
        effects = [ScheduledEffect.reset_priority(state.priority_generation)]

        target = state.frames.hit_test(dragging.position)
        if target is None or target.zone.is_deck:
            return ActionResult.rejected(
                state, f"Nothing to drop {dragging.card} on", ErrorCode.NO_TARGET, effects
            )

        try:
            if target.zone.is_pile:
                change = self._move_run(state, dragging.card, target.zone.key)
            else:
                if len(run_from(state, dragging.card)) != 1:
                    raise _Rejection("Only single cards can be scored", ErrorCode.ILLEGAL_MOVE)
                change = self._score(state, dragging.card, target.zone.key)
        except _Rejection as e:
            return ActionResult.rejected(state, e.error, e.error_code, effects)

        return ActionResult.success_with_state(state, changes=[change], effects=effects)

    def _handle_cancel_drag(self, state: GameState, action: Action) -> ActionResult:
        if state.dragging is None:
            return ActionResult.rejected(None, "No drag in progress", ErrorCode.NOT_DRAGGING)
        state.dragging = None
        return ActionResult.success_with_state(
            state,
            changes=["Drag cancelled"],
            effects=[ScheduledEffect.reset_priority(state.priority_generation)],
        )

    def _handle_double_tap(self, state: GameState, action: Action) -> ActionResult:
        """Send a card straight to its suit's foundation."""
        card = action.payload.card
        if card is None:
            return ActionResult.rejected(None, "No card given", ErrorCode.CARD_NOT_FOUND)
        live = state.find_card(card.card_id)
        if live is None or not live.face_up:
            return ActionResult.rejected(None, f"{card} cannot be tapped", ErrorCode.FACE_DOWN)
        if state.foundation(live.suit) is None:
            return ActionResult.rejected(None, f"No foundation for {live.suit.value}", ErrorCode.NO_TARGET)
        try:
            change = self._score(state, live, live.suit)
        except _Rejection as e:
            return ActionResult.rejected(None, e.error, e.error_code)
        return ActionResult.success_with_state(state, changes=[change])

    def _handle_reset_priority(self, state: GameState, action: Action) -> ActionResult:
        """Settle back to baseline ordering, unless a newer drag has started."""
        if action.payload.token != state.priority_generation:
            return ActionResult.rejected(None, "Superseded by a newer drag", ErrorCode.STALE_TOKEN)
        state.z_index_priority = BASELINE_PRIORITY
        return ActionResult.success_with_state(state)

    # =========================================================================
    # Moves
    # =========================================================================

    def _exposed_run(self, state: GameState, card: Card) -> tuple[ZoneId, list[Card]]:
        """
        Where ``card`` is and what moves with it.

        Raises _Rejection if the card is not in play, face-down, or buried
        under other cards on a foundation or in the waste.
        """
        origin = locate(state, card)
        if origin is None:
            raise _Rejection(f"{card} is not in play", ErrorCode.CARD_NOT_FOUND)
        run = run_from(state, card)
        if not run[0].face_up:
            raise _Rejection(f"{card} is face-down", ErrorCode.FACE_DOWN)
        if origin.is_foundation:
            top = state.foundation(origin.key).top_card
        elif origin.is_deck:
            top = state.deck.upwards.last
        else:
            top = run[-1]
        if top.card_id != run[-1].card_id:
            raise _Rejection(f"{card} is covered", ErrorCode.ILLEGAL_MOVE)
        return origin, run

    def _take(self, state: GameState, origin: ZoneId, run: list[Card]) -> int:
        """Remove ``run`` from ``origin``; returns points for a revealed card."""
        ids = {card.card_id for card in run}
        if origin.is_pile:
            pile = state.pile(origin.key)
            pile.cards.remove_where(lambda c: c.card_id in ids)
            return PILE_CARD_REVEALED if pile.expose_top() else 0
        if origin.is_foundation:
            state.foundation(origin.key).cards.remove_where(lambda c: c.card_id in ids)
        else:
            state.deck.upwards.remove_where(lambda c: c.card_id in ids)
        return 0

    def _move_run(self, state: GameState, card: Card, pile_id: int) -> str:
        target = state.pile(pile_id)
        if target is None:
            raise _Rejection(f"No pile {pile_id}", ErrorCode.NO_TARGET)
        origin, run = self._exposed_run(state, card)
        if origin == target.zone:
            raise _Rejection(f"{card} is already on pile {pile_id}", ErrorCode.ILLEGAL_MOVE)
        if not is_valid_pile_move(run, target.top_card):
            raise _Rejection(
                f"{run[0]} cannot go on {target.top_card or 'an empty pile'}", ErrorCode.ILLEGAL_MOVE
            )

        revealed = self._take(state, origin, run)
        target.cards.extend(run)
        state.score = apply_score(state.score, move_score(origin, target.zone) + revealed)
        state.moves += 1
        return f"Moved {len(run)} card(s) from {origin} to {target.zone}"

    def _score(self, state: GameState, card: Card, suit: Suit) -> str:
        foundation = state.foundation(suit)
        if foundation is None:
            raise _Rejection(f"No foundation for {suit}", ErrorCode.NO_TARGET)
        origin, run = self._exposed_run(state, card)
        if origin.is_foundation:
            raise _Rejection(f"{card} is already scored", ErrorCode.ILLEGAL_MOVE)
        if len(run) != 1 or not is_valid_foundation_move(run[0], foundation):
            raise _Rejection(f"{card} cannot be scored on {foundation.zone}", ErrorCode.ILLEGAL_MOVE)

        revealed = self._take(state, origin, run)
        foundation.cards.append(run[0])
        state.score = apply_score(state.score, move_score(origin, foundation.zone) + revealed)
        state.moves += 1
        if state.is_won:
            state.is_game_over = True
            return f"Scored {card} - game won"
        return f"Scored {card}"


def apply_action(state: GameState, action: Action, reducer: Reducer | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Uses a default Reducer when none is given.
    """
    return (reducer or Reducer()).apply(state, action)
