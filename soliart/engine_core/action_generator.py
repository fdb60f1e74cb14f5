"""
Action Generator - Enumerates the legal moves of a game state.

Used by:
1. Hints ("where can this go?")
2. Double-tap and auto-score shortcuts
3. The CLI, to list available moves

Only committed moves are generated; drag and frame actions are
renderer input and never appear here.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

from .action import Action
from .cards import Card
from .drag import run_from
from .frames import ZoneId
from .rules import is_valid_foundation_move, is_valid_pile_move
from .state import GameState


@dataclass(frozen=True)
class Hint:
    """A legal move: ``card`` (and what sits on it) from ``origin`` to ``destination``."""
    card: Card
    origin: ZoneId
    destination: ZoneId

    def to_action(self) -> Action:
        if self.destination.is_foundation:
            return Action.score_card(self.card, self.destination.key)
        return Action.move_run(self.card, self.destination.key)


def _exposed_singles(state: GameState) -> Iterator[tuple[Card, ZoneId]]:
    """Cards that can leave their container on their own."""
    for pile in state.piles:
        top = pile.top_card
        if top is not None and top.face_up:
            yield top, pile.zone
    top = state.deck.upwards.last
    if top is not None:
        yield top, state.deck.zone


def _run_anchors(state: GameState) -> Iterator[tuple[Card, ZoneId]]:
    """Cards that can be picked up together with whatever is above them."""
    for pile in state.piles:
        for card in pile.cards:
            if card.face_up:
                yield card, pile.zone
    top = state.deck.upwards.last
    if top is not None:
        yield top, state.deck.zone
    for foundation in state.foundations:
        if foundation.top_card is not None:
            yield foundation.top_card, foundation.zone


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current game state.

    ``include_deck_actions`` adds draw/flip when they would do something.
    """
    include_deck_actions: bool = True

    def hints(self, state: GameState) -> list[Hint]:
        """Every legal move, foundation moves first."""
        if state.is_game_over:
            return []
        return list(self._foundation_hints(state)) + list(self._pile_hints(state))

    def generate(self, state: GameState) -> list[Action]:
        if state.is_game_over:
            return [Action.shuffle()]

        actions = [hint.to_action() for hint in self.hints(state)]
        if self.include_deck_actions:
            if not state.deck.downwards.is_empty:
                actions.append(Action.draw_card())
            elif not state.deck.upwards.is_empty:
                actions.append(Action.flip_deck())
        return actions

    def _foundation_hints(self, state: GameState) -> Iterator[Hint]:
        for card, origin in _exposed_singles(state):
            foundation = state.foundation(card.suit)
            if foundation is not None and is_valid_foundation_move(card, foundation):
                yield Hint(card, origin, foundation.zone)

    def _pile_hints(self, state: GameState) -> Iterator[Hint]:
        for card, origin in _run_anchors(state):
            run = run_from(state, card)
            for target in state.piles:
                if target.zone == origin:
                    continue
                if target.is_empty and origin.is_pile and state.pile(origin.key).cards[0] == card:
                    # King already at the bottom of its pile
                    continue
                if is_valid_pile_move(run, target.top_card):
                    yield Hint(card, origin, target.zone)


def legal_actions(state: GameState) -> list[Action]:
    """Convenience function to get legal actions."""
    return ActionGenerator().generate(state)


def available_hints(state: GameState) -> list[Hint]:
    """Convenience function to get every legal move as a hint."""
    return ActionGenerator().hints(state)


def foundation_hint(state: GameState, card: Card) -> Hint | None:
    """The foundation move for ``card``, if it has one right now."""
    for hint in ActionGenerator().hints(state):
        if hint.card.card_id == card.card_id and hint.destination.is_foundation:
            return hint
    return None
