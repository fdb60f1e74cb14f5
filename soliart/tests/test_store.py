"""
Tests for the store and schedulers.

Tests:
- Effects are scheduled and delivered back through the store
- A newer drag survives an older drag's pending reset
- Schedulers fire, order and cancel callbacks
"""

import threading

from ..engine_core.action import Action, ErrorCode
from ..engine_core.cards import Suit, parse_card
from ..engine_core.frames import Point, ZoneId
from ..engine_core.reducer import Reducer
from ..engine_core.state import BASELINE_PRIORITY
from ..session.scheduler import ManualScheduler, ThreadingScheduler
from ..session.store import Store
from .conftest import foundation_point, pile_point


def drag(store, card_id, target):
    store.dispatch(Action.begin_drag(parse_card(card_id, True), Point(0, 0)))
    store.dispatch(Action.update_drag(target))
    return store.dispatch(Action.drop_cards())


class TestStore:
    """Tests for dispatching through a store."""

    def test_dispatch_replaces_state(self, ordered_reducer, dealt_state):
        store = Store(ordered_reducer, ManualScheduler(), dealt_state)
        result = store.dispatch(Action.draw_card())

        assert result.success
        assert store.state is result.new_state
        assert store.state is not dealt_state
        assert dealt_state.deck.upwards.is_empty

    def test_rejected_action_keeps_state(self, ordered_reducer, dealt_state):
        store = Store(ordered_reducer, ManualScheduler(), dealt_state)
        result = store.dispatch(Action.shuffle())
        assert result.error_code == ErrorCode.GAME_IN_PROGRESS
        assert store.state is dealt_state

    def test_priority_resets_after_delay(self, ordered_reducer, framed_state):
        scheduler = ManualScheduler()
        store = Store(ordered_reducer, scheduler, framed_state)

        assert drag(store, "2C", pile_point(2)).success
        assert store.state.z_index_priority == ZoneId.pile(5)
        assert scheduler.pending == 1

        assert scheduler.advance(0.25) == 0
        assert store.state.z_index_priority == ZoneId.pile(5)
        assert scheduler.advance(0.25) == 1
        assert store.state.z_index_priority == BASELINE_PRIORITY

    def test_rejected_drop_still_resets(self, ordered_reducer, framed_state):
        scheduler = ManualScheduler()
        store = Store(ordered_reducer, scheduler, framed_state)

        assert not drag(store, "2C", pile_point(3)).success
        assert store.state.dragging is None
        scheduler.advance(0.5)
        assert store.state.z_index_priority == BASELINE_PRIORITY

    def test_newer_drag_keeps_priority(self, ordered_reducer, framed_state):
        scheduler = ManualScheduler()
        store = Store(ordered_reducer, scheduler, framed_state)

        drag(store, "2C", pile_point(2))
        scheduler.advance(0.25)
        store.dispatch(Action.begin_drag(parse_card("AC", True), Point(0, 0)))
        assert store.state.z_index_priority == ZoneId.pile(5)

        # the first drop's reset fires mid-drag and is ignored
        scheduler.advance(0.25)
        assert store.state.z_index_priority == ZoneId.pile(5)
        assert store.state.dragging is not None

        store.dispatch(Action.update_drag(foundation_point(Suit.CLUBS)))
        assert store.dispatch(Action.drop_cards()).success
        assert store.state.foundation(Suit.CLUBS).cards.ids() == ["AC"]
        scheduler.advance(0.5)
        assert store.state.z_index_priority == BASELINE_PRIORITY

    def test_close_drops_pending_resets(self, ordered_reducer, framed_state):
        scheduler = ManualScheduler()
        store = Store(ordered_reducer, scheduler, framed_state)
        drag(store, "2C", pile_point(2))

        store.close()
        assert scheduler.advance(1) == 0
        assert store.state.z_index_priority == ZoneId.pile(5)

    def test_default_store(self):
        store = Store(Reducer())
        assert store.state.is_game_over
        assert store.dispatch(Action.shuffle()).success


class TestAcrossGames:
    """A reset left over from the previous game never touches the next one."""

    def test_old_reset_ignored_after_new_deal(self, ordered_reducer, framed_state):
        scheduler = ManualScheduler()
        store = Store(ordered_reducer, scheduler, framed_state)

        drag(store, "2C", pile_point(2))
        store.dispatch(Action.reset_game())
        assert store.dispatch(Action.shuffle()).success
        assert store.dispatch(Action.begin_drag(parse_card("2D", True), Point(0, 0))).success
        assert store.state.z_index_priority == ZoneId.pile(7)

        scheduler.advance(0.5)
        assert store.state.z_index_priority == ZoneId.pile(7)
        assert store.state.dragging is not None


class TestManualScheduler:
    """Tests for the virtual clock."""

    def test_fires_in_due_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule(2, lambda: fired.append("late"))
        scheduler.schedule(1, lambda: fired.append("early"))
        scheduler.schedule(1, lambda: fired.append("early again"))

        assert scheduler.advance(1) == 2
        assert fired == ["early", "early again"]
        assert scheduler.now == 1
        assert scheduler.advance(5) == 1
        assert scheduler.pending == 0

    def test_callbacks_may_schedule_more(self):
        scheduler = ManualScheduler()
        fired = []

        def first():
            fired.append("first")
            scheduler.schedule(1, lambda: fired.append("second"))

        scheduler.schedule(1, first)
        scheduler.advance(3)
        assert fired == ["first", "second"]


class TestThreadingScheduler:
    """Tests for the wall-clock scheduler."""

    def test_fires(self):
        scheduler = ThreadingScheduler()
        event = threading.Event()
        scheduler.schedule(0.01, event.set)
        assert event.wait(2)

    def test_cancel_all(self):
        scheduler = ThreadingScheduler()
        event = threading.Event()
        scheduler.schedule(0.2, event.set)
        scheduler.cancel_all()
        assert not event.wait(0.4)

    def test_store_with_timers(self, ordered_reducer, framed_state):
        store = Store(ordered_reducer, ThreadingScheduler(), framed_state)
        drag(store, "2C", pile_point(2))

        deadline = threading.Event()
        for _ in range(40):
            if store.state.z_index_priority == BASELINE_PRIORITY:
                break
            deadline.wait(0.05)
        assert store.state.z_index_priority == BASELINE_PRIORITY
        store.close()
