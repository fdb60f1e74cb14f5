"""
Store - The single writer of a game.

Every action is applied under one lock, so a timer thread delivering a
priority reset can never interleave with a drag coming from the renderer.
"""

from __future__ import annotations
import logging
import threading
from functools import partial

from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState
from .scheduler import ManualScheduler, Scheduler

logger = logging.getLogger(__name__)


class Store:
    """
    Holds the current GameState and applies actions to it.

    Usage:
        store = Store(Reducer(), ThreadingScheduler())
        store.dispatch(Action.shuffle())
        snapshot = store.state
    """

    def __init__(
        self,
        reducer: Reducer | None = None,
        scheduler: Scheduler | None = None,
        state: GameState | None = None,
    ):
        self.reducer = reducer or Reducer()
        self.scheduler = scheduler or ManualScheduler()
        self._state = state or GameState()
        self._lock = threading.RLock()

    @property
    def state(self) -> GameState:
        """The current state. Never mutated in place by the store."""
        with self._lock:
            return self._state

    def dispatch(self, action: Action) -> ActionResult:
        """Apply ``action`` atomically and schedule any effects it returns."""
        with self._lock:
            result = self.reducer.apply(self._state, action)
            self._state = result.new_state
            for effect in result.effects:
                logger.debug("Scheduling %s in %.2fs", effect.kind.value, effect.delay)
                self.scheduler.schedule(effect.delay, partial(self.dispatch, effect.action))
            return result

    def close(self) -> None:
        self.scheduler.cancel_all()
