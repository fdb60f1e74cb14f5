"""
Session Manager - Creates and manages game sessions.

Sessions are in-memory only. Ending a session drops its state; nothing
is persisted between games.
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from ..config import Settings
from ..engine_core.action import Action
from ..engine_core.reducer import Reducer, make_shuffler
from .scheduler import Scheduler, ThreadingScheduler
from .store import Store

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


@dataclass
class Session:
    """An ephemeral game: a store plus bookkeeping."""
    session_id: str
    store: Store
    created_at: float
    seed: int | None = None
    state: SessionState = SessionState.ACTIVE
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions, each with its own store and scheduler
    - Track active sessions
    - Clean up stale sessions
    """

    def __init__(
        self,
        settings: Settings | None = None,
        scheduler_factory: Callable[[], Scheduler] = ThreadingScheduler,
    ):
        self.settings = settings or Settings()
        self.scheduler_factory = scheduler_factory
        self._sessions: dict[str, Session] = {}

    def create_session(self, seed: int | None = None, deal: bool = True) -> Session:
        """
        Create a new game session.

        Args:
            seed: Deal seed; falls back to the configured seed
            deal: Shuffle and deal immediately

        Returns:
            New Session
        """
        seed = seed if seed is not None else self.settings.seed
        reducer = Reducer(shuffle_cards=make_shuffler(seed), strict=self.settings.strict)
        store = Store(reducer=reducer, scheduler=self.scheduler_factory())

        session = Session(
            session_id=str(uuid.uuid4()),
            store=store,
            created_at=time.time(),
            seed=seed,
        )
        if deal:
            store.dispatch(Action.shuffle())

        self._sessions[session.session_id] = session
        logger.info("Session %s created (seed=%s)", session.session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and release it.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.store.close()
        if session.store.state.is_won:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> list[str]:
        """End sessions older than max_age; returns their IDs."""
        max_age = max_age_seconds if max_age_seconds is not None else self.settings.session_max_age
        current_time = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if current_time - session.created_at > max_age
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return stale
