"""
Session - Runtime around the engine.

A session owns one Store (the single writer of its GameState) and a
Scheduler that delivers the store's delayed effects.
"""

from .scheduler import Scheduler, ThreadingScheduler, ManualScheduler
from .store import Store
from .manager import SessionManager, Session, SessionState

__all__ = [
    "Scheduler",
    "ThreadingScheduler",
    "ManualScheduler",
    "Store",
    "SessionManager",
    "Session",
    "SessionState",
]
