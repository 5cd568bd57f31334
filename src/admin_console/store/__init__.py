"""
Transition engine, stats projector, store and selectors.

Usage:
    >>> from admin_console.store import AdminStore, selectors
    >>> store = AdminStore(state)
    >>> store.select(selectors.unread_total)
"""

from . import selectors
from .engine import Outcome, Transition, apply_action, transition
from .projector import derive_stats, find_drift
from .store import AdminStore

__all__ = [
    "AdminStore",
    "Outcome",
    "Transition",
    "apply_action",
    "derive_stats",
    "find_drift",
    "selectors",
    "transition",
]
