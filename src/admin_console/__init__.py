"""
Driving-school admin console state engine.

The console state is an immutable snapshot held by an ``AdminStore``.
Admin actions are dispatched one at a time through a pure transition
engine; selectors read screen-ready projections from the current state.

Usage:
    >>> from admin_console import AdminStore, load_seed
    >>> from admin_console.models.actions import ApproveStudent
    >>>
    >>> store = AdminStore(load_seed())
    >>> result = store.dispatch(ApproveStudent("STU004"))
    >>> result.value.dashboard_stats.pending_approvals
    3
"""

from .models.state import AdminState
from .seed import load_seed
from .store.engine import apply_action, transition
from .store.store import AdminStore

__all__ = [
    "AdminState",
    "AdminStore",
    "apply_action",
    "load_seed",
    "transition",
]

__version__ = "0.1.0"
