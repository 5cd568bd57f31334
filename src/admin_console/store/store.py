"""
Admin store: the holder of the current state.

The store is an ordinary object owned by whoever bootstraps the
application; there is no module-level instance. It accepts actions one at
a time, runs them through the engine, replaces its state and then notifies
subscribers.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from ..models.actions import Action
from ..models.result import Result
from ..models.state import AdminState
from ..validation.validators import Validator
from .engine import Outcome, apply_action
from .projector import find_drift


logger = logging.getLogger(__name__)

Listener = Callable[[AdminState], None]


class AdminStore:
    """
    Synchronous state container.

    Examples:
        >>> store = AdminStore(load_seed(), validator=ActionValidator())
        >>> unsubscribe = store.subscribe(lambda state: print("changed"))
        >>> result = store.dispatch(ApproveStudent("STU004"))
        changed
        >>> result.is_success
        True
        >>> store.select(students_by_approval, ApprovalStatus.PENDING)
    """

    def __init__(
        self,
        initial_state: AdminState,
        clock: Callable[[], datetime] = datetime.now,
        validator: Optional[Validator] = None,
        stats_check: bool = False,
    ):
        """
        Initialize the store.

        Args:
            initial_state: Seed snapshot
            clock: Source of the current time for created records
            validator: Optional action validator run before each dispatch
            stats_check: Log a warning when counters drift after a dispatch
        """
        self._state = initial_state
        self._clock = clock
        self._validator = validator
        self._stats_check = stats_check
        self._listeners: List[Listener] = []

        logger.debug(
            f"Store initialized: {len(initial_state.students)} students, "
            f"{len(initial_state.instructors)} instructors, "
            f"{len(initial_state.packages)} packages"
        )

    @property
    def state(self) -> AdminState:
        """Current state snapshot."""
        return self._state

    def dispatch(self, action: Action) -> Result[AdminState]:
        """
        Apply an action to the current state.

        The validator (if any) runs first against the current state; a
        rejected action leaves the state untouched. Subscribers are notified
        after the state has been replaced, and only when it changed.

        Args:
            action: Member of the action vocabulary

        Returns:
            Result carrying the state after the dispatch:
            SUCCESS, NOT_FOUND, UNCHANGED or INVALID

        Raises:
            TypeError: If ``action`` is not a vocabulary member
        """
        if self._validator is not None:
            validation = self._validator.validate(action, self._state)
            for warning in validation.warnings:
                logger.warning(f"{action.TYPE}: {warning}")
            if not validation.is_valid:
                summary = "; ".join(validation.errors)
                logger.warning(f"{action.TYPE} rejected: {summary}")
                return Result.invalid(summary, self._state)

        transition = apply_action(self._state, action, self._clock())

        if transition.outcome == Outcome.NOT_FOUND:
            logger.info(f"{action.TYPE}: {transition.message}")
            return Result.not_found(transition.message, self._state)

        if transition.outcome == Outcome.UNCHANGED:
            logger.info(f"{action.TYPE}: {transition.message}")
            return Result.unchanged(transition.message, self._state)

        self._state = transition.state
        logger.debug(f"{action.TYPE}: {transition.message}")

        if self._stats_check:
            self._check_stats(action)

        self._notify()
        return Result.success(self._state, transition.message)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new state after each change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def select(self, selector: Callable[..., Any], *args, **kwargs) -> Any:
        """Evaluate a selector against the current state."""
        return selector(self._state, *args, **kwargs)

    def _notify(self):
        state = self._state
        # Copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(state)

    def _check_stats(self, action: Action):
        drift = find_drift(self._state, today=self._clock().date())
        for name, (recorded, derived) in drift.items():
            logger.warning(
                f"Stats drift after {action.TYPE}: "
                f"{name}={recorded}, collections give {derived}"
            )
