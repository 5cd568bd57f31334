"""
Two-phase commands.

Destructive or financial actions (rejecting, suspending, deleting,
transferring money) are proposed first and dispatched only after an
explicit confirmation. The store itself stays synchronous; a command only
decides *whether* and *when* its action reaches ``dispatch``.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..models.actions import Action
from ..models.result import Result
from ..models.state import AdminState
from ..store.store import AdminStore


logger = logging.getLogger(__name__)


class CommandState(Enum):
    """Command lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PendingCommand:
    """
    An action awaiting confirmation.

    ``confirm()`` dispatches the action exactly once; ``cancel()`` drops it
    without touching the store. A command that is no longer pending refuses
    both.

    Examples:
        >>> command = PendingCommand("CMD001", TransferPayment("INS001", 320.0))
        >>> result = command.confirm(store)
        >>> command.state
        <CommandState.CONFIRMED: 'confirmed'>
    """

    def __init__(
        self,
        command_id: str,
        action: Action,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.command_id = command_id
        self.action = action
        self._clock = clock
        self._state = CommandState.PENDING
        self._result: Optional[Result[AdminState]] = None
        self.proposed_at = clock()
        self.resolved_at: Optional[datetime] = None

    @property
    def state(self) -> CommandState:
        """Get current command state."""
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state == CommandState.PENDING

    @property
    def result(self) -> Optional[Result[AdminState]]:
        """Dispatch result, once confirmed."""
        return self._result

    def confirm(self, store: AdminStore) -> Result[AdminState]:
        """
        Dispatch the action through the store.

        The command counts as confirmed once dispatched, whatever the
        dispatch outcome; the outcome is kept in ``result``. An action the
        store cannot dispatch is recorded as a failure.

        Args:
            store: Store to dispatch into

        Returns:
            The dispatch result, or a failure if the command is not pending
        """
        if not self.is_pending:
            return Result.failure(
                f"Command {self.command_id} is already {self._state.value}"
            )

        self._state = CommandState.CONFIRMED
        self.resolved_at = self._clock()
        try:
            self._result = store.dispatch(self.action)
        except TypeError as e:
            logger.error(f"Command {self.command_id} failed: {e}")
            self._result = Result.failure(str(e), e)
            return self._result

        logger.info(
            f"Command {self.command_id} confirmed: {self.action.TYPE} "
            f"-> {self._result.status.value}"
        )
        return self._result

    def cancel(self) -> Result[Action]:
        """
        Cancel the command without dispatching.

        Returns:
            Success carrying the dropped action, or a failure if the
            command is not pending
        """
        if not self.is_pending:
            return Result.failure(
                f"Command {self.command_id} is already {self._state.value}"
            )

        self._state = CommandState.CANCELLED
        self.resolved_at = self._clock()
        logger.info(f"Command {self.command_id} cancelled: {self.action.TYPE}")
        return Result.success(self.action, f"Command {self.command_id} cancelled")

    def __repr__(self) -> str:
        return (
            f"PendingCommand({self.command_id!r}, {self.action!r}, "
            f"state={self._state.value})"
        )


class CommandQueue:
    """
    Proposed commands for one store, addressed by command ID.

    Examples:
        >>> queue = CommandQueue(store)
        >>> command = queue.propose(RejectStudent("STU004"))
        >>> queue.confirm(command.command_id).is_success
        True
    """

    def __init__(
        self,
        store: AdminStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self._clock = clock
        self._commands: Dict[str, PendingCommand] = {}
        self._counter = 0

    def propose(self, action: Action) -> PendingCommand:
        """Register an action for later confirmation."""
        self._counter += 1
        command = PendingCommand(f"CMD{self._counter:03d}", action, self._clock)
        self._commands[command.command_id] = command
        logger.debug(f"Proposed {command.command_id}: {action.TYPE}")
        return command

    def get(self, command_id: str) -> Optional[PendingCommand]:
        return self._commands.get(command_id)

    def confirm(self, command_id: str) -> Result[AdminState]:
        command = self._commands.get(command_id)
        if command is None:
            return Result.not_found(f"Command {command_id} not found")
        return command.confirm(self.store)

    def cancel(self, command_id: str) -> Result[Action]:
        command = self._commands.get(command_id)
        if command is None:
            return Result.not_found(f"Command {command_id} not found")
        return command.cancel()

    def pending(self) -> List[PendingCommand]:
        """Commands still awaiting a decision, in proposal order."""
        return [c for c in self._commands.values() if c.is_pending]

    def history(self) -> List[PendingCommand]:
        """All commands in proposal order."""
        return list(self._commands.values())
