"""
Unit tests for two-phase commands.
"""

from unittest.mock import Mock

import pytest

from admin_console.commands import CommandQueue, CommandState, PendingCommand
from admin_console.models import actions as a
from admin_console.models.entities import ApprovalStatus
from admin_console.models.result import Result, ResultStatus


class TestPendingCommand:
    """Test suite for PendingCommand."""

    @pytest.fixture
    def mock_store(self):
        store = Mock()
        store.dispatch.return_value = Result.success("next-state", "applied")
        return store

    @pytest.fixture
    def command(self, now):
        return PendingCommand("CMD001", a.RejectStudent("STU004"), clock=lambda: now)

    def test_initial_state_pending(self, command, now):
        assert command.state == CommandState.PENDING
        assert command.is_pending
        assert command.result is None
        assert command.proposed_at == now

    def test_confirm_dispatches_once(self, command, mock_store):
        result = command.confirm(mock_store)

        mock_store.dispatch.assert_called_once_with(a.RejectStudent("STU004"))
        assert result.is_success
        assert command.state == CommandState.CONFIRMED
        assert command.result is result

    def test_confirm_twice_fails(self, command, mock_store):
        command.confirm(mock_store)

        second = command.confirm(mock_store)

        assert second.status == ResultStatus.FAILURE
        assert second.message == "Command CMD001 is already confirmed"
        assert mock_store.dispatch.call_count == 1

    def test_cancel_does_not_dispatch(self, command, mock_store):
        result = command.cancel()

        assert result.is_success
        assert result.value == a.RejectStudent("STU004")
        assert command.state == CommandState.CANCELLED
        assert command.confirm(mock_store).is_failure
        mock_store.dispatch.assert_not_called()

    def test_cancel_after_confirm_fails(self, command, mock_store):
        command.confirm(mock_store)

        assert command.cancel().message == "Command CMD001 is already confirmed"

    def test_noop_dispatch_still_confirms(self, command, mock_store):
        """Test the command is resolved even when the store changed nothing."""
        mock_store.dispatch.return_value = Result.not_found("Student STU004 not found")

        result = command.confirm(mock_store)

        assert result.status == ResultStatus.NOT_FOUND
        assert command.state == CommandState.CONFIRMED

    def test_undispatchable_action_records_failure(self, store, seed_state, now):
        command = PendingCommand("CMD001", a.Action(), clock=lambda: now)

        result = command.confirm(store)

        assert result.status == ResultStatus.FAILURE
        assert isinstance(result.error, TypeError)
        assert command.state == CommandState.CONFIRMED
        assert command.result is result
        assert store.state is seed_state


class TestCommandQueue:
    """Test suite for CommandQueue against a real store."""

    @pytest.fixture
    def queue(self, store, now):
        return CommandQueue(store, clock=lambda: now)

    def test_propose_assigns_ids(self, queue):
        first = queue.propose(a.ApproveStudent("STU004"))
        second = queue.propose(a.DeletePackage("PKG004"))

        assert first.command_id == "CMD001"
        assert second.command_id == "CMD002"
        assert queue.get("CMD002") is second

    def test_propose_does_not_dispatch(self, queue, store, seed_state):
        queue.propose(a.ApproveStudent("STU004"))

        assert store.state is seed_state
        assert len(queue.pending()) == 1

    def test_confirm_applies_action(self, queue, store):
        command = queue.propose(a.ApproveStudent("STU004"))

        result = queue.confirm(command.command_id)

        assert result.is_success
        assert store.state.find_student("STU004").approval_status == ApprovalStatus.APPROVED
        assert queue.pending() == []

    def test_cancel_leaves_store(self, queue, store, seed_state):
        command = queue.propose(a.DeleteStudent("STU001"))

        assert queue.cancel(command.command_id).is_success
        assert store.state is seed_state

    def test_unknown_command(self, queue):
        assert queue.confirm("CMD404").status == ResultStatus.NOT_FOUND
        assert queue.cancel("CMD404").status == ResultStatus.NOT_FOUND

    def test_history_keeps_resolved_commands(self, queue):
        applied = queue.propose(a.ApprovePackage("PKG002"))
        dropped = queue.propose(a.RejectPackage("PKG003"))
        waiting = queue.propose(a.DeletePackage("PKG004"))

        queue.confirm(applied.command_id)
        queue.cancel(dropped.command_id)

        assert queue.history() == [applied, dropped, waiting]
        assert queue.pending() == [waiting]
