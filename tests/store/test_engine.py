"""
Unit tests for the state transition engine.
"""

import random

import pytest

from admin_console.models import actions as a
from admin_console.models.entities import (
    AccountStatus,
    ApprovalStatus,
    ConversationStatus,
    PaymentStatus,
    SenderType,
)
from admin_console.store.engine import (
    Outcome,
    apply_action,
    handled_actions,
    transition,
)
from admin_console.store.projector import derive_stats, find_drift


class TestVocabulary:
    """Test cases for the handler table."""

    def test_every_action_is_handled(self):
        assert handled_actions() == frozenset(a.ACTION_CLASSES)

    def test_unsupported_action_raises(self, state, now):
        with pytest.raises(TypeError, match="Unsupported action"):
            apply_action(state, a.Action(), now)

    def test_non_action_raises(self, state, now):
        with pytest.raises(TypeError):
            apply_action(state, {"type": "admin/APPROVE_STUDENT"}, now)

    def test_transition_returns_state(self, state, now):
        next_state = transition(state, a.ApproveStudent("STU004"), now)

        assert next_state.find_student("STU004").approval_status == ApprovalStatus.APPROVED

    def test_default_clock(self, state):
        """Test created records get a timestamp without an explicit clock."""
        result = apply_action(state, a.SendMessage("CONV001", "Hi"))

        assert result.outcome == Outcome.APPLIED
        assert len(result.state.messages[-1].timestamp) == len("2025-03-14T10:30:00")


class TestStudentTransitions:
    """Test cases for student registration and account actions."""

    def test_approve_pending_student(self, state, now):
        result = apply_action(state, a.ApproveStudent("STU004"), now)

        student = result.state.find_student("STU004")
        assert result.outcome == Outcome.APPLIED
        assert student.approval_status == ApprovalStatus.APPROVED
        assert student.account_status == AccountStatus.ACTIVE
        assert result.state.dashboard_stats.pending_approvals == 3

    def test_other_records_are_shared(self, state, now):
        """Test untouched records are the same objects as before."""
        next_state = transition(state, a.ApproveStudent("STU004"), now)

        for before, after in zip(state.students, next_state.students):
            if before.id != "STU004":
                assert after is before
        assert next_state.instructors is state.instructors

    def test_input_state_is_not_mutated(self, state, now):
        snapshot = state.to_dict()

        transition(state, a.DeleteStudent("STU004"), now)
        transition(state, a.TransferPayment("INS001", 320.0), now)

        assert state.to_dict() == snapshot

    def test_approve_twice_is_unchanged(self, state, now):
        """Test re-approving changes nothing, including the counter."""
        once = transition(state, a.ApproveStudent("STU004"), now)

        result = apply_action(once, a.ApproveStudent("STU004"), now)

        assert result.outcome == Outcome.UNCHANGED
        assert result.state is once
        assert result.state.dashboard_stats.pending_approvals == 3

    def test_reject_pending_student(self, state, now):
        result = apply_action(state, a.RejectStudent("STU005"), now)

        student = result.state.find_student("STU005")
        assert student.approval_status == ApprovalStatus.REJECTED
        assert student.account_status == AccountStatus.INACTIVE
        assert result.state.dashboard_stats.pending_approvals == 3

    def test_reject_approved_student_keeps_counter(self, state, now):
        """Test rejecting a non-pending student does not touch the counter."""
        next_state = transition(state, a.RejectStudent("STU001"), now)

        student = next_state.find_student("STU001")
        assert student.approval_status == ApprovalStatus.REJECTED
        assert student.account_status == AccountStatus.INACTIVE
        assert next_state.dashboard_stats.pending_approvals == 4

    def test_approve_rejected_student(self, state, now):
        next_state = transition(state, a.ApproveStudent("STU006"), now)

        student = next_state.find_student("STU006")
        assert student.approval_status == ApprovalStatus.APPROVED
        assert student.account_status == AccountStatus.INACTIVE
        assert next_state.dashboard_stats.pending_approvals == 4

    def test_suspend_and_activate(self, state, now):
        suspended = transition(state, a.SuspendStudent("STU001"), now)
        activated = transition(suspended, a.ActivateStudent("STU001"), now)

        assert suspended.find_student("STU001").account_status == AccountStatus.SUSPENDED
        assert activated.find_student("STU001").account_status == AccountStatus.ACTIVE
        assert suspended.dashboard_stats is state.dashboard_stats

    def test_activate_inactive_student(self, state, now):
        next_state = transition(state, a.ActivateStudent("STU006"), now)

        assert next_state.find_student("STU006").account_status == AccountStatus.ACTIVE

    def test_delete_pending_student(self, state, now):
        next_state = transition(state, a.DeleteStudent("STU004"), now)

        assert next_state.find_student("STU004") is None
        assert len(next_state.students) == 5
        assert next_state.dashboard_stats.total_students == 5
        assert next_state.dashboard_stats.pending_approvals == 3

    def test_delete_approved_student(self, state, now):
        next_state = transition(state, a.DeleteStudent("STU001"), now)

        assert next_state.dashboard_stats.total_students == 5
        assert next_state.dashboard_stats.pending_approvals == 4
        assert [s.id for s in next_state.students] == [
            "STU002", "STU003", "STU004", "STU005", "STU006",
        ]


class TestInstructorTransitions:
    """Test cases for instructor registration and account actions."""

    def test_approve_instructor(self, state, now):
        next_state = transition(state, a.ApproveInstructor("INS004"), now)

        assert next_state.find_instructor("INS004").approval_status == ApprovalStatus.APPROVED
        assert next_state.dashboard_stats.pending_approvals == 3

    def test_reject_instructor_cascades_account_status(self, state, now):
        next_state = transition(state, a.RejectInstructor("INS005"), now)

        instructor = next_state.find_instructor("INS005")
        assert instructor.approval_status == ApprovalStatus.REJECTED
        assert instructor.account_status == AccountStatus.INACTIVE
        assert next_state.dashboard_stats.pending_approvals == 3

    def test_suspend_and_activate(self, state, now):
        suspended = transition(state, a.SuspendInstructor("INS001"), now)
        activated = transition(state, a.ActivateInstructor("INS003"), now)

        assert suspended.find_instructor("INS001").account_status == AccountStatus.SUSPENDED
        assert activated.find_instructor("INS003").account_status == AccountStatus.ACTIVE


class TestTransferPayment:
    """Test cases for payouts."""

    def test_transfer_records_transaction(self, state, now):
        result = apply_action(state, a.TransferPayment("INS001", 320.0), now)
        next_state = result.state

        transaction = next_state.transactions[0]
        assert result.outcome == Outcome.APPLIED
        assert len(next_state.transactions) == len(state.transactions) + 1
        assert transaction.id == "TXN007"
        assert transaction.instructor_id == "INS001"
        assert transaction.instructor_name == "James Wilson"
        assert transaction.amount == 320.0
        assert transaction.date == "2025-03-14"
        assert transaction.status == PaymentStatus.PAID
        assert transaction.method == "Stripe Transfer"
        assert transaction.description == "Payment transfer - James Wilson"

    def test_transfer_clears_balance_only(self, state, now):
        """Test pending_payment drops to zero and earnings_total is untouched."""
        next_state = transition(state, a.TransferPayment("INS001", 320.0), now)

        instructor = next_state.find_instructor("INS001")
        assert instructor.pending_payment == 0
        assert instructor.earnings_total == state.find_instructor("INS001").earnings_total
        assert next_state.find_instructor("INS002") is state.find_instructor("INS002")

    def test_transfer_settles_pending_transactions(self, state, now):
        next_state = transition(state, a.TransferPayment("INS001", 320.0), now)

        statuses = {t.id: t.status for t in next_state.transactions}
        assert statuses["TXN005"] == PaymentStatus.PAID
        assert statuses["TXN006"] == PaymentStatus.PENDING

    def test_transfer_reduces_pending_payouts(self, state, now):
        next_state = transition(state, a.TransferPayment("INS001", 320.0), now)

        assert next_state.dashboard_stats.pending_payouts == 180.5
        assert next_state.dashboard_stats.pending_approvals == 4

    def test_pending_payouts_floor_at_zero(self, state, now):
        once = transition(state, a.TransferPayment("INS001", 320.0), now)

        twice = transition(once, a.TransferPayment("INS001", 320.0), now)

        assert twice.dashboard_stats.pending_payouts == 0.0
        assert twice.transactions[0].id == "TXN008"

    def test_transfer_to_unknown_instructor(self, state, now):
        """Test the transaction is still recorded, under an unknown name."""
        result = apply_action(state, a.TransferPayment("INS999", 50.0), now)

        transaction = result.state.transactions[0]
        assert result.outcome == Outcome.APPLIED
        assert transaction.instructor_name == "Unknown"
        assert transaction.description == "Payment transfer - Unknown"
        assert result.state.instructors is state.instructors
        assert "not on file" in result.message


class TestMessaging:
    """Test cases for conversations and messages."""

    def test_send_message(self, state, now):
        next_state = transition(state, a.SendMessage("CONV002", "Your package is approved."), now)

        message = next_state.messages[-1]
        conversation = next_state.find_conversation("CONV002")
        assert message.id == "MSG007"
        assert message.conversation_id == "CONV002"
        assert message.sender_id == "ADMIN"
        assert message.sender_type == SenderType.ADMIN
        assert message.seen is False
        assert message.timestamp == "2025-03-14T10:30:00"
        assert conversation.last_message == "Your package is approved."
        assert conversation.timestamp == "2025-03-14T10:30:00"
        assert conversation.status == ConversationStatus.READ

    def test_messages_keep_send_order(self, state, now):
        first = transition(state, a.SendMessage("CONV001", "First"), now)
        second = transition(first, a.SendMessage("CONV001", "Second"), now)

        texts = [m.text for m in second.messages if m.conversation_id == "CONV001"]
        assert texts[-2:] == ["First", "Second"]
        assert second.find_conversation("CONV001").last_message == "Second"

    def test_send_to_unknown_conversation(self, state, now):
        """Test no orphan message is created."""
        result = apply_action(state, a.SendMessage("CONV999", "Hello"), now)

        assert result.outcome == Outcome.NOT_FOUND
        assert result.state is state

    def test_mark_resolved(self, state, now):
        next_state = transition(state, a.MarkConversationResolved("CONV001"), now)

        conversation = next_state.find_conversation("CONV001")
        assert conversation.status == ConversationStatus.RESOLVED
        assert conversation.unread_count == 0

    def test_mark_read(self, state, now):
        next_state = transition(state, a.MarkConversationRead("CONV001"), now)

        conversation = next_state.find_conversation("CONV001")
        assert conversation.status == ConversationStatus.READ
        assert conversation.unread_count == 0

    def test_mark_read_already_read(self, state, now):
        result = apply_action(state, a.MarkConversationRead("CONV002"), now)

        assert result.outcome == Outcome.UNCHANGED
        assert result.state is state


class TestSettings:
    """Test cases for partial settings updates."""

    def test_partial_merge(self, state, now):
        next_state = transition(state, a.UpdateSettings({"sms_alerts": True}), now)

        assert next_state.settings.sms_alerts is True
        assert next_state.settings.platform_fees == state.settings.platform_fees
        assert next_state.settings.lesson_pricing_default == state.settings.lesson_pricing_default
        assert next_state.settings.email_notifications is True

    def test_unknown_keys_are_ignored(self, state, now):
        result = apply_action(state, a.UpdateSettings({"theme": "dark"}), now)

        assert result.outcome == Outcome.UNCHANGED
        assert result.state is state

    def test_empty_update(self, state, now):
        assert apply_action(state, a.UpdateSettings({}), now).state is state


class TestPackages:
    """Test cases for package actions."""

    def test_approve_and_reject(self, state, now):
        approved = transition(state, a.ApprovePackage("PKG002"), now)
        rejected = transition(state, a.RejectPackage("PKG003"), now)

        assert approved.find_package("PKG002").status == ApprovalStatus.APPROVED
        assert rejected.find_package("PKG003").status == ApprovalStatus.REJECTED

    def test_packages_do_not_count_as_pending_approvals(self, state, now):
        next_state = transition(state, a.ApprovePackage("PKG002"), now)

        assert next_state.dashboard_stats is state.dashboard_stats

    def test_update_commission(self, state, now):
        next_state = transition(state, a.UpdatePackageCommission("PKG002", 18), now)

        assert next_state.find_package("PKG002").commission_percentage == 18

    def test_commission_is_not_range_checked(self, state, now):
        """Test the engine stores whatever it is given."""
        next_state = transition(state, a.UpdatePackageCommission("PKG002", 150), now)

        assert next_state.find_package("PKG002").commission_percentage == 150

    def test_delete_package(self, state, now):
        next_state = transition(state, a.DeletePackage("PKG002"), now)

        assert [p.id for p in next_state.packages] == ["PKG001", "PKG003", "PKG004"]


UNKNOWN_ID_ACTIONS = [
    a.ApproveStudent("STU999"),
    a.RejectStudent("STU999"),
    a.SuspendStudent("STU999"),
    a.ActivateStudent("STU999"),
    a.DeleteStudent("STU999"),
    a.ApproveInstructor("INS999"),
    a.RejectInstructor("INS999"),
    a.SuspendInstructor("INS999"),
    a.ActivateInstructor("INS999"),
    a.SendMessage("CONV999", "Hello"),
    a.MarkConversationResolved("CONV999"),
    a.MarkConversationRead("CONV999"),
    a.ApprovePackage("PKG999"),
    a.RejectPackage("PKG999"),
    a.UpdatePackageCommission("PKG999", 10),
    a.DeletePackage("PKG999"),
]


@pytest.mark.parametrize("action", UNKNOWN_ID_ACTIONS, ids=lambda act: act.TYPE)
def test_unknown_id_leaves_state_untouched(state, now, action):
    result = apply_action(state, action, now)

    assert result.outcome == Outcome.NOT_FOUND
    assert result.state is state


def test_pending_approvals_tracks_ground_truth(state, now):
    """Test the counter equals the number of pending registrations after
    any sequence of registration actions, repeated or not."""
    rng = random.Random(20250314)
    student_ids = [s.id for s in state.students] + ["STU999"]
    instructor_ids = [i.id for i in state.instructors] + ["INS999"]
    student_actions = [
        a.ApproveStudent, a.RejectStudent, a.SuspendStudent,
        a.ActivateStudent, a.DeleteStudent,
    ]
    instructor_actions = [
        a.ApproveInstructor, a.RejectInstructor,
        a.SuspendInstructor, a.ActivateInstructor,
    ]

    current = state
    for _ in range(300):
        if rng.random() < 0.6:
            action = rng.choice(student_actions)(rng.choice(student_ids))
        else:
            action = rng.choice(instructor_actions)(rng.choice(instructor_ids))
        current = transition(current, action, now)

        assert find_drift(current, ("pending_approvals", "total_students")) == {}

    assert current.dashboard_stats.pending_approvals == derive_stats(current).pending_approvals
