"""
State transition engine.

``transition(state, action)`` is the only place business rules live. It is
pure and deterministic for a given clock reading: it never mutates its
input, performs no I/O and never raises for a member of the action
vocabulary. Unknown IDs leave the state untouched.

Each handler performs the entity-level change and reports the records it
touched as ``EntityChange`` values; the stats projector then derives the
dashboard deltas from those previous/next pairs in one step.
"""

import re
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Type

from ..models import actions as a
from ..models.entities import (
    DATE_FORMAT,
    TIMESTAMP_FORMAT,
    AccountStatus,
    ApprovalStatus,
    ChatMessage,
    ConversationStatus,
    PaymentStatus,
    SenderType,
    Settings,
    Transaction,
)
from ..models.state import AdminState
from .projector import EntityChange, project


TRANSFER_METHOD = "Stripe Transfer"
UNKNOWN_INSTRUCTOR = "Unknown"
ADMIN_SENDER_ID = "ADMIN"


class Outcome(Enum):
    """What a transition did."""
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Transition:
    """
    Next state plus a description of what happened.

    Attributes:
        state: The next state (the input state itself for no-ops)
        outcome: Whether the action was applied
        message: Human-readable description
    """

    state: AdminState
    outcome: Outcome
    message: str = ""


def _next_id(prefix: str, records: Sequence) -> str:
    """Mint ``<prefix>NNN`` one past the highest numeric suffix in use."""
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    highest = 0
    for record in records:
        match = pattern.match(record.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}{highest + 1:03d}"


def _commit(
    state: AdminState,
    collection: str,
    items: tuple,
    changes: List[EntityChange],
    payout: float = 0.0,
    **extra,
) -> AdminState:
    """Install a rewritten collection and project its changes onto the stats."""
    return replace(
        state,
        dashboard_stats=project(state.dashboard_stats, changes, payout),
        **{collection: items},
        **extra,
    )


def _update_record(
    state: AdminState,
    collection: str,
    record_id: str,
    label: str,
    **values,
) -> Transition:
    """Set fields on one record of a collection, by ID."""
    items = getattr(state, collection)
    current = next((item for item in items if item.id == record_id), None)
    if current is None:
        return Transition(state, Outcome.NOT_FOUND, f"{label} {record_id} not found")

    updated = replace(current, **values)
    if updated == current:
        return Transition(state, Outcome.UNCHANGED, f"{label} {record_id} already up to date")

    new_items = tuple(updated if item.id == record_id else item for item in items)
    change = EntityChange(collection, current, updated)
    return Transition(
        _commit(state, collection, new_items, [change]),
        Outcome.APPLIED,
        f"{label} {record_id} updated",
    )


def _remove_record(
    state: AdminState,
    collection: str,
    record_id: str,
    label: str,
) -> Transition:
    items = getattr(state, collection)
    current = next((item for item in items if item.id == record_id), None)
    if current is None:
        return Transition(state, Outcome.NOT_FOUND, f"{label} {record_id} not found")

    new_items = tuple(item for item in items if item.id != record_id)
    change = EntityChange(collection, current, None)
    return Transition(
        _commit(state, collection, new_items, [change]),
        Outcome.APPLIED,
        f"{label} {record_id} deleted",
    )


def _approve(collection: str, label: str, status: ApprovalStatus):
    def handler(state, record_id):
        if status == ApprovalStatus.REJECTED:
            return _update_record(
                state, collection, record_id, label,
                approval_status=status,
                account_status=AccountStatus.INACTIVE,
            )
        return _update_record(state, collection, record_id, label, approval_status=status)
    return handler


def _account(collection: str, label: str, status: AccountStatus):
    def handler(state, record_id):
        return _update_record(state, collection, record_id, label, account_status=status)
    return handler


# ─── Registration and account handlers ───────────────────────────────────────

_approve_student = _approve("students", "Student", ApprovalStatus.APPROVED)
_reject_student = _approve("students", "Student", ApprovalStatus.REJECTED)
_suspend_student = _account("students", "Student", AccountStatus.SUSPENDED)
_activate_student = _account("students", "Student", AccountStatus.ACTIVE)

_approve_instructor = _approve("instructors", "Instructor", ApprovalStatus.APPROVED)
_reject_instructor = _approve("instructors", "Instructor", ApprovalStatus.REJECTED)
_suspend_instructor = _account("instructors", "Instructor", AccountStatus.SUSPENDED)
_activate_instructor = _account("instructors", "Instructor", AccountStatus.ACTIVE)


def _transfer_payment(
    state: AdminState,
    action: a.TransferPayment,
    now: datetime,
) -> Transition:
    """
    Record a payout and clear the instructor's pending balance.

    The new transaction goes to the front of the list. Any older pending
    transaction of the same instructor is settled by the same transfer.
    An unknown instructor still gets a transaction, under the name
    "Unknown"; refusing such transfers is the caller's job.
    """
    instructor = state.find_instructor(action.instructor_id)
    name = instructor.name if instructor else UNKNOWN_INSTRUCTOR

    transaction = Transaction(
        id=_next_id("TXN", state.transactions),
        instructor_id=action.instructor_id,
        instructor_name=name,
        amount=action.amount,
        date=now.strftime(DATE_FORMAT),
        status=PaymentStatus.PAID,
        method=TRANSFER_METHOD,
        description=f"Payment transfer - {name}",
    )
    settled = tuple(
        replace(t, status=PaymentStatus.PAID)
        if t.instructor_id == action.instructor_id and t.status == PaymentStatus.PENDING
        else t
        for t in state.transactions
    )

    changes = []
    instructors = state.instructors
    if instructor is not None:
        paid_out = replace(instructor, pending_payment=0.0)
        instructors = tuple(
            paid_out if i.id == instructor.id else i for i in state.instructors
        )
        changes.append(EntityChange("instructors", instructor, paid_out))

    next_state = _commit(
        state, "transactions", (transaction, *settled), changes,
        payout=action.amount,
        instructors=instructors,
    )
    message = f"{transaction.id}: {action.amount} transferred to {name}"
    if instructor is None:
        message += f" (instructor {action.instructor_id} not on file)"
    return Transition(next_state, Outcome.APPLIED, message)


def _send_message(
    state: AdminState,
    action: a.SendMessage,
    now: datetime,
) -> Transition:
    conversation = state.find_conversation(action.conversation_id)
    if conversation is None:
        return Transition(
            state, Outcome.NOT_FOUND,
            f"Conversation {action.conversation_id} not found",
        )

    timestamp = now.strftime(TIMESTAMP_FORMAT)
    message = ChatMessage(
        id=_next_id("MSG", state.messages),
        conversation_id=conversation.id,
        sender_id=ADMIN_SENDER_ID,
        sender_type=SenderType.ADMIN,
        text=action.text,
        timestamp=timestamp,
        seen=False,
    )
    updated = replace(conversation, last_message=action.text, timestamp=timestamp)
    conversations = tuple(
        updated if c.id == conversation.id else c for c in state.conversations
    )
    next_state = replace(
        state,
        messages=(*state.messages, message),
        conversations=conversations,
    )
    return Transition(next_state, Outcome.APPLIED, f"{message.id} sent to {conversation.id}")


def _update_settings(
    state: AdminState,
    action: a.UpdateSettings,
    now: datetime,
) -> Transition:
    known = {
        key: value for key, value in action.changes.items()
        if key in Settings.field_names()
    }
    settings = replace(state.settings, **known)
    if settings == state.settings:
        return Transition(state, Outcome.UNCHANGED, "Settings already up to date")
    return Transition(
        replace(state, settings=settings),
        Outcome.APPLIED,
        f"Settings updated: {', '.join(sorted(known))}",
    )


_Handler = Callable[[AdminState, a.Action, datetime], Transition]

_HANDLERS: Dict[Type[a.Action], _Handler] = {
    a.ApproveStudent: lambda s, act, now: _approve_student(s, act.student_id),
    a.RejectStudent: lambda s, act, now: _reject_student(s, act.student_id),
    a.SuspendStudent: lambda s, act, now: _suspend_student(s, act.student_id),
    a.ActivateStudent: lambda s, act, now: _activate_student(s, act.student_id),
    a.DeleteStudent: lambda s, act, now: _remove_record(
        s, "students", act.student_id, "Student"),

    a.ApproveInstructor: lambda s, act, now: _approve_instructor(s, act.instructor_id),
    a.RejectInstructor: lambda s, act, now: _reject_instructor(s, act.instructor_id),
    a.SuspendInstructor: lambda s, act, now: _suspend_instructor(s, act.instructor_id),
    a.ActivateInstructor: lambda s, act, now: _activate_instructor(s, act.instructor_id),

    a.TransferPayment: _transfer_payment,

    a.SendMessage: _send_message,
    a.MarkConversationResolved: lambda s, act, now: _update_record(
        s, "conversations", act.conversation_id, "Conversation",
        status=ConversationStatus.RESOLVED, unread_count=0),
    a.MarkConversationRead: lambda s, act, now: _update_record(
        s, "conversations", act.conversation_id, "Conversation",
        status=ConversationStatus.READ, unread_count=0),

    a.UpdateSettings: _update_settings,

    a.ApprovePackage: lambda s, act, now: _update_record(
        s, "packages", act.package_id, "Package", status=ApprovalStatus.APPROVED),
    a.RejectPackage: lambda s, act, now: _update_record(
        s, "packages", act.package_id, "Package", status=ApprovalStatus.REJECTED),
    a.UpdatePackageCommission: lambda s, act, now: _update_record(
        s, "packages", act.package_id, "Package",
        commission_percentage=act.commission_percentage),
    a.DeletePackage: lambda s, act, now: _remove_record(
        s, "packages", act.package_id, "Package"),
}


def handled_actions() -> frozenset:
    """Action classes the engine knows how to apply."""
    return frozenset(_HANDLERS)


def apply_action(
    state: AdminState,
    action: a.Action,
    now: Optional[datetime] = None,
) -> Transition:
    """
    Apply one action and report what happened.

    Args:
        state: Current state
        action: Member of the action vocabulary
        now: Clock reading used for created records (default: now)

    Returns:
        Transition with the next state and its outcome

    Raises:
        TypeError: If ``action`` is not a vocabulary member

    Examples:
        >>> result = apply_action(state, RejectStudent("STU004"))
        >>> result.outcome
        <Outcome.APPLIED: 'applied'>
        >>> result.state.find_student("STU004").account_status
        <AccountStatus.INACTIVE: 'inactive'>
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported action: {action!r}")
    return handler(state, action, now or datetime.now())


def transition(
    state: AdminState,
    action: a.Action,
    now: Optional[datetime] = None,
) -> AdminState:
    """Return the state that follows ``state`` after ``action``."""
    return apply_action(state, action, now).state
