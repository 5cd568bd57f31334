"""
Read-only projections of the admin state.

Selectors are plain functions taking the state (and optional filters) and
returning tuples, dictionaries or numbers. They never modify the state and
are cheap enough to re-run after every dispatch.

All date and timestamp fields are ISO strings, so sorting them as strings
sorts them chronologically.
"""

from typing import Dict, Iterable, Optional, Tuple, TypeVar, Union

from ..models.entities import (
    AccountStatus,
    ApprovalStatus,
    ChatMessage,
    Conversation,
    ConversationStatus,
    Instructor,
    Package,
    PaymentStatus,
    StripeConnectionStatus,
    Student,
    Transaction,
)
from ..models.state import AdminState


R = TypeVar('R')

RECENT_LIMIT = 5


def _matches(query: Optional[str], *values: str) -> bool:
    if not query:
        return True
    needle = query.strip().lower()
    return any(needle in (value or "").lower() for value in values)


# ─── Students & instructors ──────────────────────────────────────────────────

def search_people(
    records: Iterable[R],
    query: Optional[str],
) -> Tuple[R, ...]:
    """
    Filter students or instructors by a case-insensitive query on name,
    e-mail and city.
    """
    return tuple(
        r for r in records if _matches(query, r.name, r.email, r.city)
    )


def students_by_approval(
    state: AdminState,
    status: Optional[ApprovalStatus] = None,
    query: Optional[str] = None,
) -> Tuple[Student, ...]:
    """
    Students for the approval screen.

    Args:
        state: Current state
        status: Approval status filter (None for all)
        query: Optional search text

    Returns:
        Matching students in state order
    """
    students = (
        s for s in state.students
        if status is None or s.approval_status == status
    )
    return search_people(students, query)


def instructors_by_approval(
    state: AdminState,
    status: Optional[ApprovalStatus] = None,
    query: Optional[str] = None,
) -> Tuple[Instructor, ...]:
    instructors = (
        i for i in state.instructors
        if status is None or i.approval_status == status
    )
    return search_people(instructors, query)


def managed_students(
    state: AdminState,
    account_status: Optional[AccountStatus] = None,
    query: Optional[str] = None,
) -> Tuple[Student, ...]:
    """Approved students, optionally filtered by account status and search."""
    students = (
        s for s in state.students
        if s.approval_status == ApprovalStatus.APPROVED
        and (account_status is None or s.account_status == account_status)
    )
    return search_people(students, query)


def managed_instructors(
    state: AdminState,
    account_status: Optional[AccountStatus] = None,
    query: Optional[str] = None,
) -> Tuple[Instructor, ...]:
    """Approved instructors, optionally filtered by account status and search."""
    instructors = (
        i for i in state.instructors
        if i.approval_status == ApprovalStatus.APPROVED
        and (account_status is None or i.account_status == account_status)
    )
    return search_people(instructors, query)


def instructor_summary(state: AdminState) -> Dict[str, Union[int, float]]:
    """
    Header figures for instructor management.

    Returns:
        Dictionary with active, suspended, total_earnings, total_pending
        over approved instructors
    """
    approved = managed_instructors(state)
    return {
        "active": sum(1 for i in approved if i.account_status == AccountStatus.ACTIVE),
        "suspended": sum(
            1 for i in approved if i.account_status == AccountStatus.SUSPENDED
        ),
        "total_earnings": round(sum(i.earnings_total for i in approved), 2),
        "total_pending": round(sum(i.pending_payment for i in approved), 2),
    }


# ─── Packages ────────────────────────────────────────────────────────────────

def packages(
    state: AdminState,
    status: Optional[ApprovalStatus] = None,
    query: Optional[str] = None,
) -> Tuple[Package, ...]:
    """Packages filtered by status and search text, newest first."""
    matching = [
        p for p in state.packages
        if (status is None or p.status == status)
        and _matches(query, p.title, p.instructor_name, p.description)
    ]
    return tuple(sorted(matching, key=lambda p: p.created_at, reverse=True))


def package_summary(state: AdminState) -> Dict[str, int]:
    """
    Counts per status and the average commission (rounded to a whole
    percent, 0 when there are no packages).
    """
    all_packages = state.packages
    average = (
        round(sum(p.commission_percentage for p in all_packages) / len(all_packages))
        if all_packages else 0
    )
    return {
        "pending": sum(1 for p in all_packages if p.status == ApprovalStatus.PENDING),
        "approved": sum(1 for p in all_packages if p.status == ApprovalStatus.APPROVED),
        "rejected": sum(1 for p in all_packages if p.status == ApprovalStatus.REJECTED),
        "average_commission": average,
    }


def package_commission_amount(package: Package) -> float:
    """Platform share of a package price, in currency units."""
    return round(package.price * package.commission_percentage / 100, 2)


# ─── Payments ────────────────────────────────────────────────────────────────

def transactions(
    state: AdminState,
    status: Optional[PaymentStatus] = None,
    query: Optional[str] = None,
) -> Tuple[Transaction, ...]:
    """Transactions filtered by status and search text, newest date first."""
    matching = [
        t for t in state.transactions
        if (status is None or t.status == status)
        and _matches(query, t.instructor_name, t.description, t.method)
    ]
    return tuple(sorted(matching, key=lambda t: t.date, reverse=True))


def transactions_for_instructor(
    state: AdminState,
    instructor_id: str,
) -> Tuple[Transaction, ...]:
    return tuple(t for t in state.transactions if t.instructor_id == instructor_id)


def payment_summary(state: AdminState) -> Dict[str, Union[int, float]]:
    """
    Header figures for the payments screen.

    Returns:
        Dictionary with total_paid, total_pending (transaction sums) and
        stripe_connected, stripe_pending (counts over approved instructors)
    """
    approved = managed_instructors(state)
    return {
        "total_paid": round(sum(
            t.amount for t in state.transactions if t.status == PaymentStatus.PAID
        ), 2),
        "total_pending": round(sum(
            t.amount for t in state.transactions if t.status == PaymentStatus.PENDING
        ), 2),
        "stripe_connected": sum(
            1 for i in approved
            if i.stripe_connection_status == StripeConnectionStatus.CONNECTED
        ),
        "stripe_pending": sum(
            1 for i in approved
            if i.stripe_connection_status == StripeConnectionStatus.PENDING
        ),
    }


# ─── Messages ────────────────────────────────────────────────────────────────

def conversations(state: AdminState) -> Tuple[Conversation, ...]:
    """Conversations, most recent activity first."""
    return tuple(sorted(state.conversations, key=lambda c: c.timestamp, reverse=True))


def conversation_messages(
    state: AdminState,
    conversation_id: str,
) -> Tuple[ChatMessage, ...]:
    """Messages of one conversation in chronological order.

    The sort is stable, so messages sent within the same second keep their
    send order.
    """
    return tuple(sorted(
        (m for m in state.messages if m.conversation_id == conversation_id),
        key=lambda m: m.timestamp,
    ))


def unread_total(state: AdminState) -> int:
    return sum(
        c.unread_count for c in state.conversations
        if c.status == ConversationStatus.UNREAD
    )


# ─── Dashboard & reports ─────────────────────────────────────────────────────

def recent_students(state: AdminState, limit: int = RECENT_LIMIT) -> Tuple[Student, ...]:
    return tuple(sorted(
        state.students, key=lambda s: s.registration_date, reverse=True
    )[:limit])


def recent_instructors(
    state: AdminState,
    limit: int = RECENT_LIMIT,
) -> Tuple[Instructor, ...]:
    """Instructors ordered by their first uploaded document, newest first."""
    def uploaded(instructor: Instructor) -> str:
        documents = instructor.documents_uploaded
        return documents[0].uploaded_date if documents else ""

    return tuple(sorted(state.instructors, key=uploaded, reverse=True)[:limit])


def recent_transactions(
    state: AdminState,
    limit: int = RECENT_LIMIT,
) -> Tuple[Transaction, ...]:
    return transactions(state)[:limit]


def report_metrics(state: AdminState) -> Dict[str, Union[int, float]]:
    """
    Figures for the reports screen.

    Returns:
        Dictionary with:
        - approval_rate: percent of students approved (whole number)
        - average_rating: mean instructor rating (one decimal)
        - total_revenue: sum of paid transactions
        - average_lessons_per_student: mean lessons completed (whole number)
    """
    students = state.students
    instructors = state.instructors

    approval_rate = (
        round(
            sum(1 for s in students if s.approval_status == ApprovalStatus.APPROVED)
            / len(students) * 100
        )
        if students else 0
    )
    average_rating = (
        round(sum(i.rating for i in instructors) / len(instructors), 1)
        if instructors else 0.0
    )
    average_lessons = (
        round(sum(s.lessons_completed for s in students) / len(students))
        if students else 0
    )

    return {
        "approval_rate": approval_rate,
        "average_rating": average_rating,
        "total_revenue": payment_summary(state)["total_paid"],
        "average_lessons_per_student": average_lessons,
    }
