"""
Derived dashboard statistics.

The engine keeps ``DashboardStats`` in sync with O(1) deltas per action.
Deltas are computed here from the previous and next value of every record an
action touched, so re-applying an action to a record already in the target
state yields no delta at all.

``derive_stats`` rebuilds the same counters from the collections; it is the
ground truth the incremental counters are checked against.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from ..models.entities import ApprovalStatus, DashboardStats, PaymentStatus
from ..models.state import AdminState


# Collections whose records count towards pending_approvals.
APPROVAL_COLLECTIONS = ("students", "instructors")

DEFAULT_DRIFT_FIELDS = ("pending_approvals",)


@dataclass(frozen=True)
class EntityChange:
    """
    Previous and next value of one record touched by an action.

    ``before`` is None for a created record, ``after`` is None for a
    removed one.
    """

    collection: str
    before: Optional[Any]
    after: Optional[Any]


def _is_pending(record: Optional[Any]) -> bool:
    return (
        record is not None
        and getattr(record, "approval_status", None) == ApprovalStatus.PENDING
    )


def pending_delta(change: EntityChange) -> int:
    """
    Change in the number of pending registrations caused by one record.

    Returns:
        -1 when the record left pending, +1 when it entered pending, else 0
    """
    if change.collection not in APPROVAL_COLLECTIONS:
        return 0
    return int(_is_pending(change.after)) - int(_is_pending(change.before))


def project(
    stats: DashboardStats,
    changes: Iterable[EntityChange],
    payout: float = 0.0,
) -> DashboardStats:
    """
    Apply the deltas of a set of record changes to the stats snapshot.

    Args:
        stats: Current stats
        changes: Records touched by the action
        payout: Amount transferred to an instructor by the action

    Returns:
        New stats snapshot (the same object when nothing changed)
    """
    approvals = 0
    students = 0
    instructors = 0

    for change in changes:
        approvals += pending_delta(change)
        if change.collection == "students":
            students += int(change.after is not None) - int(change.before is not None)
        elif change.collection == "instructors":
            instructors += int(change.after is not None) - int(change.before is not None)

    if not (approvals or students or instructors or payout):
        return stats

    return replace(
        stats,
        # Counter floors at zero; total_students is not floored.
        pending_approvals=max(0, stats.pending_approvals + approvals),
        total_students=stats.total_students + students,
        total_instructors=stats.total_instructors + instructors,
        pending_payouts=round(max(0.0, stats.pending_payouts - payout), 2),
    )


def derive_stats(state: AdminState, today: Optional[date] = None) -> DashboardStats:
    """
    Recompute every dashboard counter from the entity collections.

    Args:
        state: State to summarise
        today: Reference day for monthly revenue (default: today)

    Returns:
        Stats snapshot consistent with ``state``

    Examples:
        >>> stats = derive_stats(state, date(2025, 3, 14))
        >>> stats.pending_approvals == len(pending students + instructors)
        True
    """
    month = (today or date.today()).strftime("%Y-%m")

    return DashboardStats(
        total_students=len(state.students),
        total_instructors=len(state.instructors),
        active_lessons=sum(s.upcoming_lessons for s in state.students),
        pending_approvals=sum(
            1 for record in (*state.students, *state.instructors)
            if _is_pending(record)
        ),
        monthly_revenue=round(sum(
            t.amount for t in state.transactions
            if t.status == PaymentStatus.PAID and t.date.startswith(month)
        ), 2),
        pending_payouts=round(sum(i.pending_payment for i in state.instructors), 2),
    )


def find_drift(
    state: AdminState,
    fields: Sequence[str] = DEFAULT_DRIFT_FIELDS,
    today: Optional[date] = None,
) -> Dict[str, Tuple[Any, Any]]:
    """
    Compare recorded counters with recomputed ones.

    Args:
        state: State to check
        fields: Counter names to compare
        today: Reference day for monthly revenue

    Returns:
        Mapping of counter name to (recorded, derived) for every mismatch
    """
    derived = derive_stats(state, today)
    drift = {}
    for name in fields:
        recorded = getattr(state.dashboard_stats, name)
        expected = getattr(derived, name)
        if recorded != expected:
            drift[name] = (recorded, expected)
    return drift
