"""
State validators.

``SeedValidator`` checks a freshly loaded snapshot before it becomes the
store's initial state. ``StatsValidator`` compares the incrementally
maintained dashboard counters with the values recomputed from the
collections.
"""

from datetime import date
from typing import Optional

from ..models.entities import ConversationStatus
from ..models.state import AdminState
from ..store.projector import find_drift
from .validators import Validator, ValidationResult


class SeedValidator(Validator):
    """
    Validator for seed snapshots.

    Validates:
    - Unique IDs per collection
    - Date and timestamp formats (string order must be chronological)
    - Non-negative balances and unread counts
    - Commission range
    - Read/resolved conversations have no unread messages
    - Every message belongs to a known conversation
    """

    MIN_COMMISSION = 0
    MAX_COMMISSION = 100

    def validate(self, data: AdminState, state: Optional[AdminState] = None) -> ValidationResult:
        result = ValidationResult()

        for collection in (
            "students", "instructors", "transactions",
            "conversations", "messages", "packages",
        ):
            for error in self.validate_unique_ids(getattr(data, collection), collection):
                result.add_error(error)

        for student in data.students:
            result.add_error(self.validate_date_format(
                student.registration_date, f"{student.id}.registration_date"
            ))

        for instructor in data.instructors:
            if instructor.pending_payment < 0:
                result.add_error(
                    f"{instructor.id}.pending_payment must not be negative, "
                    f"got {instructor.pending_payment}"
                )
            for document in instructor.documents_uploaded:
                result.add_error(self.validate_date_format(
                    document.uploaded_date, f"{instructor.id}.{document.id}.uploaded_date"
                ))

        for transaction in data.transactions:
            result.add_error(self.validate_date_format(
                transaction.date, f"{transaction.id}.date"
            ))

        for conversation in data.conversations:
            result.add_error(self.validate_timestamp_format(
                conversation.timestamp, f"{conversation.id}.timestamp"
            ))
            if conversation.unread_count < 0:
                result.add_error(f"{conversation.id}.unread_count must not be negative")
            elif (
                conversation.status != ConversationStatus.UNREAD
                and conversation.unread_count
            ):
                result.add_error(
                    f"{conversation.id} is {conversation.status.value} "
                    f"but has {conversation.unread_count} unread messages"
                )

        conversation_ids = {c.id for c in data.conversations}
        for message in data.messages:
            result.add_error(self.validate_timestamp_format(
                message.timestamp, f"{message.id}.timestamp"
            ))
            if message.conversation_id not in conversation_ids:
                result.add_error(
                    f"{message.id} references unknown conversation "
                    f"{message.conversation_id}"
                )

        for package in data.packages:
            result.add_error(self.validate_range(
                package.commission_percentage,
                f"{package.id}.commission_percentage",
                self.MIN_COMMISSION,
                self.MAX_COMMISSION,
            ))
            result.add_error(self.validate_date_format(
                package.created_at, f"{package.id}.created_at"
            ))

        return result


class StatsValidator(Validator):
    """
    Validator for dashboard counter drift.

    A pending_approvals mismatch is an error: that counter must always
    equal the number of pending registrations. Other counters may carry
    platform-wide figures larger than the loaded collections, so their
    mismatches are warnings.

    Examples:
        >>> result = StatsValidator().validate(store.state)
        >>> print(result.get_summary())
        Validation passed
    """

    STRICT_FIELDS = ("pending_approvals",)
    LENIENT_FIELDS = (
        "total_students",
        "total_instructors",
        "active_lessons",
        "pending_payouts",
    )

    def __init__(self, today: Optional[date] = None):
        self.today = today

    def validate(self, data: AdminState, state: Optional[AdminState] = None) -> ValidationResult:
        result = ValidationResult()

        for name, (recorded, derived) in find_drift(
            data, self.STRICT_FIELDS, self.today
        ).items():
            result.add_error(f"{name} is {recorded}, expected {derived}")

        for name, (recorded, derived) in find_drift(
            data, self.LENIENT_FIELDS, self.today
        ).items():
            result.add_warning(f"{name} is {recorded}, collections give {derived}")

        return result
