"""
Entity records held by the admin console.

Every record is an immutable dataclass. Transitions never mutate a record;
they build a new one with ``dataclasses.replace``. Each record converts to
and from the snake_case dictionaries used by the seed file.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ApprovalStatus(Enum):
    """Lifecycle stage of a registration or package request."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AccountStatus(Enum):
    """Operational usability of an account."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class PaymentStatus(Enum):
    PAID = "paid"
    PENDING = "pending"


class ConversationStatus(Enum):
    UNREAD = "unread"
    READ = "read"
    RESOLVED = "resolved"


class StripeConnectionStatus(Enum):
    CONNECTED = "connected"
    PENDING = "pending"
    NOT_CONNECTED = "not_connected"


class LessonStatus(Enum):
    COMPLETED = "completed"
    UPCOMING = "upcoming"
    CANCELLED = "cancelled"


class DocumentStatus(Enum):
    VERIFIED = "verified"
    PENDING = "pending"
    REJECTED = "rejected"


class SenderType(Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"


def _to_plain(value: Any) -> Any:
    """Convert enums, nested records and tuples into JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_to_plain(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Record:
    """Shared serialisation for entity dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary with snake_case keys and plain values
        """
        return {f.name: _to_plain(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class StudentLesson(_Record):
    """A single lesson booked by a student."""

    id: str
    date: str
    time: str
    instructor: str
    type: str
    status: LessonStatus
    duration: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StudentLesson':
        return cls(
            id=data["id"],
            date=data["date"],
            time=data.get("time", ""),
            instructor=data.get("instructor", ""),
            type=data.get("type", ""),
            status=LessonStatus(data["status"]),
            duration=data.get("duration", ""),
        )


@dataclass(frozen=True)
class Student(_Record):
    """
    A learner registered on the marketplace.

    Attributes:
        id: Unique student identifier
        approval_status: Registration review stage
        account_status: Whether the account can be used
        instructor_assigned: Name of the assigned instructor, if any
        lessons_completed: Number of completed lessons
        upcoming_lessons: Number of booked lessons still to come
        lessons: Lesson history in booking order
    """

    id: str
    name: str
    email: str
    phone: str
    city: str
    registration_date: str
    approval_status: ApprovalStatus
    account_status: AccountStatus
    instructor_assigned: Optional[str] = None
    lessons_completed: int = 0
    upcoming_lessons: int = 0
    rating: float = 0.0
    avatar: str = ""
    lessons: Tuple[StudentLesson, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Student':
        """
        Create instance from a seed dictionary.

        Args:
            data: Dictionary with snake_case keys

        Returns:
            Student instance

        Raises:
            KeyError: If a required key is missing
            ValueError: If a status value is unknown
        """
        return cls(
            id=data["id"],
            name=data["name"],
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            city=data.get("city", ""),
            registration_date=data["registration_date"],
            approval_status=ApprovalStatus(data["approval_status"]),
            account_status=AccountStatus(data["account_status"]),
            instructor_assigned=data.get("instructor_assigned") or None,
            lessons_completed=int(data.get("lessons_completed", 0)),
            upcoming_lessons=int(data.get("upcoming_lessons", 0)),
            rating=float(data.get("rating", 0.0)),
            avatar=data.get("avatar", ""),
            lessons=tuple(
                StudentLesson.from_dict(item) for item in data.get("lessons", [])
            ),
        )


@dataclass(frozen=True)
class DocumentItem(_Record):
    """An uploaded verification document."""

    id: str
    name: str
    type: str
    uploaded_date: str
    status: DocumentStatus

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentItem':
        return cls(
            id=data["id"],
            name=data["name"],
            type=data.get("type", ""),
            uploaded_date=data["uploaded_date"],
            status=DocumentStatus(data["status"]),
        )


@dataclass(frozen=True)
class Instructor(_Record):
    """
    A driving instructor registered on the marketplace.

    ``earnings_total`` is the historical total and never decreases.
    ``pending_payment`` is the amount currently owed; a transfer sets it
    to zero.
    """

    id: str
    name: str
    email: str
    phone: str
    city: str
    experience: str
    license_number: str
    approval_status: ApprovalStatus
    account_status: AccountStatus
    documents_uploaded: Tuple[DocumentItem, ...] = ()
    stripe_account_id: str = ""
    stripe_connection_status: StripeConnectionStatus = StripeConnectionStatus.NOT_CONNECTED
    rating: float = 0.0
    completed_lessons: int = 0
    earnings_total: float = 0.0
    pending_payment: float = 0.0
    avatar: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Instructor':
        return cls(
            id=data["id"],
            name=data["name"],
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            city=data.get("city", ""),
            experience=data.get("experience", ""),
            license_number=data.get("license_number", ""),
            approval_status=ApprovalStatus(data["approval_status"]),
            account_status=AccountStatus(data["account_status"]),
            documents_uploaded=tuple(
                DocumentItem.from_dict(item)
                for item in data.get("documents_uploaded", [])
            ),
            stripe_account_id=data.get("stripe_account_id", ""),
            stripe_connection_status=StripeConnectionStatus(
                data.get("stripe_connection_status", "not_connected")
            ),
            rating=float(data.get("rating", 0.0)),
            completed_lessons=int(data.get("completed_lessons", 0)),
            earnings_total=float(data.get("earnings_total", 0.0)),
            pending_payment=float(data.get("pending_payment", 0.0)),
            avatar=data.get("avatar", ""),
        )


@dataclass(frozen=True)
class Transaction(_Record):
    """
    A payout record. Immutable once created.

    ``instructor_id`` is a lookup reference only; deleting or renaming the
    instructor does not touch existing transactions.
    """

    id: str
    instructor_id: str
    instructor_name: str
    amount: float
    date: str
    status: PaymentStatus
    method: str
    description: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=data["id"],
            instructor_id=data["instructor_id"],
            instructor_name=data.get("instructor_name", ""),
            amount=float(data["amount"]),
            date=data["date"],
            status=PaymentStatus(data["status"]),
            method=data.get("method", ""),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class Conversation(_Record):
    """Admin messaging thread with one instructor."""

    id: str
    instructor_id: str
    instructor_name: str
    last_message: str
    timestamp: str
    unread_count: int = 0
    status: ConversationStatus = ConversationStatus.UNREAD
    instructor_avatar: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Conversation':
        return cls(
            id=data["id"],
            instructor_id=data["instructor_id"],
            instructor_name=data.get("instructor_name", ""),
            last_message=data.get("last_message", ""),
            timestamp=data["timestamp"],
            unread_count=int(data.get("unread_count", 0)),
            status=ConversationStatus(data.get("status", "unread")),
            instructor_avatar=data.get("instructor_avatar", ""),
        )


@dataclass(frozen=True)
class ChatMessage(_Record):
    """A single message inside a conversation. Append-only."""

    id: str
    conversation_id: str
    sender_id: str
    sender_type: SenderType
    text: str
    timestamp: str
    seen: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatMessage':
        return cls(
            id=data["id"],
            conversation_id=data["conversation_id"],
            sender_id=data.get("sender_id", ""),
            sender_type=SenderType(data["sender_type"]),
            text=data["text"],
            timestamp=data["timestamp"],
            seen=bool(data.get("seen", False)),
        )


@dataclass(frozen=True)
class Package(_Record):
    """
    Instructor-authored lesson bundle awaiting or holding admin approval.

    Attributes:
        commission_percentage: Platform share of ``price`` in percent (0-100)
        status: Approval stage of the package
        created_at: ISO date the instructor created the package
    """

    id: str
    instructor_id: str
    instructor_name: str
    title: str
    description: str
    lesson_count: int
    price: float
    commission_percentage: float
    status: ApprovalStatus
    created_at: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Package':
        return cls(
            id=data["id"],
            instructor_id=data["instructor_id"],
            instructor_name=data.get("instructor_name", ""),
            title=data["title"],
            description=data.get("description", ""),
            lesson_count=int(data.get("lesson_count", 0)),
            price=float(data.get("price", 0.0)),
            commission_percentage=float(data.get("commission_percentage", 0.0)),
            status=ApprovalStatus(data["status"]),
            created_at=data["created_at"],
        )


@dataclass(frozen=True)
class Settings(_Record):
    """Platform-wide settings. A single record, partially updatable."""

    lesson_pricing_default: float = 45.0
    platform_fees: float = 15.0
    email_notifications: bool = True
    push_notifications: bool = True
    sms_alerts: bool = False

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Settings':
        known = {k: v for k, v in data.items() if k in cls.field_names()}
        return cls(**known)


@dataclass(frozen=True)
class DashboardStats(_Record):
    """
    Aggregate counters shown on the dashboard.

    Maintained incrementally by the engine but always recoverable from the
    entity collections (see ``store.projector.derive_stats``).
    """

    total_students: int = 0
    total_instructors: int = 0
    active_lessons: int = 0
    pending_approvals: int = 0
    monthly_revenue: float = 0.0
    pending_payouts: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DashboardStats':
        return cls(
            total_students=int(data.get("total_students", 0)),
            total_instructors=int(data.get("total_instructors", 0)),
            active_lessons=int(data.get("active_lessons", 0)),
            pending_approvals=int(data.get("pending_approvals", 0)),
            monthly_revenue=float(data.get("monthly_revenue", 0.0)),
            pending_payouts=float(data.get("pending_payouts", 0.0)),
        )


# Dates and timestamps are stored as strings in these fixed formats so that
# string order equals chronological order.
DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
