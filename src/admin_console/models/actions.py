"""
Action vocabulary for the admin console.

Each permitted operation is a frozen dataclass carrying only the identifiers
and values needed to perform it. The class-level ``TYPE`` tag matches the
wire format used in action files::

    {"type": "admin/TRANSFER_PAYMENT",
     "payload": {"instructorId": "INS001", "amount": 120}}

The set is closed: ``ACTION_CLASSES`` lists every member and the engine's
handler table is checked against it.
"""

import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Tuple, Type


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class Action:
    """Base class for every action. Not dispatchable on its own."""

    TYPE: ClassVar[str] = ""

    def payload(self) -> Dict[str, Any]:
        """Payload in wire format (camelCase keys)."""
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.TYPE, "payload": self.payload()}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'Action':
        kwargs = {}
        for f in fields(cls):
            key = _camel(f.name)
            if key not in payload:
                raise ValueError(f"{cls.TYPE}: missing payload key '{key}'")
            kwargs[f.name] = payload[key]
        return cls(**kwargs)


# ─── Student actions ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ApproveStudent(Action):
    TYPE: ClassVar[str] = "admin/APPROVE_STUDENT"
    student_id: str


@dataclass(frozen=True)
class RejectStudent(Action):
    TYPE: ClassVar[str] = "admin/REJECT_STUDENT"
    student_id: str


@dataclass(frozen=True)
class SuspendStudent(Action):
    TYPE: ClassVar[str] = "admin/SUSPEND_STUDENT"
    student_id: str


@dataclass(frozen=True)
class ActivateStudent(Action):
    TYPE: ClassVar[str] = "admin/ACTIVATE_STUDENT"
    student_id: str


@dataclass(frozen=True)
class DeleteStudent(Action):
    TYPE: ClassVar[str] = "admin/DELETE_STUDENT"
    student_id: str


# ─── Instructor actions ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ApproveInstructor(Action):
    TYPE: ClassVar[str] = "admin/APPROVE_INSTRUCTOR"
    instructor_id: str


@dataclass(frozen=True)
class RejectInstructor(Action):
    TYPE: ClassVar[str] = "admin/REJECT_INSTRUCTOR"
    instructor_id: str


@dataclass(frozen=True)
class SuspendInstructor(Action):
    TYPE: ClassVar[str] = "admin/SUSPEND_INSTRUCTOR"
    instructor_id: str


@dataclass(frozen=True)
class ActivateInstructor(Action):
    TYPE: ClassVar[str] = "admin/ACTIVATE_INSTRUCTOR"
    instructor_id: str


# ─── Payment actions ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TransferPayment(Action):
    """Pay out ``amount`` to an instructor and clear their pending balance."""

    TYPE: ClassVar[str] = "admin/TRANSFER_PAYMENT"
    instructor_id: str
    amount: float


# ─── Message actions ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SendMessage(Action):
    TYPE: ClassVar[str] = "admin/SEND_MESSAGE"
    conversation_id: str
    text: str


@dataclass(frozen=True)
class MarkConversationResolved(Action):
    TYPE: ClassVar[str] = "admin/MARK_CONVERSATION_RESOLVED"
    conversation_id: str


@dataclass(frozen=True)
class MarkConversationRead(Action):
    TYPE: ClassVar[str] = "admin/MARK_CONVERSATION_READ"
    conversation_id: str


# ─── Settings actions ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UpdateSettings(Action):
    """
    Partial settings update.

    ``changes`` maps snake_case settings field names to new values. Its
    wire payload is the partial settings object itself, with camelCase keys.

    Examples:
        >>> UpdateSettings({"sms_alerts": True}).payload()
        {'smsAlerts': True}
    """

    TYPE: ClassVar[str] = "admin/UPDATE_SETTINGS"
    changes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "changes", MappingProxyType(dict(self.changes)))

    def __hash__(self):
        return hash((self.TYPE, tuple(sorted(self.changes.items()))))

    def payload(self) -> Dict[str, Any]:
        return {_camel(key): value for key, value in self.changes.items()}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'UpdateSettings':
        return cls({_snake(key): value for key, value in payload.items()})


# ─── Package actions ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ApprovePackage(Action):
    TYPE: ClassVar[str] = "admin/APPROVE_PACKAGE"
    package_id: str


@dataclass(frozen=True)
class RejectPackage(Action):
    TYPE: ClassVar[str] = "admin/REJECT_PACKAGE"
    package_id: str


@dataclass(frozen=True)
class UpdatePackageCommission(Action):
    TYPE: ClassVar[str] = "admin/UPDATE_PACKAGE_COMMISSION"
    package_id: str
    commission_percentage: float


@dataclass(frozen=True)
class DeletePackage(Action):
    TYPE: ClassVar[str] = "admin/DELETE_PACKAGE"
    package_id: str


ACTION_CLASSES: Tuple[Type[Action], ...] = (
    ApproveStudent,
    RejectStudent,
    SuspendStudent,
    ActivateStudent,
    DeleteStudent,
    ApproveInstructor,
    RejectInstructor,
    SuspendInstructor,
    ActivateInstructor,
    TransferPayment,
    SendMessage,
    MarkConversationResolved,
    MarkConversationRead,
    UpdateSettings,
    ApprovePackage,
    RejectPackage,
    UpdatePackageCommission,
    DeletePackage,
)

ACTIONS_BY_TYPE: Dict[str, Type[Action]] = {cls.TYPE: cls for cls in ACTION_CLASSES}


def action_from_dict(data: Mapping[str, Any]) -> Action:
    """
    Build an action from its wire dictionary.

    Args:
        data: Dictionary with ``type`` and ``payload`` keys

    Returns:
        The matching Action instance

    Raises:
        ValueError: If the type tag is unknown or a payload key is missing

    Examples:
        >>> action_from_dict({"type": "admin/APPROVE_STUDENT",
        ...                   "payload": {"studentId": "STU001"}})
        ApproveStudent(student_id='STU001')
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"Action must be an object, got {type(data).__name__}")

    tag = data.get("type")
    action_cls = ACTIONS_BY_TYPE.get(tag)
    if action_cls is None:
        raise ValueError(f"Unknown action type: {tag!r}")

    payload = data.get("payload")
    if not isinstance(payload, Mapping):
        raise ValueError(f"{tag}: payload must be an object")

    return action_cls.from_payload(payload)
