"""
The admin state tree.

``AdminState`` is the single value held by the store. It is replaced, never
mutated: the engine builds a new tree for every applied action and shares
unchanged collections with the previous one.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .entities import (
    ChatMessage,
    Conversation,
    DashboardStats,
    Instructor,
    Package,
    Settings,
    Student,
    Transaction,
)


@dataclass(frozen=True)
class AdminState:
    """
    Complete console state.

    Attributes:
        students: Student records in seed order
        instructors: Instructor records in seed order
        transactions: Payout records, most recent first
        conversations: One conversation per instructor
        messages: Chat messages in send order
        packages: Instructor packages
        settings: Platform settings
        dashboard_stats: Incrementally maintained aggregate counters
    """

    students: Tuple[Student, ...] = ()
    instructors: Tuple[Instructor, ...] = ()
    transactions: Tuple[Transaction, ...] = ()
    conversations: Tuple[Conversation, ...] = ()
    messages: Tuple[ChatMessage, ...] = ()
    packages: Tuple[Package, ...] = ()
    settings: Settings = field(default_factory=Settings)
    dashboard_stats: DashboardStats = field(default_factory=DashboardStats)

    def find_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def find_instructor(self, instructor_id: str) -> Optional[Instructor]:
        return next((i for i in self.instructors if i.id == instructor_id), None)

    def find_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return next(
            (c for c in self.conversations if c.id == conversation_id), None
        )

    def find_package(self, package_id: str) -> Optional[Package]:
        return next((p for p in self.packages if p.id == package_id), None)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the seed dictionary format.

        Returns:
            Dictionary with one list per collection plus settings and stats
        """
        return {
            "students": [s.to_dict() for s in self.students],
            "instructors": [i.to_dict() for i in self.instructors],
            "transactions": [t.to_dict() for t in self.transactions],
            "conversations": [c.to_dict() for c in self.conversations],
            "messages": [m.to_dict() for m in self.messages],
            "packages": [p.to_dict() for p in self.packages],
            "settings": self.settings.to_dict(),
            "dashboard_stats": self.dashboard_stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AdminState':
        """
        Build a state tree from a seed dictionary.

        Missing collections are treated as empty. ``dashboard_stats`` is
        taken as given; callers that want it derived use
        ``store.projector.derive_stats``.
        """
        return cls(
            students=tuple(Student.from_dict(d) for d in data.get("students", [])),
            instructors=tuple(
                Instructor.from_dict(d) for d in data.get("instructors", [])
            ),
            transactions=tuple(
                Transaction.from_dict(d) for d in data.get("transactions", [])
            ),
            conversations=tuple(
                Conversation.from_dict(d) for d in data.get("conversations", [])
            ),
            messages=tuple(ChatMessage.from_dict(d) for d in data.get("messages", [])),
            packages=tuple(Package.from_dict(d) for d in data.get("packages", [])),
            settings=Settings.from_dict(data.get("settings", {})),
            dashboard_stats=DashboardStats.from_dict(data.get("dashboard_stats", {})),
        )
