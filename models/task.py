"""
Task data models.

A task is one entry of the to-do list: a description, an optional
deadline, a completion status and an optional photo stored as a data URL.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


class TaskStatus(Enum):
    """Completion status. Values match the stored representation."""
    NOT_COMPLETED = "not-completed"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return "Completed" if self is TaskStatus.COMPLETED else "Not Completed"

    def toggled(self) -> "TaskStatus":
        if self is TaskStatus.COMPLETED:
            return TaskStatus.NOT_COMPLETED
        return TaskStatus.COMPLETED


class StatusFilter(Enum):
    """Which tasks the list shows."""
    ALL = "all"
    NOT_COMPLETED = "not-completed"
    COMPLETED = "completed"


class SortOrder(Enum):
    """How the visible tasks are ordered."""
    NONE = "none"
    DEADLINE = "deadline"
    STATUS = "status"


class DeadlineUrgency(Enum):
    """Urgency bucket used to color deadline labels."""
    NORMAL = "normal"
    SOON = "soon"          # due within two days
    OVERDUE = "overdue"


@dataclass(frozen=True)
class Task:
    """A to-do item."""
    description: str
    deadline: Optional[datetime] = None
    status: TaskStatus = TaskStatus.NOT_COMPLETED
    photo: Optional[str] = None
    inserted_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def has_photo(self) -> bool:
        return bool(self.photo)

    def with_status(self, status: TaskStatus) -> "Task":
        return replace(self, status=status)

    def with_id(self, task_id: str) -> "Task":
        return replace(self, id=task_id)

    def edited(self, description: str, deadline: Optional[datetime]) -> "Task":
        return replace(self, description=description, deadline=deadline)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "description": self.description,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "status": self.status.value,
            "photo": self.photo,
            "inserted_at": self.inserted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create from a dictionary produced by ``to_dict`` or a database row."""
        deadline = data.get("deadline")
        inserted_at = data.get("inserted_at")
        return cls(
            id=str(data["id"]),
            description=data.get("description", ""),
            deadline=parse_timestamp(deadline) if deadline else None,
            status=TaskStatus(data.get("status", TaskStatus.NOT_COMPLETED.value)),
            photo=data.get("photo") or None,
            inserted_at=parse_timestamp(inserted_at) if inserted_at else datetime.now(),
        )


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting the trailing ``Z`` PostgREST emits."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
