from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from tasktrack.utils.clock import isoformat, utcnow


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def is_completed(self) -> bool:
        return self is TaskStatus.COMPLETED


@dataclass
class Task:
    title: str
    user_id: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    # Only ever written through services.task_service.resolve_completed_at
    completed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "Task":
        return cls(
            id=str(doc["_id"]),
            user_id=str(doc["user_id"]),
            title=doc["title"],
            description=doc.get("description"),
            status=TaskStatus(doc["status"]),
            completed_at=doc.get("completed_at"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def to_doc(self) -> dict:
        """Mongo document without ``_id``."""
        return {
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "completed_at": self.completed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "completed_at": isoformat(self.completed_at),
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
