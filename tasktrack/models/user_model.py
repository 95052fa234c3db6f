from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from tasktrack.utils.clock import isoformat, utcnow


@dataclass
class User:
    name: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "User":
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            email=doc["email"],
            password_hash=doc["password_hash"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def to_doc(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_dict(self, include_timestamps: bool = False) -> dict:
        # password_hash is never serialized
        data = {"id": self.id, "name": self.name, "email": self.email}
        if include_timestamps:
            data["created_at"] = isoformat(self.created_at)
            data["updated_at"] = isoformat(self.updated_at)
        return data
