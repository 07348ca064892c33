from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

@dataclass
class Task:
    title: str
    description: Optional[str] = None
    is_complete: bool = False
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Builds a Task from a JSON object; only `title` is required."""
        created_at = data.get("created_at")
        return cls(
            title=data["title"],
            description=data.get("description"),
            is_complete=bool(data.get("is_complete", False)),
            id=data.get("id"),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(),
        )

@dataclass
class User:
    username: str
    password_hash: str
    id: Optional[int] = None
