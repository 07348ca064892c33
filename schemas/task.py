from typing import Optional
from pydantic import BaseModel
from domain.entities import Task

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    is_complete: bool = False

class TaskUpdate(TaskCreate):
    pass

class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    is_complete: bool
    created_at: str

    @classmethod
    def from_entity(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            is_complete=task.is_complete,
            created_at=task.created_at.isoformat()
        )
