import logging
from typing import List, Optional
from domain.entities import Task, User
from infrastructure.database import Database
from infrastructure.security import hash_password, verify_password
from application.events import TaskEventBroker

logger = logging.getLogger(__name__)

class InvalidCredentialsError(Exception):
    pass

class TaskUseCases:
    def __init__(self, db: Database, broker: TaskEventBroker):
        self.db = db
        self.broker = broker

    def create_task(self, title: str, description: Optional[str] = None, is_complete: bool = False) -> Task:
        task = Task(title=title, description=description, is_complete=is_complete)
        created = self.db.create_task(task)
        logger.info(f"Created task {created.id}: {created.title!r}")
        self.broker.publish(created)
        return created

    def get_task(self, task_id: int) -> Optional[Task]:
        return self.db.get_task_by_id(task_id)

    def get_all_tasks(self) -> List[Task]:
        return self.db.get_all_tasks()

    def update_task(self, task_id: int, title: str, description: Optional[str] = None, is_complete: bool = False) -> Optional[Task]:
        task = self.get_task(task_id)
        if not task:
            return None
        updated_task = Task(
            id=task.id,
            title=title,
            description=description,
            is_complete=is_complete,
            created_at=task.created_at
        )
        return self.db.update_task(task_id, updated_task)

    def delete_task(self, task_id: int) -> bool:
        return self.db.delete_task(task_id)

class UserUseCases:
    def __init__(self, db: Database):
        self.db = db

    def signup(self, username: str, password: str) -> User:
        """Raises UsernameTakenError if the name is already registered."""
        user = User(username=username, password_hash=hash_password(password))
        created = self.db.create_user(user)
        logger.info(f"Registered user {created.username!r}")
        return created

    def authenticate(self, username: str, password: str) -> User:
        user = self.db.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Rejected login for {username!r}")
            raise InvalidCredentialsError(username)
        return user
