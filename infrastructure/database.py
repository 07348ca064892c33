import logging
import sqlite3
from typing import List, Optional
from domain.entities import Task, User
from datetime import datetime

logger = logging.getLogger(__name__)

class UsernameTakenError(Exception):
    pass

class Database:
    def __init__(self, db_name: str = "tasks.db"):
        self.db_name = db_name
        self._init_db()

    def _init_db(self):
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    is_complete INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL
                )
            """)
            conn.commit()
        logger.debug(f"Database ready at {self.db_name}")

    @staticmethod
    def _row_to_task(row) -> Task:
        return Task(
            id=row[0],
            title=row[1],
            description=row[2],
            is_complete=bool(row[3]),
            created_at=datetime.fromisoformat(row[4])
        )

    def create_task(self, task: Task) -> Task:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO tasks (title, description, is_complete, created_at) VALUES (?, ?, ?, ?)",
                (task.title, task.description or None, 1 if task.is_complete else 0, task.created_at.isoformat())
            )
            conn.commit()
            task.id = cursor.lastrowid
            return task

    def get_task_by_id(self, task_id: int) -> Optional[Task]:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, title, description, is_complete, created_at FROM tasks WHERE id = ?",
                (task_id,)
            )
            row = cursor.fetchone()
            return self._row_to_task(row) if row else None

    def get_all_tasks(self) -> List[Task]:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, title, description, is_complete, created_at FROM tasks ORDER BY id"
            )
            return [self._row_to_task(row) for row in cursor.fetchall()]

    def update_task(self, task_id: int, updated_task: Task) -> Optional[Task]:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE tasks SET title = ?, description = ?, is_complete = ? WHERE id = ?",
                (
                    updated_task.title,
                    updated_task.description,
                    1 if updated_task.is_complete else 0,
                    task_id
                )
            )
            conn.commit()
            if cursor.rowcount > 0:
                return self.get_task_by_id(task_id)
            return None

    def delete_task(self, task_id: int) -> bool:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            return cursor.rowcount > 0

    def create_user(self, user: User) -> User:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (username, password_hash) VALUES (?, ?)",
                    (user.username, user.password_hash)
                )
            except sqlite3.IntegrityError as e:
                raise UsernameTakenError(user.username) from e
            conn.commit()
            user.id = cursor.lastrowid
            return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        with sqlite3.connect(self.db_name) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, username, password_hash FROM users WHERE username = ?",
                (username,)
            )
            row = cursor.fetchone()
            if row:
                return User(id=row[0], username=row[1], password_hash=row[2])
            return None
