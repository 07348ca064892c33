# tests/test_database.py

from __future__ import annotations

import pytest

from domain.entities import Task, User
from infrastructure.database import Database, UsernameTakenError


def test_tasks_listed_in_creation_order(db: Database) -> None:
    for title in ("first", "second", "third"):
        db.create_task(Task(title=title))

    tasks = db.get_all_tasks()

    assert [t.title for t in tasks] == ["first", "second", "third"]
    assert [t.id for t in tasks] == [1, 2, 3]


def test_task_fields_round_trip(db: Database) -> None:
    created = db.create_task(Task(title="Write report", description="Q3", is_complete=True))

    loaded = db.get_task_by_id(created.id)

    assert loaded is not None
    assert loaded.title == "Write report"
    assert loaded.description == "Q3"
    assert loaded.is_complete is True
    assert loaded.created_at == created.created_at


def test_update_replaces_fields(db: Database) -> None:
    created = db.create_task(Task(title="old", description="d"))

    updated = db.update_task(created.id, Task(title="new", description=None, is_complete=True))

    assert updated is not None
    assert (updated.title, updated.description, updated.is_complete) == ("new", None, True)


def test_update_and_delete_missing_task(db: Database) -> None:
    assert db.update_task(42, Task(title="x")) is None
    assert db.delete_task(42) is False


def test_delete_removes_task(db: Database) -> None:
    created = db.create_task(Task(title="gone soon"))

    assert db.delete_task(created.id) is True
    assert db.get_task_by_id(created.id) is None
    assert db.get_all_tasks() == []


def test_usernames_are_unique(db: Database) -> None:
    db.create_user(User(username="alice", password_hash="h1"))

    with pytest.raises(UsernameTakenError):
        db.create_user(User(username="alice", password_hash="h2"))

    assert db.get_user_by_username("alice").password_hash == "h1"


def test_unknown_user(db: Database) -> None:
    assert db.get_user_by_username("nobody") is None


def test_data_survives_reopen(db: Database) -> None:
    db.create_task(Task(title="persisted"))

    reopened = Database(db.db_name)

    assert [t.title for t in reopened.get_all_tasks()] == ["persisted"]
