# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from application.events import TaskEventBroker
from client.api import TaskManagerClient
from infrastructure.database import Database
from interfaces.app import create_app

from .fakes import BASE_URL


@pytest.fixture()
def db(tmp_path: Path) -> Database:
    return Database(str(tmp_path / "tasks.sqlite3"))


@pytest.fixture()
def broker() -> TaskEventBroker:
    return TaskEventBroker()


@pytest.fixture()
def app(db: Database, broker: TaskEventBroker):
    return create_app(db=db, broker=broker)


@pytest_asyncio.fixture()
async def http(app):
    """Raw httpx client talking to the app in-process."""
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL) as client:
        yield client


@pytest_asyncio.fixture()
async def client(app):
    async with TaskManagerClient(BASE_URL, transport=httpx.ASGITransport(app=app), reconnect=False) as c:
        yield c
