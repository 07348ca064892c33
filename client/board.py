# client/board.py
"""The task board front end, without a browser.

``TaskBoard`` holds what the page shows: which view is visible, the three
forms, and the rendered task list. Each ``submit_*`` coroutine is one form
submission and issues exactly one request through ``TaskManagerClient``.
"""
import asyncio
import contextlib
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

import httpx

from client.api import EventStreamError, TaskManagerClient

logger = logging.getLogger(__name__)

Listener = Callable[[str, List[str]], None]


class View(str, Enum):
    AUTH = "auth"
    TASK_MANAGER = "task-manager"


class Form:
    def __init__(self, *fields: str):
        self._values: Dict[str, str] = {name: "" for name in fields}

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __setitem__(self, name: str, value: str) -> None:
        if name not in self._values:
            raise KeyError(name)
        self._values[name] = value

    def fill(self, **values: str) -> "Form":
        for name, value in values.items():
            self[name] = value
        return self

    def values(self) -> Dict[str, str]:
        return dict(self._values)

    def reset(self) -> None:
        for name in self._values:
            self._values[name] = ""


class TaskBoard:
    def __init__(self, client: TaskManagerClient):
        self.client = client
        self.view = View.AUTH
        self.signup_form = Form("username", "password")
        self.login_form = Form("username", "password")
        self.task_form = Form("title")
        self.items: List[str] = []
        self.subscription: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Registers ``listener(kind, titles)``.

        ``kind`` is ``"render"`` with the whole list after a reload, or
        ``"append"`` with the single title pushed by the event stream.
        """
        self._listeners.append(listener)

    def _notify(self, kind: str, titles: List[str]) -> None:
        for listener in self._listeners:
            listener(kind, titles)

    async def submit_signup(self) -> None:
        values = self.signup_form.values()
        try:
            await self.client.signup(values["username"], values["password"])
        except httpx.HTTPError as e:
            logger.warning(f"Signup request failed: {e}")
        finally:
            self.signup_form.reset()

    async def submit_login(self) -> bool:
        values = self.login_form.values()
        try:
            ok = await self.client.login(values["username"], values["password"])
        except httpx.HTTPError as e:
            logger.warning(f"Login request failed: {e}")
            ok = False

        if ok:
            self.view = View.TASK_MANAGER
            await self.load_tasks()
            self.subscribe()
        self.login_form.reset()
        return ok

    async def submit_task(self) -> None:
        title = self.task_form["title"]
        try:
            await self.client.create_task(title)
        except httpx.HTTPError as e:
            logger.warning(f"Creating task {title!r} failed: {e}")
        else:
            await self.load_tasks()
        finally:
            self.task_form.reset()

    async def load_tasks(self) -> None:
        """Replaces the rendered list with the server's current tasks."""
        try:
            tasks = await self.client.list_tasks()
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Loading tasks failed: {e}")
            return
        self.items = [task.title for task in tasks]
        self._notify("render", list(self.items))

    def subscribe(self) -> asyncio.Task:
        """Starts consuming the event stream unless a subscription is already live."""
        if self.subscription is None or self.subscription.done():
            self.subscription = asyncio.create_task(self._consume_events())
        return self.subscription

    async def _consume_events(self) -> None:
        try:
            async for task in self.client.events():
                self.items.append(task.title)
                self._notify("append", [task.title])
        except (EventStreamError, httpx.HTTPError) as e:
            logger.warning(f"Live updates stopped: {e}")

    async def close(self) -> None:
        if self.subscription is not None and not self.subscription.done():
            self.subscription.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.subscription
