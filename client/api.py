# client/api.py
import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from httpx_sse import aconnect_sse

import config
from domain.entities import Task

logger = logging.getLogger(__name__)


class EventStreamError(Exception):
    """The server refused the event stream; reconnecting will not help."""


class TaskManagerClient:
    """Async HTTP client for the task service.

    The session cookie set by ``login`` is kept in the underlying
    ``httpx.AsyncClient`` and sent with every later request.
    """

    def __init__(
        self,
        base_url: str = config.CLIENT_BASE_URL,
        *,
        timeout: float = config.CLIENT_TIMEOUT,
        retry_seconds: float = config.CLIENT_RETRY_SECONDS,
        reconnect: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.retry_seconds = retry_seconds
        self.reconnect = reconnect
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "TaskManagerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def signup(self, username: str, password: str) -> Dict[str, Any]:
        response = await self._http.post("/signup", json={"username": username, "password": password})
        response.raise_for_status()
        return response.json()

    async def login(self, username: str, password: str) -> bool:
        """Returns True when the server accepted the credentials."""
        response = await self._http.post("/login", json={"username": username, "password": password})
        if not response.is_success:
            logger.info(f"Login for {username!r} rejected with HTTP {response.status_code}")
        return response.is_success

    async def logout(self) -> None:
        response = await self._http.post("/logout")
        response.raise_for_status()

    async def create_task(self, title: str, description: Optional[str] = None) -> Task:
        payload: Dict[str, Any] = {"title": title}
        if description is not None:
            payload["description"] = description
        response = await self._http.post("/tasks", json=payload)
        response.raise_for_status()
        return Task.from_dict(response.json())

    async def list_tasks(self) -> List[Task]:
        response = await self._http.get("/tasks")
        response.raise_for_status()
        return [Task.from_dict(item) for item in response.json()]

    async def get_task(self, task_id: int) -> Task:
        response = await self._http.get(f"/tasks/{task_id}")
        response.raise_for_status()
        return Task.from_dict(response.json())

    async def update_task(self, task_id: int, title: str, description: Optional[str] = None, is_complete: bool = False) -> Task:
        response = await self._http.put(
            f"/tasks/{task_id}",
            json={"title": title, "description": description, "is_complete": is_complete},
        )
        response.raise_for_status()
        return Task.from_dict(response.json())

    async def delete_task(self, task_id: int) -> None:
        response = await self._http.delete(f"/tasks/{task_id}")
        response.raise_for_status()

    async def events(self) -> AsyncIterator[Task]:
        """Yields tasks pushed over ``GET /events``.

        Dropped connections are re-opened after the server's ``retry``
        interval (or ``retry_seconds``), resuming from the last event id.
        A non-200 answer or a wrong content type ends the stream with
        EventStreamError.
        """
        last_event_id: Optional[str] = None
        retry_ms: Optional[int] = None
        while True:
            headers = {"Last-Event-ID": last_event_id} if last_event_id else {}
            try:
                async with aconnect_sse(
                    self._http, "GET", "/events", headers=headers, timeout=httpx.Timeout(self.timeout, read=None)
                ) as event_source:
                    self._check_event_stream(event_source.response)
                    logger.debug("Event stream connected")
                    async for sse in event_source.aiter_sse():
                        if sse.id:
                            last_event_id = sse.id
                        if sse.retry is not None:
                            retry_ms = sse.retry
                        if sse.event != "message" or not sse.data:
                            continue
                        try:
                            yield Task.from_dict(sse.json())
                        except (ValueError, KeyError, TypeError) as e:
                            logger.warning(f"Skipping malformed event payload {sse.data!r}: {e}")
            except httpx.TransportError as e:
                logger.warning(f"Event stream connection lost: {e}")

            if not self.reconnect:
                return
            delay = retry_ms / 1000 if retry_ms is not None else self.retry_seconds
            logger.info(f"Reconnecting to event stream in {delay:.1f}s")
            await asyncio.sleep(delay)

    @staticmethod
    def _check_event_stream(response: httpx.Response) -> None:
        if response.status_code != 200:
            raise EventStreamError(f"Event stream refused with HTTP {response.status_code}")
        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("text/event-stream"):
            raise EventStreamError(f"Unexpected event stream content type {content_type!r}")
