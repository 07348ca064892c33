# tests/test_events.py

from __future__ import annotations

import json

import pytest
from starlette.requests import ClientDisconnect

from application.events import TaskEventBroker
from domain.entities import Task
from infrastructure.security import create_access_token
from interfaces.api import format_sse, task_event_stream


def _disconnect_after(checks: int):
    """is_disconnected() stand-in that reports a live client `checks` times."""
    answers = iter([False] * checks + [True])

    async def is_disconnected() -> bool:
        return next(answers)

    return is_disconnected


@pytest.mark.asyncio
async def test_publish_reaches_every_subscriber() -> None:
    broker = TaskEventBroker()
    first, second = broker.subscribe(), broker.subscribe()

    broker.publish(Task(title="shared", id=1))

    assert first.get_nowait().title == "shared"
    assert second.get_nowait().title == "shared"


@pytest.mark.asyncio
async def test_subscription_context_unsubscribes() -> None:
    broker = TaskEventBroker()

    with broker.subscription() as queue:
        assert broker.subscriber_count == 1
    broker.publish(Task(title="late"))

    assert broker.subscriber_count == 0
    assert queue.empty()


def test_format_sse_splits_multiline_data() -> None:
    assert format_sse("a\nb", event_id=3) == "id: 3\ndata: a\ndata: b\n\n"
    assert format_sse("") == "data: \n\n"


@pytest.mark.asyncio
async def test_stream_emits_published_task_and_unsubscribes() -> None:
    broker = TaskEventBroker()
    answers = iter([False, True])
    subscribers_seen: list[int] = []

    async def is_disconnected() -> bool:
        # Publish once the stream has registered itself.
        subscribers_seen.append(broker.subscriber_count)
        if len(subscribers_seen) == 1:
            broker.publish(Task(title="Buy milk", id=5))
        return next(answers)

    chunks = [c async for c in task_event_stream(broker, is_disconnected, keepalive=1)]

    assert subscribers_seen == [1, 1]
    assert len(chunks) == 1
    assert chunks[0].startswith("id: 5\ndata: ")
    payload = json.loads(chunks[0].split("data: ", 1)[1])
    assert payload["title"] == "Buy milk"
    assert payload["id"] == 5
    assert broker.subscriber_count == 0


@pytest.mark.asyncio
async def test_stream_sends_keepalive_when_idle() -> None:
    broker = TaskEventBroker()

    chunks = [c async for c in task_event_stream(broker, _disconnect_after(1), keepalive=0.01)]

    assert chunks == [": keep-alive\n\n"]
    assert broker.subscriber_count == 0


@pytest.mark.asyncio
async def test_connection_lost_before_streaming_leaves_no_subscriber(app, broker: TaskEventBroker) -> None:
    token, _ = create_access_token("alice")
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/events",
        "raw_path": b"/events",
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"testserver"), (b"cookie", f"token={token}".encode())],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }
    messages = iter([{"type": "http.request", "body": b"", "more_body": False}])

    async def receive() -> dict:
        return next(messages, {"type": "http.disconnect"})

    async def send(message: dict) -> None:
        if message["type"] == "http.response.start":
            raise OSError("connection reset by peer")

    with pytest.raises((OSError, ClientDisconnect)):
        await app(scope, receive, send)

    assert broker.subscriber_count == 0
