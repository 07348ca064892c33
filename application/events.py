import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Set
from domain.entities import Task

logger = logging.getLogger(__name__)

class TaskEventBroker:
    """Fans newly created tasks out to every live-update subscriber.

    Each subscriber owns an unbounded queue, so publishing never waits on
    a slow reader.
    """

    def __init__(self):
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.add(queue)
        logger.debug(f"Subscriber added ({len(self._subscribers)} connected)")
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)
        logger.debug(f"Subscriber removed ({len(self._subscribers)} connected)")

    @contextmanager
    def subscription(self) -> Iterator[asyncio.Queue]:
        queue = self.subscribe()
        try:
            yield queue
        finally:
            self.unsubscribe(queue)

    def publish(self, task: Task) -> None:
        for queue in list(self._subscribers):
            queue.put_nowait(task)
