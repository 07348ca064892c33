# interfaces/api.py
from fastapi import APIRouter, HTTPException, Depends, Request, Response
from fastapi.responses import StreamingResponse
from typing import AsyncIterator, Awaitable, Callable, List, Optional
import asyncio
import logging

import config
from application.events import TaskEventBroker
from application.use_cases import TaskUseCases
from domain.entities import Task
from interfaces.auth import get_current_user
from schemas.task import TaskCreate, TaskUpdate, TaskResponse

logger = logging.getLogger(__name__)

router = APIRouter()

def get_task_use_cases(request: Request) -> TaskUseCases:
    return request.app.state.task_use_cases

def get_broker(request: Request) -> TaskEventBroker:
    return request.app.state.broker

def format_sse(data: str, event_id: Optional[int] = None) -> str:
    """Encodes one server-sent event message."""
    lines = [] if event_id is None else [f"id: {event_id}"]
    lines.extend(f"data: {line}" for line in (data.splitlines() or [""]))
    return "\n".join(lines) + "\n\n"

async def task_event_stream(
    broker: TaskEventBroker,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = config.EVENTS_KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    # Subscribed only while the body is being streamed.
    with broker.subscription() as queue:
        while not await is_disconnected():
            try:
                task: Task = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield format_sse(TaskResponse.from_entity(task).model_dump_json(), event_id=task.id)

@router.post("/tasks", response_model=TaskResponse)
async def create_task(task: TaskCreate, tasks: TaskUseCases = Depends(get_task_use_cases), username: str = Depends(get_current_user)):
    created_task = tasks.create_task(task.title, task.description, task.is_complete)
    return TaskResponse.from_entity(created_task)

@router.get("/tasks", response_model=List[TaskResponse])
async def get_all_tasks(tasks: TaskUseCases = Depends(get_task_use_cases), username: str = Depends(get_current_user)):
    return [TaskResponse.from_entity(task) for task in tasks.get_all_tasks()]

@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, tasks: TaskUseCases = Depends(get_task_use_cases), username: str = Depends(get_current_user)):
    task = tasks.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.from_entity(task)

@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, task: TaskUpdate, tasks: TaskUseCases = Depends(get_task_use_cases), username: str = Depends(get_current_user)):
    updated_task = tasks.update_task(task_id, task.title, task.description, task.is_complete)
    if not updated_task:
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info(f"Task {task_id} updated by {username!r}")
    return TaskResponse.from_entity(updated_task)

@router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(task_id: int, tasks: TaskUseCases = Depends(get_task_use_cases), username: str = Depends(get_current_user)):
    if not tasks.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info(f"Task {task_id} deleted by {username!r}")
    return Response(status_code=204)

@router.get("/events")
async def events(request: Request, broker: TaskEventBroker = Depends(get_broker), username: str = Depends(get_current_user)):
    """Streams every newly created task as a server-sent event."""
    logger.info(f"Event stream opened for {username!r}")
    return StreamingResponse(
        task_event_stream(broker, request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"}
    )
