"""FastAPI web application for taskdesk."""

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, HTTPException, Depends, Request, Response, status
from sqlalchemy.orm import Session

from taskdesk.api.schemas import (
    TaskWrite,
    BulkUpdateRequest,
    TaskResponse,
    TaskListResponse,
    BulkUpdateResponse,
    ErrorDetail,
)
from taskdesk.cache.memory_cache import MemoryCache
from taskdesk.core.ports import TaskCache
from taskdesk.database.database import get_db, init_db
from taskdesk.database.repository import TaskRepository
from taskdesk.models.outcome import OperationResult, OutcomeKind
from taskdesk.services.task_service import TaskService

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

STATUS_CODES = {
    OutcomeKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    OutcomeKind.DUPLICATE_ID: HTTPStatus.CONFLICT,
    OutcomeKind.ALREADY_COMPLETED: HTTPStatus.CONFLICT,
    OutcomeKind.COMPLETION_TOO_EARLY: HTTPStatus.UNPROCESSABLE_ENTITY,
    OutcomeKind.EMPTY_BATCH: HTTPStatus.BAD_REQUEST,
    OutcomeKind.INVALID_REQUEST: HTTPStatus.BAD_REQUEST,
    OutcomeKind.PERSISTENCE_FAILURE: HTTPStatus.INTERNAL_SERVER_ERROR,
    OutcomeKind.TRANSACTION_ROLLED_BACK: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # One cache per process, alive as long as the app
    app.state.cache = MemoryCache()
    logger.info("taskdesk API started")
    yield
    app.state.cache.clear()


# Initialize FastAPI app
app = FastAPI(
    title="taskdesk API",
    description="Task list with transition rules and cached lookups",
    version=API_VERSION,
    lifespan=lifespan,
)


def get_cache(request: Request) -> TaskCache:
    """Process-wide task cache (dependency for FastAPI)."""
    return request.app.state.cache


def get_task_service(
    db: Session = Depends(get_db),
    cache: TaskCache = Depends(get_cache),
) -> TaskService:
    """Request-scoped task service."""
    return TaskService(TaskRepository(db), cache)


def raise_for_outcome(result: OperationResult) -> None:
    """Map a failed outcome onto an HTTP error."""
    if result.ok:
        return
    if result.is_storage_failure:
        logger.error(f"Request failed in storage ({result.error.value}): {result.message}")
    elif result.is_rule_violation:
        logger.info(f"Request rejected ({result.error.value}): {result.message}")
    raise HTTPException(
        status_code=STATUS_CODES.get(result.error, HTTPStatus.INTERNAL_SERVER_ERROR),
        detail=ErrorDetail(error=result.error.value, message=result.message or "").model_dump(),
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": API_VERSION}


@app.get("/api/tasks", response_model=TaskListResponse)
def list_tasks(service: TaskService = Depends(get_task_service)):
    """List tasks, sorted by urgency."""
    result = service.list_tasks()
    raise_for_outcome(result)
    return TaskListResponse(tasks=result.value, count=len(result.value))


@app.get("/api/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Get a single task."""
    result = service.get_task(task_id)
    raise_for_outcome(result)
    return TaskResponse(task=result.value)


@app.post("/api/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(body: TaskWrite, service: TaskService = Depends(get_task_service)):
    """Create a new task."""
    result = service.create_task(body.to_task())
    raise_for_outcome(result)
    return TaskResponse(task=result.value)


@app.put("/api/tasks", response_model=BulkUpdateResponse)
def bulk_update_tasks(body: BulkUpdateRequest, service: TaskService = Depends(get_task_service)):
    """Update multiple tasks in a single all-or-nothing operation."""
    result = service.bulk_update([entry.to_task() for entry in body.tasks])
    raise_for_outcome(result)
    return BulkUpdateResponse(updated_count=len(result.value), tasks=result.value)


@app.put("/api/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, body: TaskWrite, service: TaskService = Depends(get_task_service)):
    """Update a task."""
    if body.id is not None and body.id != task_id:
        raise_for_outcome(OperationResult.failure(
            OutcomeKind.INVALID_REQUEST,
            f"Body ID {body.id} does not match path ID {task_id}.",
        ))
    result = service.update_task(body.to_task(task_id))
    raise_for_outcome(result)
    return TaskResponse(task=result.value)


@app.delete("/api/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Delete a task."""
    result = service.delete_task(task_id)
    raise_for_outcome(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
