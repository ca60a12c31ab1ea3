from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from ..repositories import StorageError, TaskRepository
from ..schemas import ErrorResponse, TaskCreate, TaskCreated, TaskOut, ValidationErrorResponse
from ..utils import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


# PUBLIC_INTERFACE
def get_repository(request: Request) -> TaskRepository:
    """
    Dependency returning the repository injected into the application state.
    """
    return request.app.state.repository


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task, most recently created first.",
    responses={
        200: {"description": "Tasks retrieved successfully"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def list_tasks(repo: TaskRepository = Depends(get_repository)) -> List[TaskOut]:
    try:
        items = await repo.list()
    except StorageError as e:
        logger.error("GET /api/tasks error: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve tasks") from e
    return [TaskOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task from a title and an optional description.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"model": ErrorResponse, "description": "Title is missing or empty"},
        422: {"model": ValidationErrorResponse, "description": "Malformed request body"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def create_task(
    payload: Optional[TaskCreate] = None,
    repo: TaskRepository = Depends(get_repository),
) -> TaskCreated:
    """
    Create a new Task.

    A missing, null or empty title is rejected before the repository is
    touched. Any other title is stored and echoed unchanged.
    """
    if payload is None or not payload.title:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Title is required")

    try:
        new_id = await repo.create(payload)
    except StorageError as e:
        logger.error("POST /api/tasks error: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create task") from e
    logger.debug("Created task %s", new_id)
    return TaskCreated(id=new_id, title=payload.title, description=payload.description)
