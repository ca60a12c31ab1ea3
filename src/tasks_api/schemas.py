from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for the create-task request body.

    `title` is optional at the schema level so that a missing title reaches the
    handler, which rejects it with a 400 before any storage access. Length
    limits are left to the store.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "2%",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Task title (required, non-empty); stored exactly as given")
    description: Optional[str] = Field(default=None, description="Optional detailed description")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the list endpoint for a single Task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy milk",
                "description": "2%",
                "created_at": "2025-01-25T10:15:30",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    created_at: datetime = Field(..., description="Creation timestamp")


# PUBLIC_INTERFACE
class TaskCreated(BaseModel):
    """
    Schema returned by the create endpoint.
    """

    message: str = Field(default="Task created successfully")
    id: int = Field(..., description="Identifier assigned to the new task")
    title: str
    description: Optional[str] = None


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Fixed-message error body; internal details are never included."""

    error: str


class ValidationErrorResponse(BaseModel):
    error: str = "ValidationError"
    message: str = "Request validation failed"
    detail: List[Any]
