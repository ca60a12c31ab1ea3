from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a stored Task, as returned by
    the storage backends.

    Fields:
    - id: Unique integer identifier assigned by storage, never reused
    - title: Non-empty title (trimmed on input via schemas)
    - description: Optional long-form description
    - created_at: Insertion timestamp assigned by storage
    """

    id: int
    title: str
    description: Optional[str]
    created_at: datetime
