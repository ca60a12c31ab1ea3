from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import List

from .models import TaskEntity
from .schemas import TaskCreate


class StorageError(RuntimeError):
    """Raised by repositories when the underlying store fails a statement."""


# PUBLIC_INTERFACE
class TaskRepository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    async def create(self, data: TaskCreate) -> int:
        """Insert a new task and return the identifier storage assigned to it."""

    @abstractmethod
    async def list(self) -> List[TaskEntity]:
        """
        Return every stored task, most recently created first. Tasks created
        at the same instant are ordered by descending id.
        """


class InMemoryRepository(TaskRepository):
    """
    Thread-safe in-memory repository, used as a substitute store in tests.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TaskEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    async def create(self, data: TaskCreate) -> int:
        if not data.title:
            # Mirrors the NOT NULL constraint on the relational table
            raise StorageError("title cannot be empty")
        entity: TaskEntity = {
            "id": self._allocate_id(),
            "title": data.title,
            "description": data.description,
            "created_at": self._now(),
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity["id"]

    async def list(self) -> List[TaskEntity]:
        with self._lock:
            items = sorted(
                self._items.values(),
                key=lambda t: (t["created_at"], t["id"]),
                reverse=True,
            )
            # Return copies to avoid external mutation
            return [t.copy() for t in items]  # type: ignore[misc]
