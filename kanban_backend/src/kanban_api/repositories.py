from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import Callable, Dict, List, Optional

from .models import CategoryEntity, TaskEntity
from .settings import get_settings

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class TaskQuery:
    """
    Optional filters for listing tasks.
    """
    status: Optional[bool] = None
    category_id: Optional[int] = None


# PUBLIC_INTERFACE
class CategoryRepository(ABC):
    """Abstract repository contract for category storage backends."""

    @abstractmethod
    def list(self) -> List[CategoryEntity]:
        """Return all categories ordered by id."""

    @abstractmethod
    def get(self, category_id: int) -> Optional[CategoryEntity]:
        """Return a CategoryEntity by id, or None if not found."""

    @abstractmethod
    def create(self, type_: str) -> CategoryEntity:
        """Create and return a new CategoryEntity."""

    @abstractmethod
    def save(self, category: CategoryEntity) -> Optional[CategoryEntity]:
        """
        Write back the mutable fields of an existing category and stamp updated_at.
        Return the stored entity, or None if it no longer exists.
        """

    @abstractmethod
    def delete(self, category_id: int) -> bool:
        """Delete a CategoryEntity by id. Return True if deleted, False if not found."""


# PUBLIC_INTERFACE
class TaskRepository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def list(self, query: Optional[TaskQuery] = None) -> List[TaskEntity]:
        """Return tasks matching the query, ordered by id."""

    @abstractmethod
    def get(self, task_id: int) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def create(self, title: str, description: str, user_id: int, category_id: int) -> TaskEntity:
        """Create and return a new, open TaskEntity."""

    @abstractmethod
    def save(self, task: TaskEntity) -> Optional[TaskEntity]:
        """
        Write back title, description, status and category_id of an existing task
        and stamp updated_at. user_id and created_at are never rewritten.
        Return the stored entity, or None if it no longer exists.
        """

    @abstractmethod
    def delete(self, task_id: int) -> bool:
        """Delete a TaskEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def delete_by_category(self, category_id: int) -> int:
        """Delete every task filed under a category. Return how many were deleted."""


class _InMemoryTable:
    def __init__(self, clock: Clock = datetime.now) -> None:
        self._lock = RLock()
        self._items: Dict[int, dict] = {}
        self._next_id = 1
        self._clock = clock

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i


class InMemoryCategoryRepository(_InMemoryTable, CategoryRepository):
    """
    Thread-safe in-memory category repository suitable for testing and default runtime.
    """

    def list(self) -> List[CategoryEntity]:
        with self._lock:
            return [self._items[k].copy() for k in sorted(self._items)]  # type: ignore[misc]

    def get(self, category_id: int) -> Optional[CategoryEntity]:
        with self._lock:
            item = self._items.get(category_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def create(self, type_: str) -> CategoryEntity:
        now = self._clock()
        entity: CategoryEntity = {
            "id": self._allocate_id(),
            "type": type_,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity  # type: ignore[assignment]
        return entity.copy()

    def save(self, category: CategoryEntity) -> Optional[CategoryEntity]:
        with self._lock:
            existing = self._items.get(category["id"])
            if existing is None:
                return None
            updated = existing.copy()
            updated["type"] = category["type"]
            updated["updated_at"] = self._clock()
            self._items[category["id"]] = updated
            return updated.copy()  # type: ignore[return-value]

    def delete(self, category_id: int) -> bool:
        with self._lock:
            return self._items.pop(category_id, None) is not None


class InMemoryTaskRepository(_InMemoryTable, TaskRepository):
    """
    Thread-safe in-memory task repository suitable for testing and default runtime.
    """

    def list(self, query: Optional[TaskQuery] = None) -> List[TaskEntity]:
        q = query or TaskQuery()
        with self._lock:
            items = [self._items[k] for k in sorted(self._items)]
            if q.status is not None:
                items = [t for t in items if t["status"] == q.status]
            if q.category_id is not None:
                items = [t for t in items if t["category_id"] == q.category_id]
            # Return copies to avoid external mutation
            return [t.copy() for t in items]  # type: ignore[misc]

    def get(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def create(self, title: str, description: str, user_id: int, category_id: int) -> TaskEntity:
        now = self._clock()
        entity: TaskEntity = {
            "id": self._allocate_id(),
            "title": title,
            "description": description,
            "status": False,
            "user_id": user_id,
            "category_id": category_id,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity  # type: ignore[assignment]
        return entity.copy()

    def save(self, task: TaskEntity) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task["id"])
            if existing is None:
                return None
            updated = existing.copy()
            updated["title"] = task["title"]
            updated["description"] = task["description"]
            updated["status"] = task["status"]
            updated["category_id"] = task["category_id"]
            updated["updated_at"] = self._clock()
            self._items[task["id"]] = updated
            return updated.copy()  # type: ignore[return-value]

    def delete(self, task_id: int) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None

    def delete_by_category(self, category_id: int) -> int:
        with self._lock:
            doomed = [k for k, t in self._items.items() if t["category_id"] == category_id]
            for k in doomed:
                del self._items[k]
            return len(doomed)


@dataclass(frozen=True)
class Storage:
    """The pair of repositories the use cases work against."""
    categories: CategoryRepository
    tasks: TaskRepository


# PUBLIC_INTERFACE
def in_memory_storage(clock: Clock = datetime.now) -> Storage:
    """Return a fresh, empty in-memory Storage."""
    return Storage(categories=InMemoryCategoryRepository(clock), tasks=InMemoryTaskRepository(clock))


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_storage() -> Storage:
    """
    Return the process-wide Storage configured by settings.
    - memory: in-memory repositories
    - sqlite: SQLite repositories sharing one database file
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import sqlite_storage

        return sqlite_storage(settings.sqlite_db_path)
    return in_memory_storage()
