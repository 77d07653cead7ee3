from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from fastapi import Depends

from .errors import NotFound
from .models import CategoryEntity, TaskEntity
from .repositories import Storage, TaskQuery, get_storage

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class CategoryUsecase(ABC):
    """Operations the delivery layer may perform on categories."""

    @abstractmethod
    def get_categories(self) -> List[CategoryEntity]:
        ...

    @abstractmethod
    def get_category_by_id(self, category_id: int) -> CategoryEntity:
        """Raise NotFound if the category does not exist."""

    @abstractmethod
    def store_category(self, type_: str) -> CategoryEntity:
        ...

    @abstractmethod
    def update_category(self, category: CategoryEntity) -> CategoryEntity:
        """Persist a merged category. Raise NotFound if it no longer exists."""

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category and its tasks. Raise NotFound if it does not exist."""


# PUBLIC_INTERFACE
class TaskUsecase(ABC):
    """Operations the delivery layer may perform on tasks."""

    @abstractmethod
    def get_tasks(self, query: Optional[TaskQuery] = None) -> List[TaskEntity]:
        ...

    @abstractmethod
    def get_task_by_id(self, task_id: int) -> TaskEntity:
        """Raise NotFound if the task does not exist."""

    @abstractmethod
    def store_task(self, title: str, description: str, user_id: int, category_id: int) -> TaskEntity:
        """Create an open task. Raise NotFound if the category does not exist."""

    @abstractmethod
    def update_task(self, task: TaskEntity) -> TaskEntity:
        """
        Persist a merged task. Raise NotFound if the task, or the category it
        now points to, does not exist.
        """

    @abstractmethod
    def delete_task(self, task_id: int) -> None:
        """Raise NotFound if the task does not exist."""


class CategoryService(CategoryUsecase):
    def __init__(self, storage: Storage) -> None:
        self._categories = storage.categories
        self._tasks = storage.tasks

    def get_categories(self) -> List[CategoryEntity]:
        return self._categories.list()

    def get_category_by_id(self, category_id: int) -> CategoryEntity:
        category = self._categories.get(category_id)
        if category is None:
            raise NotFound("category not found")
        return category

    def store_category(self, type_: str) -> CategoryEntity:
        category = self._categories.create(type_)
        logger.info("category %s created (%s)", category["id"], category["type"])
        return category

    def update_category(self, category: CategoryEntity) -> CategoryEntity:
        saved = self._categories.save(category)
        if saved is None:
            raise NotFound("category not found")
        return saved

    def delete_category(self, category_id: int) -> None:
        self.get_category_by_id(category_id)
        removed = self._tasks.delete_by_category(category_id)
        self._categories.delete(category_id)
        logger.info("category %s deleted along with %d task(s)", category_id, removed)


class TaskService(TaskUsecase):
    def __init__(self, storage: Storage) -> None:
        self._categories = storage.categories
        self._tasks = storage.tasks

    def _ensure_category(self, category_id: int) -> None:
        if self._categories.get(category_id) is None:
            raise NotFound("category not found")

    def get_tasks(self, query: Optional[TaskQuery] = None) -> List[TaskEntity]:
        return self._tasks.list(query)

    def get_task_by_id(self, task_id: int) -> TaskEntity:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFound("task not found")
        return task

    def store_task(self, title: str, description: str, user_id: int, category_id: int) -> TaskEntity:
        self._ensure_category(category_id)
        task = self._tasks.create(title, description, user_id, category_id)
        logger.info("task %s created by user %s in category %s", task["id"], user_id, category_id)
        return task

    def update_task(self, task: TaskEntity) -> TaskEntity:
        self._ensure_category(task["category_id"])
        saved = self._tasks.save(task)
        if saved is None:
            raise NotFound("task not found")
        return saved

    def delete_task(self, task_id: int) -> None:
        if not self._tasks.delete(task_id):
            raise NotFound("task not found")
        logger.info("task %s deleted", task_id)


# PUBLIC_INTERFACE
def get_category_usecase(storage: Storage = Depends(get_storage)) -> CategoryUsecase:
    """FastAPI dependency returning the category use case over the configured storage."""
    return CategoryService(storage)


# PUBLIC_INTERFACE
def get_task_usecase(storage: Storage = Depends(get_storage)) -> TaskUsecase:
    """FastAPI dependency returning the task use case over the configured storage."""
    return TaskService(storage)
