from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from .models import TaskEntity, next_updated_at, validate_task
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def find_by_id(self, task_id: UUID) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def find_all(self) -> List[TaskEntity]:
        """Return every stored TaskEntity, oldest first."""

    @abstractmethod
    def save(self, task: TaskEntity) -> TaskEntity:
        """
        Insert or update a TaskEntity and return the stored copy.
        - id is None: insert, assigning a fresh UUID and created_at == updated_at
        - id is set: update in place, keeping created_at and refreshing updated_at
        """

    @abstractmethod
    def delete(self, task: TaskEntity) -> None:
        """Delete a TaskEntity by its id."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[UUID, TaskEntity] = {}

    def _now(self) -> datetime:
        return datetime.now()

    def find_by_id(self, task_id: UUID) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def find_all(self) -> List[TaskEntity]:
        with self._lock:
            items = sorted(self._items.values(), key=lambda t: t["created_at"])
            # Return copies to avoid external mutation
            return [t.copy() for t in items]

    def save(self, task: TaskEntity) -> TaskEntity:
        validate_task(task)
        now = self._now()
        entity: TaskEntity = task.copy()
        with self._lock:
            existing = self._items.get(entity["id"]) if entity["id"] is not None else None
            if existing is None:
                if entity["id"] is None:
                    entity["id"] = uuid4()
                entity["created_at"] = now
                entity["updated_at"] = now
            else:
                entity["created_at"] = existing["created_at"]
                entity["updated_at"] = next_updated_at(existing["updated_at"], now)
            self._items[entity["id"]] = entity
            return entity.copy()

    def delete(self, task: TaskEntity) -> None:
        with self._lock:
            self._items.pop(task["id"], None)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (sqlite3 standard library)

    The instance is cached so every request shares the same store.
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using sqlite task store at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory task store")
    return InMemoryRepository()
