from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, List, Optional

from bson import ObjectId

from .models import SortField, SortOrder, TodoEntity
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListQuery:
    """
    Query parameters for listing todos.
    completed=None means no filter; sort_by=None keeps storage order.
    """
    completed: Optional[bool] = None
    sort_by: Optional[SortField] = None
    order: SortOrder = SortOrder.ASC


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Implementations map each call onto a single storage operation and let
    storage errors propagate untouched.
    """

    name: str = "abstract"

    @abstractmethod
    def create(self, document: Dict[str, Any]) -> TodoEntity:
        """Insert a new document and return it with its assigned id."""

    @abstractmethod
    def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def update(self, todo_id: str, changes: Dict[str, Any]) -> Optional[TodoEntity]:
        """Set the given fields on a document. Return the updated entity or None if not found."""

    @abstractmethod
    def delete(self, todo_id: str) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list(self, query: Optional[ListQuery] = None) -> List[TodoEntity]:
        """
        Return every TodoEntity matching the query.
        - Filter by completed when set
        - Sort by the given field and order when set, storage order otherwise
        """

    def close(self) -> None:
        """Release the underlying storage handle."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        # dicts keep insertion order, which serves as the storage order
        self._items: Dict[str, TodoEntity] = {}

    def create(self, document: Dict[str, Any]) -> TodoEntity:
        entity: TodoEntity = {
            "id": str(ObjectId()),
            "description": document["description"],
            "created_at": document.get("created_at"),
            "completed": document.get("completed"),
            "priority": document.get("priority"),
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()  # type: ignore[return-value]

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def update(self, todo_id: str, changes: Dict[str, Any]) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None
            updated = existing.copy()
            updated.update(changes)  # type: ignore[typeddict-item]
            updated["id"] = todo_id
            self._items[todo_id] = updated  # type: ignore[assignment]
            return updated.copy()  # type: ignore[return-value]

    def delete(self, todo_id: str) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None

    def list(self, query: Optional[ListQuery] = None) -> List[TodoEntity]:
        q = query or ListQuery()
        with self._lock:
            items = list(self._items.values())

        if q.completed is not None:
            items = [t for t in items if t["completed"] == q.completed]

        if q.sort_by is not None:
            key = q.sort_by.key
            # Missing values sort first, matching document stores
            items = sorted(
                items,
                key=lambda t: (t.get(key) is not None, t.get(key)),  # type: ignore[misc]
                reverse=q.order is SortOrder.DESC,
            )

        # Return copies to avoid external mutation
        return [t.copy() for t in items]  # type: ignore[misc]


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - mongo: MongoRepository connected with the configured URL and database
    """
    if settings.persistence_backend == "mongo":
        from .mongo import MongoRepository

        logger.info(
            "Using MongoDB backend (database=%s, collection=%s)",
            settings.mongodb_database,
            settings.mongodb_collection,
        )
        return MongoRepository.from_settings(settings)
    logger.info("Using in-memory backend")
    return InMemoryRepository()
