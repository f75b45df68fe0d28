from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from bson.errors import BSONError
from pymongo.errors import ConnectionFailure, PyMongoError

from .errors import StorageOperationError, StorageUnavailableError, TodoNotFoundError, TodoValidationError
from .models import SortField, SortOrder, TodoEntity
from .repositories import ListQuery, Repository
from .schemas import TodoCreate, TodoUpdate
from .utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 1

_SORT_FIELDS = {field.value: field for field in SortField}
# snake_case names are accepted too, as in request bodies
_SORT_FIELDS.update({field.key: field for field in SortField})


# PUBLIC_INTERFACE
def parse_sort(sort_by: Optional[str], order: Optional[str]) -> Tuple[Optional[SortField], SortOrder]:
    """
    Validate list sorting parameters.

    Raises:
        TodoValidationError if sort_by is not a sortable field or order is not ASC/DESC.
    """
    sort_order = SortOrder.ASC
    if order is not None and order.strip():
        try:
            sort_order = SortOrder(order.strip().upper())
        except ValueError:
            raise TodoValidationError(
                "order must be 'ASC' or 'DESC'", detail={"order": order}
            ) from None

    if sort_by is None or not sort_by.strip():
        return None, sort_order
    field = _SORT_FIELDS.get(sort_by.strip())
    if field is None:
        allowed = ", ".join(f.value for f in SortField)
        raise TodoValidationError(
            f"Cannot sort by '{sort_by}'; sortBy must be one of: {allowed}",
            detail={"sortBy": sort_by},
        )
    return field, sort_order


def coerce_priority(priority: Optional[int]) -> int:
    """Missing or non-positive priorities become the default priority."""
    if priority is None or priority < 1:
        return DEFAULT_PRIORITY
    return priority


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver errors as tagged service errors, chosen by exception class."""
    try:
        yield
    except ConnectionFailure as e:
        logger.error("Storage unavailable while trying to %s: %s", operation, e)
        raise StorageUnavailableError(f"Failed to {operation}: storage is unavailable", detail=str(e)) from e
    except PyMongoError as e:
        logger.error("Storage error while trying to %s: %s", operation, e)
        raise StorageOperationError(f"Failed to {operation}", detail=str(e)) from e
    except (OverflowError, BSONError) as e:
        # Raised while encoding values BSON cannot hold, e.g. ints wider than 8 bytes
        logger.error("Could not encode document while trying to %s: %s", operation, e)
        raise StorageOperationError(f"Failed to {operation}", detail=str(e)) from e


class TodoService:
    """
    Todo operations exposed by the API.

    Applies creation defaults and priority coercion, then forwards to the
    repository. Storage failures are caught here, once, and re-raised as
    TodoError subclasses.
    """

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def list(
        self,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> List[TodoEntity]:
        field, sort_order = parse_sort(sort_by, order)
        query = ListQuery(completed=completed, sort_by=field, order=sort_order)
        with _storage_errors("list todos"):
            return self.repo.list(query)

    def create(self, data: TodoCreate) -> TodoEntity:
        document = {
            "description": data.description,
            "created_at": data.created_at if data.created_at is not None else utcnow(),
            "completed": data.completed if data.completed is not None else False,
            "priority": data.priority if data.priority is not None else DEFAULT_PRIORITY,
        }
        with _storage_errors("create todo"):
            created = self.repo.create(document)
        logger.debug("Created todo %s", created["id"])
        return created

    def get(self, todo_id: str) -> TodoEntity:
        with _storage_errors("get todo"):
            item = self.repo.get(todo_id)
        if item is None:
            raise TodoNotFoundError("Todo not found", detail={"id": todo_id})
        return item

    def update(self, todo_id: str, data: TodoUpdate) -> Optional[TodoEntity]:
        changes = {"description": data.description, "priority": coerce_priority(data.priority)}
        with _storage_errors("update todo"):
            updated = self.repo.update(todo_id, changes)
        logger.debug("Update of todo %s %s", todo_id, "applied" if updated else "matched nothing")
        return updated

    def complete(self, todo_id: str) -> Optional[TodoEntity]:
        with _storage_errors("complete todo"):
            updated = self.repo.update(todo_id, {"completed": True})
        logger.debug("Completion of todo %s %s", todo_id, "applied" if updated else "matched nothing")
        return updated

    def delete(self, todo_id: str) -> bool:
        with _storage_errors("delete todo"):
            deleted = self.repo.delete(todo_id)
        logger.debug("Delete of todo %s %s", todo_id, "applied" if deleted else "matched nothing")
        return deleted
