from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a stored Todo document.

    Fields:
    - id: Opaque string identifier assigned by the storage backend
    - description: Todo text
    - created_at: Creation timestamp (timezone-aware UTC datetime)
    - completed: Boolean completion flag
    - priority: Integer priority, 1 being the highest
    """

    id: str
    description: str
    created_at: Optional[datetime]
    completed: Optional[bool]
    priority: Optional[int]


# PUBLIC_INTERFACE
class SortField(str, Enum):
    """Fields a todo list can be sorted by, named as the API exposes them."""

    DESCRIPTION = "description"
    CREATED_AT = "createdAt"
    COMPLETED = "completed"
    PRIORITY = "priority"

    @property
    def key(self) -> str:
        """Name of the field inside a stored document."""
        return _SORT_KEYS[self]


_SORT_KEYS = {
    SortField.DESCRIPTION: "description",
    SortField.CREATED_AT: "created_at",
    SortField.COMPLETED: "completed",
    SortField.PRIORITY: "priority",
}


# PUBLIC_INTERFACE
class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
