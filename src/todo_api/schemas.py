from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from .utils import from_epoch_millis, to_epoch_millis, to_utc

_INTEGER_STRING = re.compile(r"^[+-]?\d+$")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Internal helper to normalize timestamp input into an aware UTC datetime.
    - int/float: milliseconds since the Unix epoch.
    - str of digits: milliseconds since the Unix epoch.
    - other str: ISO8601 date or datetime; naive values are UTC, dates are midnight.
    - date/datetime: kept, naive values are UTC.
    """
    if value is None:
        return None

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        raise ValueError("Invalid type for timestamp; expected epoch milliseconds or ISO8601 string.")

    if isinstance(value, (int, float)):
        try:
            return from_epoch_millis(value)
        except OverflowError as e:
            raise ValueError("Timestamp is out of range.") from e

    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        s = value.strip()
        if _INTEGER_STRING.match(s):
            return _parse_timestamp(int(s))
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            return to_utc(datetime.fromisoformat(s))
        except ValueError:
            try:
                d = date.fromisoformat(s)
            except ValueError as e:
                raise ValueError(
                    "Invalid timestamp format. Use epoch milliseconds or an ISO8601 date or datetime "
                    "(e.g., 1735689600000, '2025-01-01' or '2025-01-01T13:45:00Z')."
                ) from e
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)

    raise ValueError("Invalid type for timestamp; expected epoch milliseconds or ISO8601 string.")


# Timestamp exchanged with clients as integer epoch milliseconds
EpochMillis = Annotated[
    datetime,
    BeforeValidator(_parse_timestamp),
    PlainSerializer(to_epoch_millis, return_type=int),
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class TodoCreate(_CamelModel):
    """
    Schema for creating a new Todo item.
    Omitted fields are defaulted by the service: createdAt to now, completed to
    false, priority to 1.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "description": "Buy milk",
                "createdAt": 1735689600000,
                "completed": False,
                "priority": 1,
            }
        },
    )

    description: str = Field(..., description="Todo text")
    created_at: Optional[EpochMillis] = Field(
        default=None,
        description="Creation time. Accepts epoch milliseconds or an ISO8601 string; defaults to now",
    )
    completed: Optional[bool] = Field(default=None, description="Completion flag; defaults to false")
    priority: Optional[int] = Field(default=None, description="Priority, 1 is highest; defaults to 1")


# PUBLIC_INTERFACE
class TodoUpdate(_CamelModel):
    """
    Schema for updating an existing Todo item.
    Description is replaced; a missing or non-positive priority is stored as 1.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"description": "Buy milk and bread", "priority": 2}},
    )

    description: str = Field(..., description="New todo text")
    priority: Optional[int] = Field(default=None, description="New priority; values below 1 become 1")


# PUBLIC_INTERFACE
class TodoOut(_CamelModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "65a1f0c2e4b0a1b2c3d4e5f6",
                "description": "Buy milk",
                "createdAt": 1735689600000,
                "completed": False,
                "priority": 1,
            }
        },
    )

    id: str = Field(..., description="Unique identifier assigned by storage")
    description: str = Field(..., description="Todo text")
    created_at: Optional[EpochMillis] = Field(default=None, description="Creation time in epoch milliseconds")
    completed: Optional[bool] = Field(default=None, description="Completion flag")
    priority: Optional[int] = Field(default=None, description="Priority, 1 is highest")
