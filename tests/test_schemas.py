from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from todo_api.schemas import TodoCreate, TodoOut, TodoUpdate

NEW_YEAR_2025 = datetime(2025, 1, 1, tzinfo=timezone.utc)
NEW_YEAR_2025_MS = 1735689600000


class TestTimestampInput:
    @pytest.mark.parametrize(
        "value",
        [
            NEW_YEAR_2025_MS,
            float(NEW_YEAR_2025_MS),
            str(NEW_YEAR_2025_MS),
            "2025-01-01",
            "2025-01-01T00:00:00",
            "2025-01-01T00:00:00Z",
            "2024-12-31T19:00:00-05:00",
            datetime(2025, 1, 1),
            date(2025, 1, 1),
        ],
    )
    def test_accepted_forms(self, value):
        assert TodoCreate(description="x", createdAt=value).created_at == NEW_YEAR_2025

    def test_integers_are_milliseconds(self):
        parsed = TodoCreate(description="x", createdAt=1500).created_at
        assert parsed == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)

    def test_negative_values_predate_epoch(self):
        parsed = TodoCreate(description="x", createdAt="-1000").created_at
        assert parsed == datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

    def test_sub_millisecond_digits_are_dropped(self):
        parsed = TodoCreate(description="x", createdAt="2025-01-01T00:00:00.123456Z").created_at
        assert parsed == NEW_YEAR_2025 + timedelta(milliseconds=123)

    @pytest.mark.parametrize("value", ["yesterday", "2025-13-01", True, {"ms": 1}, 10**20])
    def test_rejected_forms(self, value):
        with pytest.raises(ValidationError):
            TodoCreate(description="x", createdAt=value)

    def test_missing_is_none(self):
        data = TodoCreate(description="x")
        assert data.created_at is None
        assert data.completed is None
        assert data.priority is None


class TestTimestampOutput:
    def test_serializes_epoch_milliseconds_with_camel_case(self):
        out = TodoOut(id="abc", description="x", created_at=NEW_YEAR_2025, completed=False, priority=1)
        assert out.model_dump(by_alias=True) == {
            "id": "abc",
            "description": "x",
            "createdAt": NEW_YEAR_2025_MS,
            "completed": False,
            "priority": 1,
        }

    def test_naive_datetimes_are_utc(self):
        out = TodoOut(id="abc", description="x", created_at=datetime(2025, 1, 1))
        assert out.model_dump(by_alias=True)["createdAt"] == NEW_YEAR_2025_MS

    def test_json_round_trip_keeps_value(self):
        out = TodoOut(id="abc", description="x", created_at=NEW_YEAR_2025 + timedelta(milliseconds=7))
        again = TodoOut.model_validate_json(out.model_dump_json(by_alias=True))
        assert again.created_at == out.created_at


class TestTodoUpdate:
    def test_description_required(self):
        with pytest.raises(ValidationError):
            TodoUpdate(priority=1)

    def test_priority_is_coerced_from_numeric_strings(self):
        assert TodoUpdate.model_validate({"description": "x", "priority": "3"}).priority == 3
