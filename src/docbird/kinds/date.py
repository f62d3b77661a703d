"""Date kind backed by pydantic's datetime parsing."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .base import KindBase

_DATETIME_ADAPTER: TypeAdapter[datetime] = TypeAdapter(datetime)

# pydantic also takes unix timestamps as strings; only calendar dates count here
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _parse_iso(value: str) -> datetime | None:
    """Parse an ISO-8601 string, or return None if it is not one."""
    if not _ISO_PREFIX.match(value):
        return None
    try:
        return _DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        return None


class DateKind(KindBase):
    """
    Date values.

    Accepts `datetime` and `date` instances and ISO-8601 strings. Coercion
    always yields a `datetime`; a bare `date` becomes midnight of that day.

    Examples
    --------
        >>> DateKind.get_value("2024-03-01T12:30:00")
        datetime.datetime(2024, 3, 1, 12, 30)
        >>> DateKind.get_value(date(2024, 3, 1))
        datetime.datetime(2024, 3, 1, 0, 0)
    """

    label = "Date"

    @classmethod
    def validate(cls, value: Any) -> bool:
        if isinstance(value, (datetime, date)):
            return True
        if isinstance(value, str):
            return _parse_iso(value) is not None
        return False

    @classmethod
    def get_value(cls, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        parsed = _parse_iso(value)
        if parsed is None:
            raise ValueError(f"Not a date: {value!r}")
        return parsed
