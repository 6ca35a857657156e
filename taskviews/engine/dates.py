# File: /taskviews/engine/dates.py | Version: 1.0 | Title: Lenient date parsing for record fields
from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

_datetime_adapter = TypeAdapter(datetime)
_date_adapter = TypeAdapter(date)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO strings, epoch numbers, dates. Naive values are taken as UTC."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = _datetime_adapter.validate_python(value)
        except ValidationError:
            try:
                d = _date_adapter.validate_python(value)
            except ValidationError:
                return None
            parsed = datetime(d.year, d.month, d.day)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_day(value: Any) -> Optional[date]:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = parse_timestamp(value)
    return ts.date() if ts is not None else None
