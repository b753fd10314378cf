"""
Coercion of JSON/form payloads into model column values.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, inspect

from buildoffice.business.pricing import parse_number

TRUE_VALUES = ('true', '1', 'yes', 'on')


def parse_date(value) -> date | None:
    """Parse ``YYYY-MM-DD`` (or a full ISO timestamp) into a date; blank gives None"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        raise ValueError(f"Invalid date: {value}")


def parse_datetime(value) -> datetime | None:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
    except ValueError:
        raise ValueError(f"Invalid date: {value}")
    return parsed.replace(tzinfo=None)


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def coerce_payload(model_cls, data: dict | None) -> dict:
    """
    Keep only the columns of ``model_cls`` and convert their values to the column types.

    Numbers go through the lenient form parser, so ``"12,5"`` becomes 12.5 and
    blank strings become None.

    Raises:
        ValueError: If a date cannot be parsed
    """
    columns = {c.key: c for c in inspect(model_cls).columns}
    result = {}
    for key, value in (data or {}).items():
        column = columns.get(key)
        if column is None:
            continue
        if isinstance(column.type, DateTime):
            result[key] = parse_datetime(value)
        elif isinstance(column.type, Date):
            result[key] = parse_date(value)
        elif isinstance(column.type, Boolean):
            result[key] = parse_bool(value)
        elif isinstance(column.type, Integer):
            number = parse_number(value)
            result[key] = int(number) if number is not None else None
        elif isinstance(column.type, Float):
            result[key] = parse_number(value)
        elif isinstance(value, str):
            result[key] = value.strip()
        else:
            result[key] = value
    return result


def require(data: dict, *fields: str) -> None:
    """Raise ValueError naming the first required field that is missing or blank"""
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(f"{field} is required")
