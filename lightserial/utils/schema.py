"""Conversion of serialized trees to plain JSON types."""

import datetime
import decimal
import uuid
from enum import Enum

from pydantic import BaseModel


def serialize(data: any) -> dict | list | int | float | str | bool | None:
    """
    Convert any list or dict of scalars or pydantic.BaseModel instances (even nested)
    to a JSON serializable format using only dict, list, int, float, str, and bool.
    """
    if isinstance(data, BaseModel):
        return serialize(data.model_dump(mode="json"))
    if isinstance(data, dict):
        return {str(key): serialize(value) for key, value in data.items()}
    if isinstance(data, (list, tuple, set, frozenset)):
        return [serialize(item) for item in data]
    if isinstance(data, Enum):
        return serialize(data.value)
    if isinstance(data, (int, float, str, bool)) or data is None:
        return data
    if isinstance(data, (datetime.datetime, datetime.date, datetime.time)):
        return data.isoformat()
    if isinstance(data, decimal.Decimal):
        return float(data)
    if isinstance(data, uuid.UUID):
        return str(data)
    raise ValueError(f"Cannot convert `{data!r}` of type {type(data)} to JSON")
