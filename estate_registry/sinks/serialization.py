"""Shared serialization utilities for sinks.

Amounts are ``Decimal`` and are emitted as strings so they survive a JSON
round trip exactly; enums are emitted by value.
"""

import json
from dataclasses import asdict, fields, is_dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert a record, event or mapping to a JSON-ready dict."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    return {key: serialize_value(value) for key, value in asdict(obj).items()}


def to_dict_fast(obj: Any) -> dict:
    """Convert a flat dataclass without the deep copy ``asdict`` makes.

    Property and offer records have no nested dataclasses, so reading the
    fields directly gives the same result.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, Path):
        return str(value)
    elif isinstance(value, (frozenset, set)):
        # Sorted so identical registries serialize identically
        return sorted(serialize_value(v) for v in value)
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    return value


def to_json(obj: Any, pretty: bool = False) -> str:
    """Serialize ``obj`` (via ``to_dict``) to a JSON string."""
    return json.dumps(to_dict(obj), indent=2 if pretty else None, ensure_ascii=False, default=str)
