"""JSON serialization utilities using orjson for speed and correctness.

orjson handles most analysis output natively:
- datetime, date → ISO format
- NaN and ±Infinity → null
- dataclasses → dict

Pydantic models are dumped before serialization; only a few special cases
need the default handler below.
"""

import datetime
from decimal import Decimal
from typing import Any

import orjson
from pydantic import BaseModel

from data_explorer_mcp.models.types import UNDEFINED

DUMPS_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation

    Raises:
        TypeError: If object cannot be serialized
    """
    # Missing path marker
    if obj is UNDEFINED:
        return None

    if isinstance(obj, BaseModel):
        return obj.model_dump()

    # Decimal - orjson has no native support
    if isinstance(obj, Decimal):
        return float(obj)

    # timedelta - convert to total seconds
    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    # Sets and tuples - convert to list
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a value to JSON-serializable format.

    Uses orjson's serialization and decodes back to Python objects, so the
    result matches what will actually be emitted (NaN becomes None).

    Args:
        value: Value to convert

    Returns:
        JSON-serializable value
    """
    try:
        json_bytes = orjson.dumps(value, default=_default_handler)
        return orjson.loads(json_bytes)
    except TypeError:
        return str(value)


def dumps(obj: Any) -> str:
    """
    Serialize object to an indented JSON string using orjson.

    Args:
        obj: Object to serialize (pydantic models are dumped first)

    Returns:
        JSON string
    """
    if isinstance(obj, BaseModel):
        obj = obj.model_dump()
    return orjson.dumps(obj, default=_default_handler, option=DUMPS_OPTIONS).decode(
        "utf-8"
    )
