"""Value classification and column type inference."""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser

from data_explorer_mcp.models.types import TypeTag, ValueKind

logger = logging.getLogger(__name__)

DEFAULT_DATE_SAMPLE_SIZE = 10

# Strings are parsed against both; a year or month filled in from the
# default gives different results and the string is not a date
_REFERENCE_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 2, 1))

# Kinds that map one-to-one onto a column type
_PRIMITIVE_TAGS = {
    ValueKind.NUMBER: TypeTag.NUMBER,
    ValueKind.STRING: TypeTag.STRING,
    ValueKind.BOOLEAN: TypeTag.BOOLEAN,
    ValueKind.DATE: TypeTag.DATE,
}


def classify_value(value: Any) -> ValueKind:
    """
    Classify a single value.

    Args:
        value: Any Python value

    Returns:
        The value's kind
    """
    if value is None:
        return ValueKind.NULL
    # bool before numbers: bool is a subclass of int
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (datetime, date)):
        return ValueKind.DATE
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.STRING


def is_missing(value: Any) -> bool:
    """Whether a tabular cell counts as missing (None or empty string)."""
    return value is None or (isinstance(value, str) and value == "")


def is_finite_number(value: Any) -> bool:
    """Whether value is a real, finite number (bools excluded)."""
    if classify_value(value) is not ValueKind.NUMBER:
        return False
    try:
        return math.isfinite(value)
    except (TypeError, ValueError, OverflowError):
        return False


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a value as a date.

    Datetimes pass through, dates become midnight, numbers are taken as
    milliseconds since the epoch and strings are parsed leniently. Strings
    must name a year and a month; a missing day means the first.

    Args:
        value: Value to parse

    Returns:
        Parsed datetime, or None if the value is not a valid date
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if is_finite_number(value):
        try:
            return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        first, second = (
            date_parser.parse(value, default=default)
            for default in _REFERENCE_DEFAULTS
        )
    except (ValueError, OverflowError, TypeError):
        return None
    return first if first == second else None


def to_millis(value: datetime) -> float:
    """Milliseconds since the epoch; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() * 1000


def infer_type(
    values: Iterable[Any], date_sample_size: int = DEFAULT_DATE_SAMPLE_SIZE
) -> TypeTag:
    """
    Infer the semantic type of a column from its non-missing values.

    A single primitive kind gives that type. String columns whose leading
    sample all parse as dates are promoted to date. Anything else is mixed.

    Args:
        values: Non-missing column values
        date_sample_size: Number of leading values checked for dates

    Returns:
        Inferred column type (string when there are no values)
    """
    values = list(values)
    if not values:
        return TypeTag.STRING

    kinds = {classify_value(v) for v in values}
    if len(kinds) != 1:
        return TypeTag.MIXED

    kind = kinds.pop()
    tag = _PRIMITIVE_TAGS.get(kind, TypeTag.MIXED)

    if tag is TypeTag.STRING:
        sample = values[:date_sample_size]
        if all(parse_date(v) is not None for v in sample):
            logger.debug(f"Promoting string column to date ({len(sample)} sampled)")
            tag = TypeTag.DATE

    return tag
