"""Value classification enums and sentinels shared by all analyzers."""

from enum import Enum


class ValueKind(str, Enum):
    """Kind of a single value, as seen by the analyzers."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def is_container(self) -> bool:
        """Whether values of this kind hold children."""
        return self in (ValueKind.OBJECT, ValueKind.ARRAY)


class TypeTag(str, Enum):
    """Inferred semantic type of a whole column."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    MIXED = "mixed"


class _Undefined:
    """Marker for a path that does not exist, distinct from JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<undefined>"


UNDEFINED = _Undefined()
