"""Input adapters for the supported text formats."""

from pathlib import PurePath
from typing import Optional

from .base import BaseAdapter
from .csv import CSVAdapter
from .json import JSONAdapter
from .numbers import NumbersAdapter

__all__ = [
    "BaseAdapter",
    "CSVAdapter",
    "JSONAdapter",
    "NumbersAdapter",
    "create_adapter",
    "detect_format",
]

EXTENSION_FORMATS = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".json": "json",
}


def detect_format(filename: str) -> str:
    """
    Detect input format from a file name.

    Args:
        filename: File name or path

    Returns:
        Format name (csv, json)

    Raises:
        ValueError: If the extension is not recognized
    """
    suffix = PurePath(filename).suffix.lower()
    fmt = EXTENSION_FORMATS.get(suffix)
    if fmt is None:
        raise ValueError(
            f"Unsupported file extension: {suffix or '(none)'}. "
            f"Supported extensions: {', '.join(EXTENSION_FORMATS.keys())}"
        )
    return fmt


def create_adapter(fmt: str, delimiter: Optional[str] = None) -> BaseAdapter:
    """
    Factory function to create the adapter for an input format.

    Args:
        fmt: Format name (csv, json, numbers)
        delimiter: CSV delimiter; sniffed when None

    Returns:
        Adapter instance

    Raises:
        ValueError: If the format is not supported
    """
    adapters = {
        "csv": lambda: CSVAdapter(delimiter=delimiter),
        "json": JSONAdapter,
        "numbers": NumbersAdapter,
    }

    factory = adapters.get(fmt)

    if factory is None:
        raise ValueError(
            f"Unsupported input format: {fmt}. "
            f"Supported formats: {', '.join(adapters.keys())}"
        )

    return factory()
