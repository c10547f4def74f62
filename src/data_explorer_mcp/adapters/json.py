"""JSON text adapter."""

import logging
from typing import Any

import orjson

from data_explorer_mcp.adapters.base import BaseAdapter
from data_explorer_mcp.errors import InputError

logger = logging.getLogger(__name__)


class JSONAdapter(BaseAdapter):
    """Parses JSON text into Python values."""

    @property
    def format_name(self) -> str:
        return "json"

    def parse(self, text: str) -> Any:
        """
        Parse JSON text.

        Args:
            text: JSON document

        Returns:
            Decoded value

        Raises:
            InputError: If the text is not valid JSON, with its location
        """
        try:
            value = orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise InputError(
                f"Invalid JSON: {e.msg}", position=e.pos, line=e.lineno, column=e.colno
            ) from e

        logger.debug(f"Parsed JSON document of type {type(value).__name__}")
        return value
