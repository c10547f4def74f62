"""Number list adapter."""

import logging
import math
import re
from typing import Any

import orjson

from data_explorer_mcp.adapters.base import BaseAdapter

logger = logging.getLogger(__name__)

SEPARATOR_PATTERN = re.compile(r"[,;\s]+")


class NumbersAdapter(BaseAdapter):
    """Parses a list of numbers from separated text or a JSON array."""

    @property
    def format_name(self) -> str:
        return "numbers"

    def parse(self, text: str) -> list[float]:
        """
        Parse numbers, dropping tokens that are not finite numbers.

        Args:
            text: Numbers separated by commas, semicolons or whitespace,
                or a JSON array

        Returns:
            Parsed numbers in input order
        """
        stripped = text.strip()
        if stripped.startswith("["):
            try:
                tokens: list[Any] = orjson.loads(stripped)
            except orjson.JSONDecodeError:
                tokens = SEPARATOR_PATTERN.split(stripped.strip("[]"))
        else:
            tokens = SEPARATOR_PATTERN.split(stripped)

        numbers = []
        dropped = 0
        for token in tokens:
            if token == "":
                continue
            number = self._to_number(token)
            if number is None:
                dropped += 1
            else:
                numbers.append(number)

        if dropped:
            logger.debug(f"Dropped {dropped} non-numeric tokens")
        return numbers

    @staticmethod
    def _to_number(token: Any):
        if isinstance(token, bool) or token is None:
            return None
        try:
            number = float(token)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None
