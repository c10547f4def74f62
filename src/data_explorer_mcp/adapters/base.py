"""Base adapter abstract class for input format implementations."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAdapter(ABC):
    """Base adapter turning input text into data for the analyzers."""

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short name of the handled format."""
        ...

    @abstractmethod
    def parse(self, text: str) -> Any:
        """
        Parse input text.

        Args:
            text: Raw input text

        Returns:
            Parsed data in the shape the matching analyzer expects

        Raises:
            InputError: If the text is malformed
        """
        ...
