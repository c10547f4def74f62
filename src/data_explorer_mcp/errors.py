"""Exceptions raised by the data explorer."""

from typing import Optional


class InputError(ValueError):
    """Input text could not be parsed into data for analysis."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        """
        Initialize input error.

        Args:
            message: Human-readable description of the problem
            position: Character offset where parsing failed
            line: 1-based line number where parsing failed
            column: 1-based column number where parsing failed
        """
        super().__init__(message)
        self.message = message
        self.position = position
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"{self.message} (line {self.line}, column {self.column})"
        if self.line is not None:
            return f"{self.message} (line {self.line})"
        if self.position is not None:
            return f"{self.message} (position {self.position})"
        return self.message
