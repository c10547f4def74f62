"""Delimited text adapter with dynamic typing of cells."""

import csv
import io
import logging
import re
from typing import Any, Optional

from dateutil import parser as date_parser

from data_explorer_mcp.adapters.base import BaseAdapter
from data_explorer_mcp.errors import InputError

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = ",;\t|"
DEFAULT_DELIMITER = ","
SNIFF_SAMPLE_CHARS = 8192

BOOLEAN_LITERALS = {"true": True, "TRUE": True, "false": False, "FALSE": False}
INTEGER_PATTERN = re.compile(r"^\s*-?\d+\s*$")
FLOAT_PATTERN = re.compile(r"^\s*-?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")
# Only full timestamps are converted; bare dates stay text for type inference
ISO_TIMESTAMP_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"
)


def convert_cell(text: str) -> Any:
    """
    Convert one cell to a typed value.

    Args:
        text: Raw cell text

    Returns:
        None for empty cells, bool, int, float or datetime where the text is
        an exact literal of that type, otherwise the text unchanged
    """
    if text == "":
        return None
    if text in BOOLEAN_LITERALS:
        return BOOLEAN_LITERALS[text]
    if INTEGER_PATTERN.match(text):
        return int(text)
    if FLOAT_PATTERN.match(text):
        return float(text)
    if ISO_TIMESTAMP_PATTERN.match(text):
        try:
            return date_parser.isoparse(text)
        except (ValueError, OverflowError):
            return text
    return text


class CSVAdapter(BaseAdapter):
    """Parses delimited text with a header row into row records."""

    def __init__(self, delimiter: Optional[str] = None, dynamic_typing: bool = True):
        """
        Initialize CSV adapter.

        Args:
            delimiter: Field delimiter; sniffed from the text when None
            dynamic_typing: Convert cells to bool, numbers and datetimes
        """
        self.delimiter = delimiter
        self.dynamic_typing = dynamic_typing

    @property
    def format_name(self) -> str:
        return "csv"

    def detect_delimiter(self, text: str) -> str:
        """Guess the delimiter from a leading sample of the text."""
        sample = text[:SNIFF_SAMPLE_CHARS]
        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS)
        except csv.Error:
            logger.debug(f"Could not sniff delimiter; using {DEFAULT_DELIMITER!r}")
            return DEFAULT_DELIMITER
        return dialect.delimiter

    def parse(self, text: str) -> list[dict[str, Any]]:
        """
        Parse delimited text into row records.

        Empty lines are skipped. Rows shorter than the header leave their
        trailing keys absent; fields beyond the header are dropped.

        Args:
            text: Delimited text, first non-empty line is the header

        Returns:
            One dict per data row, keyed by header name

        Raises:
            InputError: If quoting is malformed or there is no header row
        """
        delimiter = self.delimiter or self.detect_delimiter(text)
        reader = csv.reader(io.StringIO(text), delimiter=delimiter, strict=True)

        header: Optional[list[str]] = None
        rows: list[dict[str, Any]] = []
        extra_field_rows = 0

        try:
            for record in reader:
                if not record or record == [""]:
                    continue

                if header is None:
                    header = [name.strip() for name in record]
                    continue

                if len(record) > len(header):
                    extra_field_rows += 1
                    record = record[: len(header)]

                rows.append(
                    {
                        name: self._convert(field)
                        for name, field in zip(header, record)
                    }
                )
        except csv.Error as e:
            raise InputError(
                f"Malformed delimited text: {e}", line=reader.line_num
            ) from e

        if header is None:
            raise InputError("Delimited text has no header row")

        if extra_field_rows:
            logger.warning(
                f"Dropped extra fields from {extra_field_rows} rows "
                f"longer than the {len(header)}-column header"
            )

        logger.debug(f"Parsed {len(rows)} rows with delimiter {delimiter!r}")
        return rows

    def _convert(self, field: str) -> Any:
        if self.dynamic_typing:
            return convert_cell(field)
        return field if field != "" else None
