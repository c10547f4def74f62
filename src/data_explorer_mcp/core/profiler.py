"""Column and table profiling for tabular data."""

import logging
import math
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any, Optional

import orjson

from data_explorer_mcp.core.inference import (
    DEFAULT_DATE_SAMPLE_SIZE,
    classify_value,
    infer_type,
    is_finite_number,
    is_missing,
    parse_date,
    to_millis,
)
from data_explorer_mcp.models.column import (
    BooleanStats,
    ColumnStats,
    DatasetSummary,
    DateStats,
    MixedStats,
    NumericStats,
    StringStats,
    TableProfile,
    TopValue,
)
from data_explorer_mcp.models.types import TypeTag, ValueKind

logger = logging.getLogger(__name__)

DEFAULT_TOP_VALUES = 5

# Rough per-value memory cost in bytes; strings cost 2 bytes per character
BOOLEAN_BYTES = 1
DEFAULT_VALUE_BYTES = 8


def estimate_value_size(value: Any) -> int:
    """Estimate the in-memory size of one cell value in bytes."""
    kind = classify_value(value)
    if kind is ValueKind.STRING:
        return len(value) * 2
    if kind is ValueKind.BOOLEAN:
        return BOOLEAN_BYTES
    return DEFAULT_VALUE_BYTES


def _unique_key(value: Any) -> tuple[str, Any]:
    # Kind is part of the key so that True and 1 stay distinct
    kind = classify_value(value)
    try:
        hash(value)
    except TypeError:
        return kind.value, orjson.dumps(value, default=str, option=orjson.OPT_SORT_KEYS)
    return kind.value, value


def _median(sorted_numbers: list[float]) -> float:
    mid = len(sorted_numbers) // 2
    if len(sorted_numbers) % 2 == 0:
        return (sorted_numbers[mid - 1] + sorted_numbers[mid]) / 2
    return sorted_numbers[mid]


class ColumnAccumulator:
    """Incremental state for one column.

    Values are fed one at a time with ``update``; accumulators built over
    separate chunks of the same column can be combined with ``merge``.
    """

    def __init__(self, name: str):
        self.name = name
        self.values: list[Any] = []
        self.missing = 0
        self._unique_keys: set[tuple[str, Any]] = set()

    @property
    def count(self) -> int:
        """Number of non-missing values seen."""
        return len(self.values)

    @property
    def unique(self) -> int:
        """Number of distinct non-missing values seen."""
        return len(self._unique_keys)

    def update(self, value: Any) -> None:
        """Add one cell value."""
        if is_missing(value):
            self.missing += 1
            return
        self.values.append(value)
        self._unique_keys.add(_unique_key(value))

    def add_missing(self, count: int) -> None:
        """Record cells that were absent from their rows."""
        self.missing += count

    def merge(self, other: "ColumnAccumulator") -> "ColumnAccumulator":
        """Fold another accumulator of the same column into this one."""
        self.values.extend(other.values)
        self.missing += other.missing
        self._unique_keys |= other._unique_keys
        return self


class ColumnProfiler:
    """Type inference and type-specific statistics for a single column."""

    def __init__(
        self,
        top_values_limit: int = DEFAULT_TOP_VALUES,
        date_sample_size: int = DEFAULT_DATE_SAMPLE_SIZE,
    ):
        """
        Initialize column profiler.

        Args:
            top_values_limit: Number of most frequent values kept for strings
            date_sample_size: Leading values checked before promoting to date
        """
        self.top_values_limit = top_values_limit
        self.date_sample_size = date_sample_size

    def profile(self, name: str, values: Iterable[Any]) -> ColumnStats:
        """
        Profile a named sequence of values.

        Args:
            name: Column name
            values: Column values, missing cells (None or "") included

        Returns:
            Column statistics for the inferred type
        """
        accumulator = ColumnAccumulator(name)
        for value in values:
            accumulator.update(value)
        return self.finalize(accumulator)

    def finalize(self, accumulator: ColumnAccumulator) -> ColumnStats:
        """
        Build column statistics from a filled accumulator.

        Args:
            accumulator: Accumulated column state

        Returns:
            Column statistics for the inferred type
        """
        values = accumulator.values
        type_tag = infer_type(values, self.date_sample_size)

        builders = {
            TypeTag.NUMBER: self.numeric_stats,
            TypeTag.STRING: self.string_stats,
            TypeTag.DATE: self.date_stats,
            TypeTag.BOOLEAN: self.boolean_stats,
            TypeTag.MIXED: self.mixed_stats,
        }

        return ColumnStats(
            name=accumulator.name,
            type=type_tag,
            count=accumulator.count,
            unique=accumulator.unique,
            missing=accumulator.missing,
            stats=builders[type_tag](values),
        )

    def numeric_stats(self, values: list[Any]) -> NumericStats:
        """Min, max, mean, median, population std dev, zeros and negatives."""
        numbers = [float(v) for v in values if is_finite_number(v)]
        if not numbers:
            return NumericStats()

        sorted_numbers = sorted(numbers)
        mean = sum(numbers) / len(numbers)
        variance = sum((v - mean) * (v - mean) for v in numbers) / len(numbers)

        return NumericStats(
            min=sorted_numbers[0],
            max=sorted_numbers[-1],
            mean=mean,
            median=_median(sorted_numbers),
            std_dev=math.sqrt(variance),
            zeros=sum(1 for v in numbers if v == 0),
            negative=sum(1 for v in numbers if v < 0),
        )

    def string_stats(self, values: list[Any]) -> StringStats:
        """Length distribution and most frequent values."""
        if not values:
            return StringStats()

        lengths = [len(str(v)) for v in values]
        frequency: Counter = Counter()
        first_seen: dict[tuple[str, Any], Any] = {}
        for value in values:
            key = _unique_key(value)
            frequency[key] += 1
            first_seen.setdefault(key, value)

        return StringStats(
            min_length=min(lengths),
            max_length=max(lengths),
            avg_length=sum(lengths) / len(lengths),
            empty=sum(1 for v in values if v == ""),
            top_values=[
                TopValue(value=first_seen[key], count=count)
                for key, count in frequency.most_common(self.top_values_limit)
            ],
        )

    def date_stats(self, values: list[Any]) -> DateStats:
        """Earliest, latest, range and unparseable values."""
        parsed = [parse_date(v) for v in values]
        valid = [d for d in parsed if d is not None]
        invalid = len(parsed) - len(valid)

        if not valid:
            return DateStats(invalid_dates=invalid)

        earliest = min(valid, key=to_millis)
        latest = max(valid, key=to_millis)

        return DateStats(
            earliest=earliest,
            latest=latest,
            range_millis=to_millis(latest) - to_millis(earliest),
            invalid_dates=invalid,
        )

    def boolean_stats(self, values: list[Any]) -> BooleanStats:
        """True and false counts."""
        total = len(values)
        true_count = sum(1 for v in values if v is True)
        return BooleanStats(
            true_count=true_count,
            false_count=total - true_count,
            true_percentage=(true_count / total) * 100 if total else 0.0,
        )

    def mixed_stats(self, values: list[Any]) -> MixedStats:
        """Value kind distribution and the predominant kind."""
        kinds = Counter(classify_value(v).value for v in values)
        predominant = kinds.most_common(1)
        return MixedStats(
            type_distribution=dict(kinds),
            predominant_type=predominant[0][0] if predominant else None,
        )


class TableAccumulator:
    """Incremental state for a whole table, fed chunk by chunk."""

    def __init__(self) -> None:
        self.columns: dict[str, ColumnAccumulator] = {}
        self.row_count = 0
        self.memory_size = 0

    def update(self, rows: Iterable[Mapping[str, Any]]) -> "TableAccumulator":
        """
        Add a chunk of rows.

        The column set is taken from the first row ever seen; keys absent
        from later rows count as missing.

        Args:
            rows: Row records mapping column name to value

        Returns:
            This accumulator
        """
        for row in rows:
            if not self.columns and self.row_count == 0:
                self.columns = {name: ColumnAccumulator(name) for name in row.keys()}

            self.row_count += 1
            for value in row.values():
                self.memory_size += estimate_value_size(value)

            for name, column in self.columns.items():
                if name in row:
                    column.update(row[name])
                else:
                    column.add_missing(1)

        return self

    def merge(self, other: "TableAccumulator") -> "TableAccumulator":
        """
        Fold an accumulator built over a later chunk into this one.

        Args:
            other: Accumulator for rows that follow this one's rows

        Returns:
            This accumulator
        """
        if self.row_count == 0:
            self.columns = other.columns
        else:
            for name, column in self.columns.items():
                if name in other.columns:
                    column.merge(other.columns[name])
                else:
                    column.add_missing(other.row_count)

        self.row_count += other.row_count
        self.memory_size += other.memory_size
        return self


class TableProfiler:
    """Per-column profiling and dataset summary for tabular data."""

    def __init__(self, column_profiler: Optional[ColumnProfiler] = None):
        """
        Initialize table profiler.

        Args:
            column_profiler: Profiler used for each column
        """
        self.column_profiler = column_profiler or ColumnProfiler()

    def profile(self, rows: Iterable[Mapping[str, Any]]) -> TableProfile:
        """
        Profile a table held in memory.

        Args:
            rows: Row records mapping column name to value

        Returns:
            Dataset summary and per-column statistics
        """
        return self.profile_chunks([rows])

    def profile_chunks(
        self, chunks: Iterable[Iterable[Mapping[str, Any]]]
    ) -> TableProfile:
        """
        Profile a table delivered in consecutive chunks of rows.

        Args:
            chunks: Chunks of row records, in table order

        Returns:
            Dataset summary and per-column statistics
        """
        accumulator = TableAccumulator()
        for chunk in chunks:
            accumulator.update(chunk)
        return self.finalize(accumulator)

    def finalize(self, accumulator: TableAccumulator) -> TableProfile:
        """
        Build the table profile from a filled accumulator.

        One column failing to profile does not prevent the others.

        Args:
            accumulator: Accumulated table state

        Returns:
            Dataset summary and per-column statistics
        """
        columns: dict[str, ColumnStats] = {}

        for name, column in accumulator.columns.items():
            try:
                columns[name] = self.column_profiler.finalize(column)
            except Exception as e:
                logger.warning(f"Failed to profile column {name}: {e}")
                columns[name] = ColumnStats(
                    name=name,
                    type=TypeTag.MIXED,
                    count=column.count,
                    unique=column.unique,
                    missing=column.missing,
                    warning=f"Failed to analyze: {str(e)}",
                )

        summary = self._summarize(accumulator, columns)
        logger.debug(
            f"Profiled {summary.row_count} rows x {summary.column_count} columns"
        )
        return TableProfile(summary=summary, columns=columns)

    def _summarize(
        self, accumulator: TableAccumulator, columns: dict[str, ColumnStats]
    ) -> DatasetSummary:
        total_cells = accumulator.row_count * len(columns)
        missing_cells = sum(col.missing for col in columns.values())
        completeness = (
            ((total_cells - missing_cells) / total_cells) * 100 if total_cells else 0.0
        )

        type_distribution: dict[str, int] = {}
        for col in columns.values():
            type_distribution[col.type.value] = (
                type_distribution.get(col.type.value, 0) + 1
            )

        return DatasetSummary(
            row_count=accumulator.row_count,
            column_count=len(columns),
            completeness_percent=completeness,
            type_distribution=type_distribution,
            memory_size_estimate_bytes=accumulator.memory_size,
        )
