"""Column statistics and tabular profiling models."""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from .types import TypeTag


class TopValue(BaseModel):
    """A value and how often it occurs."""

    value: Any = Field(..., description="The value")
    count: int = Field(..., description="Number of occurrences")


class NumericStats(BaseModel):
    """Statistics for a numeric column."""

    type: Literal["number"] = "number"
    min: Optional[float] = Field(None, description="Minimum value")
    max: Optional[float] = Field(None, description="Maximum value")
    mean: Optional[float] = Field(None, description="Arithmetic mean")
    median: Optional[float] = Field(None, description="Median value")
    std_dev: Optional[float] = Field(
        None, description="Population standard deviation"
    )
    zeros: int = Field(0, description="Number of values equal to zero")
    negative: int = Field(0, description="Number of values below zero")


class StringStats(BaseModel):
    """Statistics for a text column."""

    type: Literal["string"] = "string"
    min_length: Optional[int] = Field(None, description="Shortest value length")
    max_length: Optional[int] = Field(None, description="Longest value length")
    avg_length: Optional[float] = Field(None, description="Average value length")
    empty: int = Field(0, description="Number of empty strings")
    top_values: list[TopValue] = Field(
        default_factory=list, description="Most frequent values with counts"
    )


class DateStats(BaseModel):
    """Statistics for a date column."""

    type: Literal["date"] = "date"
    earliest: Optional[datetime] = Field(None, description="Earliest valid date")
    latest: Optional[datetime] = Field(None, description="Latest valid date")
    range_millis: Optional[float] = Field(
        None, description="Milliseconds between earliest and latest"
    )
    invalid_dates: int = Field(0, description="Values that failed to parse")

    @property
    def range_days(self) -> Optional[float]:
        """Date range in days."""
        if self.range_millis is None:
            return None
        return self.range_millis / 86_400_000


class BooleanStats(BaseModel):
    """Statistics for a boolean column."""

    type: Literal["boolean"] = "boolean"
    true_count: int = Field(..., description="Number of true values")
    false_count: int = Field(..., description="Number of false values")
    true_percentage: float = Field(..., description="Share of true values (0-100)")


class MixedStats(BaseModel):
    """Statistics for a column holding several kinds of values."""

    type: Literal["mixed"] = "mixed"
    type_distribution: dict[str, int] = Field(
        ..., description="Number of values per value kind"
    )
    predominant_type: Optional[str] = Field(
        None, description="Most frequent value kind"
    )


TypeSpecificStats = Annotated[
    Union[NumericStats, StringStats, DateStats, BooleanStats, MixedStats],
    Field(discriminator="type"),
]


class ColumnStats(BaseModel):
    """Statistical information about a column."""

    name: str = Field(..., description="Column name")
    type: TypeTag = Field(..., description="Inferred column type")
    count: int = Field(..., description="Number of non-missing values")
    unique: int = Field(..., description="Number of distinct non-missing values")
    missing: int = Field(..., description="Number of missing values")
    stats: Optional[TypeSpecificStats] = Field(
        None, description="Type-specific statistics"
    )
    warning: Optional[str] = Field(
        None, description="Warning message if stats unavailable"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "age",
                    "type": "number",
                    "count": 9950,
                    "unique": 78,
                    "missing": 50,
                    "stats": {
                        "type": "number",
                        "min": 18,
                        "max": 95,
                        "mean": 42.5,
                        "median": 41,
                        "std_dev": 15.2,
                        "zeros": 0,
                        "negative": 0,
                    },
                    "warning": None,
                }
            ]
        }
    }


class DatasetSummary(BaseModel):
    """Dataset-level summary of a tabular profile."""

    row_count: int = Field(..., description="Number of rows")
    column_count: int = Field(..., description="Number of columns")
    completeness_percent: float = Field(
        ..., description="Share of non-missing cells (0-100)"
    )
    type_distribution: dict[str, int] = Field(
        default_factory=dict, description="Number of columns per inferred type"
    )
    memory_size_estimate_bytes: int = Field(
        ..., description="Rough in-memory size of the values"
    )


class TableProfile(BaseModel):
    """Profile of a tabular dataset."""

    summary: DatasetSummary = Field(..., description="Dataset-level summary")
    columns: dict[str, ColumnStats] = Field(
        default_factory=dict, description="Per-column statistics keyed by name"
    )

    def get_columns_by_type(self, type_tag: TypeTag) -> list[ColumnStats]:
        """Get all columns inferred as the given type."""
        return [col for col in self.columns.values() if col.type == type_tag]
