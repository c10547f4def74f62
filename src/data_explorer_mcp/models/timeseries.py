"""Time series analysis models."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from .statistics import TrendAnalysis


class TimePoint(BaseModel):
    """A dated observation."""

    date: Any = Field(..., description="Date (datetime or parseable text)")
    value: Any = Field(..., description="Observed value")


class SeriesBounds(BaseModel):
    """Date and value extent, with the value range padded by 10%."""

    min_date: datetime
    max_date: datetime
    min_value: float
    max_value: float
    value_range: float


class SeriesSummary(BaseModel):
    """Basic statistics of the values."""

    mean: float
    min: float
    max: float


class Seasonality(BaseModel):
    """Regular sampling interval detection."""

    detected: bool = Field(..., description="All gaps within 10% of the mean gap")
    period_millis: Optional[float] = Field(
        None, description="Mean gap between observations"
    )


class TimeSeriesAnalysis(BaseModel):
    """Analysis of a dated value series."""

    point_count: int = Field(..., description="Number of valid points")
    stats: SeriesSummary
    bounds: SeriesBounds
    trend: TrendAnalysis = Field(
        ..., description="OLS trend over millisecond timestamps"
    )
    seasonality: Seasonality
    window: int = Field(..., description="Moving average window")
    moving_average: list[float] = Field(default_factory=list)
