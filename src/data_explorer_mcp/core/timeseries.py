"""Dated value series analysis."""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional, Union

from data_explorer_mcp.core.inference import parse_date, to_millis
from data_explorer_mcp.core.trend import fit_trend
from data_explorer_mcp.models.timeseries import (
    Seasonality,
    SeriesBounds,
    SeriesSummary,
    TimePoint,
    TimeSeriesAnalysis,
)

logger = logging.getLogger(__name__)

MAX_WINDOW = 5
# Value bounds are widened by this share of the range on each side
BOUNDS_PADDING = 0.1
# Gaps within this share of the mean gap count as regular
SEASONALITY_TOLERANCE = 0.1


def moving_average(values: list[float], window: int) -> list[float]:
    """Trailing mean over each full window; empty when window < 1."""
    if window < 1:
        return []
    return [
        sum(values[i - window + 1 : i + 1]) / window
        for i in range(window - 1, len(values))
    ]


def detect_seasonality(timestamps: list[float]) -> Seasonality:
    """Detect a regular sampling interval from consecutive timestamp gaps."""
    gaps = [b - a for a, b in zip(timestamps, timestamps[1:])]
    if not gaps:
        return Seasonality(detected=False)

    mean_gap = sum(gaps) / len(gaps)
    detected = all(
        abs(gap - mean_gap) < mean_gap * SEASONALITY_TOLERANCE for gap in gaps
    )
    return Seasonality(detected=detected, period_millis=mean_gap)


class TimeSeriesAnalyzer:
    """Bounds, moving average, trend and seasonality of a dated series."""

    def __init__(self):
        self._points: list[tuple[datetime, float]] = []

    def set_data(
        self, points: Iterable[Union[Mapping[str, Any], TimePoint]]
    ) -> "TimeSeriesAnalyzer":
        """
        Load points, dropping those with an invalid date or value.

        Args:
            points: ``{"date": ..., "value": ...}`` mappings or TimePoint models

        Returns:
            This analyzer
        """
        cleaned = []
        dropped = 0

        for point in points:
            if isinstance(point, TimePoint):
                raw_date, raw_value = point.date, point.value
            else:
                raw_date, raw_value = point.get("date"), point.get("value")

            parsed = parse_date(raw_date)
            value = self._to_float(raw_value)
            if parsed is None or value is None:
                dropped += 1
                continue
            cleaned.append((parsed, value))

        if dropped:
            logger.debug(f"Dropped {dropped} points with invalid date or value")

        cleaned.sort(key=lambda point: to_millis(point[0]))
        self._points = cleaned
        return self

    @staticmethod
    def _to_float(value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    def analyze(self) -> Optional[TimeSeriesAnalysis]:
        """
        Analyze the loaded series.

        Returns:
            The analysis, or None when no valid points are loaded
        """
        if not self._points:
            return None

        dates = [d for d, _ in self._points]
        values = [v for _, v in self._points]
        timestamps = [to_millis(d) for d in dates]
        n = len(values)

        min_value = min(values)
        max_value = max(values)
        value_range = max_value - min_value
        padding = value_range * BOUNDS_PADDING

        window = min(MAX_WINDOW, n // 3)

        return TimeSeriesAnalysis(
            point_count=n,
            stats=SeriesSummary(mean=sum(values) / n, min=min_value, max=max_value),
            bounds=SeriesBounds(
                min_date=dates[0],
                max_date=dates[-1],
                min_value=min_value - padding,
                max_value=max_value + padding,
                value_range=value_range + padding * 2,
            ),
            trend=fit_trend(timestamps, values),
            seasonality=detect_seasonality(timestamps),
            window=window,
            moving_average=moving_average(values, window),
        )
