"""Ordinary least squares trend estimation."""

from collections.abc import Sequence

from data_explorer_mcp.models.statistics import TrendAnalysis
from data_explorer_mcp.utils.numeric import ieee_divide


def trend_direction(slope: float) -> str:
    """Qualitative direction of a slope."""
    if slope > 0:
        return "increasing"
    if slope < 0:
        return "decreasing"
    return "stable"


def fit_trend(xs: Sequence[float], ys: Sequence[float]) -> TrendAnalysis:
    """
    Fit y = slope * x + intercept by ordinary least squares.

    Args:
        xs: Predictor values
        ys: Response values, same length as xs

    Returns:
        Slope, intercept, direction and strength (absolute slope)

    Raises:
        ValueError: If the sequences are empty or differ in length
    """
    n = len(xs)
    if n == 0 or n != len(ys):
        raise ValueError(
            "Trend needs two non-empty sequences of equal length "
            f"(got {n} and {len(ys)})"
        )

    x_mean = sum(xs) / n
    y_mean = sum(ys) / n

    numerator = 0.0
    denominator = 0.0
    for x, y in zip(xs, ys):
        numerator += (x - x_mean) * (y - y_mean)
        denominator += (x - x_mean) * (x - x_mean)

    slope = ieee_divide(numerator, denominator)
    intercept = y_mean - slope * x_mean

    return TrendAnalysis(
        slope=slope,
        intercept=intercept,
        direction=trend_direction(slope),
        strength=abs(slope),
    )


def fit_index_trend(values: Sequence[float]) -> TrendAnalysis:
    """Fit a trend of values against their position 0..n-1."""
    return fit_trend(range(len(values)), values)
