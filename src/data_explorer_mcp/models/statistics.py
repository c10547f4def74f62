"""Numeric series statistics models."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class Quartiles(BaseModel):
    """First, second and third quartiles."""

    q1: float = Field(..., description="25th percentile")
    q2: float = Field(..., description="50th percentile (median)")
    q3: float = Field(..., description="75th percentile")


class DescriptiveStats(BaseModel):
    """Location and spread of a numeric series."""

    count: int = Field(..., description="Number of values")
    sum: float = Field(..., description="Sum of values")
    mean: float = Field(..., description="Arithmetic mean")
    median: float = Field(..., description="Median (interpolated 50th percentile)")
    mode: list[float] = Field(
        default_factory=list, description="Values tied for the highest frequency"
    )
    variance: float = Field(..., description="Population variance")
    std_dev: float = Field(..., description="Population standard deviation")
    min: float = Field(..., description="Minimum value")
    max: float = Field(..., description="Maximum value")
    range: float = Field(..., description="max - min")
    quartiles: Quartiles = Field(..., description="Quartiles")
    iqr: float = Field(..., description="Interquartile range (q3 - q1)")
    coefficient_of_variation: float = Field(
        ..., description="100 * std_dev / mean"
    )


class ShapiroWilkResult(BaseModel):
    """Simplified Shapiro-Wilk statistic."""

    statistic: float = Field(..., description="W statistic")
    significant: bool = Field(..., description="W below the 0.95 cut-off")


class JarqueBeraResult(BaseModel):
    """Jarque-Bera statistic with approximate p-value."""

    statistic: float = Field(..., description="JB statistic")
    p_value: float = Field(..., description="Approximate p-value (chi-square, 2 df)")
    significant: bool = Field(..., description="p-value below 0.05")


class NormalityTests(BaseModel):
    """Normality test results."""

    shapiro_wilk: Optional[ShapiroWilkResult] = Field(
        None, description="Only computed for 3 <= n <= 5000"
    )
    jarque_bera: JarqueBeraResult


class Histogram(BaseModel):
    """Equal-width histogram."""

    counts: list[int] = Field(..., description="Values per bin")
    bin_edges: list[float] = Field(..., description="Bin edges (len(counts) + 1)")
    bin_width: float = Field(..., description="Width of each bin")

    @property
    def bin_count(self) -> int:
        """Number of bins."""
        return len(self.counts)


class DensityEstimate(BaseModel):
    """Gaussian kernel density estimate."""

    x: list[float] = Field(..., description="Evaluation points")
    density: list[float] = Field(..., description="Estimated density at each point")
    bandwidth: float = Field(..., description="Kernel bandwidth")


class DistributionStats(BaseModel):
    """Shape of a numeric series."""

    skewness: float = Field(..., description="Third standardized moment")
    kurtosis: float = Field(..., description="Fourth standardized moment")
    is_normal: bool = Field(..., description="Skewness and excess kurtosis near 0")
    normality_tests: NormalityTests
    histogram: Histogram
    density_estimation: DensityEstimate


class RunsTest(BaseModel):
    """Wald-Wolfowitz runs test about the mean."""

    runs: int = Field(..., description="Observed runs")
    expected_runs: float = Field(..., description="Expected runs under randomness")
    z_score: float = Field(..., description="Standardized difference")
    is_random: bool = Field(..., description="|z| below 1.96")


class TrendAnalysis(BaseModel):
    """Ordinary least squares linear trend."""

    slope: float = Field(..., description="OLS slope")
    intercept: float = Field(..., description="OLS intercept")
    direction: Literal["increasing", "decreasing", "stable"] = Field(
        ..., description="Sign of the slope"
    )
    strength: float = Field(..., description="Absolute slope")

    def predict(self, x: float) -> float:
        """Evaluate the fitted line at x."""
        return self.slope * x + self.intercept


class CorrelationStats(BaseModel):
    """Serial dependence of a numeric series."""

    autocorrelation: list[float] = Field(
        default_factory=list, description="Autocorrelation for lags 1..k"
    )
    runs_test: RunsTest
    trend: TrendAnalysis


class StatisticsResult(BaseModel):
    """Full statistics of a numeric series."""

    descriptive: Optional[DescriptiveStats] = Field(
        None, description="Empty series yields None"
    )
    distribution: Optional[DistributionStats] = Field(
        None, description="Empty series yields None"
    )
    correlation: Optional[CorrelationStats] = Field(
        None, description="Fewer than two values yields None"
    )
