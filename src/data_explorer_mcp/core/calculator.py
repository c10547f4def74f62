"""Descriptive, distributional and serial statistics for numeric series."""

import logging
import math
from collections.abc import Iterable
from typing import Any, Optional, Union

from data_explorer_mcp.core.inference import is_finite_number
from data_explorer_mcp.core.trend import fit_index_trend
from data_explorer_mcp.models.statistics import (
    CorrelationStats,
    DensityEstimate,
    DescriptiveStats,
    DistributionStats,
    Histogram,
    JarqueBeraResult,
    NormalityTests,
    Quartiles,
    RunsTest,
    ShapiroWilkResult,
    StatisticsResult,
)
from data_explorer_mcp.utils.numeric import ieee_divide

logger = logging.getLogger(__name__)

BinRule = Union[str, int]

SHAPIRO_WILK_MIN_N = 3
SHAPIRO_WILK_MAX_N = 5000
# Simplified Shapiro-Wilk: constant weight per extreme pair and a fixed cut-off
SHAPIRO_WILK_WEIGHT = 1 / math.sqrt(2)
SHAPIRO_WILK_CRITICAL = 0.95
SIGNIFICANCE_LEVEL = 0.05
RUNS_Z_CRITICAL = 1.96

# Abramowitz and Stegun 7.1.26
_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)
_ERF_P = 0.3275911


def erf(x: float) -> float:
    """Approximate error function (max absolute error about 1.5e-7)."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    a1, a2, a3, a4, a5 = _ERF_A
    t = 1.0 / (1.0 + _ERF_P * x)
    y = 1.0 - (((((a5 * t + a4) * t) + a3) * t + a2) * t + a1) * t * math.exp(-x * x)
    return sign * y


def normal_cdf(x: float) -> float:
    """Standard normal CDF through the approximate error function."""
    return 0.5 * (1 + erf(x / math.sqrt(2)))


def chi_square_cdf(x: float, df: int) -> float:
    """Chi-square CDF by the Wilson-Hilferty cube-root approximation."""
    if x <= 0:
        return 0.0
    z = (x / df) ** (1 / 3) - (1 - 2 / (9 * df))
    return normal_cdf(z * math.sqrt(9 * df / 2))


def bin_count(n: int, rule: BinRule = "sturges") -> int:
    """
    Number of histogram bins for n values.

    Args:
        n: Number of values
        rule: "sturges" (default), "rice", "sqrt", or an explicit count

    Returns:
        Bin count (at least 1)
    """
    if isinstance(rule, int) and not isinstance(rule, bool):
        return max(rule, 1)
    if n < 1:
        return 1
    if rule == "rice":
        return math.ceil(2 * n ** (1 / 3))
    if rule == "sqrt":
        return math.ceil(math.sqrt(n))
    return math.ceil(math.log2(n) + 1)


class StatisticalCalculator:
    """Statistics over one numeric series.

    Results are memoized per data version: ``set_data`` replaces the series
    and bumps the version, so cached results never outlive their input.
    """

    def __init__(
        self,
        histogram_bins: BinRule = "sturges",
        bandwidth: Optional[float] = None,
        density_points: int = 100,
        max_lag: int = 10,
    ):
        """
        Initialize statistical calculator.

        Args:
            histogram_bins: Bin rule or explicit bin count
            bandwidth: Kernel bandwidth (Silverman's rule when None)
            density_points: Number of density evaluation points
            max_lag: Largest autocorrelation lag
        """
        self.histogram_bins = histogram_bins
        self.bandwidth = bandwidth
        self.density_points = density_points
        self.max_lag = max_lag

        self._data: tuple[float, ...] = ()
        self._sorted: tuple[float, ...] = ()
        self._version = 0
        self._cache: dict[str, tuple[int, Any]] = {}

    @property
    def data(self) -> tuple[float, ...]:
        """Filtered series in input order."""
        return self._data

    @property
    def sorted_data(self) -> tuple[float, ...]:
        """Filtered series in ascending order."""
        return self._sorted

    @property
    def version(self) -> int:
        """Data version; incremented by every set_data call."""
        return self._version

    def set_data(self, numbers: Iterable[Any]) -> "StatisticalCalculator":
        """
        Replace the series.

        Non-numeric and non-finite entries are dropped silently.

        Args:
            numbers: Values to analyze

        Returns:
            This calculator, for chaining

        Raises:
            TypeError: If numbers is not iterable
        """
        if isinstance(numbers, (str, bytes)) or not isinstance(numbers, Iterable):
            raise TypeError("Input must be an iterable of numbers")

        raw = list(numbers)
        self._data = tuple(float(v) for v in raw if is_finite_number(v))
        self._sorted = tuple(sorted(self._data))
        self._version += 1

        dropped = len(raw) - len(self._data)
        if dropped:
            logger.debug(f"Dropped {dropped} non-numeric values from series")

        return self

    def _memoized(self, key: str, compute):
        cached = self._cache.get(key)
        if cached is not None and cached[0] == self._version:
            return cached[1]
        result = compute()
        self._cache[key] = (self._version, result)
        return result

    def calculate(self) -> StatisticsResult:
        """Compute descriptive, distribution and correlation statistics."""
        return self._memoized(
            "result",
            lambda: StatisticsResult(
                descriptive=self.descriptive(),
                distribution=self.distribution(),
                correlation=self.correlation(),
            ),
        )

    # Percentiles and descriptive statistics

    def percentile(self, p: float) -> float:
        """
        Percentile by linear interpolation between order statistics.

        Args:
            p: Percentile in [0, 100]

        Returns:
            Interpolated value (nan for an empty series)
        """
        n = len(self._sorted)
        if n == 0:
            return math.nan

        index = (p / 100) * (n - 1)
        lower = math.floor(index)
        upper = math.ceil(index)
        if lower == upper:
            return self._sorted[lower]

        weight = index - lower
        return (1 - weight) * self._sorted[lower] + weight * self._sorted[upper]

    def mode(self) -> list[float]:
        """All values tied for the highest frequency, in the order they tie."""
        counts: dict[float, int] = {}
        max_count = 0
        modes: list[float] = []

        for value in self._data:
            count = counts.get(value, 0) + 1
            counts[value] = count
            if count > max_count:
                max_count = count
                modes = [value]
            elif count == max_count:
                modes.append(value)

        return modes

    def descriptive(self) -> Optional[DescriptiveStats]:
        """Location and spread; None for an empty series."""
        return self._memoized("descriptive", self._compute_descriptive)

    def _compute_descriptive(self) -> Optional[DescriptiveStats]:
        n = len(self._data)
        if n == 0:
            return None

        total = sum(self._data)
        mean = total / n
        variance = sum((x - mean) * (x - mean) for x in self._data) / n
        std_dev = math.sqrt(variance)

        q1 = self.percentile(25)
        median = self.percentile(50)
        q3 = self.percentile(75)

        return DescriptiveStats(
            count=n,
            sum=total,
            mean=mean,
            median=median,
            mode=self.mode(),
            variance=variance,
            std_dev=std_dev,
            min=self._sorted[0],
            max=self._sorted[-1],
            range=self._sorted[-1] - self._sorted[0],
            quartiles=Quartiles(q1=q1, q2=median, q3=q3),
            iqr=q3 - q1,
            coefficient_of_variation=ieee_divide(std_dev, mean) * 100,
        )

    # Distribution

    def distribution(self) -> Optional[DistributionStats]:
        """Shape, normality tests, histogram and density; None when empty."""
        return self._memoized("distribution", self._compute_distribution)

    def _compute_distribution(self) -> Optional[DistributionStats]:
        desc = self.descriptive()
        if desc is None:
            return None

        n = desc.count
        z_scores = [ieee_divide(x - desc.mean, desc.std_dev) for x in self._data]
        skewness = sum(z * z * z for z in z_scores) / n
        kurtosis = sum((z * z) * (z * z) for z in z_scores) / n

        return DistributionStats(
            skewness=skewness,
            kurtosis=kurtosis,
            is_normal=abs(skewness) < 0.5 and abs(kurtosis - 3) < 0.5,
            normality_tests=NormalityTests(
                shapiro_wilk=self.shapiro_wilk(),
                jarque_bera=self.jarque_bera(skewness, kurtosis),
            ),
            histogram=self.histogram(self.histogram_bins),
            density_estimation=self.kernel_density(self.bandwidth),
        )

    def histogram(self, bins: BinRule = "sturges") -> Histogram:
        """
        Equal-width histogram spanning [min, max].

        The last bin is closed on the right. When all values are equal the
        bin width is zero and every value falls in the first bin.

        Args:
            bins: Bin rule or explicit bin count

        Returns:
            Bin counts, edges and width
        """
        n = len(self._data)
        num_bins = bin_count(n, bins)
        if n == 0:
            return Histogram(counts=[0] * num_bins, bin_edges=[], bin_width=0.0)

        low, high = self._sorted[0], self._sorted[-1]
        counts = [0] * num_bins
        if math.isfinite(high - low):
            width = step = (high - low) / num_bins
            edges = [low + i * width for i in range(num_bins + 1)]
            offsets = [value - low for value in self._data]
        else:
            # The range overflows a float, so bins are placed on halved values
            width = math.inf
            step = (high / 2 - low / 2) / num_bins
            edges = [2 * (low / 2 + i * step) for i in range(num_bins + 1)]
            offsets = [value / 2 - low / 2 for value in self._data]

        for offset in offsets:
            index = int(offset // step) if step > 0 else 0
            counts[min(index, num_bins - 1)] += 1

        return Histogram(counts=counts, bin_edges=edges, bin_width=width)

    def silverman_bandwidth(self) -> float:
        """Silverman's rule of thumb: 1.06 * std_dev * n^-0.2."""
        desc = self.descriptive()
        if desc is None:
            return math.nan
        return 1.06 * desc.std_dev * desc.count ** -0.2

    def kernel_density(self, bandwidth: Optional[float] = None) -> DensityEstimate:
        """
        Gaussian kernel density estimate over [min, max].

        Args:
            bandwidth: Kernel bandwidth (Silverman's rule when None)

        Returns:
            Evaluation points and densities (nan when the bandwidth is not
            positive)
        """
        n = len(self._data)
        h = self.silverman_bandwidth() if bandwidth is None else bandwidth
        points = self.density_points
        if n == 0:
            return DensityEstimate(x=[], density=[], bandwidth=h)

        low, high = self._sorted[0], self._sorted[-1]
        step = (high / 2 - low / 2) / (points - 1) if points > 1 else 0.0
        xs = [2 * (low / 2 + i * step) for i in range(points)]

        if not h > 0:
            return DensityEstimate(x=xs, density=[math.nan] * points, bandwidth=h)

        norm = math.sqrt(2 * math.pi)
        density = []
        for xi in xs:
            kernel_sum = 0.0
            for value in self._data:
                z = (xi - value) / h
                kernel_sum += math.exp(-0.5 * z * z) / norm
            density.append(kernel_sum / (n * h))

        return DensityEstimate(x=xs, density=density, bandwidth=h)

    def shapiro_wilk(self) -> Optional[ShapiroWilkResult]:
        """
        Simplified Shapiro-Wilk W statistic.

        Uses a constant weight of 1/sqrt(2) per extreme pair instead of the
        tabulated coefficients, so W is only a rough indicator.

        Returns:
            W and whether it falls below 0.95; None unless 3 <= n <= 5000
        """
        n = len(self._data)
        if n < SHAPIRO_WILK_MIN_N or n > SHAPIRO_WILK_MAX_N:
            return None

        mean = self.descriptive().mean
        centered = sorted(x - mean for x in self._data)
        denominator = sum(x * x for x in centered)

        numerator = 0.0
        for i in range(n // 2):
            numerator += SHAPIRO_WILK_WEIGHT * (centered[n - 1 - i] - centered[i])

        w = ieee_divide(numerator * numerator, denominator)
        return ShapiroWilkResult(statistic=w, significant=w < SHAPIRO_WILK_CRITICAL)

    def jarque_bera(self, skewness: float, kurtosis: float) -> JarqueBeraResult:
        """
        Jarque-Bera statistic with a Wilson-Hilferty chi-square p-value.

        Args:
            skewness: Third standardized moment
            kurtosis: Fourth standardized moment

        Returns:
            JB, approximate p-value and significance at 5%
        """
        n = len(self._data)
        excess = kurtosis - 3
        jb = (n / 6) * (skewness * skewness + excess * excess / 4)
        p_value = 1 - chi_square_cdf(jb, 2)
        return JarqueBeraResult(
            statistic=jb, p_value=p_value, significant=p_value < SIGNIFICANCE_LEVEL
        )

    # Serial dependence

    def correlation(self) -> Optional[CorrelationStats]:
        """Autocorrelation, runs test and trend; None for fewer than 2 values."""
        return self._memoized("correlation", self._compute_correlation)

    def _compute_correlation(self) -> Optional[CorrelationStats]:
        n = len(self._data)
        if n < 2:
            return None

        max_lag = min(self.max_lag, n // 3)
        return CorrelationStats(
            autocorrelation=[
                self.autocorrelation(lag) for lag in range(1, max_lag + 1)
            ],
            runs_test=self.runs_test(),
            trend=fit_index_trend(self._data),
        )

    def autocorrelation(self, lag: int) -> float:
        """Sample autocorrelation at the given lag."""
        mean = self.descriptive().mean
        n = len(self._data)

        numerator = sum(
            (self._data[i] - mean) * (self._data[i + lag] - mean)
            for i in range(n - lag)
        )
        denominator = sum((x - mean) * (x - mean) for x in self._data)
        return ieee_divide(numerator, denominator)

    def runs_test(self) -> RunsTest:
        """Runs above/below the mean against the count expected at random."""
        mean = self.descriptive().mean
        signs = [x > mean for x in self._data]

        runs = 1
        for previous, current in zip(signs, signs[1:]):
            if current != previous:
                runs += 1

        n1 = sum(signs)
        n2 = len(signs) - n1
        n = n1 + n2

        expected = ieee_divide(2 * n1 * n2, n) + 1
        variance = ieee_divide(2 * n1 * n2 * (2 * n1 * n2 - n1 - n2), n**2 * (n - 1))
        z_score = ieee_divide(runs - expected, math.sqrt(variance))

        return RunsTest(
            runs=runs,
            expected_runs=expected,
            z_score=z_score,
            is_random=abs(z_score) < RUNS_Z_CRITICAL,
        )
