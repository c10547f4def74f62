"""Unit tests for the statistical calculator."""

import math
import random

import pytest

from data_explorer_mcp.core.calculator import (
    StatisticalCalculator,
    bin_count,
    chi_square_cdf,
    erf,
    normal_cdf,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def one_to_five() -> StatisticalCalculator:
    """Calculator loaded with 1..5"""
    return StatisticalCalculator().set_data([1, 2, 3, 4, 5])


class TestDescriptive:
    """Test location and spread statistics."""

    def test_one_to_five(self, one_to_five):
        """Known values for 1..5."""
        desc = one_to_five.descriptive()

        assert desc.count == 5
        assert desc.sum == 15
        assert desc.mean == 3
        assert desc.median == 3
        assert desc.variance == pytest.approx(2)
        assert desc.std_dev == pytest.approx(math.sqrt(2))
        assert desc.quartiles.q1 == 2
        assert desc.quartiles.q2 == 3
        assert desc.quartiles.q3 == 4
        assert desc.iqr == 2
        assert desc.range == 4
        assert desc.coefficient_of_variation == pytest.approx(100 * math.sqrt(2) / 3)

    def test_percentile_interpolation(self):
        """Percentiles interpolate between order statistics."""
        calc = StatisticalCalculator().set_data([10, 20, 30, 40])

        assert calc.percentile(0) == 10
        assert calc.percentile(100) == 40
        assert calc.percentile(50) == 25
        assert calc.percentile(25) == pytest.approx(17.5)

    def test_median_matches_percentile_and_order(self):
        """Median is P50 and does not depend on input order."""
        rng = random.Random(7)
        values = [rng.uniform(-100, 100) for _ in range(51)]
        shuffled = values[:]
        rng.shuffle(shuffled)

        first = StatisticalCalculator().set_data(values)
        second = StatisticalCalculator().set_data(shuffled)

        assert first.descriptive().median == first.percentile(50)
        assert first.descriptive().median == second.descriptive().median

    @pytest.mark.parametrize(
        "values",
        [[5], [1, 1, 1], [-3, 0, 10, 2.5], [1e6, -1e6, 3, 7, 7, 7]],
    )
    def test_ordering_bounds(self, values):
        """min <= mean <= max and min <= median <= max."""
        desc = StatisticalCalculator().set_data(values).descriptive()

        assert desc.min <= desc.mean <= desc.max
        assert desc.min <= desc.median <= desc.max

    def test_mode_order(self):
        """Tied modes are listed in the order they reach the top count."""
        calc = StatisticalCalculator().set_data([3, 1, 3, 1, 2])
        assert calc.mode() == [3, 1]

    def test_all_unique_mode(self, one_to_five):
        """With no repeats every value is a mode."""
        assert one_to_five.mode() == [1, 2, 3, 4, 5]

    def test_zero_mean_coefficient(self):
        """Zero mean gives an infinite coefficient of variation."""
        desc = StatisticalCalculator().set_data([-1, 1]).descriptive()
        assert math.isinf(desc.coefficient_of_variation)


class TestDistribution:
    """Test shape, normality, histogram and density."""

    def test_shape(self, one_to_five):
        """Symmetric data has zero skew; kurtosis is not bias corrected."""
        dist = one_to_five.distribution()

        assert dist.skewness == pytest.approx(0, abs=1e-12)
        assert dist.kurtosis == pytest.approx(1.7)
        assert dist.is_normal is False

    def test_shapiro_wilk(self, one_to_five):
        """Simplified W uses constant weights."""
        sw = one_to_five.distribution().normality_tests.shapiro_wilk

        assert sw.statistic == pytest.approx(1.8)
        assert sw.significant is False

    def test_shapiro_wilk_size_limits(self):
        """W is only reported for 3..5000 values."""
        assert StatisticalCalculator().set_data([1, 2]).shapiro_wilk() is None
        assert StatisticalCalculator().set_data([1, 2, 3]).shapiro_wilk() is not None

    def test_jarque_bera(self, one_to_five):
        """JB from skewness and excess kurtosis."""
        jb = one_to_five.distribution().normality_tests.jarque_bera

        assert jb.statistic == pytest.approx(5 / 6 * (1.3 * 1.3) / 4)
        assert 0 < jb.p_value <= 1
        assert jb.significant is False

    def test_histogram(self, one_to_five):
        """Sturges bins over [min, max] with the last bin closed."""
        hist = one_to_five.distribution().histogram

        assert hist.bin_count == 4
        assert hist.counts == [1, 1, 1, 2]
        assert hist.bin_edges == [1, 2, 3, 4, 5]
        assert hist.bin_width == 1

    def test_explicit_bins(self, one_to_five):
        """An explicit bin count overrides the rule."""
        hist = one_to_five.histogram(2)
        assert hist.counts == [2, 3]
        assert sum(hist.counts) == 5

    def test_constant_histogram(self):
        """Constant data puts every value in the first bin."""
        hist = StatisticalCalculator().set_data([4, 4, 4]).histogram()
        assert hist.counts[0] == 3
        assert hist.bin_width == 0

    def test_overflowing_range(self):
        """Finite extremes whose range overflows still bin without raising."""
        result = StatisticalCalculator().set_data([-1e308, 1e308]).calculate()
        hist = result.distribution.histogram

        assert result.descriptive.range == math.inf
        assert hist.counts == [1, 1]
        assert hist.bin_edges[0] == -1e308
        assert hist.bin_edges[-1] == 1e308
        assert hist.bin_width == math.inf
        density = result.distribution.density_estimation
        assert density.x[0] == -1e308
        assert density.x[-1] == pytest.approx(1e308)

    def test_density(self, one_to_five):
        """Density uses Silverman's bandwidth at the configured points."""
        density = one_to_five.distribution().density_estimation

        assert density.bandwidth == pytest.approx(1.06 * math.sqrt(2) * 5**-0.2)
        assert len(density.x) == 100
        assert density.x[0] == 1
        assert density.x[-1] == pytest.approx(5)
        assert all(d > 0 for d in density.density)

    def test_density_custom_bandwidth(self):
        """Bandwidth and point count can be overridden."""
        calc = StatisticalCalculator(bandwidth=0.5, density_points=10)
        density = calc.set_data([1, 2, 3]).kernel_density(calc.bandwidth)

        assert density.bandwidth == 0.5
        assert len(density.density) == 10

    def test_degenerate_density(self):
        """Zero bandwidth gives nan densities instead of raising."""
        density = StatisticalCalculator().set_data([2, 2]).kernel_density()
        assert all(math.isnan(d) for d in density.density)

    def test_single_value(self):
        """One value gives nan shape statistics without raising."""
        dist = StatisticalCalculator().set_data([7]).distribution()

        assert math.isnan(dist.skewness)
        assert dist.histogram.counts == [1]


class TestCorrelation:
    """Test serial dependence statistics."""

    def test_one_to_five(self, one_to_five):
        """Autocorrelation lags, runs test and trend for 1..5."""
        corr = one_to_five.correlation()

        assert corr.autocorrelation == [pytest.approx(0.4)]
        assert corr.runs_test.runs == 2
        assert corr.runs_test.expected_runs == pytest.approx(3.4)
        assert corr.runs_test.z_score == pytest.approx(-1.4 / math.sqrt(0.84))
        assert corr.runs_test.is_random is True
        assert corr.trend.slope == pytest.approx(1)
        assert corr.trend.intercept == pytest.approx(1)
        assert corr.trend.direction == "increasing"

    def test_lag_limit(self):
        """Lags stop at min(max_lag, n // 3)."""
        values = list(range(60))
        correlation = StatisticalCalculator().set_data(values).correlation()
        assert len(correlation.autocorrelation) == 10
        calc = StatisticalCalculator(max_lag=3).set_data(values)
        assert len(calc.correlation().autocorrelation) == 3

    def test_alternating_is_not_random(self):
        """Strict alternation has too many runs."""
        values = [0, 1] * 20
        runs = StatisticalCalculator().set_data(values).runs_test()

        assert runs.runs == 40
        assert runs.is_random is False

    def test_too_short(self):
        """Fewer than two values gives no correlation."""
        assert StatisticalCalculator().set_data([1]).correlation() is None


class TestDataHandling:
    """Test input filtering, empty input and memoization."""

    def test_filters_non_numbers(self):
        """Non-numeric and non-finite values are dropped."""
        calc = StatisticalCalculator().set_data([1, "x", None, True, float("nan"), 2])
        assert calc.data == (1.0, 2.0)

    @pytest.mark.parametrize("value", ["1,2,3", b"123", 5, None])
    def test_rejects_non_iterables(self, value):
        """Strings and non-iterables are rejected."""
        with pytest.raises(TypeError):
            StatisticalCalculator().set_data(value)

    def test_empty(self):
        """Empty input gives an empty result."""
        result = StatisticalCalculator().set_data([]).calculate()

        assert result.descriptive is None
        assert result.distribution is None
        assert result.correlation is None

    def test_memoized_per_version(self):
        """Results are cached until the data changes."""
        calc = StatisticalCalculator().set_data([1, 2, 3])
        first = calc.calculate()

        assert calc.calculate() is first
        assert calc.descriptive() is first.descriptive

        calc.set_data([4, 5, 6])
        second = calc.calculate()
        assert second is not first
        assert second.descriptive.mean == 5
        assert calc.version == 2

    def test_set_data_chains(self):
        """set_data returns the calculator."""
        calc = StatisticalCalculator()
        assert calc.set_data([1]) is calc


class TestHelpers:
    """Test numeric helper functions."""

    @pytest.mark.parametrize(
        "n,rule,expected",
        [
            (100, "sturges", 8),
            (100, "rice", 10),
            (100, "sqrt", 10),
            (100, 6, 6),
            (0, "sturges", 1),
        ],
    )
    def test_bin_count(self, n, rule, expected):
        """Bin rules and explicit counts."""
        assert bin_count(n, rule) == expected

    def test_erf(self):
        """Approximate erf is close to the exact values."""
        assert erf(0) == pytest.approx(0, abs=1e-7)
        assert erf(1) == pytest.approx(math.erf(1), abs=1e-6)
        assert erf(-1) == pytest.approx(-math.erf(1), abs=1e-6)

    def test_normal_cdf(self):
        """Standard normal CDF at well known points."""
        assert normal_cdf(0) == pytest.approx(0.5, abs=1e-7)
        assert normal_cdf(1.96) == pytest.approx(0.975, abs=1e-3)

    def test_chi_square_cdf(self):
        """Wilson-Hilferty approximation for two degrees of freedom."""
        assert chi_square_cdf(0, 2) == 0
        # Exact CDF is 1 - exp(-x/2) for df=2
        assert chi_square_cdf(5.991, 2) == pytest.approx(0.95, abs=0.01)
