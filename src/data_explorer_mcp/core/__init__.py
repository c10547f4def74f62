"""Analysis layer for tabular, nested and numeric data."""

from .calculator import StatisticalCalculator
from .inference import classify_value, infer_type, is_missing, parse_date
from .paths import UNDEFINED, diff, find_by_pattern, flatten, resolve, search
from .profiler import ColumnAccumulator, ColumnProfiler, TableAccumulator, TableProfiler
from .timeseries import TimeSeriesAnalyzer
from .trend import fit_index_trend, fit_trend
from .walker import TreeWalker

__all__ = [
    "ColumnAccumulator",
    "ColumnProfiler",
    "StatisticalCalculator",
    "TableAccumulator",
    "TableProfiler",
    "TimeSeriesAnalyzer",
    "TreeWalker",
    "UNDEFINED",
    "classify_value",
    "diff",
    "find_by_pattern",
    "fit_index_trend",
    "fit_trend",
    "flatten",
    "infer_type",
    "is_missing",
    "parse_date",
    "resolve",
    "search",
]
