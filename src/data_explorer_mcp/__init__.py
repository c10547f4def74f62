"""
data_explorer_mcp - Data exploration MCP server

A Model Context Protocol (MCP) server and library that profiles tabular data,
explores nested JSON structures and computes statistics over numeric and
time-series data.
"""

__version__ = "1.0.0"

from .core import (
    ColumnProfiler,
    StatisticalCalculator,
    TableProfiler,
    TimeSeriesAnalyzer,
    TreeWalker,
    diff,
    find_by_pattern,
    fit_trend,
    flatten,
    resolve,
    search,
)
from .errors import InputError
from .models.config import ExplorerConfig

__all__ = [
    "ColumnProfiler",
    "ExplorerConfig",
    "InputError",
    "StatisticalCalculator",
    "TableProfiler",
    "TimeSeriesAnalyzer",
    "TreeWalker",
    "diff",
    "find_by_pattern",
    "fit_trend",
    "flatten",
    "resolve",
    "search",
]
