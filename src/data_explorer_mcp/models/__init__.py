"""Pydantic models for analysis results and configuration."""

from .column import (
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
from .config import ExplorerConfig
from .statistics import (
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
    TrendAnalysis,
)
from .timeseries import (
    Seasonality,
    SeriesBounds,
    SeriesSummary,
    TimePoint,
    TimeSeriesAnalysis,
)
from .tree import (
    MAX_DEPTH_EXCEEDED,
    LengthStats,
    NumberStats,
    PathDifference,
    PathEntry,
    StructureStats,
    TreeNode,
    TreeWalkResult,
)
from .types import UNDEFINED, TypeTag, ValueKind

__all__ = [
    "ExplorerConfig",
    "TypeTag",
    "ValueKind",
    "UNDEFINED",
    "TopValue",
    "NumericStats",
    "StringStats",
    "DateStats",
    "BooleanStats",
    "MixedStats",
    "ColumnStats",
    "DatasetSummary",
    "TableProfile",
    "MAX_DEPTH_EXCEEDED",
    "TreeNode",
    "PathEntry",
    "LengthStats",
    "NumberStats",
    "StructureStats",
    "TreeWalkResult",
    "PathDifference",
    "Quartiles",
    "DescriptiveStats",
    "ShapiroWilkResult",
    "JarqueBeraResult",
    "NormalityTests",
    "Histogram",
    "DensityEstimate",
    "DistributionStats",
    "RunsTest",
    "TrendAnalysis",
    "CorrelationStats",
    "StatisticsResult",
    "TimePoint",
    "SeriesBounds",
    "SeriesSummary",
    "Seasonality",
    "TimeSeriesAnalysis",
]
