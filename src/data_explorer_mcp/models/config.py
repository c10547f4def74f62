"""Explorer configuration model."""

import os
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

BIN_RULES = {"sturges", "rice", "sqrt"}


class ExplorerConfig(BaseModel):
    """Configuration for the analyzers and the MCP server."""

    max_depth: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Deepest nesting level the JSON walker descends into",
    )
    top_values_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of most frequent values reported for string columns",
    )
    date_sample_size: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Leading string values checked before promoting a column to date",
    )
    histogram_bins: Union[int, str] = Field(
        default="sturges",
        description="Histogram bin rule (sturges, rice, sqrt) or explicit bin count",
    )
    density_points: int = Field(
        default=100,
        ge=2,
        le=10000,
        description="Number of points the kernel density estimate is evaluated at",
    )
    max_autocorrelation_lag: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Largest lag reported in the autocorrelation function",
    )
    csv_delimiter: Optional[str] = Field(
        default=None,
        description="Delimiter for tabular input (sniffed when not set)",
    )
    max_response_chars: int = Field(
        default=10000,
        ge=500,
        le=1_000_000,
        description="Maximum size of a single MCP tool response",
    )

    @field_validator("histogram_bins")
    @classmethod
    def validate_histogram_bins(cls, v: Union[int, str]) -> Union[int, str]:
        """Validate histogram bin rule or count."""
        if isinstance(v, str):
            if v.isdigit():
                v = int(v)
            elif v.lower() in BIN_RULES:
                return v.lower()
            else:
                raise ValueError(
                    f"Unknown histogram bin rule: {v}. "
                    f"Supported: {', '.join(sorted(BIN_RULES))} or a positive integer"
                )
        if v < 1:
            raise ValueError("Histogram bin count must be a positive integer")
        return v

    @field_validator("csv_delimiter")
    @classmethod
    def validate_csv_delimiter(cls, v: Optional[str]) -> Optional[str]:
        """Validate delimiter is a single character."""
        if v is not None and len(v) != 1:
            raise ValueError("CSV delimiter must be a single character")
        return v

    @classmethod
    def from_env(cls) -> "ExplorerConfig":
        """Build configuration from EXPLORER_* environment variables."""
        fields = {
            "max_depth": "EXPLORER_MAX_DEPTH",
            "top_values_limit": "EXPLORER_TOP_VALUES",
            "date_sample_size": "EXPLORER_DATE_SAMPLE_SIZE",
            "histogram_bins": "EXPLORER_HISTOGRAM_BINS",
            "density_points": "EXPLORER_DENSITY_POINTS",
            "max_autocorrelation_lag": "EXPLORER_MAX_LAG",
            "csv_delimiter": "EXPLORER_CSV_DELIMITER",
            "max_response_chars": "EXPLORER_MAX_RESPONSE_CHARS",
        }
        values = {
            name: os.environ[env_name]
            for name, env_name in fields.items()
            if os.environ.get(env_name)
        }
        return cls(**values)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "max_depth": 20,
                    "top_values_limit": 5,
                    "date_sample_size": 10,
                    "histogram_bins": "sturges",
                    "density_points": 100,
                    "max_autocorrelation_lag": 10,
                    "csv_delimiter": None,
                    "max_response_chars": 10000,
                }
            ]
        }
    }
