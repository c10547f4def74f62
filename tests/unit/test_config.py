"""Unit tests for configuration and input errors."""

import pytest
from pydantic import ValidationError

from data_explorer_mcp.errors import InputError
from data_explorer_mcp.models.config import ExplorerConfig

pytestmark = pytest.mark.unit


class TestExplorerConfig:
    """Test configuration validation and environment loading."""

    def test_defaults(self):
        """Defaults match the analyzers' defaults."""
        config = ExplorerConfig()

        assert config.max_depth == 20
        assert config.top_values_limit == 5
        assert config.date_sample_size == 10
        assert config.histogram_bins == "sturges"
        assert config.density_points == 100
        assert config.max_autocorrelation_lag == 10
        assert config.csv_delimiter is None

    @pytest.mark.parametrize(
        "value,expected", [("RICE", "rice"), ("sqrt", "sqrt"), ("12", 12), (7, 7)]
    )
    def test_histogram_bins(self, value, expected):
        """Bin rules are normalized and digit strings become counts."""
        assert ExplorerConfig(histogram_bins=value).histogram_bins == expected

    @pytest.mark.parametrize("value", ["scott", 0, -3])
    def test_invalid_histogram_bins(self, value):
        """Unknown rules and non-positive counts are rejected."""
        with pytest.raises(ValidationError):
            ExplorerConfig(histogram_bins=value)

    def test_invalid_delimiter(self):
        """Delimiters must be one character."""
        with pytest.raises(ValidationError):
            ExplorerConfig(csv_delimiter=";;")

    def test_bounds(self):
        """Numeric fields are range checked."""
        with pytest.raises(ValidationError):
            ExplorerConfig(max_depth=0)
        with pytest.raises(ValidationError):
            ExplorerConfig(max_response_chars=10)

    def test_from_env(self, monkeypatch):
        """EXPLORER_* variables override defaults."""
        monkeypatch.setenv("EXPLORER_MAX_DEPTH", "5")
        monkeypatch.setenv("EXPLORER_HISTOGRAM_BINS", "sqrt")
        monkeypatch.setenv("EXPLORER_CSV_DELIMITER", ";")

        config = ExplorerConfig.from_env()

        assert config.max_depth == 5
        assert config.histogram_bins == "sqrt"
        assert config.csv_delimiter == ";"
        assert config.top_values_limit == 5

    def test_from_env_ignores_empty(self, monkeypatch):
        """Empty variables fall back to defaults."""
        monkeypatch.setenv("EXPLORER_MAX_DEPTH", "")
        assert ExplorerConfig.from_env().max_depth == 20


class TestInputError:
    """Test input error formatting."""

    def test_line_and_column(self):
        """Line and column are appended when known."""
        error = InputError("bad", position=4, line=2, column=3)
        assert str(error) == "bad (line 2, column 3)"

    def test_line_only(self):
        """Line alone is appended."""
        assert str(InputError("bad", line=7)) == "bad (line 7)"

    def test_position_only(self):
        """Position is used without a line."""
        assert str(InputError("bad", position=9)) == "bad (position 9)"

    def test_plain(self):
        """Message alone otherwise."""
        error = InputError("bad")
        assert str(error) == "bad"
        assert error.message == "bad"
