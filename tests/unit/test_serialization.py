"""Unit tests for JSON serialization."""

import json
import math
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from data_explorer_mcp.core.calculator import StatisticalCalculator
from data_explorer_mcp.models.types import UNDEFINED
from data_explorer_mcp.utils.serialization import convert_value_to_json_safe, dumps

pytestmark = pytest.mark.unit


class TestDumps:
    """Test orjson-based serialization."""

    def test_non_finite_become_null(self):
        """nan and infinities are emitted as null."""
        data = json.loads(dumps({"a": math.nan, "b": math.inf, "c": -math.inf}))
        assert data == {"a": None, "b": None, "c": None}

    def test_special_types(self):
        """Dates, decimals, durations, sets and the undefined marker."""
        data = json.loads(
            dumps(
                {
                    "when": datetime(2024, 1, 2, 3, 4, 5),
                    "day": date(2024, 1, 2),
                    "price": Decimal("1.5"),
                    "elapsed": timedelta(minutes=1),
                    "tags": {"x"},
                    "missing": UNDEFINED,
                }
            )
        )

        assert data == {
            "when": "2024-01-02T03:04:05",
            "day": "2024-01-02",
            "price": 1.5,
            "elapsed": 60.0,
            "tags": ["x"],
            "missing": None,
        }

    def test_models(self):
        """Pydantic models are dumped, degenerate values as null."""
        result = StatisticalCalculator().set_data([3]).calculate()
        data = json.loads(dumps(result))

        assert data["descriptive"]["mean"] == 3
        assert data["distribution"]["skewness"] is None
        assert data["correlation"] is None

    def test_indented(self):
        """Output is indented for readability."""
        assert "\n  " in dumps({"a": 1})

    def test_unserializable(self):
        """Unknown objects are rejected."""
        with pytest.raises(TypeError):
            dumps({"a": object()})


class TestConvertValue:
    """Test conversion to JSON-safe values."""

    def test_converts(self):
        """Values come back as they would be emitted."""
        assert convert_value_to_json_safe(math.nan) is None
        assert convert_value_to_json_safe(Decimal("2")) == 2.0

    def test_fallback_to_string(self):
        """Unserializable values become strings."""
        assert isinstance(convert_value_to_json_safe(object()), str)
