"""Pytest configuration and shared fixtures for data explorer tests"""

from typing import Any

import pytest

from data_explorer_mcp.models.config import ExplorerConfig
from data_explorer_mcp.server import DataExplorerMCPServer


# ==================== Configuration Fixtures ====================


@pytest.fixture
def explorer_config() -> ExplorerConfig:
    """Default explorer configuration"""
    return ExplorerConfig()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep EXPLORER_* variables from the developer's shell out of tests"""
    for name in (
        "EXPLORER_MAX_DEPTH",
        "EXPLORER_TOP_VALUES",
        "EXPLORER_DATE_SAMPLE_SIZE",
        "EXPLORER_HISTOGRAM_BINS",
        "EXPLORER_DENSITY_POINTS",
        "EXPLORER_MAX_LAG",
        "EXPLORER_CSV_DELIMITER",
        "EXPLORER_MAX_RESPONSE_CHARS",
    ):
        monkeypatch.delenv(name, raising=False)


# ==================== Data Fixtures ====================


@pytest.fixture
def three_rows() -> list[dict[str, Any]]:
    """Small table with one null in a numeric column"""
    return [
        {"a": 1, "b": "x"},
        {"a": 2, "b": "y"},
        {"a": None, "b": "z"},
    ]


@pytest.fixture
def sales_csv() -> str:
    """Delimited text covering every column type"""
    return (
        "id,region,amount,active,created\n"
        "1,north,10.5,true,2024-01-01\n"
        "2,south,20,false,2024-01-02\n"
        "3,north,,true,2024-01-03\n"
        "\n"
        "4,east,-5,TRUE,2024-01-04\n"
    )


@pytest.fixture
def nested_document() -> dict[str, Any]:
    """Nested JSON-like document"""
    return {
        "name": "inventory",
        "version": 2,
        "owner": None,
        "items": [
            {"sku": "A-1", "qty": 3, "tags": ["red", "small"]},
            {"sku": "B-2", "qty": 0, "tags": []},
        ],
        "meta": {"active": True, "ratio": 0.5},
    }


@pytest.fixture
def daily_points() -> list[dict[str, Any]]:
    """Evenly spaced daily series with a rising trend"""
    return [
        {"date": f"2024-01-{day:02d}", "value": float(day)} for day in range(1, 13)
    ]


def deep_list(depth: int) -> Any:
    """Value whose single leaf sits at the given depth"""
    value: Any = 1
    for _ in range(depth):
        value = [value]
    return value


@pytest.fixture
def make_deep_list():
    """Factory for nested arrays of a given depth"""
    return deep_list


# ==================== Server Fixtures ====================


@pytest.fixture
def server(explorer_config: ExplorerConfig) -> DataExplorerMCPServer:
    """Server instance for calling handlers directly"""
    return DataExplorerMCPServer(explorer_config)


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Pure function and model tests")
    config.addinivalue_line(
        "markers", "module: Component and server handler tests"
    )
    config.addinivalue_line("markers", "integration: MCP protocol round trips")
