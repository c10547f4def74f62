"""Data Explorer MCP Server

A Model Context Protocol (MCP) server providing exploratory statistics for
tabular (CSV), hierarchical (JSON) and numeric / time-series data.
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

from dotenv import load_dotenv
from mcp.server import Server
from mcp.types import TextContent, Tool

from data_explorer_mcp.adapters import create_adapter, detect_format
from data_explorer_mcp.core import (
    ColumnProfiler,
    StatisticalCalculator,
    TableProfiler,
    TimeSeriesAnalyzer,
    TreeWalker,
    diff,
    find_by_pattern,
    flatten,
    resolve,
    search,
)
from data_explorer_mcp.errors import InputError
from data_explorer_mcp.models import UNDEFINED, ExplorerConfig
from data_explorer_mcp.utils.files import load_input
from data_explorer_mcp.utils.serialization import dumps

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("EXPLORER_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Response size limits (in characters) for MCP tool responses
# These limits prevent context window exhaustion while preserving useful information
MAX_RESPONSE_RESOLVE_PATH = 3000  # Single value lookup
MAX_RESPONSE_FIND_PATHS = 5000  # Matching path entries
MAX_RESPONSE_CALCULATE_STATISTICS = 8000  # Descriptive, distribution, correlation
MAX_RESPONSE_ANALYZE_TIMESERIES = 8000  # Series analysis with moving average
MAX_RESPONSE_DIFF_JSON = 8000  # Path differences
MAX_RESPONSE_ANALYZE_CSV = 10000  # Per-column statistics
MAX_RESPONSE_EXPLORE_JSON = 10000  # Structure, stats and path index

# Shared input schema properties
CONTENT_PROPERTY = {
    "type": "string",
    "description": "Inline input text (takes precedence over path)",
}
PATH_PROPERTY = {
    "type": "string",
    "description": "Path to an input file",
}


def truncate_json_response(data: str, max_length: int) -> str:
    """
    Truncate JSON response to a maximum length while preserving JSON structure.

    Args:
        data: JSON string to truncate
        max_length: Maximum length in characters

    Returns:
        Truncated JSON string with truncation notice if needed
    """
    if len(data) <= max_length:
        return data

    truncation_msg = f"\n\n... [Response truncated: {len(data)} chars -> {max_length} chars to preserve context window]"
    available_length = max_length - len(truncation_msg)

    if available_length < 100:
        return json.dumps(
            {
                "error": "Response too large",
                "original_size": len(data),
                "limit": max_length,
                "message": "Response exceeds size limit. Please narrow the request (pattern, path or smaller input).",
            },
            indent=2,
        )

    truncated = data[:available_length]

    # Prefer cutting at a line end in the last 20%
    last_newline = truncated.rfind("\n")
    if last_newline > available_length * 0.8:
        truncated = truncated[:last_newline]

    return truncated + truncation_msg


class DataExplorerMCPServer:
    """MCP server for data exploration."""

    def __init__(self, config: ExplorerConfig):
        """
        Initialize data explorer MCP server.

        Args:
            config: Explorer configuration
        """
        self.config = config
        self.table_profiler = TableProfiler(
            ColumnProfiler(
                top_values_limit=config.top_values_limit,
                date_sample_size=config.date_sample_size,
            )
        )
        self.walker = TreeWalker(max_depth=config.max_depth)
        self.server = Server("data-explorer-mcp")

    def register_handlers(self) -> None:
        """Register the list_tools and call_tool handlers with the MCP server."""
        handlers = {
            "analyze_csv": self.handle_analyze_csv,
            "explore_json": self.handle_explore_json,
            "find_json_paths": self.handle_find_json_paths,
            "resolve_json_path": self.handle_resolve_json_path,
            "diff_json": self.handle_diff_json,
            "calculate_statistics": self.handle_calculate_statistics,
            "analyze_timeseries": self.handle_analyze_timeseries,
        }

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return self.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            handler = handlers.get(name)
            if handler is None:
                raise ValueError(f"Unknown tool: {name}")

            return await handler(arguments)

        logger.info(f"Initialized data explorer MCP server ({len(handlers)} tools)")

    def _text_response(self, payload: Any, limit: int) -> list[TextContent]:
        response = dumps(payload)
        return [
            TextContent(
                type="text",
                text=truncate_json_response(
                    response, min(limit, self.config.max_response_chars)
                ),
            )
        ]

    async def _load_json(
        self,
        arguments: dict[str, Any],
        content_key: str = "content",
        path_key: str = "path",
    ) -> Any:
        text = await load_input(arguments, content_key, path_key)
        return create_adapter("json").parse(text)

    def list_tools(self) -> list[Tool]:
        """All tools offered by this server."""
        return [
            self._create_analyze_csv_tool(),
            self._create_explore_json_tool(),
            self._create_find_json_paths_tool(),
            self._create_resolve_json_path_tool(),
            self._create_diff_json_tool(),
            self._create_calculate_statistics_tool(),
            self._create_analyze_timeseries_tool(),
        ]

    def _create_analyze_csv_tool(self) -> Tool:
        """Create analyze_csv tool."""
        return Tool(
            name="analyze_csv",
            description="Profile delimited text: per-column type, counts, missing values and type-specific statistics, plus a dataset summary",
            inputSchema={
                "type": "object",
                "properties": {
                    "content": CONTENT_PROPERTY,
                    "path": PATH_PROPERTY,
                    "delimiter": {
                        "type": "string",
                        "description": "Field delimiter (detected automatically if not specified)",
                    },
                },
                "required": [],
            },
        )

    def _create_explore_json_tool(self) -> Tool:
        """Create explore_json tool."""
        return Tool(
            name="explore_json",
            description="Walk a JSON document: structure statistics, structural tree and optionally the flattened path index",
            inputSchema={
                "type": "object",
                "properties": {
                    "content": CONTENT_PROPERTY,
                    "path": PATH_PROPERTY,
                    "include_structure": {
                        "type": "boolean",
                        "description": "Whether to include the structural tree (default: true)",
                        "default": True,
                    },
                    "include_paths": {
                        "type": "boolean",
                        "description": "Whether to include the flattened leaf values by path (default: false)",
                        "default": False,
                    },
                },
                "required": [],
            },
        )

    def _create_find_json_paths_tool(self) -> Tool:
        """Create find_json_paths tool."""
        return Tool(
            name="find_json_paths",
            description="Find paths in a JSON document by wildcard pattern (e.g. users.*.name) or by text in keys and values",
            inputSchema={
                "type": "object",
                "properties": {
                    "content": CONTENT_PROPERTY,
                    "path": PATH_PROPERTY,
                    "pattern": {
                        "type": "string",
                        "description": "Dot-separated pattern where * matches one segment",
                    },
                    "text": {
                        "type": "string",
                        "description": "Case-insensitive text to find in keys or leaf values",
                    },
                },
                "required": [],
            },
        )

    def _create_resolve_json_path_tool(self) -> Tool:
        """Create resolve_json_path tool."""
        return Tool(
            name="resolve_json_path",
            description="Get the value at a dot-separated path (keys and array indices) in a JSON document",
            inputSchema={
                "type": "object",
                "properties": {
                    "content": CONTENT_PROPERTY,
                    "path": PATH_PROPERTY,
                    "json_path": {
                        "type": "string",
                        "description": "Path such as users.0.name (empty for the root)",
                    },
                },
                "required": ["json_path"],
            },
        )

    def _create_diff_json_tool(self) -> Tool:
        """Create diff_json tool."""
        return Tool(
            name="diff_json",
            description="Compare two JSON documents and list added, removed and changed paths",
            inputSchema={
                "type": "object",
                "properties": {
                    "original": {"type": "string", "description": "Original JSON text"},
                    "original_path": {
                        "type": "string",
                        "description": "Path to the original JSON file",
                    },
                    "modified": {"type": "string", "description": "Modified JSON text"},
                    "modified_path": {
                        "type": "string",
                        "description": "Path to the modified JSON file",
                    },
                },
                "required": [],
            },
        )

    def _create_calculate_statistics_tool(self) -> Tool:
        """Create calculate_statistics tool."""
        return Tool(
            name="calculate_statistics",
            description="Descriptive statistics, distribution shape, normality tests, histogram, density estimate, autocorrelation, runs test and trend for a list of numbers",
            inputSchema={
                "type": "object",
                "properties": {
                    "values": {
                        "type": "array",
                        "items": {"type": "number"},
                        "description": "Numbers to analyze",
                    },
                    "content": {
                        "type": "string",
                        "description": "Numbers separated by commas, semicolons or whitespace, or a JSON array",
                    },
                    "path": PATH_PROPERTY,
                    "histogram_bins": {
                        "type": ["string", "integer"],
                        "description": "Bin rule (sturges, rice, sqrt) or bin count",
                    },
                    "bandwidth": {
                        "type": "number",
                        "description": "Kernel density bandwidth (Silverman's rule if not specified)",
                    },
                },
                "required": [],
            },
        )

    def _create_analyze_timeseries_tool(self) -> Tool:
        """Create analyze_timeseries tool."""
        return Tool(
            name="analyze_timeseries",
            description="Analyze a dated series: bounds, moving average, linear trend and sampling regularity",
            inputSchema={
                "type": "object",
                "properties": {
                    "points": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "date": {"type": ["string", "number"]},
                                "value": {"type": ["number", "string"]},
                            },
                        },
                        "description": "Points with date and value",
                    },
                    "content": {
                        "type": "string",
                        "description": "CSV text or a JSON array of records",
                    },
                    "path": PATH_PROPERTY,
                    "date_column": {
                        "type": "string",
                        "description": "Field holding the date (default: date)",
                        "default": "date",
                    },
                    "value_column": {
                        "type": "string",
                        "description": "Field holding the value (default: value)",
                        "default": "value",
                    },
                },
                "required": [],
            },
        )

    async def handle_analyze_csv(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle analyze_csv request."""
        text = await load_input(arguments)
        delimiter = arguments.get("delimiter") or self.config.csv_delimiter

        rows = create_adapter("csv", delimiter=delimiter).parse(text)
        profile = self.table_profiler.profile(rows)

        return self._text_response(profile, MAX_RESPONSE_ANALYZE_CSV)

    async def handle_explore_json(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle explore_json request."""
        document = await self._load_json(arguments)
        result = self.walker.walk(document)

        response: dict[str, Any] = {"stats": result.stats.model_dump()}
        if arguments.get("include_structure", True):
            response["structure"] = result.structure.model_dump(exclude_none=True)
        if arguments.get("include_paths", False):
            response["paths"] = flatten(result.paths)

        return self._text_response(response, MAX_RESPONSE_EXPLORE_JSON)

    async def handle_find_json_paths(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle find_json_paths request."""
        pattern = arguments.get("pattern")
        text = arguments.get("text")
        if pattern is None and not text:
            raise InputError("Either 'pattern' or 'text' must be provided")

        document = await self._load_json(arguments)
        paths = self.walker.walk(document).paths

        matches = list(paths.values())
        if pattern is not None:
            matches = find_by_pattern(paths, pattern)
        if text:
            found = {entry.path for entry in search(paths, text)}
            matches = [entry for entry in matches if entry.path in found]

        response = {
            "count": len(matches),
            "matches": [entry.model_dump(exclude_none=True) for entry in matches],
        }
        return self._text_response(response, MAX_RESPONSE_FIND_PATHS)

    async def handle_resolve_json_path(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle resolve_json_path request."""
        document = await self._load_json(arguments)
        json_path = arguments.get("json_path", "")

        value = resolve(document, json_path)

        response = {
            "path": json_path,
            "found": value is not UNDEFINED,
            "value": value,
        }
        return self._text_response(response, MAX_RESPONSE_RESOLVE_PATH)

    async def handle_diff_json(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle diff_json request."""
        original = await self._load_json(arguments, "original", "original_path")
        modified = await self._load_json(arguments, "modified", "modified_path")

        differences = diff(original, modified, max_depth=self.config.max_depth)

        summary: dict[str, int] = {"added": 0, "removed": 0, "changed": 0}
        for difference in differences:
            summary[difference.kind] += 1

        response = {
            "summary": summary,
            "differences": [d.model_dump() for d in differences],
        }
        return self._text_response(response, MAX_RESPONSE_DIFF_JSON)

    async def handle_calculate_statistics(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle calculate_statistics request."""
        values = arguments.get("values")
        if values is None:
            text = await load_input(arguments)
            values = create_adapter("numbers").parse(text)

        calculator = StatisticalCalculator(
            histogram_bins=self._histogram_bins(arguments.get("histogram_bins")),
            bandwidth=arguments.get("bandwidth"),
            density_points=self.config.density_points,
            max_lag=self.config.max_autocorrelation_lag,
        )
        result = calculator.set_data(values).calculate()

        return self._text_response(result, MAX_RESPONSE_CALCULATE_STATISTICS)

    def _histogram_bins(self, requested: Optional[Any]) -> Any:
        if requested is None:
            return self.config.histogram_bins
        # Validated by the config model
        return ExplorerConfig(histogram_bins=requested).histogram_bins

    async def handle_analyze_timeseries(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle analyze_timeseries request."""
        points = arguments.get("points")
        if points is None:
            points = await self._load_points(arguments)

        analysis = TimeSeriesAnalyzer().set_data(points).analyze()

        response = analysis if analysis is not None else {
            "point_count": 0,
            "message": "No points with a valid date and value",
        }
        return self._text_response(response, MAX_RESPONSE_ANALYZE_TIMESERIES)

    async def _load_points(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        text = await load_input(arguments)
        date_column = arguments.get("date_column", "date")
        value_column = arguments.get("value_column", "value")

        path = arguments.get("path")
        if arguments.get("content") is None and path:
            fmt = detect_format(path)
        else:
            fmt = "json" if text.lstrip().startswith("[") else "csv"

        records = create_adapter(fmt, delimiter=self.config.csv_delimiter).parse(text)
        if not isinstance(records, list):
            raise InputError("Time series input must be a list of records")

        return [
            {"date": record.get(date_column), "value": record.get(value_column)}
            for record in records
            if isinstance(record, dict)
        ]


async def main() -> None:
    """Main entry point for the MCP server."""
    config = ExplorerConfig.from_env()

    mcp_server = DataExplorerMCPServer(config)
    mcp_server.register_handlers()

    # Run the server
    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )
    finally:
        logger.info("Data explorer MCP server shut down")


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'data-explorer-mcp' console script.
    It sets up the event loop and runs the async main() function.
    """
    # Windows-specific event loop policy
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
