"""Utility modules for the data explorer MCP server."""

from data_explorer_mcp.utils.files import load_input, read_text
from data_explorer_mcp.utils.numeric import ieee_divide, is_nan
from data_explorer_mcp.utils.serialization import convert_value_to_json_safe, dumps

__all__ = [
    "convert_value_to_json_safe",
    "dumps",
    "ieee_divide",
    "is_nan",
    "load_input",
    "read_text",
]
