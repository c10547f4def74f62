"""MCP Protocol-Level Server Testing

Tests the DataExplorerMCPServer through the MCP SDK's ClientSession over
in-memory anyio streams. This validates:
- Tool registration through list_tools
- Tool input schemas as seen by a client
- Tool call handling through the MCP protocol
- Error reporting for bad input at the protocol layer
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import anyio
import pytest
from mcp import ClientSession

from data_explorer_mcp.models.config import ExplorerConfig
from data_explorer_mcp.server import DataExplorerMCPServer

pytestmark = pytest.mark.integration


@asynccontextmanager
async def connected_client(config: ExplorerConfig) -> AsyncIterator[ClientSession]:
    """Run a server in the background and yield an initialized client."""
    server = DataExplorerMCPServer(config)
    server.register_handlers()

    server_to_client_send, server_to_client_recv = (
        anyio.create_memory_object_stream(100)
    )
    client_to_server_send, client_to_server_recv = (
        anyio.create_memory_object_stream(100)
    )

    async def run_server():
        async with server_to_client_send, client_to_server_recv:
            await server.server.run(
                client_to_server_recv,
                server_to_client_send,
                server.server.create_initialization_options(),
            )

    async with anyio.create_task_group() as tg:
        tg.start_soon(run_server)
        async with server_to_client_recv, client_to_server_send:
            async with ClientSession(
                server_to_client_recv, client_to_server_send
            ) as client:
                await client.initialize()
                yield client
        tg.cancel_scope.cancel()


def parse_result(result) -> Any:
    """Parse the JSON text of a successful tool result."""
    assert not result.isError, result.content[0].text
    assert len(result.content) == 1
    return json.loads(result.content[0].text)


class TestToolListing:
    """Test tool discovery over the protocol."""

    async def test_list_tools(self, explorer_config):
        """All tools are discoverable with schemas."""
        async with connected_client(explorer_config) as client:
            result = await client.list_tools()

        names = {tool.name for tool in result.tools}
        assert names == {
            "analyze_csv",
            "explore_json",
            "find_json_paths",
            "resolve_json_path",
            "diff_json",
            "calculate_statistics",
            "analyze_timeseries",
        }
        resolve_tool = next(t for t in result.tools if t.name == "resolve_json_path")
        assert resolve_tool.inputSchema["required"] == ["json_path"]


class TestToolCalls:
    """Test tool execution over the protocol."""

    async def test_analyze_csv(self, explorer_config):
        """Tabular profiling round trip."""
        content = "a,b\n1,x\n2,y\n,z\n"
        async with connected_client(explorer_config) as client:
            result = await client.call_tool("analyze_csv", {"content": content})
            data = parse_result(result)

        a = data["columns"]["a"]
        assert (a["type"], a["count"], a["missing"]) == ("number", 2, 1)
        assert a["stats"]["mean"] == 1.5
        assert data["columns"]["b"]["unique"] == 3

    async def test_json_workflow(self, explorer_config, nested_document):
        """Explore, find and resolve against the same document."""
        content = json.dumps(nested_document)
        async with connected_client(explorer_config) as client:
            explored = parse_result(
                await client.call_tool("explore_json", {"content": content})
            )
            found = parse_result(
                await client.call_tool(
                    "find_json_paths", {"content": content, "pattern": "items.*.qty"}
                )
            )
            resolved = parse_result(
                await client.call_tool(
                    "resolve_json_path",
                    {"content": content, "json_path": found["matches"][0]["path"]},
                )
            )

        assert explored["stats"]["array_count"] == 3
        assert found["count"] == 2
        assert resolved["value"] == 3

    async def test_calculate_statistics(self, explorer_config):
        """Statistics round trip with degenerate values as null."""
        async with connected_client(explorer_config) as client:
            data = parse_result(
                await client.call_tool("calculate_statistics", {"values": [4, 4, 4]})
            )

        assert data["descriptive"]["std_dev"] == 0
        assert data["distribution"]["skewness"] is None

    async def test_bad_input_is_tool_error(self, explorer_config):
        """Malformed input is reported as a tool error."""
        async with connected_client(explorer_config) as client:
            result = await client.call_tool("explore_json", {"content": "{oops"})

        assert result.isError
        assert "Invalid JSON" in result.content[0].text
