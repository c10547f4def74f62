"""Entry point for running data_explorer_mcp as a module."""

from data_explorer_mcp.server import cli_entry

if __name__ == "__main__":
    cli_entry()
