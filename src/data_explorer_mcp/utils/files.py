"""Asynchronous input loading for the MCP tools."""

import logging
from typing import Any, Mapping

import anyio

from data_explorer_mcp.errors import InputError

logger = logging.getLogger(__name__)


async def read_text(path: str, encoding: str = "utf-8") -> str:
    """
    Read a text file without blocking the event loop.

    Args:
        path: File path (``~`` is expanded)
        encoding: Text encoding

    Returns:
        File contents

    Raises:
        OSError: If the file cannot be read
    """
    file_path = await anyio.Path(path).expanduser()
    text = await file_path.read_text(encoding=encoding)
    logger.debug(f"Read {len(text)} characters from {file_path}")
    return text


async def load_input(
    arguments: Mapping[str, Any], content_key: str = "content", path_key: str = "path"
) -> str:
    """
    Get tool input from inline content or a file path.

    Inline content wins when both are given.

    Args:
        arguments: Tool arguments
        content_key: Argument holding inline text
        path_key: Argument holding a file path

    Returns:
        Input text

    Raises:
        InputError: If neither argument is given
    """
    content = arguments.get(content_key)
    if content is not None:
        return content

    path = arguments.get(path_key)
    if path:
        return await read_text(path)

    raise InputError(f"Either '{content_key}' or '{path_key}' must be provided")
