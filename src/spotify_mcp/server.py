"""Spotify MCP server implementation."""

import asyncio
import logging
import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .client import SpotifyClient
from .config import Config, load_config, setup_logging, warn_on_contamination
from .consts import PACKAGE_VERSION, SERVER_NAME
from .exceptions import ConfigError
from .gateway import ToolGateway
from .operations import PlaylistService
from .registry import list_tools

logger = logging.getLogger("spotify-mcp.server")

INSTRUCTIONS = """
Spotify MCP server.

This MCP server allows you to:
1. Search Spotify's catalogue and get recommendations from seed tracks, artists or genres.
2. List the user's playlists and the tracks in them.
3. Create playlists and add tracks to them.
"""


def create_server(gateway: ToolGateway) -> Server:
    """Create the MCP server and register the list/call tool handlers.

    Args:
        gateway: ToolGateway that executes tool calls.

    Returns:
        Configured low-level MCP Server.
    """
    server = Server(SERVER_NAME, version=PACKAGE_VERSION, instructions=INSTRUCTIONS)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_tools()

    # argument validation belongs to the gateway, so that failures come back
    # in the same envelope as every other error
    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        response = await gateway.dispatch(name, arguments)
        return response.to_call_tool_result()

    logger.debug("MCP server created")
    return server


async def serve(config: Config) -> None:
    """Serve tool calls over stdio until the transport closes."""
    async with SpotifyClient(config) as client:
        gateway = ToolGateway(PlaylistService(client))
        server = create_server(gateway)

        async with stdio_server() as (read_stream, write_stream):
            logger.info("Spotify MCP server running on stdio")
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )


def main() -> None:
    """Run the MCP server."""
    try:
        config = load_config()
    except ConfigError as e:
        setup_logging()
        logger.error(f"{e.message}: {'; '.join(e.errors)}")
        for suggestion in e.suggestions:
            logger.error(suggestion)
        sys.exit(1)

    setup_logging(config.log_level)
    warn_on_contamination(config)
    logger.info("Configuration validated. Starting server...")

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error(f"Server failed: {e}")
        raise


if __name__ == "__main__":
    main()
