"""AO MCP Server implementation.

This server exposes AO network operations through MCP protocol, allowing AI
agents to query processes, send messages, spawn processes, evaluate Lua and
read result history.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from ao_mcp.config import SERVER_INFO, get_settings
from ao_mcp.connect import AOClient
from ao_mcp.results import error_result
from ao_mcp.tools import TOOLS, handle_tool_call

logger = logging.getLogger("ao_mcp")


# Global client instance (managed by lifespan)
_client: AOClient | None = None


@asynccontextmanager
async def lifespan(server: Server):
    """Manage the AOClient lifecycle."""
    global _client
    settings = get_settings()

    _client = AOClient(
        cu_url=settings.cu_url,
        mu_url=settings.mu_url,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )
    await _client.__aenter__()

    try:
        yield
    finally:
        await _client.__aexit__(None, None, None)
        _client = None


# Create MCP server
server = Server(
    SERVER_INFO.name,
    version=SERVER_INFO.version,
    instructions=SERVER_INFO.description,
)


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return list(TOOLS)


# Executors validate their own arguments and report problems as tool errors.
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
    """Handle tool calls.

    Any exception escaping an executor is turned into an error result here,
    so every failure leaves the server in the same envelope shape.
    """
    if _client is None:
        return error_result("Error: AO client not initialized")

    logger.info("tool_call tool=%s", name)
    try:
        return await handle_tool_call(_client, name, arguments or {})
    except Exception as e:
        logger.exception("unexpected_error tool=%s", name)
        return error_result(f"Error: {str(e) or 'Unknown error'}")


def _configure_logging(level: str) -> None:
    # stdout carries the MCP stream; diagnostics go to stderr only.
    logging.basicConfig(
        stream=sys.stderr,
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


async def run_server():
    """Run the MCP server."""
    async with lifespan(server):
        async with stdio_server() as (read_stream, write_stream):
            logger.info("%s v%s running on stdio", SERVER_INFO.name, SERVER_INFO.version)
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )


def main():
    """Main entry point."""
    try:
        _configure_logging(get_settings().log_level)
        asyncio.run(run_server())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Failed to start {SERVER_INFO.name}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
