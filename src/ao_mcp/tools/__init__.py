"""AO tool registry and dispatch."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from mcp.types import CallToolResult, Tool

from ao_mcp.connect import AOClient
from ao_mcp.results import error_result
from ao_mcp.tool_defs import get_tool_definitions
from ao_mcp.tools.eval_lua import execute_eval_lua
from ao_mcp.tools.list_results import execute_list_results
from ao_mcp.tools.query_process import execute_query_process
from ao_mcp.tools.send_message import execute_send_message
from ao_mcp.tools.spawn_process import execute_spawn_process

ToolExecutor = Callable[[AOClient, dict[str, Any]], Awaitable[CallToolResult]]

TOOLS: tuple[Tool, ...] = tuple(get_tool_definitions())

EXECUTORS: dict[str, ToolExecutor] = {
    "ao_query_process": execute_query_process,
    "ao_send_message": execute_send_message,
    "ao_spawn_process": execute_spawn_process,
    "ao_eval_lua": execute_eval_lua,
    "ao_list_results": execute_list_results,
}


async def handle_tool_call(
    client: AOClient, name: str, arguments: dict[str, Any]
) -> CallToolResult:
    """Route a tool call to its executor by exact name."""
    executor = EXECUTORS.get(name)
    if executor is None:
        return error_result(f"Unknown tool: {name}")
    return await executor(client, arguments)


__all__ = ["EXECUTORS", "TOOLS", "ToolExecutor", "handle_tool_call"]
