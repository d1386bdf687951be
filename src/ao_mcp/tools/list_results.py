"""ao_list_results: recent evaluated messages of a process."""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import CallToolResult

from ao_mcp.arguments import ToolInputError, parse_list_results_args
from ao_mcp.connect import AOClient, AOError, ResultEdge, ResultsPage
from ao_mcp.results import error_result, text_result, truncate_preview

logger = logging.getLogger("ao_mcp")


def _format_edge(index: int, edge: ResultEdge) -> str:
    node = edge.node
    lines = [f"--- Result {index} (cursor: {edge.cursor}) ---"]
    if node.error_text is not None:
        lines.append(f"Error: {node.error_text}")
    if node.output_text:
        lines.append(f"Output: {truncate_preview(node.output_text)}")
    message = node.first_message
    if message is not None:
        lines.append(f"Message Action: {message.action or 'unknown'}")
        if message.data:
            lines.append(f"Message Data: {truncate_preview(message.data)}")
    return "\n".join(lines) + "\n"


def format_results_page(process_id: str, page: ResultsPage) -> CallToolResult:
    if not page.edges:
        return text_result(f"No results found for process {process_id}")
    blocks = [_format_edge(i, edge) for i, edge in enumerate(page.edges, start=1)]
    return text_result(f"Results for process {process_id}:\n\n" + "\n".join(blocks))


async def execute_list_results(
    client: AOClient, arguments: dict[str, Any]
) -> CallToolResult:
    try:
        args = parse_list_results_args(arguments)
    except ToolInputError as e:
        return error_result(f"Error: {e!s}")

    try:
        page = await client.results(
            args.process_id,
            limit=args.limit,
            from_cursor=args.from_cursor,
            sort=args.sort,
        )
    except AOError as e:
        logger.warning(
            "list_results_failed process_id=%s code=%s message=%s",
            args.process_id,
            e.code,
            e.message,
        )
        return error_result(f"Error listing results: {e.message}")

    return format_results_page(args.process_id, page)
