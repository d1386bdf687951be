"""ao_query_process: read process state with a dry-run."""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import CallToolResult

from ao_mcp.arguments import ToolInputError, parse_query_process_args
from ao_mcp.connect import AOClient, AOError, ResultPayload, Tag
from ao_mcp.results import error_result, pretty_json_or_raw, text_result

logger = logging.getLogger("ao_mcp")


def format_query_response(response: ResultPayload) -> CallToolResult:
    """Render a dry-run outcome.

    Precedence: first returned message (error-tagged or data), then direct
    output, then the error field. An empty outcome is informational.
    """
    message = response.first_message
    if message is not None:
        action = message.action
        if action == "Error":
            return error_result(f"Process returned error: {message.data}")
        return text_result(
            f"Process response (Action: {action or 'unknown'}):\n"
            f"{pretty_json_or_raw(message.data)}"
        )

    if response.output_text:
        return text_result(f"Process output:\n{response.output_text}")

    if response.error_text is not None:
        return error_result(f"Process error: {response.error_text}")

    return text_result(
        "No response from process. The process may not have a handler for this action."
    )


async def execute_query_process(
    client: AOClient, arguments: dict[str, Any]
) -> CallToolResult:
    try:
        args = parse_query_process_args(arguments)
    except ToolInputError as e:
        return error_result(f"Error: {e!s}")

    tags = [Tag(name="Action", value=args.action), *args.tags]
    try:
        response = await client.dryrun(args.process_id, tags=tags, data=args.data)
    except AOError as e:
        logger.warning(
            "query_failed process_id=%s code=%s message=%s",
            args.process_id,
            e.code,
            e.message,
        )
        return error_result(f"Error querying process: {e.message}")

    return format_query_response(response)
