"""ao_eval_lua: run Lua code inside a process via an Eval message."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp.types import CallToolResult

from ao_mcp.arguments import ToolInputError, parse_eval_lua_args
from ao_mcp.connect import AOClient, AOError, ResultPayload, Tag, create_data_item_signer
from ao_mcp.results import error_result, text_result

logger = logging.getLogger("ao_mcp")

EVAL_TAGS = (Tag(name="Action", value="Eval"),)


def format_eval_response(message_id: str, response: ResultPayload) -> CallToolResult:
    if response.error_text is not None:
        return error_result(
            f"Lua execution error (Message ID: {message_id}):\n{response.error_text}"
        )

    output = response.output_text or "(no output)"
    message = response.first_message
    if message is not None:
        action = message.action
        if action == "Error":
            return error_result(
                f"Lua execution error (Message ID: {message_id}):\n{message.data}"
            )
        return text_result(
            "Lua code executed successfully!\n"
            f"Message ID: {message_id}\n\n"
            f"Output:\n{output}\n\n"
            f"Response (Action: {action or 'unknown'}):\n{message.data or '(no data)'}"
        )

    return text_result(
        f"Lua code executed successfully!\nMessage ID: {message_id}\n\nOutput:\n{output}"
    )


async def execute_eval_lua(client: AOClient, arguments: dict[str, Any]) -> CallToolResult:
    try:
        args = parse_eval_lua_args(arguments)
    except ToolInputError as e:
        return error_result(f"Error: {e!s}")

    message_id: str | None = None
    try:
        signer = await asyncio.to_thread(create_data_item_signer, args.wallet)
        message_id = await client.message(
            args.process_id, signer=signer, tags=EVAL_TAGS, data=args.code
        )
        response = await client.result(args.process_id, message_id)
    except AOError as e:
        logger.warning(
            "eval_failed process_id=%s message_id=%s code=%s message=%s",
            args.process_id,
            message_id,
            e.code,
            e.message,
        )
        if message_id is not None:
            return error_result(
                f"Lua code sent (ID: {message_id}) but fetching its result failed: {e.message}"
            )
        return error_result(f"Error executing Lua code: {e.message}")

    return format_eval_response(message_id, response)
