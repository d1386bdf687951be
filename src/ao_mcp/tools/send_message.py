"""ao_send_message: signed, state-changing message to a process."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp.types import CallToolResult

from ao_mcp.arguments import ToolInputError, parse_send_message_args
from ao_mcp.connect import AOClient, AOError, ResultPayload, Tag, create_data_item_signer
from ao_mcp.results import error_result, pretty_json_or_raw, text_result

logger = logging.getLogger("ao_mcp")


def format_send_response(message_id: str, response: ResultPayload) -> CallToolResult:
    """Render the outcome of a submitted message.

    Every branch names the message ID so callers can correlate.
    """
    message = response.first_message
    if message is not None:
        action = message.action
        if action == "Error":
            return error_result(
                f"Message sent (ID: {message_id}) but process returned error:\n{message.data}"
            )
        return text_result(
            "Message sent successfully!\n"
            f"Message ID: {message_id}\n"
            f"Action: {action or 'unknown'}\n"
            f"Response:\n{pretty_json_or_raw(message.data)}"
        )

    if response.error_text is not None:
        return error_result(
            f"Message sent (ID: {message_id}) but process error: {response.error_text}"
        )

    if response.output_text:
        return text_result(
            "Message sent successfully!\n"
            f"Message ID: {message_id}\n"
            f"Output:\n{response.output_text}"
        )

    return text_result(
        f"Message sent successfully!\nMessage ID: {message_id}\nNo response data returned."
    )


async def execute_send_message(
    client: AOClient, arguments: dict[str, Any]
) -> CallToolResult:
    try:
        args = parse_send_message_args(arguments)
    except ToolInputError as e:
        return error_result(f"Error: {e!s}")

    tags = [Tag(name="Action", value=args.action), *args.tags]
    message_id: str | None = None
    try:
        signer = await asyncio.to_thread(create_data_item_signer, args.wallet)
        message_id = await client.message(
            args.process_id, signer=signer, tags=tags, data=args.data
        )
        response = await client.result(args.process_id, message_id)
    except AOError as e:
        logger.warning(
            "send_failed process_id=%s message_id=%s code=%s message=%s",
            args.process_id,
            message_id,
            e.code,
            e.message,
        )
        if message_id is not None:
            return error_result(
                f"Message sent (ID: {message_id}) but fetching its result failed: {e.message}"
            )
        return error_result(f"Error sending message: {e.message}")

    return format_send_response(message_id, response)
