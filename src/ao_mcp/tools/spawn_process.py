"""ao_spawn_process: create a new process."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp.types import CallToolResult

from ao_mcp.arguments import ToolInputError, parse_spawn_process_args
from ao_mcp.connect import AOClient, AOError, Tag, create_data_item_signer
from ao_mcp.results import error_result, text_result

logger = logging.getLogger("ao_mcp")


async def execute_spawn_process(
    client: AOClient, arguments: dict[str, Any]
) -> CallToolResult:
    # The returned process ID is the confirmation; there is no result fetch.
    try:
        args = parse_spawn_process_args(arguments)
    except ToolInputError as e:
        return error_result(f"Error: {e!s}")

    tags: list[Tag] = []
    if args.name:
        tags.append(Tag(name="Name", value=args.name))
    tags.extend(args.tags)

    try:
        signer = await asyncio.to_thread(create_data_item_signer, args.wallet)
        process_id = await client.spawn(
            module=args.module,
            scheduler=args.scheduler,
            signer=signer,
            tags=tags,
        )
    except AOError as e:
        logger.warning("spawn_failed code=%s message=%s", e.code, e.message)
        return error_result(f"Error spawning process: {e.message}")

    name_line = f"\nName: {args.name}" if args.name else ""
    return text_result(
        "Process spawned successfully!\n\n"
        f"Process ID: {process_id}\n"
        f"Module: {args.module}\n"
        f"Scheduler: {args.scheduler}"
        f"{name_line}\n\n"
        "You can now send messages to this process using the ao_send_message tool."
    )
