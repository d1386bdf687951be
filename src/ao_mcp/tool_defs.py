"""MCP tool schema definitions."""

from __future__ import annotations

from mcp.types import Tool

from ao_mcp.config import AO_CONFIG

_PROCESS_ID_PROPERTY = {
    "type": "string",
    "description": "The AO process ID (43-character Arweave transaction ID)",
}

_WALLET_PROPERTY = {
    "type": "string",
    "description": "The JSON content of your Arweave JWK wallet (required for signing)",
}


def _tags_property(description: str) -> dict:
    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "value": {"type": "string"},
            },
            "required": ["name", "value"],
        },
        "description": description,
    }


def get_tool_definitions() -> list[Tool]:
    """Return all MCP tool definitions with their JSON schemas."""
    return [
        Tool(
            name="ao_query_process",
            description=(
                "Query an AO process state using dryrun (read-only, no wallet needed). "
                "Use this to read process state, check balances, or call query handlers.\n\n"
                "Example actions:\n"
                '- "Info" - Get basic process info\n'
                '- "GetState" - Get current state\n'
                '- "GetBalance" - Get token balance\n'
                '- "GetGenesisStatus" - Forge Chamber genesis status\n\n'
                f"Default Chamber PID for testing: {AO_CONFIG.chamber_pid}"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "process_id": _PROCESS_ID_PROPERTY,
                    "action": {
                        "type": "string",
                        "description": "The action tag to send (e.g., 'Info', 'GetState'). Defaults to 'Info'",
                    },
                    "data": {
                        "type": "string",
                        "description": "Optional JSON data to send with the query",
                    },
                    "tags": _tags_property(
                        "Additional tags to include with the message. "
                        "'Action' is reserved; use the action field."
                    ),
                },
                "required": ["process_id"],
            },
        ),
        Tool(
            name="ao_send_message",
            description=(
                "Send a message to an AO process (state-changing, requires wallet). "
                "Use this to trigger actions that modify process state.\n\n"
                "Example actions:\n"
                '- "Transfer" - Transfer tokens\n'
                '- "Breathe" - Trigger Forge breathing loop\n'
                '- "RegisterMyth" - Register a myth in Forge Chamber\n\n'
                "IMPORTANT: Requires wallet_json parameter with your Arweave JWK wallet."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "process_id": _PROCESS_ID_PROPERTY,
                    "action": {
                        "type": "string",
                        "description": "The action to perform (e.g., 'Transfer', 'Breathe')",
                    },
                    "data": {
                        "type": "string",
                        "description": "JSON data to send with the message",
                    },
                    "tags": _tags_property(
                        "Additional tags to include with the message. "
                        "'Action' is reserved; use the action field."
                    ),
                    "wallet_json": _WALLET_PROPERTY,
                },
                "required": ["process_id", "action", "wallet_json"],
            },
        ),
        Tool(
            name="ao_spawn_process",
            description=(
                "Spawn a new AO process on the network. Creates a new persistent Lua process.\n\n"
                "Defaults:\n"
                f"- Module: {AO_CONFIG.aos_module} (aos Lua 5.3)\n"
                f"- Scheduler: {AO_CONFIG.scheduler} (AO mainnet)\n\n"
                "IMPORTANT: Requires wallet_json parameter with your Arweave JWK wallet."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "Optional name for the process (stored as Name tag)",
                    },
                    "module": {
                        "type": "string",
                        "description": f"Module ID to use. Defaults to aos ({AO_CONFIG.aos_module})",
                    },
                    "scheduler": {
                        "type": "string",
                        "description": f"Scheduler ID to use. Defaults to AO mainnet ({AO_CONFIG.scheduler})",
                    },
                    "tags": _tags_property("Additional tags for the process"),
                    "wallet_json": _WALLET_PROPERTY,
                },
                "required": ["wallet_json"],
            },
        ),
        Tool(
            name="ao_eval_lua",
            description=(
                "Execute Lua code in an AO process. Use this to run Lua scripts, "
                "define handlers, or interact with process state.\n\n"
                "Example usage:\n"
                '- Define handlers: "Handlers.add(...)"\n'
                '- Query state: "return State"\n'
                '- Run calculations: "return 1 + 1"\n\n'
                "IMPORTANT: Requires wallet_json parameter with your Arweave JWK wallet."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "process_id": _PROCESS_ID_PROPERTY,
                    "code": {
                        "type": "string",
                        "description": "Lua code to execute in the process",
                    },
                    "wallet_json": _WALLET_PROPERTY,
                },
                "required": ["process_id", "code", "wallet_json"],
            },
        ),
        Tool(
            name="ao_list_results",
            description=(
                "List message results/history from an AO process. "
                "Use this to see recent messages and their responses."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "process_id": _PROCESS_ID_PROPERTY,
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results to return (default: 10)",
                    },
                    "from": {
                        "type": "string",
                        "description": "Cursor to start from (for pagination)",
                    },
                    "sort": {
                        "type": "string",
                        "enum": ["ASC", "DESC"],
                        "description": "Sort order (default: DESC for newest first)",
                    },
                },
                "required": ["process_id"],
            },
        ),
    ]
