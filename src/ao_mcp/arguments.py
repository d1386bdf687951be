"""Typed argument parsing for AO tools.

Tool arguments arrive as loosely typed JSON mappings. Each ``parse_*``
function turns one into a frozen dataclass or raises ``ToolInputError``
with a caller-facing message. Checks run in a fixed order per tool so the
first problem reported is stable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ao_mcp.config import AO_CONFIG, PROCESS_ID_LENGTH
from ao_mcp.connect.types import SortOrder, Tag

RESERVED_TAG = "Action"


class ToolInputError(ValueError):
    """Tool arguments are missing or malformed."""


@dataclass(frozen=True)
class QueryProcessArgs:
    process_id: str
    action: str = "Info"
    data: str = "{}"
    tags: list[Tag] = field(default_factory=list)


@dataclass(frozen=True)
class SendMessageArgs:
    process_id: str
    action: str
    wallet: dict[str, Any]
    data: str = "{}"
    tags: list[Tag] = field(default_factory=list)


@dataclass(frozen=True)
class SpawnProcessArgs:
    wallet: dict[str, Any]
    module: str = AO_CONFIG.aos_module
    scheduler: str = AO_CONFIG.scheduler
    name: str | None = None
    tags: list[Tag] = field(default_factory=list)


@dataclass(frozen=True)
class EvalLuaArgs:
    process_id: str
    code: str
    wallet: dict[str, Any]


@dataclass(frozen=True)
class ListResultsArgs:
    process_id: str
    limit: int = 10
    from_cursor: str | None = None
    sort: SortOrder = SortOrder.DESC


def _optional_str(arguments: dict[str, Any], key: str) -> str | None:
    """Return a string argument, treating missing and empty as None."""
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ToolInputError(f"field '{key}' must be a string")
    return value or None


def _require_str(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ToolInputError(f"missing required field: {key}")
    return value


def _read_int(
    arguments: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    value = arguments.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ToolInputError(f"field '{key}' must be an integer")
    if min_value is not None and value < min_value:
        raise ToolInputError(f"field '{key}' must be >= {min_value}")
    if max_value is not None and value > max_value:
        raise ToolInputError(f"field '{key}' must be <= {max_value}")
    return value


def _read_process_id(arguments: dict[str, Any]) -> str:
    # Length only; charset and checksum are left to the network.
    value = arguments.get("process_id")
    if not isinstance(value, str) or len(value) != PROCESS_ID_LENGTH:
        shown = "" if value is None else str(value)
        raise ToolInputError(
            f'Invalid process ID "{shown}". '
            f"Must be a {PROCESS_ID_LENGTH}-character Arweave transaction ID."
        )
    return value


def _read_wallet(arguments: dict[str, Any], purpose: str) -> dict[str, Any]:
    value = arguments.get("wallet_json")
    if value is None or value == "" or value == {}:
        raise ToolInputError(
            f"wallet_json is required for {purpose}. "
            "Provide the JSON content of your Arweave wallet."
        )
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            value = None
    if not isinstance(value, dict):
        raise ToolInputError("Invalid wallet JSON. Ensure it is a valid Arweave JWK.")
    return value


def _read_tags(arguments: dict[str, Any], *, reserve_action: bool) -> list[Tag]:
    value = arguments.get("tags")
    if value is None:
        return []
    if not isinstance(value, list):
        raise ToolInputError("field 'tags' must be an array of {name, value} objects")

    tags: list[Tag] = []
    for item in value:
        if (
            not isinstance(item, dict)
            or not isinstance(item.get("name"), str)
            or not item["name"]
            or item.get("value") is None
        ):
            raise ToolInputError("field 'tags' must be an array of {name, value} objects")
        if reserve_action and item["name"] == RESERVED_TAG:
            raise ToolInputError(
                f"tag '{RESERVED_TAG}' is reserved; use the 'action' argument"
            )
        tags.append(Tag(name=item["name"], value=item["value"]))
    return tags


def _read_sort(arguments: dict[str, Any]) -> SortOrder:
    value = arguments.get("sort")
    if value is None:
        return SortOrder.DESC
    try:
        return SortOrder(value)
    except ValueError:
        raise ToolInputError("field 'sort' must be one of: ASC, DESC") from None


def parse_query_process_args(arguments: dict[str, Any]) -> QueryProcessArgs:
    return QueryProcessArgs(
        process_id=_read_process_id(arguments),
        action=_optional_str(arguments, "action") or "Info",
        data=_optional_str(arguments, "data") or "{}",
        tags=_read_tags(arguments, reserve_action=True),
    )


def parse_send_message_args(arguments: dict[str, Any]) -> SendMessageArgs:
    process_id = _read_process_id(arguments)
    wallet = _read_wallet(arguments, "sending messages")
    return SendMessageArgs(
        process_id=process_id,
        action=_require_str(arguments, "action"),
        wallet=wallet,
        data=_optional_str(arguments, "data") or "{}",
        tags=_read_tags(arguments, reserve_action=True),
    )


def parse_spawn_process_args(arguments: dict[str, Any]) -> SpawnProcessArgs:
    wallet = _read_wallet(arguments, "spawning processes")
    return SpawnProcessArgs(
        wallet=wallet,
        module=_optional_str(arguments, "module") or AO_CONFIG.aos_module,
        scheduler=_optional_str(arguments, "scheduler") or AO_CONFIG.scheduler,
        name=_optional_str(arguments, "name"),
        tags=_read_tags(arguments, reserve_action=False),
    )


def parse_eval_lua_args(arguments: dict[str, Any]) -> EvalLuaArgs:
    process_id = _read_process_id(arguments)
    code = arguments.get("code")
    if not isinstance(code, str) or not code.strip():
        raise ToolInputError("code is required. Provide Lua code to execute.")
    return EvalLuaArgs(
        process_id=process_id,
        code=code,
        wallet=_read_wallet(arguments, "executing Lua code"),
    )


def parse_list_results_args(arguments: dict[str, Any]) -> ListResultsArgs:
    return ListResultsArgs(
        process_id=_read_process_id(arguments),
        limit=_read_int(arguments, "limit", 10, min_value=1, max_value=1000),
        from_cursor=_optional_str(arguments, "from"),
        sort=_read_sort(arguments),
    )
