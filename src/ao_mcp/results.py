"""Tool result envelopes.

Every tool call, successful or not, leaves the server as a
``CallToolResult`` with exactly one text item.
"""

from __future__ import annotations

import json

from mcp.types import CallToolResult, TextContent

PREVIEW_CHARS = 200


def text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)])


def error_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)


def result_text(result: CallToolResult) -> str:
    """Return the text of a single-item envelope."""
    return result.content[0].text


def truncate_preview(text: str, *, limit: int = PREVIEW_CHARS) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with ``...``."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def pretty_json_or_raw(data: str | None) -> str:
    """Pretty-print ``data`` when it parses as JSON, else return it as is."""
    if data is None:
        return ""
    try:
        parsed = json.loads(data)
    except ValueError:
        return data
    return json.dumps(parsed, indent=2, ensure_ascii=False)
