"""AO MCP server.

Exposes AO process queries, messages, spawns, Lua evaluation and result
history as MCP tools.
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("ao-mcp-server")
except PackageNotFoundError:
    __version__ = "unknown"
