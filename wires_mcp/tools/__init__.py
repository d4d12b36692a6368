"""MCP tool definitions for wires."""

# Import all tools to register them with the MCP server
from wires_mcp.tools.core import (
    wires_cancel,
    wires_done,
    wires_graph,
    wires_init,
    wires_list,
    wires_new,
    wires_rm,
    wires_show,
    wires_start,
    wires_update,
)
from wires_mcp.tools.dependencies import (
    wires_blocked,
    wires_dep,
    wires_ready,
    wires_undep,
)

__all__ = [
    # Core tools
    "wires_init",
    "wires_new",
    "wires_list",
    "wires_show",
    "wires_update",
    "wires_start",
    "wires_done",
    "wires_cancel",
    "wires_rm",
    "wires_graph",
    # Dependency graph tools
    "wires_dep",
    "wires_undep",
    "wires_ready",
    "wires_blocked",
]
