"""Utility functions for wires MCP."""

from wires_mcp.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_error,
    _format_tasks_markdown,
    _format_graph_dot,
    _format_task_detail,
    _format_task_line,
    _format_tasks_table,
)

__all__ = [
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
    "_format_error",
    "_format_task_line",
    "_format_tasks_table",
    "_format_task_detail",
    "_format_graph_dot",
]
