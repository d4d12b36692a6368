"""Dependency graph MCP tools: edges, readiness and blocked work."""

import json

from mcp.types import ToolAnnotations

from wires_mcp.enums import ResponseFormat, TaskStatus
from wires_mcp.errors import WiresError
from wires_mcp.models.inputs import BlockedInput, DependencyInput, ReadyInput
from wires_mcp.server import mcp
from wires_mcp.tools.core import _open_store
from wires_mcp.utils.formatters import _format_error, _format_tasks_concise


@mcp.tool(
    name="wires_dep",
    annotations=ToolAnnotations(
        title="Add Dependency",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_dep(params: DependencyInput) -> str:
    """
    Record that one wire depends on another (the other must finish first).

    Edges that would create a cycle are rejected and the cycle is reported.
    Adding an edge that already exists is a no-op.

    Args:
        params: DependencyInput with task_id (the dependent) and depends_on

    Returns:
        Confirmation, or an error naming the cycle

    Examples:
        - "deploy" waits for "tests": params with task_id=<deploy id>, depends_on=<tests id>
    """
    try:
        added = _open_store().add_dependency(params.task_id, params.depends_on)
    except WiresError as e:
        return _format_error(e)

    if added:
        return f"Dependency added: {params.task_id} depends on {params.depends_on}."
    return f"Dependency already present: {params.task_id} depends on {params.depends_on}."


@mcp.tool(
    name="wires_undep",
    annotations=ToolAnnotations(
        title="Remove Dependency",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_undep(params: DependencyInput) -> str:
    """Remove a dependency edge between two wires."""
    try:
        removed = _open_store().remove_dependency(params.task_id, params.depends_on)
    except WiresError as e:
        return _format_error(e)

    if removed:
        return f"Dependency removed: {params.task_id} no longer depends on {params.depends_on}."
    return f"No dependency from {params.task_id} on {params.depends_on}; nothing changed."


@mcp.tool(
    name="wires_ready",
    annotations=ToolAnnotations(
        title="Ready Wires",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_ready(params: ReadyInput) -> str:
    """
    List wires that can be worked on now: open, with every dependency DONE.

    USE THIS WHEN:
    - Answering "what should I work on next?"

    DO NOT USE WHEN:
    - You want to know why something is stuck → use wires_blocked

    Ordering: IN_PROGRESS first, then highest priority.

    Args:
        params: ReadyInput with limit, include_active and response_format

    Returns:
        Ready wires, best candidate first
    """
    try:
        ready, total = _open_store().ready_snapshot()
    except WiresError as e:
        return _format_error(e)

    if not params.include_active:
        ready = [t for t in ready if t.status != TaskStatus.IN_PROGRESS]

    ready = ready[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"wires": [t.model_dump(mode="json") for t in ready], "count": len(ready), "total": total},
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(ready, "ready")

    if not ready:
        return "# Ready to Work\n\nNo unblocked wires found."

    lines = [f"# Ready to Work ({len(ready)} wires)", ""]
    lines.append("| ID | Wire | Status | Priority |")
    lines.append("|----|------|--------|----------|")
    for task in ready:
        lines.append(f"| {task.id} | {task.title[:40]} | {task.status.value} | {task.priority} |")

    return "\n".join(lines)


@mcp.tool(
    name="wires_blocked",
    annotations=ToolAnnotations(
        title="Blocked Wires",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_blocked(params: BlockedInput) -> str:
    """
    List open wires held back by unfinished dependencies, with their blockers.

    Args:
        params: BlockedInput with limit, show_blockers and response_format

    Returns:
        Blocked wires and what blocks them
    """
    try:
        blocked = _open_store().blocked_tasks()
    except WiresError as e:
        return _format_error(e)

    total = len(blocked)
    blocked = blocked[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "blocked": [
                    {
                        "wire": t.model_dump(mode="json", exclude={"depends_on", "blocks"}),
                        "blocked_by": [d.model_dump(mode="json") for d in t.blockers],
                    }
                    for t in blocked
                ],
                "count": len(blocked),
                "total": total,
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        if not blocked:
            return "0 blocked"
        lines = [f"{total} blocked"]
        for t in blocked:
            lines.append(f"{t.id}: {t.title[:50]} <- {', '.join(d.id for d in t.blockers)}")
        return "\n".join(lines)

    if not blocked:
        return "# Blocked Wires\n\nNo blocked wires."

    lines = [f"# Blocked Wires ({total})", ""]
    for t in blocked:
        lines.append(f"### {t.status.symbol} [{t.id}] {t.title}")
        if params.show_blockers:
            lines.append("**Blocked by:**")
            for d in t.blockers:
                lines.append(f"  - {d.status.symbol} [{d.id}] {d.title} ({d.status.value})")
        lines.append("")

    return "\n".join(lines)
