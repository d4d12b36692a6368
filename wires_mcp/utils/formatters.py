"""Formatting utilities for wire output."""

from __future__ import annotations

from wires_mcp.errors import (
    AlreadyInitialized,
    CircularDependency,
    InvalidField,
    RepositoryNotFound,
    TaskNotFound,
    WiresError,
)
from wires_mcp.models.graph import GraphExport
from wires_mcp.models.task import Task, TaskWithDeps


def _format_task_concise(task: Task) -> str:
    """
    Format a single wire in concise format for token efficiency.

    Output: "a1b2c3d: Title (IN_PROGRESS, pri:3)"
    """
    title = task.title[:50]
    meta = [task.status.value]
    if task.priority:
        meta.append(f"pri:{task.priority}")
    return f"{task.id}: {title} ({', '.join(meta)})"


def _format_tasks_concise(tasks: list[Task], title: str | None = None) -> str:
    """
    Format a list of wires in concise format.

    Output:
    2 wire(s) | ready
    a1b2c3d: Fix login (IN_PROGRESS)
    b2c3d4e: Write docs (TODO, pri:2)
    """
    if not tasks:
        return "0 wires"

    header = f"{len(tasks)} wire(s)"
    if title:
        header = f"{len(tasks)} wire(s) | {title}"

    return "\n".join([header, *(_format_task_concise(t) for t in tasks)])


def _format_task_markdown(task: Task) -> str:
    """Format a single wire as markdown, with its neighbors when known."""
    lines = [f"### {task.status.symbol} [{task.id}] {task.title}"]
    lines.append(f"**Status**: {task.status.value} | **Priority**: {task.priority}")

    if task.description:
        lines.append(task.description)

    if isinstance(task, TaskWithDeps):
        if task.depends_on:
            lines.append("**Depends on:**")
            for dep in task.depends_on:
                lines.append(f"  - {dep.status.symbol} [{dep.id}] {dep.title} ({dep.status.value})")
        if task.blocks:
            lines.append("**Blocks:**")
            for dep in task.blocks:
                lines.append(f"  - {dep.status.symbol} [{dep.id}] {dep.title} ({dep.status.value})")

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[Task], title: str = "Wires") -> str:
    """Format a list of wires as markdown."""
    if not tasks:
        return f"# {title}\n\nNo wires found."

    lines = [f"# {title}", f"*{len(tasks)} wire(s)*", ""]

    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")

    return "\n".join(lines)


# ============================================================================
# Terminal (table) output for the wr command line
# ============================================================================


def _format_task_line(task: TaskWithDeps) -> str:
    """One list row: symbol, id, title and any unfinished blockers."""
    line = f"{task.status.symbol} {task.id}  {task.title}"
    blockers = task.blockers
    if blockers:
        line += f"  ← blocked by {', '.join(d.id for d in blockers)}"
    return line


def _format_tasks_table(tasks: list[TaskWithDeps]) -> str:
    if not tasks:
        return "No wires found."
    return "\n".join(_format_task_line(t) for t in tasks)


def _format_task_detail(task: TaskWithDeps) -> str:
    """
    Detail view with a compact header.

    ◐ a1b2c3d  Fix login  [pri:2]

    Optional description

    Depends on:
      ● b2c3d4e  Add session table
    """
    lines = [f"{task.status.symbol} {task.id}  {task.title}  [pri:{task.priority}]"]

    if task.description:
        lines.extend(["", task.description])

    for heading, neighbors in (("Depends on:", task.depends_on), ("Blocks:", task.blocks)):
        if neighbors:
            lines.extend(["", heading])
            lines.extend(f"  {d.status.symbol} {d.id}  {d.title}" for d in neighbors)

    return "\n".join(lines)


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _format_graph_dot(graph: GraphExport) -> str:
    """
    Render the dependency graph as GraphViz DOT.

    Arrows point from a wire to the wire it depends on.
    """
    lines = ["digraph wires {", "  rankdir=LR;", "  node [shape=box];"]
    for node in graph.nodes:
        label = f"{node.status.symbol} {node.id}" + r"\n" + _dot_escape(node.title)
        lines.append(f'  "{node.id}" [label="{label}"];')
    for edge in graph.edges:
        lines.append(f'  "{edge.source}" -> "{edge.target}";')
    lines.append("}")
    return "\n".join(lines)


# ============================================================================
# Errors
# ============================================================================

_ERROR_TIPS = {
    RepositoryNotFound: "Use wires_init to create a repository, or set WIRES_DIR to an existing one.",
    TaskNotFound: "Use wires_list to find valid wire IDs.",
    CircularDependency: "Use wires_show on the wires in the cycle to inspect their dependencies.",
    AlreadyInitialized: "The repository already exists; use wires_list to see its wires.",
    InvalidField: "Titles must be non-empty; priorities must fit in a signed 64-bit integer.",
}


def _format_error(err: WiresError) -> str:
    """Render a WiresError as the "Error: ... / Tip: ..." tool response."""
    tip = _ERROR_TIPS.get(type(err))
    if tip:
        return f"Error: {err.message}\nTip: {tip}"
    return f"Error: {err.message}"
