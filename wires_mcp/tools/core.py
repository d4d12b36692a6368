"""Core MCP tool definitions for wires."""

import json
from pathlib import Path

from mcp.types import ToolAnnotations

from wires_mcp.config import load_settings
from wires_mcp.enums import GraphFormat, ResponseFormat, TaskStatus
from wires_mcp.errors import WiresError
from wires_mcp.models.inputs import (
    CancelTaskInput,
    DeleteTaskInput,
    DoneTaskInput,
    GraphInput,
    InitInput,
    ListTasksInput,
    NewTaskInput,
    ShowTaskInput,
    StartTaskInput,
    UpdateTaskInput,
)
from wires_mcp.models.task import TransitionResult
from wires_mcp.server import mcp
from wires_mcp.store import WireStore, init_repository, open_store
from wires_mcp.utils.formatters import (
    _format_error,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
    _format_graph_dot,
)


def _open_store() -> WireStore:
    return open_store(load_settings())


def _format_transition(result: TransitionResult, verb: str) -> str:
    task = result.task
    lines = [f"Wire {task.id} {verb} ({task.status.value})."]
    if result.warnings:
        lines.append("Warning: finished before these dependencies:")
        for w in result.warnings:
            lines.append(f"  - [{w.wire_id}] {w.title} ({w.status.value})")
    return "\n".join(lines)


@mcp.tool(
    name="wires_init",
    annotations=ToolAnnotations(
        title="Initialize Repository",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def wires_init(params: InitInput) -> str:
    """
    Create a wires repository (a .wires directory holding the database).

    USE THIS WHEN:
    - Other wires tools report "Not a wires repository"
    - Starting to track work in a new project directory

    Args:
        params: InitInput with an optional directory path

    Returns:
        Confirmation with the repository location
    """
    if params.path:
        target = Path(params.path)
    else:
        target = load_settings().repo_root or Path.cwd()

    try:
        repo = init_repository(target)
    except WiresError as e:
        return _format_error(e)

    return f"Initialized wires repository in {repo.wires_dir}"


@mcp.tool(
    name="wires_new",
    annotations=ToolAnnotations(
        title="New Wire",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def wires_new(params: NewTaskInput) -> str:
    """
    Create a new wire in TODO status.

    USE THIS WHEN:
    - Recording a new piece of work to track

    DO NOT USE WHEN:
    - Changing an existing wire → use wires_update instead
    - Linking wires together → use wires_dep after creating both

    Args:
        params: NewTaskInput containing title, optional description and priority

    Returns:
        Confirmation message with the generated wire ID

    Examples:
        - Simple wire: params with title="Fix login redirect"
        - Urgent wire: params with title="Patch CVE", priority=10
    """
    try:
        task = _open_store().create_task(params.title, params.description, params.priority)
    except WiresError as e:
        return _format_error(e)

    return f"Wire created: {task.id}\n{_format_task_concise(task)}"


@mcp.tool(
    name="wires_list",
    annotations=ToolAnnotations(
        title="List Wires",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_list(params: ListTasksInput) -> str:
    """
    List wires, newest first, optionally filtered by status.

    USE THIS WHEN:
    - Looking for wire IDs
    - Reviewing everything in one status (e.g. all IN_PROGRESS work)

    DO NOT USE WHEN:
    - You have a specific wire ID → use wires_show instead
    - You want what can be worked on now → use wires_ready instead

    Args:
        params: ListTasksInput containing status, limit and response_format

    Returns:
        Formatted list of wires (markdown, concise or JSON)
    """
    try:
        tasks = _open_store().list_tasks_with_deps(params.status)
    except WiresError as e:
        return _format_error(e)

    total_count = len(tasks)
    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "wires": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )

    label = params.status.value if params.status else None

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, label)

    title = f"Wires ({label})" if label else "Wires"
    return _format_tasks_markdown(tasks, title)


@mcp.tool(
    name="wires_show",
    annotations=ToolAnnotations(
        title="Show Wire",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_show(params: ShowTaskInput) -> str:
    """
    Show one wire with the wires it depends on and the wires it blocks.

    Args:
        params: ShowTaskInput containing task_id and response_format

    Returns:
        Wire details
    """
    try:
        task = _open_store().get_task_with_deps(params.task_id)
    except WiresError as e:
        return _format_error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(task.model_dump(mode="json"), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        line = _format_task_concise(task)
        if task.blockers:
            line += f" blocked by {', '.join(d.id for d in task.blockers)}"
        return line

    return _format_task_markdown(task)


@mcp.tool(
    name="wires_update",
    annotations=ToolAnnotations(
        title="Update Wire",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_update(params: UpdateTaskInput) -> str:
    """
    Update an existing wire's title, description, status or priority.

    All supplied fields change together; fields left out are unchanged.

    CLEARING VALUES: description="" removes the description

    Args:
        params: UpdateTaskInput containing task_id and the fields to change

    Returns:
        Confirmation message, with warnings when finishing before dependencies

    Examples:
        - Reprioritize: params with task_id="a1b2c3d", priority=5
        - Finish: params with task_id="a1b2c3d", status="done"
    """
    try:
        result = _open_store().update_task(
            params.task_id,
            title=params.title,
            description=params.description,
            status=params.status,
            priority=params.priority,
        )
    except WiresError as e:
        return _format_error(e)

    return _format_transition(result, "updated")


async def _transition(task_id: str, status: TaskStatus, verb: str) -> str:
    try:
        result = _open_store().set_status(task_id, status)
    except WiresError as e:
        return _format_error(e)
    return _format_transition(result, verb)


@mcp.tool(
    name="wires_start",
    annotations=ToolAnnotations(
        title="Start Wire",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_start(params: StartTaskInput) -> str:
    """
    Mark a wire IN_PROGRESS.

    Starting does not check dependencies; use wires_ready to pick unblocked work.
    """
    return await _transition(params.task_id, TaskStatus.IN_PROGRESS, "started")


@mcp.tool(
    name="wires_done",
    annotations=ToolAnnotations(
        title="Complete Wire",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_done(params: DoneTaskInput) -> str:
    """
    Mark a wire DONE.

    Completion always succeeds; dependencies that are not yet DONE are listed
    as warnings in the response.
    """
    return await _transition(params.task_id, TaskStatus.DONE, "completed")


@mcp.tool(
    name="wires_cancel",
    annotations=ToolAnnotations(
        title="Cancel Wire",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_cancel(params: CancelTaskInput) -> str:
    """Mark a wire CANCELLED. Wires depending on it stay out of wires_ready."""
    return await _transition(params.task_id, TaskStatus.CANCELLED, "cancelled")


@mcp.tool(
    name="wires_rm",
    annotations=ToolAnnotations(
        title="Delete Wire",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def wires_rm(params: DeleteTaskInput) -> str:
    """
    Permanently delete a wire and every dependency edge that touches it.

    DO NOT USE WHEN:
    - The work was abandoned but should stay on record → use wires_cancel
    """
    try:
        _open_store().delete_task(params.task_id)
    except WiresError as e:
        return _format_error(e)

    return f"Wire {params.task_id} deleted."


@mcp.tool(
    name="wires_graph",
    annotations=ToolAnnotations(
        title="Export Dependency Graph",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def wires_graph(params: GraphInput) -> str:
    """
    Export all wires and dependency edges.

    JSON edges use "from" for the dependent wire and "to" for its prerequisite.
    DOT output can be rendered with GraphViz (`dot -Tsvg`).
    """
    try:
        graph = _open_store().export_graph()
    except WiresError as e:
        return _format_error(e)

    if params.format == GraphFormat.DOT:
        return _format_graph_dot(graph)
    return json.dumps(graph.model_dump(mode="json", by_alias=True), indent=2)
