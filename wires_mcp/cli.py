"""
The wr command line.

Mutating commands print a single JSON object. Listing and detail commands
print a table on a terminal and JSON when piped, unless --format says
otherwise. Failures go to stderr and exit with status 1.
"""

from __future__ import annotations

import contextlib
import json
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import typer

from wires_mcp.config import load_settings
from wires_mcp.enums import GraphFormat, OutputFormat, TaskStatus
from wires_mcp.errors import WiresError
from wires_mcp.logging_setup import setup_logging
from wires_mcp.models.task import Task, TransitionResult
from wires_mcp.store import WireStore, init_repository, open_store
from wires_mcp.utils.formatters import _format_graph_dot, _format_task_detail, _format_tasks_table

app = typer.Typer(help="Track wires (tasks) and the dependencies between them.", no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    output_format: OutputFormat | None = typer.Option(
        None, "--format", "-f", help="Output format: json or table (default: table on a terminal, json otherwise)"
    ),
) -> None:
    """Track wires (tasks) and the dependencies between them."""
    settings = load_settings()
    setup_logging(settings.log_level)
    if output_format is None:
        output_format = OutputFormat.TABLE if sys.stdout.isatty() else OutputFormat.JSON
    ctx.obj = {"settings": settings, "format": output_format}


def _format(ctx: typer.Context) -> OutputFormat:
    return ctx.obj["format"]


def _store(ctx: typer.Context) -> WireStore:
    return open_store(ctx.obj["settings"])


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False))


@contextlib.contextmanager
def _errors(ctx: typer.Context) -> Iterator[None]:
    try:
        yield
    except WiresError as e:
        if _format(ctx) == OutputFormat.JSON:
            typer.echo(json.dumps(e.to_dict(), ensure_ascii=False), err=True)
        else:
            typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from None


def _parse_status(ctx: typer.Context, label: str | None) -> TaskStatus | None:
    if label is None:
        return None
    with _errors(ctx):
        return TaskStatus.parse(label)


def _transition_payload(result: TransitionResult, *, with_priority: bool = False) -> dict[str, Any]:
    task = result.task
    payload: dict[str, Any] = {"id": task.id, "status": task.status.value}
    if with_priority:
        payload["priority"] = task.priority
    payload["updated_at"] = task.updated_at
    if result.warnings:
        payload["warnings"] = [
            {"type": w.type, "wire_id": w.wire_id, "status": w.status.value} for w in result.warnings
        ]
    return payload


def _task_payload(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json")


@app.command("init")
def init_cmd(
    ctx: typer.Context,
    path: Path | None = typer.Argument(None, help="Directory to initialize (default: WIRES_DIR or the current directory)"),
) -> None:
    """Create a .wires repository in the given directory."""
    target = path or ctx.obj["settings"].repo_root or Path.cwd()
    with _errors(ctx):
        repo = init_repository(target)
    _echo_json({"status": "initialized", "path": str(repo.wires_dir)})


@app.command("new")
def new_cmd(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Wire title"),
    description: str | None = typer.Option(None, "--description", "-d", help="Longer description"),
    priority: int = typer.Option(0, "--priority", "-p", help="Priority, higher is more urgent"),
) -> None:
    """Create a new wire."""
    with _errors(ctx):
        task = _store(ctx).create_task(title, description, priority)
    _echo_json(
        {
            "id": task.id,
            "title": task.title,
            "status": task.status.value,
            "priority": task.priority,
            "created_at": task.created_at,
        }
    )


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    status: str | None = typer.Option(None, "--status", "-s", help="Only wires in this status"),
) -> None:
    """List wires, newest first."""
    status_filter = _parse_status(ctx, status)
    with _errors(ctx):
        tasks = _store(ctx).list_tasks_with_deps(status_filter)

    if _format(ctx) == OutputFormat.TABLE:
        typer.echo(_format_tasks_table(tasks))
    else:
        _echo_json([_task_payload(t) for t in tasks])


@app.command("show")
def show_cmd(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Wire ID"),
) -> None:
    """Show a wire with its dependencies and the wires it blocks."""
    with _errors(ctx):
        task = _store(ctx).get_task_with_deps(task_id)

    if _format(ctx) == OutputFormat.TABLE:
        typer.echo(_format_task_detail(task))
    else:
        _echo_json(_task_payload(task))


@app.command("update")
def update_cmd(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Wire ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="New description (empty clears it)"),
    status: str | None = typer.Option(None, "--status", "-s", help="New status"),
    priority: int | None = typer.Option(None, "--priority", "-p", help="New priority"),
) -> None:
    """Change any of a wire's fields."""
    new_status = _parse_status(ctx, status)

    with _errors(ctx):
        result = _store(ctx).update_task(
            task_id, title=title, description=description, status=new_status, priority=priority
        )
    _echo_json(_transition_payload(result, with_priority=True))


def _set_status(ctx: typer.Context, task_id: str, status: TaskStatus) -> None:
    with _errors(ctx):
        result = _store(ctx).set_status(task_id, status)
    _echo_json(_transition_payload(result))


@app.command("start")
def start_cmd(ctx: typer.Context, task_id: str = typer.Argument(..., help="Wire ID")) -> None:
    """Mark a wire IN_PROGRESS."""
    _set_status(ctx, task_id, TaskStatus.IN_PROGRESS)


@app.command("done")
def done_cmd(ctx: typer.Context, task_id: str = typer.Argument(..., help="Wire ID")) -> None:
    """Mark a wire DONE (warns about unfinished dependencies)."""
    _set_status(ctx, task_id, TaskStatus.DONE)


@app.command("cancel")
def cancel_cmd(ctx: typer.Context, task_id: str = typer.Argument(..., help="Wire ID")) -> None:
    """Mark a wire CANCELLED."""
    _set_status(ctx, task_id, TaskStatus.CANCELLED)


@app.command("dep")
def dep_cmd(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Wire that depends on the other"),
    depends_on: str = typer.Argument(..., help="Wire that must finish first"),
) -> None:
    """Add a dependency: TASK_ID depends on DEPENDS_ON."""
    with _errors(ctx):
        _store(ctx).add_dependency(task_id, depends_on)
    _echo_json({"wire_id": task_id, "depends_on": depends_on, "action": "added"})


@app.command("undep")
def undep_cmd(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Wire that depends on the other"),
    depends_on: str = typer.Argument(..., help="Wire it depends on"),
) -> None:
    """Remove a dependency."""
    with _errors(ctx):
        _store(ctx).remove_dependency(task_id, depends_on)
    _echo_json({"wire_id": task_id, "depends_on": depends_on, "action": "removed"})


@app.command("ready")
def ready_cmd(ctx: typer.Context) -> None:
    """List wires whose dependencies are all DONE, best first."""
    with _errors(ctx):
        tasks = _store(ctx).ready_tasks()

    if _format(ctx) == OutputFormat.TABLE:
        if not tasks:
            typer.echo("No ready wires.")
        for t in tasks:
            typer.echo(f"{t.status.symbol} {t.id}  {t.title}")
    else:
        _echo_json([_task_payload(t) for t in tasks])


@app.command("blocked")
def blocked_cmd(ctx: typer.Context) -> None:
    """List open wires held back by unfinished dependencies."""
    with _errors(ctx):
        tasks = _store(ctx).blocked_tasks()

    if _format(ctx) == OutputFormat.TABLE:
        typer.echo(_format_tasks_table(tasks) if tasks else "No blocked wires.")
    else:
        _echo_json(
            [
                {
                    **t.model_dump(mode="json", exclude={"depends_on", "blocks"}),
                    "blocked_by": [d.id for d in t.blockers],
                }
                for t in tasks
            ]
        )


@app.command("rm")
def rm_cmd(ctx: typer.Context, task_id: str = typer.Argument(..., help="Wire ID")) -> None:
    """Delete a wire and its dependency edges."""
    with _errors(ctx):
        _store(ctx).delete_task(task_id)
    _echo_json({"id": task_id, "action": "deleted"})


@app.command("graph")
def graph_cmd(
    ctx: typer.Context,
    graph_format: GraphFormat = typer.Option(GraphFormat.JSON, "--format", "-f", help="json or dot (GraphViz)"),
) -> None:
    """Export every wire and dependency edge."""
    with _errors(ctx):
        graph = _store(ctx).export_graph()

    if graph_format == GraphFormat.DOT:
        typer.echo(_format_graph_dot(graph))
    else:
        _echo_json(graph.model_dump(mode="json", by_alias=True))


@app.command("serve")
def serve_cmd() -> None:
    """Run the MCP server on stdio."""
    from wires_mcp.server import run

    run()


if __name__ == "__main__":
    app()
