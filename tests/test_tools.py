"""Tests for the MCP tool functions."""

import json

import pytest

from wires_mcp import (
    BlockedInput,
    CancelTaskInput,
    DeleteTaskInput,
    DependencyInput,
    DoneTaskInput,
    GraphInput,
    InitInput,
    ListTasksInput,
    NewTaskInput,
    ReadyInput,
    ShowTaskInput,
    StartTaskInput,
    TaskStatus,
    UpdateTaskInput,
    mcp,
    wires_blocked,
    wires_cancel,
    wires_dep,
    wires_done,
    wires_graph,
    wires_init,
    wires_list,
    wires_new,
    wires_ready,
    wires_rm,
    wires_show,
    wires_start,
    wires_undep,
    wires_update,
)
from wires_mcp.enums import GraphFormat, ResponseFormat


class TestServer:
    """Tests for tool registration."""

    @pytest.mark.asyncio
    async def test_tools_registered(self):
        names = {tool.name for tool in await mcp.list_tools()}
        assert {
            "wires_init",
            "wires_new",
            "wires_list",
            "wires_show",
            "wires_update",
            "wires_start",
            "wires_done",
            "wires_cancel",
            "wires_rm",
            "wires_dep",
            "wires_undep",
            "wires_ready",
            "wires_blocked",
            "wires_graph",
        } <= names


class TestInitTool:
    """Tests for wires_init."""

    @pytest.mark.asyncio
    async def test_init_new_directory(self, tmp_path):
        result = await wires_init(InitInput(path=str(tmp_path)))

        assert result.startswith("Initialized wires repository")
        assert (tmp_path / ".wires" / "wires.db").exists()

    @pytest.mark.asyncio
    async def test_init_existing(self, wires_env):
        result = await wires_init(InitInput(path=str(wires_env.repo.root)))
        assert result.startswith("Error: Wires repository already initialized")
        assert "Tip:" in result


class TestCoreTools:
    """Tests for wire record tools."""

    @pytest.mark.asyncio
    async def test_new_creates_wire(self, wires_env):
        result = await wires_new(NewTaskInput(title="Write docs", priority=3))

        assert result.startswith("Wire created: ")
        task_id = result.split("\n")[0].removeprefix("Wire created: ")
        task = wires_env.get_task(task_id)
        assert task.title == "Write docs"
        assert task.priority == 3
        assert "pri:3" in result

    @pytest.mark.asyncio
    async def test_list_markdown(self, wires_env):
        wires_env.create_task("First wire")

        result = await wires_list(ListTasksInput())

        assert result.startswith("# Wires")
        assert "First wire" in result

    @pytest.mark.asyncio
    async def test_list_empty(self, wires_env):
        result = await wires_list(ListTasksInput())
        assert "No wires found." in result

    @pytest.mark.asyncio
    async def test_list_json_with_status_filter(self, wires_env):
        a = wires_env.create_task("A")
        wires_env.create_task("B")
        wires_env.set_status(a.id, TaskStatus.IN_PROGRESS)

        result = await wires_list(ListTasksInput(status="in_progress", response_format=ResponseFormat.JSON))

        data = json.loads(result)
        assert data["total"] == 1
        assert data["wires"][0]["id"] == a.id
        assert data["wires"][0]["status"] == "IN_PROGRESS"

    @pytest.mark.asyncio
    async def test_list_limit(self, wires_env):
        for i in range(3):
            wires_env.create_task(f"wire {i}")

        data = json.loads(await wires_list(ListTasksInput(limit=2, response_format=ResponseFormat.JSON)))

        assert data["total"] == 3
        assert data["count"] == 2

    @pytest.mark.asyncio
    async def test_show_with_dependencies(self, wires_env):
        a = wires_env.create_task("Deploy")
        b = wires_env.create_task("Run tests")
        wires_env.add_dependency(a.id, b.id)

        result = await wires_show(ShowTaskInput(task_id=a.id))

        assert f"[{a.id}] Deploy" in result
        assert "**Depends on:**" in result
        assert b.id in result

    @pytest.mark.asyncio
    async def test_show_concise_lists_blockers(self, wires_env):
        a = wires_env.create_task("Deploy")
        b = wires_env.create_task("Run tests")
        wires_env.add_dependency(a.id, b.id)

        result = await wires_show(ShowTaskInput(task_id=a.id, response_format=ResponseFormat.CONCISE))

        assert result.startswith(f"{a.id}: Deploy")
        assert f"blocked by {b.id}" in result

    @pytest.mark.asyncio
    async def test_show_missing(self, wires_env):
        result = await wires_show(ShowTaskInput(task_id="missing"))

        assert result.startswith("Error: Wire not found: missing")
        assert "Tip: Use wires_list" in result

    @pytest.mark.asyncio
    async def test_update_fields(self, wires_env):
        task = wires_env.create_task("Old", "desc")

        result = await wires_update(UpdateTaskInput(task_id=task.id, title="New", description="", priority=9))

        assert result.startswith(f"Wire {task.id} updated")
        stored = wires_env.get_task(task.id)
        assert (stored.title, stored.description, stored.priority) == ("New", None, 9)

    @pytest.mark.asyncio
    async def test_update_unstorable_priority(self, wires_env):
        task = wires_env.create_task("T", priority=1)
        params = UpdateTaskInput.model_construct(
            task_id=task.id, title=None, description=None, status=None, priority=2**64
        )

        result = await wires_update(params)

        assert result.startswith("Error: Invalid priority")
        assert "Tip:" in result
        assert wires_env.get_task(task.id).priority == 1

    @pytest.mark.asyncio
    async def test_start_done_cancel(self, wires_env):
        task = wires_env.create_task("T")

        assert "IN_PROGRESS" in await wires_start(StartTaskInput(task_id=task.id))
        assert wires_env.get_task(task.id).status == TaskStatus.IN_PROGRESS

        assert "DONE" in await wires_done(DoneTaskInput(task_id=task.id))
        assert wires_env.get_task(task.id).status == TaskStatus.DONE

        assert "CANCELLED" in await wires_cancel(CancelTaskInput(task_id=task.id))
        assert wires_env.get_task(task.id).status == TaskStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_done_reports_warnings(self, wires_env):
        a = wires_env.create_task("A")
        b = wires_env.create_task("B")
        wires_env.add_dependency(a.id, b.id)

        result = await wires_done(DoneTaskInput(task_id=a.id))

        assert "Warning" in result
        assert f"[{b.id}] B (TODO)" in result
        assert wires_env.get_task(a.id).status == TaskStatus.DONE

    @pytest.mark.asyncio
    async def test_rm(self, wires_env):
        task = wires_env.create_task("T")

        assert await wires_rm(DeleteTaskInput(task_id=task.id)) == f"Wire {task.id} deleted."
        assert wires_env.count_tasks() == 0

    @pytest.mark.asyncio
    async def test_not_a_repository(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WIRES_DIR", str(tmp_path))

        result = await wires_list(ListTasksInput())

        assert result.startswith("Error: Not a wires repository")
        assert "wires_init" in result


class TestDependencyTools:
    """Tests for dependency graph tools."""

    @pytest.mark.asyncio
    async def test_dep_and_undep(self, wires_env):
        a = wires_env.create_task("A")
        b = wires_env.create_task("B")

        assert (await wires_dep(DependencyInput(task_id=a.id, depends_on=b.id))).startswith("Dependency added")
        assert (await wires_dep(DependencyInput(task_id=a.id, depends_on=b.id))).startswith(
            "Dependency already present"
        )
        assert wires_env.edges() == [(a.id, b.id)]

        assert (await wires_undep(DependencyInput(task_id=a.id, depends_on=b.id))).startswith("Dependency removed")
        assert wires_env.edges() == []

    @pytest.mark.asyncio
    async def test_dep_cycle(self, wires_env):
        a = wires_env.create_task("A")
        b = wires_env.create_task("B")
        wires_env.add_dependency(a.id, b.id)

        result = await wires_dep(DependencyInput(task_id=b.id, depends_on=a.id))

        assert result.startswith(f"Error: Circular dependency detected: {b.id} -> {a.id} -> {b.id}")
        assert wires_env.edges() == [(a.id, b.id)]

    @pytest.mark.asyncio
    async def test_ready_markdown(self, wires_env):
        a = wires_env.create_task("Blocked one")
        b = wires_env.create_task("Free one", priority=4)
        wires_env.add_dependency(a.id, b.id)

        result = await wires_ready(ReadyInput())

        assert result.startswith("# Ready to Work (1 wires)")
        assert f"| {b.id} | Free one | TODO | 4 |" in result
        assert a.id not in result

    @pytest.mark.asyncio
    async def test_ready_json_and_include_active(self, wires_env):
        active = wires_env.create_task("Active")
        todo = wires_env.create_task("Todo")
        wires_env.set_status(active.id, TaskStatus.IN_PROGRESS)

        data = json.loads(await wires_ready(ReadyInput(response_format=ResponseFormat.JSON)))
        assert [w["id"] for w in data["wires"]] == [active.id, todo.id]
        assert data["total"] == 2

        data = json.loads(await wires_ready(ReadyInput(include_active=False, response_format=ResponseFormat.JSON)))
        assert [w["id"] for w in data["wires"]] == [todo.id]

    @pytest.mark.asyncio
    async def test_ready_empty(self, wires_env):
        result = await wires_ready(ReadyInput())
        assert "No unblocked wires found." in result

    @pytest.mark.asyncio
    async def test_blocked(self, wires_env):
        a = wires_env.create_task("Deploy")
        b = wires_env.create_task("Tests")
        wires_env.add_dependency(a.id, b.id)

        result = await wires_blocked(BlockedInput())
        assert f"[{a.id}] Deploy" in result
        assert f"[{b.id}] Tests (TODO)" in result

        data = json.loads(await wires_blocked(BlockedInput(response_format=ResponseFormat.JSON)))
        assert data["count"] == 1
        assert data["blocked"][0]["wire"]["id"] == a.id
        assert [d["id"] for d in data["blocked"][0]["blocked_by"]] == [b.id]

    @pytest.mark.asyncio
    async def test_graph_json_and_dot(self, wires_env):
        a = wires_env.create_task("A")
        b = wires_env.create_task("B")
        wires_env.add_dependency(a.id, b.id)

        data = json.loads(await wires_graph(GraphInput()))
        assert {n["id"] for n in data["nodes"]} == {a.id, b.id}
        assert data["edges"] == [{"from": a.id, "to": b.id}]

        dot = await wires_graph(GraphInput(format=GraphFormat.DOT))
        assert dot.startswith("digraph wires {")
        assert f'"{a.id}" -> "{b.id}";' in dot
