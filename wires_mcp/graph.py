"""
Dependency graph engine.

Pure functions over wire ids and Task models. The store feeds them from the
rows it has just read inside its own transaction; nothing here touches SQLite
or keeps state between calls.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from wires_mcp.enums import TaskStatus
from wires_mcp.models.task import DependencyInfo, DependencyWarning, Task

PrerequisiteLookup = Callable[[str], Iterable[str]]


def find_cycle(task_id: str, depends_on: str, prerequisites_of: PrerequisiteLookup) -> list[str] | None:
    """
    Check whether adding the edge `task_id -> depends_on` would close a cycle.

    Walks the existing edges from `depends_on` in the prerequisite direction
    looking for `task_id`. The walk is an explicit stack DFS; every node is
    expanded at most once, so shared ancestors (diamonds) cost nothing extra
    and are never reported.

    Args:
        task_id: The wire that would gain the dependency
        depends_on: The wire it would depend on
        prerequisites_of: Returns the direct prerequisites of a wire id

    Returns:
        None if the edge is safe, otherwise the cycle as a list of ids that
        starts and ends with `task_id`.
    """
    if task_id == depends_on:
        return [task_id, task_id]

    visited: set[str] = set()
    parent: dict[str, str] = {}
    stack = [depends_on]

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)

        if current == task_id:
            return _cycle_path(task_id, depends_on, parent)

        for dep in prerequisites_of(current):
            if dep not in visited:
                parent[dep] = current
                stack.append(dep)

    return None


def _cycle_path(task_id: str, depends_on: str, parent: Mapping[str, str]) -> list[str]:
    # Follow parent pointers from task_id back to the DFS root.
    chain = [task_id]
    node = task_id
    while node != depends_on:
        prev = parent.get(node)
        if prev is None or prev in chain:
            return [task_id, depends_on, task_id]
        chain.append(prev)
        node = prev

    chain.reverse()  # depends_on ... task_id
    return [task_id, *chain]


def resolve_ready(tasks: Iterable[Task], prerequisites: Mapping[str, Iterable[str]]) -> list[Task]:
    """
    Return the wires that can be worked on now, best candidate first.

    A wire is ready when it is TODO or IN_PROGRESS and every wire it directly
    depends on is DONE. A CANCELLED prerequisite still holds its dependents
    back. Results are ordered IN_PROGRESS before TODO, then by priority
    descending; equal keys keep the order of `tasks`.
    """
    task_list = list(tasks)
    status_by_id = {t.id: t.status for t in task_list}

    ready = [
        t
        for t in task_list
        if t.status.is_open
        and all(status_by_id.get(dep) == TaskStatus.DONE for dep in prerequisites.get(t.id, ()))
    ]
    ready.sort(key=lambda t: (t.status.rank, -t.priority))
    return ready


def incomplete_dependency_warnings(depends_on: Iterable[DependencyInfo]) -> list[DependencyWarning]:
    """Warnings for prerequisites that are not DONE, raised when a wire is finished."""
    return [
        DependencyWarning(wire_id=d.id, title=d.title, status=d.status)
        for d in depends_on
        if d.status != TaskStatus.DONE
    ]
