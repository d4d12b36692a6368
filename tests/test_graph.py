"""Tests for the dependency graph engine (cycle guard and readiness)."""

from wires_mcp.enums import TaskStatus
from wires_mcp.graph import find_cycle, incomplete_dependency_warnings, resolve_ready
from wires_mcp.models import DependencyInfo, Task


def _lookup(edges):
    """Prerequisite lookup over a list of (dependent, prerequisite) pairs."""

    def prerequisites_of(node):
        return [to for frm, to in edges if frm == node]

    return prerequisites_of


def _task(task_id, status=TaskStatus.TODO, priority=0, created_at=1000):
    return Task(
        id=task_id,
        title=f"Wire {task_id}",
        status=status,
        priority=priority,
        created_at=created_at,
        updated_at=created_at,
    )


# ============================================================================
# Cycle guard
# ============================================================================


class TestFindCycle:
    """Tests for find_cycle."""

    def test_self_loop_is_a_cycle(self):
        assert find_cycle("a", "a", _lookup([])) == ["a", "a"]

    def test_unrelated_edge_is_safe(self):
        assert find_cycle("a", "b", _lookup([("c", "d")])) is None

    def test_direct_back_edge(self):
        # b already depends on a
        assert find_cycle("a", "b", _lookup([("b", "a")])) == ["a", "b", "a"]

    def test_indirect_cycle_reports_full_path(self):
        edges = [("A", "B"), ("B", "C")]
        path = find_cycle("C", "A", _lookup(edges))

        assert path == ["C", "A", "B", "C"]
        assert {"A", "B", "C"} <= set(path)

    def test_cycle_path_follows_existing_edges(self):
        edges = [("b", "c"), ("c", "d"), ("d", "a"), ("b", "x"), ("x", "y")]
        path = find_cycle("a", "b", _lookup(edges))

        assert path[0] == "a" and path[-1] == "a"
        assert path[1] == "b"
        for frm, to in zip(path[1:], path[2:]):
            assert (frm, to) in edges

    def test_diamond_is_not_a_cycle(self):
        # A -> B -> D and A -> C -> D share the ancestor D
        edges = [("A", "B"), ("B", "D"), ("C", "D")]
        assert find_cycle("A", "C", _lookup(edges)) is None

    def test_each_node_expanded_once(self):
        calls = []
        edges = [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"), ("d", "e")]
        base = _lookup(edges)

        def counting(node):
            calls.append(node)
            return base(node)

        assert find_cycle("z", "a", counting) is None
        assert sorted(calls) == ["a", "b", "c", "d", "e"]


# ============================================================================
# Readiness
# ============================================================================


class TestResolveReady:
    """Tests for resolve_ready."""

    def test_no_dependencies_all_open_ready(self):
        tasks = [_task("a"), _task("b", TaskStatus.IN_PROGRESS)]
        ready = resolve_ready(tasks, {})
        assert {t.id for t in ready} == {"a", "b"}

    def test_closed_tasks_never_ready(self):
        tasks = [_task("a", TaskStatus.DONE), _task("b", TaskStatus.CANCELLED)]
        assert resolve_ready(tasks, {}) == []

    def test_unfinished_prerequisite_blocks(self):
        tasks = [_task("a"), _task("b")]
        ready = resolve_ready(tasks, {"a": ["b"]})
        assert [t.id for t in ready] == ["b"]

    def test_done_prerequisite_unblocks(self):
        tasks = [_task("a"), _task("b", TaskStatus.DONE)]
        ready = resolve_ready(tasks, {"a": ["b"]})
        assert [t.id for t in ready] == ["a"]

    def test_cancelled_prerequisite_still_blocks(self):
        tasks = [_task("a"), _task("b", TaskStatus.CANCELLED)]
        assert resolve_ready(tasks, {"a": ["b"]}) == []

    def test_all_prerequisites_must_be_done(self):
        tasks = [_task("a"), _task("b", TaskStatus.DONE), _task("c", TaskStatus.IN_PROGRESS)]
        ready = resolve_ready(tasks, {"a": ["b", "c"]})
        assert [t.id for t in ready] == ["c"]

    def test_ordering_in_progress_then_priority(self):
        tasks = [
            _task("low", priority=-1),
            _task("mid", priority=2),
            _task("high", priority=10),
            _task("active", TaskStatus.IN_PROGRESS, priority=0),
        ]
        ready = resolve_ready(tasks, {})
        assert [t.id for t in ready] == ["active", "high", "mid", "low"]

    def test_ties_keep_input_order(self):
        tasks = [_task("x", created_at=1), _task("y", created_at=2), _task("z", created_at=3)]
        assert [t.id for t in resolve_ready(tasks, {})] == ["x", "y", "z"]


class TestIncompleteDependencyWarnings:
    """Tests for incomplete_dependency_warnings."""

    def test_only_unfinished_prerequisites_warn(self):
        deps = [
            DependencyInfo(id="a", title="A", status=TaskStatus.DONE),
            DependencyInfo(id="b", title="B", status=TaskStatus.TODO),
            DependencyInfo(id="c", title="C", status=TaskStatus.CANCELLED),
        ]
        warnings = incomplete_dependency_warnings(deps)

        assert [w.wire_id for w in warnings] == ["b", "c"]
        assert all(w.type == "incomplete_dependency" for w in warnings)

    def test_no_prerequisites_no_warnings(self):
        assert incomplete_dependency_warnings([]) == []
