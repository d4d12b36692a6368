"""
SQLite store for wires and their dependency edges.

Layout on disk: <root>/.wires/wires.db, journal mode WAL.

Every public method opens its own connection and runs inside exactly one
transaction. Mutations use BEGIN IMMEDIATE, so the existence checks, the
cycle scan and the write all happen under SQLite's write lock: a concurrent
writer waits (up to busy_timeout) instead of interleaving, and a reader never
sees half of a multi-field update. sqlite3 errors are re-raised as
StoreFailure after rolling back.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterator
from pathlib import Path

from wires_mcp.config import Repository, Settings, load_settings, resolve_repository
from wires_mcp.enums import TaskStatus
from wires_mcp.errors import (
    AlreadyInitialized,
    CircularDependency,
    InvalidField,
    StoreFailure,
    TaskNotFound,
)
from wires_mcp.graph import find_cycle, incomplete_dependency_warnings, resolve_ready
from wires_mcp.ids import ID_RETRY_LIMIT, generate_id
from wires_mcp.models.graph import GraphEdge, GraphExport, GraphNode
from wires_mcp.models.task import (
    PRIORITY_MAX,
    PRIORITY_MIN,
    DependencyInfo,
    Task,
    TaskWithDeps,
    TransitionResult,
)

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE wires (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    priority INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE dependencies (
    wire_id TEXT NOT NULL,
    depends_on TEXT NOT NULL,
    FOREIGN KEY (wire_id) REFERENCES wires(id) ON DELETE CASCADE,
    FOREIGN KEY (depends_on) REFERENCES wires(id) ON DELETE CASCADE,
    PRIMARY KEY (wire_id, depends_on)
);

CREATE INDEX idx_status ON wires(status);
CREATE INDEX idx_priority ON wires(priority);
CREATE INDEX idx_deps_wire ON dependencies(wire_id);
CREATE INDEX idx_deps_on ON dependencies(depends_on);
"""

_TASK_COLUMNS = "id, title, description, status, created_at, updated_at, priority"


def _now() -> int:
    return int(time.time())


def init_repository(path: str | Path) -> Repository:
    """
    Create a new wires repository at `path`.

    Raises:
        AlreadyInitialized: `path/.wires` already exists
        StoreFailure: the directory or database could not be created
    """
    repo = Repository(Path(path).resolve())
    if repo.wires_dir.exists():
        raise AlreadyInitialized(str(repo.wires_dir))

    try:
        repo.wires_dir.mkdir(parents=True)
    except FileExistsError:
        raise AlreadyInitialized(str(repo.wires_dir)) from None
    except OSError as e:
        raise StoreFailure("init", e) from e

    try:
        conn = sqlite3.connect(str(repo.db_path))
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(_SCHEMA)
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StoreFailure("init", e) from e

    logger.info("Initialized wires repository at %s", repo.root)
    return repo


def open_store(settings: Settings | None = None, cwd: str | Path | None = None) -> WireStore:
    """Locate the repository from settings (or the working directory) and open it."""
    settings = settings or load_settings()
    repo = resolve_repository(settings, cwd)
    return WireStore(repo, busy_timeout=settings.busy_timeout)


class WireStore:
    """Task record store and dependency edge store for one repository."""

    def __init__(self, repo: Repository, *, busy_timeout: float = 30.0) -> None:
        self.repo = repo
        self._busy_timeout = busy_timeout

    # ---- low-level helpers ----

    def _connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly below.
        conn = sqlite3.connect(str(self.repo.db_path), timeout=self._busy_timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextlib.contextmanager
    def _transaction(self, operation: str, *, write: bool = False) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except sqlite3.Error as e:
            raise StoreFailure(operation, e) from e

        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            yield conn
            conn.execute("COMMIT")
        except (sqlite3.Error, OverflowError) as e:
            self._rollback(conn)
            raise StoreFailure(operation, e) from e
        except BaseException:
            self._rollback(conn)
            raise
        finally:
            conn.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        if conn.in_transaction:
            with contextlib.suppress(sqlite3.Error):
                conn.execute("ROLLBACK")

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            description=row["description"] or None,
            status=TaskStatus.from_db(row["status"]),
            created_at=int(row["created_at"]),
            updated_at=int(row["updated_at"]),
            priority=int(row["priority"] or 0),
        )

    @staticmethod
    def _row_to_dep(row: sqlite3.Row) -> DependencyInfo:
        return DependencyInfo(id=row["id"], title=row["title"], status=TaskStatus.from_db(row["status"]))

    @staticmethod
    def _check_title(title: str) -> str:
        if not title or not title.strip():
            raise InvalidField("title", "cannot be empty")
        return title.strip()

    @staticmethod
    def _check_priority(priority: int) -> int:
        priority = int(priority)
        if not PRIORITY_MIN <= priority <= PRIORITY_MAX:
            raise InvalidField("priority", f"{priority} is outside the 64-bit integer range")
        return priority

    def _fetch_task(self, conn: sqlite3.Connection, task_id: str) -> Task:
        row = conn.execute(f"SELECT {_TASK_COLUMNS} FROM wires WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise TaskNotFound(task_id)
        return self._row_to_task(row)

    def _fetch_deps(
        self, conn: sqlite3.Connection, task_id: str
    ) -> tuple[list[DependencyInfo], list[DependencyInfo]]:
        depends_on = conn.execute(
            """
            SELECT w.id, w.title, w.status
            FROM wires w
            JOIN dependencies d ON w.id = d.depends_on
            WHERE d.wire_id = ?
            ORDER BY w.created_at, w.id
            """,
            (task_id,),
        ).fetchall()
        blocks = conn.execute(
            """
            SELECT w.id, w.title, w.status
            FROM wires w
            JOIN dependencies d ON w.id = d.wire_id
            WHERE d.depends_on = ?
            ORDER BY w.created_at, w.id
            """,
            (task_id,),
        ).fetchall()
        return [self._row_to_dep(r) for r in depends_on], [self._row_to_dep(r) for r in blocks]

    @staticmethod
    def _prerequisite_ids(conn: sqlite3.Connection, task_id: str) -> list[str]:
        rows = conn.execute("SELECT depends_on FROM dependencies WHERE wire_id = ?", (task_id,)).fetchall()
        return [r["depends_on"] for r in rows]

    def _load_with_deps(self, conn: sqlite3.Connection, status: TaskStatus | None) -> list[TaskWithDeps]:
        if status is None:
            rows = conn.execute(f"SELECT {_TASK_COLUMNS} FROM wires ORDER BY created_at DESC, id").fetchall()
        else:
            rows = conn.execute(
                f"SELECT {_TASK_COLUMNS} FROM wires WHERE status = ? ORDER BY created_at DESC, id",
                (status.value,),
            ).fetchall()

        info = {
            r["id"]: self._row_to_dep(r)
            for r in conn.execute("SELECT id, title, status FROM wires ORDER BY created_at, id")
        }
        depends_on: dict[str, list[DependencyInfo]] = {}
        blocks: dict[str, list[DependencyInfo]] = {}
        for edge in conn.execute("SELECT wire_id, depends_on FROM dependencies"):
            depends_on.setdefault(edge["wire_id"], []).append(info[edge["depends_on"]])
            blocks.setdefault(edge["depends_on"], []).append(info[edge["wire_id"]])

        order = {task_id: i for i, task_id in enumerate(info)}
        result = []
        for row in rows:
            task = self._row_to_task(row)
            result.append(
                TaskWithDeps(
                    **task.model_dump(),
                    depends_on=sorted(depends_on.get(task.id, []), key=lambda d: order[d.id]),
                    blocks=sorted(blocks.get(task.id, []), key=lambda d: order[d.id]),
                )
            )
        return result

    # ---- task records ----

    def count_tasks(self) -> int:
        with self._transaction("count_tasks") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM wires").fetchone()
            return int(n)

    def create_task(self, title: str, description: str | None = None, priority: int = 0) -> Task:
        """
        Insert a new TODO wire and return it.

        A freshly generated id that is already taken is regenerated, up to
        ID_RETRY_LIMIT attempts; after that the insert fails with StoreFailure.
        An empty title or a priority outside the 64-bit range raises InvalidField.
        """
        title = self._check_title(title)
        priority = self._check_priority(priority)

        now = _now()
        with self._transaction("create_task", write=True) as conn:
            for attempt in range(1, ID_RETRY_LIMIT + 1):
                task_id = generate_id(title)
                taken = conn.execute("SELECT 1 FROM wires WHERE id = ?", (task_id,)).fetchone()
                if taken is None:
                    break
                logger.warning("Generated id %s already exists (attempt %d)", task_id, attempt)
            else:
                raise StoreFailure("create_task", f"no unused id after {ID_RETRY_LIMIT} attempts")

            task = Task(
                id=task_id,
                title=title,
                description=description or None,
                status=TaskStatus.TODO,
                priority=priority,
                created_at=now,
                updated_at=now,
            )
            conn.execute(
                f"INSERT INTO wires ({_TASK_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    task.id,
                    task.title,
                    task.description,
                    task.status.value,
                    task.created_at,
                    task.updated_at,
                    task.priority,
                ),
            )

        logger.debug("Wire created id=%s priority=%s", task.id, task.priority)
        return task

    def get_task(self, task_id: str) -> Task:
        with self._transaction("get_task") as conn:
            return self._fetch_task(conn, task_id)

    def get_task_with_deps(self, task_id: str) -> TaskWithDeps:
        """Return a wire with the wires it depends on and the wires it blocks."""
        with self._transaction("get_task_with_deps") as conn:
            task = self._fetch_task(conn, task_id)
            depends_on, blocks = self._fetch_deps(conn, task_id)
        return TaskWithDeps(**task.model_dump(), depends_on=depends_on, blocks=blocks)

    def list_tasks(self, status: TaskStatus | None = None) -> list[Task]:
        """List wires, newest first, optionally filtered by status."""
        with self._transaction("list_tasks") as conn:
            if status is None:
                rows = conn.execute(f"SELECT {_TASK_COLUMNS} FROM wires ORDER BY created_at DESC, id").fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {_TASK_COLUMNS} FROM wires WHERE status = ? ORDER BY created_at DESC, id",
                    (status.value,),
                ).fetchall()
        return [self._row_to_task(r) for r in rows]

    def list_tasks_with_deps(self, status: TaskStatus | None = None) -> list[TaskWithDeps]:
        with self._transaction("list_tasks_with_deps") as conn:
            return self._load_with_deps(conn, status)

    def update_task(
        self,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
        priority: int | None = None,
    ) -> TransitionResult:
        """
        Update any subset of a wire's fields in a single statement.

        None means "leave unchanged"; description="" clears the description.
        Marking a wire DONE reports its prerequisites that are not DONE as
        warnings but still applies the change.

        Raises:
            TaskNotFound: the wire does not exist
            InvalidField: empty title or out-of-range priority
        """
        fields: list[str] = []
        params: list[object] = []

        with self._transaction("update_task", write=True) as conn:
            current = self._fetch_task(conn, task_id)

            if title is not None:
                fields.append("title = ?")
                params.append(self._check_title(title))

            if description is not None:
                fields.append("description = ?")
                params.append(description or None)

            if status is not None:
                fields.append("status = ?")
                params.append(status.value)

            if priority is not None:
                fields.append("priority = ?")
                params.append(self._check_priority(priority))

            if not fields:
                return TransitionResult(task=current)

            warnings = []
            if status == TaskStatus.DONE:
                depends_on, _ = self._fetch_deps(conn, task_id)
                warnings = incomplete_dependency_warnings(depends_on)

            fields.append("updated_at = MAX(updated_at, ?)")
            params.extend([_now(), task_id])
            conn.execute(f"UPDATE wires SET {', '.join(fields)} WHERE id = ?", params)
            updated = self._fetch_task(conn, task_id)

        logger.debug("Wire updated id=%s fields=%s", task_id, ", ".join(f.split(" ")[0] for f in fields))
        if warnings:
            logger.info(
                "Wire %s marked DONE with incomplete dependencies: %s",
                task_id,
                ", ".join(w.wire_id for w in warnings),
            )
        return TransitionResult(task=updated, warnings=warnings)

    def set_status(self, task_id: str, status: TaskStatus) -> TransitionResult:
        return self.update_task(task_id, status=status)

    def delete_task(self, task_id: str) -> None:
        """Delete a wire; every edge touching it goes with it."""
        with self._transaction("delete_task", write=True) as conn:
            self._fetch_task(conn, task_id)
            conn.execute("DELETE FROM wires WHERE id = ?", (task_id,))
        logger.debug("Wire deleted id=%s", task_id)

    # ---- dependency edges ----

    def add_dependency(self, task_id: str, depends_on: str) -> bool:
        """
        Record that `task_id` depends on `depends_on`.

        Returns:
            True if the edge was inserted, False if it already existed

        Raises:
            TaskNotFound: either wire does not exist
            CircularDependency: the edge would close a cycle
        """
        with self._transaction("add_dependency", write=True) as conn:
            self._fetch_task(conn, task_id)
            self._fetch_task(conn, depends_on)

            cycle = find_cycle(task_id, depends_on, lambda node: self._prerequisite_ids(conn, node))
            if cycle is not None:
                logger.info("Rejected dependency %s -> %s: cycle %s", task_id, depends_on, cycle)
                raise CircularDependency(cycle)

            cur = conn.execute(
                "INSERT OR IGNORE INTO dependencies (wire_id, depends_on) VALUES (?, ?)",
                (task_id, depends_on),
            )
            added = cur.rowcount == 1

        logger.debug("Dependency %s -> %s %s", task_id, depends_on, "added" if added else "already present")
        return added

    def remove_dependency(self, task_id: str, depends_on: str) -> bool:
        """Remove an edge. Returns False if there was no such edge."""
        with self._transaction("remove_dependency", write=True) as conn:
            self._fetch_task(conn, task_id)
            self._fetch_task(conn, depends_on)
            cur = conn.execute(
                "DELETE FROM dependencies WHERE wire_id = ? AND depends_on = ?",
                (task_id, depends_on),
            )
            removed = cur.rowcount > 0

        logger.debug("Dependency %s -> %s %s", task_id, depends_on, "removed" if removed else "not present")
        return removed

    def edges(self) -> list[tuple[str, str]]:
        with self._transaction("edges") as conn:
            rows = conn.execute("SELECT wire_id, depends_on FROM dependencies ORDER BY wire_id, depends_on").fetchall()
        return [(r["wire_id"], r["depends_on"]) for r in rows]

    # ---- derived views ----

    def ready_tasks(self) -> list[Task]:
        """
        Wires that can be worked on now, best candidate first.

        Recomputed from the stored statuses and edges on every call.
        """
        ready, _ = self.ready_snapshot()
        return ready

    def ready_snapshot(self) -> tuple[list[Task], int]:
        """Ready wires and the total wire count, read in one transaction."""
        with self._transaction("ready_tasks") as conn:
            tasks = [
                self._row_to_task(r)
                for r in conn.execute(f"SELECT {_TASK_COLUMNS} FROM wires ORDER BY created_at, id")
            ]
            prerequisites: dict[str, list[str]] = {}
            for edge in conn.execute("SELECT wire_id, depends_on FROM dependencies"):
                prerequisites.setdefault(edge["wire_id"], []).append(edge["depends_on"])
        return resolve_ready(tasks, prerequisites), len(tasks)

    def blocked_tasks(self) -> list[TaskWithDeps]:
        """Open wires held back by at least one unfinished prerequisite."""
        with self._transaction("blocked_tasks") as conn:
            tasks = self._load_with_deps(conn, None)
        blocked = [t for t in tasks if t.status.is_open and t.is_blocked]
        blocked.sort(key=lambda t: (t.status.rank, -t.priority))
        return blocked

    def export_graph(self) -> GraphExport:
        with self._transaction("export_graph") as conn:
            nodes = [
                GraphNode(id=r["id"], title=r["title"], status=TaskStatus.from_db(r["status"]), priority=r["priority"])
                for r in conn.execute("SELECT id, title, status, priority FROM wires ORDER BY created_at, id")
            ]
            edges = [
                GraphEdge(source=r["wire_id"], target=r["depends_on"])
                for r in conn.execute("SELECT wire_id, depends_on FROM dependencies ORDER BY wire_id, depends_on")
            ]
        return GraphExport(nodes=nodes, edges=edges)


__all__ = ["WireStore", "init_repository", "open_store"]
