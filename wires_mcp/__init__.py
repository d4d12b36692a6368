"""
Wires: a local task tracker with a dependency graph.

Wires live in a SQLite database under .wires/ in the project directory. Tasks
can depend on one another; the store refuses edges that would create a cycle
and answers "what is ready to work on now?". The same store backs an MCP
server (wires_* tools) and the wr command line.
"""

# Re-export enums
from wires_mcp.enums import GraphFormat, OutputFormat, ResponseFormat, TaskStatus

# Re-export errors
from wires_mcp.errors import (
    AlreadyInitialized,
    CircularDependency,
    InvalidField,
    InvalidStatusValue,
    RepositoryNotFound,
    StoreFailure,
    TaskNotFound,
    WiresError,
)

# Re-export models
from wires_mcp.models import (
    BlockedInput,
    CancelTaskInput,
    DeleteTaskInput,
    DependencyInfo,
    DependencyInput,
    DependencyWarning,
    DoneTaskInput,
    GraphEdge,
    GraphExport,
    GraphInput,
    GraphNode,
    InitInput,
    ListTasksInput,
    NewTaskInput,
    ReadyInput,
    ShowTaskInput,
    StartTaskInput,
    Task,
    TaskWithDeps,
    TransitionResult,
    UpdateTaskInput,
)

# Re-export MCP server instance
from wires_mcp.server import mcp

# Re-export the store
from wires_mcp.store import WireStore, init_repository, open_store

# Re-export tools
from wires_mcp.tools import (
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

__all__ = [
    # Enums
    "ResponseFormat",
    "OutputFormat",
    "GraphFormat",
    "TaskStatus",
    # Errors
    "WiresError",
    "RepositoryNotFound",
    "AlreadyInitialized",
    "TaskNotFound",
    "InvalidField",
    "InvalidStatusValue",
    "CircularDependency",
    "StoreFailure",
    # Wire models
    "Task",
    "TaskWithDeps",
    "DependencyInfo",
    "DependencyWarning",
    "TransitionResult",
    "GraphNode",
    "GraphEdge",
    "GraphExport",
    # Input models
    "InitInput",
    "NewTaskInput",
    "ListTasksInput",
    "ShowTaskInput",
    "UpdateTaskInput",
    "StartTaskInput",
    "DoneTaskInput",
    "CancelTaskInput",
    "DeleteTaskInput",
    "DependencyInput",
    "ReadyInput",
    "BlockedInput",
    "GraphInput",
    # Store
    "WireStore",
    "init_repository",
    "open_store",
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
    # MCP server instance
    "mcp",
]
