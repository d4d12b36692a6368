"""Pydantic models for wires MCP."""

from wires_mcp.models.graph import GraphEdge, GraphExport, GraphNode
from wires_mcp.models.inputs import (
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
    UpdateTaskInput,
)
from wires_mcp.models.task import (
    DependencyInfo,
    DependencyWarning,
    Task,
    TaskWithDeps,
    TransitionResult,
)

__all__ = [
    # Wire models
    "Task",
    "TaskWithDeps",
    "DependencyInfo",
    "DependencyWarning",
    "TransitionResult",
    # Graph export models
    "GraphNode",
    "GraphEdge",
    "GraphExport",
    # Wire input models
    "InitInput",
    "NewTaskInput",
    "ListTasksInput",
    "ShowTaskInput",
    "UpdateTaskInput",
    "StartTaskInput",
    "DoneTaskInput",
    "CancelTaskInput",
    "DeleteTaskInput",
    # Dependency graph input models
    "DependencyInput",
    "ReadyInput",
    "BlockedInput",
    "GraphInput",
]
