"""Core wire models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from wires_mcp.enums import TaskStatus

# Priority is stored as a signed 64-bit SQLite INTEGER.
PRIORITY_MIN = -(2**63)
PRIORITY_MAX = 2**63 - 1


class Task(BaseModel):
    """A wire: one unit of trackable work."""

    id: str
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: int = 0
    created_at: int
    updated_at: int


class DependencyInfo(BaseModel):
    """Summary of a neighboring wire in a dependency relationship.

    Carries just enough for a reader to see whether the neighbor still blocks.
    """

    id: str
    title: str
    status: TaskStatus


class TaskWithDeps(Task):
    """A wire plus the wires it depends on and the wires it blocks."""

    depends_on: list[DependencyInfo] = Field(default_factory=list)
    blocks: list[DependencyInfo] = Field(default_factory=list)

    @property
    def blockers(self) -> list[DependencyInfo]:
        return [d for d in self.depends_on if d.status.is_blocking]

    @property
    def is_blocked(self) -> bool:
        return bool(self.blockers)


class DependencyWarning(BaseModel):
    """Non-fatal note attached to a transition, e.g. finishing before a prerequisite."""

    type: Literal["incomplete_dependency"] = "incomplete_dependency"
    wire_id: str
    title: str
    status: TaskStatus


class TransitionResult(BaseModel):
    """Outcome of an update: the wire as stored afterwards plus any warnings."""

    task: Task
    warnings: list[DependencyWarning] = Field(default_factory=list)
