"""Input models for wires MCP tools."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wires_mcp.enums import GraphFormat, ResponseFormat, TaskStatus
from wires_mcp.models.task import PRIORITY_MAX, PRIORITY_MIN


def _parse_status(v: object) -> object:
    if v is None or isinstance(v, TaskStatus):
        return v
    if isinstance(v, str):
        return TaskStatus.parse(v)
    return v


# ============================================================================
# Wire Input Models
# ============================================================================


class InitInput(BaseModel):
    """Input model for initializing a repository."""

    model_config = ConfigDict(str_strip_whitespace=True)

    path: str | None = Field(
        default=None,
        description="Directory to initialize (default: the configured repository root or the server's working directory)",
    )


class NewTaskInput(BaseModel):
    """Input model for creating a new wire."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Wire title (required)", min_length=1, max_length=500)
    description: str | None = Field(default=None, description="Optional longer description")
    priority: int = Field(
        default=0,
        description="Priority, higher is more urgent (may be negative)",
        ge=PRIORITY_MIN,
        le=PRIORITY_MAX,
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class ListTasksInput(BaseModel):
    """Input model for listing wires."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: TaskStatus | None = Field(
        default=None,
        description="Filter by status: TODO, IN_PROGRESS, DONE or CANCELLED (default: all)",
    )
    limit: int | None = Field(default=50, description="Maximum number of wires to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: object) -> object:
        return _parse_status(v)


class ShowTaskInput(BaseModel):
    """Input model for showing a single wire."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire ID to retrieve", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )


class UpdateTaskInput(BaseModel):
    """Input model for updating a wire. Fields left out are unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire ID to update", min_length=1)
    title: str | None = Field(default=None, description="New title", min_length=1)
    description: str | None = Field(default=None, description="New description (use empty string to clear)")
    status: TaskStatus | None = Field(default=None, description="New status: TODO, IN_PROGRESS, DONE or CANCELLED")
    priority: int | None = Field(default=None, description="New priority", ge=PRIORITY_MIN, le=PRIORITY_MAX)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: object) -> object:
        return _parse_status(v)


class StartTaskInput(BaseModel):
    """Input model for starting work on a wire."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire ID to start", min_length=1)


class DoneTaskInput(BaseModel):
    """Input model for completing a wire."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire ID to mark done", min_length=1)


class CancelTaskInput(BaseModel):
    """Input model for cancelling a wire."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire ID to cancel", min_length=1)


class DeleteTaskInput(BaseModel):
    """Input model for deleting a wire."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire ID to delete", min_length=1)


# ============================================================================
# Dependency Graph Input Models
# ============================================================================


class DependencyInput(BaseModel):
    """Input model for adding or removing a dependency edge."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Wire that has the dependency", min_length=1)
    depends_on: str = Field(..., description="Wire it depends on (must finish first)", min_length=1)


class ReadyInput(BaseModel):
    """Input model for listing ready (unblocked) wires."""

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int = Field(default=10, description="Maximum number of wires to return", ge=1, le=100)
    include_active: bool = Field(default=True, description="Include wires that are already IN_PROGRESS")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown', 'concise' or 'json'"
    )


class BlockedInput(BaseModel):
    """Input model for listing blocked wires."""

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int = Field(default=10, description="Maximum number of blocked wires to return", ge=1, le=100)
    show_blockers: bool = Field(default=True, description="Show which wires block each blocked wire")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown', 'concise' or 'json'"
    )


class GraphInput(BaseModel):
    """Input model for exporting the dependency graph."""

    model_config = ConfigDict(str_strip_whitespace=True)

    format: GraphFormat = Field(default=GraphFormat.JSON, description="Export format: 'json' or 'dot' (GraphViz)")
