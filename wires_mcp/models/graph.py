"""Graph export models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from wires_mcp.enums import TaskStatus


class GraphNode(BaseModel):
    id: str
    title: str
    status: TaskStatus
    priority: int


class GraphEdge(BaseModel):
    """Edge from a dependent wire to the prerequisite it waits on."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")


class GraphExport(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
