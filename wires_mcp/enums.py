"""Enums for wires MCP."""

from __future__ import annotations

from enum import Enum

from wires_mcp.errors import InvalidStatusValue


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class OutputFormat(str, Enum):
    """Output format for the wr command line."""

    JSON = "json"
    TABLE = "table"


class GraphFormat(str, Enum):
    """Output format for graph export."""

    JSON = "json"
    DOT = "dot"


class TaskStatus(str, Enum):
    """
    Wire lifecycle status.

    The enum value is the label persisted in the store. Labels coming from
    outside (CLI flags, tool inputs) go through parse(); rows coming from the
    store go through from_db().
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, label: str) -> TaskStatus:
        """Map a user-supplied label onto a status, rejecting unknown values."""
        normalized = (label or "").strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidStatusValue(label) from None

    @classmethod
    def from_db(cls, raw: str) -> TaskStatus:
        try:
            return cls(raw)
        except ValueError:
            raise InvalidStatusValue(raw) from None

    @property
    def rank(self) -> int:
        """Readiness ordering: in-progress work sorts before untouched work."""
        return _STATUS_RANK[self]

    @property
    def is_open(self) -> bool:
        return self in (TaskStatus.TODO, TaskStatus.IN_PROGRESS)

    @property
    def is_blocking(self) -> bool:
        """A prerequisite in this status still blocks its dependents for display."""
        return self not in (TaskStatus.DONE, TaskStatus.CANCELLED)

    @property
    def symbol(self) -> str:
        return _STATUS_SYMBOL[self]


_STATUS_RANK = {
    TaskStatus.IN_PROGRESS: 0,
    TaskStatus.TODO: 1,
    TaskStatus.DONE: 2,
    TaskStatus.CANCELLED: 3,
}

_STATUS_SYMBOL = {
    TaskStatus.TODO: "○",
    TaskStatus.IN_PROGRESS: "◐",
    TaskStatus.DONE: "●",
    TaskStatus.CANCELLED: "⊘",
}
