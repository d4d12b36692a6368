"""
Exception hierarchy for wires.

Every failure the engine reports is a WiresError subclass. Store operations
raise them before committing anything, so a caught WiresError always means
no partial mutation was applied. The surfaces (MCP tools, the wr command line)
catch WiresError at their boundary and render it; nothing is retried.
"""

from __future__ import annotations

from typing import Any


class WiresError(Exception):
    """Base exception for all wires errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a JSON-serializable dictionary."""
        return {"error": self.message, "error_code": self.error_code, **self.details}

    def __str__(self) -> str:
        return self.message


class RepositoryNotFound(WiresError):
    """No .wires directory was found from the starting location upward."""

    def __init__(self, start: str | None = None):
        details = {"start": start} if start else None
        super().__init__("Not a wires repository (or any parent directory)", details)


class AlreadyInitialized(WiresError):
    """A .wires directory already exists at the init location."""

    def __init__(self, path: str):
        super().__init__(f"Wires repository already initialized at {path}", {"path": path})


class TaskNotFound(WiresError):
    """The referenced wire id does not exist."""

    def __init__(self, task_id: str):
        super().__init__(f"Wire not found: {task_id}", {"id": task_id})
        self.task_id = task_id


class InvalidStatusValue(WiresError, ValueError):
    """A status label does not map to a known status."""

    def __init__(self, value: str | None):
        super().__init__(
            f"Invalid status: {value}. Expected one of TODO, IN_PROGRESS, DONE, CANCELLED",
            {"value": value},
        )
        self.value = value


class InvalidField(WiresError, ValueError):
    """A wire field value cannot be stored (empty title, priority out of range)."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}", {"field": field})
        self.field = field


class CircularDependency(WiresError):
    """Adding the proposed edge would close a cycle."""

    def __init__(self, path: list[str]):
        super().__init__(f"Circular dependency detected: {' -> '.join(path)}", {"cycle": list(path)})
        self.path = list(path)


class StoreFailure(WiresError):
    """The underlying SQLite operation failed."""

    def __init__(self, operation: str, original: BaseException | str):
        super().__init__(f"Store failure during {operation}: {original}", {"operation": operation})
        self.operation = operation
        self.original = original
