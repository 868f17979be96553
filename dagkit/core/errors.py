from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class DagError(Exception):
    """Base error envelope. Build and validation errors are returned, not raised."""

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None
    node_id: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<dag>"
        return f"{loc}: {self.code}: {self.message}"


class DagLoadError(DagError):
    pass


class DagValidationError(DagError):
    pass


class BuildError(DagError):
    def __str__(self) -> str:
        return self.message


class MissingParentError(BuildError):
    pass


class DuplicateNodeError(BuildError):
    pass


def missing_parent(node_id: str) -> MissingParentError:
    return MissingParentError(
        code="E_MISSING_PARENT",
        message=f"Missing Parent: Cannot find one or more parents for node '{node_id}'",
        node_id=node_id,
    )


def duplicate_node(node_id: str) -> DuplicateNodeError:
    return DuplicateNodeError(
        code="E_DUPLICATE_NODE",
        message=f"Duplicate Nodes Not Allowed: node '{node_id}' already in graph.",
        node_id=node_id,
    )


def join_errors(errors: Iterable[DagError]) -> str:
    return "; ".join(e.message for e in errors)
