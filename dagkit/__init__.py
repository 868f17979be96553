"""Immutable DAG construction with out-of-order dependency resolution.

Typical use:

    b = builder().add_node(a, []).add_node(c, ["b"]).add_node(b, ["a"])
    dag, errors = build(b)
    if errors:
        print(join_errors(errors))
"""
from __future__ import annotations

from dagkit.core.build.build_dag import build
from dagkit.core.errors import (
    BuildError,
    DagError,
    DagLoadError,
    DagValidationError,
    DuplicateNodeError,
    MissingParentError,
    duplicate_node,
    join_errors,
    missing_parent,
)
from dagkit.core.model import (
    Builder,
    Dag,
    Edge,
    Node,
    NodeAddition,
    NodeInfo,
    NodeRecord,
    add_node,
    builder,
    empty,
)
from dagkit.core.query.query_dag import (
    contains,
    get,
    get_children,
    get_height,
    get_parents,
    is_descendant_of,
    roots,
    size,
    summarize_dag,
)

__all__ = [
    "BuildError",
    "Builder",
    "Dag",
    "DagError",
    "DagLoadError",
    "DagValidationError",
    "DuplicateNodeError",
    "Edge",
    "MissingParentError",
    "Node",
    "NodeAddition",
    "NodeInfo",
    "NodeRecord",
    "add_node",
    "build",
    "builder",
    "contains",
    "duplicate_node",
    "empty",
    "get",
    "get_children",
    "get_height",
    "get_parents",
    "is_descendant_of",
    "join_errors",
    "missing_parent",
    "roots",
    "size",
    "summarize_dag",
]
