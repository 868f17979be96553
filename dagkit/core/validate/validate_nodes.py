from __future__ import annotations

from typing import Any, Iterable, Optional, cast

from dagkit.core.errors import DagValidationError
from dagkit.core.model import Builder, Dag, NodeRecord, builder


SUPPORTED_SCHEMA_PREFIX = "0."


def _is_list_of_str(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def validate_nodes(
    doc: dict[str, Any], starting_dag: Optional[Dag[NodeRecord]] = None
) -> tuple[Optional[Builder[NodeRecord]], list[DagValidationError]]:
    """Turn a loaded node document into a Builder.

    Returns (builder, errors). Builder is None when errors exist.
    Only shapes are checked here; unknown parents and duplicate ids are
    reported by build().
    """

    file = cast(Optional[str], doc.get("__file__"))
    errors: list[DagValidationError] = []

    schema_version = doc.get("schema_version")
    if not isinstance(schema_version, str) or not schema_version.strip():
        errors.append(
            DagValidationError(
                code="E_REQUIRED_FIELD",
                message="schema_version is required and must be a non-empty string",
                file=file,
                path="schema_version",
            )
        )
    elif not schema_version.startswith(SUPPORTED_SCHEMA_PREFIX):
        errors.append(
            DagValidationError(
                code="E_UNSUPPORTED_SCHEMA",
                message=f"unsupported schema_version: {schema_version} (expected {SUPPORTED_SCHEMA_PREFIX}x)",
                file=file,
                path="schema_version",
            )
        )

    nodes = doc.get("nodes")
    if not isinstance(nodes, list):
        errors.append(
            DagValidationError(
                code="E_REQUIRED_FIELD",
                message="nodes is required and must be an array",
                file=file,
                path="nodes",
            )
        )
        return None, _sorted(errors)

    b: Builder[NodeRecord] = builder(starting_dag)
    for i, raw in enumerate(nodes):
        node_path = f"nodes[{i}]"
        if not isinstance(raw, dict):
            errors.append(
                DagValidationError(
                    code="E_INVALID_TYPE",
                    message="node must be an object",
                    file=file,
                    path=node_path,
                )
            )
            continue

        nid = raw.get("id")
        if not isinstance(nid, str) or not nid.strip():
            errors.append(
                DagValidationError(
                    code="E_REQUIRED_FIELD",
                    message="id is required and must be a non-empty string",
                    file=file,
                    path=f"{node_path}.id",
                )
            )
            continue

        parents = raw.get("parents")
        if parents is None:
            parents = []
        if parents != [] and not _is_list_of_str(parents):
            errors.append(
                DagValidationError(
                    code="E_INVALID_TYPE",
                    message="parents must be an array of strings",
                    file=file,
                    path=f"{node_path}.parents",
                    node_id=nid,
                )
            )
            continue

        label = raw.get("label")
        if label is not None and not isinstance(label, str):
            errors.append(
                DagValidationError(
                    code="E_INVALID_TYPE",
                    message="label must be a string",
                    file=file,
                    path=f"{node_path}.label",
                    node_id=nid,
                )
            )
            continue

        data = raw.get("data")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            errors.append(
                DagValidationError(
                    code="E_INVALID_TYPE",
                    message="data must be a mapping",
                    file=file,
                    path=f"{node_path}.data",
                    node_id=nid,
                )
            )
            continue

        b = b.add_node(NodeRecord(id=nid, label=label, data=data), cast(list[str], parents))

    if errors:
        return None, _sorted(errors)
    return b, []


def _sorted(errors: Iterable[DagValidationError]) -> list[DagValidationError]:
    return sorted(
        list(errors),
        key=lambda e: (
            e.file or "",
            e.path or "",
            e.code,
        ),
    )
