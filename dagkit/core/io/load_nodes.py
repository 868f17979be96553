from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from dagkit.core.errors import DagLoadError


def load_nodes(path: str) -> dict[str, Any]:
    """Load a YAML/JSON node document.

    Returns a dict with keys: schema_version, nodes, __file__.
    Does not coerce types; validate_nodes owns shape checking.
    """

    p = Path(path)
    if not p.exists():
        raise DagLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise DagLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message="supported formats are .yaml/.yml and .json",
            file=str(p),
        )

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:  # pragma: no cover
        raise DagLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix == ".json":
            data = json.loads(raw_text)
        else:
            data = yaml.safe_load(raw_text)
    except (yaml.YAMLError, ValueError) as e:
        code = "E_JSON_PARSE" if suffix == ".json" else "E_YAML_PARSE"
        raise DagLoadError(code=code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise DagLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )

    return {
        "schema_version": data.get("schema_version"),
        "nodes": data.get("nodes"),
        "__file__": str(p),
    }
