from __future__ import annotations

import json
import logging
import sys
from typing import Optional

import typer

from dagkit.core.build.build_dag import build
from dagkit.core.errors import BuildError, DagError, DagLoadError, DagValidationError
from dagkit.core.io.load_nodes import load_nodes
from dagkit.core.model import Dag, NodeRecord
from dagkit.core.query.query_dag import (
    get,
    get_children,
    get_height,
    get_parents,
    is_descendant_of,
    roots,
    summarize_dag,
)
from dagkit.core.validate.validate_nodes import validate_nodes

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="DAGKIT_LOG_LEVEL",
        help="Log level for diagnostics on stderr (DEBUG|INFO|WARNING|ERROR)",
    ),
) -> None:
    """DAG builder CLI."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level: {log_level}", param_hint="--log-level")
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s", force=True)


class _BuildFailed(Exception):
    def __init__(self, errors: list[DagError], exit_code: int) -> None:
        super().__init__(f"{len(errors)} errors")
        self.errors = errors
        self.exit_code = exit_code


def _build_document(path: str, base: Optional[str] = None) -> Dag[NodeRecord]:
    """Load, validate and build a node document, optionally seeded by another one."""
    starting: Optional[Dag[NodeRecord]] = None
    if base is not None:
        starting = _build_document(base)

    try:
        doc = load_nodes(path)
    except DagLoadError as e:
        raise _BuildFailed([e], 1) from e

    b, validation_errors = validate_nodes(doc, starting)
    if validation_errors:
        raise _BuildFailed(list(validation_errors), 2)
    assert b is not None

    dag, build_errors = build(b)
    if build_errors:
        raise _BuildFailed(list(build_errors), 2)
    assert dag is not None
    return dag


@app.command("build")
def build_cmd(
    path: str = typer.Argument(..., help="Path to a node document (.yaml/.yml/.json)"),
    base: Optional[str] = typer.Option(None, "--base", help="Node document to build first and extend"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Build a DAG from a node document and report node heights."""
    if format not in ("text", "json"):
        err = DagValidationError(
            code="E_BUILD_UNKNOWN_FORMAT",
            message=f"unknown format: {format} (choose one of: text, json)",
            file=None,
            path="format",
        )
        _print_errors([err])
        raise typer.Exit(code=2)

    def _to_item(e: DagError) -> dict:
        if isinstance(e, DagLoadError):
            source = "load"
        elif isinstance(e, BuildError):
            source = "build"
        else:
            source = "validate"
        return {
            "code": e.code,
            "message": e.message,
            "file": e.file,
            "path": e.path,
            "node_id": e.node_id,
            "severity": "error",
            "source": source,
        }

    def _emit_json(ok: bool, *, exit_code: int, errors: list[DagError], summary: dict | None) -> None:
        payload = {
            "tool": "dagkit",
            "command": "build",
            "ok": ok,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
            "summary": summary,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    try:
        dag = _build_document(path, base)
    except _BuildFailed as failed:
        if format == "json":
            _emit_json(False, exit_code=failed.exit_code, errors=failed.errors, summary=None)
        _print_errors(failed.errors)
        raise typer.Exit(code=failed.exit_code)

    if format == "text":
        typer.echo(summarize_dag(dag))
        for node_id, info in dag.nodes.items():
            typer.echo(f"{node_id}: height {info.height}")
        return

    summary = {
        "node_count": len(dag.nodes),
        "edge_count": len(dag.edges),
        "max_height": max((info.height for info in dag.nodes.values()), default=0),
        "roots": [n.id for n in roots(dag)],
        "heights": {node_id: info.height for node_id, info in dag.nodes.items()},
    }
    _emit_json(True, exit_code=0, errors=[], summary=summary)


@app.command("parents")
def parents_cmd(
    path: str = typer.Argument(..., help="Path to a node document (.yaml/.yml/.json)"),
    node_id: str = typer.Argument(..., help="Node id to look up"),
) -> None:
    """List the parents of a node, one id per line."""
    dag = _build_or_exit(path)
    node = _node_or_exit(dag, node_id, path)
    for p in get_parents(dag, node):
        typer.echo(p.id)


@app.command("children")
def children_cmd(
    path: str = typer.Argument(..., help="Path to a node document (.yaml/.yml/.json)"),
    node_id: str = typer.Argument(..., help="Node id to look up"),
) -> None:
    """List the children of a node, one id per line."""
    dag = _build_or_exit(path)
    node = _node_or_exit(dag, node_id, path)
    for c in get_children(dag, node):
        typer.echo(c.id)


@app.command("descends")
def descends_cmd(
    path: str = typer.Argument(..., help="Path to a node document (.yaml/.yml/.json)"),
    node_id: str = typer.Argument(..., help="Node id whose ancestry is checked"),
    ancestor: list[str] = typer.Option(..., "--ancestor", help="Candidate ancestor id (repeatable)"),
) -> None:
    """Print true if NODE_ID descends from any of the given ancestors."""
    dag = _build_or_exit(path)
    node = _node_or_exit(dag, node_id, path)
    result = is_descendant_of(dag, node, [NodeRecord(id=a) for a in ancestor])
    typer.echo("true" if result else "false")


def _build_or_exit(path: str) -> Dag[NodeRecord]:
    try:
        return _build_document(path)
    except _BuildFailed as failed:
        _print_errors(failed.errors)
        raise typer.Exit(code=failed.exit_code)


def _node_or_exit(dag: Dag[NodeRecord], node_id: str, path: str) -> NodeRecord:
    node = get(dag, node_id)
    if node is None:
        _print_errors(
            [
                DagValidationError(
                    code="E_UNKNOWN_NODE",
                    message=f"node not in graph: {node_id}",
                    file=path,
                    path="node_id",
                    node_id=node_id,
                )
            ]
        )
        raise typer.Exit(code=2)
    logger.debug("%s found at height %s", node_id, get_height(dag, node_id))
    return node


def _print_errors(errors: list[DagError]) -> None:
    # Build errors keep resolution order; the rest are sorted by location.
    if not any(isinstance(e, BuildError) for e in errors):
        errors = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors:
        if isinstance(e, BuildError):
            typer.echo(f"{e.code}: {e}", err=True)
        else:
            typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="dagkit")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
