from pathlib import Path

from dagkit.core.build.build_dag import build
from dagkit.core.io.load_nodes import load_nodes
from dagkit.core.model import NodeRecord
from dagkit.core.query.query_dag import get, get_height, size
from dagkit.core.validate.validate_nodes import validate_nodes

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_validate_happy_path():
    doc = load_nodes(str(EXAMPLES / "privileges.yaml"))
    b, errors = validate_nodes(doc)
    assert errors == []
    assert b is not None
    assert [i.node.id for i in b.instructions][:2] == ["Admin", "Edit Own Nodes"]

    dag, build_errors = build(b)
    assert build_errors == []
    assert size(dag) == 5
    assert get(dag, "Edit All Nodes").label == "Nodes:Edit:All"
    assert get_height(dag, "View Own Nodes") == 3


def test_validate_defaults_missing_parents_and_data():
    b, errors = validate_nodes({"schema_version": "0.1", "nodes": [{"id": "a", "parents": None}]})
    assert errors == []
    instr = b.instructions[0]
    assert instr.parent_ids == ()
    assert instr.node == NodeRecord(id="a")
    assert dict(instr.node.data) == {}


def test_validate_carries_data():
    doc = {"schema_version": "0.1", "nodes": [{"id": "a", "data": {"weight": 3}}]}
    b, _ = validate_nodes(doc)
    assert b.instructions[0].node.data == {"weight": 3}


def test_validate_bad_shapes():
    doc = load_nodes(str(EXAMPLES / "invalid-bad-type.json"))
    b, errors = validate_nodes(doc)
    assert b is None
    assert [(e.code, e.path) for e in errors] == [
        ("E_INVALID_TYPE", "nodes[0].parents"),
        ("E_REQUIRED_FIELD", "nodes[1].id"),
    ]


def test_validate_missing_nodes_and_schema():
    b, errors = validate_nodes({})
    assert b is None
    assert [e.path for e in errors] == ["nodes", "schema_version"]
    assert all(e.code == "E_REQUIRED_FIELD" for e in errors)


def test_validate_unsupported_schema():
    b, errors = validate_nodes({"schema_version": "1.0.0", "nodes": []})
    assert b is None
    assert errors[0].code == "E_UNSUPPORTED_SCHEMA"


def test_validate_leaves_reference_errors_to_build():
    doc = load_nodes(str(EXAMPLES / "invalid-missing-parent.yaml"))
    b, errors = validate_nodes(doc)
    assert errors == []
    dag, build_errors = build(b)
    assert dag is None
    assert [e.node_id for e in build_errors] == ["10", "9"]


def test_validate_seeds_starting_dag():
    base_b, _ = validate_nodes(load_nodes(str(EXAMPLES / "privileges-base.yaml")))
    base, _ = build(base_b)
    b, errors = validate_nodes(load_nodes(str(EXAMPLES / "privileges-extension.yaml")), base)
    assert errors == []
    assert b.starting_dag is base
    dag, build_errors = build(b)
    assert build_errors == []
    assert size(dag) == 5
