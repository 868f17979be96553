import json
from pathlib import Path

from typer.testing import CliRunner

from dagkit.cli import app

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

runner = CliRunner()


def test_cli_build_json_success():
    r = runner.invoke(app, ["build", str(EXAMPLES / "privileges.yaml"), "--format", "json"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["command"] == "build"
    assert payload["ok"] is True
    assert payload["error_count"] == 0
    assert payload["errors"] == []
    assert payload["summary"]["node_count"] == 5
    assert payload["summary"]["roots"] == ["Admin"]
    assert payload["summary"]["heights"]["Edit Own Nodes"] == 2


def test_cli_build_json_failure_keeps_resolution_order():
    r = runner.invoke(app, ["build", str(EXAMPLES / "invalid-missing-parent.yaml"), "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    assert payload["summary"] is None
    assert [e["node_id"] for e in payload["errors"]] == ["10", "9"]
    assert {e["source"] for e in payload["errors"]} == {"build"}
    assert payload["errors"][0]["message"] == "Missing Parent: Cannot find one or more parents for node '10'"


def test_cli_build_json_load_error():
    r = runner.invoke(app, ["build", str(EXAMPLES / "nope.yaml"), "--format", "json"])
    assert r.exit_code == 1
    payload = json.loads(r.stdout)
    assert payload["errors"][0]["code"] == "E_FILE_NOT_FOUND"
    assert payload["errors"][0]["source"] == "load"
