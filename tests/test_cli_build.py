from pathlib import Path

from typer.testing import CliRunner

from dagkit.cli import app

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

runner = CliRunner()


def test_cli_build_success():
    r = runner.invoke(app, ["build", str(EXAMPLES / "privileges.yaml")])
    assert r.exit_code == 0, r.output
    assert "OK: 5 nodes, 5 edges, max height 3" in r.stdout
    assert "Roots: Admin" in r.stdout
    assert "View Own Nodes: height 3" in r.stdout


def test_cli_build_with_base():
    r = runner.invoke(
        app,
        [
            "build",
            str(EXAMPLES / "privileges-extension.yaml"),
            "--base",
            str(EXAMPLES / "privileges-base.yaml"),
        ],
    )
    assert r.exit_code == 0, r.output
    assert "OK: 5 nodes" in r.stdout


def test_cli_build_extension_alone_fails():
    r = runner.invoke(app, ["build", str(EXAMPLES / "privileges-extension.yaml")])
    assert r.exit_code == 2
    assert "E_MISSING_PARENT" in r.output
    assert "Cannot find one or more parents for node 'View Own Nodes'" in r.output


def test_cli_build_missing_file():
    r = runner.invoke(app, ["build", str(EXAMPLES / "nope.yaml")])
    assert r.exit_code == 1
    assert "E_FILE_NOT_FOUND" in r.output


def test_cli_build_validation_failure():
    r = runner.invoke(app, ["build", str(EXAMPLES / "invalid-bad-type.json")])
    assert r.exit_code == 2
    assert "E_INVALID_TYPE" in r.output


def test_cli_build_unknown_format():
    r = runner.invoke(app, ["build", str(EXAMPLES / "privileges.yaml"), "--format", "xml"])
    assert r.exit_code == 2
    assert "E_BUILD_UNKNOWN_FORMAT" in r.output


def test_cli_rejects_unknown_log_level():
    r = runner.invoke(app, ["--log-level", "chatty", "build", str(EXAMPLES / "privileges.yaml")])
    assert r.exit_code == 2
