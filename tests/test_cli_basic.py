# tests/test_cli_basic.py
from typer.testing import CliRunner


def test_cli_help(cli_app):
    r = CliRunner().invoke(cli_app, ["--help"])
    assert r.exit_code == 0
    assert "Usage" in r.stdout
    assert "send-offline-command" in r.stdout


def test_where(cli_app, tmp_path):
    r = CliRunner().invoke(cli_app, ["where"])
    assert r.exit_code == 0
    assert str(tmp_path / "base" / "commands") in r.stdout
