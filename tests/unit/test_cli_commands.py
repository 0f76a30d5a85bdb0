"""CLI routing and command-surface tests."""

from pathlib import Path

from click.testing import CliRunner

from mysqldiff import __version__
from mysqldiff.cli import cli
from mysqldiff.domain.errors import ConfigError, ProviderError


def test_version_option() -> None:
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_diff_routes_default_arguments(monkeypatch) -> None:
    runner = CliRunner()
    captured: dict[str, object] = {}

    def _generate(**kwargs):
        captured.update(kwargs)

    monkeypatch.setattr("mysqldiff.cli.generate_migration", _generate)

    result = runner.invoke(cli, ["diff"])

    assert result.exit_code == 0
    assert captured["config_path"] == Path("config.json")
    assert captured["output"] is None
    assert captured["policy_overrides"] == {}
    assert captured["show_sql"] is False


def test_diff_routes_positional_paths_and_flags(monkeypatch, temp_workspace: Path) -> None:
    runner = CliRunner()
    captured: dict[str, object] = {}

    def _generate(**kwargs):
        captured.update(kwargs)

    monkeypatch.setattr("mysqldiff.cli.generate_migration", _generate)

    config = temp_workspace / "cfg.json"
    output = temp_workspace / "release.sql"
    result = runner.invoke(
        cli,
        [
            "diff",
            str(config),
            str(output),
            "--keep-tables",
            "--drop-columns",
            "--compare-table-comment",
            "--show-sql",
        ],
    )

    assert result.exit_code == 0
    assert captured["config_path"] == config
    assert captured["output"] == output
    assert captured["policy_overrides"] == {
        "drop_deleted_tables": False,
        "drop_deleted_columns": True,
        "compare_table_comment": True,
    }
    assert captured["show_sql"] is True


def test_diff_returns_error_code_on_command_error(monkeypatch) -> None:
    runner = CliRunner()

    def _raise(**kwargs):  # noqa: ARG001
        raise ConfigError(message="Config file not found: config.json", code="config_missing")

    monkeypatch.setattr("mysqldiff.cli.generate_migration", _raise)

    result = runner.invoke(cli, ["diff"])

    assert result.exit_code == 1
    assert "Config file not found: config.json" in result.output


def test_snapshot_routes_arguments(monkeypatch, temp_workspace: Path) -> None:
    runner = CliRunner()
    captured: dict[str, object] = {}

    def _dump(**kwargs):
        captured.update(kwargs)

    monkeypatch.setattr("mysqldiff.cli.dump_snapshot", _dump)

    output = temp_workspace / "dev.json"
    result = runner.invoke(cli, ["snapshot", "--target", "development", "-o", str(output)])

    assert result.exit_code == 0
    assert captured == {
        "config_path": Path("config.json"),
        "target": "development",
        "output": output,
    }


def test_snapshot_requires_output() -> None:
    result = CliRunner().invoke(cli, ["snapshot"])

    assert result.exit_code == 2
    assert "--output" in result.output


def test_snapshot_rejects_unknown_target(temp_workspace: Path) -> None:
    result = CliRunner().invoke(
        cli, ["snapshot", "-t", "staging", "-o", str(temp_workspace / "x.json")]
    )

    assert result.exit_code == 2


def test_snapshot_returns_error_code_on_provider_error(monkeypatch, temp_workspace: Path) -> None:
    def _raise(**kwargs):  # noqa: ARG001
        raise ProviderError(message="Cannot connect to ro@db:3306/app", code="provider_connect_failed")

    monkeypatch.setattr("mysqldiff.cli.dump_snapshot", _raise)

    result = CliRunner().invoke(cli, ["snapshot", "-o", str(temp_workspace / "x.json")])

    assert result.exit_code == 1
    assert "Cannot connect" in result.output
