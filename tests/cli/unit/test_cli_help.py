"""CLI smoke tests."""

from click.testing import CliRunner
from proto_schema_registry.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "generate-config" in result.output
    assert "dump" in result.output


def test_dump_help_lists_format_choices() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["dump", "--help"])

    assert result.exit_code == 0
    assert "--config" in result.output
    assert "json" in result.output
    assert "yaml" in result.output
