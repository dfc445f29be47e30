"""Command line interface entry point."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from proto_schema_registry.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    build_registry,
    load_configuration,
    render_document,
    write_placeholder_configuration,
)
from proto_schema_registry.definition_errors import SchemaDefinitionError


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="proto-schema-registry")
def cli() -> None:
    """Derive JSON schema documents from Python types."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML registry configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML registry configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="dump")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON registry configuration file",
)
@click.option(
    "--format",
    "output_format",
    required=False,
    type=click.Choice(["json", "yaml"]),
    help="Override the configured document format",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional file to write the schema document to",
)
def dump(config_path: str, output_format: str | None, output_path: str | None) -> None:
    """Derive every configured type and print the named schema document."""
    try:
        configuration = load_configuration(config_path)
        registry = build_registry(configuration)
        document = render_document(registry, output_format or configuration.output.format)
    except (ConfigurationError, SchemaDefinitionError) as exc:
        raise CliError(str(exc)) from exc
    if output_path is None:
        click.echo(document, nl=False)
        return
    try:
        Path(output_path).write_text(document, encoding="utf-8")
    except OSError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(Path(output_path).resolve()))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
