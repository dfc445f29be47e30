"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "schema-registry.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Schema registry configuration template for proto-schema-registry.
# Replace every <REQUIRED> placeholder before running dump.
# Replace <OPTIONAL> placeholders only when your setup needs them.

registry:
  # Prefix of every $ref pointing at a named schema.
  prefix: "#/components/schemas/"
  # Naming policy for named schemas (default or qualified).
  namer: default

types:
  # Import references in the form package.module:ClassName.
  - type: "<REQUIRED>"
    # hint: "<OPTIONAL>"

# aliases:
#   - type: "<OPTIONAL>"
#     target: "<OPTIONAL>"

output:
  # Document serialization (json or yaml).
  format: json
"""


def build_placeholder_configuration() -> str:
    """Build a YAML registry configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder registry configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
