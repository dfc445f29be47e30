"""Registry assembly from a loaded configuration."""

from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from proto_schema_registry.schema_derivation import SchemaRegistry, resolve_schema_namer

from .runtime_settings import Configuration

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())


def build_registry(configuration: Configuration) -> SchemaRegistry:
    """Create a registry, register aliases, then derive every configured type.

    Raises:
      SchemaDefinitionError: If any configured type has a broken declaration.
    """
    registry = SchemaRegistry(
        prefix=configuration.registry.prefix,
        namer=resolve_schema_namer(configuration.registry.namer),
    )
    for alias in configuration.aliases:
        registry.register_type_alias(alias.type, alias.target)
    for entry in configuration.types:
        registry.schema(entry.type, True, entry.hint)
        _LOGGER.debug("derived schema for %s", entry.reference)
    return registry


def render_document(registry: SchemaRegistry, output_format: str) -> str:
    document: dict[str, Any] = registry.to_dict()
    if output_format == "yaml":
        return yaml.safe_dump(document, sort_keys=False)
    return json.dumps(document, indent=2) + "\n"
