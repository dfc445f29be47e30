"""Configuration loader service."""

from __future__ import annotations

import importlib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from proto_schema_registry.schema_derivation import DEFAULT_PREFIX, SCHEMA_NAMER_KEYS

from .runtime_settings import (
    AliasEntry,
    Configuration,
    OutputSettings,
    RegistrySettings,
    TypeEntry,
)

OUTPUT_FORMATS = ("json", "yaml")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    return Configuration(
        path=path,
        registry=_parse_registry_section(parsed.get("registry")),
        types=_parse_types_section(parsed.get("types")),
        aliases=_parse_aliases_section(parsed.get("aliases")),
        output=_parse_output_section(parsed.get("output")),
    )


def resolve_type_reference(reference: str) -> Any:
    """Import the object named by ``package.module:Qualified.Name``."""
    module_name, separator, qualified_name = reference.partition(":")
    if not separator or not module_name or not qualified_name:
        raise ConfigurationError(
            f"Type reference '{reference}' must have the form 'package.module:ClassName'."
        )
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import module '{module_name}': {exc}") from exc
    for attribute in qualified_name.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Type reference '{reference}' does not resolve: missing '{attribute}'."
            ) from exc
    return target


def _parse_registry_section(value: Any) -> RegistrySettings:
    section = _optional_mapping(value, "registry")
    prefix = _optional_string(section.get("prefix"), "registry.prefix") or DEFAULT_PREFIX
    namer = _optional_string(section.get("namer"), "registry.namer") or "default"
    if namer not in SCHEMA_NAMER_KEYS:
        raise ConfigurationError(
            f"registry.namer must be one of: {', '.join(SCHEMA_NAMER_KEYS)}."
        )
    return RegistrySettings(prefix=prefix, namer=namer)


def _parse_types_section(value: Any) -> tuple[TypeEntry, ...]:
    entries = _require_sequence(value, "types")
    if not entries:
        raise ConfigurationError("types must list at least one type reference.")
    parsed: list[TypeEntry] = []
    for index, entry in enumerate(entries):
        label = f"types[{index}]"
        if isinstance(entry, str):
            entry = {"type": entry}
        section = _require_mapping(entry, label)
        reference = _require_non_empty_string(section.get("type"), f"{label}.type")
        hint = _optional_string(section.get("hint"), f"{label}.hint") or ""
        parsed.append(
            TypeEntry(reference=reference, type=resolve_type_reference(reference), hint=hint)
        )
    return tuple(parsed)


def _parse_aliases_section(value: Any) -> tuple[AliasEntry, ...]:
    if value is None:
        return ()
    entries = _require_sequence(value, "aliases")
    parsed: list[AliasEntry] = []
    for index, entry in enumerate(entries):
        label = f"aliases[{index}]"
        section = _require_mapping(entry, label)
        reference = _require_non_empty_string(section.get("type"), f"{label}.type")
        target_reference = _require_non_empty_string(section.get("target"), f"{label}.target")
        parsed.append(
            AliasEntry(
                reference=reference,
                type=resolve_type_reference(reference),
                target_reference=target_reference,
                target=resolve_type_reference(target_reference),
            )
        )
    return tuple(parsed)


def _parse_output_section(value: Any) -> OutputSettings:
    section = _optional_mapping(value, "output")
    output_format = (_optional_string(section.get("format"), "output.format") or "json").lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(f"output.format must be one of: {', '.join(OUTPUT_FORMATS)}.")
    return OutputSettings(format=output_format)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_sequence(value: Any, section_name: str) -> Sequence[Any]:
    if value is None:
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a list.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
