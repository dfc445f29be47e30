"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration, resolve_type_reference
from .registry_assembly import build_registry, render_document
from .runtime_settings import (
    AliasEntry,
    Configuration,
    OutputSettings,
    RegistrySettings,
    TypeEntry,
)

__all__ = [
    "AliasEntry",
    "Configuration",
    "OutputSettings",
    "RegistrySettings",
    "TypeEntry",
    "ConfigurationError",
    "load_configuration",
    "resolve_type_reference",
    "build_registry",
    "render_document",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
