"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class RegistrySettings:
    """Reference prefix and naming policy for the schema registry."""

    prefix: str
    namer: str


@dataclass(frozen=True)
class TypeEntry:
    """One type to document, resolved from its import reference."""

    reference: str
    type: Any
    hint: str


@dataclass(frozen=True)
class AliasEntry:
    """Redirect the schema of ``type`` to the schema of ``target``."""

    reference: str
    type: Any
    target_reference: str
    target: Any


@dataclass(frozen=True)
class OutputSettings:
    """Serialization of the assembled schema document."""

    format: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    registry: RegistrySettings
    types: tuple[TypeEntry, ...]
    aliases: tuple[AliasEntry, ...]
    output: OutputSettings
