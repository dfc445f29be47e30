"""Schema naming policies."""

from __future__ import annotations

import re
from collections.abc import Callable

from proto_schema_registry.type_descriptors import TypeDescriptor, strip_pointers

SchemaNamer = Callable[[TypeDescriptor, str], str]

_NAME_SEPARATORS = re.compile(r"[\[\]*,|\s]+")


def default_schema_namer(type_descriptor: TypeDescriptor, hint: str) -> str:
    """Name a schema after its type, falling back to the caller's hint.

    Generic brackets, pointer markers and dotted qualifiers are dropped and
    every remaining part is capitalized, so ``Page[models.Item]`` becomes
    ``PageItem``.
    """
    name = strip_pointers(type_descriptor).name or hint
    parts = [part for part in _NAME_SEPARATORS.split(name) if part]
    return "".join(_upper_first(part.rsplit(".", 1)[-1]) for part in parts)


def qualified_schema_namer(type_descriptor: TypeDescriptor, hint: str) -> str:
    """Prefix the default name with the camel-cased module path of the type."""
    base = strip_pointers(type_descriptor)
    name = default_schema_namer(type_descriptor, hint)
    if not base.name or not base.module:
        return name
    qualifier = "".join(_upper_first(part) for part in re.split(r"[._]+", base.module) if part)
    return qualifier + name


_NAMERS: dict[str, SchemaNamer] = {
    "default": default_schema_namer,
    "qualified": qualified_schema_namer,
}
SCHEMA_NAMER_KEYS = tuple(_NAMERS)


def resolve_schema_namer(key: str) -> SchemaNamer:
    try:
        return _NAMERS[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown schema namer '{key}'; expected one of: {', '.join(SCHEMA_NAMER_KEYS)}"
        ) from exc


def _upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]
