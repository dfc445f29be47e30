"""Schema registry service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from proto_schema_registry.definition_errors import DuplicateSchemaNameError
from proto_schema_registry.type_descriptors import (
    TypeDescriber,
    TypeDescriptor,
    TypeKind,
    WellKnownType,
    describe_type,
    strip_pointers,
)

from .naming import SchemaNamer, default_schema_namer
from .schema_models import SchemaNode
from .type_walker import derive_schema

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())

DEFAULT_PREFIX = "#/components/schemas/"


class SchemaRegistry:
    """Caches and names schemas derived from types.

    Record types get one named entry each and are referenced by ``$ref``; every
    other type is derived inline on each request. The registry is meant to be
    populated once during application start-up and only read afterwards; it is
    not safe to mutate concurrently.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        namer: SchemaNamer = default_schema_namer,
        describer: TypeDescriber | None = None,
    ) -> None:
        self._prefix = prefix
        self._namer = namer
        self._describer = describer
        self._schemas: dict[str, SchemaNode] = {}
        self._types: dict[str, TypeDescriptor] = {}
        self._seen: set[TypeDescriptor] = set()
        self._aliases: dict[TypeDescriptor, TypeDescriptor] = {}

    @property
    def prefix(self) -> str:
        return self._prefix

    def describe(self, type_: Any) -> TypeDescriptor:
        """Return the descriptor for a Python annotation or descriptor."""
        if self._describer is not None:
            return self._describer.describe(type_)
        return describe_type(type_)

    def schema(self, type_: Any, allow_ref: bool = False, hint: str = "") -> SchemaNode | None:
        """Return the schema for ``type_``, deriving and registering it on first use.

        Args:
          type_: Python annotation or type descriptor; pointer indirections are allowed.
          allow_ref: Return a ``$ref`` node instead of the full schema for named types.
          hint: Name to use when the type itself has none.

        Returns:
          The schema (or reference) node, or ``None`` for kinds that cannot be documented.

        Raises:
          DuplicateSchemaNameError: If another type already registered the derived name.
        """
        original = self.describe(type_)
        base = strip_pointers(original)
        if base.kind in (TypeKind.ARRAY, TypeKind.SLICE):
            # An optional sequence decays to the sequence itself.
            original = base

        alias = self._aliases.get(base)
        if alias is not None:
            _LOGGER.debug("schema for %s redirected to alias %s", base, alias)
            return self.schema(alias, allow_ref, hint)

        gets_ref = self._is_ref_eligible(base)
        name = self._namer(original, hint)

        if gets_ref and name in self._schemas:
            if base not in self._seen or self._types[name] is not base:
                raise DuplicateSchemaNameError(name, base, self._types[name])
            if allow_ref:
                return SchemaNode(ref=self._prefix + name)
            return self._schemas[name]

        registered_before = len(self._schemas)
        if gets_ref:
            # Placeholder first, so recursive references resolve to a $ref.
            self._schemas[name] = SchemaNode()
            self._types[name] = base
            self._seen.add(base)
            _LOGGER.debug("registered schema %s for %s", name, base)

        try:
            schema = derive_schema(self, original)
        except BaseException:
            self._discard_entries_from(registered_before)
            raise
        if gets_ref:
            self._schemas[name] = schema if schema is not None else SchemaNode()

        if gets_ref and allow_ref:
            return SchemaNode(ref=self._prefix + name)
        return schema

    def schema_from_ref(self, ref: str) -> SchemaNode | None:
        name = self._name_from_ref(ref)
        if name is None:
            return None
        return self._schemas.get(name)

    def type_from_ref(self, ref: str) -> TypeDescriptor | None:
        name = self._name_from_ref(ref)
        if name is None:
            return None
        return self._types.get(name)

    def register_type_alias(self, type_: Any, alias: Any) -> None:
        """Make every later lookup of ``type_`` derive ``alias`` instead."""
        self._aliases[strip_pointers(self.describe(type_))] = self.describe(alias)

    def entries(self) -> Mapping[str, SchemaNode]:
        """Live read-only view of every named schema."""
        return MappingProxyType(self._schemas)

    def to_dict(self) -> dict[str, Any]:
        return {name: schema.to_dict() for name, schema in self._schemas.items()}

    def _discard_entries_from(self, position: int) -> None:
        # Entries are only ever appended, so everything past position belongs to
        # the failed derivation, including nested entries that may point back at it.
        for name in list(self._schemas)[position:]:
            del self._schemas[name]
            self._seen.discard(self._types.pop(name))
            _LOGGER.debug("discarded schema %s after failed derivation", name)

    def _name_from_ref(self, ref: str) -> str | None:
        if not ref.startswith(self._prefix):
            return None
        return ref[len(self._prefix) :]

    @staticmethod
    def _is_ref_eligible(base: TypeDescriptor) -> bool:
        if base.kind is not TypeKind.STRUCT:
            return False
        if base.well_known is WellKnownType.TIME:
            return False
        if base.capabilities.schema_provider is not None:
            return False
        return not base.capabilities.text_parseable
