"""Type descriptor entities."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from proto_schema_registry.field_metadata.annotation_models import FieldAnnotations


class TypeKind(str, Enum):
    """Structural kinds a type descriptor can have."""

    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX = "complex"
    STRING = "string"
    ARRAY = "array"
    SLICE = "slice"
    MAP = "map"
    STRUCT = "struct"
    POINTER = "pointer"
    INTERFACE = "interface"
    FUNC = "func"
    UNSUPPORTED = "unsupported"


class WellKnownType(str, Enum):
    """Types documented with a fixed string format regardless of their shape."""

    TIME = "time"
    URL = "url"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    RAW_MESSAGE = "raw_message"


@dataclass(frozen=True)
class TypeCapabilities:
    """Optional capabilities a type may declare."""

    schema_provider: Callable[[Any], Any] | None = None
    schema_transformer: Callable[[Any, Any], Any] | None = None
    text_parseable: bool = False


NO_CAPABILITIES = TypeCapabilities()


@dataclass(frozen=True)
class FieldDescriptor:
    """One declared member of a record type."""

    name: str
    type: TypeDescriptor
    tags: Mapping[str, str] = field(default_factory=dict)
    embedded: bool = False

    @property
    def exported(self) -> bool:
        return not self.name.startswith("_")

    @cached_property
    def annotations(self) -> FieldAnnotations:
        """Structured annotation record, parsed on first access only."""
        from proto_schema_registry.field_metadata.annotation_parser import (
            parse_field_annotations,
        )

        return parse_field_annotations(self.name, self.tags)


@dataclass(frozen=True)
class MethodDescriptor:
    """Zero-argument accessor declared on a record type."""

    name: str
    return_type: TypeDescriptor


@dataclass(eq=False)
class TypeDescriptor:  # pylint: disable=too-many-instance-attributes
    """Kind tag plus structural metadata for one type.

    Descriptors compare by identity. Record descriptors are created empty and
    have ``fields``/``methods`` filled in afterwards so that self-referential
    records can point back at themselves.
    """

    kind: TypeKind
    name: str = ""
    module: str = ""
    elem: TypeDescriptor | None = None
    key: TypeDescriptor | None = None
    length: int | None = None
    fields: tuple[FieldDescriptor, ...] = ()
    methods: tuple[MethodDescriptor, ...] = ()
    capabilities: TypeCapabilities = NO_CAPABILITIES
    well_known: WellKnownType | None = None

    def __str__(self) -> str:
        if self.name:
            return f"{self.module}.{self.name}" if self.module else self.name
        if self.kind is TypeKind.POINTER and self.elem is not None:
            return f"*{self.elem}"
        if self.kind is TypeKind.SLICE and self.elem is not None:
            return f"[]{self.elem}"
        if self.kind is TypeKind.ARRAY and self.elem is not None:
            return f"[{self.length}]{self.elem}"
        if self.kind is TypeKind.MAP and self.elem is not None:
            return f"map[{self.key}]{self.elem}"
        return self.kind.value

    def field_by_name(self, name: str) -> FieldDescriptor | None:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        return None


def strip_pointers(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Follow pointer indirections down to the referenced type."""
    while descriptor.kind is TypeKind.POINTER and descriptor.elem is not None:
        descriptor = descriptor.elem
    return descriptor


def pointer_to(descriptor: TypeDescriptor) -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.POINTER, elem=descriptor)


def slice_of(descriptor: TypeDescriptor, *, name: str = "") -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.SLICE, name=name, elem=descriptor)


def array_of(descriptor: TypeDescriptor, length: int, *, name: str = "") -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.ARRAY, name=name, elem=descriptor, length=length)


def map_of(
    key: TypeDescriptor, value: TypeDescriptor, *, name: str = ""
) -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.MAP, name=name, key=key, elem=value)
