"""Type descriptor exports."""

from .descriptor_models import (
    FieldDescriptor,
    MethodDescriptor,
    TypeCapabilities,
    TypeDescriptor,
    TypeKind,
    WellKnownType,
    array_of,
    map_of,
    pointer_to,
    slice_of,
    strip_pointers,
)
from .python_introspection import TypeDescriber, describe_type
from .scalar_markers import (
    FixedLength,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    RawMessage,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)

__all__ = [
    "FieldDescriptor",
    "FixedLength",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "MethodDescriptor",
    "RawMessage",
    "TypeCapabilities",
    "TypeDescriber",
    "TypeDescriptor",
    "TypeKind",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "WellKnownType",
    "array_of",
    "describe_type",
    "map_of",
    "pointer_to",
    "slice_of",
    "strip_pointers",
]
