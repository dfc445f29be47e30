"""Type descriptor to schema node derivation."""

from __future__ import annotations

import json
import logging
import struct
from collections import deque
from dataclasses import replace
from typing import Any, Protocol

from proto_schema_registry.definition_errors import (
    InvalidAnnotationError,
    MissingDependentFieldError,
)
from proto_schema_registry.field_metadata import FieldConstraints
from proto_schema_registry.type_descriptors import (
    FieldDescriptor,
    TypeDescriptor,
    TypeKind,
    WellKnownType,
    strip_pointers,
)

from .schema_models import (
    SCALAR_TYPES,
    TYPE_ARRAY,
    TYPE_BOOLEAN,
    TYPE_INTEGER,
    TYPE_NUMBER,
    TYPE_OBJECT,
    TYPE_STRING,
    SchemaNode,
)

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())

_NATIVE_INT_FORMAT = "int32" if struct.calcsize("P") * 8 == 32 else "int64"
_SIGNED_FORMATS = {
    TypeKind.INT: _NATIVE_INT_FORMAT,
    TypeKind.INT8: "int32",
    TypeKind.INT16: "int32",
    TypeKind.INT32: "int32",
    TypeKind.INT64: "int64",
}
_UNSIGNED_FORMATS = {
    TypeKind.UINT: _NATIVE_INT_FORMAT,
    TypeKind.UINT8: "int32",
    TypeKind.UINT16: "int32",
    TypeKind.UINT32: "int32",
    TypeKind.UINT64: "int64",
}
_FLOAT_FORMATS = {TypeKind.FLOAT32: "float", TypeKind.FLOAT64: "double"}
_WELL_KNOWN_FORMATS = {
    WellKnownType.TIME: "date-time",
    WellKnownType.URL: "uri",
    WellKnownType.IPV4: "ipv4",
    WellKnownType.IPV6: "ipv6",
}
_ACCESSOR_PREFIXES = ("Get", "get_")
_MARKER_FIELD = "_"


class SchemaResolver(Protocol):  # pylint: disable=too-few-public-methods
    """Registry callback used for every nested member type."""

    def schema(
        self, type_: Any, allow_ref: bool = False, hint: str = ""
    ) -> SchemaNode | None: ...


def derive_schema(registry: SchemaResolver, type_descriptor: TypeDescriptor) -> SchemaNode | None:
    """Derive the schema for one type, honoring its declared capabilities.

    A self-schema provider short-circuits derivation entirely. Otherwise the
    structurally derived node is passed once through the type's schema
    transformer, if it declares one.

    Returns:
      The schema node, or ``None`` when the kind cannot be documented.
    """
    base = strip_pointers(type_descriptor)
    provider = base.capabilities.schema_provider
    if provider is not None:
        return provider(registry)

    schema = _derive(registry, type_descriptor)
    transformer = base.capabilities.schema_transformer
    if transformer is not None and schema is not None:
        return transformer(registry, schema)
    return schema


def _derive(registry: SchemaResolver, original: TypeDescriptor) -> SchemaNode | None:
    is_pointer = original.kind is TypeKind.POINTER
    base = strip_pointers(original)

    if base.well_known is WellKnownType.RAW_MESSAGE:
        return SchemaNode()
    if base.well_known is not None:
        return SchemaNode(
            type=TYPE_STRING, nullable=is_pointer, format=_WELL_KNOWN_FORMATS[base.well_known]
        )
    if base.capabilities.text_parseable:
        # Text-parseable types trade structural detail for a plain string.
        return SchemaNode(type=TYPE_STRING, nullable=is_pointer)

    schema = _derive_by_kind(registry, base)
    if schema is not None and schema.type in SCALAR_TYPES:
        schema.nullable = is_pointer
    return schema


def _derive_by_kind(registry: SchemaResolver, base: TypeDescriptor) -> SchemaNode | None:
    kind = base.kind
    if kind is TypeKind.BOOL:
        return SchemaNode(type=TYPE_BOOLEAN)
    if kind in _SIGNED_FORMATS:
        return SchemaNode(type=TYPE_INTEGER, format=_SIGNED_FORMATS[kind])
    if kind in _UNSIGNED_FORMATS:
        return SchemaNode(type=TYPE_INTEGER, format=_UNSIGNED_FORMATS[kind], minimum=0)
    if kind in _FLOAT_FORMATS:
        return SchemaNode(type=TYPE_NUMBER, format=_FLOAT_FORMATS[kind])
    if kind is TypeKind.STRING:
        return SchemaNode(type=TYPE_STRING)
    if kind in (TypeKind.SLICE, TypeKind.ARRAY):
        return _sequence_schema(registry, base)
    if kind is TypeKind.MAP:
        return SchemaNode(
            type=TYPE_OBJECT,
            additional_properties=_nested(registry, base.elem, f"{base.name}Value"),
        )
    if kind is TypeKind.STRUCT:
        return _record_schema(registry, base)
    if kind is TypeKind.INTERFACE:
        return SchemaNode()
    return None


def _nested(
    registry: SchemaResolver, member: TypeDescriptor | None, hint: str
) -> SchemaNode | None:
    if member is None:
        return SchemaNode()
    return registry.schema(member, True, hint)


def _sequence_schema(registry: SchemaResolver, sequence: TypeDescriptor) -> SchemaNode:
    if sequence.elem is not None and sequence.elem.kind is TypeKind.UINT8:
        # Byte sequences travel as base64 text, never as arrays of small integers.
        return SchemaNode(type=TYPE_STRING, content_encoding="base64")
    schema = SchemaNode(
        type=TYPE_ARRAY,
        nullable=True,
        items=_nested(registry, sequence.elem, f"{sequence.name}Item"),
    )
    if sequence.kind is TypeKind.ARRAY:
        schema.min_items = sequence.length
        schema.max_items = sequence.length
    return schema


def _record_schema(registry: SchemaResolver, record: TypeDescriptor) -> SchemaNode:
    schema = SchemaNode(type=TYPE_OBJECT)
    fields = collect_fields(record)
    claimed: set[str] = set()
    dependent_required: dict[str, list[str]] = {}
    has_alternatives = False

    for record_field in fields:
        if record_field.name in claimed:
            # Shadowed by an outer declaration.
            continue
        annotations = record_field.annotations

        if annotations.union_discriminator:
            alternatives = _union_alternatives(registry, record, fields)
            if alternatives:
                has_alternatives = True
                schema.one_of.extend(alternatives)
            continue

        claimed.add(record_field.name)
        if annotations.ignored or annotations.hidden:
            continue
        name = annotations.wire_name
        if annotations.dependent_required:
            dependent_required[name] = list(annotations.dependent_required)

        field_schema = _field_schema(registry, record, record_field)
        if field_schema is None:
            continue
        schema.properties[name] = field_schema
        if annotations.required:
            schema.required.append(name)

    _check_dependents(schema.properties, dependent_required)

    if not has_alternatives:
        schema.additional_properties = False
        marker = record.field_by_name(_MARKER_FIELD)
        if marker is not None:
            if marker.annotations.additional_properties is not None:
                schema.additional_properties = marker.annotations.additional_properties
            if marker.annotations.nullable is not None:
                schema.nullable = marker.annotations.nullable
    schema.dependent_required = dependent_required
    return schema


def collect_fields(record: TypeDescriptor) -> list[FieldDescriptor]:
    """Breadth-first list of a record's fields including promoted embedded ones.

    The same name may appear more than once; the first occurrence is the
    outermost declaration.
    """
    collected: list[FieldDescriptor] = []
    visited: set[TypeDescriptor] = set()
    pending = deque([record])
    while pending:
        current = pending.popleft()
        if current in visited:
            continue
        visited.add(current)
        for record_field in current.fields:
            if not record_field.exported:
                continue
            if record_field.embedded:
                target = strip_pointers(record_field.type)
                if target.kind is TypeKind.STRUCT:
                    pending.append(target)
                continue
            collected.append(record_field)
    return collected


def _union_alternatives(
    registry: SchemaResolver, record: TypeDescriptor, fields: list[FieldDescriptor]
) -> list[SchemaNode]:
    field_accessors = {
        accessor
        for record_field in fields
        for accessor in (
            f"Get{_upper_camel(record_field.name)}",
            f"get_{record_field.name}",
        )
    }
    alternatives: list[SchemaNode] = []
    for method in record.methods:
        if not method.name.startswith(_ACCESSOR_PREFIXES) or method.name in field_accessors:
            continue
        member = method.return_type
        member_schema = registry.schema(
            member, True, f"{record.name}{strip_pointers(member).name}Struct"
        )
        if member_schema is None:
            continue
        property_name = _accessor_property_name(method.name)
        alternatives.append(
            SchemaNode(
                type=TYPE_OBJECT,
                properties={property_name: member_schema},
                required=[property_name],
            )
        )
        _LOGGER.debug("union alternative %s added to %s", property_name, record)
    return alternatives


def _field_schema(
    registry: SchemaResolver, record: TypeDescriptor, record_field: FieldDescriptor
) -> SchemaNode | None:
    annotations = record_field.annotations
    schema = registry.schema(
        record_field.type, True, f"{record.name}{_upper_first(record_field.name)}Struct"
    )
    if schema is None:
        return None
    # Copy so field-level keywords never leak into a shared node.
    schema = replace(schema)
    _apply_constraints(schema, annotations.constraints, record_field.name)
    if annotations.nullable is not None:
        schema.nullable = annotations.nullable
    if annotations.wire_format_tagged and record_field.type.kind is TypeKind.INT64:
        # The wire codec encodes 64-bit integers as JSON strings.
        schema.type = TYPE_STRING
    if (
        record_field.type.kind is TypeKind.POINTER
        and annotations.omit_empty
        and annotations.nullable is not True
    ):
        # Omitted when empty, so an explicit null never goes over the wire.
        schema.nullable = False
    return schema


def _apply_constraints(
    schema: SchemaNode, constraints: FieldConstraints, field_name: str
) -> None:
    if constraints.description is not None:
        schema.description = constraints.description
    if constraints.format is not None:
        schema.format = constraints.format
    if constraints.content_encoding is not None:
        schema.content_encoding = constraints.content_encoding
    if constraints.enum:
        schema.enum = [_coerce(value, schema.type, field_name) for value in constraints.enum]
    if constraints.default is not None:
        schema.default = _coerce(constraints.default, schema.type, field_name)
    if constraints.example is not None:
        schema.examples = [_coerce(constraints.example, schema.type, field_name)]
    for attribute in (
        "minimum",
        "exclusive_minimum",
        "maximum",
        "exclusive_maximum",
        "multiple_of",
        "min_length",
        "max_length",
        "pattern",
        "min_items",
        "max_items",
    ):
        value = getattr(constraints, attribute)
        if value is not None:
            setattr(schema, attribute, value)
    for attribute in ("unique_items", "read_only", "write_only", "deprecated"):
        if getattr(constraints, attribute):
            setattr(schema, attribute, True)


def _coerce(value: str, schema_type: str | None, field_name: str) -> Any:
    try:
        if schema_type == TYPE_INTEGER:
            return int(value)
        if schema_type == TYPE_NUMBER:
            return float(value)
        if schema_type == TYPE_BOOLEAN:
            if value not in ("true", "false"):
                raise ValueError(value)
            return value == "true"
        if schema_type in (TYPE_ARRAY, TYPE_OBJECT):
            return json.loads(value)
    except ValueError as exc:
        raise InvalidAnnotationError(
            f"invalid {schema_type} value for field '{field_name}': {value}"
        ) from exc
    return value


def _check_dependents(
    properties: dict[str, SchemaNode], dependent_required: dict[str, list[str]]
) -> None:
    violations = [
        f"dependent field '{dependent}' for field '{name}' does not exist"
        for name in sorted(dependent_required)
        for dependent in dependent_required[name]
        if dependent not in properties
    ]
    if violations:
        raise MissingDependentFieldError(violations)


def _accessor_property_name(accessor: str) -> str:
    if accessor.startswith("get_"):
        head, *rest = accessor[len("get_") :].split("_")
        return head + "".join(_upper_first(part) for part in rest)
    suffix = accessor[len("Get") :]
    return suffix[:1].lower() + suffix[1:]


def _upper_camel(name: str) -> str:
    return "".join(_upper_first(part) for part in name.split("_"))


def _upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]
