"""Schema derivation tests for scalars, containers and records."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Annotated, Any
from urllib.parse import ParseResult
from uuid import UUID

import pytest
from proto_schema_registry.definition_errors import (
    InvalidAnnotationError,
    MissingDependentFieldError,
)
from proto_schema_registry.schema_derivation import SchemaNode, SchemaRegistry, collect_fields
from proto_schema_registry.type_descriptors import (
    FixedLength,
    Float32,
    Int8,
    Int64,
    RawMessage,
    Uint8,
    Uint64,
    describe_type,
)

REF = "#/components/schemas/"


@dataclass
class Circle:
    radius: float = field(metadata={"protobuf": "fixed64,1,opt,name=radius,proto3"})


@dataclass
class Square:
    side: float = field(metadata={"protobuf": "fixed64,1,opt,name=side,proto3"})


@dataclass
class Shape:
    name: str = field(metadata={"protobuf": "bytes,1,opt,name=name,proto3"})
    kind: Any = field(default=None, metadata={"protobuf_oneof": "kind"})

    def GetName(self) -> str:
        return self.name

    def GetCircle(self) -> Circle | None:
        return self.kind if isinstance(self.kind, Circle) else None

    def GetSquare(self) -> Square | None:
        return self.kind if isinstance(self.kind, Square) else None


@dataclass
class HiddenShape:
    kind: Any = field(default=None, metadata={"protobuf_oneof": "kind", "hidden": "true"})

    def GetCircle(self) -> Circle | None:
        return self.kind if isinstance(self.kind, Circle) else None


@dataclass
class Audit:
    created_by: str
    note: str


@dataclass
class Document:
    note: int
    audit: Audit = field(metadata={"embed": "true"})


@dataclass
class Loop:
    value: str
    again: Loop | None = field(default=None, metadata={"embed": "true"})


@dataclass
class Payment:
    card: str = field(metadata={"json": "card,omitempty", "dependentRequired": "billingAddress"})
    billing_address: str = field(metadata={"json": "billingAddress,omitempty"})


@dataclass
class BrokenDependents:
    zeta: str = field(metadata={"dependentRequired": "missingOne"})
    alpha: str = field(metadata={"dependentRequired": "missingTwo, missingThree"})


@dataclass
class Visibility:
    shown: str
    secret: str = field(metadata={"hidden": "true"})
    skipped: str = field(metadata={"json": "-"})
    optional: str = field(metadata={"required": "false"})
    forced: str = field(metadata={"json": "forced,omitempty", "required": "true"})
    _internal: str = "x"
    _: None = field(default=None, metadata={"additionalProperties": "true", "nullable": "true"})


@dataclass
class Pointers:
    note: str | None = field(default=None, metadata={"json": "note,omitempty"})
    maybe: int | None = None
    forced_null: str | None = field(
        default=None, metadata={"json": "forcedNull,omitempty", "nullable": "true"}
    )
    callback: Callable[[], None] | None = None


@dataclass
class Counter:
    total: Int64 = field(metadata={"protobuf": "varint,1,opt,name=total,proto3"})
    plain: Int64
    display_name: str = field(
        metadata={"protobuf": "bytes,2,opt,name=display_name,json=displayName,proto3"}
    )


@dataclass
class Limits:
    size: int = field(
        metadata={
            "doc": "Size",
            "minimum": "1",
            "maximum": "10",
            "enum": "1,2,3",
            "default": "2",
            "example": "3",
        }
    )
    ratio: float = field(metadata={"exclusiveMinimum": "0", "multipleOf": "0.5"})
    code: str = field(
        metadata={
            "pattern": "^[A-Z]+$",
            "minLength": "2",
            "maxLength": "8",
            "format": "code",
            "readOnly": "true",
        }
    )
    labels: list[str] = field(
        metadata={"minItems": "1", "uniqueItems": "true", "example": '["a"]'}
    )
    enabled: bool = field(metadata={"default": "true", "deprecated": "true"})


@dataclass
class BadNullable:
    value: str = field(metadata={"nullable": "maybe"})


@dataclass
class BadDefault:
    value: int = field(metadata={"default": "many"})


@dataclass
class Timestamps:
    created: datetime
    deleted: datetime | None
    link: ParseResult
    peer: IPv4Address
    peer_v6: IPv6Address
    payload: RawMessage
    token: UUID


@dataclass
class Tagged:
    label: str

    @classmethod
    def transform_schema(cls, registry: Any, schema: SchemaNode) -> SchemaNode:
        schema.description = "Transformed"
        return schema


class Money:
    @classmethod
    def provide_schema(cls, registry: Any) -> SchemaNode:
        return SchemaNode(type="string", format="decimal")

    @classmethod
    def transform_schema(cls, registry: Any, schema: SchemaNode) -> SchemaNode:
        raise AssertionError("transformer must not run for provided schemas")


class Slug:
    @classmethod
    def from_text(cls, text: str) -> Slug:
        return cls()


def _schema(type_: Any) -> dict[str, Any]:
    schema = SchemaRegistry().schema(type_)
    assert schema is not None
    return schema.to_dict()


def test_integer_widths_and_signedness() -> None:
    assert _schema(int) == {"type": "integer", "format": "int64"}
    assert _schema(Int8) == {"type": "integer", "format": "int32"}
    assert _schema(Uint8) == {"type": "integer", "format": "int32", "minimum": 0}
    assert _schema(Uint64) == {"type": "integer", "format": "int64", "minimum": 0}


def test_floats_booleans_and_strings() -> None:
    assert _schema(Float32) == {"type": "number", "format": "float"}
    assert _schema(float) == {"type": "number", "format": "double"}
    assert _schema(bool) == {"type": "boolean"}
    assert _schema(str) == {"type": "string"}


def test_scalars_are_nullable_only_behind_optional() -> None:
    assert _schema(int | None) == {"type": "integer", "format": "int64", "nullable": True}
    assert "nullable" not in _schema(int)


def test_byte_sequences_are_base64_strings() -> None:
    expected = {"type": "string", "contentEncoding": "base64"}

    assert _schema(bytes) == expected
    assert _schema(Annotated[bytes, FixedLength(16)]) == expected


def test_sequences_are_nullable_arrays() -> None:
    assert _schema(list[str]) == {"type": "array", "nullable": True, "items": {"type": "string"}}
    assert _schema(list[str] | None) == _schema(list[str])
    assert _schema(tuple[bool, bool, bool]) == {
        "type": "array",
        "nullable": True,
        "items": {"type": "boolean"},
        "minItems": 3,
        "maxItems": 3,
    }


def test_mappings_and_dynamic_values() -> None:
    assert _schema(dict[str, float]) == {
        "type": "object",
        "additionalProperties": {"type": "number", "format": "double"},
    }
    assert _schema(Any) == {}
    assert SchemaRegistry().schema(complex) is None
    assert SchemaRegistry().schema(Callable[[int], int]) is None


def test_well_known_types_use_string_formats() -> None:
    registry = SchemaRegistry()
    registry.schema(Timestamps)
    properties = registry.to_dict()["Timestamps"]["properties"]

    assert properties["created"] == {"type": "string", "format": "date-time"}
    assert properties["deleted"] == {"type": "string", "format": "date-time", "nullable": True}
    assert properties["link"] == {"type": "string", "format": "uri"}
    assert properties["peer"] == {"type": "string", "format": "ipv4"}
    assert properties["peer_v6"] == {"type": "string", "format": "ipv6"}
    assert properties["payload"] == {}
    assert properties["token"] == {"type": "string"}
    assert list(registry.entries()) == ["Timestamps"]


def test_text_parseable_types_are_plain_strings() -> None:
    registry = SchemaRegistry()

    assert _schema(Slug) == {"type": "string"}
    assert _schema(Slug | None) == {"type": "string", "nullable": True}
    registry.schema(Slug, True)
    assert dict(registry.entries()) == {}


def test_self_schema_provider_short_circuits_derivation() -> None:
    registry = SchemaRegistry()
    schema = registry.schema(Money, True)

    assert schema is not None
    assert schema.to_dict() == {"type": "string", "format": "decimal"}
    assert dict(registry.entries()) == {}


def test_schema_transformer_runs_once_on_derived_record() -> None:
    registry = SchemaRegistry()
    registry.schema(Tagged, True)

    assert registry.to_dict()["Tagged"]["description"] == "Transformed"
    assert registry.to_dict()["Tagged"]["properties"] == {"label": {"type": "string"}}


def test_record_schema_is_closed_and_lists_required_fields() -> None:
    registry = SchemaRegistry()
    registry.schema(Audit)

    assert registry.to_dict()["Audit"] == {
        "type": "object",
        "properties": {"created_by": {"type": "string"}, "note": {"type": "string"}},
        "required": ["created_by", "note"],
        "additionalProperties": False,
    }


def test_embedded_fields_are_promoted_and_outer_declarations_win() -> None:
    registry = SchemaRegistry()
    registry.schema(Document)
    document = registry.to_dict()["Document"]

    assert list(document["properties"]) == ["note", "created_by"]
    assert document["properties"]["note"] == {"type": "integer", "format": "int64"}
    assert document["required"] == ["note", "created_by"]
    assert "Audit" not in registry.entries()


def test_self_embedding_terminates() -> None:
    assert [item.name for item in collect_fields(describe_type(Loop))] == ["value"]

    registry = SchemaRegistry()
    registry.schema(Loop)
    assert registry.to_dict()["Loop"]["properties"] == {"value": {"type": "string"}}


def test_union_alternatives_become_one_of() -> None:
    registry = SchemaRegistry()
    registry.schema(Shape)
    shape = registry.to_dict()["Shape"]

    assert shape["properties"] == {"name": {"type": "string"}}
    assert shape["required"] == ["name"]
    assert shape["oneOf"] == [
        {
            "type": "object",
            "properties": {"circle": {"$ref": REF + "Circle"}},
            "required": ["circle"],
        },
        {
            "type": "object",
            "properties": {"square": {"$ref": REF + "Square"}},
            "required": ["square"],
        },
    ]
    assert "additionalProperties" not in shape
    assert set(registry.entries()) == {"Shape", "Circle", "Square"}


def test_hidden_discriminator_still_contributes_alternatives() -> None:
    registry = SchemaRegistry()
    registry.schema(HiddenShape)
    hidden_shape = registry.to_dict()["HiddenShape"]

    assert hidden_shape["oneOf"] == [
        {
            "type": "object",
            "properties": {"circle": {"$ref": REF + "Circle"}},
            "required": ["circle"],
        }
    ]
    assert "properties" not in hidden_shape
    assert "kind" not in hidden_shape.get("required", [])
    assert "additionalProperties" not in hidden_shape


def test_union_alternatives_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(
        logging.DEBUG, logger="proto_schema_registry.schema_derivation.type_walker"
    ):
        SchemaRegistry().schema(Shape)

    assert "union alternative circle added" in caplog.text


def test_dependent_required_fields_are_recorded() -> None:
    registry = SchemaRegistry()
    registry.schema(Payment)
    payment = registry.to_dict()["Payment"]

    assert payment["dependentRequired"] == {"card": ["billingAddress"]}
    assert "required" not in payment


def test_missing_dependents_are_reported_together() -> None:
    with pytest.raises(MissingDependentFieldError) as error:
        SchemaRegistry().schema(BrokenDependents)

    assert error.value.violations == (
        "dependent field 'missingTwo' for field 'alpha' does not exist",
        "dependent field 'missingThree' for field 'alpha' does not exist",
        "dependent field 'missingOne' for field 'zeta' does not exist",
    )
    assert str(error.value).count("; ") == 2


def test_visibility_rules_and_marker_overrides() -> None:
    registry = SchemaRegistry()
    registry.schema(Visibility)
    visibility = registry.to_dict()["Visibility"]

    assert list(visibility["properties"]) == ["shown", "optional", "forced"]
    assert visibility["required"] == ["shown", "forced"]
    assert visibility["additionalProperties"] is True
    assert visibility["nullable"] is True


def test_optional_fields_and_omitempty_pointers() -> None:
    registry = SchemaRegistry()
    registry.schema(Pointers)
    pointers = registry.to_dict()["Pointers"]

    assert pointers["properties"] == {
        "note": {"type": "string"},
        "maybe": {"type": "integer", "format": "int64", "nullable": True},
        "forcedNull": {"type": "string", "nullable": True},
    }
    assert pointers["required"] == ["maybe"]


def test_wire_format_64_bit_integers_are_strings() -> None:
    registry = SchemaRegistry()
    registry.schema(Counter)
    counter = registry.to_dict()["Counter"]

    assert counter["properties"]["total"] == {"type": "string", "format": "int64"}
    assert counter["properties"]["plain"] == {"type": "integer", "format": "int64"}
    assert counter["properties"]["displayName"] == {"type": "string"}
    assert counter["required"] == ["total", "plain", "displayName"]


def test_documentation_keywords_are_copied_and_typed() -> None:
    registry = SchemaRegistry()
    registry.schema(Limits)
    properties = registry.to_dict()["Limits"]["properties"]

    assert properties["size"] == {
        "type": "integer",
        "format": "int64",
        "description": "Size",
        "minimum": 1,
        "maximum": 10,
        "enum": [1, 2, 3],
        "default": 2,
        "examples": [3],
    }
    assert properties["ratio"] == {
        "type": "number",
        "format": "double",
        "exclusiveMinimum": 0,
        "multipleOf": 0.5,
    }
    assert properties["code"] == {
        "type": "string",
        "format": "code",
        "minLength": 2,
        "maxLength": 8,
        "pattern": "^[A-Z]+$",
        "readOnly": True,
    }
    assert properties["labels"] == {
        "type": "array",
        "nullable": True,
        "items": {"type": "string"},
        "minItems": 1,
        "uniqueItems": True,
        "examples": [["a"]],
    }
    assert properties["enabled"] == {"type": "boolean", "default": True, "deprecated": True}


def test_field_keywords_do_not_leak_into_shared_entries() -> None:
    registry = SchemaRegistry()
    registry.schema(Limits)

    assert registry.schema(str) == SchemaNode(type="string")


@pytest.mark.parametrize(
    ("record", "message"),
    [
        (BadNullable, "invalid bool tag 'nullable'"),
        (BadDefault, "invalid integer value for field 'value'"),
    ],
)
def test_malformed_field_metadata_is_rejected(record: type, message: str) -> None:
    with pytest.raises(InvalidAnnotationError, match=message):
        SchemaRegistry().schema(record)
