"""Schema node entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TYPE_BOOLEAN = "boolean"
TYPE_INTEGER = "integer"
TYPE_NUMBER = "number"
TYPE_STRING = "string"
TYPE_ARRAY = "array"
TYPE_OBJECT = "object"

SCALAR_TYPES = frozenset({TYPE_BOOLEAN, TYPE_INTEGER, TYPE_NUMBER, TYPE_STRING})


@dataclass
class SchemaNode:  # pylint: disable=too-many-instance-attributes
    """Derived structural description of a type, rendered as a JSON Schema fragment.

    Nodes are built incrementally during derivation and must be treated as
    read-only once the registry has published them. An empty node accepts any
    value; a node with ``ref`` set points at a named registry entry.
    """

    type: str | None = None
    ref: str | None = None
    nullable: bool = False
    format: str | None = None
    content_encoding: str | None = None
    description: str | None = None
    items: SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool | SchemaNode | None = None
    dependent_required: dict[str, list[str]] = field(default_factory=dict)
    one_of: list[SchemaNode] = field(default_factory=list)
    minimum: float | None = None
    exclusive_minimum: float | None = None
    maximum: float | None = None
    exclusive_maximum: float | None = None
    multiple_of: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    enum: list[Any] = field(default_factory=list)
    default: Any = None
    examples: list[Any] = field(default_factory=list)
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Render the node as a JSON-compatible mapping, omitting unset keywords."""
        rendered: dict[str, Any] = {}
        if self.ref is not None:
            rendered["$ref"] = self.ref
        if self.type is not None:
            rendered["type"] = self.type
        if self.nullable:
            rendered["nullable"] = True
        _put(rendered, "format", self.format)
        _put(rendered, "contentEncoding", self.content_encoding)
        _put(rendered, "description", self.description)
        if self.items is not None:
            rendered["items"] = self.items.to_dict()
        _put(rendered, "minItems", self.min_items)
        _put(rendered, "maxItems", self.max_items)
        if self.unique_items:
            rendered["uniqueItems"] = True
        if self.properties:
            rendered["properties"] = {
                name: schema.to_dict() for name, schema in self.properties.items()
            }
        if self.required:
            rendered["required"] = list(self.required)
        if isinstance(self.additional_properties, SchemaNode):
            rendered["additionalProperties"] = self.additional_properties.to_dict()
        elif self.additional_properties is not None:
            rendered["additionalProperties"] = self.additional_properties
        if self.dependent_required:
            rendered["dependentRequired"] = {
                name: list(dependents) for name, dependents in self.dependent_required.items()
            }
        if self.one_of:
            rendered["oneOf"] = [schema.to_dict() for schema in self.one_of]
        _put(rendered, "minimum", self.minimum)
        _put(rendered, "exclusiveMinimum", self.exclusive_minimum)
        _put(rendered, "maximum", self.maximum)
        _put(rendered, "exclusiveMaximum", self.exclusive_maximum)
        _put(rendered, "multipleOf", self.multiple_of)
        _put(rendered, "minLength", self.min_length)
        _put(rendered, "maxLength", self.max_length)
        _put(rendered, "pattern", self.pattern)
        if self.enum:
            rendered["enum"] = list(self.enum)
        _put(rendered, "default", self.default)
        if self.examples:
            rendered["examples"] = list(self.examples)
        for key, flag in (
            ("readOnly", self.read_only),
            ("writeOnly", self.write_only),
            ("deprecated", self.deprecated),
        ):
            if flag:
                rendered[key] = True
        return rendered


def _put(rendered: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        rendered[key] = value
