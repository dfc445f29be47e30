"""Field annotation parsing service."""

from __future__ import annotations

import re
from collections.abc import Mapping

from proto_schema_registry.definition_errors import InvalidAnnotationError

from .annotation_models import FieldAnnotations, FieldConstraints

_WIRE_FORMAT_TAG = "protobuf"
_SERIALIZATION_TAG = "json"
_UNION_TAG = "protobuf_oneof"
_IGNORED_NAME = "-"
_WIRE_JSON_NAME = re.compile(r"(?:^|,)json=([A-Za-z0-9_]+)(?:,|$)")
_WIRE_NAME = re.compile(r"(?:^|,)name=([A-Za-z0-9_]+)(?:,|$)")


def parse_field_annotations(field_name: str, tags: Mapping[str, str]) -> FieldAnnotations:
    """Resolve the effective name, requiredness and visibility of a field.

    All fields start as required. A wire-format tag decides both name and
    requiredness on its own (union members are optional); otherwise the
    serialization tag supplies the name and ``omitempty`` makes the field
    optional. An explicit ``required`` tag wins over both.

    Args:
      field_name: Declared attribute name.
      tags: Raw annotation strings keyed by tag name.

    Returns:
      The parsed annotation record.

    Raises:
      InvalidAnnotationError: If a boolean or numeric tag holds a malformed value.
    """
    wire_tag = tags.get(_WIRE_FORMAT_TAG, "")
    json_parts = tags.get(_SERIALIZATION_TAG, "").split(",")

    name = field_name
    required = True
    if wire_tag:
        name = _wire_format_name(wire_tag) or field_name
        required = "oneof" not in wire_tag.split(",")
    elif tags.get(_SERIALIZATION_TAG):
        if json_parts[0]:
            name = json_parts[0]
        if "omitempty" in json_parts[1:]:
            required = False

    if "required" in tags:
        required = _bool_tag(field_name, tags, "required")

    return FieldAnnotations(
        wire_name=name,
        required=required,
        ignored=name == _IGNORED_NAME,
        hidden=_bool_tag(field_name, tags, "hidden"),
        nullable=_optional_bool_tag(field_name, tags, "nullable"),
        omit_empty="omitempty" in json_parts[1:],
        wire_format_tagged=bool(wire_tag),
        union_discriminator=bool(tags.get(_UNION_TAG)),
        dependent_required=_split_list(tags.get("dependentRequired", "")),
        additional_properties=_optional_bool_tag(field_name, tags, "additionalProperties"),
        constraints=_parse_constraints(field_name, tags),
    )


def _wire_format_name(wire_tag: str) -> str | None:
    # The JSON name is what the wire codec actually emits; fall back to the raw name.
    for pattern in (_WIRE_JSON_NAME, _WIRE_NAME):
        match = pattern.search(wire_tag)
        if match:
            return match.group(1)
    return None


def _parse_constraints(field_name: str, tags: Mapping[str, str]) -> FieldConstraints:
    return FieldConstraints(
        description=tags.get("doc") or None,
        format=tags.get("format") or None,
        content_encoding=tags.get("encoding") or None,
        enum=_split_list(tags.get("enum", "")),
        default=tags.get("default"),
        example=tags.get("example"),
        minimum=_float_tag(field_name, tags, "minimum"),
        exclusive_minimum=_float_tag(field_name, tags, "exclusiveMinimum"),
        maximum=_float_tag(field_name, tags, "maximum"),
        exclusive_maximum=_float_tag(field_name, tags, "exclusiveMaximum"),
        multiple_of=_float_tag(field_name, tags, "multipleOf"),
        min_length=_int_tag(field_name, tags, "minLength"),
        max_length=_int_tag(field_name, tags, "maxLength"),
        pattern=tags.get("pattern") or None,
        min_items=_int_tag(field_name, tags, "minItems"),
        max_items=_int_tag(field_name, tags, "maxItems"),
        unique_items=_bool_tag(field_name, tags, "uniqueItems"),
        read_only=_bool_tag(field_name, tags, "readOnly"),
        write_only=_bool_tag(field_name, tags, "writeOnly"),
        deprecated=_bool_tag(field_name, tags, "deprecated"),
    )


def _bool_tag(field_name: str, tags: Mapping[str, str], tag: str) -> bool:
    value = tags.get(tag, "")
    if value == "" or value == "false":
        return False
    if value == "true":
        return True
    raise InvalidAnnotationError(f"invalid bool tag '{tag}' for field '{field_name}': {value}")


def _optional_bool_tag(field_name: str, tags: Mapping[str, str], tag: str) -> bool | None:
    if tag not in tags:
        return None
    return _bool_tag(field_name, tags, tag)


def _float_tag(field_name: str, tags: Mapping[str, str], tag: str) -> float | None:
    value = tags.get(tag, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise InvalidAnnotationError(
            f"invalid number tag '{tag}' for field '{field_name}': {value}"
        ) from exc


def _int_tag(field_name: str, tags: Mapping[str, str], tag: str) -> int | None:
    value = tags.get(tag, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidAnnotationError(
            f"invalid integer tag '{tag}' for field '{field_name}': {value}"
        ) from exc


def _split_list(value: str) -> tuple[str, ...]:
    if not value.strip():
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())
