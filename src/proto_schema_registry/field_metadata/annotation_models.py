"""Field annotation entities."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldConstraints:  # pylint: disable=too-many-instance-attributes
    """Documentation and validation keywords copied onto a field schema."""

    description: str | None = None
    format: str | None = None
    content_encoding: str | None = None
    enum: tuple[str, ...] = ()
    default: str | None = None
    example: str | None = None
    minimum: float | None = None
    exclusive_minimum: float | None = None
    maximum: float | None = None
    exclusive_maximum: float | None = None
    multiple_of: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False


@dataclass(frozen=True)
class FieldAnnotations:  # pylint: disable=too-many-instance-attributes
    """Effective metadata for one record field."""

    wire_name: str
    required: bool = True
    ignored: bool = False
    hidden: bool = False
    nullable: bool | None = None
    omit_empty: bool = False
    wire_format_tagged: bool = False
    union_discriminator: bool = False
    dependent_required: tuple[str, ...] = ()
    additional_properties: bool | None = None
    constraints: FieldConstraints = field(default_factory=FieldConstraints)
