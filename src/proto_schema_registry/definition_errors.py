"""Setup-time schema definition defects."""

from __future__ import annotations

from collections.abc import Sequence


class SchemaDefinitionError(Exception):
    """Raised when a type cannot be documented because its declaration is broken.

    These are programming defects detected while the registry is built at
    startup, never ordinary runtime data errors.
    """


class DuplicateSchemaNameError(SchemaDefinitionError):
    """Raised when two distinct types are mapped to the same schema name."""

    def __init__(self, name: str, new_type: object, existing_type: object) -> None:
        super().__init__(
            f"duplicate name: {name}, new type: {new_type}, existing type: {existing_type}"
        )
        self.name = name
        self.new_type = new_type
        self.existing_type = existing_type


class InvalidAnnotationError(SchemaDefinitionError):
    """Raised when a field annotation carries a malformed value."""


class MissingDependentFieldError(SchemaDefinitionError):
    """Raised when dependent-required annotations name properties that do not exist."""

    def __init__(self, violations: Sequence[str]) -> None:
        super().__init__("; ".join(violations))
        self.violations = tuple(violations)
