"""Schema derivation exports."""

from proto_schema_registry.definition_errors import (
    DuplicateSchemaNameError,
    InvalidAnnotationError,
    MissingDependentFieldError,
    SchemaDefinitionError,
)

from .naming import (
    SCHEMA_NAMER_KEYS,
    SchemaNamer,
    default_schema_namer,
    qualified_schema_namer,
    resolve_schema_namer,
)
from .schema_models import SchemaNode
from .schema_registry import DEFAULT_PREFIX, SchemaRegistry
from .type_walker import collect_fields, derive_schema

__all__ = [
    "DEFAULT_PREFIX",
    "DuplicateSchemaNameError",
    "InvalidAnnotationError",
    "MissingDependentFieldError",
    "SCHEMA_NAMER_KEYS",
    "SchemaDefinitionError",
    "SchemaNamer",
    "SchemaNode",
    "SchemaRegistry",
    "collect_fields",
    "default_schema_namer",
    "derive_schema",
    "qualified_schema_namer",
    "resolve_schema_namer",
]
