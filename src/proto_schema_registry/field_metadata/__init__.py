"""Field metadata exports."""

from .annotation_models import FieldAnnotations, FieldConstraints
from .annotation_parser import parse_field_annotations

__all__ = [
    "FieldAnnotations",
    "FieldConstraints",
    "parse_field_annotations",
]
