"""Annotation markers for widths and shapes Python's builtins cannot express."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from .descriptor_models import TypeKind

Int8 = Annotated[int, TypeKind.INT8]
Int16 = Annotated[int, TypeKind.INT16]
Int32 = Annotated[int, TypeKind.INT32]
Int64 = Annotated[int, TypeKind.INT64]
Uint = Annotated[int, TypeKind.UINT]
Uint8 = Annotated[int, TypeKind.UINT8]
Uint16 = Annotated[int, TypeKind.UINT16]
Uint32 = Annotated[int, TypeKind.UINT32]
Uint64 = Annotated[int, TypeKind.UINT64]
Float32 = Annotated[float, TypeKind.FLOAT32]
Float64 = Annotated[float, TypeKind.FLOAT64]


@dataclass(frozen=True)
class FixedLength:
    """Marks a sequence annotation as holding exactly ``length`` items."""

    length: int


class RawMessage(bytes):
    """Pre-encoded JSON document carried through verbatim."""
