"""Build type descriptors from Python annotations."""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime as dt
import decimal
import enum
import inspect
import ipaddress
import pathlib
import types
import typing
import urllib.parse
import uuid
from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, TypeVar, Union, get_args, get_origin

from proto_schema_registry.definition_errors import InvalidAnnotationError

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
)
from .scalar_markers import FixedLength, RawMessage

_PRIMITIVE_KINDS: dict[type, TypeKind] = {
    bool: TypeKind.BOOL,
    int: TypeKind.INT,
    float: TypeKind.FLOAT64,
    complex: TypeKind.COMPLEX,
    str: TypeKind.STRING,
}
_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_BYTE_TYPES = (bytes, bytearray, memoryview)
_WELL_KNOWN_CLASSES: tuple[tuple[type, WellKnownType], ...] = (
    (dt.datetime, WellKnownType.TIME),
    (urllib.parse.ParseResult, WellKnownType.URL),
    (urllib.parse.SplitResult, WellKnownType.URL),
    (ipaddress.IPv4Address, WellKnownType.IPV4),
    (ipaddress.IPv6Address, WellKnownType.IPV6),
)
# Stdlib value types that round-trip through their text form.
_TEXT_PARSEABLE_CLASSES: tuple[type, ...] = (
    urllib.parse.ParseResult,
    urllib.parse.SplitResult,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    uuid.UUID,
    decimal.Decimal,
    dt.date,
    dt.time,
    pathlib.PurePath,
)
_ACCESSOR_PREFIXES = ("Get", "get_")


class TypeDescriber:
    """Translates annotations into cached type descriptors.

    The same annotation always yields the same descriptor object, which is what
    gives descriptors their identity semantics.
    """

    def __init__(self) -> None:
        self._cache: dict[object, TypeDescriptor] = {}

    def describe(self, annotation: Any) -> TypeDescriptor:
        if isinstance(annotation, TypeDescriptor):
            return annotation
        key = _cache_key(annotation)
        if key is not None and key in self._cache:
            return self._cache[key]
        if isinstance(annotation, type) and _is_record_class(annotation):
            return self._describe_record(annotation)
        descriptor = self._build(annotation)
        if key is not None:
            self._cache[key] = descriptor
        return descriptor

    def _build(self, annotation: Any) -> TypeDescriptor:
        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Annotated:
            return self._describe_annotated(args[0], args[1:])
        if origin is Union or origin is types.UnionType:
            return self._describe_union(args)
        if isinstance(annotation, typing.NewType):
            return self.describe(annotation.__supertype__)
        if origin is ClassVar:
            return TypeDescriptor(kind=TypeKind.UNSUPPORTED)
        if annotation is Any or annotation is object or isinstance(annotation, TypeVar):
            return TypeDescriptor(kind=TypeKind.INTERFACE)
        if origin is tuple or annotation is tuple:
            return self._describe_tuple(args)
        if origin in _SEQUENCE_ORIGINS or annotation in _SEQUENCE_ORIGINS:
            return slice_of(self._describe_arg(args, 0))
        if origin in _MAPPING_ORIGINS or annotation in _MAPPING_ORIGINS:
            return map_of(self._describe_arg(args, 0), self._describe_arg(args, 1))
        if origin is collections.abc.Callable or origin is type:
            return TypeDescriptor(kind=TypeKind.FUNC)
        if isinstance(origin, type):
            if args and _is_record_class(origin):
                return self._describe_record(origin, annotation)
            # Other parameterized classes document as their origin class.
            return self.describe(origin)
        if isinstance(annotation, type):
            return self._describe_class(annotation)
        if callable(annotation):
            return TypeDescriptor(kind=TypeKind.FUNC)
        return TypeDescriptor(kind=TypeKind.UNSUPPORTED)

    def _describe_arg(self, args: tuple[Any, ...], index: int) -> TypeDescriptor:
        if len(args) > index:
            return self.describe(args[index])
        return self.describe(Any)

    def _describe_annotated(self, base: Any, metadata: tuple[Any, ...]) -> TypeDescriptor:
        for marker in metadata:
            if isinstance(marker, TypeKind):
                return TypeDescriptor(kind=marker)
        described = self.describe(base)
        for marker in metadata:
            if isinstance(marker, FixedLength) and described.elem is not None:
                if described.kind in (TypeKind.SLICE, TypeKind.ARRAY):
                    return array_of(described.elem, marker.length, name=described.name)
        return described

    def _describe_union(self, args: tuple[Any, ...]) -> TypeDescriptor:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != 1:
            return TypeDescriptor(kind=TypeKind.INTERFACE)
        inner = self.describe(members[0])
        if len(members) == len(args):
            return inner
        return pointer_to(inner)

    def _describe_tuple(self, args: tuple[Any, ...]) -> TypeDescriptor:
        if not args:
            return slice_of(self.describe(Any))
        if len(args) == 2 and args[1] is Ellipsis:
            return slice_of(self.describe(args[0]))
        if all(arg == args[0] for arg in args):
            return array_of(self.describe(args[0]), len(args))
        return TypeDescriptor(kind=TypeKind.UNSUPPORTED)

    def _describe_class(self, cls: type) -> TypeDescriptor:
        capabilities = _capabilities_of(cls)
        if issubclass(cls, enum.Enum):
            return self._describe_enum(cls, capabilities)
        if cls in _PRIMITIVE_KINDS:
            return TypeDescriptor(kind=_PRIMITIVE_KINDS[cls])
        if issubclass(cls, RawMessage):
            return TypeDescriptor(
                kind=TypeKind.SLICE,
                name=cls.__name__,
                module=cls.__module__,
                elem=TypeDescriptor(kind=TypeKind.UINT8),
                capabilities=capabilities,
                well_known=WellKnownType.RAW_MESSAGE,
            )
        if issubclass(cls, _BYTE_TYPES):
            return slice_of(TypeDescriptor(kind=TypeKind.UINT8))
        for well_known_cls, well_known in _WELL_KNOWN_CLASSES:
            if issubclass(cls, well_known_cls):
                return TypeDescriptor(
                    kind=TypeKind.STRUCT,
                    name=cls.__name__,
                    module=cls.__module__,
                    capabilities=capabilities,
                    well_known=well_known,
                )
        if capabilities.text_parseable or cls.__module__ != "builtins":
            return TypeDescriptor(
                kind=TypeKind.STRUCT,
                name=cls.__name__,
                module=cls.__module__,
                capabilities=capabilities,
            )
        return TypeDescriptor(kind=TypeKind.UNSUPPORTED, name=cls.__name__)

    def _describe_enum(
        self, cls: type[enum.Enum], capabilities: TypeCapabilities
    ) -> TypeDescriptor:
        values = [member.value for member in cls]
        if issubclass(cls, int):
            kind = TypeKind.INT32
        elif values and all(isinstance(value, str) for value in values):
            kind = TypeKind.STRING
        else:
            kind = TypeKind.UNSUPPORTED
        return TypeDescriptor(
            kind=kind, name=cls.__name__, module=cls.__module__, capabilities=capabilities
        )

    def _describe_record(self, cls: type, alias: Any = None) -> TypeDescriptor:
        args = get_args(alias) if alias is not None else ()
        descriptor = TypeDescriptor(
            kind=TypeKind.STRUCT,
            name=_record_name(cls, args),
            module=cls.__module__,
            capabilities=_capabilities_of(cls),
        )
        # Cached before members are described so self references resolve to it.
        key = _cache_key(alias) if alias is not None else cls
        if key is not None:
            self._cache[key] = descriptor
        bindings = dict(zip(getattr(cls, "__parameters__", ()), args))
        descriptor.fields = tuple(self._record_fields(cls, bindings))
        descriptor.methods = tuple(self._record_methods(cls, bindings))
        return descriptor

    def _record_fields(self, cls: type, bindings: Mapping[Any, Any]) -> list[FieldDescriptor]:
        hints = typing.get_type_hints(cls, include_extras=True)
        declared: list[tuple[str, Any, Mapping[str, Any]]] = []
        if dataclasses.is_dataclass(cls):
            for item in dataclasses.fields(cls):
                declared.append((item.name, hints.get(item.name, item.type), item.metadata))
        else:
            for name, hint in hints.items():
                if get_origin(hint) is ClassVar or hint is ClassVar:
                    continue
                declared.append((name, hint, {}))

        fields: list[FieldDescriptor] = []
        for name, hint, metadata in declared:
            tags = {str(key): str(value) for key, value in metadata.items()}
            embedded = _embed_flag(cls, name, tags.pop("embed", None))
            fields.append(
                FieldDescriptor(
                    name=name,
                    type=self.describe(_substitute(hint, bindings)),
                    tags=tags,
                    embedded=embedded,
                )
            )
        return fields

    def _record_methods(self, cls: type, bindings: Mapping[Any, Any]) -> list[MethodDescriptor]:
        methods: list[MethodDescriptor] = []
        for name in sorted(dir(cls)):
            if not name.startswith(_ACCESSOR_PREFIXES):
                continue
            member = getattr(cls, name)
            if not inspect.isfunction(member):
                continue
            if len(inspect.signature(member).parameters) != 1:
                continue
            returns = typing.get_type_hints(member, include_extras=True).get("return")
            if returns is None or returns is type(None):
                continue
            return_type = self.describe(_substitute(returns, bindings))
            methods.append(MethodDescriptor(name=name, return_type=return_type))
        return methods


def _record_name(cls: type, args: tuple[Any, ...]) -> str:
    """``Page`` for a plain record, ``Page[Alpha]`` for one parameterization of it."""
    if not args:
        return cls.__name__
    return f"{cls.__name__}[{', '.join(_type_label(arg) for arg in args)}]"


def _type_label(annotation: Any) -> str:
    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin is Annotated:
        return _type_label(args[0])
    if origin is Union or origin is types.UnionType:
        return " | ".join(_type_label(arg) for arg in args)
    if origin is not None and args:
        return _record_name(origin, args) if isinstance(origin, type) else str(annotation)
    return getattr(annotation, "__name__", str(annotation))


def _substitute(hint: Any, bindings: Mapping[Any, Any]) -> Any:
    if not bindings:
        return hint
    if isinstance(hint, TypeVar):
        return bindings.get(hint, hint)
    parameters = getattr(hint, "__parameters__", ())
    if not parameters:
        return hint
    # Generic aliases and unions substitute their own free type variables.
    return hint[tuple(bindings.get(parameter, parameter) for parameter in parameters)]


def _cache_key(annotation: Any) -> object | None:
    try:
        hash(annotation)
    except TypeError:
        return None
    return annotation


def _is_record_class(cls: type) -> bool:
    if issubclass(cls, enum.Enum) or cls.__module__ == "builtins":
        return False
    if dataclasses.is_dataclass(cls):
        return True
    if issubclass(cls, (*_TEXT_PARSEABLE_CLASSES, dt.datetime, RawMessage)):
        return False
    return bool(getattr(cls, "__annotations__", None))


def _capabilities_of(cls: type) -> TypeCapabilities:
    provider = getattr(cls, "provide_schema", None)
    transformer = getattr(cls, "transform_schema", None)
    from_text = getattr(cls, "from_text", None)
    return TypeCapabilities(
        schema_provider=provider if callable(provider) else None,
        schema_transformer=transformer if callable(transformer) else None,
        text_parseable=callable(from_text) or issubclass(cls, _TEXT_PARSEABLE_CLASSES),
    )


def _embed_flag(cls: type, field_name: str, raw: str | None) -> bool:
    if raw is None or raw == "" or raw == "false":
        return False
    if raw == "true":
        return True
    raise InvalidAnnotationError(
        f"invalid bool tag 'embed' for field '{field_name}' of {cls.__name__}: {raw}"
    )


_DEFAULT_DESCRIBER = TypeDescriber()


def describe_type(annotation: Any) -> TypeDescriptor:
    """Return the process-wide cached descriptor for ``annotation``."""
    return _DEFAULT_DESCRIBER.describe(annotation)
