"""Native type handles — Python types and typing constructs → TypeName."""

from __future__ import annotations

import collections.abc
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Any

from .type_name import (
    BOOLEAN,
    DOUBLE,
    INT,
    OBJECT,
    STRING,
    VOID,
    ArrayTypeName,
    ClassName,
    PrimitiveType,
    PrimitiveKind,
    TypeName,
    TypeVariableName,
    parameterized,
    subtype_of,
)

logger = logging.getLogger(__name__)

JAVA_NAME_ATTRIBUTE = "__java_name__"

_LIST = ClassName(package=("java", "util"), simple_name="List")
_MAP = ClassName(package=("java", "util"), simple_name="Map")
_SET = ClassName(package=("java", "util"), simple_name="Set")
_ITERATOR = ClassName(package=("java", "util"), simple_name="Iterator")
_ITERABLE = ClassName(package=("java", "lang"), simple_name="Iterable")
_CLASS = ClassName(package=("java", "lang"), simple_name="Class")

_UNQUALIFIED_MODULES: frozenset[str] = frozenset({"builtins", "__main__"})


@dataclass(frozen=True)
class NativeTypeTable:
    """Lookup table from native handles to their Java descriptors.

    Tables are built explicitly and passed by reference; ``extended``
    returns a new table rather than mutating this one.
    """

    mapping: dict[Any, TypeName] = field(default_factory=dict)

    def lookup(self, handle: Any) -> TypeName | None:
        try:
            return self.mapping.get(handle)
        except TypeError:
            # unhashable handle
            return None

    def extended(self, extra: dict[Any, TypeName]) -> NativeTypeTable:
        return NativeTypeTable(mapping={**self.mapping, **extra})


DEFAULT_NATIVE_TYPES = NativeTypeTable(
    mapping={
        None: VOID,
        type(None): VOID,
        bool: BOOLEAN,
        int: INT,
        float: DOUBLE,
        str: STRING,
        bytes: ArrayTypeName(component_type=PrimitiveType(keyword=PrimitiveKind.BYTE)),
        object: OBJECT,
        type: _CLASS,
        typing.Any: OBJECT,
        list: _LIST,
        tuple: _LIST,
        dict: _MAP,
        set: _SET,
        frozenset: _SET,
        typing.List: _LIST,
        typing.Dict: _MAP,
        typing.Set: _SET,
        typing.FrozenSet: _SET,
        collections.abc.Sequence: _LIST,
        collections.abc.MutableSequence: _LIST,
        collections.abc.Mapping: _MAP,
        collections.abc.MutableMapping: _MAP,
        collections.abc.Set: _SET,
        collections.abc.MutableSet: _SET,
        collections.abc.Iterable: _ITERABLE,
        collections.abc.Iterator: _ITERATOR,
    }
)


def from_native_type(handle: Any, table: NativeTypeTable = DEFAULT_NATIVE_TYPES) -> TypeName:
    """Build a descriptor from a native type handle.

    Generic aliases (``list[str]``, ``typing.Dict[str, int]``) are resolved
    recursively with primitive arguments boxed, so ``list[str]`` equals
    ``parse_type_name("java.util.List<java.lang.String>")``.

    Raises:
        TypeError: *handle* has no Java counterpart.
    """
    if isinstance(handle, TypeName):
        return handle

    known = table.lookup(handle)
    if known is not None:
        return known

    if isinstance(handle, typing.TypeVar):
        return _from_type_var(handle, table)

    origin = typing.get_origin(handle)
    if origin is not None:
        return _from_generic_alias(handle, origin, table)

    if isinstance(handle, type):
        return _from_class(handle)

    raise TypeError(f"No Java type for native handle {handle!r}")


def _from_type_var(handle: typing.TypeVar, table: NativeTypeTable) -> TypeVariableName:
    bounds: tuple[TypeName, ...] = ()
    if handle.__bound__ is not None:
        bounds = (from_native_type(handle.__bound__, table).box(),)
    return TypeVariableName(name=handle.__name__, bounds=bounds)


def _from_generic_alias(handle: Any, origin: Any, table: NativeTypeTable) -> TypeName:
    args = typing.get_args(handle)
    if origin is typing.Union or origin is types.UnionType:
        present = [a for a in args if a is not type(None)]
        if len(present) != 1:
            raise TypeError(f"Only Optional unions map to Java types: {handle!r}")
        return from_native_type(present[0], table).box()
    if origin is type:
        (target,) = args
        return parameterized(_CLASS, subtype_of(from_native_type(target, table)))

    raw = table.lookup(origin)
    if raw is None:
        raw = from_native_type(origin, table)
    if origin is tuple:
        # tuple[X, ...] is a homogeneous sequence
        args = tuple(a for a in args if a is not Ellipsis)
        if len(set(args)) > 1:
            raise TypeError(f"Heterogeneous tuples have no Java type: {handle!r}")
        args = args[:1]
    logger.debug("Resolving generic alias %r with %d argument(s)", handle, len(args))
    return parameterized(raw, *(from_native_type(a, table) for a in args))


def _from_class(cls: type) -> ClassName:
    java_name = getattr(cls, JAVA_NAME_ATTRIBUTE, None)
    if isinstance(java_name, str):
        return ClassName.best_guess(java_name)
    module = cls.__module__
    package = () if module in _UNQUALIFIED_MODULES else tuple(module.split("."))
    qualname = cls.__qualname__.split(".")
    return ClassName(package=package + tuple(qualname[:-1]), simple_name=qualname[-1])

