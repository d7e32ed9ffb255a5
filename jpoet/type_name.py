"""Generic-aware Java type descriptors.

A ``TypeName`` is an immutable tree describing one use of a Java type:
primitives, classes, generic invocations, arrays, wildcards, type variables
and ``void``. Descriptors are built by parsing canonical strings
(``"java.util.List<java.lang.String>"``), by mapping native Python type
handles (see ``native_types``), or by composition with ``assemble``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .names import NameRef, is_valid_name
from . import constants

logger = logging.getLogger(__name__)


class TypeNameError(Exception):
    """Base class for errors raised while building type descriptors."""


class MalformedTypeName(TypeNameError):
    """Raised when a canonical type-name string cannot be parsed."""


class InvalidWildcardBounds(TypeNameError):
    """Raised when a wildcard is given both an upper and a lower bound."""


class UnsupportedDisassembly(TypeNameError):
    """Raised by strict disassembly of a type with several type arguments."""


class TypeKind(str, Enum):
    PRIMITIVE = "PRIMITIVE"
    CLASS = "CLASS"
    PARAMETERIZED = "PARAMETERIZED"
    ARRAY = "ARRAY"
    WILDCARD = "WILDCARD"
    TYPE_VARIABLE = "TYPE_VARIABLE"
    VOID = "VOID"


class PrimitiveKind(str, Enum):
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    CHAR = "char"
    FLOAT = "float"
    DOUBLE = "double"


# ── Variants ─────────────────────────────────────────────────────


class TypeName(BaseModel):
    """Base of all type descriptor variants.

    Subclasses set ``kind``; all per-variant behaviour is looked up in
    dispatch tables keyed by it.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[TypeKind]

    @classmethod
    def get(cls, value: Any) -> TypeName:
        """Normalize a descriptor, canonical string or native type handle."""
        return to_type_name(value)

    @property
    def is_primitive(self) -> bool:
        return self.kind == TypeKind.PRIMITIVE

    @property
    def is_boxed_primitive(self) -> bool:
        return (
            self.kind == TypeKind.CLASS
            and self.package_name == constants.JAVA_LANG_PACKAGE
            and self.simple_name in _UNBOX_NAMES
        )

    def box(self) -> TypeName:
        if self.kind != TypeKind.PRIMITIVE:
            return self
        return ClassName(
            package=JAVA_LANG,
            simple_name=constants.BOX_NAMES[self.keyword.value],
        )

    def unbox(self) -> TypeName:
        if self.kind == TypeKind.PRIMITIVE:
            return self
        if not self.is_boxed_primitive:
            raise ValueError(f"Cannot unbox {self}")
        return PrimitiveType(keyword=PrimitiveKind(_UNBOX_NAMES[self.simple_name]))

    def contains(self, candidate: Any) -> bool:
        return contains(self, candidate)

    def disassemble(self, *, strict: bool = False) -> TypeName:
        return disassemble(self, strict=strict)

    def assemble(self, outer: Any, replace: bool = False) -> TypeName:
        return assemble(self, outer, replace=replace)

    def __str__(self) -> str:
        return render_type(self)


class PrimitiveType(TypeName):
    kind: ClassVar[TypeKind] = TypeKind.PRIMITIVE

    keyword: PrimitiveKind


class VoidType(TypeName):
    kind: ClassVar[TypeKind] = TypeKind.VOID


class ClassName(TypeName):
    """A simple or package-qualified reference to a declared type."""

    kind: ClassVar[TypeKind] = TypeKind.CLASS

    package: tuple[str, ...] = ()
    simple_name: str

    @field_validator("simple_name")
    @classmethod
    def _simple_name_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("simple_name must not be empty")
        return value

    @classmethod
    def best_guess(cls, qualified: str) -> ClassName:
        """Split *qualified* at its last dot, e.g. ``"java.util.List"``."""
        ref = NameRef.parse(qualified)
        for part in ref.segments + (ref.simple_name,):
            if not is_valid_name(part):
                raise MalformedTypeName(f"Invalid class name: {qualified!r}")
        return cls(package=ref.segments, simple_name=ref.simple_name)

    @property
    def package_name(self) -> str:
        return ".".join(self.package)

    @property
    def canonical_name(self) -> str:
        return ".".join(self.package + (self.simple_name,))

    def nested_class(self, name: str) -> ClassName:
        return ClassName(package=self.package + (self.simple_name,), simple_name=name)


class ParameterizedTypeName(TypeName):
    """A generic invocation such as ``List<String>``; never argument-less."""

    kind: ClassVar[TypeKind] = TypeKind.PARAMETERIZED

    raw_type: ClassName
    type_arguments: tuple[TypeName, ...]

    @field_validator("type_arguments")
    @classmethod
    def _arguments_not_empty(cls, value: tuple[TypeName, ...]) -> tuple[TypeName, ...]:
        if not value:
            raise ValueError("type_arguments must not be empty; use the raw ClassName")
        for arg in value:
            if arg.kind in (TypeKind.PRIMITIVE, TypeKind.VOID):
                raise ValueError(f"Invalid type argument: {arg}")
        return value


class ArrayTypeName(TypeName):
    kind: ClassVar[TypeKind] = TypeKind.ARRAY

    component_type: TypeName


class WildcardTypeName(TypeName):
    kind: ClassVar[TypeKind] = TypeKind.WILDCARD

    upper_bound: TypeName | None = None
    lower_bound: TypeName | None = None

    @model_validator(mode="after")
    def _single_bound(self) -> WildcardTypeName:
        if self.upper_bound is not None and self.lower_bound is not None:
            raise InvalidWildcardBounds(
                f"Wildcard cannot have both upper bound {self.upper_bound} "
                f"and lower bound {self.lower_bound}"
            )
        return self


class TypeVariableName(TypeName):
    """A type variable; bounds are only rendered at its declaration."""

    kind: ClassVar[TypeKind] = TypeKind.TYPE_VARIABLE

    name: str
    bounds: tuple[TypeName, ...] = ()


# ── Well-known types ─────────────────────────────────────────────

JAVA_LANG: tuple[str, ...] = tuple(constants.JAVA_LANG_PACKAGE.split("."))

VOID = VoidType()
BOOLEAN = PrimitiveType(keyword=PrimitiveKind.BOOLEAN)
BYTE = PrimitiveType(keyword=PrimitiveKind.BYTE)
SHORT = PrimitiveType(keyword=PrimitiveKind.SHORT)
INT = PrimitiveType(keyword=PrimitiveKind.INT)
LONG = PrimitiveType(keyword=PrimitiveKind.LONG)
CHAR = PrimitiveType(keyword=PrimitiveKind.CHAR)
FLOAT = PrimitiveType(keyword=PrimitiveKind.FLOAT)
DOUBLE = PrimitiveType(keyword=PrimitiveKind.DOUBLE)
OBJECT = ClassName(package=JAVA_LANG, simple_name="Object")
STRING = ClassName(package=JAVA_LANG, simple_name="String")

_UNBOX_NAMES: dict[str, str] = {box: prim for prim, box in constants.BOX_NAMES.items()}


# ── Construction helpers ─────────────────────────────────────────


def parameterized(raw_type: Any, *type_arguments: Any) -> TypeName:
    """Build ``raw<args...>``; with no arguments the raw class is returned."""
    raw = to_type_name(raw_type)
    if raw.kind != TypeKind.CLASS:
        raise ValueError(f"{raw} cannot take type arguments")
    if not type_arguments:
        return raw
    return ParameterizedTypeName(
        raw_type=raw,
        type_arguments=tuple(_as_argument(to_type_name(a)) for a in type_arguments),
    )


def array_of(component: Any) -> ArrayTypeName:
    component_type = to_type_name(component)
    if component_type.kind in (TypeKind.VOID, TypeKind.WILDCARD):
        raise ValueError(f"Invalid array component: {component_type}")
    return ArrayTypeName(component_type=component_type)


def subtype_of(bound: Any) -> WildcardTypeName:
    return WildcardTypeName(upper_bound=_as_argument(to_type_name(bound)))


def supertype_of(bound: Any) -> WildcardTypeName:
    return WildcardTypeName(lower_bound=_as_argument(to_type_name(bound)))


def type_variable(name: str, *bounds: Any) -> TypeVariableName:
    if not is_valid_name(name):
        raise ValueError(f"Invalid type variable name: {name!r}")
    return TypeVariableName(name=name, bounds=tuple(to_type_name(b) for b in bounds))


def to_type_name(value: Any) -> TypeName:
    """Normalize *value* (descriptor, canonical string or native handle)."""
    if isinstance(value, TypeName):
        return value
    if isinstance(value, str):
        return parse_type_name(value)
    from .native_types import from_native_type

    return from_native_type(value)


def _as_argument(type_name: TypeName) -> TypeName:
    """Box primitives so they may appear as a type argument."""
    if type_name.kind == TypeKind.VOID:
        raise ValueError("void is not a valid type argument")
    return type_name.box()


# ── Canonical-string parsing ─────────────────────────────────────


def parse_type_name(text: str) -> TypeName:
    """Parse a canonical type name.

    Accepts ``pkg.Simple``, ``pkg.Simple<Arg1, pkg.Arg2<...>>``, primitive
    keywords, ``void``, ``[]`` suffixes and, inside argument lists, ``?``,
    ``? extends X`` and ``? super X``.

    Raises:
        MalformedTypeName: unbalanced angle brackets, an empty segment or
            an empty or invalid simple name.
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedTypeName(f"Empty type name: {text!r}")
    return _parse_segment(text, text, argument=False)


def _parse_segment(segment: str, original: str, argument: bool) -> TypeName:
    segment = segment.strip()
    if not segment:
        raise MalformedTypeName(f"Empty segment in {original!r}")

    dimensions = 0
    while segment.endswith("]"):
        if not segment[:-1].rstrip().endswith("["):
            raise MalformedTypeName(f"Unbalanced array brackets in {original!r}")
        segment = segment[:-1].rstrip()[:-1].rstrip()
        dimensions += 1
    if dimensions and not segment:
        raise MalformedTypeName(f"Empty array component in {original!r}")

    if segment.startswith("?"):
        if dimensions or not argument:
            raise MalformedTypeName(f"Wildcard outside a type argument in {original!r}")
        return _parse_wildcard(segment[1:].strip(), original)

    component = _parse_component(segment, original)
    if component.kind == TypeKind.VOID and (dimensions or argument):
        raise MalformedTypeName(f"Misplaced void in {original!r}")
    if component.kind == TypeKind.PRIMITIVE and argument and not dimensions:
        raise MalformedTypeName(f"Primitive type argument {segment!r} in {original!r}")
    for _ in range(dimensions):
        component = ArrayTypeName(component_type=component)
    return component


def _parse_wildcard(rest: str, original: str) -> WildcardTypeName:
    if not rest:
        return WildcardTypeName()
    keyword, _, bound = rest.partition(" ")
    if keyword == "extends":
        return WildcardTypeName(upper_bound=_parse_segment(bound, original, argument=True))
    if keyword == "super":
        return WildcardTypeName(lower_bound=_parse_segment(bound, original, argument=True))
    raise MalformedTypeName(f"Invalid wildcard {('?' + rest)!r} in {original!r}")


def _parse_component(segment: str, original: str) -> TypeName:
    if segment == "void":
        return VOID
    if segment in constants.PRIMITIVE_KEYWORDS:
        return PrimitiveType(keyword=PrimitiveKind(segment))

    open_idx = segment.find("<")
    if open_idx == -1:
        if ">" in segment:
            raise MalformedTypeName(f"Unbalanced angle brackets in {original!r}")
        return _parse_class_name(segment, original)
    if not segment.endswith(">"):
        raise MalformedTypeName(f"Unbalanced angle brackets in {original!r}")

    raw = _parse_class_name(segment[:open_idx], original)
    arguments = split_top_level(segment[open_idx + 1 : -1], original=original)
    return ParameterizedTypeName(
        raw_type=raw,
        type_arguments=tuple(
            _parse_segment(arg, original, argument=True) for arg in arguments
        ),
    )


def split_top_level(inner: str, separator: str = ",", original: str = "") -> list[str]:
    """Split *inner* on *separator* where it is not nested inside angle brackets."""
    original = original or inner
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(inner):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                raise MalformedTypeName(f"Unbalanced angle brackets in {original!r}")
        elif ch == separator and depth == 0:
            parts.append(inner[start:i])
            start = i + 1
    if depth != 0:
        raise MalformedTypeName(f"Unbalanced angle brackets in {original!r}")
    parts.append(inner[start:])
    return parts


def _parse_class_name(text: str, original: str) -> ClassName:
    ref = NameRef.parse(text)
    if not ref.simple_name:
        raise MalformedTypeName(f"Empty simple name in {original!r}")
    parts = [part.strip() for part in ref.segments]
    simple = ref.simple_name.strip()
    for part in parts + [simple]:
        if not is_valid_name(part):
            raise MalformedTypeName(f"Invalid identifier {part!r} in {original!r}")
    return ClassName(package=tuple(parts), simple_name=simple)


# ── Rendering ────────────────────────────────────────────────────


def _canonical(class_name: ClassName) -> str:
    return class_name.canonical_name


def _render_wildcard(t: WildcardTypeName, resolve: Callable[[ClassName], str]) -> str:
    if t.lower_bound is not None:
        return f"? super {render_type(t.lower_bound, resolve)}"
    if t.upper_bound is not None:
        return f"? extends {render_type(t.upper_bound, resolve)}"
    return "?"


def _render_parameterized(
    t: ParameterizedTypeName, resolve: Callable[[ClassName], str]
) -> str:
    args = ", ".join(render_type(arg, resolve) for arg in t.type_arguments)
    return f"{resolve(t.raw_type)}<{args}>"


_RENDER_DISPATCH: dict[TypeKind, Callable[[Any, Callable[[ClassName], str]], str]] = {
    TypeKind.PRIMITIVE: lambda t, resolve: t.keyword.value,
    TypeKind.VOID: lambda t, resolve: "void",
    TypeKind.CLASS: lambda t, resolve: resolve(t),
    TypeKind.PARAMETERIZED: _render_parameterized,
    TypeKind.ARRAY: lambda t, resolve: f"{render_type(t.component_type, resolve)}[]",
    TypeKind.WILDCARD: _render_wildcard,
    TypeKind.TYPE_VARIABLE: lambda t, resolve: t.name,
}


def render_type(
    type_name: TypeName, resolve: Callable[[ClassName], str] = _canonical
) -> str:
    """Render *type_name*, using *resolve* for every class reference.

    The default resolver yields the fully qualified canonical form; the code
    writer passes a resolver backed by its symbol table.
    """
    return _RENDER_DISPATCH[type_name.kind](type_name, resolve)


# ── Structure queries ────────────────────────────────────────────

_CHILDREN_DISPATCH: dict[TypeKind, Callable[[Any], tuple[TypeName, ...]]] = {
    TypeKind.PRIMITIVE: lambda t: (),
    TypeKind.VOID: lambda t: (),
    TypeKind.CLASS: lambda t: (),
    TypeKind.PARAMETERIZED: lambda t: (t.raw_type,) + t.type_arguments,
    TypeKind.ARRAY: lambda t: (t.component_type,),
    TypeKind.WILDCARD: lambda t: tuple(
        b for b in (t.upper_bound, t.lower_bound) if b is not None
    ),
    TypeKind.TYPE_VARIABLE: lambda t: t.bounds,
}


def children(type_name: TypeName) -> tuple[TypeName, ...]:
    """Direct sub-descriptors, raw type first then arguments left to right."""
    return _CHILDREN_DISPATCH[type_name.kind](type_name)


def walk(type_name: TypeName):
    """Yield *type_name* and every nested descriptor, depth first."""
    yield type_name
    for child in children(type_name):
        yield from walk(child)


def referenced_classes(type_name: TypeName) -> list[ClassName]:
    return [t for t in walk(type_name) if t.kind == TypeKind.CLASS]


def contains(type_name: TypeName, candidate: Any) -> bool:
    """True if *candidate* occurs anywhere in *type_name*'s structure.

    Purely syntactic: the descriptor itself, a generic's raw type, any type
    argument, an array component or a wildcard bound. Subtyping is never
    consulted.
    """
    target = to_type_name(candidate)
    return any(node == target for node in walk(type_name))


# ── Disassemble / assemble ───────────────────────────────────────


def disassemble(type_name: TypeName, *, strict: bool = False) -> TypeName:
    """Peel one generic layer.

    ``Outer<Inner<Leaf>>`` becomes ``Inner<Leaf>``. With several type
    arguments the last one is returned, unless *strict* is set, in which case
    ``UnsupportedDisassembly`` is raised. Non-generic descriptors are
    returned unchanged.
    """
    if type_name.kind != TypeKind.PARAMETERIZED:
        return type_name
    arguments = type_name.type_arguments
    if strict and len(arguments) > 1:
        raise UnsupportedDisassembly(
            f"{type_name} has {len(arguments)} type arguments; "
            "only single-argument types can be disassembled strictly"
        )
    return arguments[-1]


def assemble(type_name: TypeName, outer: Any, replace: bool = False) -> TypeName:
    """Wrap *type_name* in the generic type *outer*.

    By default this adds one nesting level: ``T.assemble(List)`` gives
    ``List<T>``; if *outer* already carries arguments *type_name* is appended
    to them. With ``replace=True`` no level is added: the last (outermost)
    type argument of *type_name* is replaced by *outer*, and a non-generic
    *type_name* is replaced by *outer* entirely.
    """
    base = to_type_name(outer)
    if replace:
        if type_name.kind != TypeKind.PARAMETERIZED:
            return base
        return ParameterizedTypeName(
            raw_type=type_name.raw_type,
            type_arguments=type_name.type_arguments[:-1] + (_as_argument(base),),
        )

    argument = _as_argument(type_name)
    if base.kind == TypeKind.CLASS:
        return ParameterizedTypeName(raw_type=base, type_arguments=(argument,))
    if base.kind == TypeKind.PARAMETERIZED:
        return ParameterizedTypeName(
            raw_type=base.raw_type,
            type_arguments=base.type_arguments + (argument,),
        )
    raise ValueError(f"{base} cannot take type arguments")
