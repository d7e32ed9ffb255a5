"""Declaration nodes — annotations, parameters, fields, methods and types.

Each node is a frozen pydantic model produced by a mutable builder;
``build()`` validates the accumulated state and freezes it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict

from .code_block import EMPTY_CODE, CodeBlock, CodeBlockBuilder
from .names import is_valid_name
from .type_name import (
    ClassName,
    TypeKind,
    TypeName,
    TypeVariableName,
    split_top_level,
    to_type_name,
    type_variable,
)
from . import constants

logger = logging.getLogger(__name__)


class Modifier(str, Enum):
    """Java modifiers, declared in canonical source order."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ABSTRACT = "abstract"
    DEFAULT = "default"
    STATIC = "static"
    FINAL = "final"
    TRANSIENT = "transient"
    VOLATILE = "volatile"
    SYNCHRONIZED = "synchronized"
    NATIVE = "native"
    STRICTFP = "strictfp"


_MODIFIER_ORDER: dict[Modifier, int] = {m: i for i, m in enumerate(Modifier)}


def ordered_modifiers(modifiers: Iterable[Modifier]) -> list[Modifier]:
    return sorted(modifiers, key=_MODIFIER_ORDER.__getitem__)


class TypeSpecKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"


_PARAMETER_MODIFIERS = frozenset({Modifier.FINAL})


def _check_name(name: str, what: str) -> str:
    if not is_valid_name(name):
        raise ValueError(f"Invalid {what} name: {name!r}")
    return name


def _annotation(value: Any) -> AnnotationSpec:
    if isinstance(value, AnnotationSpec):
        return value
    return AnnotationSpec.get(value)


def _type_variable(value: Any) -> TypeVariableName:
    if isinstance(value, TypeVariableName):
        return value
    if isinstance(value, str):
        name, _, bound = value.partition(" extends ")
        bounds = [b for b in split_top_level(bound, "&") if b.strip()] if bound else []
        return type_variable(name.strip(), *(b.strip() for b in bounds))
    resolved = to_type_name(value)
    if resolved.kind != TypeKind.TYPE_VARIABLE:
        raise ValueError(f"Not a type variable: {value!r}")
    return resolved


def _class_type(value: Any) -> ClassName:
    resolved = to_type_name(value)
    if resolved.kind != TypeKind.CLASS:
        raise ValueError(f"Expected a class name but was {resolved}")
    return resolved


class _Spec(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        from .code_writer import to_source

        return to_source(self)


# ── Annotations ──────────────────────────────────────────────────


class AnnotationSpec(_Spec):
    type_name: ClassName
    # (member name, values) in declaration order
    members: tuple[tuple[str, tuple[CodeBlock, ...]], ...] = ()

    @classmethod
    def get(cls, annotation_type: Any) -> AnnotationSpec:
        return cls(type_name=_class_type(annotation_type))

    @classmethod
    def builder(cls, annotation_type: Any) -> AnnotationSpecBuilder:
        return AnnotationSpecBuilder(_class_type(annotation_type))


class AnnotationSpecBuilder:
    def __init__(self, type_name: ClassName):
        self._type_name = type_name
        self._members: dict[str, list[CodeBlock]] = {}

    def add_member(self, name: str, format: str, *args: Any) -> AnnotationSpecBuilder:
        _check_name(name, "annotation member")
        self._members.setdefault(name, []).append(CodeBlock.of(format, *args))
        return self

    def build(self) -> AnnotationSpec:
        return AnnotationSpec(
            type_name=self._type_name,
            members=tuple((k, tuple(v)) for k, v in self._members.items()),
        )


# ── Parameters ───────────────────────────────────────────────────


class ParameterSpec(_Spec):
    type_name: TypeName
    name: str
    modifiers: frozenset[Modifier] = frozenset()
    annotations: tuple[AnnotationSpec, ...] = ()

    @classmethod
    def of(cls, type_name: Any, name: str, *modifiers: Modifier) -> ParameterSpec:
        return cls.builder(type_name, name, *modifiers).build()

    @classmethod
    def builder(cls, type_name: Any, name: str, *modifiers: Modifier) -> ParameterSpecBuilder:
        return ParameterSpecBuilder(to_type_name(type_name), name).add_modifiers(*modifiers)


class ParameterSpecBuilder:
    def __init__(self, type_name: TypeName, name: str):
        if type_name.kind == TypeKind.VOID:
            raise ValueError(f"Parameter {name!r} cannot be void")
        self._type_name = type_name
        self._name = _check_name(name, "parameter")
        self._modifiers: set[Modifier] = set()
        self._annotations: list[AnnotationSpec] = []

    def add_modifiers(self, *modifiers: Modifier) -> ParameterSpecBuilder:
        for modifier in modifiers:
            if modifier not in _PARAMETER_MODIFIERS:
                raise ValueError(f"Unexpected parameter modifier: {modifier.value}")
            self._modifiers.add(modifier)
        return self

    def add_annotation(self, annotation: Any) -> ParameterSpecBuilder:
        self._annotations.append(_annotation(annotation))
        return self

    def build(self) -> ParameterSpec:
        return ParameterSpec(
            type_name=self._type_name,
            name=self._name,
            modifiers=frozenset(self._modifiers),
            annotations=tuple(self._annotations),
        )


# ── Fields ───────────────────────────────────────────────────────


class FieldSpec(_Spec):
    type_name: TypeName
    name: str
    modifiers: frozenset[Modifier] = frozenset()
    javadoc: CodeBlock = EMPTY_CODE
    annotations: tuple[AnnotationSpec, ...] = ()
    initializer: CodeBlock | None = None

    @classmethod
    def of(cls, type_name: Any, name: str, *modifiers: Modifier) -> FieldSpec:
        return cls.builder(type_name, name, *modifiers).build()

    @classmethod
    def builder(cls, type_name: Any, name: str, *modifiers: Modifier) -> FieldSpecBuilder:
        return FieldSpecBuilder(to_type_name(type_name), name).add_modifiers(*modifiers)


class FieldSpecBuilder:
    def __init__(self, type_name: TypeName, name: str):
        if type_name.kind in (TypeKind.VOID, TypeKind.WILDCARD):
            raise ValueError(f"Invalid type for field {name!r}: {type_name}")
        self._type_name = type_name
        self._name = _check_name(name, "field")
        self._modifiers: set[Modifier] = set()
        self._javadoc = CodeBlockBuilder()
        self._annotations: list[AnnotationSpec] = []
        self._initializer: CodeBlock | None = None

    def add_modifiers(self, *modifiers: Modifier) -> FieldSpecBuilder:
        self._modifiers.update(modifiers)
        return self

    def add_javadoc(self, format: str, *args: Any) -> FieldSpecBuilder:
        self._javadoc.add(format, *args)
        return self

    def add_annotation(self, annotation: Any) -> FieldSpecBuilder:
        self._annotations.append(_annotation(annotation))
        return self

    def initializer(self, format: str, *args: Any) -> FieldSpecBuilder:
        if self._initializer is not None:
            raise ValueError(f"Initializer of field {self._name!r} was already set")
        self._initializer = CodeBlock.of(format, *args)
        return self

    def build(self) -> FieldSpec:
        return FieldSpec(
            type_name=self._type_name,
            name=self._name,
            modifiers=frozenset(self._modifiers),
            javadoc=self._javadoc.build(),
            annotations=tuple(self._annotations),
            initializer=self._initializer,
        )


# ── Methods ──────────────────────────────────────────────────────


class MethodSpec(_Spec):
    name: str
    modifiers: frozenset[Modifier] = frozenset()
    javadoc: CodeBlock = EMPTY_CODE
    annotations: tuple[AnnotationSpec, ...] = ()
    type_variables: tuple[TypeVariableName, ...] = ()
    return_type: TypeName | None = None
    parameters: tuple[ParameterSpec, ...] = ()
    varargs: bool = False
    exceptions: tuple[TypeName, ...] = ()
    code: CodeBlock = EMPTY_CODE

    @classmethod
    def method_builder(cls, name: str) -> MethodSpecBuilder:
        return MethodSpecBuilder(_check_name(name, "method"))

    @classmethod
    def constructor_builder(cls) -> MethodSpecBuilder:
        return MethodSpecBuilder(constants.CONSTRUCTOR_NAME)

    @property
    def is_constructor(self) -> bool:
        return self.name == constants.CONSTRUCTOR_NAME


class MethodSpecBuilder:
    def __init__(self, name: str):
        self._name = name
        self._modifiers: set[Modifier] = set()
        self._javadoc = CodeBlockBuilder()
        self._annotations: list[AnnotationSpec] = []
        self._type_variables: list[TypeVariableName] = []
        self._return_type: TypeName | None = None
        self._parameters: list[ParameterSpec] = []
        self._varargs = False
        self._exceptions: list[TypeName] = []
        self._code = CodeBlockBuilder()

    def add_modifiers(self, *modifiers: Modifier) -> MethodSpecBuilder:
        self._modifiers.update(modifiers)
        return self

    def add_javadoc(self, format: str, *args: Any) -> MethodSpecBuilder:
        self._javadoc.add(format, *args)
        return self

    def add_annotation(self, annotation: Any) -> MethodSpecBuilder:
        self._annotations.append(_annotation(annotation))
        return self

    def add_type_variable(self, variable: Any) -> MethodSpecBuilder:
        self._type_variables.append(_type_variable(variable))
        return self

    def returns(self, type_name: Any) -> MethodSpecBuilder:
        if self._name == constants.CONSTRUCTOR_NAME:
            raise ValueError("Constructors have no return type")
        self._return_type = to_type_name(type_name)
        return self

    def add_parameter(self, parameter: Any, name: str = "", *modifiers: Modifier) -> MethodSpecBuilder:
        """Add a ``ParameterSpec``, or build one from a type, name and modifiers."""
        if isinstance(parameter, ParameterSpec):
            if name:
                raise ValueError("Pass either a ParameterSpec or a type and a name")
            self._parameters.append(parameter)
        else:
            self._parameters.append(ParameterSpec.of(parameter, name, *modifiers))
        return self

    def add_parameters(self, parameters: Iterable[ParameterSpec]) -> MethodSpecBuilder:
        for parameter in parameters:
            self.add_parameter(parameter)
        return self

    def varargs(self, varargs: bool = True) -> MethodSpecBuilder:
        self._varargs = varargs
        return self

    def add_exception(self, exception: Any) -> MethodSpecBuilder:
        self._exceptions.append(to_type_name(exception))
        return self

    def add_code(self, format: str, *args: Any) -> MethodSpecBuilder:
        self._code.add(format, *args)
        return self

    def add_code_block(self, block: CodeBlock) -> MethodSpecBuilder:
        self._code.add_code(block)
        return self

    def add_statement(self, format: str, *args: Any) -> MethodSpecBuilder:
        self._code.add_statement(format, *args)
        return self

    def add_comment(self, format: str, *args: Any) -> MethodSpecBuilder:
        self._code.add_comment(format, *args)
        return self

    def begin_control_flow(self, format: str, *args: Any) -> MethodSpecBuilder:
        self._code.begin_control_flow(format, *args)
        return self

    def next_control_flow(self, format: str, *args: Any) -> MethodSpecBuilder:
        self._code.next_control_flow(format, *args)
        return self

    def end_control_flow(self, format: str = "", *args: Any) -> MethodSpecBuilder:
        self._code.end_control_flow(format, *args)
        return self

    def build(self) -> MethodSpec:
        code = self._code.build()
        if Modifier.ABSTRACT in self._modifiers and not code.is_empty():
            raise ValueError(f"Abstract method {self._name!r} cannot have code")
        if self._varargs:
            last = self._parameters[-1] if self._parameters else None
            if last is None or last.type_name.kind != TypeKind.ARRAY:
                raise ValueError(f"Last parameter of varargs method {self._name!r} must be an array")
        return MethodSpec(
            name=self._name,
            modifiers=frozenset(self._modifiers),
            javadoc=self._javadoc.build(),
            annotations=tuple(self._annotations),
            type_variables=tuple(self._type_variables),
            return_type=self._return_type,
            parameters=tuple(self._parameters),
            varargs=self._varargs,
            exceptions=tuple(self._exceptions),
            code=code,
        )


# ── Types ────────────────────────────────────────────────────────


class TypeSpec(_Spec):
    kind: TypeSpecKind
    name: str
    modifiers: frozenset[Modifier] = frozenset()
    javadoc: CodeBlock = EMPTY_CODE
    annotations: tuple[AnnotationSpec, ...] = ()
    type_variables: tuple[TypeVariableName, ...] = ()
    superclass: TypeName | None = None
    superinterfaces: tuple[TypeName, ...] = ()
    enum_constants: tuple[tuple[str, CodeBlock], ...] = ()
    fields: tuple[FieldSpec, ...] = ()
    methods: tuple[MethodSpec, ...] = ()
    types: tuple[TypeSpec, ...] = ()

    @classmethod
    def class_builder(cls, name: str) -> TypeSpecBuilder:
        """Start a class; ``"Box<T, U>"`` also declares type variables."""
        return TypeSpecBuilder(TypeSpecKind.CLASS, name)

    @classmethod
    def interface_builder(cls, name: str) -> TypeSpecBuilder:
        return TypeSpecBuilder(TypeSpecKind.INTERFACE, name)

    @classmethod
    def enum_builder(cls, name: str) -> TypeSpecBuilder:
        return TypeSpecBuilder(TypeSpecKind.ENUM, name)


def _split_declared_name(name: str) -> tuple[str, list[str]]:
    """``"Box<K, V extends Map<K, V>>"`` → ``("Box", ["K", "V extends Map<K, V>"])``."""
    name = name.strip()
    open_idx = name.find("<")
    if open_idx == -1:
        return name, []
    if not name.endswith(">"):
        raise ValueError(f"Unbalanced type parameters in {name!r}")
    variables = [v.strip() for v in split_top_level(name[open_idx + 1 : -1], original=name)]
    if not all(variables):
        raise ValueError(f"Empty type parameter in {name!r}")
    return name[:open_idx].strip(), variables


class TypeSpecBuilder:
    def __init__(self, kind: TypeSpecKind, name: str):
        simple_name, variables = _split_declared_name(name)
        self._kind = kind
        self._name = _check_name(simple_name, "type")
        self._modifiers: set[Modifier] = set()
        self._javadoc = CodeBlockBuilder()
        self._annotations: list[AnnotationSpec] = []
        self._type_variables: list[TypeVariableName] = [_type_variable(v) for v in variables]
        self._superclass: TypeName | None = None
        self._superinterfaces: list[TypeName] = []
        self._enum_constants: dict[str, CodeBlock] = {}
        self._fields: list[FieldSpec] = []
        self._methods: list[MethodSpec] = []
        self._types: list[TypeSpec] = []

    def add_modifiers(self, *modifiers: Modifier) -> TypeSpecBuilder:
        self._modifiers.update(modifiers)
        return self

    def add_javadoc(self, format: str, *args: Any) -> TypeSpecBuilder:
        self._javadoc.add(format, *args)
        return self

    def add_annotation(self, annotation: Any) -> TypeSpecBuilder:
        self._annotations.append(_annotation(annotation))
        return self

    def add_type_variable(self, variable: Any) -> TypeSpecBuilder:
        self._type_variables.append(_type_variable(variable))
        return self

    def superclass(self, type_name: Any) -> TypeSpecBuilder:
        if self._kind != TypeSpecKind.CLASS:
            raise ValueError(f"Only classes have a superclass; {self._name} is an {self._kind.value}")
        if self._superclass is not None:
            raise ValueError(f"Superclass of {self._name} already set to {self._superclass}")
        self._superclass = to_type_name(type_name)
        return self

    def add_superinterface(self, type_name: Any) -> TypeSpecBuilder:
        self._superinterfaces.append(to_type_name(type_name))
        return self

    def add_enum_constant(self, name: str, format: str = "", *args: Any) -> TypeSpecBuilder:
        if self._kind != TypeSpecKind.ENUM:
            raise ValueError(f"{self._name} is not an enum")
        if name in self._enum_constants:
            raise ValueError(f"Duplicate enum constant {name!r} in {self._name}")
        self._enum_constants[_check_name(name, "enum constant")] = (
            CodeBlock.of(format, *args) if format else EMPTY_CODE
        )
        return self

    def add_field(self, field: Any, name: str = "", *modifiers: Modifier) -> TypeSpecBuilder:
        """Add a ``FieldSpec``, or build one from a type, name and modifiers."""
        if not isinstance(field, FieldSpec):
            field = FieldSpec.of(field, name, *modifiers)
        if any(f.name == field.name for f in self._fields):
            raise ValueError(f"Duplicate field {field.name!r} in {self._name}")
        self._fields.append(field)
        return self

    def add_method(self, method: MethodSpec) -> TypeSpecBuilder:
        self._methods.append(method)
        return self

    def add_methods(self, methods: Iterable[MethodSpec]) -> TypeSpecBuilder:
        self._methods.extend(methods)
        return self

    def add_type(self, type_spec: TypeSpec) -> TypeSpecBuilder:
        self._types.append(type_spec)
        return self

    def build(self) -> TypeSpec:
        if self._kind == TypeSpecKind.ENUM and not self._enum_constants:
            raise ValueError(f"Enum {self._name} must have at least one constant")
        logger.debug(
            "Built %s %s: %d field(s), %d method(s), %d nested type(s)",
            self._kind.value,
            self._name,
            len(self._fields),
            len(self._methods),
            len(self._types),
        )
        return TypeSpec(
            kind=self._kind,
            name=self._name,
            modifiers=frozenset(self._modifiers),
            javadoc=self._javadoc.build(),
            annotations=tuple(self._annotations),
            type_variables=tuple(self._type_variables),
            superclass=self._superclass,
            superinterfaces=tuple(self._superinterfaces),
            enum_constants=tuple(self._enum_constants.items()),
            fields=tuple(self._fields),
            methods=tuple(self._methods),
            types=tuple(self._types),
        )
