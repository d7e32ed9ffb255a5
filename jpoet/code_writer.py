"""CodeWriter — renders declaration trees as Java source text."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .code_block import CodeBlock, string_literal
from .config import WriterConfig
from .line_wrapper import is_wrappable, wrap_line
from .specs import (
    AnnotationSpec,
    FieldSpec,
    MethodSpec,
    Modifier,
    ParameterSpec,
    TypeSpec,
    TypeSpecKind,
    ordered_modifiers,
)
from .symbols import SymbolTable
from .type_name import ClassName, TypeKind, TypeName, TypeVariableName, render_type

logger = logging.getLogger(__name__)

_INTERFACE_METHOD_IMPLICIT = frozenset({Modifier.PUBLIC, Modifier.ABSTRACT})
_INTERFACE_FIELD_IMPLICIT = frozenset({Modifier.PUBLIC, Modifier.STATIC, Modifier.FINAL})
_INTERFACE_TYPE_IMPLICIT = frozenset({Modifier.PUBLIC, Modifier.STATIC})
_INTERFACE_BODY_MODIFIERS = frozenset({Modifier.DEFAULT, Modifier.STATIC, Modifier.PRIVATE})


class CodeWriter:
    """Single-pass, depth-first writer.

    Every class reference is claimed through the symbol table, so the import
    list is complete once the tree has been written. Without a symbol table
    class references are written fully qualified.
    """

    def __init__(
        self,
        symbols: SymbolTable | None = None,
        config: WriterConfig = WriterConfig(),
    ):
        self._symbols = symbols
        self._config = config
        self._indent_level = 0
        self._out: list[str] = []
        self._line: list[str] = []
        self._line_indent = 0
        self._line_breaks: list[int] = []
        self._javadoc = False
        self._PART_DISPATCH: dict[str, Callable[[Any], None]] = {
            "$L": self._emit_literal,
            "$S": lambda arg: self.emit(string_literal(arg)),
            "$T": self.emit_type,
            "$N": self.emit,
        }
        self._NO_ARG_DISPATCH: dict[str, Callable[[], Any]] = {
            "$$": lambda: self.emit("$"),
            "$>": self.indent,
            "$<": self.unindent,
            "$W": self.emit_soft_break,
        }

    # ── low-level output ─────────────────────────────────────────

    def indent(self, levels: int = 1) -> CodeWriter:
        self._indent_level += levels
        return self

    def unindent(self, levels: int = 1) -> CodeWriter:
        if self._indent_level - levels < 0:
            raise ValueError(f"Cannot unindent {levels} from {self._indent_level}")
        self._indent_level -= levels
        return self

    def emit(self, text: str) -> CodeWriter:
        for i, chunk in enumerate(text.split("\n")):
            if i:
                self._end_line()
            if chunk:
                if not self._line:
                    self._line_indent = self._indent_level
                self._line.append(chunk)
        return self

    def emit_soft_break(self) -> CodeWriter:
        """A space at which the line may be wrapped."""
        self.emit(" ")
        self._line_breaks.append(sum(len(piece) for piece in self._line))
        return self

    def _end_line(self) -> None:
        content = "".join(self._line)
        indent = self._config.indent * self._line_indent
        if self._javadoc:
            self._out.append(f"{indent} * {content}".rstrip() + "\n")
        elif not content:
            self._out.append("\n")
        elif is_wrappable(content):
            for line in wrap_line(
                content,
                indent,
                self._config.continuation_indent,
                self._config.column_limit,
                self._line_breaks,
            ):
                self._out.append(line + "\n")
        else:
            self._out.append(indent + content + "\n")
        self._line = []
        self._line_breaks = []

    def _ensure_line_end(self) -> None:
        if self._line:
            self._end_line()

    def text(self) -> str:
        """Everything written so far; an unterminated last line gets no newline."""
        pending = bool(self._line)
        self._ensure_line_end()
        out = "".join(self._out)
        return out[:-1] if pending else out

    # ── types ────────────────────────────────────────────────────

    def _resolve(self, class_name: ClassName) -> str:
        if self._symbols is None:
            return class_name.canonical_name
        return self._symbols.claim(class_name)

    def emit_type(self, type_name: TypeName) -> CodeWriter:
        return self.emit(render_type(type_name, self._resolve))

    def emit_type_variables(self, variables: tuple[TypeVariableName, ...]) -> CodeWriter:
        if not variables:
            return self
        self.emit("<")
        for i, variable in enumerate(variables):
            if i:
                self.emit(", ")
            self.emit(variable.name)
            for j, bound in enumerate(variable.bounds):
                self.emit(" extends " if j == 0 else " & ")
                self.emit_type(bound)
        return self.emit(">")

    # ── code blocks ──────────────────────────────────────────────

    def emit_code(self, block: CodeBlock) -> CodeWriter:
        args = iter(block.args)
        for part in block.format_parts:
            no_arg = self._NO_ARG_DISPATCH.get(part)
            if no_arg is not None:
                no_arg()
                continue
            handler = self._PART_DISPATCH.get(part)
            if handler is None:
                self.emit(part)
            else:
                handler(next(args))
        return self

    def _emit_literal(self, arg: Any) -> None:
        if isinstance(arg, CodeBlock):
            self.emit_code(arg)
        elif isinstance(arg, AnnotationSpec):
            self.emit_annotation(arg, inline=True)
        elif isinstance(arg, TypeName):
            self.emit_type(arg)
        elif isinstance(arg, bool):
            self.emit("true" if arg else "false")
        elif arg is None:
            self.emit("null")
        else:
            self.emit(str(arg))

    def emit_javadoc(self, javadoc: CodeBlock) -> CodeWriter:
        if javadoc.is_empty():
            return self
        self._ensure_line_end()
        self.emit("/**\n")
        self._javadoc = True
        try:
            self.emit_code(javadoc)
            self._ensure_line_end()
        finally:
            self._javadoc = False
        return self.emit(" */\n")

    def emit_file_comment(self, comment: CodeBlock) -> CodeWriter:
        if comment.is_empty():
            return self
        rendered = CodeWriter(self._symbols, self._config).emit_code(comment).text()
        for line in rendered.rstrip("\n").split("\n"):
            self.emit(f"// {line}".rstrip() + "\n")
        return self

    # ── declarations ─────────────────────────────────────────────

    def emit_modifiers(self, modifiers: frozenset[Modifier], implicit: frozenset[Modifier] = frozenset()) -> CodeWriter:
        for modifier in ordered_modifiers(modifiers):
            if modifier not in implicit:
                self.emit(modifier.value + " ")
        return self

    def emit_annotation(self, annotation: AnnotationSpec, inline: bool) -> CodeWriter:
        self.emit("@")
        self.emit_type(annotation.type_name)
        members = annotation.members
        if members:
            self.emit("(")
            if len(members) == 1 and members[0][0] == "value":
                self._emit_annotation_value(members[0][1])
            else:
                for i, (name, values) in enumerate(members):
                    if i:
                        self.emit(", ")
                    self.emit(f"{name} = ")
                    self._emit_annotation_value(values)
            self.emit(")")
        return self.emit(" " if inline else "\n")

    def _emit_annotation_value(self, values: tuple[CodeBlock, ...]) -> None:
        if len(values) == 1:
            self.emit_code(values[0])
            return
        self.emit("{")
        for i, value in enumerate(values):
            if i:
                self.emit(", ")
            self.emit_code(value)
        self.emit("}")

    def emit_annotations(self, annotations: tuple[AnnotationSpec, ...], inline: bool) -> CodeWriter:
        for annotation in annotations:
            self.emit_annotation(annotation, inline)
        return self

    def emit_parameter(self, parameter: ParameterSpec, varargs: bool = False) -> CodeWriter:
        self.emit_annotations(parameter.annotations, inline=True)
        self.emit_modifiers(parameter.modifiers)
        if varargs:
            self.emit_type(parameter.type_name.component_type)
            self.emit("...")
        else:
            self.emit_type(parameter.type_name)
        return self.emit(" " + parameter.name)

    def emit_field(self, field: FieldSpec, implicit: frozenset[Modifier] = frozenset()) -> CodeWriter:
        self.emit_javadoc(field.javadoc)
        self.emit_annotations(field.annotations, inline=False)
        self.emit_modifiers(field.modifiers, implicit)
        self.emit_type(field.type_name)
        self.emit(" " + field.name)
        if field.initializer is not None:
            self.emit(" = ")
            self.emit_code(field.initializer)
        return self.emit(";\n")

    def emit_method(
        self,
        method: MethodSpec,
        enclosing_name: str,
        enclosing_kind: TypeSpecKind = TypeSpecKind.CLASS,
    ) -> CodeWriter:
        logger.debug("Emitting method %s.%s", enclosing_name, method.name)
        in_interface = enclosing_kind == TypeSpecKind.INTERFACE
        implicit = _INTERFACE_METHOD_IMPLICIT if in_interface else frozenset()

        self.emit_javadoc(method.javadoc)
        self.emit_annotations(method.annotations, inline=False)
        self.emit_modifiers(method.modifiers, implicit)
        if method.type_variables:
            self.emit_type_variables(method.type_variables)
            self.emit(" ")
        if method.is_constructor:
            self.emit(enclosing_name)
        else:
            if method.return_type is None:
                self.emit("void")
            else:
                self.emit_type(method.return_type)
            self.emit(" " + method.name)

        self.emit("(")
        last = len(method.parameters) - 1
        for i, parameter in enumerate(method.parameters):
            if i:
                self.emit(", ")
            self.emit_parameter(parameter, varargs=method.varargs and i == last)
        self.emit(")")

        for i, exception in enumerate(method.exceptions):
            self.emit(" throws " if i == 0 else ", ")
            self.emit_type(exception)

        if self._has_body(method, in_interface):
            self.emit(" {\n")
            self.indent()
            self.emit_code(method.code)
            self._ensure_line_end()
            self.unindent()
            return self.emit("}\n")
        if not method.code.is_empty():
            raise ValueError(
                f"Method {enclosing_name}.{method.name} has code but no body "
                "(abstract, or an interface method without default/static)"
            )
        return self.emit(";\n")

    @staticmethod
    def _has_body(method: MethodSpec, in_interface: bool) -> bool:
        if Modifier.ABSTRACT in method.modifiers or Modifier.NATIVE in method.modifiers:
            return False
        if in_interface:
            return bool(method.modifiers & _INTERFACE_BODY_MODIFIERS)
        return True

    def emit_type_spec(
        self, spec: TypeSpec, implicit: frozenset[Modifier] = frozenset()
    ) -> CodeWriter:
        logger.debug("Emitting %s %s", spec.kind.value, spec.name)
        self.emit_javadoc(spec.javadoc)
        self.emit_annotations(spec.annotations, inline=False)
        self.emit_modifiers(spec.modifiers, implicit)
        self.emit(f"{spec.kind.value} {spec.name}")
        self.emit_type_variables(spec.type_variables)

        if spec.superclass is not None:
            self.emit(" extends ")
            self.emit_type(spec.superclass)
        if spec.superinterfaces:
            keyword = " extends " if spec.kind == TypeSpecKind.INTERFACE else " implements "
            for i, interface in enumerate(spec.superinterfaces):
                self.emit(keyword if i == 0 else ", ")
                self.emit_type(interface)

        self.emit(" {\n")
        self.indent()
        self._emit_members(spec)
        self.unindent()
        return self.emit("}\n")

    def _emit_members(self, spec: TypeSpec) -> None:
        in_interface = spec.kind == TypeSpecKind.INTERFACE
        has_members = bool(spec.fields or spec.methods or spec.types)
        first = True

        if spec.enum_constants:
            last = len(spec.enum_constants) - 1
            for i, (name, arguments) in enumerate(spec.enum_constants):
                self.emit(name)
                if not arguments.is_empty():
                    self.emit("(")
                    self.emit_code(arguments)
                    self.emit(")")
                if i < last:
                    self.emit(",\n")
            self.emit(";\n" if has_members else "\n")
            first = False

        previous_was_field = False
        for field in spec.fields:
            if not first and (not previous_was_field or not field.javadoc.is_empty()):
                self.emit("\n")
            self.emit_field(field, _INTERFACE_FIELD_IMPLICIT if in_interface else frozenset())
            first = False
            previous_was_field = True

        for method in spec.methods:
            if not first:
                self.emit("\n")
            self.emit_method(method, spec.name, spec.kind)
            first = False

        for nested in spec.types:
            if not first:
                self.emit("\n")
            self.emit_type_spec(nested, _INTERFACE_TYPE_IMPLICIT if in_interface else frozenset())
            first = False


def declared_names(spec: TypeSpec, enclosing: str) -> list[tuple[str, str]]:
    """(simple name, canonical name) of *spec*, its nested types and type variables."""
    canonical = f"{enclosing}.{spec.name}" if enclosing else spec.name
    names = [(spec.name, canonical)]
    names.extend((v.name, v.name) for v in spec.type_variables)
    for method in spec.methods:
        names.extend((v.name, v.name) for v in method.type_variables)
    for nested in spec.types:
        names.extend(declared_names(nested, canonical))
    return names


_TO_SOURCE_DISPATCH: dict[type, Callable[[CodeWriter, Any], CodeWriter]] = {
    CodeBlock: CodeWriter.emit_code,
    TypeSpec: CodeWriter.emit_type_spec,
    FieldSpec: CodeWriter.emit_field,
    MethodSpec: lambda writer, method: writer.emit_method(method, "Constructor"),
    ParameterSpec: CodeWriter.emit_parameter,
    AnnotationSpec: lambda writer, annotation: writer.emit_annotation(annotation, inline=False),
}


def to_source(node: Any, config: WriterConfig = WriterConfig()) -> str:
    """Render a standalone node with fully qualified class names."""
    emit = _TO_SOURCE_DISPATCH.get(type(node))
    if emit is None:
        raise TypeError(f"Cannot render {type(node).__name__}")
    writer = CodeWriter(None, config)
    emit(writer, node)
    return writer.text()
