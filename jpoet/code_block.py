"""Statement templates — format strings with typed placeholders.

Placeholders:

- ``$L`` literal, written as-is (nested code blocks are expanded)
- ``$S`` string, escaped and double-quoted (``None`` becomes ``null``)
- ``$T`` type, written through the symbol table so it gets imported
- ``$N`` name of a declaration (or a plain string)
- ``$$`` a dollar sign, ``$>``/``$<`` indent/unindent, ``$W`` soft wrap

Argument placeholders may be indexed (``$1L``); relative and indexed
placeholders cannot be mixed in one format string.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict

from .type_name import to_type_name
from . import constants

_JAVA_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def string_literal(value: str | None) -> str:
    """Quote *value* as a Java string literal."""
    if value is None:
        return "null"
    out = ['"']
    for ch in value:
        escaped = _JAVA_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _name_of(arg: Any) -> str:
    if isinstance(arg, str):
        return arg
    name = getattr(arg, "name", None)
    if isinstance(name, str):
        return name
    raise ValueError(f"Expected a name but was {arg!r}")


def _coerce_argument(placeholder: str, arg: Any) -> Any:
    if placeholder == "N":
        return _name_of(arg)
    if placeholder == "S":
        return None if arg is None else str(arg)
    if placeholder == "T":
        return to_type_name(arg)
    return arg


class CodeBlock(BaseModel):
    """An immutable fragment of code: text parts interleaved with arguments."""

    model_config = ConfigDict(frozen=True)

    format_parts: tuple[str, ...] = ()
    args: tuple[Any, ...] = ()

    @classmethod
    def of(cls, format: str, *args: Any) -> CodeBlock:
        return CodeBlockBuilder().add(format, *args).build()

    @classmethod
    def builder(cls) -> CodeBlockBuilder:
        return CodeBlockBuilder()

    @classmethod
    def join(cls, blocks: Iterable[CodeBlock], separator: str) -> CodeBlock:
        builder = CodeBlockBuilder()
        for i, block in enumerate(blocks):
            if i:
                builder.add(separator.replace(constants.PLACEHOLDER_CHAR, "$$"))
            builder.add_code(block)
        return builder.build()

    def is_empty(self) -> bool:
        return not self.format_parts

    def to_builder(self) -> CodeBlockBuilder:
        return CodeBlockBuilder().add_code(self)

    def __str__(self) -> str:
        from .code_writer import to_source

        return to_source(self)


EMPTY_CODE = CodeBlock()


def _parse_format(format: str, args: tuple[Any, ...]) -> tuple[list[str], list[Any]]:
    """Split *format* into parts and coerce *args*; raises before returning anything."""
    parts: list[str] = []
    coerced: list[Any] = []
    has_relative = False
    has_indexed = False
    relative_index = 0
    used = [False] * len(args)

    p = 0
    while p < len(format):
        if format[p] != constants.PLACEHOLDER_CHAR:
            next_p = format.find(constants.PLACEHOLDER_CHAR, p + 1)
            if next_p == -1:
                next_p = len(format)
            parts.append(format[p:next_p])
            p = next_p
            continue

        end = p + 1
        while end < len(format) and format[end].isdigit():
            end += 1
        if end >= len(format):
            raise ValueError(f"Dangling format character in {format!r}")
        placeholder = format[end]
        digits = format[p + 1 : end]

        if placeholder in constants.NO_ARG_PLACEHOLDERS:
            if digits:
                raise ValueError(f"${placeholder} may not have an index in {format!r}")
            parts.append("$" + placeholder)
            p = end + 1
            continue
        if placeholder not in constants.ARG_PLACEHOLDERS:
            raise ValueError(f"Invalid placeholder ${placeholder} in {format!r}")

        if digits:
            index = int(digits) - 1
            has_indexed = True
            if not 0 <= index < len(args):
                raise ValueError(
                    f"Index {index + 1} for {format[p:end + 1]!r} not in range "
                    f"(received {len(args)} arguments)"
                )
        else:
            index = relative_index
            relative_index += 1
            has_relative = True
            if index >= len(args):
                raise ValueError(
                    f"Not enough arguments for {format!r} (received {len(args)})"
                )
        if has_relative and has_indexed:
            raise ValueError(f"Cannot mix indexed and relative placeholders in {format!r}")

        coerced.append(_coerce_argument(placeholder, args[index]))
        parts.append("$" + placeholder)
        used[index] = True
        p = end + 1

    unused = [i + 1 for i, was_used in enumerate(used) if not was_used]
    if unused:
        raise ValueError(
            f"Unused arguments {unused} for {format!r} (received {len(args)})"
        )
    return parts, coerced


class CodeBlockBuilder:
    """Mutable accumulator for a ``CodeBlock``.

    Every method either appends completely or raises without appending.
    """

    def __init__(self):
        self._parts: list[str] = []
        self._args: list[Any] = []

    def is_empty(self) -> bool:
        return not self._parts

    def _append(
        self,
        format: str,
        args: tuple[Any, ...],
        before: tuple[str, ...] = (),
        after: tuple[str, ...] = (),
    ) -> CodeBlockBuilder:
        parts, coerced = _parse_format(format, args)
        self._parts.extend(before)
        self._parts.extend(parts)
        self._parts.extend(after)
        self._args.extend(coerced)
        return self

    def add(self, format: str, *args: Any) -> CodeBlockBuilder:
        return self._append(format, args)

    def add_statement(self, format: str, *args: Any) -> CodeBlockBuilder:
        return self._append(format, args, after=(";\n",))

    def add_comment(self, format: str, *args: Any) -> CodeBlockBuilder:
        return self._append(format, args, before=("// ",), after=("\n",))

    def begin_control_flow(self, format: str, *args: Any) -> CodeBlockBuilder:
        """``if (x) {`` style opener; indents the following statements."""
        return self._append(format, args, after=(" {\n", "$>"))

    def next_control_flow(self, format: str, *args: Any) -> CodeBlockBuilder:
        """``} else {`` style continuation."""
        return self._append(format, args, before=("$<", "} "), after=(" {\n", "$>"))

    def end_control_flow(self, format: str = "", *args: Any) -> CodeBlockBuilder:
        """Close the current block, optionally with a trailer like ``while (x)``."""
        if format:
            return self._append(format, args, before=("$<", "} "), after=(";\n",))
        self._parts.extend(("$<", "}\n"))
        return self

    def indent(self) -> CodeBlockBuilder:
        self._parts.append("$>")
        return self

    def unindent(self) -> CodeBlockBuilder:
        self._parts.append("$<")
        return self

    def add_code(self, block: CodeBlock) -> CodeBlockBuilder:
        self._parts.extend(block.format_parts)
        self._args.extend(block.args)
        return self

    def build(self) -> CodeBlock:
        return CodeBlock(format_parts=tuple(self._parts), args=tuple(self._args))
