"""JavaFile — one compilation unit: package, imports and a top-level type."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel, ConfigDict

from .code_block import EMPTY_CODE, CodeBlock, CodeBlockBuilder
from .code_writer import CodeWriter, declared_names
from .config import WriterConfig
from .names import is_valid_name
from .specs import TypeSpec
from .symbols import SymbolTable
from . import constants

logger = logging.getLogger(__name__)


class JavaFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    package_name: str
    type_spec: TypeSpec
    file_comment: CodeBlock = EMPTY_CODE
    skip_java_lang_imports: bool = True
    indent: str = constants.DEFAULT_INDENT

    @classmethod
    def builder(cls, package_name: str, type_spec: TypeSpec) -> JavaFileBuilder:
        return JavaFileBuilder(package_name, type_spec)

    @property
    def relative_path(self) -> Path:
        directory = Path(*self.package_name.split(".")) if self.package_name else Path()
        return directory / f"{self.type_spec.name}{constants.JAVA_FILE_SUFFIX}"

    def to_string(self, config: WriterConfig | None = None) -> str:
        """Render the whole unit.

        The type is written first so that every class it references is
        claimed; the symbol table is then closed and the header with the
        sorted import block is put in front.
        """
        if config is None:
            config = WriterConfig(
                indent=self.indent, skip_java_lang_imports=self.skip_java_lang_imports
            )
        symbols = SymbolTable(self.package_name, config.skip_java_lang_imports)
        for simple_name, canonical_name in declared_names(self.type_spec, self.package_name):
            symbols.reserve(simple_name, canonical_name)

        header = CodeWriter(symbols, config).emit_file_comment(self.file_comment)
        body = CodeWriter(symbols, config).emit_type_spec(self.type_spec)
        imports = symbols.close()

        parts = [header.text()]
        if parts[0]:
            parts.append("\n")
        if self.package_name:
            parts.append(f"package {self.package_name};\n\n")
        if imports:
            parts.extend(f"import {c.canonical_name};\n" for c in imports)
            parts.append("\n")
        parts.append(body.text())

        logger.info(
            "Emitted %s (%d import(s), %d qualified fallback(s))",
            self.relative_path,
            len(imports),
            symbols.fallback_count,
        )
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def write_to(self, out: TextIO, config: WriterConfig | None = None) -> None:
        out.write(self.to_string(config))

    def write_to_dir(self, directory: Path | str, config: WriterConfig | None = None) -> Path:
        """Write under *directory*, creating package directories; returns the file path."""
        path = Path(directory) / self.relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_string(config), encoding="utf-8")
        logger.info("Wrote %s", path)
        return path


class JavaFileBuilder:
    def __init__(self, package_name: str, type_spec: TypeSpec):
        for part in package_name.split(".") if package_name else []:
            if not is_valid_name(part):
                raise ValueError(f"Invalid package name: {package_name!r}")
        self._package_name = package_name
        self._type_spec = type_spec
        self._file_comment = CodeBlockBuilder()
        self._skip_java_lang_imports = True
        self._indent = constants.DEFAULT_INDENT

    def add_file_comment(self, format: str, *args: Any) -> JavaFileBuilder:
        self._file_comment.add(format, *args)
        return self

    def skip_java_lang_imports(self, skip: bool) -> JavaFileBuilder:
        self._skip_java_lang_imports = skip
        return self

    def indent(self, indent: str) -> JavaFileBuilder:
        if indent.strip():
            raise ValueError(f"Indent must be whitespace: {indent!r}")
        self._indent = indent
        return self

    def build(self) -> JavaFile:
        return JavaFile(
            package_name=self._package_name,
            type_spec=self._type_spec,
            file_comment=self._file_comment.build(),
            skip_java_lang_imports=self._skip_java_lang_imports,
            indent=self._indent,
        )
