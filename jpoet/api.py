"""Composable API functions for generating Java source.

Each function is a thin, logged wrapper over the builder and writer layers
so that callers can go from descriptors to text (or files) in one call.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import WriterConfig
from .java_file import JavaFile
from .specs import TypeSpec
from .type_name import TypeName, to_type_name
from .verify import ensure_valid_java

logger = logging.getLogger(__name__)


def parse_type(value: Any) -> TypeName:
    """Build a type descriptor from a canonical string or native type handle.

    Args:
        value: A ``TypeName``, a canonical name such as
            ``"java.util.Map<java.lang.String, java.util.List<java.lang.Integer>>"``,
            or a native handle such as ``dict[str, list[int]]``.

    Returns:
        The normalized descriptor.
    """
    return to_type_name(value)


def canonical_type_name(value: Any) -> str:
    """Fully qualified rendering of *value*, e.g. ``java.util.List<java.lang.String>``."""
    return str(to_type_name(value))


def build_java_file(
    package_name: str,
    type_spec: TypeSpec,
    file_comment: str = "",
    skip_java_lang_imports: bool = True,
) -> JavaFile:
    builder = JavaFile.builder(package_name, type_spec).skip_java_lang_imports(
        skip_java_lang_imports
    )
    if file_comment:
        builder.add_file_comment("$L", file_comment)
    return builder.build()


def generate_source(
    package_name: str,
    type_spec: TypeSpec,
    file_comment: str = "",
    config: WriterConfig | None = None,
    validate: bool = False,
) -> str:
    """Render one compilation unit.

    Args:
        package_name: Package declared by the unit; empty for the default package.
        type_spec: The top-level type.
        file_comment: Optional comment written above the package line.
        config: Formatting options; defaults to ``WriterConfig()``.
        validate: Parse the result with tree-sitter and raise
            ``JavaSyntaxError`` if it is not valid Java.

    Returns:
        The source text, ending in a single newline.
    """
    logger.info("Generating %s.%s", package_name or "<default>", type_spec.name)
    java_file = build_java_file(
        package_name,
        type_spec,
        file_comment,
        skip_java_lang_imports=config.skip_java_lang_imports if config else True,
    )
    source = java_file.to_string(config)
    if validate:
        ensure_valid_java(source)
    return source


def write_source(
    package_name: str,
    type_spec: TypeSpec,
    directory: Path | str,
    file_comment: str = "",
    config: WriterConfig | None = None,
) -> Path:
    """Render and write one compilation unit below *directory*.

    Returns:
        The path of the written ``.java`` file.
    """
    java_file = build_java_file(
        package_name,
        type_spec,
        file_comment,
        skip_java_lang_imports=config.skip_java_lang_imports if config else True,
    )
    return java_file.write_to_dir(directory, config)
