"""Named constants — formatting defaults, placeholder syntax and Java vocabulary."""

from __future__ import annotations

DEFAULT_INDENT = "    "
DEFAULT_COLUMN_LIMIT = 100
DEFAULT_CONTINUATION_LEVELS = 2

JAVA_LANG_PACKAGE = "java.lang"
CONSTRUCTOR_NAME = "<init>"
JAVA_FILE_SUFFIX = ".java"

PLACEHOLDER_CHAR = "$"
ARG_PLACEHOLDERS: frozenset[str] = frozenset({"L", "S", "T", "N"})
NO_ARG_PLACEHOLDERS: frozenset[str] = frozenset({"$", ">", "<", "W"})

# Binary operators after which a long line may be broken, longest first
WRAP_OPERATORS: tuple[str, ...] = (
    ">>>",
    "&&",
    "||",
    "==",
    "!=",
    "<=",
    ">=",
    "<<",
    ">>",
    "+",
    "-",
    "*",
    "/",
    "%",
    "?",
    ":",
)

PRIMITIVE_KEYWORDS: tuple[str, ...] = (
    "boolean",
    "byte",
    "short",
    "int",
    "long",
    "char",
    "float",
    "double",
)

BOX_NAMES: dict[str, str] = {
    "boolean": "Boolean",
    "byte": "Byte",
    "short": "Short",
    "int": "Integer",
    "long": "Long",
    "char": "Character",
    "float": "Float",
    "double": "Double",
}

JAVA_KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract",
        "assert",
        "boolean",
        "break",
        "byte",
        "case",
        "catch",
        "char",
        "class",
        "const",
        "continue",
        "default",
        "do",
        "double",
        "else",
        "enum",
        "extends",
        "final",
        "finally",
        "float",
        "for",
        "goto",
        "if",
        "implements",
        "import",
        "instanceof",
        "int",
        "interface",
        "long",
        "native",
        "new",
        "package",
        "private",
        "protected",
        "public",
        "return",
        "short",
        "static",
        "strictfp",
        "super",
        "switch",
        "synchronized",
        "this",
        "throw",
        "throws",
        "transient",
        "try",
        "void",
        "volatile",
        "while",
        "true",
        "false",
        "null",
    }
)
