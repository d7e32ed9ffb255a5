"""Syntax verification of emitted source via tree-sitter."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = "java"


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


@dataclass(frozen=True)
class SyntaxProblem:
    line: int  # 1-based
    column: int  # 0-based
    kind: str  # "error" or "missing"
    text: str

    def __str__(self) -> str:
        return f"{self.line}:{self.column} {self.kind} {self.text!r}"


class JavaSyntaxError(ValueError):
    """Raised when emitted source does not parse as Java."""

    def __init__(self, problems: list[SyntaxProblem]):
        self.problems = problems
        summary = "; ".join(str(p) for p in problems[:5])
        super().__init__(f"{len(problems)} syntax problem(s): {summary}")


def check_java_source(
    source: str, parser_factory: ParserFactory | None = None
) -> list[SyntaxProblem]:
    """Parse *source* as Java and report error and missing nodes in source order."""
    parser = (parser_factory or TreeSitterParserFactory()).get_parser(JAVA_LANGUAGE)
    source_bytes = source.encode("utf-8")
    tree = parser.parse(source_bytes)

    problems: list[SyntaxProblem] = []
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point[0], node.start_point[1]
            problems.append(
                SyntaxProblem(
                    line=row + 1,
                    column=column,
                    kind="missing" if node.is_missing else "error",
                    text=source_bytes[node.start_byte : node.end_byte].decode(
                        "utf-8", errors="replace"
                    ),
                )
            )
        if node.has_error:
            stack.extend(node.children)

    problems.sort(key=lambda p: (p.line, p.column))
    if problems:
        logger.warning("Java source has %d syntax problem(s)", len(problems))
    return problems


def ensure_valid_java(source: str, parser_factory: ParserFactory | None = None) -> str:
    """Return *source* unchanged, or raise ``JavaSyntaxError``."""
    problems = check_java_source(source, parser_factory)
    if problems:
        raise JavaSyntaxError(problems)
    return source
