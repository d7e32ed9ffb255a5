"""Soft line wrapping at a column budget."""

from __future__ import annotations

from typing import Iterable

from . import constants

_UNWRAPPED_PREFIXES: tuple[str, ...] = ("//", "/*", "*", "@", "import ", "package ")
_LAMBDA_ARROW = "->"
_WILDCARD_BOUNDS: tuple[str, ...] = ("? extends ", "? super ")


def break_points(text: str) -> list[int]:
    """Offsets in *text* after which a line may be broken.

    Breaks fall after a comma or after a binary operator surrounded by
    spaces, and never inside a string or character literal.
    """
    points: list[int] = []
    quote = ""
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
            i += 1
            continue
        if ch in "\"'":
            quote = ch
        elif ch == ",":
            points.append(i + 1)
        elif ch == " ":
            op = _operator_at(text, i + 1)
            if op:
                points.append(i + 1 + len(op))
                i += len(op) + 1
                continue
        i += 1
    return points


def _operator_at(text: str, i: int) -> str:
    if text.startswith(_LAMBDA_ARROW + " ", i):
        return _LAMBDA_ARROW
    if text.startswith(_WILDCARD_BOUNDS, i):
        return ""
    for op in constants.WRAP_OPERATORS:
        if text.startswith(op + " ", i):
            return op
    return ""


def is_wrappable(text: str) -> bool:
    return not text.lstrip().startswith(_UNWRAPPED_PREFIXES)


def wrap_line(
    text: str,
    indent: str,
    continuation: str,
    column_limit: int = constants.DEFAULT_COLUMN_LIMIT,
    extra_breaks: Iterable[int] = (),
) -> list[str]:
    """Split one logical line into physical lines no wider than *column_limit*.

    Each break is taken at the last safe point that still fits; continuation
    lines get ``indent + continuation``. When nothing fits, the remainder is
    emitted unbroken.
    """
    candidates = sorted(set(break_points(text)).union(extra_breaks))
    lines: list[str] = []
    start = 0
    prefix = indent
    while len(prefix) + len(text) - start > column_limit:
        best = -1
        for k in candidates:
            if k <= start:
                continue
            head = text[start:k].rstrip()
            if len(prefix) + len(head) > column_limit:
                break
            if head.strip() and text[k:].strip():
                best = k
        if best == -1:
            break
        lines.append(prefix + text[start:best].rstrip())
        start = best
        while start < len(text) and text[start] == " ":
            start += 1
        prefix = indent + continuation
    lines.append(prefix + text[start:])
    return lines
