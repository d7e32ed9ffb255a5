"""Qualified-name splitting."""

from __future__ import annotations

import re
from dataclasses import dataclass

from . import constants

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


def is_valid_name(name: str) -> bool:
    """True if *name* is a Java identifier that is not a reserved word."""
    return is_identifier(name) and name not in constants.JAVA_KEYWORDS


@dataclass(frozen=True)
class NameRef:
    """A fully qualified identifier split at its last dot.

    ``namespace`` is empty for an unqualified name.
    """

    namespace: str
    simple_name: str

    @classmethod
    def parse(cls, qualified: str) -> NameRef:
        namespace, _, simple = qualified.strip().rpartition(".")
        return cls(namespace=namespace, simple_name=simple)

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.namespace.split(".")) if self.namespace else ()

    def __str__(self) -> str:
        if not self.namespace:
            return self.simple_name
        return f"{self.namespace}.{self.simple_name}"
