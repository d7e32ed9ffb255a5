"""Symbol table — binds simple names to qualified names for one output unit."""

from __future__ import annotations

import logging
from enum import Enum

from .type_name import ClassName
from . import constants

logger = logging.getLogger(__name__)


class AlreadyClosed(RuntimeError):
    """Raised when a name is claimed after the import list was finalized."""


class SymbolTableState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class SymbolTable:
    """Tracks which simple names are bound while a compilation unit is emitted.

    The first class to claim a simple name owns it for the whole unit; a
    later class with the same simple name but a different package is written
    fully qualified instead of shadowing the first one.
    """

    def __init__(self, package_name: str = "", skip_java_lang_imports: bool = True):
        self._package_name = package_name
        self._skip_java_lang_imports = skip_java_lang_imports
        # simple name → canonical name it resolves to
        self._bindings: dict[str, str] = {}
        # canonical name → class to import
        self._imports: dict[str, ClassName] = {}
        self._state = SymbolTableState.OPEN
        self.fallback_count = 0

    @property
    def state(self) -> SymbolTableState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == SymbolTableState.OPEN

    @property
    def imports(self) -> tuple[ClassName, ...]:
        return tuple(self._imports.values())

    def lookup(self, simple_name: str) -> str | None:
        return self._bindings.get(simple_name)

    def reserve(self, simple_name: str, canonical_name: str = "") -> None:
        """Bind a name declared inside the unit without producing an import."""
        self._check_open()
        canonical = canonical_name or simple_name
        bound = self._bindings.setdefault(simple_name, canonical)
        if bound != canonical:
            logger.debug(
                "Name %s already reserved for %s; keeping it over %s",
                simple_name,
                bound,
                canonical,
            )

    def claim(self, class_name: ClassName | str) -> str:
        """Return the text to write for *class_name*.

        The simple name when it is free or already bound to the same class,
        otherwise the fully qualified canonical name.

        Raises:
            AlreadyClosed: the table has been closed.
        """
        self._check_open()
        if isinstance(class_name, str):
            class_name = ClassName.best_guess(class_name)
        canonical = class_name.canonical_name
        simple = class_name.simple_name

        bound = self._bindings.get(simple)
        if bound is None:
            self._bindings[simple] = canonical
            if self._needs_import(class_name):
                self._imports[canonical] = class_name
            return simple
        if bound == canonical:
            return simple

        self.fallback_count += 1
        logger.debug(
            "Simple name %s is bound to %s; writing %s fully qualified",
            simple,
            bound,
            canonical,
        )
        return canonical

    def close(self) -> list[ClassName]:
        """Finalize and return the imports sorted by package then simple name."""
        self._check_open()
        self._state = SymbolTableState.CLOSED
        imports = sorted(
            self._imports.values(), key=lambda c: (c.package_name, c.simple_name)
        )
        logger.debug("Symbol table closed with %d import(s)", len(imports))
        return imports

    def _needs_import(self, class_name: ClassName) -> bool:
        package = class_name.package_name
        if not package or package == self._package_name:
            return False
        return not (
            self._skip_java_lang_imports and package == constants.JAVA_LANG_PACKAGE
        )

    def _check_open(self) -> None:
        if self._state == SymbolTableState.CLOSED:
            raise AlreadyClosed("Symbol table is closed; no further names can be claimed")
