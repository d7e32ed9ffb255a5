"""Writer configuration (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class WriterConfig:
    """Groups emission formatting options."""

    indent: str = constants.DEFAULT_INDENT
    column_limit: int = constants.DEFAULT_COLUMN_LIMIT
    continuation_levels: int = constants.DEFAULT_CONTINUATION_LEVELS
    skip_java_lang_imports: bool = True

    @property
    def continuation_indent(self) -> str:
        return self.indent * self.continuation_levels
