"""Parser dialects and configuration options."""

from dataclasses import dataclass
from enum import StrEnum


class Dialect(StrEnum):
    """Grammar profile used for a parse."""

    SCSS = "scss"
    CSS = "css"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Options controlling lexing and grammar selection."""

    dialect: Dialect = Dialect.SCSS

    @property
    def scss(self) -> bool:
        """Whether the lexer emits dialect tokens (`$name`, `#{`, `//` comments, ...)."""
        return self.dialect == Dialect.SCSS

    @staticmethod
    def for_dialect(dialect: Dialect) -> "ParserOptions":
        return ParserOptions(dialect=Dialect(dialect))
