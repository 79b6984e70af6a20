"""High-level parse entrypoints for SCSS and CSS source text."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from scsspy.cst import Node
from scsspy.diagnostics import Diagnostic, collect_diagnostics
from scsspy.lexer import Lexer, Token
from scsspy.parser.css import CssGrammar
from scsspy.parser.options import Dialect, ParserOptions
from scsspy.parser.scss import ScssGrammar
from scsspy.parser.token_source import TokenSource

if TYPE_CHECKING:
    from scsspy.pipeline import ScssParseResult

logger = logging.getLogger(__name__)

GRAMMARS: Final[dict[Dialect, type[CssGrammar]]] = {
    Dialect.SCSS: ScssGrammar,
    Dialect.CSS: CssGrammar,
}


@dataclass(frozen=True, slots=True)
class ParsedTree:
    """Root stylesheet node plus every diagnostic, sorted by offset."""

    root: Node
    diagnostics: list[Diagnostic]


def _resolve_options(
    options: ParserOptions | None,
    dialect: Dialect | None,
) -> ParserOptions:
    if dialect is not None and options is not None:
        raise ValueError("Pass either options or dialect, not both")

    if options is not None:
        return options

    if dialect is not None:
        return ParserOptions.for_dialect(dialect)

    return ParserOptions()


def _parse_stylesheet(
    tokens: Iterable[Token],
    options: ParserOptions,
    extra_diagnostics: Iterable[Diagnostic] = (),
) -> ParsedTree:
    source = TokenSource(tokens)
    grammar = GRAMMARS[options.dialect](source, options=options)
    root = grammar.parse_stylesheet()
    diagnostics = collect_diagnostics(extra_diagnostics, root.all_diagnostics())

    logger.debug(
        "parsed %s stylesheet: %d tokens, %d diagnostics",
        options.dialect,
        len(source.tokens),
        len(diagnostics),
    )
    return ParsedTree(root=root, diagnostics=diagnostics)


def parse(
    text: str,
    options: ParserOptions | None = None,
    *,
    dialect: Dialect | None = None,
) -> ParsedTree:
    resolved_options = _resolve_options(options=options, dialect=dialect)

    lexer = Lexer(text, scss=resolved_options.scss)
    tokens = lexer.lex()
    return _parse_stylesheet(tokens, resolved_options, lexer.diagnostics)


def parse_tokens(
    tokens: Iterable[Token],
    options: ParserOptions | None = None,
    *,
    dialect: Dialect | None = None,
) -> ParsedTree:
    """Parse an already lexed token stream.

    Trivia tokens may be included; a missing trailing EOF token is synthesized.
    """
    resolved_options = _resolve_options(options=options, dialect=dialect)
    return _parse_stylesheet(tokens, resolved_options)


def parse_result(
    text: str,
    options: ParserOptions | None = None,
    *,
    dialect: Dialect | None = None,
) -> ScssParseResult:
    from scsspy.pipeline import ScssParseResult

    resolved_options = _resolve_options(options=options, dialect=dialect)
    parsed = parse(text, options=resolved_options)
    return ScssParseResult(
        source_text=text,
        parsed=parsed,
        options=resolved_options,
    )
