import logging

import pytest

from scsspy.cst import Node, Role
from scsspy.diagnostics.codes import (
    PARSER_COLON_EXPECTED,
    PARSER_SEMICOLON_EXPECTED,
)
from scsspy.lexer import Lexer, Token, TokenKind
from scsspy.parser import (
    Dialect,
    Parser,
    ParseRecoveryTokenSet,
    ParserOptions,
    ParserProgress,
    RecoveryOutcome,
    ScssGrammar,
    TokenSource,
    parse,
    parse_tokens,
)
from scsspy.syntax import NodeType
from scsspy.text import TextRange


def _parser(text: str) -> Parser:
    return Parser(TokenSource(Lexer(text).lex()))


def test_token_source_hides_trivia_and_flags_next_token() -> None:
    source = TokenSource(Lexer("a /* c */ b\nc").lex())

    assert [token.kind for token in source.tokens] == [
        TokenKind.IDENT,
        TokenKind.IDENT,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]
    assert not source.tokens[0].preceded_by_trivia()
    assert source.tokens[1].preceded_by_trivia()
    assert source.tokens[2].preceded_by_trivia()
    assert source.tokens[2].has_preceding_line_break()


def test_token_source_synthesizes_eof() -> None:
    source = TokenSource([Token(TokenKind.IDENT, TextRange(0, 1), "a")])

    assert [token.kind for token in source.tokens] == [TokenKind.IDENT, TokenKind.EOF]
    assert source.tokens[-1].range == TextRange.empty(1)


def test_token_source_flags_gaps_between_tokens() -> None:
    source = TokenSource(
        [
            Token(TokenKind.IDENT, TextRange(0, 1), "a"),
            Token(TokenKind.IDENT, TextRange(2, 3), "b"),
        ]
    )

    assert source.tokens[1].preceded_by_trivia()


def test_consuming_eof_is_a_no_op() -> None:
    source = TokenSource(Lexer("a").lex())

    source.bump()
    assert source.is_eof
    assert source.prev_end == 1

    source.bump()
    assert source.position == 1
    assert source.current.kind == TokenKind.EOF


def test_restore_rewinds_cursor_and_last_consumed_end() -> None:
    parser = _parser("a b c")

    checkpoint = parser.mark()
    parser.consume()
    parser.consume()
    parser.restore(checkpoint)

    assert parser.token.text == "a"
    assert parser.position == 0
    assert parser.source.prev_end == 0


def test_try_parse_rewinds_when_production_does_not_match() -> None:
    parser = _parser("a b")

    def consumes_then_fails() -> Node | None:
        parser.consume()
        return None

    assert parser.try_parse(consumes_then_fails) is None
    assert parser.position == 0


def test_first_of_stops_at_the_first_match() -> None:
    parser = _parser("a b")
    calls: list[str] = []

    def consumes_then_fails() -> Node | None:
        calls.append("fails")
        parser.consume()
        return None

    def matches() -> Node | None:
        calls.append("matches")
        node = parser.create(NodeType.IDENTIFIER)
        parser.consume()
        return parser.finish(node)

    def never_reached() -> Node | None:
        calls.append("never")
        return None

    node = parser.first_of(consumes_then_fails, matches, never_reached)

    assert node is not None
    assert node.range.as_tuple() == (0, 1)
    assert calls == ["fails", "matches"]
    assert parser.position == 1


def test_first_of_without_a_match_consumes_nothing() -> None:
    parser = _parser("a")

    assert parser.first_of(lambda: None, lambda: None) is None
    assert parser.position == 0


def test_has_whitespace_reads_the_current_token() -> None:
    parser = _parser("a b(c")

    assert not parser.has_whitespace()
    parser.consume()
    assert parser.has_whitespace()
    parser.consume()
    assert not parser.has_whitespace()


def test_finish_with_resync_consumes_the_resync_token() -> None:
    parser = _parser("a b ; c")
    node = parser.create(NodeType.NODE)
    parser.consume()

    parser.finish(node, PARSER_SEMICOLON_EXPECTED, resync=(TokenKind.SEMICOLON,))

    assert node.range.as_tuple() == (0, 5)
    assert parser.token.text == "c"
    [diagnostic] = node.diagnostics
    assert diagnostic.code == "PARSER_SEMICOLON_EXPECTED"
    assert diagnostic.range.as_tuple() == (2, 3)
    assert diagnostic.skipped == TextRange(2, 3)


def test_finish_with_stop_leaves_the_stop_token() -> None:
    parser = _parser("a b ; c")
    node = parser.create(NodeType.NODE)
    parser.consume()

    parser.finish(node, PARSER_SEMICOLON_EXPECTED, stop=(TokenKind.SEMICOLON,))

    # skipped tokens never extend the node
    assert node.range.as_tuple() == (0, 1)
    assert parser.token.kind == TokenKind.SEMICOLON
    assert node.diagnostics[0].skipped == TextRange(2, 3)


def test_finish_without_recovery_sets_does_not_skip() -> None:
    parser = _parser("a b")
    node = parser.create(NodeType.NODE)

    parser.finish(node, PARSER_SEMICOLON_EXPECTED)

    assert parser.position == 0
    assert node.diagnostics[0].skipped is None


def test_errors_at_the_same_position_are_reported_once() -> None:
    parser = _parser("a")
    node = parser.create(NodeType.NODE)
    checkpoint = parser.mark()

    parser.mark_error(node, PARSER_SEMICOLON_EXPECTED)
    parser.mark_error(node, PARSER_COLON_EXPECTED)
    assert [diagnostic.code for diagnostic in node.diagnostics] == ["PARSER_SEMICOLON_EXPECTED"]

    parser.restore(checkpoint)
    parser.mark_error(node, PARSER_COLON_EXPECTED)
    assert len(node.diagnostics) == 2


def test_node_is_finished_exactly_once() -> None:
    parser = _parser("a")
    node = parser.create(NodeType.NODE)
    parser.consume()
    parser.finish(node)

    with pytest.raises(RuntimeError):
        parser.finish(node)


def test_recovery_set_stops_at_eof() -> None:
    source = TokenSource(Lexer("a b").lex())

    result = ParseRecoveryTokenSet(frozenset({TokenKind.SEMICOLON})).recover(source)

    assert result.outcome == RecoveryOutcome.EOF
    assert result.skipped == TextRange(0, 3)
    assert source.prev_end == 0


def test_empty_recovery_sets_mean_no_recovery() -> None:
    assert ParseRecoveryTokenSet.of() is None
    assert ParseRecoveryTokenSet.of(stop=(TokenKind.RBRACE,)) is not None


def test_progress_guard_detects_stalls() -> None:
    parser = _parser("a b")
    progress = ParserProgress()

    assert progress.has_progressed(parser)
    assert not progress.has_progressed(parser)
    parser.consume()
    assert progress.has_progressed(parser)


def test_binary_expressions_chain_left_associatively() -> None:
    grammar = ScssGrammar(TokenSource(Lexer("1 + 2 + 3").lex()))

    outer = grammar.parse_binary_expr()

    assert outer is not None
    assert outer.type == NodeType.BINARY_EXPRESSION
    assert outer.range.as_tuple() == (0, 9)
    left = outer.get(Role.LEFT)
    assert left is not None
    assert left.type == NodeType.BINARY_EXPRESSION
    assert left.range.as_tuple() == (0, 5)
    assert left.parent is outer
    innermost = left.get(Role.LEFT)
    assert innermost is not None
    assert innermost.type == NodeType.TERM
    right = outer.get(Role.RIGHT)
    assert right is not None
    assert right.range.as_tuple() == (8, 9)


def test_precede_takes_the_place_of_the_wrapped_node() -> None:
    parser = _parser("a")
    parent = Node(NodeType.NODE, 0)
    child = Node(NodeType.IDENTIFIER, 0, 1)
    parent.add_child(child)

    wrapper = parser.wrap(child, NodeType.MODULE)

    assert parent.children == (wrapper,)
    assert wrapper.children == (child,)
    assert wrapper.range.as_tuple() == (0, 1)
    assert wrapper.is_finished


def test_list_roles_are_created_lazily() -> None:
    node = Node(NodeType.RULESET, 4)

    assert node.children == ()
    assert node.selectors == ()
    selectors = node.list_of(Role.SELECTORS)
    assert selectors.type == NodeType.NODE_LIST
    assert node.list_of(Role.SELECTORS) is selectors
    assert node.children == (selectors,)

    selector = Node(NodeType.SELECTOR, 6, 8)
    selectors.add_child(selector)
    assert selectors.range.as_tuple() == (6, 8)
    assert node.selectors == (selector,)


def test_reading_list_roles_leaves_the_tree_alone() -> None:
    root = parse("@include foo;").root
    [reference] = root.children
    before = reference.children

    assert reference.arguments == ()
    assert reference.parameters == ()
    assert reference.children == before
    assert reference.get(Role.ARGUMENTS) is None


def test_list_roles_cannot_be_added_after_finish() -> None:
    parser = _parser("a")
    node = parser.create(NodeType.MIXIN_REFERENCE)
    parser.consume()
    parser.finish(node)

    with pytest.raises(RuntimeError):
        node.list_of(Role.ARGUMENTS)


def test_node_at_offset_finds_deepest_node() -> None:
    source = "a { b: c }"
    root = parse(source).root

    found = root.node_at_offset(4)
    assert found is not None
    assert found.text(source) == "b"
    assert found.children == ()
    declaration = root.find_first(NodeType.DECLARATION)
    assert declaration is not None
    assert declaration.is_ancestor_of(found)
    assert root.node_at_offset(len(source)) is None


def test_set_role_does_not_duplicate_descendants() -> None:
    node = Node(NodeType.NODE, 0)
    inner = Node(NodeType.NODE, 0)
    leaf = Node(NodeType.IDENTIFIER, 0, 1)
    node.add_child(inner)
    inner.add_child(leaf)

    node.set_identifier(leaf)

    assert node.identifier is leaf
    assert node.children == (inner,)
    assert leaf.parent is inner


def test_options_and_dialect_are_mutually_exclusive() -> None:
    with pytest.raises(ValueError):
        parse("a { b: c }", options=ParserOptions(), dialect=Dialect.CSS)


def test_options_select_the_lexer_profile() -> None:
    assert ParserOptions().scss
    assert not ParserOptions.for_dialect(Dialect.CSS).scss


def test_parse_tokens_accepts_streams_without_eof() -> None:
    tokens = Lexer("a { b: c }").lex()[:-1]

    parsed = parse_tokens(tokens)

    assert parsed.diagnostics == []
    assert parsed.root.find_first(NodeType.DECLARATION) is not None


def test_lexer_and_parser_diagnostics_are_merged_in_order() -> None:
    parsed = parse('.a { content: "open\n}\n')

    codes = [diagnostic.code for diagnostic in parsed.diagnostics]
    assert "LEXER_UNTERMINATED_STRING" in codes
    starts = [diagnostic.range.start for diagnostic in parsed.diagnostics]
    assert starts == sorted(starts)


def test_parse_logs_a_summary(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="scsspy.parser.parse"):
        parse("a { b: c }", dialect=Dialect.CSS)

    assert any("parsed css stylesheet" in record.getMessage() for record in caplog.records)
