"""Base CSS grammar.

Every production returns a finished ``Node`` or ``None``. A production that
returns ``None`` leaves the cursor where it found it; only the last alternative
of an ordered chain may consume input and then report an error.
"""

import re
from typing import Final

from scsspy.cst import Node, Role
from scsspy.diagnostics.codes import (
    PARSER_COLON_EXPECTED,
    PARSER_CONDITION_EXPECTED,
    PARSER_EXPRESSION_EXPECTED,
    PARSER_IDENTIFIER_EXPECTED,
    PARSER_LEFT_CURLY_EXPECTED,
    PARSER_LEFT_PARENTHESIS_EXPECTED,
    PARSER_LEFT_SQUARE_BRACKET_EXPECTED,
    PARSER_MEDIA_QUERY_EXPECTED,
    PARSER_NUMBER_EXPECTED,
    PARSER_OPERATOR_EXPECTED,
    PARSER_PERCENTAGE_EXPECTED,
    PARSER_PROPERTY_VALUE_EXPECTED,
    PARSER_RIGHT_CURLY_EXPECTED,
    PARSER_RIGHT_PARENTHESIS_EXPECTED,
    PARSER_RIGHT_SQUARE_BRACKET_EXPECTED,
    PARSER_RULE_OR_SELECTOR_EXPECTED,
    PARSER_SELECTOR_EXPECTED,
    PARSER_SEMICOLON_EXPECTED,
    PARSER_STRING_LITERAL_EXPECTED,
    PARSER_TERM_EXPECTED,
    PARSER_UNKNOWN_AT_RULE,
    PARSER_UNKNOWN_KEYWORD,
    PARSER_URI_EXPECTED,
    PARSER_URI_OR_STRING_EXPECTED,
    DiagnosticSpec,
)
from scsspy.lexer import TokenKind
from scsspy.parser.parser import Parser, ParserProgress, Production
from scsspy.syntax import NodeType, ReferenceType

_URL_FUNCTION = re.compile(r"^url(-prefix)?$", re.IGNORECASE)
_KEYFRAMES = re.compile(r"^@(-(webkit|ms|moz|o)-)?keyframes$", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{3}|[A-Fa-f0-9]{4}|[A-Fa-f0-9]{6}|[A-Fa-f0-9]{8})$")
_CUSTOM_PROPERTY = re.compile(r"^--")
_AND_OR = re.compile(r"^(and|or)$", re.IGNORECASE)

PAGE_BOX_DIRECTIVES: Final[frozenset[str]] = frozenset(
    {
        "@bottom-center",
        "@bottom-left",
        "@bottom-left-corner",
        "@bottom-right",
        "@bottom-right-corner",
        "@left-bottom",
        "@left-middle",
        "@left-top",
        "@right-bottom",
        "@right-middle",
        "@right-top",
        "@top-center",
        "@top-left",
        "@top-left-corner",
        "@top-right",
        "@top-right-corner",
    }
)

# Statements that end with a block never need a trailing semicolon.
_NO_SEMICOLON_AFTER: Final[frozenset[NodeType]] = frozenset(
    {
        NodeType.KEYFRAME,
        NodeType.KEYFRAME_SELECTOR,
        NodeType.MEDIA,
        NodeType.RULESET,
        NodeType.NAMESPACE,
        NodeType.IF_STATEMENT,
        NodeType.FOR_STATEMENT,
        NodeType.EACH_STATEMENT,
        NodeType.WHILE_STATEMENT,
        NodeType.MIXIN_DECLARATION,
        NodeType.FUNCTION_DECLARATION,
        NodeType.MIXIN_CONTENT_DECLARATION,
    }
)

_SEMICOLON_AFTER: Final[frozenset[NodeType]] = frozenset(
    {
        NodeType.EXTENDS_REFERENCE,
        NodeType.MIXIN_CONTENT_REFERENCE,
        NodeType.RETURN_STATEMENT,
        NodeType.MEDIA_QUERY,
        NodeType.DEBUG,
        NodeType.IMPORT,
        NodeType.CUSTOM_PROPERTY_DECLARATION,
    }
)


class CssGrammar(Parser):
    """Recursive-descent grammar for plain CSS stylesheets."""

    # ------------------------------------------------------------------
    # Stylesheet and statements
    # ------------------------------------------------------------------

    def parse_stylesheet(self) -> Node:
        node = self.create(NodeType.STYLESHEET)
        while node.add_child(self.parse_stylesheet_start()):
            pass

        in_recovery = False
        progress = ParserProgress()
        while True:
            has_match = True
            while has_match and progress.has_progressed(self):
                has_match = False
                statement = self.parse_stylesheet_statement()
                if statement is not None:
                    node.add_child(statement)
                    has_match = True
                    in_recovery = False
                    if (
                        not self.peek(TokenKind.EOF)
                        and self.needs_semicolon_after(statement)
                        and not self.accept(TokenKind.SEMICOLON)
                    ):
                        self.mark_error(node, PARSER_SEMICOLON_EXPECTED)
                while self.accept(TokenKind.SEMICOLON) or self.accept(TokenKind.CDO) or self.accept(TokenKind.CDC):
                    has_match = True
                    in_recovery = False

            if self.peek(TokenKind.EOF):
                break

            if not in_recovery:
                if self.peek(TokenKind.AT_KEYWORD):
                    self.mark_error(node, PARSER_UNKNOWN_AT_RULE)
                else:
                    self.mark_error(node, PARSER_RULE_OR_SELECTOR_EXPECTED)
                in_recovery = True
            self.consume()

        return self.finish(node)

    def parse_stylesheet_start(self) -> Node | None:
        return self.parse_charset()

    def parse_stylesheet_statement(self, is_nested: bool = False) -> Node | None:
        if self.peek(TokenKind.AT_KEYWORD):
            return self.parse_stylesheet_at_statement(is_nested)
        return self.parse_ruleset(is_nested)

    def parse_stylesheet_at_statement(self, is_nested: bool = False) -> Node | None:
        return (
            self.parse_import()
            or self.parse_media(is_nested)
            or self.parse_page()
            or self.parse_font_face()
            or self.parse_keyframe()
            or self.parse_supports(is_nested)
            or self.parse_layer(is_nested)
            or self.parse_property_at_rule()
            or self.parse_namespace()
            or self.parse_unknown_at_rule()
        )

    def try_parse_ruleset(self, is_nested: bool) -> Node | None:
        checkpoint = self.mark()
        if self.parse_selector(is_nested):
            while self.accept(TokenKind.COMMA) and self.parse_selector(is_nested):
                pass
            if self.accept(TokenKind.LBRACE):
                self.restore(checkpoint)
                return self.parse_ruleset(is_nested)
        self.restore(checkpoint)
        return None

    def parse_ruleset(self, is_nested: bool = False) -> Node | None:
        node = self.create(NodeType.RULESET)
        selector = self.parse_selector(is_nested)
        if selector is None:
            return None

        selectors = node.list_of(Role.SELECTORS)
        selectors.add_child(selector)
        while self.accept(TokenKind.COMMA):
            if not selectors.add_child(self.parse_selector(is_nested)):
                return self.finish(node, PARSER_SELECTOR_EXPECTED)

        return self.parse_body(node, self.parse_rule_set_declaration)

    def parse_rule_set_declaration_at_statement(self) -> Node | None:
        return (
            self.parse_media(True)
            or self.parse_supports(True)
            or self.parse_layer(True)
            or self.parse_unknown_at_rule()
        )

    def parse_rule_set_declaration(self) -> Node | None:
        if self.peek(TokenKind.AT_KEYWORD):
            return self.parse_rule_set_declaration_at_statement()
        return self.try_parse_ruleset(True) or self.parse_declaration()

    def needs_semicolon_after(self, node: Node) -> bool:
        if node.type in _NO_SEMICOLON_AFTER:
            return False
        if node.type in _SEMICOLON_AFTER:
            return True

        match node.type:
            case NodeType.VARIABLE_DECLARATION:
                return node.needs_semicolon
            case NodeType.MIXIN_REFERENCE:
                return node.content is None
            case NodeType.DECLARATION:
                return node.nested_properties is None
            case _:
                return False

    def parse_declarations(self, parse_declaration: Production) -> Node | None:
        node = self.create(NodeType.DECLARATIONS)
        if not self.accept(TokenKind.LBRACE):
            return None

        progress = ParserProgress()
        declaration = parse_declaration()
        while node.add_child(declaration):
            if self.peek(TokenKind.RBRACE):
                break
            if self.needs_semicolon_after(declaration):
                if not self.peek(TokenKind.SEMICOLON):
                    return self.finish(
                        node,
                        PARSER_SEMICOLON_EXPECTED,
                        resync=(TokenKind.SEMICOLON, TokenKind.RBRACE),
                    )
                declaration.semicolon_position = self.consume().offset
            while self.accept(TokenKind.SEMICOLON):
                pass
            if not progress.has_progressed(self):
                break
            declaration = parse_declaration()

        if not self.accept(TokenKind.RBRACE):
            return self.finish(
                node,
                PARSER_RIGHT_CURLY_EXPECTED,
                resync=(TokenKind.RBRACE, TokenKind.SEMICOLON),
            )
        return self.finish(node)

    def parse_body(self, node: Node, parse_declaration: Production) -> Node:
        if not node.set_declarations(self.parse_declarations(parse_declaration)):
            return self.finish(
                node,
                PARSER_LEFT_CURLY_EXPECTED,
                resync=(TokenKind.RBRACE, TokenKind.SEMICOLON),
            )
        return self.finish(node)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def parse_declaration(self, stop_tokens: tuple[TokenKind, ...] | None = None) -> Node | None:
        custom_property = self.try_parse_custom_property_declaration(stop_tokens)
        if custom_property is not None:
            return custom_property

        node = self.create(NodeType.DECLARATION)
        if not node.set_property(self.parse_property()):
            return None

        if not self.peek(TokenKind.COLON):
            return self.finish(
                node,
                PARSER_COLON_EXPECTED,
                resync=(TokenKind.COLON,),
                stop=stop_tokens or (TokenKind.SEMICOLON, TokenKind.RBRACE),
            )
        node.colon_position = self.consume().offset

        if not node.set_value(self.parse_expr()):
            return self.finish(node, PARSER_PROPERTY_VALUE_EXPECTED)
        node.add_child(self.parse_prio())

        if self.peek(TokenKind.SEMICOLON):
            node.semicolon_position = self.token.offset
        return self.finish(node)

    def try_to_parse_declaration(self, stop_tokens: tuple[TokenKind, ...] | None = None) -> Node | None:
        checkpoint = self.mark()
        if self.parse_property() is not None and self.accept(TokenKind.COLON):
            self.restore(checkpoint)
            return self.parse_declaration(stop_tokens)
        self.restore(checkpoint)
        return None

    def try_parse_custom_property_declaration(
        self,
        stop_tokens: tuple[TokenKind, ...] | None = None,
    ) -> Node | None:
        if not self.peek_regexp(TokenKind.IDENT, _CUSTOM_PROPERTY):
            return None

        node = self.create(NodeType.CUSTOM_PROPERTY_DECLARATION)
        if not node.set_property(self.parse_property()):
            return None
        if not self.peek(TokenKind.COLON):
            return self.finish(node, PARSER_COLON_EXPECTED, resync=(TokenKind.COLON,))
        node.colon_position = self.consume().offset

        # Prefer a regular expression value; fall back to raw balanced tokens.
        checkpoint = self.mark()
        expression = self.parse_expr()
        if expression is not None and not expression.has_errors():
            prio = self.parse_prio()
            if self.peek_one(*(stop_tokens or ()), TokenKind.SEMICOLON, TokenKind.EOF):
                node.set_value(expression)
                node.add_child(prio)
                if self.peek(TokenKind.SEMICOLON):
                    node.semicolon_position = self.token.offset
                return self.finish(node)
        self.restore(checkpoint)

        node.add_child(self.parse_custom_property_value(stop_tokens or (TokenKind.RBRACE,)))
        node.add_child(self.parse_prio())
        if self.token.offset == node.colon_position + 1:
            return self.finish(node, PARSER_PROPERTY_VALUE_EXPECTED)
        return self.finish(node)

    def parse_custom_property_value(self, stop_tokens: tuple[TokenKind, ...] = (TokenKind.RBRACE,)) -> Node:
        node = self.create(NodeType.CUSTOM_PROPERTY_VALUE)
        curly_depth = 0
        parens_depth = 0
        brackets_depth = 0

        while True:
            kind = self.token.kind
            top_level = curly_depth == 0 and parens_depth == 0 and brackets_depth == 0
            match kind:
                case TokenKind.SEMICOLON | TokenKind.EXCLAMATION if top_level:
                    break
                case TokenKind.LBRACE | TokenKind.INTERPOLATION_START:
                    curly_depth += 1
                case TokenKind.RBRACE:
                    curly_depth -= 1
                    if curly_depth < 0:
                        if kind in stop_tokens and parens_depth == 0 and brackets_depth == 0:
                            break
                        return self.finish(node, PARSER_LEFT_CURLY_EXPECTED)
                case TokenKind.LPAREN:
                    parens_depth += 1
                case TokenKind.RPAREN:
                    parens_depth -= 1
                    if parens_depth < 0:
                        if kind in stop_tokens and brackets_depth == 0 and curly_depth == 0:
                            break
                        return self.finish(node, PARSER_LEFT_PARENTHESIS_EXPECTED)
                case TokenKind.LBRACKET:
                    brackets_depth += 1
                case TokenKind.RBRACKET:
                    brackets_depth -= 1
                    if brackets_depth < 0:
                        return self.finish(node, PARSER_LEFT_SQUARE_BRACKET_EXPECTED)
                case TokenKind.BAD_STRING:
                    break
                case TokenKind.EOF:
                    return self.finish(node, _unclosed_error(curly_depth, parens_depth, brackets_depth))
            self.consume()

        return self.finish(node)

    def parse_property(self) -> Node | None:
        node = self.create(NodeType.PROPERTY)
        checkpoint = self.mark()
        # IE star and underscore hacks
        if self.accept_delim("*") or self.accept_delim("_"):
            if self.has_whitespace():
                self.restore(checkpoint)
                return None
        if node.set_identifier(self.parse_property_identifier()):
            return self.finish(node)
        self.restore(checkpoint)
        return None

    def parse_property_identifier(self) -> Node | None:
        return self.parse_ident()

    # ------------------------------------------------------------------
    # At-rules
    # ------------------------------------------------------------------

    def parse_charset(self) -> Node | None:
        if not self.peek_keyword("@charset"):
            return None
        node = self.create(NodeType.CHARSET)
        self.consume()
        if not self.accept(TokenKind.STRING):
            return self.finish(node, PARSER_STRING_LITERAL_EXPECTED)
        if not self.accept(TokenKind.SEMICOLON):
            return self.finish(node, PARSER_SEMICOLON_EXPECTED)
        return self.finish(node)

    def parse_import(self) -> Node | None:
        if not self.peek_keyword("@import"):
            return None
        node = self.create(NodeType.IMPORT)
        self.consume()
        if not node.add_child(self.parse_uri_literal()) and not node.add_child(self.parse_string_literal()):
            return self.finish(node, PARSER_URI_OR_STRING_EXPECTED)
        return self.complete_parse_import(node)

    def complete_parse_import(self, node: Node) -> Node:
        if self.accept_ident("layer"):
            if self.accept(TokenKind.LPAREN):
                if not node.add_child(self.parse_layer_name()):
                    return self.finish(node, PARSER_IDENTIFIER_EXPECTED, resync=(TokenKind.SEMICOLON,))
                if not self.accept(TokenKind.RPAREN):
                    return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED, resync=(TokenKind.RPAREN,))

        if self.accept_ident("supports"):
            if self.accept(TokenKind.LPAREN):
                node.add_child(self.try_to_parse_declaration() or self.parse_supports_condition())
                if not self.accept(TokenKind.RPAREN):
                    return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED, resync=(TokenKind.RPAREN,))

        if not self.peek(TokenKind.SEMICOLON) and not self.peek(TokenKind.EOF):
            node.set_medialist(self.parse_media_query_list())
        return self.finish(node)

    def parse_namespace(self) -> Node | None:
        if not self.peek_keyword("@namespace"):
            return None
        node = self.create(NodeType.NAMESPACE)
        self.consume()
        # url(...) also starts with an identifier, so it goes first
        if not node.add_child(self.parse_uri_literal()):
            node.set_namespace_prefix(self.parse_ident())
            if not node.add_child(self.parse_uri_literal()) and not node.add_child(self.parse_string_literal()):
                return self.finish(node, PARSER_URI_EXPECTED, resync=(TokenKind.SEMICOLON,))
        if not self.accept(TokenKind.SEMICOLON):
            return self.finish(node, PARSER_SEMICOLON_EXPECTED)
        return self.finish(node)

    def parse_font_face(self) -> Node | None:
        if not self.peek_keyword("@font-face"):
            return None
        node = self.create(NodeType.FONT_FACE)
        self.consume()
        return self.parse_body(node, self.parse_rule_set_declaration)

    def parse_keyframe(self) -> Node | None:
        if not self.peek_regexp(TokenKind.AT_KEYWORD, _KEYFRAMES):
            return None
        node = self.create(NodeType.KEYFRAME)

        keyword = self.create(NodeType.NODE)
        # -ms-keyframes never existed
        is_ms = self.token.text.lower() == "@-ms-keyframes"
        self.consume()
        node.set_keyword(self.finish(keyword))
        if is_ms:
            self.mark_error(keyword, PARSER_UNKNOWN_KEYWORD)

        if not node.set_identifier(self.parse_keyframe_ident()):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED, resync=(TokenKind.RBRACE,))
        return self.parse_body(node, self.parse_keyframe_selector)

    def parse_keyframe_ident(self) -> Node | None:
        return self.parse_ident((ReferenceType.KEYFRAME,))

    def parse_keyframe_selector(self) -> Node | None:
        node = self.create(NodeType.KEYFRAME_SELECTOR)
        if not self._parse_keyframe_selector_part(node):
            return None
        while self.accept(TokenKind.COMMA):
            if not self._parse_keyframe_selector_part(node):
                return self.finish(node, PARSER_PERCENTAGE_EXPECTED)
        return self.parse_body(node, self.parse_rule_set_declaration)

    def try_parse_keyframe_selector(self) -> Node | None:
        node = self.create(NodeType.KEYFRAME_SELECTOR)
        checkpoint = self.mark()
        if not self._parse_keyframe_selector_part(node):
            return None
        while self.accept(TokenKind.COMMA):
            if not self._parse_keyframe_selector_part(node):
                self.restore(checkpoint)
                return None
        if not self.peek(TokenKind.LBRACE):
            self.restore(checkpoint)
            return None
        return self.parse_body(node, self.parse_rule_set_declaration)

    def _parse_keyframe_selector_part(self, node: Node) -> bool:
        has_content = node.add_child(self.parse_ident())
        if self.accept(TokenKind.PERCENTAGE):
            has_content = True
        return has_content

    def parse_property_at_rule(self) -> Node | None:
        if not self.peek_keyword("@property"):
            return None
        node = self.create(NodeType.PROPERTY_AT_RULE)
        self.consume()
        if not self.peek_regexp(TokenKind.IDENT, _CUSTOM_PROPERTY) or not node.set_identifier(
            self.parse_ident((ReferenceType.PROPERTY,))
        ):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return self.parse_body(node, self.parse_declaration)

    def parse_layer(self, is_nested: bool = False) -> Node | None:
        if not self.peek_keyword("@layer"):
            return None
        node = self.create(NodeType.LAYER)
        self.consume()

        names = self.parse_layer_name_list()
        node.set_names(names)
        if (names is None or len(names.children) == 1) and self.peek(TokenKind.LBRACE):
            return self.parse_body(node, lambda: self.parse_layer_declaration(is_nested))
        if not self.accept(TokenKind.SEMICOLON):
            return self.finish(node, PARSER_SEMICOLON_EXPECTED)
        return self.finish(node)

    def parse_layer_declaration(self, is_nested: bool = False) -> Node | None:
        if is_nested:
            return (
                self.try_parse_ruleset(True)
                or self.try_to_parse_declaration()
                or self.parse_stylesheet_statement(True)
            )
        return self.parse_stylesheet_statement(False)

    def parse_layer_name_list(self) -> Node | None:
        node = self.create(NodeType.LAYER_NAME_LIST)
        if not node.add_child(self.parse_layer_name()):
            return None
        while self.accept(TokenKind.COMMA):
            if not node.add_child(self.parse_layer_name()):
                return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return self.finish(node)

    def parse_layer_name(self) -> Node | None:
        node = self.create(NodeType.LAYER_NAME)
        if not node.add_child(self.parse_ident()):
            return None
        while not self.has_whitespace() and self.accept_delim("."):
            if self.has_whitespace() or not node.add_child(self.parse_ident()):
                return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return self.finish(node)

    def parse_supports(self, is_nested: bool = False) -> Node | None:
        if not self.peek_keyword("@supports"):
            return None
        node = self.create(NodeType.SUPPORTS)
        self.consume()
        node.add_child(self.parse_supports_condition())
        return self.parse_body(node, lambda: self.parse_supports_declaration(is_nested))

    def parse_supports_declaration(self, is_nested: bool = False) -> Node | None:
        if is_nested:
            return (
                self.try_parse_ruleset(True)
                or self.try_to_parse_declaration()
                or self.parse_stylesheet_statement(True)
            )
        return self.parse_stylesheet_statement(False)

    def parse_supports_condition(self) -> Node | None:
        node = self.create(NodeType.SUPPORTS_CONDITION)
        if self.accept_ident("not"):
            node.add_child(self.parse_supports_condition_in_parens())
        else:
            node.add_child(self.parse_supports_condition_in_parens())
            if self.peek_regexp(TokenKind.IDENT, _AND_OR):
                text = self.token.text.lower()
                while self.accept_ident(text):
                    node.add_child(self.parse_supports_condition_in_parens())
        return self.finish(node)

    def parse_supports_condition_in_parens(self) -> Node:
        node = self.create(NodeType.SUPPORTS_CONDITION)
        if self.accept(TokenKind.LPAREN):
            if not node.add_child(self.try_to_parse_declaration((TokenKind.RPAREN,))):
                if not node.add_child(self.parse_supports_condition()):
                    return self.finish(node, PARSER_CONDITION_EXPECTED)
            if not self.accept(TokenKind.RPAREN):
                return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED, resync=(TokenKind.RPAREN,))
            return self.finish(node)

        if self.peek(TokenKind.IDENT):
            # function-style condition such as selector(...)
            checkpoint = self.mark()
            self.consume()
            if not self.has_whitespace() and self.accept(TokenKind.LPAREN):
                open_parens = 1
                while not self.peek(TokenKind.EOF) and open_parens != 0:
                    if self.peek(TokenKind.LPAREN):
                        open_parens += 1
                    elif self.peek(TokenKind.RPAREN):
                        open_parens -= 1
                    self.consume()
                return self.finish(node)
            self.restore(checkpoint)

        return self.finish(node, PARSER_LEFT_PARENTHESIS_EXPECTED, stop=(TokenKind.LPAREN,))

    def parse_media_declaration(self, is_nested: bool = False) -> Node | None:
        if is_nested:
            return (
                self.try_parse_ruleset(True)
                or self.try_to_parse_declaration()
                or self.parse_stylesheet_statement(True)
            )
        return self.parse_stylesheet_statement(False)

    def parse_media(self, is_nested: bool = False) -> Node | None:
        if not self.peek_keyword("@media"):
            return None
        node = self.create(NodeType.MEDIA)
        self.consume()
        if not node.add_child(self.parse_media_query_list()):
            return self.finish(node, PARSER_MEDIA_QUERY_EXPECTED)
        return self.parse_body(node, lambda: self.parse_media_declaration(is_nested))

    def parse_media_query_list(self) -> Node:
        node = self.create(NodeType.MEDIA_LIST)
        if not node.add_child(self.parse_media_query()):
            return self.finish(node, PARSER_MEDIA_QUERY_EXPECTED)
        while self.accept(TokenKind.COMMA):
            if not node.add_child(self.parse_media_query()):
                return self.finish(node, PARSER_MEDIA_QUERY_EXPECTED)
        return self.finish(node)

    def parse_media_query(self) -> Node | None:
        node = self.create(NodeType.MEDIA_QUERY)
        checkpoint = self.mark()
        self.accept_ident("not")
        if not self.peek(TokenKind.LPAREN):
            self.accept_ident("only")
            if not node.add_child(self.parse_ident()):
                self.restore(checkpoint)
                return None
            if self.accept_ident("and"):
                node.add_child(self.parse_media_condition())
        else:
            # `not` belongs to the media condition
            self.restore(checkpoint)
            node.add_child(self.parse_media_condition())
        return self.finish(node)

    def parse_ratio(self) -> Node | None:
        checkpoint = self.mark()
        node = self.create(NodeType.RATIO_VALUE)
        if not node.add_child(self.parse_numeric()):
            return None
        if not self.accept_delim("/"):
            self.restore(checkpoint)
            return None
        if not node.add_child(self.parse_numeric()):
            return self.finish(node, PARSER_NUMBER_EXPECTED)
        return self.finish(node)

    def parse_media_condition(self) -> Node | None:
        node = self.create(NodeType.MEDIA_CONDITION)
        self.accept_ident("not")
        parse_expression = True
        while parse_expression:
            if not self.accept(TokenKind.LPAREN):
                return self.finish(node, PARSER_LEFT_PARENTHESIS_EXPECTED, stop=(TokenKind.LBRACE,))
            if self.peek(TokenKind.LPAREN) or self.peek_ident("not"):
                node.add_child(self.parse_media_condition())
            else:
                node.add_child(self.parse_media_feature())
            if not self.accept(TokenKind.RPAREN):
                return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED, stop=(TokenKind.LBRACE,))
            parse_expression = self.accept_ident("and") or self.accept_ident("or")
        return self.finish(node)

    def parse_media_feature(self) -> Node:
        stop = (TokenKind.RPAREN,)
        node = self.create(NodeType.MEDIA_FEATURE)

        if node.add_child(self.parse_media_feature_name()):
            if self.accept(TokenKind.COLON):
                if not node.add_child(self.parse_media_feature_value()):
                    return self.finish(node, PARSER_TERM_EXPECTED, stop=stop)
            elif self.parse_media_feature_range_operator():
                if not node.add_child(self.parse_media_feature_value()):
                    return self.finish(node, PARSER_TERM_EXPECTED, stop=stop)
                if self.parse_media_feature_range_operator():
                    if not node.add_child(self.parse_media_feature_value()):
                        return self.finish(node, PARSER_TERM_EXPECTED, stop=stop)
        elif node.add_child(self.parse_media_feature_value()):
            if not self.parse_media_feature_range_operator():
                return self.finish(node, PARSER_OPERATOR_EXPECTED, stop=stop)
            if not node.add_child(self.parse_media_feature_name()):
                return self.finish(node, PARSER_IDENTIFIER_EXPECTED, stop=stop)
            if self.parse_media_feature_range_operator():
                if not node.add_child(self.parse_media_feature_value()):
                    return self.finish(node, PARSER_TERM_EXPECTED, stop=stop)
        else:
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED, stop=stop)
        return self.finish(node)

    def parse_media_feature_range_operator(self) -> bool:
        if self.accept_delim("<") or self.accept_delim(">"):
            if not self.has_whitespace():
                self.accept_delim("=")
            return True
        return self.accept_delim("=")

    def parse_media_feature_name(self) -> Node | None:
        return self.parse_ident()

    def parse_media_feature_value(self) -> Node | None:
        return self.parse_ratio() or self.parse_term_expression()

    def parse_page(self) -> Node | None:
        if not self.peek_keyword("@page"):
            return None
        node = self.create(NodeType.PAGE)
        self.consume()
        if node.add_child(self.parse_page_selector()):
            while self.accept(TokenKind.COMMA):
                if not node.add_child(self.parse_page_selector()):
                    return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return self.parse_body(node, self.parse_page_declaration)

    def parse_page_declaration(self) -> Node | None:
        return self.parse_page_margin_box() or self.parse_rule_set_declaration()

    def parse_page_margin_box(self) -> Node | None:
        if not self.peek(TokenKind.AT_KEYWORD):
            return None
        node = self.create(NodeType.PAGE_BOX_MARKER)
        if not self.accept_one_keyword(PAGE_BOX_DIRECTIVES):
            self.mark_error(node, PARSER_UNKNOWN_AT_RULE, stop=(TokenKind.LBRACE,))
        return self.parse_body(node, self.parse_rule_set_declaration)

    def parse_page_selector(self) -> Node | None:
        if not self.peek(TokenKind.IDENT) and not self.peek(TokenKind.COLON):
            return None
        node = self.create(NodeType.NODE)
        node.add_child(self.parse_ident())
        if self.accept(TokenKind.COLON):
            if not node.add_child(self.parse_ident()):
                return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return self.finish(node)

    def parse_unknown_at_rule(self) -> Node | None:
        if not self.peek(TokenKind.AT_KEYWORD):
            return None
        node = self.create(NodeType.UNKNOWN_AT_RULE)
        node.add_child(self.parse_unknown_at_rule_name())
        return self.parse_unknown_at_rule_value(node)

    def parse_unknown_at_rule_name(self) -> Node:
        node = self.create(NodeType.NODE)
        self.consume()
        return self.finish(node)

    def parse_unknown_at_rule_value(self, node: Node) -> Node:
        blocks_opened = 0
        curly_depth = 0
        parens_depth = 0
        brackets_depth = 0

        while True:
            match self.token.kind:
                case TokenKind.SEMICOLON if curly_depth == 0 and parens_depth == 0 and brackets_depth == 0:
                    break
                case TokenKind.EOF:
                    if curly_depth > 0:
                        return self.finish(node, PARSER_RIGHT_CURLY_EXPECTED)
                    if brackets_depth > 0:
                        return self.finish(node, PARSER_RIGHT_SQUARE_BRACKET_EXPECTED)
                    if parens_depth > 0:
                        return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
                    return self.finish(node)
                case TokenKind.LBRACE:
                    blocks_opened += 1
                    curly_depth += 1
                case TokenKind.INTERPOLATION_START:
                    curly_depth += 1
                case TokenKind.RBRACE:
                    curly_depth -= 1
                    # the block closes the at-rule
                    if blocks_opened > 0 and curly_depth == 0:
                        self.consume()
                        if brackets_depth > 0:
                            return self.finish(node, PARSER_RIGHT_SQUARE_BRACKET_EXPECTED)
                        if parens_depth > 0:
                            return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
                        break
                    if curly_depth < 0:
                        # last statement of the enclosing block, without a semicolon
                        if parens_depth == 0 and brackets_depth == 0:
                            break
                        return self.finish(node, PARSER_LEFT_CURLY_EXPECTED)
                case TokenKind.LPAREN:
                    parens_depth += 1
                case TokenKind.RPAREN:
                    parens_depth -= 1
                    if parens_depth < 0:
                        return self.finish(node, PARSER_LEFT_PARENTHESIS_EXPECTED)
                case TokenKind.LBRACKET:
                    brackets_depth += 1
                case TokenKind.RBRACKET:
                    brackets_depth -= 1
                    if brackets_depth < 0:
                        return self.finish(node, PARSER_LEFT_SQUARE_BRACKET_EXPECTED)
            self.consume()

        return self.finish(node)

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def parse_selector(self, is_nested: bool) -> Node | None:
        node = self.create(NodeType.SELECTOR)
        has_content = False
        if is_nested:
            # nested selectors can start with a combinator
            has_content = node.add_child(self.parse_combinator())
        while node.add_child(self.parse_simple_selector()):
            has_content = True
            node.add_child(self.parse_combinator())
        return self.finish(node) if has_content else None

    def parse_combinator(self) -> Node | None:
        if self.peek_delim(">"):
            node = self.create(NodeType.SELECTOR_COMBINATOR_PARENT)
            self.consume()
            checkpoint = self.mark()
            if not self.has_whitespace() and self.accept_delim(">"):
                if not self.has_whitespace() and self.accept_delim(">"):
                    node.type = NodeType.SELECTOR_COMBINATOR_SHADOW_PIERCING_DESCENDANT
                    return self.finish(node)
                self.restore(checkpoint)
            return self.finish(node)

        if self.peek_delim("+"):
            node = self.create(NodeType.SELECTOR_COMBINATOR_SIBLING)
            self.consume()
            return self.finish(node)

        if self.peek_delim("~"):
            node = self.create(NodeType.SELECTOR_COMBINATOR_ALL_SIBLINGS)
            self.consume()
            return self.finish(node)

        if self.peek_delim("/"):
            checkpoint = self.mark()
            node = self.create(NodeType.SELECTOR_COMBINATOR_SHADOW_PIERCING_DESCENDANT)
            self.consume()
            if (
                not self.has_whitespace()
                and self.accept_ident("deep")
                and not self.has_whitespace()
                and self.accept_delim("/")
            ):
                return self.finish(node)
            self.restore(checkpoint)
        return None

    def parse_simple_selector(self) -> Node | None:
        node = self.create(NodeType.SIMPLE_SELECTOR)
        count = 0
        if node.add_child(self.parse_element_name() or self.parse_nesting_selector()):
            count += 1
        while (count == 0 or not self.has_whitespace()) and node.add_child(self.parse_simple_selector_body()):
            count += 1
        return self.finish(node) if count > 0 else None

    def parse_nesting_selector(self) -> Node | None:
        if not self.peek_delim("&"):
            return None
        node = self.create(NodeType.SELECTOR_COMBINATOR)
        self.consume()
        return self.finish(node)

    def parse_simple_selector_body(self) -> Node | None:
        return self.parse_pseudo() or self.parse_hash() or self.parse_class() or self.parse_attrib()

    def parse_selector_ident(self) -> Node | None:
        return self.parse_ident()

    def parse_hash(self) -> Node | None:
        if not self.peek(TokenKind.HASH) and not self.peek_delim("#"):
            return None
        node = self.create(NodeType.IDENTIFIER_SELECTOR)
        if self.accept_delim("#"):
            if self.has_whitespace() or not node.add_child(self.parse_selector_ident()):
                return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        else:
            self.consume()
        return self.finish(node)

    def parse_class(self) -> Node | None:
        if not self.peek_delim("."):
            return None
        node = self.create(NodeType.CLASS_SELECTOR)
        self.consume()
        if self.has_whitespace() or not node.add_child(self.parse_selector_ident()):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return self.finish(node)

    def parse_element_name(self) -> Node | None:
        checkpoint = self.mark()
        node = self.create(NodeType.ELEMENT_NAME_SELECTOR)
        node.set_namespace_prefix(self.parse_namespace_prefix())
        if not node.add_child(self.parse_selector_ident()) and not self.accept_delim("*"):
            self.restore(checkpoint)
            return None
        return self.finish(node)

    def parse_namespace_prefix(self) -> Node | None:
        checkpoint = self.mark()
        node = self.create(NodeType.NAMESPACE_PREFIX)
        if not node.add_child(self.parse_ident()):
            self.accept_delim("*")
        if not self.accept_delim("|"):
            self.restore(checkpoint)
            return None
        return self.finish(node)

    def parse_attrib(self) -> Node | None:
        if not self.peek(TokenKind.LBRACKET):
            return None
        node = self.create(NodeType.ATTRIBUTE_SELECTOR)
        self.consume()
        node.set_namespace_prefix(self.parse_namespace_prefix())
        if not node.set_identifier(self.parse_ident()):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        if node.set_operator(self.parse_operator()):
            node.set_value(self.parse_binary_expr())
            # case sensitivity flags
            self.accept_ident("i")
            self.accept_ident("s")
        if not self.accept(TokenKind.RBRACKET):
            return self.finish(node, PARSER_RIGHT_SQUARE_BRACKET_EXPECTED)
        return self.finish(node)

    def parse_pseudo(self) -> Node | None:
        node = self.try_parse_pseudo_identifier()
        if node is None:
            return None
        if node.is_finished:
            return node

        if not self.has_whitespace() and self.accept(TokenKind.LPAREN):
            if not node.add_child(self.try_parse(self._parse_pseudo_selector_list)):
                # the <an+b> microsyntax is not a proper expression
                while not self.peek_ident("of") and (
                    node.add_child(self.parse_term()) or node.add_child(self.parse_operator())
                ):
                    pass
                if self.accept_ident("of") and not node.add_child(self.try_parse(self._parse_pseudo_selector_list)):
                    return self.finish(node, PARSER_SELECTOR_EXPECTED)
            if not self.accept(TokenKind.RPAREN):
                return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return self.finish(node)

    def _parse_pseudo_selector_list(self) -> Node | None:
        selectors = self.create(NodeType.NODE)
        if not selectors.add_child(self.parse_selector(True)):
            return None
        while self.accept(TokenKind.COMMA) and selectors.add_child(self.parse_selector(True)):
            pass
        if self.peek(TokenKind.RPAREN):
            return self.finish(selectors)
        return None

    def try_parse_pseudo_identifier(self) -> Node | None:
        """Parse ``:name`` or ``::name``.

        On success the node is returned unfinished so that ``parse_pseudo`` can
        append an argument list; an erroneous node comes back finished.
        """
        if not self.peek(TokenKind.COLON):
            return None
        checkpoint = self.mark()
        node = self.create(NodeType.PSEUDO_SELECTOR)
        self.consume()
        if self.has_whitespace():
            self.restore(checkpoint)
            return None
        self.accept(TokenKind.COLON)
        if self.has_whitespace() or not node.add_child(self.parse_ident()):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
        return node

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_prio(self) -> Node | None:
        if not self.peek(TokenKind.EXCLAMATION):
            return None
        checkpoint = self.mark()
        node = self.create(NodeType.PRIO)
        self.consume()
        if self.accept_ident("important"):
            return self.finish(node)
        self.restore(checkpoint)
        return None

    def parse_expr(self, stop_on_comma: bool = False) -> Node | None:
        node = self.create(NodeType.EXPRESSION)
        if not node.add_child(self.parse_binary_expr()):
            return None
        while True:
            if self.peek(TokenKind.COMMA):
                if stop_on_comma:
                    return self.finish(node)
                self.consume()
            if not node.add_child(self.parse_binary_expr()):
                break
        return self.finish(node)

    def parse_binary_expr(self) -> Node | None:
        term = self.parse_term()
        if term is None:
            return None

        node = self.precede(term, NodeType.BINARY_EXPRESSION)
        node.set_left(term)
        operator = self.parse_operator()
        while operator is not None:
            node.set_operator(operator)
            if not node.set_right(self.parse_term()):
                return self.finish(node, PARSER_TERM_EXPECTED)
            # chain left-associatively: ((a + b) + c)
            left = self.finish(node)
            operator = self.parse_operator()
            if operator is None:
                return left
            node = self.precede(left, NodeType.BINARY_EXPRESSION)
            node.set_left(left)
        return self.finish(node)

    def parse_term(self) -> Node | None:
        node = self.create(NodeType.TERM)
        checkpoint = self.mark()
        node.set_operator(self.parse_unary_operator())
        if node.set_expression(self.parse_term_expression()):
            return self.finish(node)
        self.restore(checkpoint)
        return None

    def parse_term_expression(self) -> Node | None:
        return (
            self.parse_uri_literal()  # url before function
            or self.parse_unicode_range()
            or self.parse_function()  # function before ident
            or self.parse_ident()
            or self.parse_string_literal()
            or self.parse_numeric()
            or self.parse_hex_color()
            or self.parse_operation()
            or self.parse_named_line()
        )

    def parse_operator(self) -> Node | None:
        if (
            self.peek_delim("/")
            or self.peek_delim("*")
            or self.peek_delim("+")
            or self.peek_delim("-")
            or self.peek_delim("=")
            or self.peek_one(
                TokenKind.DASHMATCH,
                TokenKind.INCLUDES,
                TokenKind.SUBSTRING_OPERATOR,
                TokenKind.PREFIX_OPERATOR,
                TokenKind.SUFFIX_OPERATOR,
            )
        ):
            node = self.create(NodeType.OPERATOR)
            self.consume()
            return self.finish(node)
        return None

    def parse_unary_operator(self) -> Node | None:
        if not self.peek_delim("+") and not self.peek_delim("-"):
            return None
        node = self.create(NodeType.NODE)
        self.consume()
        return self.finish(node)

    def parse_operation(self) -> Node | None:
        if not self.peek(TokenKind.LPAREN):
            return None
        node = self.create(NodeType.NODE)
        self.consume()
        node.add_child(self.parse_expr())
        if not self.accept(TokenKind.RPAREN):
            return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return self.finish(node)

    def parse_numeric(self) -> Node | None:
        if not self.peek_one(TokenKind.NUMBER, TokenKind.PERCENTAGE, TokenKind.DIMENSION):
            return None
        node = self.create(NodeType.NUMERIC_VALUE)
        self.consume()
        return self.finish(node)

    def parse_string_literal(self) -> Node | None:
        if not self.peek(TokenKind.STRING) and not self.peek(TokenKind.BAD_STRING):
            return None
        node = self.create(NodeType.STRING_LITERAL)
        self.consume()
        return self.finish(node)

    def parse_uri_literal(self) -> Node | None:
        if not self.peek_regexp(TokenKind.IDENT, _URL_FUNCTION):
            return None
        checkpoint = self.mark()
        node = self.create(NodeType.URI_LITERAL)
        self.consume()
        if self.has_whitespace() or not self.accept(TokenKind.LPAREN):
            self.restore(checkpoint)
            return None
        node.add_child(self.parse_url_argument())  # optional
        if not self.accept(TokenKind.RPAREN):
            return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return self.finish(node)

    def parse_url_argument(self) -> Node | None:
        node = self.create(NodeType.NODE)
        if (
            not self.accept(TokenKind.STRING)
            and not self.accept(TokenKind.BAD_STRING)
            and not self.accept(TokenKind.UNQUOTED_STRING)
        ):
            return None
        return self.finish(node)

    def parse_ident(self, reference_types: tuple[ReferenceType, ...] | None = None) -> Node | None:
        if not self.peek(TokenKind.IDENT):
            return None
        node = self.create(NodeType.IDENTIFIER)
        node.reference_types = reference_types or ()
        self.consume()
        return self.finish(node)

    def parse_function(self) -> Node | None:
        checkpoint = self.mark()
        node = self.create(NodeType.FUNCTION)
        if not node.set_identifier(self.parse_function_identifier()):
            return None
        if self.has_whitespace() or not self.accept(TokenKind.LPAREN):
            self.restore(checkpoint)
            return None

        arguments = node.list_of(Role.ARGUMENTS)
        if arguments.add_child(self.parse_function_argument()):
            while self.accept(TokenKind.COMMA):
                if self.peek(TokenKind.RPAREN):
                    break
                if not arguments.add_child(self.parse_function_argument()):
                    self.mark_error(node, PARSER_EXPRESSION_EXPECTED)

        if not self.accept(TokenKind.RPAREN):
            return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return self.finish(node)

    def parse_function_identifier(self) -> Node | None:
        if not self.peek(TokenKind.IDENT):
            return None
        node = self.create(NodeType.IDENTIFIER)
        node.reference_types = (ReferenceType.FUNCTION,)
        self.consume()
        return self.finish(node)

    def parse_function_argument(self) -> Node | None:
        node = self.create(NodeType.FUNCTION_ARGUMENT)
        if node.set_value(self.parse_expr(True)):
            return self.finish(node)
        return None

    def parse_hex_color(self) -> Node | None:
        if not self.peek_regexp(TokenKind.HASH, _HEX_COLOR):
            return None
        node = self.create(NodeType.HEX_COLOR_VALUE)
        self.consume()
        return self.finish(node)

    def parse_unicode_range(self) -> Node | None:
        if not self.peek(TokenKind.UNICODE_RANGE):
            return None
        node = self.create(NodeType.UNICODE_RANGE)
        self.consume()
        return self.finish(node)

    def parse_named_line(self) -> Node | None:
        if not self.peek(TokenKind.LBRACKET):
            return None
        node = self.create(NodeType.GRID_LINE)
        self.consume()
        while node.add_child(self.parse_ident()):
            pass
        if not self.accept(TokenKind.RBRACKET):
            return self.finish(node, PARSER_RIGHT_SQUARE_BRACKET_EXPECTED)
        return self.finish(node)


def _unclosed_error(curly_depth: int, parens_depth: int, brackets_depth: int) -> DiagnosticSpec:
    if brackets_depth > 0:
        return PARSER_RIGHT_SQUARE_BRACKET_EXPECTED
    if parens_depth > 0:
        return PARSER_RIGHT_PARENTHESIS_EXPECTED
    return PARSER_RIGHT_CURLY_EXPECTED
