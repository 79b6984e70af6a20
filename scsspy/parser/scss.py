"""SCSS grammar.

``ScssGrammar`` overrides productions of the base CSS grammar. Each override
tries the dialect alternative first and falls back to ``super()`` on no match.
"""

import re

from scsspy.cst import Node, Role
from scsspy.diagnostics.codes import (
    PARSER_COLON_EXPECTED,
    PARSER_EXPRESSION_EXPECTED,
    PARSER_FROM_EXPECTED,
    PARSER_IDENTIFIER_EXPECTED,
    PARSER_IDENTIFIER_OR_VARIABLE_EXPECTED,
    PARSER_IDENTIFIER_OR_WILDCARD_EXPECTED,
    PARSER_IN_EXPECTED,
    PARSER_LEFT_CURLY_EXPECTED,
    PARSER_LEFT_PARENTHESIS_EXPECTED,
    PARSER_PROPERTY_VALUE_EXPECTED,
    PARSER_RIGHT_CURLY_EXPECTED,
    PARSER_RIGHT_PARENTHESIS_EXPECTED,
    PARSER_SELECTOR_EXPECTED,
    PARSER_SEMICOLON_EXPECTED,
    PARSER_STRING_LITERAL_EXPECTED,
    PARSER_THROUGH_OR_TO_EXPECTED,
    PARSER_UNKNOWN_KEYWORD,
    PARSER_URI_OR_STRING_EXPECTED,
    PARSER_VARIABLE_NAME_EXPECTED,
    PARSER_VARIABLE_VALUE_EXPECTED,
    PARSER_WILDCARD_EXPECTED,
)
from scsspy.lexer import TokenKind
from scsspy.parser.css import CssGrammar
from scsspy.parser.parser import Production
from scsspy.syntax import NodeType, ReferenceType

_DEFAULT_OR_GLOBAL = re.compile(r"^(default|global)$")
_AS_OR_WITH = re.compile(r"^(as|with)$")
_WORD_CONTINUATION = re.compile(r"^[\w-]")
# recovery stop set for a malformed statement tail
_STATEMENT_END = (TokenKind.SEMICOLON, TokenKind.RBRACE)


class ScssGrammar(CssGrammar):
    """Recursive-descent grammar for SCSS."""

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_stylesheet_statement(self, is_nested: bool = False) -> Node | None:
        if self.peek(TokenKind.AT_KEYWORD):
            return self.first_of(
                self.parse_warn_and_debug,
                self.parse_control_statement,
                self.parse_mixin_declaration,
                self.parse_mixin_content,
                self.parse_mixin_reference,
                self.parse_function_declaration,
                self.parse_forward,
                self.parse_use,
                lambda: self.parse_ruleset(is_nested),  # @at-root
                lambda: super(ScssGrammar, self).parse_stylesheet_at_statement(is_nested),
            )
        return self.parse_ruleset(True) or self.parse_variable_declaration()

    def parse_rule_set_declaration(self) -> Node | None:
        if self.peek(TokenKind.AT_KEYWORD):
            return self.first_of(
                self.parse_keyframe,
                self.parse_import,
                lambda: self.parse_media(True),
                self.parse_font_face,
                self.parse_warn_and_debug,
                self.parse_control_statement,
                self.parse_function_declaration,
                self.parse_extends,
                self.parse_mixin_reference,
                self.parse_mixin_content,
                self.parse_mixin_declaration,
                lambda: self.parse_ruleset(True),  # @at-root
                lambda: self.parse_supports(True),
                self.parse_layer,
                self.parse_property_at_rule,
                self.parse_rule_set_declaration_at_statement,
            )
        # declaration goes last so that invalid input still yields a declaration-shaped node
        return self.parse_variable_declaration() or self.try_parse_ruleset(True) or self.parse_declaration()

    def parse_import(self) -> Node | None:
        if not self.peek_keyword("@import"):
            return None
        node = self.create(NodeType.IMPORT)
        self.consume()

        if not node.add_child(self.parse_uri_literal()) and not node.add_child(self.parse_string_literal()):
            return self.finish(node, PARSER_URI_OR_STRING_EXPECTED)
        while self.accept(TokenKind.COMMA):
            if not node.add_child(self.parse_uri_literal()) and not node.add_child(self.parse_string_literal()):
                return self.finish(node, PARSER_URI_OR_STRING_EXPECTED)
        return self.complete_parse_import(node)

    def parse_variable_declaration(self, stop: tuple[TokenKind, ...] = ()) -> Node | None:
        """``$name: value [!default] [!global];``"""
        if not self.peek(TokenKind.VARIABLE_NAME):
            return None
        node = self.create(NodeType.VARIABLE_DECLARATION)
        node.set_variable(self.parse_variable())

        if not self.peek(TokenKind.COLON):
            return self.finish(node, PARSER_COLON_EXPECTED)
        node.colon_position = self.consume().offset

        if not node.set_value(self.parse_expr()):
            return self.finish(node, PARSER_VARIABLE_VALUE_EXPECTED, stop=stop)

        while self.peek(TokenKind.EXCLAMATION):
            if node.add_child(self.parse_prio()):
                continue
            self.consume()
            if not self.peek_regexp(TokenKind.IDENT, _DEFAULT_OR_GLOBAL):
                return self.finish(node, PARSER_UNKNOWN_KEYWORD, stop=_STATEMENT_END)
            self.consume()

        if self.peek(TokenKind.SEMICOLON):
            node.semicolon_position = self.token.offset
        return self.finish(node)

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

        has_content = False
        if node.set_value(self.parse_expr()):
            has_content = True
            node.add_child(self.parse_prio())

        if self.peek(TokenKind.LBRACE):
            node.set_nested_properties(self.parse_nested_properties())
        elif not has_content:
            return self.finish(node, PARSER_PROPERTY_VALUE_EXPECTED)

        if self.peek(TokenKind.SEMICOLON):
            node.semicolon_position = self.token.offset
        return self.finish(node)

    def parse_nested_properties(self) -> Node:
        node = self.create(NodeType.NESTED_PROPERTIES)
        return self.parse_body(node, self.parse_declaration)

    def parse_extends(self) -> Node | None:
        if not self.peek_keyword("@extend"):
            return None
        node = self.create(NodeType.EXTENDS_REFERENCE)
        self.consume()

        selectors = node.list_of(Role.SELECTORS)
        if not selectors.add_child(self.parse_simple_selector()):
            return self.finish(node, PARSER_SELECTOR_EXPECTED)
        while self.accept(TokenKind.COMMA):
            selectors.add_child(self.parse_simple_selector())

        if self.accept(TokenKind.EXCLAMATION):
            if not self.accept_ident("optional"):
                return self.finish(node, PARSER_UNKNOWN_KEYWORD, stop=_STATEMENT_END)
        return self.finish(node)

    # ------------------------------------------------------------------
    # Lexical units
    # ------------------------------------------------------------------

    def parse_variable(self) -> Node | None:
        if not self.peek(TokenKind.VARIABLE_NAME):
            return None
        node = self.create(NodeType.VARIABLE)
        self.consume()
        return self.finish(node)

    def parse_module_member(self) -> Node | None:
        """``module.$name`` or ``module.function()`` with no whitespace around the dot."""
        checkpoint = self.mark()
        node = self.create(NodeType.MODULE)
        if not node.set_identifier(self.parse_ident((ReferenceType.MODULE,))):
            return None

        if self.has_whitespace() or not self.accept_delim(".") or self.has_whitespace():
            self.restore(checkpoint)
            return None

        if not node.add_child(self.parse_variable() or self.parse_function()):
            return self.finish(node, PARSER_IDENTIFIER_OR_VARIABLE_EXPECTED)
        return self.finish(node)

    def parse_ident(self, reference_types: tuple[ReferenceType, ...] | None = None) -> Node | None:
        if (
            not self.peek(TokenKind.IDENT)
            and not self.peek(TokenKind.INTERPOLATION_START)
            and not self.peek_delim("-")
        ):
            return None

        node = self.create(NodeType.IDENTIFIER)
        node.reference_types = reference_types or ()
        has_content = False
        while (
            self.accept(TokenKind.IDENT)
            or node.add_child(self._parse_ident_interpolation())
            or (has_content and self.accept_regexp(_WORD_CONTINUATION))
        ):
            has_content = True
            if self.has_whitespace():
                break
        return self.finish(node) if has_content else None

    def _parse_ident_interpolation(self) -> Node | None:
        # a leading `-` or `--` only belongs to the identifier when interpolation follows
        checkpoint = self.mark()
        if self.accept_delim("-"):
            if not self.has_whitespace():
                self.accept_delim("-")
            if self.has_whitespace():
                self.restore(checkpoint)
                return None
        interpolation = self.parse_interpolation()
        if interpolation is None:
            self.restore(checkpoint)
        return interpolation

    def parse_interpolation(self) -> Node | None:
        if not self.peek(TokenKind.INTERPOLATION_START):
            return None
        node = self.create(NodeType.INTERPOLATION)
        self.consume()
        if not node.add_child(self.parse_expr()) and not node.add_child(self.parse_nesting_selector()):
            if self.accept(TokenKind.RBRACE):
                return self.finish(node)
            return self.finish(node, PARSER_EXPRESSION_EXPECTED)
        if not self.accept(TokenKind.RBRACE):
            return self.finish(node, PARSER_RIGHT_CURLY_EXPECTED)
        return self.finish(node)

    def parse_nesting_selector(self) -> Node | None:
        if not self.peek_delim("&"):
            return None
        node = self.create(NodeType.SELECTOR_COMBINATOR)
        self.consume()
        # suffixes such as &-foo-1
        while not self.has_whitespace() and (
            self.accept_delim("-")
            or self.accept(TokenKind.NUMBER)
            or self.accept(TokenKind.DIMENSION)
            or node.add_child(self.parse_ident())
            or self.accept_delim("&")
        ):
            pass
        return self.finish(node)

    def parse_selector_placeholder(self) -> Node | None:
        if self.peek_delim("%"):
            node = self.create(NodeType.SELECTOR_PLACEHOLDER)
            self.consume()
            node.add_child(self.parse_ident())
            return self.finish(node)

        if self.peek_keyword("@at-root"):
            node = self.create(NodeType.SELECTOR_PLACEHOLDER)
            self.consume()
            if self.accept(TokenKind.LPAREN):
                if not self.accept_ident("with") and not self.accept_ident("without"):
                    return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
                if not self.accept(TokenKind.COLON):
                    return self.finish(node, PARSER_COLON_EXPECTED)
                if not node.add_child(self.parse_ident()):
                    return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
                if not self.accept(TokenKind.RPAREN):
                    return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED, resync=(TokenKind.RBRACE,))
            return self.finish(node)

        return None

    def parse_simple_selector_body(self) -> Node | None:
        return self.parse_selector_placeholder() or super().parse_simple_selector_body()

    def parse_element_name(self) -> Node | None:
        checkpoint = self.mark()
        node = super().parse_element_name()
        # `foo(` is a function call, not a selector
        if node is not None and not self.has_whitespace() and self.peek(TokenKind.LPAREN):
            self.restore(checkpoint)
            return None
        return node

    def try_parse_pseudo_identifier(self) -> Node | None:
        return self.parse_interpolation() or super().try_parse_pseudo_identifier()

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_term_expression(self) -> Node | None:
        return (
            self.parse_module_member()
            or self.parse_variable()
            or self.parse_nesting_selector()
            or super().parse_term_expression()
        )

    def parse_operator(self) -> Node | None:
        if (
            self.peek_one(
                TokenKind.EQUAL_EQUAL,
                TokenKind.NOT_EQUAL,
                TokenKind.GREATER_THAN_OR_EQUAL,
                TokenKind.LESS_THAN_OR_EQUAL,
            )
            or self.peek_delim(">")
            or self.peek_delim("<")
            or self.peek_ident("and")
            or self.peek_ident("or")
            or self.peek_delim("%")
        ):
            node = self.create(NodeType.OPERATOR)
            self.consume()
            return self.finish(node)
        return super().parse_operator()

    def parse_unary_operator(self) -> Node | None:
        if self.peek_ident("not"):
            node = self.create(NodeType.NODE)
            self.consume()
            return self.finish(node)
        return super().parse_unary_operator()

    def parse_operation(self) -> Node | None:
        """Parenthesized list or map: ``(a, b)`` or ``(key: value, ...)``."""
        if not self.peek(TokenKind.LPAREN):
            return None
        node = self.create(NodeType.NODE)
        self.consume()
        while node.add_child(self.parse_list_element()):
            self.accept(TokenKind.COMMA)
        if not self.accept(TokenKind.RPAREN):
            return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return self.finish(node)

    def parse_list_element(self) -> Node | None:
        node = self.create(NodeType.LIST_ENTRY)
        child = self.parse_binary_expr()
        if child is None:
            return None
        if self.accept(TokenKind.COLON):
            node.set_key(child)
            if not node.set_value(self.parse_binary_expr()):
                return self.finish(node, PARSER_EXPRESSION_EXPECTED)
        else:
            node.set_value(child)
        return self.finish(node)

    def parse_url_argument(self) -> Node | None:
        checkpoint = self.mark()
        node = super().parse_url_argument()
        if node is None or not self.peek(TokenKind.RPAREN):
            self.restore(checkpoint)
            node = self.create(NodeType.NODE)
            node.add_child(self.parse_binary_expr())
            return self.finish(node)
        return node

    def parse_function_argument(self) -> Node | None:
        """``$name: expr``, ``$name...`` or ``expr [...] [!important]``."""
        node = self.create(NodeType.FUNCTION_ARGUMENT)

        checkpoint = self.mark()
        argument = self.parse_variable()
        if argument is not None:
            if self.accept(TokenKind.COLON):
                node.set_identifier(argument)
            elif self.accept(TokenKind.ELLIPSIS):
                node.set_value(argument)
                return self.finish(node)
            else:
                self.restore(checkpoint)

        if node.set_value(self.parse_expr(True)):
            self.accept(TokenKind.ELLIPSIS)
            node.add_child(self.parse_prio())
            return self.finish(node)
        if node.set_value(self.parse_prio()):
            return self.finish(node)
        if node.identifier is not None:
            return self.finish(node, PARSER_EXPRESSION_EXPECTED)
        return None

    # ------------------------------------------------------------------
    # Media, supports and keyframes
    # ------------------------------------------------------------------

    def parse_media_condition(self) -> Node | None:
        return self.parse_interpolation() or super().parse_media_condition()

    def parse_media_feature_range_operator(self) -> bool:
        return (
            self.accept(TokenKind.LESS_THAN_OR_EQUAL)
            or self.accept(TokenKind.GREATER_THAN_OR_EQUAL)
            or super().parse_media_feature_range_operator()
        )

    def parse_media_feature_name(self) -> Node | None:
        return (
            self.parse_module_member()
            or self.parse_function()  # function before ident
            or self.parse_ident()
            or self.parse_variable()
        )

    def parse_supports_condition(self) -> Node | None:
        return self.parse_interpolation() or super().parse_supports_condition()

    def parse_keyframe_selector(self) -> Node | None:
        return (
            self.try_parse_keyframe_selector()
            or self.parse_control_statement(self.parse_keyframe_selector)
            or self.parse_warn_and_debug()
            or self.parse_mixin_reference()
            or self.parse_function_declaration()
            or self.parse_variable_declaration()
            or self.parse_mixin_content()
        )

    # ------------------------------------------------------------------
    # Control flow
    # ------------------------------------------------------------------

    def parse_warn_and_debug(self) -> Node | None:
        if not self.peek_keyword("@debug") and not self.peek_keyword("@warn") and not self.peek_keyword("@error"):
            return None
        node = self.create(NodeType.DEBUG)
        self.consume()
        node.add_child(self.parse_expr())  # optional
        return self.finish(node)

    def parse_control_statement(self, parse_statement: Production | None = None) -> Node | None:
        if not self.peek(TokenKind.AT_KEYWORD):
            return None
        statement = parse_statement or self.parse_rule_set_declaration
        return (
            self.parse_if_statement(statement)
            or self.parse_for_statement(statement)
            or self.parse_each_statement(statement)
            or self.parse_while_statement(statement)
        )

    def parse_if_statement(self, parse_statement: Production) -> Node | None:
        if not self.peek_keyword("@if"):
            return None
        return self._parse_if_chain(parse_statement)

    def _parse_if_chain(self, parse_statement: Production) -> Node:
        node = self.create(NodeType.IF_STATEMENT)
        self.consume()  # @if, @elseif or the `if` of `@else if`
        if not node.set_expression(self.parse_expr(True)):
            return self.finish(node, PARSER_EXPRESSION_EXPECTED, resync=(TokenKind.RBRACE,))

        if not node.set_declarations(self.parse_declarations(parse_statement)):
            self.mark_error(
                node,
                PARSER_LEFT_CURLY_EXPECTED,
                resync=(TokenKind.RBRACE, TokenKind.SEMICOLON),
            )

        if self.accept_keyword("@else"):
            if self.peek_ident("if"):
                node.set_else_clause(self._parse_if_chain(parse_statement))
            elif self.peek(TokenKind.LBRACE):
                else_node = self.create(NodeType.ELSE_STATEMENT)
                node.set_else_clause(self.parse_body(else_node, parse_statement))
        elif self.peek_keyword("@elseif"):
            node.set_else_clause(self._parse_if_chain(parse_statement))
        return self.finish(node)

    def parse_for_statement(self, parse_statement: Production) -> Node | None:
        if not self.peek_keyword("@for"):
            return None
        node = self.create(NodeType.FOR_STATEMENT)
        self.consume()

        if not node.set_variable(self.parse_variable()):
            return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED, resync=(TokenKind.RBRACE,))
        if not self.accept_ident("from"):
            return self.finish(node, PARSER_FROM_EXPECTED, resync=(TokenKind.RBRACE,))
        if not node.add_child(self.parse_binary_expr()):
            return self.finish(node, PARSER_EXPRESSION_EXPECTED, resync=(TokenKind.RBRACE,))
        if not self.accept_ident("to") and not self.accept_ident("through"):
            return self.finish(node, PARSER_THROUGH_OR_TO_EXPECTED, resync=(TokenKind.RBRACE,))
        if not node.add_child(self.parse_binary_expr()):
            return self.finish(node, PARSER_EXPRESSION_EXPECTED, resync=(TokenKind.RBRACE,))
        return self.parse_body(node, parse_statement)

    def parse_each_statement(self, parse_statement: Production) -> Node | None:
        if not self.peek_keyword("@each"):
            return None
        node = self.create(NodeType.EACH_STATEMENT)
        self.consume()

        variables = node.list_of(Role.VARIABLES)
        if not variables.add_child(self.parse_variable()):
            return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED, resync=(TokenKind.RBRACE,))
        while self.accept(TokenKind.COMMA):
            if not variables.add_child(self.parse_variable()):
                return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED, resync=(TokenKind.RBRACE,))
        if not self.accept_ident("in"):
            return self.finish(node, PARSER_IN_EXPECTED, resync=(TokenKind.RBRACE,))
        if not node.add_child(self.parse_expr()):
            return self.finish(node, PARSER_EXPRESSION_EXPECTED, resync=(TokenKind.RBRACE,))
        return self.parse_body(node, parse_statement)

    def parse_while_statement(self, parse_statement: Production) -> Node | None:
        if not self.peek_keyword("@while"):
            return None
        node = self.create(NodeType.WHILE_STATEMENT)
        self.consume()
        if not node.add_child(self.parse_binary_expr()):
            return self.finish(node, PARSER_EXPRESSION_EXPECTED, resync=(TokenKind.RBRACE,))
        return self.parse_body(node, parse_statement)

    def parse_function_body_declaration(self) -> Node | None:
        return (
            self.parse_variable_declaration()
            or self.parse_return_statement()
            or self.parse_warn_and_debug()
            or self.parse_control_statement(self.parse_function_body_declaration)
        )

    def parse_return_statement(self) -> Node | None:
        if not self.peek_keyword("@return"):
            return None
        node = self.create(NodeType.RETURN_STATEMENT)
        self.consume()
        if not node.add_child(self.parse_expr()):
            return self.finish(node, PARSER_EXPRESSION_EXPECTED)
        return self.finish(node)

    # ------------------------------------------------------------------
    # Mixins and functions
    # ------------------------------------------------------------------

    def parse_function_declaration(self) -> Node | None:
        if not self.peek_keyword("@function"):
            return None
        node = self.create(NodeType.FUNCTION_DECLARATION)
        self.consume()

        if not node.set_identifier(self.parse_ident((ReferenceType.FUNCTION,))):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED, resync=(TokenKind.RBRACE,))
        if not self.accept(TokenKind.LPAREN):
            return self.finish(node, PARSER_LEFT_PARENTHESIS_EXPECTED, resync=(TokenKind.RBRACE,))
        if not self._parse_parameter_list(node):
            return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED)
        if not self.accept(TokenKind.RPAREN):
            self.mark_error(
                node,
                PARSER_RIGHT_PARENTHESIS_EXPECTED,
                resync=(TokenKind.RBRACE,),
                stop=(TokenKind.LBRACE,),
            )
            if not self.peek(TokenKind.LBRACE):
                return self.finish(node)
        return self.parse_body(node, self.parse_function_body_declaration)

    def parse_mixin_declaration(self) -> Node | None:
        if not self.peek_keyword("@mixin"):
            return None
        node = self.create(NodeType.MIXIN_DECLARATION)
        self.consume()

        if not node.set_identifier(self.parse_ident((ReferenceType.MIXIN,))):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED, resync=(TokenKind.RBRACE,))
        if self.accept(TokenKind.LPAREN):
            if not self._parse_parameter_list(node):
                return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED)
            if not self.accept(TokenKind.RPAREN):
                # keep going so the body is still parsed
                self.mark_error(
                    node,
                    PARSER_RIGHT_PARENTHESIS_EXPECTED,
                    resync=(TokenKind.RBRACE,),
                    stop=(TokenKind.LBRACE,),
                )
                if not self.peek(TokenKind.LBRACE):
                    return self.finish(node)
        return self.parse_body(node, self.parse_rule_set_declaration)

    def _parse_parameter_list(self, node: Node) -> bool:
        """Parse ``$a, $b: 1, $rest...`` into ``node.parameters``.

        Returns False when a comma is not followed by a parameter.
        """
        parameters = node.list_of(Role.PARAMETERS)
        if parameters.add_child(self.parse_parameter_declaration()):
            while self.accept(TokenKind.COMMA):
                if self.peek(TokenKind.RPAREN):
                    break
                if not parameters.add_child(self.parse_parameter_declaration()):
                    return False
        return True

    def parse_parameter_declaration(self) -> Node | None:
        node = self.create(NodeType.FUNCTION_PARAMETER)
        if not node.set_identifier(self.parse_variable()):
            return None

        self.accept(TokenKind.ELLIPSIS)  # variadic
        if self.accept(TokenKind.COLON):
            if not node.set_default_value(self.parse_expr(True)):
                return self.finish(
                    node,
                    PARSER_VARIABLE_VALUE_EXPECTED,
                    stop=(TokenKind.COMMA, TokenKind.RPAREN),
                )
        return self.finish(node)

    def parse_mixin_content(self) -> Node | None:
        if not self.peek_keyword("@content"):
            return None
        node = self.create(NodeType.MIXIN_CONTENT_REFERENCE)
        self.consume()
        if self.accept(TokenKind.LPAREN):
            if not self._parse_argument_list(node):
                return self.finish(node, PARSER_EXPRESSION_EXPECTED)
            if not self.accept(TokenKind.RPAREN):
                return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return self.finish(node)

    def parse_mixin_reference(self) -> Node | None:
        """``@include [module.]name[(args)] [using (params)] [{ ... }]``"""
        if not self.peek_keyword("@include"):
            return None
        node = self.create(NodeType.MIXIN_REFERENCE)
        self.consume()

        # a mixin name unless a module accessor follows
        first = self.parse_ident((ReferenceType.MIXIN,))
        if not node.set_identifier(first):
            return self.finish(node, PARSER_IDENTIFIER_EXPECTED, resync=(TokenKind.RBRACE,))

        checkpoint = self.mark()
        if not self.has_whitespace() and self.accept_delim("."):
            if self.has_whitespace():
                self.restore(checkpoint)
            else:
                second = self.parse_ident((ReferenceType.MIXIN,))
                if second is None:
                    return self.finish(node, PARSER_IDENTIFIER_EXPECTED, resync=(TokenKind.RBRACE,))
                first.reference_types = (ReferenceType.MODULE,)
                module = self.wrap(first, NodeType.MODULE)
                module.set_identifier(first)
                node.set_identifier(second)

        if self.accept(TokenKind.LPAREN):
            if not self._parse_argument_list(node):
                return self.finish(node, PARSER_EXPRESSION_EXPECTED)
            if not self.accept(TokenKind.RPAREN):
                return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)

        if self.peek_ident("using") or self.peek(TokenKind.LBRACE):
            node.set_content(self.parse_mixin_content_declaration())
        return self.finish(node)

    def _parse_argument_list(self, node: Node) -> bool:
        arguments = node.list_of(Role.ARGUMENTS)
        if arguments.add_child(self.parse_function_argument()):
            while self.accept(TokenKind.COMMA):
                if self.peek(TokenKind.RPAREN):
                    break
                if not arguments.add_child(self.parse_function_argument()):
                    return False
        return True

    def parse_mixin_content_declaration(self) -> Node:
        node = self.create(NodeType.MIXIN_CONTENT_DECLARATION)
        stop = (TokenKind.LBRACE, TokenKind.SEMICOLON, TokenKind.RBRACE)
        if self.accept_ident("using"):
            if not self.accept(TokenKind.LPAREN):
                self.mark_error(node, PARSER_LEFT_PARENTHESIS_EXPECTED, stop=stop)
            else:
                if not self._parse_parameter_list(node):
                    return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED)
                if not self.accept(TokenKind.RPAREN):
                    self.mark_error(node, PARSER_RIGHT_PARENTHESIS_EXPECTED, stop=stop)

        if self.peek(TokenKind.LBRACE):
            return self.parse_body(node, self.parse_mixin_reference_body_statement)
        return self.finish(node)

    def parse_mixin_reference_body_statement(self) -> Node | None:
        return self.try_parse_keyframe_selector() or self.parse_rule_set_declaration()

    # ------------------------------------------------------------------
    # Module system
    # ------------------------------------------------------------------

    def parse_use(self) -> Node | None:
        """``@use "path" [as name|*] [with (...)];``"""
        if not self.peek_keyword("@use"):
            return None
        node = self.create(NodeType.USE)
        self.consume()

        if not node.add_child(self.parse_string_literal()):
            return self.finish(node, PARSER_STRING_LITERAL_EXPECTED, stop=_STATEMENT_END)

        if not self.peek(TokenKind.SEMICOLON) and not self.peek(TokenKind.EOF):
            if not self.peek_regexp(TokenKind.IDENT, _AS_OR_WITH):
                return self.finish(node, PARSER_UNKNOWN_KEYWORD, stop=_STATEMENT_END)

            if (
                self.accept_ident("as")
                and not node.set_identifier(self.parse_ident((ReferenceType.MODULE,)))
                and not self.accept_delim("*")
            ):
                return self.finish(node, PARSER_IDENTIFIER_OR_WILDCARD_EXPECTED)

            if self.accept_ident("with"):
                error = self._parse_module_configuration(node)
                if error is not None:
                    return error

        return self._finish_module_rule(node)

    def parse_forward(self) -> Node | None:
        """``@forward "path" [as prefix-*] [with (...) | hide|show names];``"""
        if not self.peek_keyword("@forward"):
            return None
        node = self.create(NodeType.FORWARD)
        self.consume()

        if not node.add_child(self.parse_string_literal()):
            return self.finish(node, PARSER_STRING_LITERAL_EXPECTED, stop=_STATEMENT_END)

        if self.accept_ident("as"):
            if not node.set_identifier(self.parse_ident((ReferenceType.FORWARD,))):
                return self.finish(node, PARSER_IDENTIFIER_EXPECTED)
            # the wildcard is glued to the prefix
            if self.has_whitespace() or not self.accept_delim("*"):
                return self.finish(node, PARSER_WILDCARD_EXPECTED, stop=_STATEMENT_END)

        if self.accept_ident("with"):
            error = self._parse_module_configuration(node)
            if error is not None:
                return error
        elif self.peek_ident("hide") or self.peek_ident("show"):
            if not node.add_child(self.parse_forward_visibility()):
                return self.finish(
                    node,
                    PARSER_IDENTIFIER_OR_VARIABLE_EXPECTED,
                    stop=_STATEMENT_END,
                )

        return self._finish_module_rule(node)

    def _finish_module_rule(self, node: Node) -> Node:
        if not self.accept(TokenKind.SEMICOLON) and not self.peek(TokenKind.EOF):
            return self.finish(node, PARSER_SEMICOLON_EXPECTED)
        return self.finish(node)

    def _parse_module_configuration(self, node: Node) -> Node | None:
        """Parse ``($a: 1, $b: 2)`` after ``with``; returns the finished node on error."""
        if not self.accept(TokenKind.LPAREN):
            return self.finish(node, PARSER_LEFT_PARENTHESIS_EXPECTED, resync=(TokenKind.RPAREN,))

        parameters = node.list_of(Role.PARAMETERS)
        if not parameters.add_child(self.parse_module_config_declaration()):
            return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED)
        while self.accept(TokenKind.COMMA):
            if self.peek(TokenKind.RPAREN):
                break
            if not parameters.add_child(self.parse_module_config_declaration()):
                return self.finish(node, PARSER_VARIABLE_NAME_EXPECTED)

        if not self.accept(TokenKind.RPAREN):
            return self.finish(node, PARSER_RIGHT_PARENTHESIS_EXPECTED)
        return None

    def parse_module_config_declaration(self) -> Node | None:
        node = self.create(NodeType.MODULE_CONFIGURATION)
        if not node.set_identifier(self.parse_variable()):
            return None

        if not self.accept(TokenKind.COLON) or not node.set_value(self.parse_expr(True)):
            return self.finish(
                node,
                PARSER_VARIABLE_VALUE_EXPECTED,
                stop=(TokenKind.COMMA, TokenKind.RPAREN),
            )

        if self.accept(TokenKind.EXCLAMATION):
            if self.has_whitespace() or not self.accept_ident("default"):
                return self.finish(node, PARSER_UNKNOWN_KEYWORD)
        return self.finish(node)

    def parse_forward_visibility(self) -> Node | None:
        """``hide|show`` followed by names; a bare keyword is no clause at all."""
        checkpoint = self.mark()
        node = self.create(NodeType.FORWARD_VISIBILITY)
        node.set_identifier(self.parse_ident())
        while node.add_child(self.parse_variable() or self.parse_ident()):
            self.accept(TokenKind.COMMA)

        if len(node.children) <= 1:
            self.restore(checkpoint)
            return None
        return self.finish(node)
