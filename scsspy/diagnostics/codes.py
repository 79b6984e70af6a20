"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote it was opened with.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_COMMENT",
    message="Unterminated comment.",
    hint="Close the comment with `*/`.",
    severity="warning",
    category="lexer",
)

PARSER_NUMBER_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NUMBER_EXPECTED",
    message="number expected",
    severity="error",
    category="parser",
)

PARSER_CONDITION_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_CONDITION_EXPECTED",
    message="condition expected",
    severity="error",
    category="parser",
)

PARSER_RULE_OR_SELECTOR_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RULE_OR_SELECTOR_EXPECTED",
    message="at-rule or selector expected",
    severity="error",
    category="parser",
)

PARSER_DOT_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_DOT_EXPECTED",
    message="dot expected",
    severity="error",
    category="parser",
)

PARSER_COLON_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_COLON_EXPECTED",
    message="colon expected",
    severity="error",
    category="parser",
)

PARSER_SEMICOLON_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_SEMICOLON_EXPECTED",
    message="semi-colon expected",
    severity="error",
    category="parser",
)

PARSER_TERM_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_TERM_EXPECTED",
    message="term expected",
    severity="error",
    category="parser",
)

PARSER_EXPRESSION_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPRESSION_EXPECTED",
    message="expression expected",
    severity="error",
    category="parser",
)

PARSER_OPERATOR_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_OPERATOR_EXPECTED",
    message="operator expected",
    severity="error",
    category="parser",
)

PARSER_IDENTIFIER_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_IDENTIFIER_EXPECTED",
    message="identifier expected",
    severity="error",
    category="parser",
)

PARSER_PERCENTAGE_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_PERCENTAGE_EXPECTED",
    message="percentage expected",
    severity="error",
    category="parser",
)

PARSER_URI_OR_STRING_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_URI_OR_STRING_EXPECTED",
    message="uri or string expected",
    severity="error",
    category="parser",
)

PARSER_URI_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_URI_EXPECTED",
    message="URI expected",
    severity="error",
    category="parser",
)

PARSER_VARIABLE_NAME_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_VARIABLE_NAME_EXPECTED",
    message="variable name expected",
    severity="error",
    category="parser",
)

PARSER_VARIABLE_VALUE_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_VARIABLE_VALUE_EXPECTED",
    message="variable value expected",
    severity="error",
    category="parser",
)

PARSER_PROPERTY_VALUE_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_PROPERTY_VALUE_EXPECTED",
    message="property value expected",
    severity="error",
    category="parser",
)

PARSER_LEFT_CURLY_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_LEFT_CURLY_EXPECTED",
    message="{ expected",
    severity="error",
    category="parser",
)

PARSER_RIGHT_CURLY_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RIGHT_CURLY_EXPECTED",
    message="} expected",
    severity="error",
    category="parser",
)

PARSER_LEFT_SQUARE_BRACKET_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_LEFT_SQUARE_BRACKET_EXPECTED",
    message="[ expected",
    severity="error",
    category="parser",
)

PARSER_RIGHT_SQUARE_BRACKET_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RIGHT_SQUARE_BRACKET_EXPECTED",
    message="] expected",
    severity="error",
    category="parser",
)

PARSER_LEFT_PARENTHESIS_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_LEFT_PARENTHESIS_EXPECTED",
    message="( expected",
    severity="error",
    category="parser",
)

PARSER_RIGHT_PARENTHESIS_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RIGHT_PARENTHESIS_EXPECTED",
    message=") expected",
    severity="error",
    category="parser",
)

PARSER_COMMA_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_COMMA_EXPECTED",
    message="comma expected",
    severity="error",
    category="parser",
)

PARSER_UNKNOWN_AT_RULE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNKNOWN_AT_RULE",
    message="unknown at-rule",
    severity="error",
    category="parser",
)

PARSER_UNKNOWN_KEYWORD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNKNOWN_KEYWORD",
    message="unknown keyword",
    severity="error",
    category="parser",
)

PARSER_SELECTOR_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_SELECTOR_EXPECTED",
    message="selector expected",
    severity="error",
    category="parser",
)

PARSER_STRING_LITERAL_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_STRING_LITERAL_EXPECTED",
    message="string literal expected",
    severity="error",
    category="parser",
)

PARSER_MEDIA_QUERY_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MEDIA_QUERY_EXPECTED",
    message="media query expected",
    severity="error",
    category="parser",
)

PARSER_IDENTIFIER_OR_WILDCARD_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_IDENTIFIER_OR_WILDCARD_EXPECTED",
    message="identifier or wildcard expected",
    severity="error",
    category="parser",
)

PARSER_WILDCARD_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_WILDCARD_EXPECTED",
    message="wildcard expected",
    severity="error",
    category="parser",
)

PARSER_IDENTIFIER_OR_VARIABLE_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_IDENTIFIER_OR_VARIABLE_EXPECTED",
    message="identifier or variable expected",
    severity="error",
    category="parser",
)

PARSER_FROM_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_FROM_EXPECTED",
    message="'from' expected",
    severity="error",
    category="parser/scss",
)

PARSER_THROUGH_OR_TO_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_THROUGH_OR_TO_EXPECTED",
    message="'through' or 'to' expected",
    severity="error",
    category="parser/scss",
)

PARSER_IN_EXPECTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_IN_EXPECTED",
    message="'in' expected",
    severity="error",
    category="parser/scss",
)
