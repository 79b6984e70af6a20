from scsspy.cst import format_tree
from scsspy.parser import Dialect, ParserOptions, parse, parse_result
from scsspy.syntax import NodeType


def test_parse_result_exposes_root_diagnostics_and_error_state() -> None:
    result = parse_result("a { b: c }\n")

    assert result.root is result.parsed.root
    assert result.diagnostics == []
    assert result.has_errors is False
    assert result.options == ParserOptions()


def test_parse_result_caches_node_list() -> None:
    result = parse_result(".a { b: c; .d { e: f; } }\n")

    first = result.nodes()
    second = result.nodes()
    assert first is second
    assert first[0] is result.root
    assert len(result.nodes_of_type(NodeType.RULESET)) == 2
    assert len(result.nodes_of_type(NodeType.DECLARATION)) == 2


def test_parse_result_text_of_slices_source() -> None:
    source = "$gap: 4px;\n"
    result = parse_result(source)

    [declaration] = result.nodes_of_type(NodeType.VARIABLE_DECLARATION)
    assert result.text_of(declaration) == "$gap: 4px"
    assert declaration.value is not None
    assert result.text_of(declaration.value) == "4px"


def test_parse_result_matches_parse_contract() -> None:
    source = ".a { color: red background: blue; }\n"

    result = parse_result(source)
    parsed = parse(source)

    assert result.diagnostics == parsed.diagnostics
    assert result.has_errors is True


def test_parse_result_honors_dialect() -> None:
    result = parse_result("$x: 1;\n", dialect=Dialect.CSS)

    assert result.options.dialect == Dialect.CSS
    assert result.has_errors is True
    assert result.nodes_of_type(NodeType.VARIABLE_DECLARATION) == []


def test_warnings_do_not_count_as_errors() -> None:
    result = parse_result("a { b: c } /* open")

    assert [diagnostic.code for diagnostic in result.diagnostics] == ["LEXER_UNTERMINATED_COMMENT"]
    assert result.has_errors is False


def test_format_tree_renders_roles_ranges_and_leaf_text() -> None:
    source = "$x: 1px;"
    parsed = parse(source)

    assert format_tree(parsed.root, source).splitlines() == [
        "STYLESHEET (0, 8)",
        "  VARIABLE_DECLARATION (0, 7)",
        "    variable=VARIABLE (0, 2) text='$x'",
        "    value=EXPRESSION (4, 7)",
        "      BINARY_EXPRESSION (4, 7)",
        "        left=TERM (4, 7)",
        "          expression=NUMERIC_VALUE (4, 7) text='1px'",
    ]


def test_format_tree_lists_diagnostics_under_their_node() -> None:
    source = "@use 1;"
    parsed = parse(source)

    rendered = format_tree(parsed.root, source)
    assert "! PARSER_STRING_LITERAL_EXPECTED at (5, 6)" in rendered
