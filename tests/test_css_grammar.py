import pytest

from scsspy.cst import Role
from scsspy.parser import Dialect, ParsedTree, parse
from scsspy.syntax import NodeType
from tests._debug import debug_dump_diagnostics, debug_dump_tree


def _parse_css(name: str, source: str) -> ParsedTree:
    parsed = parse(source, dialect=Dialect.CSS)
    debug_dump_tree(name, source, parsed.root)
    debug_dump_diagnostics(name, parsed.diagnostics, source)
    return parsed


def _codes(parsed: ParsedTree) -> list[str]:
    return [diagnostic.code for diagnostic in parsed.diagnostics]


def test_selector_combinators() -> None:
    parsed = _parse_css("selector_combinators", "a > b + c ~ d >>> e /deep/ f { }")
    assert parsed.diagnostics == []

    combinators = [node.type for node in parsed.root.walk() if node.type.is_selector_combinator]
    assert combinators == [
        NodeType.SELECTOR_COMBINATOR_PARENT,
        NodeType.SELECTOR_COMBINATOR_SIBLING,
        NodeType.SELECTOR_COMBINATOR_ALL_SIBLINGS,
        NodeType.SELECTOR_COMBINATOR_SHADOW_PIERCING_DESCENDANT,
        NodeType.SELECTOR_COMBINATOR_SHADOW_PIERCING_DESCENDANT,
    ]
    assert len(parsed.root.find_all(NodeType.SIMPLE_SELECTOR)) == 6


def test_attribute_and_functional_pseudo_selectors() -> None:
    src = 'a[href^="http"]:not(.a):nth-child(2n + 1) { }'
    parsed = _parse_css("attribute_and_pseudo", src)
    assert parsed.diagnostics == []

    attribute = parsed.root.find_first(NodeType.ATTRIBUTE_SELECTOR)
    assert attribute is not None
    operator = attribute.get(Role.OPERATOR)
    assert operator is not None
    assert operator.text(src) == "^="
    assert attribute.value is not None
    assert attribute.value.text(src) == '"http"'

    negation, nth = parsed.root.find_all(NodeType.PSEUDO_SELECTOR)
    assert negation.text(src) == ":not(.a)"
    assert negation.find_first(NodeType.CLASS_SELECTOR) is not None
    assert nth.text(src) == ":nth-child(2n + 1)"


def test_pseudo_element_and_namespaced_element() -> None:
    parsed = _parse_css("pseudo_element", "svg|circle::before, *|* { }")
    assert parsed.diagnostics == []
    assert len(parsed.root.find_all(NodeType.NAMESPACE_PREFIX)) == 2
    ruleset = parsed.root.children[0]
    assert len(ruleset.selectors) == 2
    assert parsed.root.find_first(NodeType.PSEUDO_SELECTOR) is not None


def test_media_feature_range() -> None:
    src = "@media (400px <= width <= 700px) { a { b: c } }"
    parsed = _parse_css("media_feature_range", src)
    assert parsed.diagnostics == []

    feature = parsed.root.find_first(NodeType.MEDIA_FEATURE)
    assert feature is not None
    assert [child.type for child in feature.children] == [
        NodeType.NUMERIC_VALUE,
        NodeType.IDENTIFIER,
        NodeType.NUMERIC_VALUE,
    ]


def test_media_ratio_and_query_list() -> None:
    parsed = _parse_css("media_ratio", "@media screen, print and (aspect-ratio: 16/9) { }")
    assert parsed.diagnostics == []

    assert len(parsed.root.find_all(NodeType.MEDIA_QUERY)) == 2
    assert parsed.root.find_first(NodeType.RATIO_VALUE) is not None


def test_media_condition_requires_parenthesis() -> None:
    parsed = _parse_css("media_condition_paren", "@media screen and width { }")
    assert _codes(parsed)[0] == "PARSER_LEFT_PARENTHESIS_EXPECTED"


def test_font_face_with_url_and_format() -> None:
    src = '@font-face { font-family: x; src: url(a.woff2) format("woff2"); unicode-range: U+0025-00FF; }'
    parsed = _parse_css("font_face", src)
    assert parsed.diagnostics == []

    uri = parsed.root.find_first(NodeType.URI_LITERAL)
    assert uri is not None
    assert uri.text(src) == "url(a.woff2)"
    function = parsed.root.find_first(NodeType.FUNCTION)
    assert function is not None
    assert function.identifier is not None
    assert function.identifier.text(src) == "format"
    assert parsed.root.find_first(NodeType.UNICODE_RANGE) is not None


def test_page_with_margin_box() -> None:
    parsed = _parse_css("page_margin_box", '@page :first { margin: 1in; @top-left { content: "x"; } }')
    assert parsed.diagnostics == []

    page = parsed.root.find_first(NodeType.PAGE)
    assert page is not None
    assert parsed.root.find_first(NodeType.PAGE_BOX_MARKER) is not None


def test_unknown_page_margin_box_is_reported() -> None:
    parsed = _parse_css("page_unknown_margin_box", "@page { @middle { a: b; } }")
    assert _codes(parsed) == ["PARSER_UNKNOWN_AT_RULE"]


def test_unknown_at_rule_is_accepted() -> None:
    parsed = _parse_css("unknown_at_rule", "@foo bar { baz }")
    assert parsed.diagnostics == []
    assert parsed.root.children[0].type == NodeType.UNKNOWN_AT_RULE


def test_layer_statement_and_block() -> None:
    parsed = _parse_css("layers", "@layer a, b; @layer base { a { b: c } }")
    assert parsed.diagnostics == []

    statement, block = parsed.root.children
    assert statement.type == NodeType.LAYER
    assert statement.declarations is None
    assert block.declarations is not None
    assert len(parsed.root.find_all(NodeType.LAYER_NAME)) == 3


def test_layer_block_accepts_only_one_name() -> None:
    parsed = _parse_css("layer_block_two_names", "@layer a, b { }")
    assert _codes(parsed)[0] == "PARSER_SEMICOLON_EXPECTED"


def test_namespace_rule() -> None:
    src = "@namespace svg url(http://www.w3.org/2000/svg);"
    parsed = _parse_css("namespace", src)
    assert parsed.diagnostics == []

    namespace = parsed.root.children[0]
    assert namespace.type == NodeType.NAMESPACE
    prefix = namespace.get(Role.NAMESPACE_PREFIX)
    assert prefix is not None
    assert prefix.text(src) == "svg"


def test_property_at_rule() -> None:
    src = '@property --x { syntax: "<length>"; inherits: false; initial-value: 0px; }'
    parsed = _parse_css("property_at_rule", src)
    assert parsed.diagnostics == []
    assert len(parsed.root.find_all(NodeType.DECLARATION)) == 3


def test_property_at_rule_requires_custom_property_name() -> None:
    assert _codes(parse("@property x { }", dialect=Dialect.CSS))[0] == "PARSER_IDENTIFIER_EXPECTED"


def test_import_with_layer_supports_and_media() -> None:
    src = '@import url("theme.css") layer(theme) supports(display: grid) screen;'
    parsed = _parse_css("import_conditions", src)
    assert parsed.diagnostics == []

    import_rule = parsed.root.children[0]
    assert import_rule.type == NodeType.IMPORT
    assert import_rule.find_first(NodeType.LAYER_NAME) is not None
    assert import_rule.find_first(NodeType.DECLARATION) is not None
    assert import_rule.get(Role.MEDIALIST) is not None


def test_grid_line_names() -> None:
    parsed = _parse_css("grid_lines", ".a { grid-template-columns: [full-start] 1fr [full-end]; }")
    assert parsed.diagnostics == []
    assert len(parsed.root.find_all(NodeType.GRID_LINE)) == 2


def test_supports_negation() -> None:
    parsed = _parse_css("supports_not", "@supports not (display: grid) { a { b: c } }")
    assert parsed.diagnostics == []
    assert parsed.root.find_first(NodeType.SUPPORTS_CONDITION) is not None


def test_supports_function_condition() -> None:
    parsed = _parse_css("supports_selector", "@supports selector(a > b) { }")
    assert parsed.diagnostics == []


@pytest.mark.parametrize("keyword", ["@keyframes", "@-webkit-keyframes", "@-moz-keyframes", "@-o-keyframes"])
def test_vendor_keyframes(keyword: str) -> None:
    parsed = parse(f"{keyword} spin {{ from {{ a: b }} 50%, 75% {{ a: c }} to {{ a: d }} }}", dialect=Dialect.CSS)
    assert parsed.diagnostics == []
    assert len(parsed.root.find_all(NodeType.KEYFRAME_SELECTOR)) == 3


def test_ms_keyframes_is_an_unknown_keyword() -> None:
    parsed = _parse_css("ms_keyframes", "@-ms-keyframes x { }")
    assert _codes(parsed) == ["PARSER_UNKNOWN_KEYWORD"]
    assert parsed.root.find_first(NodeType.KEYFRAME) is not None


def test_custom_property_falls_back_to_raw_value() -> None:
    src = ":root { --x: [1, 2]; --y: 1px solid; }"
    parsed = _parse_css("custom_property_raw", src)
    assert parsed.diagnostics == []

    raw, typed = parsed.root.find_all(NodeType.CUSTOM_PROPERTY_DECLARATION)
    value = raw.find_first(NodeType.CUSTOM_PROPERTY_VALUE)
    assert value is not None
    assert value.text(src) == "[1, 2]"
    assert typed.value is not None
    assert typed.value.text(src) == "1px solid"


def test_important_and_hacks() -> None:
    src = "a { color: red !important; *zoom: 1; _height: 1px; }"
    parsed = _parse_css("important_and_hacks", src)
    assert parsed.diagnostics == []

    assert parsed.root.find_first(NodeType.PRIO) is not None
    assert len(parsed.root.find_all(NodeType.DECLARATION)) == 3


def test_charset_must_be_first() -> None:
    parsed = _parse_css("charset", '@charset "utf-8";\na { b: c }')
    assert parsed.diagnostics == []
    assert parsed.root.children[0].type == NodeType.CHARSET


def test_scss_syntax_is_rejected_in_css() -> None:
    parsed = _parse_css("scss_in_css", "$x: 1;")
    assert _codes(parsed)[0] == "PARSER_RULE_OR_SELECTOR_EXPECTED"
    assert parsed.root.find_first(NodeType.VARIABLE_DECLARATION) is None


def test_line_comment_is_not_trivia_in_css() -> None:
    parsed = _parse_css("line_comment_in_css", "// note\na { b: c }")
    assert parsed.diagnostics != []
