"""Syntax vocabulary for parse-tree nodes."""

from enum import IntEnum, StrEnum


class NodeType(IntEnum):
    """Closed set of syntactic categories a parse-tree node can carry."""

    NODE = 0  # grammar-transparent grouping
    NODE_LIST = 1

    # Stylesheet structure
    STYLESHEET = 10
    RULESET = 11
    DECLARATIONS = 12
    DECLARATION = 13
    CUSTOM_PROPERTY_DECLARATION = 14
    CUSTOM_PROPERTY_VALUE = 15
    PROPERTY = 16
    NESTED_PROPERTIES = 17
    PRIO = 18
    UNKNOWN_AT_RULE = 19

    # Selectors
    SELECTOR = 20
    SIMPLE_SELECTOR = 21
    ELEMENT_NAME_SELECTOR = 22
    CLASS_SELECTOR = 23
    IDENTIFIER_SELECTOR = 24
    ATTRIBUTE_SELECTOR = 25
    PSEUDO_SELECTOR = 26
    SELECTOR_COMBINATOR = 27
    SELECTOR_COMBINATOR_PARENT = 28
    SELECTOR_COMBINATOR_SIBLING = 29
    SELECTOR_COMBINATOR_ALL_SIBLINGS = 30
    SELECTOR_COMBINATOR_SHADOW_PIERCING_DESCENDANT = 31
    SELECTOR_PLACEHOLDER = 32
    NAMESPACE_PREFIX = 33

    # Expressions
    IDENTIFIER = 40
    EXPRESSION = 41
    BINARY_EXPRESSION = 42
    TERM = 43
    OPERATOR = 44
    STRING_LITERAL = 45
    URI_LITERAL = 46
    FUNCTION = 47
    NUMERIC_VALUE = 48
    HEX_COLOR_VALUE = 49
    RATIO_VALUE = 50
    UNICODE_RANGE = 51
    GRID_LINE = 52
    LIST_ENTRY = 53

    # Base at-rules
    CHARSET = 60
    IMPORT = 61
    NAMESPACE = 62
    MEDIA = 63
    MEDIA_LIST = 64
    MEDIA_QUERY = 65
    MEDIA_CONDITION = 66
    MEDIA_FEATURE = 67
    PAGE = 68
    PAGE_BOX_MARKER = 69
    FONT_FACE = 70
    KEYFRAME = 71
    KEYFRAME_SELECTOR = 72
    SUPPORTS = 73
    SUPPORTS_CONDITION = 74
    LAYER = 75
    LAYER_NAME = 76
    PROPERTY_AT_RULE = 77
    LAYER_NAME_LIST = 78

    # SCSS
    VARIABLE = 100
    VARIABLE_DECLARATION = 101
    INTERPOLATION = 102
    MODULE = 103
    MIXIN_DECLARATION = 104
    MIXIN_REFERENCE = 105
    MIXIN_CONTENT_REFERENCE = 106
    MIXIN_CONTENT_DECLARATION = 107
    FUNCTION_DECLARATION = 108
    FUNCTION_PARAMETER = 109
    FUNCTION_ARGUMENT = 110
    RETURN_STATEMENT = 111
    IF_STATEMENT = 112
    ELSE_STATEMENT = 113
    FOR_STATEMENT = 114
    EACH_STATEMENT = 115
    WHILE_STATEMENT = 116
    DEBUG = 117
    EXTENDS_REFERENCE = 118
    USE = 119
    FORWARD = 120
    FORWARD_VISIBILITY = 121
    MODULE_CONFIGURATION = 122

    @property
    def is_selector_combinator(self) -> bool:
        return self in (
            NodeType.SELECTOR_COMBINATOR,
            NodeType.SELECTOR_COMBINATOR_PARENT,
            NodeType.SELECTOR_COMBINATOR_SIBLING,
            NodeType.SELECTOR_COMBINATOR_ALL_SIBLINGS,
            NodeType.SELECTOR_COMBINATOR_SHADOW_PIERCING_DESCENDANT,
        )


class ReferenceType(StrEnum):
    """What kind of symbol an identifier names, for downstream resolution."""

    MIXIN = "mixin"
    RULE = "rule"
    VARIABLE = "variable"
    FUNCTION = "function"
    KEYFRAME = "keyframe"
    UNKNOWN = "unknown"
    MODULE = "module"
    FORWARD = "forward"
    FORWARD_VISIBILITY = "forward-visibility"
    PROPERTY = "property"
