"""Centralized stylesheet source cases used across lexer/parser tests."""

from __future__ import annotations

from dataclasses import dataclass
import textwrap
from typing import Literal, TypeAlias, cast

from scsspy.parser import Dialect


@dataclass(frozen=True, slots=True)
class ScssCase:
    name: str
    source: str
    should_parse_cleanly: bool = True
    dialect: Dialect = Dialect.SCSS


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


PARSER_CASES: tuple[ScssCase, ...] = (
    ScssCase(name="variable_declaration", source="$x: 1px;\n"),
    ScssCase(
        name="if_else_chain",
        source=_dedent(
            """
            @if $a == 1 {
              color: red;
            } @else if $a == 2 {
              color: green;
            } @else {
              color: blue;
            }
            """
        ),
    ),
    ScssCase(name="use_with_namespace", source='@use "sass:math" as m;\n'),
    ScssCase(name="include_module_mixin", source="@include foo.bar($x: 1, $y...);\n"),
    ScssCase(name="nested_rulesets", source=".a { .b { color: $c; } }\n"),
    ScssCase(name="mixin_with_parameters", source="@mixin m($a: 1, $rest...) { @content; }\n"),
    ScssCase(name="function_with_return", source="@function double($n) { @return $n * 2; }\n"),
    ScssCase(
        name="each_over_map",
        source=_dedent(
            """
            @each $key, $value in (a: 1, b: 2) {
              .#{$key} {
                width: $value;
              }
            }
            """
        ),
    ),
    ScssCase(
        name="for_loop",
        source=_dedent(
            """
            @for $i from 1 through 3 {
              .item-#{$i} { width: 2em * $i; }
            }
            """
        ),
    ),
    ScssCase(
        name="while_loop",
        source=_dedent(
            """
            $i: 6;
            @while $i > 0 {
              .item-#{$i} { width: 2em * $i; }
              $i: $i - 2;
            }
            """
        ),
    ),
    ScssCase(
        name="placeholder_and_extend",
        source=_dedent(
            """
            %message-shared {
              border: 1px solid #ccc;
            }
            .message {
              @extend %message-shared;
            }
            """
        ),
    ),
    ScssCase(
        name="nesting_selector_variants",
        source=_dedent(
            """
            .button {
              &-primary { color: blue; }
              &:hover { color: red; }
              & + & { margin: 0; }
            }
            """
        ),
    ),
    ScssCase(name="interpolated_property", source=".a { #{$prop}-top: 1px; }\n"),
    ScssCase(name="module_function_call", source=".a { width: math.div(10px, 2); }\n"),
    ScssCase(
        name="use_with_configuration",
        source='@use "library" with ($black: #222, $border-radius: 0.1rem !default);\n',
    ),
    ScssCase(
        name="forward_with_prefix_and_hide",
        source='@forward "src/list" as list-* hide list-reset, $horizontal-list-gap;\n',
    ),
    ScssCase(
        name="content_block_with_using",
        source=_dedent(
            """
            @mixin media($types...) {
              @content($types);
            }
            .a {
              @include media(screen) using ($type) {
                color: red;
              }
            }
            """
        ),
    ),
    ScssCase(
        name="nested_media",
        source=".a { @media (min-width: 100px) and (max-width: $bp) { color: red; } }\n",
    ),
    ScssCase(
        name="keyframes",
        source="@keyframes fade { from { opacity: 0; } 50% { opacity: 0.5; } to { opacity: 1; } }\n",
    ),
    ScssCase(name="import_list", source='@import "a", "b";\n'),
    ScssCase(
        name="debug_warn_error",
        source=_dedent(
            """
            @debug "value: #{$x}";
            @warn "careful";
            @error "bad";
            """
        ),
    ),
    ScssCase(name="nested_properties", source=".a { font: { family: serif; size: 12px; } }\n"),
    ScssCase(name="at_root", source=".a { @at-root .b { color: red; } }\n"),
    ScssCase(name="custom_property", source=":root { --main-color: #06c; }\n"),
    ScssCase(
        name="arithmetic_and_comparison",
        source=_dedent(
            """
            $a: (1 + 2) * 3;
            $b: $a >= 9 and $a != 10;
            $c: not $b;
            """
        ),
    ),
    ScssCase(name="keyword_arguments", source="$c: rgba($color: red, $alpha: 0.5);\n"),
    ScssCase(name="map_literal", source="$breakpoints: (small: 576px, medium: 768px, large: 992px);\n"),
    ScssCase(
        name="comments",
        source=_dedent(
            """
            // line comment
            /* block */
            .a {
              color: red; // trailing
            }
            """
        ),
    ),
    ScssCase(
        name="control_flow_in_function",
        source=_dedent(
            """
            @function clamp-it($v, $min: 0) {
              @if $v < $min { @return $min; }
              @else { @return $v; }
            }
            """
        ),
    ),
    ScssCase(
        name="supports_rule",
        source="@supports (display: grid) and (not (display: inline-grid)) { .a { display: grid; } }\n",
    ),
    ScssCase(
        name="css_basics",
        source=_dedent(
            """
            @charset "utf-8";
            @import url(foo.css) screen;
            a > b + c ~ d, e[href^="http"] {
              color: red !important;
            }
            @media screen and (min-width: 100px) {
              a { b: c }
            }
            """
        ),
        dialect=Dialect.CSS,
    ),
    ScssCase(
        name="missing_semicolon_between_declarations",
        source=".a { color: red background: blue; }\n",
        should_parse_cleanly=False,
    ),
    ScssCase(name="unclosed_block", source=".a { color: red;\n", should_parse_cleanly=False),
    ScssCase(name="mixin_missing_paren", source="@mixin a( { color: red; }\n", should_parse_cleanly=False),
    ScssCase(name="for_missing_from", source="@for $i in 1 to 3 { }\n", should_parse_cleanly=False),
    ScssCase(name="use_unknown_keyword", source='@use "x" by y;\n', should_parse_cleanly=False),
    ScssCase(name="stray_closing_brace", source="}\n.a { color: red; }\n", should_parse_cleanly=False),
)

CaseName: TypeAlias = Literal[
    "variable_declaration",
    "if_else_chain",
    "use_with_namespace",
    "include_module_mixin",
    "nested_rulesets",
    "mixin_with_parameters",
    "function_with_return",
    "each_over_map",
    "for_loop",
    "while_loop",
    "placeholder_and_extend",
    "nesting_selector_variants",
    "interpolated_property",
    "module_function_call",
    "use_with_configuration",
    "forward_with_prefix_and_hide",
    "content_block_with_using",
    "nested_media",
    "keyframes",
    "import_list",
    "debug_warn_error",
    "nested_properties",
    "at_root",
    "custom_property",
    "arithmetic_and_comparison",
    "keyword_arguments",
    "map_literal",
    "comments",
    "control_flow_in_function",
    "supports_rule",
    "css_basics",
    "missing_semicolon_between_declarations",
    "unclosed_block",
    "mixin_missing_paren",
    "for_missing_from",
    "use_unknown_keyword",
    "stray_closing_brace",
]

CASE_BY_NAME: dict[CaseName, ScssCase] = cast(
    dict[CaseName, ScssCase],
    {case.name: case for case in PARSER_CASES},
)


def case_source(name: CaseName) -> str:
    return CASE_BY_NAME[name].source


def case_id(case: ScssCase) -> str:
    return case.name
