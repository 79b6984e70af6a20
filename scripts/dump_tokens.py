#!/usr/bin/env python
"""Lex a stylesheet and print its tokens."""

import argparse
from pathlib import Path

from scsspy.lexer import Lexer, dump_tokens


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the token stream of a .scss/.css file")
    parser.add_argument("path", type=Path, help="Stylesheet to lex")
    parser.add_argument("--css", action="store_true", help="Lex as plain CSS instead of SCSS")
    parser.add_argument(
        "--skip-trivia",
        action="store_true",
        help="Hide whitespace and comment tokens",
    )
    args = parser.parse_args()

    path: Path = args.path
    text = path.read_text(encoding="utf-8")
    lexer = Lexer(text, scss=not args.css)
    tokens = lexer.lex()
    if args.skip_trivia:
        tokens = [token for token in tokens if not token.kind.is_trivia]

    dump_tokens(tokens, text, lexer.diagnostics)
    print(f"\n{len(tokens)} tokens from {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
