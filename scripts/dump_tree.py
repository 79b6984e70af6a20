#!/usr/bin/env python
"""Parse a stylesheet and print the tree with its diagnostics."""

import argparse
from pathlib import Path

from scsspy import Dialect, parse
from scsspy.cst import format_tree


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the parse tree of a .scss/.css file")
    parser.add_argument("path", type=Path, help="Stylesheet to parse")
    parser.add_argument(
        "--dialect",
        choices=[dialect.value for dialect in Dialect],
        default=None,
        help="Grammar to use (default: from the file extension)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the tree here instead of stdout")
    args = parser.parse_args()

    path: Path = args.path
    dialect = Dialect(args.dialect) if args.dialect else _dialect_for(path)
    text = path.read_text(encoding="utf-8")
    parsed = parse(text, dialect=dialect)

    lines = [format_tree(parsed.root, text), "", f"Diagnostics ({len(parsed.diagnostics)}):"]
    for diagnostic in parsed.diagnostics:
        lines.append(
            f"- {diagnostic.severity.upper()} {diagnostic.code} range={diagnostic.range.as_tuple()} "
            f"message={diagnostic.message}"
        )
    rendered = "\n".join(lines)

    if args.output is None:
        print(rendered)
    else:
        output_path: Path = args.output
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered + "\n", encoding="utf-8")
        print(f"Wrote tree of {path} to {output_path}")
    return 1 if parsed.diagnostics else 0


def _dialect_for(path: Path) -> Dialect:
    return Dialect.CSS if path.suffix.lower() == ".css" else Dialect.SCSS


if __name__ == "__main__":
    raise SystemExit(main())
