#!/usr/bin/env python3
"""Table of Contents Extractor.

This example reads a pandoc JSON document and prints an indented table of
contents built from its headers, using ``query`` and ``stringify`` instead
of a filter. The document is not written back.

Usage
-----
    pandoc -t json README.md | python examples/outline_toc.py

"""

import sys

from panwalk import MalformedInputError, query, read_ast, stringify


def header_entry(node, format, meta):
    """Return ``(level, text)`` for headers and None for everything else."""
    if node.name == "Header":
        return [(node.level, stringify(node.content))]
    return None


def main() -> int:
    """Print the table of contents of the document on stdin."""
    try:
        doc = read_ast()
    except MalformedInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    for level, text in query(doc, header_entry):
        print(f"{'  ' * (level - 1)}- {text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
