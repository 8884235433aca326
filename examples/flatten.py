#!/usr/bin/env python3
"""Header Flattening Filter.

This example is a complete pandoc filter: it turns every header of level 2
or deeper into a paragraph of emphasized text, and drops superscripts and
subscripts, leaving top-level headers alone.

Usage
-----
Run it through pandoc, which passes the target format as the first argument:

    pandoc --filter ./examples/flatten.py -t html input.md

or on saved JSON:

    pandoc -t json input.md | python examples/flatten.py html | pandoc -f json -t markdown

"""

from panwalk import pandoc_filter
from panwalk.ast import Emph, Para


def flatten(node):
    """Replace a level 2+ header with an emphasized paragraph."""
    if node.level >= 2:
        return Para(content=[Emph(content=node.content)])
    return None


def drop(node):
    """Remove the node."""
    return []


if __name__ == "__main__":
    pandoc_filter("Header", flatten, "Superscript|Subscript", drop)
