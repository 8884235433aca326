#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/ast/utils.py
"""Utility functions for working with pandoc AST nodes.

Functions
---------
stringify : Extract plain text from a node or list of nodes

Examples
--------
Extract text from a header:

    >>> from panwalk.ast import Header, Str, Space, Emph
    >>> from panwalk.ast.utils import stringify
    >>>
    >>> header = Header(level=1, content=[Str("Hello"), Space(), Emph(content=[Str("world")])])
    >>> stringify(header)
    'Hello world'

"""

from __future__ import annotations

from panwalk.ast.nodes import Code, CodeBlock, LineBreak, Math, MetaString, Node, SoftBreak, Space, Str, Tree
from panwalk.ast.walker import iter_nodes

_WHITESPACE_NODES = (Space, SoftBreak, LineBreak)


def _leaf_text(node: Node) -> str:
    if isinstance(node, (Str, Code, Math, CodeBlock, MetaString)):
        return node.text
    if isinstance(node, _WHITESPACE_NODES):
        return " "
    return ""


def stringify(node_or_nodes: Tree) -> str:
    """Concatenate the text content of a tree, leaving out all formatting.

    Text units are taken in document order: ``Str``, ``Code``, ``Math``,
    ``CodeBlock`` and ``MetaString`` contribute their text; ``Space``,
    ``SoftBreak`` and ``LineBreak`` contribute a single space. Raw content
    and every structural or formatting node contribute nothing, and no
    separator is inserted between units.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A node (including a Document) or a list of nodes

    Returns
    -------
    str
        The concatenated text

    Examples
    --------
    >>> stringify([Strong(content=[Str("a"), Emph(content=[Str("b")])]), Str("c")])
    'abc'

    """
    parts = []
    if isinstance(node_or_nodes, Node):
        parts.append(_leaf_text(node_or_nodes))
    parts.extend(_leaf_text(node) for node in iter_nodes(node_or_nodes))
    return "".join(parts)


__all__ = [
    "stringify",
]
