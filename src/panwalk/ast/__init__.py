#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/ast/__init__.py
"""Typed representation of the pandoc document AST.

The module consists of several components:

- nodes: node classes for every pandoc constructor, plus helper records
- serialization: pandoc JSON <-> typed nodes
- walker: in-place transformation and read-only traversal
- utils: text extraction (``stringify``)

Examples
--------
Basic usage:

    >>> from panwalk.ast import Document, Para, Space, Str, stringify, transform
    >>>
    >>> doc = Document(blocks=[Para(content=[Str("Hello"), Space(), Str("world")])])
    >>>
    >>> def shout(node, format, meta):
    ...     if node.name == "Str":
    ...         return Str(node.text.upper())
    >>>
    >>> transform(doc, shout)
    >>> stringify(doc)
    'HELLO WORLD'

"""

from __future__ import annotations

from panwalk.ast.nodes import (
    NODE_CLASSES,
    Attr,
    Block,
    BlockQuote,
    BulletList,
    Caption,
    Cell,
    Citation,
    Cite,
    Code,
    CodeBlock,
    ColSpec,
    DefinitionList,
    Div,
    Document,
    Emph,
    Figure,
    Header,
    HorizontalRule,
    Image,
    Inline,
    LineBlock,
    LineBreak,
    Link,
    ListAttributes,
    Math,
    MetaBlocks,
    MetaBool,
    MetaInlines,
    MetaList,
    MetaMap,
    MetaString,
    MetaValue,
    Node,
    Note,
    Null,
    OrderedList,
    Para,
    Plain,
    Quoted,
    RawBlock,
    RawInline,
    Row,
    SmallCaps,
    SoftBreak,
    Space,
    Span,
    Str,
    Strikeout,
    Strong,
    Subscript,
    Superscript,
    Table,
    TableBody,
    TableFoot,
    TableHead,
    Tree,
    Underline,
    iter_child_slots,
)
from panwalk.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from panwalk.ast.utils import stringify
from panwalk.ast.walker import Action, ActionResult, iter_nodes, iter_nodes_with_depth, query, transform, walk

__all__ = [
    # Nodes
    "Node",
    "Block",
    "Inline",
    "MetaValue",
    "Document",
    "MetaMap",
    "MetaList",
    "MetaBool",
    "MetaString",
    "MetaInlines",
    "MetaBlocks",
    "Plain",
    "Para",
    "LineBlock",
    "CodeBlock",
    "RawBlock",
    "BlockQuote",
    "OrderedList",
    "BulletList",
    "DefinitionList",
    "Header",
    "HorizontalRule",
    "Table",
    "Figure",
    "Div",
    "Null",
    "Str",
    "Emph",
    "Underline",
    "Strong",
    "Strikeout",
    "Superscript",
    "Subscript",
    "SmallCaps",
    "Quoted",
    "Cite",
    "Code",
    "Space",
    "SoftBreak",
    "LineBreak",
    "Math",
    "RawInline",
    "Link",
    "Image",
    "Note",
    "Span",
    # Helper records
    "Attr",
    "ListAttributes",
    "Citation",
    "Caption",
    "ColSpec",
    "Cell",
    "Row",
    "TableHead",
    "TableBody",
    "TableFoot",
    # Registry and access
    "NODE_CLASSES",
    "Tree",
    "iter_child_slots",
    # Serialization
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
    # Walking
    "Action",
    "ActionResult",
    "iter_nodes",
    "iter_nodes_with_depth",
    "query",
    "transform",
    "walk",
    # Utilities
    "stringify",
]
