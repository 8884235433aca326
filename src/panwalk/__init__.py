"""panwalk - write pandoc filters in Python.

pandoc converts documents through an intermediate abstract syntax tree and
can hand that tree, as JSON, to external filter programs. panwalk reads the
JSON into typed nodes, walks the tree applying filter actions, and writes
the result back out.

Key Features
------------
- Typed node classes for every pandoc constructor (pandoc-api-version 1.21+)
- Filters built from plain actions or from actions keyed by kind names
- In-place tree rewriting: keep, replace, delete or splice any node
- One-call filter programs via ``pandoc_filter``
- Plain-text extraction with ``stringify``
- A ``panwalk`` command to run, inspect and debug filters

Requirements
------------
- Python 3.10+

Examples
--------
A complete pandoc filter that turns level 2+ headers into emphasized
paragraphs:

    >>> from panwalk import pandoc_filter
    >>> from panwalk.ast import Emph, Para
    >>>
    >>> def flatten(node):
    ...     if node.level >= 2:
    ...         return Para(content=[Emph(content=node.content)])
    >>>
    >>> pandoc_filter("Header", flatten)

Applying a filter to a document already in memory:

    >>> from panwalk import Filter, json_to_ast
    >>>
    >>> doc = json_to_ast(json_text)
    >>> Filter.from_named_actions({"Superscript|Subscript": lambda node: []}).apply(doc)

See Also
--------
panwalk.ast : Node classes, JSON codec and walker
panwalk.filter : Filter construction and application

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "panwalk requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from panwalk.api import pandoc_filter, pandoc_walk, read_ast, write_ast
from panwalk.ast.serialization import ast_to_json, json_to_ast
from panwalk.ast.utils import stringify
from panwalk.ast.walker import query, transform, walk
from panwalk.exceptions import (
    ApiVersionError,
    ConfigurationError,
    MalformedInputError,
    PanwalkError,
    ParsingError,
    TransformError,
    ValidationError,
)
from panwalk.filter import Filter, NamedAction
from panwalk.options import WalkOptions

__all__ = [
    "__version__",
    "Filter",
    "NamedAction",
    "pandoc_filter",
    "pandoc_walk",
    "read_ast",
    "write_ast",
    "json_to_ast",
    "ast_to_json",
    "stringify",
    "transform",
    "query",
    "walk",
    "WalkOptions",
    "PanwalkError",
    "ValidationError",
    "ConfigurationError",
    "ParsingError",
    "MalformedInputError",
    "ApiVersionError",
    "TransformError",
]
