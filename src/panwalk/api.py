#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/api.py
"""Entry points for writing pandoc filters.

A pandoc filter is a program that reads the JSON AST of a document on
stdin, transforms it, and writes it back to stdout. pandoc runs it with
the target format as the first command-line argument:

    pandoc --filter ./flatten.py -t markdown < input.md

With this module such a program is a single call:

    #!/usr/bin/env python3
    from panwalk import pandoc_filter
    from panwalk.ast import Emph, Para

    def flatten(node):
        if node.level >= 2:
            return Para(content=[Emph(content=node.content)])

    if __name__ == "__main__":
        pandoc_filter("Header", flatten)

"""

from __future__ import annotations

import io
import logging
import sys
from typing import IO, Any, Optional

from panwalk.ast.nodes import Tree
from panwalk.ast.serialization import ast_to_json, json_to_ast
from panwalk.filter import Filter
from panwalk.options import WalkOptions

logger = logging.getLogger(__name__)


def _resolve_format(format: Optional[str], options: WalkOptions) -> str:
    """Pick the target format: explicit argument, then argv[1] as pandoc passes it, then options."""
    if format is not None:
        return format
    if len(sys.argv) > 1:
        return sys.argv[1]
    return options.format


def ensure_utf8_output(stream: IO[Any]) -> IO[Any]:
    """Switch a text stream such as ``sys.stdout`` to UTF-8 if it uses another encoding.

    pandoc always exchanges UTF-8, whatever the locale or ``PYTHONIOENCODING``
    says. Streams that cannot be reconfigured are returned unchanged.

    """
    if isinstance(stream, io.TextIOWrapper) and (stream.encoding or "").lower().replace("_", "-") not in ("utf-8", "utf8"):
        stream.reconfigure(encoding="utf-8")
    return stream


def read_ast(stream: Optional[IO[Any]] = None, options: Optional[WalkOptions] = None) -> Tree:
    """Read one pandoc JSON value from a stream and decode it.

    Parameters
    ----------
    stream : file-like, optional
        Text or binary stream, defaults to the bytes of ``sys.stdin``.
        Binary input is decoded as UTF-8, independent of the locale.
    options : WalkOptions, optional
        Decoding options

    Returns
    -------
    Document, Node or list of Node
        The decoded tree

    Raises
    ------
    MalformedInputError
        If the input is not valid JSON or not a pandoc AST

    """
    if stream is None:
        stream = getattr(sys.stdin, "buffer", sys.stdin)
    return json_to_ast(stream.read(), options)


def write_ast(tree: Tree, stream: Optional[IO[Any]] = None, options: Optional[WalkOptions] = None) -> None:
    """Write a tree as one line of pandoc JSON followed by a newline.

    Parameters
    ----------
    tree : Document, Node or list of Node
        The tree to write
    stream : file-like, optional
        Text or binary stream, defaults to ``sys.stdout``. Output is UTF-8;
        ``sys.stdout`` is switched to UTF-8 first if needed.
    options : WalkOptions, optional
        Encoding options

    """
    if stream is None:
        stream = sys.stdout
    if stream is sys.stdout:
        ensure_utf8_output(stream)

    line = ast_to_json(tree, options) + "\n"
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        stream.write(line.encode("utf-8"))
    else:
        stream.write(line)
    stream.flush()


def pandoc_walk(
    *actions: Any,
    stdin: Optional[IO[Any]] = None,
    format: Optional[str] = None,
    options: Optional[WalkOptions] = None,
) -> Tree:
    """Read a document from stdin and apply actions to it.

    Parameters
    ----------
    *actions : Any
        Actions in any form accepted by ``Filter.from_args``: plain
        callables, ``key, function`` pairs, or a single mapping
    stdin : file-like, optional
        Input stream, defaults to ``sys.stdin``
    format : str, optional
        Target format passed to actions. Defaults to the first command-line
        argument if there is one, else to ``options.format``.
    options : WalkOptions, optional
        Options, defaults to ``WalkOptions.from_env()``

    Returns
    -------
    Document, Node or list of Node
        The filtered tree

    Raises
    ------
    ConfigurationError
        If the actions do not form a valid filter; raised before any input
        is read
    MalformedInputError
        If the input is not a pandoc AST

    """
    if options is None:
        options = WalkOptions.from_env()

    walk_filter = Filter.from_args(*actions)
    tree = read_ast(stdin, options)
    target_format = _resolve_format(format, options)
    logger.debug(f"Walking document for format {target_format!r}")
    return walk_filter.apply(tree, target_format)


def pandoc_filter(
    *actions: Any,
    stdin: Optional[IO[Any]] = None,
    stdout: Optional[IO[Any]] = None,
    format: Optional[str] = None,
    options: Optional[WalkOptions] = None,
) -> None:
    """Read a document from stdin, apply actions, and write it to stdout.

    Equivalent to ``pandoc_walk`` followed by ``write_ast``; see
    ``pandoc_walk`` for the parameters. The output is one line of JSON
    terminated by a newline.

    Examples
    --------
    >>> pandoc_filter("Superscript|Subscript", lambda node: [])

    """
    if options is None:
        options = WalkOptions.from_env()

    tree = pandoc_walk(*actions, stdin=stdin, format=format, options=options)
    write_ast(tree, stdout, options)


__all__ = ["ensure_utf8_output", "pandoc_filter", "pandoc_walk", "read_ast", "write_ast"]
