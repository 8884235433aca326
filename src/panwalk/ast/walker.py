#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/ast/walker.py
"""Depth-first traversal of pandoc document trees.

This module provides the tree-walking primitives that filters are built on:

- ``transform`` rewrites a tree in place by applying an action to every node
- ``query`` collects the results of a function applied to every node
- ``walk`` calls a function on every node for its side effects
- ``iter_nodes`` / ``iter_nodes_with_depth`` iterate without calling anything

An action is called as ``action(node, format, meta)`` and returns one of:

- ``None``: keep the node; its children are walked next
- a node: replace the node
- a list of nodes: splice the nodes in place of the node (``[]`` deletes it)

Replacement nodes are not offered to the action again, but their children
are walked. The root of the tree is never offered to the action: pass a
Document, any node, or a list of nodes (whose members are offered).

Traversal is pre-order and uses an explicit stack of generators, so the
nesting depth of a document is not limited by the interpreter's recursion
limit.

Examples
--------
Drop every emphasis while keeping its text:

    >>> def unemph(node, format, meta):
    ...     if node.name == "Emph":
    ...         return node.content
    >>> transform(doc, unemph)

Collect all link targets:

    >>> query(doc, lambda node, format, meta: node.url if node.name == "Link" else None)

"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Union

from panwalk.ast.nodes import Node, Tree, iter_child_slots
from panwalk.constants import DEFAULT_FORMAT
from panwalk.exceptions import TransformError

ActionResult = Union[None, Node, list]
Action = Callable[[Node, str, dict], ActionResult]


def _keep(node: Node, format: str, meta: dict) -> None:
    return None


def _coerce_result(node: Node, result: Any) -> list[Node]:
    """Normalize an action result that is not None into a list of nodes.

    Raises
    ------
    TransformError
        If the result is neither a node nor a list of nodes

    """
    if isinstance(result, Node):
        return [result]
    if isinstance(result, (list, tuple)):
        for item in result:
            if not isinstance(item, Node):
                raise TransformError(
                    f"Action for {node.name} returned a list containing {type(item).__name__}; "
                    f"lists may only contain nodes",
                    node_name=node.name,
                )
        return list(result)
    raise TransformError(
        f"Action for {node.name} returned {type(result).__name__}; "
        f"expected None, a node, or a list of nodes",
        node_name=node.name,
    )


def _walk_sequence(seq: list, action: Action, format: str, meta: dict) -> Iterator[Node]:
    """Offer each member of a list to the action, splicing results into the list.

    Yields every node that ends up in the list, in order, right after it is
    settled so the caller can descend into it before the next member is
    offered.
    """
    i = 0
    while i < len(seq):
        node = seq[i]
        result = action(node, format, meta)
        if result is None:
            i += 1
            yield node
            continue

        replacements = _coerce_result(node, result)
        seq[i : i + 1] = replacements
        i += len(replacements)
        yield from replacements


def _walk_mapping(mapping: dict, action: Action, format: str, meta: dict) -> Iterator[Node]:
    """Offer each value of a metadata mapping to the action.

    A mapping value is a single slot: a list result may hold at most one
    node, and an empty list removes the key.
    """
    for key in list(mapping):
        # An action may have removed later keys already
        if key not in mapping:
            continue
        node = mapping[key]
        result = action(node, format, meta)
        if result is None:
            yield node
            continue

        replacements = _coerce_result(node, result)
        if not replacements:
            mapping.pop(key, None)
            continue
        if len(replacements) > 1:
            raise TransformError(
                f"Action for {node.name} under metadata key {key!r} returned {len(replacements)} nodes; "
                f"a metadata value can only be replaced by a single node",
                node_name=node.name,
            )
        mapping[key] = replacements[0]
        yield replacements[0]


def _descend(node: Node, action: Action, format: str, meta: dict) -> Iterator[Node]:
    for slot in iter_child_slots(node):
        if isinstance(slot, dict):
            yield from _walk_mapping(slot, action, format, meta)
        else:
            yield from _walk_sequence(slot, action, format, meta)


def _traverse(tree: Tree, action: Action, format: str, meta: dict) -> Iterator[tuple[Node, int]]:
    if isinstance(tree, list):
        root = _walk_sequence(tree, action, format, meta)
    else:
        root = _descend(tree, action, format, meta)

    stack = [root]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        yield node, len(stack)
        stack.append(_descend(node, action, format, meta))


def transform(tree: Tree, action: Action, format: str = DEFAULT_FORMAT, meta: Optional[dict] = None) -> Tree:
    """Apply an action to every node of a tree, rewriting it in place.

    Parameters
    ----------
    tree : Document, Node or list of Node
        The tree to rewrite; it is mutated, not copied
    action : callable
        Called as ``action(node, format, meta)`` for every node below the root
    format : str, default = ""
        Target format passed to the action
    meta : dict, optional
        Metadata passed to the action, defaults to an empty dict

    Returns
    -------
    Document, Node or list of Node
        The same tree object

    Raises
    ------
    TransformError
        If the action returns something other than None, a node or a list
        of nodes. Exceptions raised by the action itself propagate unchanged.

    """
    if meta is None:
        meta = {}
    for _ in _traverse(tree, action, format, meta):
        pass
    return tree


def iter_nodes_with_depth(tree: Tree) -> Iterator[tuple[Node, int]]:
    """Yield ``(node, depth)`` for every node below the root in document order.

    Direct children of the root (or members of a root list) have depth 1.

    """
    return _traverse(tree, _keep, DEFAULT_FORMAT, {})


def iter_nodes(tree: Tree) -> Iterator[Node]:
    """Yield every node below the root in document order."""
    for node, _ in iter_nodes_with_depth(tree):
        yield node


def query(
    tree: Tree,
    function: Callable[[Node, str, dict], Any],
    format: str = DEFAULT_FORMAT,
    meta: Optional[dict] = None,
) -> list[Any]:
    """Collect the results of a function applied to every node.

    ``None`` results are skipped and list results are flattened into the
    returned list.

    Parameters
    ----------
    tree : Document, Node or list of Node
        The tree to query; it is not modified by the traversal
    function : callable
        Called as ``function(node, format, meta)``
    format : str, default = ""
        Target format passed to the function
    meta : dict, optional
        Metadata passed to the function, defaults to an empty dict

    Returns
    -------
    list
        Collected results in document order

    Examples
    --------
    >>> query(Para(content=[Str("a"), Space(), Str("b")]),
    ...       lambda n, f, m: n.text if n.name == "Str" else None)
    ['a', 'b']

    """
    if meta is None:
        meta = {}
    results: list[Any] = []
    for node in iter_nodes(tree):
        result = function(node, format, meta)
        if result is None:
            continue
        if isinstance(result, list):
            results.extend(result)
        else:
            results.append(result)
    return results


def walk(
    tree: Tree,
    function: Callable[[Node, str, dict], Any],
    format: str = DEFAULT_FORMAT,
    meta: Optional[dict] = None,
) -> None:
    """Call a function on every node for its side effects; results are ignored."""
    if meta is None:
        meta = {}
    for node in iter_nodes(tree):
        function(node, format, meta)


__all__ = [
    "Action",
    "ActionResult",
    "iter_nodes",
    "iter_nodes_with_depth",
    "query",
    "transform",
    "walk",
]
