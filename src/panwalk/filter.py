#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/filter.py
"""Filters: ordered collections of actions applied to a pandoc AST.

A Filter wraps one or more actions and runs the walker over the whole tree
once per action, in the order the actions were given. Running one full pass
per action, instead of dispatching every action at each node, means each
action sees the tree exactly as the previous actions left it, including
siblings they inserted, removed or reordered.

Actions are either plain (called as ``action(node, format, meta)`` for
every node) or named: bound to one or more kind names and called as
``function(node)`` only for nodes of those kinds.

Examples
--------
Convert level 2+ headers to emphasized paragraphs:

    >>> from panwalk import Filter
    >>> from panwalk.ast import Emph, Para
    >>>
    >>> def flatten(node):
    ...     if node.level >= 2:
    ...         return Para(content=[Emph(content=node.content)])
    >>>
    >>> Filter.from_named_actions({"Header": flatten}).apply(doc)

Drop superscripts and subscripts:

    >>> Filter.from_named_actions({"Superscript|Subscript": lambda node: []}).apply(doc)

Plain actions see every node, the format and the metadata:

    >>> def strip_raw_html(node, format, meta):
    ...     if node.name == "RawInline" and node.format == "html" and format != "html":
    ...         return []
    >>> Filter.from_actions([strip_raw_html]).apply(doc, "latex")

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from panwalk.ast.nodes import NODE_CLASSES, Document, Node, Tree
from panwalk.ast.walker import Action, ActionResult, transform
from panwalk.constants import DEFAULT_FORMAT, NAME_SEPARATOR
from panwalk.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

NamedActions = Union[Mapping[str, Callable[[Node], ActionResult]], Iterable[tuple[str, Callable[[Node], ActionResult]]]]


def extract_metadata(tree: Any) -> dict:
    """Return the metadata carried by a tree, or an empty dict.

    Only a Document carries metadata; for any other tree an empty dict is
    returned. This never raises.

    Parameters
    ----------
    tree : Any
        The tree about to be filtered

    Returns
    -------
    dict
        ``tree.meta`` itself (not a copy) for a Document, else a new empty dict

    """
    if isinstance(tree, Document):
        return tree.meta
    return {}


class NamedAction:
    """An action that only fires on nodes of the given kinds.

    Parameters
    ----------
    key : str
        One or more kind names separated by ``|`` (e.g. ``"Emph|Strong"``)
    function : callable
        Called as ``function(node)`` for matching nodes; its result is the
        action result

    Raises
    ------
    ConfigurationError
        If the key is not a string, contains an empty kind name, or the
        function is not callable

    """

    __slots__ = ("key", "names", "function")

    def __init__(self, key: str, function: Callable[[Node], ActionResult]):
        """Split the key into kind names and validate the function."""
        if not isinstance(key, str):
            raise ConfigurationError(
                f"Action key must be a string of kind names, got {type(key).__name__}: {key!r}",
                parameter_name="key",
                parameter_value=key,
            )
        names = frozenset(key.split(NAME_SEPARATOR))
        if "" in names:
            raise ConfigurationError(f"Empty kind name in action key {key!r}", parameter_name="key", parameter_value=key)
        if not callable(function):
            raise ConfigurationError(
                f"Action for {key!r} must be callable, got {type(function).__name__}: {function!r}",
                parameter_name="action",
                parameter_value=function,
            )

        unknown = sorted(names.difference(NODE_CLASSES))
        if unknown:
            logger.warning(f"Action key {key!r} names unknown node kinds {unknown}; they will never match")

        self.key = key
        self.names = names
        self.function = function

    def __call__(self, node: Node, format: str, meta: dict) -> ActionResult:
        """Call the wrapped function if the node's kind is one of ``names``."""
        if node.name not in self.names:
            return None
        return self.function(node)

    def __repr__(self) -> str:
        return f"NamedAction({self.key!r}, {self.function!r})"


class Filter:
    """An immutable, ordered sequence of actions applied to a pandoc AST.

    Build filters with ``from_actions`` (plain actions) or
    ``from_named_actions`` (actions keyed by kind names). ``from_args``
    accepts either form as positional arguments and decides once, at
    construction, which one it was given.

    Parameters
    ----------
    actions : iterable of callable, default = empty
        Plain actions, each called as ``action(node, format, meta)``

    Raises
    ------
    ConfigurationError
        If any action is not callable; the offending value is available as
        ``parameter_value``

    """

    __slots__ = ("_actions",)

    def __init__(self, actions: Iterable[Action] = ()):
        """Validate and freeze the action sequence."""
        frozen = tuple(actions)
        for action in frozen:
            if not callable(action):
                raise ConfigurationError(
                    f"Filter actions must be callable, got {type(action).__name__}: {action!r}",
                    parameter_name="actions",
                    parameter_value=action,
                )
        self._actions = frozen

    @property
    def actions(self) -> tuple[Action, ...]:
        """The actions in the order they are applied."""
        return self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._actions)!r})"

    @classmethod
    def from_actions(cls, actions: Iterable[Action]) -> Filter:
        """Create a filter whose actions fire on every node.

        Parameters
        ----------
        actions : iterable of callable
            Each called as ``action(node, format, meta)``

        Returns
        -------
        Filter
            The new filter

        Raises
        ------
        ConfigurationError
            If any element is not callable

        """
        return cls(actions)

    @classmethod
    def from_named_actions(cls, named_actions: NamedActions) -> Filter:
        """Create a filter from actions keyed by kind names.

        Parameters
        ----------
        named_actions : mapping or iterable of (str, callable)
            Keys are kind names, several alternatives joined by ``|``;
            functions are called as ``function(node)``. Order is preserved.

        Returns
        -------
        Filter
            The new filter, one action per key

        Raises
        ------
        ConfigurationError
            If a pair is malformed, a key is empty or not a string, or a
            function is not callable

        Examples
        --------
        >>> Filter.from_named_actions([("Emph|Strong", lambda node: node.content)])

        """
        pairs = named_actions.items() if isinstance(named_actions, Mapping) else named_actions

        wrapped: list[Action] = []
        for pair in pairs:
            try:
                key, function = pair
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Named actions must be (key, action) pairs, got {pair!r}",
                    parameter_name="named_actions",
                    parameter_value=pair,
                    original_error=e,
                ) from e
            wrapped.append(NamedAction(key, function))
        return cls(wrapped)

    @classmethod
    def from_args(cls, *args: Any) -> Filter:
        """Create a filter from positional arguments of either form.

        - A single mapping is taken as named actions.
        - An even, non-zero number of arguments whose first one is not
          callable is taken as ``key, action, key, action, ...``.
        - Anything else is taken as a list of plain actions.

        Examples
        --------
        >>> Filter.from_args("Header", flatten, "Superscript|Subscript", drop)
        >>> Filter.from_args(strip_raw_html)

        """
        if len(args) == 1 and isinstance(args[0], Mapping):
            return cls.from_named_actions(args[0])
        if args and len(args) % 2 == 0 and not callable(args[0]):
            return cls.from_named_actions(zip(args[0::2], args[1::2]))
        return cls.from_actions(args)

    def apply(self, tree: Tree, format: Optional[str] = DEFAULT_FORMAT, metadata: Optional[dict] = None) -> Tree:
        """Apply every action to a tree, one full pass per action.

        Parameters
        ----------
        tree : Document, Node or list of Node
            The tree to filter; it is modified in place
        format : str, default = ""
            Target format passed to plain actions
        metadata : dict, optional
            Metadata passed to plain actions. Defaults to the Document's
            ``meta`` when the tree is a Document, else to an empty dict.

        Returns
        -------
        Document, Node or list of Node
            The same tree object, modified in place

        Raises
        ------
        TransformError
            If an action returns something other than None, a node or a
            list of nodes. Exceptions raised inside actions propagate
            unchanged.

        """
        if format is None:
            format = DEFAULT_FORMAT
        if metadata is None:
            metadata = extract_metadata(tree)

        logger.debug(f"Applying {len(self._actions)} action(s) with format {format!r}")
        for index, action in enumerate(self._actions, start=1):
            logger.debug(f"Pass {index}: {action!r}")
            transform(tree, action, format, metadata)
        return tree


__all__ = ["Filter", "NamedAction", "NamedActions", "extract_metadata"]
