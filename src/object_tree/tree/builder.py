"""ObjectTree: owns the root node of an object graph and decides reuse.

``ObjectTree(value, options)`` always builds a new tree.  ``ObjectTree.create``
is the factory used by the comparison entry points: it accepts raw values,
existing trees and bare nodes, and rebuilds only when the requested options
would shape the tree differently from how it was already built.

Default strategy chain for a new tree::

    options.default_spawn_strategy                        if set, used as-is
    FilteredSpawnStrategy(DuplicateChecking(Basic))       if a filter is set
    DuplicateCheckingSpawnStrategy(Basic)                 otherwise

Reuse rules when ``value`` is a tree or node and options are given:

- with ``default_spawn_strategy``: reuse when the root's strategy is that
  strategy or an instance of the same class;
- otherwise: reuse when the root's chain is a default chain whose filter and
  private-member setting match the options.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from object_tree.config import TreeOptions
from object_tree.tree.nodes import ObjectTreeNode
from object_tree.tree.spawn import (
    BasicSpawnStrategy,
    DuplicateCheckingSpawnStrategy,
    FilteredSpawnStrategy,
)

if TYPE_CHECKING:
    from object_tree.protocols import NodeFilterLike, SpawnStrategy

__all__ = ["ObjectTree"]

logger = logging.getLogger(__name__)


class ObjectTree:
    """A tree over the object graph reachable from one root value.

    Args:
        value:       The root value.
        options:     Tree options; None for the defaults.
        node_filter: Shorthand that sets ``options.node_filter``.
    """

    __slots__ = ("options", "root")

    def __init__(
        self,
        value: Any,
        options: TreeOptions | None = None,
        *,
        node_filter: NodeFilterLike | None = None,
    ) -> None:
        self.options: TreeOptions | None = _merge_filter(options, node_filter)
        self.root: ObjectTreeNode = _new_root(value, self.options)

    @classmethod
    def _from_root(cls, root: ObjectTreeNode, options: TreeOptions | None) -> ObjectTree:
        tree = cls.__new__(cls)
        tree.options = options
        tree.root = root
        return tree

    @classmethod
    def create(
        cls,
        value: Any,
        options: TreeOptions | None = None,
        *,
        node_filter: NodeFilterLike | None = None,
    ) -> ObjectTree:
        """Return a tree for ``value``, reusing existing trees where possible.

        Args:
            value:       A raw value, an ``ObjectTree`` or an ``ObjectTreeNode``.
            options:     Tree options; None accepts any existing tree as-is.
            node_filter: Shorthand that sets ``options.node_filter``.

        Returns:
            ``value`` itself when it is a tree that already satisfies the
            options, otherwise a tree over the same underlying value.
        """
        options = _merge_filter(options, node_filter)
        if isinstance(value, ObjectTree):
            if options is None:
                return value
            root = _reuse_or_rebuild(value.root, options)
            return value if root is value.root else cls._from_root(root, options)
        if isinstance(value, ObjectTreeNode):
            root = value if options is None else _reuse_or_rebuild(value, options)
            return cls._from_root(root, options)
        return cls(value, options)

    @property
    def value(self) -> Any:
        """The root value."""
        return self.root.value

    def __repr__(self) -> str:
        return f"ObjectTree(root={self.root!r})"


def _merge_filter(
    options: TreeOptions | None, node_filter: NodeFilterLike | None
) -> TreeOptions | None:
    if node_filter is None:
        return options
    if options is None:
        return TreeOptions(node_filter=node_filter)
    return dataclasses.replace(options, node_filter=node_filter)


def _new_root(value: Any, options: TreeOptions | None) -> ObjectTreeNode:
    if options is not None and options.default_spawn_strategy is not None:
        return options.default_spawn_strategy.create_root_node(value)
    strategy: SpawnStrategy = DuplicateCheckingSpawnStrategy(options=options)
    if options is not None and options.node_filter is not None:
        strategy = FilteredSpawnStrategy(options.node_filter, strategy)
    return strategy.create_root_node(value)


def _reuse_or_rebuild(root: ObjectTreeNode, options: TreeOptions) -> ObjectTreeNode:
    if _can_reuse(root.spawn_strategy, options):
        logger.debug("Reusing root node %r for %r", root, options)
        return root
    logger.debug("Rebuilding tree from root value for %r", options)
    return _new_root(root.value, options)


def _can_reuse(strategy: SpawnStrategy, options: TreeOptions) -> bool:
    wanted = options.default_spawn_strategy
    if wanted is not None:
        return strategy is wanted or type(strategy) is type(wanted)
    return _chain_key(strategy) == options.tree_key()


def _chain_key(strategy: Any) -> tuple[Any, ...] | None:
    """Describe a default strategy chain like ``TreeOptions.tree_key``, or None."""
    node_filter = None
    checks_duplicates = False
    while True:
        if isinstance(strategy, FilteredSpawnStrategy):
            if node_filter is not None:
                return None
            node_filter = strategy.node_filter
            strategy = strategy.backing
        elif isinstance(strategy, DuplicateCheckingSpawnStrategy):
            checks_duplicates = True
            strategy = strategy.backing
        elif isinstance(strategy, BasicSpawnStrategy) and checks_duplicates:
            return (node_filter, strategy.include_private_members, None)
        else:
            return None
