"""Spawn strategies: the policies that produce a node's children.

Strategies are layered, each wrapping a *backing* strategy::

    FilteredSpawnStrategy(filter)            drops excluded children
      └─ DuplicateCheckingSpawnStrategy()    turns revisited values into duplicates
           └─ BasicSpawnStrategy(options)    introspects members and elements

Every node carries the *outermost* strategy of the chain.  Inner layers are
called with ``spawn_override`` set to that outermost strategy and stamp it
onto the nodes they create, so expanding a grandchild goes through the whole
chain again.

``DuplicateCheckingSpawnStrategy`` keeps an identity map (``id(value)`` to
first node) for the lifetime of the strategy.  Each tree gets its own
instance; sharing one across trees makes the second tree see the first
tree's values as already visited.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from object_tree.exceptions import MemberAccessError
from object_tree.tree.edges import Edge
from object_tree.tree.introspection import (
    classify,
    instance_members,
    iterate_elements,
    read_member,
)
from object_tree.tree.nodes import NodeType, ObjectTreeNode

if TYPE_CHECKING:
    from object_tree.config import TreeOptions
    from object_tree.protocols import NodeFilterLike, SpawnStrategy

__all__ = [
    "BasicSpawnStrategy",
    "DuplicateCheckingSpawnStrategy",
    "EmptySpawnStrategy",
    "FilteredSpawnStrategy",
]

logger = logging.getLogger(__name__)


class EmptySpawnStrategy:
    """A strategy that never produces children.

    Used by duplicate nodes.  It cannot create roots.
    """

    _instance: EmptySpawnStrategy | None = None

    @classmethod
    def instance(cls) -> EmptySpawnStrategy:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def create_root_node(
        self, value: Any, spawn_override: SpawnStrategy | None = None
    ) -> ObjectTreeNode:
        msg = "EmptySpawnStrategy cannot create root nodes"
        raise NotImplementedError(msg)

    def create_child_nodes(
        self, node: ObjectTreeNode, spawn_override: SpawnStrategy | None = None
    ) -> Iterator[ObjectTreeNode]:
        return iter(())


class BasicSpawnStrategy:
    """Produce children by introspecting members and collection elements.

    Object nodes get one child per member, collection nodes one child per
    element (keyed for mappings, indexed otherwise).  Primitive, unknown and
    duplicate nodes, and nodes holding None, have no children.

    Args:
        options: Tree options; only ``include_private_members`` is read here.
    """

    def __init__(self, options: TreeOptions | None = None) -> None:
        self.options = options

    @property
    def include_private_members(self) -> bool:
        return bool(self.options is not None and self.options.include_private_members)

    def create_root_node(
        self, value: Any, spawn_override: SpawnStrategy | None = None
    ) -> ObjectTreeNode:
        strategy = spawn_override if spawn_override is not None else self
        return ObjectTreeNode(value, classify(value), spawn_strategy=strategy)

    def create_child_nodes(
        self, node: ObjectTreeNode, spawn_override: SpawnStrategy | None = None
    ) -> Iterator[ObjectTreeNode]:
        strategy = spawn_override if spawn_override is not None else self
        value = node.value
        if node.original is not None or value is None:
            return
        if node.node_type is NodeType.OBJECT:
            yield from self._member_nodes(node, strategy)
        elif node.node_type is NodeType.COLLECTION:
            yield from self._element_nodes(node, strategy)

    def _member_nodes(
        self, node: ObjectTreeNode, strategy: SpawnStrategy
    ) -> Iterator[ObjectTreeNode]:
        value = node.value
        for member in instance_members(value, include_private=self.include_private_members):
            try:
                child_value = read_member(value, member)
            except Exception as exc:
                logger.debug("Reading %s at %s raised %r", member, node.path, exc)
                raise MemberAccessError(member.name, member.declaring_type) from exc
            yield ObjectTreeNode(
                child_value,
                classify(child_value, member.value_type),
                node,
                Edge.for_member(member),
                strategy,
            )

    @staticmethod
    def _element_nodes(
        node: ObjectTreeNode, strategy: SpawnStrategy
    ) -> Iterator[ObjectTreeNode]:
        value = node.value
        if isinstance(value, Mapping):
            for key, child_value in value.items():
                yield ObjectTreeNode(
                    child_value, classify(child_value), node, Edge.for_key(key), strategy
                )
            return
        for index, child_value in enumerate(iterate_elements(value)):
            yield ObjectTreeNode(
                child_value, classify(child_value), node, Edge.for_index(index), strategy
            )


class DuplicateCheckingSpawnStrategy:
    """Replace revisited values with duplicate nodes.

    Non-primitive, non-None values are remembered by identity the first time
    a node holds them.  When a later child holds the same object:

    - if the child sits at the very path of the first node, the first node
      itself is yielded;
    - otherwise a childless duplicate node pointing at the first node is
      yielded in its place.

    Args:
        backing: The strategy that produces candidate children.  Defaults to
            ``BasicSpawnStrategy(options)``.
        options: Tree options for the default backing strategy.

    Raises:
        ValueError: If ``backing`` already checks for duplicates.
    """

    def __init__(
        self,
        backing: SpawnStrategy | None = None,
        *,
        options: TreeOptions | None = None,
    ) -> None:
        if isinstance(backing, DuplicateCheckingSpawnStrategy):
            msg = "Cannot add duplicate checking to a spawn strategy that already has it"
            raise ValueError(msg)
        self.backing: SpawnStrategy = (
            backing if backing is not None else BasicSpawnStrategy(options)
        )
        self._visited: dict[int, ObjectTreeNode] = {}

    def create_root_node(
        self, value: Any, spawn_override: SpawnStrategy | None = None
    ) -> ObjectTreeNode:
        return self.backing.create_root_node(
            value, spawn_override if spawn_override is not None else self
        )

    def create_child_nodes(
        self, node: ObjectTreeNode, spawn_override: SpawnStrategy | None = None
    ) -> Iterator[ObjectTreeNode]:
        strategy = spawn_override if spawn_override is not None else self
        # Seeding the parent first is what makes a root-to-root cycle visible.
        self._remember(node)
        parent_path = node.path
        for child in self.backing.create_child_nodes(node, strategy):
            original = self._remember(child)
            if original is None or original is child:
                yield child
            elif original.path == parent_path.child(child.edge):  # type: ignore[arg-type]
                yield original
            else:
                yield ObjectTreeNode.duplicate_of(
                    original, node, child.edge  # type: ignore[arg-type]
                )

    def _remember(self, node: ObjectTreeNode) -> ObjectTreeNode | None:
        """Return the first node seen for ``node.value``, or None if not tracked."""
        if node.node_type is NodeType.PRIMITIVE or node.value is None:
            return None
        return self._visited.setdefault(id(node.value), node)


class FilteredSpawnStrategy:
    """Apply a node filter to the children of a backing strategy.

    Args:
        node_filter: Any object with an ``apply(nodes)`` method.
        backing:     Defaults to a fresh ``DuplicateCheckingSpawnStrategy``.
        options:     Tree options for the default backing strategy.

    Raises:
        TypeError: If ``node_filter`` is None.
    """

    def __init__(
        self,
        node_filter: NodeFilterLike,
        backing: SpawnStrategy | None = None,
        *,
        options: TreeOptions | None = None,
    ) -> None:
        if node_filter is None:
            msg = "node_filter is required"
            raise TypeError(msg)
        self.node_filter = node_filter
        self.backing: SpawnStrategy = (
            backing if backing is not None else DuplicateCheckingSpawnStrategy(options=options)
        )

    def create_root_node(
        self, value: Any, spawn_override: SpawnStrategy | None = None
    ) -> ObjectTreeNode:
        return self.backing.create_root_node(
            value, spawn_override if spawn_override is not None else self
        )

    def create_child_nodes(
        self, node: ObjectTreeNode, spawn_override: SpawnStrategy | None = None
    ) -> Iterator[ObjectTreeNode]:
        strategy = spawn_override if spawn_override is not None else self
        return iter(self.node_filter.apply(self.backing.create_child_nodes(node, strategy)))
