"""ObjectTreeNode dataclass and NodeType StrEnum for object-graph trees.

A node wraps one value of the graph together with its classification, the
edge that reached it and the strategy that produces its children.  Children
are never stored on the node: every access to ``children`` asks the spawn
strategy again, so a node holds a reference to its parent but never to its
children.

A *duplicate* node stands in for a value that already appeared elsewhere in
the same tree.  It points at the first node that held the value through
``original`` and has no children, which is what turns a cyclic graph into a
finite tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from object_tree.tree.edges import Edge, EdgePath

if TYPE_CHECKING:
    from object_tree.protocols import SpawnStrategy

__all__ = ["NodeType", "ObjectTreeNode"]


class NodeType(StrEnum):
    """Enumeration of the four node classifications.

    - UNKNOWN    -> "unknown"    : runtime internals with nothing to compare
    - PRIMITIVE  -> "primitive"  : a leaf value (number, string, date, enum...)
    - OBJECT     -> "object"     : a composite value with named members
    - COLLECTION -> "collection" : a sequence, set or mapping
    """

    UNKNOWN = auto()
    PRIMITIVE = auto()
    OBJECT = auto()
    COLLECTION = auto()


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class ObjectTreeNode:
    """A vertex of an object tree.

    Nodes compare by identity: two nodes wrapping equal values are still
    different vertices.

    Attributes:
        value:          The wrapped value (may be None).
        node_type:      Classification of the value (see NodeType).
        parent:         The parent node, or None for a root.
        edge:           The edge from the parent, or None for a root.
        spawn_strategy: Produces the children.  A fresh
                        ``DuplicateCheckingSpawnStrategy`` when omitted.
        original:       For a duplicate node, the first node holding the
                        same value; None otherwise.

    Raises:
        ValueError: If exactly one of ``parent`` and ``edge`` is given, or
            ``original`` is itself a duplicate.
    """

    value: Any
    node_type: NodeType
    parent: ObjectTreeNode | None = None
    edge: Edge | None = None
    spawn_strategy: SpawnStrategy = None  # type: ignore[assignment]
    original: ObjectTreeNode | None = None
    _path: EdgePath | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if (self.parent is None) != (self.edge is None):
            msg = "A node must have both a parent and an edge, or neither"
            raise ValueError(msg)
        if self.original is not None and self.original.original is not None:
            msg = "The original of a duplicate node cannot itself be a duplicate"
            raise ValueError(msg)
        if self.spawn_strategy is None:
            from object_tree.tree.spawn import DuplicateCheckingSpawnStrategy

            object.__setattr__(self, "spawn_strategy", DuplicateCheckingSpawnStrategy())

    @classmethod
    def duplicate_of(
        cls, original: ObjectTreeNode, parent: ObjectTreeNode, edge: Edge
    ) -> ObjectTreeNode:
        """Return a childless node standing in for ``original`` under ``parent``."""
        from object_tree.tree.spawn import EmptySpawnStrategy

        if original.original is not None:
            original = original.original
        return cls(
            original.value,
            original.node_type,
            parent,
            edge,
            EmptySpawnStrategy.instance(),
            original,
        )

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_duplicate(self) -> bool:
        return self.original is not None

    @property
    def root(self) -> ObjectTreeNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def path(self) -> EdgePath:
        """The edge path from the root to this node (computed once)."""
        if self._path is None:
            object.__setattr__(self, "_path", self._build_path())
        return self._path  # type: ignore[return-value]

    @property
    def children(self) -> tuple[ObjectTreeNode, ...]:
        """Child nodes, produced by the spawn strategy on every access."""
        return tuple(self.spawn_strategy.create_child_nodes(self))

    def _build_path(self) -> EdgePath:
        edges: list[Edge] = []
        seen: set[int] = set()
        prefix: tuple[Edge, ...] = ()
        node: ObjectTreeNode | None = self
        while node is not None and node.parent is not None:
            if node is not self and node._path is not None:
                prefix = node._path.edges
                break
            if id(node) in seen:
                msg = "Parent chain contains a cycle"
                raise ValueError(msg)
            seen.add(id(node))
            edges.append(node.edge)  # type: ignore[arg-type]
            node = node.parent
        return EdgePath((*prefix, *reversed(edges)))

    def __repr__(self) -> str:
        suffix = f", original={self.original.path}" if self.original is not None else ""
        return f"ObjectTreeNode(path={self.path}, node_type={self.node_type}{suffix})"
