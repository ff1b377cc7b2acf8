"""Protocols for the object-tree extension points.

Custom spawn strategies, node filters, value comparers and value formatters
need no base class: any object with conformant methods passes ``isinstance``
checks against these runtime-checkable protocols.

Example::

    from object_tree.protocols import ValueFormatter

    class ReprFormatter:
        def format(self, value: object) -> str:
            return repr(value)

    assert isinstance(ReprFormatter(), ValueFormatter)  # structural conformance
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from object_tree.tree.nodes import ObjectTreeNode

__all__ = ["NodeFilterLike", "SpawnStrategy", "ValueEqualityComparer", "ValueFormatter"]


@runtime_checkable
class SpawnStrategy(Protocol):
    """Structural protocol for child-producing strategies.

    ``spawn_override`` is the outermost strategy of a layered chain; nodes
    created by an inner layer must carry it rather than the inner layer.
    """

    def create_root_node(
        self, value: Any, spawn_override: SpawnStrategy | None = None
    ) -> ObjectTreeNode: ...

    def create_child_nodes(
        self, node: ObjectTreeNode, spawn_override: SpawnStrategy | None = None
    ) -> Iterator[ObjectTreeNode]: ...


@runtime_checkable
class NodeFilterLike(Protocol):
    """Anything that can drop nodes from a sequence, preserving order."""

    def apply(self, nodes: Iterable[ObjectTreeNode]) -> Iterable[ObjectTreeNode]: ...


@runtime_checkable
class ValueEqualityComparer(Protocol):
    """Leaf-value equality with a consistent hash."""

    def equals(self, expected: Any, actual: Any) -> bool: ...

    def hash(self, value: Any) -> int: ...


@runtime_checkable
class ValueFormatter(Protocol):
    """Renders a leaf value for difference messages."""

    def format(self, value: Any) -> str: ...
