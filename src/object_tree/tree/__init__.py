"""Tree subpackage: object-graph tree construction primitives.

Re-exports the public API for the tree module:
- Edge, EdgePath, MemberDescriptor, MemberKind: hops between nodes and their paths
- NodeType, ObjectTreeNode: tree vertices and their classification
- BasicSpawnStrategy, DuplicateCheckingSpawnStrategy, FilteredSpawnStrategy,
  EmptySpawnStrategy: child-producing strategies
- NodeFilter: predicate-based node exclusion
- ObjectTree: owns a root node and decides when a tree can be reused
"""

from object_tree.tree.builder import ObjectTree
from object_tree.tree.edges import Edge, EdgePath, MemberDescriptor, MemberKind
from object_tree.tree.filters import NodeFilter
from object_tree.tree.nodes import NodeType, ObjectTreeNode
from object_tree.tree.spawn import (
    BasicSpawnStrategy,
    DuplicateCheckingSpawnStrategy,
    EmptySpawnStrategy,
    FilteredSpawnStrategy,
)

__all__ = [
    "BasicSpawnStrategy",
    "DuplicateCheckingSpawnStrategy",
    "Edge",
    "EdgePath",
    "EmptySpawnStrategy",
    "FilteredSpawnStrategy",
    "MemberDescriptor",
    "MemberKind",
    "NodeFilter",
    "NodeType",
    "ObjectTree",
    "ObjectTreeNode",
]
