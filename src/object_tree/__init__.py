"""Object tree - structural equality and difference reports for object graphs."""

from __future__ import annotations

from object_tree.api import build_tree, find_differences, is_equal, tree_hash
from object_tree.asserts import assert_tree_equal, assert_tree_not_equal
from object_tree.comparison import (
    DefaultValueEqualityComparer,
    DefaultValueFormatter,
    Difference,
    ObjectTreeEqualityComparer,
)
from object_tree.config import CompareOptions, TreeOptions
from object_tree.exceptions import (
    CircularReferenceError,
    MemberAccessError,
    ObjectTreeAssertionError,
    ObjectTreeEqualError,
    ObjectTreeError,
    ObjectTreeNotEqualError,
)
from object_tree.tree import (
    Edge,
    EdgePath,
    MemberDescriptor,
    NodeFilter,
    NodeType,
    ObjectTree,
    ObjectTreeNode,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "CircularReferenceError",
    "CompareOptions",
    "DefaultValueEqualityComparer",
    "DefaultValueFormatter",
    "Difference",
    "Edge",
    "EdgePath",
    "MemberAccessError",
    "MemberDescriptor",
    "NodeFilter",
    "NodeType",
    "ObjectTree",
    "ObjectTreeAssertionError",
    "ObjectTreeEqualError",
    "ObjectTreeEqualityComparer",
    "ObjectTreeError",
    "ObjectTreeNode",
    "ObjectTreeNotEqualError",
    "TreeOptions",
    "assert_tree_equal",
    "assert_tree_not_equal",
    "build_tree",
    "find_differences",
    "is_equal",
    "tree_hash",
]
