"""Public API functions for object-tree.

This module provides the four user-facing functions: build_tree,
find_differences, is_equal and tree_hash.  Each comparison call creates a
fresh ObjectTreeEqualityComparer from the given options, so no state is
shared between calls.

Every function accepts either full ``options`` or the ``node_filter``
shorthand; when both are given the filter replaces ``options.node_filter``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from object_tree.comparison.comparator import ObjectTreeEqualityComparer
from object_tree.config import CompareOptions, TreeOptions
from object_tree.tree.builder import ObjectTree

if TYPE_CHECKING:
    from object_tree.comparison.differences import Difference
    from object_tree.protocols import NodeFilterLike

__all__ = ["build_tree", "find_differences", "is_equal", "tree_hash"]


def as_compare_options(
    options: TreeOptions | None, node_filter: NodeFilterLike | None = None
) -> CompareOptions | None:
    """Normalise tree options and a filter shorthand into CompareOptions."""
    if options is not None and not isinstance(options, CompareOptions):
        options = CompareOptions(
            node_filter=options.node_filter,
            include_private_members=options.include_private_members,
            default_spawn_strategy=options.default_spawn_strategy,
        )
    if node_filter is None:
        return options
    if options is None:
        return CompareOptions(node_filter=node_filter)
    return dataclasses.replace(options, node_filter=node_filter)


def build_tree(
    value: Any,
    options: TreeOptions | None = None,
    *,
    node_filter: NodeFilterLike | None = None,
) -> ObjectTree:
    """Return the object tree of ``value``.

    An existing ``ObjectTree`` is returned unchanged when it already matches
    the options.

    Args:
        value:       Any value, ``ObjectTree`` or ``ObjectTreeNode``.
        options:     Tree options.  Defaults to ``TreeOptions()`` when None.
        node_filter: Excludes nodes from the tree.

    Returns:
        An ``ObjectTree`` rooted at ``value``.
    """
    return ObjectTree.create(value, options, node_filter=node_filter)


def find_differences(
    expected: Any,
    actual: Any,
    options: TreeOptions | None = None,
    *,
    node_filter: NodeFilterLike | None = None,
) -> Iterator[Difference]:
    """Return a lazy iterator over the differences between two values.

    Args:
        expected:    The expected value (or its tree).
        actual:      The actual value (or its tree).
        options:     Filtering and tolerance options.  Defaults when None.
        node_filter: Excludes nodes from both trees.

    Returns:
        A one-shot iterator of ``Difference`` records in depth-first order.

    Raises:
        CircularReferenceError: While iterating, if the trees nest deeper
            than ``MAX_DEPTH`` levels.
        MemberAccessError: While iterating, if reading a member raises.
    """
    compare_options = as_compare_options(options, node_filter)
    comparer = ObjectTreeEqualityComparer.create(compare_options)
    return comparer.find_differences(expected, actual, compare_options)


def is_equal(
    expected: Any,
    actual: Any,
    options: TreeOptions | None = None,
    *,
    node_filter: NodeFilterLike | None = None,
) -> bool:
    """Return True if the two values have no structural differences.

    Stops at the first difference found.
    """
    return next(find_differences(expected, actual, options, node_filter=node_filter), None) is None


def tree_hash(
    value: Any,
    options: TreeOptions | None = None,
    *,
    node_filter: NodeFilterLike | None = None,
) -> int:
    """Return a structural hash of ``value`` consistent with ``is_equal``.

    Args:
        value:       Any value, ``ObjectTree`` or ``ObjectTreeNode``.
        options:     Filtering and tolerance options.  Defaults when None.
        node_filter: Excludes nodes before hashing.

    Returns:
        A non-negative integer below 2**64.
    """
    compare_options = as_compare_options(options, node_filter)
    return ObjectTreeEqualityComparer.create(compare_options).hash(value, compare_options)
