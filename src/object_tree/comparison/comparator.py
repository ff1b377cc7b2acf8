"""ObjectTreeEqualityComparer: structural comparison of two object trees.

The engine walks both trees in lock-step, depth first, and yields a
``Difference`` for every mismatch.  For each pair of nodes at the same
position:

1. Different paths: one difference, stop.  Only filters or custom
   strategies that rewrite edges can cause this.
2. Either node is a duplicate: check that the aliasing agrees.  The
   duplicate's original path is resolved against the *other* tree's root
   value and compared with the other tree's node at this position.
   Duplicates are never descended into.
3. Different node types: one difference, stop.
4. Different child counts: one difference, then carry on with step 5.
5. Children are matched by edge (member, index or key), not by position.
   An expected child with no counterpart is one difference; matched
   children are compared recursively.
6. Two childless, non-collection nodes: compare values with the value
   comparer.

Differences come out parent before children and in expected-child order,
so the first N are stable between runs.  The walk uses an explicit stack;
going deeper than ``MAX_DEPTH`` levels raises ``CircularReferenceError``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Final

from object_tree.comparison.differences import Difference, escape_format
from object_tree.comparison.formatter import DefaultValueFormatter
from object_tree.comparison.values import DefaultValueEqualityComparer
from object_tree.exceptions import CircularReferenceError
from object_tree.tree.builder import ObjectTree
from object_tree.tree.nodes import NodeType, ObjectTreeNode

if TYPE_CHECKING:
    from object_tree.config import CompareOptions, TreeOptions
    from object_tree.protocols import ValueEqualityComparer, ValueFormatter
    from object_tree.tree.edges import EdgePath

__all__ = ["MAX_DEPTH", "ObjectTreeEqualityComparer"]

logger = logging.getLogger(__name__)

MAX_DEPTH: Final = 1000

_HASH_MASK: Final = (1 << 64) - 1
_CYCLE_HASH: Final = 0x9E3779B97F4A7C15

# One step of a node comparison: a difference to report, or a child pair to descend into.
_Step = Difference | tuple[ObjectTreeNode, ObjectTreeNode]


class ObjectTreeEqualityComparer:
    """Compares values through their object trees.

    Args:
        value_comparer:  Leaf equality; defaults to the shared
                         ``DefaultValueEqualityComparer``.
        value_formatter: Leaf formatting for messages; defaults to the shared
                         ``DefaultValueFormatter``.

    Raises:
        ValueError: If ``value_comparer`` is itself an
            ``ObjectTreeEqualityComparer``.
    """

    def __init__(
        self,
        value_comparer: ValueEqualityComparer | None = None,
        value_formatter: ValueFormatter | None = None,
    ) -> None:
        if isinstance(value_comparer, ObjectTreeEqualityComparer):
            msg = "Cannot use an ObjectTreeEqualityComparer as a value equality comparer"
            raise ValueError(msg)
        if value_comparer is None:
            value_comparer = DefaultValueEqualityComparer.instance()
        self.value_comparer: ValueEqualityComparer = value_comparer
        self.value_formatter: ValueFormatter = (
            value_formatter if value_formatter is not None else DefaultValueFormatter.instance()
        )
        self.options: TreeOptions | None = None

    @classmethod
    def create(cls, options: CompareOptions | None = None) -> ObjectTreeEqualityComparer:
        """Build a comparer from compare options.

        The options' value comparer and formatter are used when set; otherwise
        the default comparer is configured with the options' tolerances.  The
        options also become the default tree options for every comparison.
        """
        if options is None:
            return cls()
        value_comparer = options.value_comparer
        if value_comparer is None:
            value_comparer = DefaultValueEqualityComparer(options)
        comparer = cls(value_comparer, options.value_formatter)
        comparer.options = options
        return comparer

    # ------------------------------------------------------------------
    # Equality and hashing
    # ------------------------------------------------------------------

    def equals(self, x: Any, y: Any, options: TreeOptions | None = None) -> bool:
        """Return True if the trees of ``x`` and ``y`` have no differences."""
        return next(self.find_differences(x, y, options), None) is None

    def hash(self, obj: Any, options: TreeOptions | None = None) -> int:
        """Return a structural hash of ``obj``'s tree.

        Combines edges, child counts and leaf value hashes.  A duplicate node
        contributes the subtree hash of its original, so a shared value and
        an equal copy hash alike.  A duplicate that closes a cycle (its
        original is still being hashed) contributes a fixed marker instead.
        """
        tree = ObjectTree.create(obj, options if options is not None else self.options)
        return self._hash_tree(tree.root)

    def _hash_tree(self, root: ObjectTreeNode) -> int:
        # Finished subtree hashes by node identity; the node is kept so its id stays unique.
        done: dict[int, tuple[ObjectTreeNode, int]] = {}
        active: set[int] = set()
        # Each frame is [node, remaining children, running hash, child waiting on a subtree].
        stack: list[list[Any]] = []
        self._open_hash_frame(root, stack, active, done)
        while stack:
            frame = stack[-1]
            child = frame[3]
            frame[3] = None
            if child is None:
                child = next(frame[1], None)
            if child is None:
                stack.pop()
                active.discard(id(frame[0]))
                done[id(frame[0])] = (frame[0], frame[2])
                continue
            target = child.original if child.original is not None else child
            finished = done.get(id(target))
            if finished is not None:
                subtree_hash = finished[1]
            elif id(target) in active:
                subtree_hash = _CYCLE_HASH
            else:
                # Hash the subtree first, then come back to this child.
                frame[3] = child
                self._open_hash_frame(target, stack, active, done)
                continue
            frame[2] = _mix(frame[2], _mix(hash(child.edge), subtree_hash))
        return done[id(root)][1]

    def _open_hash_frame(
        self,
        node: ObjectTreeNode,
        stack: list[list[Any]],
        active: set[int],
        done: dict[int, tuple[ObjectTreeNode, int]],
    ) -> None:
        children = node.children
        running = _mix(7, len(children))
        if not children:
            # Collections compare by children only, so an empty one hashes no value.
            if node.value is None or node.node_type is NodeType.COLLECTION:
                value_hash = 0
            else:
                value_hash = self.value_comparer.hash(node.value)
            done[id(node)] = (node, _mix(running, value_hash))
            return
        if len(stack) > MAX_DEPTH:
            _raise_too_deep(node)
        active.add(id(node))
        stack.append([node, iter(children), running, None])

    # ------------------------------------------------------------------
    # Differences
    # ------------------------------------------------------------------

    def find_differences(
        self, expected: Any, actual: Any, options: TreeOptions | None = None
    ) -> Iterator[Difference]:
        """Lazily yield the differences between ``expected`` and ``actual``.

        Args:
            expected: Raw value, ``ObjectTree`` or ``ObjectTreeNode``.
            actual:   Raw value, ``ObjectTree`` or ``ObjectTreeNode``.
            options:  Tree options for building (or rebuilding) both trees;
                      defaults to the options the comparer was created with.

        Returns:
            A one-shot iterator.  Calling again re-runs the whole walk.

        Raises:
            CircularReferenceError: While iterating, if the walk goes deeper
                than ``MAX_DEPTH`` levels.
        """
        tree_options = options if options is not None else self.options
        expected_tree = ObjectTree.create(expected, tree_options)
        actual_tree = ObjectTree.create(actual, tree_options)
        return self._walk(expected_tree.root, actual_tree.root)

    def _walk(self, expected: ObjectTreeNode, actual: ObjectTreeNode) -> Iterator[Difference]:
        stack = [self._compare_nodes(expected, actual)]
        while stack:
            step = next(stack[-1], None)
            if step is None:
                stack.pop()
            elif isinstance(step, Difference):
                yield step
            else:
                if len(stack) > MAX_DEPTH:
                    _raise_too_deep(step[0])
                stack.append(self._compare_nodes(*step))

    def _compare_nodes(self, expected: ObjectTreeNode, actual: ObjectTreeNode) -> Iterator[_Step]:
        expected_path = expected.path
        actual_path = actual.path
        if expected_path != actual_path:
            yield Difference.from_message(
                expected, actual, f'Expected path "{expected_path}" but was "{actual_path}"'
            )
            return

        if expected.original is not None or actual.original is not None:
            yield from self._compare_duplicates(expected, actual, expected_path)
            return

        if expected.node_type is not actual.node_type:
            yield Difference.from_message(
                expected,
                actual,
                f"{expected_path}: expected node type {expected.node_type} "
                f"but was {actual.node_type}.",
            )
            return

        expected_children = expected.children
        actual_children = actual.children
        if len(expected_children) != len(actual_children):
            yield Difference.from_message(
                expected,
                actual,
                f"{expected_path}: expected {len(expected_children)} children "
                f"but had {len(actual_children)} children",
            )

        if expected_children:
            by_edge: dict[Any, ObjectTreeNode] = {}
            for child in actual_children:
                by_edge.setdefault(child.edge, child)
            for child in expected_children:
                match = by_edge.get(child.edge)
                if match is None:
                    yield Difference.from_message(
                        expected,
                        actual,
                        f'{expected_path}: expected a child at "{child.edge}" '
                        "but did not find one.",
                    )
                    continue
                yield child, match
        elif not actual_children and expected.node_type is not NodeType.COLLECTION:
            if not self.value_comparer.equals(expected.value, actual.value):
                yield self._value_difference(expected, actual, expected_path)

    def _compare_duplicates(
        self, expected: ObjectTreeNode, actual: ObjectTreeNode, path: EdgePath
    ) -> Iterator[Difference]:
        expected_original = expected.original
        actual_original = actual.original
        originals_differ = (
            expected_original is not None
            and actual_original is not None
            and expected_original.path != actual_original.path
        )
        if actual_original is not None and (expected_original is None or originals_differ):
            resolved, value = actual_original.path.resolve(expected.root.value)
            counterpart = expected.value
        elif expected_original is not None and actual_original is None:
            resolved, value = expected_original.path.resolve(actual.root.value)
            counterpart = actual.value
        else:
            return
        if resolved and not self.value_comparer.equals(value, counterpart):
            yield self._value_difference(expected, actual, path)

    def _value_difference(
        self, expected: ObjectTreeNode, actual: ObjectTreeNode, path: EdgePath
    ) -> Difference:
        return Difference(
            expected,
            actual,
            self.value_formatter.format(expected.value),
            self.value_formatter.format(actual.value),
            f"{escape_format(str(path))}: expected value {{0}} but was {{1}}.",
        )


def _mix(running: int, value: int) -> int:
    return (31 * running + value) & _HASH_MASK


def _raise_too_deep(node: ObjectTreeNode) -> None:
    logger.warning("Object tree walk exceeded %d levels at %s", MAX_DEPTH, node.path)
    msg = f"Exceeded max nested object level of {MAX_DEPTH}"
    raise CircularReferenceError(msg)
