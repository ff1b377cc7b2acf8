"""Tests for ObjectTree construction and the create/reuse factory.

Verifies:
- New trees get the default strategy chain (filtered when a filter is set)
- ObjectTree.create reuses trees whose chain already matches the options
- Incompatible options rebuild a tree from the same root value
- Reuse and rebuild decisions are logged at DEBUG
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from object_tree.config import CompareOptions, TreeOptions
from object_tree.tree.builder import ObjectTree
from object_tree.tree.filters import NodeFilter
from object_tree.tree.nodes import NodeType, ObjectTreeNode
from object_tree.tree.spawn import (
    BasicSpawnStrategy,
    DuplicateCheckingSpawnStrategy,
    FilteredSpawnStrategy,
)


@dataclass
class Employee:
    id: int
    full_name: str


class TestObjectTreeConstruction:
    """Tests for ObjectTree(value, options)."""

    def test_default_chain(self) -> None:
        tree = ObjectTree(Employee(1, "Ann"))
        strategy = tree.root.spawn_strategy
        assert isinstance(strategy, DuplicateCheckingSpawnStrategy)
        assert isinstance(strategy.backing, BasicSpawnStrategy)
        assert tree.options is None

    def test_filter_adds_outer_layer(self) -> None:
        node_filter = NodeFilter.excluding("full_name")
        tree = ObjectTree(Employee(1, "Ann"), node_filter=node_filter)
        strategy = tree.root.spawn_strategy
        assert isinstance(strategy, FilteredSpawnStrategy)
        assert strategy.node_filter is node_filter
        assert isinstance(strategy.backing, DuplicateCheckingSpawnStrategy)
        assert [str(child.path) for child in tree.root.children] == ["<root>.id"]

    def test_node_filter_shorthand_merges_into_options(self) -> None:
        node_filter = NodeFilter.excluding("id")
        tree = ObjectTree(1, TreeOptions(include_private_members=True), node_filter=node_filter)
        assert tree.options == TreeOptions(node_filter=node_filter, include_private_members=True)

    def test_custom_strategy_used_as_is(self) -> None:
        strategy = DuplicateCheckingSpawnStrategy()
        tree = ObjectTree([1], TreeOptions(default_spawn_strategy=strategy))
        assert tree.root.spawn_strategy is strategy

    def test_value_and_root(self) -> None:
        employee = Employee(1, "Ann")
        tree = ObjectTree(employee)
        assert tree.value is employee
        assert tree.root.is_root
        assert tree.root.node_type is NodeType.OBJECT
        assert repr(tree) == "ObjectTree(root=ObjectTreeNode(path=<root>, node_type=object))"


class TestObjectTreeCreate:
    """Tests for ObjectTree.create."""

    def test_raw_value_builds_new_tree(self) -> None:
        tree = ObjectTree.create([1, 2])
        assert isinstance(tree, ObjectTree)
        assert tree.value == [1, 2]

    def test_tree_without_options_returned_as_is(self) -> None:
        tree = ObjectTree(Employee(1, "Ann"), node_filter=NodeFilter.excluding("id"))
        assert ObjectTree.create(tree) is tree

    def test_same_filter_reuses_tree(self) -> None:
        """Re-requesting a tree with an identical filter does not rebuild it."""
        node_filter = NodeFilter.excluding("full_name")
        tree = ObjectTree(Employee(1, "Ann"), node_filter=node_filter)
        assert ObjectTree.create(tree, node_filter=node_filter) is tree
        assert ObjectTree.create(tree, CompareOptions(node_filter=node_filter)) is tree

    def test_equal_default_options_reuse_tree(self) -> None:
        tree = ObjectTree(Employee(1, "Ann"))
        assert ObjectTree.create(tree, TreeOptions()) is tree

    def test_different_filter_rebuilds_from_value(self) -> None:
        employee = Employee(1, "Ann")
        tree = ObjectTree(employee)
        rebuilt = ObjectTree.create(tree, node_filter=NodeFilter.excluding("id"))
        assert rebuilt is not tree
        assert rebuilt.root is not tree.root
        assert rebuilt.value is employee
        assert [str(child.path) for child in rebuilt.root.children] == ["<root>.full_name"]

    def test_private_member_setting_rebuilds(self) -> None:
        tree = ObjectTree(Employee(1, "Ann"))
        rebuilt = ObjectTree.create(tree, TreeOptions(include_private_members=True))
        assert rebuilt.root is not tree.root

    def test_custom_strategy_of_same_type_reuses(self) -> None:
        tree = ObjectTree([1])
        options = TreeOptions(default_spawn_strategy=DuplicateCheckingSpawnStrategy())
        assert ObjectTree.create(tree, options) is tree

    def test_custom_strategy_of_other_type_rebuilds(self) -> None:
        tree = ObjectTree([1])
        strategy = BasicSpawnStrategy()
        rebuilt = ObjectTree.create(tree, TreeOptions(default_spawn_strategy=strategy))
        assert rebuilt.root.spawn_strategy is strategy

    def test_node_without_options_becomes_root(self) -> None:
        tree = ObjectTree([[1]])
        (inner,) = tree.root.children
        wrapped = ObjectTree.create(inner)
        assert wrapped.root is inner
        assert str(wrapped.root.path) == "<root>[0]"

    def test_node_with_incompatible_options_is_rebuilt_as_root(self) -> None:
        tree = ObjectTree([[1]])
        (inner,) = tree.root.children
        wrapped = ObjectTree.create(inner, node_filter=NodeFilter.excluding("x"))
        assert wrapped.root is not inner
        assert wrapped.root.is_root
        assert wrapped.value is inner.value

    def test_unknown_custom_chain_rebuilt(self) -> None:
        root = ObjectTreeNode([1], NodeType.COLLECTION, spawn_strategy=BasicSpawnStrategy())
        rebuilt = ObjectTree.create(root, TreeOptions())
        assert rebuilt.root is not root


class TestObjectTreeLogging:
    """Tests for the DEBUG records emitted by the factory."""

    def test_reuse_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        tree = ObjectTree([1])
        with caplog.at_level(logging.DEBUG, logger="object_tree.tree.builder"):
            ObjectTree.create(tree, TreeOptions())
        assert "Reusing root node" in caplog.text

    def test_rebuild_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        tree = ObjectTree([1])
        with caplog.at_level(logging.DEBUG, logger="object_tree.tree.builder"):
            ObjectTree.create(tree, TreeOptions(include_private_members=True))
        assert "Rebuilding tree" in caplog.text
