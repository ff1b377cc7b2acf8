"""Tests for the Difference record."""

from __future__ import annotations

import pytest

from object_tree.comparison.differences import Difference, escape_format
from object_tree.tree.edges import Edge
from object_tree.tree.nodes import NodeType, ObjectTreeNode


@pytest.fixture()
def nodes() -> tuple[ObjectTreeNode, ObjectTreeNode]:
    expected_root = ObjectTreeNode(["a"], NodeType.COLLECTION)
    actual_root = ObjectTreeNode(["b"], NodeType.COLLECTION)
    return (
        ObjectTreeNode("a", NodeType.PRIMITIVE, expected_root, Edge.for_index(0)),
        ObjectTreeNode("b", NodeType.PRIMITIVE, actual_root, Edge.for_index(0)),
    )


class TestEscapeFormat:
    """Tests for escape_format."""

    def test_braces_doubled(self) -> None:
        assert escape_format("{x}") == "{{x}}"
        assert escape_format("{x}").format() == "{x}"


class TestDifference:
    """Tests for Difference construction and rendering."""

    def test_requires_both_nodes(self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]) -> None:
        with pytest.raises(TypeError, match="both an expected and an actual node"):
            Difference(nodes[0], None)  # type: ignore[arg-type]

    def test_template_filled_with_display_values(
        self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]
    ) -> None:
        difference = Difference(*nodes, '"a"', '"b"', "<root>[0]: expected value {0} but was {1}.")
        assert difference.message == '<root>[0]: expected value "a" but was "b".'
        assert str(difference) == difference.message

    def test_render_with_other_display_values(
        self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]
    ) -> None:
        difference = Difference(*nodes, '"a"', '"b"', "{0} vs {1}")
        assert difference.render("x", "y") == "x vs y"

    def test_from_message_escapes_braces(
        self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]
    ) -> None:
        difference = Difference.from_message(*nodes, "<root>['{key}'] is odd")
        assert difference.message == "<root>['{key}'] is odd"
        assert difference.expected_display is None

    def test_malformed_template_falls_back_to_raw_text(
        self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]
    ) -> None:
        difference = Difference(*nodes, message_format="broken {2}")
        assert difference.message == "broken {2}"

    def test_path_is_expected_node_path(self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]) -> None:
        difference = Difference.from_message(*nodes, "x")
        assert str(difference.path) == "<root>[0]"

    def test_repr(self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]) -> None:
        assert repr(Difference.from_message(*nodes, "x")) == "Difference('x')"

    def test_immutable(self, nodes: tuple[ObjectTreeNode, ObjectTreeNode]) -> None:
        difference = Difference.from_message(*nodes, "x")
        with pytest.raises(AttributeError):
            difference.message_format = "y"  # type: ignore[misc]
