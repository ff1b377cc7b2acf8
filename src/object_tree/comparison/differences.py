"""Difference: one mismatch found between two object trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from object_tree.tree.edges import EdgePath
    from object_tree.tree.nodes import ObjectTreeNode

__all__ = ["Difference", "escape_format"]


def escape_format(text: str) -> str:
    """Escape braces so ``text`` survives ``str.format`` unchanged."""
    return text.replace("{", "{{").replace("}", "}}")


@dataclass(frozen=True, slots=True, eq=False)
class Difference:
    """An immutable record of one mismatch.

    Attributes:
        expected:         Node from the expected tree.
        actual:           Node from the actual tree at the same position.
        expected_display: Formatted expected value, when the message shows it.
        actual_display:   Formatted actual value, when the message shows it.
        message_format:   ``str.format`` template; ``{0}`` is the expected
                          display value and ``{1}`` the actual one.

    Raises:
        TypeError: If either node is None.
    """

    expected: ObjectTreeNode
    actual: ObjectTreeNode
    expected_display: str | None = None
    actual_display: str | None = None
    message_format: str = ""

    def __post_init__(self) -> None:
        if self.expected is None or self.actual is None:
            msg = "A difference needs both an expected and an actual node"
            raise TypeError(msg)

    @classmethod
    def from_message(
        cls, expected: ObjectTreeNode, actual: ObjectTreeNode, message: str
    ) -> Difference:
        """Build a difference whose message is fixed text (braces escaped)."""
        return cls(expected, actual, message_format=escape_format(message))

    @property
    def message(self) -> str:
        return self.render(self.expected_display, self.actual_display)

    @property
    def path(self) -> EdgePath:
        """Where the difference was found, as a path in the expected tree."""
        return self.expected.path

    def render(self, expected_display: str | None, actual_display: str | None) -> str:
        """Fill the template with the given display values.

        Falls back to the raw template when it does not format.
        """
        try:
            return self.message_format.format(expected_display, actual_display)
        except (IndexError, KeyError, ValueError):
            return self.message_format

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"Difference({self.message!r})"
