"""Exception hierarchy for object-tree.

Two families live here:

- Engine errors (``ObjectTreeError`` and subclasses) signal structural
  problems while building or walking a tree.  They always propagate to the
  caller unmodified.
- Assertion errors (``ObjectTreeAssertionError`` and subclasses) are raised
  by the assertion helpers in ``object_tree.asserts``.  They subclass
  ``AssertionError`` so test runners report them as ordinary failures.

Edge and path resolution failures are *not* exceptions: ``Edge.resolve`` and
``EdgePath.resolve`` return ``(False, None)`` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from object_tree.comparison.differences import Difference
    from object_tree.tree.builder import ObjectTree

__all__ = [
    "CircularReferenceError",
    "MemberAccessError",
    "ObjectTreeAssertionError",
    "ObjectTreeEqualError",
    "ObjectTreeError",
    "ObjectTreeNotEqualError",
]

_MAX_ROOT_LENGTH = 100


class ObjectTreeError(Exception):
    """Base class for errors raised by the tree engine."""


class CircularReferenceError(ObjectTreeError):
    """Raised when a walk exceeds the maximum nesting level.

    This normally means duplicate detection was defeated, for example by a
    filter that hides the member needed to recognise a revisited value.
    """


class MemberAccessError(ObjectTreeError):
    """Raised when reading a member of a value fails during child production.

    Attributes:
        member_name:    Name of the member whose getter raised.
        declaring_type: The class that declares the member.
    """

    def __init__(self, member_name: str, declaring_type: type | None) -> None:
        self.member_name = member_name
        self.declaring_type = declaring_type
        type_name = _qualified_name(declaring_type) if declaring_type else "<unknown>"
        super().__init__(
            f'Member "{member_name}" with declaring type "{type_name}" raised an error'
        )


class ObjectTreeAssertionError(AssertionError):
    """Base class for object-tree assertion failures.

    Carries the two trees that were compared.  ``str(error)`` includes the
    base message followed by formatted root values of both trees.
    """

    def __init__(
        self,
        expected_tree: ObjectTree | None,
        actual_tree: ObjectTree | None,
        message: str,
    ) -> None:
        self.expected_tree = expected_tree
        self.actual_tree = actual_tree
        self.base_message = message
        super().__init__(message)

    @property
    def expected(self) -> str:
        """Formatted root value of the expected tree."""
        return _format_root(self.expected_tree)

    @property
    def actual(self) -> str:
        """Formatted root value of the actual tree."""
        return _format_root(self.actual_tree)

    def __str__(self) -> str:
        return f"{self.base_message}\nExpected: {self.expected}\nActual:   {self.actual}"


class ObjectTreeEqualError(ObjectTreeAssertionError):
    """Raised when two values were expected to be equal but differ.

    Attributes:
        differences: The captured differences (at most the configured cap).
        truncated:   True when more differences existed than were captured.
    """

    def __init__(
        self,
        expected_tree: ObjectTree | None,
        actual_tree: ObjectTree | None,
        differences: list[Difference] | tuple[Difference, ...],
        message: str = "assert_tree_equal() failure",
        *,
        truncated: bool = False,
        report: str = "",
    ) -> None:
        if not differences:
            msg = "At least one difference is required when the values are not equal"
            raise ValueError(msg)
        self.differences: tuple[Difference, ...] = tuple(differences)
        self.truncated = truncated
        self.report = report
        super().__init__(expected_tree, actual_tree, message)

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base}\n{self.report}" if self.report else base


class ObjectTreeNotEqualError(ObjectTreeAssertionError):
    """Raised when two values were expected to differ but are equal."""

    def __init__(
        self,
        expected_tree: ObjectTree | None,
        actual_tree: ObjectTree | None,
        message: str = "assert_tree_not_equal() failure",
    ) -> None:
        super().__init__(expected_tree, actual_tree, message)


def _qualified_name(cls: type) -> str:
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", repr(cls))
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


def _format_root(tree: Any) -> str:
    # Imported lazily: the formatter lives in a package that imports this module.
    from object_tree.comparison.formatter import DefaultValueFormatter, truncate

    value = tree.root.value if tree is not None else None
    return truncate(DefaultValueFormatter.instance().format(value), _MAX_ROOT_LENGTH)
