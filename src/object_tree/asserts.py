"""Assertion helpers that turn differences into readable test failures.

``assert_tree_equal`` raises ``ObjectTreeEqualError`` listing the first
differences found; ``assert_tree_not_equal`` raises
``ObjectTreeNotEqualError`` when there are none.

Failure output is bounded so it stays readable for huge graphs::

    assert_tree_equal() failure
    Expected: ...
    Actual:   ...
    99+ Differences:
    \t<root>[0]: expected value 0 but was 1.
    ...
    \t... (99+ differences)

At most ``max_differences`` lines are printed: when more differences than
that exist, the last line becomes the ``... (N+ differences)`` marker.  Display
values and whole lines are cut at ``max_line_length`` characters with an
ellipsis.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from object_tree.api import as_compare_options
from object_tree.comparison.comparator import ObjectTreeEqualityComparer
from object_tree.comparison.formatter import ELLIPSIS, truncate
from object_tree.config import CompareOptions
from object_tree.exceptions import ObjectTreeEqualError, ObjectTreeNotEqualError
from object_tree.tree.builder import ObjectTree

if TYPE_CHECKING:
    from object_tree.comparison.differences import Difference
    from object_tree.config import TreeOptions
    from object_tree.protocols import NodeFilterLike

__all__ = ["assert_tree_equal", "assert_tree_not_equal", "render_report"]

EQUAL_HEADER = "assert_tree_equal() failure"
NOT_EQUAL_HEADER = "assert_tree_not_equal() failure"

_DEFAULTS = CompareOptions()


def assert_tree_equal(
    expected: Any,
    actual: Any,
    options: TreeOptions | None = None,
    message: str | None = None,
    *,
    node_filter: NodeFilterLike | None = None,
) -> None:
    """Assert that two values have no structural differences.

    Args:
        expected:    The expected value (or its tree).
        actual:      The actual value (or its tree).
        options:     Filtering, tolerance and report options.
        message:     Extra text shown above the report.
        node_filter: Excludes nodes from both trees.

    Raises:
        ObjectTreeEqualError: If any difference is found.
    """
    __tracebackhide__ = True
    compare_options = as_compare_options(options, node_filter) or _DEFAULTS
    expected_tree = ObjectTree.create(expected, compare_options)
    actual_tree = ObjectTree.create(actual, compare_options)
    comparer = ObjectTreeEqualityComparer.create(compare_options)

    cap = compare_options.max_differences
    # One past the cap tells a full report apart from a truncated one.
    differences = list(
        itertools.islice(comparer.find_differences(expected_tree, actual_tree), cap + 1)
    )
    if not differences:
        return
    truncated = len(differences) > cap
    differences = differences[:cap]
    raise ObjectTreeEqualError(
        expected_tree,
        actual_tree,
        differences,
        _header(message, EQUAL_HEADER),
        truncated=truncated,
        report=render_report(
            differences,
            truncated=truncated,
            max_line_length=compare_options.max_line_length,
        ),
    )


def assert_tree_not_equal(
    expected: Any,
    actual: Any,
    options: TreeOptions | None = None,
    message: str | None = None,
    *,
    node_filter: NodeFilterLike | None = None,
) -> None:
    """Assert that two values differ somewhere in their trees.

    Raises:
        ObjectTreeNotEqualError: If no difference is found.
    """
    __tracebackhide__ = True
    compare_options = as_compare_options(options, node_filter) or _DEFAULTS
    expected_tree = ObjectTree.create(expected, compare_options)
    actual_tree = ObjectTree.create(actual, compare_options)
    comparer = ObjectTreeEqualityComparer.create(compare_options)
    if next(comparer.find_differences(expected_tree, actual_tree), None) is None:
        raise ObjectTreeNotEqualError(
            expected_tree, actual_tree, _header(message, NOT_EQUAL_HEADER)
        )


def render_report(
    differences: Sequence[Difference],
    *,
    truncated: bool = False,
    max_line_length: int = 100,
) -> str:
    """Render the difference title and one tab-indented line per difference.

    When ``truncated`` is set the last difference is replaced by a
    ``... (N+ differences)`` marker, where N is the number of lines shown.
    """
    shown = list(differences[:-1]) if truncated else list(differences)
    count = f"{len(shown)}+" if truncated else str(len(shown))
    plural = "" if count == "1" else "s"
    lines = [f"{count} Difference{plural}:"]
    lines.extend("\t" + _render_line(diff, max_line_length) for diff in shown)
    if truncated:
        lines.append(f"\t... ({count} differences)")
    return "\n".join(lines)


def _render_line(difference: Difference, max_line_length: int) -> str:
    text = difference.render(
        _cap_display(difference.expected_display, max_line_length),
        _cap_display(difference.actual_display, max_line_length),
    ).rstrip()
    return truncate(text, max_line_length)


def _cap_display(display: str | None, limit: int) -> str | None:
    if display is None or len(display) <= limit:
        return display
    capped = display[:limit].rstrip() + ELLIPSIS
    # Keep quoted strings visibly quoted.
    if display.startswith('"'):
        capped += '"'
    return capped


def _header(message: str | None, header: str) -> str:
    return f"{message}\n{header}" if message else header
