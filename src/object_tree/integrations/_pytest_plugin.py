"""pytest plugin for object-tree.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from object_tree import CompareOptions, assert_tree_equal, assert_tree_not_equal


@pytest.fixture(scope="session")
def assert_object_tree_equal() -> Any:
    """Fixture that returns a callable structural-equality asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to assert_tree_equal(), which builds fresh trees per call).

    Usage in tests::

        def test_copy(assert_object_tree_equal):
            assert_object_tree_equal(original, copy.deepcopy(original))

        def test_ignores_timestamps(assert_object_tree_equal):
            assert_object_tree_equal(a, b, node_filter=NodeFilter.excluding("updated_at"))

    Returns:
        A callable ``_assert(expected, actual, options=None, message=None,
        node_filter=None) -> None`` that raises ``ObjectTreeEqualError`` (an
        ``AssertionError``) listing the differences.
    """

    def _assert(
        expected: Any,
        actual: Any,
        options: CompareOptions | None = None,
        message: str | None = None,
        node_filter: Any = None,
    ) -> None:
        __tracebackhide__ = True
        assert_tree_equal(expected, actual, options, message, node_filter=node_filter)

    return _assert


@pytest.fixture(scope="session")
def assert_object_tree_not_equal() -> Any:
    """Fixture that returns a callable structural-inequality asserter.

    Returns:
        A callable ``_assert(expected, actual, options=None, message=None,
        node_filter=None) -> None`` that raises ``ObjectTreeNotEqualError``
        (an ``AssertionError``) when the two values have no differences.
    """

    def _assert(
        expected: Any,
        actual: Any,
        options: CompareOptions | None = None,
        message: str | None = None,
        node_filter: Any = None,
    ) -> None:
        __tracebackhide__ = True
        assert_tree_not_equal(expected, actual, options, message, node_filter=node_filter)

    return _assert
