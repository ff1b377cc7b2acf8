"""TreeOptions and CompareOptions: the caller-facing configuration surface.

TreeOptions controls how a tree is built (filtering, private members, a
custom spawn strategy).  CompareOptions extends it with what the difference
engine needs: numeric and time tolerances, a custom value comparer and
formatter, and the bounds applied when rendering assertion reports.

Both are frozen (immutable) dataclasses validated on construction.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from object_tree.protocols import (
        NodeFilterLike,
        SpawnStrategy,
        ValueEqualityComparer,
        ValueFormatter,
    )

__all__ = ["CompareOptions", "TreeOptions"]


@dataclass(frozen=True, slots=True)
class TreeOptions:
    """Immutable configuration for tree construction.

    Attributes:
        node_filter: Excludes nodes from the tree (see ``NodeFilter``).
        include_private_members: When True, ``_private`` attributes become
            members too.  Dunder names never do.  Default False.
        default_spawn_strategy: Strategy used instead of the default
            duplicate-checking chain.  The strategy is used as-is, so its
            identity map is shared by every tree built with these options.
    """

    node_filter: NodeFilterLike | None = None
    include_private_members: bool = False
    default_spawn_strategy: SpawnStrategy | None = None

    def __post_init__(self) -> None:
        if self.node_filter is not None and not callable(getattr(self.node_filter, "apply", None)):
            msg = f"node_filter must have an apply() method, got {self.node_filter!r}"
            raise TypeError(msg)

    def tree_key(self) -> tuple[Any, ...]:
        """The settings that shape a tree; equal keys mean a tree can be reused."""
        return (self.node_filter, self.include_private_members, self.default_spawn_strategy)


@dataclass(frozen=True, slots=True)
class CompareOptions(TreeOptions):
    """Immutable configuration for comparisons and assertion reports.

    Attributes:
        float_delta: Maximum difference for two floats of the same type to be
            equal.  Defaults to the type's smallest subnormal.
        decimal_delta: Maximum difference for two ``Decimal`` values.
        datetime_delta: Maximum distance between two dates, datetimes, times
            or timedeltas of the same type.
        value_comparer: Replaces the default leaf equality.
        value_formatter: Replaces the default leaf formatting.
        max_differences: Most differences an assertion report lists (>= 2, so a
            truncated report still lists one difference beside its marker).
        max_line_length: Character cap for each report line (>= 2).
    """

    float_delta: float | None = None
    decimal_delta: Decimal | None = None
    datetime_delta: datetime.timedelta | None = None
    value_comparer: ValueEqualityComparer | None = None
    value_formatter: ValueFormatter | None = None
    max_differences: int = 100
    max_line_length: int = 100

    def __post_init__(self) -> None:
        super(CompareOptions, self).__post_init__()
        if self.float_delta is not None and not self.float_delta >= 0.0:
            msg = f"float_delta must be >= 0.0, got {self.float_delta}"
            raise ValueError(msg)
        if self.decimal_delta is not None and self.decimal_delta < 0:
            msg = f"decimal_delta must be >= 0, got {self.decimal_delta}"
            raise ValueError(msg)
        if self.datetime_delta is not None and self.datetime_delta < datetime.timedelta(0):
            msg = f"datetime_delta must be >= 0, got {self.datetime_delta}"
            raise ValueError(msg)
        if self.max_differences < 2:
            msg = f"max_differences must be >= 2, got {self.max_differences}"
            raise ValueError(msg)
        if self.max_line_length < 2:
            msg = f"max_line_length must be >= 2, got {self.max_line_length}"
            raise ValueError(msg)
