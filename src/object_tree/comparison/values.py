"""DefaultValueEqualityComparer: leaf-value equality used by the diff engine.

Rules, in order:

1. ``a is b`` is equal.  If either side is None, plain ``==`` decides.
2. Values of different runtime types use their own ``==`` (``1 == 1.0``
   holds).  NumPy arrays use ``numpy.array_equal``.
3. Values of the same type get special handling:

   - floats (Python or NumPy): equal within ``float_delta``, defaulting to
     the type's smallest subnormal; NaN equals NaN;
   - ``Decimal``: equal within ``decimal_delta`` (default exact);
   - dates, datetimes, times and timedeltas: equal within
     ``datetime_delta`` (default exact);
   - byte sequences: element-wise;
   - everything else: ``==``.

``hash`` is consistent with ``equals``: whenever a tolerance makes distinct
values equal, they share a per-type hash.
"""

from __future__ import annotations

import datetime
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import numpy as np

from object_tree.tree.introspection import BYTE_SEQUENCE_TYPES

if TYPE_CHECKING:
    from object_tree.config import CompareOptions

__all__ = ["DefaultValueEqualityComparer"]

_TEMPORAL_TYPES = (datetime.date, datetime.time, datetime.timedelta)
_FLOAT_TYPES = (float, np.floating)
_EPOCH = datetime.date(1, 1, 1)


class DefaultValueEqualityComparer:
    """Null-safe, tolerance-aware equality for leaf values.

    Args:
        options: Supplies ``float_delta``, ``decimal_delta`` and
            ``datetime_delta``.  None for the defaults.
    """

    _instance: DefaultValueEqualityComparer | None = None

    def __init__(self, options: CompareOptions | None = None) -> None:
        self.options = options
        self._float_delta = options.float_delta if options is not None else None
        self._decimal_delta = options.decimal_delta if options is not None else None
        self._datetime_delta = options.datetime_delta if options is not None else None

    @classmethod
    def instance(cls) -> DefaultValueEqualityComparer:
        """The shared comparer with default tolerances."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def create(cls, options: CompareOptions | None) -> DefaultValueEqualityComparer:
        return cls.instance() if options is None else cls(options)

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def equals(self, expected: Any, actual: Any) -> bool:
        if expected is actual:
            return True
        if expected is None or actual is None:
            return _generic_equals(expected, actual)
        if type(expected) is not type(actual):
            return _generic_equals(expected, actual)
        if isinstance(expected, _FLOAT_TYPES):
            return self._floats_equal(expected, actual)
        if isinstance(expected, Decimal):
            return self._decimals_equal(expected, actual)
        if isinstance(expected, _TEMPORAL_TYPES):
            return self._temporals_equal(expected, actual)
        if isinstance(expected, BYTE_SEQUENCE_TYPES):
            return bytes(expected) == bytes(actual)
        return _generic_equals(expected, actual)

    def _floats_equal(self, expected: Any, actual: Any) -> bool:
        if expected == actual:
            return True
        if math.isnan(expected) or math.isnan(actual):
            return math.isnan(expected) and math.isnan(actual)
        delta = self._float_delta
        if delta is None:
            delta = _smallest_subnormal(type(expected))
        return bool(abs(float(expected) - float(actual)) <= delta)

    def _decimals_equal(self, expected: Decimal, actual: Decimal) -> bool:
        if expected.is_nan() or actual.is_nan():
            return expected.is_nan() and actual.is_nan()
        if expected == actual:
            return True
        if self._decimal_delta is None:
            return False
        return abs(expected - actual) <= self._decimal_delta

    def _temporals_equal(self, expected: Any, actual: Any) -> bool:
        if expected == actual:
            return True
        if not self._datetime_delta:
            return False
        if isinstance(expected, datetime.time):
            expected = datetime.datetime.combine(_EPOCH, expected)
            actual = datetime.datetime.combine(_EPOCH, actual)
        try:
            distance = abs(expected - actual)
        except TypeError:
            # Naive and timezone-aware values cannot be subtracted.
            return False
        return distance <= self._datetime_delta

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    def hash(self, value: Any) -> int:
        if value is None:
            return 0
        if isinstance(value, BYTE_SEQUENCE_TYPES):
            return hash(bytes(value))
        if isinstance(value, _FLOAT_TYPES):
            delta = self._float_delta
            if delta is not None and delta > _smallest_subnormal(type(value)):
                return hash("float")
            if math.isnan(value):
                return hash(("float", "nan"))
            if abs(float(value)) <= _subnormal_spacing_bound(type(value)):
                # Neighbours in this band are one subnormal apart and chain to 0.0.
                return hash(0.0)
        elif isinstance(value, Decimal):
            if self._decimal_delta or value.is_nan():
                return hash(("Decimal", value.is_nan()))
        elif isinstance(value, _TEMPORAL_TYPES):
            if self._datetime_delta:
                return hash(type(value).__qualname__)
        elif isinstance(value, np.ndarray):
            return hash(("ndarray", value.shape))
        try:
            return hash(value)
        except TypeError:
            return hash(type(value).__qualname__)


def _generic_equals(expected: Any, actual: Any) -> bool:
    if isinstance(expected, np.ndarray) or isinstance(actual, np.ndarray):
        return bool(np.array_equal(expected, actual))
    return bool(expected == actual)


def _smallest_subnormal(float_type: type) -> float:
    dtype = float_type if issubclass(float_type, np.floating) else np.float64
    return float(np.finfo(dtype).smallest_subnormal)


def _subnormal_spacing_bound(float_type: type) -> float:
    """Largest magnitude whose neighbours are one smallest subnormal apart."""
    dtype = float_type if issubclass(float_type, np.floating) else np.float64
    return float(np.finfo(dtype).tiny) * 2
