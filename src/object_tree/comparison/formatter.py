"""DefaultValueFormatter: renders leaf values for difference messages.

The output is meant for humans reading a test failure, so every kind of
value gets a form that cannot be confused with another:

- ``None``            -> ``null``
- ``bool``            -> ``True`` / ``False``
- enum members        -> ``Color.RED``
- ``int``             -> ``42``
- ``float``           -> ``0.1d`` (``repr`` plus ``d``, like a NumPy double)
- NumPy floats        -> ``0.1f`` (shortest text for the width, plus a
                         suffix: ``h`` half, ``f`` single, ``d`` double,
                         ``g`` extended)
- ``Decimal``         -> ``1.50m``
- byte sequences      -> ``0x0AFF``
- ``str``             -> ``"text"``; text containing quotes or control
                         characters uses its Python ``repr`` instead
- anything else       -> ``str(value)``, quoted unless it is a number
"""

from __future__ import annotations

import enum
import numbers
from decimal import Decimal
from typing import Any, Final

import numpy as np

from object_tree.tree.introspection import BYTE_SEQUENCE_TYPES

__all__ = ["DefaultValueFormatter", "ELLIPSIS", "truncate"]

ELLIPSIS: Final = "…"

_FLOAT_SUFFIXES: dict[type, str] = {
    np.float16: "h",
    np.float32: "f",
    np.float64: "d",
    np.longdouble: "g",
}

_SPECIAL_CHARACTERS = frozenset("'\"\n\r\t\0\a\b\f\v")


class DefaultValueFormatter:
    """Stateless formatter; use ``instance()`` for the shared one."""

    _instance: DefaultValueFormatter | None = None

    @classmethod
    def instance(cls) -> DefaultValueFormatter:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def format(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, enum.Enum):
            return f"{type(value).__name__}.{value.name}"
        if isinstance(value, (bool, np.bool_)):
            return str(bool(value))
        if isinstance(value, np.floating):
            return str(value) + _FLOAT_SUFFIXES.get(type(value), "")
        if isinstance(value, float):
            return repr(value) + _FLOAT_SUFFIXES[np.float64]
        if isinstance(value, Decimal):
            return f"{value}m"
        if isinstance(value, BYTE_SEQUENCE_TYPES):
            return "0x" + bytes(value).hex().upper()
        if isinstance(value, str):
            return _quote(value)
        text = str(value)
        if isinstance(value, numbers.Number):
            return text
        return _quote(text)


def _quote(text: str) -> str:
    if any(char in _SPECIAL_CHARACTERS for char in text):
        return repr(text)
    return '"' + text.replace("\\", "\\\\") + '"'


def truncate(text: str, limit: int) -> str:
    """Cap ``text`` at ``limit`` characters, ending in an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)] + ELLIPSIS
