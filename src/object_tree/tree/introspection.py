"""Introspection rules: how arbitrary Python values become tree nodes.

Three questions are answered here, all without touching tree classes:

1. *What kind of node is this value?*  ``classify`` maps a value (or, for
   ``None``, the declared type of the member it came from) to a ``NodeType``.
2. *Which members does an object expose?*  ``declared_members`` walks a
   class's MRO once and caches the result; ``instance_members`` adds the
   attributes that only exist in an instance ``__dict__``.
3. *In which order are collection elements visited?*  ``iterate_elements``
   gives a stable order, sorting set-like collections when possible so that
   two equal sets always line up index by index.

Member enumeration order (stable and independent of attribute access):

- Properties first: base class to derived class, each class in definition
  order.  A redefinition in a subclass keeps the inherited position but
  takes the subclass as declaring type.
- Then fields: dataclass fields, annotated names and ``__slots__`` in the
  same base-to-derived walk (the most-base declaring class wins), followed
  by any other instance ``__dict__`` entries in insertion order.
- Dunder names are never members; ``_private`` names only when requested.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import functools
import inspect
import numbers
import pathlib
import threading
import types
import typing
import uuid
from collections.abc import Iterable, Iterator, Mapping, Set
from typing import Any

import numpy as np
from cachetools import LRUCache, cached

from object_tree.tree.edges import MemberDescriptor, MemberKind
from object_tree.tree.nodes import NodeType

__all__ = [
    "BYTE_SEQUENCE_TYPES",
    "classify",
    "classify_type",
    "declared_members",
    "instance_members",
    "iterate_elements",
    "read_member",
]

BYTE_SEQUENCE_TYPES: tuple[type, ...] = (bytes, bytearray, memoryview)

_PRIMITIVE_TYPES: tuple[type, ...] = (
    numbers.Number,
    str,
    *BYTE_SEQUENCE_TYPES,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    enum.Enum,
    pathlib.PurePath,
    np.generic,
)

_OPAQUE_TYPES: tuple[type, ...] = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    functools.partial,
    Iterator,
)

# Instances of types defined in these modules carry runtime state, not data.
_RUNTIME_MODULES = frozenset(
    {
        "builtins",
        "_thread",
        "threading",
        "asyncio",
        "_asyncio",
        "concurrent.futures._base",
        "weakref",
        "_weakref",
        "_weakrefset",
        "re",
        "_sre",
        "io",
        "_io",
        "logging",
        "_contextvars",
        "contextvars",
    }
)

_cache_lock = threading.RLock()


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(value: Any, value_type: type | None = None) -> NodeType:
    """Return the node type for ``value``.

    ``None`` has no type of its own, so it is classified from ``value_type``
    (the member's declared type) when one is known, and is UNKNOWN otherwise.
    """
    if value is None:
        return classify_type(value_type) if value_type is not None else NodeType.UNKNOWN
    if isinstance(value, np.ndarray) and value.ndim == 0:
        return NodeType.PRIMITIVE
    return classify_type(type(value))


@cached(cache=LRUCache(maxsize=1024), lock=_cache_lock)
def classify_type(cls: type) -> NodeType:
    """Return the node type for instances of ``cls``."""
    if issubclass(cls, _PRIMITIVE_TYPES):
        return NodeType.PRIMITIVE
    if issubclass(cls, _OPAQUE_TYPES):
        return NodeType.UNKNOWN
    if issubclass(cls, (Mapping, Iterable)):
        return NodeType.COLLECTION
    if _is_runtime_type(cls):
        return NodeType.UNKNOWN
    return NodeType.OBJECT


def _is_runtime_type(cls: type) -> bool:
    if cls is object:
        return True
    if dataclasses.is_dataclass(cls):
        return False
    return getattr(cls, "__module__", None) in _RUNTIME_MODULES


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


def _is_visible(name: str, include_private: bool) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return False
    if name.startswith("_"):
        return include_private
    return True


def _mangle(owner: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{owner.__name__.lstrip('_')}{name}"
    return name


def _as_class(hint: Any) -> type | None:
    """Reduce a type hint to a runtime class, or None if it is not one."""
    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return _as_class(args[0]) if len(args) == 1 else None
    if origin is typing.Annotated:
        return _as_class(typing.get_args(hint)[0])
    if origin is not None:
        hint = origin
    return hint if isinstance(hint, type) else None


def _resolved_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception:  # noqa: BLE001 - unresolvable forward references
        return {}


def _is_class_var(hint: Any, raw: Any) -> bool:
    if typing.get_origin(hint) is typing.ClassVar or hint is typing.ClassVar:
        return True
    return isinstance(raw, str) and raw.startswith(("ClassVar", "typing.ClassVar"))


def _property_type(attr: Any) -> type | None:
    getter = attr.func if isinstance(attr, functools.cached_property) else attr.fget
    if getter is None:
        return None
    return _as_class(_resolved_hints(getter).get("return"))


@cached(cache=LRUCache(maxsize=512), lock=_cache_lock)
def declared_members(cls: type, *, include_private: bool = False) -> tuple[MemberDescriptor, ...]:
    """Return the members declared by ``cls`` and its bases, in member order."""
    hierarchy = [klass for klass in reversed(cls.__mro__) if klass is not object]
    hints = _resolved_hints(cls)
    dataclass_fields = (
        {f.name for f in dataclasses.fields(cls)} if dataclasses.is_dataclass(cls) else None
    )

    properties: dict[str, MemberDescriptor] = {}
    for klass in hierarchy:
        for name, attr in vars(klass).items():
            if isinstance(attr, (property, functools.cached_property)):
                if attr.__class__ is property and attr.fget is None:
                    continue
                if _is_visible(name, include_private):
                    properties[name] = MemberDescriptor(
                        name, klass, MemberKind.PROPERTY, _property_type(attr)
                    )
            elif name in properties:
                # A plain attribute in a subclass hides the inherited property.
                del properties[name]

    fields: dict[str, MemberDescriptor] = {}
    for klass in hierarchy:
        annotations = inspect.get_annotations(klass)
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for raw_name in (*annotations, *slots):
            if raw_name in ("__dict__", "__weakref__"):
                continue
            name = _mangle(klass, raw_name)
            if name in fields or name in properties or not _is_visible(name, include_private):
                continue
            if (
                dataclass_fields is not None
                and raw_name in annotations
                and raw_name not in dataclass_fields
            ):
                continue
            if _is_class_var(hints.get(raw_name), annotations.get(raw_name)):
                continue
            fields[name] = MemberDescriptor(
                name, klass, MemberKind.FIELD, _as_class(hints.get(raw_name))
            )

    return (*properties.values(), *fields.values())


def instance_members(value: Any, *, include_private: bool = False) -> list[MemberDescriptor]:
    """Return the members of ``value`` in member order.

    Declared fields that are not set on this instance (an unset slot, an
    annotation without a value) are skipped.  Attributes present only in the
    instance ``__dict__`` are declared by ``type(value)``.
    """
    owner = type(value)
    declared = declared_members(owner, include_private=include_private)
    seen = {member.name for member in declared}
    members = [
        member
        for member in declared
        if member.kind is MemberKind.PROPERTY or hasattr(value, member.name)
    ]

    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        for name in instance_dict:
            if not isinstance(name, str) or name in seen:
                continue
            if _is_visible(name, include_private) and not _shadowed_by_class(owner, name):
                members.append(MemberDescriptor(name, owner, MemberKind.FIELD))
    return members


def _shadowed_by_class(owner: type, name: str) -> bool:
    # A data descriptor on the class wins over the instance dict entry.
    attr = inspect.getattr_static(owner, name, None)
    return attr is not None and hasattr(type(attr), "__set__") and not isinstance(
        attr, functools.cached_property
    )


def read_member(value: Any, member: MemberDescriptor) -> Any:
    """Read ``member`` from ``value``; exceptions propagate to the caller."""
    return getattr(value, member.name)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def iterate_elements(collection: Iterable[Any]) -> Iterator[Any]:
    """Iterate a non-mapping collection in a stable order.

    Set-like collections are sorted when their elements are mutually
    orderable; everything else keeps its own iteration order.
    """
    if isinstance(collection, Set):
        try:
            return iter(sorted(collection))
        except TypeError:
            return iter(collection)
    return iter(collection)
