"""Edges and edge paths: the hops that connect tree nodes.

An ``Edge`` describes how a child value is reached from its parent value:
through a named member (property or field), a sequence index, or a map key.
An edge with none of these is the no-op edge used for the root.

Edges compare by *identity of the hop*, not by object instance: two edges
created independently for the same member of the same declaring type are
equal, while two members that merely share a name (e.g. a subclass shadowing
a base-class attribute) are not.

An ``EdgePath`` is the ordered sequence of edges from the root of a tree to a
node.  It renders as ``<root>.employees[0].name`` and can be re-applied to a
different root value with ``resolve``.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any, Final

__all__ = ["Edge", "EdgePath", "MemberDescriptor", "MemberKind"]

ROOT_NAME: Final = "<root>"


class _NoKey:
    """Sentinel type for "this edge has no map key" (``None`` is a legal key)."""

    _instance: _NoKey | None = None

    def __new__(cls) -> _NoKey:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<no key>"


NO_KEY: Final = _NoKey()


class MemberKind(StrEnum):
    """How a member is read from its owner.

    - PROPERTY -> "property" : a ``property`` or ``cached_property`` on a class
    - FIELD    -> "field"    : a dataclass field, ``__slots__`` slot or
                               instance ``__dict__`` entry
    """

    PROPERTY = auto()
    FIELD = auto()


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """A readable, instance-level member of a class.

    Attributes:
        name:           Attribute name used with ``getattr``.
        declaring_type: The class that declares the member.  Members with the
                        same name but different declaring types are distinct.
        kind:           Property or field.
        value_type:     The declared type of values this member yields, when
                        known from annotations.  Not part of member identity.
    """

    name: str
    declaring_type: type | None
    kind: MemberKind = MemberKind.FIELD
    value_type: type | None = field(default=None, compare=False)

    @classmethod
    def of(cls, owner: type, name: str, *, include_private: bool = False) -> MemberDescriptor:
        """Return the descriptor for member ``name`` as enumerated on ``owner``.

        Only declared members (properties, dataclass fields, annotated names,
        ``__slots__``) can be found this way; attributes that exist solely in
        an instance ``__dict__`` are declared by the instance's own type, so
        ``MemberDescriptor(name, owner)`` describes them.

        Raises:
            LookupError: If ``owner`` declares no member with that name.
        """
        from object_tree.tree.introspection import declared_members

        for member in declared_members(owner, include_private=include_private):
            if member.name == name:
                return member
        msg = f"{owner.__qualname__} declares no member named {name!r}"
        raise LookupError(msg)

    def __str__(self) -> str:
        owner = self.declaring_type.__qualname__ if self.declaring_type else "?"
        return f"{owner}.{self.name}"


@dataclass(frozen=True, slots=True)
class Edge:
    """One hop from a parent value to a child value.

    At most one of ``member``, ``index`` and ``key`` is set.  Use the
    ``for_member`` / ``for_index`` / ``for_key`` constructors; ``Edge()`` is
    the no-op edge which resolves to the parent itself.

    Raises:
        ValueError: If ``index`` is negative or more than one facet is set.
    """

    member: MemberDescriptor | None = None
    index: int | None = None
    key: Any = NO_KEY

    def __post_init__(self) -> None:
        facets = sum(
            (self.member is not None, self.index is not None, self.key is not NO_KEY)
        )
        if facets > 1:
            msg = "An edge can have a member, an index or a key, but only one of them"
            raise ValueError(msg)
        if self.index is not None and self.index < 0:
            msg = f"index cannot be negative, got {self.index}"
            raise ValueError(msg)

    @classmethod
    def for_member(cls, member: MemberDescriptor) -> Edge:
        return cls(member=member)

    @classmethod
    def for_index(cls, index: int) -> Edge:
        return cls(index=index)

    @classmethod
    def for_key(cls, key: Any) -> Edge:
        return cls(key=key)

    @property
    def has_key(self) -> bool:
        return self.key is not NO_KEY

    @property
    def is_noop(self) -> bool:
        """True for the root edge, which has no member, index or key."""
        return self.member is None and self.index is None and not self.has_key

    @property
    def member_type(self) -> type | None:
        """Declared type of the values reached through this edge, if known."""
        return self.member.value_type if self.member is not None else None

    def resolve(self, parent: Any) -> tuple[bool, Any]:
        """Apply this edge to ``parent``.

        Never raises.  Returns ``(False, None)`` when the parent is None, the
        member cannot be read, the index is out of range, the key is absent,
        or the parent is not a collection for an index/key edge.

        Returns:
            ``(True, value)`` on success.
        """
        if self.is_noop:
            return True, parent
        if parent is None:
            return False, None

        if self.member is not None:
            declaring_type = self.member.declaring_type
            if declaring_type is not None and not isinstance(parent, declaring_type):
                return False, None
            try:
                return True, getattr(parent, self.member.name)
            except Exception:  # noqa: BLE001 - resolution reports failure, never raises
                return False, None

        if self.index is not None:
            return _resolve_index(parent, self.index)

        if not isinstance(parent, Mapping):
            return False, None
        try:
            if self.key not in parent:
                return False, None
            return True, parent[self.key]
        except Exception:  # noqa: BLE001
            return False, None

    def __str__(self) -> str:
        if self.member is not None:
            return f".{self.member.name}"
        if self.index is not None:
            return f"[{self.index}]"
        if self.has_key:
            return f"[{self.key!r}]"
        return ""


def _resolve_index(parent: Any, index: int) -> tuple[bool, Any]:
    # Imported lazily to keep edges free of the classification rules.
    from object_tree.tree.introspection import iterate_elements

    if isinstance(parent, Sequence):
        try:
            return True, parent[index]
        except Exception:  # noqa: BLE001
            return False, None
    if isinstance(parent, Mapping) or not isinstance(parent, Iterable):
        return False, None
    try:
        elements = iterate_elements(parent)
        for value in itertools.islice(elements, index, index + 1):
            return True, value
    except Exception:  # noqa: BLE001
        return False, None
    return False, None


class EdgePath:
    """An immutable sequence of edges from a tree root to a node.

    ``None`` entries are dropped on construction so the root's missing edge
    never appears in a path.  Two paths are equal when their edges are equal
    element by element.
    """

    __slots__ = ("_edges", "_hash")

    def __init__(self, edges: Iterable[Edge | None] = ()) -> None:
        self._edges: tuple[Edge, ...] = tuple(e for e in edges if e is not None)
        self._hash: int | None = None

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self._edges

    def child(self, edge: Edge) -> EdgePath:
        """Return a new path extended by ``edge``."""
        return EdgePath((*self._edges, edge))

    def resolve(self, root: Any) -> tuple[bool, Any]:
        """Apply every edge in order starting from ``root``.

        Short-circuits on the first edge that cannot be resolved.

        Returns:
            ``(True, value)`` on success, ``(False, None)`` otherwise.
        """
        current = root
        for edge in self._edges:
            ok, current = edge.resolve(current)
            if not ok:
                return False, None
        return True, current

    def to_string(self, root_name: str | None = None) -> str:
        """Render the path, using ``root_name`` in place of ``<root>``."""
        return (root_name if root_name is not None else ROOT_NAME) + "".join(
            str(edge) for edge in self._edges
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"EdgePath({self.to_string()!r})"

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, EdgePath):
            return NotImplemented
        return self._edges == other._edges

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(self._edges)
        return self._hash
