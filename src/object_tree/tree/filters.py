"""NodeFilter: predicate-based exclusion of nodes from a tree.

A filter is applied to the candidate children of every node.  A node is
excluded when *any* rule matches it:

- its member name equals one of ``excluded_member_names`` (case-insensitive),
- its member is one of ``excluded_members`` (same name *and* declaring type),
- a predicate in ``excluded_member_predicates`` returns True for its member,
- a predicate in ``excluded_node_predicates`` returns True for the node.

The first three only ever match member edges; index and key edges are
reachable only through node predicates.  A filter with no rules passes every
node through unchanged.

Example::

    from object_tree.tree.filters import NodeFilter

    # Ignore "full_name" everywhere, and "salary" only on the second employee.
    node_filter = NodeFilter(
        excluded_member_names=["full_name"],
        excluded_node_predicates=[
            lambda n: n.edge is not None
            and n.edge.member is not None
            and n.edge.member.name == "salary"
            and str(n.parent.path) == "<root>.employees[1]"
        ],
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from object_tree.tree.edges import MemberDescriptor
from object_tree.tree.nodes import ObjectTreeNode

__all__ = ["NodeFilter"]

MemberPredicate = Callable[[MemberDescriptor], bool]
NodePredicate = Callable[[ObjectTreeNode], bool]


@dataclass(frozen=True, slots=True)
class NodeFilter:
    """Immutable set of exclusion rules.

    Lists (or any iterables) are accepted for every rule family and stored as
    tuples; ``None`` entries are ignored.  A single string for
    ``excluded_member_names`` is treated as one name.

    Raises:
        TypeError: If a name is not a string, a member is not a
            ``MemberDescriptor`` or a predicate is not callable.
    """

    excluded_member_names: tuple[str, ...] = ()
    excluded_members: tuple[MemberDescriptor, ...] = ()
    excluded_member_predicates: tuple[MemberPredicate, ...] = ()
    excluded_node_predicates: tuple[NodePredicate, ...] = ()
    _folded_names: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        names = self.excluded_member_names
        if isinstance(names, str):
            names = (names,)
        names = _normalise(names)
        for name in names:
            if not isinstance(name, str):
                msg = f"excluded member names must be strings, got {name!r}"
                raise TypeError(msg)

        members = _normalise(self.excluded_members)
        for member in members:
            if not isinstance(member, MemberDescriptor):
                msg = f"excluded members must be MemberDescriptor instances, got {member!r}"
                raise TypeError(msg)

        member_predicates = _normalise(self.excluded_member_predicates)
        node_predicates = _normalise(self.excluded_node_predicates)
        for predicate in (*member_predicates, *node_predicates):
            if not callable(predicate):
                msg = f"exclusion predicates must be callable, got {predicate!r}"
                raise TypeError(msg)

        object.__setattr__(self, "excluded_member_names", names)
        object.__setattr__(self, "excluded_members", members)
        object.__setattr__(self, "excluded_member_predicates", member_predicates)
        object.__setattr__(self, "excluded_node_predicates", node_predicates)
        object.__setattr__(self, "_folded_names", frozenset(n.casefold() for n in names))

    @classmethod
    def excluding(cls, *names: str) -> NodeFilter:
        """Shorthand for a filter that only excludes member names."""
        return cls(excluded_member_names=names)

    @property
    def is_passthrough(self) -> bool:
        """True when the filter has no rules at all."""
        return not (
            self.excluded_member_names
            or self.excluded_members
            or self.excluded_member_predicates
            or self.excluded_node_predicates
        )

    def excludes(self, node: ObjectTreeNode) -> bool:
        """Return True if any rule matches ``node``."""
        member = node.edge.member if node.edge is not None else None
        if member is not None:
            if member.name.casefold() in self._folded_names:
                return True
            if member in self.excluded_members:
                return True
            if any(predicate(member) for predicate in self.excluded_member_predicates):
                return True
        return any(predicate(node) for predicate in self.excluded_node_predicates)

    def apply(self, nodes: Iterable[ObjectTreeNode]) -> Iterator[ObjectTreeNode]:
        """Return the nodes no rule excludes, in their original order."""
        if self.is_passthrough:
            return iter(nodes)
        return (node for node in nodes if not self.excludes(node))


def _normalise(values: Iterable[object] | None) -> tuple:
    if values is None:
        return ()
    return tuple(value for value in values if value is not None)
