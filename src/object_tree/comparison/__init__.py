"""Comparison subpackage: the structural difference engine.

Re-exports the public API for the comparison module:
- ObjectTreeEqualityComparer: walks two trees and yields Difference records
- Difference: one mismatch with its location and message
- DefaultValueEqualityComparer: tolerance-aware leaf equality
- DefaultValueFormatter: leaf formatting for difference messages
"""

from object_tree.comparison.comparator import MAX_DEPTH, ObjectTreeEqualityComparer
from object_tree.comparison.differences import Difference
from object_tree.comparison.formatter import DefaultValueFormatter
from object_tree.comparison.values import DefaultValueEqualityComparer

__all__ = [
    "MAX_DEPTH",
    "DefaultValueEqualityComparer",
    "DefaultValueFormatter",
    "Difference",
    "ObjectTreeEqualityComparer",
]
