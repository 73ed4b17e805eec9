"""
Interval Index
==============
In-memory centered interval tree mapping closed numeric intervals to
payloads. Answers stabbing (point) and intersection (range) queries.

Components:
  - interval: Interval value type, ordering, InvalidRangeError
  - node: Immutable centered-partition node (construction + queries)
  - tree: IntervalTree facade (pending list, lazy rebuild, introspection)

Usage:
    from interval_index import IntervalTree, Interval

Status: COMPLETE
"""

from interval_index.interval import Interval, InvalidRangeError, validate_range
from interval_index.node import IntervalNode, median
from interval_index.tree import IntervalTree, TreeStateError

__all__ = [
    "Interval", "InvalidRangeError", "validate_range",
    "IntervalNode", "median",
    "IntervalTree", "TreeStateError",
]
