"""
Interval Tree
=============
Public index over closed intervals with lazy rebuild.

Mutation and query are decoupled:
  - insert()/add_interval() validate and append to the pending list only,
    then mark the tree stale. O(1), no restructuring.
  - Every query calls rebuild() first. A stale tree discards its node
    structure and builds a fresh one from the full pending list; an
    in-sync tree is left alone.

Invariants:
  - root is never None. An empty tree's root holds no intervals and is
    centered on zero().
  - cached_size() == pending_size() whenever in_sync() is True.
  - A rejected insert leaves pending, in_sync and cached_size untouched.

Concurrency: single-writer, no locking. Callers that share a tree across
threads must serialize access themselves.
Delete: not supported.
"""

import sys
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from interval_index.interval import Interval, validate_range
from interval_index.node import IntervalNode


class TreeStateError(RuntimeError):
    """Raised by check() when the built structure fails verification."""
    pass


class IntervalTree:
    """
    Map from intervals to payloads, queryable by point or by range.

    Usage:
        tree = IntervalTree(int)
        tree.insert(0, 10, "0-10")
        tree.insert(5, 20, "5-20")
        tree.stab(7)             # ['0-10', '5-20']
        tree.range_query(11, 30) # ['5-20']

    zero is a zero-argument callable returning the additive identity of
    the coordinate type (int, float, Decimal, Fraction ...).
    """

    def __init__(self, zero: Callable[[], Any],
                 intervals: Optional[Iterable[Interval]] = None,
                 *, debug: bool = False):
        self._zero = zero
        self._debug = debug
        self.stats = {
            "rebuilds": 0,
            "inserts": 0,
            "stab_queries": 0,
            "range_queries": 0,
        }

        if intervals is None:
            self._root = IntervalNode.empty(zero)
            self._pending: List[Interval] = []
            self._cached_size = 0
        else:
            initial = list(intervals)
            for interval in initial:
                validate_range(interval.start, interval.end)
            self._root = IntervalNode.build(initial, zero)
            self._pending = initial
            self._cached_size = len(initial)

        # The first query always rebuilds, even for a freshly built root.
        self._in_sync = False

    # ─── Mutation ───────────────────────────────────────────────────

    def insert(self, start: Any, end: Any, data: Any = None) -> Interval:
        """
        Add [start, end] -> data. Raises InvalidRangeError if start >= end.
        The structure is rebuilt on the next query, not here.
        """
        validate_range(start, end)
        interval = Interval(start, end, data)
        self._append(interval)
        return interval

    def add_interval(self, interval: Interval) -> None:
        """Add a prepared Interval. Same validation as insert()."""
        validate_range(interval.start, interval.end)
        self._append(interval)

    def _append(self, interval: Interval) -> None:
        self._pending.append(interval)
        self._in_sync = False
        self.stats["inserts"] += 1

    # ─── Queries ────────────────────────────────────────────────────

    def stab(self, point: Any) -> List[Any]:
        """Payloads of all intervals containing point."""
        return [interval.data for interval in self.stab_intervals(point)]

    def stab_intervals(self, point: Any) -> List[Interval]:
        """All intervals containing point."""
        self.rebuild()
        self.stats["stab_queries"] += 1
        return self._root.stab(point)

    def range_query(self, start: Any, end: Any) -> List[Any]:
        """Payloads of all intervals intersecting [start, end]."""
        return [interval.data for interval in self.range_query_intervals(start, end)]

    def range_query_intervals(self, start: Any, end: Any) -> List[Interval]:
        """
        All intervals intersecting [start, end].
        Raises InvalidRangeError if start >= end.
        """
        validate_range(start, end)
        self.rebuild()
        self.stats["range_queries"] += 1
        return self._root.query(Interval(start, end))

    # ─── Rebuild ────────────────────────────────────────────────────

    def rebuild(self) -> None:
        """Rebuild the node structure from the pending list if stale."""
        if self._in_sync:
            return
        self._root = IntervalNode.build(self._pending, self._zero)
        self._in_sync = True
        self._cached_size = len(self._pending)
        self.stats["rebuilds"] += 1
        if self._debug:
            _debug_print(
                f"[IntervalTree] rebuilt {self._cached_size} intervals: "
                f"{self._root.node_count()} nodes, height {self._root.height}"
            )

    # ─── Introspection ──────────────────────────────────────────────

    def in_sync(self) -> bool:
        """True if no changes have been made since the last rebuild."""
        return self._in_sync

    def cached_size(self) -> int:
        """Number of intervals in the currently built structure."""
        return self._cached_size

    def pending_size(self) -> int:
        """Number of intervals in the pending list."""
        return len(self._pending)

    @property
    def root(self) -> IntervalNode:
        """Current node structure. May be stale; see in_sync()."""
        return self._root

    @property
    def height(self) -> int:
        return self._root.height

    @property
    def node_count(self) -> int:
        return self._root.node_count()

    def __len__(self) -> int:
        return len(self._pending)

    # ─── Debug / Verification ───────────────────────────────────────

    def verify_structure(self) -> List[str]:
        """
        Verify the built structure against its partition invariants and,
        when in sync, against the pending list.
        Returns list of issues found (empty = healthy).
        """
        issues = self._root.verify_structure()

        if self._in_sync:
            stored = _tally(self._root.all_intervals())
            expected = _tally(self._pending)
            if stored != expected:
                issues.append(
                    f"Stored intervals differ from pending list: "
                    f"{sum(stored.values())} stored, {sum(expected.values())} pending"
                )
        return issues

    def check(self) -> None:
        """Raise TreeStateError if verify_structure() reports anything."""
        issues = self.verify_structure()
        if issues:
            raise TreeStateError("; ".join(issues))

    def __str__(self) -> str:
        lines = []
        for depth, node in self._root.walk():
            lines.append("\t" * depth + str(node) + "\n")
        return "".join(lines)

    def __repr__(self) -> str:
        return (f"IntervalTree(pending={len(self._pending)}, "
                f"cached={self._cached_size}, in_sync={self._in_sync})")


def _tally(intervals: Iterable[Interval]) -> dict:
    """Multiset of intervals keyed by identity, tolerant of unhashable payloads."""
    counts: dict = {}
    for interval in intervals:
        counts[id(interval)] = counts.get(id(interval), 0) + 1
    return counts


def _debug_print(message: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}", file=sys.stderr)
