"""
Centered Partition Node
=======================
One node of a centered interval tree. Built once from a list of intervals
and never mutated afterwards; the owning tree replaces the whole structure
on every rebuild.

Construction:
  1. Collect the distinct endpoints (every start and every end).
  2. center = sorted_endpoints[len // 2]. Not interpolated. An empty input
     falls back to zero().
  3. Partition the input around center:
       LEFT:        end < center
       RIGHT:       start > center
       OVERLAPPING: everything else (the interval spans or touches center)
  4. Recurse into non-empty LEFT and RIGHT buckets.

Median policy:
  The upper median of the distinct endpoint set is a fixed choice. Every
  interval in a child bucket has both endpoints strictly on one side of
  center, so each child sees at most half of the parent's distinct
  endpoints. Swapping in another median strategy changes tree shape and
  query cost.

Overlapping storage:
  Sorted list of (key, postings) pairs ordered by (start, end). Intervals
  sharing an exact (start, end) pair land in one postings list, in input
  order; the first one seen serves as the key. Sorted keys let a scan stop
  as soon as a key starts right of the query bound.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from interval_index.interval import Interval


Postings = Tuple[Interval, List[Interval]]


class IntervalNode:
    """
    Immutable partition node.

    Usage:
        node = IntervalNode.build(intervals, zero=int)
        hits = node.stab(5)
        hits = node.query(Interval(3, 8))
    """
    __slots__ = ('center', 'intervals', 'left', 'right')

    def __init__(self, center: Any, intervals: List[Postings],
                 left: Optional['IntervalNode'] = None,
                 right: Optional['IntervalNode'] = None):
        self.center = center
        self.intervals = intervals
        self.left = left
        self.right = right

    # ─── Construction ───────────────────────────────────────────────

    @classmethod
    def empty(cls, zero: Callable[[], Any]) -> 'IntervalNode':
        """A node with no intervals, centered on zero()."""
        return cls(zero(), [])

    @classmethod
    def build(cls, intervals: List[Interval],
              zero: Callable[[], Any]) -> 'IntervalNode':
        """Build a partition over intervals (see module docstring)."""
        endpoints = set()
        for interval in intervals:
            endpoints.add(interval.start)
            endpoints.add(interval.end)
        center = median(sorted(endpoints), zero)

        lefts: List[Interval] = []
        rights: List[Interval] = []
        groups: Dict[Tuple[Any, Any], Postings] = {}

        for interval in intervals:
            if interval.end < center:
                lefts.append(interval)
            elif interval.start > center:
                rights.append(interval)
            else:
                group = groups.get(interval.key)
                if group is None:
                    groups[interval.key] = (interval, [interval])
                else:
                    group[1].append(interval)

        overlapping = sorted(groups.values(), key=lambda g: g[0].key)
        left = cls.build(lefts, zero) if lefts else None
        right = cls.build(rights, zero) if rights else None
        return cls(center, overlapping, left, right)

    # ─── Queries ────────────────────────────────────────────────────

    def stab(self, point: Any) -> List[Interval]:
        """All intervals containing point."""
        result: List[Interval] = []

        for key, postings in self.intervals:
            if key.contains(point):
                result.extend(postings)
            elif key.start > point:
                break

        # point == center: neither child can hold an interval containing it
        if point < self.center and self.left is not None:
            result.extend(self.left.stab(point))
        elif point > self.center and self.right is not None:
            result.extend(self.right.stab(point))
        return result

    def query(self, target: Interval) -> List[Interval]:
        """All intervals intersecting target. target.data is ignored."""
        result: List[Interval] = []

        for key, postings in self.intervals:
            if key.intersects(target):
                result.extend(postings)
            elif key.start > target.end:
                break

        if target.start < self.center and self.left is not None:
            result.extend(self.left.query(target))
        if target.end > self.center and self.right is not None:
            result.extend(self.right.query(target))
        return result

    # ─── Shape ──────────────────────────────────────────────────────

    @property
    def height(self) -> int:
        """Number of levels in this subtree (a leaf has height 1)."""
        left_h = self.left.height if self.left is not None else 0
        right_h = self.right.height if self.right is not None else 0
        return 1 + max(left_h, right_h)

    def node_count(self) -> int:
        count = 1
        if self.left is not None:
            count += self.left.node_count()
        if self.right is not None:
            count += self.right.node_count()
        return count

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, 'IntervalNode']]:
        """Pre-order traversal yielding (depth, node), left before right."""
        yield depth, self
        if self.left is not None:
            yield from self.left.walk(depth + 1)
        if self.right is not None:
            yield from self.right.walk(depth + 1)

    def all_intervals(self) -> Iterator[Interval]:
        """Every stored interval, in walk order."""
        for _, node in self.walk():
            for _, postings in node.intervals:
                yield from postings

    # ─── Verification ───────────────────────────────────────────────

    def verify_structure(self) -> List[str]:
        """
        Check partition invariants over the whole subtree.
        Returns list of issues found (empty = healthy).
        """
        issues: List[str] = []
        self._verify_node(None, None, issues, "root")
        return issues

    def _verify_node(self, low: Any, high: Any, issues: List[str],
                     path: str) -> None:
        """
        low/high are the exclusive bounds inherited from ancestors:
        everything below a left edge ends before the parent center, and
        everything below a right edge starts after it.
        """
        for i in range(1, len(self.intervals)):
            if self.intervals[i][0] < self.intervals[i - 1][0] or \
                    self.intervals[i][0].key == self.intervals[i - 1][0].key:
                issues.append(f"{path}: keys not strictly sorted at position {i}")

        for key, postings in self.intervals:
            if not postings:
                issues.append(f"{path}: empty postings for [{key.start},{key.end}]")
            if not key.contains(self.center):
                issues.append(
                    f"{path}: [{key.start},{key.end}] does not span center {self.center}")
            for interval in postings:
                if interval.key != key.key:
                    issues.append(
                        f"{path}: {interval} filed under [{key.start},{key.end}]")
                if low is not None and interval.start <= low:
                    issues.append(f"{path}: {interval} starts at/below bound {low}")
                if high is not None and interval.end >= high:
                    issues.append(f"{path}: {interval} ends at/above bound {high}")

        if self.left is not None:
            self.left._verify_node(low, self.center, issues, path + ".L")
        if self.right is not None:
            self.right._verify_node(self.center, high, issues, path + ".R")

    # ─── Dunder ─────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalNode):
            return NotImplemented
        return (self.center == other.center
                and self.intervals == other.intervals
                and self.left == other.left
                and self.right == other.right)

    __hash__ = None

    def __str__(self) -> str:
        parts = [f"{self.center}: "]
        for key, postings in self.intervals:
            parts.append(f"[{key.start},{key.end}]:{{")
            parts.extend(str(interval) for interval in postings)
            parts.append("} ")
        return "".join(parts)

    def __repr__(self) -> str:
        return (f"IntervalNode(center={self.center!r}, "
                f"keys={len(self.intervals)}, height={self.height})")


def median(sorted_points: List[Any], zero: Callable[[], Any]) -> Any:
    """Element at index len // 2 of sorted_points, or zero() if empty."""
    if not sorted_points:
        return zero()
    return sorted_points[len(sorted_points) // 2]
