"""
Interval Value Type
===================
A closed numeric interval [start, end] carrying an arbitrary payload.

Ordering:
  - Intervals order by start, then by end. The payload never breaks ties,
    so two intervals over the same range are ordering-equivalent even when
    their payloads differ.
  - Equality and hashing are structural over (start, end, data).

Coordinates may be any mutually comparable numbers (int, float, Decimal,
Fraction). Mixing incomparable types is a caller error and surfaces as the
interpreter's own TypeError.
"""

from dataclasses import dataclass
from typing import Any, Tuple


class InvalidRangeError(ValueError):
    """Raised when a range is supplied with start >= end."""

    def __init__(self, start: Any, end: Any):
        super().__init__(
            f"Beginning of range must be less than end: [{start}, {end}]"
        )
        self.start = start
        self.end = end


def validate_range(start: Any, end: Any) -> None:
    """Raise InvalidRangeError unless start < end."""
    if not start < end:
        raise InvalidRangeError(start, end)


@dataclass(frozen=True)
class Interval:
    """Closed interval with an associated payload."""
    start: Any
    end: Any
    data: Any = None

    @property
    def key(self) -> Tuple[Any, Any]:
        """The (start, end) pair used for sorted storage."""
        return (self.start, self.end)

    @property
    def length(self) -> Any:
        return self.end - self.start

    def contains(self, point: Any) -> bool:
        """True if point lies inside this interval (inclusive both ends)."""
        return self.start <= point <= self.end

    def intersects(self, other: "Interval") -> bool:
        """True if other shares at least one point with this interval."""
        return other.end >= self.start and other.start <= self.end

    def compare(self, other: "Interval") -> int:
        """
        Three-way comparison on (start, end).
        Returns -1, 0 or 1. Payloads are ignored.
        """
        if self.start < other.start:
            return -1
        if self.start > other.start:
            return 1
        if self.end < other.end:
            return -1
        if self.end > other.end:
            return 1
        return 0

    # ─── Ordering ───────────────────────────────────────────────────

    def __lt__(self, other: "Interval") -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: "Interval") -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: "Interval") -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: "Interval") -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return f"({self.start},{self.end},{self.data})"
