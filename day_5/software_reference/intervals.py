"""
Half-open integer intervals.

An Interval [start, end) covers start, start + 1, ..., end - 1. Empty
intervals are never represented: code that might produce one checks the
bounds first and simply drops it.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True, order=True)
class Interval:
    """
    Range of integers, inclusive of the start and exclusive of the end.

    :ivar start: First integer in the interval
    :ivar end: One past the last integer in the interval
    """

    start: int
    end: int

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"Empty interval [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        # Not __len__: len() is capped at sys.maxsize and 64-bit ranges exceed it
        return self.end - self.start

    def __contains__(self, value):
        return self.start <= value < self.end

    def __iter__(self):
        yield from range(self.start, self.end)

    def overlaps(self, other: "Interval") -> bool:
        return other.start < self.end and other.end > self.start

    def intersect(self, other: "Interval") -> Optional["Interval"]:
        """
        Compute the largest interval within both this one and ``other``.

        Returns:
            The intersection, or None when the two do not overlap
        """
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start >= end:
            return None
        return Interval(start, end)

    def shift(self, offset: int) -> "Interval":
        return Interval(self.start + offset, self.end + offset)


def make_interval(start: int, end: int) -> Optional[Interval]:
    """Build [start, end), or return None when it would be empty."""
    if start >= end:
        return None
    return Interval(start, end)


def total_length(intervals: Iterable[Interval]) -> int:
    """Sum of interval lengths (overlaps are counted once per interval)."""
    return sum(interval.length for interval in intervals)


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Merge all overlapping or touching intervals in a single pass.

    Args:
        intervals: Iterable of Interval objects, in any order

    Returns:
        list: Non-overlapping, non-touching intervals sorted by start

    Algorithm:
        1. Sort intervals by start position
        2. For each interval, try to extend the last merged one
        3. Half-open intervals touch when current.start == last.end, so
           those are joined too
        4. Otherwise, start a new merged interval
    """
    sorted_intervals = sorted(intervals)
    if not sorted_intervals:
        return []

    merged = [sorted_intervals[0]]

    for current in sorted_intervals[1:]:
        last = merged[-1]

        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = Interval(last.start, current.end)
        else:
            merged.append(current)

    return merged
