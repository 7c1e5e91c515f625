# proofing/spans.py

from __future__ import annotations

from bisect import bisect_right
from typing import Iterable, Iterator, List, Optional, Tuple


class SpanSet:
    """
    Append-only set of half-open [start, end) ranges, scoped to one lint pass.

    Members are stored as the union of everything inserted, kept as disjoint
    intervals sorted by start. Overlap queries only need the union, so this
    gives O(log n) lookups. Intervals that merely touch (end == start) are
    kept apart, and touching spans never count as overlapping.
    """

    def __init__(self, spans: Optional[Iterable[Tuple[int, int]]] = None):
        self._starts: List[int] = []
        self._ends: List[int] = []
        self._count = 0
        for start, end in spans or ():
            self.insert(start, end)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(zip(self._starts, self._ends))

    def overlaps(self, start: int, end: int) -> bool:
        if start >= end:
            return False
        # intervals are disjoint and sorted, so at most the neighbour on each
        # side of `start` can intersect
        ix = bisect_right(self._starts, start)
        if ix > 0 and self._ends[ix - 1] > start:
            return True
        if ix < len(self._starts) and self._starts[ix] < end:
            return True
        return False

    def insert(self, start: int, end: int) -> None:
        if start >= end:
            raise ValueError(f"Invalid span [{start}, {end})")
        self._count += 1

        lo = bisect_right(self._starts, start)
        # absorb the left neighbour when it overlaps
        if lo > 0 and self._ends[lo - 1] > start:
            lo -= 1
            start = self._starts[lo]
            end = max(end, self._ends[lo])
        hi = lo
        while hi < len(self._starts) and self._starts[hi] < end:
            end = max(end, self._ends[hi])
            hi += 1

        self._starts[lo:hi] = [start]
        self._ends[lo:hi] = [end]
