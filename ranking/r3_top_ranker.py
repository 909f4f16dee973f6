"""
r3_top_ranker.py
────────────────
Bounded top-K selection over a stream of scored phrases.

A TopSet keeps at most `capacity` phrases in a binary heap whose root is the
element to evict next: the minimum for "highest", the maximum for "lowest".
An insert pushes (N+1 elements) and pops the root back down to N, so every
insert is O(log N) and memory stays O(N) whatever the corpus size.
On equal scores the phrase inserted first is kept.
"""

import heapq
import itertools
from typing import Iterator

from ranking.r1_scored_phrase import ScoredPhrase

KEEP = ("highest", "lowest")


class TopSet:
    def __init__(self, capacity: int, keep: str = "highest"):
        if capacity < 1:
            raise ValueError("Capacity must be at least 1.")
        if keep not in KEEP:
            raise ValueError(f"keep must be one of {KEEP}")
        self.capacity = capacity
        self.keep = keep
        self._heap: list[tuple[float, int, ScoredPhrase]] = []
        self._counter = itertools.count()

    def _key(self, score: float, seq: int) -> tuple[float, int]:
        # root = next to evict; ties evict the newest (largest seq)
        if self.keep == "highest":
            return score, -seq
        return -score, -seq

    def insert(self, phrase: ScoredPhrase) -> None:
        seq = next(self._counter)
        heapq.heappush(self._heap, (*self._key(phrase.score, seq), phrase))
        if len(self._heap) > self.capacity:
            heapq.heappop(self._heap)

    def peek(self) -> ScoredPhrase:
        """The current eviction candidate: min of "highest", max of "lowest"."""
        if not self._heap:
            raise IndexError("peek from an empty TopSet")
        return self._heap[0][-1]

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self) -> Iterator[ScoredPhrase]:
        return iter(self.ranked())

    def ranked(self) -> list[ScoredPhrase]:
        """Best first: descending for "highest", ascending for "lowest"."""
        return [entry[-1] for entry in sorted(self._heap, reverse=True)]


class TopRanker:
    """The N highest- and N lowest-scored phrases of a stream."""

    def __init__(self, capacity: int):
        self.top = TopSet(capacity, "highest")
        self.bottom = TopSet(capacity, "lowest")
        self.discarded = 0

    def rank(self, phrase: ScoredPhrase) -> bool:
        if not phrase.tokens or phrase.score == 0:
            self.discarded += 1
            return False
        self.top.insert(phrase)
        self.bottom.insert(phrase)
        return True
