"""
m5_tag_dictionary.py
────────────────────
Token ↔ tag co-occurrence dictionary (the lexical model).

Counts how often each tag was seen with each token. Rare tokens also feed a
suffix table whose tag counts are blended from the shortest ending to the
longest one:

    smoothed(tag, s_k) = (raw(tag, s_k) + θ · smoothed(tag, s_k-1)) / (1 + θ)

with smoothed(tag, s_1) = raw(tag, s_1). Unseen tokens are counted through
their longest known ending.
"""

from collections import Counter
from typing import Iterable, Optional

import config
from modeling.m1_prefix_index import PrefixIndex
from modeling.m3_suffix_index import suffixes


class EmissionNode:
    __slots__ = ("freq", "ordinal", "tag_counts")

    def __init__(self, freq: int = 0):
        self.freq = freq
        self.ordinal = -1
        self.tag_counts: dict[str, float] = {}


class TagDictionary:
    def __init__(self, threshold: Optional[int] = None, max_length: Optional[int] = None):
        self.threshold = threshold if threshold is not None else config.SUFFIX_THRESHOLD
        self.max_length = max_length or config.MAX_SUFFIX_LENGTH
        self.index = PrefixIndex()
        self.suffix_index = PrefixIndex()
        self.tag_totals: Counter = Counter()
        self.theta: Optional[float] = None

    def add(self, token: str, tag: str, freq: int = 1) -> EmissionNode:
        if not token:
            raise ValueError("Empty token.")
        if not tag:
            raise ValueError("Empty tag.")
        node = self.index.get(token)
        if node is None:
            node = EmissionNode()
            self.index.put(token, node)
        node.freq += freq
        node.tag_counts[tag] = node.tag_counts.get(tag, 0) + freq
        self.tag_totals[tag] += freq
        return node

    def add_tagged_phrase(self, pairs: Iterable[tuple[str, str]]) -> None:
        pairs = list(pairs)
        for token, tag in pairs:
            if not token or not tag:
                raise ValueError(f"Invalid Token - Tag pair: {token!r}, {tag!r}")
        for token, tag in pairs:
            self.add(token, tag)

    def merge(self, other: "TagDictionary") -> None:
        for token in other.index.keys():
            for tag, count in other.index.get(token).tag_counts.items():
                self.add(token, tag, int(count))

    def build_suffix_index(self, theta: float) -> None:
        """Smoothed tag counts per ending of every token below the threshold."""
        self.theta = theta
        raw: dict[str, Counter] = {}
        for token in self.index.keys():
            node = self.index.get(token)
            if node.freq >= self.threshold:
                continue
            for suffix in suffixes(token, self.max_length):
                raw.setdefault(suffix, Counter()).update(node.tag_counts)

        smoothed: dict[str, dict[str, float]] = {}
        for suffix in sorted(raw, key=len):
            counts = raw[suffix]
            shorter = smoothed.get(suffix[1:]) if len(suffix) > 1 else None
            if shorter is None:
                blended = {tag: float(c) for tag, c in counts.items()}
            else:
                blended = {
                    tag: (counts.get(tag, 0) + theta * shorter.get(tag, 0.0)) / (1 + theta)
                    for tag in set(counts) | set(shorter)
                }
            smoothed[suffix] = blended

            node = EmissionNode(sum(counts.values()))
            node.tag_counts = blended
            self.suffix_index.put(suffix, node)

    def count(self, token: str, tag: str) -> float:
        node = self.index.get(token)
        if node is None:
            return self.suffix_count(token, tag)
        return node.tag_counts.get(tag, 0)

    def suffix_count(self, token: str, tag: str) -> float:
        for suffix in suffixes(token, self.max_length):
            node = self.suffix_index.get(suffix)
            if node is not None:
                return node.tag_counts.get(tag, 0.0)
        return 0.0

    def tag_count(self, tag: str) -> int:
        return self.tag_totals.get(tag, 0)

    def emission(self, token: str, tag: str) -> float:
        """count(token, tag) / count(tag)"""
        total = self.tag_count(tag)
        if total == 0:
            return 0.0
        return self.count(token, tag) / total

    def tags(self, token: str) -> dict[str, float]:
        node = self.index.get(token)
        return dict(node.tag_counts) if node else {}

    def size(self) -> int:
        return self.index.size()
