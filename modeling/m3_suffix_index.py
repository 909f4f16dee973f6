"""
m3_suffix_index.py
──────────────────
Suffix back-off index for rare and unseen word forms.

Built once after training. Every token whose frequency is below the
threshold contributes its endings (longest first, trimmed one character at
a time from the left). Each chain of the token graph that ends in such a
token is replayed into a second chain graph with the final token replaced
by each of its endings, so the suffix graph answers "how often did this
context precede a rare word ending in -tto?".

Keys of the suffix graph carry a one-character namespace: suffix leaves are
"-<suffix>", context tokens are "=<token>". No raw token can reach the
other namespace, so an emoticon like "-_-" stays a context token and never
lands on the leaf of the suffix "_-".
"""

from typing import Optional

import config
from modeling.m1_prefix_index import ChainNode
from modeling.m2_chain_graph import ChainGraph

SUFFIX_MARK = "-"
CONTEXT_MARK = "="


def suffixes(token: str, max_length: Optional[int] = None) -> list[str]:
    """
    Fallback chain of endings, longest first.
        suffixes("gatto") → ["atto", "tto", "to", "o"]
    """
    if not token:
        raise ValueError("Empty token.")
    max_length = max_length or config.MAX_SUFFIX_LENGTH
    suffix = token[-max_length:]
    out = []
    while suffix:
        out.append(suffix)
        suffix = suffix[1:]
    return out


def suffix_key(suffix: str) -> str:
    return SUFFIX_MARK + suffix


def context_key(token: str) -> str:
    return CONTEXT_MARK + token


class SuffixIndex:
    def __init__(self, tokens: ChainGraph, threshold: Optional[int] = None,
                 max_length: Optional[int] = None):
        self.tokens = tokens
        self.threshold = threshold if threshold is not None else config.SUFFIX_THRESHOLD
        self.max_length = max_length or config.MAX_SUFFIX_LENGTH
        self.graph = ChainGraph(order=tokens.order)
        self.rare: set[str] = set()
        self._suffixes: set[str] = set()

    def build(self) -> "SuffixIndex":
        src = self.tokens
        self.rare = {k for k in src.index.keys() if src.count(k) < self.threshold}

        # roots first, so every suffix leaf has an ordinal before edges point at it
        for token in src.index.keys():
            if token in self.rare:
                for suffix in suffixes(token, self.max_length):
                    self._suffixes.add(suffix)
                    self.graph.add_node(suffix_key(suffix), src.count(token))

        for path, node in src.walk():
            if len(path) == 1 or path[-1] not in self.rare:
                continue
            parent = self._copy_context(path[:-1])
            for suffix in suffixes(path[-1], self.max_length):
                self.graph.add_neighbor(parent, suffix_key(suffix), node.freq)
        return self

    def _copy_context(self, context: tuple[str, ...]) -> ChainNode:
        """Mirror a context chain of the token graph, keeping its frequencies."""
        src = self.tokens
        for key in context:
            self.graph.ensure_node(context_key(key), src.count(key))
        node = self.graph.root(context_key(context[0]))
        src_node = src.root(context[0])
        for key in context[1:]:
            src_node = src.next(src_node, key)
            node = self.graph.ensure_neighbor(node, context_key(key), src_node.freq)
        return node

    # ── lookup ─────────────────────────────────────────────────────────────────
    def longest_suffix(self, token: str) -> Optional[str]:
        """Longest ending of `token` with suffix evidence, or None."""
        for suffix in suffixes(token, self.max_length):
            if suffix in self._suffixes:
                return suffix
        return None

    def contains_suffix(self, suffix: str) -> bool:
        return suffix in self._suffixes

    def count(self, suffix: str) -> int:
        return self.graph.count(suffix_key(suffix))

    def context_count(self, token: str) -> int:
        """Frequency of `token` as copied into the suffix graph, 0 if never a context."""
        return self.graph.count(context_key(token))

    def chain(self, context: tuple[str, ...], suffix: str) -> Optional[ChainNode]:
        """Node of `context` followed by a rare word ending in `suffix`."""
        return self.graph.chain([*map(context_key, context), suffix_key(suffix)])

    def size(self) -> int:
        return len(self._suffixes)
