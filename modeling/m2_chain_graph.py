"""
m2_chain_graph.py
─────────────────
N-gram chain graph built over the prefix index.

For every start position of a phrase a window of width N (trimmed at the
right edge) is walked: the first token's root node counts the window, each
following token is recorded as a neighbor edge of the previous node. A node
reached through k-1 edges therefore holds the frequency of that exact
order-k chain.

Usage:
    python modeling/m2_chain_graph.py --corpus data/training.pos --token il
    python modeling/m2_chain_graph.py --corpus data/training.pos --token NOUN --tags
"""

import sys
from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

import click
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))
import config
from modeling.m1_prefix_index import ChainNode, PrefixIndex


def frame(sequence: Sequence[str]) -> list[str]:
    """Wrap a token or tag sequence with the START/STOP sentinels."""
    return [config.START_TOKEN, *sequence, config.STOP_TOKEN]


class ChainGraph:
    def __init__(self, order: Optional[int] = None):
        self.order = order or config.NGRAM_ORDER
        self.index = PrefixIndex()
        self.total_tokens = 0
        self.phrases = 0
        self.lengths: Counter = Counter()

    # ── building ───────────────────────────────────────────────────────────────
    def add_node(self, key: str, freq: int = 1) -> ChainNode:
        """Create the root node for `key` or add `freq` to it."""
        node = self.index.get(key)
        if node is None:
            node = ChainNode(freq)
            self.index.put(key, node)
        else:
            node.freq += freq
        self.total_tokens += freq
        return node

    def ensure_node(self, key: str, freq: int) -> ChainNode:
        """Return the root for `key`, creating it with `freq` if missing."""
        node = self.index.get(key)
        if node is None:
            node = ChainNode(freq)
            self.index.put(key, node)
        return node

    def add_neighbor(self, prev: ChainNode, key: str, freq: int = 1) -> ChainNode:
        """Record the edge prev → key; `key` must already be a root."""
        if prev is None:
            raise ValueError("Invalid node.")
        ordinal = self.index.ordinal_of(key)
        if ordinal is None:
            raise ValueError(f"Unknown successor {key!r}.")
        neighbor = prev.neighbors.get(ordinal)
        if neighbor is None:
            neighbor = ChainNode(freq, ordinal)
            prev.neighbors[ordinal] = neighbor
        else:
            neighbor.freq += freq
        return neighbor

    def ensure_neighbor(self, prev: ChainNode, key: str, freq: int) -> ChainNode:
        ordinal = self.index.ordinal_of(key)
        if ordinal is None:
            raise ValueError(f"Unknown successor {key!r}.")
        neighbor = prev.neighbors.get(ordinal)
        if neighbor is None:
            neighbor = ChainNode(freq, ordinal)
            prev.neighbors[ordinal] = neighbor
        return neighbor

    def add_phrase(self, tokens: Sequence[str]) -> None:
        """Fold one (usually framed) phrase into the graph."""
        tokens = list(tokens)
        if not tokens:
            raise ValueError("Empty tokens queue.")
        if any(not t for t in tokens):
            raise ValueError("Empty token.")

        sentinels = (config.START_TOKEN, config.STOP_TOKEN)
        self.lengths[sum(1 for t in tokens if t not in sentinels)] += 1
        self.phrases += 1

        roots = [self.add_node(t) for t in tokens]
        for start in range(len(tokens)):
            node = roots[start]
            for key in tokens[start + 1 : start + self.order]:
                node = self.add_neighbor(node, key)

    def merge(self, other: "ChainGraph") -> None:
        """Add every count of `other` (a graph trained on another shard)."""
        for key in other.index.keys():
            self.add_node(key, other.index.get(key).freq)
        for path, node in other.walk():
            if len(path) == 1:
                continue
            parent = self.chain(path[:-1])
            self.add_neighbor(parent, path[-1], node.freq)
        self.lengths.update(other.lengths)
        self.phrases += other.phrases

    # ── lookup ─────────────────────────────────────────────────────────────────
    def root(self, key: str) -> Optional[ChainNode]:
        return self.index.get(key)

    def next(self, prev: Optional[ChainNode], key: str) -> Optional[ChainNode]:
        if prev is None:
            return None
        ordinal = self.index.ordinal_of(key)
        if ordinal is None:
            return None
        return prev.neighbors.get(ordinal)

    def chain(self, keys: Sequence[str]) -> Optional[ChainNode]:
        """Node at the end of the chain `keys`, or None if never observed."""
        if not keys:
            return None
        node = self.root(keys[0])
        for key in keys[1:]:
            node = self.next(node, key)
            if node is None:
                return None
        return node

    def count(self, token: str) -> int:
        node = self.index.get(token)
        return 0 if node is None else node.freq

    def size(self) -> int:
        return self.index.size()

    def length_count(self, length: int) -> int:
        return self.lengths.get(length, 0)

    def length_probability(self, length: int) -> float:
        """Share of training phrases with `length` tokens (sentinels excluded)."""
        if self.phrases == 0:
            return 0.0
        return self.lengths.get(length, 0) / self.phrases

    def walk(self) -> Iterator[tuple[tuple[str, ...], ChainNode]]:
        """
        Yield (key path, node) for every stored chain, parents before children.
        Uses an explicit stack; depth never exceeds the model order.
        """
        key_of = self.index.key_of
        for key in self.index.keys():
            stack = [((key,), self.index.get(key))]
            while stack:
                path, node = stack.pop()
                yield path, node
                for ordinal in sorted(node.neighbors, reverse=True):
                    stack.append((path + (key_of(ordinal),), node.neighbors[ordinal]))

    def trigrams(self) -> Iterator[tuple[tuple[str, ...], ChainNode]]:
        return ((p, n) for p, n in self.walk() if len(p) == self.order)

    def format_ngrams(self, token: str) -> list[str]:
        """Every chain rooted at `token` as "history freq" lines."""
        node = self.root(token)
        if node is None:
            return []
        key_of = self.index.key_of
        # pre-order, successors in ordinal order
        out: list[str] = []
        stack = [(token, node)]
        while stack:
            history, current = stack.pop()
            out.append(f"{history} {current.freq}")
            for ordinal in sorted(current.neighbors, reverse=True):
                stack.append((f"{history} {key_of(ordinal)}", current.neighbors[ordinal]))
        return out

    def suffix_smoothing_factor(self) -> float:
        """Population variance of root frequencies."""
        if self.size() == 0:
            return 0.0
        freqs = np.fromiter((self.index.get(k).freq for k in self.index.keys()),
                            dtype=np.float64, count=self.size())
        return float(np.var(freqs))


def build_graph(sentences: Iterable[list[tuple[str, str]]], tags: bool = False) -> ChainGraph:
    """Train a graph on token (or tag) sequences of tagged sentences."""
    graph = ChainGraph()
    for pairs in sentences:
        column = [tag if tags else tok for tok, tag in pairs]
        graph.add_phrase(frame(column))
    return graph


@click.command()
@click.option("--corpus", default=str(config.TRAINING_CORPUS), show_default=True,
              help="token<TAB>tag corpus")
@click.option("--token", required=True, help="Root token (or tag) to dump")
@click.option("--tags", is_flag=True, help="Build the graph over tags instead of tokens")
def main(corpus: str, token: str, tags: bool):
    from lexicon.l1_corpus_reader import read_sentences

    path = Path(corpus)
    if not path.exists():
        click.echo(f"❌ Corpus not found: {path}", err=True)
        sys.exit(1)

    try:
        graph = build_graph(read_sentences(path, progress=True), tags=tags)
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    click.echo(f"   {graph.size():,} distinct keys, {graph.phrases:,} phrases")
    lines = graph.format_ngrams(token)
    if not lines:
        click.echo(f"⚠  '{token}' not found in the graph.")
        return
    for line in lines:
        click.echo(line)


if __name__ == "__main__":
    main()
