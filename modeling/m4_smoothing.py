"""
m4_smoothing.py
───────────────
Deleted-estimation smoothing for the trigram chain graph.

The interpolation weights are a pure function of a trained (frozen) graph:
every trigram chain votes, with its own frequency, for the order whose
leave-one-out relative frequency predicts it best.

    uni = (f(w3) - 1)        / (distinct tokens - 1)
    bi  = (f(w2 → w3) - 1)   / (f(w1 → w2) - 1)
    tri = (f(w1 → w2 → w3) - 1) / (f(w1 → w2) - 1)

A zero denominator makes the ratio 0. Only a strict winner gets the vote;
when two or more ratios share the maximum the trigram awards nothing.

Smoothed probability of w3 after (w1, w2):

    P = l1 · f(w3)/N + l2 · f(w2 → w3)/f(w2) + l3 · f(w1 → w2 → w3)/f(w1 → w2)

Token counts are used when the bigram w2 → w3 was observed; otherwise w3 is
replaced by its longest known suffix and the same formula runs over the
suffix graph. No suffix evidence means probability 0.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from modeling.m2_chain_graph import ChainGraph
from modeling.m3_suffix_index import SuffixIndex, context_key, suffix_key


@dataclass(frozen=True)
class LambdaVector:
    unigram: float = 0.0
    bigram: float = 0.0
    trigram: float = 0.0

    def __iter__(self):
        return iter((self.unigram, self.bigram, self.trigram))

    @property
    def total(self) -> float:
        return self.unigram + self.bigram + self.trigram

    @classmethod
    def normalized(cls, weights: Sequence[float]) -> "LambdaVector":
        total = sum(weights)
        if total == 0:
            return cls()
        return cls(*(w / total for w in weights))


def _ratio(num: float, den: float) -> float:
    return num / den if den > 0 else 0.0


def strict_winner(values: Sequence[float]) -> Optional[int]:
    """Index of the strictly largest value, None on a tie for the maximum."""
    best = max(values)
    if sum(1 for v in values if v == best) > 1:
        return None
    return values.index(best)


def deleted_estimation(graph: ChainGraph) -> LambdaVector:
    weights = [0.0, 0.0, 0.0]
    distinct = graph.size()
    for (first, prev, last), node in graph.trigrams():
        context = graph.chain((first, prev)).freq
        bigram = graph.chain((prev, last))
        ratios = (
            _ratio(graph.count(last) - 1, distinct - 1),
            _ratio((bigram.freq if bigram else 0) - 1, context - 1),
            _ratio(node.freq - 1, context - 1),
        )
        winner = strict_winner(ratios)
        if winner is not None:
            weights[winner] += node.freq
    return LambdaVector.normalized(weights)


class ChainEstimator:
    """Smoothed trigram probabilities over a frozen graph."""

    def __init__(self, graph: ChainGraph, lambdas: Optional[LambdaVector] = None,
                 suffix_index: Optional[SuffixIndex] = None):
        self.graph = graph
        self.lambdas = lambdas if lambdas is not None else deleted_estimation(graph)
        self.suffix_index = suffix_index

    def probability(self, first: str, prev: str, token: str) -> float:
        if self.graph.chain((prev, token)) is not None:
            return self._interpolate(self.graph, first, prev, token)
        if self.suffix_index is None:
            return 0.0
        suffix = self.suffix_index.longest_suffix(token)
        if suffix is None:
            return 0.0
        return self._interpolate(self.suffix_index.graph, context_key(first),
                                 context_key(prev), suffix_key(suffix))

    def _interpolate(self, graph: ChainGraph, first: str, prev: str, leaf: str) -> float:
        l1, l2, l3 = self.lambdas
        total = self.graph.total_tokens

        uni = _ratio(graph.count(leaf), total)

        prev_node = graph.root(prev)
        edge = graph.next(prev_node, leaf)
        bi = _ratio(edge.freq, prev_node.freq) if edge else 0.0

        context = graph.chain((first, prev))
        tri_node = graph.next(context, leaf)
        tri = _ratio(tri_node.freq, context.freq) if tri_node else 0.0

        return l1 * uni + l2 * bi + l3 * tri

    def score_gram(self, gram: Sequence[str]) -> float:
        if len(gram) != self.graph.order:
            raise ValueError(f"Expected a {self.graph.order}-gram, got {len(gram)} items.")
        return self.probability(*gram)

    def chain_scores(self, sequence: Sequence[str]) -> list[float]:
        """Probability of every full trigram window of a framed sequence."""
        n = self.graph.order
        return [self.score_gram(sequence[i - n + 1 : i + 1]) for i in range(n - 1, len(sequence))]
