"""
r2_phrase_scorer.py
───────────────────
Trains the token model, the tag model and the lexical dictionary, freezes
them, and scores phrases against them.

A phrase score combines, over the START/STOP-framed phrase:
  (a) smoothed trigram probabilities of the token chain,
  (b) smoothed trigram probabilities of the tag chain,
  (c) emission probabilities count(token, tag) / count(tag) per position.

Two composition policies are available and fixed per scorer:
  additive        – sum of every component value / phrase length
  multiplicative  – product of every component value, as a geometric
                    mean over the phrase length
"""

import math
from typing import Iterable, Optional, Sequence

import config
from modeling.m2_chain_graph import ChainGraph, frame
from modeling.m3_suffix_index import SuffixIndex
from modeling.m4_smoothing import ChainEstimator, deleted_estimation
from modeling.m5_tag_dictionary import TagDictionary
from ranking.r1_scored_phrase import ScoredPhrase

POLICIES = ("additive", "multiplicative")


class PhraseModel:
    """Token graph + tag graph + lexical dictionary, trained then frozen."""

    def __init__(self, threshold: Optional[int] = None, max_length: Optional[int] = None):
        self.threshold = threshold if threshold is not None else config.SUFFIX_THRESHOLD
        self.max_length = max_length or config.MAX_SUFFIX_LENGTH
        self.tokens = ChainGraph()
        self.tags = ChainGraph()
        self.lexicon = TagDictionary(self.threshold, self.max_length)
        self.suffix_index: Optional[SuffixIndex] = None
        self.token_estimator: Optional[ChainEstimator] = None
        self.tag_estimator: Optional[ChainEstimator] = None
        self.frozen = False

    def add_sentence(self, pairs: Sequence[tuple[str, str]]) -> None:
        if self.frozen:
            raise RuntimeError("Model is frozen; no more training sentences.")
        phrase = ScoredPhrase.from_pairs(pairs)
        if not phrase.tokens:
            raise ValueError("Empty sentence.")
        self.lexicon.add_tagged_phrase(pairs)
        self.tokens.add_phrase(phrase.framed_tokens())
        self.tags.add_phrase(phrase.framed_tags())

    def train(self, sentences: Iterable[Sequence[tuple[str, str]]]) -> "PhraseModel":
        for pairs in sentences:
            self.add_sentence(pairs)
        return self

    def merge(self, other: "PhraseModel") -> None:
        """Fold in a model trained on another shard; only before freeze()."""
        if self.frozen or other.frozen:
            raise RuntimeError("Cannot merge frozen models.")
        self.tokens.merge(other.tokens)
        self.tags.merge(other.tags)
        self.lexicon.merge(other.lexicon)

    def freeze(self, theta: Optional[float] = None) -> "PhraseModel":
        """Derive suffix indexes and smoothing weights; the model is read-only afterwards."""
        self.suffix_index = SuffixIndex(self.tokens, self.threshold, self.max_length).build()
        if theta is None:
            theta = config.SUFFIX_THETA
        if theta is None:
            theta = self.tags.suffix_smoothing_factor()
        self.lexicon.build_suffix_index(theta)
        self.token_estimator = ChainEstimator(self.tokens, deleted_estimation(self.tokens),
                                              self.suffix_index)
        self.tag_estimator = ChainEstimator(self.tags, deleted_estimation(self.tags))
        self.frozen = True
        return self


class PhraseScorer:
    def __init__(self, model: PhraseModel, policy: Optional[str] = None):
        policy = policy or config.SCORE_POLICY
        if policy not in POLICIES:
            raise ValueError(f"Unknown score policy {policy!r}; expected one of {POLICIES}")
        if not model.frozen:
            raise RuntimeError("Model must be frozen before scoring.")
        self.model = model
        self.policy = policy
        self.order = model.tokens.order

    def _check_length(self, length: int) -> None:
        if length < self.order - 1:
            raise ValueError(
                f"Phrase of {length} tokens is shorter than the model order allows "
                f"(minimum {self.order - 1})."
            )

    def components(self, phrase: ScoredPhrase) -> dict[str, list[float]]:
        self._check_length(len(phrase))
        parts = {"tokens": self.model.token_estimator.chain_scores(phrase.framed_tokens())}
        if phrase.tags:
            parts["tags"] = self.model.tag_estimator.chain_scores(phrase.framed_tags())
            parts["emissions"] = [
                self.model.lexicon.emission(tok, tag)
                for tok, tag in zip(phrase.tokens, phrase.tags)
            ]
        return parts

    def combine(self, parts: Iterable[list[float]], length: int) -> float:
        values = [v for part in parts for v in part]
        if self.policy == "additive":
            return sum(values) / length
        if not values or min(values) <= 0.0:
            return 0.0
        # log space, long phrases would underflow the plain product
        return math.exp(math.fsum(math.log(v) for v in values) / length)

    def score(self, phrase: ScoredPhrase) -> ScoredPhrase:
        parts = self.components(phrase)
        return phrase.with_score(self.combine(parts.values(), len(phrase)))

    def score_pairs(self, pairs: Sequence[tuple[str, str]]) -> ScoredPhrase:
        return self.score(ScoredPhrase.from_pairs(pairs))

    def token_chain_score(self, tokens: Sequence[str]) -> float:
        """Score of the token chain alone."""
        self._check_length(len(tokens))
        scores = self.model.token_estimator.chain_scores(frame(tokens))
        return self.combine([scores], len(tokens))
