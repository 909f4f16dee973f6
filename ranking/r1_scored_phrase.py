"""
r1_scored_phrase.py
───────────────────
A phrase (parallel token and tag sequences) together with its score.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable

from modeling.m2_chain_graph import frame


@dataclass(frozen=True)
class ScoredPhrase:
    tokens: tuple[str, ...]
    tags: tuple[str, ...] = field(default=())
    score: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "tokens", tuple(self.tokens))
        object.__setattr__(self, "tags", tuple(self.tags))
        if self.tags and len(self.tags) != len(self.tokens):
            raise ValueError(
                f"Token/tag length mismatch: {len(self.tokens)} tokens, {len(self.tags)} tags"
            )

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "ScoredPhrase":
        pairs = list(pairs)
        return cls(tuple(t for t, _ in pairs), tuple(g for _, g in pairs))

    def __len__(self) -> int:
        return len(self.tokens)

    def framed_tokens(self) -> list[str]:
        return frame(self.tokens)

    def framed_tags(self) -> list[str]:
        return frame(self.tags)

    def with_score(self, score: float) -> "ScoredPhrase":
        return replace(self, score=score)

    def report_lines(self, rank: int) -> list[str]:
        lines = [str(rank), f"score: {self.score:.6g}", " ".join(self.tokens)]
        if self.tags:
            lines.append(" ".join(self.tags))
        return lines
