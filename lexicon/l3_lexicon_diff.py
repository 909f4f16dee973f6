"""
l3_lexicon_diff.py
──────────────────
Finds corpus words that the morphological lexicon does not know
(neologisms, misspellings, slang) and ranks them by frequency.

  - Tokens are normalized (lower case, stray punctuation stripped).
  - Only word-like tokens of at least LEXICON_MIN_LENGTH characters count;
    URLs, mentions, hashtags and the "rt" retweet marker are ignored.
  - A trigram scores the out-of-lexicon frequency of its central word; a
    phrase sums its trigram scores, which ranks phrases by how much
    unknown vocabulary they carry.

Usage:
    python lexicon/l3_lexicon_diff.py --lexicon data/morph-it.txt --corpus data/scoring.pos
    python lexicon/l3_lexicon_diff.py --phrases --top 100
"""

import re
import sys
from pathlib import Path
from typing import Iterable, Sequence

import click

sys.path.insert(0, str(Path(__file__).parent.parent))
import config
from lexicon.l1_corpus_reader import read_sentences
from lexicon.l2_morph_dictionary import MorphDictionary
from ranking.r1_scored_phrase import ScoredPhrase
from ranking.r3_top_ranker import TopSet

WORD_RE = re.compile(r"\w+")
STRIP_RE = re.compile(r"[‘’'~&;,.\"]")
SKIP_RE = re.compile(r"^(http|@|#|tco)")


def normalize_token(token: str) -> str:
    word = STRIP_RE.sub("", token.lower())
    return "" if word.isdigit() else word


class LexiconDiff:
    def __init__(self, dictionary: MorphDictionary, min_length: int | None = None):
        self.dictionary = dictionary
        self.min_length = min_length or config.LEXICON_MIN_LENGTH
        self.counts: dict[str, int] = {}

    def is_candidate(self, word: str) -> bool:
        return (
            bool(WORD_RE.fullmatch(word))
            and len(word) >= self.min_length
            and word != "rt"
            and not SKIP_RE.match(word)
            and not self.dictionary.contains(word)
        )

    def add_token(self, token: str) -> bool:
        word = normalize_token(token)
        if not self.is_candidate(word):
            return False
        self.counts[word] = self.counts.get(word, 0) + 1
        return True

    def add_sentences(self, sentences: Iterable[Sequence[tuple[str, str]]]) -> None:
        for pairs in sentences:
            for token, _ in pairs:
                self.add_token(token)

    def contains(self, word: str) -> bool:
        return word in self.counts

    def get(self, word: str) -> int:
        return self.counts.get(word, 0)

    def size(self) -> int:
        return len(self.counts)

    def score_trigram(self, trigram: Sequence[str]) -> int:
        """Out-of-lexicon frequency of the central word."""
        if len(trigram) != 3:
            raise ValueError(f"Size of trigram != 3 ({len(trigram)})")
        return self.get(normalize_token(trigram[1]))

    def score_phrase(self, tokens: Sequence[str]) -> int:
        return sum(self.score_trigram(tokens[i : i + 3]) for i in range(len(tokens) - 2))

    def top_words(self, n: int) -> list[tuple[str, int]]:
        top = TopSet(n, "highest")
        for word, count in self.counts.items():
            top.insert(ScoredPhrase((word,), score=count))
        return [(p.tokens[0], int(p.score)) for p in top.ranked()]


@click.command()
@click.option("--lexicon", default=str(config.MORPH_DICT), show_default=True,
              help="form<TAB>lemma<TAB>tag lexicon")
@click.option("--corpus", default=str(config.SCORING_CORPUS), show_default=True)
@click.option("--top", "top_n", default=config.LEXICON_TOP_N, show_default=True)
@click.option("--phrases", is_flag=True, help="Rank phrases instead of words")
def main(lexicon: str, corpus: str, top_n: int, phrases: bool):
    try:
        dictionary = MorphDictionary.load(Path(lexicon))
        click.echo(f"📖 Lexicon: {dictionary.size():,} forms, {dictionary.lemma_count():,} lemmas")

        diff = LexiconDiff(dictionary)
        diff.add_sentences(read_sentences(Path(corpus), progress=True))
        click.echo(f"   {diff.size():,} out-of-lexicon words")

        if not phrases:
            for rank, (word, count) in enumerate(diff.top_words(top_n), 1):
                click.echo(f"{rank} {word} {count}")
            return

        top = TopSet(top_n, "highest")
        for pairs in read_sentences(Path(corpus)):
            phrase = ScoredPhrase.from_pairs(pairs)
            score = diff.score_phrase(phrase.tokens)
            if score > 0:
                top.insert(phrase.with_score(score))
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    for rank, phrase in enumerate(top.ranked(), 1):
        click.echo("\n".join(phrase.report_lines(rank)))
        click.echo()


if __name__ == "__main__":
    main()
