"""
r4_top_scored.py
────────────────
Scores every phrase of a POS-annotated corpus against a model trained on a
reference corpus and reports the N highest- and/or lowest-scored phrases.

Pipeline:
  1. Training pass   – token graph, tag graph and tag dictionary.
  2. Freeze          – suffix back-off indexes and smoothing weights.
  3. Scoring pass    – each held-out sentence is scored and ranked.
  4. Report          – rank, score, tokens and tags of each kept phrase.

Usage:
    python ranking/r4_top_scored.py --train data/training.pos --corpus data/scoring.pos
    python ranking/r4_top_scored.py --show bottom --top 100 --policy multiplicative
"""

import sys
from pathlib import Path

import click

sys.path.insert(0, str(Path(__file__).parent.parent))
import config
from lexicon.l1_corpus_reader import read_sentences
from ranking.r1_scored_phrase import ScoredPhrase
from ranking.r2_phrase_scorer import POLICIES, PhraseModel, PhraseScorer
from ranking.r3_top_ranker import TopRanker


def collect(train_path: Path, progress: bool = False) -> PhraseModel:
    """Training pass followed by freeze()."""
    model = PhraseModel()
    for pairs in read_sentences(train_path, progress=progress):
        model.add_sentence(pairs)
    return model.freeze()


def score_corpus(corpus_path: Path, scorer: PhraseScorer, ranker: TopRanker,
                 progress: bool = False) -> int:
    """Score and rank every sentence; returns the number of phrases too short to score."""
    skipped = 0
    for pairs in read_sentences(corpus_path, progress=progress):
        phrase = ScoredPhrase.from_pairs(pairs)
        try:
            ranker.rank(scorer.score(phrase))
        except ValueError as e:
            skipped += 1
            click.echo(f"⚠  {' '.join(phrase.tokens)!r}: {e}", err=True)
    return skipped


def report(phrases: list[ScoredPhrase]) -> str:
    blocks = ["\n".join(p.report_lines(rank)) for rank, p in enumerate(phrases, 1)]
    return "\n\n".join(blocks)


@click.command()
@click.option("--train", "train_path", default=str(config.TRAINING_CORPUS), show_default=True,
              help="Reference corpus (token<TAB>tag)")
@click.option("--corpus", "corpus_path", default=str(config.SCORING_CORPUS), show_default=True,
              help="Corpus whose phrases are ranked")
@click.option("--top", "top_n", default=config.TOP_N, show_default=True)
@click.option("--policy", type=click.Choice(POLICIES), default=config.SCORE_POLICY, show_default=True)
@click.option("--show", type=click.Choice(["top", "bottom", "both"]), default="both", show_default=True)
def main(train_path: str, corpus_path: str, top_n: int, policy: str, show: str):
    try:
        click.echo(f"📖 Training on {train_path}…", err=True)
        model = collect(Path(train_path), progress=True)
        lambdas = model.token_estimator.lambdas
        click.echo(
            f"   {model.tokens.size():,} tokens, {model.tags.size():,} tags, "
            f"{model.suffix_index.size():,} suffixes; "
            f"λ = ({lambdas.unigram:.3f}, {lambdas.bigram:.3f}, {lambdas.trigram:.3f})",
            err=True,
        )

        scorer = PhraseScorer(model, policy)
        ranker = TopRanker(top_n)
        click.echo(f"🔍 Scoring {corpus_path}…", err=True)
        skipped = score_corpus(Path(corpus_path), scorer, ranker, progress=True)
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"   {ranker.discarded:,} zero-score phrases discarded, {skipped:,} too short", err=True)

    if show in ("top", "both"):
        click.echo(f"✅ Top {len(ranker.top)} phrases\n")
        click.echo(report(ranker.top.ranked()))
        click.echo()
    if show in ("bottom", "both"):
        click.echo(f"✅ Bottom {len(ranker.bottom)} phrases\n")
        click.echo(report(ranker.bottom.ranked()))
        click.echo()


if __name__ == "__main__":
    main()
