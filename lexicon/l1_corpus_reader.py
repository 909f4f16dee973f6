"""
l1_corpus_reader.py
───────────────────
Streams a POS-annotated corpus: one `token<TAB>tag` pair per line, a blank
line between sentences. Malformed lines are skipped with a diagnostic on
stderr; I/O errors propagate to the caller.
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional

import click
from tqdm import tqdm


def parse_line(line: str) -> Optional[tuple[str, str]]:
    """Return (token, tag), or None when the line is not exactly two non-empty fields."""
    parts = line.rstrip("\r\n").split("\t")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def iter_sentences(lines: Iterable[str], source: str = "<input>") -> Iterator[list[tuple[str, str]]]:
    sentence: list[tuple[str, str]] = []
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            if sentence:
                yield sentence
                sentence = []
            continue
        pair = parse_line(line)
        if pair is None:
            click.echo(f"⚠  {source}:{lineno}: skipping malformed line {line.rstrip()!r}", err=True)
            continue
        sentence.append(pair)
    if sentence:
        yield sentence


def read_sentences(path: Path, progress: bool = False) -> Iterator[list[tuple[str, str]]]:
    """Lazily yield the tagged sentences of a corpus file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        lines = tqdm(f, desc=f"Reading {path.name}", unit=" lines", disable=not progress)
        yield from iter_sentences(lines, source=str(path))
