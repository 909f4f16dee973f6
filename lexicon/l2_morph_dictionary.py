"""
l2_morph_dictionary.py
──────────────────────
Morph-it! style morphological lexicon for Italian, loaded once from a flat
`form<TAB>lemma<TAB>tag` file and used as an immutable lookup table.

Lemmas and tags are interned: each form keeps (lemma ordinal, tag ordinal)
pairs, so a 400k-form lexicon does not hold 400k copies of the tag strings.

    Eros Zanchetta and Marco Baroni (2005), "Morph-it! A free corpus-based
    morphological resource for the Italian language".
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

import click


@dataclass(frozen=True)
class MorphEntry:
    lemma: str
    tag: str


class MorphDictionary:
    def __init__(self):
        self._lemmas: list[str] = []
        self._lemma_ids: dict[str, int] = {}
        self._tags: list[str] = []
        self._tag_ids: dict[str, int] = {}
        self._forms: dict[str, list[tuple[int, int]]] = {}

    @classmethod
    def load(cls, path: Path) -> "MorphDictionary":
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_lines(f, source=str(path))

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: str = "<lexicon>") -> "MorphDictionary":
        d = cls()
        for lineno, line in enumerate(lines, 1):
            if not line.strip():
                continue
            parts = line.rstrip("\r\n").split("\t")
            if len(parts) != 3 or not all(parts):
                click.echo(f"⚠  {source}:{lineno}: skipping malformed entry {line.rstrip()!r}", err=True)
                continue
            d.add(*parts)
        return d

    def _intern(self, value: str, values: list[str], ids: dict[str, int]) -> int:
        key = ids.get(value)
        if key is None:
            key = len(values)
            values.append(value)
            ids[value] = key
        return key

    def add(self, form: str, lemma: str, tag: str) -> None:
        entry = (self._intern(lemma, self._lemmas, self._lemma_ids),
                 self._intern(tag, self._tags, self._tag_ids))
        entries = self._forms.setdefault(form, [])
        if entry not in entries:
            entries.append(entry)

    def contains(self, form: str) -> bool:
        return form in self._forms

    __contains__ = contains

    def get(self, form: str) -> Optional[list[MorphEntry]]:
        entries = self._forms.get(form)
        if entries is None:
            return None
        return [MorphEntry(self._lemmas[l], self._tags[t]) for l, t in entries]

    def lemmas(self, form: str) -> list[str]:
        return sorted({e.lemma for e in self.get(form) or []})

    def labels(self) -> Iterator[str]:
        return iter(self._tags)

    def size(self) -> int:
        return len(self._forms)

    def lemma_count(self) -> int:
        return len(self._lemmas)
