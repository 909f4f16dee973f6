"""
tests/test_lexicon.py
─────────────────────
Unit tests for corpus reading, the morphological dictionary and the
out-of-lexicon word finder.
"""

import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

MORPH_LINES = [
    "gatto\tgatto\tNOUN-M:s\n",
    "gatti\tgatto\tNOUN-M:p\n",
    "corre\tcorrere\tVER:ind+pres+3+s\n",
    "il\til\tART-M:s\n",
]


def _dictionary():
    from lexicon.l2_morph_dictionary import MorphDictionary
    return MorphDictionary.from_lines(MORPH_LINES)


class TestL1CorpusReader(unittest.TestCase):
    def test_parse_line(self):
        from lexicon.l1_corpus_reader import parse_line
        self.assertEqual(parse_line("gatto\tNOUN\n"), ("gatto", "NOUN"))
        self.assertIsNone(parse_line("gatto NOUN"))
        self.assertIsNone(parse_line("gatto\tNOUN\textra"))
        self.assertIsNone(parse_line("\tNOUN"))

    def test_sentences_split_on_blank_lines(self):
        from lexicon.l1_corpus_reader import iter_sentences
        lines = [
            "il\tDET", "gatto\tNOUN", "",
            "   ",
            "corre\tVERB", "riga malformata", "forte\tADV",
        ]
        sentences = list(iter_sentences(lines))
        self.assertEqual(sentences, [
            [("il", "DET"), ("gatto", "NOUN")],
            [("corre", "VERB"), ("forte", "ADV")],
        ])

    def test_read_sentences_from_file(self):
        from lexicon.l1_corpus_reader import read_sentences
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "corpus.pos"
            path.write_text("perché\tADV\nno\tADV\n\n\nsì\tADV\n", encoding="utf-8")
            sentences = list(read_sentences(path))
        self.assertEqual(len(sentences), 2)
        self.assertEqual(sentences[0][0], ("perché", "ADV"))

    def test_missing_file_raises(self):
        from lexicon.l1_corpus_reader import read_sentences
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                list(read_sentences(Path(tmp) / "missing.pos"))


class TestL2MorphDictionary(unittest.TestCase):
    def test_lookup(self):
        from lexicon.l2_morph_dictionary import MorphEntry
        d = _dictionary()
        self.assertEqual(d.size(), 4)
        self.assertEqual(d.lemma_count(), 3)
        self.assertTrue(d.contains("gatti"))
        self.assertIn("corre", d)
        self.assertEqual(d.get("gatto"), [MorphEntry("gatto", "NOUN-M:s")])
        self.assertIsNone(d.get("ratto"))
        self.assertEqual(d.lemmas("gatti"), ["gatto"])
        self.assertEqual(d.lemmas("ratto"), [])

    def test_duplicates_and_malformed_lines(self):
        from lexicon.l2_morph_dictionary import MorphDictionary
        d = MorphDictionary.from_lines(MORPH_LINES + [MORPH_LINES[0], "solo\tdue\n", "\n"])
        self.assertEqual(d.size(), 4)
        self.assertEqual(len(d.get("gatto")), 1)
        self.assertNotIn("solo", d)

    def test_labels_are_interned(self):
        d = _dictionary()
        d.add("gatta", "gatto", "NOUN-F:s")
        d.add("cane", "cane", "NOUN-M:s")
        self.assertEqual(list(d.labels()),
                         ["NOUN-M:s", "NOUN-M:p", "VER:ind+pres+3+s", "ART-M:s", "NOUN-F:s"])

    def test_load(self):
        from lexicon.l2_morph_dictionary import MorphDictionary
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "morph-it.txt"
            path.write_text("".join(MORPH_LINES), encoding="utf-8")
            d = MorphDictionary.load(path)
        self.assertEqual(d.size(), 4)


class TestL3LexiconDiff(unittest.TestCase):
    def test_normalize_token(self):
        from lexicon.l3_lexicon_diff import normalize_token
        self.assertEqual(normalize_token("Gatto,"), "gatto")
        self.assertEqual(normalize_token("l’amico"), "lamico")
        self.assertEqual(normalize_token("2024"), "")

    def test_candidates(self):
        from lexicon.l3_lexicon_diff import LexiconDiff
        diff = LexiconDiff(_dictionary(), min_length=3)
        self.assertTrue(diff.add_token("Gattoso"))
        self.assertFalse(diff.add_token("gatto"))     # known form
        self.assertFalse(diff.add_token("ok"))        # too short
        self.assertFalse(diff.add_token("RT"))
        self.assertFalse(diff.add_token("#gattini"))
        self.assertFalse(diff.add_token("http://t.co/abc"))
        self.assertFalse(diff.add_token("tcoabc"))
        self.assertFalse(diff.add_token("12345"))
        self.assertEqual(diff.size(), 1)
        self.assertTrue(diff.contains("gattoso"))

    def test_scores_and_top_words(self):
        from lexicon.l3_lexicon_diff import LexiconDiff
        diff = LexiconDiff(_dictionary(), min_length=3)
        diff.add_sentences([
            [("il", "DET"), ("gattoso", "ADJ"), ("corre", "VERB")],
            [("gattoso", "ADJ"), ("cagnolone", "NOUN")],
        ])
        self.assertEqual(diff.get("gattoso"), 2)
        self.assertEqual(diff.score_trigram(["il", "gattoso", "corre"]), 2)
        self.assertEqual(diff.score_trigram(["il", "gatto", "corre"]), 0)
        self.assertEqual(diff.score_phrase(["il", "gattoso", "cagnolone", "corre"]), 3)
        self.assertEqual(diff.top_words(1), [("gattoso", 2)])
        self.assertEqual(diff.top_words(5), [("gattoso", 2), ("cagnolone", 1)])
        with self.assertRaises(ValueError):
            diff.score_trigram(["il", "gattoso"])

    def test_cli_words(self):
        from click.testing import CliRunner
        from lexicon.l3_lexicon_diff import main
        with tempfile.TemporaryDirectory() as tmp:
            lexicon = Path(tmp) / "morph-it.txt"
            lexicon.write_text("".join(MORPH_LINES), encoding="utf-8")
            corpus = Path(tmp) / "scoring.pos"
            corpus.write_text("il\tDET\ngattoso\tADJ\ncorre\tVERB\n", encoding="utf-8")
            result = CliRunner().invoke(main, ["--lexicon", str(lexicon), "--corpus", str(corpus)])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("1 gattoso 1", result.output)

    def test_cli_missing_lexicon(self):
        from click.testing import CliRunner
        from lexicon.l3_lexicon_diff import main
        with tempfile.TemporaryDirectory() as tmp:
            result = CliRunner().invoke(main, ["--lexicon", str(Path(tmp) / "none.txt")])
        self.assertEqual(result.exit_code, 1)

    def test_cli_undecodable_corpus(self):
        from click.testing import CliRunner
        from lexicon.l3_lexicon_diff import main
        with tempfile.TemporaryDirectory() as tmp:
            lexicon = Path(tmp) / "morph-it.txt"
            lexicon.write_text("".join(MORPH_LINES), encoding="utf-8")
            corpus = Path(tmp) / "scoring.pos"
            corpus.write_bytes(b"gattoso\tADJ\n\xff\xfe\tX\n")
            result = CliRunner().invoke(main, ["--lexicon", str(lexicon), "--corpus", str(corpus)])
        self.assertEqual(result.exit_code, 1)
        self.assertNotIsInstance(result.exception, UnicodeDecodeError)


if __name__ == "__main__":
    unittest.main()
