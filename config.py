"""
config.py – Centralized project configuration.
All modules import from here so settings stay consistent.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ── Project Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

# ── Corpus Paths ───────────────────────────────────────────────────────────────
TRAINING_CORPUS = Path(os.getenv("TRAINING_CORPUS", str(DATA_DIR / "training.pos")))
SCORING_CORPUS  = Path(os.getenv("SCORING_CORPUS", str(DATA_DIR / "scoring.pos")))
MORPH_DICT      = Path(os.getenv("MORPH_DICT", str(DATA_DIR / "morph-it.txt")))

# ── N-gram Model ───────────────────────────────────────────────────────────────
NGRAM_ORDER       = 3
START_TOKEN       = os.getenv("START_TOKEN", "START")
STOP_TOKEN        = os.getenv("STOP_TOKEN", "STOP")
SUFFIX_THRESHOLD  = int(os.getenv("SUFFIX_THRESHOLD", "10"))
MAX_SUFFIX_LENGTH = int(os.getenv("MAX_SUFFIX_LENGTH", "4"))

# Unset → derived from the tag graph's frequency variance.
_THETA = os.getenv("SUFFIX_THETA")
SUFFIX_THETA = float(_THETA) if _THETA else None

# ── Scoring / Ranking ──────────────────────────────────────────────────────────
TOP_N        = int(os.getenv("TOP_N", "500"))
SCORE_POLICY = os.getenv("SCORE_POLICY", "additive")   # additive | multiplicative

# ── Lexicon Diff ───────────────────────────────────────────────────────────────
LEXICON_MIN_LENGTH = int(os.getenv("LEXICON_MIN_LENGTH", "3"))
LEXICON_TOP_N      = int(os.getenv("LEXICON_TOP_N", "50000"))
