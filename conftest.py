# Italian Phrase Anomaly Toolkit – conftest.py
# Shared pytest fixtures and path setup

import sys
from pathlib import Path
import pytest

# Ensure project root is on sys.path for all tests
sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def isolate_data_dir(tmp_path, monkeypatch):
    """
    Redirect all config data paths to a temp directory
    so tests never touch the real data/ folder.
    """
    import config
    monkeypatch.setattr(config, "DATA_DIR",        tmp_path / "data")
    monkeypatch.setattr(config, "TRAINING_CORPUS", tmp_path / "data/training.pos")
    monkeypatch.setattr(config, "SCORING_CORPUS",  tmp_path / "data/scoring.pos")
    monkeypatch.setattr(config, "MORPH_DICT",      tmp_path / "data/morph-it.txt")
    monkeypatch.setattr(config, "SUFFIX_THETA",    None)
    (tmp_path / "data").mkdir(exist_ok=True)
