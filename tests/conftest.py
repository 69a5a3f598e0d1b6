"""Shared test fixtures and configuration."""

import logging
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Complete test environment that overrides every config value
TEST_ENV = {
    "POSTINGS_SEARCH_ANALYZER": "default",
    "POSTINGS_SEARCH_INDEX_WORKERS": "1",
    "POSTINGS_SEARCH_MISSING_TERM_POLICY": "skip",
    "POSTINGS_SEARCH_CORPUS_ENCODING": "utf-8",
    "POSTINGS_SEARCH_LOG_LEVEL": "warning",
    "POSTINGS_SEARCH_LOG_JSON": "false",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset config environment variables before each test."""
    monkeypatch.delenv("POSTINGS_SEARCH_CORPUS_DELIMITER", raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler and level changes made by configure_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def animal_corpus() -> list[str]:
    """Three short documents; ids 0, 1, 2."""
    return [
        "the cat sat on the mat",
        "the dog sat on the log",
        "cat and dog played",
    ]


@pytest.fixture
def animal_index(animal_corpus):
    from postings_search.search.inverted_index import build_index

    return build_index(animal_corpus)
