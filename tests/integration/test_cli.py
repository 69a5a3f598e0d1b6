"""End-to-end tests for the postings-search command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from postings_search.cli import main


pytestmark = pytest.mark.integration


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    path = tmp_path / "works.txt"
    path.write_text(
        "Julius Caesar\nBrutus and Caesar meet at 15:10.\n1599\n"
        "Hamlet\nThe prince of Denmark.\n1601\n"
        "Antony and Cleopatra\nCaesar returns, Brutus is gone.\n1606\n",
        encoding="utf-8",
    )
    return path


def test_runs_queries(corpus_file: Path, capsys):
    assert main([str(corpus_file), "Brutus", "Brutus Caesar", "denmark", "15:10"]) == 0

    out = capsys.readouterr().out
    assert "Built index for 3 documents" in out
    assert "Result for 'Brutus': [0, 2]" in out
    assert "Result for 'Brutus Caesar': [0, 2]" in out
    assert "Result for 'denmark': [1]" in out
    assert "Result for '15:10': [0]" in out


def test_strict_flag_changes_missing_term_handling(corpus_file: Path, capsys):
    main([str(corpus_file), "hamlet ophelia"])
    assert "Result for 'hamlet ophelia': [1]" in capsys.readouterr().out

    main([str(corpus_file), "--strict", "hamlet ophelia"])
    assert "Result for 'hamlet ophelia': []" in capsys.readouterr().out


def test_strict_policy_from_environment(corpus_file: Path, capsys, monkeypatch):
    monkeypatch.setenv("POSTINGS_SEARCH_MISSING_TERM_POLICY", "strict")
    main([str(corpus_file), "hamlet ophelia"])
    assert "Result for 'hamlet ophelia': []" in capsys.readouterr().out


def test_stats_and_workers(corpus_file: Path, capsys):
    assert main([str(corpus_file), "--workers", "3", "--stats", "caesar"]) == 0
    out = capsys.readouterr().out
    assert "terms=" in out
    assert "Result for 'caesar': [0, 2]" in out


def test_missing_corpus_exits_with_error(tmp_path: Path, capsys):
    assert main([str(tmp_path / "nope.txt"), "brutus"]) == 1
    assert "Corpus file not found" in capsys.readouterr().err


def test_rejects_unknown_analyzer(corpus_file: Path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(corpus_file), "--analyzer", "porter", "x"])
    assert excinfo.value.code == 2


def test_metrics_flag_prints_exposition(corpus_file: Path, capsys):
    assert main([str(corpus_file), "--metrics", "brutus"]) == 0
    out = capsys.readouterr().out
    assert "postings_search_queries_total" in out
    assert 'postings_search_index_documents{analyzer="default"} 3.0' in out


def test_trace_flag_prints_spans_once_per_run(corpus_file: Path, capsys):
    for _ in range(2):
        assert main([str(corpus_file), "--trace", "brutus"]) == 0
        err = capsys.readouterr().err
        assert err.count('"name": "index.build"') == 1
        assert err.count('"name": "query.search"') == 1

    main([str(corpus_file), "brutus"])
    assert '"name"' not in capsys.readouterr().err
