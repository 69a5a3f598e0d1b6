"""Unit tests for AND query evaluation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from postings_search.domain.search import SearchResponse
from postings_search.search.inverted_index import build_index
from postings_search.search.query import MissingTermPolicy, QueryEngine, search


pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("cat", [0, 2]),
        ("dog", [1, 2]),
        ("cat dog", [2]),
        ("the", [0, 1]),
        ("the cat dog", []),
        ("sat on", [0, 1]),
        ("CAT, Dog!", [2]),
    ],
)
def test_end_to_end_and_queries(animal_index, query, expected):
    assert search(animal_index, query) == expected


def test_single_term_returns_postings_verbatim(animal_index):
    assert search(animal_index, "played") == animal_index["played"].to_list()


def test_unknown_term_gives_empty_result(animal_index):
    assert search(animal_index, "unicorn") == []


def test_empty_query_gives_empty_result(animal_index):
    assert search(animal_index, "") == []
    assert search(animal_index, "?!") == []


def test_duplicate_query_terms_are_collapsed(animal_index):
    response = QueryEngine(animal_index).execute("cat cat dog cat")
    assert response.query.terms == ["cat", "dog"]
    assert response.doc_ids == [2]


class TestMissingTermPolicy:
    """An unknown term is ignored under SKIP and empties the result under STRICT."""

    def test_skip_ignores_unknown_terms(self, animal_index):
        assert search(animal_index, "cat unicorn") == [0, 2]
        assert search(animal_index, "cat unicorn", missing_term_policy="skip") == [0, 2]

    def test_strict_requires_every_term(self, animal_index):
        assert search(animal_index, "cat unicorn", missing_term_policy=MissingTermPolicy.STRICT) == []
        assert search(animal_index, "cat dog", missing_term_policy="strict") == [2]

    def test_policies_agree_when_all_terms_known(self, animal_index):
        for query in ("cat", "dog", "cat dog", "the", "the cat dog"):
            skip = search(animal_index, query, missing_term_policy="skip")
            strict = search(animal_index, query, missing_term_policy="strict")
            assert skip == strict

    def test_invalid_policy_rejected(self, animal_index):
        with pytest.raises(ValueError):
            QueryEngine(animal_index, missing_term_policy="lenient")


class TestExecute:
    def test_response_describes_query(self, animal_index):
        response = QueryEngine(animal_index).execute("The dog and the unicorn")
        assert isinstance(response, SearchResponse)
        # and={2} & the={0,1} & dog={1,2}
        assert response.doc_ids == []
        assert response.query.original_text == "The dog and the unicorn"
        assert response.query.terms == ["the", "dog", "and", "unicorn"]
        assert response.query.matched_terms == ["the", "dog", "and"]
        assert response.query.missing_terms == ["unicorn"]
        assert response.query.has_missing_terms

    def test_stats_report_postings_in_evaluation_order(self, animal_index):
        response = QueryEngine(animal_index).execute("played cat the")
        assert response.stats is not None
        assert response.stats.postings_sizes == [1, 2, 2]
        assert response.stats.result_count == 0
        assert response.stats.missing_term_policy == "skip"
        assert response.stats.search_time >= 0
        assert response.is_empty

    def test_search_is_execute_doc_ids(self, animal_index):
        engine = QueryEngine(animal_index, missing_term_policy="strict")
        assert engine.search("cat dog") == engine.execute("cat dog").doc_ids == [2]


def test_query_uses_index_analyzer():
    index = build_index(["Meet at 15:10", "meet at 15"], analyzer="default")
    assert search(index, "15:10") == [0]
    assert search(index, "15") == [1]

    letters_only = build_index(["Meet at 15:10", "meet at 15"], analyzer="letters")
    # Numbers are dropped at query time too, so only "meet" is looked up.
    assert search(letters_only, "meet 15:10") == [0, 1]


@pytest.mark.parametrize("analyzer", ["default", "letters"])
def test_every_registered_analyzer_splits_documents_into_terms(analyzer):
    index = build_index(["cat dog", "cat"], analyzer=analyzer)
    assert search(index, "cat") == [0, 1]
    assert search(index, "dog cat") == [0]


def test_results_are_ascending_for_larger_corpus():
    corpus = [f"common {'even' if i % 2 == 0 else 'odd'} {'fizz' if i % 3 == 0 else ''}" for i in range(50)]
    index = build_index(corpus)
    assert search(index, "common even fizz") == [i for i in range(50) if i % 6 == 0]
    assert search(index, "common") == list(range(50))


def test_concurrent_readers_share_one_index(animal_index):
    engine = QueryEngine(animal_index)
    queries = ["cat", "dog", "cat dog", "the", "the cat dog"] * 40
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(engine.search, queries))
    expected = {"cat": [0, 2], "dog": [1, 2], "cat dog": [2], "the": [0, 1], "the cat dog": []}
    assert results == [expected[query] for query in queries]
