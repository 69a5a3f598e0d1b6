"""Domain layer: immutable value objects with no infrastructure dependencies."""

from postings_search.domain.search import AnalyzedQuery, SearchResponse, SearchStats


__all__ = [
    "AnalyzedQuery",
    "SearchResponse",
    "SearchStats",
]
