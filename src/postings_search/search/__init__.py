"""
In-memory Boolean search package.

This package provides the search core:
- analyzers: Special-case aware tokenizer and analyzer registry
- postings: Sorted postings lists and merge intersection
- inverted_index: One-shot index build from an ordered corpus
- query: AND query evaluation with a configurable missing-term policy
"""

from postings_search.search.analyzers import tokenize
from postings_search.search.inverted_index import InvertedIndex, build_index
from postings_search.search.postings import PostingsList, intersect
from postings_search.search.query import MissingTermPolicy, QueryEngine, search


__all__ = [
    "InvertedIndex",
    "MissingTermPolicy",
    "PostingsList",
    "QueryEngine",
    "build_index",
    "intersect",
    "search",
    "tokenize",
]
