"""Boolean AND query evaluation over an :class:`InvertedIndex`."""

from __future__ import annotations

from enum import Enum
import logging
import time

from postings_search.domain.search import AnalyzedQuery, SearchResponse, SearchStats
from postings_search.observability.metrics import SEARCH_COUNT, SEARCH_LATENCY, track_latency
from postings_search.observability.tracing import create_span
from postings_search.search.inverted_index import InvertedIndex
from postings_search.search.postings import PostingsList, intersect_all


logger = logging.getLogger(__name__)


class MissingTermPolicy(str, Enum):
    """What an AND query does with a term no document contains."""

    SKIP = "skip"
    """Ignore the term and intersect the postings of the remaining terms."""

    STRICT = "strict"
    """Any unknown term makes the whole query match nothing."""


class QueryEngine:
    """Evaluates AND queries against one immutable index.

    The engine holds no per-query state, so a single instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        index: InvertedIndex,
        *,
        missing_term_policy: MissingTermPolicy | str = MissingTermPolicy.SKIP,
    ) -> None:
        self.index = index
        self.missing_term_policy = MissingTermPolicy(missing_term_policy)

    def analyze(self, query: str) -> tuple[AnalyzedQuery, list[PostingsList]]:
        """Tokenize ``query`` and look up postings for each distinct term."""
        terms = list(dict.fromkeys(self.index.analyze(query)))
        matched: list[str] = []
        missing: list[str] = []
        postings: list[PostingsList] = []
        for term in terms:
            doc_ids = self.index.postings(term)
            if doc_ids is None:
                missing.append(term)
            else:
                matched.append(term)
                postings.append(doc_ids)
        analyzed = AnalyzedQuery(
            original_text=query,
            terms=terms,
            matched_terms=matched,
            missing_terms=missing,
        )
        return analyzed, postings

    def execute(self, query: str) -> SearchResponse:
        """Evaluate ``query`` and return ids together with how they were found."""
        policy = self.missing_term_policy.value
        start = time.perf_counter()
        with (
            create_span("query.search", attributes={"query.policy": policy}) as span,
            track_latency(SEARCH_LATENCY, policy=policy),
        ):
            analyzed, postings = self.analyze(query)
            if analyzed.has_missing_terms and self.missing_term_policy is MissingTermPolicy.STRICT:
                doc_ids: list[int] = []
            else:
                doc_ids = intersect_all(postings)
            span.set_attribute("query.terms", len(analyzed.terms))
            span.set_attribute("query.results", len(doc_ids))

        elapsed = time.perf_counter() - start
        SEARCH_COUNT.labels(policy=policy, outcome="hit" if doc_ids else "empty").inc()
        if analyzed.missing_terms:
            logger.debug("Query terms not in index: %s", analyzed.missing_terms, extra={"policy": policy})
        logger.debug("Query %r matched %d documents in %.3f ms", query, len(doc_ids), elapsed * 1000)

        return SearchResponse(
            query=analyzed,
            doc_ids=doc_ids,
            stats=SearchStats(
                missing_term_policy=policy,
                postings_sizes=sorted(len(plist) for plist in postings),
                result_count=len(doc_ids),
                search_time=elapsed,
            ),
        )

    def search(self, query: str) -> list[int]:
        """Return the ascending ids of documents containing every query term."""
        return self.execute(query).doc_ids


def search(
    index: InvertedIndex,
    query: str,
    *,
    missing_term_policy: MissingTermPolicy | str = MissingTermPolicy.SKIP,
) -> list[int]:
    """Evaluate an AND query without keeping a :class:`QueryEngine` around."""
    return QueryEngine(index, missing_term_policy=missing_term_policy).search(query)
