"""In-memory inverted index built once from an ordered corpus.

Documents are identified by their zero-based position in the corpus; their
text is not kept. Building tokenizes every document with one analyzer and
records, per term, the ascending ids of the documents that contain it. The
resulting index is never mutated, so any number of threads may query it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
import logging
import time
from types import MappingProxyType

from postings_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_DOC_COUNT,
    INDEX_TERM_COUNT,
    track_latency,
)
from postings_search.observability.tracing import create_span
from postings_search.search.analyzers import Analyzer, get_analyzer
from postings_search.search.postings import PostingsBuilder, PostingsList


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexStats:
    """Summary figures for a built index."""

    document_count: int
    term_count: int
    postings_count: int
    longest_postings: int

    @property
    def average_postings_length(self) -> float:
        if self.term_count == 0:
            return 0.0
        return self.postings_count / self.term_count


class InvertedIndex(Mapping[str, PostingsList]):
    """Read-only mapping from term to its postings list.

    A term is present only if at least one document contains it, so every
    stored postings list is non-empty.
    """

    def __init__(
        self,
        postings: Mapping[str, PostingsList],
        *,
        document_count: int,
        analyzer: Analyzer,
        analyzer_name: str = "default",
    ) -> None:
        for term, doc_ids in postings.items():
            if not doc_ids:
                raise ValueError(f"empty postings list for term '{term}'")
        self._postings = MappingProxyType(dict(postings))
        self._document_count = document_count
        self._analyzer = analyzer
        self._analyzer_name = analyzer_name

    def __getitem__(self, term: str) -> PostingsList:
        return self._postings[term]

    def __len__(self) -> int:
        return len(self._postings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._postings)

    def __repr__(self) -> str:
        return (
            f"InvertedIndex(documents={self._document_count}, terms={len(self._postings)}, "
            f"analyzer={self._analyzer_name!r})"
        )

    @property
    def document_count(self) -> int:
        return self._document_count

    @property
    def analyzer_name(self) -> str:
        return self._analyzer_name

    def postings(self, term: str) -> PostingsList | None:
        """Return the postings for ``term`` or None when no document contains it."""
        return self._postings.get(term)

    def analyze(self, text: str) -> list[str]:
        """Tokenize ``text`` exactly as documents were tokenized at build time."""
        return [token.text for token in self._analyzer(text) if token.text]

    def stats(self) -> IndexStats:
        lengths = [len(doc_ids) for doc_ids in self._postings.values()]
        return IndexStats(
            document_count=self._document_count,
            term_count=len(lengths),
            postings_count=sum(lengths),
            longest_postings=max(lengths, default=0),
        )


def _resolve_analyzer(analyzer: Analyzer | str | None) -> tuple[Analyzer, str]:
    if analyzer is None or isinstance(analyzer, str):
        name = (analyzer or "default").lower()
        return get_analyzer(name), name
    return analyzer, type(analyzer).__name__


def _document_terms(analyzer: Analyzer, text: str) -> list[str]:
    """Distinct terms of one document, first occurrence order."""
    return list(dict.fromkeys(token.text for token in analyzer(text) if token.text))


def _analyze_documents(
    documents: Sequence[str],
    analyzer: Analyzer,
    max_workers: int | None,
) -> Iterator[list[str]]:
    """Yield each document's terms in corpus order, fanning out when asked to."""
    extract = partial(_document_terms, analyzer)
    if max_workers is None or max_workers <= 1 or len(documents) <= 1:
        yield from map(extract, documents)
        return
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="index-build") as executor:
        # map() preserves input order, so the single writer below sees ids ascending.
        yield from executor.map(extract, documents)


def build_index(
    corpus: Iterable[str],
    *,
    analyzer: Analyzer | str | None = None,
    max_workers: int | None = None,
) -> InvertedIndex:
    """Build an inverted index from an ordered corpus of document texts.

    Args:
        corpus: Document texts; document ``i`` is the ``i``-th item.
        analyzer: Analyzer instance or registry name, ``"default"`` when omitted.
        max_workers: Tokenize documents on this many threads. Postings are still
            written by the calling thread only.

    Returns:
        The finished, immutable index. An empty corpus yields an empty index.
    """

    resolved, analyzer_name = _resolve_analyzer(analyzer)
    documents = tuple(corpus)
    builders: dict[str, PostingsBuilder] = {}

    start = time.perf_counter()
    with (
        create_span(
            "index.build",
            attributes={"index.documents": len(documents), "index.analyzer": analyzer_name},
        ) as span,
        track_latency(INDEX_BUILD_LATENCY, analyzer=analyzer_name),
    ):
        for doc_id, terms in enumerate(_analyze_documents(documents, resolved, max_workers)):
            for term in terms:
                builder = builders.get(term)
                if builder is None:
                    builder = builders[term] = PostingsBuilder()
                builder.add(doc_id)
        postings = {term: builder.build() for term, builder in builders.items()}
        span.set_attribute("index.terms", len(postings))

    index = InvertedIndex(
        postings,
        document_count=len(documents),
        analyzer=resolved,
        analyzer_name=analyzer_name,
    )
    INDEX_DOC_COUNT.labels(analyzer=analyzer_name).set(len(documents))
    INDEX_TERM_COUNT.labels(analyzer=analyzer_name).set(len(postings))
    logger.info(
        "Built index for %d documents (%d terms) in %.1f ms",
        len(documents),
        len(postings),
        (time.perf_counter() - start) * 1000,
        extra={"analyzer": analyzer_name, "workers": max_workers or 1},
    )
    return index
