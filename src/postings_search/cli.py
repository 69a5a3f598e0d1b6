"""Command line entry point: build an index from a corpus file and run AND queries."""

# ruff: noqa: T201  # CLI intentionally prints results

from __future__ import annotations

import argparse
from collections.abc import Sequence
from contextlib import nullcontext
import logging
import sys
import time

from postings_search.config import Settings
from postings_search.corpus import CorpusLoadError, load_corpus
from postings_search.observability.logging import configure_logging
from postings_search.observability.metrics import get_metrics, init_metrics
from postings_search.observability.tracing import console_tracing, init_tracing
from postings_search.search.analyzers import available_analyzers
from postings_search.search.inverted_index import build_index
from postings_search.search.query import MissingTermPolicy, QueryEngine


logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postings-search",
        description="Index a text corpus and evaluate Boolean AND queries against it.",
    )
    parser.add_argument("corpus", help="Path to the corpus text file")
    parser.add_argument("queries", nargs="+", help="Queries to evaluate; terms inside one query are AND-ed")
    parser.add_argument(
        "--delimiter",
        default=settings.corpus_delimiter,
        help="Regex separating documents in the corpus file (default: %(default)r)",
    )
    parser.add_argument("--encoding", default=settings.corpus_encoding, help="Corpus file encoding")
    parser.add_argument(
        "--analyzer",
        default=settings.analyzer,
        choices=available_analyzers(),
        help="Analyzer name (default: %(default)s)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.index_workers,
        help="Threads used to tokenize documents (default: %(default)s)",
    )
    parser.add_argument(
        "--strict",
        action="store_const",
        const=MissingTermPolicy.STRICT.value,
        default=settings.missing_term_policy,
        dest="missing_term_policy",
        help="Return nothing when a query term does not occur in the corpus",
    )
    parser.add_argument("--stats", action="store_true", help="Print index statistics after building")
    parser.add_argument("--metrics", action="store_true", help="Print Prometheus metrics after the queries")
    parser.add_argument("--trace", action="store_true", help="Write OpenTelemetry spans to stderr")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = Settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.log_level, json_output=settings.log_json, stream=sys.stderr)
    init_tracing()
    init_metrics()

    with console_tracing(sys.stderr) if args.trace else nullcontext():
        return _run(args)


def _run(args: argparse.Namespace) -> int:
    try:
        corpus = load_corpus(args.corpus, delimiter=args.delimiter, encoding=args.encoding)
    except CorpusLoadError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    start = time.perf_counter()
    index = build_index(corpus, analyzer=args.analyzer, max_workers=args.workers)
    print(f"Built index for {index.document_count} documents in {(time.perf_counter() - start) * 1000:.0f} ms")
    if args.stats:
        stats = index.stats()
        print(
            f"terms={stats.term_count} postings={stats.postings_count} "
            f"longest={stats.longest_postings} avg={stats.average_postings_length:.2f}"
        )

    engine = QueryEngine(index, missing_term_policy=args.missing_term_policy)
    for query in args.queries:
        response = engine.execute(query)
        elapsed_ms = response.stats.search_time * 1000 if response.stats else 0.0
        print(f"Result for '{query}': {response.doc_ids}, took {elapsed_ms:.2f} ms")
    if args.metrics:
        sys.stdout.write(get_metrics().decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
