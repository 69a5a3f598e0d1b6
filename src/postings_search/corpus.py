"""Load a corpus snapshot from a single text file.

This sits outside the search core: it turns a file into the ordered list of
document texts that :func:`postings_search.search.build_index` consumes.
"""

from __future__ import annotations

import logging
from pathlib import Path
import re


logger = logging.getLogger(__name__)

# Each work in a complete-works text ends with a line holding its year.
DEFAULT_DELIMITER = r"1[56][0-9]{2}\n"


class CorpusLoadError(RuntimeError):
    """Raised when a corpus file cannot be read."""


def split_corpus(text: str, delimiter: str | re.Pattern[str] = DEFAULT_DELIMITER) -> list[str]:
    """Split ``text`` into documents on ``delimiter``.

    Empty documents at the end of the text are dropped; empty documents
    elsewhere keep their slot so later document ids do not shift.
    """

    pattern = re.compile(delimiter) if isinstance(delimiter, str) else delimiter
    documents = pattern.split(text)
    while documents and not documents[-1]:
        documents.pop()
    return documents


def load_corpus(
    path: Path | str,
    *,
    delimiter: str | re.Pattern[str] = DEFAULT_DELIMITER,
    encoding: str = "utf-8",
) -> list[str]:
    """Read ``path`` and split it into documents.

    Raises:
        CorpusLoadError: if the file is missing, unreadable, or not decodable.
    """

    corpus_path = Path(path).expanduser()
    try:
        text = corpus_path.read_text(encoding=encoding)
    except FileNotFoundError as exc:
        raise CorpusLoadError(f"Corpus file not found: {corpus_path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusLoadError(f"Failed to read corpus {corpus_path}: {exc}") from exc

    documents = split_corpus(text, delimiter)
    logger.info("Loaded %d documents from %s", len(documents), corpus_path, extra={"bytes": len(text)})
    return documents
