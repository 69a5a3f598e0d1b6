"""Log setup for the CLI: one stream handler, JSON or plain text.

JSON lines carry the trace and span id of the span that was active when the
record was emitted, so a log line can be matched to the span ``--trace``
prints for the same index build or query.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import Any, TextIO

import orjson

from postings_search.observability.tracing import get_trace_context


PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Attributes every LogRecord carries; anything else was passed via ``extra=``.
_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render a record as a single orjson line.

    ``extra=`` fields (``analyzer``, ``workers``, ``policy``...) become top-level
    keys. Queries are user input, so messages are capped at ``MAX_MESSAGE_LEN``.
    """

    MAX_MESSAGE_LEN = 2000

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if len(message) > self.MAX_MESSAGE_LEN:
            message = message[: self.MAX_MESSAGE_LEN] + "..."

        ctx = get_trace_context()
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": record.name.rsplit(".", 1)[-1],
            "message": message,
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        return orjson.dumps(entry, default=str).decode("utf-8")


def configure_logging(level: str = "INFO", json_output: bool = True, *, stream: TextIO | None = None) -> None:
    """Replace the root handlers with one handler writing to ``stream`` (stdout by default)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)
