"""Log configuration for the API and the CLI.

The API logs one JSON object per line, tagged with the request's correlation
id so the geocode call and the three gathered DataSF queries of one lookup
can be grouped. The CLI logs plain text.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Chatty per-request loggers from the HTTP stack
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return correlation_id.get()


@contextmanager
def bound_correlation_id(cid: str) -> Iterator[str]:
    """Tag every record logged inside the block (and in tasks it spawns) with ``cid``."""
    token = correlation_id.set(cid)
    try:
        yield cid
    finally:
        correlation_id.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Lookup context passed as ``extra=`` is copied through when present:
    which DataSF dataset answered, the zone code being matched, and the
    pipeline step that produced the record.
    """

    context_fields = ("dataset", "zone_code", "step", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if cid := correlation_id.get():
            entry["correlation_id"] = cid
        entry.update(
            (key, getattr(record, key))
            for key in self.context_fields
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(json_format: bool = True, level: str = "INFO") -> None:
    """Replace the root handlers with a single stream handler.

    ``json_format`` selects JSONFormatter (API) or TEXT_FORMAT (CLI, local dev).
    Unknown level names fall back to INFO.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
