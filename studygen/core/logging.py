import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | req=%(request_id)s "
    "model=%(candidate)s | %(message)s"
)

_request_id: ContextVar[str] = ContextVar("request_id", default="-")
_candidate: ContextVar[str] = ContextVar("candidate", default="-")


class ContextFilter(logging.Filter):
    """Stamps the current request id and candidate model onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()
        if not hasattr(record, "candidate"):
            record.candidate = _candidate.get()
        return True


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


@contextmanager
def candidate_context(label: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with ``label``."""
    token = _candidate.set(label)
    try:
        yield
    finally:
        _candidate.reset(token)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL).upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(resolved_level)
    # uvicorn reloads call this again
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
