"""
Logging setup with contextvars-based request metadata.

- Every line carries the run tag and the category path being served.
- File lines additionally carry the stats source (http/snapshot).
- Console-only, or console + rotating file.
- HTTP client libraries are kept at WARNING so request logs stay readable.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

cv_run_tag = contextvars.ContextVar("run_tag", default="-")
cv_run_id_full = contextvars.ContextVar("run_id_full", default="-")
cv_request_path = contextvars.ContextVar("request_path", default="-")
cv_source = contextvars.ContextVar("source", default="-")

QUIET_LOGGERS = ("httpx", "httpcore", "urllib3")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s p=%(path)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s s=%(source)s p=%(path)s | %(message)s"


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """Short, stable tag for a run id (BLAKE2s hex prefix)."""
    h = hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()
    return h[:length]


class ContextInjectFilter(logging.Filter):
    """Copy the current run/request context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get() or "-"
        record.path = cv_request_path.get() or "-"
        record.source = cv_source.get() or "-"
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    request_path: str | None = None,
    source: str | None = None,
) -> None:
    """Update logging context; only the given fields change."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))
    if request_path is not None:
        cv_request_path.set(str(request_path))
    if source is not None:
        cv_source.set(str(source))


def get_log_context() -> dict[str, str]:
    return {
        "run_tag": str(cv_run_tag.get() or "-"),
        "run_id_full": str(cv_run_id_full.get() or "-"),
        "request_path": str(cv_request_path.get() or "-"),
        "source": str(cv_source.get() or "-"),
    }


def clear_request_context() -> None:
    """Forget the request path; run info is kept."""
    cv_request_path.set("-")


@contextmanager
def request_log_context(request_path: str) -> Iterator[None]:
    """
    Tag every log line emitted inside the block with ``request_path``.

    The previous value is restored on exit, so nested or concurrent requests
    (each in its own context) never see each other's path.
    """
    token = cv_request_path.set(str(request_path))
    try:
        yield
    finally:
        cv_request_path.reset(token)


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: str, ctx: logging.Filter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handler.addFilter(ctx)
    return handler


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure root logging. Safe to call more than once (handlers are replaced).

    Args:
        log_file: Rotating log file (None = console only)
        console_level: Minimum level for console output
        file_level: Minimum level for file output
        max_bytes: Max log file size before rotation
        backup_count: Number of rotated files to keep
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # handlers enforce levels

    ctx = ContextInjectFilter()
    root.addHandler(_handler(logging.StreamHandler(), console_level, CONSOLE_FORMAT, "%H:%M:%S", ctx))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        root.addHandler(_handler(fh, file_level, FILE_FORMAT, "%Y-%m-%d %H:%M:%S", ctx))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        log_file,
    )
