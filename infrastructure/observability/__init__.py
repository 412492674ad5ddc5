"""
Observability: logging with per-run and per-request context.

Log lines carry a short run tag and the category path being served, so one
request can be followed through resolution, redirects and source fetches.
"""

from infrastructure.observability.logging import (
    clear_request_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    request_log_context,
    set_log_context,
)

__all__ = [
    "configure_logging",
    "set_log_context",
    "get_log_context",
    "clear_request_context",
    "request_log_context",
    "make_run_tag",
]
