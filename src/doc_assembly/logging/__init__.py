"""
Structured logging for documentation builds.

Usage:
    from doc_assembly.logging import configure_logging, get_logger, log_step

    configure_logging()
    log = get_logger(__name__)

    with log_step("helpers.extract", module="Playwright"):
        run_extractor()
"""

from doc_assembly.logging.config import configure_logging, is_configured
from doc_assembly.logging.context import (
    LogContext,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    push_context,
    set_context,
)
from doc_assembly.logging.timing import TimingResult, log_step

__all__ = [
    "configure_logging",
    "is_configured",
    "get_logger",
    "set_context",
    "bind_context",
    "clear_context",
    "get_context",
    "push_context",
    "LogContext",
    "TimingResult",
    "log_step",
]
