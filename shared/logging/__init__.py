"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from shared.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("submission_recorded", app="newsletter", fields=3)
    logger.error("store_init_failed", spreadsheet_id=sid, error=str(e))
"""

from shared.logging.logger import (
    bind_submission_context,
    clear_context,
    get_logger,
    redact_submission_data,
    setup_logging,
)


__all__ = [
    "bind_submission_context",
    "clear_context",
    "get_logger",
    "redact_submission_data",
    "setup_logging",
]
