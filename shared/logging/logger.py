"""
Logger Implementation
=====================

structlog setup for the zk-form service.

Every entry carries the service name and, inside a verify request, the
request id and the space and app slugs. Proof-derived identifiers and
claim values are masked before rendering; credentials are dropped.

Version: 0.1.0
"""

import logging
import sys
import uuid
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


# Keys whose values are replaced outright
CREDENTIAL_KEYS = frozenset({"private_key", "access_token", "assertion", "authorization"})

# Keys holding user identifiers or claim values; only a prefix is kept
IDENTIFIER_KEYS = frozenset({"vault_id", "user_id", "claim_value"})

MASK_PREFIX_LENGTH = 6
REDACTED = "***"


def _mask(value: Any) -> Any:
    if not isinstance(value, str) or len(value) <= MASK_PREFIX_LENGTH:
        return REDACTED if value else value
    return f"{value[:MASK_PREFIX_LENGTH]}..."


def redact_submission_data(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask identifiers and claim values, drop credentials."""
    for key in event_dict.keys() & CREDENTIAL_KEYS:
        event_dict[key] = REDACTED
    for key in event_dict.keys() & IDENTIFIER_KEYS:
        event_dict[key] = _mask(event_dict[key])
    return event_dict


class ServiceContext:
    """Processor stamping the service name on every entry."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", self.service_name)
        return event_dict


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(max_frames=10),
    )


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "zk-form",
) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level name
        json_logs: JSON lines (production) instead of console output
        service_name: Value of the ``service`` key
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        ServiceContext(service_name),
        redact_submission_data,
        structlog.processors.format_exc_info
        if json_logs
        else structlog.dev.set_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(log_level.upper())

    # Outbound calls to the verifier and Sheets API log every request
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> "BoundLogger":
    """Structured logger, usually ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)


def bind_submission_context(space_slug: str, app_slug: str) -> str:
    """
    Tag the logs of the current verify request.

    Returns:
        The generated request id
    """
    request_id = uuid.uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        space=space_slug,
        app=app_slug,
    )
    return request_id


def clear_context() -> None:
    """Drop the request tags bound by ``bind_submission_context``."""
    structlog.contextvars.clear_contextvars()
