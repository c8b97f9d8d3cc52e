"""
structlog setup for awql.

Entries logged while a statement executes carry ``account_id`` and
``api_version``, bound as context variables by Statement.execute.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from awql.config import get_settings

REDACTED = "***REDACTED***"
SENSITIVE_KEY_PARTS = ("secret", "token", "authorization", "dsn")
QUERY_PREVIEW_CHARS = 200


def redact_credentials(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask developer tokens, OAuth2 secrets and connection strings."""
    for key in event_dict:
        if any(part in key.lower() for part in SENSITIVE_KEY_PARTS):
            event_dict[key] = REDACTED
    return event_dict


def shorten_query(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Cut the AWQL text in the ``query`` field down to a preview."""
    query = event_dict.get("query")
    if isinstance(query, str) and len(query) > QUERY_PREVIEW_CHARS:
        event_dict["query"] = f"{query[:QUERY_PREVIEW_CHARS]}... ({len(query)} chars)"
    return event_dict


def setup_logging(verbose: bool = False) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        verbose: Log at DEBUG, including httpx request lines, whatever
            the configured level
    """
    settings = get_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_credentials,
        shorten_query,
    ]

    if settings.log_format == "json":
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    # httpx logs one INFO line per request, Authorization excluded
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
