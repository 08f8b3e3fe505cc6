"""
Centralized logging configuration using structlog
"""

import base64
import logging
import secrets
import sys
import time
from contextvars import ContextVar
from typing import Any

import structlog

# Context variable for request tracking
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContextFilter:
    """Add request context to log records."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        """Add the current request id to the event dict."""
        # Unused, but part of the structlog processor signature
        _ = logger, method_name

        request_id = request_id_ctx.get()
        if request_id:
            event_dict["request_id"] = request_id

        return event_dict


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure structlog with appropriate processors and formatters.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        log_level: Explicit level name; defaults to DEBUG in debug mode, INFO otherwise.
    """
    # Resolve the level; an unknown name falls back to INFO
    if log_level:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    else:
        level = logging.DEBUG if debug else logging.INFO

    # Route stdlib logging (uvicorn, sqlalchemy) to stdout as bare messages
    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    # Processor chain, applied in order to every event
    processors: list[Any] = [
        # Drop events below the stdlib logger level
        structlog.stdlib.filter_by_level,
        # Module that emitted the event
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        # Request id from the current context, if any
        RequestContextFilter(),
        # UTC ISO-8601 timestamp
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        # %-style positional args, as in stdlib logging calls
        structlog.stdlib.PositionalArgumentsFormatter(),
        # Render stack_info=True and exc_info into strings
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        # Decode any bytes values
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        # Development: human-readable console output
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # Production: JSON output
        processors.append(structlog.processors.JSONRenderer())

    # Hand events to stdlib loggers so handlers and levels apply
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Generate a compact request ID from a microsecond timestamp plus randomness.

    Format: 14-character URL-safe base64 string.
    """
    # Microseconds since epoch fit in 8 big-endian bytes
    timestamp_us = int(time.time() * 1_000_000)
    # 2 random bytes so ids from the same microsecond differ
    random_bytes = secrets.token_bytes(2)

    combined_bytes = timestamp_us.to_bytes(8, byteorder="big") + random_bytes

    # 10 bytes encode to 14 characters once padding is stripped
    return base64.urlsafe_b64encode(combined_bytes).decode("ascii").rstrip("=")


def set_request_context(request_id: str | None = None) -> str:
    """Set the request id context variable, generating one if needed."""
    if request_id is None:
        request_id = generate_request_id()

    request_id_ctx.set(request_id)
    return request_id


def clear_request_context() -> None:
    """Clear the request id so it does not leak into the next request."""
    request_id_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()
