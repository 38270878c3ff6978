"""Structured JSON logging for the API.

Every line carries the request's correlation id (bound by the middleware) and,
once a token has been validated, the caller's ``user_id``. Passwords, hashes,
signing keys and bearer tokens are scrubbed before rendering.
"""

import logging
import re
import sys
from typing import Any, Dict

import structlog

from mpoly import __version__

SENSITIVE_KEYS = frozenset({"authorization", "secret", "password", "token"})

REDACTED = "REDACTED"

# bcrypt hashes and JWTs that end up inside free-text values (error details).
_SECRET_VALUE_PATTERNS = (
    re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"),
    re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]*"),
)


def _scrub(value: str) -> str:
    for pattern in _SECRET_VALUE_PATTERNS:
        value = pattern.sub(REDACTED, value)
    return value


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Redact credentials from a log entry.

    Keys containing password, secret, token or authorization are replaced
    wholesale; other string values have embedded hashes and JWTs masked.
    """
    for key, value in list(event_dict.items()):
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _scrub(value)

    return event_dict


def add_service_info(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    event_dict.setdefault("service", "mpoly-api")
    event_dict.setdefault("version", __version__)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog and stdlib logging to stdout as JSON lines.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR; unknown names mean INFO
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # uvicorn's own loggers go through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_service_info,
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger, tagged with ``logger_name`` when ``name`` is given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
