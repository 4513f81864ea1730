"""
logging.py — structlog setup for the API server and the poolcrm CLI.

Every record carries the environment name; credentials and customer access
details (passwords, session tokens, API keys, gate codes) are masked before
rendering. Output is JSON in production and a console renderer elsewhere,
per settings.log_format.

Usage:
    from poolcrm_shared.logging import configure_logging
    import structlog

    configure_logging()                       # once, from create_app() or the CLI
    log = structlog.get_logger(__name__)
    log.info("estimate_status_changed", estimate_id=estimate.id, status="sent")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from poolcrm_shared.config import settings

REDACTED = "***"
SENSITIVE_KEYS = frozenset(
    {"password", "access_token", "refresh_token", "api_key", "authorization", "gate_code"}
)


def redact_sensitive(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask top-level values whose key names a secret."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def add_environment(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("env", settings.environment)
    return event_dict


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog and route stdlib loggers (uvicorn, httpx) to stdout.

    Safe to call more than once; the CLI calls it again with --log-level.

    Args:
        log_level:  Overrides settings.log_level.
        log_format: Overrides settings.log_format ("json" or "console").
    """
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    fmt = log_format or settings.log_format

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            add_environment,
            redact_sensitive,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
