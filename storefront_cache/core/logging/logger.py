#!/usr/bin/env python3
"""
Structured Logging Module using structlog

This module provides structured logging for the cache layer with:
- Request and tenant correlation via context variables
- Stage identifiers for cache execution flow
- JSON formatting for log aggregation
- Redaction of customer PII and remote-store credentials

Architectural Decision: structlog for production logging
- Context-aware logging with automatic field injection
- JSON output for log aggregation
"""

import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from storefront_cache.core.config.settings import get_settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
tenant_id_ctx: ContextVar[str | None] = ContextVar("tenant_id", default=None)

_EMAIL_RE = re.compile(r"\b[\w.+-]+@[\w.-]+\.\w+\b")
_BEARER_RE = re.compile(r"\bBearer\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE)
_URL_CREDENTIALS_RE = re.compile(r"(rediss?://)[^@\s/]*@")
_PHONE_RE = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")

_SECRET_FIELDS = frozenset({"token", "access_token", "password", "authorization"})
_UNREDACTED_FIELDS = frozenset({"timestamp", "level", "logger", "request_id", "stage"})


def add_request_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add request and tenant ids to the log event.

    STAGE-L.1: Correlation id injection
    """
    request_id = request_id_ctx.get()
    if request_id:
        event_dict["request_id"] = request_id
    tenant_id = tenant_id_ctx.get()
    if tenant_id and "tenant_id" not in event_dict:
        event_dict["tenant_id"] = tenant_id
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add ISO timestamp to log event.

    STAGE-L.2: Timestamp injection
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def _redact_text(text: str) -> str:
    text = _EMAIL_RE.sub("[EMAIL]", text)
    text = _BEARER_RE.sub("Bearer [REDACTED]", text)
    text = _URL_CREDENTIALS_RE.sub(r"\1[REDACTED]@", text)
    return _PHONE_RE.sub("[PHONE]", text)


def redact_sensitive(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Redact customer PII and credentials from log events.

    STAGE-L.3: Redaction

    Redacted:
    - Email addresses -> [EMAIL]
    - Bearer tokens and credentials embedded in redis URLs -> [REDACTED]
    - Phone numbers -> [PHONE]
    - Values of token/password/authorization fields

    Every string field is scanned, so cache keys and invalidation patterns
    built from customer identifiers are covered too.
    """
    for field, value in list(event_dict.items()):
        if field.lower() in _SECRET_FIELDS and value is not None:
            event_dict[field] = "[REDACTED]"
        elif isinstance(value, str) and field not in _UNREDACTED_FIELDS:
            event_dict[field] = _redact_text(value)
    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Upper-case the log level name.

    STAGE-L.4: Log level injection
    """
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    STAGE-L: Logging initialization

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_request_context,
            add_timestamp,
            structlog.stdlib.add_log_level,
            add_log_level_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_sensitive,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value", stage="C.1")
    """
    return structlog.get_logger(name)


def set_request_context(request_id: str | None = None, tenant_id: str | None = None) -> None:
    """
    Bind request and tenant ids for the current task.

    Call at the start of each storefront request so every cache log line
    can be correlated with it.
    """
    request_id_ctx.set(request_id)
    tenant_id_ctx.set(tenant_id)


def get_request_context() -> tuple[str | None, str | None]:
    """Return the current (request_id, tenant_id) pair."""
    return request_id_ctx.get(), tenant_id_ctx.get()


def clear_request_context() -> None:
    """Clear request and tenant ids at the end of request processing."""
    request_id_ctx.set(None)
    tenant_id_ctx.set(None)


def log_stage(
    logger: structlog.stdlib.BoundLogger, stage: str, message: str, level: str = "info", **kwargs
) -> None:
    """
    Log a message with stage information.

    Usage:
        log_stage(logger, Stage.L1_LOOKUP, "L1 cache hit", cache_key="tenant:t1:products")
    """
    log_func = getattr(logger, level.lower())
    log_func(message, stage=str(getattr(stage, "value", stage)), **kwargs)
