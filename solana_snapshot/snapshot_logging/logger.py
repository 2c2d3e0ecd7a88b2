"""
Structured logging for RPC calls, snapshot runs, and the HTTP trigger.

structlog, configured once at import. Each record carries an ISO timestamp,
the level, the emitting module (logger), and event_type; RPC records also
carry the JSON-RPC method. Endpoint URLs with an api-key query value are
masked before rendering, so a Helius URL never reaches the log sink.

    logger = get_logger(__name__)
    logger.error("rpc_http_status", method="getTransaction", status_code=503)

Env: LOG_LEVEL (default INFO), LOG_FORMAT json | console (default json).
Records go to stderr; CLI tools own stdout.

Depends on stdlib logging and structlog only, so any solana_snapshot module
can import it without a cycle.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

RPC_LOGGER_NAME = "solana_snapshot.rpc"

_API_KEY_RE = re.compile(r"(api-key=)[^&\s\"']+", re.IGNORECASE)


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _redact_api_keys(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask api-key=... in any string value (rpc_url, error text from httpx)."""
    for key, value in event_dict.items():
        if isinstance(value, str) and "api-key=" in value.lower():
            event_dict[key] = _API_KEY_RE.sub(r"\1***", value)
    return event_dict


def _event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type (and message, unless given)."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _redact_api_keys,
        _event_type,
    ]
    if LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger with the module name bound as `logger`."""
    return structlog.get_logger(name).bind(logger=name)


def bind_method(method: str) -> structlog.BoundLogger:
    """RPC logger with the JSON-RPC method bound, used on every transport failure path."""
    return get_logger(RPC_LOGGER_NAME).bind(method=method)
