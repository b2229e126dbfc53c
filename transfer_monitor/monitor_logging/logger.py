"""
Structured JSON logging: timestamp, level, event_type, slot, signature.

structlog with ISO timestamps and consistent keys. All modules use
get_logger(__name__) and log snake_case event names with keyword context.

Uses only Python stdlib logging and structlog; no other transfer_monitor
imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

# Default level and renderer from env; the CLI may reconfigure
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type and logger_name to logger."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "logger_name" in event_dict and "logger" not in event_dict:
        event_dict["logger"] = event_dict.pop("logger_name")
    return event_dict


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr per call so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog: JSON or console output, timestamp, level, event_type.

    Safe to call more than once; loggers are not cached so a later call
    (e.g. from --log-level) applies to module-level loggers too.
    """
    level_name = (level or LOG_LEVEL).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    renderer_name = (fmt or LOG_FORMAT).strip().lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if renderer_name == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("walker_transfer", slot=250684537, signature="3Tf9...")

    Output (JSON): {"event_type": "walker_transfer", "slot": 250684537, "signature": "3Tf9...",
    "level": "info", "logger": "transfer_monitor.solana_listener.walker", "timestamp": "..."}
    """
    # Kept as initial values on the lazy proxy; binding here would freeze
    # the level filter and output stream at import time
    return structlog.get_logger(name, logger_name=name)


def bind_slot(slot: int) -> Any:
    """Return a logger with slot bound to all subsequent log calls."""
    return get_logger("transfer_monitor").bind(slot=slot)
