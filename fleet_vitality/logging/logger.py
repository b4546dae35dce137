"""
Structured logging for the scoring engine and API.

One structlog configuration for the whole package: ISO timestamps, level,
event_type as the first key and JSON output unless LOG_FORMAT=console.
Engine modules log snake_case event types with keyword fields, and pod-level
events carry node_id / network via bind_node().
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    return event_dict


def configure_structlog() -> None:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    if os.getenv("LOG_FORMAT", "json").strip().lower() == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.format_exc_info,
            _event_type,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Module logger: logger.info("fleet_scoring_complete", total_nodes=42)."""
    return structlog.get_logger(name).bind(logger=name)


def bind_node(pubkey: str | None, network: str | None = None) -> structlog.BoundLogger:
    """Logger with node_id (and network, when known) bound to every event."""
    bound = get_logger("fleet_vitality.node").bind(node_id=pubkey or "?")
    if network:
        bound = bound.bind(network=network)
    return bound
