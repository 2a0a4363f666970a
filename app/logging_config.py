"""
Structured logging configuration using structlog.

Relay events (submissions, nonce resyncs, rejected requests) are emitted
as JSON lines in production and colored console lines at DEBUG level.
Key material never reaches a log line, and long hex payloads such as
signed transactions and call data are shortened.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

import structlog

from .config import settings


SECRET_FIELDS = frozenset({"private_key", "relayer_private_key", "authorization"})
HEX_PAYLOAD_FIELDS = frozenset({"raw_transaction", "data", "tx_data", "call_data"})
HEX_PREVIEW_CHARS = 18


def redact_relay_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask secrets and shorten hex payloads in an event dict."""
    for key in list(event_dict):
        value = event_dict[key]
        if key in SECRET_FIELDS:
            event_dict[key] = "***"
        elif key in HEX_PAYLOAD_FIELDS and isinstance(value, str) and len(value) > HEX_PREVIEW_CHARS:
            event_dict[key] = f"{value[:HEX_PREVIEW_CHARS]}... ({len(value)} chars)"
    return event_dict


def build_processors(json_logs: bool) -> tuple[list[structlog.types.Processor], structlog.types.Processor]:
    """Return the processors shared by structlog and stdlib loggers, plus the renderer."""
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_relay_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if not json_logs:
        return shared, structlog.dev.ConsoleRenderer()

    shared.append(structlog.processors.format_exc_info)
    return shared, structlog.processors.JSONRenderer()


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Configure structlog and route stdlib logging (uvicorn, httpx) through it.

    Args:
        log_level: Override log level (default: from settings.log_level)
        json_logs: Force JSON (True) or console (False) rendering; by default
            console rendering is used only at DEBUG level
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    shared_processors, renderer = build_processors(json_logs)

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
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # RPC round-trips are logged by the relay itself
    for name in ("uvicorn.access", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
