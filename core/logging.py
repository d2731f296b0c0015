"""
core/logging.py - Structured logging for route execution.

Every entry carries:
- timestamp (ISO 8601, taken from the record)
- level and logger name
- message
- context (route_id, step_index, step_id, status, ...)

Context is passed only as extra={"context": {...}}; nothing else goes
through logger kwargs.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# Merged into every entry (service name, version, ...)
_global_context: dict[str, Any] = {}

# Keys shown first by the console formatter
ROUTE_KEYS = ("route_id", "step_index", "step_id", "status")

QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    {
        "timestamp": "2026-01-04T12:00:00.000+00:00",
        "level": "INFO",
        "logger": "hops.execution.orchestrator",
        "message": "Step: r1[0] | DONE",
        "context": {"route_id": "r1", "step_index": 0, "status": "DONE"}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {**_global_context, **_record_context(record)}
        if record.exc_info:
            context["exception"] = self.formatException(record.exc_info)
        if context:
            entry["context"] = context

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line human output; route keys first, then up to three others."""

    max_extra_keys = 3

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        line = f"{created} {record.levelname:<7} {record.name}: {record.getMessage()}"

        context = _record_context(record)
        if context:
            shown = [f"{k}={context[k]}" for k in ROUTE_KEYS if context.get(k) is not None]
            others = [k for k in context if k not in ROUTE_KEYS]
            shown += [f"{k}={context[k]}" for k in others[: self.max_extra_keys]]
            if len(others) > self.max_extra_keys:
                shown.append(f"+{len(others) - self.max_extra_keys}")
            if shown:
                line += " [" + " ".join(shown) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextAdapter(logging.LoggerAdapter):
    """Adapter whose default context is merged under each call's context."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        call_context = kwargs.get("extra", {}).get("context", {})
        kwargs["extra"] = {"context": {**self.extra, **call_context}}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """Add keys to every subsequent entry, e.g. set_global_context(service="hops-cli")."""
    _global_context.update(kwargs)


def clear_global_context() -> None:
    _global_context.clear()


def get_logger(name: str, **context: Any) -> ContextAdapter:
    """
    Get a logger with optional default context.

    Example:
        logger = get_logger("hops.execution", component="orchestrator")
        logger.info("Step done", extra={"context": {"route_id": "r1"}})
    """
    return ContextAdapter(logging.getLogger(name), context)


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_output: JSON lines instead of console format
        log_file: Optional file that always receives JSON lines
        stream: Output stream (default: stdout)
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def log_route(
    logger: ContextAdapter,
    route_id: str,
    event: str,
    **extra: Any,
) -> None:
    """Log a route lifecycle event with standard context."""
    logger.info(
        f"Route: {route_id} | {event}",
        extra={
            "context": {
                "route_id": route_id,
                "event": event,
                **extra,
            }
        },
    )


def log_step(
    logger: ContextAdapter,
    route_id: str,
    step_index: int,
    status: str,
    step_id: str | None = None,
    **extra: Any,
) -> None:
    """Log a step transition with standard context."""
    logger.info(
        f"Step: {route_id}[{step_index}] | {status}",
        extra={
            "context": {
                "route_id": route_id,
                "step_index": step_index,
                "step_id": step_id,
                "status": status,
                **extra,
            }
        },
    )


def log_error(
    logger: ContextAdapter,
    error_code: str,
    message: str,
    **extra: Any,
) -> None:
    """Log an error with standard context."""
    logger.error(
        f"[{error_code}] {message}",
        extra={
            "context": {
                "error_code": error_code,
                **extra,
            }
        },
    )
