# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across evaluator and probes
# CREATED: 17 OCT 2026
# ============================================================================
"""
Structured Logging

Every healthgate module logs through get_logger(), which tags records with
the module's component and with the evaluation context active on the
current thread:

    logger = get_logger(__name__, ComponentType.EVALUATOR)

    with log_context(evaluation_id="3f2a9c", attempt=2):
        logger.info("Round failed")

configure_logging() installs either the human formatter

    2026-10-17 09:12:01 INFO     healthgate.evaluator [evaluation=3f2a9c, attempt=2]: Round failed

or, with json_output=True or LOG_FORMAT=json, one JSON object per line.
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union


class ComponentType(str, Enum):
    """Which part of healthgate emitted a record."""
    EVALUATOR = "evaluator"
    EXECUTOR = "executor"
    REGISTRY = "registry"
    PROBE = "probe"
    REPORTER = "reporter"
    LOADER = "loader"
    CLI = "cli"


@dataclass(frozen=True)
class LogContext:
    """
    Evaluation coordinates attached to log records.

    Contexts are immutable; log_context() pushes a copy with some fields
    replaced. Probe workers run on pool threads and start from an empty
    context.
    """
    evaluation_id: Optional[str] = None
    step: Optional[str] = None
    attempt: Optional[int] = None
    assurance: Optional[int] = None
    probe: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_EMPTY = LogContext()
_local = threading.local()

# Context fields shown by HumanFormatter, with their labels
_HUMAN_FIELDS = (
    ("evaluation_id", "evaluation"),
    ("probe", "probe"),
    ("attempt", "attempt"),
    ("assurance", "assurance"),
)


def get_current_context() -> LogContext:
    stack = getattr(_local, "stack", None)
    return stack[-1] if stack else _EMPTY


@contextmanager
def log_context(**fields: Any) -> Iterator[LogContext]:
    """
    Push a context derived from the current one for the duration of the block.

    Only LogContext fields are accepted; passing None clears a field.
    """
    context = replace(get_current_context(), **fields)
    if not hasattr(_local, "stack"):
        _local.stack = []
    _local.stack.append(context)
    try:
        yield context
    finally:
        _local.stack.pop()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _context_of(record: logging.LogRecord) -> Dict[str, Any]:
    # Records built by ContextLogger carry a snapshot; others use the live context
    context = getattr(record, "hg_context", None)
    if context is None:
        context = get_current_context().to_dict()
    return context


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        component = getattr(record, "hg_component", None)
        if component:
            entry["component"] = component
        context = _context_of(record)
        if context:
            entry["context"] = context
        data = getattr(record, "hg_data", None)
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry["location"] = f"{record.filename}:{record.lineno}"
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line records with the evaluation coordinates in brackets."""

    def format(self, record: logging.LogRecord) -> str:
        context = _context_of(record)
        coordinates = ", ".join(
            f"{label}={context[key]}" for key, label in _HUMAN_FIELDS if key in context
        )
        where = f" [{coordinates}]" if coordinates else ""
        when = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        line = f"{when} {record.levelname:<8} {record.name}{where}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that snapshots the thread's LogContext onto each record.

    A caller's extra= mapping is kept as the record's data payload.
    """

    def __init__(self, logger: logging.Logger, component: Optional[ComponentType] = None):
        super().__init__(logger, {})
        self.component = component

    def process(self, msg, kwargs):
        kwargs["extra"] = {
            "hg_component": self.component.value if self.component else None,
            "hg_context": get_current_context().to_dict(),
            "hg_data": dict(kwargs.get("extra") or {}),
        }
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), component)


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Route all records to stderr through a single handler.

    Args:
        level: Level name or number
        json_output: JSON lines instead of human output (also LOG_FORMAT=json)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


_checkpoint_logger = get_logger("healthgate.checkpoint")


def log_checkpoint(name: str, data: Optional[Dict[str, Any]] = None) -> None:
    """
    Record an evaluation milestone ("evaluation_started", "round_failed", ...).

    Checkpoints are debug records on the healthgate.checkpoint logger; the
    milestone name and data land in the record's data payload.
    """
    _checkpoint_logger.debug(f"CHECKPOINT: {name}", extra={"checkpoint": name, **(data or {})})


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
