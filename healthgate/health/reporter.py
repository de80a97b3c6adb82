# ============================================================================
# PROGRESS REPORTING
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Progress and log sinks
# PURPOSE: Report evaluation progress, log lines and final summaries
# CREATED: 17 OCT 2026
# ============================================================================
"""
Progress Reporting

The evaluator pushes three kinds of messages to a Reporter:
1. Progress updates: {step, message, count, total}
2. Log lines at info / error severity
3. A final summary string

Implementations:
- NullReporter: discards everything (used when no sink is given)
- LoggingReporter: routes everything to structured logging
- RecordingReporter: keeps everything in memory (tests, embedding callers)

A reporter never influences control flow: exceptions raised by a sink are
logged by SafeReporter and swallowed there.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from healthgate.core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.REPORTER)


@dataclass
class ProgressUpdate:
    """
    Progress report data.

    count/total track assurance progress: count is the current assurance
    number, total the number of consecutive clean rounds required.
    """
    step: str
    message: str = ""
    count: int = 0
    total: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(100.0, (self.count / self.total) * 100)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "step": self.step,
            "message": self.message,
            "count": self.count,
            "total": self.total,
            "percent": round(self.percent, 1),
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        text = f"{self.step}: {self.message}" if self.message else self.step
        if self.total:
            text += f" [{self.count}/{self.total}]"
        return text


# ============================================================================
# ABSTRACT REPORTER
# ============================================================================

class Reporter(ABC):
    """Sink for evaluation progress."""

    @abstractmethod
    def progress(self, update: ProgressUpdate) -> None:
        pass

    @abstractmethod
    def info(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass

    @abstractmethod
    def summary(self, text: str) -> None:
        pass


class NullReporter(Reporter):
    """Discards everything."""

    def progress(self, update: ProgressUpdate) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def summary(self, text: str) -> None:
        pass


class LoggingReporter(Reporter):
    """Reporter writing to structured logging."""

    def __init__(self, name: str = "healthgate.progress"):
        self._logger = get_logger(name, ComponentType.REPORTER)

    def progress(self, update: ProgressUpdate) -> None:
        self._logger.debug(str(update), extra=update.to_dict())

    def info(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def summary(self, text: str) -> None:
        self._logger.info(text)


class RecordingReporter(Reporter):
    """Keeps every message in memory."""

    def __init__(self):
        self.updates: List[ProgressUpdate] = []
        self.infos: List[str] = []
        self.errors: List[str] = []
        self.summaries: List[str] = []

    def progress(self, update: ProgressUpdate) -> None:
        self.updates.append(update)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def summary(self, text: str) -> None:
        self.summaries.append(text)

    @property
    def messages(self) -> List[str]:
        """Progress messages in emission order."""
        return [u.message for u in self.updates]

    def clear(self) -> None:
        self.updates.clear()
        self.infos.clear()
        self.errors.clear()
        self.summaries.clear()


class SafeReporter(Reporter):
    """
    Wraps another reporter so that sink failures never reach the evaluator.
    """

    def __init__(self, delegate: Optional[Reporter] = None):
        self.delegate = delegate or NullReporter()

    def _call(self, method: str, value: Any) -> None:
        try:
            getattr(self.delegate, method)(value)
        except Exception as e:
            logger.warning(f"Reporter {type(self.delegate).__name__}.{method} failed: {e}")

    def progress(self, update: ProgressUpdate) -> None:
        self._call("progress", update)

    def info(self, message: str) -> None:
        self._call("info", message)

    def error(self, message: str) -> None:
        self._call("error", message)

    def summary(self, text: str) -> None:
        self._call("summary", text)


__all__ = [
    "ProgressUpdate",
    "Reporter",
    "NullReporter",
    "LoggingReporter",
    "RecordingReporter",
    "SafeReporter",
]
