# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Probe and status value types
# PURPOSE: Probe definition, per-probe status and round outcome types
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the probe unit and the result types produced by a round.

- Probe: named zero-argument operation returning an opaque result or raising
- ProbeState: explicit two-variant result (succeeded / failed)
- ProbeStatus: result of one probe in one round
- EvaluationOutcome: every status of the most recent round plus aggregates

Statuses are produced fresh every round. An outcome always describes a
single round; outcomes of previous rounds are superseded, never merged.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple


class ProbeState(str, Enum):
    """Probe result variants."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"


async def _await(awaitable):
    return await awaitable


@dataclass(frozen=True)
class Probe:
    """
    A named unit of health verification.

    The operation takes no arguments. Returning normally means the probe
    passed and the returned value describes what was observed; raising
    means it failed. Coroutine functions are supported and are driven to
    completion on the calling thread.
    """
    name: str
    operation: Callable[[], Any] = field(compare=False)
    description: Optional[str] = field(default=None, compare=False)

    def run(self) -> Any:
        """Invoke the operation, awaiting it if it returned an awaitable."""
        result = self.operation()
        if inspect.isawaitable(result):
            return asyncio.run(_await(result))
        return result

    def __str__(self) -> str:
        return self.name


def describe_result(result: Any) -> str:
    """Human-readable description of a probe's return value."""
    if result is None:
        return "ok"
    return str(result)


def describe_exception(error: BaseException) -> str:
    """Human-readable description of a probe failure."""
    message = str(error)
    if message:
        return f"{type(error).__name__}: {message}"
    return type(error).__name__


@dataclass(frozen=True)
class ProbeStatus:
    """Result of a single probe in a single round."""
    probe: Probe
    state: ProbeState
    detail: str
    duration_ms: float = 0.0

    @classmethod
    def success(cls, probe: Probe, result: Any = None, duration_ms: float = 0.0) -> "ProbeStatus":
        """Create succeeded status from a probe's return value."""
        return cls(
            probe=probe,
            state=ProbeState.SUCCEEDED,
            detail=describe_result(result),
            duration_ms=duration_ms,
        )

    @classmethod
    def failure(cls, probe: Probe, error: BaseException, duration_ms: float = 0.0) -> "ProbeStatus":
        """Create failed status from the exception a probe raised."""
        return cls(
            probe=probe,
            state=ProbeState.FAILED,
            detail=describe_exception(error),
            duration_ms=duration_ms,
        )

    @property
    def name(self) -> str:
        return self.probe.name

    @property
    def succeeded(self) -> bool:
        return self.state == ProbeState.SUCCEEDED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "probe": self.probe.name,
            "status": self.state.value,
            "detail": self.detail,
            "duration_ms": round(self.duration_ms, 2),
        }

    def __str__(self) -> str:
        marker = "OK" if self.succeeded else "FAIL"
        return f"{marker} | {self.probe.name}: {self.detail}"


def _sort_key(status: ProbeStatus) -> Tuple[bool, str]:
    # Failed statuses first, then by name
    return (status.succeeded, status.probe.name)


@dataclass(frozen=True)
class EvaluationOutcome:
    """
    Statuses of the most recently executed round.

    Status order follows completion order and is not stable between
    rounds; use sorted_statuses for display or comparison.
    """
    statuses: Tuple[ProbeStatus, ...] = ()

    @classmethod
    def empty(cls) -> "EvaluationOutcome":
        return cls(statuses=())

    @classmethod
    def of(cls, statuses: List[ProbeStatus]) -> "EvaluationOutcome":
        return cls(statuses=tuple(statuses))

    @property
    def all(self) -> List[ProbeStatus]:
        return list(self.statuses)

    @property
    def passed(self) -> List[ProbeStatus]:
        return [s for s in self.statuses if s.succeeded]

    @property
    def failed(self) -> List[ProbeStatus]:
        return [s for s in self.statuses if not s.succeeded]

    @property
    def is_empty(self) -> bool:
        return not self.statuses

    @property
    def succeeded(self) -> bool:
        """True when no probe failed (vacuously true for an empty outcome)."""
        return not self.failed

    @property
    def ratio(self) -> float:
        if not self.statuses:
            return 0.0
        return len(self.passed) / len(self.statuses)

    @property
    def passed_ratio(self) -> str:
        """Pass ratio as text, e.g. '2/3 (66.67%)'."""
        return f"{len(self.passed)}/{len(self.statuses)} ({self.ratio:.2%})"

    @property
    def sorted_statuses(self) -> List[ProbeStatus]:
        return sorted(self.statuses, key=_sort_key)

    def status_of(self, name: str) -> Optional[ProbeStatus]:
        """First status whose probe has the given name."""
        for status in self.statuses:
            if status.probe.name == name:
                return status
        return None

    def report(self) -> str:
        """Every status, failed first, one per line."""
        return "\n".join(str(s) for s in self.sorted_statuses)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "succeeded": self.succeeded,
            "passed": len(self.passed),
            "failed": len(self.failed),
            "total": len(self.statuses),
            "ratio": round(self.ratio, 4),
            "statuses": [s.to_dict() for s in self.sorted_statuses],
        }

    def __len__(self) -> int:
        return len(self.statuses)


__all__ = [
    "Probe",
    "ProbeState",
    "ProbeStatus",
    "EvaluationOutcome",
    "describe_result",
    "describe_exception",
]
