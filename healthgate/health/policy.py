# ============================================================================
# RETRY POLICY
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Attempt and assurance policies
# PURPOSE: Bounded attempt counts with deterministic per-attempt delays
# CREATED: 17 OCT 2026
# ============================================================================
"""
Retry Policy

A RetryPolicy is an immutable (attempts, delay) pair. The evaluator uses
two of them:
- attempt policy: how many rounds may be retried while probes fail
- assurance policy: how many consecutive clean rounds are required

delay(attempt_no) returns seconds and must depend on attempt_no alone,
so tests can replay a policy exactly.

RetrySettings is the pydantic form used by probe files and the CLI.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from pydantic import BaseModel, Field

from healthgate.core.config import EvaluatorDefaults, get_defaults


DelayFunction = Callable[[int], float]


def _no_delay(attempt_no: int) -> float:
    return 0.0


def constant_delay(delay_ms: int) -> DelayFunction:
    seconds = max(0, delay_ms) / 1000.0

    def delay(attempt_no: int) -> float:
        return seconds
    return delay


def linear_delay(delay_ms: int, max_delay_ms: Optional[int] = None) -> DelayFunction:
    def delay(attempt_no: int) -> float:
        value = delay_ms * attempt_no
        if max_delay_ms is not None:
            value = min(value, max_delay_ms)
        return max(0, value) / 1000.0
    return delay


def exponential_delay(delay_ms: int, max_delay_ms: Optional[int] = None) -> DelayFunction:
    def delay(attempt_no: int) -> float:
        value = delay_ms * (2 ** (attempt_no - 1))
        if max_delay_ms is not None:
            value = min(value, max_delay_ms)
        return max(0, value) / 1000.0
    return delay


@dataclass(frozen=True)
class RetryPolicy:
    """
    Immutable attempt count with a per-attempt delay.

    Construction never fails: attempts below 1 are raised to 1 and
    negative delays are treated as zero.
    """
    attempts: int = 1
    delay: DelayFunction = field(default=_no_delay, compare=False, repr=False)

    def __post_init__(self):
        if self.attempts < 1:
            object.__setattr__(self, "attempts", 1)

    def delay_for(self, attempt_no: int) -> float:
        """Seconds to wait after the given (1-based) attempt."""
        return max(0.0, float(self.delay(attempt_no)))

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def none(cls) -> "RetryPolicy":
        """Single attempt, never waits."""
        return cls(attempts=1, delay=_no_delay)

    @classmethod
    def constant(cls, attempts: int, delay_ms: int) -> "RetryPolicy":
        return cls(attempts=attempts, delay=constant_delay(delay_ms))

    @classmethod
    def linear(cls, attempts: int, delay_ms: int, max_delay_ms: Optional[int] = None) -> "RetryPolicy":
        return cls(attempts=attempts, delay=linear_delay(delay_ms, max_delay_ms))

    @classmethod
    def exponential(cls, attempts: int, delay_ms: int, max_delay_ms: Optional[int] = None) -> "RetryPolicy":
        return cls(attempts=attempts, delay=exponential_delay(delay_ms, max_delay_ms))

    @classmethod
    def squared_second(cls, attempts: int) -> "RetryPolicy":
        """Waits attempt_no squared seconds (1s, 4s, 9s, ...)."""
        return cls(attempts=attempts, delay=lambda n: float(n * n))

    @classmethod
    def default_attempts(cls, defaults: Optional[EvaluatorDefaults] = None) -> "RetryPolicy":
        defaults = defaults or get_defaults()
        return cls.constant(defaults.retry_times, defaults.retry_delay_ms)

    @classmethod
    def default_assurance(cls, defaults: Optional[EvaluatorDefaults] = None) -> "RetryPolicy":
        defaults = defaults or get_defaults()
        return cls.constant(defaults.assurance_times, defaults.assurance_delay_ms)


class RetrySettings(BaseModel):
    """Retry configuration as written in probe files."""
    times: Optional[int] = Field(default=None, ge=1)
    delay_ms: Optional[int] = Field(default=None, ge=0)
    backoff: str = Field(default="fixed", pattern="^(fixed|exponential|linear)$")
    max_delay_ms: Optional[int] = Field(default=None, ge=0)

    def to_policy(self, default_times: int, default_delay_ms: int) -> RetryPolicy:
        """Build the policy; unset times or delay_ms take the given defaults."""
        times = self.times if self.times is not None else default_times
        delay_ms = self.delay_ms if self.delay_ms is not None else default_delay_ms
        if self.backoff == "linear":
            return RetryPolicy.linear(times, delay_ms, self.max_delay_ms)
        if self.backoff == "exponential":
            return RetryPolicy.exponential(times, delay_ms, self.max_delay_ms)
        return RetryPolicy.constant(times, delay_ms)

    def attempt_policy(self, defaults: EvaluatorDefaults) -> RetryPolicy:
        return self.to_policy(defaults.retry_times, defaults.retry_delay_ms)

    def assurance_policy(self, defaults: EvaluatorDefaults) -> RetryPolicy:
        return self.to_policy(defaults.assurance_times, defaults.assurance_delay_ms)


__all__ = [
    "DelayFunction",
    "RetryPolicy",
    "RetrySettings",
    "constant_delay",
    "linear_delay",
    "exponential_delay",
]
