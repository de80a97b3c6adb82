# ============================================================================
# ERROR TYPES
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Core - Exception hierarchy
# PURPOSE: Errors raised by probes, the evaluator and configuration loading
# CREATED: 17 OCT 2026
# ============================================================================
"""
Error Types

Hierarchy:
- HealthGateError: base for everything healthgate raises
  - ProbeFailure: a probe assertion did not hold (recovered into a status)
  - AttemptsExceeded: attempt tier exhausted with probes still failing
  - EvaluationFailed: terminal failure surfaced to callers (verbose mode)
  - ConfigurationError: invalid environment or probe-file configuration

Only EvaluationFailed escapes Evaluator.evaluate(). ProbeFailure is the
preferred way for probe operations to signal a failed assertion, but any
Exception raised by a probe is recovered the same way.
"""

from typing import Any, Optional


class HealthGateError(Exception):
    """Base class for healthgate errors."""
    pass


class ProbeFailure(HealthGateError):
    """A probe assertion failed."""
    pass


class AttemptsExceeded(HealthGateError):
    """All attempts of a round were used and at least one probe still fails."""

    def __init__(self, attempts: int, outcome: Any = None):
        self.attempts = attempts
        self.outcome = outcome
        super().__init__(f"Attempts exceeded ({attempts})")


class EvaluationFailed(HealthGateError):
    """
    Terminal evaluation failure.

    Carries the outcome of the last executed round so callers can inspect
    which probes failed.
    """

    def __init__(self, message: str, outcome: Any = None, ratio: Optional[str] = None):
        super().__init__(message)
        self.outcome = outcome
        self.ratio = ratio


class ConfigurationError(HealthGateError):
    """Invalid configuration value or probe definition file."""
    pass


__all__ = [
    "HealthGateError",
    "ProbeFailure",
    "AttemptsExceeded",
    "EvaluationFailed",
    "ConfigurationError",
]
