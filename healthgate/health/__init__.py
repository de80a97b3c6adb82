# ============================================================================
# HEALTH EVALUATION MODULE
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Probe evaluation
# PURPOSE: Decide, with two retry tiers, whether an environment is healthy
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Evaluation Module

Architecture:
- Probe / ProbeStatus / EvaluationOutcome: value types
- RetryPolicy: attempt and assurance tiers
- ProbeRegistry: probes of one evaluation
- ParallelRound: concurrent execution of one round
- Evaluator: attempt / assurance state machine
- Reporter: progress sink
- Clock: sleep primitive (FakeClock for tests)

Usage:
    from healthgate.health import Evaluator, RetryPolicy

    evaluator = Evaluator()
    evaluator.register_probe("api", lambda: check_api())
    outcome = evaluator.evaluate(
        attempt_policy=RetryPolicy.constant(10, 1_000),
        assurance_policy=RetryPolicy.constant(2, 500),
    )
"""

from healthgate.health.core import (
    Probe,
    ProbeState,
    ProbeStatus,
    EvaluationOutcome,
)
from healthgate.health.policy import RetryPolicy, RetrySettings
from healthgate.health.registry import ProbeRegistry
from healthgate.health.executor import ParallelRound
from healthgate.health.reporter import (
    ProgressUpdate,
    Reporter,
    NullReporter,
    LoggingReporter,
    RecordingReporter,
)
from healthgate.health.clock import Clock, SystemClock, FakeClock
from healthgate.health.evaluator import Evaluator, EvaluatorState

__all__ = [
    # Core types
    "Probe",
    "ProbeState",
    "ProbeStatus",
    "EvaluationOutcome",
    # Policy
    "RetryPolicy",
    "RetrySettings",
    # Registry
    "ProbeRegistry",
    # Executor
    "ParallelRound",
    # Reporting
    "ProgressUpdate",
    "Reporter",
    "NullReporter",
    "LoggingReporter",
    "RecordingReporter",
    # Clock
    "Clock",
    "SystemClock",
    "FakeClock",
    # Evaluator
    "Evaluator",
    "EvaluatorState",
]
