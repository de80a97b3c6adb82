"""
healthgate

Gate automation on environment health: register probes, then evaluate
them with an attempt tier (retry failing rounds) and an assurance tier
(require consecutive clean rounds).
"""

from healthgate.__version__ import __version__
from healthgate.core.errors import (
    HealthGateError,
    ProbeFailure,
    EvaluationFailed,
    ConfigurationError,
)
from healthgate.health import (
    Probe,
    ProbeStatus,
    EvaluationOutcome,
    RetryPolicy,
    Evaluator,
)

__all__ = [
    "__version__",
    "HealthGateError",
    "ProbeFailure",
    "EvaluationFailed",
    "ConfigurationError",
    "Probe",
    "ProbeStatus",
    "EvaluationOutcome",
    "RetryPolicy",
    "Evaluator",
]
