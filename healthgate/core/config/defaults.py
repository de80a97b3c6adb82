# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for retry policies, waits and HTTP probes
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides documented defaults for evaluations and probes.
These can be overridden via environment variables, probe files or
explicit arguments to Evaluator.evaluate().

Design:
- Immutable dataclasses for defaults
- Environment variable overrides (HEALTHGATE_*)
- Type-safe access
"""

import os
from dataclasses import dataclass
from typing import Optional

from healthgate.core.errors import ConfigurationError


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class EvaluatorDefaults:
    """
    Defaults for an evaluation.

    Attempt tier: how many rounds may be retried before giving up.
    Assurance tier: how many consecutive clean rounds are required.
    """
    # Attempt tier
    retry_times: int = 60
    retry_delay_ms: int = 5_000

    # Assurance tier
    assurance_times: int = 2
    assurance_delay_ms: int = 1_000

    # Behavior
    verbose: bool = True
    wait_before_ms: int = 0
    wait_after_ms: int = 0

    # None = one worker per probe
    max_workers: Optional[int] = None

    @property
    def wait_before_seconds(self) -> float:
        return self.wait_before_ms / 1000.0

    @property
    def wait_after_seconds(self) -> float:
        return self.wait_after_ms / 1000.0

    @classmethod
    def from_env(cls) -> "EvaluatorDefaults":
        """Create from environment variables."""
        return cls(
            retry_times=_env_int("HEALTHGATE_RETRY_TIMES", 60),
            retry_delay_ms=_env_int("HEALTHGATE_RETRY_DELAY", 5_000),
            assurance_times=_env_int("HEALTHGATE_ASSURANCE_TIMES", 2),
            assurance_delay_ms=_env_int("HEALTHGATE_ASSURANCE_DELAY", 1_000),
            verbose=_env_bool("HEALTHGATE_VERBOSE", True),
            wait_before_ms=_env_int("HEALTHGATE_WAIT_BEFORE", 0),
            wait_after_ms=_env_int("HEALTHGATE_WAIT_AFTER", 0),
        )


@dataclass(frozen=True)
class HttpProbeDefaults:
    """
    Defaults for HTTP probes.

    Connection retries are off by default: the attempt tier already
    retries the whole round.
    """
    connection_timeout_ms: int = 5_000
    connection_retries: bool = False
    user_agent: Optional[str] = None
    verify_ssl: bool = True

    @property
    def timeout_seconds(self) -> float:
        return self.connection_timeout_ms / 1000.0

    @classmethod
    def from_env(cls) -> "HttpProbeDefaults":
        """Create from environment variables."""
        return cls(
            connection_timeout_ms=_env_int("HEALTHGATE_HTTP_CONNECTION_TIMEOUT", 5_000),
            connection_retries=_env_bool("HEALTHGATE_HTTP_CONNECTION_RETRIES", False),
            user_agent=os.getenv("HEALTHGATE_HTTP_USER_AGENT") or None,
            verify_ssl=_env_bool("HEALTHGATE_HTTP_VERIFY_SSL", True),
        )


# ============================================================================
# CACHED ACCESS
# ============================================================================

_evaluator_defaults: Optional[EvaluatorDefaults] = None
_http_defaults: Optional[HttpProbeDefaults] = None


def get_defaults() -> EvaluatorDefaults:
    """Get evaluator defaults (environment overrides applied once)."""
    global _evaluator_defaults
    if _evaluator_defaults is None:
        _evaluator_defaults = EvaluatorDefaults.from_env()
    return _evaluator_defaults


def get_http_defaults() -> HttpProbeDefaults:
    """Get HTTP probe defaults (environment overrides applied once)."""
    global _http_defaults
    if _http_defaults is None:
        _http_defaults = HttpProbeDefaults.from_env()
    return _http_defaults


def reset_defaults() -> None:
    """Drop cached defaults so the environment is read again."""
    global _evaluator_defaults, _http_defaults
    _evaluator_defaults = None
    _http_defaults = None


__all__ = [
    "EvaluatorDefaults",
    "HttpProbeDefaults",
    "get_defaults",
    "get_http_defaults",
    "reset_defaults",
]
