# ============================================================================
# PROBE FILE LOADER
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Declarative probe definitions
# PURPOSE: Load evaluation settings and probes from YAML files
# CREATED: 17 OCT 2026
# ============================================================================
"""
Probe File Loader

Loads an evaluation plan from YAML:

    retry: {times: 30, delay_ms: 2000, backoff: fixed}
    assurance: {times: 3, delay_ms: 1000}
    verbose: true
    wait: {before_ms: 0, after_ms: 5000}
    probes:
      - {name: author, type: http, url: "http://localhost:4502/", text: "Sign in"}
      - {name: dispatcher, type: no_http, url: "http://localhost:80/"}
      - {name: database, type: host, host: localhost, port: 5432}
      - {name: debug-port, type: no_host, host: localhost, port: 5005}

Settings left out of the file fall back to EvaluatorDefaults.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from healthgate.core.errors import ConfigurationError
from healthgate.core.logging import ComponentType, get_logger
from healthgate.health.core import EvaluationOutcome
from healthgate.health.evaluator import Evaluator
from healthgate.health.policy import RetrySettings
from healthgate.health.probes import HttpCheck

logger = get_logger(__name__, ComponentType.LOADER)

PROBE_TYPES = ("http", "no_http", "host", "no_host")


class ProbeDefinition(BaseModel):
    """A single probe entry of a probe file."""
    name: str = Field(min_length=1, max_length=128)
    type: str = Field(pattern="^(http|no_http|host|no_host)$")

    # HTTP probes
    url: Optional[str] = None
    method: str = Field(default="GET", pattern="^[A-Za-z]+$")
    status_code: Optional[int] = Field(default=None, ge=100, le=599)
    text: Optional[str] = None
    texts: List[str] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)

    # Host probes
    host: Optional[str] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    timeout_ms: int = Field(default=1000, ge=1)

    @model_validator(mode="after")
    def check_target(self) -> "ProbeDefinition":
        """Each probe type needs its own target fields."""
        if self.type in ("http", "no_http") and not self.url:
            raise ValueError(f"Probe '{self.name}' of type {self.type} requires 'url'")
        if self.type in ("host", "no_host") and (not self.host or self.port is None):
            raise ValueError(f"Probe '{self.name}' of type {self.type} requires 'host' and 'port'")
        return self

    def criteria(self, check: HttpCheck) -> None:
        """Apply this entry's response criteria to an HttpCheck."""
        check.method = self.method.upper()
        check.headers.update(self.headers)
        texts = ([self.text] if self.text else []) + list(self.texts)
        if texts:
            check.contains_texts(*texts, status_code=self.status_code or 200)
        elif self.status_code is not None:
            check.responds_with(self.status_code)

    def register(self, evaluator: Evaluator) -> None:
        if self.type == "http":
            evaluator.http(self.name, self.url, self.criteria)
        elif self.type == "no_http":
            evaluator.no_http(self.name, self.url, self._request_only)
        elif self.type == "host":
            evaluator.host(self.name, self.host, self.port, self.timeout_ms)
        else:
            evaluator.no_host(self.name, self.host, self.port, self.timeout_ms)

    def _request_only(self, check: HttpCheck) -> None:
        check.method = self.method.upper()
        check.headers.update(self.headers)


class WaitSettings(BaseModel):
    """Waits around the evaluation, in milliseconds."""
    before_ms: Optional[int] = Field(default=None, ge=0)
    after_ms: Optional[int] = Field(default=None, ge=0)


class EvaluationPlan(BaseModel):
    """Evaluation settings plus the probes to register."""
    retry: Optional[RetrySettings] = None
    assurance: Optional[RetrySettings] = None
    verbose: Optional[bool] = None
    wait: WaitSettings = Field(default_factory=WaitSettings)
    probes: List[ProbeDefinition] = Field(default_factory=list)

    def register(self, evaluator: Evaluator) -> Evaluator:
        """Register every probe of the plan on the evaluator."""
        for definition in self.probes:
            definition.register(evaluator)
        return evaluator

    def build_evaluator(self, **kwargs) -> Evaluator:
        """Create an Evaluator (kwargs go to its constructor) with the plan's probes."""
        return self.register(Evaluator(**kwargs))

    def evaluate(self, evaluator: Evaluator, **overrides) -> EvaluationOutcome:
        """
        Run the evaluator with the plan's settings.

        Fields missing from a retry or assurance section take the evaluator's
        defaults. Keyword overrides take precedence over the file (None values
        are ignored).
        """
        defaults = evaluator.defaults
        settings: Dict[str, Any] = {
            "attempt_policy": self.retry.attempt_policy(defaults) if self.retry else None,
            "assurance_policy": self.assurance.assurance_policy(defaults) if self.assurance else None,
            "wait_before": self.wait.before_ms / 1000.0 if self.wait.before_ms is not None else None,
            "wait_after": self.wait.after_ms / 1000.0 if self.wait.after_ms is not None else None,
            "verbose": self.verbose,
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return evaluator.evaluate(**settings)


def parse_plan(data: Optional[Dict[str, Any]]) -> EvaluationPlan:
    """Validate an already-parsed probe file."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Probe file must contain a mapping at the top level")
    try:
        return EvaluationPlan.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid probe file: {e}") from e


def load_plan(path: Union[str, Path]) -> EvaluationPlan:
    """
    Load an evaluation plan from a YAML file.

    Raises:
        ConfigurationError: missing file, invalid YAML or invalid schema
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Probe file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    plan = parse_plan(data)
    logger.info(f"Loaded {len(plan.probes)} probes from {path}")
    return plan


__all__ = [
    "PROBE_TYPES",
    "ProbeDefinition",
    "WaitSettings",
    "EvaluationPlan",
    "parse_plan",
    "load_plan",
]
