# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Tests - Fixtures
# PURPOSE: Fake clock, recording reporter and probe helpers
# CREATED: 17 OCT 2026
# ============================================================================
"""
Shared fixtures.

Time is always faked: evaluators built here use FakeClock, so retry and
assurance delays are recorded instead of slept.
"""

import os
import threading
from typing import Any, List

import pytest

from healthgate.core.config import EvaluatorDefaults, reset_defaults
from healthgate.health import Evaluator, FakeClock, RecordingReporter


class Scripted:
    """
    Probe operation following a script.

    Each call consumes the next step: True succeeds, False raises, an
    Exception instance is raised as-is. The last step repeats forever.
    """

    def __init__(self, *steps: Any):
        self.steps: List[Any] = list(steps)
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            index = min(self.calls, len(self.steps) - 1)
            self.calls += 1
        step = self.steps[index]
        if isinstance(step, BaseException):
            raise step
        if step is True:
            return f"call {index + 1} ok"
        raise RuntimeError(f"call {index + 1} failed")


def _always_ok():
    return "ok"


def _always_fails():
    raise RuntimeError("service down")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from HEALTHGATE_* variables and cached defaults."""
    for key in list(os.environ):
        if key.startswith("HEALTHGATE_"):
            monkeypatch.delenv(key, raising=False)
    reset_defaults()
    yield
    reset_defaults()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def make_evaluator(clock, reporter):
    """Factory for evaluators wired to the fake clock and recording reporter."""
    def _make(defaults: EvaluatorDefaults = None) -> Evaluator:
        return Evaluator(
            reporter=reporter,
            clock=clock,
            defaults=defaults or EvaluatorDefaults(),
        )
    return _make


@pytest.fixture
def scripted():
    """Factory for scripted operations: scripted(False, False, True)."""
    return Scripted


@pytest.fixture
def always_ok():
    return _always_ok


@pytest.fixture
def always_fails():
    return _always_fails
