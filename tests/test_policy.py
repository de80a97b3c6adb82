# ============================================================================
# RETRY POLICY TESTS
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Tests - Attempt and assurance policies
# PURPOSE: Verify delay functions, clamping and pydantic settings
# CREATED: 17 OCT 2026
# ============================================================================
"""
Retry Policy Tests

Covers:
1. Constant, linear, exponential and squared-second delays
2. Construction never fails (attempts and delays clamped)
3. Defaults (60 x 5s attempts, 2 x 1s assurance)
4. RetrySettings validation and conversion

Run with:
    pytest tests/test_policy.py -v
"""

import pytest
from pydantic import ValidationError

from healthgate.core.config import EvaluatorDefaults
from healthgate.health import RetryPolicy, RetrySettings


class TestDelays:

    def test_constant(self):
        policy = RetryPolicy.constant(3, 5_000)

        assert policy.attempts == 3
        assert [policy.delay_for(n) for n in (1, 2)] == [5.0, 5.0]

    def test_linear_with_cap(self):
        policy = RetryPolicy.linear(10, 1_000, max_delay_ms=2_500)

        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 2.5, 2.5]

    def test_exponential(self):
        policy = RetryPolicy.exponential(10, 100)

        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [0.1, 0.2, 0.4, 0.8]

    def test_squared_second(self):
        policy = RetryPolicy.squared_second(5)

        assert [policy.delay_for(n) for n in (1, 2, 3)] == [1.0, 4.0, 9.0]

    def test_deterministic(self):
        policy = RetryPolicy.exponential(5, 100, max_delay_ms=1_000)

        assert [policy.delay_for(n) for n in range(1, 5)] == [policy.delay_for(n) for n in range(1, 5)]

    def test_custom_function(self):
        policy = RetryPolicy(attempts=4, delay=lambda n: n / 10)

        assert policy.delay_for(3) == pytest.approx(0.3)


class TestClamping:

    def test_attempts_at_least_one(self):
        assert RetryPolicy.constant(0, 100).attempts == 1
        assert RetryPolicy(attempts=-5).attempts == 1

    def test_negative_delay_is_zero(self):
        assert RetryPolicy(attempts=2, delay=lambda n: -1.0).delay_for(1) == 0.0
        assert RetryPolicy.constant(2, -100).delay_for(1) == 0.0

    def test_none(self):
        policy = RetryPolicy.none()

        assert policy.attempts == 1
        assert policy.delay_for(1) == 0.0


class TestDefaults:

    def test_documented_defaults(self):
        defaults = EvaluatorDefaults()

        attempts = RetryPolicy.default_attempts(defaults)
        assurance = RetryPolicy.default_assurance(defaults)

        assert attempts.attempts == 60
        assert attempts.delay_for(1) == 5.0
        assert assurance.attempts == 2
        assert assurance.delay_for(1) == 1.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HEALTHGATE_RETRY_TIMES", "7")
        monkeypatch.setenv("HEALTHGATE_RETRY_DELAY", "250")

        policy = RetryPolicy.default_attempts()

        assert policy.attempts == 7
        assert policy.delay_for(1) == 0.25


class TestRetrySettings:

    def test_fixed(self):
        policy = RetrySettings(times=4, delay_ms=200).to_policy(1, 0)

        assert policy.attempts == 4
        assert policy.delay_for(3) == 0.2

    def test_exponential(self):
        policy = RetrySettings(times=4, delay_ms=100, backoff="exponential").to_policy(1, 0)

        assert policy.delay_for(3) == 0.4

    def test_linear(self):
        policy = RetrySettings(times=4, delay_ms=100, backoff="linear", max_delay_ms=150).to_policy(1, 0)

        assert policy.delay_for(3) == 0.15

    def test_invalid_backoff(self):
        with pytest.raises(ValidationError):
            RetrySettings(times=2, backoff="random")

    def test_invalid_times(self):
        with pytest.raises(ValidationError):
            RetrySettings(times=0)

    def test_unset_fields_take_defaults(self):
        policy = RetrySettings(delay_ms=300).to_policy(7, 50)

        assert policy.attempts == 7
        assert policy.delay_for(1) == 0.3

    def test_tier_defaults(self):
        defaults = EvaluatorDefaults(retry_times=9, retry_delay_ms=400,
                                     assurance_times=3, assurance_delay_ms=100)
        settings = RetrySettings(backoff="linear")

        attempts = settings.attempt_policy(defaults)
        assurance = settings.assurance_policy(defaults)

        assert attempts.attempts == 9
        assert attempts.delay_for(2) == 0.8
        assert assurance.attempts == 3
        assert assurance.delay_for(2) == 0.2
