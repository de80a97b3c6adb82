# ============================================================================
# HTTP PROBE TESTS
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Tests - HTTP response assertions
# PURPOSE: Verify http_probe / no_http_probe against a mocked transport
# CREATED: 17 OCT 2026
# ============================================================================
"""
HTTP Probe Tests

Uses httpx.MockTransport - no real HTTP traffic.

Covers:
1. Default criterion (status 200)
2. Status code and text criteria
3. Custom criteria, method and headers
4. User agent from HttpProbeDefaults
5. no_http_probe passes on connection errors and fails on any response
6. Probes inside an evaluation round

Run with:
    pytest tests/test_http_probes.py -v
"""

import re

import httpx
import pytest

from healthgate.core.config import EvaluatorDefaults, HttpProbeDefaults
from healthgate.core.errors import ProbeFailure
from healthgate.health import Evaluator, FakeClock, RetryPolicy
from healthgate.health.probes import HttpCheck, http_probe, no_http_probe


URL = "http://localhost:4502/libs/granite/core/content/login.html"


def _transport(status_code=200, text="", seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, text=text)
    return httpx.MockTransport(handler)


def _refusing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)
    return httpx.MockTransport(handler)


class TestHttpProbe:

    def test_default_expects_200(self):
        operation = http_probe(URL, client_options={"transport": _transport(200)})

        assert operation() == f"GET {URL} -> 200 OK"

    def test_default_rejects_500(self):
        operation = http_probe(URL, client_options={"transport": _transport(500)})

        with pytest.raises(ProbeFailure, match="Unexpected response status 500"):
            operation()

    def test_status_code(self):
        operation = http_probe(URL, status_code=302, client_options={"transport": _transport(302)})

        assert operation().endswith("-> 302 Found")

    def test_contained_text(self):
        transport = _transport(200, text="<title>Sign in</title>")

        assert http_probe(URL, contained_text="Sign in", client_options={"transport": transport})()

        with pytest.raises(ProbeFailure, match="does not contain text 'Welcome'"):
            http_probe(URL, contained_text="Welcome", client_options={"transport": transport})()

    def test_criteria_callback(self):
        seen = []

        def criteria(check: HttpCheck):
            check.method = "HEAD"
            check.headers["x-probe"] = "1"
            check.responds_with(200, 204)

        operation = http_probe(URL, criteria, client_options={"transport": _transport(204, seen=seen)})

        assert operation() == f"HEAD {URL} -> 204 No Content"
        assert seen[0].method == "HEAD"
        assert seen[0].headers["x-probe"] == "1"

    def test_custom_check(self):
        def reject(response: httpx.Response):
            raise ProbeFailure("custom")

        def criteria(check: HttpCheck):
            check.check(reject)

        operation = http_probe(URL, criteria, client_options={"transport": _transport(200)})

        with pytest.raises(ProbeFailure, match="custom"):
            operation()

    def test_contains_texts(self):
        check = HttpCheck(URL).contains_texts("alpha", "beta")
        response = httpx.Response(200, text="alpha and beta")

        for criterion in check.checks:
            criterion(response)

    def test_user_agent(self):
        seen = []
        defaults = HttpProbeDefaults(user_agent="healthgate/test")
        operation = http_probe(URL, client_options={"transport": _transport(seen=seen)}, defaults=defaults)

        operation()

        assert seen[0].headers["user-agent"] == "healthgate/test"

    def test_connection_error_propagates(self):
        operation = http_probe(URL, client_options={"transport": _refusing_transport()})

        with pytest.raises(httpx.ConnectError):
            operation()


class TestNoHttpProbe:

    def test_unavailable_passes(self):
        operation = no_http_probe(URL, client_options={"transport": _refusing_transport()})

        assert operation() == f"GET {URL} -> unavailable"

    def test_any_response_fails(self):
        operation = no_http_probe(URL, client_options={"transport": _transport(404)})

        with pytest.raises(ProbeFailure, match=re.escape(f"HTTP GET '{URL}' is available")):
            operation()


class TestHttpProbesInRound:

    def test_round_statuses(self):
        evaluator = Evaluator(clock=FakeClock(), defaults=EvaluatorDefaults())
        evaluator.http("author", URL, client_options={"transport": _transport(200)})
        evaluator.http("publish", URL, client_options={"transport": _transport(503)})
        evaluator.no_http("dispatcher", URL, client_options={"transport": _refusing_transport()})

        outcome = evaluator.evaluate(
            attempt_policy=RetryPolicy.none(),
            assurance_policy=RetryPolicy.none(),
            verbose=False,
        )

        assert [s.name for s in outcome.failed] == ["publish"]
        assert outcome.status_of("dispatcher").succeeded
        assert outcome.passed_ratio == "2/3 (66.67%)"
