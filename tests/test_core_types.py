# ============================================================================
# CORE TYPE TESTS
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Tests - Probe, status and outcome types
# PURPOSE: Verify status rendering and outcome aggregates
# CREATED: 17 OCT 2026
# ============================================================================
"""
Core Type Tests

Covers:
1. ProbeStatus construction and rendering
2. EvaluationOutcome passed / failed subsets and ratio text
3. Report ordering (failed first, then by name)
4. Probe.run() with plain and coroutine operations
5. ProbeRegistry registration and lookup

Run with:
    pytest tests/test_core_types.py -v
"""

from healthgate.health import EvaluationOutcome, Probe, ProbeRegistry, ProbeState, ProbeStatus


def _status(name, ok, detail="x"):
    probe = Probe(name=name, operation=lambda: None)
    if ok:
        return ProbeStatus.success(probe, detail)
    return ProbeStatus.failure(probe, RuntimeError(detail))


class TestProbeStatus:

    def test_success(self):
        status = _status("api", True, "GET / -> 200 OK")

        assert status.succeeded
        assert status.state == ProbeState.SUCCEEDED
        assert str(status) == "OK | api: GET / -> 200 OK"

    def test_failure(self):
        status = _status("api", False, "boom")

        assert not status.succeeded
        assert str(status) == "FAIL | api: RuntimeError: boom"

    def test_to_dict(self):
        data = _status("api", False, "boom").to_dict()

        assert data["probe"] == "api"
        assert data["status"] == "failed"
        assert data["detail"] == "RuntimeError: boom"


class TestEvaluationOutcome:

    def test_aggregates(self):
        outcome = EvaluationOutcome.of([
            _status("b", True),
            _status("a", False),
            _status("c", True),
        ])

        assert [s.name for s in outcome.passed] == ["b", "c"]
        assert [s.name for s in outcome.failed] == ["a"]
        assert outcome.passed_ratio == "2/3 (66.67%)"
        assert not outcome.succeeded

    def test_report_order(self):
        outcome = EvaluationOutcome.of([
            _status("b", True),
            _status("z", False),
            _status("a", True),
            _status("c", False),
        ])

        names = [line.split(" | ")[1].split(":")[0] for line in outcome.report().splitlines()]
        assert names == ["c", "z", "a", "b"]

    def test_empty(self):
        outcome = EvaluationOutcome.empty()

        assert outcome.is_empty
        assert outcome.succeeded
        assert outcome.passed_ratio == "0/0 (0.00%)"
        assert outcome.report() == ""

    def test_to_dict(self):
        data = EvaluationOutcome.of([_status("a", True), _status("b", False)]).to_dict()

        assert data["total"] == 2
        assert data["passed"] == 1
        assert data["succeeded"] is False
        assert data["statuses"][0]["probe"] == "b"


class TestProbe:

    def test_run_plain(self):
        assert Probe(name="p", operation=lambda: 42).run() == 42

    def test_run_coroutine(self):
        async def operation():
            return "awaited"

        assert Probe(name="p", operation=operation).run() == "awaited"


class TestProbeRegistry:

    def test_registration_order(self):
        registry = ProbeRegistry()
        registry.register("b", lambda: None)
        registry.register("a", lambda: None)

        assert [p.name for p in registry.get_all()] == ["b", "a"]
        assert len(registry) == 2
        assert "a" in registry

    def test_decorator(self):
        registry = ProbeRegistry()

        @registry.probe("decorated")
        def operation():
            return "ok"

        assert registry.get("decorated").run() == "ok"

    def test_unregister(self):
        registry = ProbeRegistry()
        registry.register("a", lambda: None)
        registry.register("a", lambda: None)

        assert registry.unregister("a") is True
        assert registry.unregister("a") is False
        assert len(registry) == 0

    def test_empty_name_accepted(self):
        registry = ProbeRegistry()
        registry.register("", lambda: None)

        assert len(registry) == 1
