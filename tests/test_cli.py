# ============================================================================
# CLI TESTS
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Tests - Command-line entry point
# PURPOSE: Verify argument handling, exit codes and printed reports
# CREATED: 17 OCT 2026
# ============================================================================
"""
CLI Tests

Host probes target local sockets; retry and assurance tiers are set to a
single round so nothing sleeps.

Run with:
    pytest tests/test_cli.py -v
"""

import json
import socket
import textwrap
from unittest.mock import patch

import pytest

from healthgate.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, build_parser, main, run_await
from healthgate.core.config import EvaluatorDefaults
from healthgate.health import Evaluator, FakeClock

SINGLE_ROUND = ["--retry-times", "1", "--assurance-times", "1"]


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("healthgate.cli.configure_logging"):
        yield


@pytest.fixture
def listening_port():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(5)
    try:
        yield server.getsockname()[1]
    finally:
        server.close()


@pytest.fixture
def closed_port():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


class TestAwait:

    def test_healthy(self, listening_port, capsys):
        code = main(["await", "--host", f"db=127.0.0.1:{listening_port}", *SINGLE_ROUND])

        assert code == EXIT_OK
        assert f"OK | db: 127.0.0.1:{listening_port} -> reachable" in capsys.readouterr().out

    def test_unhealthy_verbose(self, closed_port, capsys):
        code = main(["await", "--host", f"db=127.0.0.1:{closed_port}", *SINGLE_ROUND])

        assert code == EXIT_FAILED
        assert "FAIL | db:" in capsys.readouterr().out

    def test_unhealthy_permissive(self, closed_port, capsys):
        code = main([
            "await", "--host", f"db=127.0.0.1:{closed_port}", *SINGLE_ROUND, "--permissive",
        ])

        assert code == EXIT_FAILED
        assert "FAIL | db:" in capsys.readouterr().out

    def test_no_host(self, closed_port):
        code = main(["await", "--no-host", f"old=127.0.0.1:{closed_port}", *SINGLE_ROUND])

        assert code == EXIT_OK

    def test_json_output(self, listening_port, capsys):
        code = main([
            "await", "--host", f"db=127.0.0.1:{listening_port}", *SINGLE_ROUND, "--json",
        ])

        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_OK
        assert data["succeeded"] is True
        assert data["statuses"][0]["probe"] == "db"

    def test_probe_file(self, tmp_path, listening_port, capsys):
        path = tmp_path / "probes.yaml"
        path.write_text(textwrap.dedent(f"""
            retry: {{times: 1}}
            assurance: {{times: 1}}
            probes:
              - {{name: db, type: host, host: 127.0.0.1, port: {listening_port}}}
        """))

        code = main(["await", "-f", str(path)])

        assert code == EXIT_OK
        assert "OK | db:" in capsys.readouterr().out



class TestFileWithOptions:
    """Retry options refine the file's retry section instead of replacing it."""

    def _write(self, tmp_path):
        path = tmp_path / "gate.yaml"
        path.write_text("retry: {times: 5, delay_ms: 200, backoff: linear}\n")
        return str(path)

    def _run(self, argv, clock):
        evaluator = Evaluator(clock=clock, defaults=EvaluatorDefaults())
        return run_await(build_parser().parse_args(argv), evaluator=evaluator)

    def test_retry_times_keeps_file_delay_and_backoff(self, tmp_path, closed_port):
        clock = FakeClock()
        path = self._write(tmp_path)
        target = f"db=127.0.0.1:{closed_port}"
        argv = ["await", "-f", path, "--host", target, "--retry-times", "3", "--permissive"]

        code = self._run(argv, clock)

        assert code == EXIT_FAILED
        assert clock.sleeps == [0.2, 0.4]

    def test_retry_delay_keeps_file_times(self, tmp_path, closed_port):
        clock = FakeClock()
        path = self._write(tmp_path)
        target = f"db=127.0.0.1:{closed_port}"
        argv = ["await", "-f", path, "--host", target, "--retry-delay", "50", "--permissive"]

        code = self._run(argv, clock)

        assert code == EXIT_FAILED
        assert clock.sleeps == [0.05, 0.1, 0.15, 0.2]

    def test_invalid_retry_times(self, tmp_path, closed_port):
        path = self._write(tmp_path)
        target = f"db=127.0.0.1:{closed_port}"

        assert main(["await", "-f", path, "--host", target, "--retry-times", "0"]) == EXIT_CONFIG


class TestConfigurationErrors:

    def test_no_probes(self):
        assert main(["await"]) == EXIT_CONFIG

    def test_bad_host_argument(self):
        assert main(["await", "--host", "db=localhost"]) == EXIT_CONFIG

    def test_bad_named_argument(self):
        assert main(["await", "--http", "http://localhost/"]) == EXIT_CONFIG

    def test_missing_file(self, tmp_path):
        assert main(["await", "-f", str(tmp_path / "missing.yaml")]) == EXIT_CONFIG

    def test_no_command(self, capsys):
        assert main([]) == EXIT_CONFIG
