# ============================================================================
# EVALUATOR
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Attempt / assurance state machine
# PURPOSE: Decide whether an environment is reliably healthy
# CREATED: 17 OCT 2026
# ============================================================================
"""
Evaluator

Runs every registered probe in rounds and decides, through two retry
tiers, whether the environment is healthy:

    Attempt tier:   a failing round is retried up to attempt_policy.attempts
                    times, waiting attempt_policy.delay(n) between rounds.
    Assurance tier: assurance_policy.attempts consecutive clean rounds are
                    required before the evaluation succeeds.

Any failed round resets assurance progress to 1, even deep into the
assurance tier, so success always means N clean rounds in a row.

Exhausting the attempt tier ends the whole evaluation. In verbose mode
EvaluationFailed is raised; otherwise the failure is logged and the last
(failing) outcome is returned, so callers must check outcome.failed.

States:
    IDLE -> WAIT_BEFORE -> ROUND_ATTEMPT -> ROUND_SUCCEEDED | ATTEMPTS_EXCEEDED
         -> ASSURANCE_CHECK -> (ROUND_ATTEMPT | WAIT_AFTER) -> DONE | FAILED

Usage:
    evaluator = Evaluator()
    evaluator.http("author", "http://localhost:4502/", contained_text="Sign in")
    evaluator.host("database", "localhost", 5432)

    outcome = evaluator.evaluate(
        attempt_policy=RetryPolicy.constant(10, 2_000),
        assurance_policy=RetryPolicy.constant(3, 1_000),
    )
"""

import uuid
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from healthgate.core.config import EvaluatorDefaults, HttpProbeDefaults, get_defaults
from healthgate.core.errors import AttemptsExceeded, EvaluationFailed
from healthgate.core.logging import ComponentType, get_logger, log_checkpoint, log_context
from healthgate.health.clock import Clock, SystemClock, countdown
from healthgate.health.core import EvaluationOutcome, Probe
from healthgate.health.executor import ParallelRound
from healthgate.health.policy import RetryPolicy
from healthgate.health.probes import host_probe, http_probe, no_host_probe, no_http_probe
from healthgate.health.registry import ProbeRegistry
from healthgate.health.reporter import ProgressUpdate, Reporter, SafeReporter

logger = get_logger(__name__, ComponentType.EVALUATOR)

STEP = "Health checking"


class EvaluatorState(str, Enum):
    """Evaluator state machine states."""
    IDLE = "idle"
    WAIT_BEFORE = "wait_before"
    ROUND_ATTEMPT = "round_attempt"
    ROUND_SUCCEEDED = "round_succeeded"
    ATTEMPTS_EXCEEDED = "attempts_exceeded"
    ASSURANCE_CHECK = "assurance_check"
    WAIT_AFTER = "wait_after"
    DONE = "done"
    FAILED = "failed"


class Evaluator:
    """
    Owns the probes, counters and latest outcome of one evaluation.

    Counters are touched only by the thread calling evaluate(); probes
    run on executor threads and never see them.
    """

    def __init__(
        self,
        registry: Optional[ProbeRegistry] = None,
        reporter: Optional[Reporter] = None,
        clock: Optional[Clock] = None,
        executor: Optional[ParallelRound] = None,
        defaults: Optional[EvaluatorDefaults] = None,
        http_defaults: Optional[HttpProbeDefaults] = None,
    ):
        self.registry = registry if registry is not None else ProbeRegistry()
        self.reporter = SafeReporter(reporter)
        self.clock = clock or SystemClock()
        self.defaults = defaults or get_defaults()
        self.executor = executor or ParallelRound(max_workers=self.defaults.max_workers)
        self.http_defaults = http_defaults

        self.state = EvaluatorState.IDLE
        self.history: List[EvaluatorState] = [EvaluatorState.IDLE]
        self.outcome = EvaluationOutcome.empty()
        self.attempt_no = 0
        self.assurance_no = 0
        self.rounds = 0

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_probe(
        self,
        name: str,
        operation: Callable[[], Any],
        description: Optional[str] = None,
    ) -> Probe:
        """Add a probe; name should be non-empty and unique for readable reports."""
        return self.registry.register(name, operation, description)

    def probe(self, name: str, description: Optional[str] = None):
        """Decorator form of register_probe()."""
        return self.registry.probe(name, description)

    @property
    def probes(self) -> List[Probe]:
        return self.registry.get_all()

    # Shorthands for the bundled probe implementations

    def http(self, name: str, url: str, criteria=None, **kwargs) -> Probe:
        kwargs.setdefault("defaults", self.http_defaults)
        return self.register_probe(name, http_probe(url, criteria, **kwargs), f"HTTP {url}")

    def no_http(self, name: str, url: str, criteria=None, **kwargs) -> Probe:
        kwargs.setdefault("defaults", self.http_defaults)
        return self.register_probe(name, no_http_probe(url, criteria, **kwargs), f"No HTTP {url}")

    def host(self, name: str, host: str, port: int, timeout_ms: int = 1_000) -> Probe:
        return self.register_probe(name, host_probe(host, port, timeout_ms), f"Host {host}:{port}")

    def no_host(self, name: str, host: str, port: int, timeout_ms: int = 1_000) -> Probe:
        return self.register_probe(name, no_host_probe(host, port, timeout_ms), f"No host {host}:{port}")

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(
        self,
        attempt_policy: Optional[RetryPolicy] = None,
        assurance_policy: Optional[RetryPolicy] = None,
        wait_before: Optional[float] = None,
        wait_after: Optional[float] = None,
        verbose: Optional[bool] = None,
    ) -> EvaluationOutcome:
        """
        Evaluate all probes until they are reliably healthy or attempts run out.

        Args:
            attempt_policy: Retries of a failing round (default 60 x 5s)
            assurance_policy: Consecutive clean rounds required (default 2 x 1s)
            wait_before: Seconds to wait before the first round
            wait_after: Seconds to wait after the last round
            verbose: Raise on exhausted attempts and log failing probes

        Returns:
            Outcome of the last executed round

        Raises:
            EvaluationFailed: attempts exhausted in verbose mode
        """
        attempt_policy = attempt_policy or RetryPolicy.default_attempts(self.defaults)
        assurance_policy = assurance_policy or RetryPolicy.default_assurance(self.defaults)
        wait_before = self.defaults.wait_before_seconds if wait_before is None else wait_before
        wait_after = self.defaults.wait_after_seconds if wait_after is None else wait_after
        verbose = self.defaults.verbose if verbose is None else verbose

        self._reset()
        probes = self.registry.get_all()

        if not probes:
            logger.info("Health checking skipped as no probes defined.")
            self.reporter.info("Health checking skipped as no probes defined.")
            self._transition(EvaluatorState.DONE)
            return self.outcome

        evaluation_id = uuid.uuid4().hex[:12]
        with log_context(evaluation_id=evaluation_id, step=STEP):
            log_checkpoint("evaluation_started", {
                "probes": len(probes),
                "attempts": attempt_policy.attempts,
                "assurance": assurance_policy.attempts,
                "verbose": verbose,
            })

            self._transition(EvaluatorState.WAIT_BEFORE)
            self._progress("Wait Before", count=0, total=assurance_policy.attempts)
            countdown(self.clock, wait_before, self.reporter, STEP, "Wait Before")

            self._run_tiers(probes, attempt_policy, assurance_policy, verbose)

            self._transition(EvaluatorState.WAIT_AFTER)
            self._progress("Wait After", count=min(self.assurance_no, assurance_policy.attempts),
                           total=assurance_policy.attempts)
            countdown(self.clock, wait_after, self.reporter, STEP, "Wait After")

            if self.outcome.succeeded:
                self._transition(EvaluatorState.DONE)
                summary = f"Health checking succeed.\n{self.outcome.report()}"
                logger.info(summary)
                self.reporter.summary(summary)
            else:
                self._transition(EvaluatorState.FAILED)

            log_checkpoint("evaluation_finished", {
                "state": self.state.value,
                "rounds": self.rounds,
                "passed_ratio": self.outcome.passed_ratio,
            })

        return self.outcome

    def _run_tiers(
        self,
        probes: List[Probe],
        attempt_policy: RetryPolicy,
        assurance_policy: RetryPolicy,
        verbose: bool,
    ) -> None:
        """Nested attempt / assurance loop."""
        self.assurance_no = 1
        while self.assurance_no <= assurance_policy.attempts:
            round_succeeded = False
            attempts_exceeded = False

            for attempt_no in range(1, attempt_policy.attempts + 1):
                self.attempt_no = attempt_no
                self._transition(EvaluatorState.ROUND_ATTEMPT)
                self._progress(
                    self._attempt_message(attempt_no, attempt_policy.attempts),
                    count=self.assurance_no,
                    total=assurance_policy.attempts,
                )

                with log_context(attempt=attempt_no, assurance=self.assurance_no):
                    self.outcome = self.executor.run(probes)
                self.rounds += 1

                if self.outcome.succeeded:
                    round_succeeded = True
                    self._transition(EvaluatorState.ROUND_SUCCEEDED)
                    break

                # Any failed round restarts the consecutive clean-round count
                self.assurance_no = 1
                log_checkpoint("round_failed", {
                    "attempt": attempt_no,
                    "failed": [s.probe.name for s in self.outcome.failed],
                })
                if verbose:
                    failed = sorted(self.outcome.failed, key=lambda s: s.probe.name)
                    self.reporter.info("\n".join(str(s) for s in failed))

                if attempt_no < attempt_policy.attempts:
                    self.clock.sleep(attempt_policy.delay_for(attempt_no))
                else:
                    attempts_exceeded = True
                    self._transition(EvaluatorState.ATTEMPTS_EXCEEDED)

            if round_succeeded:
                self._transition(EvaluatorState.ASSURANCE_CHECK)
                message = f"Health checking passed ({self.assurance_no}/{assurance_policy.attempts})"
                logger.info(message)
                self.reporter.info(message)
                # No wait after the final required clean round
                if self.assurance_no < assurance_policy.attempts:
                    self.clock.sleep(assurance_policy.delay_for(self.assurance_no))
                self.assurance_no += 1

            if attempts_exceeded:
                self._exceeded(attempt_policy.attempts, verbose)
                break

    def _exceeded(self, attempts: int, verbose: bool) -> None:
        """Handle an exhausted attempt tier."""
        message = (
            f"Health checking failed. Success ratio: {self.outcome.passed_ratio}:\n"
            f"{self.outcome.report()}"
        )
        self.reporter.error(message)
        self.reporter.summary(message)

        if verbose:
            self._transition(EvaluatorState.FAILED)
            logger.error(message)
            raise EvaluationFailed(
                message,
                outcome=self.outcome,
                ratio=self.outcome.passed_ratio,
            ) from AttemptsExceeded(attempts, self.outcome)

        logger.error(message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _attempt_message(self, attempt_no: int, attempts: int) -> str:
        if self.outcome.failed:
            return (
                f"Attempt {attempt_no}/{attempts}, "
                f"Check(s) succeeded {len(self.outcome.passed)}/{len(self.outcome)}"
            )
        return f"Attempt {attempt_no}/{attempts}"

    def _progress(self, message: str, count: int, total: int) -> None:
        self.reporter.progress(ProgressUpdate(step=STEP, message=message, count=count, total=total))

    def _transition(self, state: EvaluatorState) -> None:
        self.state = state
        self.history.append(state)

    def _reset(self) -> None:
        self.state = EvaluatorState.IDLE
        self.history = [EvaluatorState.IDLE]
        self.outcome = EvaluationOutcome.empty()
        self.attempt_no = 0
        self.assurance_no = 0
        self.rounds = 0

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the evaluator's state for JSON output."""
        return {
            "state": self.state.value,
            "rounds": self.rounds,
            "attempt": self.attempt_no,
            "assurance": self.assurance_no,
            "outcome": self.outcome.to_dict(),
        }


__all__ = [
    "Evaluator",
    "EvaluatorState",
]
