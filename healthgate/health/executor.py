# ============================================================================
# PARALLEL ROUND EXECUTOR
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Concurrent probe execution
# PURPOSE: Run every probe of a round concurrently and collect statuses
# CREATED: 17 OCT 2026
# ============================================================================
"""
Parallel Round Executor

Executes one round:
- Every probe runs on its own worker thread
- The round waits for all probes (no early cancellation on failure)
- Each probe failure is caught at the probe boundary and turned into a
  failed ProbeStatus, so one probe can never abort its siblings
- One status per probe is returned, in completion order

The executor keeps no state between rounds. There is no round-level
exception: failures are expressed through the failed statuses only.
"""

import time
from concurrent.futures import ThreadPoolExecutor, wait, ALL_COMPLETED
from typing import List, Optional, Sequence

from healthgate.core.logging import ComponentType, get_current_context, get_logger, log_context
from healthgate.health.core import EvaluationOutcome, Probe, ProbeStatus

logger = get_logger(__name__, ComponentType.EXECUTOR)


class ParallelRound:
    """
    Runs all probes of a round concurrently.

    A fresh thread pool is used for each round; its size defaults to the
    number of probes so every probe starts immediately.
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize executor.

        Args:
            max_workers: Upper bound on concurrent probes (None = one per probe)
        """
        self.max_workers = max_workers

    def run(self, probes: Sequence[Probe]) -> EvaluationOutcome:
        """
        Execute every probe once.

        Returns:
            Outcome holding exactly one status per probe
        """
        if not probes:
            return EvaluationOutcome.empty()

        workers = len(probes)
        if self.max_workers is not None:
            workers = max(1, min(workers, self.max_workers))

        parent = get_current_context()
        start_time = time.monotonic()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as pool:
            futures = {
                pool.submit(self._execute_probe, probe, parent.evaluation_id, parent.attempt): probe
                for probe in probes
            }
            done, _ = wait(futures, return_when=ALL_COMPLETED)

        statuses: List[ProbeStatus] = []
        for future in done:
            probe = futures[future]
            try:
                statuses.append(future.result())
            except Exception as e:
                # _execute_probe already converts failures; this only guards the pool itself
                logger.error(f"Probe {probe.name} could not be collected: {e}")
                statuses.append(ProbeStatus.failure(probe, e))

        logger.debug(
            f"Round finished: {sum(1 for s in statuses if s.succeeded)}/{len(statuses)} passed "
            f"({(time.monotonic() - start_time) * 1000:.1f}ms)"
        )
        return EvaluationOutcome.of(statuses)

    def _execute_probe(
        self,
        probe: Probe,
        evaluation_id: Optional[str] = None,
        attempt: Optional[int] = None,
    ) -> ProbeStatus:
        """Execute a single probe, converting any failure into a status."""
        with log_context(evaluation_id=evaluation_id, attempt=attempt, probe=probe.name):
            start_time = time.monotonic()
            try:
                result = probe.run()
            except Exception as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                logger.debug(f"Probe {probe.name} failed: {e}")
                return ProbeStatus.failure(probe, e, duration_ms=duration_ms)

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(f"Probe {probe.name} succeeded ({duration_ms:.1f}ms)")
            return ProbeStatus.success(probe, result, duration_ms=duration_ms)


__all__ = [
    "ParallelRound",
]
