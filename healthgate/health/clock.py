# ============================================================================
# CLOCK
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Sleep primitive
# PURPOSE: Blocking waits, substitutable with a fake clock in tests
# CREATED: 17 OCT 2026
# ============================================================================
"""
Clock

Every wait the evaluator performs (attempt delay, assurance delay, wait
before, wait after) goes through a Clock. Waits are full blocking waits
and are not cancellable; run the evaluator on an interruptible thread if
aborting is required.
"""

import math
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from healthgate.health.reporter import ProgressUpdate, Reporter


class Clock(ABC):
    """Blocking sleep plus a monotonic time source."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        pass

    @abstractmethod
    def monotonic(self) -> float:
        pass


class SystemClock(Clock):
    """Real time."""

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)

    def monotonic(self) -> float:
        return time.monotonic()


class FakeClock(Clock):
    """
    Virtual time for tests.

    sleep() never blocks; it records the requested duration and advances
    virtual time. Non-positive durations are ignored.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def sleep(self, seconds: float) -> None:
        if seconds <= 0:
            return
        self.sleeps.append(seconds)
        self.now += seconds

    def monotonic(self) -> float:
        return self.now

    @property
    def total_slept(self) -> float:
        return sum(self.sleeps)


def countdown(
    clock: Clock,
    seconds: float,
    reporter: Optional[Reporter] = None,
    step: str = "Waiting",
    message: str = "",
    slice_seconds: float = 1.0,
) -> None:
    """
    Wait for the given duration, reporting the remaining time.

    The wait is split into slices of at most slice_seconds; a progress
    update is emitted before each slice.
    """
    if seconds <= 0:
        return

    remaining = seconds
    slices = math.ceil(seconds / slice_seconds)
    for index in range(slices):
        chunk = min(slice_seconds, remaining)
        if reporter is not None:
            label = f"{message} " if message else ""
            reporter.progress(ProgressUpdate(
                step=step,
                message=f"{label}({remaining:.0f}s left)",
                count=index + 1,
                total=slices,
            ))
        clock.sleep(chunk)
        remaining -= chunk


__all__ = [
    "Clock",
    "SystemClock",
    "FakeClock",
    "countdown",
]
