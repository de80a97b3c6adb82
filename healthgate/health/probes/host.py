# ============================================================================
# HOST PROBES
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Probes - TCP reachability
# PURPOSE: Probe operations asserting a host port is (or is not) reachable
# CREATED: 17 OCT 2026
# ============================================================================
"""
Host Probes

A host is reachable when a TCP connection to host:port can be opened
within the timeout. The connection is closed immediately.
"""

import socket
from typing import Callable

from healthgate.core.errors import ProbeFailure
from healthgate.core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.PROBE)

DEFAULT_TIMEOUT_MS = 1_000


def is_host_reachable(host: str, port: int, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    """Check whether a TCP connection to host:port can be opened."""
    try:
        with socket.create_connection((host, port), timeout=timeout_ms / 1000.0):
            return True
    except OSError as e:
        logger.debug(f"{host}:{port} not reachable: {e}")
        return False


def host_probe(host: str, port: int, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Callable[[], str]:
    """Build an operation passing when host:port accepts connections."""
    def operation() -> str:
        if not is_host_reachable(host, port, timeout_ms):
            raise ProbeFailure(f"Host '{host}' at port {port} is not reachable")
        return f"{host}:{port} -> reachable"
    return operation


def no_host_probe(host: str, port: int, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Callable[[], str]:
    """Build an operation passing when host:port refuses connections."""
    def operation() -> str:
        if is_host_reachable(host, port, timeout_ms):
            raise ProbeFailure(f"Host '{host}' at port {port} is reachable")
        return f"{host}:{port} -> unreachable"
    return operation


__all__ = [
    "is_host_reachable",
    "host_probe",
    "no_host_probe",
]
