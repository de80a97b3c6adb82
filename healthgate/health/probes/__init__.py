# ============================================================================
# PROBE IMPLEMENTATIONS
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Probes - Concrete probe operations
# PURPOSE: Ready-made operations for common environment checks
# CREATED: 17 OCT 2026
# ============================================================================
"""
Probe Implementations

Each factory returns a zero-argument operation that can be registered as
a probe. Operations return a short description of what they observed or
raise ProbeFailure.

HTTP:
- http_probe: response must meet criteria (status codes, texts, custom)
- no_http_probe: endpoint must not respond

Host:
- host_probe: TCP port must accept connections
- no_host_probe: TCP port must refuse connections
"""

from healthgate.health.probes.http import HttpCheck, build_check, http_probe, no_http_probe
from healthgate.health.probes.host import host_probe, no_host_probe, is_host_reachable

__all__ = [
    # HTTP
    "HttpCheck",
    "build_check",
    "http_probe",
    "no_http_probe",
    # Host
    "host_probe",
    "no_host_probe",
    "is_host_reachable",
]
