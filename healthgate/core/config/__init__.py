# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for healthgate.
"""

from healthgate.core.config.defaults import (
    EvaluatorDefaults,
    HttpProbeDefaults,
    get_defaults,
    get_http_defaults,
    reset_defaults,
)

__all__ = [
    "EvaluatorDefaults",
    "HttpProbeDefaults",
    "get_defaults",
    "get_http_defaults",
    "reset_defaults",
]
