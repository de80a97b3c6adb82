"""
Core

Shared building blocks: structured logging, configuration defaults and
the error hierarchy.
"""
