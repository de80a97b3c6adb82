# ============================================================================
# PROBE REGISTRY
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Engine - Probe registration
# PURPOSE: Register and enumerate the probes of one evaluation
# CREATED: 17 OCT 2026
# ============================================================================
"""
Probe Registry

Holds the probes an Evaluator runs. Each Evaluator owns its registry;
there is no process-wide registry, so independent evaluations can run
side by side.

Usage:
    registry = ProbeRegistry()

    # Direct registration
    registry.register("author", lambda: http_get("http://localhost:4502"))

    # Decorator registration
    @registry.probe("publish")
    def publish_up():
        return http_get("http://localhost:4503")

Names are display identities. They need not be unique, but unique names
keep reports readable.
"""

from typing import Any, Callable, Iterator, List, Optional

from healthgate.core.logging import ComponentType, get_logger
from healthgate.health.core import Probe

logger = get_logger(__name__, ComponentType.REGISTRY)


class ProbeRegistry:
    """
    Ordered collection of probes.

    Probes are kept in registration order and never mutated.
    """

    def __init__(self):
        self._probes: List[Probe] = []

    def register(
        self,
        name: str,
        operation: Callable[[], Any],
        description: Optional[str] = None,
    ) -> Probe:
        """
        Create and register a probe.

        Args:
            name: Display name
            operation: Zero-argument callable; raise to signal failure
            description: Optional longer description

        Returns:
            The registered probe
        """
        return self.register_probe(Probe(name=name, operation=operation, description=description))

    def register_probe(self, probe: Probe) -> Probe:
        """Register an existing probe instance."""
        if not probe.name:
            logger.warning("Registering probe with empty name")
        elif probe.name in self:
            logger.debug(f"Probe name registered more than once: {probe.name}")

        self._probes.append(probe)
        logger.debug(f"Registered probe: {probe.name}")
        return probe

    def probe(self, name: str, description: Optional[str] = None):
        """
        Decorator registering a zero-argument function as a probe.

        Example:
            @registry.probe("database")
            def database_reachable():
                ...
        """
        def decorator(operation: Callable[[], Any]) -> Callable[[], Any]:
            self.register(name, operation, description)
            return operation
        return decorator

    def unregister(self, name: str) -> bool:
        """
        Remove every probe with the given name.

        Returns:
            True if at least one probe was removed
        """
        before = len(self._probes)
        self._probes = [p for p in self._probes if p.name != name]
        return len(self._probes) < before

    def get(self, name: str) -> Optional[Probe]:
        """First probe with the given name."""
        for probe in self._probes:
            if probe.name == name:
                return probe
        return None

    def get_all(self) -> List[Probe]:
        """All probes in registration order."""
        return list(self._probes)

    def clear(self) -> None:
        """Remove all registered probes."""
        self._probes.clear()

    def __len__(self) -> int:
        return len(self._probes)

    def __contains__(self, name: str) -> bool:
        return any(p.name == name for p in self._probes)

    def __iter__(self) -> Iterator[Probe]:
        return iter(list(self._probes))


__all__ = [
    "ProbeRegistry",
]
