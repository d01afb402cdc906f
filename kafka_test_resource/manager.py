"""Orchestrates several lifecycle managers around one test session."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence
import logging

from kafka_test_resource.errors import ConfigError
from kafka_test_resource.lifecycle import TestResourceLifecycleManager

logger = logging.getLogger(__name__)


class TestResourceManager:
    """
    Facade over the session's test resources.

    Responsibilities:
    - Start resources in declaration order and merge their config
    - Stop resources in reverse order, continuing past failures
    - Report aggregated health
    """

    __test__ = False

    def __init__(self, resources: Sequence[TestResourceLifecycleManager]) -> None:
        """Initialize with the resources to manage."""
        self._resources = list(resources)
        self._started: List[TestResourceLifecycleManager] = []

    def start_all(self) -> Mapping[str, str]:
        """Start every resource and return the merged configuration."""
        merged: Dict[str, str] = {}
        for resource in self._resources:
            try:
                entries = resource.start()
            except Exception:
                logger.info("test_resource_manager %s failed to start; rolling back", resource.name)
                self.stop_all()
                raise

            self._started.append(resource)
            try:
                self._merge(merged, entries, resource.name)
            except ConfigError:
                self.stop_all()
                raise
            logger.info("test_resource_manager started %s", resource.name)

        return MappingProxyType(merged)

    def stop_all(self) -> None:
        """Stop started resources in reverse order."""
        while self._started:
            resource = self._started.pop()
            try:
                resource.stop()
            except Exception as exc:
                logger.warning("test_resource_manager %s failed to stop: %s", resource.name, exc)
            else:
                logger.info("test_resource_manager stopped %s", resource.name)

    def health(self) -> Dict[str, object]:
        """Return health status for all resources."""
        resources = {resource.name: resource.health().as_dict() for resource in self._resources}
        overall = (
            "healthy"
            if all(entry["status"] == "running" for entry in resources.values())
            else "degraded"
        )
        return {"status": overall, "resources": resources}

    @staticmethod
    def _merge(merged: Dict[str, str], entries: Mapping[str, str], name: str) -> None:
        for key, value in entries.items():
            if key in merged and merged[key] != value:
                raise ConfigError(
                    f"Resource {name} sets {key}={value}, already set to {merged[key]}"
                )
            merged[key] = value
