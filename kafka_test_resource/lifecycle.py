"""Two-hook lifecycle contract for managed test resources."""

from abc import ABC, abstractmethod
from typing import Mapping

from kafka_test_resource.health import ResourceHealth


class TestResourceLifecycleManager(ABC):
    """
    Base class for resources started around a test session.

    start() provisions the resource and returns the configuration
    entries tests need; stop() releases it and must not raise.
    """

    __test__ = False

    name = "resource"

    @abstractmethod
    def start(self) -> Mapping[str, str]:
        """Provision the resource and return its configuration entries."""

    @abstractmethod
    def stop(self) -> None:
        """Release the resource."""

    @abstractmethod
    def health(self) -> ResourceHealth:
        """Return current health snapshot."""
