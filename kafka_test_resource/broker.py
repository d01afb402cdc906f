"""Handle owning a single provisioned Kafka broker container."""

from __future__ import annotations

from typing import Callable, Optional
import logging
import threading

from testcontainers.kafka import KafkaContainer

from kafka_test_resource.config import ResourceConfig
from kafka_test_resource.errors import ProvisioningError, TeardownError
from kafka_test_resource.health import ResourceHealth, ResourceState
from kafka_test_resource.probe import is_reachable, wait_for_bootstrap

logger = logging.getLogger(__name__)

ContainerFactory = Callable[[ResourceConfig], KafkaContainer]


def create_kafka_container(config: ResourceConfig) -> KafkaContainer:
    """Build an unstarted Kafka container from config."""
    container = KafkaContainer(image=config.image)
    if config.kraft:
        container = container.with_kraft()
    return container


class BrokerHandle:
    """
    Owns one broker container through its lifecycle.

    UNINITIALIZED -> STARTING -> RUNNING -> STOPPED. A failed start falls
    back to UNINITIALIZED. STOPPED is terminal; create a new handle to
    provision again.
    """

    def __init__(
        self,
        config: ResourceConfig,
        container_factory: ContainerFactory = create_kafka_container,
    ) -> None:
        """Initialize handle with config and container factory."""
        self._config = config
        self._factory = container_factory
        self._container: Optional[KafkaContainer] = None
        self._bootstrap: Optional[str] = None
        self._state = ResourceState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> ResourceState:
        return self._state

    @property
    def bootstrap_servers(self) -> Optional[str]:
        """Last known address; kept after stop() and not a liveness signal."""
        return self._bootstrap

    def start(self) -> str:
        """Provision the broker if needed and return its bootstrap address."""
        with self._lock:
            if self._state is ResourceState.STOPPED:
                raise ProvisioningError("Broker handle already stopped; create a new handle")
            return self._start_locked()

    def try_start(self) -> Optional[str]:
        """Like start(), but return None instead of raising once stopped."""
        with self._lock:
            if self._state is ResourceState.STOPPED:
                return None
            return self._start_locked()

    def address_or_start(self) -> str:
        """Return the stale address once stopped, otherwise start()."""
        with self._lock:
            if self._state is ResourceState.STOPPED:
                return self._bootstrap
            return self._start_locked()

    def _start_locked(self) -> str:
        if self._state is ResourceState.RUNNING:
            return self._bootstrap

        self._state = ResourceState.STARTING
        logger.info("broker_handle starting %s", self._config.image)
        try:
            self._bootstrap = self._provision()
        except Exception as exc:
            self._abandon()
            if isinstance(exc, ProvisioningError):
                raise
            raise ProvisioningError(f"Kafka container failed to start: {exc}") from exc

        self._state = ResourceState.RUNNING
        logger.info("broker_handle running at %s", self._bootstrap)
        return self._bootstrap

    def stop(self) -> None:
        """Stop the container; teardown failures are logged, not raised."""
        with self._lock:
            if self._state is not ResourceState.RUNNING:
                logger.debug("broker_handle stop skipped in state %s", self._state.value)
                return

            logger.info("broker_handle stopping %s", self._bootstrap)
            try:
                self._teardown()
            except TeardownError as exc:
                logger.warning("broker_handle teardown failed: %s", exc, exc_info=exc.__cause__)
            finally:
                self._container = None
                self._state = ResourceState.STOPPED
            logger.info("broker_handle stopped")

    def health(self) -> ResourceHealth:
        """Return handle state and whether the broker currently answers."""
        reachable = False
        if self._state is ResourceState.RUNNING and self._bootstrap:
            reachable = is_reachable(self._bootstrap)
        return ResourceHealth(
            component="kafka",
            state=self._state,
            bootstrap_servers=self._bootstrap,
            reachable=reachable,
        )

    def _provision(self) -> str:
        self._container = self._factory(self._config)
        self._container.start()
        bootstrap = self._container.get_bootstrap_server()

        if not wait_for_bootstrap(bootstrap, timeout_s=self._config.startup_timeout_s):
            raise ProvisioningError(
                f"Kafka not reachable at {bootstrap} after {self._config.startup_timeout_s}s"
            )
        return bootstrap

    def _teardown(self) -> None:
        try:
            self._container.stop()
        except Exception as exc:
            raise TeardownError(f"Kafka container failed to stop: {exc}") from exc

    def _abandon(self) -> None:
        """Release a half-started container and return to UNINITIALIZED."""
        container, self._container = self._container, None
        self._bootstrap = None
        self._state = ResourceState.UNINITIALIZED
        if container is None:
            return
        try:
            container.stop()
        except Exception as exc:
            logger.warning("broker_handle cleanup after failed start errored: %s", exc, exc_info=exc)
