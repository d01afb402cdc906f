"""Kafka broker adapted to the two-hook test resource lifecycle."""

from __future__ import annotations

from types import MappingProxyType
from typing import ClassVar, Mapping, Optional
import logging
import threading

from kafka_test_resource.broker import BrokerHandle, ContainerFactory, create_kafka_container
from kafka_test_resource.config import ConfigRepository, ResourceConfig
from kafka_test_resource.health import ResourceHealth, ResourceState
from kafka_test_resource.lifecycle import TestResourceLifecycleManager

logger = logging.getLogger(__name__)


class KafkaTestResource(TestResourceLifecycleManager):
    """
    Starts one ephemeral Kafka broker per process.

    The broker handle is shared by every instance and by the static
    get_bootstrap_servers() accessor, so code outside the start/stop
    hooks sees the same address. At most one handle is live at a time;
    creation is guarded by a class-level lock.
    """

    name = "kafka"

    _handle: ClassVar[Optional[BrokerHandle]] = None
    _handle_lock: ClassVar[threading.Lock] = threading.Lock()
    _config: ClassVar[Optional[ResourceConfig]] = None
    _factory: ClassVar[ContainerFactory] = staticmethod(create_kafka_container)

    def __init__(
        self,
        config: ResourceConfig | None = None,
        container_factory: ContainerFactory | None = None,
    ) -> None:
        """Initialize with optional config and container factory for new handles."""
        cls = type(self)
        with cls._handle_lock:
            if config is not None:
                KafkaTestResource._config = config
            if container_factory is not None:
                KafkaTestResource._factory = staticmethod(container_factory)

    @staticmethod
    def get_bootstrap_servers() -> str:
        """Return the broker address, starting the broker on first access."""
        return KafkaTestResource._current_handle().address_or_start()

    def start(self) -> Mapping[str, str]:
        """Start the broker and return its configuration entry."""
        bootstrap = None
        while bootstrap is None:
            # a concurrent stop() may retire the handle; replace it and retry
            bootstrap = self._current_handle(replace_stopped=True).try_start()
        return MappingProxyType({self.config().config_key: bootstrap})

    def stop(self) -> None:
        """Stop the broker if running; never raises."""
        handle = KafkaTestResource._handle
        if handle is None:
            logger.debug("kafka_test_resource stop before start ignored")
            return
        handle.stop()

    def health(self) -> ResourceHealth:
        handle = KafkaTestResource._handle
        if handle is None:
            return ResourceHealth(
                component=self.name,
                state=ResourceState.UNINITIALIZED,
                bootstrap_servers=None,
                reachable=False,
            )
        return handle.health()

    @staticmethod
    def config() -> ResourceConfig:
        """Return active config, loading it from environment on first use."""
        if KafkaTestResource._config is None:
            KafkaTestResource._config = ConfigRepository().load()
        return KafkaTestResource._config

    @classmethod
    def reset(cls) -> None:
        """Stop and discard the shared handle, config and factory overrides."""
        with KafkaTestResource._handle_lock:
            handle = KafkaTestResource._handle
            KafkaTestResource._handle = None
            KafkaTestResource._config = None
            KafkaTestResource._factory = staticmethod(create_kafka_container)
        if handle is not None:
            handle.stop()

    @staticmethod
    def _current_handle(replace_stopped: bool = False) -> BrokerHandle:
        with KafkaTestResource._handle_lock:
            handle = KafkaTestResource._handle
            if handle is None or (replace_stopped and handle.state is ResourceState.STOPPED):
                handle = BrokerHandle(KafkaTestResource.config(), KafkaTestResource._factory)
                KafkaTestResource._handle = handle
                logger.info("kafka_test_resource created broker handle")
            return handle
