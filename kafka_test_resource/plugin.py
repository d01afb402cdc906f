"""pytest plugin wiring KafkaTestResource into session fixtures."""

from __future__ import annotations

from typing import Iterator, Mapping
import logging

import docker
import pytest
from docker.errors import DockerException

from kafka_test_resource.config import ConfigRepository, ResourceConfig
from kafka_test_resource.kafka_resource import KafkaTestResource
from kafka_test_resource.manager import TestResourceManager

logger = logging.getLogger(__name__)

_docker_available: bool | None = None


def docker_available() -> bool:
    """Return True when a Docker engine answers ping()."""
    global _docker_available
    if _docker_available is None:
        try:
            client = docker.from_env()
            try:
                _docker_available = bool(client.ping())
            finally:
                client.close()
        except DockerException as exc:
            logger.info("kafka_test_resource docker unavailable: %s", exc)
            _docker_available = False
    return _docker_available


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "kafka: test needs a Kafka broker container")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    kafka_items = [item for item in items if item.get_closest_marker("kafka")]
    if not kafka_items or docker_available():
        return

    skip = pytest.mark.skip(reason="Docker engine not available")
    for item in kafka_items:
        item.add_marker(skip)


@pytest.fixture(scope="session")
def test_resource_config() -> ResourceConfig:
    """Resource config loaded from KAFKA_TEST_* environment variables."""
    return ConfigRepository().load()


@pytest.fixture(scope="session")
def kafka_test_resource(test_resource_config: ResourceConfig) -> Iterator[Mapping[str, str]]:
    """Start the broker for the session and yield its configuration entries."""
    manager = TestResourceManager([KafkaTestResource(test_resource_config)])
    entries = manager.start_all()
    try:
        yield entries
    finally:
        manager.stop_all()


@pytest.fixture(scope="session")
def kafka_bootstrap_servers(kafka_test_resource: Mapping[str, str]) -> str:
    """Bootstrap address of the session broker."""
    return KafkaTestResource.get_bootstrap_servers()
