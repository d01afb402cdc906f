from __future__ import annotations

from typing import List

import pytest

from kafka_test_resource.config import ResourceConfig
from kafka_test_resource.kafka_resource import KafkaTestResource


class FakeKafkaContainer:
    """Stands in for testcontainers' KafkaContainer."""

    def __init__(self, bootstrap: str = "127.0.0.1:9092", start_error=None, stop_error=None) -> None:
        self.bootstrap = bootstrap
        self.start_error = start_error
        self.stop_error = stop_error
        self.started = 0
        self.stopped = 0

    def start(self) -> "FakeKafkaContainer":
        self.started += 1
        if self.start_error is not None:
            raise self.start_error
        return self

    def stop(self) -> None:
        self.stopped += 1
        if self.stop_error is not None:
            raise self.stop_error

    def get_bootstrap_server(self) -> str:
        return self.bootstrap


class FakeContainerFactory:
    """Hands out a new FakeKafkaContainer per call and records them."""

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.containers: List[FakeKafkaContainer] = []
        self.bootstraps: List[str] = []

    def __call__(self, config: ResourceConfig) -> FakeKafkaContainer:
        kwargs = dict(self.kwargs)
        if self.bootstraps:
            kwargs["bootstrap"] = self.bootstraps.pop(0)
        container = FakeKafkaContainer(**kwargs)
        self.containers.append(container)
        return container


@pytest.fixture
def resource_config() -> ResourceConfig:
    return ResourceConfig(startup_timeout_s=0.1)


@pytest.fixture
def reachable(monkeypatch):
    """Pretend every bootstrap address accepts connections."""
    monkeypatch.setattr("kafka_test_resource.broker.wait_for_bootstrap", lambda bootstrap, timeout_s: True)
    monkeypatch.setattr("kafka_test_resource.broker.is_reachable", lambda bootstrap: True)


@pytest.fixture
def fresh_resource():
    KafkaTestResource.reset()
    yield
    KafkaTestResource.reset()
