import pytest
from docker.errors import DockerException

from kafka_test_resource import plugin
from kafka_test_resource.kafka_resource import KafkaTestResource
from tests.conftest import FakeContainerFactory


class FakeDockerClient:
    def __init__(self, ping_result=True):
        self.ping_result = ping_result
        self.closed = False

    def ping(self):
        return self.ping_result

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clear_docker_cache(monkeypatch):
    monkeypatch.setattr(plugin, "_docker_available", None)


def test_docker_available_when_ping_succeeds(monkeypatch):
    client = FakeDockerClient()
    monkeypatch.setattr(plugin.docker, "from_env", lambda: client)

    assert plugin.docker_available() is True
    assert client.closed is True


def test_docker_unavailable_when_engine_missing(monkeypatch):
    def from_env():
        raise DockerException("Error while fetching server API version")

    monkeypatch.setattr(plugin.docker, "from_env", from_env)

    assert plugin.docker_available() is False


def test_docker_availability_is_cached(monkeypatch):
    calls = []

    def from_env():
        calls.append(1)
        return FakeDockerClient()

    monkeypatch.setattr(plugin.docker, "from_env", from_env)

    plugin.docker_available()
    plugin.docker_available()

    assert len(calls) == 1


class _Item:
    def __init__(self, kafka: bool):
        self._kafka = kafka
        self.markers = []

    def get_closest_marker(self, name):
        return object() if self._kafka and name == "kafka" else None

    def add_marker(self, marker):
        self.markers.append(marker)


def test_kafka_items_skipped_without_docker(monkeypatch):
    monkeypatch.setattr(plugin, "docker_available", lambda: False)
    kafka_item, plain_item = _Item(kafka=True), _Item(kafka=False)

    plugin.pytest_collection_modifyitems(None, [kafka_item, plain_item])

    assert len(kafka_item.markers) == 1
    assert plain_item.markers == []


def test_kafka_items_kept_with_docker(monkeypatch):
    monkeypatch.setattr(plugin, "docker_available", lambda: True)
    kafka_item = _Item(kafka=True)

    plugin.pytest_collection_modifyitems(None, [kafka_item])

    assert kafka_item.markers == []


def test_session_fixtures_drive_resource(pytester, resource_config, reachable, fresh_resource):
    factory = FakeContainerFactory(bootstrap="127.0.0.1:19092")
    KafkaTestResource(resource_config, factory)
    pytester.makepyfile(
        """
        from kafka_test_resource import KafkaTestResource

        def test_entries(kafka_test_resource, kafka_bootstrap_servers):
            assert dict(kafka_test_resource) == {"camel.component.kafka.brokers": "127.0.0.1:19092"}
            assert kafka_bootstrap_servers == "127.0.0.1:19092"

        def test_accessor(kafka_bootstrap_servers):
            assert KafkaTestResource.get_bootstrap_servers() == kafka_bootstrap_servers
        """
    )

    result = pytester.runpytest_inprocess("-p", "kafka_test_resource.plugin")

    result.assert_outcomes(passed=2)
    assert len(factory.containers) == 1
    assert factory.containers[0].stopped == 1
