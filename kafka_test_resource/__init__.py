"""Ephemeral Kafka broker lifecycle for integration tests."""

__all__ = [
    "KafkaTestResource",
    "BrokerHandle",
    "TestResourceLifecycleManager",
    "TestResourceManager",
    "ConfigRepository",
    "ResourceConfig",
    "ResourceHealth",
    "ResourceState",
    "ResourceError",
    "ConfigError",
    "ProvisioningError",
    "TeardownError",
]

from kafka_test_resource.kafka_resource import KafkaTestResource
from kafka_test_resource.broker import BrokerHandle
from kafka_test_resource.lifecycle import TestResourceLifecycleManager
from kafka_test_resource.manager import TestResourceManager
from kafka_test_resource.config import ConfigRepository, ResourceConfig
from kafka_test_resource.health import ResourceHealth, ResourceState
from kafka_test_resource.errors import ResourceError, ConfigError, ProvisioningError, TeardownError
