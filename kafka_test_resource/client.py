"""JSON produce/consume helpers for tests talking to the broker."""

from __future__ import annotations

from typing import Dict, List
import json

from kafka import KafkaConsumer, KafkaProducer


def encode(message: Dict[str, object]) -> bytes:
    """Serialize message into bytes."""
    return json.dumps(message).encode("utf-8")


def decode(payload: bytes) -> Dict[str, object]:
    """Deserialize message bytes."""
    return json.loads(payload.decode("utf-8"))


def produce(bootstrap_servers: str, topic: str, message: Dict[str, object]) -> None:
    """Publish one JSON message and wait for delivery."""
    producer = KafkaProducer(
        bootstrap_servers=bootstrap_servers,
        value_serializer=encode,
    )
    try:
        producer.send(topic, message)
        producer.flush()
    finally:
        producer.close()


def consume(
    bootstrap_servers: str,
    topic: str,
    max_messages: int = 1,
    timeout_ms: int = 10000,
) -> List[Dict[str, object]]:
    """Read up to max_messages JSON messages from the start of topic."""
    consumer = KafkaConsumer(
        topic,
        bootstrap_servers=bootstrap_servers,
        auto_offset_reset="earliest",
        enable_auto_commit=False,
        consumer_timeout_ms=timeout_ms,
        value_deserializer=decode,
    )
    messages: List[Dict[str, object]] = []
    try:
        for record in consumer:
            messages.append(record.value)
            if len(messages) >= max_messages:
                break
    finally:
        consumer.close()
    return messages
