"""Test resource configuration model and repository."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping
import json
import os

import jsonschema

from kafka_test_resource.errors import ConfigError

DEFAULT_IMAGE = "confluentinc/cp-kafka:7.6.0"
DEFAULT_CONFIG_KEY = "camel.component.kafka.brokers"
DEFAULT_STARTUP_TIMEOUT_S = 60.0

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class ResourceConfig:
    """Settings for the ephemeral Kafka broker."""

    image: str = DEFAULT_IMAGE
    config_key: str = DEFAULT_CONFIG_KEY
    startup_timeout_s: float = DEFAULT_STARTUP_TIMEOUT_S
    kraft: bool = False


class ConfigRepository:
    """
    Repository for loading resource configuration.

    Reads an optional JSON file, then applies environment overrides:
    KAFKA_TEST_IMAGE, KAFKA_TEST_CONFIG_KEY, KAFKA_TEST_STARTUP_TIMEOUT,
    KAFKA_TEST_KRAFT.
    """

    def __init__(
        self,
        path: str | None = None,
        schema_path: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize with optional config file path, schema path and environment."""
        self._environ = os.environ if environ is None else environ
        if path is None:
            path = self._environ.get("KAFKA_TEST_CONFIG") or None
        self._path = Path(path) if path else None
        if schema_path is None:
            self._schema_path = Path(__file__).resolve().parent / "schemas" / "resource_config.schema.json"
        else:
            self._schema_path = Path(schema_path)

    def load(self) -> ResourceConfig:
        """Load, validate and merge resource configuration."""
        config = ResourceConfig()
        if self._path is not None:
            config = replace(config, **self._load_file())
        return replace(config, **self._env_overrides())

    def _load_file(self) -> Dict[str, object]:
        if not self._path.exists():
            raise ConfigError(f"Config file not found: {self._path}")

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file: {exc}") from exc

        self._validate(raw)
        return raw

    def _validate(self, raw: object) -> None:
        """Validate config against the bundled JSON Schema."""
        schema = json.loads(self._schema_path.read_text(encoding="utf-8"))
        try:
            jsonschema.validate(instance=raw, schema=schema)
        except jsonschema.ValidationError as exc:
            raise ConfigError(f"Config schema validation failed: {exc.message}") from exc

    def _env_overrides(self) -> Dict[str, object]:
        overrides: Dict[str, object] = {}
        env = self._environ

        if env.get("KAFKA_TEST_IMAGE"):
            overrides["image"] = env["KAFKA_TEST_IMAGE"]
        if env.get("KAFKA_TEST_CONFIG_KEY"):
            overrides["config_key"] = env["KAFKA_TEST_CONFIG_KEY"]

        timeout = env.get("KAFKA_TEST_STARTUP_TIMEOUT")
        if timeout:
            try:
                overrides["startup_timeout_s"] = float(timeout)
            except ValueError as exc:
                raise ConfigError(f"Invalid KAFKA_TEST_STARTUP_TIMEOUT: {timeout}") from exc
            if overrides["startup_timeout_s"] <= 0:
                raise ConfigError(f"KAFKA_TEST_STARTUP_TIMEOUT must be positive: {timeout}")

        kraft = env.get("KAFKA_TEST_KRAFT")
        if kraft is not None:
            overrides["kraft"] = self._parse_bool("KAFKA_TEST_KRAFT", kraft)

        return overrides

    @staticmethod
    def _parse_bool(name: str, value: str) -> bool:
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"Invalid boolean for {name}: {value}")
