"""Custom exceptions for the Kafka test resource."""


class ResourceError(Exception):
    """Base class for test resource failures."""


class ConfigError(ResourceError):
    """Raised when resource config is invalid or missing."""


class ProvisioningError(ResourceError):
    """Raised when the broker cannot be brought to a reachable state."""


class TeardownError(ResourceError):
    """Raised when releasing the broker container fails."""
