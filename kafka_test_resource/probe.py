"""Bootstrap address parsing and TCP reachability checks."""

from __future__ import annotations

from typing import List
import socket
import time

from kafka_test_resource.errors import ProvisioningError


def parse_bootstrap(bootstrap: str) -> List[tuple[str, int]]:
    """Parse a ``host:port[,host:port...]`` bootstrap string."""
    endpoints = []
    for entry in bootstrap.split(","):
        entry = entry.strip()
        if ":" not in entry:
            raise ProvisioningError(f"Invalid bootstrap format: {bootstrap}")

        host, port_str = entry.rsplit(":", 1)
        # PLAINTEXT://host:port as returned by some providers
        if "://" in host:
            host = host.split("://", 1)[1]
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        try:
            port = int(port_str)
        except ValueError as exc:
            raise ProvisioningError(f"Invalid port in bootstrap: {bootstrap}") from exc

        endpoints.append((host, port))

    return endpoints


def can_connect(host: str, port: int) -> bool:
    """Attempt a TCP connection to host:port."""
    try:
        with socket.create_connection((host, port), timeout=1):
            return True
    except OSError:
        return False


def is_reachable(bootstrap: str) -> bool:
    """Return True when any bootstrap endpoint accepts connections."""
    return any(can_connect(host, port) for host, port in parse_bootstrap(bootstrap))


def wait_for_bootstrap(bootstrap: str, timeout_s: float, interval_s: float = 0.2) -> bool:
    """Poll until the bootstrap address is reachable or the timeout passes."""
    endpoints = parse_bootstrap(bootstrap)
    end_time = time.monotonic() + timeout_s
    while True:
        if any(can_connect(host, port) for host, port in endpoints):
            return True
        if time.monotonic() >= end_time:
            return False
        time.sleep(interval_s)
