"""Lifecycle state and health snapshot types."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ResourceState(str, Enum):
    """Lifecycle state of a managed broker."""

    UNINITIALIZED = "uninitialized"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class ResourceHealth:
    """Health snapshot emitted by a lifecycle manager."""

    component: str
    state: ResourceState
    bootstrap_servers: Optional[str]
    reachable: bool

    def as_dict(self) -> Dict[str, object]:
        return {
            "component": self.component,
            "status": self.state.value,
            "bootstrap": self.bootstrap_servers,
            "reachable": self.reachable,
        }
