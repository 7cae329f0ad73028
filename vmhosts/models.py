"""Data models for virt-lease-hosts."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple

from vmhosts.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_LINE_FORMAT, DEFAULT_URI


@dataclass(frozen=True)
class DaemonConfig:
    socket: str
    network: str
    interval_ms: int
    hostfile: Path
    domain: str
    uri: str = DEFAULT_URI
    line_format: str = DEFAULT_LINE_FORMAT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    @property
    def interval(self) -> float:
        """Poll interval in seconds."""
        return self.interval_ms / 1000.0


@dataclass(frozen=True)
class NetworkHandle:
    """A libvirt virtual network resolved by name at startup."""

    name: str
    uuid: str
    active: bool = True
    # virNetwork object; opaque to everything but the hypervisor adapter
    ref: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Lease:
    address: str
    hostnames: Tuple[str, ...] = ()
    mac: Optional[str] = None

    @property
    def hostname(self) -> Optional[str]:
        return self.hostnames[0] if self.hostnames else None


class WatcherState(enum.Enum):
    INITIALIZING = "initializing"
    CONNECTED = "connected"
    WATCHING = "watching"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
