"""libvirt client adapter for virt-lease-hosts."""

from __future__ import annotations

import errno
import socket
from typing import Any, List, Optional

from vmhosts.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_URI
from vmhosts.exceptions import (
    ConnectError,
    DisconnectError,
    NetworkLookupError,
    QueryError,
)
from vmhosts.models import Lease, NetworkHandle
from vmhosts.utils import log


def load_bindings():
    """Import the libvirt python bindings on first use."""
    try:
        import libvirt  # type: ignore
    except ImportError as exc:
        raise ConnectError(f"libvirt python bindings not available: {exc}") from exc
    return libvirt


def _error_message(exc: Exception) -> str:
    getter = getattr(exc, "get_error_message", None)
    if getter is not None:
        message = getter()
        if message:
            return message
    return str(exc)


def format_version(raw: int) -> str:
    """Turn libvirt's packed version number (major * 1e6 + minor * 1e3 + release) into text."""
    major, rest = divmod(raw, 1_000_000)
    minor, release = divmod(rest, 1_000)
    return f"{major}.{minor}.{release}"


def build_uri(uri: str, socket_path: Optional[str]) -> str:
    if not socket_path:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}socket={socket_path}"


class HypervisorClient:
    """Synchronous wrapper around a single libvirt connection."""

    def __init__(
        self,
        socket_path: str,
        uri: str = DEFAULT_URI,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
        bindings: Any = None,
    ) -> None:
        self.socket_path = socket_path
        self.uri = build_uri(uri, socket_path)
        self.timeout = timeout
        self._bindings = bindings
        self.conn: Any = None

    @property
    def libvirt(self):
        """The libvirt module in use; imported lazily unless injected."""
        if self._bindings is None:
            self._bindings = load_bindings()
        return self._bindings

    def __enter__(self) -> "HypervisorClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def _probe_socket(self) -> None:
        """Dial the libvirt unix socket once so an absent daemon fails fast."""
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
                client.settimeout(self.timeout)
                client.connect(self.socket_path)
        except socket.timeout:
            raise ConnectError(
                f"Timed out after {self.timeout:g}s connecting to libvirt socket {self.socket_path}"
            )
        except OSError as exc:
            if exc.errno == errno.ENOENT:
                raise ConnectError(f"libvirt socket {self.socket_path} does not exist") from exc
            raise ConnectError(f"Failed to open libvirt socket {self.socket_path}: {exc}") from exc

    def connect(self) -> None:
        self._probe_socket()
        try:
            conn = self.libvirt.open(self.uri)
        except self.libvirt.libvirtError as exc:
            raise ConnectError(f"Failed to connect to libvirt at {self.uri}: {_error_message(exc)}") from exc
        if conn is None:
            raise ConnectError(f"Failed to open libvirt connection to {self.uri}")
        self.conn = conn
        log("DEBUG", f"Opened libvirt connection {self.uri}")

    def _require_conn(self) -> Any:
        if self.conn is None:
            raise QueryError("libvirt connection is not open")
        return self.conn

    def version(self) -> str:
        conn = self._require_conn()
        try:
            return format_version(conn.getLibVersion())
        except self.libvirt.libvirtError as exc:
            raise QueryError(f"Failed to retrieve libvirt version: {_error_message(exc)}") from exc

    def lookup_network(self, name: str) -> NetworkHandle:
        conn = self._require_conn()
        try:
            net = conn.networkLookupByName(name)
        except self.libvirt.libvirtError as exc:
            if exc.get_error_code() == self.libvirt.VIR_ERR_NO_NETWORK:
                raise NetworkLookupError(f"Network '{name}' not found") from exc
            raise QueryError(f"Failed to look up network '{name}': {_error_message(exc)}") from exc
        try:
            handle = NetworkHandle(
                name=net.name(),
                uuid=net.UUIDString(),
                active=bool(net.isActive()),
                ref=net,
            )
        except self.libvirt.libvirtError as exc:
            raise QueryError(f"Failed to inspect network '{name}': {_error_message(exc)}") from exc
        if not handle.active:
            log("WARN", f"Network {handle.name} is not active; no leases will be reported until it starts")
        return handle

    def get_leases(self, handle: NetworkHandle) -> List[Lease]:
        """Return every current DHCP lease of the network (no MAC filter, no flags)."""
        self._require_conn()
        try:
            raw_leases = handle.ref.DHCPLeases(None, 0)
        except self.libvirt.libvirtError as exc:
            raise QueryError(f"Failed to get leases for network {handle.name}: {_error_message(exc)}") from exc

        leases: List[Lease] = []
        for entry in raw_leases or []:
            address = entry.get("ipaddr")
            if not address:
                continue
            hostname = (entry.get("hostname") or "").strip()
            leases.append(
                Lease(
                    address=address,
                    hostnames=(hostname,) if hostname else (),
                    mac=entry.get("mac"),
                )
            )
        return leases

    def close(self) -> None:
        """Close the connection, raising DisconnectError on failure."""
        if self.conn is None:
            return
        conn, self.conn = self.conn, None
        try:
            conn.close()
        except self.libvirt.libvirtError as exc:
            raise DisconnectError(f"Failed to disconnect from libvirt: {_error_message(exc)}") from exc

    def disconnect(self) -> None:
        """Best-effort release of the session; never raises."""
        try:
            self.close()
        except DisconnectError as exc:
            log("WARN", str(exc))
