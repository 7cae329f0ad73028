"""Shared test fixtures for virt-lease-hosts."""

from __future__ import annotations

import threading
import types
from pathlib import Path
from typing import Callable, List, Optional
from unittest.mock import MagicMock

import pytest

from vmhosts.exceptions import NetworkLookupError
from vmhosts.models import DaemonConfig, Lease, NetworkHandle


class FakeHypervisor:
    """In-memory stand-in for HypervisorClient.

    ``lease_results`` is consumed one item per ``get_leases`` call: a list of
    leases is returned, an exception instance is raised. ``on_query`` runs
    after every call, which lets tests set the stop event.
    """

    def __init__(
        self,
        networks: Optional[List[str]] = None,
        lease_results: Optional[list] = None,
        on_query: Optional[Callable[["FakeHypervisor"], None]] = None,
    ) -> None:
        self.networks = networks if networks is not None else ["default"]
        self.lease_results = list(lease_results or [])
        self.on_query = on_query
        self.calls: List[str] = []
        self.connected = False

    def connect(self) -> None:
        self.calls.append("connect")
        self.connected = True

    def version(self) -> str:
        self.calls.append("version")
        return "9.0.0"

    def lookup_network(self, name: str) -> NetworkHandle:
        self.calls.append("lookup_network")
        if name not in self.networks:
            raise NetworkLookupError(f"Network '{name}' not found")
        return NetworkHandle(name=name, uuid="00000000-0000-0000-0000-000000000001")

    def get_leases(self, handle: NetworkHandle) -> List[Lease]:
        self.calls.append("get_leases")
        try:
            result = self.lease_results.pop(0) if self.lease_results else []
            if isinstance(result, Exception):
                raise result
            return result
        finally:
            if self.on_query is not None:
                self.on_query(self)

    def disconnect(self) -> None:
        self.calls.append("disconnect")
        self.connected = False


@pytest.fixture
def hostfile(tmp_path) -> Path:
    return tmp_path / "hosts"


@pytest.fixture
def daemon_config(hostfile) -> DaemonConfig:
    """Config with a tiny interval so watch-loop tests finish quickly."""
    return DaemonConfig(
        socket="/run/libvirt/libvirt-sock",
        network="default",
        interval_ms=1,
        hostfile=hostfile,
        domain="lan",
    )


@pytest.fixture
def stop_event() -> threading.Event:
    return threading.Event()


@pytest.fixture
def make_hypervisor():
    """Factory for FakeHypervisor instances."""
    return FakeHypervisor


class FakeLibvirtError(Exception):
    """Mirrors the error accessors of ``libvirt.libvirtError``."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code

    def get_error_code(self):
        return self.code

    def get_error_message(self):
        return str(self)


@pytest.fixture
def fake_libvirt():
    """libvirt bindings double, handed to HypervisorClient through ``bindings=``."""
    bindings = types.SimpleNamespace(
        libvirtError=FakeLibvirtError,
        open=MagicMock(return_value=MagicMock()),
        VIR_ERR_RPC=39,
        VIR_ERR_NO_NETWORK=43,
    )
    return bindings
