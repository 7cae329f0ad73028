"""Tests for vmhosts.models module."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from vmhosts.models import DaemonConfig, Lease, NetworkHandle, WatcherState


class TestDaemonConfig:
    def test_defaults(self):
        cfg = DaemonConfig(
            socket="/run/libvirt/libvirt-sock",
            network="default",
            interval_ms=5000,
            hostfile=Path("/tmp/hosts"),
            domain="lan",
        )
        assert cfg.uri == "qemu:///system"
        assert cfg.line_format == "hosts"
        assert cfg.connect_timeout == 2.0

    def test_interval_in_seconds(self, daemon_config):
        cfg = dataclasses.replace(daemon_config, interval_ms=1500)
        assert cfg.interval == 1.5

    def test_is_immutable(self, daemon_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            daemon_config.domain = "other"  # type: ignore[misc]


class TestLease:
    def test_first_hostname(self):
        lease = Lease(address="10.0.0.5", hostnames=("vm1", "alias"))
        assert lease.hostname == "vm1"

    def test_no_hostname(self):
        assert Lease(address="10.0.0.6").hostname is None


class TestNetworkHandle:
    def test_ref_excluded_from_equality_and_repr(self):
        a = NetworkHandle(name="default", uuid="u1", ref=object())
        b = NetworkHandle(name="default", uuid="u1", ref=object())
        assert a == b
        assert "ref" not in repr(a)


def test_watcher_states_cover_lifecycle():
    assert [s.name for s in WatcherState] == [
        "INITIALIZING",
        "CONNECTED",
        "WATCHING",
        "SHUTTING_DOWN",
        "TERMINATED",
    ]
