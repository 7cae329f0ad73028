"""Lease reconciliation loop for virt-lease-hosts."""

from __future__ import annotations

import threading
from typing import Optional

from vmhosts.exceptions import ConnectError, NetworkLookupError, QueryError, WriteError
from vmhosts.hostsfile import publish_hosts, render_hosts
from vmhosts.models import DaemonConfig, NetworkHandle, WatcherState
from vmhosts.utils import log


class LeaseWatcher:
    """Poll a libvirt network for DHCP leases and republish the hosts-file.

    ``client`` is anything exposing the hypervisor adapter surface
    (``connect``, ``version``, ``lookup_network``, ``get_leases``,
    ``disconnect``). ``stop_event`` is the cancellation context, set by
    signal handlers or tests.
    """

    def __init__(self, client, cfg: DaemonConfig, stop_event: threading.Event) -> None:
        self.client = client
        self.cfg = cfg
        self.stop_event = stop_event
        self.network: Optional[NetworkHandle] = None
        self.state = WatcherState.INITIALIZING
        self.published = 0
        self._released = False

    def start(self) -> None:
        """Open the session and resolve the target network. Errors here are fatal."""
        self.client.connect()
        self.state = WatcherState.CONNECTED
        log("INFO", f"connected to libvirt {self.client.version()}")
        self.network = self.client.lookup_network(self.cfg.network)
        log("INFO", f"found network {self.network.name} ({self.network.uuid})")

    def sync_once(self) -> bool:
        """Run one fetch-render-write cycle. Returns True if the file was written."""
        if self.network is None:
            raise QueryError("Network not resolved")
        try:
            leases = self.client.get_leases(self.network)
        except QueryError as exc:
            log("WARN", f"{exc}; keeping previous {self.cfg.hostfile}")
            return False

        body = render_hosts(leases, self.cfg.domain, self.cfg.line_format)
        try:
            publish_hosts(self.cfg.hostfile, body)
        except WriteError as exc:
            log("ERROR", str(exc))
            return False

        records = body.count("\n")
        if self.published == 0:
            log("SUCCESS", f"Published {records} host record(s) to {self.cfg.hostfile}")
        else:
            log("DEBUG", f"Published {records} host record(s) from {len(leases)} lease(s)")
        self.published += 1
        return True

    def run(self) -> None:
        """Block until ``stop_event`` is set, syncing once per interval."""
        if self.network is None:
            raise QueryError("Network not resolved")
        self.state = WatcherState.WATCHING
        log("INFO", f"Watching network {self.network.name} every {self.cfg.interval_ms} ms")
        # wait() returns True as soon as the event is set, False when the interval elapsed
        while not self.stop_event.wait(self.cfg.interval):
            self.sync_once()
        self.state = WatcherState.SHUTTING_DOWN

    def shutdown(self) -> None:
        """Release the libvirt session; runs at most once."""
        if self._released:
            return
        self._released = True
        self.state = WatcherState.SHUTTING_DOWN
        log("INFO", "shutting down daemon")
        self.client.disconnect()
        self.state = WatcherState.TERMINATED


def run_daemon(
    cfg: DaemonConfig,
    client,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Connect, resolve the network and watch it until stopped.

    Returns 0 after a requested shutdown and 1 if startup failed. The libvirt
    session is released exactly once on every path.
    """
    if stop_event is None:
        stop_event = threading.Event()

    watcher = LeaseWatcher(client, cfg, stop_event)
    try:
        try:
            watcher.start()
        except (ConnectError, NetworkLookupError, QueryError) as exc:
            log("ERROR", str(exc))
            return 1
        watcher.run()
        return 0
    finally:
        watcher.shutdown()
