"""CLI entry point for virt-lease-hosts."""

from __future__ import annotations

import argparse
import signal
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from vmhosts.config import load_config
from vmhosts.exceptions import ConfigError
from vmhosts.hypervisor import HypervisorClient
from vmhosts.utils import log
from vmhosts.watcher import run_daemon

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(stop_event: threading.Event) -> Callable[[], None]:
    """Route SIGINT/SIGTERM to ``stop_event``. Returns a function restoring the previous handlers."""

    def _request_shutdown(signum, frame):
        if not stop_event.is_set():
            sig_name = signal.Signals(signum).name
            log("INFO", f"{sig_name} received, stopping")
        stop_event.set()

    previous: Dict[int, object] = {}
    for signum in SHUTDOWN_SIGNALS:
        previous[signum] = signal.signal(signum, _request_shutdown)

    def _restore() -> None:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    return _restore


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vmhosts",
        description="Mirror libvirt DHCP leases into a hosts file",
    )
    parser.add_argument("config", type=Path, help="Path to the YAML configuration file")
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        log("ERROR", str(exc))
        return 1

    log("INFO", f"Network: {cfg.network} | Hosts file: {cfg.hostfile} | Domain: {cfg.domain or '<none>'}")

    client = HypervisorClient(cfg.socket, uri=cfg.uri, timeout=cfg.connect_timeout)
    stop_event = threading.Event()
    restore_signals = install_signal_handlers(stop_event)
    try:
        return run_daemon(cfg, client, stop_event)
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        import traceback

        traceback.print_exc()
        return 1
    finally:
        restore_signals()
