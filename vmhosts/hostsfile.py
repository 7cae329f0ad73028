"""Hosts-file rendering and publication."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from vmhosts.constants import DEFAULT_LINE_FORMAT, HOSTNAME_RE, LINE_FORMATS
from vmhosts.exceptions import WriteError
from vmhosts.models import Lease
from vmhosts.utils import log, write_file_atomic


def qualify(hostname: str, domain: str) -> str:
    if not domain:
        return hostname
    return f"{hostname}.{domain}"


def render_lines(leases: Iterable[Lease], domain: str, line_format: str = DEFAULT_LINE_FORMAT) -> List[str]:
    """One line per lease that reports a hostname; only the first hostname is published.

    Hostnames that are not a single DNS label are skipped with a warning.
    """
    template = LINE_FORMATS[line_format]
    lines: List[str] = []
    for lease in leases:
        if lease.hostname is None:
            continue
        if not HOSTNAME_RE.fullmatch(lease.hostname):
            log("WARN", f"Skipping lease {lease.address}: invalid hostname {lease.hostname!r}")
            continue
        lines.append(template.format(address=lease.address, fqdn=qualify(lease.hostname, domain)))
    return lines


def render_hosts(leases: Iterable[Lease], domain: str, line_format: str = DEFAULT_LINE_FORMAT) -> str:
    return "".join(f"{line}\n" for line in render_lines(leases, domain, line_format))


def publish_hosts(path: Path, body: str) -> None:
    """Overwrite the hosts-file at ``path`` with ``body``."""
    try:
        write_file_atomic(path, body)
    except (OSError, UnicodeError) as exc:
        raise WriteError(f"Failed to write hosts file {path}: {exc}") from exc
