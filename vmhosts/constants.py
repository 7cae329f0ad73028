"""Global constants and defaults for virt-lease-hosts."""

from __future__ import annotations

import os
import re

DEFAULT_URI = "qemu:///system"
DEFAULT_NETWORK = "default"
DEFAULT_INTERVAL_MS = 5000
# Anything shorter turns the watch loop into a busy loop against libvirtd.
MIN_INTERVAL_MS = 100
# One day; far below the platform limit of Event.wait().
MAX_INTERVAL_MS = 24 * 60 * 60 * 1000
DEFAULT_CONNECT_TIMEOUT = 2.0
HOSTS_FILE_MODE = 0o644

# Line templates for the published hosts-file, keyed by the `format` config value.
LINE_FORMATS = {
    "hosts": "{address}\t{fqdn}",
    "reversed": "{fqdn}\t{address}",
}
DEFAULT_LINE_FORMAT = "hosts"
# A single DNS label; anything else would corrupt the one-line-per-lease layout.
HOSTNAME_RE = re.compile(r"^[A-Za-z0-9_](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9_])?$")

TRUTHY = {"1", "true", "yes", "on"}
_LOG_VERBOSE = os.environ.get("LOG_VERBOSE", "").lower() in TRUTHY
