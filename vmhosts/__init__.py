"""virt-lease-hosts package."""

__version__ = "1.0.0"

__all__ = [
    "cli",
    "config",
    "constants",
    "exceptions",
    "hostsfile",
    "hypervisor",
    "models",
    "utils",
    "watcher",
]
