"""Custom exceptions for virt-lease-hosts."""


class VMHostsError(RuntimeError):
    """Base class for all daemon errors."""


class ConfigError(VMHostsError):
    """Raised when the configuration file is missing, unparseable or invalid."""


class ConnectError(VMHostsError):
    """Raised when the libvirt daemon cannot be reached."""


class NetworkLookupError(VMHostsError):
    """Raised when the target virtual network does not exist."""


class QueryError(VMHostsError):
    """Raised when a libvirt query fails; recoverable inside the watch loop."""


class WriteError(VMHostsError):
    """Raised when the hosts-file cannot be written; recoverable inside the watch loop."""


class DisconnectError(VMHostsError):
    """Raised when releasing the libvirt session fails; only ever logged."""
