"""Configuration loading for virt-lease-hosts."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from vmhosts.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_INTERVAL_MS,
    DEFAULT_LINE_FORMAT,
    DEFAULT_NETWORK,
    DEFAULT_URI,
    LINE_FORMATS,
    MAX_INTERVAL_MS,
    MIN_INTERVAL_MS,
)
from vmhosts.exceptions import ConfigError
from vmhosts.models import DaemonConfig
from vmhosts.utils import log


def _get_str(data: Dict[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    raw = data.get(key)
    if raw is None:
        return default
    value = str(raw).strip()
    return value or default


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = _get_str(data, key)
    if not value:
        raise ConfigError(f"Config key '{key}' is required")
    return value


def parse_interval(raw: Any, min_val: int = MIN_INTERVAL_MS, max_val: int = MAX_INTERVAL_MS) -> int:
    """Validate the poll interval (milliseconds)."""
    if raw is None:
        return DEFAULT_INTERVAL_MS
    if isinstance(raw, bool):
        raise ConfigError(f"interval must be an integer number of milliseconds (got '{raw}')")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"interval must be an integer number of milliseconds (got '{raw}')")
    if isinstance(raw, float) and raw != value:
        raise ConfigError(f"interval must be an integer number of milliseconds (got '{raw}')")
    if value < min_val:
        raise ConfigError(f"interval must be >= {min_val} ms (got {value})")
    if value > max_val:
        raise ConfigError(f"interval must be <= {max_val} ms (got {value})")
    return value


def parse_timeout(raw: Any) -> float:
    if raw is None:
        return DEFAULT_CONNECT_TIMEOUT
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"timeout must be a number of seconds (got '{raw}')")
    if value <= 0:
        raise ConfigError(f"timeout must be > 0 (got {value})")
    return value


def parse_config(data: Any) -> DaemonConfig:
    """Build a DaemonConfig from an already parsed YAML document."""
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping of settings")

    line_format = (_get_str(data, "format", DEFAULT_LINE_FORMAT) or DEFAULT_LINE_FORMAT).lower()
    if line_format not in LINE_FORMATS:
        supported = ", ".join(sorted(LINE_FORMATS))
        raise ConfigError(f"Unsupported format '{line_format}'. Use one of: {supported}")

    domain = (_get_str(data, "domain", "") or "").strip(".")
    if not domain:
        log("WARN", "No 'domain' configured; hostnames will be published without a suffix")

    return DaemonConfig(
        socket=_require_str(data, "socket"),
        network=_get_str(data, "network", DEFAULT_NETWORK) or DEFAULT_NETWORK,
        interval_ms=parse_interval(data.get("interval")),
        hostfile=Path(_require_str(data, "hostfile")),
        domain=domain,
        uri=_get_str(data, "uri", DEFAULT_URI) or DEFAULT_URI,
        line_format=line_format,
        connect_timeout=parse_timeout(data.get("timeout")),
    )


def load_config(config_path: Path) -> DaemonConfig:
    if not config_path.exists():
        raise ConfigError(f"Config file missing: {config_path}")
    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read config {config_path}: {exc}") from exc
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config {config_path}: {exc}") from exc
    return parse_config(data)
