"""Configuration loader for jetbridge."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import httpx

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

from ..discovery.types import Endpoint
from ..errors import ConfigError

CONFIG_FILE_NAME = ".jetbridge.toml"

# JetBrains IDEs bind their built-in web server to the first free port here
DEFAULT_PORT_RANGE_START = 63342
DEFAULT_PORT_RANGE_END = 63352


@dataclass
class BackendConfig:
    """Where and how to reach the IDE's automation API."""

    host: str = "127.0.0.1"
    port: Optional[int] = None  # Explicit override, disables scanning
    port_range_start: int = DEFAULT_PORT_RANGE_START
    port_range_end: int = DEFAULT_PORT_RANGE_END  # Inclusive
    path_prefix: str = "/api/mcp"
    timeout_seconds: float = 5.0

    def candidate_ports(self) -> List[int]:
        return list(range(self.port_range_start, self.port_range_end + 1))

    def endpoint_for(self, port: int) -> Endpoint:
        return Endpoint(host=self.host, port=port, path_prefix=self.path_prefix)


@dataclass
class RegistryConfig:
    """Remote tool listing cache and retry policy."""

    ttl_seconds: float = 30.0
    fetch_attempts: int = 3
    backoff_unit_seconds: float = 1.0


@dataclass
class SchedulerConfig:
    """Endpoint refresh cadence."""

    interval_seconds: float = 10.0


@dataclass
class LoggingConfig:
    enabled: bool = False
    level: str = "DEBUG"


@dataclass
class BridgeConfig:
    """Complete jetbridge configuration."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Directory the config file was looked up in
    project_root: Path = field(default_factory=Path.cwd)


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .jetbridge.toml in the project root.

    Args:
        project_path: Directory to look in

    Returns:
        Path to .jetbridge.toml if found, None otherwise
    """
    config_file = project_path / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def load_config(
    project_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BridgeConfig:
    """Load configuration from defaults, .jetbridge.toml and the environment.

    Environment variables win over the file:
        IDE_PORT    - explicit backend port (disables port scanning)
        HOST        - backend host
        LOG_ENABLED - "true" enables verbose diagnostics on stderr

    Args:
        project_path: Directory holding the optional config file (cwd by default)
        environ: Environment mapping (os.environ by default)

    Returns:
        BridgeConfig with loaded or default configuration

    Raises:
        ConfigError: If a value cannot be interpreted
    """
    project_path = Path(project_path) if project_path is not None else Path.cwd()
    environ = os.environ if environ is None else environ

    config = BridgeConfig(project_root=project_path)

    config_file = find_config_file(project_path)
    if config_file:
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # Unreadable file, keep defaults
            data = {}
        _apply_file_data(config, data)

    _apply_environment(config, environ)
    _validate(config)
    return config


def _apply_file_data(config: BridgeConfig, data: Dict[str, Any]) -> None:
    backend = config.backend
    backend_data = _section(data, "backend")
    backend.host = _string(backend_data, "host", backend.host, "backend")
    if "port" in backend_data:
        backend.port = _parse_port(backend_data["port"], "backend.port")
    if "port_range_start" in backend_data:
        backend.port_range_start = _parse_port(
            backend_data["port_range_start"], "backend.port_range_start"
        )
    if "port_range_end" in backend_data:
        backend.port_range_end = _parse_port(
            backend_data["port_range_end"], "backend.port_range_end"
        )
    backend.path_prefix = _string(
        backend_data, "path_prefix", backend.path_prefix, "backend"
    )
    backend.timeout_seconds = _number(
        backend_data, "timeout_seconds", backend.timeout_seconds, "backend"
    )

    registry = config.registry
    registry_data = _section(data, "registry")
    registry.ttl_seconds = _number(
        registry_data, "ttl_seconds", registry.ttl_seconds, "registry"
    )
    registry.fetch_attempts = _integer(
        registry_data, "fetch_attempts", registry.fetch_attempts, "registry"
    )
    registry.backoff_unit_seconds = _number(
        registry_data, "backoff_unit_seconds", registry.backoff_unit_seconds, "registry"
    )

    scheduler_data = _section(data, "scheduler")
    config.scheduler.interval_seconds = _number(
        scheduler_data, "interval_seconds", config.scheduler.interval_seconds, "scheduler"
    )

    logging_data = _section(data, "logging")
    config.logging.enabled = _boolean(
        logging_data, "enabled", config.logging.enabled, "logging"
    )
    config.logging.level = _string(logging_data, "level", config.logging.level, "logging")


# Typed lookups for file values. TOML already types its values, so
# mismatches are reported instead of converted.
def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {section!r}")
    return section


def _string(section: Mapping[str, Any], key: str, default: str, name: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{name}.{key} must be a string, got {value!r}")
    return value


def _boolean(section: Mapping[str, Any], key: str, default: bool, name: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{name}.{key} must be true or false, got {value!r}")
    return value


def _integer(section: Mapping[str, Any], key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name}.{key} must be an integer, got {value!r}")
    return value


def _number(section: Mapping[str, Any], key: str, default: float, name: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name}.{key} must be a number, got {value!r}")
    return float(value)


def _apply_environment(config: BridgeConfig, environ: Mapping[str, str]) -> None:
    port = environ.get("IDE_PORT")
    if port:
        config.backend.port = _parse_port(port, "IDE_PORT")

    host = environ.get("HOST")
    if host:
        config.backend.host = host

    if environ.get("LOG_ENABLED") == "true":
        config.logging.enabled = True


def _parse_port(value: Any, source: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{source} must be an integer port, got {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"{source} is out of range: {port}")
    return port


def _validate(config: BridgeConfig) -> None:
    backend = config.backend
    if backend.port_range_start > backend.port_range_end:
        raise ConfigError(
            f"Empty port range: {backend.port_range_start}-{backend.port_range_end}"
        )
    if backend.path_prefix and not backend.path_prefix.startswith("/"):
        backend.path_prefix = "/" + backend.path_prefix
    backend.path_prefix = backend.path_prefix.rstrip("/")

    if config.registry.fetch_attempts < 1:
        raise ConfigError("registry.fetch_attempts must be at least 1")
    if config.scheduler.interval_seconds <= 0:
        raise ConfigError("scheduler.interval_seconds must be positive")

    # Host and prefix end up in every request URL
    listing_url = backend.endpoint_for(backend.port_range_start).url_for("list_tools")
    try:
        httpx.URL(listing_url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"Backend URL {listing_url!r} is invalid: {e}") from None
