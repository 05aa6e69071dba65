"""Configuration management for jetbridge."""

from .parser import (
    BackendConfig,
    BridgeConfig,
    LoggingConfig,
    RegistryConfig,
    SchedulerConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "BridgeConfig",
    "BackendConfig",
    "RegistryConfig",
    "SchedulerConfig",
    "LoggingConfig",
    "load_config",
    "find_config_file",
]
