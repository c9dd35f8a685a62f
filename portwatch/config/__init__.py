"""YAML configuration: server credentials, probe targets, cadence."""

from portwatch.config.settings import (
    ConfigError,
    MonitorConfig,
    PortTarget,
    ServerConfig,
    load_config,
    parse_config,
    read_config,
)

__all__ = [
    "ConfigError",
    "MonitorConfig",
    "PortTarget",
    "ServerConfig",
    "load_config",
    "parse_config",
    "read_config",
]
