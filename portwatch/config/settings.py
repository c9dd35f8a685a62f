"""Config loading: YAML file -> validated, immutable MonitorConfig.

Keys are matched case-insensitively (``headerSecrete`` == ``headersecrete``).
Missing optional values come from ``_DEFAULTS``; a missing or invalid file raises
ConfigError so the process can abort before anything starts.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PORTWATCH_CONFIG"
# Searched in order when no explicit path or env var is given
DEFAULT_CONFIG_PATHS = ("config.yaml", "config/config.yaml")

_DEFAULTS: Dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "url": "",
    },
    "monitor": {
        "interval_sec": 5.0,
        "timeout_sec": 1.0,
    },
    "ports": {},
}


class ConfigError(Exception):
    """Configuration file missing, unparsable or invalid."""


@dataclass(frozen=True)
class PortTarget:
    name: str
    port: int


@dataclass(frozen=True)
class ServerConfig:
    port: int
    url: str
    header_name: str
    secret: str
    host: str = "0.0.0.0"

    @property
    def route_path(self) -> str:
        """Status route path: '/' + url, without doubled slashes."""
        return "/" + self.url.strip("/")


@dataclass(frozen=True)
class MonitorConfig:
    server: ServerConfig
    targets: Tuple[PortTarget, ...]
    interval_sec: float = 5.0
    timeout_sec: float = 1.0


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence.

    An empty section (`monitor:` with no children loads as None) keeps the base dict.
    """
    out = dict(base)
    for k, v in override.items():
        if v is None and isinstance(out.get(k), dict):
            continue
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _lower_keys(value: Any) -> Any:
    """Recursively lowercase mapping keys; non-string keys become strings."""
    if isinstance(value, Mapping):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Explicit path, then $PORTWATCH_CONFIG, then ./config.yaml, then ./config/config.yaml."""
    candidate = config_path or os.environ.get(CONFIG_ENV_VAR)
    if candidate:
        path = Path(candidate)
        if not path.is_file():
            raise ConfigError(f"config file not found: {path}")
        return path.resolve()
    for default in DEFAULT_CONFIG_PATHS:
        path = Path(default)
        if path.is_file():
            return path.resolve()
    raise ConfigError(
        "config file not found (looked for %s; set %s or pass a path)"
        % (", ".join(DEFAULT_CONFIG_PATHS), CONFIG_ENV_VAR)
    )


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """Load raw YAML config. Returns (config, resolved_path)."""
    path = resolve_config_path(config_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(config).__name__}")
    return config, str(path)


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def _parse_port(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{what}: expected a port number, got {value!r}")
    try:
        port = int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"{what}: expected a port number, got {value!r}") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"{what}: port {port} out of range 1-65535")
    return port


def _parse_positive(value: Any, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{what}: expected a number, got {value!r}") from None
    if number <= 0:
        raise ConfigError(f"{what}: must be > 0, got {number}")
    return number


def _required_str(section: Dict[str, Any], key: str, what: str) -> str:
    value = section.get(key)
    if value is None or str(value) == "":
        raise ConfigError(f"{what} is required")
    return str(value)


def _parse_targets(ports: Any) -> Tuple[PortTarget, ...]:
    if not isinstance(ports, dict):
        raise ConfigError("'ports' must be a mapping of port number -> name")
    targets = []
    seen: Dict[str, int] = {}
    for raw_port, raw_name in ports.items():
        port = _parse_port(raw_port, f"ports.{raw_port}")
        name = "" if raw_name is None else str(raw_name).strip()
        if not name:
            raise ConfigError(f"ports.{raw_port}: display name is required")
        if name in seen:
            logger.warning(
                "Ports %s and %s share the name %r; they will overwrite each other in the status",
                seen[name],
                port,
                name,
            )
        seen[name] = port
        targets.append(PortTarget(name=name, port=port))
    if not targets:
        logger.warning("No ports configured; status will stay empty")
    return tuple(targets)


def parse_config(raw: Dict[str, Any]) -> MonitorConfig:
    """Validate a raw config dict (already loaded) and build MonitorConfig."""
    cfg = _deep_merge(_DEFAULTS, _lower_keys(raw or {}))
    server = _section(cfg, "server")
    monitor = _section(cfg, "monitor")

    server_cfg = ServerConfig(
        port=_parse_port(server.get("port"), "server.port"),
        url=str(server.get("url") or ""),
        header_name=_required_str(server, "headersecrete", "server.headerSecrete"),
        secret=_required_str(server, "secrete", "server.secrete"),
        host=str(server.get("host") or "0.0.0.0"),
    )
    return MonitorConfig(
        server=server_cfg,
        targets=_parse_targets(cfg.get("ports") or {}),
        interval_sec=_parse_positive(monitor.get("interval_sec"), "monitor.interval_sec"),
        timeout_sec=_parse_positive(monitor.get("timeout_sec"), "monitor.timeout_sec"),
    )


def load_config(config_path: Optional[str] = None) -> MonitorConfig:
    """Read and validate config. Raises ConfigError on any problem."""
    raw, resolved = read_config(config_path)
    config = parse_config(raw)
    logger.info(
        "Config loaded from %s (%d ports, route %s, interval %.1fs)",
        resolved,
        len(config.targets),
        config.server.route_path,
        config.interval_sec,
    )
    return config
