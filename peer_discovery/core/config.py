"""
Configuration - discovery settings from YAML files and the environment

Settings are read from an optional YAML mapping, then overridden by
PEER_DISCOVERY_* environment variables.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigError


ENV_PREFIX = "PEER_DISCOVERY_"

DEFAULT_PORT = 2552
DEFAULT_TIMEOUT = 1.0
DEFAULT_MAX_WORKERS = 64


@dataclass(frozen=True)
class DiscoveryConfig:
    """Settings shared by the CLI, the client and the coordinator"""
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    deadline: Optional[float] = None
    interface_prefix: Optional[str] = None
    listen_host: str = ""
    log_level: str = "INFO"

    def __post_init__(self):
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"port must be in [0, 65535], got {self.port}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.deadline is not None and self.deadline <= 0:
            raise ConfigError(f"deadline must be positive, got {self.deadline}")

    def with_overrides(self, **overrides: Any) -> "DiscoveryConfig":
        """Return a copy with every non-None override applied"""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **_coerce(changes))


_CONVERTERS = {
    "port": int,
    "timeout": float,
    "max_workers": int,
    "deadline": float,
    "interface_prefix": str,
    "listen_host": str,
    "log_level": str,
}


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(DiscoveryConfig)}
    coerced = {}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"Unknown configuration key: {key}")
        if value is None:
            coerced[key] = None
            continue
        try:
            coerced[key] = _CONVERTERS[key](value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {key}: {value!r} ({e})") from e
    return coerced


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML configuration mapping from disk"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


def _env_overrides(environ) -> Dict[str, str]:
    overrides = {}
    for f in fields(DiscoveryConfig):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw is not None and raw != "":
            overrides[f.name] = raw
    return overrides


def load_config(path: Optional[Union[str, Path]] = None, environ=None) -> DiscoveryConfig:
    """
    Build a DiscoveryConfig.

    Args:
        path: Optional YAML file with any of the DiscoveryConfig keys
        environ: Environment mapping, defaults to os.environ

    Returns:
        Validated DiscoveryConfig

    Raises:
        ConfigError: unreadable file, unknown key or bad value
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    if path is not None:
        values.update(_load_yaml(Path(path)))
    values.update(_env_overrides(environ))

    return DiscoveryConfig(**_coerce(values))
