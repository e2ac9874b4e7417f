from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .exceptions import ConfigError
from .logging_config import LEVEL_NAMES

logger = logging.getLogger(__name__)

ENV_CONFIG_FILE = "EVENT_REGISTRY_CONFIG"
ENV_SUPPORTED_EVENTS = "EVENT_REGISTRY_SUPPORTED_EVENTS"
ENV_EVENT_SAFE = "EVENT_REGISTRY_EVENT_SAFE"
ENV_LOG_LEVEL = "EVENT_REGISTRY_LOG_LEVEL"

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(value: Any, source: str) -> bool:
    """Interpret True/False, 1/0 and common strings ("yes", "off", ...) as a bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    raise ConfigError(f"Invalid boolean for {source}: {value!r}")


def _as_event_names(value: Any, source: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"Invalid event name list for {source}: {value!r}")


def _as_level_name(value: Any, source: str) -> str:
    if isinstance(value, str) and value.strip().upper() in LEVEL_NAMES:
        return value.strip().upper()
    raise ConfigError(f"Invalid log level for {source}: {value!r}")


@dataclass(frozen=True)
class RegistryConfig:
    """Construction parameters for an EventRegistry.

    Load with :func:`load_registry_config`; order of precedence (lowest to
    highest) is defaults < YAML file < environment.
    """

    supported_events: Tuple[str, ...] = ()
    event_safe: bool = False
    log_level: Optional[str] = None


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML config {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(raw).__name__}")
    logger.debug("Loaded registry config from path: %s", path)
    return raw


def _from_file(path: Path) -> Dict[str, Any]:
    raw = _read_yaml(path)
    out: Dict[str, Any] = {}
    if "supported_events" in raw:
        out["supported_events"] = _as_event_names(raw["supported_events"], f"{path}:supported_events")
    if "event_safe" in raw:
        out["event_safe"] = _as_bool(raw["event_safe"], f"{path}:event_safe")
    if "log_level" in raw:
        out["log_level"] = _as_level_name(raw["log_level"], f"{path}:log_level")
    unknown = set(raw) - {"supported_events", "event_safe", "log_level"}
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(sorted(unknown)))
    return out


def _from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if env.get(ENV_SUPPORTED_EVENTS):
        out["supported_events"] = _as_event_names(env[ENV_SUPPORTED_EVENTS], ENV_SUPPORTED_EVENTS)
    if env.get(ENV_EVENT_SAFE):
        out["event_safe"] = _as_bool(env[ENV_EVENT_SAFE], ENV_EVENT_SAFE)
    if env.get(ENV_LOG_LEVEL):
        out["log_level"] = _as_level_name(env[ENV_LOG_LEVEL], ENV_LOG_LEVEL)
    return out


def load_registry_config(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> RegistryConfig:
    """Build a RegistryConfig from an optional YAML file and the environment.

    If ``path`` is None, the file named by ``EVENT_REGISTRY_CONFIG`` is used when
    set. A YAML file may define ``supported_events`` (list of names),
    ``event_safe`` and ``log_level``. ``EVENT_REGISTRY_SUPPORTED_EVENTS`` (comma
    separated), ``EVENT_REGISTRY_EVENT_SAFE`` and ``EVENT_REGISTRY_LOG_LEVEL``
    override the file.

    Raises:
        ConfigError: the file is missing or unparsable, or a value is malformed.
    """
    env = os.environ if env is None else env
    data: Dict[str, Any] = {}

    if path is None and env.get(ENV_CONFIG_FILE):
        path = env[ENV_CONFIG_FILE]
    if path is not None:
        data.update(_from_file(Path(path).expanduser()))

    data.update(_from_env(env))
    config = RegistryConfig(**data)
    logger.info(
        "Registry config: event_safe=%s | supported_events=%s",
        config.event_safe,
        list(config.supported_events),
    )
    return config
