"""
Health configuration - Loads and validates watchdog configuration.

Values come from built-in defaults, an optional JSON file, and the
environment (a .env file is loaded first with python-dotenv), in that
order of increasing precedence.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from dotenv import find_dotenv, load_dotenv  # type: ignore

from eth_alive.core.errors import ConfigError

logger = logging.getLogger(__name__)


# JSON config file structure (all keys optional, env vars win)
# {
#   "local_rpc_url": str,
#   "remote_rpc_url": str,
#   "webhook_url": str,
#   "lag_threshold": int,           # blocks
#   "poll_interval": float,         # seconds
#   "alert_cooldown": float,        # seconds
#   "rpc_timeout": float,           # seconds
#   "webhook_timeout": float,       # seconds
#   "concurrent_polling": bool,
#   "alert_on_remote_failure": bool
# }

# Resolved against the working directory
DEFAULT_CONFIG_PATH = Path("configs") / "watch.json"

DEFAULTS: Dict[str, Any] = {
    "webhook_url": "",
    "lag_threshold": 3,
    "poll_interval": 60.0,
    "alert_cooldown": 15 * 60.0,
    "rpc_timeout": 10.0,
    "webhook_timeout": 10.0,
    "concurrent_polling": True,
    "alert_on_remote_failure": False,
}

# env var -> (config key, converter name)
ENV_VARS = {
    "LOCAL_RPC_URL": ("local_rpc_url", "str"),
    "REMOTE_RPC_URL": ("remote_rpc_url", "str"),
    "WEBHOOK_URL": ("webhook_url", "str"),
    "DISCORD_WEBHOOK_URL": ("webhook_url", "str"),
    "LAG_THRESHOLD": ("lag_threshold", "int"),
    "POLL_INTERVAL": ("poll_interval", "float"),
    "ALERT_COOLDOWN_MINUTES": ("alert_cooldown", "minutes"),
    "RPC_TIMEOUT": ("rpc_timeout", "float"),
    "WEBHOOK_TIMEOUT": ("webhook_timeout", "float"),
    "CONCURRENT_POLLING": ("concurrent_polling", "bool"),
    "ALERT_ON_REMOTE_FAILURE": ("alert_on_remote_failure", "bool"),
}

_TRUE = ("1", "true", "yes", "y", "on")
_FALSE = ("0", "false", "no", "n", "off")


@dataclass(frozen=True)
class WatchdogConfig:
    """Validated, read-only watchdog settings."""

    local_rpc_url: str
    remote_rpc_url: str
    webhook_url: str = ""
    lag_threshold: int = 3
    poll_interval: float = 60.0
    alert_cooldown: float = 15 * 60.0
    rpc_timeout: float = 10.0
    webhook_timeout: float = 10.0
    concurrent_polling: bool = True
    alert_on_remote_failure: bool = False


def load_config(
    config_path: Optional[str] = None, env: Optional[Mapping[str, str]] = None
) -> WatchdogConfig:
    """
    Load watchdog configuration.

    Args:
        config_path: Path to a JSON config file. If None, uses
                     configs/watch.json when it exists
        env: Environment mapping. If None, loads .env and uses os.environ

    Returns:
        Validated WatchdogConfig

    Raises:
        ConfigError: If the file is unreadable or a value is missing/invalid
    """
    raw: Dict[str, Any] = dict(DEFAULTS)

    file_values = _load_file(config_path)
    raw.update(file_values)

    if env is None:
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(env_path, override=False)
            logger.debug("Loaded environment from %s", env_path)
        env = os.environ

    raw.update(_read_env(env))

    config = _validate(raw)
    logger.info(
        "Loaded watchdog config (threshold=%d blocks, interval=%.0fs, cooldown=%.0fs)",
        config.lag_threshold,
        config.poll_interval,
        config.alert_cooldown,
    )
    return config


def _load_file(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Read the optional JSON config file.

    Args:
        config_path: Explicit path, or None to use the default location

    Returns:
        Dict of values from the file (empty if no file)

    Raises:
        ConfigError: If an explicit path is missing or the JSON is invalid
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return {}
        config_file = DEFAULT_CONFIG_PATH
    else:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    known = {f.name for f in fields(WatchdogConfig)}
    for key in list(data):
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
            del data[key]

    logger.debug("Read %d config values from %s", len(data), config_file)
    return data


def _read_env(env: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for var, (key, kind) in ENV_VARS.items():
        value = env.get(var)
        if value is None or value.strip() == "":
            continue
        # DISCORD_WEBHOOK_URL is listed after WEBHOOK_URL and wins
        values[key] = _convert(var, value.strip(), kind)
    return values


def _convert(name: str, value: str, kind: str) -> Any:
    try:
        if kind == "int":
            return int(value)
        if kind == "float":
            return float(value)
        if kind == "minutes":
            return float(value) * 60.0
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e

    if kind == "bool":
        return _as_bool(name, value)
    return value


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _validate(raw: Dict[str, Any]) -> WatchdogConfig:
    """
    Validate merged raw values.

    Args:
        raw: Merged defaults, file and env values

    Returns:
        WatchdogConfig

    Raises:
        ConfigError: On the first invalid or missing value
    """
    for key in ("local_rpc_url", "remote_rpc_url"):
        value = raw.get(key)
        if not value or not isinstance(value, str):
            raise ConfigError(f"Missing required setting: {key}")
        _check_url(key, value)

    webhook_url = raw.get("webhook_url") or ""
    if not isinstance(webhook_url, str):
        raise ConfigError("Setting 'webhook_url' must be a string")

    lag_threshold = raw["lag_threshold"]
    if isinstance(lag_threshold, bool) or not isinstance(lag_threshold, int):
        raise ConfigError("Setting 'lag_threshold' must be an int")
    if lag_threshold < 1:
        raise ConfigError("Setting 'lag_threshold' must be at least 1")

    numbers = {}
    for key in ("poll_interval", "alert_cooldown", "rpc_timeout", "webhook_timeout"):
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"Setting '{key}' must be a number")
        if not math.isfinite(value):
            raise ConfigError(f"Setting '{key}' must be a finite number")
        numbers[key] = float(value)

    if numbers["poll_interval"] <= 0:
        raise ConfigError("Setting 'poll_interval' must be positive")
    if numbers["alert_cooldown"] < 0:
        raise ConfigError("Setting 'alert_cooldown' must not be negative")
    if numbers["rpc_timeout"] <= 0:
        raise ConfigError("Setting 'rpc_timeout' must be positive")

    if numbers["webhook_timeout"] < numbers["rpc_timeout"]:
        logger.warning(
            "webhook_timeout %.1fs is shorter than rpc_timeout; using %.1fs",
            numbers["webhook_timeout"],
            numbers["rpc_timeout"],
        )
        numbers["webhook_timeout"] = numbers["rpc_timeout"]

    return WatchdogConfig(
        local_rpc_url=raw["local_rpc_url"],
        remote_rpc_url=raw["remote_rpc_url"],
        webhook_url=webhook_url.strip(),
        lag_threshold=lag_threshold,
        concurrent_polling=_as_bool(
            "concurrent_polling", raw["concurrent_polling"]
        ),
        alert_on_remote_failure=_as_bool(
            "alert_on_remote_failure", raw["alert_on_remote_failure"]
        ),
        **numbers,
    )


def _check_url(key: str, value: str) -> None:
    if not value.startswith(("http://", "https://")):
        raise ConfigError(f"Setting '{key}' must be an http(s) URL")
    try:
        parts = urlsplit(value)
        port = parts.port
    except ValueError as e:
        raise ConfigError(f"Setting '{key}' is not a valid URL: {e}") from e
    if not parts.hostname:
        raise ConfigError(f"Setting '{key}' must include a host")
    if port == 0:
        raise ConfigError(f"Setting '{key}' has an invalid port")
