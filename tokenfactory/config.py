"""Configuration loader for the token factory core

All configurable values come from config/config.yaml (or the file named by
the TOKENFACTORY_CONFIG environment variable, which may be set in .env).

Configuration is validated at load time using Pydantic.
Typos and invalid values fail fast with clear error messages.

Usage:
    from tokenfactory.config import load_config, get, get_validated_config

    # Load and validate (call once at startup)
    load_config("config/config.yaml")

    # Get values by dot-path
    prefix = get("contract.denom_prefix")

    # Or use the typed config object (preferred)
    config = get_validated_config()
    prefix = config.contract.denom_prefix
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .config_schema import AppConfig, load_validated_config, validate_config_dict

logger = logging.getLogger(__name__)

# Global config instances
_config: dict[str, Any] | None = None
_validated_config: AppConfig | None = None

CONFIG_ENV_VAR = "TOKENFACTORY_CONFIG"

# Default config path
DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"


def _resolve_path(config_path: str | Path | None) -> Path | None:
    """Pick the explicit path, then the env override, then the default file."""
    if config_path:
        return Path(config_path)
    load_dotenv()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load and validate configuration from YAML file.

    Validates the config against the Pydantic schema. Invalid configs
    raise a ValidationError with details about what's wrong. When no path
    is given and neither the env override nor the default file exists,
    the schema defaults are used.

    Args:
        config_path: Path to config file. Defaults to config/config.yaml.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    global _config, _validated_config

    path = _resolve_path(config_path)
    if path is None:
        logger.debug("No config file found, using schema defaults")
        _validated_config = AppConfig()
        _config = _validated_config.model_dump()
        return _config

    _validated_config = load_validated_config(path)

    with open(path) as f:
        loaded: Any = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            loaded = {}
        _config = loaded

    logger.debug("Loaded config from %s", path)
    return _config


def get_config() -> dict[str, Any]:
    """Get the loaded configuration dict. Loads default if not already loaded.

    For typed access, use get_validated_config() instead.
    """
    global _config
    if _config is None:
        load_config()
    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")
    return _config


def get_validated_config() -> AppConfig:
    """Get the validated configuration object.

    Loads default config if not already loaded.
    """
    global _validated_config
    if _validated_config is None:
        load_config()
    if _validated_config is None:
        raise RuntimeError("Validated config failed to load. Call load_config() first.")
    return _validated_config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key path.

    Keys missing from the file fall back to the validated defaults.

    Examples:
        get("contract.denom_prefix")
        get("storage.backend")
    """
    sources: list[Any] = [get_config(), get_validated_config().model_dump()]
    keys: list[str] = key.split(".")

    for source in sources:
        value: Any = source
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                break
        else:
            return value

    return default


def set_config_value(key: str, value: Any) -> None:
    """Set a config value by dot-separated key path.

    Used for runtime overrides (e.g., CLI args). The whole config is
    re-validated afterwards.

    Args:
        key: Dot-separated key path (e.g., "storage.backend")
        value: Value to set
    """
    global _config, _validated_config

    if _config is None:
        load_config()

    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")

    keys = key.split(".")
    target = _config

    for k in keys[:-1]:
        if k not in target:
            target[k] = {}
        target = target[k]

    target[keys[-1]] = value

    _validated_config = validate_config_dict(_config)


def reset_config() -> None:
    """Forget the loaded config so the next access reloads it (tests)."""
    global _config, _validated_config
    _config = None
    _validated_config = None
