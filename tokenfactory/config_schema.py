"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from tokenfactory.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# CONTRACT MODEL
# =============================================================================

class ContractConfig(StrictModel):
    """Identity and policy switches of the token factory core."""

    name: str = Field(
        default="crates.io:tokenfactory-core",
        description="Contract name recorded at instantiation"
    )
    version: str = Field(
        default="0.1.0",
        description="Contract version recorded at instantiation"
    )
    address: str = Field(
        default="tokenfactory_core",
        min_length=1,
        description="This system's own account id (source of burns)"
    )
    denom_prefix: str = Field(
        default="factory/",
        min_length=1,
        description="Namespace prefix every managed denom must carry"
    )
    enforce_denom_prefix_on_add: bool = Field(
        default=True,
        description="Validate the denom prefix on add_denom, not only at instantiation"
    )
    require_managed_mint_denoms: bool = Field(
        default=False,
        description="Reject mint requests for denoms that are not tracked"
    )


# =============================================================================
# STORAGE MODEL
# =============================================================================

class StorageConfig(StrictModel):
    """Persistence backend for the configuration record."""

    backend: Literal["memory", "sqlite"] = Field(
        default="memory",
        description="Where the configuration record lives"
    )
    path: str = Field(
        default="tokenfactory.db",
        description="SQLite database file (sqlite backend only)"
    )
    key: str = Field(
        default="config",
        min_length=1,
        description="Fixed key the configuration record is stored under"
    )
    lock_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds SQLite waits on a locked database"
    )
    retry_max: int = Field(
        default=5,
        ge=1,
        description="Max attempts for a locked SQLite operation"
    )
    retry_base: float = Field(
        default=0.1,
        gt=0,
        description="Initial backoff delay in seconds"
    )
    retry_max_delay: float = Field(
        default=5.0,
        gt=0,
        description="Backoff delay cap in seconds"
    )

    @model_validator(mode="after")
    def validate_backoff(self) -> "StorageConfig":
        """Ensure the backoff cap is not below the base delay."""
        if self.retry_max_delay < self.retry_base:
            raise ValueError(
                f"retry_max_delay ({self.retry_max_delay}) must be >= "
                f"retry_base ({self.retry_base})"
            )
        return self


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Level for the tokenfactory loggers"
    )
    output_file: str = Field(
        default="",
        description="JSONL event log; empty disables the event log"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept level names in any case."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level: {v}")
        return level


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application.

    All fields have sensible defaults, so an empty config file is valid.
    """

    contract: ContractConfig = Field(default_factory=ContractConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "ContractConfig",
    "StorageConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
