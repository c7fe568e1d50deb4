"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from soulbound.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class RegistryConfig(StrictModel):
    """Soulbound registry deployment settings."""

    name: str = Field(
        default="Soulbound Registry",
        min_length=1,
        description="Collection name reported by the registry"
    )
    symbol: str = Field(
        default="SBT",
        min_length=1,
        description="Collection symbol reported by the registry"
    )
    base_uri: str = Field(
        default="",
        description="Collection-wide URI prefix (empty = use per-token URIs as-is)"
    )
    source_address: str | None = Field(
        default=None,
        description="Source ledger address accepted by the migration bridge (None = unset)"
    )

    @field_validator("source_address")
    @classmethod
    def validate_source_address(cls, v: str | None) -> str | None:
        """Source address must look like a 20-byte hex address when set."""
        if v is not None and not _ADDRESS_PATTERN.match(v):
            raise ValueError(f"source_address must be a 0x-prefixed 40 hex digit address, got {v!r}")
        return v


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the soulbound.* Python loggers"
    )
    event_file: str | None = Field(
        default=None,
        description="JSONL file receiving committed chain events (None = in-memory only)"
    )


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application.

    All fields have sensible defaults, so an empty config file is valid.
    """

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
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
    "RegistryConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
